"""Mini README: Tests for slot storage, configuration, references and CSV export.

Structure:
    * JSON file storage - atomic writes, missing slots, store integration.
    * BillingSettings - environment overrides and directory creation.
    * references / CSV - prefix table and the unquoted export format.
"""

from __future__ import annotations

import random
from datetime import date

from smartbilling.configuration import BillingSettings
from smartbilling.ledger import JsonFileStorage, LedgerStore, MemoryStorage, generate_reference
from smartbilling.ledger.export import export_filename, format_amount, transactions_to_csv
from smartbilling.ledger.models import Transaction


def test_json_file_storage_round_trip(tmp_path) -> None:
    storage = JsonFileStorage(tmp_path / "slots")

    assert storage.read("ledger") is None
    storage.write("ledger", '{"a": 1}')
    storage.write("ledger", '{"a": 2}')

    assert storage.read("ledger") == '{"a": 2}'
    assert sorted(path.name for path in (tmp_path / "slots").iterdir()) == ["ledger.json"]
    storage.delete("ledger")
    storage.delete("ledger")
    assert storage.read("ledger") is None


def test_settings_drive_file_backed_store(tmp_path, monkeypatch) -> None:
    """Environment variables choose where the ledger document lives."""

    data_directory = tmp_path / "billing"
    monkeypatch.setenv("SMARTBILLING_DATA_DIRECTORY", str(data_directory))
    monkeypatch.setenv("SMARTBILLING_STORAGE_KEY", "household")
    monkeypatch.setenv("SMARTBILLING_USSD_RETURN_DELAY_SECONDS", "0.5")

    settings = BillingSettings()
    assert BillingSettings.model_config["env_prefix"] == "SMARTBILLING_"
    store = LedgerStore.from_settings(settings)
    store.apply_payment("electricity", 100, "M-Pesa")

    assert settings.data_directory.is_dir()
    assert settings.ussd_return_delay_seconds == 0.5
    assert (data_directory / "household.json").exists()
    reopened = LedgerStore.from_settings(settings)
    assert reopened.get_utility("electricity").balance == 2400.0


def test_reference_format_and_prefixes() -> None:
    rng = random.Random(11)
    on = date(2024, 12, 15)

    reference = generate_reference("M-Pesa", on, rng)

    assert reference[:8] == "MP241215"
    assert len(reference) == 11 and reference[8:].isdigit()
    assert generate_reference("Airtel", on, rng).startswith("AM")
    assert generate_reference("T-Kash", on, rng).startswith("TK")
    assert generate_reference("Airtel Money", on, rng).startswith("TX")


def test_csv_export_matches_transaction_order() -> None:
    store = LedgerStore(MemoryStorage(), clock=lambda: date(2025, 1, 12))

    lines = store.export_csv().split("\n")

    assert lines == [
        "Date,Utility,Amount,Method,Status,Reference",
        "2024-12-15,Electricity,1500,M-Pesa,Completed,MP241215001",
        "2024-12-10,Water,600,Airtel Money,Completed,AM241210001",
    ]


def test_csv_export_does_not_quote_commas() -> None:
    transaction = Transaction(
        transaction_id=1,
        occurred_on=date(2025, 1, 2),
        utility="Gas, bottled",
        amount=12.5,
        method="Cash",
        status="Completed",
        reference="TX250102001",
    )

    csv_text = transactions_to_csv([transaction])

    assert csv_text.splitlines()[1] == "2025-01-02,Gas, bottled,12.5,Cash,Completed,TX250102001"
    assert format_amount(3000.0) == "3000"
    assert export_filename(date(2025, 1, 2)) == "transactions-2025-01-02.csv"
