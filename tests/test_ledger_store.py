"""Mini README: Tests for ledger payments, persistence and preferences.

Structure:
    * payment tests - balances, instalments, transaction history, failures.
    * persistence tests - default seeding, corrupt slots, save/load round trips.
    * preference tests - reminders, theme, utility management and reset.
"""

from __future__ import annotations

import json
import random
import re
from datetime import date

import pytest

from smartbilling.errors import InsufficientDue, InvalidAmount, UnknownUtility, ValidationError
from smartbilling.ledger import LedgerStore, MemoryStorage
from smartbilling.ledger.defaults import build_default_document

TODAY = date(2025, 1, 12)
KEY = "smartBillingData"


def _make_store(storage: MemoryStorage | None = None) -> LedgerStore:
    return LedgerStore(
        storage if storage is not None else MemoryStorage(),
        clock=lambda: TODAY,
        rng=random.Random(7),
    )


def test_first_load_seeds_and_persists_default_document() -> None:
    """An empty slot yields the demo data, which is written back immediately."""

    storage = MemoryStorage()
    store = _make_store(storage)

    utility_ids = [utility.utility_id for utility in store.list_utilities()]
    assert utility_ids == ["electricity", "water", "rent", "wifi"]
    assert len(store.list_transactions()) == 2
    assert len(store.list_splits()) == 1
    assert KEY in storage.slots


def test_apply_payment_updates_balance_and_prepends_transaction() -> None:
    """A successful payment moves money from balance to instalment paid."""

    store = _make_store()
    before = store.get_utility("electricity")
    history_before = store.list_transactions()

    transaction = store.apply_payment("electricity", 500, "M-Pesa")

    after = store.get_utility("electricity")
    assert after.balance == pytest.approx(before.balance - 500)
    assert after.instalment_paid == pytest.approx(before.instalment_paid + 500)
    history = store.list_transactions()
    assert len(history) == len(history_before) + 1
    assert history[0] == transaction
    assert history[1:] == history_before
    assert transaction.utility == "Electricity"
    assert transaction.status == "Completed"
    assert transaction.occurred_on == TODAY
    assert transaction.transaction_id == 3
    assert re.fullmatch(r"MP250112\d{3}", transaction.reference)


def test_apply_payment_paying_full_balance_is_allowed() -> None:
    store = _make_store()

    store.apply_payment("water", 800, "Airtime")

    assert store.get_utility("water").balance == pytest.approx(0.0)
    assert store.list_transactions()[0].reference.startswith("AT")


def test_unmapped_method_uses_default_reference_prefix() -> None:
    store = _make_store()

    transaction = store.apply_payment("rent", 1000, "Bank Transfer")

    assert transaction.reference.startswith("TX250112")


def test_insufficient_due_leaves_ledger_unchanged() -> None:
    """Overpaying is rejected without touching memory or storage."""

    storage = MemoryStorage()
    store = _make_store(storage)
    snapshot = store.snapshot()
    persisted = storage.slots[KEY]

    with pytest.raises(InsufficientDue):
        store.apply_payment("electricity", 2500.01, "M-Pesa")

    assert store.snapshot() == snapshot
    assert storage.slots[KEY] == persisted


@pytest.mark.parametrize("amount", [0, -5, "abc", float("nan"), None])
def test_invalid_amounts_are_rejected(amount: object) -> None:
    store = _make_store()
    snapshot = store.snapshot()

    with pytest.raises(InvalidAmount):
        store.apply_payment("electricity", amount, "M-Pesa")

    assert store.snapshot() == snapshot


def test_sub_cent_amounts_are_rounded_before_applying() -> None:
    """The recorded amount is exactly what moves the balance."""

    store = _make_store()
    history_before = store.list_transactions()

    with pytest.raises(InvalidAmount):
        store.apply_payment("electricity", 0.004, "M-Pesa")
    assert store.list_transactions() == history_before
    assert store.get_utility("electricity").balance == pytest.approx(2500.0)

    transaction = store.apply_payment("electricity", 100.126, "M-Pesa")

    utility = store.get_utility("electricity")
    assert transaction.amount == pytest.approx(100.13)
    assert utility.balance == pytest.approx(2500.0 - transaction.amount)
    assert utility.instalment_paid == pytest.approx(1500.0 + transaction.amount)


def test_unknown_utility_and_missing_method() -> None:
    store = _make_store()

    with pytest.raises(UnknownUtility):
        store.apply_payment("gas", 100, "M-Pesa")
    with pytest.raises(ValidationError):
        store.apply_payment("water", 100, "  ")


def test_save_load_round_trip_is_identity() -> None:
    """Saving the loaded document and loading it again changes nothing."""

    storage = MemoryStorage()
    store = _make_store(storage)
    store.apply_payment("wifi", 999.5, "T-Kash")
    store.create_split("Water", 1200, "Ann, Ben", "equal")

    document = store.load()
    store.save(document)

    assert store.load() == document
    reopened = _make_store(storage)
    assert reopened.snapshot() == document


def test_mutations_persist_across_store_instances() -> None:
    storage = MemoryStorage()
    _make_store(storage).apply_payment("rent", 5000, "M-Pesa")

    reopened = _make_store(storage)

    assert reopened.get_utility("rent").balance == pytest.approx(20000.0)
    assert reopened.list_transactions()[0].amount == pytest.approx(5000.0)


def _default_payload_with(**overrides: object) -> str:
    payload = build_default_document().as_dict()
    payload.update(overrides)
    return json.dumps(payload)


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[]",
        json.dumps({"utilities": "x"}),
        _default_payload_with(reminders=None),
        _default_payload_with(settings=[]),
        _default_payload_with(transactions=[None]),
        _default_payload_with(
            splits=[
                {
                    "id": 1,
                    "utility": "Water",
                    "totalAmount": 10,
                    "participants": ["Ann"],
                    "createdDate": "2025-01-01",
                }
            ]
        ),
    ],
)
def test_corrupt_slot_falls_back_to_default_document(payload: str) -> None:
    """Any malformed section yields the demo data rather than a crash."""

    storage = MemoryStorage({KEY: payload})

    store = _make_store(storage)

    assert len(store.list_utilities()) == 4
    assert store.reminders.days_before == 3
    assert store.settings.theme == "light"
    assert json.loads(storage.slots[KEY])["utilities"][0]["id"] == "electricity"


def test_callers_receive_copies() -> None:
    store = _make_store()

    utilities = store.list_utilities()
    utilities[0].balance = 0
    store.snapshot().transactions.clear()

    assert store.get_utility("electricity").balance == pytest.approx(2500.0)
    assert len(store.list_transactions()) == 2


def test_upcoming_bills_respect_reminder_window() -> None:
    """Only bills due between today and the threshold are reminded."""

    store = _make_store()

    assert [utility.name for utility in store.upcoming_bills()] == ["Electricity"]

    store.update_reminders(days_before=10)
    assert [utility.name for utility in store.upcoming_bills()] == ["Electricity", "Water"]

    store.update_reminders(enabled=False)
    assert store.upcoming_bills() == []


def test_reminder_days_are_validated() -> None:
    store = _make_store()

    with pytest.raises(ValidationError):
        store.update_reminders(days_before=0)
    with pytest.raises(ValidationError):
        store.update_reminders(days_before=31)
    assert store.reminders.days_before == 3


def test_toggle_theme_and_notifications() -> None:
    store = _make_store()

    assert store.toggle_theme() == "dark"
    assert store.toggle_theme() == "light"
    assert store.set_notifications(False).notifications is False


def test_utility_management() -> None:
    """Utilities can be added, edited and removed by id."""

    store = _make_store()

    added = store.add_utility(
        name="Gas Cylinder",
        provider="Total",
        balance=3200,
        due_date="2025-02-01",
        monthly_amount=3200,
        account_number=" GAS-1 ",
    )
    assert added.utility_id == "gas-cylinder"
    assert added.account_number == "GAS-1"
    assert added.due_date == date(2025, 2, 1)

    with pytest.raises(ValidationError):
        store.add_utility(
            name="Gas Cylinder", provider="Total", balance=1, due_date="2025-02-01", monthly_amount=1
        )

    edited = store.update_utility("gas-cylinder", balance=1000, provider=None)
    assert edited.balance == pytest.approx(1000.0)
    assert edited.provider == "Total"

    with pytest.raises(ValidationError):
        store.update_utility("gas-cylinder", due_date="soon")
    with pytest.raises(ValidationError):
        store.update_utility("gas-cylinder", colour="red")

    store.remove_utility("gas-cylinder")
    with pytest.raises(UnknownUtility):
        store.get_utility("gas-cylinder")


def test_reset_restores_default_document() -> None:
    store = _make_store()
    store.apply_payment("electricity", 100, "M-Pesa")
    store.toggle_theme()

    store.reset()

    assert store.get_utility("electricity").balance == pytest.approx(2500.0)
    assert store.settings.theme == "light"
    assert len(store.list_transactions()) == 2


def test_instalment_progress_is_not_capped() -> None:
    store = _make_store()
    store.update_utility("water", instalment_paid=1800)

    assert store.get_utility("water").instalment_progress == pytest.approx(150.0)
