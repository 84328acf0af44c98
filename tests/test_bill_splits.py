"""Mini README: Tests for bill splitting and participant payment tracking.

These tests cover cent-exact equal division, the equal fallback for custom
shares, input validation, and marking participants as paid by position.
"""

from __future__ import annotations

import random
from datetime import date

import pytest

from smartbilling.errors import IndexOutOfRange, SplitNotFound, ValidationError
from smartbilling.ledger import LedgerStore, MemoryStorage, equal_shares, parse_participants


def _make_store(storage: MemoryStorage | None = None) -> LedgerStore:
    return LedgerStore(
        storage if storage is not None else MemoryStorage(),
        clock=lambda: date(2025, 1, 12),
        rng=random.Random(3),
    )


def test_even_total_divides_into_equal_shares() -> None:
    store = _make_store()

    split = store.create_split("Electricity", 3000, ["John", "Mary", "Peter"], "equal")

    assert [participant.share for participant in split.participants] == [1000.0, 1000.0, 1000.0]
    assert sum(participant.share for participant in split.participants) == pytest.approx(3000.0)
    assert not any(participant.paid for participant in split.participants)


def test_uneven_total_assigns_leftover_cents_to_first_participants() -> None:
    """100 across three people gives 33.34, 33.33, 33.33."""

    store = _make_store()

    split = store.create_split("Water", 100, "Ann, Ben, Cid", "equal")

    assert [participant.share for participant in split.participants] == [33.34, 33.33, 33.33]
    assert sum(participant.share for participant in split.participants) == pytest.approx(100.0)


def test_equal_shares_handles_fractional_totals() -> None:
    assert equal_shares(10.01, 4) == [2.51, 2.5, 2.5, 2.5]
    assert equal_shares(0.02, 3) == [0.01, 0.01, 0.0]
    with pytest.raises(ValueError):
        equal_shares(10, 0)


def test_custom_share_type_falls_back_to_equal_division() -> None:
    store = _make_store()

    custom = store.create_split("Rent", 25000, "Ann, Ben", "custom")
    equal = store.create_split("Rent", 25000, "Ann, Ben", "equal")

    assert [p.share for p in custom.participants] == [p.share for p in equal.participants]


def test_new_split_is_prepended_with_next_id() -> None:
    store = _make_store()

    split = store.create_split("Wi-Fi", 2999, "Ann, Ben", "EQUAL")

    splits = store.list_splits()
    assert split.split_id == 2
    assert splits[0].split_id == 2
    assert splits[0].created_on == date(2025, 1, 12)
    assert len(splits) == 2


def test_parse_participants_trims_and_drops_blanks() -> None:
    assert parse_participants(" Ann , ,Ben,") == ["Ann", "Ben"]
    assert parse_participants(["  Cid", ""]) == ["Cid"]


@pytest.mark.parametrize(
    "utility, total, names, share_type",
    [
        ("Water", 100, "Ann", "equal"),
        ("Water", 100, "Ann, , ", "equal"),
        ("Water", 100, "Ann, ann", "equal"),
        ("Water", 0, "Ann, Ben", "equal"),
        ("", 100, "Ann, Ben", "equal"),
        ("Water", 100, "Ann, Ben", "weighted"),
        ("Water", 100, "Ann, Ben", None),
    ],
)
def test_invalid_split_input_is_rejected(utility, total, names, share_type) -> None:
    store = _make_store()
    before = store.list_splits()

    with pytest.raises(ValidationError):
        store.create_split(utility, total, names, share_type)

    assert store.list_splits() == before


def test_mark_participant_paid_only_touches_that_participant() -> None:
    """Marking is positional, persisted and idempotent."""

    storage = MemoryStorage()
    store = _make_store(storage)
    before = store.get_split(1)
    assert [p.paid for p in before.participants] == [True, False, True]

    updated = store.mark_participant_paid(1, 1)
    again = store.mark_participant_paid(1, 1)

    assert [p.paid for p in updated.participants] == [True, True, True]
    assert again == updated
    assert [p.name for p in updated.participants] == [p.name for p in before.participants]
    assert updated.paid_count == 3
    assert updated.progress == pytest.approx(100.0)
    assert _make_store(storage).get_split(1) == updated


def test_mark_participant_paid_errors() -> None:
    store = _make_store()
    snapshot = store.snapshot()

    with pytest.raises(SplitNotFound):
        store.mark_participant_paid(99, 0)
    with pytest.raises(IndexOutOfRange):
        store.mark_participant_paid(1, 3)
    with pytest.raises(IndexOutOfRange):
        store.mark_participant_paid(1, -1)

    assert store.snapshot() == snapshot
