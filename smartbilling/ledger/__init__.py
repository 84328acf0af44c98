"""Mini README: Bill ledger for utilities, payments and shared bills.

The ``store`` module holds the public API (``LedgerStore``); entities live in
``models`` and storage backends in ``storage``. Seed data, CSV export and
reference generation are split into small helper modules so interfaces can
reuse them without instantiating a store.
"""

from .export import transactions_to_csv
from .models import (
    LedgerDocument,
    Participant,
    ReminderConfig,
    Settings,
    Split,
    Transaction,
    Utility,
)
from .references import generate_reference
from .storage import JsonFileStorage, MemoryStorage, SlotStorage
from .store import LedgerStore, equal_shares, parse_participants

__all__ = [
    "JsonFileStorage",
    "LedgerDocument",
    "LedgerStore",
    "MemoryStorage",
    "Participant",
    "ReminderConfig",
    "Settings",
    "SlotStorage",
    "Split",
    "Transaction",
    "Utility",
    "equal_shares",
    "generate_reference",
    "parse_participants",
    "transactions_to_csv",
]
