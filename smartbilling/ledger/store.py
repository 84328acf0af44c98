"""Mini README: Ledger store owning the persisted billing document.

Structure:
    * LedgerStore - loads, saves and mutates the ledger document.
    * equal_shares - cent-exact equal division used by bill splits.
    * parse_participants - turn a comma separated name list into names.

The store is the only owner of the ``LedgerDocument``. Readers receive deep
copies and every mutator works on a private copy that replaces the live
document only after it has been written to storage, so a failed operation
(validation error or storage error) leaves both the memory and the slot
untouched. Mutators are serialised with a re-entrant lock because the web
interface may call them from worker threads.
"""

from __future__ import annotations

import copy
import json
import math
import random
import re
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Union

from ..configuration import BillingSettings
from ..errors import (
    IndexOutOfRange,
    InsufficientDue,
    InvalidAmount,
    SplitNotFound,
    StorageError,
    UnknownUtility,
    ValidationError,
)
from ..logging_utils import get_logger
from .defaults import build_default_document
from .export import transactions_to_csv
from .models import (
    THEMES,
    LedgerDocument,
    Participant,
    ReminderConfig,
    Settings,
    Split,
    Transaction,
    Utility,
    parse_date,
)
from .references import generate_reference
from .storage import JsonFileStorage, SlotStorage

LOGGER = get_logger(__name__)

DEFAULT_STORAGE_KEY = "smartBillingData"
SHARE_TYPES = ("equal", "custom")
REMINDER_DAYS_RANGE = (1, 30)
COMPLETED = "Completed"
_EDITABLE_UTILITY_FIELDS = {
    "name",
    "provider",
    "balance",
    "due_date",
    "monthly_amount",
    "instalment_paid",
    "account_number",
}


def _positive_amount(value: object, label: str = "Amount") -> float:
    """Coerce user input into a cent-rounded amount greater than zero."""

    if isinstance(value, bool):
        raise InvalidAmount(f"{label} must be a number")
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise InvalidAmount(f"{label} must be a number") from error
    if not math.isfinite(amount):
        raise InvalidAmount(f"{label} must be a number")
    amount = round(amount, 2)
    if amount <= 0:
        raise InvalidAmount(f"{label} must be at least 0.01")
    return amount


def _non_negative_amount(value: object, label: str) -> float:
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as error:
        raise ValidationError(f"{label} must be a number") from error
    if not math.isfinite(amount) or amount < 0:
        raise ValidationError(f"{label} cannot be negative")
    return amount


def _required_text(value: Optional[str], label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "utility"


def parse_participants(raw: Union[str, Sequence[str]]) -> List[str]:
    """Split comma separated names, trimming whitespace and dropping blanks."""

    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [str(item).strip() for item in items if str(item).strip()]


def equal_shares(total_amount: float, count: int) -> List[float]:
    """Divide ``total_amount`` into ``count`` cent-rounded shares.

    Every share is the total divided equally and rounded down to the cent; the
    leftover cents go one each to the first participants, so the shares always
    add up to the total: 100 split three ways gives 33.34, 33.33, 33.33.
    """

    if count <= 0:
        raise ValueError("At least one participant is required")
    total_cents = int(round(total_amount * 100))
    base, remainder = divmod(total_cents, count)
    return [(base + (1 if position < remainder else 0)) / 100 for position in range(count)]


class LedgerStore:
    """Own the ledger document and expose the operations that mutate it."""

    def __init__(
        self,
        storage: SlotStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        currency: str = "KES",
        clock: Optional[Callable[[], date]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._currency = currency
        self._clock = clock or date.today
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._document = build_default_document(currency)
        self.load()
        LOGGER.debug(
            "Ledger store ready with %s utilities and %s transactions",
            len(self._document.utilities),
            len(self._document.transactions),
        )

    @classmethod
    def from_settings(cls, settings: BillingSettings) -> "LedgerStore":
        """Build a file-backed store from ``BillingSettings``."""

        return cls(
            JsonFileStorage(settings.data_directory),
            key=settings.storage_key,
            currency=settings.currency,
        )

    # Persistence -----------------------------------------------------------

    def load(self) -> LedgerDocument:
        """Reload the document from storage, falling back to the default document."""

        with self._lock:
            document = self._read_slot()
            if document is None:
                document = build_default_document(self._currency)
                self._write_slot(document)
            self._document = document
            return copy.deepcopy(document)

    def save(self, document: Optional[LedgerDocument] = None) -> None:
        """Persist ``document`` (or the current document) as a full overwrite."""

        with self._lock:
            target = copy.deepcopy(document) if document is not None else self._document
            self._write_slot(target)
            self._document = target

    def _read_slot(self) -> Optional[LedgerDocument]:
        try:
            raw = self._storage.read(self._key)
        except StorageError:
            LOGGER.warning("Ledger slot '%s' unreadable; using default data", self._key, exc_info=True)
            return None
        if raw is None:
            LOGGER.info("Ledger slot '%s' empty; seeding default data", self._key)
            return None
        try:
            return LedgerDocument.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as error:
            LOGGER.warning("Ledger slot '%s' corrupt (%s); using default data", self._key, error)
            return None

    def _write_slot(self, document: LedgerDocument) -> None:
        self._storage.write(self._key, json.dumps(document.as_dict(), indent=2))

    @contextmanager
    def _editing(self) -> Iterator[LedgerDocument]:
        """Yield a working copy that replaces the live document once saved."""

        with self._lock:
            working = copy.deepcopy(self._document)
            yield working
            self._write_slot(working)
            self._document = working

    def reset(self) -> LedgerDocument:
        """Discard all data and restore the default document."""

        with self._lock:
            self._storage.delete(self._key)
            self.save(build_default_document(self._currency))
            LOGGER.info("Ledger reset to default data")
            return copy.deepcopy(self._document)

    # Read accessors --------------------------------------------------------

    def snapshot(self) -> LedgerDocument:
        with self._lock:
            return copy.deepcopy(self._document)

    def list_utilities(self) -> List[Utility]:
        with self._lock:
            return copy.deepcopy(self._document.utilities)

    def get_utility(self, utility_id: str) -> Utility:
        with self._lock:
            return copy.deepcopy(self._find_utility(self._document, utility_id))

    def list_transactions(self) -> List[Transaction]:
        """Return transactions, most recent first."""

        with self._lock:
            return list(self._document.transactions)

    def list_splits(self) -> List[Split]:
        with self._lock:
            return copy.deepcopy(self._document.splits)

    def get_split(self, split_id: int) -> Split:
        with self._lock:
            return copy.deepcopy(self._find_split(self._document, split_id))

    @property
    def reminders(self) -> ReminderConfig:
        with self._lock:
            return copy.deepcopy(self._document.reminders)

    @property
    def settings(self) -> Settings:
        with self._lock:
            return copy.deepcopy(self._document.settings)

    def today(self) -> date:
        return self._clock()

    def upcoming_bills(self, today: Optional[date] = None) -> List[Utility]:
        """Utilities due within the reminder window, soonest first."""

        today = today or self._clock()
        with self._lock:
            reminders = self._document.reminders
            if not reminders.enabled:
                return []
            due = [
                utility
                for utility in self._document.utilities
                if 0 <= utility.days_until_due(today) <= reminders.days_before
            ]
            return copy.deepcopy(sorted(due, key=lambda utility: utility.due_date))

    def export_csv(self) -> str:
        return transactions_to_csv(self.list_transactions())

    @staticmethod
    def _find_utility(document: LedgerDocument, utility_id: str) -> Utility:
        for utility in document.utilities:
            if utility.utility_id == utility_id:
                return utility
        raise UnknownUtility(utility_id)

    @staticmethod
    def _find_split(document: LedgerDocument, split_id: int) -> Split:
        for split in document.splits:
            if split.split_id == split_id:
                return split
        raise SplitNotFound(split_id)

    # Payments --------------------------------------------------------------

    def apply_payment(self, utility_id: str, amount: object, method: Optional[str]) -> Transaction:
        """Pay ``amount`` towards a utility and record the transaction."""

        value = _positive_amount(amount)
        method_name = _required_text(method, "Payment method")
        try:
            with self._editing() as document:
                utility = self._find_utility(document, utility_id)
                if value > utility.balance:
                    raise InsufficientDue(value, utility.balance)
                utility.balance = round(utility.balance - value, 2)
                utility.instalment_paid = round(utility.instalment_paid + value, 2)
                today = self._clock()
                transaction = Transaction(
                    transaction_id=max(
                        (item.transaction_id for item in document.transactions), default=0
                    )
                    + 1,
                    occurred_on=today,
                    utility=utility.name,
                    amount=value,
                    method=method_name,
                    status=COMPLETED,
                    reference=generate_reference(method_name, today, self._rng),
                )
                document.transactions.insert(0, transaction)
        except (UnknownUtility, InsufficientDue) as error:
            LOGGER.warning("Payment rejected for %s: %s", utility_id, error)
            raise
        LOGGER.info(
            "Payment of %.2f to %s via %s recorded as %s",
            value,
            utility_id,
            method_name,
            transaction.reference,
        )
        return transaction

    # Splits ----------------------------------------------------------------

    def create_split(
        self,
        utility: Optional[str],
        total_amount: object,
        participant_names: Union[str, Sequence[str]],
        share_type: Optional[str] = "equal",
    ) -> Split:
        """Divide a bill among participants.

        ``custom`` is accepted as a share type but currently produces the same
        equal division as ``equal``; no per-person amounts are collected.
        """

        utility_name = _required_text(utility, "Utility")
        total = _positive_amount(total_amount, "Total amount")
        kind = _required_text(share_type, "Share type").lower()
        if kind not in SHARE_TYPES:
            raise ValidationError(f"Unsupported share type: {share_type}")
        names = parse_participants(participant_names)
        if len(names) < 2:
            raise ValidationError("Please enter at least 2 participants")
        if len({name.casefold() for name in names}) != len(names):
            raise ValidationError("Participant names must be unique")
        if kind == "custom":
            LOGGER.info("Custom shares requested for %s; dividing equally", utility_name)

        shares = equal_shares(total, len(names))
        with self._editing() as document:
            split = Split(
                split_id=max((item.split_id for item in document.splits), default=0) + 1,
                utility=utility_name,
                total_amount=total,
                participants=[
                    Participant(name=name, share=share) for name, share in zip(names, shares)
                ],
                created_on=self._clock(),
            )
            document.splits.insert(0, split)
        LOGGER.info(
            "Split %s created for %s: %.2f across %s participants",
            split.split_id,
            utility_name,
            total,
            len(names),
        )
        return copy.deepcopy(split)

    def mark_participant_paid(self, split_id: int, participant_index: int) -> Split:
        """Flag the participant at ``participant_index`` as paid."""

        try:
            with self._editing() as document:
                split = self._find_split(document, split_id)
                if not 0 <= participant_index < len(split.participants):
                    raise IndexOutOfRange(split_id, participant_index)
                split.participants[participant_index].paid = True
        except (SplitNotFound, IndexOutOfRange) as error:
            LOGGER.warning("Mark paid rejected: %s", error)
            raise
        LOGGER.info("Split %s participant %s marked paid", split_id, participant_index)
        return copy.deepcopy(split)

    # Preferences -----------------------------------------------------------

    def update_reminders(
        self,
        *,
        enabled: Optional[bool] = None,
        days_before: Optional[int] = None,
        smart_suggestions: Optional[bool] = None,
    ) -> ReminderConfig:
        """Change reminder preferences; ``None`` leaves a field as it is."""

        if days_before is not None:
            low, high = REMINDER_DAYS_RANGE
            try:
                days_before = int(days_before)
            except (TypeError, ValueError) as error:
                raise ValidationError("Reminder days must be a whole number") from error
            if not low <= days_before <= high:
                raise ValidationError(f"Reminder days must be between {low} and {high}")
        with self._editing() as document:
            reminders = document.reminders
            if enabled is not None:
                reminders.enabled = bool(enabled)
            if days_before is not None:
                reminders.days_before = days_before
            if smart_suggestions is not None:
                reminders.smart_suggestions = bool(smart_suggestions)
        LOGGER.info("Reminder settings updated: %s", reminders.as_dict())
        return copy.deepcopy(reminders)

    def toggle_theme(self) -> str:
        with self._editing() as document:
            current = document.settings.theme
            document.settings.theme = THEMES[1] if current == THEMES[0] else THEMES[0]
        LOGGER.info("Theme switched to %s", document.settings.theme)
        return document.settings.theme

    def set_notifications(self, enabled: bool) -> Settings:
        with self._editing() as document:
            document.settings.notifications = bool(enabled)
        return copy.deepcopy(document.settings)

    # Utility management ----------------------------------------------------

    def add_utility(
        self,
        *,
        name: str,
        provider: str,
        balance: object,
        due_date: object,
        monthly_amount: object,
        account_number: str = "",
        instalment_paid: object = 0.0,
        utility_id: Optional[str] = None,
    ) -> Utility:
        """Register a new utility; the id defaults to a slug of the name."""

        clean_name = _required_text(name, "Utility name")
        utility = Utility(
            utility_id=(utility_id or "").strip() or _slugify(clean_name),
            name=clean_name,
            provider=_required_text(provider, "Provider"),
            balance=_non_negative_amount(balance, "Balance"),
            due_date=self._coerce_due_date(due_date),
            monthly_amount=_non_negative_amount(monthly_amount, "Monthly amount"),
            instalment_paid=_non_negative_amount(instalment_paid, "Instalment paid"),
            account_number=(account_number or "").strip(),
        )
        with self._editing() as document:
            if any(item.utility_id == utility.utility_id for item in document.utilities):
                raise ValidationError(f"Utility '{utility.utility_id}' already exists")
            document.utilities.append(utility)
        LOGGER.info("Utility %s added", utility.utility_id)
        return copy.deepcopy(utility)

    def update_utility(self, utility_id: str, **changes: object) -> Utility:
        """Edit selected utility fields, validating each supplied value."""

        unsupported = set(changes) - _EDITABLE_UTILITY_FIELDS
        if unsupported:
            raise ValidationError(f"Cannot edit utility fields: {', '.join(sorted(unsupported))}")
        coerced: Dict[str, object] = {}
        for field_name, value in changes.items():
            if value is None:
                continue
            if field_name in {"balance", "monthly_amount", "instalment_paid"}:
                coerced[field_name] = _non_negative_amount(value, field_name.replace("_", " ").capitalize())
            elif field_name == "due_date":
                coerced[field_name] = self._coerce_due_date(value)
            elif field_name == "account_number":
                coerced[field_name] = str(value).strip()
            else:
                coerced[field_name] = _required_text(str(value), field_name.capitalize())
        with self._editing() as document:
            current = self._find_utility(document, utility_id)
            updated = replace(current, **coerced)
            document.utilities[document.utilities.index(current)] = updated
        LOGGER.info("Utility %s updated: %s", utility_id, sorted(coerced))
        return copy.deepcopy(updated)

    def remove_utility(self, utility_id: str) -> Utility:
        with self._editing() as document:
            utility = self._find_utility(document, utility_id)
            document.utilities.remove(utility)
        LOGGER.info("Utility %s removed", utility_id)
        return utility

    @staticmethod
    def _coerce_due_date(value: object) -> date:
        try:
            return parse_date(value)
        except ValueError as error:
            raise ValidationError("Due date must be an ISO date (YYYY-MM-DD)") from error
