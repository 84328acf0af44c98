"""Mini README: Entities stored inside the ledger document.

Structure:
    * Utility - recurring billable service with its outstanding balance.
    * Transaction - immutable payment record.
    * Participant / Split - shared bill arrangement with per-person shares.
    * ReminderConfig / Settings - user preferences.
    * LedgerDocument - root aggregate persisted as one JSON document.

Each entity converts to and from the persisted JSON shape through
``as_dict``/``from_dict``. The JSON keeps the camelCase field names used by
the browser version of the tracker so existing exports stay readable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

THEMES = ("light", "dark")


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")


def _mapping(value: object, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{label} must be a JSON object")
    return value


def _records(value: object, label: str) -> List[Mapping[str, Any]]:
    """Return a list of JSON objects, rejecting any other shape."""

    if not isinstance(value, list):
        raise TypeError(f"{label} must be a JSON array")
    return [_mapping(item, f"{label} entry") for item in value]


def _amount(value: object) -> float:
    if isinstance(value, bool):
        raise ValueError("Amounts must be numeric")
    return float(value)  # type: ignore[arg-type]


@dataclass(slots=True)
class Utility:
    """A recurring billable service such as electricity or rent."""

    utility_id: str
    name: str
    provider: str
    balance: float
    due_date: date
    monthly_amount: float
    instalment_paid: float = 0.0
    account_number: str = ""

    @property
    def instalment_progress(self) -> float:
        """Percentage of the monthly amount paid so far (not capped at 100)."""

        if self.monthly_amount <= 0:
            return 0.0
        return self.instalment_paid / self.monthly_amount * 100

    def is_overdue(self, today: date) -> bool:
        return self.due_date < today

    def days_until_due(self, today: date) -> int:
        return (self.due_date - today).days

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.utility_id,
            "name": self.name,
            "provider": self.provider,
            "balance": self.balance,
            "dueDate": self.due_date.isoformat(),
            "monthlyAmount": self.monthly_amount,
            "instalmentPaid": self.instalment_paid,
            "accountNumber": self.account_number,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Utility":
        return cls(
            utility_id=str(payload["id"]),
            name=str(payload["name"]),
            provider=str(payload.get("provider", "")),
            balance=_amount(payload["balance"]),
            due_date=parse_date(payload["dueDate"]),
            monthly_amount=_amount(payload.get("monthlyAmount", 0)),
            instalment_paid=_amount(payload.get("instalmentPaid", 0)),
            account_number=str(payload.get("accountNumber", "")),
        )


@dataclass(frozen=True, slots=True)
class Transaction:
    """Payment record. ``utility`` holds the utility name, not its id."""

    transaction_id: int
    occurred_on: date
    utility: str
    amount: float
    method: str
    status: str
    reference: str
    notes: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.transaction_id,
            "date": self.occurred_on.isoformat(),
            "utility": self.utility,
            "amount": self.amount,
            "method": self.method,
            "status": self.status,
            "reference": self.reference,
        }
        if self.notes is not None:
            payload["notes"] = self.notes
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Transaction":
        notes = payload.get("notes")
        return cls(
            transaction_id=int(payload["id"]),
            occurred_on=parse_date(payload["date"]),
            utility=str(payload["utility"]),
            amount=_amount(payload["amount"]),
            method=str(payload["method"]),
            status=str(payload.get("status", "Completed")),
            reference=str(payload.get("reference", "")),
            notes=None if notes is None else str(notes),
        )


@dataclass(slots=True)
class Participant:
    """One person's share of a split."""

    name: str
    share: float
    paid: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "share": self.share, "paid": self.paid}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Participant":
        return cls(
            name=str(payload["name"]),
            share=_amount(payload["share"]),
            paid=bool(payload.get("paid", False)),
        )


@dataclass(slots=True)
class Split:
    """Shared bill. Participants are addressed by their list position."""

    split_id: int
    utility: str
    total_amount: float
    participants: List[Participant]
    created_on: date

    @property
    def paid_count(self) -> int:
        return sum(1 for participant in self.participants if participant.paid)

    @property
    def progress(self) -> float:
        """Percentage of participants that have paid."""

        if not self.participants:
            return 0.0
        return self.paid_count / len(self.participants) * 100

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.split_id,
            "utility": self.utility,
            "totalAmount": self.total_amount,
            "participants": [participant.as_dict() for participant in self.participants],
            "createdDate": self.created_on.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Split":
        return cls(
            split_id=int(payload["id"]),
            utility=str(payload["utility"]),
            total_amount=_amount(payload["totalAmount"]),
            participants=[
                Participant.from_dict(item)
                for item in _records(payload["participants"], "participants")
            ],
            created_on=parse_date(payload["createdDate"]),
        )


@dataclass(slots=True)
class ReminderConfig:
    """Controls which bills surface as upcoming reminders."""

    enabled: bool = True
    days_before: int = 3
    smart_suggestions: bool = True

    def as_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "daysBefore": self.days_before,
            "smartSuggestions": self.smart_suggestions,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ReminderConfig":
        return cls(
            enabled=bool(payload.get("enabled", True)),
            days_before=int(payload.get("daysBefore", 3)),
            smart_suggestions=bool(payload.get("smartSuggestions", True)),
        )


@dataclass(slots=True)
class Settings:
    """Display preferences."""

    theme: str = "light"
    notifications: bool = True
    currency: str = "KES"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "notifications": self.notifications,
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Settings":
        theme = str(payload.get("theme", "light"))
        if theme not in THEMES:
            raise ValueError(f"Unsupported theme: {theme}")
        return cls(
            theme=theme,
            notifications=bool(payload.get("notifications", True)),
            currency=str(payload.get("currency", "KES")),
        )


@dataclass(slots=True)
class LedgerDocument:
    """Root aggregate; the only object that is ever persisted."""

    utilities: List[Utility] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    splits: List[Split] = field(default_factory=list)
    reminders: ReminderConfig = field(default_factory=ReminderConfig)
    settings: Settings = field(default_factory=Settings)

    def as_dict(self) -> Dict[str, Any]:
        """Export the document in its persisted JSON shape."""

        return {
            "utilities": [utility.as_dict() for utility in self.utilities],
            "transactions": [transaction.as_dict() for transaction in self.transactions],
            "splits": [split.as_dict() for split in self.splits],
            "reminders": self.reminders.as_dict(),
            "settings": self.settings.as_dict(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LedgerDocument":
        """Rebuild a document, raising ``ValueError``/``KeyError``/``TypeError`` on bad shapes."""

        payload = _mapping(payload, "Ledger document")
        return cls(
            utilities=[Utility.from_dict(item) for item in _records(payload["utilities"], "utilities")],
            transactions=[
                Transaction.from_dict(item)
                for item in _records(payload["transactions"], "transactions")
            ],
            splits=[Split.from_dict(item) for item in _records(payload["splits"], "splits")],
            reminders=ReminderConfig.from_dict(_mapping(payload.get("reminders", {}), "reminders")),
            settings=Settings.from_dict(_mapping(payload.get("settings", {}), "settings")),
        )
