"""Mini README: Seed document used on first run and after a reset.

The values are demo data: four household utilities, two earlier payments and
one three-way electricity split. A fresh document is built on every call so
callers can mutate the result freely.
"""

from __future__ import annotations

from datetime import date

from .models import (
    LedgerDocument,
    Participant,
    ReminderConfig,
    Settings,
    Split,
    Transaction,
    Utility,
)


def build_default_document(currency: str = "KES") -> LedgerDocument:
    """Create deterministic demo data for first launches."""

    return LedgerDocument(
        utilities=[
            Utility(
                utility_id="electricity",
                name="Electricity",
                provider="Kenya Power",
                balance=2500.0,
                due_date=date(2025, 1, 15),
                monthly_amount=3000.0,
                instalment_paid=1500.0,
                account_number="123456789",
            ),
            Utility(
                utility_id="water",
                name="Water",
                provider="Nairobi Water",
                balance=800.0,
                due_date=date(2025, 1, 20),
                monthly_amount=1200.0,
                instalment_paid=600.0,
                account_number="WTR987654",
            ),
            Utility(
                utility_id="rent",
                name="Rent",
                provider="Property Manager",
                balance=25000.0,
                due_date=date(2025, 1, 31),
                monthly_amount=25000.0,
                instalment_paid=0.0,
                account_number="RENT001",
            ),
            Utility(
                utility_id="wifi",
                name="Wi-Fi",
                provider="Safaricom",
                balance=2999.0,
                due_date=date(2025, 1, 10),
                monthly_amount=2999.0,
                instalment_paid=0.0,
                account_number="SAF123456",
            ),
        ],
        transactions=[
            Transaction(
                transaction_id=2,
                occurred_on=date(2024, 12, 15),
                utility="Electricity",
                amount=1500.0,
                method="M-Pesa",
                status="Completed",
                reference="MP241215001",
            ),
            Transaction(
                transaction_id=1,
                occurred_on=date(2024, 12, 10),
                utility="Water",
                amount=600.0,
                method="Airtel Money",
                status="Completed",
                reference="AM241210001",
            ),
        ],
        splits=[
            Split(
                split_id=1,
                utility="Electricity",
                total_amount=3000.0,
                participants=[
                    Participant(name="John", share=1000.0, paid=True),
                    Participant(name="Mary", share=1000.0, paid=False),
                    Participant(name="Peter", share=1000.0, paid=True),
                ],
                created_on=date(2024, 12, 1),
            )
        ],
        reminders=ReminderConfig(enabled=True, days_before=3, smart_suggestions=True),
        settings=Settings(theme="light", notifications=True, currency=currency),
    )
