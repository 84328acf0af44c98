"""Mini README: Fixed texts shown by the USSD simulator.

Each menu state owns one screen. The texts are static demo content and do
not reflect live ledger balances.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Dict

MAIN_SCREEN = dedent(
    """\
    *123# Smart Billing

    1. Pay Bill
    2. Pay Instalment
    3. Split Bill
    4. View History
    5. Settings
    0. Exit

    Enter choice:"""
)

PAY_BILL_SCREEN = dedent(
    """\
    Pay Bill

    1. Electricity - KES 2,500
    2. Water - KES 800
    3. Rent - KES 25,000
    4. Wi-Fi - KES 2,999

    0. Back
    Enter choice:"""
)

PAY_INSTALMENT_SCREEN = dedent(
    """\
    Pay Instalment

    Choose utility:
    1. Electricity (50% paid)
    2. Water (50% paid)
    3. Rent (0% paid)
    4. Wi-Fi (0% paid)

    0. Back
    Enter choice:"""
)

SPLIT_BILL_SCREEN = dedent(
    """\
    Split Bill

    1. Create New Split
    2. View Active Splits

    0. Back
    Enter choice:"""
)

HISTORY_SCREEN = dedent(
    """\
    Payment History

    Recent transactions:
    15/12 - Electricity - KES 1,500
    10/12 - Water - KES 600

    1. View More
    0. Back
    Enter choice:"""
)

SETTINGS_SCREEN = dedent(
    """\
    Settings

    1. Manage Utilities
    2. Reminder Settings
    3. Reset Data

    0. Back
    Enter choice:"""
)

FAREWELL_MESSAGE = "Thank you for using Smart Billing!"
INVALID_CHOICE_MESSAGE = "Invalid choice. Try again."
FEATURE_SIMULATED_MESSAGE = "Feature simulated. Returning to main menu..."
SESSION_ENDED_MESSAGE = "Session ended. Dial *123# again to start over."

SCREENS: Dict[str, str] = {
    "main": MAIN_SCREEN,
    "payBill": PAY_BILL_SCREEN,
    "payInstalment": PAY_INSTALMENT_SCREEN,
    "splitBill": SPLIT_BILL_SCREEN,
    "history": HISTORY_SCREEN,
    "settings": SETTINGS_SCREEN,
    "exited": FAREWELL_MESSAGE,
}
