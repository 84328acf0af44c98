"""Mini README: Core package initialiser for the Smart Utility Billing Assistant.

The package bundles a persistent bill ledger (utilities, payments, bill
splits, reminder preferences) and a simulated USSD menu. Sub-packages keep
the domain logic free of web framework imports so the ledger and the menu
can be driven from the CLI, the FastAPI interface, or tests alike.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
