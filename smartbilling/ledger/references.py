"""Mini README: Payment reference codes.

A reference is ``<prefix><YYMMDD><nnn>``: a two letter prefix looked up from
the payment method, the payment date, and a zero-padded random number in the
range 000-999. Unmapped methods use the ``TX`` prefix.
"""

from __future__ import annotations

import random
from datetime import date
from typing import Dict, Optional

METHOD_PREFIXES: Dict[str, str] = {
    "M-Pesa": "MP",
    "Airtel": "AM",
    "T-Kash": "TK",
    "Airtime": "AT",
}
DEFAULT_PREFIX = "TX"


def method_prefix(method: str) -> str:
    """Return the reference prefix for a payment method."""

    return METHOD_PREFIXES.get(method, DEFAULT_PREFIX)


def generate_reference(
    method: str, on: date, rng: Optional[random.Random] = None
) -> str:
    """Build a reference code for a payment made with ``method`` on ``on``."""

    number = (rng or random).randrange(1000)
    return f"{method_prefix(method)}{on:%y%m%d}{number:03d}"
