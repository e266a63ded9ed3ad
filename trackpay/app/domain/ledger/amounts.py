"""
Parsing of client-supplied money amounts.
"""

import math
from typing import Any, Optional


def parse_amount(value: Any) -> Optional[float]:
    """
    Parse a money amount sent by a client.

    Accepts numbers and numeric strings. Returns None when the value is
    absent, blank, unparseable or not finite. Results are rounded to cents.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(number):
        return None

    return round(number, 2)
