from __future__ import annotations

import math
import re
from typing import Optional

PLACEHOLDER = "---"


def _is_displayable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def format_currency(value: Optional[float]) -> str:
    """Render ``value`` as Brazilian reais, e.g. ``R$ 1.234,56``."""
    if not _is_displayable(value):
        return PLACEHOLDER
    sign = "-" if value < 0 and round(abs(value), 2) != 0 else ""
    # 1,234.56 -> 1.234,56
    digits = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {digits}"


def format_percentage(value: Optional[float]) -> str:
    if not _is_displayable(value):
        return PLACEHOLDER
    return f"{value:.2f}%"


def parse_amount(text: Optional[str]) -> Optional[float]:
    # Accepts user input such as "R$ 1.234,56", "25,90", "25.90" or "1,234.56".
    # The right-most separator is the decimal one when both are present.
    if not text:
        return None
    numeric_part = re.sub(r"[^0-9.,-]", "", text)
    negative = numeric_part.startswith("-")
    numeric_part = numeric_part.replace("-", "")
    if "," in numeric_part and "." in numeric_part:
        if numeric_part.rfind(",") > numeric_part.rfind("."):
            numeric_part = numeric_part.replace(".", "").replace(",", ".")
        else:
            numeric_part = numeric_part.replace(",", "")
    elif "," in numeric_part:
        if numeric_part.count(",") > 1:
            return None
        numeric_part = numeric_part.replace(",", ".")
    elif numeric_part.count(".") > 1:
        numeric_part = numeric_part.replace(".", "")
    if numeric_part.startswith("."):
        numeric_part = "0" + numeric_part
    if not numeric_part or numeric_part == ".":
        return None
    try:
        amount = float(numeric_part)
    except ValueError:
        return None
    return -amount if negative else amount
