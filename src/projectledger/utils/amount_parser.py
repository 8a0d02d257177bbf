"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation


def parse_amount(amount_str: str) -> Decimal:
    """Parse a currency amount into a Decimal.

    Handles grouping commas, currency symbols and the won suffix:
    - "1100000"
    - "1,100,000"
    - "₩1,100,000"
    - "1,100,000원"
    - "(400,000)" (negative in parentheses)

    Raises:
        ValueError: If the amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"[₩$€£¥원,\s]", "", text)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    return -amount if is_negative else amount
