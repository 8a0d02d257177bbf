"""Business registration number helpers."""

from typing import Optional


def normalize_business_number(value: Optional[str]) -> str:
    """Strip separators from a business number.

    "123-45-67890", "123 45 67890" and "1234567890" all normalize to
    "1234567890". Returns an empty string for missing input.
    """
    if not value:
        return ""
    return "".join(ch for ch in value if ch.isalnum()).upper()
