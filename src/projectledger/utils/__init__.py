"""Utility functions for projectledger."""

from projectledger.utils.amount_parser import parse_amount
from projectledger.utils.business_number import normalize_business_number
from projectledger.utils.date_parser import parse_date, parse_optional_date
from projectledger.utils.similarity import edit_distance, similarity

__all__ = [
    "parse_amount",
    "normalize_business_number",
    "parse_date",
    "parse_optional_date",
    "edit_distance",
    "similarity",
]
