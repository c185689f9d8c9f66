"""Helpers package."""
from farmledger.helpers.pagination import page_offset, total_pages, page_window
from farmledger.helpers.validation import (
    format_errors,
    validate_payload,
    parse_uuid,
    parse_date_param
)

__all__ = [
    "page_offset",
    "total_pages",
    "page_window",
    "format_errors",
    "validate_payload",
    "parse_uuid",
    "parse_date_param",
]
