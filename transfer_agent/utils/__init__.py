"""
Utilities Module
Message helpers for the transfer concierge
"""

from .ai_helpers import (
    format_price,
    pluralize,
    airport_display_name,
    welcome_response,
    booking_recap,
    with_booking_recap,
    booking_summary,
)

__all__ = [
    "format_price",
    "pluralize",
    "airport_display_name",
    "welcome_response",
    "booking_recap",
    "with_booking_recap",
    "booking_summary",
]
