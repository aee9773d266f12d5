# agents/__init__.py
"""
Agents Package

Contains the booking dialogue engine:
- TravelAgent: reducer over (BookingContext, utterance)
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .travel_agent import travel_agent, TravelAgent

__all__ = [
    "travel_agent",
    "TravelAgent",
]
