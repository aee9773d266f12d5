# interfaces/__init__.py
"""
Interfaces Package

Contains data stores:
- reference_data: Hotel zones, vehicles, pricing rules, discount, gallery
- faq_store: Canned FAQ answers
- session_store: Booking context per session
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .reference_data import reference_data_store, ReferenceDataStore
    from .faq_store import faq_store, FAQStore, answer_faq
    from .session_store import session_store, SessionStore

__all__ = [
    "reference_data_store",
    "ReferenceDataStore",
    "faq_store",
    "FAQStore",
    "answer_faq",
    "session_store",
    "SessionStore",
]
