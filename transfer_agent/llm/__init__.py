# llm/__init__.py
"""
Language Components Package

Contains the text understanding components:
- extractors: Booking slots from free text
- question_classifier: Language, reset, continue and question detection
- qa_service: Answers to general questions
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .extractors import slot_extractor, SlotExtractor, ExtractedBookingInfo, extract_booking_information
    from .question_classifier import question_classifier, QuestionClassifier, is_general_question
    from .qa_service import qa_service, QAService

__all__ = [
    "slot_extractor",
    "SlotExtractor",
    "ExtractedBookingInfo",
    "extract_booking_information",
    "question_classifier",
    "QuestionClassifier",
    "is_general_question",
    "qa_service",
    "QAService",
]
