# tests/test_faq_and_classifier.py
"""
FAQ matching and message classification
"""

import pytest

from transfer_agent.interfaces.faq_store import FAQStore, is_booking_input
from transfer_agent.llm.question_classifier import QuestionClassifier
from transfer_agent.schemas.ai_schemas import Language


@pytest.fixture
def faq():
    return FAQStore()


@pytest.fixture
def classifier():
    return QuestionClassifier()


@pytest.mark.parametrize("text", ["2", "3 suitcases", "yes", "PUJ", "Sedan", "Round trip", "return"])
def test_booking_answers_are_never_faqs(faq, text):
    assert is_booking_input(text)
    assert not faq.is_faq(text)


def test_flight_delay_faq(faq):
    assert faq.is_faq("What if my flight is delayed?")
    assert faq.answer("What if my flight is delayed?").startswith("Flight Delays?")


def test_faq_entries_checked_in_order(faq):
    assert faq.answer("Is it private or shared?").startswith("All our transfers are 100% private")
    assert faq.answer("Do I need to tip?").startswith("Tipping is appreciated")


def test_faq_default_answer(faq):
    assert faq.answer("exclusive service?") == faq.default_answer


def test_detect_language(classifier):
    assert classifier.detect_language("Spanish") == Language.ES
    assert classifier.detect_language("switch to dutch please") == Language.NL
    assert classifier.detect_language("English") == Language.EN
    assert classifier.detect_language("hello") is None


def test_reset_and_greeting(classifier):
    assert classifier.is_reset("Start over")
    assert not classifier.is_reset("should I start over?")
    assert classifier.is_greeting("Hi")
    assert classifier.is_greeting("hello, anyone there")
    assert not classifier.is_greeting("history of the island")


@pytest.mark.parametrize("text", [
    "What's the weather like?",
    "tell me about the beaches",
    "Where will the driver meet me",
    "I have a question",
])
def test_general_questions(classifier, text):
    assert classifier.is_general_question(text)


@pytest.mark.parametrize("text", [
    "2 passengers",
    "yes",
    "PUJ",
    "Sedan",
    "Round trip",
    "Hard Rock Hotel",
    "continue booking",
])
def test_booking_answers_are_not_general_questions(classifier, text):
    assert not classifier.is_general_question(text)


def test_showcase_requests(classifier):
    assert classifier.is_fun_facts_request("fun facts")
    assert classifier.is_photo_request("do you have photos")
    assert classifier.is_vehicle_or_driver_request("see the fleet")
    assert classifier.is_pickup_procedure_request("what's the pickup procedure")
