# tests/test_extractors.py
"""
Slot extractors: airports, passengers, luggage, trip type, dates
and the one-message fast path
"""

import pytest

from transfer_agent.algorithms.hotel_resolver import HotelResolver
from transfer_agent.llm.extractors import WORD_NUMBERS, slot_extractor
from transfer_agent.schemas.ai_schemas import TripType


@pytest.mark.parametrize("text,code", [
    ("PUJ", "PUJ"),
    ("landing at Punta Cana airport", "PUJ"),
    ("arriving at santo domingo", "SDQ"),
    ("LRM please", "LRM"),
    ("from puerto plata", "POP"),
])
def test_extract_airport(text, code):
    assert slot_extractor.extract_airport(text) == code


def test_extract_airport_simple_ignores_pop_inside_words():
    assert slot_extractor.extract_airport_simple("population?") is None
    assert slot_extractor.extract_airport_simple("POP") == "POP"
    assert slot_extractor.extract_airport_simple("la romana") == "LRM"


def test_passenger_count_accepts_every_digit_in_range():
    for n in range(1, 51):
        assert slot_extractor.extract_passenger_count(str(n)) == n


def test_passenger_count_accepts_number_words():
    for word, value in WORD_NUMBERS.items():
        if value > 50:
            continue
        assert slot_extractor.extract_passenger_count(word) == value, word


def test_passenger_count_rejects_out_of_range():
    assert slot_extractor.extract_passenger_count("0") is None
    assert slot_extractor.extract_passenger_count("51 people") is None
    assert slot_extractor.extract_passenger_count("not sure") is None


@pytest.mark.parametrize("text", ["fifty one passengers", "sixty", "ninety-nine people", "one hundred passengers", "two thousand"])
def test_passenger_count_rejects_large_number_words(text):
    assert slot_extractor.extract_passenger_count(text) is None


def test_passenger_count_shortcuts():
    assert slot_extractor.extract_passenger_count("just me") == 1
    assert slot_extractor.extract_passenger_count("a couple") == 2
    assert slot_extractor.extract_passenger_count("3-4 passengers") == 4
    assert slot_extractor.extract_passenger_count("7+ passengers") == 8


def test_luggage_count():
    assert slot_extractor.extract_luggage_count("3 suitcases") == 3
    assert slot_extractor.extract_luggage_count("No luggage") == 0
    assert slot_extractor.extract_luggage_count("8+ suitcases") == 10
    assert slot_extractor.extract_luggage_count("1-2 suitcases") == 2
    assert slot_extractor.extract_luggage_count("hmm") is None
    assert slot_extractor.extract_luggage_count("fifty bags") == 50
    assert slot_extractor.extract_luggage_count("fifty five bags") is None
    assert slot_extractor.extract_luggage_count("one hundred suitcases") is None
    assert slot_extractor.extract_luggage_count("sixty") is None


def test_trip_type_prefers_round_trip():
    assert slot_extractor.extract_trip_type("round trip") == TripType.ROUND_TRIP
    assert slot_extractor.extract_trip_type("one way") == TripType.ONE_WAY
    assert slot_extractor.extract_trip_type("one way or return?") == TripType.ROUND_TRIP
    assert slot_extractor.extract_trip_type("hello") is None


def test_extract_date_month_first():
    assert slot_extractor.extract_date("arriving on March 3").lower() == "march 3"
    assert slot_extractor.extract_date("see you 2 january") == "january 2"


def test_extract_date_needs_whole_keyword():
    assert slot_extractor.extract_date("Hilton 2 passengers") is None
    assert slot_extractor.extract_date("upcoming 5 days") is None


def test_hotel_name_drops_stop_words():
    assert slot_extractor.extract_hotel_name("PUJ to casa bonita") == "Casa Bonita"


def test_booking_information_multi_slot(reference_data):
    resolver = HotelResolver(reference_data.hotel_zones)
    info = slot_extractor.extract_booking_information(
        "Flying into Punta Cana with 4 adults, 5 suitcases, staying at Hard Rock, round trip", resolver
    )
    assert info.has_info
    assert info.airport == "PUJ"
    assert info.passengers == 4
    assert info.luggage == 5
    assert info.hotel == "Hard Rock Hotel"
    assert info.region == "Punta Cana"
    assert info.trip_type == TripType.ROUND_TRIP


def test_booking_information_price_inquiry():
    info = slot_extractor.extract_booking_information("How much is a transfer?")
    assert info.has_info
    assert info.is_price_inquiry
    assert info.airport is None


def test_booking_information_nothing_found():
    info = slot_extractor.extract_booking_information("hello there")
    assert not info.has_info
