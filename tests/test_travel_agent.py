# tests/test_travel_agent.py
"""
Dialogue engine: booking flows, escape hatches and Q&A handling
"""

import asyncio
import random

import pytest

from transfer_agent.agents.travel_agent import TravelAgent
from transfer_agent.llm.qa_service import GENERIC_HELP_MESSAGE
from transfer_agent.schemas.ai_schemas import (
    BookingContext,
    BookingStep,
    Language,
    PriceSource,
    TripType,
)

from conftest import FailingQA, SlowQA, build_reference_data, run_turns


QUESTION = "What's the weather like?"


def at_luggage_step() -> BookingContext:
    return BookingContext(
        step=BookingStep.AWAITING_LUGGAGE,
        airport="PUJ",
        hotel="Hard Rock Hotel",
        region="Punta Cana",
        passengers=2,
    )


# ============================================
# Happy paths
# ============================================

def test_full_booking_with_pricing_rule(agent):
    context, response = run_turns(agent, None, "PUJ to Hard Rock Hotel")
    assert context.step == BookingStep.AWAITING_PASSENGERS
    assert context.airport == "PUJ"
    assert context.hotel == "Hard Rock Hotel"
    assert context.region == "Punta Cana"

    context, response = run_turns(agent, context, "2 passengers")
    assert context.step == BookingStep.AWAITING_LUGGAGE
    assert context.passengers == 2

    context, response = run_turns(agent, context, "3 suitcases")
    assert context.step == BookingStep.AWAITING_VEHICLE_SELECTION
    scan = response.price_scan_request
    assert scan.type == "PRICE_SCAN"
    assert scan.region == "Punta Cana"
    assert scan.base_price == 40
    assert scan.route == "Punta Cana International Airport to Hard Rock Hotel"
    assert [o.name for o in scan.vehicle_options if o.recommended] == ["Sedan"]

    context, response = run_turns(agent, context, "Sedan")
    assert context.step == BookingStep.AWAITING_TRIP_TYPE
    assert context.vehicle == "Sedan"

    context, response = run_turns(agent, context, "Round trip")
    assert context.step == BookingStep.AWAITING_CONFIRMATION
    assert context.trip_type == TripType.ROUND_TRIP
    assert context.price == 76
    assert context.price_source == PriceSource.STANDARD
    assert "Total: $76 USD" in response.message

    context, response = run_turns(agent, context, "Yes, book now!")
    action = response.booking_action
    assert action.action == "START_BOOKING"
    assert action.vehicle == "Sedan"
    assert action.price == 76
    assert action.original_price == 76
    assert action.currency == "USD"
    assert action.payment_provider == "Stripe"
    assert action.price_source == PriceSource.STANDARD
    assert context.step == BookingStep.IDLE
    assert context.airport is None


def test_unpriced_zone_uses_estimated_pricing(agent):
    context, response = run_turns(agent, None, "PUJ to Casa de Campo", "2 passengers", "2 suitcases")
    assert context.step == BookingStep.AWAITING_VEHICLE_SELECTION
    assert context.price_source == PriceSource.ESTIMATED
    scan = response.price_scan_request
    assert scan.region == "Estimated Zone"
    assert scan.base_price == 45
    assert len(scan.vehicle_options) == 6

    context, response = run_turns(agent, context, "Sedan", "One-way")
    assert context.price == 45
    assert context.price_source == PriceSource.ESTIMATED

    _, response = run_turns(agent, context, "yes")
    assert response.booking_action.price_source == PriceSource.ESTIMATED


def test_discount_reaches_final_price(fake_qa):
    agent = TravelAgent(reference_data=build_reference_data(discount=10), qa=fake_qa)
    context, _ = run_turns(agent, None, "PUJ to Hard Rock Hotel", "2", "2", "Sedan", "Round trip")
    assert context.price == 68
    assert context.original_price == 76


def test_guided_booking_from_idle(agent):
    context, response = run_turns(agent, None, "I want to book a transfer")
    assert context.step == BookingStep.AWAITING_AIRPORT
    assert "Which airport" in response.message

    context, response = run_turns(agent, context, "PUJ")
    assert context.step == BookingStep.AWAITING_HOTEL

    context, _ = run_turns(agent, context, "Hard Rock")
    assert context.step == BookingStep.AWAITING_PASSENGERS
    assert context.hotel == "Hard Rock Hotel"


def test_one_message_fast_path_fills_every_slot(agent):
    context, response = run_turns(
        agent, None, "Flying into Punta Cana with 4 adults, 5 suitcases, staying at Hard Rock"
    )
    assert context.passengers == 4
    assert context.suitcases == 5
    assert context.step == BookingStep.AWAITING_VEHICLE_SELECTION
    assert response.message.startswith("Perfect! Here's what I have:")
    assert [o.name for o in response.price_scan_request.vehicle_options if o.recommended] == ["Minivan"]


def test_trip_type_known_skips_trip_type_step(agent):
    context, _ = run_turns(agent, None, "PUJ to Hard Rock Hotel one way", "2", "2", "SUV")
    assert context.step == BookingStep.AWAITING_CONFIRMATION
    assert context.price == 50


def test_price_inquiry_without_airport_asks_for_airport(agent):
    context, response = run_turns(agent, None, "How much is a transfer?")
    assert context.step == BookingStep.AWAITING_AIRPORT
    assert "pricing" in response.message


# ============================================
# Brand disambiguation and unknown hotels
# ============================================

def test_brand_resolution_at_hotel_step(agent):
    context = BookingContext(step=BookingStep.AWAITING_HOTEL, airport="PUJ")
    context, response = run_turns(agent, context, "I'm staying at a Bahia Principe")
    assert context.step == BookingStep.AWAITING_PROPERTY_RESOLUTION
    assert response.suggestions == ["Bahia Principe Grand Turquesa", "Bahia Principe Luxury Ambar"]

    context, response = run_turns(agent, context, "not sure")
    assert context.step == BookingStep.AWAITING_PROPERTY_RESOLUTION
    assert "didn't recognize" in response.message

    context, _ = run_turns(agent, context, "Bahia Principe Luxury Ambar")
    assert context.step == BookingStep.AWAITING_PASSENGERS
    assert context.hotel == "Bahia Principe Luxury Ambar"
    assert context.region == "Bavaro"
    assert context.property_resolved
    assert context.pending_properties is None


def test_brand_from_idle_asks_airport_then_property(agent):
    context, _ = run_turns(agent, None, "I'm staying at a Bahia Principe")
    assert context.step == BookingStep.AWAITING_AIRPORT
    assert context.pending_brand == "Bahia Principe"

    context, response = run_turns(agent, context, "PUJ")
    assert context.step == BookingStep.AWAITING_PROPERTY_RESOLUTION
    assert response.message.startswith("Great, Punta Cana International Airport!")


def test_unknown_hotel_is_estimated_and_stays_estimated(agent):
    context = BookingContext(step=BookingStep.AWAITING_HOTEL, airport="PUJ")
    context, response = run_turns(agent, context, "Casa Bonita Guesthouse")
    assert context.hotel == "Casa Bonita Guesthouse"
    assert context.region == "Residential"
    assert context.price_source == PriceSource.ESTIMATED
    assert context.step == BookingStep.AWAITING_PASSENGERS

    context, _ = run_turns(agent, context, "2", "2", "Sedan", "One-way")
    assert context.price_source == PriceSource.ESTIMATED


# ============================================
# Escape hatches
# ============================================

def test_reducer_does_not_mutate_its_input(agent):
    context = at_luggage_step()
    snapshot = context.model_dump()
    asyncio.run(agent.reduce(context, "3 suitcases"))
    asyncio.run(agent.reduce(context, QUESTION))
    assert context.model_dump() == snapshot


def test_start_over_resets_from_any_step(agent):
    context, response = run_turns(agent, at_luggage_step(), "start over")
    assert context == BookingContext()
    assert response.message.startswith("Welcome to Dominican Transfers!")


def test_greeting_only_when_idle(agent):
    _, response = run_turns(agent, None, "Hello")
    assert response.message.startswith("Welcome")

    context, response = run_turns(agent, at_luggage_step(), "hi")
    assert context.step == BookingStep.AWAITING_LUGGAGE
    assert not response.message.startswith("Welcome")


def test_continue_restates_pending_question(agent):
    context, response = run_turns(agent, at_luggage_step(), "Continue booking")
    assert context == at_luggage_step()
    assert "Your booking so far:" in response.message
    assert "✓ Hotel: Hard Rock Hotel" in response.message
    assert response.message.endswith("How many suitcases will you have in total?")
    assert response.suggestions[-1] == "Ask a question"


def test_proceed_at_confirmation_books(agent):
    context, _ = run_turns(agent, None, "PUJ to Hard Rock Hotel", "2", "2", "Sedan", "One-way")
    assert context.step == BookingStep.AWAITING_CONFIRMATION

    context, response = run_turns(agent, context, "proceed")
    assert response.booking_action is not None
    assert response.booking_action.price == 40


def test_faq_mid_flow_keeps_step_and_adds_recap(agent):
    context, response = run_turns(agent, at_luggage_step(), "What if my flight is delayed?")
    assert context.step == BookingStep.AWAITING_LUGGAGE
    assert response.message.startswith("Flight Delays?")
    assert "Your booking in progress: Airport: PUJ, Hotel: Hard Rock Hotel, 2 passengers" in response.message
    assert response.suggestions == ["Continue booking", "Ask another question", "Start over"]


def test_faq_at_idle_has_no_recap(agent):
    context, response = run_turns(agent, None, "What if my flight is delayed?")
    assert context.step == BookingStep.IDLE
    assert "booking in progress" not in response.message


def test_booking_answers_never_leave_the_flow(agent):
    context = at_luggage_step()
    for answer in ["yes", "PUJ", "Round trip", "Sedan"]:
        new_context, response = run_turns(agent, context, answer)
        assert new_context.step == BookingStep.AWAITING_LUGGAGE
        assert "booking in progress" not in response.message


STEP_ORDER = list(BookingStep)

NON_RESET_INPUTS = ["PUJ", "Hard Rock Hotel", "4", "SUV", "Round trip", QUESTION, "asdfgh qwerty"]


def context_at(step: BookingStep) -> BookingContext:
    """Context parked at a step with every earlier slot filled"""
    context = BookingContext(step=step)
    if step == BookingStep.AWAITING_AIRPORT:
        return context
    context.airport = "PUJ"
    if step == BookingStep.AWAITING_HOTEL:
        return context
    if step == BookingStep.AWAITING_PROPERTY_RESOLUTION:
        context.pending_brand = "Bahia Principe"
        context.pending_properties = [h for h in build_reference_data().hotel_zones if h.brand_name]
        return context
    context.hotel = "Hard Rock Hotel"
    context.region = "Punta Cana"
    if step == BookingStep.AWAITING_PASSENGERS:
        return context
    context.passengers = 2
    if step == BookingStep.AWAITING_LUGGAGE:
        return context
    context.suitcases = 2
    if step == BookingStep.AWAITING_VEHICLE_SELECTION:
        return context
    context.vehicle = "Sedan"
    if step == BookingStep.AWAITING_TRIP_TYPE:
        return context
    context.trip_type = TripType.ROUND_TRIP
    context.price = 76
    context.price_source = PriceSource.STANDARD
    return context


@pytest.mark.parametrize("step", STEP_ORDER[1:])
@pytest.mark.parametrize("utterance", NON_RESET_INPUTS)
def test_step_never_moves_backwards(agent, step, utterance):
    new_context, response = run_turns(agent, context_at(step), utterance)
    if new_context.step == BookingStep.IDLE:
        # Only a completed booking may leave the flow here
        assert response.booking_action is not None
    else:
        assert STEP_ORDER.index(new_context.step) >= STEP_ORDER.index(step)


@pytest.mark.parametrize("utterance,airport,hotel", [
    ("PUJ to Hard Rock Hotel", "PUJ", "Hard Rock Hotel"),
    ("LRM to Casa de Campo", "LRM", "Casa de Campo"),
])
def test_route_message_goes_through_fast_path(agent, utterance, airport, hotel):
    context, response = run_turns(agent, None, utterance)
    assert context.step == BookingStep.AWAITING_PASSENGERS
    assert context.airport == airport
    assert context.hotel == hotel


def test_route_message_with_unknown_destination_asks_for_hotel(agent):
    context, response = run_turns(agent, None, "sdq to downtown")
    assert context.step == BookingStep.AWAITING_HOTEL
    assert context.airport == "SDQ"


def test_confirmation_change_vehicle_and_cancel(agent):
    context, _ = run_turns(agent, None, "PUJ to Hard Rock Hotel", "2", "2", "Sedan", "Round trip")

    changed, response = run_turns(agent, context, "Change vehicle")
    assert changed.step == BookingStep.AWAITING_VEHICLE_SELECTION

    repriced, response = run_turns(agent, context, "suv")
    assert repriced.vehicle == "SUV"
    assert repriced.price == 95
    assert repriced.step == BookingStep.AWAITING_CONFIRMATION

    cancelled, response = run_turns(agent, context, "no")
    assert cancelled.step == BookingStep.IDLE
    assert cancelled.vehicle is None


def test_language_switch(agent):
    context, response = run_turns(agent, at_luggage_step(), "Spanish")
    assert response.language_switch == Language.ES
    assert response.message == "Idioma cambiado a Español"
    assert context == at_luggage_step()


def test_language_switch_updates_stateful_wrapper(agent):
    asyncio.run(agent.process_message("switch to dutch"))
    assert agent.language == Language.NL


# ============================================
# Showcase content
# ============================================

def test_fun_facts_are_sampled_from_rng(reference_data, fake_qa):
    agent = TravelAgent(reference_data=reference_data, qa=fake_qa, rng=random.Random(7))
    _, response = run_turns(agent, None, "fun facts")
    assert response.message.startswith("Fun Facts about the Dominican Republic:")
    assert "3. " in response.message
    assert "4. " not in response.message


def test_fleet_gallery(agent, reference_data):
    _, response = run_turns(agent, None, "see the fleet")
    assert response.gallery_images == reference_data.gallery


def test_fleet_gallery_mid_flow_keeps_booking(agent):
    context, response = run_turns(agent, at_luggage_step(), "see the fleet")
    assert context.step == BookingStep.AWAITING_LUGGAGE
    assert response.gallery_images
    assert "Continue booking" in response.message


# ============================================
# Q&A
# ============================================

def test_general_question_goes_to_qa_with_history(agent, fake_qa):
    context, response = run_turns(agent, None, QUESTION)
    assert response.message == fake_qa.answer
    assert context.qa_history == [
        {"role": "user", "content": QUESTION},
        {"role": "assistant", "content": fake_qa.answer},
    ]
    assert fake_qa.calls[0]["in_booking_flow"] is False


def test_qa_mid_flow_sends_booking_context(agent, fake_qa):
    context, response = run_turns(agent, at_luggage_step(), QUESTION)
    assert context.step == BookingStep.AWAITING_LUGGAGE
    assert response.message.startswith(fake_qa.answer)
    call = fake_qa.calls[0]
    assert call["in_booking_flow"] is True
    assert call["booking_context"]["hotel"] == "Hard Rock Hotel"
    assert "qa_history" not in call["booking_context"]


def test_qa_history_is_trimmed(agent, fake_qa):
    context = BookingContext()
    for _ in range(7):
        context, _ = run_turns(agent, context, QUESTION)
    assert len(fake_qa.calls[-1]["history"]) == 12
    assert len(context.qa_history) == 8
    assert context.qa_history[-1]["role"] == "assistant"


def test_qa_history_survives_completed_booking(agent):
    context, _ = run_turns(agent, None, QUESTION)
    context, response = run_turns(
        agent, context, "PUJ to Hard Rock Hotel", "2", "2", "Sedan", "One-way", "yes"
    )
    assert response.booking_action is not None
    assert len(context.qa_history) == 2


def test_qa_failure_falls_back_to_generic_help(reference_data):
    agent = TravelAgent(reference_data=reference_data, qa=FailingQA())
    context, response = run_turns(agent, at_luggage_step(), QUESTION)
    assert response.message.startswith(GENERIC_HELP_MESSAGE)
    assert "Your booking in progress" in response.message
    assert context.qa_history == []
    assert context.step == BookingStep.AWAITING_LUGGAGE


def test_qa_timeout_falls_back_to_generic_help(reference_data):
    agent = TravelAgent(reference_data=reference_data, qa=SlowQA(timeout=0.01))
    _, response = run_turns(agent, None, QUESTION)
    assert response.message == GENERIC_HELP_MESSAGE


def test_internal_error_keeps_previous_context(agent):
    def explode(turn):
        raise RuntimeError("boom")

    agent._step_handlers[BookingStep.AWAITING_LUGGAGE] = explode
    context = at_luggage_step()
    new_context, response = asyncio.run(agent.reduce(context, "3 suitcases"))
    assert new_context is context
    assert response.message.startswith(GENERIC_HELP_MESSAGE)


# ============================================
# UI re-entry
# ============================================

def test_price_match_flow(agent):
    agent.reset_context()
    response = agent.apply_price_match("PUJ", "Hard Rock Hotel", "Punta Cana", 60, 50)
    assert "$50" in response.message
    assert agent.context.step == BookingStep.AWAITING_PASSENGERS

    for utterance in ["2 passengers", "2 suitcases", "Sedan", "One-way"]:
        asyncio.run(agent.process_message(utterance))
    assert agent.context.price == 50
    assert agent.context.price_source == PriceSource.PRICE_MATCH

    response = asyncio.run(agent.process_message("Yes, book now!"))
    action = response.booking_action
    assert action.price == 50
    assert action.original_price == 60
    assert action.price_source == PriceSource.PRICE_MATCH


def test_price_scan_reentry(agent):
    context = agent.price_scan_context(BookingContext(), "PUJ", "Hard Rock Hotel", "Punta Cana", 2, 2)
    assert context.step == BookingStep.AWAITING_VEHICLE_SELECTION

    context, response = run_turns(agent, context, "Minivan")
    assert context.step == BookingStep.AWAITING_TRIP_TYPE
    assert context.vehicle == "Minivan"


def test_landing_page_context(agent):
    context = agent.landing_page_context(BookingContext(), airport="puj", destination="hard rock")
    assert context.airport == "PUJ"
    assert context.hotel == "Hard Rock Hotel"

    context, _ = run_turns(agent, context, "book a transfer")
    assert context.step == BookingStep.AWAITING_PASSENGERS


def test_stateful_wrappers(agent):
    agent.reset_context()
    assert not agent.has_landing_page_context()
    assert agent.get_greeting().message.startswith("Welcome")

    agent.set_landing_page_context(airport="SDQ", destination="Casa de Campo")
    assert agent.has_landing_page_context()
    assert agent.context.region == "La Romana"

    response = asyncio.run(agent.process_query("book a transfer"))
    assert agent.is_in_booking_flow()
    assert "How many passengers" in response.message

    agent.set_context_for_price_scan("PUJ", "Hard Rock Hotel", "Punta Cana", 2, 2)
    assert agent.context.step == BookingStep.AWAITING_VEHICLE_SELECTION
