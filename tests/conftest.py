# tests/conftest.py
"""
Shared fixtures: a small reference data set and fake Q&A backends
"""

import asyncio
from typing import Dict, List, Optional, Any

import pytest

from transfer_agent.agents.travel_agent import TravelAgent
from transfer_agent.exceptions import QAServiceError
from transfer_agent.schemas.ai_schemas import (
    BookingContext,
    GalleryItem,
    HotelZone,
    PricingRule,
    ReferenceData,
    VehicleType,
)


def build_reference_data(discount: float = 0) -> ReferenceData:
    hotels = [
        HotelZone(id="h1", hotel_name="Hard Rock Hotel", zone_name="Punta Cana", search_terms=["hard rock"]),
        HotelZone(
            id="h2",
            hotel_name="Bahia Principe Luxury Ambar",
            zone_name="Bavaro",
            brand_name="Bahia Principe",
            search_terms=["luxury ambar"],
        ),
        HotelZone(
            id="h3",
            hotel_name="Bahia Principe Grand Turquesa",
            zone_name="Bavaro",
            brand_name="Bahia Principe",
            search_terms=["grand turquesa"],
        ),
        HotelZone(id="h4", hotel_name="Casa de Campo", zone_name="La Romana", search_terms=["casa de campo"]),
    ]
    vehicles = [
        VehicleType(id="v1", name="Sedan", passenger_capacity=3, luggage_capacity=3),
        VehicleType(id="v2", name="SUV", passenger_capacity=4, luggage_capacity=4),
        VehicleType(id="v3", name="Minivan", passenger_capacity=6, luggage_capacity=6),
    ]
    rules = [
        PricingRule(id="r1", origin="PUJ", destination="Punta Cana", vehicle_type_id="v1", base_price=40),
        PricingRule(id="r2", origin="PUJ", destination="Punta Cana", vehicle_type_id="v2", base_price=50),
        PricingRule(id="r3", origin="PUJ", destination="Punta Cana", vehicle_type_id="v3", base_price=70),
        PricingRule(id="r4", origin="PUJ", destination="Bavaro", vehicle_type_id="v3", base_price=65),
        PricingRule(id="r5", origin="PUJ", destination="Bavaro", vehicle_type_id="v1", base_price=35),
        PricingRule(id="r6", origin="PUJ", destination="Bavaro", vehicle_type_id="v2", base_price=45),
    ]
    gallery = [
        GalleryItem(url="https://cdn.example.com/van.jpg", title="Our vans"),
        GalleryItem(url="https://cdn.example.com/team.jpg", title="Our team", description="Drivers"),
    ]
    return ReferenceData(
        hotel_zones=hotels,
        vehicle_types=vehicles,
        pricing_rules=rules,
        global_discount_percentage=discount,
        gallery=gallery,
    )


class FakeQA:
    """Q&A stand-in that records its calls"""

    backend = "fake"

    def __init__(self, answer: str = "Sunny and warm all year.", timeout: float = 1):
        self.answer = answer
        self.timeout = timeout
        self.calls: List[Dict[str, Any]] = []

    async def ask(self, utterance, history=None, in_booking_flow=False, booking_context=None):
        self.calls.append({
            "utterance": utterance,
            "history": list(history or []),
            "in_booking_flow": in_booking_flow,
            "booking_context": booking_context,
        })
        return self.answer


class FailingQA(FakeQA):
    async def ask(self, utterance, history=None, in_booking_flow=False, booking_context=None):
        raise QAServiceError("Q&A service returned 503")


class SlowQA(FakeQA):
    async def ask(self, utterance, history=None, in_booking_flow=False, booking_context=None):
        await asyncio.sleep(5)
        return self.answer


@pytest.fixture
def reference_data() -> ReferenceData:
    return build_reference_data()


@pytest.fixture
def fake_qa() -> FakeQA:
    return FakeQA()


@pytest.fixture
def agent(reference_data, fake_qa) -> TravelAgent:
    return TravelAgent(reference_data=reference_data, qa=fake_qa)


def run_turns(agent: TravelAgent, context: Optional[BookingContext], *utterances: str):
    """Feed utterances through the reducer; returns the last (context, response)"""
    context = context or BookingContext()
    response = None
    for utterance in utterances:
        context, response = asyncio.run(agent.reduce(context, utterance))
    return context, response
