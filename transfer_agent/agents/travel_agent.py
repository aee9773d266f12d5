# agents/travel_agent.py
"""
Transfer Booking Agent (chat-facing)
Walks a traveller from "PUJ to Hard Rock" to a booking action:

IDLE -> AIRPORT -> HOTEL -> [PROPERTY_RESOLUTION] -> PASSENGERS -> LUGGAGE
     -> VEHICLE_SELECTION -> TRIP_TYPE -> CONFIRMATION -> booking action, IDLE

The core is a reducer, reduce(context, utterance) -> (context, response).
It never mutates the context it is given. Escape hatches (language,
reset, greeting, continue, FAQ, general questions) are an ordered guard
list evaluated before the handler for the current step.

Uses:
- Slot extractors and the hotel resolver for parsing
- Pricing algorithm for the price scan and the final quote
- FAQ store and Q&A service for out-of-flow questions
"""

import asyncio
import random
from typing import Awaitable, Callable, Dict, List, NamedTuple, Optional, Tuple
from loguru import logger

from ..algorithms.hotel_resolver import HotelResolver
from ..algorithms.pricing import build_vehicle_options, calculate_price
from ..constants import (
    CURRENCY,
    FALLBACK_VEHICLE_PRICING,
    PAYMENT_METHODS,
    PAYMENT_PROVIDER,
    QA_HISTORY_KEEP,
    QA_HISTORY_MAX,
)
from ..exceptions import QAServiceError
from ..interfaces.faq_store import faq_store
from ..llm.extractors import ExtractedBookingInfo, slot_extractor
from ..llm.qa_service import GENERIC_HELP_MESSAGE, QAService, qa_service
from ..llm.question_classifier import question_classifier
from ..schemas.ai_schemas import (
    AgentResponse,
    BookingAction,
    BookingContext,
    BookingStep,
    Language,
    PriceScanRequest,
    PriceSource,
    ReferenceData,
    TripType,
)
from ..utils.ai_helpers import (
    AIRPORT_SUGGESTIONS,
    FUN_FACTS,
    HOTEL_SUGGESTIONS,
    LANGUAGE_SWITCH_MESSAGES,
    LANGUAGE_SWITCH_SUGGESTIONS,
    PASSENGER_SUGGESTIONS,
    airport_display_name,
    airport_prompt,
    booking_summary,
    continue_response,
    extracted_recap,
    fun_facts_response,
    gallery_response,
    hotel_prompt,
    instagram_response,
    luggage_prompt,
    passengers_prompt,
    pickup_procedure_response,
    pluralize,
    price_scan_message,
    property_list,
    property_suggestions,
    trip_type_prompt,
    welcome_response,
    with_booking_recap,
)


CONFIRM_WORDS = [
    "yes", "book", "confirm", "proceed", "sounds good", "perfect", "ok", "okay", "sure", "yep",
    "yeah", "go ahead", "do it", "absolutely", "definitely", "please", "ready",
]

QA_SUGGESTIONS_IDLE = ["Book a transfer", "See prices", "Ask another question"]
FAQ_SUGGESTIONS_IDLE = ["Book a transfer", "See prices", "More questions"]


class Turn:
    """One utterance reduced against a working copy of the context"""

    def __init__(self, context: BookingContext, utterance: str):
        self.context = context
        self.text = utterance.strip()
        self.query = self.text.lower()
        self._extracted: Optional[ExtractedBookingInfo] = None

    @property
    def in_flow(self) -> bool:
        return self.context.in_booking_flow


class Guard(NamedTuple):
    """Escape hatch: first guard whose predicate matches handles the turn"""
    name: str
    matches: Callable[[Turn], bool]
    handle: Callable[[Turn], Awaitable[AgentResponse]]


class TravelAgent:
    """
    Dialogue engine for private airport transfers in the Dominican Republic.
    """

    def __init__(
        self,
        reference_data: Optional[ReferenceData] = None,
        qa: Optional[QAService] = None,
        rng: Optional[random.Random] = None,
    ):
        self.qa_service = qa or qa_service
        self.rng = rng or random.Random()
        self.load_reference_data(reference_data or ReferenceData())

        # Stateful wrapper state; the reducer itself never reads these
        self.context = BookingContext()
        self.language = Language.EN

        self.guards: List[Guard] = [
            Guard("language", self._wants_language_switch, self._on_language_switch),
            Guard("reset", lambda t: question_classifier.is_reset(t.text), self._on_reset),
            Guard("greeting", lambda t: not t.in_flow and question_classifier.is_greeting(t.text), self._on_greeting),
            Guard("continue", self._wants_continue, self._on_continue),
            Guard("fast_path", self._has_booking_info, self._on_booking_info),
            Guard("showcase", lambda t: t.in_flow and self._wants_showcase(t), self._on_showcase),
            Guard("faq", lambda t: faq_store.is_faq(t.text), self._on_faq),
            Guard("general_question", lambda t: question_classifier.is_general_question(t.text), self._on_question),
            Guard("step", lambda t: True, self._on_step),
        ]

        self._step_handlers: Dict[BookingStep, Callable[[Turn], AgentResponse]] = {
            BookingStep.AWAITING_AIRPORT: self._handle_airport,
            BookingStep.AWAITING_HOTEL: self._handle_hotel,
            BookingStep.AWAITING_PROPERTY_RESOLUTION: self._handle_property_resolution,
            BookingStep.AWAITING_PASSENGERS: self._handle_passengers,
            BookingStep.AWAITING_LUGGAGE: self._handle_luggage,
            BookingStep.AWAITING_VEHICLE_SELECTION: self._handle_vehicle_selection,
            BookingStep.AWAITING_TRIP_TYPE: self._handle_trip_type,
            BookingStep.AWAITING_CONFIRMATION: self._handle_confirmation,
        }

    def load_reference_data(self, reference_data: ReferenceData):
        """Swap in freshly loaded hotel, vehicle and pricing tables"""
        self.reference_data = reference_data
        self.resolver = HotelResolver(reference_data.hotel_zones)
        logger.info(
            f"TravelAgent: {len(reference_data.hotel_zones)} hotels, "
            f"{len(reference_data.pricing_rules)} pricing rules"
        )

    # ============================================
    # Reducer
    # ============================================

    async def reduce(self, context: BookingContext, utterance: str) -> Tuple[BookingContext, AgentResponse]:
        """
        Process one user utterance.

        Args:
            context: Context after the previous turn (left untouched)
            utterance: Raw user message

        Returns:
            (new context, response)
        """
        turn = Turn(context.model_copy(deep=True), utterance)

        try:
            for guard in self.guards:
                if guard.matches(turn):
                    logger.debug(f"[{context.step.value}] '{turn.text[:60]}' -> {guard.name}")
                    response = await guard.handle(turn)
                    return turn.context, response
        except Exception as e:
            logger.exception(f"TravelAgent failed on '{turn.text[:60]}': {e}")

        # Internal error: the previous context stands
        return context, with_booking_recap(AgentResponse(message=GENERIC_HELP_MESSAGE), context)

    # ============================================
    # Guards
    # ============================================

    def _wants_language_switch(self, turn: Turn) -> bool:
        return question_classifier.detect_language(turn.text) is not None

    async def _on_language_switch(self, turn: Turn) -> AgentResponse:
        language = question_classifier.detect_language(turn.text)
        return AgentResponse(
            message=LANGUAGE_SWITCH_MESSAGES[language],
            suggestions=list(LANGUAGE_SWITCH_SUGGESTIONS[language]),
            language_switch=language,
        )

    async def _on_reset(self, turn: Turn) -> AgentResponse:
        turn.context = BookingContext()
        return welcome_response()

    async def _on_greeting(self, turn: Turn) -> AgentResponse:
        return welcome_response()

    def _wants_continue(self, turn: Turn) -> bool:
        if not turn.in_flow or not question_classifier.is_continue(turn.text):
            return False
        # At confirmation "proceed" means yes
        if turn.context.step == BookingStep.AWAITING_CONFIRMATION and turn.query == "proceed":
            return False
        return True

    async def _on_continue(self, turn: Turn) -> AgentResponse:
        return continue_response(turn.context, self._vehicle_names())

    def _extracted(self, turn: Turn) -> ExtractedBookingInfo:
        if turn._extracted is None:
            turn._extracted = slot_extractor.extract_booking_information(turn.text, self.resolver)
        return turn._extracted

    def _has_booking_info(self, turn: Turn) -> bool:
        if turn.in_flow:
            return False
        if self._extracted(turn).has_info:
            return True
        return self.resolver.check_brand_resolution(turn.text).requires_resolution

    async def _on_booking_info(self, turn: Turn) -> AgentResponse:
        return self.handle_extracted_booking_info(turn.context, turn.text, self._extracted(turn))

    def _wants_showcase(self, turn: Turn) -> bool:
        return (
            question_classifier.is_fun_facts_request(turn.text)
            or question_classifier.is_photo_request(turn.text)
            or question_classifier.is_vehicle_or_driver_request(turn.text)
            or question_classifier.is_pickup_procedure_request(turn.text)
        )

    async def _on_showcase(self, turn: Turn) -> AgentResponse:
        return with_booking_recap(self._showcase(turn), turn.context)

    async def _on_faq(self, turn: Turn) -> AgentResponse:
        response = AgentResponse(message=faq_store.answer(turn.text), suggestions=list(FAQ_SUGGESTIONS_IDLE))
        return with_booking_recap(response, turn.context)

    async def _on_question(self, turn: Turn) -> AgentResponse:
        return await self.answer_question(turn.context, turn.text)

    async def _on_step(self, turn: Turn) -> AgentResponse:
        if turn.context.step == BookingStep.IDLE:
            return await self._handle_idle(turn)
        return self._step_handlers[turn.context.step](turn)

    # ============================================
    # Out-of-flow answers
    # ============================================

    def _showcase(self, turn: Turn) -> AgentResponse:
        if question_classifier.is_fun_facts_request(turn.text):
            return fun_facts_response(self.rng.sample(FUN_FACTS, 3))
        if question_classifier.is_photo_request(turn.text):
            return instagram_response()
        if question_classifier.is_vehicle_or_driver_request(turn.text):
            return gallery_response(self.reference_data.gallery)
        return pickup_procedure_response()

    async def answer_question(self, context: BookingContext, utterance: str) -> AgentResponse:
        """
        Ask the Q&A service; on failure or timeout fall back to the
        generic help message. Mutates context.qa_history on success.
        """
        try:
            answer = await asyncio.wait_for(
                self.qa_service.ask(
                    utterance,
                    history=list(context.qa_history),
                    in_booking_flow=context.in_booking_flow,
                    booking_context=context.slots(),
                ),
                timeout=self.qa_service.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Q&A timed out after {self.qa_service.timeout}s")
            answer = None
        except QAServiceError as e:
            logger.warning(f"Q&A unavailable: {e}")
            answer = None

        if answer is None:
            return with_booking_recap(
                AgentResponse(message=GENERIC_HELP_MESSAGE, suggestions=list(QA_SUGGESTIONS_IDLE)), context
            )

        context.qa_history.extend([
            {"role": "user", "content": utterance},
            {"role": "assistant", "content": answer},
        ])
        if len(context.qa_history) > QA_HISTORY_MAX:
            context.qa_history = context.qa_history[-QA_HISTORY_KEEP:]

        return with_booking_recap(AgentResponse(message=answer, suggestions=list(QA_SUGGESTIONS_IDLE)), context)

    # ============================================
    # IDLE
    # ============================================

    async def _handle_idle(self, turn: Turn) -> AgentResponse:
        if question_classifier.is_booking_related(turn.text):
            return self.start_guided_booking(turn.context)

        if self._wants_showcase(turn):
            return self._showcase(turn)

        return await self.answer_question(turn.context, turn.text)

    def start_guided_booking(self, context: BookingContext) -> AgentResponse:
        if context.airport and context.hotel:
            context.step = BookingStep.AWAITING_PASSENGERS
            return passengers_prompt(
                context,
                f"Perfect! I see you're looking for a transfer from {context.airport} to {context.hotel}.\n\n",
            )
        if context.airport:
            context.step = BookingStep.AWAITING_HOTEL
            return hotel_prompt(f"Great! I see you're arriving at {context.airport}.\n\n")
        if context.hotel:
            context.step = BookingStep.AWAITING_AIRPORT
            return airport_prompt(f"I see you're going to {context.hotel}.\n\n")

        context.step = BookingStep.AWAITING_AIRPORT
        return airport_prompt("Let's get your transfer booked!\n\n")

    # ============================================
    # Fast path
    # ============================================

    def handle_extracted_booking_info(
        self, context: BookingContext, text: str, info: ExtractedBookingInfo
    ) -> AgentResponse:
        """
        Pre-fill every slot found in one message, then jump to the first
        step whose slot is still missing.
        """
        brand = self.resolver.check_brand_resolution(text)
        if brand.requires_resolution:
            context.pending_brand = brand.brand
            context.pending_properties = brand.properties
        else:
            if info.hotel:
                context.hotel = info.hotel
                hotel = self.resolver.find_hotel(info.hotel)
                if hotel:
                    context.resort_property_id = hotel.id
                    context.property_resolved = True
            if info.region:
                context.region = info.region

        if info.airport:
            context.airport = info.airport
        if info.passengers:
            context.passengers = info.passengers
        if info.luggage is not None:
            context.suitcases = info.luggage
        if info.trip_type:
            context.trip_type = info.trip_type

        recap = extracted_recap(context, info.date)

        if info.is_price_inquiry and not context.airport:
            context.step = BookingStep.AWAITING_AIRPORT
            return AgentResponse(
                message=(
                    "I'd be happy to help you with pricing for airport transfers!\n\n"
                    "To give you accurate prices, which airport will you be arriving at?"
                ),
                suggestions=list(AIRPORT_SUGGESTIONS),
            )

        return self._advance(context, recap)

    def _advance(self, context: BookingContext, prefix: Optional[str] = None) -> AgentResponse:
        """Move to the first step whose slot is missing and ask for it"""
        text_prefix = prefix or ""

        if not context.airport:
            context.step = BookingStep.AWAITING_AIRPORT
            return airport_prompt(text_prefix)

        if context.pending_properties and not context.hotel:
            context.step = BookingStep.AWAITING_PROPERTY_RESOLUTION
            return self._property_prompt(context, text_prefix)

        if not context.hotel and not context.region:
            context.step = BookingStep.AWAITING_HOTEL
            return hotel_prompt(text_prefix)

        if not context.passengers:
            context.step = BookingStep.AWAITING_PASSENGERS
            return passengers_prompt(context, prefix)

        if context.suitcases is None:
            context.step = BookingStep.AWAITING_LUGGAGE
            return luggage_prompt(text_prefix)

        return self._price_scan(context, text_prefix)

    # ============================================
    # Step handlers
    # ============================================

    def _handle_airport(self, turn: Turn) -> AgentResponse:
        context = turn.context
        airport = slot_extractor.extract_airport_simple(turn.text)
        if not airport:
            return airport_prompt("I didn't catch that. ")

        context.airport = airport
        airport_name = airport_display_name(airport)
        if context.hotel or context.region or context.pending_properties:
            return self._advance(context, f"Great, {airport_name}!\n\n")

        context.step = BookingStep.AWAITING_HOTEL
        return AgentResponse(
            message=(
                f"Great, {airport_name}!\n\n"
                "Where would you like to go? Just tell me your hotel name or destination."
            ),
            suggestions=list(HOTEL_SUGGESTIONS),
        )

    def _property_prompt(self, context: BookingContext, prefix: str = "") -> AgentResponse:
        brand = (context.pending_brand or "").upper()
        return AgentResponse(
            message=(
                f"{prefix}I found multiple {brand} properties in the Dominican Republic. "
                f"Which one are you going to?\n\n• {property_list(context)}\n\n"
                "Please select one of the properties above."
            ),
            suggestions=property_suggestions(context),
        )

    def _handle_hotel(self, turn: Turn) -> AgentResponse:
        context = turn.context
        resolution = self.resolver.resolve(turn.text)
        logger.debug(f"Hotel step: {resolution!r}")

        if resolution.kind == "brand":
            context.step = BookingStep.AWAITING_PROPERTY_RESOLUTION
            context.pending_brand = resolution.brand
            context.pending_properties = resolution.properties
            return self._property_prompt(context)

        if resolution.kind == "hotel":
            context.hotel = resolution.hotel.hotel_name
            context.region = resolution.hotel.zone_name
            context.resort_property_id = resolution.hotel.id
            context.property_resolved = True
            return self._advance(context)

        hotel_name = slot_extractor.extract_hotel_name(turn.text)

        if resolution.kind == "zone":
            context.hotel = hotel_name if len(hotel_name) > 3 else f"Hotel in {resolution.zone}"
            context.region = resolution.zone
            return self._advance(context)

        if len(hotel_name) > 2:
            estimate = self.resolver.estimate_distance(turn.text, context.airport)
            context.hotel = hotel_name
            context.region = estimate.zone
            context.price_source = PriceSource.ESTIMATED
            logger.info(f"Unknown hotel '{hotel_name}', estimating {estimate.km} km ({estimate.zone})")
            return self._advance(context, f"Got it, {hotel_name}!\n\n")

        return AgentResponse(
            message="Where will you be staying? You can tell me your hotel name, address, or the general area.",
            suggestions=HOTEL_SUGGESTIONS[:3] + ["My hotel is not listed"],
        )

    def _handle_property_resolution(self, turn: Turn) -> AgentResponse:
        context = turn.context
        if not context.pending_properties:
            return AgentResponse(
                message="I'm sorry, there was an error. Please tell me your hotel name again.",
                suggestions=["Hard Rock Hotel", "Dreams Macao", "RIU Palace Bavaro"],
            )

        hotel = self.resolver.resolve_pending(turn.text, context.pending_properties)
        if not hotel:
            brand = (context.pending_brand or "").upper()
            return AgentResponse(
                message=(
                    f"I didn't recognize that property. Please select one of these {brand} properties:"
                    f"\n\n• {property_list(context)}"
                ),
                suggestions=property_suggestions(context),
            )

        context.hotel = hotel.hotel_name
        context.region = hotel.zone_name
        context.resort_property_id = hotel.id
        context.property_resolved = True
        context.pending_brand = None
        context.pending_properties = None
        return self._advance(context)

    def _handle_passengers(self, turn: Turn) -> AgentResponse:
        context = turn.context
        passengers = slot_extractor.extract_passenger_count(turn.text)
        if passengers is None:
            return AgentResponse(
                message="How many passengers will be traveling? This helps me recommend the right vehicle.",
                suggestions=list(PASSENGER_SUGGESTIONS),
            )

        context.passengers = passengers
        if context.suitcases is not None:
            return self._advance(context)

        if passengers <= 2:
            suggestions = ["1 suitcase", "2 suitcases", "3 suitcases"]
        elif passengers <= 4:
            suggestions = ["2 suitcases", "4 suitcases", "6 suitcases"]
        else:
            suggestions = ["4 suitcases", "6 suitcases", "8+ suitcases"]

        context.step = BookingStep.AWAITING_LUGGAGE
        return AgentResponse(
            message=(
                f"Got it, {pluralize(passengers, 'passenger')}.\n\n"
                "How many pieces of luggage? (suitcases, large bags, golf clubs)"
            ),
            suggestions=suggestions,
        )

    def _handle_luggage(self, turn: Turn) -> AgentResponse:
        context = turn.context
        suitcases = slot_extractor.extract_luggage_count(turn.text)
        if suitcases is None:
            return AgentResponse(
                message="How many pieces of luggage will you have? Include checked bags and large carry-ons.",
                suggestions=["2 suitcases", "4 suitcases", "6 suitcases", "8+ suitcases"],
            )

        context.suitcases = suitcases
        return self._advance(context)

    def _price_scan(self, context: BookingContext, prefix: str = "") -> AgentResponse:
        """Price every vehicle for the route and hand the options to the UI"""
        airport = context.airport
        if not context.region:
            context.region = self.resolver.estimate_distance(context.hotel or "", airport).zone
        region = context.region
        hotel = context.hotel or f"Hotel in {region}"
        context.hotel = hotel

        data = self.reference_data
        estimate = self.resolver.estimate_distance(hotel, airport)
        scan = build_vehicle_options(
            airport,
            region,
            context.passengers,
            context.suitcases,
            data.vehicle_types,
            data.pricing_rules,
            estimate.km,
            data.global_discount_percentage,
        )
        if scan.used_fallback and context.price_source != PriceSource.PRICE_MATCH:
            context.price_source = PriceSource.ESTIMATED

        context.step = BookingStep.AWAITING_VEHICLE_SELECTION
        route = f"{airport_display_name(airport)} to {hotel}"
        logger.info(f"Price scan {route}: {len(scan.options)} options, from ${scan.lowest_price}")

        return AgentResponse(
            message=f"{prefix}{price_scan_message(hotel, scan.used_fallback)}",
            price_scan_request=PriceScanRequest(
                airport=airport,
                hotel=hotel,
                region="Estimated Zone" if scan.used_fallback else region,
                base_price=scan.lowest_price,
                route=route,
                passengers=context.passengers,
                luggage=context.suitcases,
                vehicle_options=scan.options,
            ),
            suggestions=[],
        )

    def _vehicle_names(self) -> List[str]:
        names = [v.name for v in self.reference_data.vehicle_types]
        names += [name for name in FALLBACK_VEHICLE_PRICING if name not in names]
        return names

    def _find_vehicle(self, query: str) -> Optional[str]:
        # Longest name first so "Luxury Sedan" wins over "Sedan"
        for name in sorted(self._vehicle_names(), key=len, reverse=True):
            if name.lower() in query:
                return name
        return None

    def vehicle_prompt(self, message: str = "Please select a vehicle to continue with your booking.") -> AgentResponse:
        return AgentResponse(message=message, suggestions=self._vehicle_names()[:4])

    def _handle_vehicle_selection(self, turn: Turn) -> AgentResponse:
        context = turn.context
        vehicle = self._find_vehicle(turn.query)

        if not vehicle:
            if any(word in turn.query for word in ("book", "select", "choose")):
                message = "Which vehicle would you like to book? Please select from the options shown above."
            else:
                message = "Please select a vehicle to continue with your booking."
            return self.vehicle_prompt(message)

        context.vehicle = vehicle
        if context.trip_type:
            self._apply_price(context)
            context.step = BookingStep.AWAITING_CONFIRMATION
            return booking_summary(context)

        context.step = BookingStep.AWAITING_TRIP_TYPE
        return trip_type_prompt(f"Great choice, the {vehicle}!\n\n")

    def _handle_trip_type(self, turn: Turn) -> AgentResponse:
        context = turn.context
        query = turn.query

        if "round" in query or "both" in query or "return" in query:
            context.trip_type = TripType.ROUND_TRIP
        elif "one" in query or "single" in query or "only" in query:
            context.trip_type = TripType.ONE_WAY
        else:
            return trip_type_prompt()

        self._apply_price(context)
        context.step = BookingStep.AWAITING_CONFIRMATION
        return booking_summary(context)

    def _apply_price(self, context: BookingContext):
        data = self.reference_data
        estimate = self.resolver.estimate_distance(context.hotel or "", context.airport)
        quote = calculate_price(
            context.airport,
            context.region,
            context.vehicle,
            context.trip_type,
            data.vehicle_types,
            data.pricing_rules,
            estimate.km,
            data.global_discount_percentage,
            context.matched_price,
        )
        logger.debug(f"Quote for {context.vehicle}: {quote!r}")

        context.price = quote.price
        if quote.price_source == PriceSource.PRICE_MATCH:
            context.price_source = PriceSource.PRICE_MATCH
            if context.original_price is None:
                context.original_price = quote.original_price
            return

        context.original_price = quote.original_price
        # An unresolved hotel stays estimated even if its guessed zone has rules
        if context.price_source != PriceSource.ESTIMATED:
            context.price_source = quote.price_source

    def _handle_confirmation(self, turn: Turn) -> AgentResponse:
        context = turn.context
        query = turn.query

        if "start over" in query or "cancel" in query or query == "no":
            turn.context = BookingContext(qa_history=context.qa_history)
            return welcome_response()

        if "change vehicle" in query or "different vehicle" in query:
            context.step = BookingStep.AWAITING_VEHICLE_SELECTION
            return AgentResponse(message="Which vehicle would you prefer?", suggestions=self._vehicle_names()[:4])

        for name in self._vehicle_names():
            if query == name.lower():
                context.vehicle = name
                self._apply_price(context)
                return booking_summary(context)

        if any(word in query for word in CONFIRM_WORDS):
            return self._trigger_booking(turn)

        return AgentResponse(
            message="Would you like to proceed with this booking?",
            suggestions=["Yes, book now!", "Change vehicle", "Start over"],
        )

    def _trigger_booking(self, turn: Turn) -> AgentResponse:
        context = turn.context
        action = BookingAction(
            airport=context.airport,
            hotel=context.hotel,
            region=context.region,
            vehicle=context.vehicle,
            passengers=context.passengers,
            suitcases=context.suitcases,
            trip_type=context.trip_type,
            price=context.price,
            currency=CURRENCY,
            payment_provider=PAYMENT_PROVIDER,
            payment_methods=list(PAYMENT_METHODS),
            price_source=context.price_source or PriceSource.STANDARD,
            original_price=context.original_price or context.price,
        )
        logger.info(
            f"Booking action: {action.airport} -> {action.hotel}, {action.vehicle}, "
            f"{action.trip_type.value}, ${action.price} ({action.price_source.value})"
        )

        turn.context = BookingContext(qa_history=context.qa_history)
        return AgentResponse(
            message="Opening your secure booking form...\n\nYou're just a few clicks away from a stress-free arrival!",
            booking_action=action,
            suggestions=[],
        )

    # ============================================
    # Context builders for UI re-entry
    # ============================================

    def price_scan_context(
        self,
        context: BookingContext,
        airport: str,
        hotel: str,
        region: str,
        passengers: int,
        luggage: int,
    ) -> BookingContext:
        """Context after the user picked from the price scanner"""
        return BookingContext(
            step=BookingStep.AWAITING_VEHICLE_SELECTION,
            airport=airport,
            hotel=hotel,
            region=region,
            passengers=passengers,
            suitcases=luggage,
            qa_history=list(context.qa_history),
        )

    def price_match_context(
        self,
        context: BookingContext,
        airport: str,
        hotel: str,
        region: str,
        base_price: int,
        matched_price: int,
    ) -> Tuple[BookingContext, AgentResponse]:
        """Context and reply after a lower competitor price was accepted"""
        new_context = BookingContext(
            step=BookingStep.AWAITING_PASSENGERS,
            airport=airport,
            hotel=hotel,
            region=region,
            price_source=PriceSource.PRICE_MATCH,
            original_price=base_price,
            matched_price=matched_price,
            qa_history=list(context.qa_history),
        )
        logger.info(f"Price match accepted: ${matched_price} (was ${base_price}) for {airport} -> {hotel}")
        response = AgentResponse(
            message=(
                f"Great! I'll honor that ${matched_price} price for you. Let's complete your booking.\n\n"
                "How many travelers will be in your group?"
            ),
            suggestions=list(PASSENGER_SUGGESTIONS),
        )
        return new_context, response

    def landing_page_context(
        self,
        context: BookingContext,
        airport: Optional[str] = None,
        destination: Optional[str] = None,
    ) -> BookingContext:
        """Pre-fill airport and destination from a landing page link"""
        context = context.model_copy(deep=True)
        if airport:
            context.airport = airport.upper()
        if destination:
            hotel = self.resolver.find_hotel(destination)
            if hotel:
                context.hotel = hotel.hotel_name
                context.region = hotel.zone_name
                context.resort_property_id = hotel.id
                context.property_resolved = True
            else:
                context.hotel = destination
                context.region = self.resolver.estimate_distance(destination, context.airport).zone
        return context

    # ============================================
    # Stateful wrappers
    # ============================================

    async def process_message(self, utterance: str) -> AgentResponse:
        """Reduce against the agent's own context and keep the result"""
        self.context, response = await self.reduce(self.context, utterance)
        if response.language_switch:
            self.set_language(response.language_switch)
        return response

    async def process_query(self, utterance: str) -> AgentResponse:
        return await self.process_message(utterance)

    def set_context_for_price_scan(self, airport: str, hotel: str, region: str, passengers: int, luggage: int):
        self.context = self.price_scan_context(self.context, airport, hotel, region, passengers, luggage)

    def apply_price_match(self, airport: str, hotel: str, region: str, base_price: int, matched_price: int) -> AgentResponse:
        self.context, response = self.price_match_context(
            self.context, airport, hotel, region, base_price, matched_price
        )
        return response

    def set_landing_page_context(self, airport: Optional[str] = None, destination: Optional[str] = None):
        self.context = self.landing_page_context(self.context, airport, destination)

    def has_landing_page_context(self) -> bool:
        return bool(self.context.airport or self.context.hotel)

    def reset_context(self):
        self.context = BookingContext()

    def get_greeting(self) -> AgentResponse:
        return welcome_response()

    def is_in_booking_flow(self) -> bool:
        return self.context.in_booking_flow

    def set_language(self, language: Language):
        self.language = language
        logger.info(f"Language set to {language.value}")


# ============================================
# Global Instance
# ============================================

travel_agent = TravelAgent()
