# utils/ai_helpers.py
"""
Response Helpers
Message text, suggestion chips and booking recaps for the chat widget
"""

from typing import List, Optional

from ..constants import AIRPORTS
from ..schemas.ai_schemas import AgentResponse, BookingContext, BookingStep, GalleryItem, Language


AIRPORT_SUGGESTIONS = ["PUJ - Punta Cana", "SDQ - Santo Domingo", "LRM - La Romana", "POP - Puerto Plata"]
HOTEL_SUGGESTIONS = ["Hard Rock Hotel", "Iberostar Bavaro", "Dreams Macao", "Hyatt Zilara Cap Cana"]
PASSENGER_SUGGESTIONS = ["1 passenger", "2 passengers", "3-4 passengers", "5-6 passengers", "7+ passengers"]
LUGGAGE_SUGGESTIONS = ["1-2 suitcases", "3-4 suitcases", "5-6 suitcases", "No luggage"]
TRIP_TYPE_SUGGESTIONS = ["One-way", "Round trip"]
CONFIRMATION_SUGGESTIONS = ["Yes, book now!", "Change vehicle", "Start over"]
WELCOME_SUGGESTIONS = [
    "PUJ to Hard Rock Hotel",
    "PUJ to Iberostar Bavaro",
    "SDQ to JW Marriott",
    "What if my flight is delayed?",
    "How does pickup work?",
]

LANGUAGE_SWITCH_MESSAGES = {
    Language.EN: "Language changed to English",
    Language.NL: "Taal gewijzigd naar Nederlands",
    Language.ES: "Idioma cambiado a Español",
}

LANGUAGE_SWITCH_SUGGESTIONS = {
    Language.EN: ["Book Now", "Another question", "Tell me about services"],
    Language.NL: ["Boek Nu", "Nog een vraag", "Tell me about services"],
    Language.ES: ["Reservar Ahora", "Otra pregunta", "Tell me about services"],
}

INCLUDED_SERVICES = (
    "✓ Meet & greet at arrivals\n"
    "✓ Flight tracking\n"
    "✓ Professional driver\n"
    "✓ All taxes & fees\n"
    "✓ Free cancellation (24hrs)"
)


def format_price(price: float) -> str:
    """
    Format a whole-dollar price

    Returns:
        str: e.g. "$45"
    """
    return f"${int(price)}"


def pluralize(count: int, word: str) -> str:
    """'1 passenger', '2 passengers', '0 suitcases'"""
    return f"{count} {word}{'' if count == 1 else 's'}"


def airport_display_name(code: str) -> str:
    """Airport name without the code suffix, or the code itself"""
    name = AIRPORTS.get(code)
    if not name:
        return code
    return name.split(" (")[0]


# ============================================
# Prompts
# ============================================

def welcome_response() -> AgentResponse:
    return AgentResponse(
        message=(
            "Welcome to Dominican Transfers!\n\n"
            "I'll help you book a comfortable ride to your destination.\n\n"
            "What's included:\n\n"
            "✓ Private airport pickups\n"
            "✓ Meet & greet at arrivals\n"
            "✓ Free flight tracking\n"
            "✓ English-speaking drivers\n"
            "✓ 24/7 support\n\n"
            'Just tell me your route (like "PUJ to Hard Rock Hotel") or ask me anything!'
        ),
        suggestions=list(WELCOME_SUGGESTIONS),
    )


def airport_prompt(prefix: str = "") -> AgentResponse:
    return AgentResponse(
        message=f"{prefix}Which airport will you be arriving at?",
        suggestions=list(AIRPORT_SUGGESTIONS),
    )


def hotel_prompt(prefix: str = "") -> AgentResponse:
    return AgentResponse(
        message=f"{prefix}Where would you like to go? Tell me your hotel name or destination.",
        suggestions=list(HOTEL_SUGGESTIONS),
    )


def passengers_prompt(context: BookingContext, prefix: Optional[str] = None) -> AgentResponse:
    if prefix is None:
        prefix = f"Excellent! Transfer from {airport_display_name(context.airport or '')} to {context.hotel}.\n\n"
    return AgentResponse(
        message=f"{prefix}How many passengers will be traveling? (including children)",
        suggestions=list(PASSENGER_SUGGESTIONS),
    )


def luggage_prompt(prefix: str = "") -> AgentResponse:
    return AgentResponse(
        message=f"{prefix}How many suitcases will you have in total?",
        suggestions=list(LUGGAGE_SUGGESTIONS),
    )


def trip_type_prompt(prefix: str = "") -> AgentResponse:
    return AgentResponse(
        message=(
            f"{prefix}Would you prefer a one-way transfer or round trip?\n\n"
            "✓ One-way: Airport to hotel\n"
            "✓ Round trip: Both ways (best value!)"
        ),
        suggestions=list(TRIP_TYPE_SUGGESTIONS),
    )


def property_list(context: BookingContext) -> str:
    properties = context.pending_properties or []
    return "\n• ".join(f"{p.hotel_name} ({p.zone_name})" for p in properties)


def property_suggestions(context: BookingContext) -> List[str]:
    return [p.hotel_name for p in (context.pending_properties or [])[:4]]


def step_suggestions(step: BookingStep, context: BookingContext, vehicle_names: List[str]) -> List[str]:
    """Chips shown under the current step's prompt"""
    if step == BookingStep.AWAITING_AIRPORT:
        return ["PUJ - Punta Cana", "SDQ - Santo Domingo", "LRM - La Romana", "Ask a question"]
    if step == BookingStep.AWAITING_HOTEL:
        return ["Hard Rock Hotel", "Iberostar Bavaro", "Dreams Macao", "Ask a question"]
    if step == BookingStep.AWAITING_PROPERTY_RESOLUTION:
        return property_suggestions(context) or ["Ask a question"]
    if step == BookingStep.AWAITING_PASSENGERS:
        return ["1 passenger", "2 passengers", "3-4 passengers", "Ask a question"]
    if step == BookingStep.AWAITING_LUGGAGE:
        return ["2 suitcases", "4 suitcases", "6 suitcases", "Ask a question"]
    if step == BookingStep.AWAITING_VEHICLE_SELECTION:
        return vehicle_names[:3] + ["Ask a question"]
    if step == BookingStep.AWAITING_TRIP_TYPE:
        return ["One-way", "Round trip", "Ask a question"]
    if step == BookingStep.AWAITING_CONFIRMATION:
        return ["Yes, book now!", "Change vehicle", "Start over", "Ask a question"]
    return ["Book a transfer", "See prices", "Ask a question"]


def step_prompt(context: BookingContext) -> str:
    """The question the current step is waiting on"""
    step = context.step
    if step == BookingStep.AWAITING_AIRPORT:
        return "Which airport will you be arriving at?"
    if step == BookingStep.AWAITING_HOTEL:
        return "Where would you like to go? Tell me your hotel name or destination."
    if step == BookingStep.AWAITING_PROPERTY_RESOLUTION:
        return f"Which property are you going to?\n\n• {property_list(context)}"
    if step == BookingStep.AWAITING_PASSENGERS:
        return "How many passengers will be traveling? (including children)"
    if step == BookingStep.AWAITING_LUGGAGE:
        return "How many suitcases will you have in total?"
    if step == BookingStep.AWAITING_VEHICLE_SELECTION:
        return "Which vehicle would you like? Select one of the options to continue."
    if step == BookingStep.AWAITING_TRIP_TYPE:
        return "Would you prefer a one-way transfer or round trip?"
    if step == BookingStep.AWAITING_CONFIRMATION:
        return 'Ready to book? Type "Yes, book now!" to complete your reservation.'
    return "How can I help you today?"


# ============================================
# Recaps and summaries
# ============================================

def recap_parts(context: BookingContext) -> List[str]:
    """Filled slots, in display order"""
    parts = []
    if context.airport:
        parts.append(f"Airport: {context.airport}")
    if context.hotel:
        parts.append(f"Hotel: {context.hotel}")
    if context.passengers:
        parts.append(f"{context.passengers} passengers")
    if context.suitcases is not None:
        parts.append(f"{context.suitcases} suitcases")
    if context.vehicle:
        parts.append(f"Vehicle: {context.vehicle}")
    if context.trip_type:
        parts.append(context.trip_type.value)
    if context.price:
        parts.append(format_price(context.price))
    return parts


def booking_recap(context: BookingContext) -> str:
    parts = recap_parts(context)
    if not parts:
        return ""
    if context.step == BookingStep.AWAITING_CONFIRMATION:
        return "\n\n📋 Your booking is ready to confirm:\n" + ", ".join(parts)
    return "\n\n📋 Your booking in progress: " + ", ".join(parts)


def with_booking_recap(response: AgentResponse, context: BookingContext) -> AgentResponse:
    """
    Append the in-progress booking and a resume reminder to an
    out-of-flow answer. Responses outside a booking are returned as is.
    """
    if not context.in_booking_flow:
        return response

    at_confirmation = context.step == BookingStep.AWAITING_CONFIRMATION
    if at_confirmation:
        reminder = '✅ Ready to book? Type "Yes, book now!" to complete your reservation.'
        suggestions = ["Yes, book now!", "Ask another question", "Change vehicle"]
    else:
        reminder = 'Type "Continue booking" when you\'re ready to proceed with your transfer.'
        suggestions = ["Continue booking", "Ask another question", "Start over"]

    return response.model_copy(update={
        "message": f"{response.message}{booking_recap(context)}\n\n{reminder}",
        "suggestions": suggestions,
    })


def extracted_recap(context: BookingContext, date: Optional[str] = None) -> str:
    """Checklist shown after the one-message fast path"""
    lines = []
    if context.airport:
        lines.append(f"✓ {airport_display_name(context.airport)}")
    if date:
        lines.append(f"✓ Arriving {date}")
    if context.passengers:
        lines.append(f"✓ {pluralize(context.passengers, 'passenger')}")
    if context.hotel:
        lines.append(f"✓ {context.hotel}")
    elif context.region:
        lines.append(f"✓ {context.region}")
    if context.suitcases is not None:
        lines.append(f"✓ {pluralize(context.suitcases, 'suitcase')}")
    if context.trip_type:
        lines.append(f"✓ {context.trip_type.value}")

    if not lines:
        return ""
    return "Perfect! Here's what I have:\n\n" + "\n".join(lines) + "\n\n"


def booking_summary(context: BookingContext) -> AgentResponse:
    airport_name = airport_display_name(context.airport or "PUJ")
    suitcases = context.suitcases or 0
    message = (
        "Booking Summary\n\n"
        f"Route: {airport_name} → {context.hotel}\n"
        f"Vehicle: {context.vehicle}\n"
        f"Passengers: {context.passengers}\n"
        f"Luggage: {suitcases} piece{'' if suitcases == 1 else 's'}\n"
        f"Service: {context.trip_type.value if context.trip_type else ''}\n\n"
        f"Total: {format_price(context.price or 0)} USD\n\n"
        f"Included:\n\n{INCLUDED_SERVICES}\n\n"
        "Ready to book?"
    )
    return AgentResponse(message=message, suggestions=list(CONFIRMATION_SUGGESTIONS))


def price_scan_message(hotel: str, used_fallback: bool) -> str:
    if used_fallback:
        return f"Calculating estimated rates for your transfer to {hotel}..."
    return "Scanning live market rates for your transfer..."


def continue_response(context: BookingContext, vehicle_names: List[str]) -> AgentResponse:
    """Resume the booking: filled slots, then the pending question"""
    lines = []
    if context.airport:
        lines.append(f"✓ Airport: {context.airport}")
    if context.hotel:
        lines.append(f"✓ Hotel: {context.hotel}")
    if context.passengers:
        lines.append(f"✓ {context.passengers} passengers")
    if context.suitcases is not None:
        lines.append(f"✓ {context.suitcases} suitcases")
    if context.vehicle:
        lines.append(f"✓ Vehicle: {context.vehicle}")
    if context.trip_type:
        lines.append(f"✓ {context.trip_type.value}")

    progress = "\n\nYour booking so far:\n" + "\n".join(lines) + "\n\n" if lines else "\n\n"
    return AgentResponse(
        message=f"Perfect! Let's continue with your booking.{progress}{step_prompt(context)}",
        suggestions=step_suggestions(context.step, context, vehicle_names),
    )


# ============================================
# Showcase content
# ============================================

FUN_FACTS = [
    "The Dominican Republic was the first place Columbus landed in 1492, and he is buried in Santo Domingo!",
    "Baseball is basically a religion here. The DR has produced more MLB players per capita than any other country!",
    "Pico Duarte is the highest peak in the Caribbean at 3,098m!",
    "The merengue dance was invented here!",
    "Larimar, a beautiful blue stone, is found ONLY in the Dominican Republic.",
    "Santo Domingo has the first cathedral, hospital, and university in the Americas!",
    "Dominican coffee was once used as currency!",
    "The DR shares the island of Hispaniola with Haiti.",
]


def fun_facts_response(facts: List[str]) -> AgentResponse:
    numbered = "\n\n".join(f"{i}. {fact}" for i, fact in enumerate(facts, 1))
    return AgentResponse(
        message=(
            f"Fun Facts about the Dominican Republic:\n\n{numbered}\n\n"
            "Want to explore this amazing island? I can help you book your transfer!"
        ),
        suggestions=["Book a transfer", "More fun facts", "PUJ to Hard Rock Hotel"],
    )


def instagram_response() -> AgentResponse:
    return AgentResponse(
        message=(
            "Check out our Instagram for photos of our fleet and happy customers!\n\n"
            "@dominicantransfers\nhttps://www.instagram.com/dominicantransfers/\n\n"
            "You'll find:\n\n"
            "✓ Our premium vehicles\n"
            "✓ Happy travelers\n"
            "✓ Beautiful Dominican destinations\n\n"
            "Follow us for travel tips and special offers!"
        ),
        suggestions=["Book a transfer", "See vehicles", "PUJ - Punta Cana"],
    )


def gallery_response(items: List[GalleryItem]) -> AgentResponse:
    if not items:
        return AgentResponse(
            message=(
                "Let me tell you about our fleet! We have modern, well-maintained vehicles ranging from "
                "comfortable sedans to spacious vans. All our drivers are professional, experienced, and "
                "dedicated to making your trip safe and comfortable.\n\nWould you like to book a transfer?"
            ),
            suggestions=["Book a transfer", "Check prices", "Ask another question"],
        )
    return AgentResponse(
        message=(
            "Here are our vehicles and team! 📸\n\n"
            "All our vehicles are professionally maintained and cleaned after every trip. Our drivers are "
            "experienced, licensed, and friendly, ready to make your transfer comfortable and safe!\n\n"
            "Would you like to book a transfer?"
        ),
        gallery_images=list(items),
        suggestions=["Book a transfer", "Check prices", "View destinations", "Ask another question"],
    )


def pickup_procedure_response() -> AgentResponse:
    return AgentResponse(
        message=(
            "How Your Pickup Works:\n\n"
            "1. Before You Land - Your driver tracks your flight\n\n"
            "2. At Arrivals - Driver waits with a sign showing YOUR NAME\n\n"
            "3. Easy to Spot - Branded shirts in the pickup zone\n\n"
            "4. Full Assistance - Help with luggage to your vehicle\n\n"
            "5. Direct Transfer - Straight to your hotel!\n\n"
            "You'll get a WhatsApp with your driver's name, photo, and contact before pickup."
        ),
        suggestions=["Book now", "What if my flight is delayed?", "See prices"],
    )
