# interfaces/faq_store.py
"""
FAQ Store for canned transfer answers
Covers the questions travellers ask mid-booking:
- Flight delays and tracking
- Pickup / meeting the driver
- Private vs shared
- Pricing (per vehicle, what's included)
- Cancellation, payment, tipping, child seats, safety
"""

import re
from typing import List, Optional
from dataclasses import dataclass, field
from loguru import logger


@dataclass
class FAQEntry:
    """One canned answer and the substrings that select it"""
    topic: str
    triggers: List[str]
    answer: str


# Phrases that mark a message as an FAQ. Substring match on the lowercased text.
FAQ_PHRASES = [
    # Pickup & meeting point
    "where can i meet", "where do i meet", "where will i meet", "where to meet",
    "meet my driver", "meet the driver", "find my driver", "find the driver",
    "driver meet me", "driver location", "pickup location", "pickup point",
    "where driver", "driver where", "driver wait", "driver waiting",
    "arrivals hall", "arrivals area", "after customs", "baggage claim",
    "exit from airport", "leaving airport", "where exactly will",
    "which exit", "terminal exit", "arrivals door",
    # Flight delay & tracking
    "flight delay", "flight delayed", "flight late", "plane late",
    "delayed flight", "late flight", "flight arrives late",
    "will driver wait", "driver wait for me", "wait for delayed",
    "track my flight", "flight tracking", "monitor flight",
    "do you track flights", "automatic tracking", "flight monitor",
    "what if late", "arrive late", "plane delayed",
    # Pickup process
    "how does pickup work", "how pickup works", "pickup process",
    "airport pickup", "pickup procedure", "how to get picked up",
    "what happens after i land", "what happens when i arrive",
    "after landing", "upon arrival", "when i arrive",
    "step by step", "pickup instructions", "how do i",
    # Vehicle & comfort
    "air conditioned", "air conditioning", "ac in car", "vehicles modern",
    "what type of vehicle", "what kind of car", "vehicle type",
    "comfortable vehicle", "clean vehicle", "vehicle condition",
    "modern fleet", "new cars", "well maintained",
    "vehicle amenities", "wifi in car", "bottled water",
    # Child seats & special equipment
    "child seat", "baby seat", "car seat", "booster seat",
    "infant seat", "child safety", "kids seat",
    "wheelchair", "wheelchair accessible", "disability",
    "special needs", "accessibility", "walker",
    # Pricing
    "per person", "per passenger", "price per person", "cost per person",
    "private transfer", "shared transfer", "is it private", "is it shared",
    "hidden fee", "hidden charge", "extra fee", "additional cost",
    "price change", "price increase", "surge pricing",
    "final price", "fixed price", "guaranteed price",
    "night surcharge", "weekend rate", "holiday pricing",
    "per vehicle pricing", "total cost", "all inclusive",
    # Tipping
    "tip driver", "tipping", "gratuity", "should i tip",
    "tip included", "is tip included", "how much to tip",
    "tip expected", "tip mandatory", "tips required",
    "do i need to tip", "tipping culture", "gratuity included",
    # Safety & insurance
    "is it safe", "are transfers safe", "safe to use", "safety",
    "licensed driver", "insured vehicle", "insurance", "safer than taxi",
    "background check", "vetted drivers", "professional drivers",
    "driver credentials", "certified drivers", "registered company",
    "liability insurance", "vehicle insurance", "passenger insurance",
    # Service area & availability
    "what airport", "which airport", "what cities", "service area",
    "operate at night", "late night", "early morning", "24 hour",
    "do you operate", "available at", "service available",
    "which destinations", "where do you go", "coverage area",
    "24/7 service", "midnight pickup", "red-eye flight",
    # Cancellation & changes
    "cancellation", "cancel booking", "refund", "cancel policy",
    "cancellation policy", "free cancellation", "cancellation fee",
    "change booking", "modify booking", "reschedule",
    "change date", "change time", "update booking",
    "refund policy", "money back", "cancel for free",
    # Payment
    "payment method", "how to pay", "accept card", "credit card",
    "secure payment", "payment secure", "stripe payment",
    "debit card", "cash payment", "pay online", "prepayment",
    "pay driver", "payment options", "apple pay", "google pay",
    "ideal payment", "bank transfer", "paypal",
    # Communication & confirmation
    "how will i know", "confirmation", "booking confirmation",
    "will i get confirmation", "email confirmation", "sms",
    "whatsapp", "text message", "driver details",
    "will you contact", "how do you contact", "notification",
    "contact information", "phone number", "driver phone",
    # Service type
    "private or shared", "just my group", "only us",
    "shuttle service", "shared shuttle", "private ride",
    "other passengers", "alone in car", "exclusive",
    "direct transfer", "no stops", "straight to hotel",
    # Luggage
    "luggage space", "how much luggage", "suitcase limit",
    "oversized luggage", "golf clubs", "surfboard",
    "sports equipment", "extra bags", "trunk space",
    # Wait time
    "waiting time", "free waiting", "will you wait for me",
    "how long will driver wait", "complimentary waiting",
    "wait at airport", "patience", "delayed passenger",
    # Duration
    "how long does transfer take", "how long is drive", "drive time",
    "transfer duration", "journey time", "travel time",
    "how many minutes", "distance to", "time to get",
    # Round trip
    "can i book round-trip", "can i book pickup and drop-off",
    "is round-trip cheaper", "round trip discount",
    "both ways", "return transfer", "return journey",
    "back to airport", "round trip savings",
    # Groups
    "large group", "big group", "many people", "group discount",
    "wedding", "corporate", "business", "event",
    "multiple stops", "stop along way", "detour",
    # Drivers
    "speak english", "english speaking", "driver language",
    "professional driver", "experienced driver", "trained driver",
    "driver uniform", "how will i recognize", "driver badge",
    # Long-form questions
    "how does airport pickup work", "how does airport transfer work",
    "how do i get picked up", "what is the airport pickup process",
    "how will driver find me", "where will driver meet",
    "is driver waiting in arrivals", "what airports do you",
    "do you pick up from", "which airports", "is pickup available from",
    "what if flight is delayed", "will driver leave if",
    "is there a waiting time", "what if immigration takes",
    "is airport pickup available", "can i get picked up after midnight",
    "are vehicles air-conditioned", "do you have ac in",
    "can you accommodate large groups", "do you have vans for groups",
    "do you transport big families", "do you have child seats",
    "is price per person", "do i pay per person", "is transfer price shared",
    "how is transfer price calculated", "are airport pickup prices fixed",
    "are there hidden fees", "will price change after",
    "is price guaranteed", "do prices increase at night",
    "is tipping expected", "do i need to tip driver", "is gratuity included",
    "how much should i tip", "are tips mandatory",
    "is airport pickup safe", "is airport transfer safe",
    "are drivers licensed", "is it safe to use private transfers",
    "are vehicles insured", "is this safer than taxi",
    "how do i book airport pickup", "can i book before arriving",
    "how far in advance should i book",
    "what should i do if i cant find my driver",
    "what if i dont see my driver", "who do i contact if driver missing",
    "customer support", "help line", "emergency contact",
]

# Single keywords that also mark a message as an FAQ
FAQ_KEYWORDS = [
    "private", "shared", "shuttle", "delay", "delayed",
    "meet driver", "find driver", "driver wait",
    "per person", "per vehicle", "included",
    "tip", "tipping", "gratuity",
    "child seat", "baby seat", "car seat",
    "cancel", "refund", "cancellation",
    "payment", "secure", "stripe",
    "safe", "safety", "licensed", "insured",
    "track", "waiting", "pickup procedure",
    "confirmation", "whatsapp", "sms",
    "round trip", "round-trip", "return",
    "baggage", "luggage space", "trunk",
    "accessibility", "wheelchair", "special needs",
]

# Messages shaped like an answer to a booking prompt are never FAQs
BOOKING_INPUT_PATTERNS = [
    r"^\d+\s*(passenger|people|person|suitcase|bag|luggage)?s?$",
    r"^(yes|no|ok|okay|sure|nope|yep|yeah|nah|alright|continue|proceed|go ahead|next|back)$",
    r"^(puj|sdq|lrm|pop|punta cana|santo domingo|la romana|puerto plata)$",
    r"^(sedan|minivan|suv|suburban|sprinter|mini bus|bus|van|car)$",
    r"^(one-way|round trip|roundtrip|one way|both ways|return|just one way)$",
]


def is_booking_input(text: str) -> bool:
    """Bare number, yes/no, airport code, vehicle name or trip-type word"""
    trimmed = text.strip().lower()
    return any(re.match(pattern, trimmed, re.IGNORECASE) for pattern in BOOKING_INPUT_PATTERNS)


class FAQStore:
    """
    Canned answers for transfer FAQs.
    Entries are checked in order; the first whose trigger appears wins.
    """

    def __init__(self):
        self.entries: List[FAQEntry] = []
        self.default_answer = ""
        self._init_default_faqs()

    def _init_default_faqs(self):
        """Initialize the canned answers"""
        self.entries = [
            FAQEntry(
                topic="delay",
                triggers=["delay", "late flight", "track"],
                answer=(
                    "Flight Delays? No Problem!\n\n"
                    "✓ We track your flight in real-time\n"
                    "✓ Driver adjusts automatically to delays\n"
                    "✓ No extra charges ever\n"
                    "✓ 30 minutes or 3 hours late - same price\n\n"
                    "You'll never be stranded!"
                ),
            ),
            FAQEntry(
                topic="pickup",
                triggers=["meet", "find", "driver", "pickup"],
                answer=(
                    "How Your Pickup Works:\n\n"
                    "1. Driver waits at arrivals with YOUR NAME on a sign\n"
                    "2. Free flight tracking - no rush!\n"
                    "3. Easy to spot in branded shirts\n"
                    "4. Help with all your luggage\n"
                    "5. Direct to your hotel\n\n"
                    "You'll get driver details via WhatsApp before pickup!"
                ),
            ),
            FAQEntry(
                topic="private",
                triggers=["private", "shared", "shuttle"],
                answer=(
                    "All our transfers are 100% private - just you and your party in the vehicle.\n\n"
                    "No shared rides, no waiting. Direct to your destination!"
                ),
            ),
            FAQEntry(
                topic="pricing",
                triggers=["per person", "per vehicle", "include"],
                answer=(
                    "Our prices are per vehicle, not per person!\n\n"
                    "Every booking includes:\n\n"
                    "✓ Meet & greet service\n"
                    "✓ Flight tracking\n"
                    "✓ Luggage assistance\n"
                    "✓ All taxes and fees\n"
                    "✓ No hidden charges"
                ),
            ),
            FAQEntry(
                topic="cancellation",
                triggers=["cancel", "refund"],
                answer=(
                    "Free Cancellation up to 24 hours before your transfer.\n\n"
                    "Plans change - we understand! Full details in your confirmation email."
                ),
            ),
            FAQEntry(
                topic="payment",
                triggers=["payment", "secure", "stripe"],
                answer=(
                    "Secure Payments via Stripe\n\n"
                    "Your card details are encrypted and never stored. Pay with:\n\n"
                    "✓ Credit/Debit Card\n"
                    "✓ iDEAL\n"
                    "✓ Apple Pay\n"
                    "✓ Google Pay"
                ),
            ),
            FAQEntry(
                topic="tipping",
                triggers=["tip", "tipping", "gratuity"],
                answer=(
                    "Tipping is appreciated but not required!\n\n"
                    "Our drivers are well-paid professionals. If you'd like to tip for "
                    "exceptional service, 10-15% is customary."
                ),
            ),
            FAQEntry(
                topic="child_seats",
                triggers=["child seat", "baby seat", "car seat"],
                answer=(
                    "Child Seats Available!\n\n"
                    "We provide complimentary child seats upon request. "
                    "Just mention it in your special requests when booking!"
                ),
            ),
            FAQEntry(
                topic="safety",
                triggers=["safe", "safety", "licensed", "insured"],
                answer=(
                    "Your Safety is Our Priority!\n\n"
                    "✓ Licensed, background-checked drivers\n"
                    "✓ Fully insured vehicles\n"
                    "✓ Modern, well-maintained fleet\n"
                    "✓ GPS-tracked for your security\n"
                    "✓ 24/7 customer support\n\n"
                    "Safer than taxis, more reliable than rideshares!"
                ),
            ),
        ]

        self.default_answer = (
            "Why Choose Dominican Transfers?\n\n"
            "✓ 100% private transfers\n"
            "✓ English-speaking drivers\n"
            "✓ Free flight tracking\n"
            "✓ Prices per vehicle\n"
            "✓ All taxes included\n"
            "✓ Free cancellation (24hrs)\n"
            "✓ Secure Stripe payments\n"
            "✓ 24/7 support\n\n"
            "How can I help you today?"
        )
        logger.debug(f"FAQStore initialized with {len(self.entries)} answers")

    def is_faq(self, text: str) -> bool:
        """Whether the message should get a canned answer"""
        if is_booking_input(text):
            return False
        lower = text.lower()
        if any(phrase in lower for phrase in FAQ_PHRASES):
            return True
        return any(keyword in lower for keyword in FAQ_KEYWORDS)

    def find_entry(self, text: str) -> Optional[FAQEntry]:
        lower = text.lower()
        for entry in self.entries:
            if any(trigger in lower for trigger in entry.triggers):
                return entry
        return None

    def answer(self, text: str) -> str:
        """Canned answer for the message, or the general pitch"""
        entry = self.find_entry(text)
        if entry:
            logger.debug(f"FAQ answer: {entry.topic}")
            return entry.answer
        return self.default_answer


# Global instance
faq_store = FAQStore()


def answer_faq(text: str) -> str:
    """Answer a transfer FAQ"""
    return faq_store.answer(text)
