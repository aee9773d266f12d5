# llm/question_classifier.py
"""
Message classifier for the transfer concierge
Decides what kind of message arrived before any booking step sees it:
- Language switch, reset, greeting, continue
- General question (goes to the Q&A service)
- Showcase requests (fun facts, photos, fleet gallery, pickup procedure)

The general-question check is a heuristic: trigger phrases, question
words and a trailing "?", minus messages shaped like booking answers.
"""

import re
from typing import Optional, List
from loguru import logger

from ..schemas.ai_schemas import Language


GREETINGS = [
    "hello", "hi", "hey", "hola", "good morning", "good afternoon",
    "good evening", "howdy", "greetings", "start",
]

RESET_COMMANDS = ["start over", "reset", "cancel booking"]

CONTINUE_KEYWORDS = ["continue", "resume", "back to booking", "proceed"]

BOOKING_KEYWORDS = [
    "book", "transfer", "airport", "price", "cost", "how much",
    "quote", "rate", "reservation", "ride", "taxi", "transport", "pickup",
    "vehicle", "car", "van", "suv", "shuttle",
]

EXPLICIT_QUESTION_TRIGGERS = [
    "ask a question", "ask another question", "another question", "tell me about",
    "more questions", "i have a question", "quick question", "can i ask",
]

TRANSPORT_QUESTIONS = [
    # Pickup & meeting point
    "where will the driver", "where does the driver", "where do i meet", "where can i meet",
    "where to meet", "where will i meet", "where should i meet", "how do i find",
    "how will i find", "where will you pick", "where do you pick up",
    "what is the pickup location", "what is the meeting point", "meeting point",
    "where exactly", "which terminal", "arrivals hall", "after customs", "after immigration",
    # Driver & service
    "will the driver wait", "does the driver wait", "how long will driver wait",
    "what if i cant find driver", "driver contact", "how to contact driver",
    "will i receive driver info", "driver details", "driver name",
    "speak english", "english speaking", "language", "driver speaks",
    "professional driver", "licensed driver", "experienced driver",
    # Flight delays
    "what if flight delayed", "what if my flight", "if flight is late",
    "delayed flight", "late flight", "flight delay", "plane delayed",
    "do you track flight", "flight tracking", "monitor my flight",
    "what if immigration", "what if customs", "long immigration line",
    # Vehicle & comfort
    "what type of vehicle", "what kind of car", "vehicle type", "what vehicle",
    "air conditioned", "air conditioning", "ac in car", "clean vehicle",
    "comfortable", "modern vehicle", "new vehicle", "vehicle condition",
    "size of vehicle", "how big is", "vehicle capacity",
    # Luggage & extras
    "child seat", "baby seat", "car seat", "booster seat", "infant seat",
    "golf clubs", "surfboard", "oversized luggage", "extra luggage",
    "wheelchair", "accessibility", "special needs", "assistance",
    # Pricing & payment
    "is price per person", "per person or per vehicle", "price per passenger",
    "per vehicle", "total price", "final price", "fixed price",
    "hidden fees", "extra charges", "additional cost", "price change",
    "surge pricing", "night charge", "weekend charge",
    "how to pay", "payment method", "accept card", "credit card",
    "debit card", "cash", "pay online", "pay driver", "prepay",
    "secure payment", "payment secure", "safe to pay",
    # Service type
    "private transfer", "shared transfer", "is it private", "is it shared",
    "shuttle service", "shared shuttle", "private ride", "just us",
    "other passengers", "alone in car", "only my group",
    # Tipping
    "tip included", "is tip included", "should i tip", "do i tip",
    "how much to tip", "tipping", "gratuity", "tip driver",
    "tip expected", "tip mandatory", "tips required",
    # Safety & insurance
    "is it safe", "are you safe", "safe to use", "safety",
    "insured", "insurance", "vehicle insurance", "liability",
    "licensed", "legal", "registered", "authorized",
    "background check", "vetted driver", "trusted",
    # Cancellation & changes
    "cancellation policy", "can i cancel", "cancel booking", "refund",
    "free cancellation", "cancellation fee", "change booking",
    "modify booking", "reschedule", "change date", "change time",
    # Service area & availability
    "what airports", "which airports", "do you cover", "service area",
    "available at", "operate at", "24 hour", "24/7", "all day",
    "late night", "early morning", "midnight", "available when",
    # Booking process
    "how to book", "how do i book", "booking process", "when to book",
    "how far in advance", "book ahead", "last minute", "same day",
    "book now or later", "when should i book",
    # Duration & waiting
    "how long does transfer take", "how long is drive", "drive time",
    "transfer duration", "journey time", "travel time", "how many minutes",
    "waiting time", "free waiting", "will you wait for me",
    # Communication
    "will you contact me", "how will i know", "confirmation",
    "will i get details", "booking confirmation", "email confirmation",
    "whatsapp", "sms", "text message", "phone number",
    # Comparisons
    "vs taxi", "versus taxi", "better than taxi", "compared to taxi",
    "vs uber", "versus uber", "difference between", "why choose you",
    # Round trip
    "can i book round trip", "both ways", "return transfer", "round trip discount",
    "cheaper round trip", "return journey", "back to airport",
    # Groups & special requests
    "large group", "big group", "many people", "group discount",
    "wedding", "corporate", "business", "event", "special request",
    "special requirements", "multiple stops", "stop along way",
]

STRONG_QUESTION_INDICATORS = [
    "what is", "what are", "what does", "what if", "what about", "what should", "what would",
    "who is", "who are", "who do", "who will", "who can",
    "when is", "when do", "when does", "when will", "when should", "when can",
    "where is", "where are", "where do", "where will", "where should", "where can",
    "why is", "why do", "why does", "why should", "why would", "why cant",
    "how does", "how do", "how can", "how will", "how should", "how long", "how much does", "how many",
    "can you tell", "could you explain", "could you tell", "would you explain",
    "tell me about", "tell me more", "explain to me", "let me know",
    "i want to know", "i would like to know", "i need to know",
    "is it safe", "is it possible", "is there", "is this",
    "are you", "are there", "are these",
    "do you", "does it", "does this", "do i need",
    "will you", "will it", "will i", "will there",
    "should i", "should we", "would you", "would it",
]

CONTINUATION_KEYWORDS = [
    "continue", "resume", "proceed", "back to booking", "keep going",
    "go on", "next step", "continue booking", "finish booking",
]

DOMINICAN_KEYWORDS = [
    "dominican", "punta cana", "santo domingo", "weather", "climate",
    "temperature", "season", "rain", "sunny", "beach", "beaches",
    "restaurant", "restaurants", "food", "dining", "eat",
    "attraction", "attractions", "things to do", "activities",
    "excursion", "tour", "sightseeing", "visit",
    "culture", "history", "people", "language", "currency",
    "merengue", "bachata", "baseball", "fun facts",
]

PHOTO_KEYWORDS = [
    "photo", "photos", "picture", "pictures", "pic", "pics",
    "image", "images", "gallery", "see your", "show me",
    "instagram", "insta", "look like", "what do your",
    "vehicle photos", "car photos", "fleet photos",
]

VEHICLE_DRIVER_PHRASES = [
    "what does the van look like", "what does the car look like",
    "what do the vans look like", "what do the cars look like",
    "show me the van", "show me the car", "show me the vehicle", "show me the fleet",
    "see the van", "see the car", "see the vehicle", "see the fleet",
    "who is going to pick me up", "who will pick me up", "who picks me up",
    "meet my driver", "see my driver", "show me the driver", "show me my driver",
    "what does your driver look like",
    "picture of the van", "picture of the car", "picture of the vehicle", "picture of the driver",
]

PICKUP_PROCEDURE_PHRASES = ["pickup procedure", "how does pickup work", "real human"]

FUN_FACT_PHRASES = ["fun facts", "about dominican"]

# Booking-answer shapes that are never general questions
BARE_NUMBER_PATTERN = r"^\d+\s*(passenger|people|person|suitcase|bag|luggage)?s?$"
SIMPLE_RESPONSE_PATTERN = r"^(yes|no|ok|okay|sure|nope|yep|yeah|nah|alright|continue|proceed|go ahead|next|back)$"
BARE_AIRPORT_PATTERN = r"^(puj|sdq|lrm|pop|punta cana|santo domingo|la romana|puerto plata)$"
BARE_VEHICLE_PATTERN = r"^(sedan|minivan|suv|suburban|sprinter|mini bus|bus|van|car)$"
BARE_TRIP_TYPE_PATTERN = r"^(one-way|round trip|roundtrip|one way|both ways|return|just one way)$"

QUESTION_WORD_PATTERN = r"\b(what|where|when|why|how|who|which|can|do|does|is|are|will|should|could|would|may)\b"
HOTEL_KEYWORD_PATTERN = r"\b(hotel|resort|iberostar|hard rock|dreams|hyatt|marriott|hilton|now|secrets|excellence|bahia|majestic|riu)\b"

BOOKING_ANSWER_PATTERNS = [
    r"^\d+\s+(passenger|people|person|guest|adult|child|kid)s?$",
    r"^(couple|solo|alone|just me|two of us|family)$",
    r"^\d+\s+(suitcase|luggage|bag)s?$",
    r"^[a-z\s]{3,40}\s+(hotel|resort)$",
    r"^(one-way|round trip|roundtrip|one way)$",
    r"^(puj|sdq|lrm|pop)(\s+to\s+|\s+-\s+|\s+airport)?",
]


class QuestionClassifier:
    """
    Keyword/regex classification of a single message
    """

    def detect_language(self, text: str) -> Optional[Language]:
        lower = text.lower().strip()

        if lower in ("english", "engels") or "switch to english" in lower or "change to english" in lower:
            return Language.EN

        if lower in ("dutch", "nederlands", "flemish", "vlaams") or any(
            trigger in lower for trigger in [
                "switch to dutch", "change to dutch", "wissel naar nederlands", "verander naar nederlands",
            ]
        ):
            return Language.NL

        if lower in ("spanish", "español", "espanol", "spaans") or any(
            trigger in lower for trigger in [
                "switch to spanish", "change to spanish", "cambiar a español", "cambia a español",
            ]
        ):
            return Language.ES

        return None

    def is_reset(self, text: str) -> bool:
        return text.lower().strip() in RESET_COMMANDS

    def is_greeting(self, text: str) -> bool:
        lower = text.lower().strip()
        return any(lower == g or lower.startswith(g + " ") or lower.startswith(g + ",") for g in GREETINGS)

    def is_continue(self, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in CONTINUE_KEYWORDS)

    def is_booking_related(self, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in BOOKING_KEYWORDS)

    # ------------------------------------------------------------------
    # Showcase requests
    # ------------------------------------------------------------------

    def is_fun_facts_request(self, text: str) -> bool:
        lower = text.lower()
        return any(phrase in lower for phrase in FUN_FACT_PHRASES)

    def is_photo_request(self, text: str) -> bool:
        lower = text.lower()
        return any(keyword in lower for keyword in PHOTO_KEYWORDS)

    def is_vehicle_or_driver_request(self, text: str) -> bool:
        lower = text.lower()
        return any(phrase in lower for phrase in VEHICLE_DRIVER_PHRASES)

    def is_pickup_procedure_request(self, text: str) -> bool:
        lower = text.lower()
        return any(phrase in lower for phrase in PICKUP_PROCEDURE_PHRASES)

    # ------------------------------------------------------------------
    # General question heuristic
    # ------------------------------------------------------------------

    def is_general_question(self, text: str) -> bool:
        """
        Whether the message is a question for the Q&A service rather than
        an answer to the current booking prompt.

        Checks run in a fixed order; each one either decides or passes.
        """
        lower = text.lower()
        trimmed = text.strip()

        if any(trigger in lower for trigger in EXPLICIT_QUESTION_TRIGGERS):
            return True

        if re.match(BARE_NUMBER_PATTERN, trimmed, re.IGNORECASE):
            return False
        if re.match(SIMPLE_RESPONSE_PATTERN, trimmed, re.IGNORECASE):
            return False
        if re.match(BARE_AIRPORT_PATTERN, trimmed, re.IGNORECASE):
            return False

        has_question_word = bool(re.search(QUESTION_WORD_PATTERN, lower))
        has_hotel_keyword = bool(re.search(HOTEL_KEYWORD_PATTERN, lower))
        if has_hotel_keyword and not has_question_word and len(trimmed) < 50:
            return False

        if re.match(BARE_VEHICLE_PATTERN, trimmed, re.IGNORECASE):
            return False
        if re.match(BARE_TRIP_TYPE_PATTERN, trimmed, re.IGNORECASE):
            return False

        if any(phrase in lower for phrase in TRANSPORT_QUESTIONS):
            return True

        if any(indicator in lower for indicator in STRONG_QUESTION_INDICATORS):
            # Short message with a booking keyword is probably an answer
            if re.search(r"\b(puj|sdq|lrm|pop|passenger|suitcase|luggage|bag)\b", lower) and len(trimmed) < 25:
                return False
            return True

        if trimmed.endswith("?"):
            if len(trimmed) < 15 and re.match(r"^(puj|sdq|lrm|pop)", trimmed, re.IGNORECASE):
                return False
            return True

        if any(keyword in lower for keyword in CONTINUATION_KEYWORDS):
            return False

        if any(re.match(pattern, trimmed, re.IGNORECASE) for pattern in BOOKING_ANSWER_PATTERNS):
            return False

        if any(keyword in lower for keyword in DOMINICAN_KEYWORDS):
            if has_question_word or trimmed.endswith("?") or len(trimmed) > 20:
                return True

        if len(trimmed) > 50 and (has_question_word or trimmed.endswith("?")):
            return True

        return False


# ============================================
# Global Instance
# ============================================

question_classifier = QuestionClassifier()


def is_general_question(text: str) -> bool:
    result = question_classifier.is_general_question(text)
    if result:
        logger.debug(f"General question: {text[:60]}")
    return result
