# llm/extractors.py
"""
Slot extractors for the transfer concierge
Pulls booking slots out of a single free-text message:
- Airport (PUJ / SDQ / LRM / POP)
- Passengers, luggage
- Trip type, arrival date
- Hotel / region
Every extractor is an ordered pattern list where the first match wins.
"""

import re
from typing import Optional, Dict, Any, List, Tuple
from dataclasses import dataclass, field
from loguru import logger

from ..algorithms.hotel_resolver import HotelResolver
from ..constants import HOTEL_NAME_STOP_WORDS
from ..schemas.ai_schemas import TripType
from ..utils.ai_helpers import airport_display_name, pluralize


MONTHS = "january|januari|februari|february|march|april|may|june|july|august|september|october|november|december"

AIRPORT_NAME_PATTERNS = {
    "PUJ": r"(?:puj|punta cana(?:\s+airport)?)",
    "SDQ": r"(?:sdq|santo domingo(?:\s+airport)?)",
    "LRM": r"(?:lrm|la romana(?:\s+airport)?)",
    "POP": r"(?:pop|puerto plata(?:\s+airport)?)",
}

_UNITS = ["one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]
_TEENS = ["ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen",
          "sixteen", "seventeen", "eighteen", "nineteen"]
_TENS = {"twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
         "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90}

# Any of these makes the count too large to be a party or a luggage total
MULTIPLIER_WORDS = r"\b(?:hundred|thousand|million)\b"


def _build_word_numbers() -> Dict[str, int]:
    words = {w: i + 1 for i, w in enumerate(_UNITS)}
    words.update({w: i + 10 for i, w in enumerate(_TEENS)})
    for tens, value in _TENS.items():
        words[tens] = value
        for i, unit in enumerate(_UNITS):
            words[f"{tens}-{unit}"] = value + i + 1
            words[f"{tens} {unit}"] = value + i + 1
    return words


# Longest first so "twenty one" wins over "twenty" and "one"
WORD_NUMBERS = dict(
    sorted(_build_word_numbers().items(), key=lambda item: len(item[0]), reverse=True)
)


@dataclass
class ExtractedBookingInfo:
    """Slots found in one message by the fast path"""
    has_info: bool = False
    airport: Optional[str] = None
    hotel: Optional[str] = None
    region: Optional[str] = None
    passengers: Optional[int] = None
    luggage: Optional[int] = None
    trip_type: Optional[TripType] = None
    date: Optional[str] = None
    is_price_inquiry: bool = False
    acknowledged: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_info": self.has_info,
            "airport": self.airport,
            "hotel": self.hotel,
            "region": self.region,
            "passengers": self.passengers,
            "luggage": self.luggage,
            "trip_type": self.trip_type.value if self.trip_type else None,
            "date": self.date,
            "is_price_inquiry": self.is_price_inquiry,
            "acknowledged": self.acknowledged,
        }


class SlotExtractor:
    """
    Rule-based slot extraction.
    Pattern order is significant: a broader pattern never runs before a
    narrower one that already matched.
    """

    def __init__(self):
        # Airport: direct mention, then "arriving at X", then "from X"
        self.airport_patterns: List[Tuple[str, str]] = []
        for code, name in AIRPORT_NAME_PATTERNS.items():
            self.airport_patterns.append((rf"\b{name}\b", code))
        for code, name in AIRPORT_NAME_PATTERNS.items():
            self.airport_patterns.append(
                (rf"(?:arriving|landing|flying|getting)\s+(?:at|into|to|in)\s+(?:the\s+)?{name}", code)
            )
        for code, name in AIRPORT_NAME_PATTERNS.items():
            self.airport_patterns.append((rf"(?:from|pickup at|leaving)\s+(?:the\s+)?{name}", code))

        self.passenger_patterns = [
            r"(\d+)\s*(?:adults?|passengers?|people|persons?|pax)",
            r"(?:family|group)\s+of\s+(\d+)",
            r"(\d+)\s+in\s+(?:my|our)\s+(?:party|group)",
            r"(?:we|us|there)\s+(?:are|will be)\s+(\d+)",
            r"(\d+)\s+traveling",
            r"(?:with|bringing|traveling with)\s+(\d+)\s+(?:adults?|people|passengers?|persons?)",
            r"(?:party of|group of)\s+(\d+)",
            r"(?:for|booking for)\s+(\d+)\s+(?:adults?|people|passengers?|persons?)",
            r"(?:total of|total)\s+(\d+)\s+(?:adults?|people|passengers?|persons?)",
            r"(\d+)\s+(?:adults?|people|passengers?|persons?)\s+(?:total|in total)",
        ]

        self.luggage_patterns = [
            r"(\d+)\s*(?:suitcases?|bags?|luggage|pieces?)",
            r"with\s+(\d+)\s+(?:checked\s+)?(?:bag|luggage)",
            r"(\d+)\s+(?:pieces? of )?luggage",
            r"(?:bringing|carrying|have)\s+(\d+)\s+(?:suitcases?|bags?)",
        ]

        self.round_trip_pattern = r"\b(round\s*trip|return|both\s*ways?|two\s*ways?|back and forth)\b"
        self.one_way_pattern = r"\b(one\s*way|single|just\s+(?:there|to)|drop off only)\b"

        # Keywords are whole words so "Hilton 2 passengers" is not a date
        self.date_patterns = [
            r"\b(?:on|arriving|coming|landing|getting\s+in|flying\s+in)\s+(?:on\s+)?(?:the\s+)?([A-Za-z]+\s+\d{1,2}(?:st|nd|rd|th)?)",
            r"\b(?:on|arriving|coming|landing|flying\s+in)\s+(?:the\s+)?(\d{1,2}(?:st|nd|rd|th)?(?:\s+(?:of\s+)?)[A-Za-z]+)",
            rf"\b(?:on|arriving|coming|landing|flying in|getting in)\s+(?:the\s+)?(\d{{1,2}})\s+({MONTHS})",
            rf"({MONTHS})\s+(\d{{1,2}}(?:st|nd|rd|th)?)",
            rf"(\d{{1,2}})\s+({MONTHS})",
            rf"(?:the\s+)?(\d{{1,2}})\s+({MONTHS})",
            r"\b(?:on|arriving)\s+(?:the\s+)?(\d{1,2}(?:st|nd|rd|th)?)",
        ]

        self.booking_intent_patterns = [
            r"(?:i am|i'm|we are|we're)\s+(?:flying|coming|arriving|landing|getting|traveling)",
            r"(?:will be|going to be)\s+(?:flying|coming|arriving|landing|getting|traveling)",
            r"(?:flying|coming|arriving|landing|getting|traveling)\s+(?:in|into|to|at)",
            r"(?:need|want|looking for)\s+(?:a\s+)?(?:transfer|ride|pickup|transport)",
            r"(?:book|booking|reserve|reserving)\s+(?:a\s+)?(?:transfer|ride|pickup|transport)",
        ]

        # "quote for Hard Rock Hotel" style chips
        self.destination_phrase_patterns = [
            r"(?:quote for|best price to|vehicle options to|transfer to)\s+(.+?)(?:\s+transfer)?$",
            r"(?:price for|cost for|rate for)\s+(.+?)(?:\s+transfer)?$",
        ]

        self.price_inquiry_patterns = [
            r"(?:how much|what(?:'s| is) the (?:price|cost|rate))",
            r"(?:i (?:would like to|want to|need to) know (?:the )?(?:price|cost|rate))",
            r"(?:can you (?:tell me|give me) (?:the )?(?:price|cost|rate))",
            r"(?:what (?:does|do) (?:it|transfers?) cost)",
            r"(?:price(?:s)? (?:for|of))",
            r"(?:cost(?:s)? (?:for|of))",
            r"(?:rate(?:s)? (?:for|of))",
            r"(?:quote(?:s)? (?:for|of))",
        ]

    # ------------------------------------------------------------------
    # Single-slot extractors
    # ------------------------------------------------------------------

    def extract_airport(self, text: str) -> Optional[str]:
        """Airport code from the full pattern cascade"""
        lower = text.lower()
        for pattern, code in self.airport_patterns:
            if re.search(pattern, lower):
                return code
        return None

    def extract_airport_simple(self, text: str) -> Optional[str]:
        """Airport check used while waiting for the airport answer"""
        lower = text.lower()
        if "puj" in lower or "punta cana" in lower:
            return "PUJ"
        if "sdq" in lower or "santo domingo" in lower:
            return "SDQ"
        if "lrm" in lower or "la romana" in lower:
            return "LRM"
        # "pop" only as a word so "population" does not match
        if re.search(r"\bpop\b", lower) or "puerto plata" in lower:
            return "POP"
        return None

    def extract_passengers(self, text: str) -> Optional[int]:
        for pattern in self.passenger_patterns:
            match = re.search(pattern, text, re.IGNORECASE)
            if match and match.group(1):
                count = int(match.group(1))
                if 1 <= count <= 50:
                    return count
        return None

    def extract_luggage(self, text: str) -> Optional[int]:
        for pattern in self.luggage_patterns:
            match = re.search(pattern, text, re.IGNORECASE)
            if match and match.group(1):
                count = int(match.group(1))
                if 0 <= count <= 50:
                    return count
        return None

    def extract_trip_type(self, text: str) -> Optional[TripType]:
        # Round trip wins when both appear
        if re.search(self.round_trip_pattern, text, re.IGNORECASE):
            return TripType.ROUND_TRIP
        if re.search(self.one_way_pattern, text, re.IGNORECASE):
            return TripType.ONE_WAY
        return None

    def extract_date(self, text: str) -> Optional[str]:
        for pattern in self.date_patterns:
            match = re.search(pattern, text, re.IGNORECASE)
            if not match:
                continue
            groups = match.groups()
            if len(groups) > 1 and groups[1]:
                # Stored month-first: "2 january" -> "january 2"
                return f"{groups[1]} {groups[0]}"
            return groups[0] or match.group(0)
        return None

    def extract_number(self, text: str) -> Optional[int]:
        """
        First digit run, else the longest number word present.
        A multiplier word ("one hundred") gives 100 so the count lands out
        of range instead of shrinking to its first word.
        """
        match = re.search(r"(\d+)", text)
        if match:
            return int(match.group(1))
        lower = text.lower()
        if re.search(MULTIPLIER_WORDS, lower):
            return 100
        for word, number in WORD_NUMBERS.items():
            if re.search(rf"\b{word}\b", lower):
                return number
        return None

    def extract_passenger_count(self, text: str) -> Optional[int]:
        """Passenger answer including chip ranges and shortcuts"""
        lower = text.lower()
        passengers = self.extract_number(lower)

        if "solo" in lower or "alone" in lower or "just me" in lower:
            passengers = 1
        elif "couple" in lower or "two of us" in lower:
            passengers = 2
        elif "3-4" in lower or "3 to 4" in lower:
            passengers = 4
        elif "5-6" in lower or "5 to 6" in lower:
            passengers = 6
        elif "7+" in lower or "7 or more" in lower:
            passengers = 8

        if passengers is not None and 1 <= passengers <= 50:
            return passengers
        return None

    def extract_luggage_count(self, text: str) -> Optional[int]:
        """Luggage answer including chip ranges"""
        lower = text.lower()
        suitcases = self.extract_number(lower)

        if "8+" in lower or "8 or more" in lower or "lots" in lower:
            suitcases = 10
        elif "1-2" in lower:
            suitcases = 2
        elif "3-4" in lower:
            suitcases = 4
        elif "5-6" in lower:
            suitcases = 6
        elif suitcases is None and ("no luggage" in lower or "none" in lower or "no bags" in lower):
            suitcases = 0

        if suitcases is not None and 0 <= suitcases <= 50:
            return suitcases
        return None

    def extract_hotel_name(self, text: str) -> str:
        """Literal hotel guess: drop stop words, title-case the rest"""
        words = [w for w in text.split() if w.lower() not in HOTEL_NAME_STOP_WORDS]
        return " ".join(w[:1].upper() + w[1:].lower() for w in words)

    def detect_booking_intent(self, text: str) -> bool:
        return any(re.search(p, text, re.IGNORECASE) for p in self.booking_intent_patterns)

    def detect_price_inquiry(self, text: str) -> bool:
        return any(re.search(p, text, re.IGNORECASE) for p in self.price_inquiry_patterns)

    def extract_destination_phrase(self, text: str) -> Optional[str]:
        for pattern in self.destination_phrase_patterns:
            match = re.search(pattern, text.strip(), re.IGNORECASE)
            if match and match.group(1):
                return match.group(1).strip()
        return None

    # ------------------------------------------------------------------
    # Multi-slot fast path
    # ------------------------------------------------------------------

    def extract_booking_information(
        self, text: str, resolver: Optional[HotelResolver] = None
    ) -> ExtractedBookingInfo:
        """
        Scan one message for every slot at once.

        Args:
            text: User message
            resolver: Hotel resolver used for hotel lookups

        Returns:
            ExtractedBookingInfo; has_info is True when any slot was found
        """
        info = ExtractedBookingInfo()
        has_booking_intent = self.detect_booking_intent(text)

        resolver = resolver or HotelResolver()

        destination = self.extract_destination_phrase(text)
        if destination:
            hotel = resolver.find_hotel(destination)
            if hotel:
                info.hotel = hotel.hotel_name
                info.region = hotel.zone_name
            else:
                info.hotel = destination
            info.acknowledged.append(info.hotel)
            info.is_price_inquiry = True
            info.has_info = True
            has_booking_intent = True

        if self.detect_price_inquiry(text):
            info.is_price_inquiry = True
            info.has_info = True
            has_booking_intent = True

        info.airport = self.extract_airport(text)
        if info.airport:
            info.acknowledged.append(f"{airport_display_name(info.airport)} airport")
            info.has_info = True

        info.passengers = self.extract_passengers(text)
        if info.passengers is not None:
            info.acknowledged.append(pluralize(info.passengers, "passenger"))
            info.has_info = True

        info.luggage = self.extract_luggage(text)
        if info.luggage is not None:
            info.acknowledged.append(pluralize(info.luggage, "suitcase"))
            info.has_info = True

        info.trip_type = self.extract_trip_type(text)
        if info.trip_type:
            info.acknowledged.append(info.trip_type.value.lower())
            info.has_info = True

        info.date = self.extract_date(text)
        if info.date:
            info.acknowledged.append(f"arriving {info.date}")
            info.has_info = True

        hotel = resolver.find_hotel(text)
        if hotel:
            if info.hotel != hotel.hotel_name:
                info.acknowledged.append(hotel.hotel_name)
            info.hotel = hotel.hotel_name
            info.region = hotel.zone_name
            info.has_info = True
        elif not info.region:
            region = resolver.detect_region_pattern(text)
            if region:
                info.region = region
                info.acknowledged.append(region)
                info.has_info = True

        # Airport plus any sign of planning is enough to start the flow
        if info.airport and (has_booking_intent or info.passengers or info.date):
            info.has_info = True

        if info.has_info:
            logger.debug(f"Extracted booking info: {info.to_dict()}")
        return info


# ============================================
# Global Instance
# ============================================

slot_extractor = SlotExtractor()


# ============================================
# Convenience Functions
# ============================================

def extract_airport(text: str) -> Optional[str]:
    return slot_extractor.extract_airport(text)


def extract_passengers(text: str) -> Optional[int]:
    return slot_extractor.extract_passengers(text)


def extract_luggage(text: str) -> Optional[int]:
    return slot_extractor.extract_luggage(text)


def extract_trip_type(text: str) -> Optional[TripType]:
    return slot_extractor.extract_trip_type(text)


def extract_date(text: str) -> Optional[str]:
    return slot_extractor.extract_date(text)


def extract_booking_information(text: str, resolver: Optional[HotelResolver] = None) -> ExtractedBookingInfo:
    return slot_extractor.extract_booking_information(text, resolver)
