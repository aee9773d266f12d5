"""
Hotel / Zone Resolver
Maps free text to a pricing destination

Resolution order:
1. Hotel brand with several active properties (needs disambiguation)
2. Hotel record (name or any search term contained in the text)
3. Known zone keyword ("bavaro" -> "Bavaro / Punta Cana")
4. Nothing; caller estimates distance from DISTANCE_KEYWORDS

The resolver never raises. No match is a normal outcome that moves
pricing into estimated mode.
"""

import re
from typing import NamedTuple, List, Optional, Iterable
from loguru import logger

from ..constants import (
    AIRPORT_DEFAULT_DISTANCES,
    BAVARO_ZONE,
    BRAND_KEYWORDS,
    DEFAULT_DISTANCE_KM,
    DEFAULT_DISTANCE_ZONE,
    DISTANCE_KEYWORDS,
    FAST_PATH_REGION_PATTERNS,
    ZONE_KEYWORDS,
)
from ..schemas.ai_schemas import HotelZone


class BrandResolution(NamedTuple):
    """Outcome of the brand disambiguation check"""
    requires_resolution: bool
    brand: Optional[str] = None
    properties: List[HotelZone] = []


class DistanceEstimate(NamedTuple):
    km: int
    zone: str


class Resolution(NamedTuple):
    """
    kind is one of: hotel, brand, zone, none
    """
    kind: str
    hotel: Optional[HotelZone] = None
    brand: Optional[str] = None
    properties: List[HotelZone] = []
    zone: Optional[str] = None

    def __repr__(self) -> str:
        if self.kind == "hotel" and self.hotel:
            return f"Resolution(hotel={self.hotel.hotel_name!r}, zone={self.hotel.zone_name!r})"
        if self.kind == "brand":
            return f"Resolution(brand={self.brand!r}, candidates={len(self.properties)})"
        if self.kind == "zone":
            return f"Resolution(zone={self.zone!r})"
        return "Resolution(none)"


class HotelResolver:
    """
    Resolver over the hotel/zone table loaded at startup
    """

    def __init__(self, hotel_zones: Optional[Iterable[HotelZone]] = None):
        self.hotel_zones: List[HotelZone] = list(hotel_zones or [])

    def find_hotel(self, text: str) -> Optional[HotelZone]:
        """First hotel whose name or search term appears in the text"""
        lower = text.lower()
        for hotel in self.hotel_zones:
            if hotel.hotel_name.lower() in lower:
                return hotel
            if any(term and term.lower() in lower for term in hotel.search_terms):
                return hotel
        return None

    def _names_property(self, text: str, hotel: HotelZone) -> bool:
        """Whether the text already names this one property"""
        name = hotel.hotel_name.lower()
        if name in text:
            return True
        parts = [part for part in name.split() if len(part) > 2]
        if parts and all(part in text for part in parts):
            return True
        return any(term and term.lower() in text for term in hotel.search_terms)

    def check_brand_resolution(self, text: str) -> BrandResolution:
        """
        Check whether the text mentions a brand with several properties.

        Args:
            text: User message

        Returns:
            BrandResolution with candidates sorted by hotel name when the
            brand is ambiguous, else requires_resolution=False
        """
        lower = text.lower()

        for brand, keywords in BRAND_KEYWORDS.items():
            if not any(keyword in lower for keyword in keywords):
                continue

            properties = [h for h in self.hotel_zones if h.brand_name == brand and h.is_active]
            if len(properties) <= 1:
                continue

            if any(self._names_property(lower, p) for p in properties):
                continue

            logger.debug(f"Brand '{brand}' needs disambiguation ({len(properties)} properties)")
            return BrandResolution(
                requires_resolution=True,
                brand=brand,
                properties=sorted(properties, key=lambda h: h.hotel_name.lower()),
            )

        return BrandResolution(requires_resolution=False)

    def resolve_pending(self, text: str, candidates: List[HotelZone]) -> Optional[HotelZone]:
        """Pick one of the pending brand properties named in the text"""
        lower = text.lower()
        for hotel in candidates:
            if hotel.hotel_name.lower() in lower:
                return hotel
            if any(term and term.lower() in lower for term in hotel.search_terms):
                return hotel
        return None

    def detect_region_direct(self, text: str) -> Optional[str]:
        """Zone from the fixed area keyword table"""
        lower = text.lower()
        if "bavaro" in lower or ("punta cana" in lower and "cap" not in lower):
            return BAVARO_ZONE
        for zone, keywords in ZONE_KEYWORDS:
            if any(keyword in lower for keyword in keywords):
                return zone
        return None

    def detect_region_pattern(self, text: str) -> Optional[str]:
        """Zone A-D labels used by the one-message fast path"""
        lower = text.lower()
        for pattern, region in FAST_PATH_REGION_PATTERNS:
            if re.search(pattern, lower):
                return region
        return None

    def estimate_distance(self, text: str, airport: Optional[str] = None) -> DistanceEstimate:
        """Distance guess for a destination we could not resolve"""
        lower = (text or "").lower()
        for keyword, km, zone in DISTANCE_KEYWORDS:
            if keyword in lower:
                return DistanceEstimate(km=km, zone=zone)

        km = AIRPORT_DEFAULT_DISTANCES.get(airport or "", DEFAULT_DISTANCE_KM)
        return DistanceEstimate(km=km, zone=DEFAULT_DISTANCE_ZONE)

    def resolve(self, text: str) -> Resolution:
        """
        Full resolution cascade used by the hotel step.
        Brand check runs first so "bahia" is not swallowed by a search term
        belonging to one of the brand's properties.
        """
        brand = self.check_brand_resolution(text)
        if brand.requires_resolution:
            return Resolution(kind="brand", brand=brand.brand, properties=brand.properties)

        hotel = self.find_hotel(text)
        if hotel:
            return Resolution(kind="hotel", hotel=hotel, zone=hotel.zone_name)

        zone = self.detect_region_direct(text)
        if zone:
            return Resolution(kind="zone", zone=zone)

        return Resolution(kind="none")
