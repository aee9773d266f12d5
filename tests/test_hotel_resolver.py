# tests/test_hotel_resolver.py
"""
Hotel resolver: hotel lookup, brand disambiguation, zones and distance guesses
"""

from transfer_agent.algorithms.hotel_resolver import HotelResolver
from transfer_agent.constants import BAVARO_ZONE, DEFAULT_DISTANCE_ZONE


def make_resolver(reference_data):
    return HotelResolver(reference_data.hotel_zones)


def test_find_hotel_by_name_and_search_term(reference_data):
    resolver = make_resolver(reference_data)
    assert resolver.find_hotel("PUJ to Hard Rock Hotel").id == "h1"
    assert resolver.find_hotel("going to hard rock").id == "h1"
    assert resolver.find_hotel("somewhere nice") is None


def test_brand_mention_requires_resolution(reference_data):
    resolver = make_resolver(reference_data)
    brand = resolver.check_brand_resolution("I'm staying at a Bahia Principe")
    assert brand.requires_resolution
    assert brand.brand == "Bahia Principe"
    assert [p.hotel_name for p in brand.properties] == [
        "Bahia Principe Grand Turquesa",
        "Bahia Principe Luxury Ambar",
    ]


def test_named_property_skips_brand_resolution(reference_data):
    resolver = make_resolver(reference_data)
    assert not resolver.check_brand_resolution("Bahia Principe Luxury Ambar").requires_resolution
    assert not resolver.check_brand_resolution("luxury ambar please").requires_resolution


def test_brand_with_single_property_needs_no_resolution(reference_data):
    hotels = [h for h in reference_data.hotel_zones if h.id != "h3"]
    resolver = HotelResolver(hotels)
    assert not resolver.check_brand_resolution("bahia").requires_resolution


def test_resolve_pending(reference_data):
    resolver = make_resolver(reference_data)
    candidates = resolver.check_brand_resolution("bahia").properties
    assert resolver.resolve_pending("the grand turquesa one", candidates).id == "h3"
    assert resolver.resolve_pending("no idea", candidates) is None


def test_detect_region_direct():
    resolver = HotelResolver()
    assert resolver.detect_region_direct("somewhere in bavaro") == BAVARO_ZONE
    assert resolver.detect_region_direct("Punta Cana") == BAVARO_ZONE
    assert resolver.detect_region_direct("cap cana marina") == "Cap Cana"
    assert resolver.detect_region_direct("Las Terrenas") == "Samana / Las Terrenas"
    assert resolver.detect_region_direct("the moon") is None


def test_detect_region_pattern():
    resolver = HotelResolver()
    assert resolver.detect_region_pattern("staying in uvero alto") == "Zone B - Uvero Alto"
    assert resolver.detect_region_pattern("nowhere") is None


def test_estimate_distance_keywords_and_airport_default():
    resolver = HotelResolver()
    assert resolver.estimate_distance("my villa", "PUJ") == (35, "Villa Area")
    assert resolver.estimate_distance("downtown apartment", "PUJ") == (15, "City Center")
    assert resolver.estimate_distance("somewhere", "SDQ") == (30, DEFAULT_DISTANCE_ZONE)
    assert resolver.estimate_distance("somewhere") == (25, DEFAULT_DISTANCE_ZONE)


def test_resolve_cascade(reference_data):
    resolver = make_resolver(reference_data)
    assert resolver.resolve("bahia").kind == "brand"
    hotel = resolver.resolve("Hard Rock")
    assert hotel.kind == "hotel"
    assert hotel.zone == "Punta Cana"
    zone = resolver.resolve("somewhere in cap cana")
    assert zone.kind == "zone"
    assert zone.zone == "Cap Cana"
    assert resolver.resolve("Casa Bonita Guesthouse").kind == "none"
