"""
Transfer Pricing Algorithm
Computes whole-dollar prices for (airport, zone, vehicle, trip type)

Priority:
1. Matched competitor price, used verbatim
2. Pricing rule for (origin airport, destination zone, vehicle type)
3. Fallback formula: base + per_km * estimated km  (price_source=estimated)
Then:
4. Round trip: x ROUNDTRIP_MULTIPLIER (1.9, not 2)
5. Global discount: x (1 - pct/100), applied after the multiplier

Every price is rounded when computed, never at display time.
"""

import math
from typing import NamedTuple, List, Optional, Iterable
from loguru import logger

from ..constants import DEFAULT_BASE_PRICE, FALLBACK_VEHICLE_PRICING, ROUNDTRIP_MULTIPLIER
from ..schemas.ai_schemas import (
    PriceSource,
    PricingRule,
    TripType,
    VehicleOption,
    VehicleType,
)


class PriceQuote(NamedTuple):
    """
    Result of a single price calculation
    """
    price: int                      # final, after multiplier and discount
    original_price: int             # before discount
    price_source: PriceSource

    def __repr__(self) -> str:
        return (
            f"PriceQuote(price={self.price}, original={self.original_price}, "
            f"source={self.price_source.value})"
        )


class VehicleScan(NamedTuple):
    """All priced vehicles for one route"""
    options: List[VehicleOption]
    lowest_price: int               # cheapest fitting one-way price
    used_fallback: bool


# ============================================
# Rounding helpers
# ============================================

def round_half_up(value: float) -> int:
    """
    Round to the nearest dollar with halves going up (2.5 -> 3).
    Python's round() is banker's rounding and would give 2.
    """
    return int(math.floor(value + 0.5))


def apply_discount(price: float, discount_pct: float) -> int:
    """Apply the global discount percentage, rounded to whole dollars"""
    if discount_pct and discount_pct > 0:
        return round_half_up(price * (1 - discount_pct / 100))
    return round_half_up(price)


def apply_trip_multiplier(base_price: float, trip_type: Optional[TripType]) -> int:
    if trip_type == TripType.ROUND_TRIP:
        return round_half_up(base_price * ROUNDTRIP_MULTIPLIER)
    return round_half_up(base_price)


def quote_price(base_price: float, trip_type: Optional[TripType], discount_pct: float = 0) -> int:
    """
    Final price from a one-way base price.

    round trip: round(round(base * 1.9) * (1 - pct/100))
    one-way:    round(base * (1 - pct/100))

    Pure; identical inputs always give identical output.
    """
    return apply_discount(apply_trip_multiplier(base_price, trip_type), discount_pct)


def fallback_base_price(vehicle: str, km: float) -> Optional[int]:
    """One-way estimate from the fallback table, None for unknown vehicles"""
    pricing = FALLBACK_VEHICLE_PRICING.get(vehicle)
    if not pricing:
        return None
    return round_half_up(pricing["base"] + pricing["per_km"] * km)


# ============================================
# Rule lookup
# ============================================

def find_vehicle_type(vehicle_types: Iterable[VehicleType], name: str) -> Optional[VehicleType]:
    for vehicle in vehicle_types:
        if vehicle.name == name:
            return vehicle
    return None


def find_pricing_rule(
    pricing_rules: Iterable[PricingRule],
    airport: str,
    region: Optional[str],
    vehicle_type_id: str,
) -> Optional[PricingRule]:
    for rule in pricing_rules:
        if rule.origin == airport and rule.destination == region and rule.vehicle_type_id == vehicle_type_id:
            return rule
    return None


def calculate_price(
    airport: str,
    region: Optional[str],
    vehicle: str,
    trip_type: Optional[TripType],
    vehicle_types: List[VehicleType],
    pricing_rules: List[PricingRule],
    estimated_km: float,
    discount_pct: float = 0,
    matched_price: Optional[int] = None,
) -> PriceQuote:
    """
    Price one vehicle for one route.

    Args:
        airport: Origin airport code
        region: Destination zone name
        vehicle: Vehicle type name
        trip_type: One-way or round trip
        vehicle_types: Vehicle table
        pricing_rules: Pricing rule table
        estimated_km: Distance used when no rule exists
        discount_pct: Active global discount percentage
        matched_price: Accepted competitor price, if any

    Returns:
        PriceQuote with the final and pre-discount prices
    """
    if matched_price:
        return PriceQuote(
            price=matched_price,
            original_price=matched_price,
            price_source=PriceSource.PRICE_MATCH,
        )

    source = PriceSource.STANDARD
    base_price: Optional[float] = None

    vehicle_type = find_vehicle_type(vehicle_types, vehicle)
    if vehicle_type and region:
        rule = find_pricing_rule(pricing_rules, airport, region, vehicle_type.id)
        if rule:
            base_price = rule.base_price

    if base_price is None:
        source = PriceSource.ESTIMATED
        base_price = fallback_base_price(vehicle, estimated_km)
        if base_price is None:
            logger.warning(f"No pricing for vehicle '{vehicle}', using default base price")
            base_price = DEFAULT_BASE_PRICE

    original_price = apply_trip_multiplier(base_price, trip_type)
    price = quote_price(base_price, trip_type, discount_pct)

    return PriceQuote(price=price, original_price=original_price, price_source=source)


# ============================================
# Vehicle options (price scan)
# ============================================

def _mark_recommended(options: List[VehicleOption], passengers: int, luggage: int) -> int:
    """Flag the cheapest option that fits the party; returns its one-way price"""
    recommended: Optional[VehicleOption] = None
    for option in options:
        fits = passengers <= option.capacity and luggage <= option.luggage_capacity
        if fits and (recommended is None or option.one_way_price < recommended.one_way_price):
            recommended = option

    if recommended is None:
        return DEFAULT_BASE_PRICE

    recommended.recommended = True
    return recommended.one_way_price


def build_vehicle_options(
    airport: str,
    region: Optional[str],
    passengers: int,
    luggage: int,
    vehicle_types: List[VehicleType],
    pricing_rules: List[PricingRule],
    estimated_km: float,
    discount_pct: float = 0,
) -> VehicleScan:
    """
    Price every vehicle for the route, cheapest first.

    Vehicles too small for the party stay in the list so the user can see
    why a bigger one is suggested. Exactly one option is recommended when
    any vehicle fits.
    """
    options: List[VehicleOption] = []
    rules = [r for r in pricing_rules if r.origin == airport and r.destination == region]

    if rules:
        by_id = {v.id: v for v in vehicle_types}
        for rule in rules:
            vehicle = by_id.get(rule.vehicle_type_id)
            if not vehicle:
                continue
            options.append(VehicleOption(
                name=vehicle.name,
                capacity=vehicle.passenger_capacity,
                luggage_capacity=vehicle.luggage_capacity,
                one_way_price=quote_price(rule.base_price, TripType.ONE_WAY, discount_pct),
                round_trip_price=quote_price(rule.base_price, TripType.ROUND_TRIP, discount_pct),
            ))

    used_fallback = not options
    if used_fallback:
        logger.info(f"No pricing rules for {airport} -> {region}, estimating from {estimated_km} km")
        for name, pricing in FALLBACK_VEHICLE_PRICING.items():
            base = fallback_base_price(name, estimated_km)
            options.append(VehicleOption(
                name=name,
                capacity=int(pricing["capacity"]),
                luggage_capacity=int(pricing["luggage"]),
                one_way_price=quote_price(base, TripType.ONE_WAY, discount_pct),
                round_trip_price=quote_price(base, TripType.ROUND_TRIP, discount_pct),
            ))

    options.sort(key=lambda o: o.one_way_price)
    lowest_price = _mark_recommended(options, passengers, luggage)

    return VehicleScan(options=options, lowest_price=lowest_price, used_fallback=used_fallback)
