"""
Booking Algorithms Module
Hotel resolution and transfer pricing
"""

from .hotel_resolver import HotelResolver, Resolution, BrandResolution, DistanceEstimate
from .pricing import calculate_price, build_vehicle_options, quote_price, PriceQuote, VehicleScan

__all__ = [
    "HotelResolver",
    "Resolution",
    "BrandResolution",
    "DistanceEstimate",
    "calculate_price",
    "build_vehicle_options",
    "quote_price",
    "PriceQuote",
    "VehicleScan",
]
