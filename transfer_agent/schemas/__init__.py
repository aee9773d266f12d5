# schemas/__init__.py
"""
Pydantic Schemas Package

Contains all Pydantic v2 models for:
- Booking context and step enum
- Reference data records (hotels, vehicles, pricing rules)
- Engine responses (price scan, booking action)
- API requests/responses
"""

from .ai_schemas import (
    # Enums
    BookingStep, TripType, PriceSource, Language,
    # Reference data
    HotelZone, VehicleType, PricingRule, GalleryItem, ReferenceData,
    # Context & outputs
    BookingContext, VehicleOption, PriceScanRequest, BookingAction,
    VehicleImage, AgentResponse,
    # API
    ChatRequest, ChatResponse, PriceScanContextRequest, PriceMatchRequest,
    HealthResponse
)

__all__ = [
    # Enums
    "BookingStep", "TripType", "PriceSource", "Language",
    # Reference data
    "HotelZone", "VehicleType", "PricingRule", "GalleryItem", "ReferenceData",
    # Context & outputs
    "BookingContext", "VehicleOption", "PriceScanRequest", "BookingAction",
    "VehicleImage", "AgentResponse",
    # API
    "ChatRequest", "ChatResponse", "PriceScanContextRequest", "PriceMatchRequest",
    "HealthResponse"
]
