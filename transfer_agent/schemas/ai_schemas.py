# schemas/ai_schemas.py
"""
Pydantic v2 schemas for the transfer booking concierge
Covers the booking context, reference data records and the
payloads handed to the chat widget
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# ============================================
# Enums
# ============================================

class BookingStep(str, Enum):
    IDLE = "IDLE"
    AWAITING_AIRPORT = "AWAITING_AIRPORT"
    AWAITING_HOTEL = "AWAITING_HOTEL"
    AWAITING_PROPERTY_RESOLUTION = "AWAITING_PROPERTY_RESOLUTION"
    AWAITING_PASSENGERS = "AWAITING_PASSENGERS"
    AWAITING_LUGGAGE = "AWAITING_LUGGAGE"
    AWAITING_VEHICLE_SELECTION = "AWAITING_VEHICLE_SELECTION"
    AWAITING_TRIP_TYPE = "AWAITING_TRIP_TYPE"
    AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"


class TripType(str, Enum):
    ONE_WAY = "One-way"
    ROUND_TRIP = "Round trip"


class PriceSource(str, Enum):
    STANDARD = "standard"        # authoritative pricing rule
    ESTIMATED = "estimated"      # distance-based fallback formula
    PRICE_MATCH = "price_match"  # competitor price accepted
    CUSTOM = "custom"            # manual override


class Language(str, Enum):
    EN = "en"
    NL = "nl"
    ES = "es"


# ============================================
# Reference data (loaded once at startup)
# ============================================

class HotelZone(BaseModel):
    """Hotel record with its pricing zone"""
    id: str
    hotel_name: str
    zone_code: str = ""
    zone_name: str
    search_terms: List[str] = Field(default_factory=list)
    is_active: bool = True
    brand_name: Optional[str] = None
    requires_resolution: bool = False


class VehicleType(BaseModel):
    """Bookable vehicle class"""
    id: str
    name: str
    passenger_capacity: int
    luggage_capacity: int


class PricingRule(BaseModel):
    """Authoritative one-way price for (airport, zone, vehicle)"""
    id: str
    origin: str
    destination: str
    vehicle_type_id: str
    base_price: float
    zone: Optional[str] = None


class GalleryItem(BaseModel):
    """Fleet / team photo shown in chat"""
    url: str
    title: str
    description: str = ""


class ReferenceData(BaseModel):
    """Everything the engine needs from the hosted database"""
    hotel_zones: List[HotelZone] = Field(default_factory=list)
    vehicle_types: List[VehicleType] = Field(default_factory=list)
    pricing_rules: List[PricingRule] = Field(default_factory=list)
    global_discount_percentage: float = 0
    gallery: List[GalleryItem] = Field(default_factory=list)


# ============================================
# Booking context (one per conversation)
# ============================================

class BookingContext(BaseModel):
    """Slots collected so far. step=IDLE means no booking in progress."""
    step: BookingStep = BookingStep.IDLE

    airport: Optional[str] = None
    hotel: Optional[str] = None
    region: Optional[str] = None
    resort_property_id: Optional[str] = None
    property_resolved: bool = False

    passengers: Optional[int] = Field(None, ge=1, le=50)
    suitcases: Optional[int] = Field(None, ge=0, le=50)
    vehicle: Optional[str] = None
    trip_type: Optional[TripType] = None

    price: Optional[int] = None
    price_source: Optional[PriceSource] = None
    original_price: Optional[int] = None
    matched_price: Optional[int] = None

    # Brand disambiguation
    pending_brand: Optional[str] = None
    pending_properties: Optional[List[HotelZone]] = None

    # Q&A turns as {"role", "content"}; survives a completed booking, not a reset
    qa_history: List[Dict[str, str]] = Field(default_factory=list)

    @property
    def in_booking_flow(self) -> bool:
        return self.step != BookingStep.IDLE

    def slots(self) -> Dict[str, Any]:
        """Booking slots without the Q&A history"""
        return self.model_dump(mode="json", exclude={"qa_history", "pending_properties"}, exclude_none=True)


# ============================================
# Engine outputs
# ============================================

class VehicleOption(BaseModel):
    """Priced vehicle for one route"""
    name: str
    capacity: int
    luggage_capacity: int
    one_way_price: int
    round_trip_price: int
    recommended: bool = False


class PriceScanRequest(BaseModel):
    """Vehicle options payload rendered by the price scanner"""
    type: str = "PRICE_SCAN"
    airport: str
    hotel: str
    region: str
    base_price: int
    route: str
    passengers: int
    luggage: int
    vehicle_options: List[VehicleOption] = Field(default_factory=list)


class BookingAction(BaseModel):
    """Terminal payload handed to the booking form"""
    action: str = "START_BOOKING"
    airport: str
    hotel: str
    region: str
    vehicle: str
    passengers: int
    suitcases: int
    trip_type: TripType
    price: int
    currency: str = "USD"
    payment_provider: str = "Stripe"
    payment_methods: List[str] = Field(default_factory=lambda: ["iDEAL", "Card"])
    price_source: PriceSource = PriceSource.STANDARD
    original_price: Optional[int] = None

    model_config = {"frozen": True}


class VehicleImage(BaseModel):
    url: str
    alt: str
    caption: str


class AgentResponse(BaseModel):
    """One assistant turn"""
    message: str
    suggestions: List[str] = Field(default_factory=list)
    booking_action: Optional[BookingAction] = None
    price_scan_request: Optional[PriceScanRequest] = None
    vehicle_image: Optional[VehicleImage] = None
    gallery_images: Optional[List[GalleryItem]] = None
    language_switch: Optional[Language] = None


# ============================================
# Chat Request/Response
# ============================================

class ChatRequest(BaseModel):
    """Chat API request"""
    query: str = Field(..., min_length=1, max_length=2000)
    session_id: Optional[str] = None


class PriceScanContextRequest(BaseModel):
    """Re-entry after the user picked a vehicle in the price scanner"""
    session_id: str
    airport: str
    hotel: str
    region: str
    passengers: int = Field(..., ge=1, le=50)
    luggage: int = Field(..., ge=0, le=50)
    vehicle: Optional[str] = None


class PriceMatchRequest(BaseModel):
    """User found a lower price and it was accepted"""
    session_id: str
    airport: str
    hotel: str
    region: str
    base_price: int
    matched_price: int = Field(..., gt=0)


class ChatResponse(BaseModel):
    """Chat API response"""
    session_id: str
    step: BookingStep
    response: AgentResponse
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    components: Dict[str, Any]
    timestamp: datetime = Field(default_factory=datetime.utcnow)
