"""
Static reference tables for the transfer concierge.
Fixed values only; the live hotel/vehicle/pricing tables come from the
reference data store.
"""

from typing import Dict, List, Tuple

# Airports served, keyed by IATA code
AIRPORTS: Dict[str, str] = {
    "PUJ": "Punta Cana International Airport (PUJ)",
    "SDQ": "Santo Domingo Las Americas (SDQ)",
    "LRM": "La Romana International Airport (LRM)",
    "POP": "Puerto Plata Gregorio Luperon (POP)",
}

# Round trip is priced below two one-ways
ROUNDTRIP_MULTIPLIER = 1.9

# Used when no pricing rule and no fallback vehicle apply
DEFAULT_BASE_PRICE = 45

# Per-vehicle fallback formula: base + per_km * km
FALLBACK_VEHICLE_PRICING: Dict[str, Dict[str, float]] = {
    "Sedan": {"base": 25, "per_km": 0.8, "capacity": 3, "luggage": 3},
    "SUV": {"base": 35, "per_km": 1.0, "capacity": 4, "luggage": 4},
    "Minivan": {"base": 45, "per_km": 1.2, "capacity": 6, "luggage": 6},
    "Suburban": {"base": 65, "per_km": 1.4, "capacity": 5, "luggage": 5},
    "Sprinter": {"base": 95, "per_km": 1.8, "capacity": 12, "luggage": 12},
    "Mini Bus": {"base": 150, "per_km": 2.5, "capacity": 20, "luggage": 20},
}

# Keyword -> (km, zone) for destinations we cannot resolve. Order matters.
DISTANCE_KEYWORDS: List[Tuple[str, int, str]] = [
    ("downtown", 15, "City Center"),
    ("centro", 15, "City Center"),
    ("city center", 15, "City Center"),
    ("beach", 25, "Beach Area"),
    ("playa", 25, "Beach Area"),
    ("resort", 30, "Resort Area"),
    ("hotel", 25, "Hotel Zone"),
    ("villa", 35, "Villa Area"),
    ("airbnb", 30, "Rental Area"),
    ("apartment", 20, "Residential"),
    ("house", 30, "Residential"),
    ("marina", 35, "Marina Area"),
    ("golf", 30, "Golf Resort"),
    ("all inclusive", 30, "All-Inclusive Resort"),
    ("boutique", 25, "Boutique Hotel"),
]

AIRPORT_DEFAULT_DISTANCES: Dict[str, int] = {
    "PUJ": 25,
    "SDQ": 30,
    "LRM": 20,
    "POP": 25,
}
DEFAULT_DISTANCE_KM = 25
DEFAULT_DISTANCE_ZONE = "General Area"

# Zone name -> keywords, checked in order by the hotel step
ZONE_KEYWORDS: List[Tuple[str, List[str]]] = [
    ("Cap Cana", ["cap cana"]),
    ("Uvero Alto", ["uvero alto", "macao"]),
    ("Santo Domingo", ["santo domingo", "sdq"]),
    ("Bayahibe", ["la romana", "bayahibe", "dominicus"]),
    ("Puerto Plata / Playa Dorada", ["puerto plata", "playa dorada", "cofresi"]),
    ("Samana / Las Terrenas", ["samana", "las terrenas"]),
    ("Sosua / Cabarete", ["sosua", "cabarete"]),
    ("Juan Dolio / Boca Chica", ["juan dolio", "boca chica"]),
]
BAVARO_ZONE = "Bavaro / Punta Cana"

# Region patterns recognised by the one-message fast path
FAST_PATH_REGION_PATTERNS: List[Tuple[str, str]] = [
    (r"\b(bavaro|punta cana beach|arena gorda)\b", "Zone A - Bavaro"),
    (r"\b(uvero alto)\b", "Zone B - Uvero Alto"),
    (r"\b(cap cana|cabo)\b", "Zone C - Cap Cana"),
    (r"\b(la romana|bayahibe)\b", "Zone D - La Romana"),
]

# Hotel brand -> keywords that mention it
BRAND_KEYWORDS: Dict[str, List[str]] = {
    "Bahia Principe": ["bahia principe", "bahia"],
    "Dreams Resorts & Spa": ["dreams"],
    "Secrets Resorts & Spas": ["secrets"],
    "RIU Hotels & Resorts": ["riu"],
    "Barceló Hotels & Resorts": ["barcelo", "barceló"],
    "Iberostar Hotels & Resorts": ["iberostar"],
    "Palladium Hotel Group": ["palladium", "grand palladium", "trs"],
    "Excellence Collection": ["excellence"],
    "Meliá Hotels International": ["melia", "meliá", "paradisus"],
    "Occidental Hotels & Resorts": ["occidental"],
    "Catalonia Hotels & Resorts": ["catalonia"],
    "Royalton": ["royalton"],
    "Lopesan": ["lopesan"],
    "Majestic Resorts": ["majestic"],
    "Viva Wyndham": ["viva wyndham", "viva"],
    "Nickelodeon Hotels & Resorts": ["nickelodeon"],
}

# Words dropped when guessing a hotel name from free text
HOTEL_NAME_STOP_WORDS = {
    "to", "from", "the", "a", "an", "at", "in", "for", "puj", "sdq", "lrm",
    "pop", "price", "transfer", "how", "much", "is", "what",
}

# Booking action defaults
CURRENCY = "USD"
PAYMENT_PROVIDER = "Stripe"
PAYMENT_METHODS = ["iDEAL", "Card"]

# Q&A history kept per conversation
QA_HISTORY_MAX = 12
QA_HISTORY_KEEP = 8
