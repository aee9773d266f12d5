# transfer_agent/__init__.py
"""
Dominican Republic Airport Transfer Concierge

A booking dialogue engine with:
- Slot extraction from free text (airport, hotel, party size, dates)
- Hotel / brand / zone resolution
- Route pricing with estimated fallback and global discount
- FAQ and general-question answering mid-booking
"""

__version__ = "1.0.0"

# Package structure:
# transfer_agent/
# ├── __init__.py           <- This file
# ├── main.py               <- FastAPI application entry
# ├── config.py             <- Configuration settings
# ├── constants.py          <- Airports, fallback pricing, zone tables
# ├── exceptions.py         <- Collaborator errors
# │
# ├── agents/
# │   └── travel_agent.py   <- Booking dialogue reducer
# │
# ├── api/
# │   └── chat.py           <- /api/ai/chat
# │
# ├── interfaces/           <- Data stores
# │   ├── reference_data.py <- Hotels, vehicles, pricing rules
# │   ├── faq_store.py      <- Canned FAQ answers
# │   └── session_store.py  <- Booking context per session
# │
# ├── llm/                  <- Text understanding
# │   ├── extractors.py     <- Slot extraction
# │   ├── question_classifier.py <- Escape-hatch classification
# │   └── qa_service.py     <- General questions
# │
# ├── schemas/
# │   └── ai_schemas.py     <- All schemas
# │
# ├── algorithms/
# │   ├── hotel_resolver.py <- Hotel / zone resolution
# │   └── pricing.py        <- Price calculation
# │
# └── utils/
#     └── ai_helpers.py     <- Messages, chips, recaps
