# api/chat.py
"""
Chat API Endpoint
Conversational interface for transfer bookings.

The booking context lives in the session store between turns; each
request loads it, runs one reducer step and saves the result.
"""

from fastapi import APIRouter, HTTPException
from loguru import logger

from ..agents.travel_agent import travel_agent
from ..interfaces.session_store import session_store
from ..schemas.ai_schemas import (
    ChatRequest,
    ChatResponse,
    PriceMatchRequest,
    PriceScanContextRequest,
)


router = APIRouter(prefix="/api/ai", tags=["chat"])


def _load_context(session_id: str):
    context = session_store.get_context(session_id)
    if context is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return context


# ============================================
# API Endpoints
# ============================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """
    One chat turn.

    Example queries:
    - "PUJ to Hard Rock Hotel"
    - "Flying into Punta Cana on March 3 with 4 adults"
    - "What if my flight is delayed?"
    - "Continue booking"
    """
    session_id = session_store.get_or_create_session(request.session_id)
    context = _load_context(session_id)
    logger.info(f"Chat request: session={session_id}, step={context.step.value}, query={request.query[:50]}")

    context, response = await travel_agent.reduce(context, request.query)
    session_store.save_context(session_id, context)

    return ChatResponse(session_id=session_id, step=context.step, response=response)


@router.post("/chat/price-scan", response_model=ChatResponse)
async def price_scan_selection(request: PriceScanContextRequest):
    """
    Re-enter the flow after the price scanner.
    With a vehicle, the pick is applied as the user's next message.
    """
    session_store.get_or_create_session(request.session_id)
    context = _load_context(request.session_id)

    context = travel_agent.price_scan_context(
        context,
        airport=request.airport,
        hotel=request.hotel,
        region=request.region,
        passengers=request.passengers,
        luggage=request.luggage,
    )

    if request.vehicle:
        context, response = await travel_agent.reduce(context, request.vehicle)
    else:
        response = travel_agent.vehicle_prompt()

    session_store.save_context(request.session_id, context)
    return ChatResponse(session_id=request.session_id, step=context.step, response=response)


@router.post("/chat/price-match", response_model=ChatResponse)
async def price_match(request: PriceMatchRequest):
    """Accept a lower competitor price and continue at the passenger step"""
    session_store.get_or_create_session(request.session_id)
    context = _load_context(request.session_id)

    context, response = travel_agent.price_match_context(
        context,
        airport=request.airport,
        hotel=request.hotel,
        region=request.region,
        base_price=request.base_price,
        matched_price=request.matched_price,
    )
    session_store.save_context(request.session_id, context)
    return ChatResponse(session_id=request.session_id, step=context.step, response=response)


@router.delete("/chat/{session_id}")
async def clear_session(session_id: str):
    """Forget a conversation"""
    if not session_store.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"status": "deleted", "session_id": session_id}
