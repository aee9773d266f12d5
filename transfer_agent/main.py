"""
Transfer Concierge Service - FastAPI Application
Chat booking for private airport transfers in the Dominican Republic.

Q&A backend:
- If QA_SERVICE_URL is set: hosted chat function
- Else if OPENAI_API_KEY is set: OpenAI
- Else: canned answers
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from . import __version__
from .agents.travel_agent import travel_agent
from .api.chat import router as chat_router
from .config import settings
from .interfaces.reference_data import reference_data_store
from .interfaces.session_store import session_store
from .schemas.ai_schemas import HealthResponse


# ============================================
# Application Lifespan
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load reference data once, before the first chat turn"""
    logger.info("=" * 50)
    logger.info("Starting Transfer Concierge Service")
    logger.info("=" * 50)
    logger.info(f"Environment: {settings.API_ENV}")
    logger.info(f"Q&A backend: {travel_agent.qa_service.backend}")
    logger.info(f"Session store: {session_store.backend}")

    data = await reference_data_store.load()
    travel_agent.load_reference_data(data)

    yield

    logger.info("Transfer Concierge shutdown complete")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Transfer Concierge Service",
    description="Conversational booking for Dominican Republic airport transfers.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


# ============================================
# REST Endpoints
# ============================================

@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Transfer Concierge Service",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": [
            "/health",
            "/api/ai/chat",
            "/api/ai/chat/price-scan",
            "/api/ai/chat/price-match",
        ],
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Component status"""
    data = travel_agent.reference_data
    return HealthResponse(
        status="healthy",
        components={
            "reference_data": "loaded" if reference_data_store.loaded else "not loaded",
            "hotels": len(data.hotel_zones),
            "vehicle_types": len(data.vehicle_types),
            "pricing_rules": len(data.pricing_rules),
            "discount_percentage": data.global_discount_percentage,
            "qa_backend": travel_agent.qa_service.backend,
            "session_store": session_store.backend,
        },
    )


def run():
    uvicorn.run(
        "transfer_agent.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development",
    )


if __name__ == "__main__":
    run()
