# llm/qa_service.py
"""
Q&A Service for general questions
Answers anything the booking flow cannot: Dominican Republic travel,
weather, food, how transfers work.

Backends, first configured wins:
1. Hosted chat function (QA_SERVICE_URL), called with httpx
2. OpenAI chat completion (OPENAI_API_KEY)
3. Keyword-matched canned answers (no network)

Every network call is bounded by QA_TIMEOUT_SECONDS. Failures raise
QAServiceError; the caller decides how to degrade.
"""

from typing import List, Dict, Any, Optional
import httpx
from loguru import logger
from openai import AsyncOpenAI

from ..config import settings
from ..exceptions import QAServiceError


QA_SYSTEM_PROMPT = """You are a helpful assistant for a private airport transfer company in the Dominican Republic.

Answer any question the user asks: transfers, the Dominican Republic, travel tips or general knowledge.
Be accurate, friendly and concise.

Transfer facts:
- Airports: PUJ (Punta Cana), SDQ (Santo Domingo), LRM (La Romana), POP (Puerto Plata)
- All transfers are private; prices are per vehicle, not per person
- Drivers meet guests in the arrivals hall after customs with a name sign
- Flights are tracked; delays never cost extra
- Free cancellation up to 24 hours before pickup

If the user asks to "see prices", ask which airport they arrive at first.
If the user is in the middle of a booking, answer fully and then mention they can say "continue booking"."""


CANNED_ANSWERS = {
    "weather": (
        "The Dominican Republic enjoys tropical weather year-round! Expect temperatures between 77-86F (25-30C). "
        "The dry season (December-April) is perfect for beach visits, while the rainy season (May-November) brings "
        "brief afternoon showers. Pack light clothes, sunscreen, and a light rain jacket!"
    ),
    "beach": (
        "The DR has some of the Caribbean's most beautiful beaches! Punta Cana offers powdery white sand and turquoise "
        "waters. Bavaro Beach is perfect for families, while Cap Cana has more secluded luxury spots. Puerto Plata's "
        "northern coast has golden sand beaches with great surfing."
    ),
    "food": (
        "Dominican cuisine is delicious! Try 'La Bandera' - the national dish of rice, beans, and meat. Don't miss "
        "mofongo (mashed plantains), tostones (fried plantains), and fresh seafood. Wash it down with Presidente beer "
        "or mamajuana, a local herbal drink!"
    ),
    "activities": (
        "There's so much to do! Visit Saona Island for pristine beaches, explore Santo Domingo's historic Colonial Zone "
        "(UNESCO site), go zip-lining in Puerto Plata, swim in natural cenotes, or take a catamaran cruise. Golf lovers "
        "will find world-class courses!"
    ),
    "safety": (
        "The tourist areas are generally very safe! Stick to reputable tour operators and transportation services. "
        "Our private transfers ensure you travel safely from the airport to your resort. Keep valuables secure and use "
        "common sense, just like traveling anywhere."
    ),
    "currency": (
        "The Dominican Peso (DOP) is the local currency, but US dollars are widely accepted in tourist areas. Credit "
        "cards work at most hotels and restaurants. ATMs are available, but let your bank know you're traveling. Tip "
        "in local currency when possible!"
    ),
    "language": (
        "Spanish is the official language, but English is widely spoken in tourist areas, especially at resorts and "
        "with tour operators. Our drivers speak English! Learning a few Spanish phrases like 'Hola' (hello) and "
        "'Gracias' (thank you) is always appreciated."
    ),
    "airport_pickup": (
        "Once you book your transfer, a professional driver will meet you at the airport in the arrivals hall, just "
        "after customs. They'll hold a sign with your name or company logo. Flight arrivals are monitored in real time, "
        "and if your flight is delayed, your driver will adjust the pickup time at no extra charge. Drivers wait up to "
        "60 minutes after landing. Service is available 24/7 from all major DR airports (PUJ, SDQ, STI, LRM, POP). "
        "All vehicles are modern, air-conditioned, and comfortable!"
    ),
    "driver_meet": (
        "The driver meets you in the arrivals hall right after customs. You'll receive exact meeting instructions "
        "before arrival, including what sign to look for and how to identify your driver. If you can't locate your "
        "driver, contact the emergency phone number or WhatsApp provided in your confirmation email."
    ),
    "flight_delay": (
        "Flight arrivals are monitored in real time. If your flight is delayed, your driver will automatically adjust "
        "the pickup time at no extra charge. Drivers typically wait up to 60 minutes after landing for international "
        "flights. If you experience delays at immigration or baggage claim, you can contact the support number provided."
    ),
    "pricing": (
        "Prices are fixed and confirmed at booking - no hidden fees or surprise charges. Most transfers are charged per "
        "vehicle (not per person), making it cost-effective for families and groups. Round-trip transfers can be booked "
        "together. Tipping is not mandatory but appreciated (10-15% typical). All vehicles are modern, fully "
        "air-conditioned, and include child seats upon request."
    ),
    "default": (
        "The Dominican Republic is a beautiful Caribbean destination with stunning beaches, rich culture, warm people, "
        "and delicious food! It's perfect for relaxation, adventure, or a mix of both. When you're ready to book your "
        "airport transfer, just let me know!"
    ),
}

# Shown by the caller when the Q&A service fails
GENERIC_HELP_MESSAGE = (
    "I'd be happy to help! For questions about Dominican Republic travel, bookings, or our services, "
    "just ask. Or tell me your route to get started with a transfer quote!"
)


def _has_any(text: str, words: List[str]) -> bool:
    return any(word in text for word in words)


def canned_answer(message: str) -> str:
    """Keyword-routed answer; topic checks run in a fixed order"""
    lower = message.lower()

    if "airport" in lower and _has_any(lower, ["pickup", "transfer", "work", "process", "land", "arrival"]):
        return CANNED_ANSWERS["airport_pickup"]
    if _has_any(lower, ["driver", "meet"]) and _has_any(lower, ["where", "find", "wait", "airport"]):
        return CANNED_ANSWERS["driver_meet"]
    if _has_any(lower, ["flight", "plane"]) and _has_any(lower, ["delay", "late", "wait"]):
        return CANNED_ANSWERS["flight_delay"]
    if _has_any(lower, ["price", "pricing", "cost", "fee"]) and _has_any(lower, ["fixed", "per", "hidden", "tip"]):
        return CANNED_ANSWERS["pricing"]
    if _has_any(lower, ["weather", "climate", "temperature", "rain", "hot", "cold"]):
        return CANNED_ANSWERS["weather"]
    if _has_any(lower, ["beach", "sand", "ocean", "swim", "coast"]):
        return CANNED_ANSWERS["beach"]
    if _has_any(lower, ["food", "eat", "restaurant", "cuisine", "drink", "beer"]):
        return CANNED_ANSWERS["food"]
    if _has_any(lower, ["do", "activit", "tour", "visit", "see", "attraction"]):
        return CANNED_ANSWERS["activities"]
    if _has_any(lower, ["safe", "danger", "security", "crime"]):
        return CANNED_ANSWERS["safety"]
    if _has_any(lower, ["money", "currency", "dollar", "peso", "pay", "tip", "atm"]):
        return CANNED_ANSWERS["currency"]
    if _has_any(lower, ["language", "spanish", "english", "speak"]):
        return CANNED_ANSWERS["language"]

    return CANNED_ANSWERS["default"]


class QAService:
    """
    General-question answering with a bounded timeout
    """

    def __init__(
        self,
        service_url: Optional[str] = None,
        api_key: Optional[str] = None,
        openai_api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.service_url = settings.QA_SERVICE_URL if service_url is None else service_url
        self.api_key = settings.SUPABASE_ANON_KEY if api_key is None else api_key
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout or settings.QA_TIMEOUT_SECONDS
        self._http_client = http_client

        openai_key = settings.OPENAI_API_KEY if openai_api_key is None else openai_api_key
        self.openai_client = None
        if openai_key and not openai_key.startswith("sk-your"):
            self.openai_client = AsyncOpenAI(api_key=openai_key, timeout=self.timeout)

    @property
    def backend(self) -> str:
        if self.service_url:
            return "service"
        if self.openai_client:
            return "openai"
        return "canned"

    async def ask(
        self,
        utterance: str,
        history: Optional[List[Dict[str, str]]] = None,
        in_booking_flow: bool = False,
        booking_context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Answer one general question.

        Args:
            utterance: The user's message, original casing
            history: Prior Q&A turns as {"role", "content"} dicts
            in_booking_flow: Whether a booking is in progress
            booking_context: Current booking slots, sent to the hosted function

        Returns:
            Answer text

        Raises:
            QAServiceError: backend failed, timed out or answered empty
        """
        history = history or []

        if self.service_url:
            return await self._ask_service(utterance, history, in_booking_flow, booking_context or {})
        if self.openai_client:
            return await self._ask_openai(utterance, history)
        return canned_answer(utterance)

    async def _ask_service(
        self,
        utterance: str,
        history: List[Dict[str, str]],
        in_booking_flow: bool,
        booking_context: Dict[str, Any],
    ) -> str:
        payload = {
            "message": utterance,
            "conversationHistory": history,
            "isInBookingFlow": in_booking_flow,
            "bookingContext": booking_context,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        try:
            if self._http_client:
                response = await self._http_client.post(
                    self.service_url, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.service_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise QAServiceError(f"Q&A service timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise QAServiceError(f"Q&A service request failed: {e}") from e

        if response.status_code != 200:
            raise QAServiceError(f"Q&A service returned {response.status_code}")

        try:
            answer = response.json().get("response")
        except ValueError as e:
            raise QAServiceError("Q&A service returned invalid JSON") from e

        if not answer:
            raise QAServiceError("Q&A service returned an empty answer")
        return answer

    async def _ask_openai(self, utterance: str, history: List[Dict[str, str]]) -> str:
        messages = [{"role": "system", "content": QA_SYSTEM_PROMPT}]
        for msg in history[-6:]:
            messages.append({"role": msg["role"], "content": msg["content"]})
        messages.append({"role": "user", "content": utterance})

        try:
            response = await self.openai_client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=500,
                temperature=0.7,
            )
        except Exception as e:
            raise QAServiceError(f"OpenAI error: {e}") from e

        answer = response.choices[0].message.content if response.choices else None
        if not answer:
            raise QAServiceError("OpenAI returned an empty answer")
        return answer


# ============================================
# Global Instance
# ============================================

qa_service = QAService()
logger.debug(f"QAService backend: {qa_service.backend}")
