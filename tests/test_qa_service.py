# tests/test_qa_service.py
"""
Q&A service backends: hosted function over httpx and canned answers
"""

import asyncio
import json

import httpx
import pytest

from transfer_agent.exceptions import QAServiceError
from transfer_agent.llm.qa_service import CANNED_ANSWERS, QAService, canned_answer


SERVICE_URL = "https://example.supabase.co/functions/v1/chat"


def make_service(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return QAService(service_url=SERVICE_URL, api_key="anon", openai_api_key="", http_client=client)


def test_canned_backend_without_configuration():
    service = QAService(service_url="", openai_api_key="")
    assert service.backend == "canned"
    answer = asyncio.run(service.ask("What's the weather like?"))
    assert answer == CANNED_ANSWERS["weather"]


def test_canned_answer_topics():
    assert canned_answer("What if my flight is late?") == CANNED_ANSWERS["flight_delay"]
    assert canned_answer("Best food to try") == CANNED_ANSWERS["food"]
    assert canned_answer("xyz") == CANNED_ANSWERS["default"]


def test_service_backend_sends_history_and_context():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"response": "It is sunny."})

    service = make_service(handler)
    assert service.backend == "service"

    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    answer = asyncio.run(service.ask("Weather?", history, True, {"step": "AWAITING_PASSENGERS"}))

    assert answer == "It is sunny."
    assert seen["auth"] == "Bearer anon"
    assert seen["body"] == {
        "message": "Weather?",
        "conversationHistory": history,
        "isInBookingFlow": True,
        "bookingContext": {"step": "AWAITING_PASSENGERS"},
    }


def test_service_error_status_raises():
    service = make_service(lambda request: httpx.Response(503, json={"error": "down"}))
    with pytest.raises(QAServiceError):
        asyncio.run(service.ask("Weather?"))


def test_service_empty_answer_raises():
    service = make_service(lambda request: httpx.Response(200, json={"response": ""}))
    with pytest.raises(QAServiceError):
        asyncio.run(service.ask("Weather?"))


def test_service_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    service = make_service(handler)
    with pytest.raises(QAServiceError):
        asyncio.run(service.ask("Weather?"))
