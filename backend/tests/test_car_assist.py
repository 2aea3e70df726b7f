import httpx
import pytest

from impactlog.core.config import Settings
from impactlog.core.identity import AccessPolicy
from impactlog.services.car_assist import (
    UNPARSED_WARNING,
    AssistDenied,
    AssistNotConfigured,
    AssistUpstreamError,
    CarAssistant,
    parse_car_response,
)
from conftest import GUEST, OWNER, OWNER_EMAIL, OWNER_HEADERS, GUEST_HEADERS

WELL_FORMED = """Challenge:
Release was slipping because of flaky tests.

Action:
I quarantined the flaky suites and set up owners.

Result:
The release shipped on time."""


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_assistant(handler, api_key="test-key") -> CarAssistant:
    settings = Settings(gemini_api_key=api_key, privileged_email=OWNER_EMAIL)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CarAssistant(settings, AccessPolicy(OWNER_EMAIL), client=client)


def test_parse_well_formed_response():
    draft = parse_car_response(WELL_FORMED)
    assert draft.challenge == "Release was slipping because of flaky tests."
    assert draft.action == "I quarantined the flaky suites and set up owners."
    assert draft.result == "The release shipped on time."
    assert draft.warning is None


def test_parse_tolerates_bold_markers():
    text = "**Challenge:** Slow reviews.\n\n**Action:** I added a rota.\n\n**Result:** Reviews land in a day."
    draft = parse_car_response(text)
    assert draft.challenge == "Slow reviews."
    assert draft.action == "I added a rota."
    assert draft.result == "Reviews land in a day."


def test_parse_without_sections_keeps_raw_text():
    draft = parse_car_response("Just a paragraph with no structure.")
    assert draft.challenge == "Just a paragraph with no structure."
    assert draft.action == ""
    assert draft.result == ""
    assert draft.warning == UNPARSED_WARNING


def test_parse_partial_response_reports_missing_sections():
    draft = parse_car_response("Challenge:\nSomething broke.\n\nAction:\nI fixed it.")
    assert draft.challenge == "Something broke."
    assert draft.result == ""
    assert "Action" in draft.warning and "Result" in draft.warning


async def test_rewrite_calls_generate_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.content.decode()
        return httpx.Response(200, json=gemini_reply(WELL_FORMED))

    draft = await make_assistant(handler).rewrite(OWNER, "  fixed flaky tests, release on time  ")

    assert ":generateContent" in seen["url"]
    assert "key=test-key" in seen["url"]
    assert "fixed flaky tests, release on time" in seen["body"]
    assert draft.result == "The release shipped on time."


async def test_denied_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assistant = make_assistant(handler)
    with pytest.raises(AssistDenied):
        await assistant.rewrite(GUEST, "some notes")
    with pytest.raises(AssistDenied):
        await assistant.rewrite(None, "some notes")


async def test_empty_text_rejected():
    assistant = make_assistant(lambda request: httpx.Response(200, json=gemini_reply(WELL_FORMED)))
    with pytest.raises(ValueError):
        await assistant.rewrite(OWNER, "   ")


async def test_missing_api_key():
    assistant = make_assistant(lambda request: httpx.Response(200), api_key=None)
    with pytest.raises(AssistNotConfigured):
        await assistant.rewrite(OWNER, "notes")


async def test_upstream_failure_is_wrapped():
    assistant = make_assistant(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(AssistUpstreamError):
        await assistant.rewrite(OWNER, "notes")


async def test_empty_candidates_is_upstream_error():
    assistant = make_assistant(lambda request: httpx.Response(200, json={"candidates": []}))
    with pytest.raises(AssistUpstreamError):
        await assistant.rewrite(OWNER, "notes")


def test_assist_endpoint_status_codes(client):
    assert client.post("/assist/car", json={"text": "notes"}).status_code == 401
    assert client.post("/assist/car", json={"text": "notes"}, headers=GUEST_HEADERS).status_code == 403
    # no key configured in the test environment
    assert client.post("/assist/car", json={"text": "notes"}, headers=OWNER_HEADERS).status_code == 503
