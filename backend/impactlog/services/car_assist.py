"""Rewrite rough notes into Challenge / Action / Result prose.

Uses the Gemini `generateContent` REST endpoint. The feature is restricted to
the privileged account and the check happens before any network call.
"""
import logging
import re
from typing import Optional

import httpx

from impactlog.core.config import Settings
from impactlog.core.identity import AccessPolicy, Principal
from impactlog.schemas.assist import CarDraft

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an Impact Log assistant built for a Staff or Senior Technical Program Manager.

Your sole purpose is to convert rough, unpolished user input into clear,
promotion-ready impact statements using the Challenge-Action-Result format.

Operating rules:
- Always use the Challenge-Action-Result structure.
- Assume inputs are rough, incomplete, or informal.
- Preserve the original intent exactly.
- Do not exaggerate impact.
- Do not invent metrics, scope, or outcomes.
- Use only the information explicitly provided by the user.
- Rewrite with clarity, precision, and an executive tone.
- Frame impact in business terms such as clarity, risk reduction,
  delivery predictability, quality, stakeholder alignment, or execution speed.
- Use first-person ownership in the Action section.
- Keep language concise, confident, and outcome-driven.
- No emojis.
- No casual language.
- No filler.
- Suitable for 1:1s, promotion packets, and leadership reviews.
- Do not ask follow-up questions.

Output format (strict):

Challenge:
<1-2 lines>

Action:
<2-3 lines, first-person ownership>

Result:
<1-2 lines, business outcome>
"""

# Section bodies stop at the next marker; markdown bold around markers is tolerated.
_CHALLENGE_RE = re.compile(r"Challenge:\**\s*(.*?)\s*\**\s*(?=Action:)", re.IGNORECASE | re.DOTALL)
_ACTION_RE = re.compile(r"Action:\**\s*(.*?)\s*\**\s*(?=Result:)", re.IGNORECASE | re.DOTALL)
_RESULT_RE = re.compile(r"Result:\**\s*(.*)$", re.IGNORECASE | re.DOTALL)

UNPARSED_WARNING = (
    "Could not find Challenge/Action/Result sections; "
    "the full response was placed in Challenge."
)


class AssistError(Exception):
    """Base class for rewrite failures."""


class AssistDenied(AssistError):
    """The principal may not use the rewrite feature."""


class AssistNotConfigured(AssistError):
    """No API key is configured."""


class AssistUpstreamError(AssistError):
    """The generative-language API failed or returned no text."""


def _section(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def parse_car_response(text: str) -> CarDraft:
    challenge = _section(_CHALLENGE_RE, text)
    action = _section(_ACTION_RE, text)
    result = _section(_RESULT_RE, text)

    if not (challenge or action or result):
        logger.warning("Failed to parse CAR format from model response")
        return CarDraft(challenge=text.strip(), warning=UNPARSED_WARNING)

    missing = [name for name, value in
               (("Challenge", challenge), ("Action", action), ("Result", result)) if not value]
    warning = f"Missing section(s): {', '.join(missing)}" if missing else None
    return CarDraft(challenge=challenge, action=action, result=result, warning=warning)


def build_prompt(text: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nUser input:\n{text}"


def extract_text(payload: dict) -> str:
    """Concatenate the text parts of the first candidate."""
    try:
        parts = payload["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise AssistUpstreamError("Response contained no candidates")
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
    if not text.strip():
        raise AssistUpstreamError("Response contained no text")
    return text


class CarAssistant:
    def __init__(self, settings: Settings, policy: AccessPolicy, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.policy = policy
        self.client = client

    def _url(self) -> str:
        base = self.settings.gemini_base_url.rstrip("/")
        return f"{base}/models/{self.settings.gemini_model}:generateContent"

    async def _generate(self, prompt: str) -> dict:
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        params = {"key": self.settings.gemini_api_key}
        if self.client is not None:
            r = await self.client.post(self._url(), params=params, json=body)
        else:
            async with httpx.AsyncClient(timeout=self.settings.gemini_timeout_seconds) as client:
                r = await client.post(self._url(), params=params, json=body)
        r.raise_for_status()
        return r.json()

    async def rewrite(self, principal: Optional[Principal], text: str) -> CarDraft:
        if not self.policy.is_privileged(principal):
            logger.warning(
                "Unauthorized rewrite attempt by: %s",
                (principal.email if principal else None) or "unknown",
            )
            raise AssistDenied("This feature is restricted to the authorized administrator only.")
        if not text or not text.strip():
            raise ValueError("The 'text' field is required.")
        if not self.settings.gemini_api_key:
            logger.error("Gemini API key is not configured")
            raise AssistNotConfigured("Gemini API key is not configured.")

        try:
            payload = await self._generate(build_prompt(text.strip()))
        except httpx.HTTPError as e:
            logger.error("Error calling Gemini API: %s", e)
            raise AssistUpstreamError("Failed to generate CAR content.") from e
        return parse_car_response(extract_text(payload))
