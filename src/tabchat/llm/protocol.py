"""LLMClient protocol plus the two provider adapters.

OpenRouter speaks the OpenAI chat-completions API, so it goes through the
OpenAI SDK with a different base URL. Gemini is called over its REST API.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx
import openai

from tabchat.config import settings
from tabchat.domain.exceptions import LLMError

RATE_LIMITED = "Rate limit exceeded. Please wait a moment and try again, or check your API key limits."
BAD_KEY = "Invalid API key. Please check your {env} environment variable."
BAD_REQUEST = "Invalid request. Please check your query and try again."
UNAVAILABLE = "Service temporarily unavailable. Please try again in a moment."
NETWORK = "Network error. Please check your internet connection and try again."
TIMEOUT = "Request timed out. The API is taking too long to respond. Please try again."


class Provider(str, Enum):
    OPENROUTER = "openrouter"
    GEMINI = "gemini"
    NONE = "none"


def pick_provider() -> Provider:
    if settings.OPENROUTER_API_KEY and settings.OPENROUTER_API_KEY.get_secret_value():
        return Provider.OPENROUTER
    if settings.GEMINI_API_KEY and settings.GEMINI_API_KEY.get_secret_value():
        return Provider.GEMINI
    return Provider.NONE


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for a single chat completion returning the reply text."""

    def complete(self, *, system: str, messages: list[dict[str, str]]) -> str:
        ...


class OpenRouterLLMClient:
    """Adapter over the OpenAI SDK pointed at OpenRouter."""

    def __init__(self, openai_client: Any | None = None) -> None:
        if openai_client is not None:
            self._client = openai_client
        else:
            self._client = openai.OpenAI(
                api_key=settings.OPENROUTER_API_KEY.get_secret_value(),
                base_url=settings.OPENROUTER_BASE_URL,
                timeout=settings.LLM_TIMEOUT,
                default_headers={
                    "HTTP-Referer": settings.OPENROUTER_REFERER,
                    "X-Title": settings.OPENROUTER_TITLE,
                },
            )

    def complete(self, *, system: str, messages: list[dict[str, str]]) -> str:
        try:
            response = self._client.chat.completions.create(
                model=settings.OPENROUTER_MODEL,
                messages=[{"role": "system", "content": system}, *messages],
                temperature=settings.LLM_TEMPERATURE,
            )
        except openai.RateLimitError as exc:
            raise LLMError(RATE_LIMITED) from exc
        except openai.AuthenticationError as exc:
            raise LLMError(BAD_KEY.format(env="OPENROUTER_API_KEY")) from exc
        except openai.BadRequestError as exc:
            raise LLMError(BAD_REQUEST) from exc
        except openai.APITimeoutError as exc:
            raise LLMError(TIMEOUT) from exc
        except openai.APIConnectionError as exc:
            raise LLMError(NETWORK) from exc
        except openai.APIStatusError as exc:
            raise LLMError(f"OpenRouter error {exc.status_code}: {exc.message}") from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


class GeminiLLMClient:
    """Gemini generateContent over httpx. The conversation is collapsed into one prompt."""

    def __init__(self, http_client: httpx.Client | None = None) -> None:
        self._http = http_client or httpx.Client(
            base_url=settings.GEMINI_BASE_URL, timeout=settings.LLM_TIMEOUT,
        )

    def complete(self, *, system: str, messages: list[dict[str, str]]) -> str:
        conversation = "\n\n".join(f"{m['role'].upper()}: {m['content']}" for m in messages)
        payload = {
            "contents": [{
                "role": "user",
                "parts": [{"text": f"System instructions:\n{system}\n\nConversation:\n{conversation}"}],
            }],
            "generationConfig": {"temperature": settings.LLM_TEMPERATURE},
        }
        try:
            resp = self._http.post(
                f"/models/{settings.GEMINI_MODEL}:generateContent",
                params={"key": settings.GEMINI_API_KEY.get_secret_value()},
                json=payload,
            )
        except httpx.TimeoutException as exc:
            raise LLMError(TIMEOUT) from exc
        except httpx.TransportError as exc:
            raise LLMError(NETWORK) from exc

        if not resp.is_success:
            raise LLMError(self._status_message(resp))

        data = resp.json()
        candidate = (data.get("candidates") or [{}])[0]
        parts = (candidate.get("content") or {}).get("parts") or [{}]
        text = parts[0].get("text") or ""
        if not text and candidate.get("finishReason"):
            raise LLMError(f"Gemini response incomplete: {candidate['finishReason']}")
        return text

    def _status_message(self, resp: httpx.Response) -> str:
        if resp.status_code == 429:
            return RATE_LIMITED
        if resp.status_code in (401, 403):
            return BAD_KEY.format(env="GEMINI_API_KEY")
        if resp.status_code == 400:
            return BAD_REQUEST
        if resp.status_code == 503:
            return UNAVAILABLE
        try:
            body = resp.json()
            detail = (body.get("error") or {}).get("message") or body.get("message")
        except ValueError:
            detail = None
        return detail or f"Gemini error {resp.status_code}"


def build_client(provider: Provider) -> LLMClient:
    if provider is Provider.OPENROUTER:
        return OpenRouterLLMClient()
    if provider is Provider.GEMINI:
        return GeminiLLMClient()
    raise LLMError("No provider configured. Set OPENROUTER_API_KEY or GEMINI_API_KEY.")
