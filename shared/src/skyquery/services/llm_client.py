"""Chat-completions client for OpenAI-compatible providers (Groq by default).

Providers are configured per named slot so the model behind one use case can
change without touching the others.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_MAX_ERROR_DETAIL = 400


@dataclass
class LLMSlotConfig:
    """Provider, model and sampling defaults for one slot."""

    slot: str
    provider_name: str
    api_endpoint: str
    model_id: str
    api_key: str = field(repr=False)
    max_tokens: int | None = None
    temperature: float = 0.0
    extra_params: dict[str, Any] = field(default_factory=dict)

    @property
    def completions_url(self) -> str:
        return f"{self.api_endpoint.rstrip('/')}/chat/completions"


def _error_detail(response: httpx.Response) -> str:
    """Best-effort human message from a provider error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    detail: object = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            detail = error.get("message") or error.get("code")
        else:
            detail = error or body.get("message")
    text = str(detail) if detail else response.text.strip()
    return text[:_MAX_ERROR_DETAIL]


class LLMClient:
    """Async client shared by every slot; one connection pool per process."""

    def __init__(self, timeout: float = 60.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._slots: dict[str, LLMSlotConfig] = {}

    def configure_slot(self, config: LLMSlotConfig) -> None:
        self._slots[config.slot] = config

    def get_slot(self, slot: str) -> LLMSlotConfig:
        try:
            return self._slots[slot]
        except KeyError:
            raise ValueError(f"LLM slot '{slot}' not configured") from None

    @staticmethod
    def _build_payload(
        config: LLMSlotConfig,
        messages: list[dict[str, str]],
        temperature: float | None,
        max_tokens: int | None,
        response_format: dict | None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": config.model_id,
            "messages": messages,
            "temperature": config.temperature if temperature is None else temperature,
        }
        if max_tokens or config.max_tokens:
            payload["max_tokens"] = max_tokens or config.max_tokens
        if response_format:
            payload["response_format"] = response_format
        payload.update(config.extra_params)
        return payload

    async def generate(
        self,
        slot: str,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict | None = None,
    ) -> str:
        """Run one chat completion and return the assistant's text.

        Raises ``RuntimeError`` for transport failures, non-2xx statuses and
        replies without a message.
        """
        config = self.get_slot(slot)
        url = config.completions_url
        payload = self._build_payload(config, messages, temperature, max_tokens, response_format)
        headers = {"Authorization": f"Bearer {config.api_key}"}

        logger.info("LLM request slot=%s model=%s", slot, config.model_id)
        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise RuntimeError(f"LLM API request to {url} failed: {exc}") from exc

        if response.is_error:
            raise RuntimeError(f"LLM API request failed ({response.status_code}) at {url}: {_error_detail(response)}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise RuntimeError(f"LLM API returned an unexpected body from {url}") from exc

        logger.info("LLM response slot=%s usage=%s", slot, data.get("usage", {}))
        return content

    async def close(self) -> None:
        await self._client.aclose()


def strip_json_fencing(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        _, _, text = text.partition("\n")
    if text.endswith("```"):
        text = text[:-3].rstrip()
    return text


def _parse_and_validate(text: str, validate_fn: Callable[[Any], object]) -> Any:
    data = json.loads(strip_json_fencing(text))
    validate_fn(data)
    return data


async def generate_with_validation(
    client: LLMClient,
    slot: str,
    messages: list[dict[str, str]],
    validate_fn: Callable[[Any], object],
    *,
    temperature: float | None = None,
    max_tokens: int | None = None,
    response_format: dict | None = None,
    repair_retry: bool = True,
) -> Any:
    """Ask for JSON, validate it, and on failure ask the model once to fix it.

    ``validate_fn`` receives the decoded JSON and raises ``ValueError`` (pydantic's
    ``ValidationError`` included) when it is unacceptable. The last
    ``ValueError`` is re-raised when no attempt validates.
    """
    options = {"temperature": temperature, "max_tokens": max_tokens, "response_format": response_format}
    reply = await client.generate(slot, messages, **options)
    try:
        return _parse_and_validate(reply, validate_fn)
    except ValueError as exc:
        if not repair_retry:
            raise
        logger.warning("LLM output for slot=%s rejected, asking for a repair: %s", slot, exc)
        problem = exc

    repair = [
        *messages,
        {"role": "assistant", "content": reply},
        {
            "role": "user",
            "content": (
                "Your previous output was invalid.\n\n"
                f"Validation errors:\n{problem}\n\n"
                "Return ONLY the corrected JSON, with no other text."
            ),
        },
    ]
    reply = await client.generate(slot, repair, **options)
    return _parse_and_validate(reply, validate_fn)
