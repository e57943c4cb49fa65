from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings
from .errors import GenerationFailure, MissingConfiguration

logger = logging.getLogger(__name__)

WEB_SEARCH_TOOL = {"type": "web_search"}
ERROR_SNIPPET_CHARS = 300


def _snippet(text: str) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) <= ERROR_SNIPPET_CHARS:
        return collapsed
    return collapsed[: ERROR_SNIPPET_CHARS - 3] + "..."


def provider_error_message(response: httpx.Response) -> str:
    """Best human-readable reason from a failed provider response, bounded in length."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        err = payload.get("error")
        candidates = [err.get("message") if isinstance(err, dict) else err, payload.get("message")]
        for candidate in candidates:
            if isinstance(candidate, str) and candidate.strip():
                return _snippet(candidate)
    return _snippet(response.text) or f"HTTP {response.status_code}"


def coerce_output_text(response_json: dict[str, Any]) -> str:
    """Return the plain-text answer of a Responses API payload.

    Prefers the aggregated ``output_text`` field and otherwise joins the
    ``output_text`` parts of every message item. Tool call items are skipped.
    """
    direct = response_json.get("output_text")
    if isinstance(direct, str):
        return direct
    output = response_json.get("output")
    if not isinstance(output, list):
        raise ValueError("response has no output list")
    parts: list[str] = []
    for item in output:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for part in content:
            if isinstance(part, dict) and part.get("type") == "output_text":
                text_value = part.get("text")
                if isinstance(text_value, str):
                    parts.append(text_value)
    return "".join(parts)


class GenerationClient:
    """Calls the OpenAI Responses API with the web search tool enabled."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def ensure_configured(self) -> str:
        api_key = (self.settings.openai_api_key or "").strip()
        if not api_key:
            raise MissingConfiguration("OPENAI_API_KEY is not set.")
        return api_key

    def build_payload(self, instructions: str, input_text: str) -> dict[str, Any]:
        return {
            "model": self.settings.model,
            "instructions": instructions,
            "input": input_text,
            "tools": [dict(WEB_SEARCH_TOOL)],
            "tool_choice": "required" if self.settings.force_web_search else "auto",
            "max_output_tokens": self.settings.max_output_tokens,
        }

    def generate(self, instructions: str, input_text: str) -> str:
        api_key = self.ensure_configured()
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(instructions, input_text)
        timeout = httpx.Timeout(self.settings.timeout_seconds, connect=8.0)
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                response = client.post(f"{self.settings.api_base_url}/responses", headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise GenerationFailure(f"Provider timed out after {self.settings.timeout_seconds:g}s.") from exc
        except httpx.HTTPError as exc:
            raise GenerationFailure(f"Failed to reach provider: {exc}") from exc

        if response.status_code >= 400:
            raise GenerationFailure(f"HTTP {response.status_code}: {provider_error_message(response)}")

        try:
            response_json = response.json()
        except ValueError as exc:
            raise GenerationFailure("Provider returned invalid JSON.") from exc
        if not isinstance(response_json, dict):
            raise GenerationFailure("Provider returned an unexpected payload.")

        try:
            text = coerce_output_text(response_json)
        except ValueError as exc:
            raise GenerationFailure(f"Provider returned a malformed response: {exc}") from exc

        logger.info(
            "generation completed (model=%s, status=%s, chars=%d)",
            self.settings.model,
            response_json.get("status", "unknown"),
            len(text),
        )
        return text
