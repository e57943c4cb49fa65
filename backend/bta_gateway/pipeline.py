from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import Settings
from .cors import AccessDecision, decide_access
from .errors import ForbiddenOrigin, GatewayError, MethodNotAllowed, PayloadTooLarge, UnhandledFault
from .generation import GenerationClient
from .prompts import build_generation_input, build_instructions, serialize_generation_input
from .responses import ResponseEnvelope, shape_response
from .validation import parse_analysis_request

logger = logging.getLogger(__name__)

Generator = Callable[[str, str], str]


@dataclass(frozen=True)
class RequestEnvelope:
    method: str
    origin: str
    raw_body: bytes = b""
    oversized: bool = False


class AnalysisGateway:
    """Admits, validates and dispatches one BTA analysis request at a time.

    Holds only read-only configuration, so one instance serves every request.
    ``generator`` takes (instructions, input_text) and returns the analysis
    text; it defaults to a GenerationClient built from ``settings``.
    """

    def __init__(self, settings: Settings, generator: Generator | None = None) -> None:
        self.settings = settings
        self.client = GenerationClient(settings)
        self.generator: Generator = generator or self.client.generate

    def handle(self, envelope: RequestEnvelope) -> ResponseEnvelope:
        decision = decide_access(envelope.origin, self.settings.allowed_origins)
        try:
            return self._dispatch(envelope, decision)
        except GatewayError as exc:
            level = logging.WARNING if exc.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "request rejected (method=%s, origin_allowed=%s, status=%s, error=%s, detail=%s)",
                envelope.method,
                decision.allowed,
                exc.status_code,
                exc.error,
                exc.detail,
            )
            return self._error_response(decision, exc)
        except Exception:
            logger.exception("unhandled fault while serving %s request", envelope.method)
            return self._error_response(decision, UnhandledFault())

    def _dispatch(self, envelope: RequestEnvelope, decision: AccessDecision) -> ResponseEnvelope:
        method = envelope.method.upper()
        if method == "OPTIONS":
            return shape_response(decision, 204, max_age=self.settings.preflight_max_age)
        if method != "POST":
            raise MethodNotAllowed()
        if not decision.allowed:
            raise ForbiddenOrigin()
        if envelope.oversized:
            raise PayloadTooLarge(f"Body exceeds {self.settings.max_body_bytes} bytes.")

        request = parse_analysis_request(envelope.raw_body, max_body_bytes=self.settings.max_body_bytes)
        self.client.ensure_configured()

        instructions = build_instructions(request.mode)
        input_text = serialize_generation_input(build_generation_input(request))
        text = self.generator(instructions, input_text)
        logger.info("analysis generated (mode=%s, section_id=%s)", request.mode.value, request.section_id)
        return shape_response(decision, 200, {"ok": True, "text": text or ""})

    def _error_response(self, decision: AccessDecision, exc: GatewayError) -> ResponseEnvelope:
        extra_headers = {"Allow": "POST, OPTIONS"} if isinstance(exc, MethodNotAllowed) else None
        return shape_response(decision, exc.status_code, exc.as_body(), extra_headers=extra_headers)
