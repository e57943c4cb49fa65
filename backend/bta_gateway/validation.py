from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import InvalidBody, MissingField, PayloadTooLarge, UnsupportedMode


class Mode(str, Enum):
    SECTION_DEEP_DIVE = "section_deep_dive"
    FULL_REPORT = "full_report"


class AnalysisRequest(BaseModel):
    mode: Mode
    section_id: str | None = None
    bta_payload: Any


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_analysis_request(raw_body: bytes, *, max_body_bytes: int | None = None) -> AnalysisRequest:
    """Parse a POST body into an AnalysisRequest.

    Each check raises its own GatewayError subclass; the checks run in a fixed
    order so the same body always fails the same way. The contents of
    ``bta_payload`` are not inspected.
    """
    if max_body_bytes is not None and len(raw_body) > max_body_bytes:
        raise PayloadTooLarge(f"Body exceeds {max_body_bytes} bytes.")

    try:
        body = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidBody(str(exc)) from exc

    if not isinstance(body, dict):
        body = {}

    mode = body.get("mode")
    section_id = body.get("section_id")
    bta_payload = body.get("bta_payload")

    if _is_absent(mode) or _is_absent(bta_payload):
        raise MissingField()

    try:
        parsed_mode = Mode(mode)
    except ValueError as exc:
        known = ", ".join(item.value for item in Mode)
        raise UnsupportedMode(f"mode must be one of: {known}") from exc

    if not isinstance(section_id, str) or not section_id.strip():
        if parsed_mode is Mode.SECTION_DEEP_DIVE:
            raise MissingField(error="Missing section_id for section_deep_dive")
        section_id = None

    return AnalysisRequest(mode=parsed_mode, section_id=section_id, bta_payload=bta_payload)
