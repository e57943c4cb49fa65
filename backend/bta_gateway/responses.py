from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .cors import AccessDecision, cors_headers


@dataclass
class ResponseEnvelope:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] | None = None


def shape_response(
    decision: AccessDecision,
    status_code: int,
    body: dict[str, Any] | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    max_age: int | None = None,
) -> ResponseEnvelope:
    """Build a response for any exit path; CORS headers are always attached."""
    headers = {"Content-Type": "application/json"}
    headers.update(extra_headers or {})
    headers.update(cors_headers(decision, max_age=max_age))
    return ResponseEnvelope(status_code=status_code, headers=headers, body=body)
