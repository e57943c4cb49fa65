from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"
DENIED_ORIGIN = "null"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    origin: str


def decide_access(origin: str | None, allowed_origins: Collection[str]) -> AccessDecision:
    candidate = origin or ""
    if candidate and candidate in allowed_origins:
        return AccessDecision(allowed=True, origin=candidate)
    # Never reflect an origin that is not allow-listed.
    return AccessDecision(allowed=False, origin=DENIED_ORIGIN)


def cors_headers(decision: AccessDecision, *, max_age: int | None = None) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Origin": decision.origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Vary": "Origin",
    }
    if max_age is not None:
        headers["Access-Control-Max-Age"] = str(max_age)
    return headers
