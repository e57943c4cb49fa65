from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000"
DEFAULT_API_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-5"
DEFAULT_ROUTE_PATH = "/api/bta-ai"


def _load_local_env_file(path: Path) -> list[str]:
    """Copy KEY=value pairs from ``path`` into os.environ without overriding set variables.

    Returns the keys that were actually set from the file.
    """
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return []
    loaded: list[str] = []
    for raw in lines:
        line = raw.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not _ENV_KEY_RE.fullmatch(key) or key in os.environ:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        os.environ[key] = value
        loaded.append(key)
    return loaded


def bootstrap_local_env() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    candidates = [
        repo_root / ".env",
        repo_root / "backend/.env",
    ]
    for candidate in candidates:
        if candidate.exists():
            _load_local_env_file(candidate)


def parse_origins(raw: str | None) -> frozenset[str]:
    # Exact strings only; a trailing slash makes a different origin.
    return frozenset(item.strip() for item in (raw or "").split(",") if item.strip())


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive")
    return value


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive")
    return value


@dataclass(frozen=True)
class Settings:
    """Process-wide, read-only configuration injected into the gateway at startup."""

    allowed_origins: frozenset[str]
    openai_api_key: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    model: str = DEFAULT_MODEL
    max_output_tokens: int = 6000
    force_web_search: bool = True
    timeout_seconds: float = 120.0
    max_body_bytes: int = 512 * 1024
    preflight_max_age: int = 600
    route_path: str = DEFAULT_ROUTE_PATH
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read the environment and return an immutable Settings object.

    A missing OPENAI_API_KEY is not an error here; the gateway reports it per
    request so the endpoint still answers preflights and validation errors.

    Raises:
        RuntimeError: If a numeric variable is malformed.
    """
    bootstrap_local_env()
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    route_path = (os.getenv("BTA_ROUTE_PATH") or DEFAULT_ROUTE_PATH).strip()
    if not route_path.startswith("/"):
        route_path = f"/{route_path}"
    return Settings(
        allowed_origins=parse_origins(os.getenv("BTA_ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)),
        openai_api_key=api_key or None,
        api_base_url=(os.getenv("OPENAI_API_BASE_URL") or DEFAULT_API_BASE_URL).strip().rstrip("/"),
        model=(os.getenv("BTA_MODEL") or DEFAULT_MODEL).strip(),
        max_output_tokens=_env_int("BTA_MAX_OUTPUT_TOKENS", 6000),
        force_web_search=_env_flag("BTA_FORCE_WEB_SEARCH", True),
        timeout_seconds=_env_float("BTA_TIMEOUT_SECONDS", 120.0),
        max_body_bytes=_env_int("BTA_MAX_BODY_BYTES", 512 * 1024),
        preflight_max_age=_env_int("BTA_PREFLIGHT_MAX_AGE", 600),
        route_path=route_path,
        log_level=(os.getenv("BTA_LOG_LEVEL") or "INFO").strip().upper(),
    )
