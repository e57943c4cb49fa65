from __future__ import annotations

import importlib
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from bta_gateway import Settings, config, create_app  # noqa: E402

ALLOWED_ORIGIN = "https://brainhealth.example.com"
OTHER_ORIGIN = "https://evil.example.net"
ROUTE = "/api/bta-ai"


class StubGenerator:
    def __init__(self, text: str = "X") -> None:
        self.text = text
        self.calls: list[tuple[str, str]] = []

    def __call__(self, instructions: str, input_text: str) -> str:
        self.calls.append((instructions, input_text))
        return self.text


@pytest.fixture
def settings() -> Settings:
    return Settings(
        allowed_origins=frozenset({ALLOWED_ORIGIN, "https://www.brainhealth.example.com"}),
        openai_api_key="test-openai-key",
    )


@pytest.fixture
def generator() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def make_client(settings) -> Callable[..., TestClient]:
    def _make(generator=None, **overrides) -> TestClient:
        return TestClient(create_app(replace(settings, **overrides), generator=generator))

    return _make


@pytest.fixture
def client(make_client, generator):
    with make_client(generator=generator) as test_client:
        yield test_client


@pytest.fixture
def backend_module(monkeypatch):
    monkeypatch.setattr(config, "bootstrap_local_env", lambda: None)
    monkeypatch.setenv("BTA_ALLOWED_ORIGINS", f"{ALLOWED_ORIGIN}, https://www.brainhealth.example.com")
    monkeypatch.setenv("OPENAI_API_KEY", "env-openai-key")
    monkeypatch.delenv("BTA_ROUTE_PATH", raising=False)

    if "main" in sys.modules:
        module = importlib.reload(sys.modules["main"])
    else:
        module = importlib.import_module("main")
    return module


@pytest.fixture
def origin_headers() -> Callable[[str], dict[str, str]]:
    def _make(origin: str = ALLOWED_ORIGIN) -> dict[str, str]:
        return {"Origin": origin, "Content-Type": "application/json"}

    return _make
