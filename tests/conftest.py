"""
Global test configuration with support for different test types.
"""

from collections.abc import Callable
import json
import logging
import os
from typing import Any

import httpx
import pytest

from structgen.adapters import HttpTransport
from structgen.config import FrozenConfig


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_structgen_env(request, monkeypatch):
    """Ensure a clean STRUCTGEN_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("STRUCTGEN_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles affecting telemetry paths
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_config_files(request, monkeypatch, tmp_path):
    """Point the home config at an empty temp dir and run from a temp cwd.

    Prevents reading a developer's real ~/.config/structgen.toml or the
    repository's pyproject.toml during tests.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return

    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("STRUCTGEN_CONFIG_HOME", str(fake_home_dir))

    workdir = tmp_path / "cwd"
    workdir.mkdir(exist_ok=True)
    monkeypatch.chdir(workdir)


# --- Configuration Fixtures ---
@pytest.fixture
def frozen_config() -> FrozenConfig:
    """A usable config for the native-schema (google) provider."""
    return FrozenConfig(api_key="test-key", stage_timeout=5.0)


@pytest.fixture
def compat_config() -> FrozenConfig:
    """A usable config for an OpenAI-compatible provider."""
    return FrozenConfig(provider="deepseek", api_key="test-key", stage_timeout=5.0)


# --- HTTP Mocking ---
class RecordingHandler:
    """`httpx.MockTransport` handler that records every request it serves."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def mock_http() -> Callable[..., tuple[HttpTransport, RecordingHandler]]:
    """Factory: build an `HttpTransport` backed by `httpx.MockTransport`.

    Usage:
        transport, handler = mock_http(lambda req: httpx.Response(200, json={...}))
    """

    def _make(
        responder: Callable[[httpx.Request], httpx.Response],
    ) -> tuple[HttpTransport, RecordingHandler]:
        handler = RecordingHandler(responder)
        return HttpTransport(timeout=5.0, transport=httpx.MockTransport(handler)), handler

    return _make


@pytest.fixture
def gemini_reply() -> Callable[..., dict[str, Any]]:
    """Build a ``generateContent`` response body."""

    def _reply(text: str, finish_reason: str = "STOP") -> dict[str, Any]:
        return {
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"text": text}]},
                    "finishReason": finish_reason,
                }
            ],
            "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 20},
            "modelVersion": "gemini-2.0-flash",
        }

    return _reply


@pytest.fixture
def openai_reply() -> Callable[..., dict[str, Any]]:
    """Build a ``chat/completions`` response body."""

    def _reply(text: str | None, finish_reason: str = "stop") -> dict[str, Any]:
        return {
            "model": "deepseek-chat",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": text},
                    "finish_reason": finish_reason,
                }
            ],
            "usage": {"prompt_tokens": 10, "completion_tokens": 20},
        }

    return _reply


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked HTTP",
        "slow: Tests that take >1 second",
        "allow_env_pollution: Keep STRUCTGEN_* variables from the real environment",
        "allow_real_home_config: Read the real home configuration file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
