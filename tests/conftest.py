"""공용 픽스처: httpx.MockTransport에 연결된 OllamaClient."""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from roadmap_backend.deps.ollama import OllamaClient  # noqa: E402
from roadmap_backend.deps.settings import OllamaConfig  # noqa: E402


class RecordingHandler:
    """받은 요청을 모두 기록하는 목(mock) 전송 핸들러."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_ollama():
    def _make(respond, **config) -> tuple[OllamaClient, RecordingHandler]:
        handler = RecordingHandler(respond)
        client = OllamaClient(OllamaConfig(**config), transport=httpx.MockTransport(handler))
        return client, handler

    return _make
