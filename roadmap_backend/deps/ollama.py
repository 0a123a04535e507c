"""Ollama LLM 호출 클라이언트.

비전공자 팁: 호출마다 `/api/generate`로 POST 한 번을 보내고 응답을 기다립니다.
스트리밍이나 재시도는 하지 않습니다.
"""
from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any

import httpx
from prometheus_client import Counter, Histogram

from roadmap_backend.deps.settings import OllamaConfig, settings
from roadmap_backend.models.schema import RoadmapNode
from roadmap_backend.services.errors import RemoteError, TransportError
from roadmap_backend.services.prompt import build_generate_payload
from roadmap_backend.services.roadmap_parser import extract_answer, parse_tree

LOGGER = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"

OLLAMA_REQUESTS = Counter("ollama_requests_total", "Ollama generate calls", ["outcome"])
OLLAMA_LATENCY = Histogram("ollama_request_seconds", "Ollama generate call duration")


class OllamaClient:
    """로컬 Ollama 서버를 호출하고 로드맵 답변을 파싱합니다.

    설정값만 보관하므로 여러 스레드에서 하나의 인스턴스를 공유해도 됩니다.
    테스트에서는 ``transport``로 ``httpx.MockTransport``를 주입합니다.
    """

    def __init__(self, config: OllamaConfig | None = None, transport: httpx.BaseTransport | None = None):
        self.config = config or OllamaConfig()
        self._transport = transport

    def build_payload(self, user_prompt: str) -> dict[str, Any]:
        return build_generate_payload(user_prompt, self.config.model_name)

    def invoke(self, payload: dict[str, Any]) -> str:
        """요청 본문을 POST 하고 응답 본문 텍스트를 그대로 반환."""

        LOGGER.debug(
            "sending request to ollama",
            extra={"model": payload.get("model"), "prompt_length": len(payload.get("prompt", ""))},
        )
        start = time.perf_counter()
        try:
            with httpx.Client(
                base_url=self.config.base_url,
                timeout=self.config.request_timeout,
                transport=self._transport,
            ) as client:
                resp = client.post(GENERATE_PATH, json=payload)
                body = resp.text
        except httpx.RequestError as exc:
            OLLAMA_REQUESTS.labels("transport_error").inc()
            LOGGER.warning(
                "ollama request failed",
                extra={"base_url": self.config.base_url, "error": repr(exc)},
            )
            raise TransportError(f"could not reach ollama at {self.config.base_url}: {exc}") from exc
        finally:
            OLLAMA_LATENCY.observe(time.perf_counter() - start)

        elapsed = time.perf_counter() - start
        if resp.is_error:
            OLLAMA_REQUESTS.labels("remote_error").inc()
            LOGGER.warning(
                "ollama returned error status",
                extra={"status": resp.status_code, "body": body, "elapsed": elapsed},
            )
            raise RemoteError(resp.status_code, body)

        OLLAMA_REQUESTS.labels("ok").inc()
        LOGGER.info("ollama request completed", extra={"status": resp.status_code, "elapsed": elapsed})
        return body

    def generate_json(self, user_prompt: str) -> str:
        """모델에 로드맵을 요청하고 JSON 답변 텍스트를 반환."""

        raw = self.invoke(self.build_payload(user_prompt))
        return extract_answer(raw)

    def parse_tree(self, json_text: str) -> RoadmapNode:
        return parse_tree(json_text, strict_children=self.config.strict_children)

    def generate_roadmap(self, user_prompt: str) -> RoadmapNode:
        return self.parse_tree(self.generate_json(user_prompt))


@lru_cache(maxsize=1)
def get_ollama_client() -> OllamaClient:
    """FastAPI 의존성. 테스트에서는 ``app.dependency_overrides``로 교체합니다."""

    return OllamaClient(settings.ollama_config())


__all__ = ["OllamaClient", "get_ollama_client", "GENERATE_PATH"]
