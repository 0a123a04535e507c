"""로드맵 생성용 프롬프트 구성.

비전공자 팁: 모델이 JSON만 출력하도록 고정 안내문을 사용자 요청 앞에 붙입니다.
"""
from __future__ import annotations

from typing import Any

ROADMAP_SYSTEM_PROMPT = """You are an AI that returns roadmap data in JSON format.
Please ONLY return valid JSON. The JSON structure should look like:
{
  "title": "string",
  "description": "string",
  "link": "string or null",
  "children": [
    {
      "title": "string",
      "description": "string",
      "link": "string or null",
      "children": [...]
    },
    ...
  ]
}
"""


def build_prompt(user_prompt: str) -> str:
    """사용자 요청 앞에 JSON 전용 안내문을 붙입니다."""

    return f"{ROADMAP_SYSTEM_PROMPT}\n{user_prompt}"


def build_generate_payload(user_prompt: str, model_name: str) -> dict[str, Any]:
    """Ollama ``/api/generate`` 요청 본문 (스트리밍 없음)."""

    return {
        "model": model_name,
        "prompt": build_prompt(user_prompt),
        "stream": False,
    }


__all__ = ["ROADMAP_SYSTEM_PROMPT", "build_prompt", "build_generate_payload"]
