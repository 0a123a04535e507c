"""Ollama 출력 → 로드맵 트리 파서.

비전공자 팁: 모델의 답변은 Ollama 응답(envelope)의 ``response`` 필드 안에
JSON *문자열*로 들어 있습니다. 그래서 두 단계로 나눕니다.
- :func:`extract_answer`: envelope에서 답변 텍스트를 꺼냅니다.
- :func:`parse_tree`: 답변 텍스트를 :class:`RoadmapNode` 트리로 바꿉니다.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from roadmap_backend.models.schema import RoadmapNode
from roadmap_backend.services.errors import SchemaError

LOGGER = logging.getLogger(__name__)

TEXT_FIELDS = ("title", "description", "link")


def _reject_constant(name: str) -> Any:
    # NaN, Infinity, -Infinity 는 JSON 표준이 아님
    raise ValueError(f"non-standard JSON constant {name!r}")


def _load_json(text: str, what: str) -> Any:
    if not isinstance(text, str):
        raise SchemaError(f"{what} is not text: {type(text).__name__}")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"{what} is not valid JSON: {exc.msg}", line=exc.lineno, column=exc.colno) from exc
    except ValueError as exc:
        raise SchemaError(f"{what} could not be decoded: {exc}") from exc
    except RecursionError as exc:
        raise SchemaError(f"{what} is nested too deeply to decode") from exc


def as_text(value: Any) -> str:
    """문자열은 그대로, 그 외 값은 압축된 JSON 텍스트로 변환."""

    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def extract_answer(raw_response_text: str) -> str:
    """Ollama ``/api/generate`` 응답 envelope의 ``response`` 필드를 반환."""

    envelope = _load_json(raw_response_text, "response body")
    if not isinstance(envelope, dict):
        raise SchemaError("response body is not a JSON object")
    if "response" not in envelope:
        raise SchemaError("response body has no 'response' field")
    answer = as_text(envelope["response"])
    LOGGER.debug("extracted model answer", extra={"answer_length": len(answer)})
    return answer


def _optional_text(obj: dict[str, Any], field: str) -> str | None:
    value = obj.get(field)
    if value is None:
        return None
    return as_text(value)


def parse_tree(json_text: str, strict_children: bool = False) -> RoadmapNode:
    """로드맵 JSON 문서를 :class:`RoadmapNode` 트리로 변환합니다.

    - 누락되었거나 ``null``인 텍스트 필드는 ``None``이 됩니다.
    - 배열이 아닌 ``children``은 "자식 없음"으로 취급합니다.
      ``strict_children``이 켜져 있으면 :class:`SchemaError`를 냅니다.

    재귀 대신 자체 스택으로 순회하므로 깊은 문서도 파이썬 재귀 한도에 걸리지 않습니다.
    문서 전체가 성공적으로 파싱되어야만 결과를 반환합니다.
    """

    document = _load_json(json_text, "roadmap document")
    if not isinstance(document, dict):
        raise SchemaError("roadmap node must be a JSON object", path="$")

    root = RoadmapNode()
    stack: list[tuple[dict[str, Any], RoadmapNode, str]] = [(document, root, "$")]
    while stack:
        obj, node, path = stack.pop()
        for field in TEXT_FIELDS:
            setattr(node, field, _optional_text(obj, field))

        children = obj.get("children")
        if not isinstance(children, list):
            if strict_children and children is not None:
                raise SchemaError("'children' must be an array", path=f"{path}.children")
            continue

        for index, child_obj in enumerate(children):
            child_path = f"{path}.children[{index}]"
            if not isinstance(child_obj, dict):
                raise SchemaError("roadmap node must be a JSON object", path=child_path)
            child = RoadmapNode()
            node.children.append(child)
            stack.append((child_obj, child, child_path))

    if LOGGER.isEnabledFor(logging.DEBUG):
        LOGGER.debug("parsed roadmap tree", extra={"nodes": root.count(), "depth": root.depth()})
    return root


__all__ = ["TEXT_FIELDS", "as_text", "extract_answer", "parse_tree"]
