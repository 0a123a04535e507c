"""Pydantic 데이터 스키마 모음.

비전공자 팁: 스키마는 로드맵 트리와 API 입출력 형태를 정의합니다.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, Field


class RoadmapNode(BaseModel):
    """학습 로드맵의 한 단계.

    모델이 생략했거나 ``null``로 보낸 텍스트 필드는 ``None``입니다.
    children은 원본 문서의 순서를 유지합니다.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    children: list[RoadmapNode] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """하위 트리 전체를 노드 스키마 dict로 변환 (재귀 없이)."""

        root: dict[str, Any] = {}
        stack: list[tuple[RoadmapNode, dict[str, Any]]] = [(self, root)]
        while stack:
            node, out = stack.pop()
            out["title"] = node.title
            out["description"] = node.description
            out["link"] = node.link
            out["children"] = []
            for child in node.children:
                child_out: dict[str, Any] = {}
                out["children"].append(child_out)
                stack.append((child, child_out))
        return root

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def count(self) -> int:
        """루트를 포함한 하위 트리의 노드 수."""

        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total

    def depth(self) -> int:
        """하위 트리의 깊이. 잎 노드는 1."""

        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest


RoadmapNode.model_rebuild()


class RoadmapGenerateRequest(BaseModel):
    prompt: str


class RoadmapParseRequest(BaseModel):
    json_text: str


class RoadmapAnswerResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    detail: str
    kind: str
    status_code: int | None = None


__all__ = [
    "RoadmapNode",
    "RoadmapGenerateRequest",
    "RoadmapParseRequest",
    "RoadmapAnswerResponse",
    "ErrorResponse",
]
