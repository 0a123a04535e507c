"""로드맵 생성 API."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from roadmap_backend.deps.ollama import OllamaClient, get_ollama_client
from roadmap_backend.models.schema import (
    ErrorResponse,
    RoadmapAnswerResponse,
    RoadmapGenerateRequest,
    RoadmapNode,
    RoadmapParseRequest,
)

router = APIRouter(tags=["roadmaps"])

ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "model answer is not a roadmap document"},
    502: {"model": ErrorResponse, "description": "ollama answered with an error status"},
    503: {"model": ErrorResponse, "description": "ollama is unreachable"},
}


@router.post("/generate", response_model=RoadmapNode, responses=ERROR_RESPONSES)
def generate_roadmap(
    payload: RoadmapGenerateRequest,
    client: OllamaClient = Depends(get_ollama_client),
):
    """자유 문장 요청으로 로드맵 트리를 생성."""

    answer = client.generate_json(payload.prompt)
    return client.parse_tree(answer)


@router.post("/answer", response_model=RoadmapAnswerResponse, responses=ERROR_RESPONSES)
def generate_answer(
    payload: RoadmapGenerateRequest,
    client: OllamaClient = Depends(get_ollama_client),
):
    """파싱하지 않은 모델의 JSON 답변 텍스트를 반환."""

    return RoadmapAnswerResponse(answer=client.generate_json(payload.prompt))


@router.post("/parse", response_model=RoadmapNode, responses={422: ERROR_RESPONSES[422]})
def parse_roadmap(
    payload: RoadmapParseRequest,
    client: OllamaClient = Depends(get_ollama_client),
):
    return client.parse_tree(payload.json_text)
