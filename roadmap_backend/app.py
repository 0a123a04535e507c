"""로드맵 생성기 FastAPI 진입점.

비전공자 용어설명:
- 로드맵: 학습 순서를 나무(트리) 구조로 정리한 것입니다.
- Ollama: 내 컴퓨터에서 LLM을 실행해 주는 로컬 추론 서버입니다.
"""
from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRouter
from prometheus_client import Counter, Histogram, generate_latest

from roadmap_backend.deps.settings import settings
from roadmap_backend.models.schema import ErrorResponse
from roadmap_backend.routers import roadmaps
from roadmap_backend.services.errors import RemoteError, RoadmapServiceError, SchemaError, TransportError

REQUEST_COUNTER = Counter("api_requests_total", "Total API requests", ["method", "path", "status"])
REQUEST_LATENCY = Histogram("api_request_seconds", "API request duration", ["method", "path"])

# 한국어 주석: 오류 종류별 HTTP 상태코드
ERROR_STATUS = {
    SchemaError: 422,
    RemoteError: 502,
    TransportError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 기동/종료 시 로깅만 수행합니다."""

    logging.info("roadmap service starting", extra={"ollama_host": settings.ollama_host})
    yield
    logging.info("roadmap service stopped")


app = FastAPI(title="Roadmap Generator", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _route_label(request: Request) -> str:
    # 경로 파라미터가 있어도 라우트 템플릿 단위로 집계
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


def _record_request(request: Request, request_id: str, status_code: int, elapsed: float) -> None:
    path = _route_label(request)
    REQUEST_COUNTER.labels(request.method, path, status_code).inc()
    REQUEST_LATENCY.labels(request.method, path).observe(elapsed)
    logging.info(
        "request completed",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "status": status_code,
            "elapsed": round(elapsed, 4),
        },
    )


@app.middleware("http")
async def request_context(request: Request, call_next):
    """요청 ID를 부여하고 처리 시간/상태를 기록합니다.

    클라이언트가 ``x-request-id``를 보내면 그대로 사용하고, 없으면 새로 만듭니다.
    """

    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    request.state.request_id = request_id

    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logging.exception("unhandled error", extra={"request_id": request_id})
        response = JSONResponse(
            ErrorResponse(detail="internal server error", kind="internal").model_dump(),
            status_code=500,
        )
    _record_request(request, request_id, response.status_code, time.perf_counter() - started)
    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(RoadmapServiceError)
async def roadmap_error_handler(request: Request, exc: RoadmapServiceError):
    """오류 분류(Schema/Remote/Transport)를 HTTP 상태코드로 변환."""

    status_code = next((code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 500)
    logging.warning(
        "roadmap request failed",
        extra={"request_id": getattr(request.state, "request_id", None), "kind": exc.kind, "error": str(exc)},
    )
    body = ErrorResponse(detail=str(exc), kind=exc.kind, status_code=getattr(exc, "status_code", None))
    return JSONResponse(body.model_dump(), status_code=status_code)


@app.get("/healthz")
async def healthz():
    """간단한 헬스체크."""

    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    """Prometheus가 스크랩할 수 있는 메트릭 엔드포인트."""

    return Response(generate_latest(), media_type="text/plain; version=0.0.4")


# 한국어 주석: API 라우터를 모듈별로 등록
routers: list[tuple[APIRouter, str]] = [
    (roadmaps.router, "/roadmaps"),
]

for router, prefix in routers:
    app.include_router(router, prefix=prefix)


__all__ = ["app"]
