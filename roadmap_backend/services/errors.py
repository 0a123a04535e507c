"""로드맵 생성 오류 분류.

비전공자 팁: 실패 원인을 세 가지로 나눠 호출자가 구분할 수 있게 합니다.
- TransportError: 추론 서버에 연결하지 못함 (연결 거부, 타임아웃, DNS 실패)
- RemoteError: 추론 서버가 4xx/5xx 상태로 응답함
- SchemaError: 응답 본문이 기대한 JSON 형태가 아님
"""
from __future__ import annotations


class RoadmapServiceError(Exception):
    """이 패키지가 발생시키는 모든 오류의 기반 클래스."""

    kind = "error"


class TransportError(RoadmapServiceError):
    kind = "transport"


class RemoteError(RoadmapServiceError):
    kind = "remote"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Error response ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class SchemaError(RoadmapServiceError):
    kind = "schema"

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        location = []
        if path:
            location.append(f"at {path}")
        if line is not None:
            location.append(f"line {line} column {column}")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)
        self.path = path
        self.line = line
        self.column = column


__all__ = ["RoadmapServiceError", "TransportError", "RemoteError", "SchemaError"]
