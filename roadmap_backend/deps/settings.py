"""환경설정 로더.

비전공자 팁: 환경변수는 서비스 동작에 필요한 주소/모델명 같은 설정값입니다.
모든 값에 기본값이 있어, 같은 PC에 Ollama만 켜져 있으면 별도 설정 없이 동작합니다.
"""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OllamaConfig(BaseModel):
    """OllamaClient에 전달되는 연결 설정 (주소, 모델명, 타임아웃, children 엄격 모드)."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    base_url: str = "http://localhost:11434"
    model_name: str = "llama3.2:latest"
    request_timeout: float | None = 60.0
    strict_children: bool = False


class Settings(BaseModel):
    """프로세스 전체 설정. 환경변수에서 한 번만 읽습니다."""

    ollama_host: str = Field(alias="OLLAMA_HOST", default="http://localhost:11434")
    ollama_model: str = Field(alias="OLLAMA_MODEL", default="llama3.2:latest")
    ollama_timeout_seconds: float | None = Field(alias="OLLAMA_TIMEOUT_SECONDS", default=60.0)
    roadmap_strict_children: bool = Field(alias="ROADMAP_STRICT_CHILDREN", default=False)
    cors_allow_origins: str = Field(alias="CORS_ALLOW_ORIGINS", default="*")

    model_config = {"populate_by_name": True}

    @field_validator("ollama_timeout_seconds", mode="before")
    @classmethod
    def disable_timeout(cls, value):
        # "none" 또는 빈 값이면 타임아웃 없이 대기
        if isinstance(value, str) and value.strip().lower() in ("", "none"):
            return None
        return value

    def ollama_config(self) -> OllamaConfig:
        return OllamaConfig(
            base_url=self.ollama_host.rstrip("/"),
            model_name=self.ollama_model,
            request_timeout=self.ollama_timeout_seconds,
            strict_children=self.roadmap_strict_children,
        )

    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings 인스턴스를 싱글톤처럼 재사용합니다."""

    data = {}
    for name, field in Settings.model_fields.items():
        alias = field.alias or name
        if alias in os.environ:
            data[name] = os.environ[alias]
    return Settings.model_validate(data)


settings = get_settings()

__all__ = ["OllamaConfig", "Settings", "get_settings", "settings"]
