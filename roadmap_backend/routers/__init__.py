"""라우터 패키지."""
from roadmap_backend.routers import roadmaps

__all__ = ["roadmaps"]
