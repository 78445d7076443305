"""
FastAPI Routes.

API 라우트 (JSON) + 업로드 파일 + SPA fallback
"""

from . import admin, auth, content, events, forms, spa

__all__ = ["admin", "auth", "content", "events", "forms", "spa"]
