"""
SPA Routes: 빌드된 React 앱 제공 + 클라이언트 라우트 fallback.

- 실제 파일이 있으면 그 파일 (assets/*.js, favicon 등)
- 없으면 index.html (/dashboard, /events/:id, /profile, /account, /admin ...)
- /api/*, /uploads/* 는 여기서 처리하지 않음 → 404 JSON

반드시 다른 라우터보다 마지막에 include.
"""

from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

from src.domain.constants import get_mime_type

router = APIRouter()

RESERVED_PREFIXES = ("api/", "uploads/")


def _resolve_static(dist: Path, full_path: str) -> Path | None:
    """dist 안의 정적 파일 경로 (dist 밖을 가리키면 None)."""
    if not full_path:
        return None
    base = dist.resolve()
    candidate = (base / full_path).resolve()
    if base not in candidate.parents or not candidate.is_file():
        return None
    return candidate


@router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def spa(request: Request, full_path: str) -> FileResponse:
    """
    SPA 정적 파일 / index.html fallback.

    GET 외 메서드도 받아서 404로 응답 (매칭 안 된 API 경로가 405가 되지 않도록).
    """
    if request.method not in ("GET", "HEAD"):
        raise HTTPException(status_code=404)
    if full_path == "api" or full_path.startswith(RESERVED_PREFIXES):
        raise HTTPException(status_code=404)

    dist: Path | None = request.app.state.spa_dist
    index = dist / "index.html" if dist else None
    if dist is None or index is None or not index.is_file():
        raise HTTPException(status_code=404)

    static_file = _resolve_static(dist, full_path)
    if static_file is not None:
        return FileResponse(static_file, media_type=get_mime_type(static_file.name))

    return FileResponse(index, media_type="text/html")
