"""
Content Routes: 자료실 조회 + 업로드 파일 제공.

- GET /api/sendnewspapers
- GET /api/sendquestions
- GET /api/getnews
- GET /uploads/{kind}/{filename} → PDF 뷰어용 inline 응답
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from src.app.deps import get_content_service
from src.app.services import ContentService
from src.domain.constants import get_mime_type

# Routers
router = APIRouter()  # /uploads
api_router = APIRouter()  # /api


@api_router.get("/sendnewspapers")
async def list_newspapers(
    content_service: ContentService = Depends(get_content_service),
) -> list[dict[str, Any]]:
    """신문 목록 (최신순)."""
    return content_service.list_newspapers()


@api_router.get("/sendquestions")
async def list_question_papers(
    content_service: ContentService = Depends(get_content_service),
) -> list[dict[str, Any]]:
    """기출문제 목록 (최신 연도순)."""
    return content_service.list_question_papers()


@api_router.get("/getnews")
async def list_news(
    category: str | None = None,
    content_service: ContentService = Depends(get_content_service),
) -> list[dict[str, Any]]:
    """뉴스 링크 목록 (최신순, category 필터 선택)."""
    return content_service.list_news(category)


@router.get("/{kind}/{filename}")
async def download_upload(
    kind: str,
    filename: str,
    content_service: ContentService = Depends(get_content_service),
) -> FileResponse:
    """업로드 파일 (브라우저 안에서 열리도록 inline)."""
    path = content_service.resolve_upload(kind, filename)
    return FileResponse(
        path,
        media_type=get_mime_type(path.name),
        filename=path.name,
        content_disposition_type="inline",
    )
