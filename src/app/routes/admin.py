"""
Admin Routes: 관리자 콘텐츠 등록 (Bearer + role=admin).

- POST /api/admin/newspapers      (multipart: title, date, pdf)
- POST /api/admin/questionpapers  (multipart: title, date|year, pdf, subject?, category?)
- POST /api/admin/news            (JSON: title, url, category)
- POST /api/admin/events          (multipart: name, description, participantLimit, ...)
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from src.app.deps import (
    get_content_service,
    get_event_service,
    read_payload,
    require_admin,
)
from src.app.services import ContentService, EventService
from src.app.services.validate import (
    validate_event_form,
    validate_news_post,
    validate_newspaper,
    validate_question_paper,
)
from src.core.ids import generate_record_id
from src.core.logging import log_submission
from src.domain.schemas import User

api_router = APIRouter()


def _created(message: str, data: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=201, content={"success": True, "message": message, "data": data})


async def _read_upload(upload: UploadFile | None) -> tuple[str | None, bytes]:
    if upload is None or not upload.filename:
        return None, b""
    return upload.filename, await upload.read()


@api_router.post("/newspapers", status_code=201)
async def upload_newspaper(
    title: str | None = Form(None),
    date: str | None = Form(None),
    pdf: UploadFile | None = File(None),
    admin: User = Depends(require_admin),
    content_service: ContentService = Depends(get_content_service),
) -> JSONResponse:
    """신문 PDF 등록."""
    fields = validate_newspaper({"title": title, "date": date})
    filename, data = await _read_upload(pdf)

    newspaper = content_service.add_newspaper(fields, filename or "", data)
    log_submission("upload.newspaper", {**newspaper.to_dict(), "uploaded_by": admin.id})

    return _created("Newspaper saved successfully", newspaper.to_dict())


@api_router.post("/questionpapers", status_code=201)
async def upload_question_paper(
    title: str | None = Form(None),
    date: str | None = Form(None),
    year: str | None = Form(None),
    subject: str | None = Form(None),
    category: str | None = Form(None),
    pdf: UploadFile | None = File(None),
    admin: User = Depends(require_admin),
    content_service: ContentService = Depends(get_content_service),
) -> JSONResponse:
    """기출문제 PDF 등록 (SPA는 연도를 date로 보냄)."""
    fields = validate_question_paper(
        {
            "title": title,
            "date": date,
            "year": year,
            "subject": subject,
            "category": category,
        }
    )
    filename, data = await _read_upload(pdf)

    paper = content_service.add_question_paper(fields, filename or "", data)
    log_submission("upload.questionpaper", {**paper.to_dict(), "uploaded_by": admin.id})

    return _created("Question paper saved successfully", paper.to_dict())


@api_router.post("/news", status_code=201)
async def publish_news(
    payload: dict[str, Any] = Depends(read_payload),
    admin: User = Depends(require_admin),
    content_service: ContentService = Depends(get_content_service),
) -> JSONResponse:
    """뉴스 링크 게시."""
    fields = validate_news_post(payload)
    item = content_service.add_news(fields)
    log_submission("upload.news", {**item.to_dict(), "uploaded_by": admin.id})

    return _created("News published successfully", item.to_dict())


@api_router.post("/events", status_code=201)
async def create_event(
    name: str | None = Form(None),
    description: str | None = Form(None),
    participantLimit: str | None = Form(None),  # noqa: N803 - SPA 필드명 그대로
    venue: str | None = Form(None),
    mode: str | None = Form(None),
    organizerContact1: str | None = Form(None),  # noqa: N803
    organizerContact2: str | None = Form(None),  # noqa: N803
    time: str | None = Form(None),
    date: str | None = Form(None),
    coverPhotoUrl: str | None = Form(None),  # noqa: N803
    coverPhoto: UploadFile | None = File(None),  # noqa: N803
    admin: User = Depends(require_admin),
    event_service: EventService = Depends(get_event_service),
    content_service: ContentService = Depends(get_content_service),
) -> JSONResponse:
    """
    이벤트 생성.

    커버 이미지: 파일 업로드가 있으면 우선, 없으면 coverPhotoUrl.
    """
    fields = validate_event_form(
        {
            "name": name,
            "description": description,
            "participantLimit": participantLimit,
            "venue": venue,
            "mode": mode,
            "organizerContact1": organizerContact1,
            "organizerContact2": organizerContact2,
            "time": time,
            "date": date,
            "coverPhotoUrl": coverPhotoUrl,
        }
    )

    filename, data = await _read_upload(coverPhoto)
    if filename:
        fields["img_url"] = content_service.save_event_cover(
            generate_record_id("COVER-"), filename, data
        )

    event = event_service.create(fields)
    log_submission("upload.event", {**event.to_record(), "uploaded_by": admin.id})

    return _created("Event created successfully", event.to_dict())
