"""
Events Routes: 이벤트 조회 + 등록.

- GET  /api/getevents
- GET  /api/getevent/{event_id}
- GET  /api/check-enrollment/{event_id}
- POST /api/enroll-event
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.app.deps import current_user, get_event_service, read_payload
from src.app.services import EventService
from src.app.services.validate import text
from src.core.logging import log_submission
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import User

api_router = APIRouter()


@api_router.get("/getevents")
async def list_events(
    event_service: EventService = Depends(get_event_service),
) -> list[dict[str, Any]]:
    """전체 이벤트 (날짜순)."""
    return event_service.list_events()


@api_router.get("/getevent/{event_id}")
async def get_event(
    event_id: str,
    event_service: EventService = Depends(get_event_service),
) -> dict[str, Any]:
    """이벤트 상세."""
    return event_service.get_event(event_id)


@api_router.get("/check-enrollment/{event_id}")
async def check_enrollment(
    event_id: str,
    user: User = Depends(current_user),
    event_service: EventService = Depends(get_event_service),
) -> dict[str, bool]:
    """내가 이 이벤트에 등록했는지."""
    return {"enrolled": event_service.is_enrolled(event_id, user.id)}


@api_router.post("/enroll-event", status_code=201)
async def enroll_event(
    payload: dict[str, Any] = Depends(read_payload),
    user: User = Depends(current_user),
    event_service: EventService = Depends(get_event_service),
) -> JSONResponse:
    """이벤트 등록 (정원/중복/종료 검사)."""
    event_id = text(payload, "eventId")
    if not event_id:
        raise ClubError(ErrorCodes.MISSING_REQUIRED_FIELD, "eventId is required", status_code=400)

    enrollment, remaining = event_service.enroll(event_id, user.id)
    log_submission("event enrollment", enrollment.to_dict())

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Enrolled successfully",
            "data": {"eventId": event_id, "remaining": remaining},
        },
    )
