"""
Forms Routes: 공개 폼 제출.

- POST /api/signup → 회원가입 (201)
- POST /api/contact → 문의 메시지
- POST /api/newsletter → 뉴스레터 구독
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.app.deps import get_auth_service, get_config, get_submission_service, read_payload
from src.app.services import AuthService, SubmissionService
from src.app.services.validate import validate_contact, validate_newsletter, validate_signup
from src.core.logging import log_submission

api_router = APIRouter()


async def _delay(config: dict[str, Any], key: str) -> None:
    """설정된 응답 지연 (forms.<key>)."""
    seconds = float(config.get("forms", {}).get(key) or 0)
    if seconds > 0:
        await asyncio.sleep(seconds)


@api_router.post("/signup", status_code=201)
async def signup(
    payload: dict[str, Any] = Depends(read_payload),
    config: dict[str, Any] = Depends(get_config),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    """
    회원가입.

    검증 순서: 필수 필드 → 이메일 → 전화번호 → 비밀번호(선택)
    """
    fields = validate_signup(payload)
    user = auth_service.register(fields)
    log_submission("user registration", user.to_dict())

    await _delay(config, "signup_delay_seconds")

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Registration successful",
            "data": {
                "id": user.id,
                "fullName": user.full_name,
                "email": user.email,
                "registeredAt": user.registered_at,
            },
        },
    )


@api_router.post("/contact")
async def contact(
    payload: dict[str, Any] = Depends(read_payload),
    config: dict[str, Any] = Depends(get_config),
    submission_service: SubmissionService = Depends(get_submission_service),
) -> dict[str, Any]:
    """문의 메시지 접수."""
    fields = validate_contact(payload)
    submission_service.save_contact(fields)

    await _delay(config, "contact_delay_seconds")

    return {"success": True, "message": "Message sent successfully"}


@api_router.post("/newsletter")
async def newsletter(
    payload: dict[str, Any] = Depends(read_payload),
    submission_service: SubmissionService = Depends(get_submission_service),
) -> dict[str, Any]:
    """뉴스레터 구독 (재구독도 성공 응답)."""
    email = validate_newsletter(payload)
    submission_service.subscribe(email)
    return {"success": True, "message": "Successfully subscribed to newsletter"}
