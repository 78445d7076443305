"""
Request dependencies: app.state 접근, 요청 본문 파싱, 인증.

라우트는 서비스 인스턴스를 직접 만들지 않고 여기서 꺼내 씀
(lifespan에서 한 번 생성 → app.state).
"""

import json
from typing import Any

from fastapi import Depends, Request

from src.app.services import AuthService, ContentService, EventService, SubmissionService
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import User

# =============================================================================
# app.state accessors
# =============================================================================


def get_config(request: Request) -> dict[str, Any]:
    return request.app.state.config


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_event_service(request: Request) -> EventService:
    return request.app.state.event_service


def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service


def get_submission_service(request: Request) -> SubmissionService:
    return request.app.state.submission_service


# =============================================================================
# Body Parsing
# =============================================================================


async def read_payload(request: Request) -> dict[str, Any]:
    """
    JSON 또는 form-urlencoded 본문을 dict로.

    - 본문 없음 → {}
    - JSON이 객체가 아님/파싱 실패 → 400 INVALID_BODY
    """
    content_type = request.headers.get("content-type", "")

    if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body.strip():
        return {}

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ClubError(ErrorCodes.INVALID_BODY, "Invalid request body", status_code=400) from None

    if not isinstance(data, dict):
        raise ClubError(ErrorCodes.INVALID_BODY, "Invalid request body", status_code=400)
    return data


# =============================================================================
# Auth
# =============================================================================


def bearer_token(request: Request) -> str:
    """Authorization: Bearer <token> 헤더에서 토큰 추출 (없으면 "")."""
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    로그인 사용자.

    Raises:
        ClubError: AUTH_REQUIRED (401)
    """
    user = auth_service.resolve_token(bearer_token(request))
    if user is None:
        raise ClubError(ErrorCodes.AUTH_REQUIRED, "Authentication required", status_code=401)
    return user


def require_admin(user: User = Depends(current_user)) -> User:
    """
    관리자 사용자.

    Raises:
        ClubError: ADMIN_REQUIRED (403)
    """
    if not user.is_admin:
        raise ClubError(ErrorCodes.ADMIN_REQUIRED, "Admin access required", status_code=403)
    return user
