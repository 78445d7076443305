"""
Auth Routes: 로그인 + 내 계정.

- POST /api/login
- POST /api/logout
- GET  /api/user
- PUT  /api/user/update
- POST /api/user/change-password
- GET  /api/user/enrolled-events
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from src.app.deps import (
    bearer_token,
    current_user,
    get_auth_service,
    get_config,
    get_event_service,
    read_payload,
)
from src.app.services import AuthService, EventService
from src.app.services.validate import (
    validate_login,
    validate_password_change,
    validate_profile_update,
)
from src.domain.schemas import User

api_router = APIRouter()


def _profile(user: User, config: dict[str, Any]) -> dict[str, Any]:
    """계정 화면용 사용자 정보."""
    return {
        "id": user.id,
        "fullName": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "course": user.course,
        "year": user.year,
        "college": config["site"]["college"],
        "updatedAt": user.updated_at,
    }


@api_router.post("/login")
async def login(
    payload: dict[str, Any] = Depends(read_payload),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """
    로그인 → 서명된 JWT (Bearer) 발급.

    SPA는 토큰 payload(email, role, name)를 디코딩해서 쓰고, 같은 값을 user로도 내려줌.
    """
    email, password = validate_login(payload)
    user, session = auth_service.login(email, password)
    return {
        "success": True,
        "message": "Login successful",
        "token": session.token,
        "expiresAt": session.expires_at,
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.full_name,
            "role": user.role.value,
        },
    }


@api_router.post("/logout")
async def logout(
    request: Request,
    user: User = Depends(current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """현재 토큰 폐기."""
    auth_service.revoke(bearer_token(request))
    return {"success": True, "message": "Logged out"}


@api_router.get("/user")
async def get_user(
    user: User = Depends(current_user),
    config: dict[str, Any] = Depends(get_config),
) -> dict[str, Any]:
    """내 계정 정보."""
    return _profile(user, config)


@api_router.put("/user/update")
async def update_user(
    payload: dict[str, Any] = Depends(read_payload),
    user: User = Depends(current_user),
    config: dict[str, Any] = Depends(get_config),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """phone/year 수정."""
    changes = validate_profile_update(payload)
    updated = auth_service.update_profile(user.id, changes)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": _profile(updated, config),
    }


@api_router.post("/user/change-password")
async def change_password(
    payload: dict[str, Any] = Depends(read_payload),
    user: User = Depends(current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """비밀번호 변경."""
    current, new = validate_password_change(payload)
    auth_service.change_password(user.id, current, new)
    return {"success": True, "message": "Password changed successfully"}


@api_router.get("/user/enrolled-events")
async def enrolled_events(
    user: User = Depends(current_user),
    event_service: EventService = Depends(get_event_service),
) -> list[dict[str, Any]]:
    """내가 등록한 이벤트 목록."""
    return event_service.enrolled_events(user.id)
