"""
Error definitions for the club API.

규칙:
- 조용한 실패 금지 → ClubError로 명시적 실패
- 응답 상태 코드는 에러가 직접 들고 다님 (핸들러는 변환만)
- 메시지는 클라이언트(SPA)에 그대로 노출되므로 영어 문장 사용
"""

from typing import Any


class ClubError(Exception):
    """
    API 요청 처리 중 발생하는 도메인 에러.

    Usage:
        raise ClubError(ErrorCodes.INVALID_EMAIL, "Invalid email format", field="email")
        raise ClubError(ErrorCodes.EVENT_NOT_FOUND, "Event not found", status_code=404)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        **context: Any,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        base = f"[{self.code}] {self.message}"
        return f"{base} ({ctx_str})" if ctx_str else base

    def to_dict(self) -> dict[str, Any]:
        """
        응답 본문용 (envelope).

        error는 message와 같은 값 (SPA가 response.data.error를 읽음).
        """
        return {
            "success": False,
            "message": self.message,
            "error": self.message,
            "code": self.code,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Validation ===
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PHONE = "INVALID_PHONE"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_BODY = "INVALID_BODY"

    # === Auth ===
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # === Events ===
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    NO_SLOTS_LEFT = "NO_SLOTS_LEFT"
    EVENT_ENDED = "EVENT_ENDED"

    # === Uploads ===
    INVALID_UPLOAD = "INVALID_UPLOAD"
    UPLOAD_TOO_LARGE = "UPLOAD_TOO_LARGE"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # === Store ===
    STORE_CORRUPT = "STORE_CORRUPT"
    STORE_LOCK_TIMEOUT = "STORE_LOCK_TIMEOUT"
