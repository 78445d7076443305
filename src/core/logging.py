"""
Logging: 로깅 설정 + 폼 제출 기록

규칙:
- 모든 제출(가입, 문의, 구독, 업로드, 등록)은 log_submission()으로 한 줄 기록
- 비밀번호/해시/토큰은 절대 로그에 남기지 않음 → [MASKED]
- 이메일은 앞 2글자만 노출 (ab***@domain)
"""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 값 전체를 가리는 키 (소문자 비교)
SENSITIVE_KEYS = frozenset([
    "password",
    "pass",
    "confpass",
    "password_hash",
    "currentpassword",
    "newpassword",
    "token",
    "authorization",
])

# 부분 마스킹하는 키
EMAIL_KEYS = frozenset(["email"])

logger = logging.getLogger("src.submissions")


# =============================================================================
# Setup
# =============================================================================


def configure_logging(level: str = "INFO") -> None:
    """
    루트 로거 설정.

    uvicorn이 이미 핸들러를 붙인 경우에도 레벨/포맷을 맞추기 위해 force 사용.

    Args:
        level: 로그 레벨 이름 (DEBUG, INFO, WARNING, ...)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )


# =============================================================================
# Masking
# =============================================================================


def mask_email(email: str) -> str:
    """
    이메일 부분 마스킹.

    예: student@tkmce.ac.in → st***@tkmce.ac.in
    """
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:2]}***@{domain}"


def mask_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    로그 출력용 사본 생성 (원본 불변).

    Args:
        record: 제출 데이터

    Returns:
        민감 필드가 마스킹된 dict
    """
    masked: dict[str, Any] = {}
    for key, value in record.items():
        lowered = key.lower()
        if lowered in SENSITIVE_KEYS:
            masked[key] = "[MASKED]" if value else value
        elif lowered in EMAIL_KEYS and isinstance(value, str):
            masked[key] = mask_email(value)
        elif isinstance(value, dict):
            masked[key] = mask_record(value)
        else:
            masked[key] = value
    return masked


# =============================================================================
# Submission Log
# =============================================================================


def log_submission(kind: str, record: dict[str, Any]) -> dict[str, Any]:
    """
    제출 이벤트 기록.

    Args:
        kind: 제출 종류 (registration, contact, newsletter, enrollment, upload.* 등)
        record: 저장된 레코드

    Returns:
        실제 로그에 남긴 (마스킹된) 데이터
    """
    masked = mask_record(record)
    logger.info(f"New {kind}: {masked}")
    return masked
