"""
ID 생성: 레코드 ID, 세션 ID, 업로드 파일명

규칙:
- 레코드 ID는 생성 후 수정 금지
- 정렬 가능하도록 타임스탬프 접두 (동일 초 내 충돌은 uuid로 회피)
- 업로드 파일명은 사용자 입력 파일명을 그대로 쓰지 않음
"""

import secrets
import uuid
from datetime import UTC, datetime


def generate_record_id(prefix: str) -> str:
    """
    레코드 ID 생성.

    포맷: {prefix}{timestamp}-{uuid[:8]}
    예: USR-20261019093015-1a2b3c4d

    Args:
        prefix: ID 접두 (예: "USR-", constants 참조)

    Returns:
        record id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"{prefix}{timestamp}-{unique}"


def generate_session_token() -> str:
    """세션 ID (JWT jti 클레임, URL-safe, 256bit)."""
    return secrets.token_urlsafe(32)


def generate_upload_name(original_filename: str, record_id: str) -> str:
    """
    업로드 저장 파일명 생성.

    포맷: {record_id}_{sanitized_stem}{ext}

    Args:
        original_filename: 업로드된 원본 파일명
        record_id: 연결될 레코드 ID

    Returns:
        파일시스템 안전한 파일명
    """
    stem, dot, ext = original_filename.rpartition(".")
    if not dot:
        stem, ext = original_filename, ""

    safe_stem = _sanitize_for_filename(stem)
    safe_ext = f".{_sanitize_for_filename(ext).lower()}" if ext else ""

    return f"{record_id}_{safe_stem}{safe_ext}"


def _sanitize_for_filename(value: str) -> str:
    """
    파일명에 사용할 수 있도록 문자열 정리.

    - 공백/하이픈 → 밑줄
    - 특수문자/비ASCII 제거
    - 최대 40자
    """
    sanitized = ""
    for c in value:
        if c.isascii() and c.isalnum():
            sanitized += c
        elif c in " _-":
            sanitized += "_"

    while "__" in sanitized:
        sanitized = sanitized.replace("__", "_")

    sanitized = sanitized.strip("_")

    return sanitized[:40] if sanitized else "file"
