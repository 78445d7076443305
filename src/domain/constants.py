"""
Domain Constants: API 전역 상수.

검증 정규식, 업로드 정책, 경로 상수 등 시스템 전반에서 사용되는 값들.
"""

import re

# =============================================================================
# Validation Patterns (폼 검증)
# =============================================================================
# 서버 측 판정 기준. SPA의 실시간 검증보다 느슨하게 유지 (서버가 최종 판정).

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-\(\)]{10,}$")
PASSWORD_SPECIAL_CHARS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
PASSWORD_MIN_LENGTH = 6
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
YEAR_PATTERN = re.compile(r"^\d{4}$")

# =============================================================================
# Collections (JSON 저장소 컬렉션 이름)
# =============================================================================
# data/
# ├── users.json
# ├── sessions.json
# ├── events.json
# ├── enrollments.json
# ├── newspapers.json
# ├── questionpapers.json
# ├── news.json
# ├── contacts.json
# ├── subscribers.json
# └── .locks/

COLLECTION_USERS = "users"
COLLECTION_SESSIONS = "sessions"
COLLECTION_EVENTS = "events"
COLLECTION_ENROLLMENTS = "enrollments"
COLLECTION_NEWSPAPERS = "newspapers"
COLLECTION_QUESTION_PAPERS = "questionpapers"
COLLECTION_NEWS = "news"
COLLECTION_CONTACTS = "contacts"
COLLECTION_SUBSCRIBERS = "subscribers"

STORE_SCHEMA_VERSION = "1.0"
STORE_LOCKS_DIR = ".locks"

# =============================================================================
# Uploads (업로드 정책)
# =============================================================================
# uploads/
# ├── newspapers/
# ├── questionpapers/
# └── events/

UPLOAD_KIND_NEWSPAPERS = "newspapers"
UPLOAD_KIND_QUESTION_PAPERS = "questionpapers"
UPLOAD_KIND_EVENTS = "events"
UPLOAD_KINDS = (UPLOAD_KIND_NEWSPAPERS, UPLOAD_KIND_QUESTION_PAPERS, UPLOAD_KIND_EVENTS)

PDF_ALLOWED_EXTENSIONS = (".pdf",)
PDF_MAGIC = b"%PDF-"
IMAGE_ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")

DEFAULT_MAX_PDF_MB = 10
DEFAULT_MAX_IMAGE_MB = 5
DEFAULT_MAX_BODY_MB = 10

# =============================================================================
# ID Prefixes
# =============================================================================

USER_ID_PREFIX = "USR-"
EVENT_ID_PREFIX = "EVT-"
ENROLLMENT_ID_PREFIX = "ENR-"
NEWSPAPER_ID_PREFIX = "NP-"
QUESTION_PAPER_ID_PREFIX = "QP-"
NEWS_ID_PREFIX = "NEWS-"
CONTACT_ID_PREFIX = "MSG-"
SUBSCRIBER_ID_PREFIX = "SUB-"

# =============================================================================
# MIME Types
# =============================================================================

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".json": "application/json",
    ".html": "text/html",
    ".js": "text/javascript",
    ".css": "text/css",
    ".txt": "text/plain",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
}


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    import os

    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")
