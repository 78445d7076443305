"""
Validation Service: 폼 입력 검증.

규칙:
- 서버가 최종 판정 (SPA의 실시간 검증은 편의용)
- 검증 순서 고정: 필수 필드 → 이메일 → 전화번호 → 비밀번호
  (응답 메시지는 첫 번째 실패 하나만)
- 통과한 값은 앞뒤 공백 제거된 문자열로 정규화하여 반환
"""

from datetime import date
from typing import Any

from src.domain.constants import (
    DATE_PATTERN,
    EMAIL_PATTERN,
    PASSWORD_MIN_LENGTH,
    PASSWORD_SPECIAL_CHARS,
    PHONE_PATTERN,
    URL_PATTERN,
    YEAR_PATTERN,
)
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import EventMode, ExamCategory, NewsCategory, ValidationResult

MSG_SIGNUP_REQUIRED = "All required fields must be provided"
MSG_ALL_FIELDS = "All fields are required"
MSG_EMAIL_REQUIRED = "Email is required"
MSG_INVALID_EMAIL = "Invalid email format"
MSG_INVALID_PHONE = "Invalid phone number format"
MSG_WEAK_PASSWORD = (
    f"Password must be at least {PASSWORD_MIN_LENGTH} characters "
    "and contain at least one special character"
)
MSG_PASSWORD_MISMATCH = "Passwords do not match"
MSG_PASSWORD_NOT_TEXT = "Password must be a string"


# =============================================================================
# Primitive Checks
# =============================================================================

def text(payload: dict[str, Any], key: str) -> str:
    """
    payload에서 문자열 값 추출.

    None/누락 → "", 숫자 등은 str 변환, 앞뒤 공백 제거.
    """
    value = payload.get(key)
    if value is None:
        return ""
    return str(value).strip()


def password_value(payload: dict[str, Any], key: str) -> str:
    """
    payload에서 비밀번호 값 추출 (공백 유지, str 변환 없음).

    None/누락 → "", 문자열이 아니면 400 INVALID_FIELD.
    """
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ClubError(
            ErrorCodes.INVALID_FIELD, MSG_PASSWORD_NOT_TEXT, status_code=400, field=key
        )
    return value


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def password_problems(password: str) -> list[str]:
    """
    비밀번호 정책 위반 목록.

    Returns:
        ["length", "special_char"] 중 위반 항목 (없으면 빈 리스트)
    """
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append("length")
    if not PASSWORD_SPECIAL_CHARS.search(password):
        problems.append("special_char")
    return problems


def collect_errors(
    payload: dict[str, Any],
    required: tuple[str, ...],
    required_message: str,
    email_field: str | None = None,
    phone_fields: tuple[str, ...] = (),
) -> ValidationResult:
    """
    공통 검증 (필수 → 이메일 → 전화번호 순).

    Args:
        payload: 요청 본문
        required: 필수 필드 이름들
        required_message: 필수 필드 누락 시 메시지
        email_field: 이메일 형식을 검사할 필드
        phone_fields: 전화번호 형식을 검사할 필드들

    Returns:
        ValidationResult (errors가 비어 있으면 통과)
    """
    result = ValidationResult()

    missing = [name for name in required if not text(payload, name)]
    for name in missing:
        result.add(ErrorCodes.MISSING_REQUIRED_FIELD, name, required_message)

    if email_field and email_field not in missing:
        if not is_valid_email(text(payload, email_field)):
            result.add(ErrorCodes.INVALID_EMAIL, email_field, MSG_INVALID_EMAIL)

    for name in phone_fields:
        value = text(payload, name)
        if name not in missing and value and not is_valid_phone(value):
            result.add(ErrorCodes.INVALID_PHONE, name, MSG_INVALID_PHONE)

    return result


def raise_first(result: ValidationResult) -> None:
    """첫 번째 에러를 ClubError(400)로 변환."""
    if result.is_valid:
        return
    code, field_name, message = result.errors[0]
    raise ClubError(code, message, status_code=400, field=field_name)


def _require_password_policy(password: str, field_name: str) -> None:
    if password_problems(password):
        raise ClubError(
            ErrorCodes.WEAK_PASSWORD, MSG_WEAK_PASSWORD, status_code=400, field=field_name
        )


# =============================================================================
# Form Validators
# =============================================================================

def validate_signup(payload: dict[str, Any]) -> dict[str, str]:
    """
    회원가입 폼 검증.

    필수: fullName, email, phone, course, year
    선택: interests, pass(+confpass)
    - pass가 있으면 정책 검사, confpass가 있으면 일치 검사

    Returns:
        정규화된 필드 dict (email은 소문자)

    Raises:
        ClubError: MISSING_REQUIRED_FIELD, INVALID_EMAIL, INVALID_PHONE,
                   WEAK_PASSWORD, PASSWORD_MISMATCH
    """
    result = collect_errors(
        payload,
        required=("fullName", "email", "phone", "course", "year"),
        required_message=MSG_SIGNUP_REQUIRED,
        email_field="email",
        phone_fields=("phone",),
    )
    raise_first(result)

    pass_value = password_value(payload, "pass")
    alias_value = password_value(payload, "password")
    password = pass_value or alias_value
    confirm = password_value(payload, "confpass")
    if password:
        _require_password_policy(password, "pass")
        if payload.get("confpass") is not None and confirm != password:
            raise ClubError(
                ErrorCodes.PASSWORD_MISMATCH,
                MSG_PASSWORD_MISMATCH,
                status_code=400,
                field="confpass",
            )

    return {
        "fullName": text(payload, "fullName"),
        "email": text(payload, "email").lower(),
        "phone": text(payload, "phone"),
        "course": text(payload, "course"),
        "year": text(payload, "year"),
        "interests": text(payload, "interests"),
        "password": password,
    }


def validate_contact(payload: dict[str, Any]) -> dict[str, str]:
    """문의 폼 검증 (name, email, message 모두 필수)."""
    result = collect_errors(
        payload,
        required=("name", "email", "message"),
        required_message=MSG_ALL_FIELDS,
        email_field="email",
    )
    raise_first(result)
    return {
        "name": text(payload, "name"),
        "email": text(payload, "email").lower(),
        "message": text(payload, "message"),
    }


def validate_newsletter(payload: dict[str, Any]) -> str:
    """뉴스레터 구독 검증. 정규화된 이메일 반환."""
    result = collect_errors(
        payload,
        required=("email",),
        required_message=MSG_EMAIL_REQUIRED,
        email_field="email",
    )
    raise_first(result)
    return text(payload, "email").lower()


def validate_login(payload: dict[str, Any]) -> tuple[str, str]:
    """로그인 입력 검증. (email, password) 반환."""
    email = text(payload, "email").lower()
    password = password_value(payload, "password")
    if not email or not password:
        raise ClubError(
            ErrorCodes.MISSING_REQUIRED_FIELD,
            "Email and password are required",
            status_code=400,
        )
    return email, password


def validate_profile_update(payload: dict[str, Any]) -> dict[str, str]:
    """
    프로필 수정 검증 (phone, year만 변경 가능).

    Returns:
        변경할 필드만 담은 dict (빈 값은 무시)
    """
    changes: dict[str, str] = {}

    phone = text(payload, "phone")
    if phone:
        if not is_valid_phone(phone):
            raise ClubError(
                ErrorCodes.INVALID_PHONE, MSG_INVALID_PHONE, status_code=400, field="phone"
            )
        changes["phone"] = phone

    year = text(payload, "year")
    if year:
        changes["year"] = year

    if not changes:
        raise ClubError(
            ErrorCodes.MISSING_REQUIRED_FIELD,
            "Nothing to update",
            status_code=400,
        )
    return changes


def validate_password_change(payload: dict[str, Any]) -> tuple[str, str]:
    """비밀번호 변경 검증. (current, new) 반환."""
    current = password_value(payload, "currentPassword")
    new = password_value(payload, "newPassword")
    if not current or not new:
        raise ClubError(
            ErrorCodes.MISSING_REQUIRED_FIELD,
            "Current and new password are required",
            status_code=400,
        )
    _require_password_policy(new, "newPassword")
    return current, new


# =============================================================================
# Admin Content Validators
# =============================================================================

def validate_iso_date(value: str, field_name: str) -> str:
    """YYYY-MM-DD 형식 + 실제 존재하는 날짜인지."""
    if not DATE_PATTERN.match(value):
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            f"Invalid date for {field_name}, expected YYYY-MM-DD",
            status_code=400,
            field=field_name,
        )
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            f"Invalid date for {field_name}, expected YYYY-MM-DD",
            status_code=400,
            field=field_name,
        ) from None
    return value


def validate_newspaper(payload: dict[str, Any]) -> dict[str, str]:
    """신문 메타데이터 검증 (title, date)."""
    result = collect_errors(
        payload,
        required=("title", "date"),
        required_message="Title, date and PDF are required",
    )
    raise_first(result)
    return {
        "title": text(payload, "title"),
        "date": validate_iso_date(text(payload, "date"), "date"),
    }


def validate_question_paper(payload: dict[str, Any]) -> dict[str, str]:
    """
    기출문제 메타데이터 검증.

    SPA는 연도를 date 필드로 보냄 (year도 허용).
    category는 선택이지만 값이 있으면 ExamCategory 중 하나여야 함.
    """
    if not text(payload, "year") and text(payload, "date"):
        payload = {**payload, "year": text(payload, "date")}

    result = collect_errors(
        payload,
        required=("title", "year"),
        required_message="Title, year and PDF are required",
    )
    raise_first(result)

    year = text(payload, "year")
    if not YEAR_PATTERN.match(year):
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            "Invalid year, expected YYYY",
            status_code=400,
            field="year",
        )

    category = text(payload, "category")
    if category and category not in {c.value for c in ExamCategory}:
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            f"Invalid category: {category}",
            status_code=400,
            field="category",
        )

    return {
        "title": text(payload, "title"),
        "year": year,
        "subject": text(payload, "subject"),
        "category": category,
    }


def validate_news_post(payload: dict[str, Any]) -> dict[str, str]:
    """뉴스 링크 검증 (title, url, category)."""
    result = collect_errors(
        payload,
        required=("title", "url", "category"),
        required_message="Title, link and category are required",
    )
    raise_first(result)

    url = text(payload, "url")
    if not URL_PATTERN.match(url):
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            "Invalid link, expected an http(s) URL",
            status_code=400,
            field="url",
        )

    category = text(payload, "category")
    if category not in {c.value for c in NewsCategory}:
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            f"Invalid category: {category}",
            status_code=400,
            field="category",
        )

    return {"title": text(payload, "title"), "url": url, "category": category}


def validate_event_form(payload: dict[str, Any]) -> dict[str, Any]:
    """
    이벤트 생성 폼 검증.

    필수: name, description, participantLimit, venue,
          organizerContact1, organizerContact2, date
    선택: time, mode (기본 offline), coverPhotoUrl

    Returns:
        Event 생성에 쓰이는 정규화된 dict
    """
    result = collect_errors(
        payload,
        required=(
            "name",
            "description",
            "participantLimit",
            "venue",
            "organizerContact1",
            "organizerContact2",
            "date",
        ),
        required_message="Please fill all required fields including date",
        phone_fields=("organizerContact1", "organizerContact2"),
    )
    raise_first(result)

    try:
        limit = int(text(payload, "participantLimit"))
    except ValueError:
        limit = 0
    if limit <= 0:
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            "Participant limit must be a positive number",
            status_code=400,
            field="participantLimit",
        )

    mode_value = text(payload, "mode").lower() or EventMode.OFFLINE.value
    try:
        mode = EventMode(mode_value)
    except ValueError:
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            f"Invalid mode: {mode_value}",
            status_code=400,
            field="mode",
        ) from None

    cover_url = text(payload, "coverPhotoUrl")
    if cover_url and not URL_PATTERN.match(cover_url):
        raise ClubError(
            ErrorCodes.INVALID_FIELD,
            "Invalid cover photo URL",
            status_code=400,
            field="coverPhotoUrl",
        )

    return {
        "title": text(payload, "name"),
        "description": text(payload, "description"),
        "participant_limit": limit,
        "venue": text(payload, "venue"),
        "mode": mode,
        "contact_1": text(payload, "organizerContact1"),
        "contact_2": text(payload, "organizerContact2"),
        "date": validate_iso_date(text(payload, "date"), "date"),
        "time": text(payload, "time"),
        "img_url": cover_url,
    }
