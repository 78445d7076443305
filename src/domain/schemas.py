"""
Data schemas for the club API.

규칙:
- 저장 형식(from_dict)과 응답 형식(to_dict)을 한 곳에서 관리
- 응답 키는 SPA가 기대하는 이름 그대로 (fullName, max_participants 등)
- password_hash는 절대 응답에 포함하지 않음 (to_record()에서만 저장)
"""

from dataclasses import dataclass, field
from datetime import date as date_type
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================

class UserRole(str, Enum):
    """사용자 권한."""
    USER = "user"
    ADMIN = "admin"


class EventMode(str, Enum):
    """이벤트 진행 방식."""
    OFFLINE = "offline"
    ONLINE = "online"
    HYBRID = "hybrid"


class NewsCategory(str, Enum):
    """뉴스 게시물 분류."""
    GLOBAL = "Global"
    INDIA = "India"
    KERALA = "Kerala"
    PLACEMENT = "Placement"
    TKMCE = "TKMCE"
    UPSC = "UPSC"


class ExamCategory(str, Enum):
    """기출문제 시험 분류."""
    UPSC = "UPSC"
    KERALA_PSC = "Kerala PSC"
    SSC = "SSC"
    BANKING = "Banking"
    RAILWAY = "Railway"


# =============================================================================
# Members
# =============================================================================

@dataclass
class User:
    """
    회원 정보.

    email은 소문자로 정규화되어 저장됨 (중복 판정 기준).
    password_hash가 없으면 로그인 불가 계정 (가입 시 비밀번호 미제공).
    """
    id: str
    full_name: str
    email: str
    phone: str
    course: str
    year: str
    interests: str = ""
    role: UserRole = UserRole.USER
    password_hash: str | None = None
    registered_at: str = ""
    updated_at: str = ""
    status: str = "active"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> dict[str, Any]:
        """응답용 (password_hash 제외)."""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "course": self.course,
            "year": self.year,
            "interests": self.interests,
            "role": self.role.value,
            "registeredAt": self.registered_at,
            "updatedAt": self.updated_at,
            "status": self.status,
        }

    def to_record(self) -> dict[str, Any]:
        """저장용."""
        return {**self.to_dict(), "password_hash": self.password_hash}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            full_name=data.get("fullName", ""),
            email=data["email"],
            phone=data.get("phone", ""),
            course=data.get("course", ""),
            year=data.get("year", ""),
            interests=data.get("interests", ""),
            role=UserRole(data.get("role", "user")),
            password_hash=data.get("password_hash"),
            registered_at=data.get("registeredAt", ""),
            updated_at=data.get("updatedAt", ""),
            status=data.get("status", "active"),
        )


@dataclass
class Session:
    """
    로그인 세션.

    sessions.json에는 jti만 저장 (token은 발급 응답에만 존재).
    """
    jti: str
    user_id: str
    created_at: str  # ISO 8601
    expires_at: str  # ISO 8601
    token: str = ""  # 서명된 JWT

    def to_dict(self) -> dict[str, Any]:
        return {
            "jti": self.jti,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Session":
        return cls(
            jti=data["jti"],
            user_id=data["user_id"],
            created_at=data.get("created_at", ""),
            expires_at=data.get("expires_at", ""),
        )


# =============================================================================
# Events
# =============================================================================

@dataclass
class Event:
    """
    동아리 이벤트.

    participant_limit은 총 정원. 응답의 max_participants는 남은 자리 수
    (SPA가 등록 성공 시 1씩 감소시켜 표시함).
    """
    id: str
    title: str
    description: str
    date: str  # YYYY-MM-DD
    venue: str
    mode: EventMode
    participant_limit: int
    time: str = ""
    img_url: str = ""
    contact_1: str = ""
    contact_2: str = ""
    created_at: str = ""

    def is_active(self, today: date_type | None = None) -> bool:
        """이벤트 날짜가 오늘 이후인지 (당일 포함)."""
        today = today or date_type.today()
        try:
            return date_type.fromisoformat(self.date) >= today
        except ValueError:
            return True

    def to_dict(self, enrolled: int = 0, today: date_type | None = None) -> dict[str, Any]:
        """
        응답용.

        Args:
            enrolled: 현재 등록 인원
            today: 활성 판정 기준일 (테스트용)
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "time": self.time,
            "venue": self.venue,
            "mode": self.mode.value,
            "participant_limit": self.participant_limit,
            "max_participants": max(self.participant_limit - enrolled, 0),
            "attendees": enrolled,
            "img_url": self.img_url,
            "contact_1": self.contact_1,
            "contact_2": self.contact_2,
            "is_active": self.is_active(today),
            "created_at": self.created_at,
        }

    def to_record(self) -> dict[str, Any]:
        """저장용 (파생 필드 제외)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "time": self.time,
            "venue": self.venue,
            "mode": self.mode.value,
            "participant_limit": self.participant_limit,
            "img_url": self.img_url,
            "contact_1": self.contact_1,
            "contact_2": self.contact_2,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Event":
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            date=data["date"],
            time=data.get("time", ""),
            venue=data.get("venue", ""),
            mode=EventMode(data.get("mode", "offline")),
            participant_limit=int(data.get("participant_limit", 0)),
            img_url=data.get("img_url", ""),
            contact_1=data.get("contact_1", ""),
            contact_2=data.get("contact_2", ""),
            created_at=data.get("created_at", ""),
        )


@dataclass
class Enrollment:
    """이벤트 등록 기록."""
    id: str
    event_id: str
    user_id: str
    enrolled_at: str  # ISO 8601

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "enrolled_at": self.enrolled_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Enrollment":
        return cls(
            id=data["id"],
            event_id=data["event_id"],
            user_id=data["user_id"],
            enrolled_at=data.get("enrolled_at", ""),
        )


# =============================================================================
# Content (자료실)
# =============================================================================

@dataclass
class Newspaper:
    """신문 PDF."""
    id: str
    title: str
    date: str
    url: str
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "url": self.url,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Newspaper":
        return cls(
            id=data["id"],
            title=data["title"],
            date=data.get("date", ""),
            url=data["url"],
            created_at=data.get("created_at", ""),
        )


@dataclass
class QuestionPaper:
    """기출문제 PDF."""
    id: str
    title: str
    year: str
    url: str
    subject: str = ""
    category: str = ""
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "year": self.year,
            "category": self.category,
            "url": self.url,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuestionPaper":
        return cls(
            id=data["id"],
            title=data["title"],
            year=data.get("year", ""),
            url=data["url"],
            subject=data.get("subject", ""),
            category=data.get("category", ""),
            created_at=data.get("created_at", ""),
        )


@dataclass
class NewsItem:
    """외부 뉴스 링크."""
    id: str
    title: str
    url: str
    category: str
    date: str
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "date": self.date,
            "title": self.title,
            "url": self.url,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsItem":
        return cls(
            id=data["id"],
            title=data["title"],
            url=data["url"],
            category=data.get("category", NewsCategory.GLOBAL.value),
            date=data.get("date", ""),
            created_at=data.get("created_at", ""),
        )


# =============================================================================
# Form Submissions
# =============================================================================

@dataclass
class ContactMessage:
    """문의 메시지."""
    id: str
    name: str
    email: str
    message: str
    submitted_at: str
    status: str = "new"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "submittedAt": self.submitted_at,
            "status": self.status,
        }


@dataclass
class NewsletterSubscription:
    """뉴스레터 구독."""
    id: str
    email: str
    subscribed_at: str
    status: str = "active"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "subscribedAt": self.subscribed_at,
            "status": self.status,
        }


@dataclass
class ValidationResult:
    """폼 검증 결과 (첫 번째 에러가 응답 메시지가 됨)."""
    errors: list[tuple[str, str, str]] = field(default_factory=list)  # (code, field, message)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, code: str, field_name: str, message: str) -> None:
        self.errors.append((code, field_name, message))
