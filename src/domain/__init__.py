"""Domain layer: errors, schemas and constants."""

from .errors import ClubError, ErrorCodes
from .schemas import (
    ContactMessage,
    Enrollment,
    Event,
    EventMode,
    NewsItem,
    NewsletterSubscription,
    Newspaper,
    QuestionPaper,
    Session,
    User,
    UserRole,
)

__all__ = [
    "ClubError",
    "ErrorCodes",
    "User",
    "UserRole",
    "Session",
    "Event",
    "EventMode",
    "Enrollment",
    "Newspaper",
    "QuestionPaper",
    "NewsItem",
    "ContactMessage",
    "NewsletterSubscription",
]
