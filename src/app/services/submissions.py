"""
Submission Service: 문의 메시지, 뉴스레터 구독.

규칙:
- 모든 제출은 컬렉션에 기록 + log_submission()
- 이미 활성 구독 중인 이메일은 새 레코드를 만들지 않음 (응답은 동일)
"""

from datetime import UTC, datetime

from src.core.ids import generate_record_id
from src.core.logging import log_submission
from src.core.store import JsonStore
from src.domain.constants import (
    COLLECTION_CONTACTS,
    COLLECTION_SUBSCRIBERS,
    CONTACT_ID_PREFIX,
    SUBSCRIBER_ID_PREFIX,
)
from src.domain.schemas import ContactMessage, NewsletterSubscription


class SubmissionService:
    """문의/구독 기록."""

    def __init__(self, store: JsonStore):
        self.store = store

    def save_contact(self, fields: dict[str, str]) -> ContactMessage:
        """
        문의 메시지 저장.

        Args:
            fields: validate_contact() 결과
        """
        message = ContactMessage(
            id=generate_record_id(CONTACT_ID_PREFIX),
            name=fields["name"],
            email=fields["email"],
            message=fields["message"],
            submitted_at=datetime.now(UTC).isoformat(),
        )

        with self.store.update(COLLECTION_CONTACTS) as items:
            items.append(message.to_dict())

        log_submission("contact message", message.to_dict())
        return message

    def subscribe(self, email: str) -> tuple[NewsletterSubscription, bool]:
        """
        뉴스레터 구독.

        Returns:
            (구독 정보, 새로 생성되었는지)
        """
        with self.store.update(COLLECTION_SUBSCRIBERS) as items:
            for item in items:
                if item["email"] == email and item.get("status") == "active":
                    return (
                        NewsletterSubscription(
                            id=item["id"],
                            email=item["email"],
                            subscribed_at=item.get("subscribedAt", ""),
                            status=item["status"],
                        ),
                        False,
                    )

            subscription = NewsletterSubscription(
                id=generate_record_id(SUBSCRIBER_ID_PREFIX),
                email=email,
                subscribed_at=datetime.now(UTC).isoformat(),
            )
            items.append(subscription.to_dict())

        log_submission("newsletter subscription", subscription.to_dict())
        return subscription, True
