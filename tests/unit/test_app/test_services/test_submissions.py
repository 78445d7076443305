"""
test_submissions.py - 문의/구독 기록 테스트
"""

from src.app.services.submissions import SubmissionService
from src.core.store import JsonStore


class TestSaveContact:
    """save_contact 테스트."""

    def test_stored(self, store: JsonStore):
        service = SubmissionService(store)

        message = service.save_contact(
            {"name": "Rahul", "email": "rahul@mail.com", "message": "Hello"}
        )

        assert message.id.startswith("MSG-")
        stored = store.read("contacts")
        assert stored == [message.to_dict()]
        assert stored[0]["status"] == "new"
        assert stored[0]["submittedAt"]


class TestSubscribe:
    """subscribe 테스트."""

    def test_new_subscription(self, store: JsonStore):
        subscription, created = SubmissionService(store).subscribe("reader@mail.com")

        assert created is True
        assert subscription.id.startswith("SUB-")
        assert subscription.status == "active"

    def test_resubscribe_no_duplicate(self, store: JsonStore):
        """이미 활성 구독 → 기존 레코드 반환, 새 레코드 없음."""
        service = SubmissionService(store)
        first, _ = service.subscribe("reader@mail.com")

        second, created = service.subscribe("reader@mail.com")

        assert created is False
        assert second.id == first.id
        assert len(store.read("subscribers")) == 1
