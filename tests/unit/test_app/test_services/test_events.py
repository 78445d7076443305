"""
test_events.py - EventService 테스트

DoD:
- 목록은 날짜 오름차순 (같은 날짜는 시간순)
- max_participants = 남은 자리, attendees = 등록 인원
- 정원 초과/중복 등록/지난 이벤트 등록 거부
- 동시 등록에서도 정원 유지
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from src.app.services.events import EventService
from src.core.store import JsonStore
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import EventMode

TODAY = date(2026, 10, 19)


@pytest.fixture
def event_service(store: JsonStore) -> EventService:
    return EventService(store)


def _fields(**overrides) -> dict:
    fields = {
        "title": "Ethics Case Study Workshop",
        "description": "GS Paper IV practice",
        "date": "2026-11-05",
        "time": "14:00",
        "venue": "Seminar Hall",
        "mode": EventMode.OFFLINE,
        "participant_limit": 3,
        "contact_1": "9876543210",
        "contact_2": "9876543211",
        "img_url": "",
    }
    fields.update(overrides)
    return fields


# =============================================================================
# Create / Read
# =============================================================================


class TestCreateAndList:
    """create / list_events / get_event 테스트."""

    def test_create(self, event_service: EventService, store: JsonStore):
        """EVT- id, 파생 필드는 저장하지 않음."""
        event = event_service.create(_fields())

        assert event.id.startswith("EVT-")
        stored = store.read("events")[0]
        assert stored["participant_limit"] == 3
        assert "max_participants" not in stored
        assert "is_active" not in stored

    def test_list_sorted_by_date_then_time(self, event_service: EventService):
        event_service.create(_fields(title="C", date="2026-12-01", time="09:00"))
        event_service.create(_fields(title="B", date="2026-11-05", time="15:00"))
        event_service.create(_fields(title="A", date="2026-11-05", time="10:00"))

        titles = [e["title"] for e in event_service.list_events(TODAY)]

        assert titles == ["A", "B", "C"]

    def test_response_fields(self, event_service: EventService):
        event = event_service.create(_fields(mode=EventMode.HYBRID))

        data = event_service.get_event(event.id, TODAY)

        assert data["max_participants"] == 3
        assert data["attendees"] == 0
        assert data["mode"] == "hybrid"
        assert data["is_active"] is True

    def test_past_event_inactive(self, event_service: EventService):
        event = event_service.create(_fields(date="2026-10-18"))

        assert event_service.get_event(event.id, TODAY)["is_active"] is False

    def test_event_today_is_active(self, event_service: EventService):
        event = event_service.create(_fields(date="2026-10-19"))

        assert event_service.get_event(event.id, TODAY)["is_active"] is True

    def test_get_unknown(self, event_service: EventService):
        with pytest.raises(ClubError) as exc_info:
            event_service.get_event("EVT-missing")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Event not found"


# =============================================================================
# Enrollment
# =============================================================================


class TestEnroll:
    """enroll 테스트."""

    def test_enroll_decrements_remaining(self, event_service: EventService):
        event = event_service.create(_fields())

        enrollment, remaining = event_service.enroll(event.id, "USR-1", TODAY)

        assert enrollment.id.startswith("ENR-")
        assert remaining == 2
        data = event_service.get_event(event.id, TODAY)
        assert data["max_participants"] == 2
        assert data["attendees"] == 1

    def test_duplicate(self, event_service: EventService):
        event = event_service.create(_fields())
        event_service.enroll(event.id, "USR-1", TODAY)

        with pytest.raises(ClubError) as exc_info:
            event_service.enroll(event.id, "USR-1", TODAY)

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == ErrorCodes.ALREADY_ENROLLED

    def test_full(self, event_service: EventService):
        event = event_service.create(_fields(participant_limit=1))
        event_service.enroll(event.id, "USR-1", TODAY)

        with pytest.raises(ClubError) as exc_info:
            event_service.enroll(event.id, "USR-2", TODAY)

        assert exc_info.value.code == ErrorCodes.NO_SLOTS_LEFT
        assert exc_info.value.message == "No slots left for this event"

    def test_ended(self, event_service: EventService):
        event = event_service.create(_fields(date="2026-01-01"))

        with pytest.raises(ClubError) as exc_info:
            event_service.enroll(event.id, "USR-1", TODAY)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == ErrorCodes.EVENT_ENDED

    def test_unknown_event(self, event_service: EventService, store: JsonStore):
        """없는 이벤트 → 404, 등록 기록 없음."""
        with pytest.raises(ClubError) as exc_info:
            event_service.enroll("EVT-missing", "USR-1", TODAY)

        assert exc_info.value.status_code == 404
        assert store.read("enrollments") == []

    def test_concurrent_enrollments_respect_limit(self, event_service: EventService):
        """동시 등록 10건, 정원 3 → 정확히 3건 성공."""
        event = event_service.create(_fields(participant_limit=3))

        def attempt(n: int) -> bool:
            try:
                event_service.enroll(event.id, f"USR-{n}", TODAY)
                return True
            except ClubError:
                return False

        with ThreadPoolExecutor(max_workers=10) as pool:
            results = list(pool.map(attempt, range(10)))

        assert results.count(True) == 3
        assert event_service.get_event(event.id, TODAY)["attendees"] == 3


class TestEnrolledEvents:
    """is_enrolled / enrolled_events 테스트."""

    def test_is_enrolled(self, event_service: EventService):
        event = event_service.create(_fields())
        event_service.enroll(event.id, "USR-1", TODAY)

        assert event_service.is_enrolled(event.id, "USR-1") is True
        assert event_service.is_enrolled(event.id, "USR-2") is False

    def test_enrolled_events_newest_first(self, event_service: EventService):
        first = event_service.create(_fields(title="First"))
        second = event_service.create(_fields(title="Second"))
        event_service.enroll(first.id, "USR-1", TODAY)
        event_service.enroll(second.id, "USR-1", TODAY)

        events = event_service.enrolled_events("USR-1", TODAY)

        assert [e["title"] for e in events] == ["Second", "First"]
        assert all(e["enrolled_at"] for e in events)

    def test_only_own_enrollments(self, event_service: EventService):
        event = event_service.create(_fields())
        event_service.enroll(event.id, "USR-2", TODAY)

        assert event_service.enrolled_events("USR-1", TODAY) == []

    def test_deleted_event_skipped(self, event_service: EventService, store: JsonStore):
        event = event_service.create(_fields())
        event_service.enroll(event.id, "USR-1", TODAY)
        with store.update("events") as events:
            events.clear()

        assert event_service.enrolled_events("USR-1", TODAY) == []
