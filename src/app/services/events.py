"""
Event Service: 이벤트 목록/상세, 등록(enrollment).

규칙:
- 정원 판정과 등록 기록은 같은 락 안에서 (동시 등록 시 초과 방지)
- 같은 사용자의 중복 등록 금지
- 지난 이벤트는 등록 불가
"""

import logging
from datetime import UTC, date, datetime
from typing import Any

from src.core.ids import generate_record_id
from src.core.store import JsonStore
from src.domain.constants import (
    COLLECTION_ENROLLMENTS,
    COLLECTION_EVENTS,
    ENROLLMENT_ID_PREFIX,
    EVENT_ID_PREFIX,
)
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import Enrollment, Event

logger = logging.getLogger(__name__)


def _count_by_event(enrollments: list[dict[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for item in enrollments:
        counts[item["event_id"]] = counts.get(item["event_id"], 0) + 1
    return counts


class EventService:
    """이벤트 CRUD + 등록."""

    def __init__(self, store: JsonStore):
        self.store = store

    # =========================================================================
    # Create
    # =========================================================================

    def create(self, fields: dict[str, Any]) -> Event:
        """
        이벤트 생성.

        Args:
            fields: validate_event_form() 결과 (+ 업로드된 img_url)

        Returns:
            생성된 Event
        """
        event = Event(
            id=generate_record_id(EVENT_ID_PREFIX),
            title=fields["title"],
            description=fields["description"],
            date=fields["date"],
            time=fields.get("time", ""),
            venue=fields["venue"],
            mode=fields["mode"],
            participant_limit=fields["participant_limit"],
            img_url=fields.get("img_url", ""),
            contact_1=fields["contact_1"],
            contact_2=fields["contact_2"],
            created_at=datetime.now(UTC).isoformat(),
        )

        with self.store.update(COLLECTION_EVENTS) as events:
            events.append(event.to_record())

        return event

    # =========================================================================
    # Read
    # =========================================================================

    def list_events(self, today: date | None = None) -> list[dict[str, Any]]:
        """
        전체 이벤트 (날짜 오름차순, 같은 날짜는 시간순).

        Returns:
            응답용 dict 목록 (남은 자리 포함)
        """
        events = [Event.from_dict(e) for e in self.store.read(COLLECTION_EVENTS)]
        counts = _count_by_event(self.store.read(COLLECTION_ENROLLMENTS))

        events.sort(key=lambda e: (e.date, e.time))
        return [e.to_dict(enrolled=counts.get(e.id, 0), today=today) for e in events]

    def get_event(self, event_id: str, today: date | None = None) -> dict[str, Any]:
        """
        이벤트 상세.

        Raises:
            ClubError: EVENT_NOT_FOUND (404)
        """
        event = self._get(self.store.read(COLLECTION_EVENTS), event_id)
        counts = _count_by_event(self.store.read(COLLECTION_ENROLLMENTS))
        return event.to_dict(enrolled=counts.get(event.id, 0), today=today)

    @staticmethod
    def _get(events: list[dict[str, Any]], event_id: str) -> Event:
        for item in events:
            if item.get("id") == event_id:
                return Event.from_dict(item)
        raise ClubError(
            ErrorCodes.EVENT_NOT_FOUND,
            "Event not found",
            status_code=404,
            event_id=event_id,
        )

    # =========================================================================
    # Enrollment
    # =========================================================================

    def enroll(self, event_id: str, user_id: str, today: date | None = None) -> tuple[Enrollment, int]:
        """
        이벤트 등록.

        Args:
            event_id: 이벤트 ID
            user_id: 사용자 ID
            today: 종료 판정 기준일 (테스트용)

        Returns:
            (Enrollment, 남은 자리 수)

        Raises:
            ClubError: EVENT_NOT_FOUND (404), EVENT_ENDED (400),
                       ALREADY_ENROLLED (409), NO_SLOTS_LEFT (409)
        """
        with self.store.update(COLLECTION_EVENTS, COLLECTION_ENROLLMENTS) as (events, enrollments):
            event = self._get(events, event_id)

            if not event.is_active(today):
                raise ClubError(
                    ErrorCodes.EVENT_ENDED,
                    "This event has already ended",
                    status_code=400,
                    event_id=event_id,
                )

            taken = 0
            for item in enrollments:
                if item["event_id"] != event_id:
                    continue
                if item["user_id"] == user_id:
                    raise ClubError(
                        ErrorCodes.ALREADY_ENROLLED,
                        "You are already enrolled in this event",
                        status_code=409,
                        event_id=event_id,
                    )
                taken += 1

            if taken >= event.participant_limit:
                raise ClubError(
                    ErrorCodes.NO_SLOTS_LEFT,
                    "No slots left for this event",
                    status_code=409,
                    event_id=event_id,
                )

            enrollment = Enrollment(
                id=generate_record_id(ENROLLMENT_ID_PREFIX),
                event_id=event_id,
                user_id=user_id,
                enrolled_at=datetime.now(UTC).isoformat(),
            )
            enrollments.append(enrollment.to_dict())

        remaining = event.participant_limit - taken - 1
        return enrollment, remaining

    def is_enrolled(self, event_id: str, user_id: str) -> bool:
        return any(
            item["event_id"] == event_id and item["user_id"] == user_id
            for item in self.store.read(COLLECTION_ENROLLMENTS)
        )

    def enrolled_events(self, user_id: str, today: date | None = None) -> list[dict[str, Any]]:
        """
        사용자가 등록한 이벤트 (등록 시각 최신순).

        이벤트가 삭제된 등록은 건너뜀.
        """
        enrollments = self.store.read(COLLECTION_ENROLLMENTS)
        events = {e["id"]: Event.from_dict(e) for e in self.store.read(COLLECTION_EVENTS)}
        counts = _count_by_event(enrollments)

        mine = [e for e in enrollments if e["user_id"] == user_id]
        mine.sort(key=lambda e: e.get("enrolled_at", ""), reverse=True)

        result = []
        for item in mine:
            event = events.get(item["event_id"])
            if event is None:
                continue
            data = event.to_dict(enrolled=counts.get(event.id, 0), today=today)
            data["enrolled_at"] = item.get("enrolled_at", "")
            result.append(data)
        return result
