"""
Content Service: 자료실 (신문, 기출문제, 뉴스 링크) + 업로드 파일 관리.

구조:
uploads/
├── newspapers/<record_id>_<name>.pdf
├── questionpapers/<record_id>_<name>.pdf
└── events/<record_id>_<name>.(jpg|png|webp)

규칙:
- PDF: 확장자 .pdf + %PDF- 시그니처 + 용량 제한
- 이미지: 허용 확장자 + 용량 제한
- 저장 파일명은 generate_upload_name()으로 생성 (원본명 그대로 사용 금지)
- 파일 저장 후 레코드 기록 실패 시 파일 삭제
"""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from src.core.ids import generate_record_id, generate_upload_name
from src.core.store import JsonStore
from src.domain.constants import (
    COLLECTION_NEWS,
    COLLECTION_NEWSPAPERS,
    COLLECTION_QUESTION_PAPERS,
    DEFAULT_MAX_IMAGE_MB,
    DEFAULT_MAX_PDF_MB,
    IMAGE_ALLOWED_EXTENSIONS,
    NEWS_ID_PREFIX,
    NEWSPAPER_ID_PREFIX,
    PDF_ALLOWED_EXTENSIONS,
    PDF_MAGIC,
    QUESTION_PAPER_ID_PREFIX,
    UPLOAD_KIND_EVENTS,
    UPLOAD_KIND_NEWSPAPERS,
    UPLOAD_KIND_QUESTION_PAPERS,
    UPLOAD_KINDS,
)
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import NewsItem, Newspaper, QuestionPaper

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def _extension(filename: str) -> str:
    return Path(filename).suffix.lower()


class ContentService:
    """자료실 레코드 + 업로드 파일."""

    def __init__(
        self,
        store: JsonStore,
        uploads_dir: Path,
        public_base_url: str = "",
        max_pdf_mb: float = DEFAULT_MAX_PDF_MB,
        max_image_mb: float = DEFAULT_MAX_IMAGE_MB,
    ):
        """
        Args:
            store: JSON 저장소
            uploads_dir: 업로드 루트
            public_base_url: 파일 URL 앞에 붙일 주소 (빈 값이면 상대 경로)
            max_pdf_mb: PDF 최대 용량
            max_image_mb: 이미지 최대 용량
        """
        self.store = store
        self.uploads_dir = uploads_dir
        self.public_base_url = public_base_url.rstrip("/")
        self.max_pdf_bytes = int(max_pdf_mb * MB)
        self.max_image_bytes = int(max_image_mb * MB)

    # =========================================================================
    # File Handling
    # =========================================================================

    def validate_pdf(self, filename: str | None, data: bytes) -> None:
        """
        PDF 업로드 검증.

        Raises:
            ClubError: INVALID_UPLOAD (400), UPLOAD_TOO_LARGE (413)
        """
        if not filename or not data:
            raise ClubError(ErrorCodes.INVALID_UPLOAD, "A PDF file is required", status_code=400)

        if _extension(filename) not in PDF_ALLOWED_EXTENSIONS:
            raise ClubError(
                ErrorCodes.INVALID_UPLOAD,
                "Only PDF files are allowed",
                status_code=400,
                filename=filename,
            )

        if len(data) > self.max_pdf_bytes:
            raise ClubError(
                ErrorCodes.UPLOAD_TOO_LARGE,
                f"PDF exceeds {self.max_pdf_bytes // MB} MB",
                status_code=413,
                size=len(data),
            )

        if not data.startswith(PDF_MAGIC):
            raise ClubError(
                ErrorCodes.INVALID_UPLOAD,
                "File is not a valid PDF",
                status_code=400,
                filename=filename,
            )

    def validate_image(self, filename: str | None, data: bytes) -> None:
        """
        커버 이미지 검증.

        Raises:
            ClubError: INVALID_UPLOAD (400), UPLOAD_TOO_LARGE (413)
        """
        if not filename or not data:
            raise ClubError(ErrorCodes.INVALID_UPLOAD, "An image file is required", status_code=400)

        if _extension(filename) not in IMAGE_ALLOWED_EXTENSIONS:
            raise ClubError(
                ErrorCodes.INVALID_UPLOAD,
                "Only JPG, PNG or WEBP images are allowed",
                status_code=400,
                filename=filename,
            )

        if len(data) > self.max_image_bytes:
            raise ClubError(
                ErrorCodes.UPLOAD_TOO_LARGE,
                f"Image exceeds {self.max_image_bytes // MB} MB",
                status_code=413,
                size=len(data),
            )

    def save_upload(self, kind: str, record_id: str, filename: str, data: bytes) -> str:
        """
        업로드 파일 저장.

        Args:
            kind: 업로드 종류 (UPLOAD_KINDS)
            record_id: 연결될 레코드 ID
            filename: 원본 파일명
            data: 파일 내용

        Returns:
            공개 URL (public_base_url + /uploads/<kind>/<name>)
        """
        if kind not in UPLOAD_KINDS:
            raise ValueError(f"Unknown upload kind: {kind}")

        target_dir = self.uploads_dir / kind
        target_dir.mkdir(parents=True, exist_ok=True)

        stored_name = generate_upload_name(filename, record_id)
        (target_dir / stored_name).write_bytes(data)

        return f"{self.public_base_url}/uploads/{kind}/{stored_name}"

    def resolve_upload(self, kind: str, filename: str) -> Path:
        """
        업로드 파일 경로 조회 (경로 탈출 차단).

        Raises:
            ClubError: 404 (종류/파일 없음, uploads 밖을 가리키는 경로)
        """
        not_found = ClubError(ErrorCodes.INVALID_UPLOAD, "File not found", status_code=404)
        if kind not in UPLOAD_KINDS:
            raise not_found

        base = (self.uploads_dir / kind).resolve()
        path = (base / filename).resolve()
        if base not in path.parents or not path.is_file():
            raise not_found
        return path

    def _url_to_path(self, url: str) -> Path | None:
        marker = "/uploads/"
        if marker not in url:
            return None
        relative = url.split(marker, 1)[1]
        return self.uploads_dir / relative

    def _store_with_upload(
        self,
        collection: str,
        kind: str,
        record_id: str,
        filename: str,
        data: bytes,
        build: Callable[[str], Any],
    ) -> Any:
        """파일 저장 → 레코드 추가. 레코드 추가 실패 시 파일 정리."""
        url = self.save_upload(kind, record_id, filename, data)
        try:
            record = build(url)
            with self.store.update(collection) as items:
                items.append(record.to_dict())
        except Exception:
            path = self._url_to_path(url)
            if path is not None and path.exists():
                path.unlink()
            raise
        return record

    # =========================================================================
    # Newspapers
    # =========================================================================

    def add_newspaper(self, fields: dict[str, str], filename: str, data: bytes) -> Newspaper:
        """신문 PDF 등록."""
        self.validate_pdf(filename, data)
        record_id = generate_record_id(NEWSPAPER_ID_PREFIX)
        now = datetime.now(UTC).isoformat()

        return self._store_with_upload(
            COLLECTION_NEWSPAPERS,
            UPLOAD_KIND_NEWSPAPERS,
            record_id,
            filename,
            data,
            lambda url: Newspaper(
                id=record_id,
                title=fields["title"],
                date=fields["date"],
                url=url,
                created_at=now,
            ),
        )

    def list_newspapers(self) -> list[dict[str, Any]]:
        """최신 날짜순."""
        items = [Newspaper.from_dict(d).to_dict() for d in self.store.read(COLLECTION_NEWSPAPERS)]
        items.sort(key=lambda d: (d["date"], d["created_at"]), reverse=True)
        return items

    # =========================================================================
    # Question Papers
    # =========================================================================

    def add_question_paper(self, fields: dict[str, str], filename: str, data: bytes) -> QuestionPaper:
        """기출문제 PDF 등록."""
        self.validate_pdf(filename, data)
        record_id = generate_record_id(QUESTION_PAPER_ID_PREFIX)
        now = datetime.now(UTC).isoformat()

        return self._store_with_upload(
            COLLECTION_QUESTION_PAPERS,
            UPLOAD_KIND_QUESTION_PAPERS,
            record_id,
            filename,
            data,
            lambda url: QuestionPaper(
                id=record_id,
                title=fields["title"],
                year=fields["year"],
                subject=fields.get("subject", ""),
                category=fields.get("category", ""),
                url=url,
                created_at=now,
            ),
        )

    def list_question_papers(self) -> list[dict[str, Any]]:
        """최신 연도순."""
        items = [
            QuestionPaper.from_dict(d).to_dict()
            for d in self.store.read(COLLECTION_QUESTION_PAPERS)
        ]
        items.sort(key=lambda d: (d["year"], d["created_at"]), reverse=True)
        return items

    # =========================================================================
    # News
    # =========================================================================

    def add_news(self, fields: dict[str, str], today: date | None = None) -> NewsItem:
        """뉴스 링크 등록 (date = 등록일)."""
        now = datetime.now(UTC)
        item = NewsItem(
            id=generate_record_id(NEWS_ID_PREFIX),
            title=fields["title"],
            url=fields["url"],
            category=fields["category"],
            date=(today or now.date()).isoformat(),
            created_at=now.isoformat(),
        )

        with self.store.update(COLLECTION_NEWS) as items:
            items.append(item.to_dict())

        return item

    def list_news(self, category: str | None = None) -> list[dict[str, Any]]:
        """최신순. category 지정 시 해당 분류만."""
        items = [NewsItem.from_dict(d).to_dict() for d in self.store.read(COLLECTION_NEWS)]
        if category:
            items = [d for d in items if d["category"] == category]
        items.sort(key=lambda d: d["created_at"], reverse=True)
        return items

    # =========================================================================
    # Event Cover
    # =========================================================================

    def save_event_cover(self, event_hint: str, filename: str, data: bytes) -> str:
        """이벤트 커버 이미지 저장 → URL."""
        self.validate_image(filename, data)
        return self.save_upload(UPLOAD_KIND_EVENTS, event_hint, filename, data)
