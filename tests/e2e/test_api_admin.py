"""
test_api_admin.py - 관리자 콘텐츠 등록 API 테스트

대상:
- POST /api/admin/newspapers
- POST /api/admin/questionpapers
- POST /api/admin/news
- POST /api/admin/events

DoD:
- 비로그인 401, 일반 회원 403
- PDF 검증 실패 → 400, 레코드 없음
- 성공 → 201 {success, message, data}
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


ADMIN_PATHS = [
    "/api/admin/newspapers",
    "/api/admin/questionpapers",
    "/api/admin/news",
    "/api/admin/events",
]


def _pdf(content: bytes, name: str = "paper.pdf") -> dict:
    return {"pdf": (name, content, "application/pdf")}


# =============================================================================
# Access Control
# =============================================================================


class TestAdminAccess:
    """role 검사."""

    @pytest.mark.parametrize("path", ADMIN_PATHS)
    def test_requires_login(self, client: TestClient, path: str):
        response = client.post(path, data={"title": "x"})

        assert response.status_code == 401

    @pytest.mark.parametrize("path", ADMIN_PATHS)
    def test_member_forbidden(self, client: TestClient, user_headers: dict, path: str):
        response = client.post(path, data={"title": "x"}, headers=user_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"


# =============================================================================
# Newspapers
# =============================================================================


class TestUploadNewspaper:
    """POST /api/admin/newspapers."""

    def test_success(
        self, client: TestClient, admin_headers: dict, pdf_bytes: bytes, uploads_dir: Path
    ):
        response = client.post(
            "/api/admin/newspapers",
            data={"title": "The Hindu", "date": "2026-10-19"},
            files=_pdf(pdf_bytes, "hindu.pdf"),
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Newspaper saved successfully"
        assert body["data"]["url"].startswith("/uploads/newspapers/NP-")
        assert len(list((uploads_dir / "newspapers").iterdir())) == 1

    def test_missing_pdf(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/admin/newspapers",
            data={"title": "The Hindu", "date": "2026-10-19"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "A PDF file is required"

    def test_missing_title(self, client: TestClient, admin_headers: dict, pdf_bytes: bytes):
        response = client.post(
            "/api/admin/newspapers",
            data={"date": "2026-10-19"},
            files=_pdf(pdf_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Title, date and PDF are required"

    def test_not_a_pdf(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/admin/newspapers",
            data={"title": "The Hindu", "date": "2026-10-19"},
            files=_pdf(b"<html>not a pdf</html>"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "File is not a valid PDF"
        assert client.get("/api/sendnewspapers").json() == []

    def test_wrong_extension(self, client: TestClient, admin_headers: dict, pdf_bytes: bytes):
        response = client.post(
            "/api/admin/newspapers",
            data={"title": "The Hindu", "date": "2026-10-19"},
            files=_pdf(pdf_bytes, "paper.exe"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only PDF files are allowed"


# =============================================================================
# Question Papers
# =============================================================================


class TestUploadQuestionPaper:
    """POST /api/admin/questionpapers."""

    def test_success(self, client: TestClient, admin_headers: dict, pdf_bytes: bytes):
        response = client.post(
            "/api/admin/questionpapers",
            data={"title": "Prelims GS I", "date": "2024", "category": "UPSC", "subject": "GS"},
            files=_pdf(pdf_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert response.json()["message"] == "Question paper saved successfully"
        assert data["year"] == "2024"
        assert data["category"] == "UPSC"
        assert data["subject"] == "GS"

    def test_invalid_category(self, client: TestClient, admin_headers: dict, pdf_bytes: bytes):
        response = client.post(
            "/api/admin/questionpapers",
            data={"title": "Prelims", "date": "2024", "category": "GRE"},
            files=_pdf(pdf_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 400


# =============================================================================
# News
# =============================================================================


class TestPublishNews:
    """POST /api/admin/news."""

    def test_success(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/admin/news",
            json={
                "title": "Kerala budget",
                "url": "https://kerala.gov.in/budget",
                "category": "Kerala",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["message"] == "News published successfully"
        assert response.json()["data"]["id"].startswith("NEWS-")

    def test_invalid_url(self, client: TestClient, admin_headers: dict):
        response = client.post(
            "/api/admin/news",
            json={"title": "x", "url": "kerala.gov.in", "category": "Kerala"},
            headers=admin_headers,
        )

        assert response.status_code == 400


# =============================================================================
# Events
# =============================================================================


class TestCreateEvent:
    """POST /api/admin/events."""

    def test_success(self, client: TestClient, admin_headers: dict, event_form: dict):
        response = client.post("/api/admin/events", data=event_form, headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Event created successfully"
        assert body["data"]["id"].startswith("EVT-")
        assert body["data"]["participant_limit"] == 2
        assert body["data"]["max_participants"] == 2
        assert body["data"]["contact_2"] == "+91 98470 12345"

    def test_cover_photo_upload(
        self,
        client: TestClient,
        admin_headers: dict,
        event_form: dict,
        png_bytes: bytes,
    ):
        response = client.post(
            "/api/admin/events",
            data=event_form,
            files={"coverPhoto": ("poster.png", png_bytes, "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 201
        img_url = response.json()["data"]["img_url"]
        assert img_url.startswith("/uploads/events/COVER-")
        assert client.get(img_url).content == png_bytes

    def test_cover_photo_url(self, client: TestClient, admin_headers: dict, event_form: dict):
        event_form["coverPhotoUrl"] = "https://cdn.tkmce.ac.in/poster.jpg"

        response = client.post("/api/admin/events", data=event_form, headers=admin_headers)

        assert response.json()["data"]["img_url"] == "https://cdn.tkmce.ac.in/poster.jpg"

    def test_bad_cover_type(
        self, client: TestClient, admin_headers: dict, event_form: dict, pdf_bytes: bytes
    ):
        response = client.post(
            "/api/admin/events",
            data=event_form,
            files={"coverPhoto": ("poster.pdf", pdf_bytes, "application/pdf")},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert client.get("/api/getevents").json() == []

    def test_missing_fields(self, client: TestClient, admin_headers: dict, event_form: dict):
        del event_form["venue"]

        response = client.post("/api/admin/events", data=event_form, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Please fill all required fields including date"
