"""
Pytest fixtures for the club API tests.

테스트 구성:
- 서비스 단위 테스트: tmp 데이터 디렉터리 + JsonStore 직접 사용
- API 테스트: 환경변수로 tmp 디렉터리를 가리킨 뒤 TestClient(app)
"""

from collections.abc import Callable, Generator
from datetime import date, timedelta
from pathlib import Path
from typing import Any

import pytest
import yaml
from fastapi.testclient import TestClient

from src.app.config import ENV_OVERRIDES
from src.core.store import JsonStore

ADMIN_EMAIL = "admin@tkmce.ac.in"
ADMIN_PASSWORD = "Admin#2026"
USER_PASSWORD = "secret!1"

# 테스트용 bcrypt cost (최소값)
TEST_BCRYPT_ROUNDS = 4

# 로그인 토큰 서명 키 (HS256 권장 길이 이상)
TEST_JWT_SECRET = "clubsite-test-signing-key-0123456789abcdef"


# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """JSON 컬렉션 디렉터리."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    """업로드 루트."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def store(data_dir: Path) -> JsonStore:
    """tmp 디렉터리 기반 저장소."""
    return JsonStore(data_dir, lock_timeout=2.0)


# =============================================================================
# Sample Data
# =============================================================================

@pytest.fixture
def signup_payload() -> dict[str, str]:
    """정상 회원가입 폼."""
    return {
        "fullName": "Anu Joseph",
        "email": "anu.joseph@tkmce.ac.in",
        "phone": "9876543210",
        "course": "B.Tech CSE",
        "year": "3",
        "interests": "UPSC, Kerala PSC",
        "pass": USER_PASSWORD,
        "confpass": USER_PASSWORD,
    }


@pytest.fixture
def future_date() -> str:
    """30일 뒤 (등록 가능한 이벤트 날짜)."""
    return (date.today() + timedelta(days=30)).isoformat()


@pytest.fixture
def event_form(future_date: str) -> dict[str, str]:
    """관리자 이벤트 생성 폼."""
    return {
        "name": "Mock Civil Services Interview",
        "description": "Panel interview practice with retired officers",
        "participantLimit": "2",
        "venue": "Seminar Hall, Main Block",
        "mode": "offline",
        "organizerContact1": "9876543210",
        "organizerContact2": "+91 98470 12345",
        "date": future_date,
        "time": "10:00",
    }


@pytest.fixture
def pdf_bytes() -> bytes:
    """%PDF- 시그니처를 가진 최소 PDF."""
    return b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def png_bytes() -> bytes:
    """PNG 시그니처 + 더미 데이터."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app_env(
    tmp_path: Path,
    data_dir: Path,
    uploads_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """
    앱이 tmp 디렉터리를 쓰도록 환경변수 설정.

    - 기존 환경변수 오버라이드는 모두 제거
    - SPA 번들 없음 (API만)
    - 시작 시 관리자 계정 생성
    """
    for env_name in ENV_OVERRIDES:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.delenv("CLUBSITE_CONFIG", raising=False)

    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("UPLOADS_DIR", str(uploads_dir))
    monkeypatch.setenv("SPA_DIST", str(tmp_path / "no_dist"))
    monkeypatch.setenv("BCRYPT_ROUNDS", str(TEST_BCRYPT_ROUNDS))
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    return tmp_path


@pytest.fixture
def client(app_env: Path) -> Generator[TestClient, None, None]:
    """lifespan까지 실행되는 TestClient."""
    from src.app.main import app

    with TestClient(app) as client:
        yield client


def _login(client: TestClient, email: str, password: str) -> dict[str, str]:
    """로그인 → Authorization 헤더."""
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    """관리자 Bearer 헤더."""
    return _login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def user_headers(client: TestClient, signup_payload: dict[str, str]) -> dict[str, str]:
    """가입 + 로그인한 일반 사용자 Bearer 헤더."""
    response = client.post("/api/signup", json=signup_payload)
    assert response.status_code == 201, response.text
    return _login(client, signup_payload["email"], USER_PASSWORD)


@pytest.fixture
def create_event(
    client: TestClient,
    admin_headers: dict[str, str],
    event_form: dict[str, str],
) -> Callable[..., dict[str, Any]]:
    """관리자 API로 이벤트 생성 (필드 덮어쓰기 가능) → 응답 data."""

    def _create(**overrides: str) -> dict[str, Any]:
        response = client.post(
            "/api/admin/events",
            data={**event_form, **overrides},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def login_as(client: TestClient) -> Callable[[str, str], dict[str, str]]:
    """임의 계정 로그인 헬퍼."""
    return lambda email, password: _login(client, email, password)


@pytest.fixture
def jwt_secret() -> str:
    """앱이 토큰 서명에 쓰는 키 (app_env 기준)."""
    return TEST_JWT_SECRET


@pytest.fixture
def admin_credentials() -> tuple[str, str]:
    """시작 시 생성되는 관리자 계정."""
    return ADMIN_EMAIL, ADMIN_PASSWORD
