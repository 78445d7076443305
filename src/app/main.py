"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload --port 5000
- 프로덕션: uv run python -m src.app.main
"""

import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.app.config import load_config, resolve_path
from src.app.routes import admin, auth, content, events, forms, spa
from src.app.services import AuthService, ContentService, EventService, SubmissionService
from src.core.logging import configure_logging
from src.core.store import JsonStore
from src.domain.errors import ClubError, ErrorCodes

logger = logging.getLogger(__name__)

MB = 1024 * 1024

# helmet 기본 세트에 해당하는 보안 헤더
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

# =============================================================================
# Wiring
# =============================================================================


def init_state(app: FastAPI, config: dict[str, Any]) -> None:
    """설정 기반으로 저장소/서비스 생성 → app.state."""
    data_dir = resolve_path(config, "data_dir")
    uploads_dir = resolve_path(config, "uploads_dir")
    spa_dist = resolve_path(config, "spa_dist")

    store = JsonStore(data_dir, lock_timeout=float(config["store"]["lock_timeout"]))

    app.state.config = config
    app.state.store = store
    app.state.spa_dist = spa_dist if spa_dist.is_dir() else None
    app.state.started_at = time.monotonic()

    jwt_secret = config["auth"].get("jwt_secret")
    if not jwt_secret:
        logger.warning("auth.jwt_secret not set, login tokens will not survive a restart")

    app.state.auth_service = AuthService(
        store,
        bcrypt_rounds=int(config["auth"]["bcrypt_rounds"]),
        session_ttl_hours=float(config["auth"]["session_ttl_hours"]),
        jwt_secret=jwt_secret,
    )
    app.state.event_service = EventService(store)
    app.state.content_service = ContentService(
        store,
        uploads_dir,
        public_base_url=config["server"].get("public_base_url") or "",
        max_pdf_mb=float(config["uploads"]["max_pdf_mb"]),
        max_image_mb=float(config["uploads"]["max_image_mb"]),
    )
    app.state.submission_service = SubmissionService(store)

    admin_email = config["auth"].get("admin_email")
    admin_password = config["auth"].get("admin_password")
    if admin_email and admin_password:
        app.state.auth_service.ensure_admin(admin_email, admin_password)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅 설정, 저장소/서비스 초기화, 관리자 계정 준비
    종료 시: 리소스 정리
    """
    config = load_config()
    configure_logging(config["logging"]["level"])
    init_state(app, config)

    logger.info(f"{config['site']['name']} API ready (data: {app.state.store.data_dir})")
    if app.state.spa_dist is None:
        logger.info("SPA bundle not found, serving API only")

    yield

    logger.info("Shutting down")


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Civil Servants Club TKMCE API",
    description="동아리 웹사이트 백엔드: 회원가입/로그인, 이벤트, 자료실, 관리자 업로드",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS: origin은 import 시점 설정 기준 (lifespan 이전에 미들웨어 스택 고정)
_startup_config = load_config()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_startup_config["server"]["client_url"]],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Middleware
# =============================================================================


def _current_config(app_: Any) -> dict[str, Any]:
    """lifespan 이후엔 app.state.config, 그 전엔 import 시점 설정."""
    return getattr(app_.state, "config", _startup_config)


def _error_body(message: str, **extra: Any) -> dict[str, Any]:
    """ClubError.to_dict()와 같은 envelope (code 없는 경우)."""
    return {"success": False, "message": message, "error": message, **extra}


class BodySizeLimitMiddleware:
    """
    요청 본문이 server.max_body_mb를 넘으면 413.

    - Content-Length가 있으면 헤더만 보고 판정
    - 없으면 (chunked) 받으면서 누적 크기 확인, 한도 안이면 받은 메시지를 그대로 앱에 전달
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        config = _current_config(scope["app"])
        limit = int(float(config["server"]["max_body_mb"]) * MB)

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None and content_length.isdigit():
            if int(content_length) > limit:
                await self._reject(int(content_length), scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        buffered: list[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(received, scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    @staticmethod
    async def _reject(size: int, scope: Scope, receive: Receive, send: Send) -> None:
        error = ClubError(
            ErrorCodes.PAYLOAD_TOO_LARGE,
            "Request body too large",
            status_code=413,
            size=size,
        )
        logger.info(f"{scope['method']} {scope['path']} rejected: {error}")
        response = JSONResponse(status_code=error.status_code, content=error.to_dict())
        await response(scope, receive, send)


app.add_middleware(BodySizeLimitMiddleware)


@app.middleware("http")
async def access_log(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    요청 1건당 한 줄 로그 + 보안 헤더 + X-Process-Time.

    /uploads/* 는 SPA(client_url)의 PDF 뷰어 iframe에 들어가야 하므로
    X-Frame-Options 대신 CSP frame-ancestors로 허용 origin 지정.
    """
    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        response = await unhandled_exception_handler(request, exc)
    process_time = time.perf_counter() - start_time

    client = request.client.host if request.client else "-"
    logger.info(
        f'{client} "{request.method} {request.url.path}" '
        f"{response.status_code} {process_time * 1000:.1f}ms"
    )

    embeddable = request.url.path.startswith("/uploads/")
    for header, value in SECURITY_HEADERS.items():
        if embeddable and header == "X-Frame-Options":
            continue
        response.headers.setdefault(header, value)
    if embeddable:
        client_url = _current_config(request.app)["server"]["client_url"]
        response.headers["Content-Security-Policy"] = f"frame-ancestors 'self' {client_url}"
    response.headers["X-Process-Time"] = f"{process_time:.6f}"
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(ClubError)
async def club_error_handler(request: Request, exc: ClubError) -> JSONResponse:
    """도메인 에러 → envelope."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """FastAPI 파라미터 검증 실패 → 400."""
    return JSONResponse(
        status_code=400,
        content=_error_body(
            "Invalid request",
            errors=[
                {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
                for error in exc.errors()
            ],
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """404 → Route not found, 그 외는 detail 그대로."""
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 → 500 (스택트레이스는 로그에만)."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


# =============================================================================
# Root Endpoints
# =============================================================================


def _service_info(request: Request) -> dict[str, Any]:
    config = request.app.state.config
    return {
        "message": f"{config['site']['name']} API Server",
        "version": config["site"]["version"],
        "status": "active",
    }


@app.get("/", response_model=None)
async def root(request: Request) -> dict[str, Any] | FileResponse:
    """SPA가 있으면 index.html, 없으면 서버 정보."""
    dist = request.app.state.spa_dist
    if dist is not None and (dist / "index.html").is_file():
        return FileResponse(dist / "index.html", media_type="text/html")
    return _service_info(request)


@app.get("/api")
async def api_info(request: Request) -> dict[str, Any]:
    """서버 정보."""
    return _service_info(request)


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """헬스 체크."""
    return {
        "status": "OK",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }


# =============================================================================
# Routes
# =============================================================================

app.include_router(forms.api_router, prefix="/api", tags=["Forms"])
app.include_router(auth.api_router, prefix="/api", tags=["Auth"])
app.include_router(events.api_router, prefix="/api", tags=["Events"])
app.include_router(content.api_router, prefix="/api", tags=["Content"])
app.include_router(admin.api_router, prefix="/api/admin", tags=["Admin"])
app.include_router(content.router, prefix="/uploads", tags=["Uploads"])

# SPA fallback (항상 마지막)
app.include_router(spa.router, tags=["SPA"])


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host=_startup_config["server"]["host"],
        port=int(_startup_config["server"]["port"]),
    )
