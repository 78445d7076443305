"""
Auth Service: 회원 등록, 로그인 세션, 계정 관리.

규칙:
- email은 소문자 정규화 후 유일
- 세션 = 서명된 JWT (Bearer), jti는 sessions.json에 저장 (로그아웃 시 삭제로 폐기)
- 토큰 서명이 맞아도 jti가 sessions.json에 없으면 무효
- 로그인 실패 메시지는 원인 구분 없이 동일 (계정 존재 여부 노출 금지)
"""

import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from src.core.ids import generate_record_id, generate_session_token
from src.core.security import (
    DEFAULT_BCRYPT_ROUNDS,
    decode_token,
    hash_password,
    issue_token,
    verify_password,
)
from src.core.store import JsonStore
from src.domain.constants import COLLECTION_SESSIONS, COLLECTION_USERS, USER_ID_PREFIX
from src.domain.errors import ClubError, ErrorCodes
from src.domain.schemas import Session, User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_HOURS = 24


def _now() -> datetime:
    return datetime.now(UTC)


def _find_user(items: list[dict[str, Any]], **match: str) -> dict[str, Any] | None:
    for item in items:
        if all(item.get(k) == v for k, v in match.items()):
            return item
    return None


class AuthService:
    """회원/세션 관리."""

    def __init__(
        self,
        store: JsonStore,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        session_ttl_hours: float = DEFAULT_SESSION_TTL_HOURS,
        jwt_secret: str | None = None,
    ):
        """
        Args:
            store: JSON 저장소
            bcrypt_rounds: bcrypt cost
            session_ttl_hours: 세션 유효 시간
            jwt_secret: 토큰 서명 키 (None이면 인스턴스마다 새로 생성)
        """
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self.session_ttl = timedelta(hours=session_ttl_hours)
        self.jwt_secret = jwt_secret or secrets.token_urlsafe(32)

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, fields: dict[str, str]) -> User:
        """
        회원 등록.

        Args:
            fields: validate_signup() 결과

        Returns:
            생성된 User

        Raises:
            ClubError: EMAIL_ALREADY_REGISTERED (409)
        """
        now = _now().isoformat()
        password = fields.get("password") or ""

        with self.store.update(COLLECTION_USERS) as users:
            if _find_user(users, email=fields["email"]):
                raise ClubError(
                    ErrorCodes.EMAIL_ALREADY_REGISTERED,
                    "Email already registered",
                    status_code=409,
                )

            user = User(
                id=generate_record_id(USER_ID_PREFIX),
                full_name=fields["fullName"],
                email=fields["email"],
                phone=fields["phone"],
                course=fields["course"],
                year=fields["year"],
                interests=fields.get("interests", ""),
                password_hash=(
                    hash_password(password, self.bcrypt_rounds) if password else None
                ),
                registered_at=now,
                updated_at=now,
            )
            users.append(user.to_record())

        return user

    def ensure_admin(self, email: str, password: str, full_name: str = "Administrator") -> User:
        """
        관리자 계정 생성 또는 승격.

        - 없으면 생성 (phone/course/year는 빈 값)
        - 있으면 role=admin + 비밀번호 갱신

        Returns:
            관리자 User
        """
        email = email.strip().lower()
        now = _now().isoformat()
        password_hash = hash_password(password, self.bcrypt_rounds)

        with self.store.update(COLLECTION_USERS) as users:
            record = _find_user(users, email=email)
            if record is None:
                user = User(
                    id=generate_record_id(USER_ID_PREFIX),
                    full_name=full_name,
                    email=email,
                    phone="",
                    course="",
                    year="",
                    role=UserRole.ADMIN,
                    password_hash=password_hash,
                    registered_at=now,
                    updated_at=now,
                )
                users.append(user.to_record())
                logger.info(f"Created admin account {user.id}")
                return user

            record["role"] = UserRole.ADMIN.value
            record["password_hash"] = password_hash
            record["updatedAt"] = now
            logger.info(f"Promoted account {record['id']} to admin")
            return User.from_dict(record)

    # =========================================================================
    # Sessions
    # =========================================================================

    def authenticate(self, email: str, password: str) -> User:
        """
        이메일/비밀번호 확인.

        Raises:
            ClubError: INVALID_CREDENTIALS (401)
        """
        record = _find_user(self.store.read(COLLECTION_USERS), email=email.lower())
        if record is None or not verify_password(password, record.get("password_hash")):
            logger.warning("Login failed for unknown email or wrong password")
            raise ClubError(
                ErrorCodes.INVALID_CREDENTIALS,
                "Invalid email or password",
                status_code=401,
            )
        return User.from_dict(record)

    def create_session(self, user: User) -> Session:
        """
        새 세션 발급 (만료된 세션은 이 때 정리).

        토큰 claims: id, email, role, name, jti, iat, exp
        """
        now = _now().replace(microsecond=0)
        expires = now + self.session_ttl
        jti = generate_session_token()
        token = issue_token(
            {
                "id": user.id,
                "email": user.email,
                "role": user.role.value,
                "name": user.full_name,
                "jti": jti,
            },
            self.jwt_secret,
            issued_at=now,
            expires_at=expires,
        )
        session = Session(
            jti=jti,
            user_id=user.id,
            created_at=now.isoformat(),
            expires_at=expires.isoformat(),
            token=token,
        )

        with self.store.update(COLLECTION_SESSIONS) as sessions:
            sessions[:] = [s for s in sessions if not self._is_expired(s, now)]
            sessions.append(session.to_dict())

        return session

    def login(self, email: str, password: str) -> tuple[User, Session]:
        """authenticate + create_session."""
        user = self.authenticate(email, password)
        session = self.create_session(user)
        logger.info(f"User {user.id} logged in")
        return user, session

    def resolve_token(self, token: str) -> User | None:
        """
        토큰으로 사용자 조회.

        Returns:
            User 또는 None (서명 불일치/만료/폐기됨/사용자 삭제됨)
        """
        claims = self._claims(token, verify_exp=True)
        if claims is None:
            return None

        record = _find_user(self.store.read(COLLECTION_SESSIONS), jti=claims.get("jti"))
        if record is None or self._is_expired(record, _now()):
            return None
        if record["user_id"] != claims.get("id"):
            return None

        return self.get_user(record["user_id"])

    def revoke(self, token: str) -> bool:
        """세션 삭제 (만료된 토큰도 허용). 존재했으면 True."""
        claims = self._claims(token, verify_exp=False)
        if claims is None:
            return False

        with self.store.update(COLLECTION_SESSIONS) as sessions:
            before = len(sessions)
            sessions[:] = [s for s in sessions if s.get("jti") != claims.get("jti")]
            return len(sessions) < before

    def _claims(self, token: str, verify_exp: bool) -> dict[str, Any] | None:
        if not token:
            return None
        try:
            claims = decode_token(token, self.jwt_secret, verify_exp=verify_exp)
        except jwt.InvalidTokenError:
            return None
        if not claims.get("jti") or not claims.get("id"):
            return None
        return claims

    @staticmethod
    def _is_expired(session: dict[str, Any], now: datetime) -> bool:
        try:
            return datetime.fromisoformat(session["expires_at"]) <= now
        except (KeyError, ValueError):
            return True

    # =========================================================================
    # Account
    # =========================================================================

    def get_user(self, user_id: str) -> User | None:
        record = _find_user(self.store.read(COLLECTION_USERS), id=user_id)
        return User.from_dict(record) if record else None

    def update_profile(self, user_id: str, changes: dict[str, str]) -> User:
        """
        phone/year 수정.

        Raises:
            ClubError: USER_NOT_FOUND (404)
        """
        with self.store.update(COLLECTION_USERS) as users:
            record = _find_user(users, id=user_id)
            if record is None:
                raise ClubError(ErrorCodes.USER_NOT_FOUND, "User not found", status_code=404)

            for key in ("phone", "year"):
                if key in changes:
                    record[key] = changes[key]
            record["updatedAt"] = _now().isoformat()
            return User.from_dict(record)

    def change_password(self, user_id: str, current: str, new: str) -> None:
        """
        비밀번호 변경. 다른 세션은 유지.

        Raises:
            ClubError: USER_NOT_FOUND (404), INVALID_CREDENTIALS (401)
        """
        with self.store.update(COLLECTION_USERS) as users:
            record = _find_user(users, id=user_id)
            if record is None:
                raise ClubError(ErrorCodes.USER_NOT_FOUND, "User not found", status_code=404)

            if not verify_password(current, record.get("password_hash")):
                raise ClubError(
                    ErrorCodes.INVALID_CREDENTIALS,
                    "Current password is incorrect",
                    status_code=401,
                )

            record["password_hash"] = hash_password(new, self.bcrypt_rounds)
            record["updatedAt"] = _now().isoformat()

        logger.info(f"User {user_id} changed password")
