"""
비밀번호 해시 (bcrypt) + 로그인 토큰 (JWT, HS256).

평문 비밀번호는 저장/로그 금지. 해시 문자열만 users.json에 기록.
토큰 claims는 SPA가 서명 검증 없이 디코딩해서 화면 표시에 사용 (id, email, role, name).
"""

from datetime import datetime
from typing import Any

import bcrypt
import jwt

DEFAULT_BCRYPT_ROUNDS = 12
JWT_ALGORITHM = "HS256"


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """
    bcrypt 해시 생성.

    Args:
        password: 평문 비밀번호
        rounds: bcrypt cost factor (테스트에서는 4로 낮춤)

    Returns:
        해시 문자열 ($2b$...)
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """해시 일치 여부. 해시가 없거나 깨졌으면 False."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def issue_token(
    claims: dict[str, Any],
    secret: str,
    issued_at: datetime,
    expires_at: datetime,
) -> str:
    """
    서명된 JWT 발급.

    Args:
        claims: payload (id, email, role, name, jti)
        secret: HMAC 키
        issued_at: iat
        expires_at: exp

    Returns:
        header.payload.signature 문자열
    """
    payload = {**claims, "iat": issued_at, "exp": expires_at}
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str, verify_exp: bool = True) -> dict[str, Any]:
    """
    JWT 검증 + payload 반환.

    Raises:
        jwt.InvalidTokenError: 서명 불일치, 형식 오류, 만료 (verify_exp=True일 때)
    """
    return jwt.decode(
        token,
        secret,
        algorithms=[JWT_ALGORITHM],
        options={"verify_exp": verify_exp},
    )
