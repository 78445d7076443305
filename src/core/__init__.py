"""
Core layer: 저장소, ID, 보안, 로깅.

역할:
- JSON 컬렉션 (원자적 쓰기, 컬렉션 락)
- 레코드 ID / 세션 토큰
- bcrypt 비밀번호 해시
- 제출 로그 (민감 정보 마스킹)
"""

from .ids import generate_record_id, generate_session_token, generate_upload_name
from .logging import configure_logging, log_submission, mask_record
from .security import hash_password, verify_password
from .store import JsonStore, atomic_write_json

__all__ = [
    # store
    "JsonStore",
    "atomic_write_json",
    # ids
    "generate_record_id",
    "generate_session_token",
    "generate_upload_name",
    # security
    "hash_password",
    "verify_password",
    # logging
    "configure_logging",
    "log_submission",
    "mask_record",
]
