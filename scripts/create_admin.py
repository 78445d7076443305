#!/usr/bin/env python3
"""
create_admin.py - 관리자 계정 생성/승격 스크립트

동작:
- 이메일이 없으면 관리자 계정 생성
- 이미 있으면 role=admin으로 승격 + 비밀번호 재설정

데이터 디렉터리는 default.yaml / .env (DATA_DIR) 설정을 따름.

사용법:
    # 비밀번호 직접 지정
    uv run python scripts/create_admin.py --email admin@tkmce.ac.in --password 'S3cret!pw'

    # 비밀번호 프롬프트 입력
    uv run python scripts/create_admin.py --email admin@tkmce.ac.in

    # 다른 데이터 디렉터리
    uv run python scripts/create_admin.py --email admin@tkmce.ac.in --data-dir /srv/clubsite/data
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.app.config import load_config, resolve_path
from src.app.services.auth import AuthService
from src.app.services.validate import is_valid_email, password_problems
from src.core.store import JsonStore
from src.domain.errors import ClubError

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_admin(
    data_dir: Path,
    email: str,
    password: str,
    name: str = "Administrator",
    bcrypt_rounds: int = 12,
) -> str:
    """
    관리자 계정 준비.

    Args:
        data_dir: 데이터 디렉터리
        email: 관리자 이메일
        password: 평문 비밀번호
        name: 표시 이름 (새로 만들 때만 사용)
        bcrypt_rounds: bcrypt cost

    Returns:
        관리자 user id

    Raises:
        ValueError: 이메일 형식 오류, 비밀번호 정책 위반
        ClubError: 저장소 손상 / 잠금 대기 시간 초과
    """
    if not is_valid_email(email):
        raise ValueError(f"Invalid email format: {email}")

    problems = password_problems(password)
    if problems:
        raise ValueError(f"Password policy violated: {', '.join(problems)}")

    service = AuthService(JsonStore(data_dir), bcrypt_rounds=bcrypt_rounds)
    user = service.ensure_admin(email, password, full_name=name)
    return user.id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="관리자 계정 생성/승격 스크립트",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", required=True, help="관리자 이메일")
    parser.add_argument(
        "--password",
        type=str,
        help="비밀번호 (생략 시 프롬프트 입력)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default="Administrator",
        help="표시 이름 (기본: Administrator)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        help="데이터 디렉터리 (기본: 설정의 paths.data_dir)",
    )

    args = parser.parse_args(argv)

    config = load_config()
    data_dir = Path(args.data_dir) if args.data_dir else resolve_path(config, "data_dir")

    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Confirm password: "):
            logger.error("비밀번호가 일치하지 않습니다.")
            return 1

    try:
        user_id = create_admin(
            data_dir,
            args.email,
            password,
            name=args.name,
            bcrypt_rounds=int(config["auth"]["bcrypt_rounds"]),
        )
    except (ValueError, ClubError) as e:
        logger.error(str(e))
        return 1

    logger.info(f"관리자 계정 준비 완료: {args.email} ({user_id}) → {data_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
