"""
설정 로드: default.yaml + .env / 환경변수 오버라이드.

우선순위 (높은 순):
1. 환경변수 (PORT, CLIENT_URL, DATA_DIR, ...)
2. CLUBSITE_CONFIG로 지정한 YAML 또는 프로젝트 루트 default.yaml
3. DEFAULT_CONFIG (코드 내 기본값)

상대 경로(paths.*)는 프로젝트 루트 기준으로 해석.
"""

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent.parent

DEFAULT_CONFIG: dict[str, Any] = {
    "site": {
        "name": "Civil Servants Club TKMCE",
        "college": "TKM College of Engineering",
        "version": "1.0.0",
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5000,
        "client_url": "http://localhost:5173",
        "public_base_url": "",
        "max_body_mb": 10,
    },
    "paths": {
        "data_dir": "data",
        "uploads_dir": "uploads",
        "spa_dist": "dist",
    },
    "auth": {
        "session_ttl_hours": 24,
        "bcrypt_rounds": 12,
        "jwt_secret": None,
        "admin_email": None,
        "admin_password": None,
    },
    "forms": {
        "signup_delay_seconds": 0,
        "contact_delay_seconds": 0,
    },
    "store": {
        "lock_timeout": 10,
    },
    "uploads": {
        "max_pdf_mb": 10,
        "max_image_mb": 5,
    },
    "logging": {
        "level": "INFO",
    },
}

# 환경변수 → (section, key, 변환 함수)
ENV_OVERRIDES: dict[str, tuple[str, str, Any]] = {
    "HOST": ("server", "host", str),
    "PORT": ("server", "port", int),
    "CLIENT_URL": ("server", "client_url", str),
    "PUBLIC_BASE_URL": ("server", "public_base_url", str),
    "DATA_DIR": ("paths", "data_dir", str),
    "UPLOADS_DIR": ("paths", "uploads_dir", str),
    "SPA_DIST": ("paths", "spa_dist", str),
    "ADMIN_EMAIL": ("auth", "admin_email", str),
    "ADMIN_PASSWORD": ("auth", "admin_password", str),
    "BCRYPT_ROUNDS": ("auth", "bcrypt_rounds", int),
    "SESSION_TTL_HOURS": ("auth", "session_ttl_hours", float),
    "JWT_SECRET": ("auth", "jwt_secret", str),
    "LOG_LEVEL": ("logging", "level", str),
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """override를 base에 재귀 병합 (base는 변경하지 않음)."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    설정 로드.

    Args:
        config_path: YAML 경로 (None이면 CLUBSITE_CONFIG 또는 default.yaml)

    Returns:
        병합된 설정 dict

    Raises:
        ValueError: 환경변수 값 변환 실패 (예: PORT=abc)
    """
    load_dotenv()

    if config_path is None:
        env_path = os.getenv("CLUBSITE_CONFIG")
        config_path = Path(env_path) if env_path else PROJECT_ROOT / "default.yaml"

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    config = _deep_merge(DEFAULT_CONFIG, data)

    for env_name, (section, key, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        try:
            config[section][key] = convert(raw)
        except ValueError as e:
            raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e

    return config


def resolve_path(config: dict[str, Any], key: str) -> Path:
    """paths.<key>를 절대 경로로 (상대 경로는 프로젝트 루트 기준)."""
    path = Path(config["paths"][key])
    return path if path.is_absolute() else PROJECT_ROOT / path
