"""
test_logging.py - 제출 로그 마스킹 테스트

DoD:
- 비밀번호/해시/토큰 값은 로그에 남지 않음
- 이메일은 앞 2글자만 노출
- 원본 레코드는 변경하지 않음
"""

import logging

import pytest

from src.core.logging import log_submission, mask_email, mask_record


class TestMaskEmail:
    """mask_email 테스트."""

    def test_keeps_domain(self):
        """로컬 파트 앞 2글자 + 도메인."""
        assert mask_email("student@tkmce.ac.in") == "st***@tkmce.ac.in"

    def test_not_an_email(self):
        """@ 없음 → 전체 마스킹."""
        assert mask_email("student") == "***"


class TestMaskRecord:
    """mask_record 테스트."""

    def test_sensitive_keys_masked(self):
        """password, pass, confpass, password_hash, token → [MASKED]."""
        record = {
            "pass": "secret!1",
            "confpass": "secret!1",
            "password_hash": "$2b$04$abc",
            "token": "tok",
            "fullName": "Anu Joseph",
        }

        masked = mask_record(record)

        assert masked["pass"] == "[MASKED]"
        assert masked["confpass"] == "[MASKED]"
        assert masked["password_hash"] == "[MASKED]"
        assert masked["token"] == "[MASKED]"
        assert masked["fullName"] == "Anu Joseph"

    def test_key_match_is_case_insensitive(self):
        """newPassword 같은 camelCase 키도 마스킹."""
        masked = mask_record({"newPassword": "x!y!z!", "currentPassword": "a!b!c!"})

        assert masked == {"newPassword": "[MASKED]", "currentPassword": "[MASKED]"}

    def test_empty_sensitive_value_kept(self):
        """값이 없으면 그대로 (None 유지)."""
        assert mask_record({"password_hash": None}) == {"password_hash": None}

    def test_email_partially_masked(self):
        """email 키는 부분 마스킹."""
        masked = mask_record({"email": "anu.joseph@tkmce.ac.in"})

        assert masked["email"] == "an***@tkmce.ac.in"

    def test_nested_dict(self):
        """중첩 dict도 마스킹."""
        masked = mask_record({"user": {"email": "anu@tkmce.ac.in", "password": "p@ss"}})

        assert masked["user"] == {"email": "an***@tkmce.ac.in", "password": "[MASKED]"}

    def test_original_unchanged(self):
        """원본 dict 불변."""
        record = {"pass": "secret!1"}

        mask_record(record)

        assert record == {"pass": "secret!1"}


class TestLogSubmission:
    """log_submission 테스트."""

    def test_logs_masked_record(self, caplog: pytest.LogCaptureFixture):
        """한 줄 INFO 로그, 평문 비밀번호 없음."""
        record = {"id": "USR-1", "email": "anu@tkmce.ac.in", "pass": "secret!1"}

        with caplog.at_level(logging.INFO, logger="src.submissions"):
            masked = log_submission("user registration", record)

        assert masked["pass"] == "[MASKED]"
        assert "New user registration" in caplog.text
        assert "secret!1" not in caplog.text
        assert "anu@tkmce.ac.in" not in caplog.text
