"""
Application Services.

역할:
- validate: 폼 입력 검증 (필수/이메일/전화번호/비밀번호)
- auth: 회원 등록, 로그인 세션, 계정 관리
- events: 이벤트 목록 + 등록
- content: 신문/기출문제/뉴스 + 업로드 파일
- submissions: 문의, 뉴스레터
"""

from .auth import AuthService
from .content import ContentService
from .events import EventService
from .submissions import SubmissionService

__all__ = [
    "AuthService",
    "ContentService",
    "EventService",
    "SubmissionService",
]
