"""
App layer: API 서버 (FastAPI).

역할:
- 폼 제출, 로그인 세션, 이벤트 등록, 관리자 업로드
- 빌드된 SPA 제공 (클라이언트 라우트 fallback)
- ⚠️ 저장/락 로직 없음 (core에 위임)

주의: 폴더 구분
- src/app/routes/ → HTTP 계층 (요청 파싱, 응답 형식)
- src/app/services/ → 검증 + 도메인 동작
- data/, uploads/ (루트) → 런타임 데이터 저장소
"""
