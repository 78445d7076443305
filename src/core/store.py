"""
JSON 컬렉션 저장소.

규칙:
- 컬렉션 1개 = JSON 파일 1개: {"schema_version": "1.0", "items": [...]}
- 읽기-수정-쓰기는 반드시 update() 컨텍스트 안에서 (컬렉션별 FileLock)
- 원자적 쓰기: temp → rename + fsync
- 파싱 실패 시 조용히 빈 컬렉션으로 취급하지 않음 → STORE_CORRUPT

파일시스템 안정성 (best-effort):
- fsync로 가능한 환경에서 내구성 강화 (파일 + 디렉토리)
- fsync 실패 시 경고 남기고 계속 진행
"""

import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.domain.constants import STORE_LOCKS_DIR, STORE_SCHEMA_VERSION
from src.domain.errors import ClubError, ErrorCodes

logger = logging.getLogger(__name__)

# 락 timeout 기본값 (초)
DEFAULT_LOCK_TIMEOUT = 10.0


# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """
    디렉토리 fsync (가능한 환경에서).

    rename 후 디렉토리 엔트리까지 내구성을 강화하려면 필요.
    Linux에서 주로 유효하며, 일부 OS/파일시스템에서는 지원되지 않을 수 있음.

    Args:
        dir_path: fsync할 디렉토리 경로
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(
            f"Directory fsync failed for {dir_path}: {e}. "
            f"Rename durability may not be guaranteed."
        )


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 가능한 환경에서 내구성 강화: 파일 fsync + 디렉토리 fsync
    - 실패 시 cleanup: temp 파일 삭제, 기존 파일 보존

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)

        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


# =============================================================================
# Json Store
# =============================================================================


class JsonStore:
    """
    컬렉션 단위 JSON 저장소.

    구조:
    data_dir/
    ├── <collection>.json
    └── .locks/<collection>.lock

    Usage:
        items = store.read("events")

        with store.update("enrollments") as items:
            items.append({...})   # 블록 종료 시 원자적으로 저장
    """

    def __init__(self, data_dir: Path, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        """
        Args:
            data_dir: 데이터 디렉터리
            lock_timeout: 컬렉션 락 대기 시간 (초)
        """
        self.data_dir = data_dir
        self.lock_timeout = lock_timeout
        self._locks_dir = data_dir / STORE_LOCKS_DIR

    def path_for(self, name: str) -> Path:
        """컬렉션 파일 경로."""
        return self.data_dir / f"{name}.json"

    @contextmanager
    def _collection_lock(self, name: str) -> Generator[None, None, None]:
        """
        컬렉션별 락 획득.

        Raises:
            ClubError: STORE_LOCK_TIMEOUT
        """
        self._locks_dir.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._locks_dir / f"{name}.lock", timeout=self.lock_timeout)

        try:
            lock.acquire()
        except Timeout:
            raise ClubError(
                ErrorCodes.STORE_LOCK_TIMEOUT,
                "Server is busy, please try again",
                status_code=503,
                collection=name,
                timeout=self.lock_timeout,
            ) from None

        try:
            yield
        finally:
            lock.release()

    def _load(self, name: str) -> list[dict[str, Any]]:
        """
        컬렉션 파일 로드 (락 없이).

        Raises:
            ClubError: STORE_CORRUPT (JSON 파싱 실패 또는 형식 불일치)
        """
        path = self.path_for(name)
        if not path.exists():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.error(f"Collection file is corrupt: {path}: {e}")
            raise ClubError(
                ErrorCodes.STORE_CORRUPT,
                "Internal server error",
                status_code=500,
                collection=name,
                error=str(e),
            ) from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ClubError(
                ErrorCodes.STORE_CORRUPT,
                "Internal server error",
                status_code=500,
                collection=name,
                error="missing items list",
            )
        return items

    def _save(self, name: str, items: list[dict[str, Any]]) -> None:
        atomic_write_json(
            self.path_for(name),
            {"schema_version": STORE_SCHEMA_VERSION, "items": items},
        )

    def read(self, name: str) -> list[dict[str, Any]]:
        """
        컬렉션 전체 읽기 (스냅샷).

        Returns:
            레코드 목록 (수정해도 저장되지 않음)
        """
        with self._collection_lock(name):
            return self._load(name)

    @contextmanager
    def update(self, *names: str) -> Generator[Any, None, None]:
        """
        하나 이상의 컬렉션을 락 안에서 읽고, 블록이 정상 종료되면 저장.

        여러 컬렉션을 지정하면 이름순으로 락을 잡음 (교착 방지).
        블록에서 예외가 나면 아무것도 저장하지 않음.

        Yields:
            컬렉션 1개: list
            컬렉션 여러 개: 지정 순서대로의 list 튜플
        """
        if not names:
            raise ValueError("update() requires at least one collection name")

        with ExitStack() as stack:
            for name in sorted(set(names)):
                stack.enter_context(self._collection_lock(name))

            loaded = {name: self._load(name) for name in names}
            if len(names) == 1:
                yield loaded[names[0]]
            else:
                yield tuple(loaded[name] for name in names)

            for name, items in loaded.items():
                self._save(name, items)
