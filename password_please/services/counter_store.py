"""비밀번호 카운터 파일 저장소.

카운터 값을 10진수 텍스트 한 줄로 파일에 저장한다.
파일은 시작 시 한 번 열어 종료할 때까지 유지한다.

- load(): 시작 시 한 번 호출. 읽기 실패나 잘못된 내용은 시작을 중단시킨다.
- flush(): 주기적으로, 그리고 종료 시 호출. 실패는 로그만 남긴다 (best-effort).
"""
import asyncio
import logging
import os
import re
from pathlib import Path
from typing import IO, Optional, Union

from password_please.exceptions import CounterFileError, InvalidCounterValueError

logger = logging.getLogger(__name__)

_UINT64_MAX = 2**64 - 1
_DECIMAL_PATTERN = re.compile(r"[0-9]+")


class CounterStore:
    """카운터 값을 파일에 읽고 쓰는 저장소.

    경로가 없으면 모든 작업이 no-op이며 카운터는 메모리에만 존재한다.
    flush()는 카운터 락과 별개인 전용 락으로 직렬화된다.
    """

    def __init__(self, path: Union[str, os.PathLike, None] = None) -> None:
        self.path: Optional[Path] = Path(path) if path else None
        self._file: Optional[IO[str]] = None
        self._lock = asyncio.Lock()
        self._written: Optional[int] = None

    @property
    def enabled(self) -> bool:
        return self.path is not None

    @property
    def last_written(self) -> Optional[int]:
        """마지막으로 파일에 기록된 값. 아직 기록이 없으면 None."""
        return self._written

    def load(self) -> int:
        """카운터 파일을 열고 저장된 값을 읽는다.

        파일이 없으면 새로 만든다. 내용이 비어 있으면 0을 반환한다.

        Returns:
            저장된 카운터 값.

        Raises:
            CounterFileError: 파일을 열거나 읽을 수 없는 경우.
            InvalidCounterValueError: 내용이 부호 없는 64비트 정수가 아닌 경우.
        """
        if self.path is None:
            return 0

        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
            self._file = os.fdopen(fd, "r+", encoding="ascii", newline="")
            content = self._file.read()
        except (OSError, UnicodeDecodeError) as e:
            self.close()
            raise CounterFileError(
                f"Failed to open counter file: {e}", path=str(self.path)
            ) from e

        content = content.strip()
        if not content:
            logger.info("Counter file %s is empty, starting from 0", self.path)
            return 0

        if not _DECIMAL_PATTERN.fullmatch(content) or int(content) > _UINT64_MAX:
            self.close()
            raise InvalidCounterValueError(path=str(self.path), content=content)

        value = int(content)
        self._written = value
        logger.info("Loaded counter value %d from %s", value, self.path)
        return value

    def _write(self, value: int) -> None:
        """파일 전체를 value로 덮어쓰고 디스크에 동기화한다 (blocking)."""
        if self._file is None:
            raise OSError(f"Counter file {self.path} is not open")
        self._file.seek(0)
        self._file.write(str(value))
        self._file.truncate()
        self._file.flush()
        os.fsync(self._file.fileno())

    async def flush(self, value: int) -> None:
        """카운터 값을 파일에 기록한다.

        파일 I/O는 워커 스레드에서 수행한다. 이미 기록된 값보다 작은 값은
        건너뛰므로, 겹쳐서 실행된 flush가 파일을 과거 값으로 되돌리지 않는다.
        쓰기/동기화 실패는 로그만 남기고 삼킨다.

        Args:
            value: 기록할 카운터 값.
        """
        if self.path is None:
            return

        async with self._lock:
            if self._written is not None and value < self._written:
                logger.debug("Skipping stale counter flush (%d < %d)", value, self._written)
                return
            try:
                await asyncio.to_thread(self._write, value)
            except OSError as e:
                logger.error("Failed to write counter: %s", e)
                return
            self._written = value

    def close(self) -> None:
        """파일 핸들을 닫는다."""
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as e:
            logger.warning("Failed to close counter file %s: %s", self.path, e)
        self._file = None
