"""비밀번호 제공 서비스.

카운터, 비밀번호 버퍼 큐, 카운터 저장소를 하나의 객체로 묶는다.
애플리케이션 시작 시 한 번 생성되어 모든 요청 핸들러와 백그라운드 태스크가 공유한다.
"""
import asyncio
import logging
import random
from typing import Optional, Union

from password_please.services.counter_store import CounterStore
from password_please.services.generator import (
    MIN_PASSWORD_LENGTH,
    PasswordGenerator,
    clamp_length,
)

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 10
DEFAULT_FLUSH_INTERVAL = 100


class PasswordService:
    """비밀번호를 제공하고 생성 횟수를 세는 서비스.

    get_password() 한 번에 카운터가 정확히 1 증가한다.
    카운터 증가와 큐에서 비밀번호를 꺼내는 작업은 하나의 임계 구역에서 수행되므로
    N번째 증가와 N번째로 꺼낸 비밀번호가 항상 짝을 이룬다.
    """

    def __init__(
        self,
        store: Optional[CounterStore] = None,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        flush_interval: int = DEFAULT_FLUSH_INTERVAL,
        rng: Optional[random.Random] = None,
    ) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        if flush_interval < 1:
            raise ValueError("flush_interval must be at least 1")

        self.store = store or CounterStore()
        self.flush_interval = flush_interval
        self._passwords: asyncio.Queue[str] = asyncio.Queue(maxsize=buffer_size)
        self._generator = PasswordGenerator(self._passwords, rng)
        self._counter = 0
        self._counter_lock = asyncio.Lock()
        self._flush_tasks: set[asyncio.Task] = set()

    @property
    def counter(self) -> int:
        """지금까지 제공된 비밀번호 수."""
        return self._counter

    @property
    def buffered(self) -> int:
        """큐에 대기 중인 비밀번호 수."""
        return self._passwords.qsize()

    @property
    def running(self) -> bool:
        return self._generator.running

    async def start(self) -> None:
        """저장된 카운터를 불러오고 비밀번호 생성기를 시작한다.

        Raises:
            CounterStorageError: 카운터 파일을 읽을 수 없거나 내용이 잘못된 경우.
        """
        self._counter = self.store.load()
        self._generator.start()
        logger.info(
            "Password service started (counter=%d, persistence=%s)",
            self._counter,
            self.store.path or "disabled",
        )

    async def stop(self) -> None:
        """생성기를 멈추고 진행 중인 flush를 기다린 뒤 카운터 파일을 닫는다."""
        await self._generator.stop()
        if self._flush_tasks:
            await asyncio.gather(*self._flush_tasks, return_exceptions=True)
        self.store.close()
        logger.info("Password service stopped (counter=%d)", self._counter)

    async def get_password(self, length: Union[int, str, None] = MIN_PASSWORD_LENGTH) -> str:
        """다음 비밀번호를 꺼내 요청된 길이로 잘라 반환한다.

        카운터를 1 증가시키고, 카운터가 flush_interval의 배수가 되면
        카운터 저장을 별도 태스크로 예약한다 (응답을 기다리게 하지 않음).

        Args:
            length: 요청 길이. [8, 30] 범위로 보정된다.

        Returns:
            보정된 길이의 비밀번호.
        """
        length = clamp_length(length)
        async with self._counter_lock:
            self._counter += 1
            if self.store.enabled and self._counter % self.flush_interval == 0:
                self._schedule_flush()
            password = await self._passwords.get()
        return password[:length]

    async def flush_counter(self) -> None:
        """현재 카운터 값을 즉시 저장한다. 저장소가 없으면 아무것도 하지 않는다."""
        await self.store.flush(self._counter)

    def _schedule_flush(self) -> None:
        # 카운터 락을 잡은 채로 저장 락을 기다리지 않도록 별도 태스크로 실행
        task = asyncio.create_task(self.flush_counter(), name="counter-flush")
        self._flush_tasks.add(task)
        task.add_done_callback(self._flush_tasks.discard)
