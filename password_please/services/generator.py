"""비밀번호 생성기.

고정된 알파벳에서 문자를 하나씩 균등하게 뽑아 최대 길이의 비밀번호를 만들고,
백그라운드 태스크가 이를 버퍼 큐에 계속 채워 넣는다.
요청 시에는 큐에서 꺼낸 비밀번호를 원하는 길이로 잘라서 사용한다.
"""
import asyncio
import logging
import random
import re
import time
from typing import Optional, Union

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 30

# 헷갈리기 쉬운 문자(0/O, 1/l/I 등) 제외
# Derived from Django's UserManager.make_random_password
ALPHABET = "abcdefghjkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# 프로세스 전체에서 공유하는 PRNG. 실행마다 다른 결과가 나오도록 시작 시각으로 시드.
_rng = random.Random(time.time_ns())


def clamp_length(value: Union[int, str, None]) -> int:
    """요청된 비밀번호 길이를 [MIN, MAX] 범위로 보정한다.

    숫자로 해석할 수 없는 값이나 누락된 값은 최소 길이로 처리한다.

    Args:
        value: 정수, 부호가 붙을 수 있는 10진수 문자열, 또는 None.

    Returns:
        MIN_PASSWORD_LENGTH 이상 MAX_PASSWORD_LENGTH 이하의 길이.
    """
    if isinstance(value, bool):
        return MIN_PASSWORD_LENGTH
    if isinstance(value, str):
        if not _INT_PATTERN.fullmatch(value):
            return MIN_PASSWORD_LENGTH
        value = int(value)
    if not isinstance(value, int):
        return MIN_PASSWORD_LENGTH
    if value < MIN_PASSWORD_LENGTH:
        return MIN_PASSWORD_LENGTH
    if value > MAX_PASSWORD_LENGTH:
        return MAX_PASSWORD_LENGTH
    return value


def generate_password(rng: Optional[random.Random] = None) -> str:
    """최대 길이의 랜덤 비밀번호 하나를 생성한다.

    각 문자는 ALPHABET에서 독립적으로 균등하게 선택된다.
    암호학적으로 안전한 난수가 아니다.
    """
    rng = rng or _rng
    return "".join(rng.choice(ALPHABET) for _ in range(MAX_PASSWORD_LENGTH))


class PasswordGenerator:
    """비밀번호 큐를 채우는 단일 생산자.

    요청이 비밀번호 생성을 기다리지 않도록 미리 만들어 둔다.
    큐가 가득 차면 자리가 날 때까지 대기한다.
    """

    def __init__(self, queue: asyncio.Queue, rng: Optional[random.Random] = None) -> None:
        self._queue = queue
        self._rng = rng or _rng
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self) -> None:
        """비밀번호를 무한히 생성해 큐에 넣는다. 취소될 때까지 반환하지 않는다."""
        while True:
            await self._queue.put(generate_password(self._rng))

    def start(self) -> None:
        """생성 루프를 백그라운드 태스크로 시작한다."""
        if self.running:
            return
        self._task = asyncio.create_task(self.run(), name="password-generator")
        logger.debug("Password generator started (buffer size %d)", self._queue.maxsize)

    async def stop(self) -> None:
        """생성 태스크를 취소하고 종료를 기다린다."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Password generator stopped")
