"""주기적 감쇠 실행기

Core의 decay는 펫 단위 순수 함수. 전체 펫에 대한 반복 실행은 여기서 담당.
app lifespan에서 start/stop 한다.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from src.services.pet_service import PetService, utcnow

logger = logging.getLogger(__name__)


class DecayScheduler:
    """interval 초마다 PetService.decay_all 실행 (asyncio 백그라운드 태스크)"""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        interval: float,
        clock: Callable[[], datetime] = utcnow,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._session_factory = session_factory
        self._clock = clock
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """감쇠 1회. 세션은 매 실행마다 새로 연다."""
        db = self._session_factory()
        try:
            updated = PetService(db, clock=self._clock).decay_all()
        finally:
            db.close()
        self.runs += 1
        return updated

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await asyncio.to_thread(self.run_once)
            except Exception:
                logger.exception("Decay run failed")

    def start(self) -> None:
        if self.is_running:
            logger.warning("Decay scheduler already running")
            return
        self._task = asyncio.create_task(self._loop(), name="pet-decay")
        logger.info("Decay scheduler started (interval=%ss)", self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Decay scheduler stopped")
