# SPDX-License-Identifier: MIT

import asyncio
import logging
from enum import Enum
from types import TracebackType
from typing import Callable, Optional, TypeAlias

import pendulum

from aika.configuration import DEFAULT_TICK_INTERVAL_MS
from aika.time import elapsed_seconds, now_utc

logger = logging.getLogger(__name__)

Clock: TypeAlias = Callable[[], pendulum.DateTime]
ElapsedObserver: TypeAlias = Callable[[int], None]


class TimerState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class TimerEngine:
    """
    Elapsed-seconds clock measured from an anchor instant.

    Every tick recomputes the elapsed value from `clock() - anchor`, so a
    process that was suspended catches up on its first tick after resuming.
    Observers are only notified when the elapsed value changes.
    """

    def __init__(
        self,
        clock: Clock = now_utc,
        tick_interval: float = DEFAULT_TICK_INTERVAL_MS / 1000,
    ) -> None:
        self._clock = clock
        self._tick_interval = tick_interval
        self._anchor: Optional[pendulum.DateTime] = None
        self._elapsed = 0
        self._observers: list[ElapsedObserver] = []
        self._tick_task: Optional[asyncio.Task[None]] = None

    @property
    def state(self) -> TimerState:
        return TimerState.STOPPED if self._anchor is None else TimerState.RUNNING

    @property
    def is_running(self) -> bool:
        return self._anchor is not None

    @property
    def anchor(self) -> Optional[pendulum.DateTime]:
        return self._anchor

    @property
    def elapsed(self) -> int:
        """The last published elapsed value in seconds."""
        return self._elapsed

    def subscribe(self, observer: ElapsedObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def start(self, anchor: pendulum.DateTime) -> None:
        """Run from `anchor`, replacing any previous anchor."""
        self.__release_tick()
        self._anchor = anchor
        logger.debug("timer anchored at %s", anchor)
        self.tick()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Without a loop the caller drives tick() itself
            logger.debug("no running event loop, recurring tick not scheduled")
            return
        self._tick_task = loop.create_task(self.__run())

    def stop(self) -> None:
        self.__release_tick()
        self._anchor = None
        self.__publish(0)
        logger.debug("timer stopped")

    def tick(self) -> int:
        """Recompute elapsed from the anchor and publish it if it changed."""
        if self._anchor is None:
            return self._elapsed
        self.__publish(elapsed_seconds(self._anchor, self._clock()))
        return self._elapsed

    def close(self) -> None:
        self.stop()
        self._observers.clear()

    async def __aenter__(self) -> "TimerEngine":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    async def __run(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            self.tick()

    def __release_tick(self) -> None:
        # Clear the handle before cancelling so the task is released only once
        task, self._tick_task = self._tick_task, None
        if task is not None:
            task.cancel()

    def __publish(self, elapsed: int) -> None:
        if elapsed == self._elapsed:
            return
        self._elapsed = elapsed
        for observer in list(self._observers):
            observer(elapsed)
