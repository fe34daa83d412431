"""
Periodic alarms, dispatched to all addons as the `alarm` hook.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from navredirect import ctx
from navredirect import hooks
from navredirect.utils import asyncio_utils

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Alarm:
    name: str
    period: float
    """Seconds between two firings."""
    scheduled_time: float = 0
    """Epoch seconds at which this firing was due."""


@dataclass
class AlarmHook(hooks.Hook):
    """
    An alarm has gone off. Addons check the alarm's name to see whether
    it is theirs.
    """

    alarm: Alarm


class Alarms:
    def __init__(self) -> None:
        self.alarms: dict[str, float] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._running = False

    def create(self, name: str, period: float) -> None:
        """
        Create an alarm firing every period seconds, replacing any
        existing alarm with the same name. The first firing is one period
        from now.
        """
        if period <= 0:
            raise ValueError(f"Alarm period must be positive, not {period}")
        self.clear(name)
        self.alarms[name] = period
        if self._running:
            self._start(name, period)

    def clear(self, name: str) -> bool:
        existed = self.alarms.pop(name, None) is not None
        if task := self._tasks.pop(name, None):
            task.cancel()
        return existed

    def _start(self, name: str, period: float) -> None:
        self._tasks[name] = asyncio_utils.create_task(
            self._fire_periodically(name, period),
            name=f"alarm {name}",
            keep_ref=False,
        )

    async def _fire_periodically(self, name: str, period: float) -> None:
        due = time.time() + period
        while True:
            await asyncio.sleep(max(0.0, due - time.time()))
            logger.debug(f"Alarm {name} fired.")
            await ctx.master.addons.trigger_event(
                AlarmHook(Alarm(name, period, scheduled_time=due))
            )
            due += period

    def running(self):
        self._running = True
        for name, period in self.alarms.items():
            if name not in self._tasks:
                self._start(name, period)

    def done(self):
        self._running = False
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
