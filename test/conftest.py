from __future__ import annotations

import asyncio
import sys

import pytest

from navredirect.test import tevents


class EagerTaskCreationEventLoopPolicy(asyncio.DefaultEventLoopPolicy):
    """Run new tasks eagerly where supported, which surfaces ordering bugs."""

    def new_event_loop(self):
        loop = super().new_event_loop()
        if sys.version_info >= (3, 12):
            loop.set_task_factory(asyncio.eager_task_factory)
        return loop


@pytest.fixture(scope="session")
def event_loop_policy(request):
    return EagerTaskCreationEventLoopPolicy()


@pytest.fixture
def clock():
    return tevents.FakeClock()


class AsyncLogCaptureFixture:
    """caplog, plus waiting for output from background tasks."""

    def __init__(self, caplog: pytest.LogCaptureFixture):
        self.caplog = caplog

    def set_level(self, level: int | str, logger: str | None = None) -> None:
        self.caplog.set_level(level, logger)

    async def await_log(self, text: str, timeout: float = 2) -> bool:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        await asyncio.sleep(0)
        while text not in self.caplog.text:
            if loop.time() > deadline:
                raise AssertionError(
                    f"Did not find {text!r} in log:\n{self.caplog.text}"
                )
            await asyncio.sleep(0.01)
        return True

    def clear(self) -> None:
        self.caplog.clear()


@pytest.fixture
def caplog_async(caplog):
    return AsyncLogCaptureFixture(caplog)
