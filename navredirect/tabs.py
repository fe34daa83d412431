"""
The tab command surface. The browser platform implements `Tabs`; navredirect
only ever asks it to point a tab at a new URL.
"""
import asyncio
import logging

logger = logging.getLogger(__name__)


class Tabs:
    async def navigate(self, tab_id: int, url: str) -> None:
        """
        Navigate tab_id to url. Fire-and-forget: the result is not
        confirmed, and a failure is not retried.
        """
        raise NotImplementedError


class LoggingTabs(Tabs):
    """
    Tabs stand-in for replaying recorded events: every command is logged
    and nothing else happens.
    """

    async def navigate(self, tab_id: int, url: str) -> None:
        logger.info(f"tab {tab_id}: navigate to {url}")


class RecordingTabs(Tabs):
    """
    Keeps a list of all issued commands, optionally failing them.
    """

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.navigations: list[tuple[int, str]] = []
        self.fail_with = fail_with
        self._changed = asyncio.Event()

    async def navigate(self, tab_id: int, url: str) -> None:
        self.navigations.append((tab_id, url))
        self._changed.set()
        if self.fail_with:
            raise self.fail_with

    async def wait_for(self, count: int, timeout: float = 1) -> None:
        """Wait until at least count commands have been issued."""

        async def _wait():
            while len(self.navigations) < count:
                self._changed.clear()
                await self._changed.wait()

        await asyncio.wait_for(_wait(), timeout)
