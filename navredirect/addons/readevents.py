"""
Replay platform events from a file.

Each line of the file is a JSON object with an "event" key:

    {"event": "navigation", "tabId": 1, "url": "https://example.com/", "frameId": 0}
    {"event": "removed", "tabId": 1}
    {"event": "wait", "ms": 3000}

Empty lines and lines starting with "#" are ignored.
"""
import asyncio
import json
import logging
import os.path
import sys
from typing import Optional
from typing import TextIO

from navredirect import ctx
from navredirect import exceptions
from navredirect import navigation

logger = logging.getLogger(__name__)


async def dispatch(state: dict) -> None:
    kind = state.get("event")
    if kind == "navigation":
        await ctx.master.navigation_completed(navigation.NavigationEvent.from_state(state))
    elif kind == "removed":
        tab_id = state.get("tabId")
        if not isinstance(tab_id, int):
            raise ValueError("tabId must be an integer")
        await ctx.master.tab_removed(tab_id)
    elif kind == "wait":
        ms = state.get("ms", 0)
        if not isinstance(ms, (int, float)) or ms < 0:
            raise ValueError(f"Invalid wait time: {ms!r}")
        await asyncio.sleep(ms / 1000)
    else:
        raise ValueError(f"Unknown event type: {kind!r}")


class ReadEvents:
    def __init__(self):
        self._read_task: asyncio.Task | None = None

    def load(self, loader):
        loader.add_option(
            "rfile", Optional[str], None, "Replay platform events from file, - for stdin."
        )
        loader.add_option(
            "keepserving",
            bool,
            False,
            "Continue running after all events have been replayed.",
        )

    async def load_events(self, fo: TextIO) -> int:
        cnt = 0
        for lineno, line in enumerate(fo, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                state = json.loads(line)
                if not isinstance(state, dict):
                    raise ValueError("not a JSON object")
                await dispatch(state)
            except ValueError as e:
                raise exceptions.EventReadException(f"Line {lineno}: {e}") from e
            cnt += 1
        return cnt

    async def load_events_from_path(self, path: str) -> int:
        if path == "-":  # pragma: no cover
            return await self.load_events(sys.stdin)
        path = os.path.expanduser(path)
        try:
            with open(path, encoding="utf8") as f:
                return await self.load_events(f)
        except OSError as e:
            raise exceptions.EventReadException(str(e)) from e

    async def doread(self, rfile: str) -> None:
        try:
            cnt = await self.load_events_from_path(rfile)
        except exceptions.EventReadException as e:
            logger.error(f"Failed to read {rfile}: {e}")
        else:
            logger.info(f"Replayed {cnt} events from {rfile}.")
        if not ctx.options.keepserving:
            ctx.master.shutdown()

    def running(self):
        if ctx.options.rfile:
            self._read_task = asyncio.create_task(self.doread(ctx.options.rfile))

    def reading(self) -> bool:
        return bool(self._read_task and not self._read_task.done())
