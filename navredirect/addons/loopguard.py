"""
Loop prevention.

Redirecting a tab to a URL that is itself matched by a rule would loop
forever. After a redirect fires on a tab, the loop guard suppresses every
further redirect on that tab until the cooldown has elapsed or the tab is
closed. This deliberately covers chains of different rules as well as a
single rule matching its own target.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from navredirect import ctx
from navredirect import exceptions

logger = logging.getLogger(__name__)

REDIRECT_COOLDOWN_MS = 3000


def now_ms() -> float:
    return time.time() * 1000


@dataclass
class LoopGuardEntry:
    tab_id: int
    target_url: str
    recorded_at: float
    """Epoch milliseconds."""


class LoopGuard:
    def __init__(self, clock: Callable[[], float] = now_ms) -> None:
        self.clock = clock
        self.cooldown: int = REDIRECT_COOLDOWN_MS
        self._entries: dict[int, LoopGuardEntry] = {}

    def load(self, loader):
        loader.add_option(
            "redirect_cooldown",
            int,
            REDIRECT_COOLDOWN_MS,
            """
            Time in milliseconds after a redirect during which no further
            redirects are issued on the same tab.
            """,
        )

    def configure(self, updated):
        if "redirect_cooldown" in updated:
            if ctx.options.redirect_cooldown <= 0:
                raise exceptions.OptionsError(
                    f"redirect_cooldown must be positive, not {ctx.options.redirect_cooldown}"
                )
            self.cooldown = ctx.options.redirect_cooldown

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, tab_id: int) -> bool:
        return tab_id in self._entries

    def _expired(self, entry: LoopGuardEntry, now: float) -> bool:
        return now - entry.recorded_at >= self.cooldown

    def is_suppressed(self, tab_id: int) -> bool:
        """
        True if a redirect was recorded on this tab less than a cooldown ago.
        An expired entry is removed.
        """
        entry = self._entries.get(tab_id)
        if entry is None:
            return False
        if self._expired(entry, self.clock()):
            del self._entries[tab_id]
            return False
        return True

    def record(self, tab_id: int, target_url: str) -> None:
        """
        Record a redirect. This must happen before the navigation command
        is issued, so that the navigation it causes is already suppressed.
        """
        self._entries[tab_id] = LoopGuardEntry(tab_id, target_url, self.clock())

    def clear(self, tab_id: int) -> None:
        self._entries.pop(tab_id, None)

    def sweep(self) -> int:
        """
        Evict all expired entries. Returns the number of entries removed.
        """
        now = self.clock()
        expired = [t for t, e in self._entries.items() if self._expired(e, now)]
        for tab_id in expired:
            del self._entries[tab_id]
        return len(expired)

    def tab_removed(self, tab_id: int) -> None:
        self.clear(tab_id)

    def done(self):
        self._entries.clear()
