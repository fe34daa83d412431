"""
Logging conventions. Modules log through `logging.getLogger(__name__)`;
records about a specific tab carry its id as `extra={"tab_id": ...}`.
"""
from __future__ import annotations

import logging
import os

ALERT = logging.INFO + 1
"""
Same urgency as info, but output at this level is meant to catch the eye
of whoever is watching the log.
"""
logging.addLevelName(ALERT, "ALERT")

LogLevels = [
    "error",
    "warn",
    "info",
    "alert",
    "debug",
]


class NavFormatter(logging.Formatter):
    """
    `[12:00:00.000] message`, or `[12:00:00.000][tab 3] message` for
    records that name a tab.
    """

    default_time_format = "%H:%M:%S"
    default_msec_format = "%s.%03d"

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"[{self.formatTime(record)}]"
        tab_id = getattr(record, "tab_id", None)
        if tab_id is not None:
            prefix += f"[tab {tab_id}]"
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return f"{prefix} {message}"


class NavLogHandler(logging.Handler):
    """
    Base class for handlers that addons install on the root logger.

    Under pytest, a handler only accepts records from the test that created
    it. Installing a handler removes those left over from earlier tests.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._test = os.environ.get("PYTEST_CURRENT_TEST")

    def filter(self, record: logging.LogRecord) -> bool:
        if self._test and self._test != os.environ.get("PYTEST_CURRENT_TEST"):
            return False
        return bool(super().filter(record))

    def install(self) -> None:
        root = logging.getLogger()
        if self._test:
            for h in list(root.handlers):
                if isinstance(h, NavLogHandler) and h._test != self._test:
                    h.uninstall()
        root.addHandler(self)

    def uninstall(self) -> None:
        logging.getLogger().removeHandler(self)
