from __future__ import annotations

import logging
import sys
from typing import IO

from navredirect import ctx
from navredirect import log


class TermLog:
    """
    Print log records to the terminal, filtered by `termlog_verbosity`.
    """

    def __init__(self, out: IO[str] | None = None):
        self.handler = TermLogHandler(out)
        self.handler.install()

    def load(self, loader):
        loader.add_option(
            "termlog_verbosity", str, "info", "Log verbosity.", choices=log.LogLevels
        )
        self.handler.setLevel(logging.INFO)

    def configure(self, updated):
        if "termlog_verbosity" in updated:
            self.handler.setLevel(ctx.options.termlog_verbosity.upper())

    def uninstall(self) -> None:
        # Called by the master after done, so output from done handlers
        # still reaches the terminal.
        self.handler.uninstall()


class TermLogHandler(log.NavLogHandler):
    def __init__(self, out: IO[str] | None = None):
        super().__init__()
        self.file: IO[str] = out or sys.stdout
        self.setFormatter(log.NavFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print(self.format(record), file=self.file)
        except OSError:
            # stdout is gone, there is nowhere left to report to
            sys.exit(1)
