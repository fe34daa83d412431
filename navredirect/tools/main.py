from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from collections.abc import Callable
from collections.abc import Sequence
from typing import TypeVar

from navredirect import exceptions
from navredirect import master
from navredirect import options
from navredirect import optmanager
from navredirect import version
from navredirect.tools import cmdline

CONFIG_FILES = ("config.yaml", "config.yml")


def process_options(parser, opts, args):
    """
    Apply parsed command line arguments to the options. Flags that were
    not given are left alone.
    """
    if args.version:
        print(version.dump_system_info())
        sys.exit(0)
    if args.quiet or args.options:
        # keep startup output out of --options dumps
        args.termlog_verbosity = "error"
    if args.verbose:
        args.termlog_verbosity = "debug"

    given = {k: v for k, v in vars(args).items() if k in opts and v is not None}
    opts.update(**given)


T = TypeVar("T", bound=master.Master)


def run(
    master_cls: type[T],
    make_parser: Callable[[options.Options], argparse.ArgumentParser],
    arguments: Sequence[str] | None,
) -> T:  # pragma: no cover
    """
    Build a master, configure it from the config files in confdir and the
    command line (in that order), and run it until it shuts down.
    """

    async def main() -> T:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

        opts = options.Options()
        m = master_cls(opts)
        args = make_parser(opts).parse_args(arguments)

        try:
            opts.set(*args.setoptions, defer=True)
            optmanager.load_paths(
                opts, *(os.path.join(opts.confdir, name) for name in CONFIG_FILES)
            )
            process_options(None, opts, args)
        except exceptions.OptionsError as e:
            print(f"{sys.argv[0]}: {e}", file=sys.stderr)
            sys.exit(1)

        if args.options:
            optmanager.dump_defaults(opts, sys.stdout)
            sys.exit(0)

        loop = asyncio.get_running_loop()

        def _shutdown(*_):
            loop.call_soon_threadsafe(m.shutdown)

        # ProactorEventLoop on Windows has no add_signal_handler.
        signal.signal(signal.SIGINT, _shutdown)
        signal.signal(signal.SIGTERM, _shutdown)

        await m.run()
        return m

    return asyncio.run(main())


def navredirect(args=None) -> int | None:  # pragma: no cover
    from navredirect.tools import dump

    run(dump.RedirectMaster, cmdline.navredirect, args)
    return None
