import argparse


def common_options(parser, opts):
    parser.add_argument(
        "--version",
        action="store_true",
        dest="version",
        help="Print version and platform information, then exit.",
    )
    parser.add_argument(
        "--options",
        action="store_true",
        help="Print all options with their defaults as YAML, then exit.",
    )
    parser.add_argument(
        "--set",
        type=str,
        dest="setoptions",
        default=[],
        action="append",
        metavar="option[=value]",
        help="""
            Set any option, including those without a dedicated flag. Without
            a value, booleans become true and optional values become None.
            Booleans also accept true, false and toggle.
        """,
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", dest="quiet", help="Only log errors."
    )
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        dest="verbose",
        help="Log debug output, including suppressed redirects.",
    )

    opts.make_parser(parser, "rfile", metavar="PATH", short="r")
    opts.make_parser(parser, "keepserving")
    opts.make_parser(parser, "redirects_enabled")

    group = parser.add_argument_group("Rules")
    opts.make_parser(group, "rules_file", metavar="PATH")
    opts.make_parser(group, "rules_key", metavar="KEY")

    group = parser.add_argument_group("Loop Prevention")
    opts.make_parser(group, "redirect_cooldown", metavar="MS")
    opts.make_parser(group, "cleanup_interval", metavar="SECONDS")


def navredirect(opts):
    parser = argparse.ArgumentParser(
        usage="%(prog)s [options]",
        description="Replay browser navigation events through the redirect engine.",
    )
    common_options(parser, opts)
    return parser
