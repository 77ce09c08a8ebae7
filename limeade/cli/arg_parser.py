"""Argument parsing for the limeade CLI.

Legacy flags from lemonade are accepted before or after the subcommand and
are hidden from --help. All optional flags default to argparse.SUPPRESS so a
subcommand parser never overwrites a value given before the subcommand.
"""

import argparse

from limeade import __version__
from limeade.clipboard import BACKENDS
from limeade.core.address import DEFAULT_BIND, DEFAULT_SERVER


def add_server_arg(parser: argparse.ArgumentParser) -> None:
    """Add --server argument to a parser."""
    parser.add_argument(
        "--server",
        default=argparse.SUPPRESS,
        metavar="ADDR",
        help=f"Server to connect to for client commands (default: {DEFAULT_SERVER})",
    )


def add_compat_args(parser: argparse.ArgumentParser) -> None:
    """Add the hidden lemonade compatibility flags to a parser."""
    hidden = argparse.SUPPRESS
    parser.add_argument("--port", type=int, default=hidden, help=hidden)
    parser.add_argument("--host", default=hidden, help=hidden)
    parser.add_argument("--allow", action="append", default=hidden, help=hidden)
    parser.add_argument("--line-ending", default=hidden, help=hidden)
    parser.add_argument("--no-fallback-messages", default=hidden, help=hidden)
    parser.add_argument("--trans-loopback", nargs="?", const="true", default=hidden, help=hidden)
    parser.add_argument("--trans-localfile", nargs="?", const="true", default=hidden, help=hidden)
    parser.add_argument("--log-level", type=int, default=hidden, help=hidden)


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    add_server_arg(common)
    add_compat_args(common)
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the limeade argument parser."""
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="limeade",
        description="Copy and paste to a remote machine's clipboard over HTTP",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    copy_parser = subparsers.add_parser(
        "copy",
        help="Copy text to the server clipboard (reads stdin when no text is given)",
        parents=[common],
    )
    copy_parser.add_argument("text", nargs="?", default=None, help="Text to copy")

    subparsers.add_parser(
        "paste",
        help="Write the server clipboard to stdout",
        parents=[common],
    )

    server_parser = subparsers.add_parser(
        "server",
        help="Start the limeade server",
        parents=[common],
    )
    server_parser.add_argument(
        "--addr",
        default=None,
        metavar="HOST:PORT",
        help=f"Address to listen on (default: {DEFAULT_BIND})",
    )
    server_parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Clipboard backend (default: system)",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)
