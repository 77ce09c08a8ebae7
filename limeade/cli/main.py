"""Entry point for the limeade CLI."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from limeade.cli.arg_parser import parse_args
from limeade.cli.commands import cmd_copy, cmd_paste, cmd_server
from limeade.cli.legacy import (
    LegacyOptions,
    build_server_url,
    reject_unsupported_argv,
    server_bind_address,
)
from limeade.cli.output import print_error
from limeade.config import LimeadeConfig, load_config
from limeade.core.errors import LimeadeError
from limeade.core.logging_setup import configure_logging, resolve_log_level


def _server_log_file(config: LimeadeConfig) -> Path | None:
    if config.server.log_file is None:
        return None
    return Path(config.server.log_file).expanduser()


def run(args: argparse.Namespace) -> int:
    """Run the parsed command and return its exit code."""
    legacy = LegacyOptions.from_namespace(args)

    try:
        config = load_config()
    except LimeadeError as e:
        print_error(f"Configuration error: {e.message}")
        return 1

    log_file = _server_log_file(config) if args.command == "server" else None
    configure_logging(resolve_log_level(legacy.log_level, config.log_level), log_file)

    try:
        legacy.check_supported()
    except LimeadeError as e:
        print_error(e.message)
        return 1
    legacy.log_ignored()

    if args.command == "server":
        addr = server_bind_address(args.addr or config.server.addr, legacy)
        backend = args.backend or config.server.backend
        return asyncio.run(cmd_server(addr, backend, log_file))

    server = getattr(args, "server", None) or config.client.server
    server_url = build_server_url(server, legacy)

    if args.command == "copy":
        return asyncio.run(cmd_copy(server_url, args.text, config.client.timeout))
    if args.command == "paste":
        return asyncio.run(cmd_paste(server_url, config.client.timeout))

    print_error(f"Unknown command: {args.command}")
    return 1


def main(argv: list[str] | None = None) -> None:
    """Entry point for the limeade CLI."""
    # Load .env file if present
    load_dotenv()
    try:
        reject_unsupported_argv(sys.argv[1:] if argv is None else argv)
    except LimeadeError as e:
        print_error(e.message)
        raise SystemExit(1) from None
    args = parse_args(argv)
    try:
        exit_code = run(args)
    except KeyboardInterrupt:
        exit_code = 130
    raise SystemExit(exit_code)
