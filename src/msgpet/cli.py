from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from msgpet.config import (
    DialFailurePolicy,
    RunMode,
    TestConfig,
    load_settings,
    parse_duration,
    resolve_config,
    resolve_mode,
)
from msgpet.errors import ConfigError, DialError
from msgpet.loadgen.runner import run_test
from msgpet.payload import payload_size, random_payload
from msgpet.report import format_abort, format_report

logger = logging.getLogger("msgpet.cli")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TCP line request load tester")
    parser.add_argument(
        "size",
        nargs="?",
        help="Message size in bytes or a named size (mouse, chicken, pig, goat, zebra, rhino, hippo, elephant, whale)",
    )
    parser.add_argument("--message", help="Send this literal message instead of a random one")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--requests", "-n", type=int, help="Number of requests (clients)")
    parser.add_argument("--delay", help="Delay between dials, e.g. 200ms")
    parser.add_argument("--timeout", help="Per-exchange deadline, e.g. 5s (default: none)")
    parser.add_argument("--single", action="store_true", help="Send every request over one connection")
    parser.add_argument(
        "--abort-on-dial-error",
        action="store_true",
        help="Stop the whole run on the first failed dial instead of recording it",
    )
    parser.add_argument("--seed", type=int, help="Seed for the random message")
    parser.add_argument("--config", type=Path, help="Settings file (default: ~/.msgpetrc)")
    parser.add_argument("--print-message", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def build_config(args: argparse.Namespace) -> tuple[TestConfig, RunMode]:
    if args.message is not None:
        payload = args.message.encode("utf-8")
    elif args.size is not None:
        payload = random_payload(payload_size(args.size), seed=args.seed)
    else:
        msg = "Please provide a message size or --message for test clients to send"
        raise ConfigError(msg)
    settings = load_settings(args.config)
    config = resolve_config(
        settings,
        payload,
        host=args.host,
        port=args.port,
        requests=args.requests,
        delay_sec=parse_duration(args.delay) if args.delay is not None else None,
        timeout_sec=parse_duration(args.timeout) if args.timeout is not None else None,
    )
    mode = resolve_mode(settings, RunMode.SINGLE if args.single else None)
    return config, mode


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        config, mode = build_config(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    if args.print_message:
        print(f"message: {config.payload.decode('utf-8', errors='replace')}\n")

    policy = DialFailurePolicy.ABORT if args.abort_on_dial_error else DialFailurePolicy.RECORD
    label = "single socket" if mode is RunMode.SINGLE else "multiple sockets"
    print(f"Testing with {label}...\n")
    try:
        result = asyncio.run(run_test(config, mode, policy))
    except DialError as exc:
        print(format_abort(exc), file=sys.stderr)
        return EXIT_ABORTED
    print(format_report(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
