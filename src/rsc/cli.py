from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import colorama

from . import __version__
from .config import RuntimeSettings
from .errors import ConfigError, RscError
from .interpreter import run_program
from .logging_config import configure_logging
from .parser import ParseResult, parse_file
from .rng import Randomizer
from .runtime import Runtime

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    configure_logging(default_level=level)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rsc",
        description="The RSC (Reasonably Simple Computer) toolchain",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a settings YAML file overriding the defaults.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Run an RSC program")
    run.add_argument("file", type=Path, help="The file containing the program to run")
    run.add_argument("--seed", type=int, default=None, help="Fixed seed instead of the current time")
    run.add_argument("--max-steps", type=int, default=None, help="Abort after N executed instructions")

    check = commands.add_parser("check", help="Parse an RSC program and report every error")
    check.add_argument("file", type=Path, help="The file containing the program to check")

    rand = commands.add_parser("rand", help="Print generated values")
    rand.add_argument("-n", "--count", type=int, default=1, help="How many values to print")
    rand.add_argument("--seed", type=int, default=None, help="Fixed seed instead of the current time")

    return parser.parse_args(argv)


def _load(path: Path) -> Optional[ParseResult]:
    try:
        return parse_file(path)
    except OSError as e:
        print(f"Could not read {path}: {e.strerror or e}", file=sys.stderr)
        return None
    except UnicodeDecodeError as e:
        print(f"Could not read {path}: not UTF-8 text ({e.reason})", file=sys.stderr)
        return None


def cmd_run(args: argparse.Namespace, settings: RuntimeSettings) -> int:
    result = _load(args.file)
    if result is None:
        return EXIT_USAGE
    if not result.ok:
        print(result.report(color=settings.color, limit=1), file=sys.stderr)
        return EXIT_FAILURE

    seed = args.seed if args.seed is not None else settings.seed
    runtime = Runtime(randomizer=Randomizer(seed=seed), settings=settings)
    max_steps = args.max_steps if args.max_steps is not None else settings.max_steps
    run_program(result.instructions, runtime=runtime, max_steps=max_steps)
    return EXIT_OK


def cmd_check(args: argparse.Namespace, settings: RuntimeSettings) -> int:
    result = _load(args.file)
    if result is None:
        return EXIT_USAGE
    if not result.ok:
        print(result.report(color=settings.color), file=sys.stderr)
        return EXIT_FAILURE
    print(f"OK: {len(result.instructions)} instructions")
    return EXIT_OK


def cmd_rand(args: argparse.Namespace, settings: RuntimeSettings) -> int:
    seed = args.seed if args.seed is not None else settings.seed
    runtime = Runtime(randomizer=Randomizer(seed=seed), settings=settings)
    runtime.init()
    for _ in range(max(args.count, 0)):
        runtime.print_number(runtime.rand())
    return EXIT_OK


COMMANDS = {
    "run": cmd_run,
    "check": cmd_check,
    "rand": cmd_rand,
}


def main(argv=None) -> int:
    args = parse_args(argv)
    _setup_logging(args.verbose)

    try:
        settings = RuntimeSettings.load(user_path=args.settings_path)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return EXIT_USAGE

    if settings.color:
        colorama.just_fix_windows_console()

    try:
        return COMMANDS[args.command](args, settings)
    except RscError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"\n{e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
