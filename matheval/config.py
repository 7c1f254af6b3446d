"""REPL configuration: command-line flags with environment variable defaults."""

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from matheval.context import AngleMode

DEFAULT_HISTORY_FILE = "~/.matheval_history"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class ReplConfig:
    history_file: str
    angle_mode: AngleMode
    log_level: str


def _angle_mode(token: str) -> AngleMode:
    try:
        return AngleMode.from_token(token)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="matheval", description="Interactive calculator")
    parser.add_argument(
        "--history-file",
        default=environ.get("MATHEVAL_HISTORY_FILE", DEFAULT_HISTORY_FILE),
        help="File the line editor keeps its history in (env: MATHEVAL_HISTORY_FILE)",
    )
    parser.add_argument(
        "--angle-mode",
        type=_angle_mode,
        default=environ.get("MATHEVAL_ANGLE_MODE", AngleMode.DEGREES.value),
        help="Initial angle mode: deg, rad or grad (env: MATHEVAL_ANGLE_MODE)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=environ.get("MATHEVAL_LOG_LEVEL", "WARNING").upper(),
        help="Logging level (env: MATHEVAL_LOG_LEVEL)",
    )
    return parser


def load_config(argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> ReplConfig:
    environ = os.environ if environ is None else environ
    parser = _build_parser(environ)
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        # choices are not checked against defaults taken from the environment
        parser.error(f"invalid log level {args.log_level!r}")
    return ReplConfig(
        history_file=os.path.expanduser(args.history_file),
        angle_mode=args.angle_mode,
        log_level=args.log_level,
    )
