from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Sequence

from envfile.errors import EnwError
from envfile.resolver import resolve_environment, split_inline_assignments
from envfile.settings import load_settings
from launch.launcher import Launcher, SubprocessLauncher, build_child_environment

__version__ = "0.1.0"

ABOUT = "Similar to the GNU env command, but will automatically load an .env file, if found."
USAGE = "enw [OPTION]... [NAME=VALUE]... COMMAND [ARGS]..."

logger = logging.getLogger("enw")


def setup_logging(level: str = "WARNING") -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("enw [%(levelname)-.1s] %(name)s: %(message)s"))
    root.addHandler(console)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="enw", usage=USAGE, description=ABOUT)
    parser.add_argument(
        "-f",
        "--file",
        dest="env_files",
        metavar="FILE",
        action="append",
        default=[],
        help=".env file, or a directory containing one. May be repeated; later files win.",
    )
    parser.add_argument(
        "-i",
        "--ignore-env",
        action="store_true",
        help="start with an empty environment",
    )
    parser.add_argument(
        "-n",
        "--no-env-file",
        action="store_true",
        help="don't implicitly load the .env file from current dir",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log which files are loaded and what is launched (to stderr).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("rest", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    launcher: Launcher | None = None,
) -> int:
    environ = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(environ)
    except EnwError as exc:
        raise SystemExit(f"enw: {exc}") from exc
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        rest = args.rest[1:] if args.rest[:1] == ["--"] else args.rest
        inline, command, command_args = split_inline_assignments(rest)
        resolved = resolve_environment(
            load_implicit=settings.load_implicit_env_file and not args.no_env_file,
            cwd=cwd or Path.cwd(),
            env_files=[Path(item) for item in args.env_files],
            inline=inline,
            default_file_name=settings.default_file_name,
        )
        env = build_child_environment(resolved, environ, ignore_env=settings.ignore_env or args.ignore_env)
        status = (launcher or SubprocessLauncher()).launch(command, command_args, env)
    except EnwError as exc:
        raise SystemExit(f"enw: {exc}") from exc

    logger.debug("%s exited with status %d", command, status)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
