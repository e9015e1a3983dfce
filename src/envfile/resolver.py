from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from envfile.errors import MissingCommand
from envfile.models import Assignment, EnvSource, ResolvedEnvironment
from envfile.parser import load_env_source, parse_line

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE_NAME = ".env"


def split_inline_assignments(rest: Sequence[str]) -> tuple[list[str], str, list[str]]:
    """Split the trailing CLI tokens into inline assignments, command and its args."""
    inline: list[str] = []
    for token in rest:
        if "=" not in token:
            break
        inline.append(token)

    if len(inline) >= len(rest):
        raise MissingCommand()
    command = rest[len(inline)]
    return inline, command, list(rest[len(inline) + 1 :])


def candidate_paths(
    *,
    load_implicit: bool,
    cwd: Path,
    env_files: Sequence[Path],
    default_file_name: str = DEFAULT_ENV_FILE_NAME,
) -> list[Path]:
    candidates: list[Path] = []
    if load_implicit:
        candidates.append(cwd / default_file_name)
    candidates.extend(Path(item) for item in env_files)

    existing: list[Path] = []
    for path in candidates:
        if path.is_dir():
            path = path / default_file_name
        if not path.is_file():
            logger.debug("Skipping env file candidate %s: not a regular file", path)
            continue
        existing.append(path)
    return existing


def resolve_environment(
    *,
    load_implicit: bool,
    cwd: Path,
    env_files: Sequence[Path] = (),
    inline: Sequence[str] = (),
    default_file_name: str = DEFAULT_ENV_FILE_NAME,
) -> ResolvedEnvironment:
    paths = candidate_paths(
        load_implicit=load_implicit,
        cwd=cwd,
        env_files=env_files,
        default_file_name=default_file_name,
    )
    sources: list[EnvSource] = [load_env_source(path) for path in paths]

    assignments: list[Assignment] = [item for source in sources for item in source.assignments]
    assignments.extend(parse_line(token) for token in inline)
    logger.debug(
        "Resolved %d assignment(s) from %d file(s) and %d inline argument(s)",
        len(assignments),
        len(sources),
        len(inline),
    )
    return ResolvedEnvironment(assignments=assignments, sources=sources)
