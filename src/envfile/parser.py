from __future__ import annotations

import logging
import re
from pathlib import Path

from envfile.errors import FileReadError, MissingKey, ParseError
from envfile.models import Assignment, EnvSource, ScanState

logger = logging.getLogger(__name__)

_ESCAPED_QUOTE = re.compile(r"\\([\"'])")
_QUOTES = ('"', "'")


def strip_comment(raw: str) -> str:
    """Drop an unquoted trailing ``#`` comment from a raw value.

    Only double quotes open a quoted region. A backslash always consumes the
    character after it, inside or outside quotes. An unterminated quote just
    runs to the end of the input, so nothing is stripped.
    """
    state = ScanState.PLAIN
    boundary: int | None = None
    index = 0
    while index < len(raw):
        char = raw[index]
        if char == "\\":
            index += 2
            continue
        if state is ScanState.PLAIN:
            if char == '"':
                state = ScanState.IN_QUOTE
            elif char == "#":
                boundary = index
                break
        elif char == '"':
            state = ScanState.PLAIN
        index += 1

    if boundary is None:
        return raw
    return raw[:boundary].rstrip()


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_line(line: str) -> Assignment:
    key, separator, raw_value = line.partition("=")
    if not separator:
        raise MissingKey(line)

    value = strip_comment(raw_value.strip()).strip()
    value = _unquote(value)
    value = _ESCAPED_QUOTE.sub(r"\1", value)
    return Assignment(key=key.strip(), value=value)


def is_candidate_line(line: str) -> bool:
    stripped = line.strip()
    return "=" in stripped and not stripped.startswith("#")


def extract(text: str, origin: Path | None = None) -> list[Assignment]:
    assignments: list[Assignment] = []
    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        if not is_candidate_line(raw_line):
            continue
        try:
            assignments.append(parse_line(raw_line.strip()))
        except ParseError as exc:
            if origin is None:
                raise
            raise exc.located(origin, line_number) from exc
    return assignments


def load_env_source(path: Path) -> EnvSource:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(path, exc) from exc

    assignments = extract(text, origin=path)
    logger.debug("Loaded %d assignment(s) from %s: %s", len(assignments), path, ", ".join(a.key for a in assignments))
    return EnvSource(path=path, assignments=assignments)
