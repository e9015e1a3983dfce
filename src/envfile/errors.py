from __future__ import annotations

from pathlib import Path


class EnwError(Exception):
    """Base class for every failure enw reports to the user."""


class ParseError(EnwError):
    reason = "malformed assignment"

    def __init__(self, text: str, origin: Path | None = None, line_number: int | None = None) -> None:
        self.text = text
        self.origin = origin
        self.line_number = line_number
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = ""
        if self.origin is not None:
            where = f"{self.origin}:{self.line_number}: " if self.line_number else f"{self.origin}: "
        return f"{where}{self.reason}: {self.text!r}"

    def located(self, origin: Path, line_number: int) -> "ParseError":
        return type(self)(self.text, origin=origin, line_number=line_number)


class MissingKey(ParseError):
    reason = "KEY missing"


class MissingValue(ParseError):
    reason = "VALUE missing"


class FileReadError(EnwError):
    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"cannot read env file '{path}': {cause}")


class MissingCommand(EnwError):
    def __init__(self) -> None:
        super().__init__("No COMMAND supplied")


class SpawnError(EnwError):
    def __init__(self, command: str, cause: Exception) -> None:
        self.command = command
        self.cause = cause
        super().__init__(f"cannot run '{command}': {cause}")


class SettingsError(EnwError):
    pass
