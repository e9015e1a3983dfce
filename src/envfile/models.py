from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ScanState(Enum):
    PLAIN = "plain"
    IN_QUOTE = "in_quote"


@dataclass(frozen=True)
class Assignment:
    key: str
    value: str


@dataclass(frozen=True)
class EnvSource:
    path: Path
    assignments: list[Assignment] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedEnvironment:
    assignments: list[Assignment]
    sources: list[EnvSource] = field(default_factory=list)

    def as_mapping(self) -> dict[str, str]:
        # Later entries for the same key win.
        merged: dict[str, str] = {}
        for item in self.assignments:
            merged[item.key] = item.value
        return merged
