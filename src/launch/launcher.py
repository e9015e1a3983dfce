from __future__ import annotations

import logging
import subprocess
from typing import Mapping, Protocol, Sequence

from envfile.errors import SpawnError
from envfile.models import ResolvedEnvironment

logger = logging.getLogger(__name__)


class Launcher(Protocol):
    def launch(self, command: str, args: Sequence[str], env: Mapping[str, str]) -> int:
        ...


def build_child_environment(
    resolved: ResolvedEnvironment,
    base: Mapping[str, str],
    ignore_env: bool = False,
) -> dict[str, str]:
    env: dict[str, str] = {} if ignore_env else dict(base)
    env.update(resolved.as_mapping())
    return env


class SubprocessLauncher:
    def launch(self, command: str, args: Sequence[str], env: Mapping[str, str]) -> int:
        logger.debug("Launching %s with %d argument(s) and %d variable(s)", command, len(args), len(env))
        try:
            process = subprocess.Popen([command, *args], env=dict(env))
        except (OSError, ValueError) as exc:
            raise SpawnError(command, exc) from exc

        while True:
            try:
                returncode = process.wait()
                break
            except KeyboardInterrupt:
                # The child shares our terminal and gets the same interrupt.
                logger.debug("Interrupted, still waiting for %s", command)

        # Negative return codes mean the child died from a signal.
        if returncode < 0:
            return 128 - returncode
        return returncode
