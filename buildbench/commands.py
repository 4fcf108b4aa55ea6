from __future__ import annotations

import logging
import resource
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

LOGGER = logging.getLogger("buildbench.commands")

# Statuses a shell reports for commands it cannot find or cannot execute.
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126


@dataclass(frozen=True)
class CommandResult:
    exit_status: int
    elapsed: float
    user_time: float = 0.0
    system_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class CommandRunner(Protocol):
    def execute(self, command: str, args: Sequence[str], working_dir: Path) -> CommandResult:
        ...


class SubprocessCommandRunner:
    """Run a command to completion with stdout discarded and time it."""

    def execute(self, command: str, args: Sequence[str], working_dir: Path) -> CommandResult:
        argv = [command, *args]
        LOGGER.debug("Executing %s in %s", " ".join(argv), working_dir)

        usage_before = resource.getrusage(resource.RUSAGE_CHILDREN)
        started = time.perf_counter()
        try:
            completed = subprocess.run(
                argv,
                cwd=working_dir,
                stdout=subprocess.DEVNULL,
                check=False,
            )
            exit_status = completed.returncode
        except FileNotFoundError as exc:
            LOGGER.warning("Unable to start %s: %s", command, exc)
            exit_status = COMMAND_NOT_FOUND
        except PermissionError as exc:
            LOGGER.warning("Unable to start %s: %s", command, exc)
            exit_status = COMMAND_NOT_EXECUTABLE
        elapsed = time.perf_counter() - started
        usage_after = resource.getrusage(resource.RUSAGE_CHILDREN)

        return CommandResult(
            exit_status=exit_status,
            elapsed=max(elapsed, 0.0),
            user_time=max(usage_after.ru_utime - usage_before.ru_utime, 0.0),
            system_time=max(usage_after.ru_stime - usage_before.ru_stime, 0.0),
        )


def format_duration(seconds: float) -> str:
    minutes, remainder = divmod(max(seconds, 0.0), 60.0)
    return f"{int(minutes)}m{remainder:.3f}s"


def format_timing(result: CommandResult) -> str:
    lines = [
        f"real\t{format_duration(result.elapsed)}",
        f"user\t{format_duration(result.user_time)}",
        f"sys\t{format_duration(result.system_time)}",
    ]
    if not result.ok:
        lines.append(f"exit\t{result.exit_status}")
    return "\n".join(lines)


__all__ = [
    "COMMAND_NOT_EXECUTABLE",
    "COMMAND_NOT_FOUND",
    "CommandResult",
    "CommandRunner",
    "SubprocessCommandRunner",
    "format_duration",
    "format_timing",
]
