from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

from .commands import CommandResult, CommandRunner, SubprocessCommandRunner, format_timing
from .config import LIBRARY_CLIENT, NATIVE_CLI, BenchmarkConfig, Scenario
from .fixtures import ensure_fixtures

LOGGER = logging.getLogger("buildbench")


class BuildSetupError(Exception):
    """Raised when the library-client example cannot be built."""


@dataclass(frozen=True)
class MeasurementResult:
    scenario_name: str
    scenario_title: str
    tool_name: str
    command: str
    elapsed: float
    exit_status: int
    user_time: float = 0.0
    system_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


class BuildCommandError(Exception):
    """A timed build exited non-zero. Recorded, never raised by the runner."""

    def __init__(self, result: MeasurementResult) -> None:
        super().__init__(
            f"{result.tool_name} build for {result.scenario_title!r} "
            f"exited with status {result.exit_status}"
        )
        self.result = result


class BenchmarkRunner:
    """Time the native engine CLI against the library client, one scenario at a time."""

    def __init__(
        self,
        config: BenchmarkConfig,
        command_runner: CommandRunner | None = None,
        out: TextIO | None = None,
    ) -> None:
        self._config = config
        self._commands = command_runner or SubprocessCommandRunner()
        self._out = out
        self.results: list[MeasurementResult] = []
        self.failures: list[BuildCommandError] = []

    def prepare(self) -> None:
        self.build_library_client()
        created = ensure_fixtures(self._config.scenarios, self._config.working_directory)
        if created:
            LOGGER.info("Created fixtures: %s", ", ".join(created))

    def build_library_client(self) -> None:
        build_command = self._config.client_build_command
        if not build_command:
            LOGGER.info("No client build command configured, skipping compilation")
            return

        LOGGER.info("Building library client: %s", " ".join(build_command))
        result = self._commands.execute(
            build_command[0], build_command[1:], self._config.working_directory
        )
        if not result.ok:
            raise BuildSetupError(
                f"{' '.join(build_command)!r} exited with status {result.exit_status}"
            )

    def run(self) -> list[MeasurementResult]:
        self.prepare()
        for scenario in self._config.scenarios:
            self.run_scenario(scenario)
        return list(self.results)

    def run_scenario(self, scenario: Scenario) -> list[MeasurementResult]:
        context = self._config.context_dir(scenario)
        if not context.exists():
            LOGGER.warning("Build context %s does not exist", context)

        self._print(f"--- {scenario.title} ---")
        native = self._measure(scenario, NATIVE_CLI, self._config.engine_command)
        self._print("")
        library = self._measure(scenario, LIBRARY_CLIENT, self._config.library_client_binary)
        self._print("")
        return [native, library]

    def _measure(self, scenario: Scenario, tool_name: str, command: str) -> MeasurementResult:
        self._print(f"---> {tool_name} ({command})")
        outcome: CommandResult = self._commands.execute(
            command,
            ["build", scenario.context_path],
            self._config.working_directory,
        )
        self._print(format_timing(outcome))

        result = MeasurementResult(
            scenario_name=scenario.name,
            scenario_title=scenario.title,
            tool_name=tool_name,
            command=command,
            elapsed=outcome.elapsed,
            exit_status=outcome.exit_status,
            user_time=outcome.user_time,
            system_time=outcome.system_time,
        )
        self.results.append(result)
        if not result.ok:
            failure = BuildCommandError(result)
            self.failures.append(failure)
            LOGGER.warning("%s", failure)
        return result

    def _print(self, text: str) -> None:
        print(text, file=self._out or sys.stdout, flush=True)


__all__ = [
    "BenchmarkRunner",
    "BuildCommandError",
    "BuildSetupError",
    "MeasurementResult",
]
