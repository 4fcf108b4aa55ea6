"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from buildbench.commands import CommandResult
from buildbench.config import BenchmarkConfig, FixtureSpec, Scenario


class FakeCommandRunner:
    """Records invocations and answers with scripted exit statuses per command."""

    def __init__(self, statuses: dict[str, int] | None = None, elapsed: float = 0.25) -> None:
        self.statuses = statuses or {}
        self.elapsed = elapsed
        self.calls: list[tuple[str, tuple[str, ...], Path]] = []

    def execute(self, command: str, args: Sequence[str], working_dir: Path) -> CommandResult:
        self.calls.append((command, tuple(args), working_dir))
        return CommandResult(
            exit_status=self.statuses.get(command, 0),
            elapsed=self.elapsed,
            user_time=0.01,
            system_time=0.02,
        )


def small_scenarios() -> tuple[Scenario, ...]:
    many = FixtureSpec(directory="many", file_size=1_000, file_count=5, indexed=True)
    large = FixtureSpec(directory="large", file_size=50_000)
    return (
        Scenario(name="no-context", title="NO BUILD CONTEXT", context_path="no-build-ctx"),
        Scenario(name="many-files", title="5 FILES", context_path="many", fixture=many),
        Scenario(name="large-file", title="1 FILE", context_path="large", fixture=large),
        Scenario(name="self-context", title="THIS REPO AS BUILD CONTEXT", context_path="."),
    )


@pytest.fixture
def fake_commands() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def small_config(tmp_path: Path) -> BenchmarkConfig:
    (tmp_path / "no-build-ctx").mkdir()
    return BenchmarkConfig(
        engine_command="docker",
        library_client_binary="target/debug/examples/image",
        client_build_command=("cargo", "build", "--example", "image"),
        scenarios=small_scenarios(),
        working_directory=tmp_path,
    )
