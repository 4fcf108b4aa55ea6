from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

NATIVE_CLI = "native-cli"
LIBRARY_CLIENT = "library-client"

DEFAULT_ENGINE = "docker"
DEFAULT_CLIENT_BINARY = "target/debug/examples/image"
DEFAULT_CLIENT_BUILD_COMMAND: tuple[str, ...] = ("cargo", "build", "--example", "image")

SMALL_FILE_SIZE = 100_000
SMALL_FILE_COUNT = 20_001
LARGE_FILE_SIZE = 2 * 1024 * 1024 * 1024


@dataclass(frozen=True)
class FixtureSpec:
    """Synthetic build context made of equally sized sparse files."""

    directory: str
    file_size: int
    file_count: int = 1
    indexed: bool = False

    def file_names(self) -> Iterator[str]:
        if not self.indexed:
            yield "file"
            return
        for index in range(self.file_count):
            yield f"file{index}"

    @property
    def sentinel(self) -> str:
        if not self.indexed:
            return "file"
        return f"file{self.file_count - 1}"


@dataclass(frozen=True)
class Scenario:
    """One build context both tools are timed against."""

    name: str
    title: str
    context_path: str
    fixture: FixtureSpec | None = None


@dataclass(frozen=True)
class BenchmarkConfig:
    engine_command: str = DEFAULT_ENGINE
    library_client_binary: str = DEFAULT_CLIENT_BINARY
    client_build_command: tuple[str, ...] = DEFAULT_CLIENT_BUILD_COMMAND
    scenarios: Sequence[Scenario] = field(default_factory=lambda: default_scenarios())
    working_directory: Path = field(default_factory=Path.cwd)

    def context_dir(self, scenario: Scenario) -> Path:
        return self.working_directory / scenario.context_path


def default_scenarios() -> tuple[Scenario, ...]:
    """Return the four scenarios in the order they are always run."""

    many_files = FixtureSpec(
        directory="many-builds-2G",
        file_size=SMALL_FILE_SIZE,
        file_count=SMALL_FILE_COUNT,
        indexed=True,
    )
    large_file = FixtureSpec(directory="build-2G", file_size=LARGE_FILE_SIZE)

    return (
        Scenario(name="no-context", title="NO BUILD CONTEXT", context_path="no-build-ctx"),
        Scenario(
            name="many-files",
            title="20000 FILES; 100Kb EACH",
            context_path=many_files.directory,
            fixture=many_files,
        ),
        Scenario(
            name="large-file",
            title="1 FILE; 2Gb",
            context_path=large_file.directory,
            fixture=large_file,
        ),
        Scenario(name="self-context", title="THIS REPO AS BUILD CONTEXT", context_path="."),
    )


def select_scenarios(
    scenarios: Sequence[Scenario], names: Sequence[str] | None
) -> tuple[Scenario, ...]:
    """Filter scenarios by name while keeping the fixed run order."""

    if not names:
        return tuple(scenarios)
    known = {scenario.name for scenario in scenarios}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise ValueError(f"Unknown scenario(s): {', '.join(unknown)}")
    wanted = set(names)
    return tuple(scenario for scenario in scenarios if scenario.name in wanted)
