from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .config import FixtureSpec, Scenario

LOGGER = logging.getLogger("buildbench.fixtures")


class FixtureCreationError(Exception):
    """Raised when a build-context fixture cannot be allocated on disk."""


def ensure_fixture(spec: FixtureSpec, root: Path) -> bool:
    """Create the fixture under ``root`` unless its sentinel file exists.

    Files are allocated sparse: only their size is set. Files of an earlier,
    interrupted run that already have the target size are kept; missing or
    wrong-sized ones are (re)sized. Returns ``True`` when anything was written.
    """
    directory = root / spec.directory
    if (directory / spec.sentinel).exists():
        LOGGER.debug("Fixture %s already present, skipping", directory)
        return False

    LOGGER.info(
        "Creating fixture %s (%d file(s) of %d bytes)",
        directory,
        spec.file_count,
        spec.file_size,
    )
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FixtureCreationError(f"failed to create directory {directory}: {exc}") from exc

    created = 0
    for name in spec.file_names():
        path = directory / name
        if _allocate_sparse(path, spec.file_size):
            created += 1
    LOGGER.info("Fixture %s ready (%d file(s) allocated)", directory, created)
    return True


def ensure_fixtures(scenarios: Iterable[Scenario], root: Path) -> list[str]:
    created: list[str] = []
    for scenario in scenarios:
        if scenario.fixture is None:
            continue
        if ensure_fixture(scenario.fixture, root):
            created.append(scenario.fixture.directory)
    return created


def _allocate_sparse(path: Path, size: int) -> bool:
    try:
        if path.is_file() and path.stat().st_size == size:
            return False
        with open(path, "ab") as fh:
            fh.truncate(size)
    except OSError as exc:
        raise FixtureCreationError(f"failed to allocate {path} ({size} bytes): {exc}") from exc
    return True


__all__ = ["FixtureCreationError", "ensure_fixture", "ensure_fixtures"]
