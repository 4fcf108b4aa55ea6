from __future__ import annotations

import argparse
import json
import logging
import os
import shlex
import sys
from pathlib import Path

from .charts import render_comparison_chart
from .collector import results_dataframe, summarise, write_results_csv
from .config import (
    DEFAULT_CLIENT_BINARY,
    DEFAULT_CLIENT_BUILD_COMMAND,
    DEFAULT_ENGINE,
    BenchmarkConfig,
    default_scenarios,
    select_scenarios,
)
from .fixtures import FixtureCreationError
from .runner import BenchmarkRunner, BuildSetupError, MeasurementResult

LOGGER = logging.getLogger("buildbench")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare image build times of the engine CLI and a library client"
    )
    parser.add_argument(
        "--engine",
        default=os.environ.get("BUILDBENCH_ENGINE", DEFAULT_ENGINE),
        help="Container engine CLI invoked as '<engine> build <context>'",
    )
    parser.add_argument(
        "--client-binary",
        default=os.environ.get("BUILDBENCH_CLIENT_BINARY", DEFAULT_CLIENT_BINARY),
        help="Library client invoked as '<binary> build <context>' "
        "(use 'buildbench-client' for the bundled Docker SDK client)",
    )
    parser.add_argument(
        "--client-build-command",
        default=os.environ.get(
            "BUILDBENCH_CLIENT_BUILD_COMMAND", shlex.join(DEFAULT_CLIENT_BUILD_COMMAND)
        ),
        help="Command compiling the library client before the run; empty to skip",
    )
    parser.add_argument(
        "--workdir",
        default=os.environ.get("BUILDBENCH_WORKDIR", "."),
        help="Directory holding the build contexts and fixtures",
    )
    parser.add_argument(
        "--scenario",
        action="append",
        choices=[scenario.name for scenario in default_scenarios()],
        help="Run only the named scenario (repeatable); order stays fixed",
    )
    parser.add_argument(
        "--output-dir",
        default=os.environ.get("BUILDBENCH_OUTPUT_DIR"),
        help="Directory to store benchmark artefacts (CSV, chart and manifest)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the planned scenarios without executing them",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BUILDBENCH_LOG_LEVEL", "INFO"),
        help="Logging level",
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    return BenchmarkConfig(
        engine_command=args.engine,
        library_client_binary=args.client_binary,
        client_build_command=tuple(shlex.split(args.client_build_command or "")),
        scenarios=select_scenarios(default_scenarios(), args.scenario),
        working_directory=Path(args.workdir).resolve(),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    config = build_config(args)
    LOGGER.info("Working directory: %s", config.working_directory)
    LOGGER.info("Engine: %s", config.engine_command)
    LOGGER.info("Library client: %s", config.library_client_binary)

    if args.dry_run:
        _print_plan(config)
        return 0

    runner = BenchmarkRunner(config)
    try:
        results = runner.run()
    except (BuildSetupError, FixtureCreationError) as exc:
        LOGGER.error("Setup failed: %s", exc)
        print(f"setup failed: {exc}", file=sys.stderr)
        return 1

    if runner.failures:
        LOGGER.warning("%d build(s) exited non-zero", len(runner.failures))

    if args.output_dir:
        _write_artefacts(results, Path(args.output_dir))
    return 0


def _write_artefacts(results: list[MeasurementResult], output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = write_results_csv(results, output_dir)
    LOGGER.info("Saved %d measurement(s) to %s", len(results), csv_path)

    df = results_dataframe(results)
    chart_path = render_comparison_chart(df, output_dir)

    manifest = {
        "csv": str(csv_path),
        "chart": str(chart_path) if chart_path else None,
        "scenarios": summarise(df),
    }
    manifest_path = output_dir / "benchmark_manifest.json"
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)
    LOGGER.info("Benchmark manifest written to %s", manifest_path)


def _print_plan(config: BenchmarkConfig) -> None:
    if config.client_build_command:
        print(f"Setup: {shlex.join(config.client_build_command)}")
    for scenario in config.scenarios:
        fixture = scenario.fixture
        if fixture is None:
            fixture_text = "none"
        else:
            fixture_text = f"{fixture.file_count} x {fixture.file_size} bytes in {fixture.directory}/"
        print(f"Scenario: {scenario.title} ({scenario.name})")
        print(f"  - context={scenario.context_path} fixture={fixture_text}")
        print(f"  - {config.engine_command} build {scenario.context_path}")
        print(f"  - {config.library_client_binary} build {scenario.context_path}")


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
