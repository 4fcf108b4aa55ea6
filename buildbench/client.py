"""Library-based build client.

Builds an image from a context directory through the Docker SDK for Python,
the in-process counterpart of ``docker build``. Build output is streamed to
stdout so the benchmark can discard it the same way for both tools.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Iterable

import docker
from docker.errors import DockerException

LOGGER = logging.getLogger("buildbench.client")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="buildbench-client",
        description="Build images through the Docker SDK",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    build = subcommands.add_parser("build", help="Build an image from a context directory")
    build.add_argument("path", help="Build context directory")
    build.add_argument("--tag", "-t", default=None, help="Name and optionally a tag for the image")
    build.add_argument(
        "--dockerfile",
        "-f",
        default=None,
        help="Dockerfile name relative to the build context",
    )
    build.add_argument(
        "--log-level",
        default=os.environ.get("BUILDBENCH_LOG_LEVEL", "WARNING"),
        help="Logging level",
    )
    return parser.parse_args(argv)


def build_image(
    path: Path,
    tag: str | None = None,
    dockerfile: str | None = None,
    client: docker.DockerClient | None = None,
) -> int:
    client = client or docker.from_env()
    LOGGER.info("Building %s via Docker API", path)
    stream = client.api.build(
        path=str(path),
        tag=tag,
        dockerfile=dockerfile,
        rm=True,
        decode=True,
    )
    return _consume_build_stream(stream)


def _consume_build_stream(stream: Iterable[dict[str, Any]]) -> int:
    exit_code = 0
    for chunk in stream:
        if "stream" in chunk:
            sys.stdout.write(chunk["stream"])
        elif "status" in chunk:
            progress = chunk.get("progress")
            line = chunk["status"] if not progress else f"{chunk['status']} {progress}"
            sys.stdout.write(line + "\n")
        if "error" in chunk:
            detail = chunk.get("errorDetail") or {}
            LOGGER.error("Build failed: %s", detail.get("message") or chunk["error"])
            exit_code = 1
    sys.stdout.flush()
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return build_image(Path(args.path), tag=args.tag, dockerfile=args.dockerfile)
    except DockerException as exc:
        LOGGER.error("Docker API error: %s", exc)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
