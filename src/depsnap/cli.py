"""Command-line interface for depsnap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from depsnap.config import (
    CHECKSUM_RETRIES_PROPERTY,
    CHECKSUM_TIMEOUT_PROPERTY,
    CONFIGURATIONS_PROPERTY,
    IGNORE_LOCAL_PROPERTY,
)
from depsnap.errors import DepsnapError
from depsnap.pipeline import run

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="depsnap",
        description="Extract the resolved dependency surface of a build for lockfile generation.",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="YAML or JSON snapshot of the configured build",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output JSON file path (default: stdout)",
    )
    parser.add_argument(
        "-c",
        "--configurations",
        default=None,
        help="Comma-separated configurations to resolve (default: all resolvable)",
    )
    parser.add_argument(
        "--ignore-maven-local",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Leave the local Maven repository out of the results "
        "(--no-ignore-maven-local overrides project config)",
    )
    parser.add_argument(
        "--checksum-timeout",
        default=None,
        help="Seconds to wait when fetching the distribution checksum",
    )
    parser.add_argument(
        "--checksum-retries",
        default=None,
        help="Extra attempts when fetching the distribution checksum",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("depsnap").setLevel(logging.DEBUG)

    properties: dict[str, str] = {}
    if args.configurations is not None:
        properties[CONFIGURATIONS_PROPERTY] = args.configurations
    if args.ignore_maven_local is not None:
        properties[IGNORE_LOCAL_PROPERTY] = "true" if args.ignore_maven_local else "false"
    if args.checksum_timeout is not None:
        properties[CHECKSUM_TIMEOUT_PROPERTY] = args.checksum_timeout
    if args.checksum_retries is not None:
        properties[CHECKSUM_RETRIES_PROPERTY] = args.checksum_retries

    try:
        run(args.snapshot, output=args.output, properties=properties)
    except DepsnapError as e:
        logger.error("depsnap: %s", e)
        sys.exit(1)
