"""Orchestrator: load snapshot → apply plugin → evaluate → export."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from depsnap.config import load_config
from depsnap.export import dump_json
from depsnap.hosts.snapshot import load_snapshot
from depsnap.model import MODEL_NAME, BuildModel
from depsnap.plugin import DepsnapPlugin

logger = logging.getLogger(__name__)


def extract(
    snapshot_path: Path, properties: Mapping[str, str] | None = None
) -> BuildModel:
    """Replay the build described by *snapshot_path* and return its model."""
    snapshot_path = snapshot_path.resolve()
    build = load_snapshot(snapshot_path)

    config = load_config(build.root_project.project_dir, properties)
    DepsnapPlugin(config=config).apply(build)
    build.evaluate()

    model = build.build_model(MODEL_NAME)
    logger.debug("Extracted model for %s", model.root_project.name)
    return model


def run(
    snapshot_path: Path,
    *,
    output: Path | None = None,
    properties: Mapping[str, str] | None = None,
) -> BuildModel:
    """Run the full extraction and write the model as JSON."""
    model = extract(snapshot_path, properties)
    dump_json(model, output)
    if output is not None:
        logger.info("Wrote %s", output)
    return model
