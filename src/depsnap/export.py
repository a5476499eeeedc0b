"""Convert a BuildModel into nested plain data for an external lockfile tool."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from depsnap.model import (
    ArtifactCoordinate,
    BuildModel,
    DependencySet,
    DistributionInfo,
    IncludedBuildRef,
    ProjectNode,
)


def _artifact_to_dict(artifact: ArtifactCoordinate) -> dict:
    d: dict = {
        "groupId": artifact.group,
        "artifactId": artifact.name,
        "version": artifact.version,
        "classifier": artifact.classifier,
        "extension": artifact.extension,
    }
    if artifact.path is not None:
        d["path"] = artifact.path
    return d


def _dependencies_to_dict(deps: DependencySet) -> dict:
    return {
        "repositories": {"maven": [{"urls": list(r.urls)} for r in deps.repositories]},
        "artifacts": [_artifact_to_dict(a) for a in deps.artifacts],
    }


def _project_to_dict(project: ProjectNode) -> dict:
    return {
        "name": project.name,
        "version": project.version,
        "path": project.path,
        "projectDir": project.project_dir,
        "buildscriptDependencies": _dependencies_to_dict(project.buildscript_dependencies),
        "projectDependencies": _dependencies_to_dict(project.project_dependencies),
        "children": [_project_to_dict(c) for c in project.children],
    }


def _gradle_to_dict(gradle: DistributionInfo) -> dict:
    return {
        "version": gradle.version,
        "type": gradle.type,
        "url": gradle.url,
        "sha256": gradle.sha256,
        "nativeVersion": gradle.native_version,
    }


def _included_build_to_dict(build: IncludedBuildRef) -> dict:
    return {"name": build.name, "projectDir": build.project_dir}


def build_model_to_dict(model: BuildModel) -> dict:
    return {
        "gradle": _gradle_to_dict(model.gradle),
        "pluginDependencies": _dependencies_to_dict(model.plugin_dependencies),
        "rootProject": _project_to_dict(model.root_project),
        "includedBuilds": [_included_build_to_dict(b) for b in model.included_builds],
    }


def dump_json(model: BuildModel, output_path: Path | None = None) -> None:
    """Write *model* as indented JSON to *output_path*, or stdout."""
    text = json.dumps(build_model_to_dict(model), indent=2) + "\n"
    if output_path is None:
        sys.stdout.write(text)
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text)
