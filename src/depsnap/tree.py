"""Build the ProjectNode tree mirroring the host's project hierarchy."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from depsnap.host import HostProject
from depsnap.model import DependencySet, ProjectNode
from depsnap.repositories import collect_repositories
from depsnap.resolvers.dependencies import DependencyResolver, select_configurations

logger = logging.getLogger(__name__)


def relative_dir(path: Path, start: Path) -> str:
    """Return *path* relative to *start*, or "" when they are the same directory."""
    rel = os.path.relpath(path, start)
    return "" if rel == os.curdir else Path(rel).as_posix()


def buildscript_dependencies(
    project: HostProject, plugins: DependencySet, ignore_local: bool
) -> DependencySet:
    """Build-script artifacts in graph order, without the plugin-attributed ones."""
    scope = project.buildscript
    configurations = [c for c in scope.configurations if c.can_be_resolved]
    artifacts = DependencyResolver(scope).resolve_all(configurations)

    plugin_artifacts = set(plugins.artifacts)
    kept = dict.fromkeys(a for a in artifacts if a not in plugin_artifacts)
    return DependencySet(
        repositories=collect_repositories(scope.repositories, ignore_local),
        artifacts=tuple(kept),
    )


def project_dependencies(
    project: HostProject, explicit_configurations: Sequence[str], ignore_local: bool
) -> DependencySet:
    """Main artifacts of the selected configurations, sorted and distinct."""
    configurations = select_configurations(project.configurations, explicit_configurations)
    artifacts = DependencyResolver(project).resolve_all(configurations)
    return DependencySet(
        repositories=collect_repositories(project.repositories, ignore_local),
        artifacts=tuple(sorted(set(artifacts))),
    )


def build_project(
    project: HostProject,
    explicit_configurations: Sequence[str],
    plugins: DependencySet,
    ignore_local: bool,
    root_dir: Path | None = None,
) -> ProjectNode:
    """Recursively snapshot *project* and its children."""
    if root_dir is None:
        root_dir = project.root_project.project_dir

    buildscript = buildscript_dependencies(project, plugins, ignore_local)
    main = project_dependencies(project, explicit_configurations, ignore_local)
    logger.debug(
        "Project %s: %d buildscript artifacts, %d project artifacts",
        project.path,
        len(buildscript.artifacts),
        len(main.artifacts),
    )

    children = tuple(
        build_project(child, explicit_configurations, plugins, ignore_local, root_dir)
        for child in project.child_projects.values()
    )

    return ProjectNode(
        name=project.name,
        version=str(project.version),
        path=project.path,
        project_dir=relative_dir(project.project_dir, root_dir),
        buildscript_dependencies=buildscript,
        project_dependencies=main,
        children=children,
    )
