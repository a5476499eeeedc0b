"""Host protocols: the read-only view of the build orchestrator.

Every resolution algorithm in depsnap talks to the host only through these
interfaces, so they can be satisfied by a thin adapter over a live build tool
or by the static snapshot adapter in :mod:`depsnap.hosts.snapshot`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Protocol

from depsnap.model import ArtifactCoordinate, ModuleVersion


class HostRepository(Protocol):
    name: str
    kind: str  # "maven", "ivy", "flatDir", ...
    url: str | None
    artifact_urls: Sequence[str]


class HostComponent(Protocol):
    """A node of a resolved dependency graph."""

    id: ModuleVersion
    dependencies: Sequence[ModuleVersion]


class HostConfiguration(Protocol):
    name: str
    can_be_resolved: bool

    def resolved_artifacts(self) -> Sequence[ArtifactCoordinate]:
        """Force resolution and return artifacts in dependency-graph order.

        Raises if the configuration cannot be resolved.
        """
        ...

    def resolved_components(self) -> Sequence[HostComponent]:
        """Return the resolved components in dependency-graph order."""
        ...


class HostScope(Protocol):
    """Configurations, repositories and descriptor lookup of one script scope."""

    @property
    def configurations(self) -> Sequence[HostConfiguration]: ...

    @property
    def repositories(self) -> Sequence[HostRepository]: ...

    def resolve_descriptor(self, module: ModuleVersion) -> ArtifactCoordinate | None:
        """Look up the metadata descriptor of *module*, or None if unpublished."""
        ...


class HostProject(HostScope, Protocol):
    name: str
    version: str
    path: str
    project_dir: Path

    @property
    def buildscript(self) -> HostScope: ...

    @property
    def child_projects(self) -> Mapping[str, HostProject]: ...

    @property
    def root_project(self) -> HostProject: ...

    @property
    def gradle(self) -> HostBuild: ...


class HostWrapper(Protocol):
    gradle_version: str
    distribution_type: str
    distribution_url: str
    distribution_sha256_sum: str | None


class HostIncludedBuild(Protocol):
    name: str
    project_dir: Path


class HostPluginRequest(Protocol):
    id: str
    version: str | None
    module: str | None


class HostSettings(Protocol):
    @property
    def plugin_requests(self) -> Sequence[HostPluginRequest]: ...


class ModelProvider(Protocol):
    def can_build(self, model_name: str) -> bool: ...

    def build_all(self, model_name: str, project: HostProject) -> object: ...


class HostModelRegistry(Protocol):
    def register(self, provider: ModelProvider) -> None: ...


class HostBuild(Protocol):
    """The running build invocation."""

    gradle_version: str
    gradle_home_dir: Path | None

    @property
    def wrapper(self) -> HostWrapper: ...

    @property
    def included_builds(self) -> Sequence[HostIncludedBuild]: ...

    @property
    def model_registry(self) -> HostModelRegistry: ...

    def plugin_classpath(self) -> HostScope:
        """Return the root build's plugin classpath resolution scope.

        Only available once projects are configured.
        """
        ...

    def settings_evaluated(self, action: Callable[[HostSettings], None]) -> None: ...

    def projects_loaded(self, action: Callable[[HostProject], None]) -> None: ...
