"""Immutable data model for an extracted build dependency snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

# Model name the provider answers to when the host asks for a build model.
MODEL_NAME = "depsnap.Build"

DESCRIPTOR_EXTENSION = "pom"


@dataclass(frozen=True)
class ModuleVersion:
    """Identity of a resolved component."""

    group: str
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"


@dataclass(frozen=True)
class ArtifactCoordinate:
    """A single resolved file: a binary or a metadata descriptor.

    Two coordinates are equal when their coordinate strings are equal; the
    download ``path`` is carried along but never compared.
    """

    group: str
    name: str
    version: str
    classifier: str = ""
    extension: str = "jar"
    path: str | None = field(default=None, compare=False)

    def __str__(self) -> str:
        coordinate = f"{self.group}:{self.name}:{self.version}"
        if self.classifier:
            coordinate += f":{self.classifier}"
        return f"{coordinate}@{self.extension}"

    def __lt__(self, other: ArtifactCoordinate) -> bool:
        if not isinstance(other, ArtifactCoordinate):
            return NotImplemented
        return str(self) < str(other)

    @property
    def kind(self) -> str:
        return "descriptor" if self.extension == DESCRIPTOR_EXTENSION else "binary"

    @property
    def module(self) -> ModuleVersion:
        return ModuleVersion(self.group, self.name, self.version)


@dataclass(frozen=True)
class RepositoryDescriptor:
    """A remote repository: primary URL first, then artifact-lookup URLs."""

    urls: tuple[str, ...]


@dataclass(frozen=True)
class DependencySet:
    """Repositories used for resolution plus the artifacts they produced."""

    repositories: tuple[RepositoryDescriptor, ...] = ()
    artifacts: tuple[ArtifactCoordinate, ...] = ()


@dataclass(frozen=True)
class PluginId:
    namespace: str | None
    name: str

    @classmethod
    def parse(cls, plugin_id: str) -> PluginId:
        namespace, _, name = plugin_id.rpartition(".")
        return cls(namespace or None, name)

    @property
    def id(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}.{self.name}"

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class PluginRequest:
    """A third-party plugin request captured during settings evaluation."""

    id: PluginId
    version: str | None
    module: str | None = None  # "group:name" override from the resolution strategy


@dataclass(frozen=True)
class ProjectNode:
    """One project of the build, with its own dependency sets and children."""

    name: str
    version: str
    path: str
    project_dir: str  # relative to the root project directory
    buildscript_dependencies: DependencySet
    project_dependencies: DependencySet
    children: tuple[ProjectNode, ...] = ()


@dataclass(frozen=True)
class IncludedBuildRef:
    name: str
    project_dir: str


@dataclass(frozen=True)
class DistributionInfo:
    """The build tool distribution pinned by the wrapper."""

    version: str
    type: str  # "bin" or "all"
    url: str
    sha256: str
    native_version: str


@dataclass(frozen=True)
class BuildModel:
    """Complete dependency snapshot returned to the host."""

    gradle: DistributionInfo
    plugin_dependencies: DependencySet
    root_project: ProjectNode
    included_builds: tuple[IncludedBuildRef, ...] = ()
