"""A static host built from a YAML/JSON description of a configured build.

The document mirrors what a live build tool would expose once configuration
has finished::

    gradle:
      version: "6.8"
      home: dist/gradle-6.8
      wrapper:
        version: "6.8"
        distributionType: BIN
        distributionUrl: https://services.gradle.org/distributions/gradle-6.8-bin.zip
        sha256: null
    settings:
      plugins:
        - {id: com.example.foo, version: "1.0"}
    pluginClasspath: {repositories: [...], configurations: [...]}
    includedBuilds:
      - {name: tools, dir: ../tools}
    project:
      name: root
      version: "1.0"
      repositories:
        - {name: central, kind: maven, url: https://repo.maven.apache.org/maven2/}
      configurations:
        - name: runtimeClasspath
          components:
            - id: org.example:lib:1.0
              dependencies: [org.example:core:1.0]
      buildscript: {repositories: [...], configurations: [...]}
      children: [...]

Relative directories are resolved against the document's own directory.
A component may carry ``error`` to make its configuration unresolvable, and
``descriptor: null`` when it publishes no metadata descriptor.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from depsnap.errors import ConfigurationResolutionError, SnapshotError
from depsnap.model import DESCRIPTOR_EXTENSION, ArtifactCoordinate, ModuleVersion

logger = logging.getLogger(__name__)


def _parse_module(notation: str) -> ModuleVersion:
    parts = notation.split(":")
    if len(parts) != 3 or not all(parts):
        raise SnapshotError(f"Expected group:name:version, got {notation!r}")
    return ModuleVersion(*parts)


def _mapping(data: object, what: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SnapshotError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _list(data: object, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise SnapshotError(f"{what} must be a list, got {type(data).__name__}")
    return data


def _version(data: object, what: str) -> str:
    # A float has already lost trailing zeros (1.10 -> 1.1).
    if isinstance(data, str):
        return data
    if isinstance(data, int) and not isinstance(data, bool):
        return str(data)
    raise SnapshotError(f"{what} must be a quoted string, got {data!r}")


class _SnapshotLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric scalars as written, so ``1.10`` stays "1.10"."""


_SnapshotLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag not in ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


# ---------------------------------------------------------------------------
# Dependency resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SnapshotRepository:
    name: str
    kind: str
    url: str | None
    artifact_urls: tuple[str, ...] = ()


@dataclass(frozen=True)
class SnapshotComponent:
    id: ModuleVersion
    dependencies: tuple[ModuleVersion, ...] = ()
    artifacts: tuple[ArtifactCoordinate, ...] = ()
    descriptor: ArtifactCoordinate | None = None
    error: str | None = None


@dataclass
class SnapshotConfiguration:
    name: str
    can_be_resolved: bool = True
    components: list[SnapshotComponent] = field(default_factory=list)
    error: str | None = None

    def _check(self) -> None:
        if self.error:
            raise ConfigurationResolutionError(self.name, self.error)
        for component in self.components:
            if component.error:
                raise ConfigurationResolutionError(
                    self.name, f"{component.id}: {component.error}"
                )

    def resolved_artifacts(self) -> list[ArtifactCoordinate]:
        self._check()
        return [a for c in self.components for a in c.artifacts]

    def resolved_components(self) -> list[SnapshotComponent]:
        self._check()
        return list(self.components)


@dataclass(eq=False)
class SnapshotScope:
    configurations: list[SnapshotConfiguration] = field(default_factory=list)
    repositories: list[SnapshotRepository] = field(default_factory=list)

    def resolve_descriptor(self, module: ModuleVersion) -> ArtifactCoordinate | None:
        for configuration in self.configurations:
            for component in configuration.components:
                if component.id == module:
                    return component.descriptor
        return None


def _load_artifact(module: ModuleVersion, data: dict) -> ArtifactCoordinate:
    return ArtifactCoordinate(
        group=module.group,
        name=module.name,
        version=module.version,
        classifier=str(data.get("classifier") or ""),
        extension=str(data.get("extension") or "jar"),
        path=data.get("path"),
    )


def _load_component(data: dict) -> SnapshotComponent:
    data = _mapping(data, "component")
    if "id" not in data:
        raise SnapshotError("component is missing 'id'")
    module = _parse_module(str(data["id"]))

    if "artifacts" in data:
        artifacts = tuple(
            _load_artifact(module, _mapping(a, f"artifact of {module}"))
            for a in _list(data["artifacts"], f"artifacts of {module}")
        )
    else:
        artifacts = (_load_artifact(module, {}),)

    # Absent key: a conventional descriptor exists; explicit null: none published.
    if "descriptor" in data and data["descriptor"] is None:
        descriptor = None
    else:
        descriptor_data = _mapping(data.get("descriptor"), f"descriptor of {module}")
        descriptor = _load_artifact(
            module, {"extension": DESCRIPTOR_EXTENSION, **descriptor_data}
        )

    return SnapshotComponent(
        id=module,
        dependencies=tuple(
            _parse_module(str(d)) for d in _list(data.get("dependencies"), "dependencies")
        ),
        artifacts=artifacts,
        descriptor=descriptor,
        error=data.get("error"),
    )


def _load_configuration(data: dict) -> SnapshotConfiguration:
    data = _mapping(data, "configuration")
    if "name" not in data:
        raise SnapshotError("configuration is missing 'name'")
    return SnapshotConfiguration(
        name=str(data["name"]),
        can_be_resolved=bool(data.get("resolvable", True)),
        components=[_load_component(c) for c in _list(data.get("components"), "components")],
        error=data.get("error"),
    )


def _load_repository(data: dict) -> SnapshotRepository:
    data = _mapping(data, "repository")
    return SnapshotRepository(
        name=str(data.get("name", "")),
        kind=str(data.get("kind", "maven")),
        url=data.get("url"),
        artifact_urls=tuple(str(u) for u in _list(data.get("artifactUrls"), "artifactUrls")),
    )


def scope_from_dict(data: object, what: str = "scope") -> SnapshotScope:
    """Build a scope from its configurations and repositories."""
    data = _mapping(data, what)
    return SnapshotScope(
        configurations=[
            _load_configuration(c) for c in _list(data.get("configurations"), "configurations")
        ],
        repositories=[
            _load_repository(r) for r in _list(data.get("repositories"), "repositories")
        ],
    )


# ---------------------------------------------------------------------------
# Project hierarchy
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class SnapshotProject(SnapshotScope):
    name: str = ""
    version: str = "unspecified"
    path: str = ":"
    project_dir: Path = Path(".")
    buildscript: SnapshotScope = field(default_factory=SnapshotScope)
    child_projects: dict[str, SnapshotProject] = field(default_factory=dict)
    parent: SnapshotProject | None = field(default=None, repr=False)
    build: SnapshotBuild | None = field(default=None, repr=False)

    @property
    def root_project(self) -> SnapshotProject:
        project = self
        while project.parent is not None:
            project = project.parent
        return project

    @property
    def gradle(self) -> SnapshotBuild:
        build = self.root_project.build
        if build is None:
            raise SnapshotError(f"Project {self.path} is not attached to a build")
        return build


def _child_path(parent_path: str, name: str) -> str:
    return f":{name}" if parent_path == ":" else f"{parent_path}:{name}"


def _load_project(
    data: dict, base_dir: Path, parent: SnapshotProject | None
) -> SnapshotProject:
    data = _mapping(data, "project")
    if "name" not in data:
        raise SnapshotError("project is missing 'name'")
    name = str(data["name"])

    if parent is None:
        path = ":"
        default_dir = base_dir
    else:
        path = _child_path(parent.path, name)
        default_dir = parent.project_dir / name
    project_dir = (base_dir / data["dir"]).resolve() if "dir" in data else default_dir

    scope = scope_from_dict(data, f"project {path}")
    project = SnapshotProject(
        configurations=scope.configurations,
        repositories=scope.repositories,
        name=name,
        version=_version(data.get("version", "unspecified"), f"version of {path}"),
        path=path,
        project_dir=project_dir,
        buildscript=scope_from_dict(data.get("buildscript"), f"buildscript of {path}"),
        parent=parent,
    )
    for child_data in _list(data.get("children"), f"children of {path}"):
        child = _load_project(child_data, base_dir, project)
        if child.name in project.child_projects:
            raise SnapshotError(f"Duplicate child project {child.path}")
        project.child_projects[child.name] = child
    return project


# ---------------------------------------------------------------------------
# Build and lifecycle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SnapshotWrapper:
    gradle_version: str
    distribution_type: str
    distribution_url: str
    distribution_sha256_sum: str | None = None


@dataclass(frozen=True)
class SnapshotIncludedBuild:
    name: str
    project_dir: Path


@dataclass(frozen=True)
class SnapshotPluginRequest:
    id: str
    version: str | None = None
    module: str | None = None


@dataclass(frozen=True)
class SnapshotSettings:
    plugin_requests: tuple[SnapshotPluginRequest, ...] = ()


class ModelRegistry:
    """Holds registered model providers and dispatches model requests."""

    def __init__(self):
        self.providers: list = []

    def register(self, provider) -> None:
        self.providers.append(provider)

    def build(self, model_name: str, project: SnapshotProject) -> object:
        for provider in self.providers:
            if provider.can_build(model_name):
                return provider.build_all(model_name, project)
        raise SnapshotError(f"No provider registered for model '{model_name}'")


class SnapshotBuild:
    """A configured build replayed from a snapshot document."""

    def __init__(
        self,
        root_project: SnapshotProject,
        wrapper: SnapshotWrapper,
        gradle_version: str,
        gradle_home_dir: Path | None = None,
        settings: SnapshotSettings | None = None,
        plugin_classpath: SnapshotScope | None = None,
        included_builds: tuple[SnapshotIncludedBuild, ...] = (),
    ):
        self.root_project = root_project
        self.wrapper = wrapper
        self.gradle_version = gradle_version
        self.gradle_home_dir = gradle_home_dir
        self.settings = settings or SnapshotSettings()
        self.included_builds = included_builds
        self.model_registry = ModelRegistry()
        self._plugin_classpath = plugin_classpath or SnapshotScope()
        self._settings_actions: list[Callable[[SnapshotSettings], None]] = []
        self._projects_actions: list[Callable[[SnapshotProject], None]] = []
        self._evaluated = False
        root_project.build = self

    def settings_evaluated(self, action: Callable[[SnapshotSettings], None]) -> None:
        self._settings_actions.append(action)

    def projects_loaded(self, action: Callable[[SnapshotProject], None]) -> None:
        self._projects_actions.append(action)

    def plugin_classpath(self) -> SnapshotScope:
        if not self._evaluated:
            raise SnapshotError("Plugin classpath is not available before evaluation")
        return self._plugin_classpath

    def evaluate(self) -> None:
        """Fire settings-evaluated, then projects-loaded callbacks."""
        if self._evaluated:
            raise SnapshotError("Build has already been evaluated")
        for action in self._settings_actions:
            action(self.settings)
        self._evaluated = True
        for action in self._projects_actions:
            action(self.root_project)

    def build_model(self, model_name: str) -> object:
        return self.model_registry.build(model_name, self.root_project)


def snapshot_from_dict(data: Mapping, base_dir: Path) -> SnapshotBuild:
    """Build a :class:`SnapshotBuild` from an already-parsed document."""
    data = _mapping(data, "snapshot")
    if "project" not in data:
        raise SnapshotError("snapshot is missing 'project'")

    gradle = _mapping(data.get("gradle"), "gradle")
    wrapper_data = _mapping(gradle.get("wrapper"), "gradle.wrapper")
    version = _version(gradle.get("version", wrapper_data.get("version", "")), "gradle.version")
    if not version:
        raise SnapshotError("gradle.version is required")
    if "distributionUrl" not in wrapper_data:
        raise SnapshotError("gradle.wrapper.distributionUrl is required")

    wrapper = SnapshotWrapper(
        gradle_version=_version(wrapper_data.get("version", version), "gradle.wrapper.version"),
        distribution_type=str(wrapper_data.get("distributionType", "bin")),
        distribution_url=str(wrapper_data["distributionUrl"]),
        distribution_sha256_sum=wrapper_data.get("sha256"),
    )
    home = gradle.get("home")
    gradle_home_dir = (base_dir / home).resolve() if home else None

    settings_data = _mapping(data.get("settings"), "settings")
    plugin_requests = []
    for p in _list(settings_data.get("plugins"), "settings.plugins"):
        p = _mapping(p, "plugin request")
        if "id" not in p:
            raise SnapshotError("plugin request is missing 'id'")
        plugin_version = p.get("version")
        plugin_requests.append(
            SnapshotPluginRequest(
                id=str(p["id"]),
                version=(
                    None
                    if plugin_version is None
                    else _version(plugin_version, f"version of plugin {p['id']}")
                ),
                module=p.get("module"),
            )
        )
    settings = SnapshotSettings(plugin_requests=tuple(plugin_requests))

    included = []
    for b in _list(data.get("includedBuilds"), "includedBuilds"):
        b = _mapping(b, "included build")
        if "name" not in b:
            raise SnapshotError("included build is missing 'name'")
        included.append(
            SnapshotIncludedBuild(
                name=str(b["name"]),
                project_dir=(base_dir / str(b.get("dir", b["name"]))).resolve(),
            )
        )

    root = _load_project(data["project"], base_dir.resolve(), None)
    logger.debug("Loaded snapshot with root project %s", root.name)
    return SnapshotBuild(
        root_project=root,
        wrapper=wrapper,
        gradle_version=version,
        gradle_home_dir=gradle_home_dir,
        settings=settings,
        plugin_classpath=scope_from_dict(data.get("pluginClasspath"), "pluginClasspath"),
        included_builds=tuple(included),
    )


def load_snapshot(path: Path) -> SnapshotBuild:
    """Read a snapshot document (YAML or JSON) from *path*."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f, Loader=_SnapshotLoader)
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Could not read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SnapshotError(f"Could not parse {path}: {e}") from e
    return snapshot_from_dict(data, path.parent)
