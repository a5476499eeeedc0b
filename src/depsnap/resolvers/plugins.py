"""Capture plugin requests early and attribute classpath artifacts to them later.

Plugin requests are only observable while settings are evaluated, long before
any configuration can be resolved.  The two halves are kept as separate stages:
:func:`capture_plugin_requests` turns the settings view into a plain tuple,
and :class:`PluginResolver` correlates that tuple with the root build's plugin
classpath once it can be resolved.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from depsnap.host import HostScope, HostSettings
from depsnap.model import DependencySet, ModuleVersion, PluginId, PluginRequest
from depsnap.repositories import collect_repositories
from depsnap.resolvers.dependencies import DependencyResolver

logger = logging.getLogger(__name__)

# Plugins in the build tool's own namespace ship with the distribution.
RESERVED_NAMESPACE = "org.gradle"

MARKER_SUFFIX = ".gradle.plugin"


def is_third_party(plugin_id: PluginId) -> bool:
    return plugin_id.namespace is not None and plugin_id.namespace != RESERVED_NAMESPACE


def capture_plugin_requests(settings: HostSettings) -> tuple[PluginRequest, ...]:
    """Return the third-party plugin requests declared in *settings*."""
    captured: dict[PluginRequest, None] = {}
    for requested in settings.plugin_requests:
        plugin_id = PluginId.parse(requested.id)
        if not is_third_party(plugin_id):
            continue
        captured.setdefault(PluginRequest(plugin_id, requested.version, requested.module))
    logger.debug("Captured %d plugin requests", len(captured))
    return tuple(captured)


def _candidate_modules(request: PluginRequest) -> list[tuple[str, str]]:
    """(group, name) pairs a request may have been resolved as."""
    plugin_id = request.id.id
    candidates = [(plugin_id, plugin_id + MARKER_SUFFIX)]
    if request.module:
        group, _, name = request.module.partition(":")
        candidates.append((group, name))
    if request.id.namespace is not None:
        candidates.append((request.id.namespace, request.id.name))
    return candidates


class PluginResolver:
    """Attribute plugin classpath artifacts to explicit plugin requests."""

    def __init__(self, requests: Iterable[PluginRequest]):
        self.requests = tuple(requests)

    def _requested_versions(self) -> dict[tuple[str, str], set[str | None]]:
        versions: dict[tuple[str, str], set[str | None]] = {}
        for request in self.requests:
            for key in _candidate_modules(request):
                versions.setdefault(key, set()).add(request.version)
        return versions

    def _is_requested(
        self, module: ModuleVersion, versions: dict[tuple[str, str], set[str | None]]
    ) -> bool:
        wanted = versions.get((module.group, module.name))
        if wanted is None:
            return False
        # A request without a version accepts whatever the host resolved.
        return None in wanted or module.version in wanted

    def resolve(self, classpath: HostScope, ignore_local: bool) -> DependencySet:
        """Return the plugin-attributable artifacts of *classpath*.

        A request that never made it onto the classpath is simply absent.
        """
        repositories = collect_repositories(classpath.repositories, ignore_local)
        if not self.requests:
            return DependencySet(repositories=repositories)

        configurations = [c for c in classpath.configurations if c.can_be_resolved]
        resolver = DependencyResolver(classpath)
        artifacts = resolver.resolve_all(configurations)

        graph: dict[ModuleVersion, list[ModuleVersion]] = {}
        for configuration in configurations:
            for component in configuration.resolved_components():
                graph.setdefault(component.id, []).extend(component.dependencies)

        versions = self._requested_versions()
        roots = [m for m in graph if self._is_requested(m, versions)]

        reachable: set[ModuleVersion] = set()

        def collect_transitive(module: ModuleVersion) -> None:
            if module in reachable:
                return
            reachable.add(module)
            for dep in graph.get(module, []):
                collect_transitive(dep)

        for root in roots:
            collect_transitive(root)

        attributed = [a for a in artifacts if a.module in reachable]
        plugin_artifacts = tuple(dict.fromkeys(attributed))

        logger.debug(
            "Plugins: %d requested, %d matched, %d artifacts",
            len(self.requests),
            len(roots),
            len(plugin_artifacts),
        )
        return DependencySet(repositories=repositories, artifacts=plugin_artifacts)
