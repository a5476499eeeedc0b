"""Resolve configurations into binary and descriptor artifact coordinates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from depsnap.host import HostConfiguration, HostScope
from depsnap.model import ArtifactCoordinate

logger = logging.getLogger(__name__)


def select_configurations(
    configurations: Iterable[HostConfiguration], explicit: Sequence[str]
) -> list[HostConfiguration]:
    """Pick the configurations to resolve.

    An explicit name list wins over the host's resolvability flag; without one,
    every resolvable configuration is selected.
    """
    if explicit:
        wanted = set(explicit)
        return [c for c in configurations if c.name in wanted]
    return [c for c in configurations if c.can_be_resolved]


class DependencyResolver:
    """Harvest already-resolved artifacts from the configurations of one scope."""

    def __init__(self, scope: HostScope):
        self.scope = scope

    def resolve(self, configuration: HostConfiguration) -> list[ArtifactCoordinate]:
        """Binary artifacts of *configuration*, in dependency-graph order."""
        artifacts = list(configuration.resolved_artifacts())
        logger.debug("%s: %d artifacts", configuration.name, len(artifacts))
        return artifacts

    def resolve_descriptors(
        self, configuration: HostConfiguration
    ) -> list[ArtifactCoordinate]:
        """Metadata descriptors of every component resolved by *configuration*."""
        descriptors: list[ArtifactCoordinate] = []
        for component in configuration.resolved_components():
            descriptor = self.scope.resolve_descriptor(component.id)
            if descriptor is None:
                logger.debug("%s: no descriptor published for %s", configuration.name, component.id)
                continue
            descriptors.append(descriptor)
        return descriptors

    def resolve_all(
        self, configurations: Iterable[HostConfiguration]
    ) -> list[ArtifactCoordinate]:
        """Binaries then descriptors, configuration by configuration (not deduplicated)."""
        artifacts: list[ArtifactCoordinate] = []
        for configuration in configurations:
            artifacts.extend(self.resolve(configuration))
            artifacts.extend(self.resolve_descriptors(configuration))
        return artifacts
