"""Assemble the complete BuildModel and expose it as a model provider."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from depsnap.config import HarvestConfig
from depsnap.distribution import distribution_info
from depsnap.host import HostProject
from depsnap.model import (
    MODEL_NAME,
    BuildModel,
    DependencySet,
    IncludedBuildRef,
    PluginRequest,
)
from depsnap.resolvers.plugins import PluginResolver
from depsnap.tree import build_project, relative_dir

logger = logging.getLogger(__name__)


class BuildModelAssembler:
    """Run every resolution stage once and package the results."""

    def __init__(self, config: HarvestConfig, plugin_requests: Iterable[PluginRequest]):
        self.config = config
        self.plugin_requests = tuple(plugin_requests)

    def plugin_dependencies(self, project: HostProject) -> DependencySet:
        resolver = PluginResolver(self.plugin_requests)
        return resolver.resolve(project.gradle.plugin_classpath(), self.config.ignore_local)

    def included_builds(self, project: HostProject) -> tuple[IncludedBuildRef, ...]:
        root_dir = project.root_project.project_dir
        return tuple(
            IncludedBuildRef(name=b.name, project_dir=relative_dir(b.project_dir, root_dir))
            for b in project.gradle.included_builds
        )

    def assemble(self, project: HostProject) -> BuildModel:
        """Build the model for *project*; any failure aborts the whole extraction."""
        plugins = self.plugin_dependencies(project)
        root_project = build_project(
            project,
            self.config.configurations,
            plugins,
            self.config.ignore_local,
        )
        gradle = distribution_info(project.gradle, self.config)
        included = self.included_builds(project)

        logger.debug(
            "Assembled model: %d plugin artifacts, %d included builds",
            len(plugins.artifacts),
            len(included),
        )
        return BuildModel(
            gradle=gradle,
            plugin_dependencies=plugins,
            root_project=root_project,
            included_builds=included,
        )


class BuildModelProvider:
    """Answers the host's request for :data:`~depsnap.model.MODEL_NAME`."""

    def __init__(self, config: HarvestConfig, plugin_requests: Iterable[PluginRequest]):
        self.assembler = BuildModelAssembler(config, plugin_requests)

    def can_build(self, model_name: str) -> bool:
        return model_name == MODEL_NAME

    def build_all(self, model_name: str, project: HostProject) -> BuildModel:
        if not self.can_build(model_name):
            raise ValueError(f"Unknown model: {model_name}")
        return self.assembler.assemble(project)
