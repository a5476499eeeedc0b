"""Hook depsnap into the host's build lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from depsnap.assembler import BuildModelProvider
from depsnap.config import HarvestConfig, load_config
from depsnap.host import HostBuild, HostProject, HostSettings
from depsnap.model import PluginRequest
from depsnap.resolvers.plugins import capture_plugin_requests

logger = logging.getLogger(__name__)


class DepsnapPlugin:
    """Capture plugin requests at settings time, register the provider later.

    Settings evaluation happens strictly before projects are loaded, so the
    captured tuple is complete by the time the provider is created from it.
    """

    def __init__(
        self,
        properties: Mapping[str, str] | None = None,
        config: HarvestConfig | None = None,
    ):
        self.config = config or load_config(properties=properties)
        self.plugin_requests: tuple[PluginRequest, ...] = ()
        self.provider: BuildModelProvider | None = None

    def apply(self, build: HostBuild) -> None:
        build.settings_evaluated(self._capture)
        build.projects_loaded(lambda root: self._register(build, root))

    def _capture(self, settings: HostSettings) -> None:
        self.plugin_requests = capture_plugin_requests(settings)

    def _register(self, build: HostBuild, root_project: HostProject) -> None:
        self.provider = BuildModelProvider(self.config, self.plugin_requests)
        build.model_registry.register(self.provider)
        logger.debug("Registered model provider for %s", root_project.path)
