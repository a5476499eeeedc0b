"""Dependency and plugin resolution against host configurations."""

from depsnap.resolvers.dependencies import DependencyResolver, select_configurations
from depsnap.resolvers.plugins import PluginResolver, capture_plugin_requests

__all__ = [
    "DependencyResolver",
    "PluginResolver",
    "capture_plugin_requests",
    "select_configurations",
]
