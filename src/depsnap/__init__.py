"""Extract a build's resolved dependency surface for lockfile generation."""

from depsnap.assembler import BuildModelAssembler, BuildModelProvider
from depsnap.model import MODEL_NAME, BuildModel
from depsnap.plugin import DepsnapPlugin

__all__ = [
    "MODEL_NAME",
    "BuildModel",
    "BuildModelAssembler",
    "BuildModelProvider",
    "DepsnapPlugin",
]
