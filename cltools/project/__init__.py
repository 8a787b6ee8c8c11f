"""Project-level commands: scaffolding, module files, builds and cleanup."""

from .build import BuildError, Builder
from .cleanup import clean, prune
from .modules import ModuleError, ModuleManager
from .scaffold import init_project

__all__ = [
    "BuildError",
    "Builder",
    "ModuleError",
    "ModuleManager",
    "clean",
    "init_project",
    "prune",
]
