"""Core data models shared across cltools components."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

LITERATE_SUFFIX = ".lcl"
DEFINITION_SUFFIX = ".dcl"
IMPLEMENTATION_SUFFIX = ".icl"


@dataclass(frozen=True)
class ModulePaths:
    """Locations of every file that belongs to one module."""

    name: str
    base: Path

    @property
    def literate(self) -> Path:
        return self.base.with_name(self.base.name + LITERATE_SUFFIX)

    @property
    def definition(self) -> Path:
        return self.base.with_name(self.base.name + DEFINITION_SUFFIX)

    @property
    def implementation(self) -> Path:
        return self.base.with_name(self.base.name + IMPLEMENTATION_SUFFIX)

    def all(self) -> Tuple[Path, Path, Path]:
        return self.literate, self.definition, self.implementation


def module_paths(source_root: Path, name: str) -> ModulePaths:
    """Map a dotted module name onto paths below ``source_root``.

    ``Data.Tree`` under ``src`` becomes ``src/Data/Tree`` (extension-less).
    """
    parts = name.split(".")
    if not name or any(not part or "/" in part or "\\" in part for part in parts):
        raise ValueError(f"Invalid module name: '{name}'")
    return ModulePaths(name=name, base=Path(source_root).joinpath(*parts))


__all__ = [
    "DEFINITION_SUFFIX",
    "IMPLEMENTATION_SUFFIX",
    "LITERATE_SUFFIX",
    "ModulePaths",
    "module_paths",
]
