"""Create, remove and rename module files inside the source directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

from ..literate.classifier import DOUBLE, PrefixTable
from ..logging import get_logger, log_action
from ..models import ModulePaths, module_paths
from .rendering import render


class ModuleError(RuntimeError):
    """Raised when a module operation would clobber or cannot find files."""


class ModuleManager:
    """File-level module operations rooted at a project's source directory."""

    def __init__(
        self,
        source_root: Path,
        *,
        prefixes: PrefixTable = DOUBLE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source_root = Path(source_root)
        self.prefixes = prefixes
        self.logger = logger or get_logger("modules")

    def add(self, names: Iterable[str], *, literate: bool = False, force: bool = False) -> List[Path]:
        """Create skeleton files for each module and return the paths written."""
        written: List[Path] = []
        for name in names:
            log_action(self.logger, "Creating module '%s'", name)
            paths = self._paths(name)
            if literate:
                targets = {paths.literate: render("literate.lcl.j2", module=name, prefixes=self.prefixes)}
            else:
                targets = {
                    paths.definition: render("definition.dcl.j2", module=name),
                    paths.implementation: render("implementation.icl.j2", module=name),
                }
            if not force:
                existing = [path for path in targets if path.exists()]
                if existing:
                    raise ModuleError(
                        f"Module '{name}' already exists: {', '.join(str(p) for p in existing)} "
                        "(use --force to overwrite)"
                    )
            paths.base.parent.mkdir(parents=True, exist_ok=True)
            for path, content in targets.items():
                path.write_text(content, encoding="utf-8")
                self.logger.debug("Wrote %s", path)
                written.append(path)
        return written

    def remove(self, names: Iterable[str]) -> List[Path]:
        """Delete every file belonging to each module; return the paths removed."""
        removed: List[Path] = []
        for name in names:
            log_action(self.logger, "Removing module '%s'", name)
            found = False
            for path in self._paths(name).all():
                try:
                    path.unlink()
                except FileNotFoundError:
                    continue
                found = True
                removed.append(path)
                self.logger.debug("Removed %s", path)
            if not found:
                self.logger.warning("No files found for module '%s'", name)
        return removed

    def move(self, old: str, new: str) -> List[Path]:
        """Rename all files of module ``old`` to module ``new``."""
        log_action(self.logger, "Moving '%s' to '%s'", old, new)
        old_paths = self._paths(old)
        new_paths = self._paths(new)

        pairs = [
            (source, target)
            for source, target in zip(old_paths.all(), new_paths.all())
            if source.exists()
        ]
        if not pairs:
            raise ModuleError(f"No files found for module '{old}'")
        clashes = [target for _, target in pairs if target.exists()]
        if clashes:
            raise ModuleError(f"Module '{new}' already exists: {', '.join(str(p) for p in clashes)}")

        new_paths.base.parent.mkdir(parents=True, exist_ok=True)
        moved: List[Path] = []
        for source, target in pairs:
            source.rename(target)
            self.logger.debug("Renamed %s -> %s", source, target)
            moved.append(target)
        return moved

    def _paths(self, name: str) -> ModulePaths:
        try:
            return module_paths(self.source_root, name)
        except ValueError as exc:
            raise ModuleError(str(exc)) from exc


__all__ = ["ModuleError", "ModuleManager"]
