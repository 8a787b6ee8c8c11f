"""Batch unliteration of the modules listed in a project."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Set

from ..logging import get_logger
from ..models import ModulePaths, module_paths
from .classifier import DOUBLE, PrefixTable
from .freshness import modification_time, needs_regeneration
from .transform import unliterate_pairs

SKIPPED = "skipped"
FRESH = "fresh"
REGENERATED = "regenerated"

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_DEFAULT_MODE = 0o644


class UnliterateError(RuntimeError):
    """Raised when a module's derived files cannot be regenerated."""

    def __init__(self, module: str, message: str) -> None:
        super().__init__(message)
        self.module = module


@dataclass(frozen=True)
class ModuleOutcome:
    """What happened to a single module during a run."""

    module: str
    status: str
    lines: int = 0


@dataclass
class UnlitReport:
    """Aggregated result of :meth:`Unliterator.process_all`."""

    outcomes: List[ModuleOutcome] = field(default_factory=list)
    errors: List[UnliterateError] = field(default_factory=list)

    @property
    def regenerated(self) -> List[str]:
        return [outcome.module for outcome in self.outcomes if outcome.status == REGENERATED]

    @property
    def failed(self) -> List[str]:
        return [error.module for error in self.errors]

    @property
    def ok(self) -> bool:
        return not self.errors


class Unliterator:
    """Regenerates ``.dcl``/``.icl`` pairs from ``.lcl`` sources when stale."""

    def __init__(
        self,
        source_root: Path,
        *,
        prefixes: PrefixTable = DOUBLE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source_root = Path(source_root)
        self.prefixes = prefixes
        self.logger = logger or get_logger("unlit")

    def process_all(self, modules: Iterable[str], *, keep_going: bool = False) -> UnlitReport:
        """Process ``modules`` in order, skipping repeated names.

        The first failure is raised unless ``keep_going`` is set, in which case
        it is recorded on the report and the remaining modules still run.
        """
        report = UnlitReport()
        seen: Set[str] = set()
        for name in modules:
            if name in seen:
                continue
            seen.add(name)
            try:
                report.outcomes.append(self.process_module(name))
            except UnliterateError as exc:
                if not keep_going:
                    raise
                self.logger.error("%s", exc)
                report.errors.append(exc)
        return report

    def process_module(self, name: str) -> ModuleOutcome:
        try:
            paths = module_paths(self.source_root, name)
        except ValueError as exc:
            raise UnliterateError(name, str(exc)) from exc

        source_time = modification_time(paths.literate)
        if source_time is None:
            self.logger.debug("No literate file for %s", name)
            return ModuleOutcome(module=name, status=SKIPPED)

        stale = needs_regeneration(
            source_time,
            modification_time(paths.definition),
            modification_time(paths.implementation),
        )
        if not stale:
            self.logger.debug("Everything up-to-date for %s", name)
            return ModuleOutcome(module=name, status=FRESH)

        self.logger.info("%s", name)
        try:
            lines = self._regenerate(paths)
        except OSError as exc:
            raise UnliterateError(name, f"Could not unliterate '{paths.literate}': {exc}") from exc
        return ModuleOutcome(module=name, status=REGENERATED, lines=lines)

    # ------------------------------------------------------------------
    # Internals

    def _regenerate(self, paths: ModulePaths) -> int:
        staged: List[Path] = []
        try:
            dcl_tmp = _stage(paths.definition)
            staged.append(dcl_tmp)
            icl_tmp = _stage(paths.implementation)
            staged.append(icl_tmp)

            count = 0
            with open(
                paths.literate, encoding=_ENCODING, errors=_ERRORS, newline="\n"
            ) as source, open(
                dcl_tmp, "w", encoding=_ENCODING, errors=_ERRORS, newline="\n"
            ) as dcl, open(icl_tmp, "w", encoding=_ENCODING, errors=_ERRORS, newline="\n") as icl:
                for dcl_line, icl_line in unliterate_pairs(source, self.prefixes):
                    dcl.write(dcl_line + "\n")
                    icl.write(icl_line + "\n")
                    count += 1
                for handle in (dcl, icl):
                    handle.flush()
                    os.fsync(handle.fileno())

            os.replace(dcl_tmp, paths.definition)
            os.replace(icl_tmp, paths.implementation)
            self.logger.debug("Wrote %d lines for %s", count, paths.name)
            return count
        finally:
            for tmp in staged:
                with contextlib.suppress(FileNotFoundError):
                    tmp.unlink()


def _stage(target: Path) -> Path:
    """Create an empty temporary sibling of ``target`` with its final permissions."""
    fd, name = tempfile.mkstemp(prefix=f".{target.name}.tmp.", dir=str(target.parent))
    os.close(fd)
    try:
        try:
            mode = os.stat(target).st_mode & 0o777
        except FileNotFoundError:
            mode = _DEFAULT_MODE
        os.chmod(name, mode)
    except OSError:
        os.unlink(name)
        raise
    return Path(name)


__all__ = [
    "FRESH",
    "REGENERATED",
    "SKIPPED",
    "ModuleOutcome",
    "UnlitReport",
    "UnliterateError",
    "Unliterator",
]
