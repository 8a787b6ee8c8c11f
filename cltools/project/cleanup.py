"""Removal of compiler artefacts (``cl clean`` / ``cl prune``)."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List

from ..config import ProjectConfig
from ..logging import get_logger, log_action

ARTEFACT_DIRS = frozenset({"Clean System Files", "sapl"})
DATA_DIR_PATTERN = "*-data"


def clean(root: Path, *, logger: logging.Logger | None = None) -> List[Path]:
    """Recursively delete compiler cache directories below ``root``."""
    logger = logger or get_logger("clean")
    log_action(logger, "Cleaning files")
    removed: List[Path] = []
    for current, dirnames, _filenames in os.walk(root):
        for dirname in sorted(dirnames):
            if dirname in ARTEFACT_DIRS:
                path = Path(current) / dirname
                logger.info("%s", _display(path, root))
                shutil.rmtree(path)
                removed.append(path)
        # Do not descend into directories that were just deleted.
        dirnames[:] = [name for name in dirnames if name not in ARTEFACT_DIRS]
    return removed


def prune(config: ProjectConfig, *, logger: logging.Logger | None = None) -> List[Path]:
    """Clean, then delete the built executable and ``*-data`` directories."""
    logger = logger or get_logger("clean")
    removed = clean(config.root, logger=logger)

    log_action(logger, "Pruning files")
    output = config.output_path
    if config.executable.output and (output.is_symlink() or output.is_file()):
        output.unlink()
        logger.info("%s", _display(output, config.root))
        removed.append(output)
    elif config.executable.output and output.is_dir():
        logger.warning("Not removing executable output %s: it is a directory", _display(output, config.root))

    for path in sorted(config.root.glob(DATA_DIR_PATTERN)):
        if path.is_symlink():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            continue
        logger.info("%s", _display(path, config.root))
        removed.append(path)
    return removed


def _display(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


__all__ = ["ARTEFACT_DIRS", "clean", "prune"]
