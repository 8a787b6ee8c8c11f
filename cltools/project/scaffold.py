"""Project initialisation (``cl init``)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from ..config import DEFAULT_SOURCE_DIR, PROJECT_FILE
from ..logging import get_logger, log_action
from .rendering import render

TEST_DIR = "test"


@dataclass
class InitResult:
    """Paths touched by :func:`init_project`."""

    root: Path
    created_dirs: List[Path] = field(default_factory=list)
    project_file: Path | None = None


def init_project(
    path: Path,
    *,
    name: str | None = None,
    version: str = "0.1.0",
    authors: Sequence[str] = (),
    main: str = "Main",
    logger: logging.Logger | None = None,
) -> InitResult:
    """Create ``src/`` and ``test/`` plus a default Project.toml when missing.

    Existing directories and an existing project file are left untouched.
    """
    logger = logger or get_logger("init")
    root = Path(path).expanduser().resolve()
    log_action(logger, "Initializing new project in %s", root)

    root.mkdir(parents=True, exist_ok=True)
    result = InitResult(root=root)
    for directory in (root / DEFAULT_SOURCE_DIR, root / TEST_DIR):
        if not directory.exists():
            directory.mkdir()
            result.created_dirs.append(directory)
            logger.debug("Created %s", directory)

    project_file = root / PROJECT_FILE
    if project_file.exists():
        logger.info("Keeping existing %s", PROJECT_FILE)
        return result

    content = render(
        "project.toml.j2",
        name=name or root.name,
        version=version,
        authors=list(authors),
        source_dir=DEFAULT_SOURCE_DIR,
        main=main,
    )
    project_file.write_text(content, encoding="utf-8")
    result.project_file = project_file
    logger.info("Wrote %s", project_file.name)
    return result


__all__ = ["InitResult", "TEST_DIR", "init_project"]
