"""Compile and run projects through the external ``clm``/``cpm`` tools."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..config import ProjectConfig
from ..literate.driver import Unliterator
from ..logging import get_logger, log_action

COMPILER = "clm"
PROJECT_MANAGER = "cpm"


class BuildError(RuntimeError):
    """Raised when an external build or run step fails."""


def compiler_command(config: ProjectConfig) -> List[str]:
    """Return the ``clm`` invocation for ``config``."""
    if not config.executable.main:
        raise BuildError("No main module configured; set executable.main in Project.toml")
    args = [COMPILER, "-I", _relative(config.source_dir, config.root)]
    for library in config.project.libraries:
        args.extend(["-IL", library])
    args.append(config.executable.main)
    args.extend(["-o", config.executable.output])
    return args


def project_manager_command() -> List[str]:
    return [PROJECT_MANAGER, "make"]


class Builder:
    """Runs unliteration followed by the compiler, and launches the result."""

    def __init__(
        self,
        config: ProjectConfig,
        *,
        runner: Callable[..., int] | None = None,
        unliterator: Unliterator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self._runner = runner or self._default_runner
        self.logger = logger or get_logger("build")
        self.unliterator = unliterator or Unliterator(
            config.source_dir, prefixes=config.prefixes, logger=get_logger("unlit")
        )

    def build(self, *, use_project_manager: bool = False) -> None:
        """Unliterate every configured module, then compile.

        Unliteration failures propagate and the compiler is not started.
        """
        log_action(self.logger, "Unliterating modules")
        self.unliterator.process_all(self.config.all_modules())

        log_action(self.logger, "Building project")
        if use_project_manager:
            args = project_manager_command()
        else:
            args = compiler_command(self.config)
        self._execute(args)

    def run(self, extra_args: Sequence[str] = ()) -> None:
        """Execute the built program with ``extra_args``."""
        log_action(self.logger, "Running project")
        executable = self.config.output_path
        if not executable.exists():
            raise BuildError(f"Executable '{executable}' not found, run 'cl build' first")
        self._execute([str(executable), *extra_args])

    def _execute(self, args: Sequence[str]) -> None:
        self.logger.debug("Running %s", " ".join(args))
        try:
            code = self._runner(args, cwd=self.config.root)
        except FileNotFoundError as exc:
            raise BuildError(f"Could not find executable '{args[0]}' on PATH") from exc
        if code != 0:
            raise BuildError(f"Command failed with exit code {code}: {' '.join(args)}")

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> int:
        completed = subprocess.run(list(args), cwd=str(cwd), check=False)
        return completed.returncode


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root)) or os.curdir
    except ValueError:
        return str(path)


__all__ = ["BuildError", "Builder", "compiler_command", "project_manager_command"]
