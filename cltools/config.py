"""Configuration loading for cl projects (Project.toml)."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .literate.classifier import CONVENTIONS, DOUBLE, PrefixTable

PROJECT_FILE = "Project.toml"
DEFAULT_SOURCE_DIR = "src"


class ConfigError(RuntimeError):
    """Raised when the project file is missing or cannot be parsed."""


@dataclass
class ProjectSection:
    """The ``[project]`` table."""

    name: str = ""
    version: str = ""
    authors: List[str] = field(default_factory=list)
    source_dir: Path = Path(DEFAULT_SOURCE_DIR)
    modules: List[str] = field(default_factory=list)
    other_modules: List[str] = field(default_factory=list)
    libraries: List[str] = field(default_factory=list)


@dataclass
class ExecutableSection:
    """The ``[executable]`` table."""

    main: str = ""
    output: str = ""


@dataclass
class ProjectConfig:
    """Represents the settings defined in Project.toml."""

    root: Path
    project: ProjectSection = field(default_factory=ProjectSection)
    executable: ExecutableSection = field(default_factory=ExecutableSection)
    prefixes: PrefixTable = DOUBLE

    @property
    def source_dir(self) -> Path:
        return self.project.source_dir

    def all_modules(self) -> List[str]:
        """Primary modules followed by other modules, without repeats."""
        ordered: List[str] = []
        for name in [*self.project.modules, *self.project.other_modules]:
            if name not in ordered:
                ordered.append(name)
        return ordered

    @property
    def output_path(self) -> Path:
        return self.root / self.executable.output


def find_project_file(path: Path) -> Path:
    path = path.expanduser()
    if path.is_dir():
        return (path / PROJECT_FILE).resolve()
    return path.resolve()


def load_config(path: Path) -> ProjectConfig:
    """Load the project configuration from a directory or a Project.toml path."""
    config_file = find_project_file(Path(path))
    root = config_file.parent

    if not config_file.exists():
        raise ConfigError("Could not find a project file, run 'cl init' to initialise a project")

    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Could not parse project file {config_file.name}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read project file {config_file.name}: {exc}") from exc

    project_data = _as_dict(data.get("project"))
    source_dir_str = _as_str(project_data.get("sourcedir")) or DEFAULT_SOURCE_DIR
    project = ProjectSection(
        name=_as_str(project_data.get("name")) or root.name,
        version=_as_str(project_data.get("version")) or "",
        authors=_as_str_list(project_data.get("authors")),
        source_dir=(root / source_dir_str),
        modules=_as_str_list(project_data.get("modules")),
        other_modules=_as_str_list(project_data.get("othermodules")),
        libraries=_as_str_list(project_data.get("libraries")),
    )

    executable_data = _as_dict(data.get("executable"))
    executable = ExecutableSection(
        main=_as_str(executable_data.get("main")) or (project.modules[0] if project.modules else ""),
        output=_as_str(executable_data.get("output")) or project.name,
    )

    prefixes = _parse_prefixes(_as_dict(data.get("literate")))

    return ProjectConfig(root=root, project=project, executable=executable, prefixes=prefixes)


def _parse_prefixes(literate: Dict[str, Any]) -> PrefixTable:
    if not literate:
        return DOUBLE
    convention = _as_str(literate.get("convention")) or "double"
    base = CONVENTIONS.get(convention.lower())
    if base is None:
        known = ", ".join(sorted(CONVENTIONS))
        raise ConfigError(f"Unknown literate convention '{convention}' (expected one of: {known})")

    overrides: Dict[str, str] = {}
    for key in ("header", "keyword", "exported", "internal"):
        if key in literate:
            value = literate[key]
            if not isinstance(value, str) or not value:
                raise ConfigError(f"literate.{key} must be a non-empty string")
            overrides[key] = value
    return replace(base, **overrides) if overrides else base


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "ConfigError",
    "DEFAULT_SOURCE_DIR",
    "ExecutableSection",
    "PROJECT_FILE",
    "ProjectConfig",
    "ProjectSection",
    "find_project_file",
    "load_config",
]
