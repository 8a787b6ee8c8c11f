"""Line classification for literate module sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class PrefixTable:
    """Markers that tag lines of a literate source.

    A header line starts with ``header`` immediately followed by ``keyword``.
    Only the marker itself is stripped, so the keyword stays in the payload.
    """

    header: str
    keyword: str
    exported: str
    internal: str

    def __post_init__(self) -> None:
        for field_name in ("header", "keyword", "exported", "internal"):
            if not getattr(self, field_name):
                raise ValueError(f"Prefix marker '{field_name}' must not be empty")


DOUBLE = PrefixTable(header=">> ", keyword="module", exported=">> ", internal=">  ")
SINGLE = PrefixTable(header="< ", keyword="module", exported="< ", internal="> ")

CONVENTIONS: Dict[str, PrefixTable] = {
    "double": DOUBLE,
    "single": SINGLE,
}


@dataclass(frozen=True)
class ModuleHeader:
    """Module declaration, routed to both outputs with different keywords."""

    code: str


@dataclass(frozen=True)
class Exported:
    """Part of the public interface; copied verbatim to both outputs."""

    code: str


@dataclass(frozen=True)
class Internal:
    """Implementation-only line."""

    code: str


@dataclass(frozen=True)
class Plain:
    """Untagged line (prose, comments, blank lines)."""


LineKind = Union[ModuleHeader, Exported, Internal, Plain]

_PLAIN = Plain()


def classify(line: str, prefixes: PrefixTable = DOUBLE) -> LineKind:
    """Return the kind of ``line`` under ``prefixes``; first match wins."""
    if line.startswith(prefixes.header + prefixes.keyword):
        return ModuleHeader(line[len(prefixes.header) :])
    if line.startswith(prefixes.exported):
        return Exported(line[len(prefixes.exported) :])
    if line.startswith(prefixes.internal):
        return Internal(line[len(prefixes.internal) :])
    return _PLAIN


__all__ = [
    "CONVENTIONS",
    "DOUBLE",
    "SINGLE",
    "Exported",
    "Internal",
    "LineKind",
    "ModuleHeader",
    "Plain",
    "PrefixTable",
    "classify",
]
