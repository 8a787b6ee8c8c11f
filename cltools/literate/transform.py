"""Split a literate source into definition and implementation views."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Tuple

from .classifier import DOUBLE, Exported, Internal, LineKind, ModuleHeader, PrefixTable, classify

DEFINITION_KEYWORD = "definition "
IMPLEMENTATION_KEYWORD = "implementation "


def render_line(kind: LineKind) -> Tuple[str, str]:
    """Return the ``(definition, implementation)`` text for one classified line."""
    if isinstance(kind, ModuleHeader):
        return DEFINITION_KEYWORD + kind.code, IMPLEMENTATION_KEYWORD + kind.code
    if isinstance(kind, Exported):
        return kind.code, kind.code
    if isinstance(kind, Internal):
        return "", kind.code
    return "", ""


def unliterate_pairs(
    lines: Iterable[str], prefixes: PrefixTable = DOUBLE
) -> Iterator[Tuple[str, str]]:
    """Lazily yield one ``(definition, implementation)`` pair per input line.

    Each input line loses one trailing LF and then one trailing CR; a CR
    anywhere else is content. Yielded lines carry no terminator.
    """
    for raw in lines:
        yield render_line(classify(_strip_terminator(raw), prefixes))


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def unliterate(
    lines: Iterable[str], prefixes: PrefixTable = DOUBLE
) -> Tuple[List[str], List[str]]:
    """Eager variant of :func:`unliterate_pairs` returning both line lists."""
    definition: List[str] = []
    implementation: List[str] = []
    for dcl_line, icl_line in unliterate_pairs(lines, prefixes):
        definition.append(dcl_line)
        implementation.append(icl_line)
    return definition, implementation


__all__ = [
    "DEFINITION_KEYWORD",
    "IMPLEMENTATION_KEYWORD",
    "render_line",
    "unliterate",
    "unliterate_pairs",
]
