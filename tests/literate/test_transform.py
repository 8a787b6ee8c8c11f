"""Tests for cltools.literate.transform."""

from __future__ import annotations

import pytest

from cltools.literate.classifier import SINGLE
from cltools.literate.transform import unliterate, unliterate_pairs

SAMPLE = [
    "Trees",
    "=====",
    "",
    ">> module Data.Tree",
    "",
    ">> import StdEnv",
    "",
    "A tree is either empty or a node.",
    "",
    ">> :: Tree a = Leaf | Node (Tree a) a (Tree a)",
    "",
    ">> size :: (Tree a) -> Int",
    ">  size Leaf = 0",
    ">  size (Node l _ r) = size l + 1 + size r",
]


def test_unliterate_splits_sample_document() -> None:
    definition, implementation = unliterate(SAMPLE)

    assert definition == [
        "",
        "",
        "",
        "definition module Data.Tree",
        "",
        "import StdEnv",
        "",
        "",
        "",
        ":: Tree a = Leaf | Node (Tree a) a (Tree a)",
        "",
        "size :: (Tree a) -> Int",
        "",
        "",
    ]
    assert implementation == [
        "",
        "",
        "",
        "implementation module Data.Tree",
        "",
        "import StdEnv",
        "",
        "",
        "",
        ":: Tree a = Leaf | Node (Tree a) a (Tree a)",
        "",
        "size :: (Tree a) -> Int",
        "size Leaf = 0",
        "size (Node l _ r) = size l + 1 + size r",
    ]


@pytest.mark.parametrize(
    "line, expected",
    [
        (">> module Foo.Bar", ("definition module Foo.Bar", "implementation module Foo.Bar")),
        (">> someFn :: Int -> Int", ("someFn :: Int -> Int", "someFn :: Int -> Int")),
        (">  someFn x = x + 1", ("", "someFn x = x + 1")),
        ("// just a comment", ("", "")),
    ],
)
def test_unliterate_single_line_rules(line: str, expected: tuple[str, str]) -> None:
    assert list(unliterate_pairs([line])) == [expected]


@pytest.mark.parametrize("size", [0, 1, 7, 250])
def test_unliterate_preserves_line_count(size: int) -> None:
    lines = [SAMPLE[i % len(SAMPLE)] for i in range(size)]

    definition, implementation = unliterate(lines)

    assert len(definition) == size
    assert len(implementation) == size


def test_unliterate_strips_line_terminators() -> None:
    definition, implementation = unliterate([">> module A\n", ">  x = 1\r\n", "prose\n"])

    assert definition == ["definition module A", "", ""]
    assert implementation == ["implementation module A", "x = 1", ""]


def test_unliterate_is_deterministic() -> None:
    assert unliterate(SAMPLE) == unliterate(SAMPLE)


def test_unliterate_pairs_is_lazy() -> None:
    consumed: list[str] = []

    def source():
        for line in SAMPLE:
            consumed.append(line)
            yield line

    pairs = unliterate_pairs(source())
    assert consumed == []
    next(pairs)
    assert consumed == SAMPLE[:1]


def test_unliterate_uses_given_prefixes() -> None:
    definition, implementation = unliterate(["< module A", "< f :: Int", "> f = 1"], SINGLE)

    assert definition == ["definition module A", "f :: Int", ""]
    assert implementation == ["implementation module A", "f :: Int", "f = 1"]


def test_unliterate_keeps_carriage_return_inside_line() -> None:
    definition, implementation = unliterate([">  s = \"a\rb\"\n", ">> x :: Int\r\n"])

    assert definition == ["", "x :: Int"]
    assert implementation == ["s = \"a\rb\"", "x :: Int"]
