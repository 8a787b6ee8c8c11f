"""Tests for the batch unliteration driver."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from cltools.literate import driver as driver_module
from cltools.literate.classifier import SINGLE
from cltools.literate.driver import FRESH, REGENERATED, SKIPPED, UnliterateError, Unliterator

LITERATE = """\
Example module
>> module Data.Tree
>> size :: (Tree a) -> Int
>  size _ = 0
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _set_mtime(path: Path, seconds: int) -> None:
    os.utime(path, (seconds, seconds))


def test_process_module_writes_both_outputs(tmp_path: Path) -> None:
    _write(tmp_path / "Data" / "Tree.lcl", LITERATE)

    outcome = Unliterator(tmp_path).process_module("Data.Tree")

    assert outcome.status == REGENERATED
    assert outcome.lines == 4
    assert (tmp_path / "Data" / "Tree.dcl").read_text(encoding="utf-8") == (
        "\ndefinition module Data.Tree\nsize :: (Tree a) -> Int\n\n"
    )
    assert (tmp_path / "Data" / "Tree.icl").read_text(encoding="utf-8") == (
        "\nimplementation module Data.Tree\nsize :: (Tree a) -> Int\nsize _ = 0\n"
    )


def test_process_module_skips_missing_literate_file(tmp_path: Path) -> None:
    outcome = Unliterator(tmp_path).process_module("Main")

    assert outcome.status == SKIPPED
    assert not (tmp_path / "Main.dcl").exists()
    assert not (tmp_path / "Main.icl").exists()


def test_process_module_skips_fresh_outputs(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", ">> module Main\n")
    dcl = _write(tmp_path / "Main.dcl", "hand edited\n")
    icl = _write(tmp_path / "Main.icl", "hand edited\n")
    _set_mtime(source, 10)
    _set_mtime(dcl, 20)
    _set_mtime(icl, 20)

    outcome = Unliterator(tmp_path).process_module("Main")

    assert outcome.status == FRESH
    assert dcl.read_text(encoding="utf-8") == "hand edited\n"


def test_process_module_regenerates_when_one_output_is_stale(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", ">> module Main\n")
    dcl = _write(tmp_path / "Main.dcl", "old\n")
    icl = _write(tmp_path / "Main.icl", "old\n")
    _set_mtime(source, 10)
    _set_mtime(dcl, 5)
    _set_mtime(icl, 20)

    outcome = Unliterator(tmp_path).process_module("Main")

    assert outcome.status == REGENERATED
    assert dcl.read_text(encoding="utf-8") == "definition module Main\n"
    assert icl.read_text(encoding="utf-8") == "implementation module Main\n"


def test_process_module_regenerates_when_output_missing(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", ">> module Main\n")
    icl = _write(tmp_path / "Main.icl", "old\n")
    _set_mtime(source, 10)
    _set_mtime(icl, 20)

    outcome = Unliterator(tmp_path).process_module("Main")

    assert outcome.status == REGENERATED
    assert (tmp_path / "Main.dcl").exists()


def test_regenerated_outputs_are_fresh_on_next_run(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", ">> module Main\n")
    _set_mtime(source, 10)
    unliterator = Unliterator(tmp_path)

    assert unliterator.process_module("Main").status == REGENERATED
    assert unliterator.process_module("Main").status == FRESH


def test_regeneration_is_idempotent(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", LITERATE)
    unliterator = Unliterator(tmp_path)

    _set_mtime(source, 10)
    unliterator.process_module("Main")
    first = ((tmp_path / "Main.dcl").read_bytes(), (tmp_path / "Main.icl").read_bytes())

    _set_mtime(tmp_path / "Main.dcl", 1)
    unliterator.process_module("Main")
    second = ((tmp_path / "Main.dcl").read_bytes(), (tmp_path / "Main.icl").read_bytes())

    assert first == second


def test_output_line_count_matches_source(tmp_path: Path) -> None:
    lines = [">> module Main", "", "prose", ">  x = 1", ">> x :: Int", "no trailing newline"]
    _write(tmp_path / "Main.lcl", "\n".join(lines))

    Unliterator(tmp_path).process_module("Main")

    for suffix in (".dcl", ".icl"):
        content = (tmp_path / f"Main{suffix}").read_text(encoding="utf-8")
        assert content.count("\n") == len(lines)
        assert content.endswith("\n")


def test_crlf_sources_produce_lf_outputs(tmp_path: Path) -> None:
    (tmp_path / "Main.lcl").write_bytes(b">> module Main\r\n>  x = 1\r\n")

    Unliterator(tmp_path).process_module("Main")

    assert (tmp_path / "Main.icl").read_bytes() == b"implementation module Main\nx = 1\n"


def test_non_utf8_bytes_are_carried_through(tmp_path: Path) -> None:
    (tmp_path / "Main.lcl").write_bytes(b">> module Main\n>  s = \"caf\xe9\"\n")

    Unliterator(tmp_path).process_module("Main")

    assert (tmp_path / "Main.icl").read_bytes() == b"implementation module Main\ns = \"caf\xe9\"\n"


def test_process_module_uses_configured_prefixes(tmp_path: Path) -> None:
    _write(tmp_path / "Main.lcl", "< module Main\n> x = 1\n")

    Unliterator(tmp_path, prefixes=SINGLE).process_module("Main")

    assert (tmp_path / "Main.dcl").read_text(encoding="utf-8") == "definition module Main\n\n"


def test_failed_write_leaves_previous_outputs_and_no_temporaries(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = _write(tmp_path / "Main.lcl", LITERATE)
    dcl = _write(tmp_path / "Main.dcl", "previous\n")
    icl = _write(tmp_path / "Main.icl", "previous\n")
    _set_mtime(dcl, 10)
    _set_mtime(icl, 10)
    _set_mtime(source, 20)

    def broken_pairs(lines, prefixes):  # type: ignore[no-untyped-def]
        yield ("ok", "ok")
        raise OSError("disk full")

    monkeypatch.setattr(driver_module, "unliterate_pairs", broken_pairs)

    with pytest.raises(UnliterateError) as excinfo:
        Unliterator(tmp_path).process_module("Main")

    assert excinfo.value.module == "Main"
    assert "disk full" in str(excinfo.value)
    assert dcl.read_text(encoding="utf-8") == "previous\n"
    assert icl.read_text(encoding="utf-8") == "previous\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["Main.dcl", "Main.icl", "Main.lcl"]


def test_replaced_outputs_keep_existing_permissions(tmp_path: Path) -> None:
    source = _write(tmp_path / "Main.lcl", ">> module Main\n")
    dcl = _write(tmp_path / "Main.dcl", "old\n")
    dcl.chmod(0o640)
    _set_mtime(dcl, 1)
    _set_mtime(source, 10)

    Unliterator(tmp_path).process_module("Main")

    assert dcl.stat().st_mode & 0o777 == 0o640
    assert (tmp_path / "Main.icl").stat().st_mode & 0o777 == 0o644


def test_invalid_module_name_raises(tmp_path: Path) -> None:
    with pytest.raises(UnliterateError):
        Unliterator(tmp_path).process_module("Data..Tree")


def test_process_all_follows_order_and_deduplicates(tmp_path: Path) -> None:
    _write(tmp_path / "B.lcl", ">> module B\n")
    _write(tmp_path / "A.lcl", ">> module A\n")

    report = Unliterator(tmp_path).process_all(["B", "Plain", "A", "B"])

    assert [o.module for o in report.outcomes] == ["B", "Plain", "A"]
    assert [o.status for o in report.outcomes] == [REGENERATED, SKIPPED, REGENERATED]
    assert report.regenerated == ["B", "A"]
    assert report.ok


def test_process_all_raises_first_failure_by_default(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "A.lcl", ">> module A\n")
    _write(tmp_path / "Sub" / "B.lcl", ">> module Sub.B\n")
    unliterator = Unliterator(tmp_path)
    original = unliterator._regenerate

    def failing(paths):  # type: ignore[no-untyped-def]
        if paths.name == "A":
            raise PermissionError("read-only")
        return original(paths)

    monkeypatch.setattr(unliterator, "_regenerate", failing)

    with pytest.raises(UnliterateError):
        unliterator.process_all(["A", "Sub.B"])
    assert not (tmp_path / "Sub" / "B.dcl").exists()


def test_process_all_keep_going_records_failures(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path / "A.lcl", ">> module A\n")
    _write(tmp_path / "B.lcl", ">> module B\n")
    unliterator = Unliterator(tmp_path, logger=logging.getLogger("test.unlit"))
    original = unliterator._regenerate

    def failing(paths):  # type: ignore[no-untyped-def]
        if paths.name == "A":
            raise PermissionError("read-only")
        return original(paths)

    monkeypatch.setattr(unliterator, "_regenerate", failing)

    with caplog.at_level(logging.ERROR, logger="test.unlit"):
        report = unliterator.process_all(["A", "B"], keep_going=True)

    assert not report.ok
    assert report.failed == ["A"]
    assert report.regenerated == ["B"]
    assert "read-only" in caplog.text


def test_injected_logger_receives_progress(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path / "Main.lcl", ">> module Main\n")
    logger = logging.getLogger("test.progress")

    with caplog.at_level(logging.DEBUG, logger="test.progress"):
        Unliterator(tmp_path, logger=logger).process_all(["Main", "Missing"])

    messages = [record.getMessage() for record in caplog.records if record.name == "test.progress"]
    assert "Main" in messages
    assert "No literate file for Missing" in messages


def test_embedded_carriage_return_is_content(tmp_path: Path) -> None:
    (tmp_path / "Main.lcl").write_bytes(b'>> module Main\n>  s = "a\rb"\n')

    outcome = Unliterator(tmp_path).process_module("Main")

    assert outcome.lines == 2
    assert (tmp_path / "Main.icl").read_bytes() == b'implementation module Main\ns = "a\rb"\n'
    assert (tmp_path / "Main.dcl").read_bytes() == b"definition module Main\n\n"


def test_stage_removes_temporary_when_chmod_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write(tmp_path / "Main.lcl", ">> module Main\n")

    def refuse(path, mode):  # type: ignore[no-untyped-def]
        raise PermissionError("chmod refused")

    monkeypatch.setattr(driver_module.os, "chmod", refuse)

    with pytest.raises(UnliterateError, match="chmod refused"):
        Unliterator(tmp_path).process_module("Main")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["Main.lcl"]
