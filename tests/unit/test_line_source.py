"""Tests for streaming input lines."""

from __future__ import annotations

import pytest

from textrouter.core.exceptions import FatalIOError
from textrouter.ingest.line_source import LineSource, RawLine, lines


class TestLineSource:
    def test_numbers_lines_from_one(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a\nb\nc\n", encoding="utf-8")
        with LineSource(path) as source:
            assert list(source) == [RawLine(1, "a"), RawLine(2, "b"), RawLine(3, "c")]

    def test_strips_only_line_terminators(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_bytes(b"x1  \r\n  x2\nlast  ")
        assert [l.text for l in lines(path)] == ["x1  ", "  x2", "last  "]

    def test_blank_lines_are_yielded(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a\n\nb\n", encoding="utf-8")
        assert [l.text for l in lines(path)] == ["a", "", "b"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("", encoding="utf-8")
        assert list(lines(path)) == []

    def test_single_pass_only(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a\n", encoding="utf-8")
        with LineSource(path) as source:
            list(source)
            with pytest.raises(RuntimeError):
                list(source)

    def test_is_lazy(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("".join(f"{i}\n" for i in range(10_000)), encoding="utf-8")
        with LineSource(path) as source:
            it = iter(source)
            assert next(it) == RawLine(1, "0")
            assert next(it) == RawLine(2, "1")

    def test_respects_encoding(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_bytes("Ñoño\n".encode("latin-1"))
        assert [l.text for l in lines(path, encoding="latin-1")] == ["Ñoño"]


class TestFatalErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FatalIOError) as info:
            with LineSource(tmp_path / "missing.txt"):
                pass
        assert "missing.txt" in str(info.value)

    def test_directory(self, tmp_path):
        with pytest.raises(FatalIOError):
            with LineSource(tmp_path):
                pass

    def test_unknown_encoding(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text("a\n", encoding="utf-8")
        with pytest.raises(FatalIOError):
            with LineSource(path, encoding="no-such-codec"):
                pass

    def test_undecodable_bytes_mid_file(self, tmp_path):
        path = tmp_path / "data.txt"
        good = "".join(f"line-{i:05d}\n" for i in range(5000)).encode("utf-8")
        path.write_bytes(good + b"\xff\xfe broken\n")
        seen = []
        with pytest.raises(FatalIOError) as info:
            for line in lines(path):
                seen.append(line.text)
        # Decoding happens in buffered chunks, so the failure surfaces a little
        # before the bad line; everything yielded up to it was intact.
        assert 0 < len(seen) < 5001
        assert seen[0] == "line-00000"
        assert info.value.line_number == len(seen)
