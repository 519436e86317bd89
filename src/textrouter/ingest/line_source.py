"""Line source: streams a data file one physical line at a time."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator

from textrouter.core.exceptions import FatalIOError


@dataclass(frozen=True, slots=True)
class RawLine:
    """One physical input line."""

    number: int  # 1-based
    text: str


class LineSource:
    """Single forward pass over a data file.

    Use as a context manager; the file is opened on entry so a missing or
    unreadable file fails before anything downstream is touched.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8-sig") -> None:
        self._path = Path(path)
        self._encoding = encoding
        self._handle: IO[str] | None = None
        self._consumed = False

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        try:
            # newline="" keeps "\r\n" intact so only terminators are stripped.
            self._handle = self._path.open("r", encoding=self._encoding, newline="")
        except OSError as exc:
            raise FatalIOError(str(self._path), exc.strerror or str(exc)) from exc
        except LookupError as exc:
            raise FatalIOError(str(self._path), f"unknown encoding {self._encoding!r}") from exc

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> LineSource:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[RawLine]:
        if self._handle is None:
            raise RuntimeError("LineSource is not open")
        if self._consumed:
            raise RuntimeError("LineSource can only be iterated once")
        self._consumed = True

        number = 0
        handle = self._handle
        while True:
            try:
                text = handle.readline()
            except (OSError, UnicodeDecodeError) as exc:
                raise FatalIOError(str(self._path), str(exc), line_number=number) from exc
            if not text:
                return
            number += 1
            yield RawLine(number, _strip_terminator(text))


def lines(path: str | Path, encoding: str = "utf-8-sig") -> Iterator[RawLine]:
    """Generator form of :class:`LineSource`; the file closes when exhausted."""
    with LineSource(path, encoding) as source:
        yield from source


def _strip_terminator(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n") or text.endswith("\r"):
        return text[:-1]
    return text
