from __future__ import annotations

import sys
from collections.abc import Iterator
from typing import Protocol, Union

from ..errors import InputClosedError


class LineReader(Protocol):
    def readline(self) -> str: ...


# Anything with readline() (sys.stdin, io.StringIO, a pipe), or an iterator of
# lines for scripted runs.
LineSource = Union[LineReader, Iterator[str]]


def default_line_source() -> LineSource:
    return sys.stdin


def read_line(source: LineSource) -> str:
    """Reads one operator line without its line terminator.

    Raises:
        InputClosedError: When the source is exhausted.
    """
    readline = getattr(source, "readline", None)
    if callable(readline):
        line = readline()
        if line == "":
            raise InputClosedError("Input closed while waiting for an answer.")
    else:
        try:
            line = next(source)  # type: ignore[call-overload]
        except StopIteration as e:
            raise InputClosedError("Input closed while waiting for an answer.") from e

    return str(line).rstrip("\r\n")
