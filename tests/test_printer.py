from __future__ import annotations

import io

import pytest

from qna.config.models import PrintOptions
from qna.errors import InputClosedError
from qna.io.lines import read_line
from qna.io.printer import Printer


class WriteOnlySink:
    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, text: str) -> None:
        self.chunks.append(text)


def test_brackets_are_printed_verbatim() -> None:
    out = io.StringIO()
    Printer(out).print("\nReady?\n[y/n]\n")
    assert out.getvalue() == "\nReady?\n[y/n]\n"


def test_write_only_sink_gets_plain_text() -> None:
    sink = WriteOnlySink()
    printer = Printer(sink)
    printer.warn("Careful.")
    printer.line("Done", style="bold")

    assert "".join(sink.chunks) == "Careful.\nDone\n"


def test_width_wraps_long_lines() -> None:
    out = io.StringIO()
    Printer(out, PrintOptions(width=20)).line("one two three four five six seven eight")

    lines = out.getvalue().splitlines()
    assert len(lines) > 1
    assert all(len(line) <= 20 for line in lines)


def test_unwrapped_statement_keeps_long_lines() -> None:
    out = io.StringIO()
    text = "word " * 40
    Printer(out, PrintOptions(width=20)).line(text.strip(), wrap=False)

    assert out.getvalue() == text.strip() + "\n"


def test_read_line_strips_terminator() -> None:
    assert read_line(io.StringIO("answer\r\n")) == "answer"
    assert read_line(iter(["from iterator\n"])) == "from iterator"


def test_read_line_raises_at_end_of_input() -> None:
    with pytest.raises(InputClosedError):
        read_line(io.StringIO(""))
    with pytest.raises(InputClosedError):
        read_line(iter([]))
