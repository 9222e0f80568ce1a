"""Output side of the conversation, rendered through Rich.

Content is always composed as ``rich.text.Text`` (never markup strings), so
prompts such as ``[y/n]`` or operator-typed brackets print verbatim.
"""

from __future__ import annotations

import io
from typing import Protocol

from rich.console import Console
from rich.text import Text

from ..config.models import PrintOptions

WARNING_STYLE = "bold yellow"
HEADER_STYLE = "bold"
PARAMETER_STYLE = "cyan"
VALUE_STYLE = "green"


class OutputSink(Protocol):
    def write(self, text: str) -> object: ...


class _SinkFile(io.TextIOBase):
    """Adapts a bare write(text) sink to the file interface Rich expects."""

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink

    def write(self, s: str) -> int:
        self._sink.write(s)
        return len(s)

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if callable(flush):
            flush()


def _build_console(out: OutputSink | Console | None, options: PrintOptions) -> Console:
    if isinstance(out, Console):
        return out

    if out is None:
        file = None
    elif callable(getattr(out, "isatty", None)) and callable(getattr(out, "flush", None)):
        file = out
    else:
        file = _SinkFile(out)

    console = Console(
        file=file,  # type: ignore[arg-type]
        width=options.width,
        force_terminal=True if options.color else None,
        no_color=options.color is False,
        highlight=False,
        markup=False,
        emoji=False,
    )
    # Pipes and test sinks get text exactly as composed unless a width is set.
    console.soft_wrap = options.width is None and not console.is_terminal
    return console


class Printer:
    def __init__(self, out: OutputSink | Console | None = None, options: PrintOptions | None = None) -> None:
        self.options = options or PrintOptions()
        self.console = _build_console(out, self.options)

    def print(self, content: str | Text, *, style: str | None = None, wrap: bool = True, end: str = "") -> None:
        text = content if isinstance(content, Text) else Text(content, style=style or "")
        self.console.print(text, end=end, soft_wrap=None if wrap else True)

    def line(self, content: str | Text = "", *, style: str | None = None, wrap: bool = True) -> None:
        self.print(content, style=style, wrap=wrap, end="\n")

    def warn(self, message: str) -> None:
        self.line(Text(message, style=WARNING_STYLE))
