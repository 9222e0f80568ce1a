from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PrintOptions:
    """
    Terminal formatting for prompts, statements and reviews.

    width: wrap column; None wraps to the terminal width, and leaves output to
        non-terminal sinks unwrapped.
    color: True forces ANSI styling, False disables it, None auto-detects.
    """

    width: Optional[int] = None
    color: Optional[bool] = None

    @staticmethod
    def from_dict(d: Mapping[str, Any] | None) -> "PrintOptions":
        if not d:
            return PrintOptions()

        width = d.get("width")
        if width is not None:
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise ValueError(f"print width must be a positive int; got {width!r}")

        color = d.get("color")
        if color is not None and not isinstance(color, bool):
            raise ValueError(f"print color must be a bool or null; got {color!r}")

        return PrintOptions(width=width, color=color)
