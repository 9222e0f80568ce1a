"""Line-source and output-sink adapters used by the engine."""

from .lines import LineSource, default_line_source, read_line
from .printer import OutputSink, Printer

__all__ = ["LineSource", "OutputSink", "Printer", "default_line_source", "read_line"]
