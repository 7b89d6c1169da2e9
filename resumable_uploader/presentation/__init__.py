"""
Presentation layer: progress sinks consumed by the CLI.
"""

from .sinks import (
    LoggingProgressSink, ConsoleProgressSink, RecordingProgressSink, CompositeProgressSink
)

__all__ = [
    "LoggingProgressSink",
    "ConsoleProgressSink",
    "RecordingProgressSink",
    "CompositeProgressSink",
]
