"""
Progress sinks.

Sinks receive the ordered stream of ProgressEvents produced while files are
uploaded and render them: to the log, to the terminal, or into memory.
"""

import math
from typing import Callable, Dict, Iterable, List, Optional

import typer

from ..core.domain.upload import ProgressEvent, UploadState
from ..core.interfaces.upload import IProgressSink
from ..infrastructure.logging.setup import LoggingManager


class _Throttle:
    """Lets an event through when its whole-percent value changes or it is terminal."""

    def __init__(self) -> None:
        self._last: Dict[str, int] = {}

    def allow(self, event: ProgressEvent) -> bool:
        if event.is_terminal:
            self._last.pop(event.filename, None)
            return True
        step = math.floor(event.percentage)
        if self._last.get(event.filename) == step:
            return False
        self._last[event.filename] = step
        return True


class LoggingProgressSink(IProgressSink):
    """Writes progress as structured log records."""

    def __init__(self, logging_manager: LoggingManager, throttle: bool = True) -> None:
        self._logging = logging_manager
        self._throttle = _Throttle() if throttle else None

    def publish(self, event: ProgressEvent) -> None:
        if self._throttle and not self._throttle.allow(event):
            return

        level = "ERROR" if event.state == UploadState.FAILED else "INFO"
        self._logging.log_structured(
            level,
            f"{event.filename}: {event.status_text}",
            filename=event.filename,
            percentage=round(event.percentage, 2),
            state=event.state.value,
        )


class ConsoleProgressSink(IProgressSink):
    """Prints ``<name>: <status>`` lines to the terminal."""

    def __init__(self, echo: Optional[Callable[..., None]] = None, throttle: bool = True) -> None:
        self._echo = echo or typer.echo
        self._throttle = _Throttle() if throttle else None

    def publish(self, event: ProgressEvent) -> None:
        if self._throttle and not self._throttle.allow(event):
            return
        self._echo(f"{event.filename}: {event.status_text}", err=event.state == UploadState.FAILED)


class RecordingProgressSink(IProgressSink):
    """Keeps every event in memory, in arrival order."""

    def __init__(self) -> None:
        self.events: List[ProgressEvent] = []

    def publish(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def for_file(self, filename: str) -> List[ProgressEvent]:
        return [e for e in self.events if e.filename == filename]

    def percentages(self, filename: str) -> List[float]:
        return [e.percentage for e in self.for_file(filename)]

    def last(self, filename: str) -> Optional[ProgressEvent]:
        events = self.for_file(filename)
        return events[-1] if events else None


class CompositeProgressSink(IProgressSink):
    """Forwards each event to several sinks, in order."""

    def __init__(self, sinks: Iterable[IProgressSink]) -> None:
        self._sinks = list(sinks)

    def publish(self, event: ProgressEvent) -> None:
        for sink in self._sinks:
            sink.publish(event)
