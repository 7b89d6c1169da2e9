"""
Base client implementation.

Shared plumbing for upload server clients: connection status, per-request
accounting and lifecycle event hooks.
"""

import asyncio
import logging
import time
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ...core.interfaces.clients import ClientStatus, IBaseClient

logger = logging.getLogger(__name__)

EventCallback = Callable[..., Any]


@dataclass
class ClientMetrics:
    """Request and byte counters for one client."""
    requests: int = 0
    failures: int = 0
    bytes_sent: int = 0
    bytes_received: int = 0
    busy_time: float = 0.0
    slowest_request: float = 0.0
    last_error: Optional[str] = None

    @property
    def average_response_time(self) -> float:
        return self.busy_time / self.requests if self.requests else 0.0

    @property
    def success_rate(self) -> float:
        """Share of successful requests, in percent (100 before any request)."""
        if not self.requests:
            return 100.0
        return (self.requests - self.failures) / self.requests * 100.0

    def record(self, elapsed: float, error: Optional[str] = None) -> None:
        """Account for one finished request; ``error`` marks it as failed."""
        self.requests += 1
        self.busy_time += elapsed
        self.slowest_request = max(self.slowest_request, elapsed)
        if error is not None:
            self.failures += 1
            self.last_error = error


@dataclass
class ClientConfig:
    """Base client configuration."""
    base_url: str
    timeout: float = 300.0
    connect_timeout: float = 10.0
    verify_ssl: bool = True
    headers: Dict[str, str] = field(default_factory=dict)


class BaseClient(IBaseClient, ABC):
    """
    Status, metrics and hooks common to every client.

    Subclasses open their transport in ``start`` before calling
    ``super().start()`` and close it in ``stop``. Hooks registered with
    ``add_callback`` fire on ``client.started`` and ``client.stopped``;
    a failing hook is logged and otherwise ignored.
    """

    def __init__(self, config: ClientConfig, name: Optional[str] = None):
        self._config = config
        self._name = name or type(self).__name__
        self._status = ClientStatus.DISCONNECTED
        self._metrics = ClientMetrics()
        self._callbacks: Dict[str, List[EventCallback]] = {}
        self._running = False
        self._last_activity: Optional[float] = None

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._update_status(ClientStatus.CONNECTED)
        logger.info(f"Client {self._name} started for {self._config.base_url}")
        await self._trigger_callback("client.started", self._name)

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._update_status(ClientStatus.DISCONNECTED)
        logger.info(f"Client {self._name} stopped")
        await self._trigger_callback("client.stopped", self._name)

    async def health_check(self) -> Dict[str, Any]:
        metrics = self._metrics
        return {
            "healthy": self._running and self.is_connected(),
            "status": self._status.value,
            "metrics": {
                "requests": metrics.requests,
                "success_rate": metrics.success_rate,
                "average_response_time": metrics.average_response_time,
                "bytes_sent": metrics.bytes_sent,
                "bytes_received": metrics.bytes_received,
                "error_count": metrics.failures,
            },
            "details": {
                "running": self._running,
                "base_url": self._config.base_url,
                "last_activity": self._last_activity,
                "last_error": metrics.last_error,
            },
        }

    def is_connected(self) -> bool:
        return self._status == ClientStatus.CONNECTED

    def get_status(self) -> ClientStatus:
        return self._status

    def get_metrics(self) -> ClientMetrics:
        return self._metrics

    def add_callback(self, event: str, callback: EventCallback) -> None:
        """Register ``callback`` for ``event``; coroutine functions are awaited."""
        self._callbacks.setdefault(event, []).append(callback)

    def remove_callback(self, event: str, callback: EventCallback) -> None:
        callbacks = self._callbacks.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)
        else:
            logger.warning(f"Callback not found for event {event}")

    async def _trigger_callback(self, event: str, *args: Any) -> None:
        for callback in list(self._callbacks.get(event, [])):
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(*args)
                else:
                    callback(*args)
            except Exception as e:
                logger.error(f"Callback error for event {event}: {e}")

    def _record(self, started_at: float, error: Optional[str] = None) -> None:
        """Account for a request that began at ``started_at``."""
        now = time.time()
        self._metrics.record(now - started_at, error)
        self._last_activity = now

    def _update_status(self, status: ClientStatus) -> None:
        if status != self._status:
            logger.debug(f"Client {self._name} status: {self._status.value} -> {status.value}")
        self._status = status
