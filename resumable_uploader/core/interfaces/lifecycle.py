"""
Lifecycle interface for components that hold a network resource.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IManagedResource(ABC):
    """
    A component that acquires a resource in ``start`` and releases it in ``stop``.

    Implementations can be used as async context managers.
    """

    @abstractmethod
    async def start(self) -> None:
        """Acquire the resource. Starting twice is a no-op."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Release the resource. Stopping a stopped component is a no-op."""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """
        Report the component's health.

        Returns:
            Dict with at least ``healthy`` (bool), ``status`` (str) and
            ``details`` (dict)
        """
        pass

    async def __aenter__(self) -> Any:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
