"""Protocol interfaces for the collaborators a device handler depends on.

The handler never talks to a concrete bridge or scheduler. It depends on
these protocols so hosts can plug in their own implementations and tests
can use fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable, Callable

    from pybridgedevice.models import CatalogEntry, DeviceCatalog, StatusInfo


__all__ = [
    "Bridge",
    "CatalogResolver",
    "Scheduler",
]


@runtime_checkable
class Bridge(Protocol):
    """Read-only view of the bridge that owns the real device session."""

    async def get_status(self) -> StatusInfo:
        """Return the bridge's current status."""
        ...

    async def get_device_catalog(self) -> DeviceCatalog | None:
        """Return all devices known to the bridge, or None if not loaded."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Host facility that runs a job after a delay, in the background."""

    def schedule(self, delay: float, job: Callable[[], Awaitable[None]]) -> asyncio.Task[None]:
        """Run job once after delay seconds without blocking the caller."""
        ...


@runtime_checkable
class CatalogResolver(Protocol):
    """Strategy that finds the configured device in a bridge catalog."""

    def resolve_catalog_entry(self, catalog: DeviceCatalog, device_id: str) -> CatalogEntry | None:
        """Return the matching entry, or None if the device is not in the catalog."""
        ...
