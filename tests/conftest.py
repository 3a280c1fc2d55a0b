"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pybridgedevice.handler import DeviceHandler
from pybridgedevice.models import CatalogEntry, DeviceCatalog, StatusInfo, ThingStatus


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class ManualScheduler:
    """Scheduler that records jobs and runs them only when told to."""

    def __init__(self) -> None:
        """Initialize with no jobs."""
        self.jobs: list[tuple[float, Callable[[], Awaitable[None]]]] = []

    def schedule(self, delay: float, job: Callable[[], Awaitable[None]]) -> Any:
        """Record the job instead of running it."""
        self.jobs.append((delay, job))
        return MagicMock()

    async def run_pending(self) -> None:
        """Run every recorded job once, in scheduling order."""
        jobs, self.jobs = self.jobs, []
        for _, job in jobs:
            await job()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Create a manual scheduler."""
    return ManualScheduler()


@pytest.fixture
def kitchen_light() -> CatalogEntry:
    """Create a catalog entry for a binary switch."""
    return CatalogEntry(
        device_id="device-42",
        title="Kitchen Light",
        device_type="switchBinary",
        node_id=2,
        metrics={"title": "Kitchen Light", "level": "on", "icon": "switch"},
    )


@pytest.fixture
def catalog(kitchen_light: CatalogEntry) -> DeviceCatalog:
    """Create a catalog containing the kitchen light and a sensor."""
    return DeviceCatalog(
        [
            kitchen_light,
            CatalogEntry(
                device_id="device-43",
                title="Hallway Temperature",
                device_type="sensorMultilevel",
                probe_type="temperature",
                node_id=3,
                metrics={"title": "Hallway Temperature", "level": 21.5, "scaleTitle": "°C"},
            ),
        ]
    )


@pytest.fixture
def bridge(catalog: DeviceCatalog) -> AsyncMock:
    """Create a mock bridge that is ONLINE and serves the catalog."""
    bridge = AsyncMock()
    bridge.get_status = AsyncMock(return_value=StatusInfo(ThingStatus.ONLINE))
    bridge.get_device_catalog = AsyncMock(return_value=catalog)
    return bridge


@pytest.fixture
def make_handler(bridge: AsyncMock, scheduler: ManualScheduler) -> Callable[..., DeviceHandler]:
    """Create a factory for handlers wired to the mock bridge and manual scheduler."""

    def factory(config: dict[str, Any] | None = None, **kwargs: Any) -> DeviceHandler:
        kwargs.setdefault("scheduler", scheduler)
        return DeviceHandler(
            config if config is not None else {"deviceId": "device-42"},
            lambda: bridge,
            **kwargs,
        )

    return factory
