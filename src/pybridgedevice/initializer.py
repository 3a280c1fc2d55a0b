"""One-shot delayed job that finishes a device handler's initialization."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from pybridgedevice.channels import build_channel_registration
from pybridgedevice.const import (
    MSG_BRIDGE_NOT_READY,
    MSG_CHANNEL_ERROR,
    MSG_DEVICE_NOT_FOUND,
    MSG_DEVICES_NOT_LOADED,
)
from pybridgedevice.exceptions import (
    BridgeUnavailableError,
    CatalogUnavailableError,
    ChannelRegistrationError,
    DeviceNotFoundError,
    UnexpectedFaultError,
)
from pybridgedevice.models import HandlerState


if TYPE_CHECKING:
    from collections.abc import Callable

    from pybridgedevice.handler import DeviceHandler


class DeferredInitializer:
    """Resolve bridge readiness and device presence for one initialization attempt.

    The job runs once. It has no retry loop: a failed attempt leaves the
    handler in INIT_ERROR until the host calls initialize() again.

    Steps:
    1. Bridge missing or not ONLINE -> INIT_ERROR "Bridge not found or not ONLINE."
    2. Mirror the bridge status onto the handler.
    3. No catalog -> INIT_ERROR "Devices not loaded".
    4. Device not in catalog -> INIT_ERROR naming the device id.
    5. Build the channel registration and complete initialization.

    Any other exception is logged and turned into INIT_ERROR. Nothing but
    cancellation escapes to the scheduler. Every handler mutation re-checks,
    under the handler lock, that the handler was neither disposed nor
    re-initialized since this job was scheduled.
    """

    def __init__(self, handler: DeviceHandler, generation: int) -> None:
        """Initialize the job.

        Args:
            handler: Handler to complete.
            generation: Attempt this job belongs to.
        """
        self._handler = handler
        self._generation = generation
        self._logger = handler.logger

    async def __call__(self) -> None:
        """Run the job. Always returns normally unless cancelled."""
        handler = self._handler

        async with handler._lock:  # noqa: SLF001
            if not handler._is_current(self._generation):  # noqa: SLF001
                self._logger.debug("Device handler disposed or re-initialized, skipping deferred initialization")
                return
            device_id = handler.device_id

        try:
            await self._initialize_device(device_id)
        except asyncio.CancelledError:
            raise
        except (BridgeUnavailableError, CatalogUnavailableError, DeviceNotFoundError) as err:
            self._logger.warning("Initializing device handler failed for %s: %s", device_id, err)
            await self._apply(lambda: handler._fail_initialization(str(err)))  # noqa: SLF001
        except Exception as err:
            self._logger.exception("Error occurred when adding device %s as channel", device_id)
            await self._apply(lambda: self._downgrade(err))

    async def _initialize_device(self, device_id: str) -> None:
        """Resolve the bridge and the device, then complete the handler.

        Raises:
            BridgeUnavailableError: If the bridge is missing or not ONLINE.
            CatalogUnavailableError: If the bridge returned no catalog.
            DeviceNotFoundError: If the device is not in the catalog.
            UnexpectedFaultError: If the device cannot be registered as a channel.
        """
        handler = self._handler

        bridge = handler._bridge_lookup()  # noqa: SLF001
        bridge_status = await bridge.get_status() if bridge is not None else None
        if bridge is None or bridge_status is None or not bridge_status.is_online:
            raise BridgeUnavailableError(MSG_BRIDGE_NOT_READY)

        # The device is never more online than its bridge
        self._logger.debug("Change device status to bridge status: %s", bridge_status.status.value)
        if not await self._apply(lambda: handler._update_status(bridge_status)):  # noqa: SLF001
            return

        catalog = await bridge.get_device_catalog()
        if catalog is None:
            raise CatalogUnavailableError(MSG_DEVICES_NOT_LOADED)
        self._logger.debug("Bridge devices loaded (%d devices)", len(catalog))

        entry = handler._resolver.resolve_catalog_entry(catalog, device_id)  # noqa: SLF001
        if entry is None:
            msg = MSG_DEVICE_NOT_FOUND.format(device_id=device_id)
            raise DeviceNotFoundError(msg, device_id=device_id)

        self._logger.debug("Add channel for device: %s", entry.title)
        try:
            channel = build_channel_registration(entry)
        except ChannelRegistrationError as err:
            raise UnexpectedFaultError(MSG_CHANNEL_ERROR) from err

        # Starts polling and goes OPERATIONAL
        await self._apply(lambda: handler._complete_initialization(channel))  # noqa: SLF001

    def _downgrade(self, err: Exception) -> None:
        """Turn an unexpected fault into INIT_ERROR for a still-running attempt."""
        handler = self._handler
        if handler.state is not HandlerState.AWAITING_BRIDGE:
            return
        if handler.status.is_online:
            handler._fail_initialization(MSG_CHANNEL_ERROR)  # noqa: SLF001
        else:
            handler._fail_initialization(f"Initialization failed: {err}")  # noqa: SLF001

    async def _apply(self, mutation: Callable[[], None]) -> bool:
        """Run a handler mutation under its lock if this attempt is still current.

        Returns:
            True if the mutation ran, False if the attempt was abandoned.
        """
        handler = self._handler
        async with handler._lock:  # noqa: SLF001
            if not handler._is_current(self._generation):  # noqa: SLF001
                self._logger.debug("Device handler disposed or re-initialized, abandoning deferred initialization")
                return False
            mutation()
            return True

    def __repr__(self) -> str:
        """Return detailed string representation of job."""
        return f"DeferredInitializer(handler={self._handler!r}, generation={self._generation})"
