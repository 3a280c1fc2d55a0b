"""Lifecycle state machine for a device reached through a bridge.

The handler validates operator configuration, defers the bridge-dependent
part of initialization to a scheduled one-shot job, tracks the device
status and polls the bridge once the device is operational.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable  # noqa: TC003 - Used at runtime for type hints
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pybridgedevice.const import (
    DEFAULT_INITIALIZATION_DELAY,
    MSG_CHECKING_CONFIGURATION,
    MSG_DEVICE_VANISHED,
    MSG_DISPOSED,
)
from pybridgedevice.exceptions import ConfigurationError, HandlerDisposedError, InvalidStateTransitionError
from pybridgedevice.initializer import DeferredInitializer
from pybridgedevice.models import DeviceKind, HandlerState, StatusDetail, StatusInfo, ThingStatus
from pybridgedevice.parsers import parse_device_configuration
from pybridgedevice.resolvers import get_resolver


if TYPE_CHECKING:
    from collections.abc import Mapping

    from pybridgedevice.models import ChannelRegistration, DeviceConfiguration
    from pybridgedevice.protocols import Bridge, CatalogResolver, Scheduler

_LOGGER = logging.getLogger(__name__)

StatusListener = Callable[["DeviceHandler", StatusInfo], None]

# Target state -> states it may be entered from (None means any non-disposed state)
_ALLOWED_TRANSITIONS: dict[HandlerState, frozenset[HandlerState] | None] = {
    HandlerState.PENDING_CONFIG: None,
    HandlerState.CONFIG_ERROR: frozenset({HandlerState.PENDING_CONFIG}),
    HandlerState.AWAITING_BRIDGE: frozenset({HandlerState.PENDING_CONFIG}),
    HandlerState.INIT_ERROR: frozenset({HandlerState.AWAITING_BRIDGE}),
    HandlerState.OPERATIONAL: frozenset({HandlerState.AWAITING_BRIDGE}),
}


class DeviceHandler:
    """Lifecycle owner of one device that is only reachable through a bridge.

    **Lifecycle:**
    - ``initialize()`` validates configuration synchronously and schedules a
      DeferredInitializer; it never waits on the bridge.
    - The initializer resolves the bridge and the device, then either calls
      the completion hook (device becomes OPERATIONAL) or records an
      initialization error.
    - ``dispose()`` may be called at any time. A job that runs afterwards
      sees the cleared configuration and leaves the handler untouched.

    All status, state, configuration and channel changes happen under one
    asyncio.Lock. Bridge I/O happens outside it.

    Example:
        ```python
        scheduler = AsyncioScheduler()
        handler = DeviceHandler(
            {"deviceId": "ZWayVDev_zway_2-0-37"},
            lambda: bridge,
            scheduler=scheduler,
        )
        handler.add_listener(lambda h, info: print(info.status, info.description))

        await handler.initialize()  # AWAITING_BRIDGE, returns immediately
        await asyncio.sleep(3)  # initializer has run
        print(handler.state, handler.channel)

        await handler.dispose()
        ```

    Attributes:
        status: Latest status reported to listeners.
        state: Current lifecycle state.
        channel: Channel registration, set only while OPERATIONAL.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        bridge_lookup: Callable[[], Bridge | None],
        *,
        scheduler: Scheduler,
        kind: DeviceKind = DeviceKind.VIRTUAL_DEVICE,
        resolver: CatalogResolver | None = None,
        initialization_delay: float = DEFAULT_INITIALIZATION_DELAY,
        poll_interval: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Raw operator configuration (see parse_device_configuration).
            bridge_lookup: Returns the current bridge, or None if there is none.
                Called again on every initialization attempt and poll.
            scheduler: Runs the deferred initializer in the background.
            kind: Device kind, selects the catalog resolution strategy.
            resolver: Optional strategy overriding the one registered for kind.
            initialization_delay: Seconds between initialize() and the bridge check.
            poll_interval: Default seconds between polls once operational. The
                configuration's pollInterval takes precedence. None disables polling.
            logger: Logger for this handler and its initializer.
        """
        self._raw_config = dict(config)
        self._bridge_lookup = bridge_lookup
        self._scheduler = scheduler
        self._kind = kind
        self._resolver = resolver if resolver is not None else get_resolver(kind)
        self._initialization_delay = initialization_delay
        self._default_poll_interval = poll_interval
        self._logger = logger if logger is not None else _LOGGER

        self._lock = asyncio.Lock()
        self._state = HandlerState.UNINITIALIZED
        self._status = StatusInfo(ThingStatus.UNINITIALIZED)
        self._config: DeviceConfiguration | None = None
        self._channel: ChannelRegistration | None = None

        # Bumped on every initialize() and dispose(); jobs from older attempts no-op
        self._generation = 0

        self._listeners: list[StatusListener] = []
        self._poll_task: asyncio.Task[None] | None = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def status(self) -> StatusInfo:
        """Get the latest status."""
        return self._status

    @property
    def state(self) -> HandlerState:
        """Get the lifecycle state."""
        return self._state

    @property
    def configuration(self) -> DeviceConfiguration | None:
        """Get the validated configuration, if any."""
        return self._config

    @property
    def device_id(self) -> str | None:
        """Get the configured device id, None once cleared."""
        if self._config is None or not self._config.device_id:
            return None
        return self._config.device_id

    @property
    def channel(self) -> ChannelRegistration | None:
        """Get the channel registration."""
        return self._channel

    @property
    def kind(self) -> DeviceKind:
        """Get the device kind."""
        return self._kind

    @property
    def is_disposed(self) -> bool:
        """Check if the handler has been disposed."""
        return self._state is HandlerState.DISPOSED

    @property
    def logger(self) -> logging.Logger:
        """Get the logger used by this handler."""
        return self._logger

    @property
    def poll_interval(self) -> float | None:
        """Get the effective poll interval in seconds."""
        if self._config is not None and self._config.poll_interval is not None:
            return self._config.poll_interval
        return self._default_poll_interval

    # -------------------------------------------------------------------------
    # Host-facing lifecycle
    # -------------------------------------------------------------------------

    def get_configuration(self) -> DeviceConfiguration:
        """Parse the operator configuration.

        Raises:
            ConfigurationError: If required fields are missing or invalid.
        """
        return parse_device_configuration(self._raw_config)

    async def initialize(self) -> None:
        """Start a fresh initialization attempt.

        Returns once configuration is checked and the deferred initializer is
        scheduled. A configuration error is reported through the status and
        nothing is scheduled.

        Raises:
            HandlerDisposedError: If the handler was disposed.
        """
        self._logger.debug("Initializing device handler ...")

        async with self._lock:
            if self._state is HandlerState.DISPOSED:
                msg = "Cannot initialize a disposed device handler"
                raise HandlerDisposedError(msg)

            # Drop everything from a previous attempt
            self._generation += 1
            self._channel = None
            poll_task = self._detach_poll_task()

            self._transition(HandlerState.PENDING_CONFIG)
            self._update_status(
                StatusInfo(ThingStatus.OFFLINE, StatusDetail.CONFIGURATION_PENDING, MSG_CHECKING_CONFIGURATION)
            )

            try:
                self._config = self.get_configuration()
            except ConfigurationError as err:
                self._config = None
                self._logger.warning("Invalid device configuration: %s", err)
                self._transition(HandlerState.CONFIG_ERROR)
                self._update_status(StatusInfo(ThingStatus.OFFLINE, StatusDetail.CONFIGURATION_ERROR, str(err)))
            else:
                self._logger.debug("Configuration complete: %s", self._config)
                initializer = DeferredInitializer(self, self._generation)
                self._scheduler.schedule(self._initialization_delay, initializer)
                self._transition(HandlerState.AWAITING_BRIDGE)

        await self._cancel_poll_task(poll_task)

    async def dispose(self) -> None:
        """Tear the handler down.

        Clears the configured device id, drops the channel registration and
        stops polling. Safe to call while an initializer is pending or running,
        and more than once.
        """
        self._logger.debug("Disposing device handler %s ...", self.device_id)

        async with self._lock:
            if self._state is HandlerState.DISPOSED:
                return

            if self._config is not None and self._config.device_id:
                self._config = replace(self._config, device_id="")

            self._generation += 1
            self._channel = None
            poll_task = self._detach_poll_task()
            self._transition(HandlerState.DISPOSED)
            self._update_status(StatusInfo(ThingStatus.UNINITIALIZED, StatusDetail.DISPOSED, MSG_DISPOSED))

        await self._cancel_poll_task(poll_task)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, callback: StatusListener) -> None:
        """Register a callback called with (handler, status) on every status change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusListener) -> None:
        """Unregister a status callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        """Call all listeners with the current status, logging any that raise."""
        for listener in self._listeners:
            try:
                listener(self, self._status)
            except Exception:
                self._logger.exception("Error in status listener for device %s", self.device_id)

    # -------------------------------------------------------------------------
    # Internal hooks (callers hold self._lock)
    # -------------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        """Check that an attempt is still live: not disposed, not superseded, id not cleared."""
        return (
            self._state is not HandlerState.DISPOSED
            and generation == self._generation
            and self.device_id is not None
        )

    def _transition(self, target: HandlerState) -> None:
        """Move to target state.

        Raises:
            InvalidStateTransitionError: If the move is not allowed.
        """
        if target is not HandlerState.DISPOSED:
            allowed = _ALLOWED_TRANSITIONS.get(target)
            if self._state is HandlerState.DISPOSED or (allowed is not None and self._state not in allowed):
                raise InvalidStateTransitionError(self._state, target)

        self._logger.debug("Device handler state %s -> %s", self._state.value, target.value)
        self._state = target

    def _update_status(self, info: StatusInfo) -> None:
        """Record a new status and notify listeners if it changed."""
        if info == self._status:
            return
        self._logger.debug(
            "Device %s status: %s/%s (%s)", self.device_id, info.status.value, info.detail.value, info.description
        )
        self._status = info
        self._notify_listeners()

    def _fail_initialization(self, description: str) -> None:
        """End the current attempt with an initialization error."""
        self._channel = None
        poll_task = self._detach_poll_task()
        if poll_task is not None:
            poll_task.cancel()
        self._transition(HandlerState.INIT_ERROR)
        self._update_status(StatusInfo(ThingStatus.OFFLINE, StatusDetail.HANDLER_INITIALIZING_ERROR, description))

    def _complete_initialization(self, channel: ChannelRegistration) -> None:
        """Register the channel, start polling and go OPERATIONAL.

        Only the deferred initializer calls this.
        """
        self._channel = channel
        if self.poll_interval is not None:
            self._poll_task = asyncio.create_task(self._poll_loop(self._generation, self.poll_interval))
            self._logger.info("Started polling device %s (interval: %ss)", self.device_id, self.poll_interval)
        self._transition(HandlerState.OPERATIONAL)
        self._update_status(StatusInfo(ThingStatus.ONLINE))

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Refresh channel metrics from the bridge catalog.

        Mirrors a bridge outage or a vanished device into the status. Never
        raises for bridge failures.

        Returns:
            True if the channel was updated, False otherwise.
        """
        async with self._lock:
            if self._state is not HandlerState.OPERATIONAL or self.device_id is None:
                return False
            generation = self._generation
            device_id = self.device_id

        try:
            bridge = self._bridge_lookup()
            bridge_status = await bridge.get_status() if bridge is not None else None
            catalog = None
            if bridge is not None and bridge_status is not None and bridge_status.is_online:
                catalog = await bridge.get_device_catalog()
        except Exception:
            self._logger.exception("Error refreshing device %s", device_id)
            return False

        async with self._lock:
            if not self._is_current(generation) or self._channel is None:
                return False

            if bridge_status is None or not bridge_status.is_online:
                description = bridge_status.description if bridge_status is not None else None
                self._update_status(StatusInfo(ThingStatus.OFFLINE, StatusDetail.BRIDGE_OFFLINE, description))
                return False

            if catalog is None:
                self._logger.warning("Bridge returned no devices while refreshing %s", device_id)
                return False

            try:
                entry = self._resolver.resolve_catalog_entry(catalog, device_id)
            except Exception:
                self._logger.exception("Error resolving device %s in bridge catalog", device_id)
                return False

            if entry is None:
                self._update_status(
                    StatusInfo(
                        ThingStatus.OFFLINE,
                        StatusDetail.COMMUNICATION_ERROR,
                        MSG_DEVICE_VANISHED.format(device_id=device_id),
                    )
                )
                return False

            self._channel.metrics = dict(entry.metrics)
            self._channel.label = entry.title
            self._channel.updated_at = datetime.now(UTC)
            self._update_status(StatusInfo(ThingStatus.ONLINE))
            return True

    async def _poll_loop(self, generation: int, interval: float) -> None:
        """Background task that refreshes the channel at regular intervals.

        This runs until cancelled or the attempt it belongs to is superseded.
        """
        try:
            while self._generation == generation:
                await asyncio.sleep(interval)
                try:
                    updated = await self.refresh()
                except Exception:
                    self._logger.exception("Error polling device %s", self.device_id)
                    continue
                if not updated:
                    self._logger.debug("Poll of device %s did not update the channel", self.device_id)
        except asyncio.CancelledError:
            self._logger.debug("Poll loop cancelled for device %s", self.device_id)

    def _detach_poll_task(self) -> asyncio.Task[None] | None:
        """Take ownership of the poll task so it can be cancelled outside the lock."""
        task, self._poll_task = self._poll_task, None
        return task

    async def _cancel_poll_task(self, task: asyncio.Task[None] | None) -> None:
        """Cancel a detached poll task and wait for it to finish."""
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.info("Stopped polling device")

    # -------------------------------------------------------------------------
    # String Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        """Return detailed string representation of handler."""
        return f"DeviceHandler(device_id={self.device_id!r}, kind={self._kind.value}, state={self._state.value})"
