"""Lifecycle handling for devices reached through a bridge.

A bridge owns the real session to a home automation controller. Devices
behind it have no endpoint of their own, so a device can only become
operational once the bridge is ready and lists the device in its catalog.

The library is organized into three layers:
1. **Handler** (pybridgedevice.handler): State machine for one device
2. **Initializer** (pybridgedevice.initializer): Delayed one-shot bridge and catalog resolution
3. **Collaborators** (pybridgedevice.protocols, pybridgedevice.scheduler): Bridge and scheduler seams

Example:
    ```python
    from pybridgedevice import AsyncioScheduler, DeviceHandler

    scheduler = AsyncioScheduler()
    handler = DeviceHandler({"deviceId": "device-42"}, lambda: bridge, scheduler=scheduler)

    await handler.initialize()
    # ... two seconds later the handler is OPERATIONAL, or reports why not
    print(handler.status)

    await handler.dispose()
    ```
"""

from __future__ import annotations

from pybridgedevice.channels import build_channel_registration, channel_type_for
from pybridgedevice.exceptions import (
    BridgeDeviceError,
    BridgeUnavailableError,
    CatalogParseError,
    CatalogUnavailableError,
    ChannelRegistrationError,
    ConfigurationError,
    DeviceNotFoundError,
    HandlerDisposedError,
    InvalidStateTransitionError,
    UnexpectedFaultError,
)
from pybridgedevice.handler import DeviceHandler
from pybridgedevice.initializer import DeferredInitializer
from pybridgedevice.models import (
    CatalogEntry,
    ChannelRegistration,
    DeviceCatalog,
    DeviceConfiguration,
    DeviceKind,
    HandlerState,
    StatusDetail,
    StatusInfo,
    ThingStatus,
)
from pybridgedevice.parsers import parse_catalog_entry, parse_device_catalog, parse_device_configuration
from pybridgedevice.protocols import Bridge, CatalogResolver, Scheduler
from pybridgedevice.resolvers import PhysicalNodeResolver, VirtualDeviceResolver, get_resolver
from pybridgedevice.scheduler import AsyncioScheduler


__version__ = "0.1.0"

__all__ = [
    "AsyncioScheduler",
    "Bridge",
    "BridgeDeviceError",
    "BridgeUnavailableError",
    "CatalogEntry",
    "CatalogParseError",
    "CatalogResolver",
    "CatalogUnavailableError",
    "ChannelRegistration",
    "ChannelRegistrationError",
    "ConfigurationError",
    "DeferredInitializer",
    "DeviceCatalog",
    "DeviceConfiguration",
    "DeviceHandler",
    "DeviceKind",
    "DeviceNotFoundError",
    "HandlerDisposedError",
    "HandlerState",
    "InvalidStateTransitionError",
    "PhysicalNodeResolver",
    "Scheduler",
    "StatusDetail",
    "StatusInfo",
    "ThingStatus",
    "UnexpectedFaultError",
    "VirtualDeviceResolver",
    "__version__",
    "build_channel_registration",
    "channel_type_for",
    "get_resolver",
    "parse_catalog_entry",
    "parse_device_catalog",
    "parse_device_configuration",
]
