"""Data models for bridge-mediated devices."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


__all__ = [
    "CatalogEntry",
    "ChannelRegistration",
    "DeviceCatalog",
    "DeviceConfiguration",
    "DeviceKind",
    "HandlerState",
    "StatusDetail",
    "StatusInfo",
    "ThingStatus",
]


class ThingStatus(Enum):
    """Host-visible status of a device or bridge."""

    UNINITIALIZED = "UNINITIALIZED"
    INITIALIZING = "INITIALIZING"
    UNKNOWN = "UNKNOWN"
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    REMOVED = "REMOVED"


class StatusDetail(Enum):
    """Reason attached to a ThingStatus."""

    NONE = "NONE"
    CONFIGURATION_PENDING = "CONFIGURATION_PENDING"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    HANDLER_INITIALIZING_ERROR = "HANDLER_INITIALIZING_ERROR"
    BRIDGE_OFFLINE = "BRIDGE_OFFLINE"
    COMMUNICATION_ERROR = "COMMUNICATION_ERROR"
    DISPOSED = "DISPOSED"


class HandlerState(Enum):
    """Lifecycle states of a device handler."""

    UNINITIALIZED = "uninitialized"
    PENDING_CONFIG = "pending_config"
    CONFIG_ERROR = "config_error"  # Terminal until re-initialized
    AWAITING_BRIDGE = "awaiting_bridge"
    INIT_ERROR = "init_error"  # Terminal until re-initialized
    OPERATIONAL = "operational"
    DISPOSED = "disposed"  # Terminal


class DeviceKind(Enum):
    """How the configured identifier is matched against the bridge catalog."""

    VIRTUAL_DEVICE = "virtual_device"
    PHYSICAL_NODE = "physical_node"


@dataclass(frozen=True)
class StatusInfo:
    """Status with detail and free-text description.

    Attributes:
        status: Overall status.
        detail: Reason for the status.
        description: Operator-facing message.
    """

    status: ThingStatus
    detail: StatusDetail = StatusDetail.NONE
    description: str | None = None

    @property
    def is_online(self) -> bool:
        """Check if status is ONLINE."""
        return self.status is ThingStatus.ONLINE


@dataclass(frozen=True)
class DeviceConfiguration:
    """Operator-supplied configuration of one device.

    Attributes:
        device_id: Identifier of the device on the bridge.
        label: Optional display label.
        poll_interval: Seconds between polls once operational, None disables polling.
        extra: Any other operator fields, kept as given.
    """

    device_id: str
    label: str | None = None
    poll_interval: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CatalogEntry:
    """Device record reported by the bridge.

    Attributes:
        device_id: Identifier of the device on the bridge.
        title: Human-readable title from the device metrics.
        device_type: Bridge device type (e.g., "switchBinary").
        probe_type: Optional refinement of the device type (e.g., "temperature").
        node_id: Physical node the device belongs to, if any.
        metrics: Raw metric values (level, scale, icon, ...).
    """

    device_id: str
    title: str
    device_type: str
    probe_type: str | None = None
    node_id: int | None = None
    metrics: Mapping[str, Any] = field(default_factory=dict)


class DeviceCatalog:
    """Snapshot of all devices known to a bridge, keyed by identifier."""

    def __init__(self, entries: list[CatalogEntry] | None = None) -> None:
        """Initialize the catalog.

        Args:
            entries: Catalog entries in bridge order. Later duplicates win.
        """
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries or []:
            self._entries[entry.device_id] = entry

    def get_device_by_id(self, device_id: str) -> CatalogEntry | None:
        """Get the entry for an identifier, or None if the bridge doesn't know it."""
        return self._entries.get(device_id)

    def find(self, predicate: Callable[[CatalogEntry], bool]) -> CatalogEntry | None:
        """Get the first entry (in bridge order) matching a predicate."""
        return next((entry for entry in self._entries.values() if predicate(entry)), None)

    @property
    def device_ids(self) -> list[str]:
        """Get identifiers of all entries."""
        return list(self._entries)

    def __len__(self) -> int:
        """Return number of entries."""
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        """Iterate over entries in bridge order."""
        return iter(self._entries.values())

    def __contains__(self, device_id: object) -> bool:
        """Check if an identifier is in the catalog."""
        return device_id in self._entries

    def __repr__(self) -> str:
        """Return detailed string representation of catalog."""
        return f"DeviceCatalog(devices={len(self._entries)})"


@dataclass
class ChannelRegistration:
    """Mapping from a remote device's metrics to a local observable channel.

    Attributes:
        channel_id: Local channel identifier.
        channel_type: Channel type derived from the bridge device type.
        device_id: Identifier of the remote device.
        label: Channel label, taken from the device title.
        metrics: Latest metric values.
        updated_at: When metrics were last refreshed.
    """

    channel_id: str
    channel_type: str
    device_id: str
    label: str
    metrics: dict[str, Any] = field(default_factory=dict)
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def level(self) -> Any:
        """Get the current level metric, if reported."""
        return self.metrics.get("level")
