"""Channel registration for resolved catalog entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pybridgedevice.const import CHANNEL_TYPES, PROBE_CHANNEL_TYPES
from pybridgedevice.exceptions import ChannelRegistrationError
from pybridgedevice.models import ChannelRegistration


if TYPE_CHECKING:
    from pybridgedevice.models import CatalogEntry


__all__ = [
    "build_channel_registration",
    "channel_type_for",
]


def channel_type_for(entry: CatalogEntry) -> str | None:
    """Get the channel type for a catalog entry, or None if unsupported.

    A (device type, probe type) mapping wins over the plain device type.
    """
    if entry.probe_type is not None:
        channel_type = PROBE_CHANNEL_TYPES.get((entry.device_type, entry.probe_type))
        if channel_type is not None:
            return channel_type
    return CHANNEL_TYPES.get(entry.device_type)


def build_channel_registration(entry: CatalogEntry) -> ChannelRegistration:
    """Build the channel registration for a catalog entry.

    Args:
        entry: Resolved catalog entry.

    Returns:
        ChannelRegistration labelled with the entry title.

    Raises:
        ChannelRegistrationError: If the entry's device type has no channel mapping.
    """
    channel_type = channel_type_for(entry)
    if channel_type is None:
        msg = f"Unsupported device type {entry.device_type!r} for device {entry.device_id}"
        raise ChannelRegistrationError(msg, device_id=entry.device_id, device_type=entry.device_type)

    return ChannelRegistration(
        channel_id=f"{channel_type}-{entry.device_id}",
        channel_type=channel_type,
        device_id=entry.device_id,
        label=entry.title,
        metrics=dict(entry.metrics),
    )
