"""Catalog resolution strategies, one per device kind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pybridgedevice.exceptions import ConfigurationError
from pybridgedevice.models import DeviceKind


if TYPE_CHECKING:
    from pybridgedevice.models import CatalogEntry, DeviceCatalog
    from pybridgedevice.protocols import CatalogResolver

_LOGGER = logging.getLogger(__name__)


class VirtualDeviceResolver:
    """Resolve a device by its exact bridge identifier."""

    def resolve_catalog_entry(self, catalog: DeviceCatalog, device_id: str) -> CatalogEntry | None:
        """Return the entry with the given identifier."""
        return catalog.get_device_by_id(device_id)


class PhysicalNodeResolver:
    """Resolve a physical node to the first catalog entry it exposes.

    The configured identifier is the node id as a string (e.g., "5").
    """

    def resolve_catalog_entry(self, catalog: DeviceCatalog, device_id: str) -> CatalogEntry | None:
        """Return the first entry (in bridge order) belonging to the node."""
        try:
            node_id = int(device_id)
        except ValueError:
            _LOGGER.warning("Node id is not numeric: %s", device_id)
            return None
        return catalog.find(lambda entry: entry.node_id == node_id)


_RESOLVERS: dict[DeviceKind, CatalogResolver] = {
    DeviceKind.VIRTUAL_DEVICE: VirtualDeviceResolver(),
    DeviceKind.PHYSICAL_NODE: PhysicalNodeResolver(),
}


def get_resolver(kind: DeviceKind) -> CatalogResolver:
    """Get the resolution strategy for a device kind.

    Raises:
        ConfigurationError: If no strategy is registered for the kind.
    """
    try:
        return _RESOLVERS[kind]
    except KeyError:
        msg = f"No catalog resolver for device kind {kind!r}"
        raise ConfigurationError(msg, parameter_name="kind", value=kind) from None
