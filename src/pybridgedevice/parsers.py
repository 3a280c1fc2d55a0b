"""Parsing utilities for operator configuration and bridge device records.

This module converts raw mappings (operator configuration, bridge device
lists) into data models. Configuration parsing fails closed: anything
required that is missing or unusable raises ConfigurationError.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pybridgedevice.const import CONF_DEVICE_ID, CONF_LABEL, CONF_POLL_INTERVAL, MSG_DEVICE_ID_MISSING
from pybridgedevice.exceptions import CatalogParseError, ConfigurationError
from pybridgedevice.models import CatalogEntry, DeviceCatalog, DeviceConfiguration


__all__ = [
    "parse_catalog_entry",
    "parse_device_catalog",
    "parse_device_configuration",
]


def parse_device_configuration(raw: Mapping[str, Any]) -> DeviceConfiguration:
    """Parse operator configuration into a DeviceConfiguration.

    Args:
        raw: Operator configuration, e.g. {"deviceId": "ZWayVDev_zway_2-0-37", "pollInterval": 30}.

    Returns:
        DeviceConfiguration. The device id is validated on its stripped form
        but kept exactly as configured.

    Raises:
        ConfigurationError: If the device id is missing or blank, or the poll
            interval is not a positive, finite number.
    """
    device_id = raw.get(CONF_DEVICE_ID)
    if not isinstance(device_id, str) or not device_id.strip():
        raise ConfigurationError(MSG_DEVICE_ID_MISSING, parameter_name=CONF_DEVICE_ID, value=device_id)

    poll_interval = raw.get(CONF_POLL_INTERVAL)
    if poll_interval is not None:
        # bool is an int subclass, reject it explicitly
        if (
            isinstance(poll_interval, bool)
            or not isinstance(poll_interval, int | float)
            or not math.isfinite(poll_interval)
            or poll_interval <= 0
        ):
            msg = f"Poll interval must be a positive, finite number of seconds, got {poll_interval!r}"
            raise ConfigurationError(msg, parameter_name=CONF_POLL_INTERVAL, value=poll_interval)
        poll_interval = float(poll_interval)

    label = raw.get(CONF_LABEL)
    extra = {key: value for key, value in raw.items() if key not in (CONF_DEVICE_ID, CONF_LABEL, CONF_POLL_INTERVAL)}

    return DeviceConfiguration(
        device_id=device_id,
        label=str(label) if label is not None else None,
        poll_interval=poll_interval,
        extra=extra,
    )


def parse_catalog_entry(data: Mapping[str, Any]) -> CatalogEntry:
    """Parse one bridge device record.

    Args:
        data: Raw record in format:
              {"id": str, "deviceType": str, "probeType": str, "nodeId": int,
               "metrics": {"title": str, "level": ..., ...}}

    Returns:
        CatalogEntry snapshot of the record.

    Raises:
        CatalogParseError: If the record is not a mapping, has no usable id or
            device type, or carries a malformed probe type, node id or metrics.
    """
    if not isinstance(data, Mapping):
        msg = f"Device record must be a mapping, got {type(data).__name__}"
        raise CatalogParseError(msg)

    device_id = data.get("id")
    if not isinstance(device_id, str) or not device_id:
        msg = f"Device record without id: {data!r}"
        raise CatalogParseError(msg)

    device_type = data.get("deviceType")
    if not isinstance(device_type, str) or not device_type:
        msg = f"Device record {device_id} has no device type: {device_type!r}"
        raise CatalogParseError(msg)

    metrics = data.get("metrics")
    if metrics is None:
        metrics = {}
    elif not isinstance(metrics, Mapping):
        msg = f"Device record {device_id} has metrics of type {type(metrics).__name__}, expected a mapping"
        raise CatalogParseError(msg)

    probe_type = data.get("probeType") or None
    if probe_type is not None and not isinstance(probe_type, str):
        msg = f"Device record {device_id} has an invalid probe type: {probe_type!r}"
        raise CatalogParseError(msg)

    node_id = data.get("nodeId")
    if node_id is not None:
        # bool is an int subclass, reject it explicitly
        if isinstance(node_id, bool):
            msg = f"Device record {device_id} has an invalid node id: {node_id!r}"
            raise CatalogParseError(msg)
        try:
            node_id = int(node_id)
        except (TypeError, ValueError) as err:
            msg = f"Device record {device_id} has an invalid node id: {node_id!r}"
            raise CatalogParseError(msg) from err

    title = metrics.get("title")

    return CatalogEntry(
        device_id=device_id,
        title=str(title) if title else device_id,
        device_type=device_type,
        probe_type=probe_type,
        node_id=node_id,
        metrics=dict(metrics),
    )


def parse_device_catalog(data: Mapping[str, Any] | list[Mapping[str, Any]] | None) -> DeviceCatalog | None:
    """Parse a bridge device list into a DeviceCatalog.

    Args:
        data: Either a list of device records or a payload of the form
              {"devices": [...]}. None means the bridge has no device data.

    Returns:
        DeviceCatalog, or None if no device data was given.

    Raises:
        CatalogParseError: If the payload has the wrong shape or a record is malformed.
    """
    if data is None:
        return None

    records = data.get("devices") if isinstance(data, Mapping) else data
    if not isinstance(records, list):
        msg = f"Expected a list of device records, got {type(records).__name__}"
        raise CatalogParseError(msg)

    return DeviceCatalog([parse_catalog_entry(record) for record in records])
