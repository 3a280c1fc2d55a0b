"""Constants for pybridgedevice library."""

from __future__ import annotations


# Lifecycle timing
DEFAULT_INITIALIZATION_DELAY = 2.0  # seconds - bridge readiness checks can outlast host init timeouts

# Operator configuration keys
CONF_DEVICE_ID = "deviceId"
CONF_LABEL = "label"
CONF_POLL_INTERVAL = "pollInterval"

# Status descriptions
MSG_CHECKING_CONFIGURATION = "Checking configuration and bridge..."
MSG_DEVICE_ID_MISSING = "Device couldn't be created, because the device id is missing."
MSG_BRIDGE_NOT_READY = "Bridge not found or not ONLINE."
MSG_DEVICES_NOT_LOADED = "Devices not loaded"
MSG_DEVICE_NOT_FOUND = "Device with id {device_id} not found."
MSG_CHANNEL_ERROR = "Error occurred when adding device as channel."
MSG_DEVICE_VANISHED = "Device with id {device_id} no longer reported by bridge."
MSG_DISPOSED = "Device handler disposed"

# Bridge device type -> channel type
CHANNEL_TYPES: dict[str, str] = {
    "battery": "battery",
    "doorlock": "doorlock",
    "sensorBinary": "sensorBinary",
    "sensorMultilevel": "sensorMultilevel",
    "switchBinary": "switchBinary",
    "switchMultilevel": "switchMultilevel",
    "switchColor": "switchColor",
    "switchControl": "switchControl",
    "thermostat": "thermostat",
    "toggleButton": "switchBinary",
    "sensorMultiline": "sensorMultiline",
    "sensorDiscrete": "sensorDiscrete",
}

# (device type, probe type) -> channel type, takes precedence over CHANNEL_TYPES
PROBE_CHANNEL_TYPES: dict[tuple[str, str], str] = {
    ("sensorMultilevel", "temperature"): "sensorTemperature",
    ("sensorMultilevel", "luminosity"): "sensorLuminosity",
    ("sensorMultilevel", "humidity"): "sensorHumidity",
    ("sensorMultilevel", "meterElectric_watt"): "sensorMeterW",
    ("sensorMultilevel", "meterElectric_kilowatt_hour"): "sensorMeterKWh",
    ("sensorBinary", "door-window"): "sensorDoorWindow",
    ("sensorBinary", "general_purpose"): "sensorBinary",
    ("sensorBinary", "smoke"): "sensorSmoke",
    ("sensorBinary", "flood"): "sensorFlood",
    ("switchMultilevel", "motor"): "switchBlinds",
    ("switchColor", "switchColor_rgb"): "switchColor",
}
