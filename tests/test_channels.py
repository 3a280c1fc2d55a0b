"""Tests for channel registration."""

import pytest

from pybridgedevice.channels import build_channel_registration, channel_type_for
from pybridgedevice.exceptions import ChannelRegistrationError
from pybridgedevice.models import CatalogEntry, ChannelRegistration


class TestChannelTypeFor:
    """Tests for channel_type_for function."""

    @pytest.mark.parametrize(
        ("device_type", "probe_type", "expected"),
        [
            ("switchBinary", None, "switchBinary"),
            ("toggleButton", None, "switchBinary"),
            ("sensorMultilevel", "temperature", "sensorTemperature"),
            ("sensorMultilevel", "unlisted_probe", "sensorMultilevel"),
            ("switchMultilevel", "motor", "switchBlinds"),
            ("sensorBinary", "door-window", "sensorDoorWindow"),
            ("unknownWidget", None, None),
        ],
    )
    def test_mapping(self, device_type: str, probe_type: str | None, expected: str | None) -> None:
        """Test probe types refine device types and unknown types map to None."""
        entry = CatalogEntry("device-1", "Device", device_type, probe_type=probe_type)

        assert channel_type_for(entry) == expected


class TestBuildChannelRegistration:
    """Tests for build_channel_registration function."""

    def test_build(self) -> None:
        """Test a registration carries the title and a copy of the metrics."""
        metrics = {"title": "Kitchen Light", "level": "on"}
        entry = CatalogEntry("device-42", "Kitchen Light", "switchBinary", metrics=metrics)

        channel = build_channel_registration(entry)

        assert isinstance(channel, ChannelRegistration)
        assert channel.channel_id == "switchBinary-device-42"
        assert channel.channel_type == "switchBinary"
        assert channel.device_id == "device-42"
        assert channel.label == "Kitchen Light"
        assert channel.level == "on"
        channel.metrics["level"] = "off"
        assert metrics["level"] == "on"

    def test_unsupported_type(self) -> None:
        """Test an unmapped device type raises with context."""
        entry = CatalogEntry("device-42", "Mystery", "unknownWidget")

        with pytest.raises(ChannelRegistrationError) as exc_info:
            build_channel_registration(entry)

        assert exc_info.value.device_id == "device-42"
        assert exc_info.value.device_type == "unknownWidget"
