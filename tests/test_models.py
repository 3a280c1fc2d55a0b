"""Tests for data models."""

from dataclasses import FrozenInstanceError, replace

import pytest

from pybridgedevice.models import (
    CatalogEntry,
    ChannelRegistration,
    DeviceCatalog,
    DeviceConfiguration,
    StatusDetail,
    StatusInfo,
    ThingStatus,
)


class TestStatusInfo:
    """Tests for StatusInfo."""

    def test_defaults(self) -> None:
        """Test detail and description defaults."""
        info = StatusInfo(ThingStatus.ONLINE)

        assert info.detail is StatusDetail.NONE
        assert info.description is None
        assert info.is_online is True

    def test_offline_is_not_online(self) -> None:
        """Test only ONLINE counts as online."""
        assert StatusInfo(ThingStatus.OFFLINE, StatusDetail.BRIDGE_OFFLINE).is_online is False

    def test_equality(self) -> None:
        """Test status values compare by content."""
        assert StatusInfo(ThingStatus.OFFLINE, StatusDetail.NONE, "x") == StatusInfo(ThingStatus.OFFLINE, description="x")


class TestDeviceConfiguration:
    """Tests for DeviceConfiguration."""

    def test_frozen(self) -> None:
        """Test a validated configuration cannot be mutated in place."""
        config = DeviceConfiguration(device_id="device-42")

        with pytest.raises(FrozenInstanceError):
            config.device_id = ""  # type: ignore[misc]

    def test_cleared_copy(self) -> None:
        """Test clearing produces a copy with an empty id and the other fields kept."""
        config = DeviceConfiguration(device_id="device-42", label="Kitchen", poll_interval=10.0)

        cleared = replace(config, device_id="")

        assert cleared.device_id == ""
        assert cleared.label == "Kitchen"
        assert config.device_id == "device-42"


class TestDeviceCatalog:
    """Tests for DeviceCatalog."""

    def test_lookup_and_iteration(self) -> None:
        """Test lookup by id and iteration in bridge order."""
        first = CatalogEntry("b", "B", "switchBinary", node_id=1)
        second = CatalogEntry("a", "A", "switchBinary", node_id=1)
        catalog = DeviceCatalog([first, second])

        assert catalog.get_device_by_id("a") is second
        assert catalog.get_device_by_id("c") is None
        assert list(catalog) == [first, second]
        assert catalog.device_ids == ["b", "a"]
        assert "b" in catalog
        assert len(catalog) == 2

    def test_find_first_match(self) -> None:
        """Test find returns the first matching entry."""
        first = CatalogEntry("b", "B", "switchBinary", node_id=1)
        second = CatalogEntry("a", "A", "switchBinary", node_id=1)
        catalog = DeviceCatalog([first, second])

        assert catalog.find(lambda entry: entry.node_id == 1) is first
        assert catalog.find(lambda entry: entry.node_id == 2) is None

    def test_empty(self) -> None:
        """Test an empty catalog."""
        catalog = DeviceCatalog()

        assert len(catalog) == 0
        assert repr(catalog) == "DeviceCatalog(devices=0)"


class TestChannelRegistration:
    """Tests for ChannelRegistration."""

    def test_level(self) -> None:
        """Test level reads the level metric."""
        channel = ChannelRegistration("switchBinary-d", "switchBinary", "d", "D", metrics={"level": "on"})

        assert channel.level == "on"

    def test_level_missing(self) -> None:
        """Test level is None when not reported."""
        channel = ChannelRegistration("switchBinary-d", "switchBinary", "d", "D")

        assert channel.level is None
