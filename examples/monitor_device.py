"""Example: bring a bridged device online and watch its status."""

import asyncio
import logging

from pybridgedevice import (
    AsyncioScheduler,
    DeviceCatalog,
    DeviceHandler,
    StatusInfo,
    ThingStatus,
    parse_device_catalog,
)


class InMemoryBridge:
    """Bridge serving a fixed device list, standing in for a real controller."""

    def __init__(self, devices: list[dict]) -> None:
        """Initialize with raw device records."""
        self._devices = devices

    async def get_status(self) -> StatusInfo:
        """Report the bridge as online."""
        return StatusInfo(ThingStatus.ONLINE)

    async def get_device_catalog(self) -> DeviceCatalog | None:
        """Return the device list as a catalog."""
        return parse_device_catalog(self._devices)


def on_status(handler: DeviceHandler, info: StatusInfo) -> None:
    """Print every status change."""
    print(f"[{handler.device_id}] {info.status.value}/{info.detail.value}: {info.description or ''}")


async def main() -> None:
    """Initialize one found and one missing device, then dispose both."""
    logging.basicConfig(level=logging.INFO)

    bridge = InMemoryBridge(
        [
            {"id": "device-42", "deviceType": "switchBinary", "metrics": {"title": "Kitchen Light", "level": "on"}},
        ]
    )
    scheduler = AsyncioScheduler()

    handlers = [
        DeviceHandler({"deviceId": "device-42", "pollInterval": 1}, lambda: bridge, scheduler=scheduler),
        DeviceHandler({"deviceId": "missing-id"}, lambda: bridge, scheduler=scheduler),
    ]
    for handler in handlers:
        handler.add_listener(on_status)
        await handler.initialize()

    # Default initialization delay is 2 seconds
    await asyncio.sleep(3)

    for handler in handlers:
        print(f"{handler!r} channel={handler.channel}")
        await handler.dispose()

    await scheduler.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
