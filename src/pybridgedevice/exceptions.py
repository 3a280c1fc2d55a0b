"""Custom exceptions for pybridgedevice library."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from pybridgedevice.models import HandlerState


class BridgeDeviceError(Exception):
    """Base exception for all bridge device errors."""


class ConfigurationError(BridgeDeviceError):
    """Exception raised for missing or invalid operator configuration.

    Attributes:
        parameter_name: Optional name of the offending configuration key.
        value: Optional value that was rejected.
    """

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message.
            parameter_name: Optional name of the offending configuration key.
            value: Optional value that was rejected.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value


class BridgeUnavailableError(BridgeDeviceError):
    """Exception raised when the bridge is absent or not online."""


class CatalogUnavailableError(BridgeDeviceError):
    """Exception raised when the bridge returned no device catalog."""


class DeviceNotFoundError(BridgeDeviceError):
    """Exception raised when the configured device is not in the catalog.

    Attributes:
        device_id: Identifier that could not be resolved.
    """

    def __init__(self, message: str = "", device_id: str | None = None) -> None:
        """Initialize DeviceNotFoundError.

        Args:
            message: Error message.
            device_id: Identifier that could not be resolved.
        """
        super().__init__(message)
        self.device_id = device_id


class UnexpectedFaultError(BridgeDeviceError):
    """Exception wrapping any other fault raised during initialization."""


class ChannelRegistrationError(BridgeDeviceError):
    """Exception raised when a catalog entry cannot be mapped to a channel.

    Attributes:
        device_id: Identifier of the catalog entry.
        device_type: Bridge device type that has no channel mapping.
    """

    def __init__(
        self,
        message: str = "",
        device_id: str | None = None,
        device_type: str | None = None,
    ) -> None:
        """Initialize ChannelRegistrationError.

        Args:
            message: Error message.
            device_id: Identifier of the catalog entry.
            device_type: Bridge device type that has no channel mapping.
        """
        super().__init__(message)
        self.device_id = device_id
        self.device_type = device_type


class CatalogParseError(BridgeDeviceError):
    """Exception raised for malformed device catalog payloads."""


class InvalidStateTransitionError(BridgeDeviceError):
    """Exception raised for a handler state change the state machine forbids.

    Attributes:
        current: State the handler was in.
        target: State that was requested.
    """

    def __init__(self, current: HandlerState, target: HandlerState) -> None:
        """Initialize InvalidStateTransitionError.

        Args:
            current: State the handler was in.
            target: State that was requested.
        """
        super().__init__(f"Invalid handler state transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


class HandlerDisposedError(BridgeDeviceError):
    """Exception raised when a disposed handler is asked to initialize."""
