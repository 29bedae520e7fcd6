"""Domain-specific errors for targetctl."""


class TargetctlError(Exception):
    """Base error for targetctl."""


class ConfigLoadError(TargetctlError):
    """Raised when a config layer cannot be read or written."""


class ConfigValidationError(TargetctlError):
    """Raised when a config layer does not conform to schema or value types."""


class UnknownVariantError(TargetctlError):
    """Raised when a target variant name is not registered."""


class DeviceNotFoundError(TargetctlError):
    """Raised when a device lookup by name cannot be resolved."""


class PlatformIdentificationError(TargetctlError):
    """Raised when the host system cannot be mapped to a toolchain lookup rule."""
