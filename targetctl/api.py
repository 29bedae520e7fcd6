"""Stable public API for building tooling on top of targetctl.

This module is the supported integration surface for cook/build pipelines and
other third-party callers. Avoid importing from ``targetctl.core`` directly
unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from pathlib import Path

from targetctl.core.config_store import ConfigStore, load_config_store
from targetctl.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    DeviceNotFoundError,
    PlatformIdentificationError,
    TargetctlError,
    UnknownVariantError,
)
from targetctl.core.format_catalog import DefaultFormatResolver, StaticFormatResolver
from targetctl.core.host import HostInfo
from targetctl.core.model import (
    Device,
    DeviceEvent,
    DeviceId,
    ReadyStatus,
    SoundAsset,
    TargetFeature,
    TargetProperties,
    TargetSettings,
    TextureAsset,
)
from targetctl.core.module import TargetPlatformModule
from targetctl.core.target_platform import TargetPlatform

__all__ = [
    "TargetctlError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DeviceNotFoundError",
    "PlatformIdentificationError",
    "UnknownVariantError",
    "ConfigStore",
    "DefaultFormatResolver",
    "StaticFormatResolver",
    "HostInfo",
    "Device",
    "DeviceEvent",
    "DeviceId",
    "ReadyStatus",
    "SoundAsset",
    "TargetFeature",
    "TargetProperties",
    "TargetSettings",
    "TextureAsset",
    "TargetPlatform",
    "Client",
]


class Client:
    """Public client wrapping config loading and per-variant platform access.

    A `Client` owns a `TargetPlatformModule`, so every variant is built at most
    once and shares the same config store for the lifetime of the client.
    """

    def __init__(
        self,
        *,
        project_dir: Path | None = None,
        store: ConfigStore | None = None,
        host: HostInfo | None = None,
    ) -> None:
        if store is None:
            store = load_config_store(project_dir)
        self._module = TargetPlatformModule(store, host=host)
        self._module.startup()

    @property
    def store(self) -> ConfigStore:
        return self._module.store

    def variants(self) -> list[str]:
        return self._module.variants()

    def platform(self, variant: str = "Linux") -> TargetPlatform:
        return self._module.get_target_platform(variant)

    def require_device(self, name: str, *, variant: str = "Linux") -> Device:
        platform = self.platform(variant)
        device = platform.get_device(DeviceId(platform.platform_name, name))
        if device is None:
            known = ", ".join(d.name for d in platform.get_all_devices()) or "<none>"
            raise DeviceNotFoundError(f"No device named '{name}' for {variant}. Known: {known}")
        return device

    def close(self) -> None:
        self._module.shutdown()
