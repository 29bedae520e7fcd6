"""Core data models used across the registry, negotiator, and CLI."""

from __future__ import annotations

import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class TargetProperties:
    is_server_only: bool = False
    is_client_only: bool = False
    has_editor_only_data: bool = False
    is_aarch64: bool = False
    variant_priority: float = 0.0

    @property
    def platform_name(self) -> str:
        base = "LinuxAArch64" if self.is_aarch64 else "Linux"
        if self.is_server_only:
            return f"{base}Server"
        if self.is_client_only:
            return f"{base}Client"
        if not self.has_editor_only_data:
            return f"{base}NoEditor"
        return base


@dataclass(frozen=True)
class DeviceId:
    platform_name: str
    device_name: str

    def __str__(self) -> str:
        return f"{self.platform_name}@{self.device_name}"


@dataclass(frozen=True)
class Device:
    id: DeviceId
    display_name: str
    username: str | None = None
    password: str | None = None
    is_local: bool = False

    @property
    def name(self) -> str:
        return self.id.device_name

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) or bool(self.password)


@dataclass(frozen=True)
class TargetSettings:
    targeted_shader_formats: tuple[str, ...] = ()
    cook_dxt: bool = True
    cook_bc: bool = True
    cook_etc2: bool = False


@dataclass(frozen=True)
class TextureAsset:
    name: str
    compression: str = "Default"
    has_alpha: bool = False
    layer_count: int = 1


@dataclass(frozen=True)
class SoundAsset:
    name: str
    is_seekable_streaming: bool = False
    is_streaming: bool = False


class DeviceEvent(enum.Enum):
    DISCOVERED = "discovered"
    LOST = "lost"


class TargetFeature(enum.Enum):
    USER_CREDENTIALS = "user_credentials"
    PACKAGING = "packaging"
    CAN_COOK_PACKAGES = "can_cook_packages"
    AUDIO_STREAMING = "audio_streaming"
    DEVICE_OUTPUT_LOG = "device_output_log"
    SOFTWARE_OCCLUSION = "software_occlusion"


class ReadyStatus(enum.IntFlag):
    READY = 0
    SDK_NOT_FOUND = 1
    CODE_UNSUPPORTED = 2
    PLUGINS_UNSUPPORTED = 4


VARIANTS: dict[str, TargetProperties] = {
    props.platform_name: props
    for props in (
        TargetProperties(has_editor_only_data=True, variant_priority=0.0),
        TargetProperties(variant_priority=1.0),
        TargetProperties(is_client_only=True, variant_priority=0.0),
        TargetProperties(is_server_only=True, variant_priority=0.0),
        TargetProperties(is_aarch64=True, variant_priority=1.0),
        TargetProperties(is_aarch64=True, is_client_only=True, variant_priority=0.0),
        TargetProperties(is_aarch64=True, is_server_only=True, variant_priority=0.0),
    )
}
