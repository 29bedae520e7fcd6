"""Query surface used by the cook/build pipeline for one target variant."""

from __future__ import annotations

from targetctl.core.config_store import ConfigStore
from targetctl.core.device_registry import DeviceRegistry
from targetctl.core.events import DeviceCallback, EventHub
from targetctl.core.format_catalog import (
    DefaultFormatResolver,
    StaticFormatResolver,
    possible_shader_formats,
    reflection_capture_formats,
    requires_encoded_hdr,
)
from targetctl.core.format_negotiator import (
    all_wave_formats,
    filter_targeted_shader_formats,
    negotiate_all_texture_formats,
    negotiate_layer_formats,
    select_wave_format,
)
from targetctl.core.host import SDK_DOCUMENTATION_PATH, HostInfo, is_sdk_installed
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
from targetctl.core.settings import load_target_settings


class TargetPlatform:
    def __init__(
        self,
        properties: TargetProperties,
        store: ConfigStore,
        *,
        host: HostInfo | None = None,
        resolver: DefaultFormatResolver | None = None,
    ) -> None:
        self.properties = properties
        self.store = store
        self.host = host or HostInfo.detect()
        self.resolver = resolver or StaticFormatResolver()
        self.events = EventHub()
        self.devices = DeviceRegistry(
            self.platform_name,
            store,
            self.host,
            events=self.events,
            detect_local=not properties.is_aarch64,
        )
        # computed once; later edits to TargetedRHIs do not change it
        self._requires_encoded_hdr = requires_encoded_hdr(self.targeted_shader_formats())

    @property
    def platform_name(self) -> str:
        return self.properties.platform_name

    def settings(self) -> TargetSettings:
        return load_target_settings(self.store)

    def add_device(
        self,
        name: str,
        display_name: str = "",
        username: str = "",
        password: str = "",
        is_default: bool = False,
    ) -> bool:
        return self.devices.add_device(name, display_name, username, password, is_default)

    def get_device(self, device_id: DeviceId) -> Device | None:
        return self.devices.get_device(device_id)

    def get_all_devices(self) -> list[Device]:
        return self.devices.get_all_devices()

    def get_default_device(self) -> Device | None:
        return self.devices.get_default_device()

    def on_device_discovered(self, callback: DeviceCallback) -> int:
        return self.events.subscribe(DeviceEvent.DISCOVERED, callback)

    def on_device_lost(self, callback: DeviceCallback) -> int:
        return self.events.subscribe(DeviceEvent.LOST, callback)

    def is_running_platform(self) -> bool:
        # only an editor running on Linux counts as running this platform
        return self.host.is_linux and self.host.is_editor and self.properties.has_editor_only_data

    def supports_feature(self, feature: TargetFeature) -> bool:
        if feature in (TargetFeature.USER_CREDENTIALS, TargetFeature.PACKAGING):
            return True
        if feature is TargetFeature.CAN_COOK_PACKAGES:
            return self.properties.has_editor_only_data
        if feature is TargetFeature.AUDIO_STREAMING:
            return not self.properties.is_server_only
        return False

    def supports_variants(self) -> bool:
        return True

    def variant_title(self) -> str:
        return "Build Type"

    def variant_display_name(self) -> str:
        if self.properties.is_server_only:
            return "Dedicated Server"
        if self.properties.has_editor_only_data:
            return "Client with Editor Data"
        if self.properties.is_client_only:
            return "Client only"
        return "Client"

    def variant_priority(self) -> float:
        return self.properties.variant_priority

    def is_sdk_installed(self, project_has_code: bool = False) -> tuple[bool, str]:
        return is_sdk_installed(self.host), SDK_DOCUMENTATION_PATH

    def check_requirements(self, project_has_code: bool, requires_temp_target: bool = False) -> ReadyStatus:
        status = ReadyStatus.READY
        installed, _ = self.is_sdk_installed(project_has_code)
        if not installed:
            status |= ReadyStatus.SDK_NOT_FOUND

        # installed builds on other hosts may lack the libraries needed for code projects
        if not self.host.is_linux and not self.host.installed_code_support:
            if project_has_code:
                status |= ReadyStatus.CODE_UNSUPPORTED
            if requires_temp_target:
                status |= ReadyStatus.PLUGINS_UNSUPPORTED
        return status

    def possible_shader_formats(self) -> list[str]:
        return list(possible_shader_formats(self.properties))

    def targeted_shader_formats(self) -> list[str]:
        # reread on every call so settings edits apply to the next query
        requested = self.settings().targeted_shader_formats
        return filter_targeted_shader_formats(requested, self.possible_shader_formats())

    def reflection_capture_formats(self) -> list[str]:
        return reflection_capture_formats(self._requires_encoded_hdr)

    def texture_formats_for(self, texture: TextureAsset) -> list[list[str]]:
        if self.properties.is_server_only:
            return []
        layers = self.resolver.texture_formats_per_layer(texture)
        return [negotiate_layer_formats(layers, self.settings())]

    def all_texture_formats(self) -> list[str]:
        if self.properties.is_server_only:
            return []
        return negotiate_all_texture_formats(self.resolver.all_texture_formats(), self.settings())

    def wave_format_for(self, sound: SoundAsset) -> str:
        return select_wave_format(sound.is_seekable_streaming, sound.is_streaming)

    def all_wave_formats(self) -> list[str]:
        return all_wave_formats()
