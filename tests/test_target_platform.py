from __future__ import annotations

from pathlib import Path

import pytest

from targetctl.core.config_store import ConfigStore
from targetctl.core.errors import ConfigValidationError, PlatformIdentificationError, UnknownVariantError
from targetctl.core.format_catalog import ALL_DEFAULT_TEXTURE_FORMATS
from targetctl.core.host import HostInfo
from targetctl.core.model import VARIANTS, ReadyStatus, SoundAsset, TargetFeature, TextureAsset
from targetctl.core.module import TargetPlatformModule
from targetctl.core.settings import SETTINGS_SECTION
from targetctl.core.target_platform import TargetPlatform

LINUX_HOST = HostInfo(system="Linux", computer_name="buildhost")


def _platform(variant: str = "Linux", host: HostInfo = LINUX_HOST, **settings) -> TargetPlatform:
    return TargetPlatform(VARIANTS[variant], ConfigStore.in_memory({SETTINGS_SECTION: settings}), host=host)


def test_variant_platform_names() -> None:
    assert list(VARIANTS) == [
        "Linux",
        "LinuxNoEditor",
        "LinuxClient",
        "LinuxServer",
        "LinuxAArch64NoEditor",
        "LinuxAArch64Client",
        "LinuxAArch64Server",
    ]


def test_server_variant_needs_no_render_formats() -> None:
    platform = _platform("LinuxServer", TargetedRHIs=["SF_VULKAN_SM5"])
    assert platform.possible_shader_formats() == []
    assert platform.targeted_shader_formats() == []
    assert platform.all_texture_formats() == []
    assert platform.texture_formats_for(TextureAsset(name="t")) == []
    assert platform.variant_display_name() == "Dedicated Server"


def test_targeted_shader_formats_filtered_against_possible() -> None:
    platform = _platform(TargetedRHIs=["SF_VULKAN_ES31", "SF_UNKNOWN", "SF_VULKAN_SM5"])
    assert platform.possible_shader_formats() == ["SF_VULKAN_SM5", "SF_VULKAN_ES31"]
    assert platform.targeted_shader_formats() == ["SF_VULKAN_ES31", "SF_VULKAN_SM5"]


def test_reflection_capture_formats_fixed_at_construction() -> None:
    platform = _platform(TargetedRHIs=["SF_VULKAN_ES31"])
    assert platform.reflection_capture_formats() == ["EncodedHDR", "FullHDR"]

    platform.store.set_array(SETTINGS_SECTION, "TargetedRHIs", ["SF_VULKAN_SM5"])
    assert platform.targeted_shader_formats() == ["SF_VULKAN_SM5"]
    assert platform.reflection_capture_formats() == ["EncodedHDR", "FullHDR"]

    assert _platform(TargetedRHIs=["SF_VULKAN_SM5"]).reflection_capture_formats() == ["FullHDR"]


def test_texture_formats_follow_settings_on_every_query() -> None:
    platform = _platform()
    texture = TextureAsset(name="rock", has_alpha=True, layer_count=2)
    assert platform.texture_formats_for(texture) == [["DXT5", "DXT5"]]
    assert platform.all_texture_formats() == list(ALL_DEFAULT_TEXTURE_FORMATS)

    platform.store.set_bool(SETTINGS_SECTION, "bCookDXTTextures", False)
    platform.store.set_bool(SETTINGS_SECTION, "bCookETC2Textures", True)
    assert platform.texture_formats_for(texture) == [["ETC2_RGBA", "ETC2_RGBA"]]
    assert "DXT1" not in platform.all_texture_formats()


def test_texture_compression_defaults() -> None:
    platform = _platform(bCookBCTextures=False)
    assert platform.texture_formats_for(TextureAsset(name="n", compression="Normalmap")) == [["BGRA8"]]
    assert platform.texture_formats_for(TextureAsset(name="h", compression="HDR")) == [["RGBA16F"]]
    assert "BC7" not in platform.all_texture_formats()


def test_wave_format_for_sound() -> None:
    platform = _platform()
    assert platform.wave_format_for(SoundAsset(name="music", is_streaming=True)) == "OPUS"
    assert platform.wave_format_for(SoundAsset(name="voice", is_seekable_streaming=True)) == "ADPCM"
    assert platform.wave_format_for(SoundAsset(name="click")) == "OGG"
    assert platform.all_wave_formats() == ["ADPCM", "OGG", "OPUS"]


def test_running_platform_requires_linux_editor_with_editor_data() -> None:
    assert _platform("Linux").is_running_platform() is True
    assert _platform("LinuxNoEditor").is_running_platform() is False
    game_host = HostInfo(system="Linux", computer_name="buildhost", is_editor=False)
    assert _platform("Linux", host=game_host).is_running_platform() is False
    assert _platform("Linux", host=HostInfo(system="Darwin", computer_name="mac")).is_running_platform() is False


def test_supported_features() -> None:
    server = _platform("LinuxServer")
    assert server.supports_feature(TargetFeature.USER_CREDENTIALS) is True
    assert server.supports_feature(TargetFeature.PACKAGING) is True
    assert server.supports_feature(TargetFeature.AUDIO_STREAMING) is False
    assert server.supports_feature(TargetFeature.CAN_COOK_PACKAGES) is False
    assert _platform("Linux").supports_feature(TargetFeature.CAN_COOK_PACKAGES) is True
    assert _platform("Linux").supports_feature(TargetFeature.DEVICE_OUTPUT_LOG) is False


def test_variant_metadata() -> None:
    assert _platform("Linux").variant_display_name() == "Client with Editor Data"
    assert _platform("LinuxClient").variant_display_name() == "Client only"
    assert _platform("LinuxNoEditor").variant_display_name() == "Client"
    assert _platform("LinuxNoEditor").variant_priority() == 1.0
    assert _platform().variant_title() == "Build Type"
    assert _platform().supports_variants() is True


def test_aarch64_variant_has_no_local_device() -> None:
    platform = _platform("LinuxAArch64NoEditor")
    assert platform.get_default_device() is None
    assert _platform("Linux").get_default_device().name == "buildhost"


def test_device_discovered_subscription() -> None:
    platform = _platform()
    seen: list[str] = []
    platform.on_device_discovered(lambda d: seen.append(d.name))
    platform.on_device_lost(lambda d: seen.append("lost"))

    assert platform.add_device("rig01", "Rig One") is True
    assert platform.add_device("rig01") is False
    assert seen == ["rig01"]
    assert [d.display_name for d in platform.get_all_devices()] == ["buildhost", "Rig One"]


def test_sdk_always_installed_on_linux_host() -> None:
    installed, documentation = _platform().is_sdk_installed()
    assert installed is True
    assert documentation


def test_sdk_check_from_windows(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    host = HostInfo(system="Windows", computer_name="winbox", installed_code_support=False)
    platform = _platform(host=host)
    monkeypatch.delenv("LINUX_MULTIARCH_ROOT", raising=False)
    monkeypatch.setenv("LINUX_ROOT", str(tmp_path))

    assert platform.is_sdk_installed()[0] is False
    assert platform.check_requirements(True, requires_temp_target=True) == (
        ReadyStatus.SDK_NOT_FOUND | ReadyStatus.CODE_UNSUPPORTED | ReadyStatus.PLUGINS_UNSUPPORTED
    )

    compiler = tmp_path / "bin" / "clang++.exe"
    compiler.parent.mkdir(parents=True)
    compiler.write_text("", encoding="utf-8")
    assert platform.is_sdk_installed()[0] is True
    assert platform.check_requirements(False) == ReadyStatus.READY


def test_sdk_check_accepts_multiarch_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LINUX_MULTIARCH_ROOT", str(tmp_path))
    platform = _platform(host=HostInfo(system="Darwin", computer_name="mac"))
    assert platform.is_sdk_installed()[0] is True


def test_sdk_check_unknown_host_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LINUX_MULTIARCH_ROOT", raising=False)
    platform = _platform(host=HostInfo(system="Plan9", computer_name="glenda"))
    with pytest.raises(PlatformIdentificationError):
        platform.is_sdk_installed()


def test_module_caches_one_platform_per_variant() -> None:
    module = TargetPlatformModule(ConfigStore.in_memory(), host=LINUX_HOST)
    module.startup()

    linux = module.get_target_platform()
    assert module.get_target_platform("Linux") is linux
    assert module.get_target_platform("LinuxServer") is not linux

    module.shutdown()
    assert module.get_target_platform("Linux") is not linux


def test_module_rejects_unknown_variant() -> None:
    module = TargetPlatformModule(ConfigStore.in_memory(), host=LINUX_HOST)
    with pytest.raises(UnknownVariantError):
        module.get_target_platform("Win64")


def test_module_startup_rejects_malformed_settings() -> None:
    store = ConfigStore.in_memory({SETTINGS_SECTION: {"bCookDXTTextures": "sometimes"}})
    module = TargetPlatformModule(store, host=LINUX_HOST)
    with pytest.raises(ConfigValidationError):
        module.startup()
