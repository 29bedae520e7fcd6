"""Target settings record stored in the config section owned by this target."""

from __future__ import annotations

from targetctl.core.config_store import ConfigStore
from targetctl.core.errors import ConfigValidationError
from targetctl.core.model import TargetSettings

SETTINGS_SECTION = "/Script/LinuxTargetPlatform.LinuxTargetSettings"

# Historical spelling; existing config files use it for device records.
DEVICE_KEY_PREFIX = "LinuxTargetPlatfrom"

TARGETED_RHIS_KEY = "TargetedRHIs"
COOK_DXT_KEY = "bCookDXTTextures"
COOK_BC_KEY = "bCookBCTextures"
COOK_ETC2_KEY = "bCookETC2Textures"

_BOOL_DEFAULTS = {
    COOK_DXT_KEY: True,
    COOK_BC_KEY: True,
    COOK_ETC2_KEY: False,
}


def _get_bool(store: ConfigStore, key: str) -> bool:
    value = store.get_bool(SETTINGS_SECTION, key)
    return _BOOL_DEFAULTS[key] if value is None else value


def load_target_settings(store: ConfigStore) -> TargetSettings:
    return TargetSettings(
        targeted_shader_formats=tuple(store.get_array(SETTINGS_SECTION, TARGETED_RHIS_KEY)),
        cook_dxt=_get_bool(store, COOK_DXT_KEY),
        cook_bc=_get_bool(store, COOK_BC_KEY),
        cook_etc2=_get_bool(store, COOK_ETC2_KEY),
    )


def update_setting(store: ConfigStore, key: str, raw_value: str) -> None:
    """Apply a textual settings edit (as typed by a user) and flush the store.

    ``TargetedRHIs`` takes a comma-separated list; the cook flags take true/false.
    """
    if key == TARGETED_RHIS_KEY:
        values = [item.strip() for item in raw_value.split(",") if item.strip()]
        store.set_array(SETTINGS_SECTION, key, values)
    elif key in _BOOL_DEFAULTS:
        lowered = raw_value.strip().lower()
        if lowered not in {"true", "false"}:
            raise ConfigValidationError(f"{key} must be boolean true/false")
        store.set_bool(SETTINGS_SECTION, key, lowered == "true")
    else:
        allowed = ", ".join([TARGETED_RHIS_KEY, *_BOOL_DEFAULTS])
        raise ConfigValidationError(f"Unknown setting '{key}'. Allowed: {allowed}")
    store.flush()
