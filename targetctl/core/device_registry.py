"""Known deployment devices for one target variant, mirrored into the config store."""

from __future__ import annotations

import logging
from dataclasses import replace

from targetctl.core.config_store import ConfigStore
from targetctl.core.events import EventHub
from targetctl.core.host import HostInfo
from targetctl.core.model import Device, DeviceEvent, DeviceId
from targetctl.core.settings import DEVICE_KEY_PREFIX, SETTINGS_SECTION

LOGGER = logging.getLogger(__name__)

_RECORD_SUFFIXES = ("_Name", "_User", "_Pass")


class DeviceRegistry:
    """Devices keyed by name, plus at most one derived local device.

    Load and save share the ``_changing_config`` flag: ``add_device`` persists,
    and a save requested while loading (or the reverse) is skipped.
    """

    def __init__(
        self,
        platform_name: str,
        store: ConfigStore,
        host: HostInfo,
        *,
        events: EventHub | None = None,
        detect_local: bool = True,
    ) -> None:
        self.platform_name = platform_name
        self.store = store
        self.host = host
        self.events = events or EventHub()
        self._devices: dict[str, Device] = {}
        self._changing_config = False

        self.local_device: Device | None = None
        if detect_local and host.is_linux:
            self.local_device = Device(
                id=DeviceId(platform_name, host.computer_name),
                display_name=host.computer_name,
                is_local=True,
            )

        self.init_devices_from_config()

    def _is_local_name(self, name: str) -> bool:
        return self.local_device is not None and name == self.local_device.name

    def _base_key(self, index: int) -> str:
        return f"{DEVICE_KEY_PREFIX}_{self.platform_name}_Device_{index}"

    def add_device(
        self,
        name: str,
        display_name: str = "",
        username: str = "",
        password: str = "",
        is_default: bool = False,
    ) -> bool:
        """Register a remote device; returns False if the name is already taken.

        Only the name and credentials are persisted, so ``display_name`` falls
        back to the name once the registry is reloaded from config.
        """
        # is_default has no effect: the local device is always the default
        if self._is_local_name(name) or name in self._devices:
            LOGGER.debug("Rejected duplicate device '%s'", name)
            return False

        device = Device(id=DeviceId(self.platform_name, name), display_name=display_name or name)
        if username or password:
            device = replace(device, username=username, password=password)
        self._devices[name] = device
        LOGGER.info("Added device '%s' for %s", name, self.platform_name)

        self.save_devices_to_config()
        self.events.publish(DeviceEvent.DISCOVERED, device)
        return True

    def set_user_credentials(self, name: str, username: str, password: str) -> bool:
        device = self._devices.get(name)
        if device is None:
            return False
        self._devices[name] = replace(device, username=username, password=password)
        self.save_devices_to_config()
        return True

    def get_device(self, device_id: DeviceId) -> Device | None:
        if self.local_device is not None and device_id == self.local_device.id:
            return self.local_device
        for device in self._devices.values():
            if device.id == device_id:
                return device
        return None

    def find_device(self, name: str) -> Device | None:
        return self.get_device(DeviceId(self.platform_name, name))

    def get_all_devices(self) -> list[Device]:
        devices: list[Device] = []
        if self.local_device is not None:
            devices.append(self.local_device)
        devices.extend(self._devices.values())
        return devices

    def get_default_device(self) -> Device | None:
        return self.local_device

    def init_devices_from_config(self) -> None:
        if self._changing_config:
            return
        self._changing_config = True
        try:
            index = 0
            while True:
                base_key = self._base_key(index)
                name = self.store.get_string(SETTINGS_SECTION, f"{base_key}_Name")
                if name is None:
                    break
                # records for the local device are left over from older saves
                if self._is_local_name(name):
                    index += 1
                    continue
                if not self.add_device(name):
                    break

                username = self.store.get_string(SETTINGS_SECTION, f"{base_key}_User")
                if username is not None:
                    password = self.store.get_string(SETTINGS_SECTION, f"{base_key}_Pass")
                    if password is not None:
                        for device_name, device in list(self._devices.items()):
                            if device.name == name:
                                self._devices[device_name] = replace(
                                    device, username=username, password=password
                                )
                index += 1
            LOGGER.debug("Loaded %d device(s) for %s from config", len(self._devices), self.platform_name)
        finally:
            self._changing_config = False

    def save_devices_to_config(self) -> None:
        if self._changing_config:
            return
        self._changing_config = True
        try:
            index = 0
            for device in self._devices.values():
                # a local device saved here would come back as a duplicate on load
                if self.host.is_linux and device.name == self.host.computer_name:
                    continue

                base_key = self._base_key(index)
                self.store.set_string(SETTINGS_SECTION, f"{base_key}_Name", device.name)
                if device.has_credentials:
                    self.store.set_string(SETTINGS_SECTION, f"{base_key}_User", device.username or "")
                    self.store.set_string(SETTINGS_SECTION, f"{base_key}_Pass", device.password or "")
                else:
                    self.store.remove_key(SETTINGS_SECTION, f"{base_key}_User")
                    self.store.remove_key(SETTINGS_SECTION, f"{base_key}_Pass")
                index += 1

            self._remove_records_from(index)
            self.store.flush()
            LOGGER.debug("Saved %d device(s) for %s to config", index, self.platform_name)
        finally:
            self._changing_config = False

    def _remove_records_from(self, first_index: int) -> None:
        index = first_index
        while True:
            base_key = self._base_key(index)
            removed = [
                self.store.remove_key(SETTINGS_SECTION, f"{base_key}{suffix}")
                for suffix in _RECORD_SUFFIXES
            ]
            if not any(removed):
                return
            index += 1
