"""Host-side module owning one target platform instance per variant."""

from __future__ import annotations

import logging

from targetctl.core.config_store import ConfigStore
from targetctl.core.errors import UnknownVariantError
from targetctl.core.host import HostInfo
from targetctl.core.model import VARIANTS
from targetctl.core.settings import load_target_settings
from targetctl.core.target_platform import TargetPlatform

LOGGER = logging.getLogger(__name__)


class TargetPlatformModule:
    def __init__(self, store: ConfigStore, *, host: HostInfo | None = None) -> None:
        self.store = store
        self.host = host
        self._platforms: dict[str, TargetPlatform] = {}

    def startup(self) -> None:
        # platforms reread settings per query; this only fails fast on a malformed record
        settings = load_target_settings(self.store)
        LOGGER.debug("Loaded target settings: %s", settings)

    def shutdown(self) -> None:
        self._platforms.clear()

    def variants(self) -> list[str]:
        return list(VARIANTS)

    def get_target_platform(self, variant: str = "Linux") -> TargetPlatform:
        platform = self._platforms.get(variant)
        if platform is not None:
            return platform

        properties = VARIANTS.get(variant)
        if properties is None:
            available = ", ".join(VARIANTS)
            raise UnknownVariantError(f"Unknown target variant '{variant}'. Available: {available}")

        platform = TargetPlatform(properties, self.store, host=self.host)
        self._platforms[variant] = platform
        return platform
