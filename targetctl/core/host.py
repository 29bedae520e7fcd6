"""Host process identification and toolchain checks."""

from __future__ import annotations

import os
import platform
import socket
from dataclasses import dataclass
from pathlib import Path

from targetctl.core.errors import PlatformIdentificationError

SDK_DOCUMENTATION_PATH = "Platforms/Linux/GettingStarted"


@dataclass(frozen=True)
class HostInfo:
    system: str
    computer_name: str
    is_editor: bool = True
    installed_code_support: bool = True

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"

    @classmethod
    def detect(cls, *, is_editor: bool = True) -> HostInfo:
        return cls(
            system=platform.system(),
            computer_name=socket.gethostname(),
            is_editor=is_editor,
            installed_code_support=platform.system() == "Linux",
        )


def is_sdk_installed(host: HostInfo) -> bool:
    """Check for a cross-compiling toolchain when targeting Linux from another host."""
    if host.is_linux:
        return True

    # any value for the multiarch root is accepted, the architecture is not known here
    multiarch_root = os.environ.get("LINUX_MULTIARCH_ROOT", "")
    if multiarch_root and Path(multiarch_root).is_dir():
        return True

    toolchain_root = os.environ.get("LINUX_ROOT", "")
    if host.system == "Windows":
        compiler = Path(f"{toolchain_root}/bin/clang++.exe")
    elif host.system == "Darwin":
        compiler = Path(f"{toolchain_root}/bin/clang++")
    else:
        raise PlatformIdentificationError(
            f"Unable to target Linux from unknown host system '{host.system}'."
        )
    return compiler.is_file()
