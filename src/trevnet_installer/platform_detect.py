"""Detection of the host platform key."""

from __future__ import annotations

from typing import cast

from trevnet_installer.errors import UnsupportedPlatformError
from trevnet_installer.protocols import HostEnvironment
from trevnet_installer.types import SUPPORTED_PLATFORMS, PlatformKey

# uname -s prefixes to normalized OS names
OS_PREFIXES: dict[str, str] = {
    "Linux": "linux",
    "Darwin": "darwin",
}

# uname -m values to normalized architecture names
ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


class PlatformDetector:
    """Maps host OS and CPU identifiers to a release platform key."""

    def __init__(self, host: HostEnvironment) -> None:
        """Initialize with the host to inspect."""
        self.host = host

    def detect(self) -> PlatformKey:
        """Detect the current platform.

        Returns:
            Platform key such as "linux-amd64".

        Raises:
            UnsupportedPlatformError: If the OS or architecture is unknown.
        """
        os_name = self._detect_os(self.host.system_name())
        arch = self._detect_arch(self.host.machine_name())
        key = f"{os_name}-{arch}"
        if key not in SUPPORTED_PLATFORMS:
            raise UnsupportedPlatformError(f"Unsupported platform: {key}")
        return cast(PlatformKey, key)

    def _detect_os(self, system: str) -> str:
        for prefix, name in OS_PREFIXES.items():
            if system.startswith(prefix):
                return name
        raise UnsupportedPlatformError(f"Unsupported OS: {system}")

    def _detect_arch(self, machine: str) -> str:
        if machine not in ARCH_MAP:
            raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")
        return ARCH_MAP[machine]
