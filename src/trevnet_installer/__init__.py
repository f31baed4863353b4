"""Installer for the trevnet-server systemd service."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from trevnet_installer.protocols import (
    HostEnvironment,
    Reporter,
    Transport,
)

__all__ = [
    "__version__",
    "HostEnvironment",
    "Reporter",
    "Transport",
]
