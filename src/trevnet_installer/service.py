"""Registration of the rendered unit with systemd."""

from __future__ import annotations

import logging
from pathlib import Path

from trevnet_installer.errors import HostCommandError, ServiceEnableError, ServiceReloadError
from trevnet_installer.protocols import HostEnvironment

logger = logging.getLogger(__name__)

SYSTEMD_UNIT_DIR = Path("/etc/systemd/system")


class ServiceRegistrar:
    """Installs and enables a service unit.

    The service is enabled for boot but never started.
    """

    def __init__(self, host: HostEnvironment, unit_dir: Path = SYSTEMD_UNIT_DIR) -> None:
        """Initialize service registrar.

        Args:
            host: Host whose service manager is configured.
            unit_dir: Directory the service manager loads units from.
        """
        self.host = host
        self.unit_dir = unit_dir

    def unit_path(self, service_name: str) -> Path:
        """Get the unit file path for a service."""
        return self.unit_dir / f"{service_name}.service"

    def register(
        self,
        unit_text: str,
        service_name: str,
        working_dir: Path,
        user: str,
        group: str,
    ) -> Path:
        """Install the unit file, reload the manager and enable the service.

        Args:
            unit_text: Rendered unit definition.
            service_name: Name of the service.
            working_dir: Working directory handed to the service user.
            user: Service user.
            group: Service group.

        Returns:
            Path of the installed unit file.

        Raises:
            ServiceReloadError: If the service manager refuses to reload.
            ServiceEnableError: If the service manager refuses to enable the unit.
        """
        unit_path = self.unit_path(service_name)
        logger.info("Writing unit file %s", unit_path)
        self.host.write_text(unit_path, unit_text)

        self.host.chown_recursive(working_dir, user, group)

        try:
            self.host.reload_service_manager()
        except HostCommandError as e:
            raise ServiceReloadError(f"Failed to reload systemd: {e}") from e

        try:
            self.host.enable_service(service_name)
        except HostCommandError as e:
            raise ServiceEnableError(f"Failed to enable {service_name}: {e}") from e

        return unit_path
