"""Service account provisioning."""

from __future__ import annotations

import logging
from pathlib import Path

from trevnet_installer.errors import AccountCreationError, HostCommandError
from trevnet_installer.protocols import HostEnvironment
from trevnet_installer.types import ServiceAccount

logger = logging.getLogger(__name__)

NOLOGIN_SHELL = "/usr/sbin/nologin"
HOME_MODE = 0o755


class AccountProvisioner:
    """Ensures the service user, group and home directory exist.

    Idempotent: safe to call repeatedly with identical arguments. An
    existing user or group is accepted as-is; its home directory, shell
    and primary group are not compared against the requested values.
    """

    def __init__(self, host: HostEnvironment, shell: str = NOLOGIN_SHELL) -> None:
        """Initialize account provisioner.

        Args:
            host: Host whose account database is updated.
            shell: Login shell for created users.
        """
        self.host = host
        self.shell = shell

    def ensure(self, user: str, group: str, home_dir: Path) -> ServiceAccount:
        """Create the group, user and home directory where missing.

        Args:
            user: Service user name.
            group: Service group name.
            home_dir: Home and working directory.

        Returns:
            ServiceAccount describing what exists and what was created.

        Raises:
            AccountCreationError: If the host rejects creating the group or user.
        """
        created_group = False
        if self.host.group_exists(group):
            logger.info("Group %s already exists", group)
        else:
            logger.info("Creating group %s", group)
            try:
                self.host.create_group(group)
            except HostCommandError as e:
                raise AccountCreationError(f"Failed to create group {group}: {e}") from e
            created_group = True

        created_user = False
        if self.host.user_exists(user):
            logger.info("User %s already exists", user)
        else:
            logger.info("Creating user %s", user)
            try:
                self.host.create_user(user, group, home_dir, self.shell)
            except HostCommandError as e:
                raise AccountCreationError(f"Failed to create user {user}: {e}") from e
            created_user = True

        created_home = False
        if not self.host.is_dir(home_dir):
            logger.info("Creating home directory %s", home_dir)
            self.host.mkdir(home_dir, parents=True, exist_ok=True)
            self.host.chown(home_dir, user, group)
            self.host.chmod(home_dir, HOME_MODE)
            created_home = True

        return ServiceAccount(
            user=user,
            group=group,
            home_dir=home_dir,
            created_group=created_group,
            created_user=created_user,
            created_home=created_home,
        )
