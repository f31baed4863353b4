"""Host environment backed by the real system.

Wraps the standard library and the host's account and service-manager
commands. Satisfies the HostEnvironment protocol structurally.
"""

from __future__ import annotations

import grp
import logging
import os
import platform
import pwd
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from trevnet_installer.errors import HostCommandError

logger = logging.getLogger(__name__)


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class RealHostEnvironment:
    """Production host implementation.

    Account management uses ``groupadd``/``useradd`` and the service
    manager is systemd, driven through ``systemctl``.
    """

    def __init__(self, systemctl: str = "systemctl") -> None:
        """Initialize the host.

        Args:
            systemctl: Name or path of the systemctl binary.
        """
        self.systemctl = systemctl

    def run(self, argv: Sequence[str]) -> str:
        """Run a host command, logging it.

        Args:
            argv: Command and arguments.

        Returns:
            Captured standard output.

        Raises:
            HostCommandError: If the command exits non-zero or cannot be started.
        """
        argv_list = list(argv)
        logger.info("CMD %s", _fmt_argv(argv_list))
        try:
            proc = subprocess.run(
                argv_list,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise HostCommandError(argv_list, 127, str(e)) from e

        if proc.stdout:
            logger.debug("STDOUT %s", proc.stdout.strip())
        if proc.stderr:
            logger.debug("STDERR %s", proc.stderr.strip())
        if proc.returncode != 0:
            raise HostCommandError(argv_list, proc.returncode, proc.stderr or "")
        return proc.stdout

    def is_privileged(self) -> bool:
        """Check whether the effective user is root."""
        return os.geteuid() == 0

    def system_name(self) -> str:
        """Get the OS identifier from uname."""
        return platform.system()

    def machine_name(self) -> str:
        """Get the CPU identifier from uname."""
        return platform.machine()

    def group_exists(self, group: str) -> bool:
        """Check the group database for a group."""
        try:
            grp.getgrnam(group)
        except KeyError:
            return False
        return True

    def user_exists(self, user: str) -> bool:
        """Check the user database for a user."""
        try:
            pwd.getpwnam(user)
        except KeyError:
            return False
        return True

    def create_group(self, group: str) -> None:
        """Create a system group with groupadd."""
        self.run(["groupadd", "-r", group])

    def create_user(self, user: str, group: str, home_dir: Path, shell: str) -> None:
        """Create a system user with useradd."""
        self.run(["useradd", "-r", "-g", group, "-d", str(home_dir), "-s", shell, user])

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def chmod(self, path: Path, mode: int) -> None:
        """Set permission bits on a path."""
        path.chmod(mode)

    def chown(self, path: Path, user: str, group: str) -> None:
        """Set ownership of a single path."""
        shutil.chown(path, user, group)

    def chown_recursive(self, path: Path, user: str, group: str) -> None:
        """Set ownership of a directory tree."""
        shutil.chown(path, user, group)
        for dirpath, dirnames, filenames in os.walk(path):
            for name in dirnames + filenames:
                shutil.chown(os.path.join(dirpath, name), user, group)

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        path.write_text(content)

    def install_file(self, src: Path, dest: Path, mode: int) -> None:
        """Copy a file into place and atomically replace any previous one.

        Replacing rather than overwriting in place keeps a running copy of
        the old binary intact.
        """
        staging = dest.with_name(f".{dest.name}.tmp")
        try:
            shutil.copyfile(src, staging)
            staging.chmod(mode)
            os.replace(staging, dest)
        finally:
            if staging.exists():
                staging.unlink()

    def reload_service_manager(self) -> None:
        """Run systemctl daemon-reload."""
        self.run([self.systemctl, "daemon-reload"])

    def enable_service(self, service_name: str) -> None:
        """Run systemctl enable for a service."""
        self.run([self.systemctl, "enable", service_name])
