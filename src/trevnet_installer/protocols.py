"""Protocol definitions for host capabilities.

Components never touch the host directly. They receive a HostEnvironment
for filesystem, account and service-manager access and a Transport for
downloads, so tests can substitute in-memory fakes.

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class HostEnvironment(Protocol):
    """Protocol for host state mutated by an install.

    Methods that run host commands raise HostCommandError when the
    command is rejected. Filesystem methods raise OSError.
    """

    def is_privileged(self) -> bool:
        """Check whether the installer runs with root privileges."""
        ...

    def system_name(self) -> str:
        """Get the OS identifier (e.g. "Linux", "Darwin")."""
        ...

    def machine_name(self) -> str:
        """Get the CPU identifier (e.g. "x86_64", "arm64")."""
        ...

    def group_exists(self, group: str) -> bool:
        """Check if a group exists in the group database."""
        ...

    def user_exists(self, user: str) -> bool:
        """Check if a user exists in the user database."""
        ...

    def create_group(self, group: str) -> None:
        """Create a system group.

        Args:
            group: Group name.
        """
        ...

    def create_user(self, user: str, group: str, home_dir: Path, shell: str) -> None:
        """Create a system user.

        Args:
            user: Login name.
            group: Primary group (must exist).
            home_dir: Home directory recorded for the user.
            shell: Login shell.
        """
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def chmod(self, path: Path, mode: int) -> None:
        """Set permission bits on a path."""
        ...

    def chown(self, path: Path, user: str, group: str) -> None:
        """Set ownership of a single path."""
        ...

    def chown_recursive(self, path: Path, user: str, group: str) -> None:
        """Set ownership of a path and everything below it."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file, replacing it if present."""
        ...

    def install_file(self, src: Path, dest: Path, mode: int) -> None:
        """Copy a local file into place with the given mode.

        Replaces any existing file at ``dest`` without requiring removal.

        Args:
            src: File on the local filesystem.
            dest: Destination path on the host.
            mode: Permission bits for the installed file.
        """
        ...

    def reload_service_manager(self) -> None:
        """Ask the service manager to reload unit definitions."""
        ...

    def enable_service(self, service_name: str) -> None:
        """Enable a service to start at boot without starting it."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Protocol for retrieving remote resources."""

    def download(self, url: str, dest: Path) -> None:
        """Download a resource to a local file.

        Args:
            url: Resource URL.
            dest: Local file to write.

        Raises:
            TransportError: If the download does not complete.
        """
        ...


@runtime_checkable
class Reporter(Protocol):
    """Protocol for operator-facing progress messages."""

    def show_info(self, message: str) -> None:
        """Report progress."""
        ...

    def show_warning(self, message: str) -> None:
        """Report a non-fatal problem."""
        ...
