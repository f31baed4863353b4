"""Shared data types for the installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from trevnet_installer.errors import InstallerError

__all__ = [
    "InstallResult",
    "InstallState",
    "PlatformKey",
    "SUPPORTED_PLATFORMS",
    "ServiceAccount",
]

PlatformKey = Literal["linux-amd64", "linux-arm64", "darwin-amd64", "darwin-arm64"]

SUPPORTED_PLATFORMS: tuple[PlatformKey, ...] = (
    "linux-amd64",
    "linux-arm64",
    "darwin-amd64",
    "darwin-arm64",
)


class InstallState(str, Enum):
    """States of an install run, in execution order."""

    RESOLVING_CONFIG = "resolving-config"
    DETECTING_PLATFORM = "detecting-platform"
    FETCHING_METADATA = "fetching-metadata"
    PROVISIONING_ACCOUNT = "provisioning-account"
    INSTALLING_ARTIFACT = "installing-artifact"
    RESOLVING_TEMPLATE = "resolving-template"
    GENERATING_UNIT = "generating-unit"
    REGISTERING_SERVICE = "registering-service"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class ServiceAccount:
    """The service account the binary runs under.

    Attributes:
        user: Login name of the system user.
        group: Primary group of the user.
        home_dir: Home and working directory.
        created_group: True if the group was created by this run.
        created_user: True if the user was created by this run.
        created_home: True if the home directory was created by this run.
    """

    user: str
    group: str
    home_dir: Path
    created_group: bool = False
    created_user: bool = False
    created_home: bool = False


@dataclass
class InstallResult:
    """Outcome of an install run.

    Attributes:
        success: True if every step completed.
        state: COMPLETE on success, FAILED otherwise.
        failed_at: State the run was in when it failed.
        completed: States that finished before the run ended.
        platform: Detected platform key, once known.
        version: Release version, once known.
        binary_path: Installed binary path, once installed.
        unit_path: Installed unit file path, once registered.
        error: The tagged failure (None on success).
    """

    success: bool
    state: InstallState
    failed_at: InstallState | None = None
    completed: list[InstallState] = field(default_factory=list)
    platform: str | None = None
    version: str | None = None
    binary_path: Path | None = None
    unit_path: Path | None = None
    error: InstallerError | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.success and self.error is not None:
            raise ValueError("success=True but error is set")
        if not self.success and self.error is None:
            raise ValueError("success=False requires error")
        if self.success and self.state is not InstallState.COMPLETE:
            raise ValueError("success=True requires state COMPLETE")
        if not self.success and self.state is not InstallState.FAILED:
            raise ValueError("success=False requires state FAILED")

    @property
    def error_kind(self) -> str | None:
        """Taxonomy tag of the failure, if any."""
        return self.error.kind if self.error is not None else None
