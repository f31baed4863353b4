"""Error taxonomy for the installer.

Every failure that can abort an install run is an ``InstallerError``
subclass tagged with a ``kind``. The orchestrator reports the tag in its
result; the CLI turns any of them into a non-zero exit.
"""

from __future__ import annotations

# Bound for remote-provided content echoed back in messages
PREVIEW_LIMIT = 200


def preview(content: str, limit: int = PREVIEW_LIMIT) -> str:
    """Truncate remote content for inclusion in a diagnostic message."""
    if len(content) <= limit:
        return content
    return content[:limit] + "..."


class InstallerError(Exception):
    """Base class for all fatal install errors."""

    kind = "InstallerError"


class PermissionDeniedError(InstallerError):
    """The installer is not running with root privileges."""

    kind = "PermissionDenied"


class ConfigError(InstallerError):
    """Configuration overrides could not be resolved."""

    kind = "InvalidConfig"


class UnsupportedPlatformError(InstallerError):
    """Host platform is unknown, or the release has no build for it."""

    kind = "UnsupportedPlatform"


class FetchFailedError(InstallerError):
    """Release metadata could not be retrieved."""

    kind = "FetchFailed"


class InvalidMetadataError(InstallerError):
    """Release metadata was retrieved but is malformed."""

    kind = "InvalidMetadata"


class DownloadFailedError(InstallerError):
    """The release archive could not be downloaded."""

    kind = "DownloadFailed"


class ExtractFailedError(InstallerError):
    """The binary could not be extracted from the release archive."""

    kind = "ExtractFailed"


class AccountCreationError(InstallerError):
    """The host rejected creation of the service user or group."""

    kind = "AccountCreationFailed"


class TemplateNotFoundError(InstallerError):
    """The service unit template does not exist."""

    kind = "TemplateNotFound"


class TemplateFetchFailedError(InstallerError):
    """The service unit template could not be downloaded."""

    kind = "TemplateFetchFailed"


class ServiceReloadError(InstallerError):
    """The service manager refused to reload its configuration."""

    kind = "ServiceReloadFailed"


class ServiceEnableError(InstallerError):
    """The service manager refused to enable the service."""

    kind = "ServiceEnableFailed"


class HostOperationError(InstallerError):
    """An unexpected filesystem or host error interrupted a step."""

    kind = "HostOperationFailed"


class TransportError(Exception):
    """A download did not complete."""

    pass


class HostCommandError(Exception):
    """A host command exited with a non-zero status."""

    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        """Initialize with the failed command and its diagnostics.

        Args:
            argv: Command that was run.
            returncode: Exit status of the command.
            stderr: Captured error output.
        """
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"{' '.join(argv)} exited with status {returncode}{detail}")
