"""Install orchestration.

Runs the provisioning steps in a fixed order and stops at the first
failure. Completed steps are not rolled back; every step is idempotent,
so rerunning after fixing the cause completes the remaining work.
"""

from __future__ import annotations

import logging
import sys
import tempfile
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path

from trevnet_installer.accounts import AccountProvisioner
from trevnet_installer.artifact import ArtifactInstaller
from trevnet_installer.config import InstallConfig
from trevnet_installer.errors import (
    HostOperationError,
    InstallerError,
    PermissionDeniedError,
    TemplateFetchFailedError,
    TransportError,
)
from trevnet_installer.metadata import MetadataFetcher
from trevnet_installer.platform_detect import PlatformDetector
from trevnet_installer.protocols import HostEnvironment, Reporter, Transport
from trevnet_installer.service import SYSTEMD_UNIT_DIR, ServiceRegistrar
from trevnet_installer.types import InstallResult, InstallState
from trevnet_installer.unit import ServiceUnitGenerator

logger = logging.getLogger(__name__)

# Template shipped alongside the package modules
PACKAGE_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def default_template_dirs(argv0: str | None = None) -> list[Path]:
    """Get local directories searched for the unit template, in order.

    The directory of the running installer as invoked comes first, then
    the same directory with symlinks resolved, then the package's own
    template directory. The package template ships with every install,
    so the network fallback in InstallOrchestrator only applies when the
    list is overridden or the package data is missing.

    Args:
        argv0: Path the installer was invoked as. Defaults to sys.argv[0].

    Returns:
        Ordered list of directories without duplicates.
    """
    invoked = Path(argv0 if argv0 is not None else sys.argv[0])
    candidates = [invoked.parent, invoked.resolve().parent, PACKAGE_TEMPLATE_DIR]
    dirs: list[Path] = []
    for candidate in candidates:
        if candidate not in dirs:
            dirs.append(candidate)
    return dirs


class InstallOrchestrator:
    """Sequences the install steps as a fail-fast state machine.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation with defaults.
    """

    def __init__(
        self,
        host: HostEnvironment,
        transport: Transport,
        environ: Mapping[str, str],
        template_dirs: Sequence[Path],
        unit_dir: Path,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize orchestrator with required dependencies.

        Args:
            host: Host the install mutates.
            transport: Transport for metadata, archive and template downloads.
            environ: Configuration overrides (usually os.environ).
            template_dirs: Local directories searched for the unit template.
            unit_dir: Directory unit files are installed into.
            reporter: Receives operator-facing progress messages.
        """
        self.host = host
        self.transport = transport
        self.environ = environ
        self.template_dirs = list(template_dirs)
        self.unit_dir = unit_dir
        self.reporter = reporter
        self.state = InstallState.RESOLVING_CONFIG
        self.completed: list[InstallState] = []
        self.config: InstallConfig | None = None

    @classmethod
    def create(
        cls,
        host: HostEnvironment,
        transport: Transport,
        environ: Mapping[str, str],
        reporter: Reporter | None = None,
    ) -> InstallOrchestrator:
        """Factory method for production instantiation.

        Args:
            host: Host the install mutates.
            transport: Transport for downloads.
            environ: Configuration overrides.
            reporter: Optional progress reporter.

        Returns:
            Orchestrator searching the default template locations and
            installing units into the systemd unit directory.
        """
        return cls(
            host=host,
            transport=transport,
            environ=environ,
            template_dirs=default_template_dirs(),
            unit_dir=SYSTEMD_UNIT_DIR,
            reporter=reporter,
        )

    def run(self) -> InstallResult:
        """Run the whole install.

        Returns:
            InstallResult. On failure, ``failed_at`` is the state the run
            stopped in and ``error`` carries the tagged cause.
        """
        self.state = InstallState.RESOLVING_CONFIG
        self.completed = []
        self.config = None
        facts: dict = {}

        try:
            self._enter(InstallState.RESOLVING_CONFIG)
            if not self.host.is_privileged():
                raise PermissionDeniedError("This installer must be run as root (use sudo)")
            config = InstallConfig.from_env(self.environ)
            self.config = config
            self._info("Starting Trevnet Server installation...")

            self._enter(InstallState.DETECTING_PLATFORM)
            platform = PlatformDetector(self.host).detect()
            facts["platform"] = platform
            self._info(f"Detected platform: {platform}")

            self._enter(InstallState.FETCHING_METADATA)
            fetcher = MetadataFetcher(self.transport)
            self._info(f"Fetching release metadata from {config.metadata_url}...")
            metadata = fetcher.fetch(config.metadata_url)
            download_url = fetcher.resolve_download(metadata, platform)
            facts["version"] = metadata.version
            self._info(f"Latest version: {metadata.version}")
            self._info(f"Download URL: {download_url}")

            self._enter(InstallState.PROVISIONING_ACCOUNT)
            account = AccountProvisioner(self.host).ensure(
                config.user, config.group, config.install_dir
            )
            if account.created_group:
                self._info(f"Created group: {config.group}")
            else:
                self._info(f"Group {config.group} already exists")
            if account.created_user:
                self._info(f"Created user: {config.user}")
            else:
                self._warn(
                    f"User {config.user} already exists; its group, home directory "
                    "and shell are left unchanged"
                )

            self._enter(InstallState.INSTALLING_ARTIFACT)
            self._info(f"Downloading binary for {platform}...")
            binary_path = ArtifactInstaller(
                self.host, self.transport, config.binary_name
            ).install(
                download_url,
                platform,
                config.binary_install_dir,
                config.user,
                config.group,
            )
            facts["binary_path"] = binary_path
            self._info(f"Installed binary to {binary_path}")

            self._enter(InstallState.RESOLVING_TEMPLATE)
            with self._resolve_template(config) as template_path:
                self._enter(InstallState.GENERATING_UNIT)
                unit_text = ServiceUnitGenerator().render(
                    template_path,
                    config.user,
                    config.group,
                    config.install_dir,
                    config.env_file,
                    config.exec_start,
                )

            self._enter(InstallState.REGISTERING_SERVICE)
            self._info("Installing systemd service...")
            unit_path = ServiceRegistrar(self.host, self.unit_dir).register(
                unit_text,
                config.service_name,
                config.install_dir,
                config.user,
                config.group,
            )
            facts["unit_path"] = unit_path
            self._info(
                "Service installed and enabled. "
                f"Start it with: systemctl start {config.service_name}"
            )
        except InstallerError as e:
            return self._fail(e, facts)
        except OSError as e:
            return self._fail(HostOperationError(f"Host operation failed: {e}"), facts)

        self._enter(InstallState.COMPLETE)
        return InstallResult(
            success=True,
            state=InstallState.COMPLETE,
            completed=list(self.completed),
            **facts,
        )

    @contextmanager
    def _resolve_template(self, config: InstallConfig) -> Iterator[Path]:
        """Locate the unit template, downloading it if no local copy exists.

        A downloaded template lives in a temporary directory that is removed
        when the context exits.

        Args:
            config: Resolved configuration.

        Yields:
            Path of the template file.

        Raises:
            TemplateFetchFailedError: If the template must be downloaded and
                the download fails.
        """
        for directory in self.template_dirs:
            candidate = directory / config.template_name
            if candidate.is_file():
                logger.debug("Using unit template %s", candidate)
                yield candidate
                return

        self._info(f"Template not found locally, fetching from {config.template_url}...")
        with tempfile.TemporaryDirectory(prefix="trevnet-template-") as tmp:
            target = Path(tmp) / config.template_name
            try:
                self.transport.download(config.template_url, target)
            except TransportError as e:
                raise TemplateFetchFailedError(
                    f"Failed to fetch service template from {config.template_url}: {e}"
                ) from e
            yield target

    def _enter(self, state: InstallState) -> None:
        """Record completion of the current state and move to the next."""
        if state is not InstallState.RESOLVING_CONFIG:
            self.completed.append(self.state)
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state

    def _fail(self, error: InstallerError, facts: dict) -> InstallResult:
        """Build the failure result for the current state."""
        logger.info("Install failed in %s: [%s] %s", self.state.value, error.kind, error)
        failed_at = self.state
        self.state = InstallState.FAILED
        return InstallResult(
            success=False,
            state=InstallState.FAILED,
            failed_at=failed_at,
            completed=list(self.completed),
            error=error,
            **facts,
        )

    def _info(self, message: str) -> None:
        logger.debug(message)
        if self.reporter is not None:
            self.reporter.show_info(message)

    def _warn(self, message: str) -> None:
        logger.debug(message)
        if self.reporter is not None:
            self.reporter.show_warning(message)
