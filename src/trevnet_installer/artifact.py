"""Download, extraction and placement of the release binary."""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from pathlib import Path

from trevnet_installer.errors import (
    DownloadFailedError,
    ExtractFailedError,
    TransportError,
)
from trevnet_installer.protocols import HostEnvironment, Transport

logger = logging.getLogger(__name__)

BINARY_MODE = 0o755


class ArtifactInstaller:
    """Installs the release binary from a tar archive.

    Idempotent: safe to call repeatedly with identical arguments. Each call
    replaces the binary at the destination without removing it first.
    """

    ARCHIVE_NAME = "download.tar.gz"

    def __init__(self, host: HostEnvironment, transport: Transport, binary_name: str) -> None:
        """Initialize artifact installer.

        Args:
            host: Host the binary is installed on.
            transport: Transport used for the download.
            binary_name: Archive entry and installed file name.
        """
        self.host = host
        self.transport = transport
        self.binary_name = binary_name

    def install(
        self,
        download_url: str,
        platform: str,
        dest_dir: Path,
        owner: str,
        group: str,
    ) -> Path:
        """Download the archive and install the binary it contains.

        The temporary workspace is removed before returning on every path.

        Args:
            download_url: Archive URL.
            platform: Platform key the archive was built for.
            dest_dir: Directory that receives the binary.
            owner: Owning user of the directory and binary.
            group: Owning group of the directory and binary.

        Returns:
            Path of the installed binary.

        Raises:
            DownloadFailedError: If the archive cannot be downloaded.
            ExtractFailedError: If the binary cannot be extracted.
        """
        with tempfile.TemporaryDirectory(prefix="trevnet-artifact-") as tmp:
            workspace = Path(tmp)
            archive = workspace / self.ARCHIVE_NAME

            logger.info("Downloading %s build from %s", platform, download_url)
            try:
                self.transport.download(download_url, archive)
            except TransportError as e:
                raise DownloadFailedError(
                    f"Failed to download binary from {download_url}: {e}"
                ) from e

            extracted = self._extract(archive, workspace)

            self.host.mkdir(dest_dir, parents=True, exist_ok=True)
            self.host.chown(dest_dir, owner, group)

            target = dest_dir / self.binary_name
            logger.info("Installing binary to %s", target)
            self.host.install_file(extracted, target, BINARY_MODE)
            self.host.chown(target, owner, group)

        return target

    def _extract(self, archive: Path, workspace: Path) -> Path:
        """Extract the binary entry from the archive.

        Only the named entry is read; nothing else in the archive is
        written to disk.

        Args:
            archive: Downloaded archive.
            workspace: Directory to extract into.

        Returns:
            Path of the extracted binary.

        Raises:
            ExtractFailedError: If the archive is unreadable or lacks the entry.
        """
        dest = workspace / self.binary_name
        try:
            with tarfile.open(archive, "r:*") as tar:
                try:
                    member = tar.getmember(self.binary_name)
                except KeyError as e:
                    raise ExtractFailedError(
                        f"Binary {self.binary_name} not found in archive"
                    ) from e
                if not member.isfile():
                    raise ExtractFailedError(
                        f"Archive entry {self.binary_name} is not a regular file"
                    )
                source = tar.extractfile(member)
                if source is None:
                    raise ExtractFailedError(f"Cannot read {self.binary_name} from archive")
                with source, dest.open("wb") as out:
                    shutil.copyfileobj(source, out)
        except (tarfile.TarError, OSError, EOFError) as e:
            raise ExtractFailedError(f"Failed to extract binary from archive: {e}") from e
        return dest
