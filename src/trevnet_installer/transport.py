"""Downloads over HTTP(S) using urllib."""

from __future__ import annotations

import logging
import shutil
import ssl
import urllib.error
import urllib.request
from pathlib import Path

from trevnet_installer import __version__
from trevnet_installer.errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class UrllibTransport:
    """Transport implementation backed by urllib.

    HTTP error statuses fail the download, like ``curl -f``.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the transport.

        Args:
            timeout: Socket timeout in seconds.
        """
        self.timeout = timeout

    def download(self, url: str, dest: Path) -> None:
        """Download a URL to a local file.

        Args:
            url: Resource URL.
            dest: Local file to write.

        Raises:
            TransportError: On HTTP errors, network errors or invalid URLs.
        """
        logger.debug("Downloading %s to %s", url, dest)
        try:
            request = urllib.request.Request(
                url,
                headers={"User-Agent": f"trevnet-installer/{__version__}"},
            )
            with urllib.request.urlopen(
                request, timeout=self.timeout, context=ssl.create_default_context()
            ) as response, dest.open("wb") as out:
                shutil.copyfileobj(response, out)
        except urllib.error.HTTPError as e:
            raise TransportError(f"HTTP {e.code} from {url}") from e
        except urllib.error.URLError as e:
            raise TransportError(f"Cannot reach {url}: {e.reason}") from e
        except (OSError, ValueError) as e:
            raise TransportError(f"Download of {url} failed: {e}") from e
