"""Release metadata retrieval and validation."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from trevnet_installer.errors import (
    FetchFailedError,
    InvalidMetadataError,
    TransportError,
    UnsupportedPlatformError,
    preview,
)
from trevnet_installer.protocols import Transport

logger = logging.getLogger(__name__)

# Publishers may render a missing value as this literal
NULL_MARKER = "null"


class ReleaseMetadata(BaseModel):
    """Latest release description published by the release service."""

    version: str = Field(min_length=1)
    # Only the entry for the detected platform is checked, at lookup time
    downloads: dict[str, Any]

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        """Accept numeric versions and reject the null marker."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str) and value.strip() == NULL_MARKER:
            raise ValueError("version is null")
        return value

    def download_url(self, platform: str) -> str | None:
        """Get the download URL for a platform key, if one is published.

        Raises:
            ValueError: If the entry is present but is not a string.
        """
        url = self.downloads.get(platform)
        if url is not None and not isinstance(url, str):
            raise ValueError(f"download entry for {platform} is not a string")
        if not url or url == NULL_MARKER:
            return None
        return url


class MetadataFetcher:
    """Fetches and validates release metadata."""

    METADATA_FILE = "latest.json"

    def __init__(self, transport: Transport) -> None:
        """Initialize with the transport used for retrieval."""
        self.transport = transport

    def fetch(self, url: str) -> ReleaseMetadata:
        """Retrieve and parse release metadata.

        The temporary download area is removed before returning, whether
        or not the fetch succeeds.

        Args:
            url: Metadata URL.

        Returns:
            Validated ReleaseMetadata.

        Raises:
            FetchFailedError: If retrieval fails or yields an empty body.
            InvalidMetadataError: If the body is not valid metadata.
        """
        with tempfile.TemporaryDirectory(prefix="trevnet-metadata-") as tmp:
            target = Path(tmp) / self.METADATA_FILE
            try:
                self.transport.download(url, target)
            except TransportError as e:
                raise FetchFailedError(f"Failed to fetch metadata from {url}: {e}") from e

            if not target.is_file() or target.stat().st_size == 0:
                raise FetchFailedError(
                    f"Metadata from {url} is empty or does not exist"
                )
            raw = target.read_bytes()
            logger.debug("Fetched %d bytes of metadata from %s", len(raw), url)

        return self.parse(raw.decode("utf-8", errors="replace"))

    def parse(self, content: str) -> ReleaseMetadata:
        """Parse a metadata document.

        Args:
            content: Raw document text.

        Returns:
            Validated ReleaseMetadata.

        Raises:
            InvalidMetadataError: If parsing or validation fails.
        """
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidMetadataError(
                f"Invalid JSON in metadata ({e.msg}). Contents: {preview(content)}"
            ) from e

        if not isinstance(data, dict) or not data.get("version") or "downloads" not in data:
            raise InvalidMetadataError(
                "Invalid metadata format. Missing 'version' or 'downloads' field. "
                f"Contents: {preview(content)}"
            )

        try:
            return ReleaseMetadata.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise InvalidMetadataError(
                f"Invalid metadata fields ({fields}). Metadata preview: {preview(content)}"
            ) from e

    def resolve_download(self, metadata: ReleaseMetadata, platform: str) -> str:
        """Get the download URL for the detected platform.

        Args:
            metadata: Validated release metadata.
            platform: Detected platform key.

        Returns:
            Download URL.

        Raises:
            UnsupportedPlatformError: If the release has no build for the platform.
            InvalidMetadataError: If the platform entry is not a URL string.
        """
        try:
            url = metadata.download_url(platform)
        except ValueError as e:
            entry = json.dumps(metadata.downloads[platform], default=str)
            raise InvalidMetadataError(
                f"Invalid download entry for platform {platform}: {preview(entry)}"
            ) from e
        if url is None:
            raise UnsupportedPlatformError(f"No download available for platform: {platform}")
        return url
