"""Install configuration resolved from environment overrides."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from trevnet_installer.errors import ConfigError

ENV_PREFIX = "TREVNET_"

DEFAULT_METADATA_URL = (
    "https://raw.githubusercontent.com/trevnetlabs/trevnet-releases/main/"
    "trevnet-server/latest.json"
)
DEFAULT_TEMPLATE_URL = (
    "https://raw.githubusercontent.com/trevnetlabs/trevnet-releases/main/"
    "trevnet-server/install/trevnet-server.service.template"
)
DEFAULT_INSTALL_DIR = Path("/opt/trevnet")
DEFAULT_ENV_FILE = Path("/etc/trevnet-server.env")

BINARY_NAME = "trevnet-server"
SERVICE_NAME = "trevnet-server"
TEMPLATE_NAME = "trevnet-server.service.template"


class InstallConfig(BaseModel):
    """Resolved install configuration.

    Built once per run and never modified. Fields that operators may
    override carry the name of their environment variable as alias.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: str = Field(default="trevnet", alias="TREVNET_USER")
    group: str = Field(default="trevnet", alias="TREVNET_GROUP")
    install_dir: Path = Field(default=DEFAULT_INSTALL_DIR, alias="TREVNET_INSTALL_DIR")
    binary_install_dir: Path = Field(
        default=DEFAULT_INSTALL_DIR, alias="TREVNET_BINARY_INSTALL_DIR"
    )
    env_file: Path = Field(default=DEFAULT_ENV_FILE, alias="TREVNET_ENV_FILE")
    metadata_url: str = Field(default=DEFAULT_METADATA_URL, alias="TREVNET_METADATA_URL")
    service_name: str = SERVICE_NAME
    binary_name: str = BINARY_NAME
    template_name: str = TEMPLATE_NAME
    template_url: str = DEFAULT_TEMPLATE_URL

    @model_validator(mode="before")
    @classmethod
    def _default_binary_install_dir(cls, data: Any) -> Any:
        """Default the binary directory to the install directory."""
        if not isinstance(data, dict):
            return data
        if data.get("TREVNET_BINARY_INSTALL_DIR") or data.get("binary_install_dir"):
            return data
        install_dir = data.get("TREVNET_INSTALL_DIR") or data.get("install_dir")
        if install_dir:
            return {**data, "binary_install_dir": install_dir}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def _reject_empty(cls, value: Any) -> Any:
        """Reject empty strings for every field."""
        if isinstance(value, str) and not value.strip():
            raise ValueError("value must not be empty")
        return value

    @property
    def exec_start(self) -> Path:
        """Path of the installed binary, as started by the service manager."""
        return self.binary_install_dir / self.binary_name

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> InstallConfig:
        """Build configuration from environment-style overrides.

        Empty values are treated as unset, matching shell ``${VAR:-default}``
        semantics.

        Args:
            environ: Mapping of variable names to values (usually os.environ).

        Returns:
            Resolved InstallConfig.

        Raises:
            ConfigError: If an override fails validation.
        """
        overrides = {
            key: value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX) and value
        }
        try:
            return cls.model_validate(overrides)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
