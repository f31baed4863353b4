"""Shared test fixtures."""

from __future__ import annotations

import io
import json
import tarfile
import tempfile
from pathlib import Path
from typing import Any

import pytest

from trevnet_installer.errors import HostCommandError, TransportError

METADATA_URL = "https://releases.test/trevnet-server/latest.json"
ARCHIVE_URL = "https://releases.test/trevnet-server/1.2.3/linux-amd64.tar.gz"
TEMPLATE_URL = "https://releases.test/trevnet-server/install/trevnet-server.service.template"
BINARY_CONTENT = b"\x7fELF trevnet-server 1.2.3"

TEMPLATE_TEXT = """[Service]
User=@USER@
Group=@GROUP@
WorkingDirectory=@WORKING_DIR@
EnvironmentFile=-@ENV_FILE@
ExecStart=@EXEC_START@
"""


def make_archive(entries: dict[str, bytes]) -> bytes:
    """Build a gzip tar archive in memory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


# ============================================================================
# Fake Host
# ============================================================================


class FakeHost:
    """In-memory HostEnvironment.

    Records account, filesystem and service-manager state in dictionaries.
    Operations listed in ``failures`` raise HostCommandError.
    """

    def __init__(
        self,
        system: str = "Linux",
        machine: str = "x86_64",
        privileged: bool = True,
    ) -> None:
        self.system = system
        self.machine = machine
        self.privileged = privileged
        self.groups: set[str] = set()
        self.users: dict[str, tuple[str, Path, str]] = {}
        self.dirs: set[Path] = {Path("/")}
        self.files: dict[Path, bytes] = {}
        self.modes: dict[Path, int] = {}
        self.owners: dict[Path, tuple[str, str]] = {}
        self.enabled: set[str] = set()
        self.started: set[str] = set()
        self.reloads = 0
        self.calls: list[tuple[Any, ...]] = []
        self.failures: set[str] = set()

    def _check(self, operation: str, argv: list[str]) -> None:
        if operation in self.failures:
            raise HostCommandError(argv, 1, f"{operation} rejected")

    def is_privileged(self) -> bool:
        return self.privileged

    def system_name(self) -> str:
        return self.system

    def machine_name(self) -> str:
        return self.machine

    def group_exists(self, group: str) -> bool:
        return group in self.groups

    def user_exists(self, user: str) -> bool:
        return user in self.users

    def create_group(self, group: str) -> None:
        self._check("create_group", ["groupadd", "-r", group])
        self.calls.append(("create_group", group))
        self.groups.add(group)

    def create_user(self, user: str, group: str, home_dir: Path, shell: str) -> None:
        self._check("create_user", ["useradd", user])
        self.calls.append(("create_user", user))
        self.users[user] = (group, home_dir, shell)

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        if path in self.dirs and not exist_ok:
            raise FileExistsError(str(path))
        if not parents and path.parent not in self.dirs:
            raise FileNotFoundError(str(path.parent))
        self.calls.append(("mkdir", path))
        self.dirs.add(path)
        if parents:
            self.dirs.update(path.parents)

    def chmod(self, path: Path, mode: int) -> None:
        self.modes[path] = mode

    def chown(self, path: Path, user: str, group: str) -> None:
        self.owners[path] = (user, group)

    def chown_recursive(self, path: Path, user: str, group: str) -> None:
        self.calls.append(("chown_recursive", path))
        for candidate in self.dirs | set(self.files):
            if candidate == path or path in candidate.parents:
                self.owners[candidate] = (user, group)

    def write_text(self, path: Path, content: str) -> None:
        self.files[path] = content.encode()

    def install_file(self, src: Path, dest: Path, mode: int) -> None:
        self.calls.append(("install_file", dest))
        self.files[dest] = src.read_bytes()
        self.modes[dest] = mode

    def reload_service_manager(self) -> None:
        self._check("reload", ["systemctl", "daemon-reload"])
        self.reloads += 1

    def enable_service(self, service_name: str) -> None:
        self._check("enable", ["systemctl", "enable", service_name])
        self.enabled.add(service_name)


class FakeTransport:
    """Transport serving fixed content per URL.

    Unknown URLs fail like an unreachable host.
    """

    def __init__(self, resources: dict[str, bytes] | None = None) -> None:
        self.resources = dict(resources or {})
        self.requests: list[str] = []

    def download(self, url: str, dest: Path) -> None:
        self.requests.append(url)
        if url not in self.resources:
            raise TransportError(f"Cannot reach {url}")
        dest.write_bytes(self.resources[url])


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_host() -> FakeHost:
    """Create a privileged linux-amd64 host with no accounts."""
    return FakeHost()


@pytest.fixture
def metadata_document() -> dict[str, Any]:
    """Release metadata published for version 1.2.3."""
    return {"version": "1.2.3", "downloads": {"linux-amd64": ARCHIVE_URL}}


@pytest.fixture
def archive_bytes() -> bytes:
    """Release archive holding the binary at its root."""
    return make_archive({"trevnet-server": BINARY_CONTENT})


@pytest.fixture
def fake_transport(metadata_document: dict[str, Any], archive_bytes: bytes) -> FakeTransport:
    """Transport serving metadata, archive and template."""
    return FakeTransport(
        {
            METADATA_URL: json.dumps(metadata_document).encode(),
            ARCHIVE_URL: archive_bytes,
            TEMPLATE_URL: TEMPLATE_TEXT.encode(),
        }
    )


@pytest.fixture
def temp_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route tempfile into an isolated directory so cleanup can be checked."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory holding a unit template."""
    directory = tmp_path / "installer"
    directory.mkdir()
    (directory / "trevnet-server.service.template").write_text(TEMPLATE_TEXT)
    return directory
