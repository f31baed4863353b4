"""Tests for context module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from trevnet_installer.console import InstallerConsole
from trevnet_installer.context import AppContext, create_context
from trevnet_installer.host import RealHostEnvironment
from trevnet_installer.orchestrator import PACKAGE_TEMPLATE_DIR, InstallOrchestrator
from trevnet_installer.service import SYSTEMD_UNIT_DIR
from trevnet_installer.transport import UrllibTransport


class TestAppContext:
    """Tests for AppContext dataclass."""

    def test_create_with_all_dependencies(self) -> None:
        """Test creating context with all dependencies."""
        host = MagicMock()
        transport = MagicMock()
        orchestrator = MagicMock()
        console = MagicMock()
        ctx = AppContext(
            host=host,
            transport=transport,
            orchestrator=orchestrator,
            console=console,
        )
        assert ctx.host is host
        assert ctx.transport is transport
        assert ctx.orchestrator is orchestrator
        assert ctx.console is console

    def test_default_console(self) -> None:
        """Test context creates default console if not provided."""
        ctx = AppContext(host=MagicMock(), transport=MagicMock(), orchestrator=MagicMock())
        assert isinstance(ctx.console, InstallerConsole)


class TestCreateContext:
    """Tests for create_context factory function."""

    def test_production_wiring(self) -> None:
        """Production context uses the real host and urllib transport."""
        ctx = create_context({"TREVNET_USER": "svc"})

        assert isinstance(ctx.host, RealHostEnvironment)
        assert isinstance(ctx.transport, UrllibTransport)
        assert isinstance(ctx.orchestrator, InstallOrchestrator)
        assert ctx.orchestrator.host is ctx.host
        assert ctx.orchestrator.transport is ctx.transport
        assert ctx.orchestrator.reporter is ctx.console
        assert ctx.orchestrator.environ == {"TREVNET_USER": "svc"}
        assert ctx.orchestrator.unit_dir == SYSTEMD_UNIT_DIR
        assert ctx.orchestrator.template_dirs[-1] == PACKAGE_TEMPLATE_DIR

    def test_defaults_to_process_environment(self, monkeypatch) -> None:
        """Without overrides the process environment is used."""
        monkeypatch.setenv("TREVNET_GROUP", "svcgrp")

        ctx = create_context()

        assert ctx.orchestrator.environ["TREVNET_GROUP"] == "svcgrp"

    def test_package_template_exists(self) -> None:
        """The packaged template is reachable from the default search path."""
        assert (PACKAGE_TEMPLATE_DIR / "trevnet-server.service.template").is_file()
        assert isinstance(PACKAGE_TEMPLATE_DIR, Path)
