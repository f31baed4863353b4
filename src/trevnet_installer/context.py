"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in the CLI command.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from trevnet_installer.console import InstallerConsole
from trevnet_installer.orchestrator import InstallOrchestrator
from trevnet_installer.protocols import HostEnvironment, Transport


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for everything the CLI uses.
    """

    host: HostEnvironment
    transport: Transport
    orchestrator: InstallOrchestrator
    console: InstallerConsole = field(default_factory=InstallerConsole)


def create_context(environ: Mapping[str, str] | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        environ: Configuration overrides. Defaults to os.environ.

    Returns:
        Configured AppContext with all dependencies.
    """
    from trevnet_installer.host import RealHostEnvironment
    from trevnet_installer.transport import UrllibTransport

    host = RealHostEnvironment()
    transport = UrllibTransport()
    console = InstallerConsole()
    orchestrator = InstallOrchestrator.create(
        host=host,
        transport=transport,
        environ=dict(os.environ if environ is None else environ),
        reporter=console,
    )
    return AppContext(
        host=host,
        transport=transport,
        orchestrator=orchestrator,
        console=console,
    )
