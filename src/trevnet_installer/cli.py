"""CLI entry point using Typer."""

from __future__ import annotations

import logging
import os

import typer
from rich.console import Console
from rich.logging import RichHandler

from trevnet_installer.context import AppContext, create_context

LOG_LEVEL_VAR = "TREVNET_LOG_LEVEL"

app = typer.Typer(
    name="trevnet-install",
    help="Install trevnet-server as a systemd service",
    add_completion=False,
)


def configure_logging(level_name: str | None = None) -> None:
    """Send diagnostic logging to stderr through rich.

    Args:
        level_name: Level name such as "DEBUG". Defaults to the
            TREVNET_LOG_LEVEL variable, then WARNING.
    """
    level_name = (level_name or os.environ.get(LOG_LEVEL_VAR) or "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


@app.command()
def install() -> None:
    """Install or upgrade trevnet-server (run as root)."""
    run_install()


def run_install(_context: AppContext | None = None) -> None:
    """Run the install and report the outcome.

    Args:
        _context: Injected dependencies (for testing).

    Raises:
        typer.Exit: With status 1 if the install failed.
    """
    ctx = _context or create_context()
    result = ctx.orchestrator.run()

    if not result.success:
        ctx.console.show_error(str(result.error))
        raise typer.Exit(1)

    config = ctx.orchestrator.config
    ctx.console.show_success(f"Installation complete! (version {result.version})")
    if config is not None:
        ctx.console.show_next_steps(config.service_name, str(config.env_file))


def main() -> None:
    """Console script entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
