"""Operator-facing console output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel


class InstallerConsole:
    """Progress and error messages on the error stream.

    Satisfies the Reporter protocol structurally.
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize console output.

        Args:
            console: Rich console to print to. Defaults to one on stderr.
        """
        self.console = console or Console(stderr=True)

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(f"[green]Info:[/green] {escape(message)}", highlight=False)

    def show_warning(self, message: str) -> None:
        """Display a warning message."""
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}", highlight=False)

    def show_next_steps(self, service_name: str, env_file: str) -> None:
        """Display what the operator should do after a successful install.

        Args:
            service_name: Installed service name.
            env_file: Environment file read by the service.
        """
        self.console.print(
            Panel(
                f"1. Create/edit environment file: {escape(env_file)} (optional)\n"
                f"2. Start the service: systemctl start {escape(service_name)}\n"
                f"3. Check status: systemctl status {escape(service_name)}\n"
                f"4. View logs: journalctl -u {escape(service_name)} -f",
                title="Next steps",
                border_style="green",
            )
        )
