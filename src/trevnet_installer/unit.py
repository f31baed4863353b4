"""Rendering of the service unit template."""

from __future__ import annotations

from pathlib import Path

from trevnet_installer.errors import TemplateNotFoundError

PLACEHOLDERS = ("@USER@", "@GROUP@", "@WORKING_DIR@", "@ENV_FILE@", "@EXEC_START@")


class ServiceUnitGenerator:
    """Fills the unit template placeholders with install parameters.

    Substitution is literal and unescaped. Placeholders missing from the
    template are ignored.
    """

    def render(
        self,
        template_path: Path,
        user: str,
        group: str,
        working_dir: Path,
        env_file: Path,
        exec_start: Path,
    ) -> str:
        """Render a unit definition from a template file.

        Args:
            template_path: Template to read.
            user: Value for @USER@.
            group: Value for @GROUP@.
            working_dir: Value for @WORKING_DIR@.
            env_file: Value for @ENV_FILE@.
            exec_start: Value for @EXEC_START@.

        Returns:
            Rendered unit text.

        Raises:
            TemplateNotFoundError: If the template file does not exist.
        """
        if not template_path.is_file():
            raise TemplateNotFoundError(f"Template file not found: {template_path}")

        values = dict(
            zip(
                PLACEHOLDERS,
                (user, group, str(working_dir), str(env_file), str(exec_start)),
            )
        )
        return self.substitute(template_path.read_text(), values)

    @staticmethod
    def substitute(template: str, values: dict[str, str]) -> str:
        """Replace every occurrence of each placeholder."""
        for placeholder, value in values.items():
            template = template.replace(placeholder, value)
        return template
