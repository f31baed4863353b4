"""Tests for types and errors modules."""

from __future__ import annotations

from pathlib import Path

import pytest

from trevnet_installer.errors import (
    FetchFailedError,
    HostCommandError,
    InstallerError,
    preview,
)
from trevnet_installer.types import InstallResult, InstallState


class TestInstallResult:
    """Tests for InstallResult dataclass."""

    def test_success_result(self) -> None:
        """Test successful install result."""
        result = InstallResult(
            success=True,
            state=InstallState.COMPLETE,
            binary_path=Path("/opt/trevnet/trevnet-server"),
        )
        assert result.success is True
        assert result.error is None
        assert result.error_kind is None

    def test_failure_result(self) -> None:
        """Test failed install result."""
        result = InstallResult(
            success=False,
            state=InstallState.FAILED,
            failed_at=InstallState.FETCHING_METADATA,
            error=FetchFailedError("unreachable"),
        )
        assert result.error_kind == "FetchFailed"

    def test_success_with_error_raises(self) -> None:
        """Creating success=True with error set raises ValueError."""
        with pytest.raises(ValueError, match="success=True but error is set"):
            InstallResult(
                success=True,
                state=InstallState.COMPLETE,
                error=FetchFailedError("x"),
            )

    def test_failure_without_error_raises(self) -> None:
        """Creating success=False without error raises ValueError."""
        with pytest.raises(ValueError, match="success=False requires error"):
            InstallResult(success=False, state=InstallState.FAILED)

    def test_success_requires_complete(self) -> None:
        """A successful result must be in the COMPLETE state."""
        with pytest.raises(ValueError, match="requires state COMPLETE"):
            InstallResult(success=True, state=InstallState.GENERATING_UNIT)

    def test_failure_requires_failed(self) -> None:
        """A failed result must be in the FAILED state."""
        with pytest.raises(ValueError, match="requires state FAILED"):
            InstallResult(
                success=False,
                state=InstallState.COMPLETE,
                error=FetchFailedError("x"),
            )


class TestErrors:
    """Tests for the error taxonomy."""

    def test_all_errors_tagged(self) -> None:
        """Every taxonomy error has a distinct kind."""
        kinds = [cls.kind for cls in InstallerError.__subclasses__()]

        assert len(kinds) == len(set(kinds)) == 13

    def test_preview_short(self) -> None:
        """Short content is kept whole."""
        assert preview("abc") == "abc"

    def test_preview_truncates(self) -> None:
        """Long content is truncated to the limit."""
        assert preview("a" * 300) == "a" * 200 + "..."

    def test_host_command_error_message(self) -> None:
        """Command errors name the command and its stderr."""
        error = HostCommandError(["groupadd", "-r", "trevnet"], 9, "group exists\n")

        assert str(error) == "groupadd -r trevnet exited with status 9: group exists"
        assert error.returncode == 9
