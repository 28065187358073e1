"""Unit tests for runner.py module."""

import subprocess
import sys
from unittest.mock import Mock

import pytest

from codesigner.runner import CommandError, CommandRunner, REDACTED, format_command


class TestFormatCommand:
    """Tests for format_command."""

    def test_quotes_arguments_with_spaces(self):
        """Test arguments containing spaces are quoted."""
        cmd = format_command(["C:/Program Files/signtool.exe", "sign", "/n", "Example Corp"])

        assert cmd == '"C:/Program Files/signtool.exe" sign /n "Example Corp"'

    def test_redacts_secrets(self):
        """Test secret values are replaced in the rendered command."""
        cmd = format_command(["certutil", "-p", "hunter2", "-importpfx", "c.pfx"], secrets=["hunter2"])

        assert "hunter2" not in cmd
        assert REDACTED in cmd

    def test_empty_secrets_ignored(self):
        """Test empty secret values do not redact empty arguments."""
        cmd = format_command(["tool", ""], secrets=[""])

        assert REDACTED not in cmd


class TestCommandRunner:
    """Tests for CommandRunner class."""

    def test_run_success(self, mocker):
        """Test stdout is returned on exit code 0."""
        result = Mock(returncode=0, stdout="Successfully signed\n", stderr="")
        mock_run = mocker.patch("codesigner.runner.subprocess.run", return_value=result)

        stdout = CommandRunner().run(["signtool.exe", "sign", "app.exe"])

        assert stdout == "Successfully signed\n"
        mock_run.assert_called_once_with(
            ["signtool.exe", "sign", "app.exe"],
            capture_output=True,
            text=True,
            errors="replace",
        )

    def test_run_does_not_use_shell(self, mocker):
        """Test commands are passed as argument lists."""
        result = Mock(returncode=0, stdout="", stderr="")
        mock_run = mocker.patch("codesigner.runner.subprocess.run", return_value=result)

        CommandRunner().run(["tool", "a & b"])

        assert "shell" not in mock_run.call_args.kwargs

    def test_run_nonzero_exit(self, mocker):
        """Test non-zero exit raises CommandError with captured output."""
        result = Mock(returncode=1, stdout="out", stderr="SignTool Error: No certificates")
        mocker.patch("codesigner.runner.subprocess.run", return_value=result)

        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run(["signtool.exe", "sign"])

        assert exc_info.value.code == 1
        assert exc_info.value.stdout == "out"
        assert exc_info.value.stderr == "SignTool Error: No certificates"
        assert exc_info.value.command == ["signtool.exe", "sign"]

    def test_run_launch_error(self, mocker):
        """Test a missing program is reported as CommandError."""
        mocker.patch(
            "codesigner.runner.subprocess.run",
            side_effect=FileNotFoundError("No such file: certutil"),
        )

        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run(["certutil"])

        assert exc_info.value.code == -1
        assert "certutil" in exc_info.value.stderr

    def test_run_undecodable_output(self):
        """Test output that is not valid text still becomes a CommandError."""
        command = [
            sys.executable,
            "-c",
            "import sys; sys.stdout.buffer.write(b'\\x81\\xff'); "
            "sys.stderr.buffer.write(b'\\x81\\xff'); sys.exit(1)",
        ]

        with pytest.raises(CommandError) as exc_info:
            CommandRunner().run(command)

        assert exc_info.value.code == 1
        assert isinstance(exc_info.value.stdout, str)
        assert len(exc_info.value.stdout) >= 1
        assert isinstance(exc_info.value.stderr, str)
        assert len(exc_info.value.stderr) >= 1
