"""Execution of external commands."""

import subprocess
from typing import Iterable, List, Optional, Sequence

REDACTED = "***"


class CommandError(Exception):
    """External command failed to launch or exited with a non-zero code."""

    def __init__(self, command: Sequence[str], code: int, stdout: str = "", stderr: str = ""):
        super().__init__(f"{command[0] if command else '<empty>'} exited with code {code}")
        self.command = list(command)
        self.code = code
        self.stdout = stdout
        self.stderr = stderr


def format_command(command: Sequence[str], secrets: Optional[Iterable[str]] = None) -> str:
    """
    Render an argument list as a Windows command line for logging.

    Args:
        command: Argument list
        secrets: Values to replace with a placeholder (e.g. passwords)

    Returns:
        Quoted command line with secrets redacted
    """
    hidden = {s for s in (secrets or []) if s}
    shown = [REDACTED if arg in hidden else arg for arg in command]
    return subprocess.list2cmdline(shown)


class CommandRunner:
    """Runs argument lists without a shell and captures their output."""

    def run(self, command: List[str]) -> str:
        """
        Run a command to completion.

        Args:
            command: Program and arguments

        Returns:
            Captured standard output

        Raises:
            CommandError: If the program cannot be started or exits non-zero
        """
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                # Localized tool output may not match the locale code page
                errors="replace",
            )
        except OSError as e:
            raise CommandError(command, -1, "", str(e)) from e

        if result.returncode != 0:
            raise CommandError(command, result.returncode, result.stdout, result.stderr)

        return result.stdout
