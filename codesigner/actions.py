"""Log sink and input helpers for GitHub Actions runners."""

import os
from typing import Mapping, Optional

import click


def is_github_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether we are running inside a GitHub Actions job."""
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS") == "true"


def escape_data(message: str) -> str:
    """Escape a message for use as workflow command data."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Read an action input the way the Actions toolkit does.

    Args:
        name: Input name as declared in action.yml (e.g. "timestampUrl")
        environ: Environment mapping (default: os.environ)

    Returns:
        Trimmed input value, or an empty string if unset
    """
    environ = os.environ if environ is None else environ
    key = "INPUT_" + name.replace(" ", "_").upper()
    return environ.get(key, "").strip()


def info(message: str) -> None:
    click.echo(message)


def warning(message: str) -> None:
    if is_github_actions():
        click.echo(f"::warning::{escape_data(message)}", err=True)
    else:
        click.echo(f"⚠️  {message}", err=True)


def error(message: str) -> None:
    if is_github_actions():
        click.echo(f"::error::{escape_data(message)}", err=True)
    else:
        click.echo(f"❌ {message}", err=True)


def set_failed(message: str) -> None:
    """Report the run as failed. The caller owns the exit code."""
    error(message)
