"""Command-line interface for signing operations."""

import click
import sys

from . import __version__
from .backends.base import SigningRequest
from .backends.signtool import NUPKG_MODES, SigntoolBackend
from .config import SigningConfig, load_config, load_default_config, ConfigError
from .discovery import discover_files
from .errors import ToolNotFound
from .locator import DEFAULT_ARCH, DEFAULT_SIGNTOOL_ROOT, locate_signing_tool
from .pipeline import run


@click.group()
@click.version_option(version=__version__)
def main():
    """Code signing for Windows build pipelines."""
    pass


@main.command()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Configuration file (YAML). Defaults to .signing/config.yaml if present.",
)
@click.option("--certificate", help="Base64 encoded certificate")
@click.option("--password", help="Certificate password")
@click.option("--certificatesha1", help="SHA1 thumbprint of the certificate to sign with")
@click.option("--certificatename", help="Subject name of the certificate to sign with")
@click.option("--description", help="Description of the signed content")
@click.option("--timestamp-url", "timestamp_url", help="RFC 3161 timestamp server URL")
@click.option("--filename", help="Single file to sign")
@click.option("--folder", help="Folder with files to sign")
@click.option("--recursive/--no-recursive", default=None, help="Sign files in subfolders")
@click.option("--signtool", help="Path to signtool.exe (skips the Windows Kits search)")
@click.option("--max-attempts", "max_attempts", type=click.IntRange(min=1), help="Attempts per file")
@click.option(
    "--fallback-to-file/--no-fallback-to-file",
    "fallback_to_file",
    default=None,
    help="Retry by signing directly from the PFX file",
)
@click.option("--nupkg", type=click.Choice(NUPKG_MODES), help="How to treat .nupkg files")
def sign(
    config,
    certificate,
    password,
    certificatesha1,
    certificatename,
    description,
    timestamp_url,
    filename,
    folder,
    recursive,
    signtool,
    max_attempts,
    fallback_to_file,
    nupkg,
):
    """Install the certificate and sign a file or folder."""
    try:
        if config:
            signing_config = load_config(config)
            click.echo(f"Loaded config: {config}")
        else:
            signing_config = load_default_config()
            if signing_config:
                click.echo("Loaded default config: .signing/config.yaml")
            else:
                signing_config = SigningConfig({})

        signing_config = signing_config.apply_environment_overrides()
        signing_config = signing_config.merge_with_cli_args(
            certificate=certificate,
            password=password,
            certificatesha1=certificatesha1,
            certificatename=certificatename,
            description=description,
            timestampUrl=timestamp_url,
            filename=filename,
            folder=folder,
            recursive=recursive,
            signtool=signtool,
            max_attempts=max_attempts,
            fallback_to_file=fallback_to_file,
            nupkg=nupkg,
        )
    except (FileNotFoundError, ConfigError) as e:
        click.echo(f"❌ Config error: {e}", err=True)
        sys.exit(1)

    sys.exit(run(signing_config))


@main.command()
@click.option("--root", default=DEFAULT_SIGNTOOL_ROOT, show_default=True, help="Windows Kits bin folder")
@click.option("--arch", default=DEFAULT_ARCH, show_default=True, help="Architecture subfolder")
def locate(root, arch):
    """Print the path of the newest installed signtool.exe."""
    try:
        click.echo(locate_signing_tool(root, arch))
    except ToolNotFound as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("folder", type=click.Path(exists=True, file_okay=False))
@click.option("--recursive", is_flag=True, help="Include subfolders")
@click.option("--nupkg", type=click.Choice(NUPKG_MODES), default="skip", show_default=True)
def discover(folder, recursive, nupkg):
    """List the files a signing run would pick up."""
    backend = SigntoolBackend({"nupkg": nupkg})
    count = 0
    for path in discover_files(folder, recursive):
        if backend.supports(SigningRequest.from_path(path)):
            click.echo(path)
            count += 1
        else:
            click.echo(f"{path} (skipped)")

    click.echo(f"\n{count} file(s) to sign")


if __name__ == "__main__":
    main()
