"""Top-level signing run: install certificate, locate signtool, sign files."""

import time
from typing import Callable, List, Optional

from . import actions
from .backends.base import SigningParameters
from .backends.signtool import SigntoolBackend
from .certificate import CertificateInstaller
from .config import SigningConfig
from .discovery import discover_files
from .errors import MissingTarget
from .locator import locate_signing_tool
from .orchestrator import SigningOrchestrator
from .runner import CommandRunner


def resolve_tool_path(config: SigningConfig) -> str:
    """Use the configured signtool path, or locate the newest installed one."""
    signtool = config.get("signtool")
    if signtool:
        actions.info(f"Using configured signtool {signtool}.")
        return signtool
    return locate_signing_tool(config.get("signtool_root"), config.get("signtool_arch"))


def run_pipeline(
    config: SigningConfig,
    runner: Optional[CommandRunner] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[str]:
    """
    Run every stage of a signing run, stopping at the first failure.

    Args:
        config: Run configuration
        runner: Command runner for certutil and signtool
        sleep: Sleep function used for retry backoff

    Returns:
        Paths of the files that were signed

    Raises:
        CodeSignError: If any stage fails
    """
    runner = runner or CommandRunner()

    filename = config.get("filename")
    folder = config.get("folder")
    if not filename and not folder:
        raise MissingTarget("Either filename or folder must be set.")

    installer = CertificateInstaller(
        runner=runner,
        temp_dir=config.get("certificate_dir"),
        require_password=config.get("require_password"),
    )
    certificate = installer.install(config.get("certificate"), config.get("password"))

    params = SigningParameters.create(
        tool_path=resolve_tool_path(config),
        timestamp_url=config.get("timestampUrl"),
        thumbprint=config.get("certificatesha1"),
        subject_name=config.get("certificatename"),
        description=config.get("description"),
        certificate=certificate,
    )

    orchestrator = SigningOrchestrator(
        SigntoolBackend(config.get_backend_config()),
        runner=runner,
        max_attempts=config.get("max_attempts"),
        fallback_to_file=config.get("fallback_to_file"),
        sleep=sleep,
    )

    if filename:
        files = [filename]
    else:
        files = discover_files(folder, config.get("recursive"))

    return orchestrator.sign_files(params, files)


def run(
    config: SigningConfig,
    runner: Optional[CommandRunner] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Run the signing pipeline and report the outcome.

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    try:
        signed = run_pipeline(config, runner=runner, sleep=sleep)
    except Exception as e:
        actions.set_failed(str(e) or f"Action failed with response: {e!r}")
        return 1

    actions.info(f"✅ Signed {len(signed)} file(s).")
    return 0
