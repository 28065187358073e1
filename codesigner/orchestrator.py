"""Signing orchestrator with bounded retry and certificate-file fallback."""

import time
from typing import Callable, Iterable, List, Optional

from . import actions
from .backends.base import SigningBackend, SigningParameters, SigningRequest
from .errors import SigningFailed
from .runner import CommandError, CommandRunner, format_command

DEFAULT_MAX_ATTEMPTS = 10


class SigningOrchestrator:
    """Signs files one at a time, retrying transient signtool failures."""

    def __init__(
        self,
        backend: SigningBackend,
        runner: Optional[CommandRunner] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        fallback_to_file: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize orchestrator.

        Args:
            backend: Backend that decides which files it signs and builds commands
            runner: Command runner (default: CommandRunner())
            max_attempts: Attempts per file before giving up (1 = no retry)
            fallback_to_file: Alternate with signing from the PFX file on retries
            sleep: Sleep function used for backoff
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.backend = backend
        self.runner = runner or CommandRunner()
        self.max_attempts = max_attempts
        self.fallback_to_file = fallback_to_file
        self.sleep = sleep

    def _use_certificate_file(self, params: SigningParameters, attempt: int) -> bool:
        # Odd attempts sign straight from the PFX; the store form comes first
        if not self.fallback_to_file:
            return False
        if params.certificate is None or not params.certificate.is_pfx:
            return False
        return attempt % 2 == 1

    def sign_file(self, params: SigningParameters, file_path: str) -> bool:
        """
        Sign a single file.

        Waits `attempt` seconds before each retry (1, 2, 3, ...).

        Args:
            params: Shared signing parameters
            file_path: File to sign

        Returns:
            True if the file was signed, False if its type is not signable

        Raises:
            SigningFailed: If every attempt fails
        """
        request = SigningRequest.from_path(file_path)
        if not self.backend.supports(request):
            actions.info(f"Skipping {file_path}: {request.extension or 'no extension'} is not signed.")
            return False

        actions.info(f"Signing {file_path}.")
        last_error: Optional[CommandError] = None

        for attempt in range(self.max_attempts):
            if attempt:
                actions.info(f"Retrying in {attempt} seconds ({attempt + 1}/{self.max_attempts}).")
                self.sleep(attempt)

            command = self.backend.build_command(
                request, params, use_certificate_file=self._use_certificate_file(params, attempt)
            )
            actions.info(
                "Signing command: "
                + format_command(command, secrets=self.backend.secrets(params))
            )

            try:
                stdout = self.runner.run(command)
            except CommandError as e:
                last_error = e
                if e.stdout:
                    actions.info(e.stdout)
                actions.error(f"Process to sign file exited with code {e.code}.")
                if e.stderr:
                    actions.error(e.stderr)
                continue

            actions.info(stdout)
            return True

        raise SigningFailed(
            file_path,
            self.max_attempts,
            code=last_error.code if last_error else None,
            stdout=last_error.stdout if last_error else "",
            stderr=last_error.stderr if last_error else "",
        )

    def sign_files(self, params: SigningParameters, file_paths: Iterable[str]) -> List[str]:
        """
        Sign files sequentially in the order given.

        Args:
            params: Shared signing parameters
            file_paths: Files to sign (may be a lazy iterator)

        Returns:
            Paths that were signed

        Raises:
            SigningFailed: On the first file that cannot be signed
        """
        signed = []
        for file_path in file_paths:
            if self.sign_file(params, file_path):
                signed.append(file_path)
        return signed
