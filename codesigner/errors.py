"""Errors raised by the signing pipeline."""

from typing import Optional


class CodeSignError(Exception):
    """Base class for errors that abort a signing run."""
    pass


class EmptyCertificate(CodeSignError):
    """The configured certificate decodes to zero bytes."""
    pass


class EmptyPassword(CodeSignError):
    """A password is required to import the certificate but none was given."""
    pass


class CertificateImportFailed(CodeSignError):
    """The certificate store import command exited with an error."""

    def __init__(self, message: str, code: int = -1, stdout: str = "", stderr: str = ""):
        super().__init__(message)
        self.code = code
        self.stdout = stdout
        self.stderr = stderr


class ToolNotFound(CodeSignError):
    """No usable signtool.exe could be found."""
    pass


class MissingTarget(CodeSignError):
    """Neither a file nor a folder to sign was configured."""
    pass


class SigningFailed(CodeSignError):
    """A file could not be signed within the allowed number of attempts."""

    def __init__(
        self,
        file_path: str,
        attempts: int,
        code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(f"could not sign {file_path} after {attempts} attempts")
        self.file_path = file_path
        self.attempts = attempts
        self.code = code
        self.stdout = stdout
        self.stderr = stderr
