"""Installation of the signing certificate into the machine store."""

import base64
import binascii
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import pkcs12

from . import actions
from .errors import CertificateImportFailed, EmptyCertificate, EmptyPassword
from .runner import CommandError, CommandRunner, format_command

CERTIFICATE_BASENAME = "certificate"


@dataclass(frozen=True)
class InstalledCertificate:
    """Certificate written to disk and imported into the store."""

    path: str
    password: Optional[str] = None

    @property
    def is_pfx(self) -> bool:
        """Password-protected certificates are written as PFX."""
        return bool(self.password)


def decode_certificate(base64_cert: str) -> bytes:
    """
    Decode a base64 encoded certificate.

    Args:
        base64_cert: Certificate bytes as base64 (whitespace is ignored)

    Returns:
        Decoded certificate bytes

    Raises:
        EmptyCertificate: If the input is empty or not valid base64
    """
    data = "".join((base64_cert or "").split())
    if not data:
        raise EmptyCertificate("Required certificate is an empty string")

    # Tolerate missing padding
    data += "=" * (-len(data) % 4)
    try:
        certificate = base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise EmptyCertificate(f"Certificate is not valid base64: {e}")

    if len(certificate) == 0:
        raise EmptyCertificate("Required certificate is an empty string")

    return certificate


def describe_certificate(data: bytes, password: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Extract subject and thumbprint from certificate bytes for logging.

    Tries PKCS#12, then DER, then PEM.

    Returns:
        Dictionary with "subject", "thumbprint" and "not_after", or None if
        the bytes could not be parsed
    """
    cert = None
    try:
        _, cert, _ = pkcs12.load_key_and_certificates(
            data, password.encode() if password else None
        )
    except ValueError:
        for loader in (x509.load_der_x509_certificate, x509.load_pem_x509_certificate):
            try:
                cert = loader(data)
                break
            except ValueError:
                continue

    if cert is None:
        return None

    return {
        "subject": cert.subject.rfc4514_string(),
        "thumbprint": cert.fingerprint(hashes.SHA1()).hex().upper(),
        "not_after": cert.not_valid_after_utc.isoformat(),
    }


def default_temp_dir() -> str:
    """Temporary directory used by the runner (TEMP on Windows agents)."""
    return os.getenv("TEMP") or tempfile.gettempdir()


class CertificateInstaller:
    """Writes the certificate to disk and imports it with certutil."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        temp_dir: Optional[str] = None,
        require_password: bool = False,
    ):
        """
        Initialize installer.

        Args:
            runner: Command runner used for certutil (default: CommandRunner())
            temp_dir: Directory for the certificate file (default: TEMP)
            require_password: Fail when no password is supplied
        """
        self.runner = runner or CommandRunner()
        self.temp_dir = temp_dir or default_temp_dir()
        self.require_password = require_password

    def certificate_path(self, password: Optional[str]) -> Path:
        suffix = ".pfx" if password else ".crt"
        return Path(self.temp_dir) / f"{CERTIFICATE_BASENAME}{suffix}"

    def write_certificate(self, certificate: bytes, password: Optional[str]) -> InstalledCertificate:
        """Persist decoded certificate bytes to the fixed temporary path."""
        path = self.certificate_path(password)
        actions.info(f"Writing {len(certificate)} bytes to {path}.")
        path.write_bytes(certificate)

        details = describe_certificate(certificate, password)
        if details:
            actions.info(f"Certificate subject: {details['subject']}")
            actions.info(f"Certificate thumbprint: {details['thumbprint']}")
            actions.info(f"Certificate expires: {details['not_after']}")
        else:
            actions.info("Certificate details could not be read; importing as-is.")

        return InstalledCertificate(path=str(path), password=password or None)

    def import_command(self, certificate: InstalledCertificate) -> list:
        command = ["certutil", "-f"]
        if certificate.password:
            command += ["-p", certificate.password]
        command += ["-importpfx", certificate.path]
        return command

    def import_certificate(self, certificate: InstalledCertificate) -> None:
        """
        Import certificate into the machine's personal store.

        Raises:
            CertificateImportFailed: If certutil fails
        """
        command = self.import_command(certificate)
        actions.info(
            "Importing certificate: "
            + format_command(command, secrets=[certificate.password or ""])
        )
        try:
            stdout = self.runner.run(command)
        except CommandError as e:
            if e.stdout:
                actions.info(e.stdout)
            actions.error(f"Process to add certificate exited with code {e.code}.")
            if e.stderr:
                actions.error(e.stderr)
            raise CertificateImportFailed(
                f"Certificate import failed with exit code {e.code}",
                code=e.code,
                stdout=e.stdout,
                stderr=e.stderr,
            ) from e
        actions.info(stdout)

    def install(self, base64_cert: str, password: Optional[str] = None) -> InstalledCertificate:
        """
        Decode, persist and import the certificate.

        Args:
            base64_cert: Certificate as base64
            password: Certificate password (optional)

        Returns:
            InstalledCertificate describing the written file

        Raises:
            EmptyCertificate: If the certificate is empty
            EmptyPassword: If a password is required but missing
            CertificateImportFailed: If the store import fails
        """
        certificate = decode_certificate(base64_cert)
        if self.require_password and not password:
            raise EmptyPassword("Required Password to store certificate is an empty string")

        installed = self.write_certificate(certificate, password)
        self.import_certificate(installed)
        return installed
