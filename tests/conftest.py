"""Shared pytest fixtures for all tests."""

import base64
import os
from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from codesigner.backends.base import SigningParameters
from codesigner.certificate import InstalledCertificate


class FakeRunner:
    """Command runner that records commands and replays scripted results."""

    def __init__(self, results=None):
        # Each result is either stdout text or an exception to raise
        self.results = list(results or [])
        self.commands = []

    def run(self, command):
        self.commands.append(list(command))
        result = self.results.pop(0) if self.results else "Done"
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def signing_key():
    """Generate an EC key for test certificates."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def signing_certificate(signing_key):
    """Self-signed code signing certificate."""
    name = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, "Test Code Signing"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example Corp"),
    ])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(signing_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(signing_key, hashes.SHA256())
    )


@pytest.fixture
def pfx_base64(signing_key, signing_certificate):
    """Password-protected PKCS#12 bundle as base64 (password: "s3cret")."""
    data = pkcs12.serialize_key_and_certificates(
        b"test",
        signing_key,
        signing_certificate,
        None,
        serialization.BestAvailableEncryption(b"s3cret"),
    )
    return base64.b64encode(data).decode()


@pytest.fixture
def der_base64(signing_certificate):
    """DER encoded certificate as base64."""
    data = signing_certificate.public_bytes(serialization.Encoding.DER)
    return base64.b64encode(data).decode()


@pytest.fixture
def pfx_certificate(tmp_path):
    """Installed PFX certificate value."""
    return InstalledCertificate(path=str(tmp_path / "certificate.pfx"), password="s3cret")


@pytest.fixture
def signing_params(pfx_certificate):
    """Signing parameters selecting the certificate by thumbprint."""
    return SigningParameters.create(
        tool_path="C:/signtool.exe",
        thumbprint="ABC123",
        certificate=pfx_certificate,
    )


@pytest.fixture
def sample_tree(tmp_path):
    """
    Create a folder tree with signable and non-signable files.

    root/
      app.exe, lib.dll, readme.txt, package.nupkg
      sub/
        driver.sys, data.json
        deep/
          script.ps1
      empty/
    """
    root = tmp_path / "dist"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "empty").mkdir()

    for path in [
        root / "app.exe",
        root / "lib.dll",
        root / "readme.txt",
        root / "package.nupkg",
        root / "sub" / "driver.sys",
        root / "sub" / "data.json",
        root / "sub" / "deep" / "script.ps1",
    ]:
        path.write_bytes(b"MZ")

    return root


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Run every test outside GitHub Actions and without action inputs."""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    for key in list(os.environ):
        if key.startswith("INPUT_"):
            monkeypatch.delenv(key, raising=False)
