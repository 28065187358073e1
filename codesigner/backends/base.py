"""Base signing backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..certificate import InstalledCertificate
from ..discovery import get_extension

DEFAULT_TIMESTAMP_URL = "http://timestamp.digicert.com"


@dataclass(frozen=True)
class SigningRequest:
    """A single file to be signed."""

    file_path: str
    extension: str  # lower-cased, including the dot

    @classmethod
    def from_path(cls, file_path: str) -> "SigningRequest":
        return cls(file_path=file_path, extension=get_extension(file_path))


@dataclass(frozen=True)
class SigningParameters:
    """Signing options shared by every file in a run."""

    tool_path: str
    timestamp_url: str = DEFAULT_TIMESTAMP_URL
    thumbprint: Optional[str] = None
    subject_name: Optional[str] = None
    description: Optional[str] = None
    certificate: Optional[InstalledCertificate] = None

    @classmethod
    def create(
        cls,
        tool_path: str,
        timestamp_url: Optional[str] = None,
        thumbprint: Optional[str] = None,
        subject_name: Optional[str] = None,
        description: Optional[str] = None,
        certificate: Optional[InstalledCertificate] = None,
    ) -> "SigningParameters":
        """
        Build parameters from raw configuration values.

        Empty strings are treated as absent and an empty timestamp URL
        falls back to the default authority.
        """
        return cls(
            tool_path=tool_path,
            timestamp_url=timestamp_url or DEFAULT_TIMESTAMP_URL,
            thumbprint=thumbprint or None,
            subject_name=subject_name or None,
            description=description or None,
            certificate=certificate,
        )

    @property
    def has_certificate_selector(self) -> bool:
        """True if a thumbprint or subject name selects the certificate."""
        return bool(self.thumbprint or self.subject_name)


class SigningBackend(ABC):
    """Abstract base class for signing backends."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize backend with configuration."""
        self.config = config or {}

    @abstractmethod
    def supports(self, request: SigningRequest) -> bool:
        """
        Check if backend can sign the requested file.

        Args:
            request: File to sign

        Returns:
            True if the file type is handled by this backend
        """
        pass

    @abstractmethod
    def build_command(
        self,
        request: SigningRequest,
        params: SigningParameters,
        use_certificate_file: bool = False,
    ) -> List[str]:
        """
        Build the signing command for a file.

        Args:
            request: File to sign
            params: Shared signing parameters
            use_certificate_file: Sign from the certificate file instead of
                the certificate store

        Returns:
            Program and arguments
        """
        pass

    @abstractmethod
    def get_format(self) -> str:
        """
        Get backend identifier.

        Returns:
            Backend name (e.g., "signtool")
        """
        pass

    def secrets(self, params: SigningParameters) -> List[str]:
        """Values in the command line that must not be logged."""
        if params.certificate and params.certificate.password:
            return [params.certificate.password]
        return []
