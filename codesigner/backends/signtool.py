"""Authenticode signing with signtool.exe."""

from typing import Any, Dict, List, Optional

from .. import actions
from ..discovery import PACKAGE_EXTENSIONS, SIGNABLE_EXTENSIONS
from .base import SigningBackend, SigningParameters, SigningRequest

NUPKG_SKIP = "skip"
NUPKG_SIGN = "sign"
NUPKG_MODES = (NUPKG_SKIP, NUPKG_SIGN)

DIGEST_ALGORITHM = "SHA256"


class SigntoolBackend(SigningBackend):
    """Signs files with signtool using the machine store or a PFX file."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize signtool backend."""
        super().__init__(config)
        self.nupkg = self.config.get("nupkg", NUPKG_SKIP)
        if self.nupkg not in NUPKG_MODES:
            raise ValueError(f"nupkg must be one of {', '.join(NUPKG_MODES)}")

    def supports(self, request: SigningRequest) -> bool:
        if request.extension in SIGNABLE_EXTENSIONS:
            return True
        return self.nupkg == NUPKG_SIGN and request.extension in PACKAGE_EXTENSIONS

    def build_command(
        self,
        request: SigningRequest,
        params: SigningParameters,
        use_certificate_file: bool = False,
    ) -> List[str]:
        """
        Build a signtool sign command.

        The store form selects the certificate from the machine store by
        thumbprint and/or subject name. The file form points signtool at the
        installed PFX instead and ignores the store selectors.

        see https://learn.microsoft.com/en-us/dotnet/framework/tools/signtool-exe
        """
        command = [params.tool_path, "sign"]

        if use_certificate_file:
            if params.certificate is None:
                raise ValueError("Signing from a certificate file requires an installed certificate")
            command += ["/f", params.certificate.path]
            if params.certificate.password:
                command += ["/p", params.certificate.password]
        else:
            command.append("/sm")

        command += [
            "/tr", params.timestamp_url,
            "/td", DIGEST_ALGORITHM,
            "/fd", DIGEST_ALGORITHM,
        ]

        if not use_certificate_file:
            if params.thumbprint:
                command += ["/sha1", params.thumbprint]
            if params.subject_name:
                command += ["/n", params.subject_name]
            if not params.has_certificate_selector:
                actions.warning(
                    "You need to include a NAME or a SHA1 Hash for the certificate to sign with."
                )

        if params.description:
            command += ["/d", params.description]

        command.append(request.file_path)
        return command

    def get_format(self) -> str:
        return "signtool"
