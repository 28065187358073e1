"""Signing backend plugins."""

from .base import DEFAULT_TIMESTAMP_URL, SigningBackend, SigningParameters, SigningRequest
from .signtool import SigntoolBackend

__all__ = [
    "DEFAULT_TIMESTAMP_URL",
    "SigningBackend",
    "SigningParameters",
    "SigningRequest",
    "SigntoolBackend",
]
