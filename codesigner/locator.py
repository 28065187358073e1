"""Discovery of the newest installed signtool.exe."""

import os
from typing import List, Optional, Tuple

from . import actions
from .errors import ToolNotFound

DEFAULT_SIGNTOOL_ROOT = "C:/Program Files (x86)/Windows Kits/10/bin/"
DEFAULT_ARCH = "x64"
SIGNTOOL_BINARY = "signtool.exe"


def version_key(folder_name: str) -> Optional[int]:
    """
    Turn an SDK version folder name into a comparable integer.

    Only names ending in ".0" qualify; the dots are stripped and the rest
    must parse as an integer ("10.0.22621.0" -> 100226210).

    Returns:
        Integer version key, or None if the folder does not qualify
    """
    if not folder_name.endswith(".0"):
        return None
    digits = folder_name.replace(".", "")
    if not digits.isdigit():
        return None
    return int(digits)


def signtool_candidates(root: str, arch: str = DEFAULT_ARCH) -> List[Tuple[int, str]]:
    """
    List (version key, signtool path) pairs under root, newest first.

    Raises:
        ToolNotFound: If root cannot be listed
    """
    try:
        folders = os.listdir(root)
    except OSError as e:
        raise ToolNotFound(f"Unable to find {SIGNTOOL_BINARY} in {root}: {e}")

    candidates = []
    for folder in folders:
        key = version_key(folder)
        if key is None:
            continue
        candidates.append((key, os.path.join(root, folder, arch, SIGNTOOL_BINARY)))

    candidates.sort(key=lambda c: c[0], reverse=True)
    return candidates


def locate_signing_tool(root: str = DEFAULT_SIGNTOOL_ROOT, arch: str = DEFAULT_ARCH) -> str:
    """
    Find the most recent signtool.exe in the Windows Kits folder.

    Args:
        root: Windows Kits bin folder holding version-numbered subfolders
        arch: Architecture subfolder (x64, x86, arm64)

    Returns:
        Path to the newest signtool.exe that exists

    Raises:
        ToolNotFound: If no version folder contains signtool.exe
    """
    for _, signtool in signtool_candidates(root, arch):
        try:
            os.stat(signtool)
        except OSError:
            actions.warning(f"Skipping {signtool} due to error.")
            continue

        if os.path.isfile(signtool):
            actions.info(f"Signtool location is {signtool}.")
            return signtool

    raise ToolNotFound(f"Unable to find {SIGNTOOL_BINARY} in {root}")
