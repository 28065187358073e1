"""Discovery of signable files in a directory tree."""

import os
import stat
from typing import Iterator, List, Set, Tuple

from . import actions

# see https://learn.microsoft.com/en-us/windows/win32/seccrypto/signtool
SIGNABLE_EXTENSIONS = frozenset({
    ".dll", ".exe", ".sys", ".vxd",
    ".msix", ".msixbundle", ".appx",
    ".appxbundle", ".msi", ".msp",
    ".msm", ".cab", ".ps1", ".psm1",
})

# Discovered alongside signable files; whether they are signed is up to the backend
PACKAGE_EXTENSIONS = frozenset({".nupkg"})


def get_extension(path: str) -> str:
    """Lower-cased final suffix of path, including the dot."""
    return os.path.splitext(path)[1].lower()


def is_signable(path: str) -> bool:
    return get_extension(path) in SIGNABLE_EXTENSIONS


def is_discoverable(path: str) -> bool:
    extension = get_extension(path)
    return extension in SIGNABLE_EXTENSIONS or extension in PACKAGE_EXTENSIONS


def discover_files(root: str, recursive: bool = False) -> Iterator[str]:
    """
    Lazily yield signable and package files under root.

    Traversal is depth-first pre-order and follows directory-listing order.
    Subdirectories (including symlinks to directories) are entered only when
    recursive is true. A directory is never entered twice, so symlink loops
    terminate.

    Args:
        root: Folder to scan
        recursive: Descend into subdirectories

    Yields:
        Paths of matching regular files, joined onto root
    """
    root_stat = os.stat(root)
    visited: Set[Tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}
    stack: List[Tuple[str, Iterator[str]]] = [(root, iter(os.listdir(root)))]

    while stack:
        folder, entries = stack[-1]
        name = next(entries, None)
        if name is None:
            stack.pop()
            continue

        full_path = os.path.join(folder, name)
        try:
            st = os.stat(full_path)
        except FileNotFoundError:
            actions.warning(f"Skipping {full_path}: no longer exists.")
            continue

        if stat.S_ISREG(st.st_mode):
            if is_discoverable(name):
                yield full_path
        elif stat.S_ISDIR(st.st_mode) and recursive:
            key = (st.st_dev, st.st_ino)
            if key in visited:
                continue
            visited.add(key)
            stack.append((full_path, iter(os.listdir(full_path))))
