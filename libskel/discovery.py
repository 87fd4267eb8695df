from __future__ import annotations

import os
from typing import List

from .config import SKEL_EXTENSION


class InvalidDirectoryError(RuntimeError):
    pass


def find_skel_files(directory: str, extension: str = SKEL_EXTENSION) -> List[str]:
    """Recursively collect files under ``directory`` whose extension matches (case-insensitive)."""
    if not os.path.exists(directory):
        raise InvalidDirectoryError(f"The provided path does not exist: {directory}")
    if not os.path.isdir(directory):
        raise InvalidDirectoryError(f"The provided path is not a valid directory: {directory}")

    ext = extension.lower()
    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for fn in sorted(filenames):
            if fn.lower().endswith(ext):
                found.append(os.path.join(dirpath, fn))
    return sorted(found)
