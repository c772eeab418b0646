"""
Module: packer.discovery

Purpose:
    Finds every image file beneath a root directory and returns the paths
    in packing order.

Key Functions:
    - discover_images(): Recursive, filtered, sorted walk

Dependencies:
    - pathlib (std)
    - atlas_toolkit.core.models.images: path_sort_key

Used By:
    - packer.pipeline: First stage of every run
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional

from atlas_toolkit.core.errors import DirectoryReadError
from atlas_toolkit.core.models.images import path_sort_key
from .config import IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)


def discover_images(
    root: Path,
    *,
    extensions: Optional[Iterable[str]] = None,
) -> List[Path]:
    """
    Recursively find image files under a root directory.

    Every regular file whose extension (case-insensitive) is in
    ``extensions`` is returned; directories and other files are skipped,
    so empty directories contribute nothing. Symlinked directories are
    not descended into; symlinked files are kept. The result is sorted by the
    full path string (see path_sort_key()) and does not depend on the
    order the filesystem lists entries in.

    Args:
        root: Directory to scan.
        extensions: Allowed extensions. Defaults to IMAGE_EXTENSIONS.

    Returns:
        Sorted list of image paths. Empty when nothing matches.

    Raises:
        DirectoryReadError: If the root or any subdirectory cannot be listed.

    Example:
        >>> discover_images(Path("sprites"))
        [PosixPath('sprites/a/1.png'), PosixPath('sprites/b/2.png')]
    """
    allowed: FrozenSet[str] = frozenset(
        ext.lower() for ext in (extensions if extensions is not None else IMAGE_EXTENSIONS)
    )
    root = Path(root)

    found: List[Path] = []
    pending: List[Path] = [root]
    while pending:
        directory = pending.pop()
        try:
            for entry in directory.iterdir():
                # Never follow directory links; a link to an ancestor would loop
                if entry.is_symlink() and entry.is_dir():
                    logger.debug(f"Skipping symlinked directory {entry}")
                elif entry.is_dir():
                    pending.append(entry)
                elif entry.is_file() and entry.suffix.lower() in allowed:
                    found.append(entry)
        except OSError as e:
            raise DirectoryReadError("Cannot list directory", path=directory, cause=e) from e

    found.sort(key=path_sort_key)
    logger.debug(f"Discovered {len(found)} image(s) under {root}")
    return found
