"""
Module: packer.output.writer

Purpose:
    Atomic file writing for atlas artifacts. Content goes to a temporary
    file in the destination directory which then replaces the target, so
    a failed run never leaves a partial canvas or descriptor behind.

Key Functions:
    - atomic_write_image(): Encode a PIL image atomically
    - atomic_write_text(): Write UTF-8 text atomically

Dependencies:
    - PIL.Image: Image saving
    - tempfile (std)

Used By:
    - packer.output.compositor: Canvas output
    - packer.output.descriptor: Descriptor output
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any

from PIL import Image

logger = logging.getLogger(__name__)


def atomic_write_image(image: Image.Image, path: Path, image_format: str, **save_options: Any) -> None:
    """
    Write image atomically using temp file.

    Raises:
        OSError, ValueError, KeyError: Propagated from Pillow or the
            filesystem; the temp file is removed first.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        suffix=path.suffix,
        dir=path.parent,
        delete=False,
    ) as f:
        temp_path = Path(f.name)
        try:
            image.save(f, format=image_format, **save_options)
        except BaseException:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    # Use replace() instead of rename() for Windows compatibility
    _replace(temp_path, path)
    logger.debug(f"Wrote {image_format} image {image.size[0]}x{image.size[1]} to {path}")


def atomic_write_text(text: str, path: Path) -> None:
    """Write text atomically using temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=path.suffix,
        dir=path.parent,
        delete=False,
        encoding="utf-8",
        newline="\n",
    ) as f:
        temp_path = Path(f.name)
        try:
            f.write(text)
        except BaseException:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    # replace() will overwrite existing files on all platforms
    _replace(temp_path, path)
    logger.debug(f"Wrote {len(text)} characters to {path}")


def _replace(temp_path: Path, path: Path) -> None:
    """Move temp file over the target, removing it if the move fails."""
    try:
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
