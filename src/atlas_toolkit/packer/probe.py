"""
Module: packer.probe

Purpose:
    Codec collaborator for the pipeline. Reads source images with Pillow
    to obtain their dimensions (probe) or their dimensions together with
    RGBA pixel buffers (load). Either way each file is decoded once. Files
    are independent, so both operations fan out over a thread pool and
    re-join results in the order they were given.

Key Functions:
    - probe_image(): Dimensions of a single image
    - load_image(): Dimensions and RGBA pixels of a single image
    - probe_images(): Parallel probe preserving input order
    - load_images(): Parallel load preserving input order

Dependencies:
    - PIL.Image: Image decoding
    - concurrent.futures: Thread pool execution

Used By:
    - packer.pipeline: Dimension probing and canvas pixel loading
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from PIL import Image, UnidentifiedImageError

from atlas_toolkit.core.errors import DecodeError
from atlas_toolkit.core.models import SourceImage

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DECODE_FAILURES = (
    UnidentifiedImageError,
    OSError,
    ValueError,
    SyntaxError,
    EOFError,
    Image.DecompressionBombError,
)


def probe_image(path: Path) -> SourceImage:
    """
    Read an image's dimensions.

    The file is fully decoded so that a truncated or corrupt file fails
    here, in the descriptor build as well as the image build.

    Raises:
        DecodeError: If the file cannot be read or decoded.
        DimensionError: If the reported dimensions are invalid.
    """
    return _read_image(path, keep_pixels=False)[0]


def load_image(path: Path) -> Tuple[SourceImage, Image.Image]:
    """
    Read an image's dimensions and its RGBA pixel buffer in one decode.

    Raises:
        DecodeError: If the file cannot be read or decoded.
        DimensionError: If the reported dimensions are invalid.
    """
    image, pixels = _read_image(path, keep_pixels=True)
    return image, pixels


def probe_images(paths: Sequence[Path], max_workers: int = 4) -> List[SourceImage]:
    """Probe many images, returning results in the order of ``paths``."""
    return _map_ordered(probe_image, paths, max_workers)


def load_images(
    paths: Sequence[Path], max_workers: int = 4
) -> List[Tuple[SourceImage, Image.Image]]:
    """Load many images, returning results in the order of ``paths``."""
    return _map_ordered(load_image, paths, max_workers)


def _read_image(path: Path, keep_pixels: bool) -> Tuple[SourceImage, Optional[Image.Image]]:
    pixels = None
    try:
        with Image.open(path) as im:
            width, height = im.size
            if keep_pixels:
                pixels = im.convert("RGBA")
            else:
                im.load()
    except _DECODE_FAILURES as e:
        raise DecodeError("Failed to read image", path=path, cause=e) from e

    if width == 0 or height == 0:
        logger.warning(f"Image has zero-sized dimension {width}x{height}: {path}")
    logger.debug(f"  {path}: {width}x{height}")
    return SourceImage(path=path, width=width, height=height), pixels


def _map_ordered(func: Callable[[Path], T], paths: Sequence[Path], max_workers: int) -> List[T]:
    """
    Apply func to every path on a thread pool.

    Executor.map yields results in submission order, so parallelism never
    changes the order. The first failure propagates once reached.
    """
    if len(paths) <= 1 or max_workers <= 1:
        # Single file or single worker - no thread overhead
        return [func(p) for p in paths]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(paths))) as pool:
        return list(pool.map(func, paths))
