"""
Module: packer.output.compositor

Purpose:
    Creates the atlas canvas image. A canvas is a single transparent RGBA
    image with every source image copied into its layout placement.

Key Functions:
    - composite_atlas(): Paste decoded images onto a transparent canvas
    - write_atlas_image(): Encode the canvas using the output extension
    - image_format_for(): Pillow format name for an output path

Dependencies:
    - PIL.Image: Canvas creation, pasting and encoding
    - atlas_toolkit.core.models: AtlasLayout

Used By:
    - packer.pipeline: Image build
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from PIL import Image

from atlas_toolkit.core.errors import DimensionError, EncodeError
from atlas_toolkit.core.models import AtlasLayout
from .writer import atomic_write_image

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def composite_atlas(layout: AtlasLayout, pixels: Sequence[Image.Image]) -> Image.Image:
    """
    Copy decoded images onto a transparent canvas at their placements.

    Source pixels replace canvas pixels outright, alpha included; nothing
    is blended. Placements never overlap so paste order does not matter,
    but images are pasted in placement order.

    Args:
        layout: Layout computed for the same images.
        pixels: Decoded image per placement, in placement order.

    Returns:
        RGBA canvas of layout.canvas.size.

    Raises:
        ValueError: If the number of pixel buffers differs from the
            number of placements.
        DimensionError: If a pixel buffer's size differs from its placement.

    Example:
        >>> canvas = composite_atlas(layout, [pixels for _, pixels in load_images(paths)])
        >>> canvas.size
        (30, 25)
    """
    if len(pixels) != len(layout.placements):
        raise ValueError(
            f"Got {len(pixels)} images for {len(layout.placements)} placements"
        )

    canvas = Image.new("RGBA", layout.canvas.size, TRANSPARENT)

    for placement, image in zip(layout.placements, pixels):
        if image.size != (placement.width, placement.height):
            raise DimensionError(
                f"Decoded size {image.size[0]}x{image.size[1]} differs from "
                f"probed size {placement.width}x{placement.height}",
                path=placement.image.path,
            )
        if placement.height == 0 or placement.width == 0:
            continue
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        # No mask: a straight copy, destination alpha is overwritten
        canvas.paste(image, (placement.x, placement.y))

    return canvas


def image_format_for(path: Path) -> str:
    """
    Pillow format name implied by a file extension.

    Raises:
        EncodeError: If Pillow cannot write that extension.

    Example:
        >>> image_format_for(Path("atlas.png"))
        'PNG'
    """
    image_format = Image.registered_extensions().get(path.suffix.lower())
    if image_format is None or image_format not in Image.SAVE:
        raise EncodeError(f"Unsupported output extension {path.suffix!r}", path=path)
    return image_format


def write_atlas_image(canvas: Image.Image, path: Path, *, compress_level: int = 6) -> Path:
    """
    Encode the canvas to ``path`` with the codec implied by its extension.

    Args:
        canvas: Canvas from composite_atlas().
        path: Output path; its extension selects the format.
        compress_level: zlib level used when the format is PNG.

    Returns:
        The written path.

    Raises:
        EncodeError: If the extension is unsupported, the format cannot
            store the canvas, or the file cannot be written.
    """
    path = Path(path)
    image_format = image_format_for(path)
    options = {"compress_level": compress_level} if image_format == "PNG" else {}

    try:
        atomic_write_image(canvas, path, image_format, **options)
    except (OSError, ValueError, KeyError, SystemError) as e:
        raise EncodeError("Failed to write atlas image", path=path, cause=e) from e

    logger.info(f"Atlas image {canvas.size[0]}x{canvas.size[1]} written to {path}")
    return path
