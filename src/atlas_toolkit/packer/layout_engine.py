"""
Module: packer.layout_engine

Purpose:
    Computes the atlas geometry: images are stacked vertically in packing
    order, each at x=0 and a cumulative y offset. This is the only place
    offsets are calculated; the canvas image and the descriptor are both
    rendered from its result.

Key Functions:
    - compute_layout(): Canvas size and placements in one pass
    - check_layout(): Assert the stacking invariants on a layout

Dependencies:
    None (pure functions)

Used By:
    - packer.pipeline: Shared by the image and descriptor builds
    - packer.output.descriptor: Verification re-derives layouts

Design Notes:
    No rotation, no horizontal packing and no padding. Zero-height images
    are legal and simply do not advance the offset.
"""

from __future__ import annotations

from typing import Iterable, List

from atlas_toolkit.core.models import AtlasLayout, CanvasSize, Placement, SourceImage


def compute_layout(images: Iterable[SourceImage]) -> AtlasLayout:
    """
    Stack images vertically and size the canvas to fit.

    Args:
        images: Images in packing order (normally an OrderedImageSet).

    Returns:
        AtlasLayout with one Placement per image, in the same order, and a
        canvas as wide as the widest image and as tall as the summed
        heights.

    Example:
        >>> layout = compute_layout([SourceImage(Path("a/1.png"), 10, 20),
        ...                          SourceImage(Path("b/2.png"), 30, 5)])
        >>> layout.canvas.size
        (30, 25)
        >>> [(p.x, p.y) for p in layout.placements]
        [(0, 0), (0, 20)]
    """
    placements: List[Placement] = []
    y_offset = 0
    max_width = 0

    for image in images:
        placements.append(Placement(image=image, x=0, y=y_offset))
        y_offset += image.height
        max_width = max(max_width, image.width)

    return AtlasLayout(
        canvas=CanvasSize(width=max_width, height=y_offset),
        placements=tuple(placements),
    )


def check_layout(layout: AtlasLayout) -> None:
    """
    Verify the stacking invariants of a layout.

    Raises:
        ValueError: If placements leave gaps, overlap, fall outside the
            canvas, or the canvas is not exactly as tall as the stack.
    """
    expected_y = 0
    for placement in layout.placements:
        if placement.x != 0:
            raise ValueError(f"placement not at x=0: {placement.image.path}")
        if placement.y != expected_y:
            raise ValueError(
                f"placement at y={placement.y}, expected {expected_y}: {placement.image.path}"
            )
        if placement.width > layout.canvas.width:
            raise ValueError(f"placement wider than canvas: {placement.image.path}")
        expected_y = placement.bottom

    if expected_y != layout.canvas.height:
        raise ValueError(
            f"canvas height {layout.canvas.height} != stacked height {expected_y}"
        )
