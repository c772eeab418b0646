"""
Module: layout

Purpose:
    Provides the Placement, CanvasSize and AtlasLayout dataclasses - the
    geometry shared by the canvas image and the region descriptor. Both
    artifacts are rendered from one AtlasLayout value, never from their
    own offset arithmetic.

Dependencies:
    - dataclasses (std)
    - atlas_toolkit.core.models.images: SourceImage

Used By:
    - packer.layout_engine: Produces AtlasLayout
    - packer.output.compositor: Pastes images at placements
    - packer.output.descriptor: Emits one region block per placement
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .images import SourceImage


@dataclass(frozen=True, slots=True)
class Placement:
    """
    Top-left position of one image inside the canvas.

    The region is [x, x + width) x [y, y + height). x is always 0 for
    vertical stacking.

    Example:
        >>> placement = Placement(image=img, x=0, y=20)
        >>> placement.bottom
        25  # img.height == 5
    """

    image: SourceImage
    x: int
    y: int

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def bottom(self) -> int:
        """Y-coordinate just below this placement (exclusive)."""
        return self.y + self.image.height

    def overlaps(self, other: "Placement") -> bool:
        """Check whether two placements share any pixel row and column."""
        if self.height == 0 or other.height == 0:
            return False
        rows = self.y < other.bottom and other.y < self.bottom
        cols = self.x < other.x + other.width and other.x < self.x + self.width
        return rows and cols


@dataclass(frozen=True, slots=True)
class CanvasSize:
    """Canvas dimensions: widest image by the summed heights."""

    width: int
    height: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class AtlasLayout:
    """
    Complete atlas geometry (immutable).

    Attributes:
        canvas: Canvas dimensions.
        placements: One Placement per source image, in packing order.
    """

    canvas: CanvasSize
    placements: Tuple[Placement, ...]

    def __iter__(self) -> Iterator[Placement]:
        return iter(self.placements)

    def __len__(self) -> int:
        return len(self.placements)
