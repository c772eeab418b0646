"""
Module: images

Purpose:
    Provides the SourceImage and OrderedImageSet dataclasses - the probed
    input of the layout engine. An OrderedImageSet is the only form in
    which images reach layout, so the packing order is fixed once here.

Key Functions:
    - path_sort_key(path): OS-independent ordering key for a path
    - OrderedImageSet.from_images(root, images): Sort and wrap images

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - atlas_toolkit.core.errors: DimensionError

Used By:
    - packer.probe: Creates SourceImage records
    - packer.layout_engine: Consumes OrderedImageSet
    - packer.output.descriptor: Derives region names from paths
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from atlas_toolkit.core.errors import DimensionError


def path_sort_key(path: Path) -> str:
    """
    Ordering key for discovered image paths.

    Uses the POSIX form of the full path so that the order is a pure
    function of the path strings, identical on every OS.

    Example:
        >>> sorted([Path("b/2.png"), Path("a/1.png")], key=path_sort_key)
        [PosixPath('a/1.png'), PosixPath('b/2.png')]
    """
    return Path(path).as_posix()


@dataclass(frozen=True, slots=True)
class SourceImage:
    """
    A discovered image with its probed pixel dimensions.

    Attributes:
        path: Path of the source file (as discovered).
        width: Width in pixels.
        height: Height in pixels. Zero is accepted and contributes no
            vertical advance in the layout.

    Invariants:
        - width >= 0
        - height >= 0
    """

    path: Path
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise DimensionError(
                    f"{name} must be an integer, got {value!r}", path=self.path
                )
            if value < 0:
                raise DimensionError(f"{name} must be >= 0, got {value}", path=self.path)

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) tuple."""
        return (self.width, self.height)


@dataclass(frozen=True)
class OrderedImageSet:
    """
    Images sorted into packing order.

    Attributes:
        root: Directory the images were discovered under.
        images: SourceImage records sorted by path_sort_key().

    Raises:
        ValueError: If images are not in packing order.

    Example:
        >>> images = OrderedImageSet.from_images(Path("sprites"), probed)
        >>> [img.path.name for img in images]
        ['1.png', '2.png']
    """

    root: Path
    images: Tuple[SourceImage, ...]

    def __post_init__(self) -> None:
        keys = [path_sort_key(img.path) for img in self.images]
        if keys != sorted(keys):
            raise ValueError("images must be sorted by path")

    @classmethod
    def from_images(cls, root: Path, images: Iterable[SourceImage]) -> "OrderedImageSet":
        """Sort images into packing order and wrap them."""
        ordered = sorted(images, key=lambda img: path_sort_key(img.path))
        return cls(root=Path(root), images=tuple(ordered))

    def __iter__(self) -> Iterator[SourceImage]:
        return iter(self.images)

    def __len__(self) -> int:
        return len(self.images)

    def __getitem__(self, index: int) -> SourceImage:
        return self.images[index]

    @property
    def paths(self) -> Tuple[Path, ...]:
        return tuple(img.path for img in self.images)
