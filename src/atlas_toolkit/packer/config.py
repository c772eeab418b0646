"""
Module: packer.config

Purpose:
    Configuration dataclasses for the atlas pipeline. Provides immutable
    settings for discovery, parallel probing, canvas encoding and the
    descriptor header.

Key Classes:
    - PackerConfig: Main configuration for a pipeline run
    - DescriptorConfig: Header values written to the descriptor

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - packer.pipeline: Uses PackerConfig for pipeline settings
    - packer.output.descriptor: Uses DescriptorConfig for the header
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".gif"})


@dataclass(frozen=True)
class DescriptorConfig:
    """
    Header settings for the atlas descriptor.

    Defaults produce the header consumed by libGDX/Spine atlas loaders.

    Attributes:
        format: Pixel format line (default "RGBA8888").
        filter: Min/mag filter pair (default MipMapLinearLinear twice).
        repeat: Texture wrap setting (default "none").
        reference_extension: Extension of the referenced canvas image.
    """
    format: str = "RGBA8888"
    filter: Tuple[str, str] = ("MipMapLinearLinear", "MipMapLinearLinear")
    repeat: str = "none"
    reference_extension: str = ".png"


@dataclass(frozen=True)
class PackerConfig:
    """
    Configuration for an atlas pipeline run.

    Attributes:
        extensions: Lower-case file extensions treated as images.
        max_workers: Threads used to probe and decode images (default 4).
        png_compress_level: zlib level for PNG canvases, 0-9 (default 6).
        descriptor: Descriptor header settings.

    Example:
        >>> config = PackerConfig(max_workers=1)
    """
    extensions: FrozenSet[str] = IMAGE_EXTENSIONS
    max_workers: int = 4
    png_compress_level: int = 6
    descriptor: DescriptorConfig = field(default_factory=DescriptorConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")
        if not 0 <= self.png_compress_level <= 9:
            raise ValueError(f"png_compress_level must be 0-9: {self.png_compress_level}")
        if not self.extensions:
            raise ValueError("extensions must not be empty")
        for ext in self.extensions:
            if not ext.startswith(".") or ext != ext.lower():
                raise ValueError(f"extensions must be lower-case and dotted: {ext!r}")
