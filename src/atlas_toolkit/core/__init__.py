"""
Atlas Toolkit Core Package

Shared data models and the error hierarchy used by the packer and the CLI.
"""

from .models import SourceImage, OrderedImageSet, Placement, CanvasSize, AtlasLayout
from .errors import (
    AtlasError,
    DirectoryReadError,
    DecodeError,
    DimensionError,
    EncodeError,
    WriteError,
    ParseError,
    EmptyInputWarning,
)

__all__ = [
    "SourceImage",
    "OrderedImageSet",
    "Placement",
    "CanvasSize",
    "AtlasLayout",
    "AtlasError",
    "DirectoryReadError",
    "DecodeError",
    "DimensionError",
    "EncodeError",
    "WriteError",
    "ParseError",
    "EmptyInputWarning",
]
