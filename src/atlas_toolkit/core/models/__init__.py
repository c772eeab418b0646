"""
Core Models Package

Immutable data models passed between the atlas pipeline stages. All
models are frozen dataclasses so a layout computed once can be handed to
both artifact producers without either one changing it.
"""

from .images import SourceImage, OrderedImageSet, path_sort_key
from .layout import Placement, CanvasSize, AtlasLayout

__all__ = [
    "SourceImage",
    "OrderedImageSet",
    "path_sort_key",
    "Placement",
    "CanvasSize",
    "AtlasLayout",
]
