"""
Module: packer.output

Purpose:
    Output subpackage producing the two atlas artifacts from one layout:
    the composited canvas image and the region descriptor text.

Key Modules:
    - compositor: Transparent canvas creation and encoding
    - descriptor: Descriptor rendering and parsing
    - writer: Atomic file writing

Dependencies:
    - PIL: Image manipulation
    - atlas_toolkit.core.models: AtlasLayout

Used By:
    - packer.pipeline: Final output step
"""

from .compositor import composite_atlas, write_atlas_image, image_format_for
from .descriptor import (
    render_descriptor,
    write_descriptor,
    parse_descriptor,
    ParsedDescriptor,
    ParsedRegion,
)

__all__ = [
    "composite_atlas",
    "write_atlas_image",
    "image_format_for",
    "render_descriptor",
    "write_descriptor",
    "parse_descriptor",
    "ParsedDescriptor",
    "ParsedRegion",
]
