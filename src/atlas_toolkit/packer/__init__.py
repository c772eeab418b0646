"""
Module: packer

Purpose:
    Atlas packing pipeline. Scans a directory tree of images, stacks them
    vertically and writes either the composited canvas image or the
    region descriptor, both from one shared layout.

Key Functions:
    - discover_images(): Sorted recursive image discovery
    - compute_layout(): Shared vertical-stack layout
    - build_atlas_image(): Canvas image build
    - build_atlas_descriptor(): Descriptor build
    - verify_descriptor(): Descriptor/tree consistency check

Key Classes:
    - PackerConfig: Configuration for a run
    - AtlasBuildResult: Build outcome

Dependencies:
    - PIL: Image decoding and encoding
    - atlas_toolkit.core.models: SourceImage, Placement, AtlasLayout

Used By:
    - atlas_toolkit.cli: Command-line entry points
"""

from .config import PackerConfig, DescriptorConfig, IMAGE_EXTENSIONS
from .discovery import discover_images
from .layout_engine import compute_layout, check_layout
from .pipeline import (
    plan_atlas,
    build_atlas_image,
    build_atlas_descriptor,
    verify_descriptor,
    AtlasPlan,
    AtlasBuildResult,
    VerificationResult,
)

__all__ = [
    # Config
    "PackerConfig",
    "DescriptorConfig",
    "IMAGE_EXTENSIONS",
    # Stages
    "discover_images",
    "compute_layout",
    "check_layout",
    # Pipeline
    "plan_atlas",
    "build_atlas_image",
    "build_atlas_descriptor",
    "verify_descriptor",
    "AtlasPlan",
    "AtlasBuildResult",
    "VerificationResult",
]
