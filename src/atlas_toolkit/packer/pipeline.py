"""
Module: packer.pipeline

Purpose:
    Main pipeline orchestrator for atlas builds. Both artifacts go through
    the same planning stage (discover → probe → layout) and differ only
    in their final consumer, so separately invoked image and descriptor
    builds over the same tree always describe the same geometry.

Key Functions:
    - plan_atlas(): Discovery, probing and layout
    - build_atlas_image(): Plan, composite and write the canvas
    - build_atlas_descriptor(): Plan, render and write the descriptor
    - verify_descriptor(): Compare a descriptor with a fresh layout

Key Classes:
    - AtlasPlan: Discovered images and their layout
    - AtlasBuildResult: Container for build output
    - VerificationResult: Mismatches found by verify_descriptor()

Dependencies:
    - atlas_toolkit.packer.discovery: File discovery
    - atlas_toolkit.packer.probe: Pillow-backed probing and decoding
    - atlas_toolkit.packer.layout_engine: Shared layout
    - atlas_toolkit.packer.output: Artifact writers

Used By:
    - atlas_toolkit.cli: Command-line entry points
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from atlas_toolkit.common.path_utils import normalize_prefix, reference_name, region_name
from atlas_toolkit.core.errors import EmptyInputWarning, ParseError
from atlas_toolkit.core.models import AtlasLayout, CanvasSize, OrderedImageSet
from .config import PackerConfig
from .discovery import discover_images
from .layout_engine import check_layout, compute_layout
from .output import (
    composite_atlas,
    parse_descriptor,
    render_descriptor,
    write_atlas_image,
    write_descriptor,
)
from .probe import load_images, probe_images
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtlasPlan:
    """
    Planned atlas for one root directory.

    Attributes:
        root: Absolute scanned root.
        images: Probed images in packing order.
        layout: Layout computed from images.
        pixels: RGBA buffers in packing order, empty unless requested.
    """
    root: Path
    images: OrderedImageSet
    layout: AtlasLayout
    pixels: Tuple[Image.Image, ...] = ()


@dataclass
class AtlasBuildResult:
    """
    Result of building one atlas artifact.

    Attributes:
        image_paths: Discovered image paths in packing order.
        canvas: Canvas dimensions, or None when no images were found.
        output_path: Written artifact, or None when nothing was written.
        warnings: Warning messages.
        timing: Per-phase durations.
    """
    image_paths: List[Path]
    canvas: Optional[CanvasSize]
    output_path: Optional[Path]
    warnings: List[str] = field(default_factory=list)
    timing: TimingLog = field(default_factory=TimingLog)

    @property
    def image_count(self) -> int:
        return len(self.image_paths)


@dataclass
class VerificationResult:
    """
    Outcome of verify_descriptor().

    Attributes:
        descriptor_path: Descriptor that was checked.
        region_count: Regions read from the descriptor.
        mismatches: Human-readable differences; empty when in sync.
    """
    descriptor_path: Path
    region_count: int
    mismatches: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


def plan_atlas(
    root: Path,
    *,
    config: Optional[PackerConfig] = None,
    timing: Optional[TimingLog] = None,
    keep_pixels: bool = False,
) -> Optional[AtlasPlan]:
    """
    Discover, probe and lay out every image under ``root``.

    Args:
        root: Directory to scan.
        config: Pipeline configuration.
        timing: Timing log to record phases in.
        keep_pixels: Also keep each image's RGBA pixels from the probe decode.

    Returns:
        AtlasPlan, or None (with an EmptyInputWarning) when no images exist.

    Raises:
        DirectoryReadError: If a directory cannot be listed.
        DecodeError: If an image cannot be read.
        DimensionError: If an image reports invalid dimensions.
    """
    config = config or PackerConfig()
    timing = timing if timing is not None else TimingLog()
    root = Path(root).absolute()

    with timed_phase(timing, "discovery"):
        paths = discover_images(root, extensions=config.extensions)

    if not paths:
        message = f"No image files found in {root} or its subdirectories"
        logger.info(message)
        warnings.warn(message, EmptyInputWarning, stacklevel=2)
        return None

    logger.info(f"Found {len(paths)} image(s) under {root}")

    pixels: Tuple[Image.Image, ...] = ()
    with timed_phase(timing, "probe"):
        if keep_pixels:
            loaded = load_images(paths, max_workers=config.max_workers)
            probed = [image for image, _ in loaded]
            pixels = tuple(buffer for _, buffer in loaded)
        else:
            probed = probe_images(paths, max_workers=config.max_workers)
        images = OrderedImageSet.from_images(root, probed)

    with timed_phase(timing, "layout"):
        layout = compute_layout(images)
        check_layout(layout)

    logger.info(f"Layout: {layout.canvas.width}x{layout.canvas.height} ({len(layout)} regions)")
    return AtlasPlan(root=root, images=images, layout=layout, pixels=pixels)


def build_atlas_image(
    root: Path,
    output_path: Path,
    *,
    config: Optional[PackerConfig] = None,
) -> AtlasBuildResult:
    """
    Build the atlas canvas image.

    Pipeline:
    1. Plan the atlas (discover, probe and decode to RGBA, layout)
    2. Paste images onto a transparent canvas
    3. Encode using the format implied by ``output_path``

    Args:
        root: Directory to scan.
        output_path: Canvas file to write.
        config: Pipeline configuration.

    Returns:
        AtlasBuildResult; output_path is None when no images were found.

    Raises:
        AtlasError: Any stage failure. Nothing is written in that case.

    Example:
        >>> result = build_atlas_image(Path("sprites"), Path("hero.png"))
        >>> result.canvas.size
        (30, 25)
    """
    config = config or PackerConfig()
    timing = TimingLog()
    output_path = Path(output_path)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", EmptyInputWarning)
        plan = plan_atlas(root, config=config, timing=timing, keep_pixels=True)
    if plan is None:
        return _empty_result(caught, timing)

    with timed_phase(timing, "composite"):
        canvas = composite_atlas(plan.layout, plan.pixels)

    with timed_phase(timing, "encode"):
        write_atlas_image(canvas, output_path, compress_level=config.png_compress_level)

    logger.debug(timing.summary())
    return AtlasBuildResult(
        image_paths=list(plan.images.paths),
        canvas=plan.layout.canvas,
        output_path=output_path,
        timing=timing,
    )


def build_atlas_descriptor(
    root: Path,
    output_path: Path,
    prefix: Optional[str] = None,
    *,
    config: Optional[PackerConfig] = None,
) -> AtlasBuildResult:
    """
    Build the atlas descriptor text file.

    The first line names ``<stem of output_path>.png`` as the canvas
    image; that file is not required to exist.

    Args:
        root: Directory to scan.
        output_path: Descriptor file to write.
        prefix: Optional region name prefix (normalized here).
        config: Pipeline configuration.

    Returns:
        AtlasBuildResult; output_path is None when no images were found.

    Raises:
        AtlasError: Any stage failure. Nothing is written in that case.
    """
    config = config or PackerConfig()
    timing = TimingLog()
    output_path = Path(output_path)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", EmptyInputWarning)
        plan = plan_atlas(root, config=config, timing=timing)
    if plan is None:
        return _empty_result(caught, timing)

    with timed_phase(timing, "render"):
        text = render_descriptor(
            plan.layout,
            reference_name(output_path, config.descriptor.reference_extension),
            plan.root,
            normalize_prefix(prefix),
            config.descriptor,
        )

    with timed_phase(timing, "write"):
        write_descriptor(text, output_path)

    logger.debug(timing.summary())
    return AtlasBuildResult(
        image_paths=list(plan.images.paths),
        canvas=plan.layout.canvas,
        output_path=output_path,
        timing=timing,
    )


def verify_descriptor(
    root: Path,
    descriptor_path: Path,
    prefix: Optional[str] = None,
    *,
    config: Optional[PackerConfig] = None,
) -> VerificationResult:
    """
    Check that a descriptor matches the current layout of ``root``.

    Re-derives the layout from the tree and compares the reference name,
    canvas size and every region's name, xy, size and orig with the
    parsed descriptor.

    Raises:
        ParseError: If the descriptor cannot be read or parsed.
        AtlasError: If planning the atlas fails.
    """
    config = config or PackerConfig()
    descriptor_path = Path(descriptor_path)

    try:
        text = descriptor_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError("Cannot read descriptor", path=descriptor_path, cause=e) from e
    parsed = parse_descriptor(text, source=descriptor_path)

    result = VerificationResult(descriptor_path=descriptor_path, region_count=len(parsed.regions))

    with warnings.catch_warnings(record=True):
        warnings.simplefilter("always", EmptyInputWarning)
        plan = plan_atlas(root, config=config)
    if plan is None:
        result.mismatches.append("No images found, but the descriptor lists regions")
        return result

    expected_reference = reference_name(descriptor_path, config.descriptor.reference_extension)
    if parsed.reference_name != expected_reference:
        result.mismatches.append(
            f"reference name {parsed.reference_name!r} != {expected_reference!r}"
        )
    if parsed.size != plan.layout.canvas.size:
        result.mismatches.append(f"canvas size {parsed.size} != {plan.layout.canvas.size}")
    if len(parsed.regions) != len(plan.layout):
        result.mismatches.append(
            f"region count {len(parsed.regions)} != {len(plan.layout)}"
        )

    normalized = normalize_prefix(prefix)
    for region, placement in zip(parsed.regions, plan.layout.placements):
        expected: Tuple = (
            region_name(placement.image.path, plan.root, normalized),
            (placement.x, placement.y),
            (placement.width, placement.height),
        )
        actual: Tuple = (region.name, region.xy, region.size)
        if actual != expected or region.orig != region.size:
            result.mismatches.append(f"region {region.name!r}: {actual} != {expected}")

    return result


def _empty_result(caught: List[warnings.WarningMessage], timing: TimingLog) -> AtlasBuildResult:
    """Build the result of a run that found no images."""
    return AtlasBuildResult(
        image_paths=[],
        canvas=None,
        output_path=None,
        warnings=[str(w.message) for w in caught if issubclass(w.category, EmptyInputWarning)],
        timing=timing,
    )
