"""
Module: packer.output.descriptor

Purpose:
    Renders the atlas layout as a libGDX/Spine style text descriptor and
    reads such descriptors back for verification.

    Output format:
        hero.png
        size: 30, 25
        format: RGBA8888
        filter: MipMapLinearLinear, MipMapLinearLinear
        repeat: none
        a/1
          rotate: false
          xy: 0, 0
          size: 10, 20
          orig: 10, 20
          offset: 0, 0
          index: -1
        ...

Key Functions:
    - render_descriptor(): Layout to descriptor text
    - write_descriptor(): Atomic write of descriptor text
    - parse_descriptor(): Descriptor text to ParsedDescriptor

Key Classes:
    - ParsedDescriptor: Header values and regions read from text
    - ParsedRegion: Single region block

Dependencies:
    - atlas_toolkit.common.path_utils: Region naming
    - atlas_toolkit.packer.config: DescriptorConfig header values

Used By:
    - packer.pipeline: Descriptor build and verification
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from atlas_toolkit.common.path_utils import region_name
from atlas_toolkit.core.errors import ParseError, WriteError
from atlas_toolkit.core.models import AtlasLayout
from ..config import DescriptorConfig
from .writer import atomic_write_text

logger = logging.getLogger(__name__)

INDENT = "  "
HEADER_KEYS = frozenset({"size", "format", "filter", "repeat", "pma", "scale"})
REGION_KEYS = frozenset({"rotate", "xy", "size", "orig", "offset", "index", "split", "pad"})


@dataclass(frozen=True)
class ParsedRegion:
    """
    Region block read from a descriptor.

    Attributes:
        name: Region name (prefix included).
        xy: (x, y) position in the canvas.
        size: (width, height) of the packed region.
        orig: (width, height) of the original image.
        offset: Trim offset, always (0, 0) for this packer.
        rotate: Rotation flag, always False for this packer.
        index: Frame index, -1 when unindexed.
    """
    name: str
    xy: Tuple[int, int]
    size: Tuple[int, int]
    orig: Tuple[int, int]
    offset: Tuple[int, int] = (0, 0)
    rotate: bool = False
    index: int = -1


@dataclass(frozen=True)
class ParsedDescriptor:
    """
    Parsed descriptor contents.

    Attributes:
        reference_name: Name of the canvas image on the first line.
        size: Canvas (width, height).
        header: Raw header values keyed by name.
        regions: Region blocks in file order.
    """
    reference_name: str
    size: Tuple[int, int]
    header: Dict[str, str] = field(default_factory=dict)
    regions: List[ParsedRegion] = field(default_factory=list)


def render_descriptor(
    layout: AtlasLayout,
    reference_name: str,
    root: Path,
    prefix: str = "",
    config: Optional[DescriptorConfig] = None,
) -> str:
    """
    Render a layout as descriptor text.

    Region blocks follow layout.placements exactly; no ordering or offset
    is derived here.

    Args:
        layout: Layout from compute_layout().
        reference_name: Canvas image name written on the first line.
        root: Scanned root, used to make region names relative.
        prefix: Normalized region name prefix ("" or slash-terminated).
        config: Header values. Defaults to DescriptorConfig().

    Returns:
        Descriptor text ending in a newline.

    Example:
        >>> text = render_descriptor(layout, "hero.png", Path("sprites"), "ui/")
        >>> text.splitlines()[5]
        'ui/a/1'
    """
    config = config or DescriptorConfig()
    lines = [
        reference_name,
        f"size: {layout.canvas.width}, {layout.canvas.height}",
        f"format: {config.format}",
        f"filter: {config.filter[0]}, {config.filter[1]}",
        f"repeat: {config.repeat}",
    ]
    for placement in layout.placements:
        lines += [
            region_name(placement.image.path, root, prefix),
            f"{INDENT}rotate: false",
            f"{INDENT}xy: {placement.x}, {placement.y}",
            f"{INDENT}size: {placement.width}, {placement.height}",
            f"{INDENT}orig: {placement.width}, {placement.height}",
            f"{INDENT}offset: 0, 0",
            f"{INDENT}index: -1",
        ]
    return "\n".join(lines) + "\n"


def write_descriptor(text: str, path: Path) -> Path:
    """
    Write descriptor text to ``path``.

    Raises:
        WriteError: If the file cannot be written.
    """
    path = Path(path)
    try:
        atomic_write_text(text, path)
    except OSError as e:
        raise WriteError("Failed to write atlas descriptor", path=path, cause=e) from e

    logger.info(f"Atlas descriptor written to {path}")
    return path


def parse_descriptor(text: str, *, source: Optional[Path] = None) -> ParsedDescriptor:
    """
    Parse descriptor text produced by render_descriptor().

    Only the first page is read. Unindented lines after the page name are
    header entries while their key is a known header key. After that, an
    indented line with a known region key is a region property and any
    other line is a region name, so names may begin with whitespace.

    Args:
        text: Descriptor text.
        source: File the text came from, used in error messages.

    Returns:
        ParsedDescriptor with header values and regions.

    Raises:
        ParseError: If the text is empty or a value is malformed.
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        raise ParseError("Descriptor is empty", path=source)

    reference = lines[0].strip()
    header: Dict[str, str] = {}
    regions: List[ParsedRegion] = []
    current: Optional[Tuple[str, Dict[str, str]]] = None

    for line in lines[1:]:
        indented = line.startswith((" ", "\t"))
        key = line.split(":", 1)[0].strip() if ":" in line else None
        if indented and key in REGION_KEYS:
            if current is None:
                raise ParseError(f"Region property outside a region: {line.strip()!r}", path=source)
            current[1][key] = _split_entry(line, source)[1]
            continue

        if not indented and current is None and not regions and key in HEADER_KEYS:
            header[key] = _split_entry(line, source)[1]
            continue

        if current is not None:
            regions.append(_build_region(current[0], current[1], source))
        current = (line, {})

    if current is not None:
        regions.append(_build_region(current[0], current[1], source))

    if "size" not in header:
        raise ParseError("Descriptor header has no size", path=source)

    return ParsedDescriptor(
        reference_name=reference,
        size=_parse_pair(header["size"], source),
        header=header,
        regions=regions,
    )


def _split_entry(line: str, source: Optional[Path]) -> Tuple[str, str]:
    """Split a 'key: value' line."""
    if ":" not in line:
        raise ParseError(f"Expected 'key: value', got {line.strip()!r}", path=source)
    key, value = line.split(":", 1)
    return key.strip(), value.strip()


def _parse_pair(value: str, source: Optional[Path]) -> Tuple[int, int]:
    """Parse an 'a, b' integer pair."""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise ParseError(f"Expected two integers, got {value!r}", path=source)
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ParseError(f"Expected two integers, got {value!r}", path=source, cause=e) from e


def _build_region(name: str, props: Dict[str, str], source: Optional[Path]) -> ParsedRegion:
    """Build a ParsedRegion from collected properties."""
    for required in ("xy", "size"):
        if required not in props:
            raise ParseError(f"Region {name!r} has no {required}", path=source)

    size = _parse_pair(props["size"], source)
    try:
        index = int(props.get("index", "-1"))
    except ValueError as e:
        raise ParseError(f"Region {name!r} has a bad index", path=source, cause=e) from e

    return ParsedRegion(
        name=name,
        xy=_parse_pair(props["xy"], source),
        size=size,
        orig=_parse_pair(props["orig"], source) if "orig" in props else size,
        offset=_parse_pair(props["offset"], source) if "offset" in props else (0, 0),
        rotate=props.get("rotate", "false").lower() == "true",
        index=index,
    )
