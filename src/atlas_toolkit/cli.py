"""
Command-line entry points for the atlas toolkit.

    atlas-image <root_dir> <output_image_name>
    atlas-descriptor <root_dir> <output_text_name> [path_prefix]
    atlas-verify <root_dir> <descriptor> [path_prefix]

Each command exits 0 on success (including when no images are found) and
1 with an ``Error:`` message on stderr on any failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from atlas_toolkit import __version__
from atlas_toolkit.core.errors import AtlasError
from atlas_toolkit.packer import (
    AtlasBuildResult,
    PackerConfig,
    build_atlas_descriptor,
    build_atlas_image,
    verify_descriptor,
)

logger = logging.getLogger("atlas_toolkit")


def _base_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("root_dir", type=Path, help="Directory of source images (scanned recursively)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    parser.add_argument(
        "--workers", type=int, default=4, help="Threads used to read images (default: 4)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
    )


def _print_summary(result: AtlasBuildResult, label: str) -> None:
    """Print discovered files and the written artifact."""
    print(f"Found {result.image_count} image(s):")
    for path in result.image_paths:
        print(f"  {path}")
    if result.canvas is not None:
        print(f"Canvas: {result.canvas.width}x{result.canvas.height}")
    print(f"{label} created successfully at: {result.output_path}")


def _report_empty(result: AtlasBuildResult) -> None:
    for message in result.warnings:
        print(message)
    print("Nothing was written.")


def image_main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the atlas canvas image."""
    parser = _base_parser("atlas-image", "Stack images vertically into one atlas image.")
    parser.add_argument("output_image", type=Path, help="Atlas image to write (format from extension)")
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = PackerConfig(max_workers=args.workers)
        result = build_atlas_image(args.root_dir, args.output_image, config=config)
    except (AtlasError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.output_path is None:
        _report_empty(result)
        return 0
    _print_summary(result, "Atlas image")
    return 0


def descriptor_main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the atlas descriptor text file."""
    parser = _base_parser("atlas-descriptor", "Write the region descriptor for an atlas.")
    parser.add_argument("output_text", type=Path, help="Descriptor file to write")
    parser.add_argument(
        "path_prefix", nargs="?", default="", help="Path prepended to every region name"
    )
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = PackerConfig(max_workers=args.workers)
        result = build_atlas_descriptor(
            args.root_dir, args.output_text, args.path_prefix, config=config
        )
    except (AtlasError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.output_path is None:
        _report_empty(result)
        return 0
    _print_summary(result, "Atlas descriptor")
    return 0


def verify_main(argv: Optional[Sequence[str]] = None) -> int:
    """Check a descriptor against the current image tree."""
    parser = _base_parser("atlas-verify", "Check that a descriptor matches an image tree.")
    parser.add_argument("descriptor", type=Path, help="Descriptor file to check")
    parser.add_argument(
        "path_prefix", nargs="?", default="", help="Prefix the descriptor was built with"
    )
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = PackerConfig(max_workers=args.workers)
        result = verify_descriptor(args.root_dir, args.descriptor, args.path_prefix, config=config)
    except (AtlasError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.ok:
        print(f"Descriptor {result.descriptor_path} is out of sync:", file=sys.stderr)
        for mismatch in result.mismatches:
            print(f"  - {mismatch}", file=sys.stderr)
        return 1

    print(f"Descriptor {result.descriptor_path} matches ({result.region_count} regions)")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Dispatch `image`, `descriptor` or `verify` to its entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)
    commands = {"image": image_main, "descriptor": descriptor_main, "verify": verify_main}
    if not argv or argv[0] not in commands:
        print(f"Usage: run_atlas.py {{{','.join(commands)}}} ...", file=sys.stderr)
        return 2
    return commands[argv[0]](argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
