"""Path and filename utilities.

Provides the naming rules shared by the descriptor emitter and the
descriptor verifier: region names, path prefixes and the name of the
canvas image referenced from a descriptor.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def normalize_prefix(prefix: str | None) -> str:
    """Normalize a region name prefix.

    Backslashes become forward slashes and the result ends in exactly one
    slash. An empty or missing prefix stays empty.

    Args:
        prefix: Prefix as supplied on the command line, or None.

    Returns:
        Normalized prefix, e.g. ``"sprites/"``, or ``""``.

    Examples:
        >>> normalize_prefix("sprites")
        'sprites/'
        >>> normalize_prefix("ui\\\\icons\\\\")
        'ui/icons/'
        >>> normalize_prefix("")
        ''
    """
    if not prefix:
        return ""
    cleaned = prefix.replace("\\", "/").rstrip("/")
    if not cleaned:
        return ""
    return cleaned + "/"


def region_name(path: str | Path, root: str | Path, prefix: str = "") -> str:
    """Build the descriptor region name for an image.

    The name is the path relative to the scanned root, with forward
    slashes and the last extension removed, preceded by ``prefix``
    verbatim (pass it through normalize_prefix() first).

    Args:
        path: Image path as discovered under ``root``.
        root: Scanned root directory.
        prefix: Already-normalized prefix.

    Returns:
        Region name like ``"sprites/a/1"``.

    Examples:
        >>> region_name("assets/a/1.png", "assets")
        'a/1'
        >>> region_name("assets/ui/btn.ok.png", "assets", "sprites/")
        'sprites/ui/btn.ok'
    """
    relative = Path(path).relative_to(Path(root)).as_posix()
    stem = str(PurePosixPath(relative).with_suffix(""))
    return f"{prefix}{stem}"


def reference_name(output_path: str | Path, extension: str = ".png") -> str:
    """Name of the canvas image a descriptor refers to.

    Derived from the basename of the descriptor output path; no check is
    made that the image exists.

    Examples:
        >>> reference_name("out/hero.atlas")
        'hero.png'
        >>> reference_name("hero")
        'hero.png'
    """
    return Path(output_path).stem + extension
