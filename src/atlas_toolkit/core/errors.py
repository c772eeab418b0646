"""
Module: core.errors

Purpose:
    Error hierarchy shared by every stage of the atlas pipeline. Each
    error carries the offending file path and the underlying cause so the
    CLI can report both without re-inspecting the traceback.

Key Classes:
    - AtlasError: Base class for all pipeline failures
    - DirectoryReadError: Root or subdirectory cannot be listed
    - DecodeError: Source image is unreadable, corrupt or unsupported
    - DimensionError: Image reports invalid dimensions
    - EncodeError: Canvas image cannot be written
    - WriteError: Descriptor text cannot be written
    - ParseError: Descriptor text cannot be parsed back
    - EmptyInputWarning: No images found (not a failure)

Used By:
    - packer.discovery, packer.probe, packer.output.*: Raise
    - atlas_toolkit.cli: Catches AtlasError and maps it to exit status 1
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class AtlasError(Exception):
    """
    Base class for atlas pipeline failures.

    Attributes:
        path: File or directory the failure relates to (if any).
        cause: Underlying exception (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Path] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is not None:
            message = f"{message}: {self.path}"
        if self.cause is not None:
            message = f"{message} ({self.cause})"
        return message


class DirectoryReadError(AtlasError):
    """Root or subdirectory could not be listed."""
    pass


class DecodeError(AtlasError):
    """Source image could not be decoded."""
    pass


class DimensionError(AtlasError):
    """Image reports dimensions the layout cannot use."""
    pass


class EncodeError(AtlasError):
    """Atlas canvas could not be encoded or written."""
    pass


class WriteError(AtlasError):
    """Atlas descriptor could not be written."""
    pass


class ParseError(AtlasError):
    """Atlas descriptor text is malformed."""
    pass


class EmptyInputWarning(UserWarning):
    """No image files were found; the run ends without output."""
    pass
