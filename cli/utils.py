"""Utility functions for CLI operations."""

import sys
from pathlib import Path

from cli.constants import STDIN_MARKER
from segvault.exceptions import MetadataDecodeError


def read_text_source(source: str) -> str:
    """
    Read a document from a file path, or from standard input when source is '-'.

    Args:
        source: File path or '-'

    Returns:
        Document text

    Raises:
        OSError: If the file cannot be read
        MetadataDecodeError: If the content is not UTF-8 text
    """
    try:
        if source == STDIN_MARKER:
            return sys.stdin.read()
        return Path(source).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        name = "standard input" if source == STDIN_MARKER else source
        raise MetadataDecodeError(f"metadata in {name} is not UTF-8 text: {e}") from e


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"
