"""Manages ciphertext objects on disk: one flat file per segment, named by id."""

import re
from pathlib import Path
from typing import Optional, Union

from common.constants import TAG_SIZE_BYTES
from segvault.exceptions import SegmentIOError

PathLike = Union[str, Path]

_OBJECT_NAME = re.compile(r"^[0-9a-f]{32}$")


def ensure_directory(directory: PathLike) -> Path:
    """Ensure the object directory exists."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_object_path(directory: PathLike, segment_id: str) -> Path:
    """
    Get file path for a ciphertext object.

    Args:
        directory: Directory holding the objects
        segment_id: Lowercase hex id of the segment

    Returns:
        Path object for the ciphertext object
    """
    return Path(directory) / segment_id


def write_object(directory: PathLike, segment_id: str, data: bytes) -> Path:
    """
    Write a ciphertext object.

    Raises:
        SegmentIOError: If the write fails
    """
    path = get_object_path(directory, segment_id)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise SegmentIOError(segment_id, f"cannot write {path}: {e}") from e
    return path


def read_object(directory: PathLike, segment_id: str) -> bytes:
    """
    Read an entire ciphertext object.

    Raises:
        SegmentIOError: If the object is missing or unreadable
    """
    path = get_object_path(directory, segment_id)
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise SegmentIOError(segment_id, f"ciphertext object not found: {path}") from e
    except OSError as e:
        raise SegmentIOError(segment_id, f"cannot read {path}: {e}") from e


def object_exists(directory: PathLike, segment_id: str) -> bool:
    return get_object_path(directory, segment_id).is_file()


def get_object_size(directory: PathLike, segment_id: str) -> Optional[int]:
    """
    Size of a ciphertext object in bytes, or None if it doesn't exist.
    """
    path = get_object_path(directory, segment_id)
    if path.is_file():
        return path.stat().st_size
    return None


def segment_len_from_object(directory: PathLike, segment_id: str) -> int:
    """
    Plaintext segment length implied by a stored object (its size minus the tag).

    Raises:
        SegmentIOError: If the object is missing or too short to hold a tag
    """
    size = get_object_size(directory, segment_id)
    if size is None:
        raise SegmentIOError(segment_id, f"ciphertext object not found: {get_object_path(directory, segment_id)}")
    if size <= TAG_SIZE_BYTES:
        raise SegmentIOError(segment_id, f"object too short ({size} bytes)")
    return size - TAG_SIZE_BYTES


def list_objects(directory: PathLike) -> list[str]:
    """
    List ids of all ciphertext objects in a directory.

    Returns:
        Sorted list of object names that look like segment ids
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(
        p.name for p in directory.iterdir() if p.is_file() and _OBJECT_NAME.match(p.name)
    )
