"""Encryption engine: split a file into padded segments and encrypt each one."""

import functools
import logging
import os
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Union

from common.constants import SEGMENT_ALIGNMENT
from segvault import config
from segvault.exceptions import EmptyInputError
from segvault.metadata import Metadata, check_segment_len
from segvault.randomness import RandomSource
from segvault.segment import Segment
from segvault.storage import ensure_directory, write_object
from segvault.workers import run_streaming_tasks

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def pad_to(buffer: bytes, length: int) -> bytes:
    """Zero-pad ``buffer`` up to ``length`` bytes."""
    return buffer + b"\x00" * (length - len(buffer))


def padded_len(file_len: int) -> int:
    """Smallest multiple of 16 that is >= file_len (16 for tiny inputs)."""
    return max(SEGMENT_ALIGNMENT, -(-file_len // SEGMENT_ALIGNMENT) * SEGMENT_ALIGNMENT)


def _read_window(f: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, short only at end of input."""
    parts = []
    remaining = size
    while remaining > 0:
        data = f.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


def _check_input(input_path: Path) -> None:
    if os.path.getsize(input_path) == 0:
        raise EmptyInputError(f"input file is empty: {input_path}")


def _encrypt_and_write(segment: Segment, buffer: bytes, output_dir: Path) -> Path:
    ciphertext = segment.encrypt(buffer)
    path = write_object(output_dir, segment.id_text(), ciphertext)
    logger.debug(f"Wrote segment {segment.id_text()} ({len(ciphertext)} bytes)")
    return path


def encrypt_chunked(
    input_path: PathLike,
    output_dir: PathLike,
    segment_len: int,
    *,
    max_workers: Optional[int] = None,
    random_source: Optional[RandomSource] = None,
    independent_nonce: Optional[bool] = None,
) -> Metadata:
    """
    Encrypt a file as fixed-size segments, one ciphertext object per segment.

    The final partial window is zero-padded to ``segment_len``; the padding is
    not recorded and is recovered from ``file_len`` on decryption. Windows are
    handed to the pool as they are read, so only a bounded number of them is
    held in memory at once.

    Args:
        input_path: File to encrypt
        output_dir: Directory for ciphertext objects (created if missing)
        segment_len: Plaintext bytes per segment, a positive multiple of 16
        max_workers: Worker pool size
        random_source: Source for segment ids, keys and nonces
        independent_nonce: Draw a nonce per segment instead of deriving it from the key

    Returns:
        Metadata describing the segments in file order

    Raises:
        SegmentLengthError: If segment_len is invalid (nothing is written)
        EmptyInputError: If the input file is empty
        SegmentIOError: If a ciphertext object cannot be written
        OSError: If the input cannot be read
    """
    check_segment_len(segment_len)
    input_path = Path(input_path)
    _check_input(input_path)
    output_dir = ensure_directory(output_dir)
    if independent_nonce is None:
        independent_nonce = config.INDEPENDENT_NONCE

    logger.info(f"Encrypting {input_path} into {output_dir} with {segment_len}-byte segments")

    file_len = 0
    segments: List[Segment] = []

    def _window_tasks(f: BinaryIO) -> Iterator[Callable[[], Path]]:
        nonlocal file_len
        while True:
            window = _read_window(f, segment_len)
            if not window:
                return
            file_len += len(window)
            segment = Segment.random(random_source, independent_nonce)
            segments.append(segment)
            yield functools.partial(
                _encrypt_and_write, segment, pad_to(window, segment_len), output_dir
            )

    try:
        with open(input_path, "rb") as f:
            run_streaming_tasks(_window_tasks(f), max_workers)
    except Exception as e:
        logger.error(f"Encryption of {input_path} failed: {e}")
        raise

    if file_len == 0:
        raise EmptyInputError(f"input file is empty: {input_path}")

    logger.info(f"Encrypted {file_len} bytes into {len(segments)} segments")
    return Metadata(file_len=file_len, segment_len=segment_len, segments=tuple(segments))


def encrypt_unchunked(
    input_path: PathLike,
    output_dir: PathLike,
    *,
    random_source: Optional[RandomSource] = None,
    independent_nonce: Optional[bool] = None,
) -> Metadata:
    """
    Encrypt a whole file as a single segment padded to a multiple of 16 bytes.

    Returns:
        Metadata with one segment and ``segment_len`` equal to the padded length

    Raises:
        EmptyInputError: If the input file is empty
        SegmentIOError: If the ciphertext object cannot be written
        OSError: If the input cannot be read
    """
    input_path = Path(input_path)
    _check_input(input_path)
    if independent_nonce is None:
        independent_nonce = config.INDEPENDENT_NONCE

    buffer = input_path.read_bytes()
    file_len = len(buffer)
    if file_len == 0:
        raise EmptyInputError(f"input file is empty: {input_path}")
    segment_len = padded_len(file_len)

    output_dir = ensure_directory(output_dir)
    logger.info(f"Encrypting {input_path} into {output_dir} as a single {segment_len}-byte segment")

    segment = Segment.random(random_source, independent_nonce)
    _encrypt_and_write(segment, pad_to(buffer, segment_len), output_dir)
    return Metadata(file_len=file_len, segment_len=segment_len, segments=(segment,))
