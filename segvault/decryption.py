"""Decryption engine: verify every segment, then reassemble the file in order."""

import functools
import logging
from pathlib import Path
from typing import Optional, Union

from segvault.config import SegmentCountFormula
from segvault.exceptions import SegmentIOError
from segvault.metadata import Metadata
from segvault.segment import Segment
from segvault.storage import read_object
from segvault.workers import run_segment_tasks

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_and_decrypt(segment: Segment, input_dir: Path) -> bytes:
    plaintext = segment.decrypt(read_object(input_dir, segment.id_text()))
    logger.debug(f"Decrypted segment {segment.id_text()}")
    return plaintext


def decrypt(
    input_dir: PathLike,
    output_path: PathLike,
    metadata: Metadata,
    *,
    max_workers: Optional[int] = None,
    formula: Optional[SegmentCountFormula] = None,
) -> int:
    """
    Decrypt the ciphertext objects described by ``metadata`` into one file.

    Segments are decrypted concurrently and written in metadata order once all
    of them have verified. The final segment is cut to ``file_len % segment_len``
    bytes (or a full segment when that is zero). Segment order is taken on
    trust: a reordered segment list decrypts cleanly into reordered output.

    Args:
        input_dir: Directory holding the ciphertext objects
        output_path: File to write the plaintext to
        metadata: Metadata produced at encryption time
        max_workers: Worker pool size
        formula: Segment count formula used for validation

    Returns:
        Number of bytes written

    Raises:
        ValidationError: If the metadata is inconsistent (nothing is read or written)
        SegmentIOError: If a ciphertext object is missing, unreadable, or not
            segment_len bytes of plaintext
        SegmentAuthenticationError: If a ciphertext object fails verification
    """
    metadata.validate(formula)
    input_dir = Path(input_dir)
    output_path = Path(output_path)

    logger.info(
        f"Decrypting {len(metadata.segments)} segments from {input_dir} into {output_path}"
    )

    tasks = [
        functools.partial(_read_and_decrypt, segment, input_dir)
        for segment in metadata.segments
    ]
    try:
        plaintexts = run_segment_tasks(tasks, max_workers)
    except Exception as e:
        logger.error(f"Decryption into {output_path} failed: {e}")
        raise

    for segment, plaintext in zip(metadata.segments, plaintexts):
        if len(plaintext) != metadata.segment_len:
            logger.error(f"Segment {segment.id_text()} has the wrong size, nothing written")
            raise SegmentIOError(
                segment.id_text(),
                f"object holds {len(plaintext)} plaintext bytes, expected {metadata.segment_len}",
            )

    last_index = len(plaintexts) - 1
    written = 0
    with open(output_path, "wb") as f:
        for i, plaintext in enumerate(plaintexts):
            if i == last_index:
                plaintext = plaintext[:metadata.last_segment_len]
            f.write(plaintext)
            written += len(plaintext)

    logger.info(f"Wrote {written} bytes to {output_path}")
    return written
