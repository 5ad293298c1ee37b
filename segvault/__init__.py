"""
Chunked authenticated file encryption.

A file is split into fixed-size plaintext segments, each encrypted with
AES-128-GCM under its own random key and stored as a separate object named by
the segment's random id. The returned Metadata (original length, segment
length, ordered ids and keys) is the only link between the objects and the
plaintext.
"""

from segvault.config import SegmentCountFormula
from segvault.decryption import decrypt
from segvault.encryption import encrypt_chunked, encrypt_unchunked
from segvault.metadata import Metadata, expected_segment_count
from segvault.randomness import RandomSource, SystemRandomSource
from segvault.segment import Segment

__all__ = [
    "Metadata",
    "RandomSource",
    "Segment",
    "SegmentCountFormula",
    "SystemRandomSource",
    "decrypt",
    "encrypt_chunked",
    "encrypt_unchunked",
    "expected_segment_count",
]
