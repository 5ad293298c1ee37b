"""Segment: one randomly keyed unit of plaintext and its textual encoding."""

import base64
import uuid
from dataclasses import dataclass, field
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from common.constants import (
    ID_SIZE_BYTES,
    KEY_SIZE_BYTES,
    NONCE_SIZE_BYTES,
    SEGMENT_ALIGNMENT,
    TAG_SIZE_BYTES,
)
from segvault.exceptions import (
    MalformedSegmentIdError,
    MalformedSegmentKeyError,
    MalformedSegmentNonceError,
    SegmentAuthenticationError,
    SegmentLengthError,
)
from segvault.randomness import RandomSource, default_random_source

SPECIFIER_SEPARATOR = ":"


def _decode_b64(text: str, expected_len: int) -> Optional[bytes]:
    try:
        raw = base64.b64decode(text, validate=True)
    except (ValueError, TypeError):
        return None
    if len(raw) != expected_len:
        return None
    return raw


@dataclass(frozen=True)
class Segment:
    """
    A segment identity plus the key that secures its ciphertext object.

    ``nonce`` is only set for segments created with an independent nonce.
    Segments without one use the first 12 bytes of the key as the AES-GCM
    nonce, which keeps them readable by older tooling but ties the nonce to
    the key.
    """

    id: uuid.UUID
    key: bytes = field(repr=False)
    nonce: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self):
        if len(self.key) != KEY_SIZE_BYTES:
            raise MalformedSegmentKeyError(
                f"key must be {KEY_SIZE_BYTES} bytes, got {len(self.key)}"
            )
        if self.nonce is not None and len(self.nonce) != NONCE_SIZE_BYTES:
            raise MalformedSegmentNonceError(
                f"nonce must be {NONCE_SIZE_BYTES} bytes, got {len(self.nonce)}"
            )

    @classmethod
    def random(
        cls,
        random_source: Optional[RandomSource] = None,
        independent_nonce: bool = False,
    ) -> "Segment":
        """
        Create a segment with freshly drawn id and key.

        Args:
            random_source: Source of random bytes (defaults to the system CSPRNG)
            independent_nonce: Also draw a nonce instead of deriving it from the key

        Returns:
            New Segment
        """
        source = random_source or default_random_source()
        segment_id = uuid.UUID(bytes=source.token_bytes(ID_SIZE_BYTES))
        key = source.token_bytes(KEY_SIZE_BYTES)
        nonce = source.token_bytes(NONCE_SIZE_BYTES) if independent_nonce else None
        return cls(id=segment_id, key=key, nonce=nonce)

    @classmethod
    def from_text(
        cls,
        id_text: str,
        key_text: str,
        nonce_text: Optional[str] = None,
    ) -> "Segment":
        """
        Parse a segment from its textual id, base64 key and optional base64 nonce.

        Raises:
            MalformedSegmentIdError: If the id is not a UUID or 32-digit hex string
            MalformedSegmentKeyError: If the key is not base64 or not 16 bytes
            MalformedSegmentNonceError: If the nonce is not base64 or not 12 bytes
        """
        try:
            segment_id = uuid.UUID(id_text)
        except (ValueError, TypeError, AttributeError):
            raise MalformedSegmentIdError(f"malformed segment id: {id_text!r}")

        key = _decode_b64(key_text, KEY_SIZE_BYTES)
        if key is None:
            raise MalformedSegmentKeyError(f"malformed key for segment {segment_id.hex}")

        nonce = None
        if nonce_text is not None:
            nonce = _decode_b64(nonce_text, NONCE_SIZE_BYTES)
            if nonce is None:
                raise MalformedSegmentNonceError(f"malformed nonce for segment {segment_id.hex}")

        return cls(id=segment_id, key=key, nonce=nonce)

    @classmethod
    def from_specifier(cls, specifier: str) -> "Segment":
        """Parse the ``<id>:<base64 key>[:<base64 nonce>]`` form."""
        parts = specifier.strip().split(SPECIFIER_SEPARATOR)
        if len(parts) not in (2, 3):
            raise MalformedSegmentIdError(f"malformed segment specifier: {specifier!r}")
        return cls.from_text(*parts)

    def id_text(self) -> str:
        """Lowercase hex id; the name of the ciphertext object."""
        return self.id.hex

    def key_text(self) -> str:
        return base64.b64encode(self.key).decode("ascii")

    def nonce_text(self) -> Optional[str]:
        if self.nonce is None:
            return None
        return base64.b64encode(self.nonce).decode("ascii")

    def specifier(self) -> str:
        parts = [self.id_text(), self.key_text()]
        if self.nonce is not None:
            parts.append(self.nonce_text())
        return SPECIFIER_SEPARATOR.join(parts)

    def nonce_bytes(self) -> bytes:
        """Nonce used for AES-GCM: the stored nonce, else the key prefix."""
        if self.nonce is not None:
            return self.nonce
        return self.key[:NONCE_SIZE_BYTES]

    def encrypt(self, buffer: bytes) -> bytes:
        """
        Encrypt a padded plaintext buffer.

        Args:
            buffer: Plaintext, already padded to a multiple of 16 bytes

        Returns:
            Ciphertext followed by the 16-byte authentication tag

        Raises:
            SegmentLengthError: If the buffer is empty or not aligned
        """
        if not buffer or len(buffer) % SEGMENT_ALIGNMENT != 0:
            raise SegmentLengthError(len(buffer))
        return AESGCM(self.key).encrypt(self.nonce_bytes(), bytes(buffer), b"")

    def decrypt(self, buffer: bytes) -> bytes:
        """
        Verify and decrypt a ciphertext object.

        Args:
            buffer: Ciphertext followed by its authentication tag

        Returns:
            Padded plaintext, ``len(buffer) - 16`` bytes

        Raises:
            SegmentAuthenticationError: If the tag does not verify
        """
        if len(buffer) < TAG_SIZE_BYTES:
            raise SegmentAuthenticationError(self.id_text())
        try:
            return AESGCM(self.key).decrypt(self.nonce_bytes(), bytes(buffer), b"")
        except InvalidTag:
            raise SegmentAuthenticationError(self.id_text()) from None
