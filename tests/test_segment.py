"""Tests for Segment generation, encoding and AES-GCM operations."""

import base64
import uuid

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from segvault.exceptions import (
    MalformedSegmentIdError,
    MalformedSegmentKeyError,
    MalformedSegmentNonceError,
    SegmentAuthenticationError,
    SegmentLengthError,
)
from segvault.segment import Segment


def test_random_segments_are_distinct():
    """Each draw yields a new id and a new key."""
    segments = [Segment.random() for _ in range(50)]
    assert len({s.id for s in segments}) == 50
    assert len({s.key for s in segments}) == 50
    assert all(len(s.key) == 16 for s in segments)
    assert all(s.nonce is None for s in segments)


def test_id_and_key_are_independent_draws(random_source):
    """Id and key come from separate draws of the random source."""
    segment = Segment.random(random_source)
    assert random_source.calls == [16, 16]
    assert segment.id.bytes != segment.key


def test_independent_nonce_is_drawn(random_source):
    """With independent_nonce a third 12-byte draw is made and used."""
    segment = Segment.random(random_source, independent_nonce=True)
    assert random_source.calls == [16, 16, 12]
    assert segment.nonce_bytes() == segment.nonce
    assert segment.nonce_bytes() != segment.key[:12]


def test_id_text_is_lowercase_hex():
    """Object names are 32 lowercase hex digits."""
    segment = Segment.random()
    text = segment.id_text()
    assert len(text) == 32
    assert text == text.lower()
    int(text, 16)


def test_key_text_is_base64_of_key():
    segment = Segment.random()
    assert base64.b64decode(segment.key_text()) == segment.key


def test_nonce_derived_from_key_prefix():
    """Without a stored nonce, the first 12 key bytes are the nonce."""
    key = bytes(range(16))
    segment = Segment(id=uuid.uuid4(), key=key)
    assert segment.nonce_bytes() == key[:12]


def test_encrypt_matches_aes_gcm_with_key_prefix_nonce():
    """Ciphertext is AES-128-GCM with empty associated data and the key-prefix nonce."""
    key = bytes(range(16))
    segment = Segment(id=uuid.uuid4(), key=key)
    plaintext = b"0123456789abcdef" * 2

    expected = AESGCM(key).encrypt(key[:12], plaintext, b"")
    assert segment.encrypt(plaintext) == expected


def test_encrypt_appends_tag_and_decrypt_restores():
    segment = Segment.random()
    plaintext = bytes(range(64))

    ciphertext = segment.encrypt(plaintext)
    assert len(ciphertext) == len(plaintext) + 16
    assert segment.decrypt(ciphertext) == plaintext


@pytest.mark.parametrize("length", [0, 1, 15, 17, 33])
def test_encrypt_rejects_unaligned_buffers(length):
    """The caller must pad to a non-empty multiple of 16."""
    with pytest.raises(SegmentLengthError):
        Segment.random().encrypt(b"\x00" * length)


def test_decrypt_detects_tampering():
    segment = Segment.random()
    ciphertext = bytearray(segment.encrypt(b"\x01" * 32))
    ciphertext[5] ^= 0x01

    with pytest.raises(SegmentAuthenticationError) as exc_info:
        segment.decrypt(bytes(ciphertext))
    assert exc_info.value.segment_id == segment.id_text()


def test_decrypt_with_wrong_key_fails():
    ciphertext = Segment.random().encrypt(b"\x02" * 16)
    with pytest.raises(SegmentAuthenticationError):
        Segment.random().decrypt(ciphertext)


def test_decrypt_rejects_truncated_object():
    with pytest.raises(SegmentAuthenticationError):
        Segment.random().decrypt(b"short")


def test_from_text_round_trip():
    segment = Segment.random()
    parsed = Segment.from_text(segment.id_text(), segment.key_text())
    assert parsed == segment


def test_from_text_accepts_hyphenated_uuid():
    segment = Segment.random()
    parsed = Segment.from_text(str(segment.id), segment.key_text())
    assert parsed.id == segment.id


@pytest.mark.parametrize("bad_id", ["", "not-a-uuid", "0123", "g" * 32])
def test_from_text_rejects_malformed_id(bad_id):
    with pytest.raises(MalformedSegmentIdError):
        Segment.from_text(bad_id, Segment.random().key_text())


def test_from_text_rejects_invalid_base64_key():
    with pytest.raises(MalformedSegmentKeyError):
        Segment.from_text(uuid.uuid4().hex, "not base64!!")


def test_from_text_rejects_wrong_key_length():
    short_key = base64.b64encode(b"\x00" * 8).decode()
    with pytest.raises(MalformedSegmentKeyError):
        Segment.from_text(uuid.uuid4().hex, short_key)


def test_from_text_rejects_wrong_nonce_length():
    segment = Segment.random()
    with pytest.raises(MalformedSegmentNonceError):
        Segment.from_text(segment.id_text(), segment.key_text(), base64.b64encode(b"\x00" * 16).decode())


def test_specifier_round_trip():
    segment = Segment.random()
    specifier = segment.specifier()
    assert specifier == f"{segment.id_text()}:{segment.key_text()}"
    assert Segment.from_specifier(specifier) == segment


def test_specifier_round_trip_with_nonce():
    segment = Segment.random(independent_nonce=True)
    assert specifier_parts(segment.specifier()) == 3
    assert Segment.from_specifier(segment.specifier()) == segment


def specifier_parts(specifier: str) -> int:
    return len(specifier.split(":"))


def test_from_specifier_rejects_missing_separator():
    with pytest.raises(MalformedSegmentIdError):
        Segment.from_specifier(uuid.uuid4().hex)


def test_repr_hides_key():
    segment = Segment.random()
    assert segment.key_text() not in repr(segment)
    assert repr(segment.key) not in repr(segment)
