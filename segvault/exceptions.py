"""Custom exception classes for the segment encryption engine."""

from typing import Optional


class SegVaultError(Exception):
    """
    Base exception class for all SegVault errors.
    """
    pass


class ValidationError(SegVaultError):
    """
    Raised before any destructive I/O when inputs are inconsistent.
    """
    pass


class SegmentLengthError(ValidationError):
    """
    Raised when a segment length is not a positive multiple of 16.
    """

    def __init__(self, segment_len: int):
        self.segment_len = segment_len
        super().__init__(f"segment length must be a positive multiple of 16, got {segment_len}")


class SegmentCountMismatchError(ValidationError):
    """
    Raised when the number of segments disagrees with file and segment length.
    """

    def __init__(self, expected: Optional[int], found: int, reason: str = ""):
        self.expected = expected
        self.found = found
        if expected is None:
            message = f"cannot derive segment count: {reason}; found {found} segments"
        else:
            message = f"expected {expected} segments, found {found}"
        super().__init__(message)


class EmptyInputError(ValidationError):
    """
    Raised when the input file is empty.
    """
    pass


class SegmentIOError(SegVaultError):
    """
    Raised when a ciphertext object cannot be read or written.
    """

    def __init__(self, segment_id: str, message: str):
        self.segment_id = segment_id
        super().__init__(f"segment {segment_id}: {message}")


class SegmentAuthenticationError(SegVaultError):
    """
    Raised when an authentication tag does not verify (tampering, corruption,
    or a key that does not belong to the object).
    """

    def __init__(self, segment_id: Optional[str] = None):
        self.segment_id = segment_id
        if segment_id:
            message = f"segment {segment_id}: authentication failed"
        else:
            message = "authentication failed"
        super().__init__(message)


class DecodeError(SegVaultError):
    """
    Raised when textual metadata cannot be decoded.
    """
    pass


class MalformedSegmentIdError(DecodeError):
    """
    Raised when a segment id is not a valid UUID/hex string.
    """
    pass


class MalformedSegmentKeyError(DecodeError):
    """
    Raised when a segment key is not valid base64 or has the wrong length.
    """
    pass


class MalformedSegmentNonceError(DecodeError):
    """
    Raised when a stored nonce is not valid base64 or has the wrong length.
    """
    pass


class MetadataDecodeError(DecodeError):
    """
    Raised when a metadata document is not well-formed.
    """
    pass
