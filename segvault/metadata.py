"""Metadata record linking a file to its ordered ciphertext segments."""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from common.constants import SEGMENT_ALIGNMENT, TAG_SIZE_BYTES
from segvault import config
from segvault.config import SegmentCountFormula
from segvault.exceptions import (
    EmptyInputError,
    MetadataDecodeError,
    SegmentCountMismatchError,
    SegmentLengthError,
    ValidationError,
)
from segvault.schemas import MetadataDocument, SegmentDocument
from segvault.segment import Segment


def check_segment_len(segment_len: int) -> None:
    """
    Check that a plaintext segment length is a positive multiple of 16.

    Raises:
        SegmentLengthError: If it is not
    """
    if segment_len <= 0 or segment_len % SEGMENT_ALIGNMENT != 0:
        raise SegmentLengthError(segment_len)


def expected_segment_count(
    file_len: int,
    segment_len: int,
    formula: Optional[SegmentCountFormula] = None,
) -> Optional[int]:
    """
    Number of segments a file of ``file_len`` bytes should have.

    CEIL is ``ceil(file_len / segment_len)``, which matches how the encryption
    engine pads. LEGACY reproduces ``(file_len + segment_len - 16) // (segment_len - 16)``
    as checked by older tooling, which only agrees with CEIL for some inputs.

    Returns:
        Expected count, or None when the formula is undefined for these inputs
        (LEGACY with 16-byte segments)
    """
    formula = SegmentCountFormula(formula or config.SEGMENT_COUNT_FORMULA)
    if formula is SegmentCountFormula.LEGACY:
        divisor = segment_len - TAG_SIZE_BYTES
        if divisor <= 0:
            return None
        return (file_len + segment_len - TAG_SIZE_BYTES) // divisor
    return -(-file_len // segment_len)


def check_segment_count(
    file_len: int,
    segment_len: int,
    num_segments: int,
    formula: Optional[SegmentCountFormula] = None,
) -> None:
    """
    Raises:
        SegmentCountMismatchError: If ``num_segments`` disagrees with the formula
    """
    expected = expected_segment_count(file_len, segment_len, formula)
    if expected is None:
        raise SegmentCountMismatchError(
            None, num_segments, f"formula undefined for segment length {segment_len}"
        )
    if expected != num_segments:
        raise SegmentCountMismatchError(expected, num_segments)


def last_segment_len(file_len: int, segment_len: int) -> int:
    """True byte count of the final segment once its zero padding is removed."""
    remainder = file_len % segment_len
    return segment_len if remainder == 0 else remainder


@dataclass(frozen=True)
class Metadata:
    """
    Original length, nominal plaintext segment length and ordered segments.

    Segment order is original byte order. Direct construction does not check
    the segment count; use :meth:`new` for untrusted values.

    Neither ``file_len`` nor the segment order is authenticated. Whoever holds
    the metadata can truncate or reorder the output without a tag failure.
    """

    file_len: int
    segment_len: int
    segments: Tuple[Segment, ...]

    def __post_init__(self):
        object.__setattr__(self, "segments", tuple(self.segments))

    @classmethod
    def new(
        cls,
        file_len: int,
        segment_len: int,
        segments: Iterable[Segment],
        formula: Optional[SegmentCountFormula] = None,
    ) -> "Metadata":
        """
        Build validated metadata.

        Raises:
            SegmentLengthError: If segment_len is not a positive multiple of 16
            EmptyInputError: If file_len is zero
            SegmentCountMismatchError: If the segment count is inconsistent
        """
        metadata = cls(file_len=file_len, segment_len=segment_len, segments=tuple(segments))
        metadata.validate(formula)
        return metadata

    def validate(self, formula: Optional[SegmentCountFormula] = None) -> None:
        check_segment_len(self.segment_len)
        if self.file_len < 0:
            raise ValidationError(f"file length must not be negative, got {self.file_len}")
        if self.file_len == 0:
            raise EmptyInputError("metadata describes an empty file")
        check_segment_count(self.file_len, self.segment_len, len(self.segments), formula)

    @property
    def last_segment_len(self) -> int:
        return last_segment_len(self.file_len, self.segment_len)

    def to_document(self) -> MetadataDocument:
        return MetadataDocument(
            file_len=self.file_len,
            segment_len=self.segment_len,
            segments=[
                SegmentDocument(id=s.id_text(), key=s.key_text(), nonce=s.nonce_text())
                for s in self.segments
            ],
        )

    @classmethod
    def from_document(
        cls,
        document: MetadataDocument,
        formula: Optional[SegmentCountFormula] = None,
    ) -> "Metadata":
        segments = [Segment.from_text(s.id, s.key, s.nonce) for s in document.segments]
        return cls.new(document.file_len, document.segment_len, segments, formula)

    def serialize(self) -> str:
        """Render as a JSON document."""
        return self.to_document().model_dump_json(indent=2, exclude_none=True)

    @classmethod
    def parse(cls, text: str, formula: Optional[SegmentCountFormula] = None) -> "Metadata":
        """
        Parse a JSON document produced by :meth:`serialize`.

        Raises:
            MetadataDecodeError: If the document is not valid JSON or lacks fields
            DecodeError: If a segment id, key or nonce is malformed
            ValidationError: If the decoded values are inconsistent
        """
        try:
            document = MetadataDocument.model_validate_json(text)
        except PydanticValidationError as e:
            raise MetadataDecodeError(f"malformed metadata document: {e}") from e
        return cls.from_document(document, formula)

    def to_lines(self) -> str:
        """
        Render as plain lines: file length, segment length, then one
        ``<id>:<key>`` specifier per segment.
        """
        lines = [str(self.file_len), str(self.segment_len)]
        lines.extend(segment.specifier() for segment in self.segments)
        return "\n".join(lines)

    @classmethod
    def from_lines(cls, text: str, formula: Optional[SegmentCountFormula] = None) -> "Metadata":
        """Parse the form produced by :meth:`to_lines`."""
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if len(lines) < 2:
            raise MetadataDecodeError("expected file length and segment length lines")
        try:
            file_len = int(lines[0])
            segment_len = int(lines[1])
        except ValueError:
            raise MetadataDecodeError("file length and segment length must be integers")
        segments = [Segment.from_specifier(line) for line in lines[2:]]
        return cls.new(file_len, segment_len, segments, formula)

    @classmethod
    def load(cls, text: str, formula: Optional[SegmentCountFormula] = None) -> "Metadata":
        """Parse either the JSON or the line form."""
        if text.lstrip().startswith("{"):
            return cls.parse(text, formula)
        return cls.from_lines(text, formula)
