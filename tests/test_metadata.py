"""Tests for Metadata validation and its text forms."""

import json

import pytest

from segvault import config
from segvault.config import SegmentCountFormula
from segvault.exceptions import (
    EmptyInputError,
    MalformedSegmentIdError,
    MalformedSegmentKeyError,
    MetadataDecodeError,
    SegmentCountMismatchError,
    SegmentLengthError,
)
from segvault.metadata import (
    Metadata,
    expected_segment_count,
    last_segment_len,
)
from segvault.segment import Segment


def make_segments(count, random_source=None, independent_nonce=False):
    return [Segment.random(random_source, independent_nonce) for _ in range(count)]


class TestSegmentCount:
    """Expected segment count under both formulas."""

    @pytest.mark.parametrize("file_len,segment_len,expected", [
        (1, 16, 1),
        (16, 16, 1),
        (17, 16, 2),
        (100, 32, 4),
        (128, 32, 4),
        (10, 1024, 1),
    ])
    def test_ceil_formula(self, file_len, segment_len, expected):
        assert expected_segment_count(file_len, segment_len, SegmentCountFormula.CEIL) == expected

    @pytest.mark.parametrize("file_len,segment_len,expected", [
        (100, 32, 7),
        (100, 1024, 1),
        (10, 32, 1),
        (64, 48, 3),
    ])
    def test_legacy_formula(self, file_len, segment_len, expected):
        assert expected_segment_count(file_len, segment_len, SegmentCountFormula.LEGACY) == expected

    def test_legacy_formula_undefined_for_16_byte_segments(self):
        assert expected_segment_count(10, 16, SegmentCountFormula.LEGACY) is None

    def test_default_follows_configured_formula(self, monkeypatch):
        monkeypatch.setattr(config, "SEGMENT_COUNT_FORMULA", SegmentCountFormula.LEGACY)
        assert expected_segment_count(100, 32) == 7
        monkeypatch.setattr(config, "SEGMENT_COUNT_FORMULA", SegmentCountFormula.CEIL)
        assert expected_segment_count(100, 32) == 4


@pytest.mark.parametrize("file_len,segment_len,expected", [
    (100, 32, 4),
    (96, 32, 32),
    (10, 16, 10),
    (16, 16, 16),
])
def test_last_segment_len(file_len, segment_len, expected):
    assert last_segment_len(file_len, segment_len) == expected


class TestMetadataValidation:
    """Metadata.new enforces length alignment and segment count."""

    def test_valid_metadata(self):
        segments = make_segments(4)
        metadata = Metadata.new(100, 32, segments)
        assert metadata.segments == tuple(segments)
        assert metadata.last_segment_len == 4

    @pytest.mark.parametrize("segment_len", [0, -16, 8, 30, 100])
    def test_rejects_unaligned_segment_len(self, segment_len):
        with pytest.raises(SegmentLengthError):
            Metadata.new(100, segment_len, make_segments(1))

    @pytest.mark.parametrize("count", [0, 3, 5])
    def test_rejects_wrong_segment_count(self, count):
        with pytest.raises(SegmentCountMismatchError) as exc_info:
            Metadata.new(100, 32, make_segments(count), SegmentCountFormula.CEIL)
        assert exc_info.value.expected == 4
        assert exc_info.value.found == count

    def test_legacy_formula_rejects_ceil_count(self):
        with pytest.raises(SegmentCountMismatchError):
            Metadata.new(100, 32, make_segments(4), SegmentCountFormula.LEGACY)

    def test_legacy_formula_with_16_byte_segments_fails_validation(self):
        with pytest.raises(SegmentCountMismatchError) as exc_info:
            Metadata.new(10, 16, make_segments(1), SegmentCountFormula.LEGACY)
        assert exc_info.value.expected is None

    def test_rejects_empty_file(self):
        with pytest.raises(EmptyInputError):
            Metadata.new(0, 32, [])


class TestMetadataJson:
    """JSON document form."""

    def test_round_trip(self, random_source):
        metadata = Metadata.new(100, 32, make_segments(4, random_source))
        assert Metadata.parse(metadata.serialize()) == metadata

    def test_round_trip_with_independent_nonces(self):
        metadata = Metadata.new(40, 16, make_segments(3, independent_nonce=True))
        parsed = Metadata.parse(metadata.serialize())
        assert parsed == metadata
        assert all(s.nonce is not None for s in parsed.segments)

    def test_document_fields(self):
        segments = make_segments(1)
        document = json.loads(Metadata.new(10, 16, segments).serialize())

        assert document["file_len"] == 10
        assert document["segment_len"] == 16
        assert document["segments"] == [{"id": segments[0].id_text(), "key": segments[0].key_text()}]

    def test_order_is_preserved(self):
        segments = make_segments(4)
        parsed = Metadata.parse(Metadata.new(100, 32, segments).serialize())
        assert [s.id for s in parsed.segments] == [s.id for s in segments]

    @pytest.mark.parametrize("text", [
        "",
        "not json",
        '{"file_len": 10, "segment_len": 16}',
        '{"file_len": "ten", "segment_len": 16, "segments": []}',
        '{"file_len": 10, "segment_len": 16, "segments": [{"id": "x"}]}',
    ])
    def test_parse_rejects_malformed_documents(self, text):
        with pytest.raises(MetadataDecodeError):
            Metadata.parse(text)

    def test_parse_rejects_malformed_id(self):
        segment = Segment.random()
        text = json.dumps({
            "file_len": 10,
            "segment_len": 16,
            "segments": [{"id": "zz", "key": segment.key_text()}],
        })
        with pytest.raises(MalformedSegmentIdError):
            Metadata.parse(text)

    def test_parse_rejects_malformed_key(self):
        segment = Segment.random()
        text = json.dumps({
            "file_len": 10,
            "segment_len": 16,
            "segments": [{"id": segment.id_text(), "key": "@@@"}],
        })
        with pytest.raises(MalformedSegmentKeyError):
            Metadata.parse(text)

    def test_parse_validates_count(self):
        text = Metadata(file_len=100, segment_len=32, segments=tuple(make_segments(2))).serialize()
        with pytest.raises(SegmentCountMismatchError):
            Metadata.parse(text)


class TestMetadataLines:
    """Plain-line form used on the command line."""

    def test_round_trip(self):
        metadata = Metadata.new(100, 32, make_segments(4))
        text = metadata.to_lines()

        lines = text.splitlines()
        assert lines[0] == "100"
        assert lines[1] == "32"
        assert lines[2] == metadata.segments[0].specifier()
        assert Metadata.from_lines(text) == metadata

    def test_rejects_missing_header(self):
        with pytest.raises(MetadataDecodeError):
            Metadata.from_lines("100")

    def test_rejects_non_integer_lengths(self):
        with pytest.raises(MetadataDecodeError):
            Metadata.from_lines("abc\n32\n")

    def test_load_detects_format(self):
        metadata = Metadata.new(100, 32, make_segments(4))
        assert Metadata.load(metadata.serialize()) == metadata
        assert Metadata.load(metadata.to_lines()) == metadata
