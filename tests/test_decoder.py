from __future__ import annotations

import pytest

from dxfcodec.config import CodecOptions
from dxfcodec.decoder import TagType, decode_record, parse_value, tag_type
from dxfcodec.diagnostics import INFO, DiagnosticSink
from dxfcodec.errors import TagValueError
from dxfcodec.registry import DIMENSION, FACE3D, IMAGEDEF_REACTOR, LINE
from dxfcodec.version import Version
from tests._dxf_helpers import reader_for


def _line_pairs(*extra):
    return [
        (5, "2B"),
        (100, "AcDbEntity"),
        (8, "0"),
        (100, "AcDbLine"),
        (10, "0.0"),
        (20, "0.0"),
        (30, "0.0"),
        (11, "1.0"),
        (21, "1.0"),
        (31, "0.0"),
        *extra,
        (0, "EOF"),
    ]


@pytest.mark.parametrize(
    "code, expected",
    [
        (0, TagType.STRING),
        (5, TagType.HANDLE),
        (10, TagType.FLOAT),
        (70, TagType.INT16),
        (92, TagType.INT32),
        (160, TagType.INT64),
        (290, TagType.BOOL),
        (310, TagType.BINARY),
        (330, TagType.REFERENCE),
        (430, TagType.STRING),
        (999, TagType.COMMENT),
        (85, TagType.UNKNOWN),
    ],
)
def test_tag_type_ranges(code: int, expected: TagType) -> None:
    assert tag_type(code) is expected


def test_parse_value_per_type() -> None:
    assert parse_value(10, " 1.5") == 1.5
    assert parse_value(5, "2A") == 42
    assert parse_value(290, "1") is True
    assert parse_value(290, "0") is False
    assert parse_value(330, " 1F ") == "1F"
    assert parse_value(1, "  keep me ") == "  keep me "


@pytest.mark.parametrize("code, raw", [(70, "40000"), (10, "abc"), (5, "xyz"), (90, "1.5")])
def test_parse_value_rejects_bad_values(code: int, raw: str) -> None:
    with pytest.raises(TagValueError):
        parse_value(code, raw)


def test_3dface_decodes_and_duplicates_third_corner() -> None:
    reader = reader_for(
        [
            (5, "2A"),
            (330, "1F"),
            (100, "AcDbEntity"),
            (8, "0"),
            (100, "AcDbFace"),
            (10, "0.0"),
            (20, "0.0"),
            (30, "0.0"),
            (11, "1.0"),
            (21, "0.0"),
            (31, "0.0"),
            (12, "1.0"),
            (22, "1.0"),
            (32, "0.0"),
            (0, "LINE"),
        ]
    )
    sink = DiagnosticSink()

    face = decode_record(reader, FACE3D, sink=sink)

    assert face.handle == 0x2A
    assert face.owner_soft == "1F"
    assert face.layer == "0"
    assert face.first == (0.0, 0.0, 0.0)
    assert face.second == (1.0, 0.0, 0.0)
    assert face.third == (1.0, 1.0, 0.0)
    assert face.fourth == face.third
    assert face.to_points() == [face.first, face.second, face.third]
    assert sink.warnings == []

    following = reader.next_tag()
    assert following is not None
    assert (following.code, following.value) == (0, "LINE")


def test_repeated_owner_codes_fill_owner_then_object_owner() -> None:
    reader = reader_for(
        [
            (5, "10"),
            (330, "A1"),
            (330, "B2"),
            (330, "C3"),
            (100, "AcDbRasterImageDefReactor"),
            (90, "2"),
            (0, "EOF"),
        ]
    )
    sink = DiagnosticSink()

    reactor = decode_record(reader, IMAGEDEF_REACTOR, sink=sink)

    assert reactor.owner_soft == "A1"
    assert reactor.object_owner_soft == "B2"
    assert reactor.associated_image == "B2"
    assert [w.code for w in sink.warnings] == [330]


def test_unknown_group_code_warns_and_continues() -> None:
    sink = DiagnosticSink()

    line = decode_record(reader_for(_line_pairs((1, "stray"), (39, "2.5"))), LINE, sink=sink)

    assert line.thickness == 2.5
    assert [(w.code, w.message) for w in sink.warnings] == [(1, "unknown group code")]
    assert sink.warnings[0].record_type == "LINE"


def test_unexpected_subclass_marker_warns() -> None:
    sink = DiagnosticSink()

    decode_record(reader_for(_line_pairs((100, "AcDbCircle"))), LINE, sink=sink)

    assert len(sink.warnings) == 1
    assert "AcDbCircle" in sink.warnings[0].message


def test_invalid_value_warns_and_keeps_default() -> None:
    sink = DiagnosticSink()

    line = decode_record(reader_for(_line_pairs((39, "thick"))), LINE, sink=sink)

    assert line.thickness == 0.0
    assert "invalid float value" in sink.warnings[0].message


def test_out_of_range_color_warns() -> None:
    sink = DiagnosticSink()

    decode_record(reader_for(_line_pairs((62, "300"))), LINE, sink=sink)

    assert "out of range" in sink.warnings[0].message


def test_comments_are_reported_at_info_level() -> None:
    sink = DiagnosticSink()

    decode_record(reader_for(_line_pairs((999, "made by hand"))), LINE, sink=sink)

    assert sink.warnings == []
    assert [(d.severity, d.message) for d in sink] == [(INFO, "comment: made by hand")]


def test_comments_can_be_silenced() -> None:
    sink = DiagnosticSink()

    decode_record(
        reader_for(_line_pairs((999, "quiet"))),
        LINE,
        sink=sink,
        options=CodecOptions(echo_comments=False),
    )

    assert len(sink) == 0


def test_application_groups_route_owner_references() -> None:
    reader = reader_for(
        [
            (5, "2B"),
            (102, "{ACAD_REACTORS"),
            (330, "1F"),
            (102, "}"),
            (102, "{ACAD_XDICTIONARY"),
            (360, "2C"),
            (102, "}"),
            (330, "3D"),
            (100, "AcDbEntity"),
            (8, "0"),
            (0, "EOF"),
        ]
    )
    sink = DiagnosticSink()

    line = decode_record(reader, LINE, sink=sink)

    assert line.owner_soft == "1F"
    assert line.owner_hard == "2C"
    assert line.object_owner_soft == "3D"
    assert sink.warnings == []


def test_foreign_application_group_is_opaque() -> None:
    sink = DiagnosticSink()

    line = decode_record(
        reader_for(_line_pairs((102, "{MYAPP"), (8, "HIDDEN"), (70, "3"), (102, "}"))),
        LINE,
        sink=sink,
    )

    assert line.layer == "0"
    assert sink.warnings == []


def test_unclosed_application_group_warns() -> None:
    sink = DiagnosticSink()

    decode_record(reader_for(_line_pairs((102, "{MYAPP"))), LINE, sink=sink)

    assert len(sink.warnings) == 1
    assert "not closed" in sink.warnings[0].message


@pytest.mark.parametrize("size_code", [92, 160])
def test_binary_chunks_are_kept_in_order(size_code: int) -> None:
    line = decode_record(
        reader_for(_line_pairs((size_code, "6"), (310, "DEADBE"), (310, "EF0102"))),
        LINE,
    )

    assert line.graphics_data_size == 6
    assert line.binary_chunks == ["DEADBE", "EF0102"]


def test_overlong_binary_chunk_warns() -> None:
    sink = DiagnosticSink()
    chunk = "AB" * 129

    line = decode_record(reader_for(_line_pairs((310, chunk))), LINE, sink=sink)

    assert line.binary_chunks == [chunk]
    assert len(sink.warnings) == 1


def test_dimension_selector_picks_kind() -> None:
    dim = decode_record(reader_for([(70, "35"), (15, "4.0"), (40, "0.5"), (0, "EOF")]), DIMENSION)

    assert dim.dimension_type == 35
    assert dim.kind == 3
    assert dim.kind_name == "diameter"
    assert dim.third_point == (4.0, 0.0, 0.0)
    assert dim.leader_length == 0.5


def test_dimension_selector_out_of_range_warns() -> None:
    sink = DiagnosticSink()

    dim = decode_record(reader_for([(70, "7"), (0, "EOF")]), DIMENSION, sink=sink)

    assert dim.kind == 7
    assert "out of range" in sink.warnings[0].message


def test_dimension_selector_cannot_change_once_set() -> None:
    sink = DiagnosticSink()

    dim = decode_record(reader_for([(70, "1"), (70, "2"), (0, "EOF")]), DIMENSION, sink=sink)

    assert dim.dimension_type == 1
    assert len(sink.warnings) == 1
    assert sink.warnings[0].code == 70


def test_pre_r12_elevation_fills_missing_z() -> None:
    reader = reader_for(
        [
            (8, "0"),
            (38, "5.0"),
            (10, "1.0"),
            (20, "2.0"),
            (11, "3.0"),
            (21, "4.0"),
            (0, "EOF"),
        ]
    )

    line = decode_record(reader, LINE, version=Version.R10)

    assert line.elevation == 5.0
    assert line.start == (1.0, 2.0, 5.0)


def test_empty_layer_gets_default() -> None:
    line = decode_record(reader_for([(8, ""), (0, "EOF")]), LINE)

    assert line.layer == "0"
