from __future__ import annotations

import pytest

from dxfcodec.config import DEFAULT_OPTIONS
from dxfcodec.entity import Dimension, Line
from dxfcodec.registry import DIMENSION, LINE, MLEADERSTYLE, SCHEMAS, schema_for
from dxfcodec.schema import BinaryData, Field, Marker, equals, point
from dxfcodec.version import Version


def test_point_field_expands_to_three_codes() -> None:
    field = point(10, "start")

    assert field.codes == (10, 20, 30)
    assert field.tags(Line(start=(1.0, 2.0, 3.0)), DEFAULT_OPTIONS) == [(10, 1.0), (20, 2.0), (30, 3.0)]


def test_skip_predicate_hides_default_value() -> None:
    field = Field(6, "linetype", skip=equals("BYLAYER"))

    assert field.tags(Line(), DEFAULT_OPTIONS) == []
    assert field.tags(Line(linetype="DASHED"), DEFAULT_OPTIONS) == [(6, "DASHED")]


def test_entries_are_gated_by_release_and_kind() -> None:
    marker = Marker("AcDbRotatedDimension", kinds=frozenset({0}))

    assert marker.applies(Version.R2000, 0)
    assert not marker.applies(Version.R2000, 1)
    assert not marker.applies(Version.R12, 0)


def test_decode_map_keeps_first_definition_of_shared_codes() -> None:
    entry, index = DIMENSION.decode_map[13]

    assert entry.attr == "first_point"
    assert index == 0
    assert DIMENSION.decode_map[25][0].attr == "third_point"
    assert 330 not in DIMENSION.decode_map


def test_graphics_size_codes_map_to_binary_data() -> None:
    assert isinstance(LINE.decode_map[92][0], BinaryData)
    assert isinstance(LINE.decode_map[160][0], BinaryData)
    assert MLEADERSTYLE.decode_map[92][0].attr == "leader_line_weight"


def test_variant_kinds() -> None:
    assert DIMENSION.kind_of(Dimension(dimension_type=38)) == 6
    assert DIMENSION.is_valid_kind(6)
    assert not DIMENSION.is_valid_kind(7)
    assert LINE.is_valid_kind(LINE.kind_of(Line()))


def test_registry_lookup() -> None:
    assert list(SCHEMAS) == [
        "3DFACE",
        "LINE",
        "CIRCLE",
        "ARC",
        "POINT",
        "DIMENSION",
        "OBJECT_PTR",
        "IMAGEDEF_REACTOR",
        "MLEADERSTYLE",
    ]
    assert schema_for(Line()) is LINE
    assert schema_for("DIMENSION") is DIMENSION
    with pytest.raises(KeyError):
        schema_for("SPLINE")
