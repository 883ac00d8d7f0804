from __future__ import annotations

from .config import COLOR_BYLAYER, DEFAULT_LINETYPE, LINEWEIGHT_BYLAYER
from .entity import Arc, Circle, Dimension, Face3D, Line, Point
from .errors import ValidationError
from .objects import ImageDefReactor, MLeaderStyle, ObjectPtr
from .record import Record, Z_AXIS
from .schema import (
    OBJECTS,
    AppGroup,
    BinaryData,
    Field,
    Marker,
    Schema,
    equals,
    in_range,
    is_empty,
    is_zero,
    one_of,
    point,
)
from .version import Version

V = Version

HEADER = (
    Field(5, "handle", skip=equals(-1)),
    AppGroup("ACAD_REACTORS", 330, "owner_soft"),
    AppGroup("ACAD_XDICTIONARY", 360, "owner_hard"),
    Field(330, "object_owner_soft", skip=is_empty, since=V.R13),
)

ENTITY_COMMON = HEADER + (
    Marker("AcDbEntity"),
    Field(67, "paperspace", skip=is_zero, valid=one_of(0, 1)),
    Field(8, "layer"),
    Field(6, "linetype", skip=equals(DEFAULT_LINETYPE)),
    Field(347, "material", skip=is_empty, since=V.R2007),
    Field(62, "color", skip=equals(COLOR_BYLAYER), valid=in_range(-257, 257)),
    Field(370, "lineweight", skip=equals(LINEWEIGHT_BYLAYER), since=V.R2002),
    Field(48, "linetype_scale", skip=equals(1.0), since=V.R13),
    Field(60, "visibility", skip=is_zero, since=V.R13, valid=one_of(0, 1)),
    BinaryData(),
    Field(420, "color_value", skip=is_zero, since=V.R2004),
    Field(430, "color_name", skip=is_empty, since=V.R2004),
    Field(440, "transparency", skip=is_zero, since=V.R2004),
    Field(390, "plot_style", skip=is_empty, since=V.R2000),
    Field(284, "shadow_mode", skip=is_zero, since=V.R2009, valid=in_range(0, 3)),
    Field(38, "elevation", skip=is_zero, until=V.R11),
)

THICKNESS = Field(39, "thickness", skip=is_zero)
EXTRUSION = point(210, "extrusion", skip=equals(Z_AXIS), since=V.R12)


def _apply_elevation(attr: str):
    def _after_decode(record: Record, seen: frozenset[int], version: Version) -> None:
        if version <= V.R11 and record.elevation and 30 not in seen:
            x, y, _ = getattr(record, attr)
            setattr(record, attr, (x, y, record.elevation))

    return _after_decode


def _face_after_decode(record: Record, seen: frozenset[int], version: Version) -> None:
    _apply_elevation("first")(record, seen, version)
    if 13 not in seen:
        record.fourth = record.third


def _validate_line(record: Line) -> None:
    if record.start == record.end:
        raise ValidationError(
            record.dxftype, record.handle, "start point and end point are identical"
        )


def _validate_radius(record: Circle) -> None:
    if record.radius == 0.0:
        raise ValidationError(record.dxftype, record.handle, "radius value equals 0.0")


FACE3D = Schema(
    "3DFACE",
    Face3D,
    ENTITY_COMMON
    + (
        Marker("AcDbFace"),
        point(10, "first"),
        point(11, "second"),
        point(12, "third"),
        point(13, "fourth"),
        Field(70, "invisible_edges", skip=is_zero, valid=in_range(0, 15)),
    ),
    after_decode=_face_after_decode,
)

LINE = Schema(
    "LINE",
    Line,
    ENTITY_COMMON
    + (
        Marker("AcDbLine"),
        THICKNESS,
        point(10, "start"),
        point(11, "end"),
        EXTRUSION,
    ),
    validate=_validate_line,
    after_decode=_apply_elevation("start"),
)

CIRCLE = Schema(
    "CIRCLE",
    Circle,
    ENTITY_COMMON
    + (
        Marker("AcDbCircle"),
        THICKNESS,
        point(10, "center"),
        Field(40, "radius"),
        EXTRUSION,
    ),
    validate=_validate_radius,
    after_decode=_apply_elevation("center"),
)

ARC = Schema(
    "ARC",
    Arc,
    ENTITY_COMMON
    + (
        Marker("AcDbCircle"),
        THICKNESS,
        point(10, "center"),
        Field(40, "radius"),
        EXTRUSION,
        Marker("AcDbArc"),
        Field(50, "start_angle"),
        Field(51, "end_angle"),
    ),
    validate=_validate_radius,
    after_decode=_apply_elevation("center"),
)

POINT = Schema(
    "POINT",
    Point,
    ENTITY_COMMON
    + (
        Marker("AcDbPoint"),
        point(10, "location"),
        THICKNESS,
        EXTRUSION,
        Field(50, "x_axis_angle", skip=is_zero),
    ),
    after_decode=_apply_elevation("location"),
)

_LINEAR = frozenset({0, 1})
_ANGULAR = frozenset({2, 5})
_RADIAL = frozenset({3, 4})

DIMENSION = Schema(
    "DIMENSION",
    Dimension,
    ENTITY_COMMON
    + (
        Marker("AcDbDimension"),
        Field(280, "version", since=V.R2010),
        Field(2, "block_name", skip=is_empty),
        point(10, "definition_point"),
        point(11, "text_midpoint"),
        Field(70, "dimension_type", default=0),
        Field(71, "attachment_point", since=V.R2000, valid=in_range(1, 9)),
        Field(72, "line_spacing_style", since=V.R2000, valid=one_of(1, 2)),
        Field(41, "line_spacing_factor", since=V.R2000),
        Field(42, "actual_measurement", skip=is_zero, since=V.R2000),
        Field(1, "text", skip=is_empty),
        Field(53, "text_rotation", skip=is_zero),
        Field(51, "horizontal_direction", skip=is_zero),
        Field(3, "dimstyle_name", skip=is_empty),
        # rotated (0) and aligned (1)
        Marker("AcDbAlignedDimension", kinds=_LINEAR),
        point(12, "insertion_point", kinds=_LINEAR),
        point(13, "first_point", kinds=_LINEAR),
        point(14, "second_point", kinds=_LINEAR),
        Field(50, "rotation_angle", kinds=_LINEAR),
        Field(52, "oblique_angle", kinds=frozenset({0})),
        Marker("AcDbRotatedDimension", kinds=frozenset({0})),
        # angular, two lines (2) and three points (5)
        Marker("AcDb2LineAngularDimension", kinds=frozenset({2})),
        Marker("AcDb3PointAngularDimension", kinds=frozenset({5})),
        point(13, "first_point", kinds=_ANGULAR),
        point(14, "second_point", kinds=_ANGULAR),
        point(15, "third_point", kinds=_ANGULAR),
        point(16, "arc_point", kinds=_ANGULAR),
        # diameter (3) and radius (4)
        Marker("AcDbDiametricDimension", kinds=frozenset({3})),
        Marker("AcDbRadialDimension", kinds=frozenset({4})),
        point(15, "third_point", kinds=_RADIAL),
        Field(40, "leader_length", kinds=_RADIAL),
        # ordinate (6)
        Marker("AcDbOrdinateDimension", kinds=frozenset({6})),
        point(13, "first_point", kinds=frozenset({6})),
        point(14, "second_point", kinds=frozenset({6})),
        EXTRUSION,
    ),
    selector_attr="dimension_type",
    variant_attr="kind",
    variant_kinds=frozenset(range(7)),
    after_decode=_apply_elevation("definition_point"),
)

OBJECT_PTR = Schema(
    "OBJECT_PTR",
    ObjectPtr,
    HEADER
    + (
        Field(1001, "application", skip=is_empty),
        Field(1000, "xdata", skip=is_empty, multiple=True),
    ),
    section=OBJECTS,
    since=V.R13,
)

IMAGEDEF_REACTOR = Schema(
    "IMAGEDEF_REACTOR",
    ImageDefReactor,
    (
        Field(5, "handle", skip=equals(-1)),
        AppGroup("ACAD_REACTORS", 330, "owner_soft"),
        AppGroup("ACAD_XDICTIONARY", 360, "owner_hard"),
        Marker("AcDbRasterImageDefReactor"),
        Field(90, "class_version"),
        Field(330, "object_owner_soft", skip=is_empty),
    ),
    section=OBJECTS,
    since=V.R14,
)

MLEADERSTYLE = Schema(
    "MLEADERSTYLE",
    MLeaderStyle,
    HEADER
    + (
        Marker("AcDbMLeaderStyle"),
        Field(170, "content_type", valid=in_range(0, 3)),
        Field(171, "draw_mleader_order_type"),
        Field(172, "draw_leader_order_type"),
        Field(90, "max_leader_segment_points"),
        Field(40, "first_segment_angle_constraint"),
        Field(41, "second_segment_angle_constraint"),
        Field(173, "leader_line_type", valid=in_range(0, 2)),
        Field(91, "leader_line_color"),
        Field(340, "leader_linetype_id", skip=is_empty),
        Field(92, "leader_line_weight"),
        Field(290, "enable_landing"),
        Field(42, "landing_gap"),
        Field(291, "enable_dogleg"),
        Field(43, "dogleg_length"),
        Field(3, "description", skip=is_empty),
        Field(341, "arrow_head_id", skip=is_empty),
        Field(44, "arrowhead_size"),
        Field(300, "default_mtext_contents", skip=is_empty),
        Field(342, "mtext_style_id", skip=is_empty),
        Field(174, "text_left_attachment_type"),
        Field(175, "text_angle_type"),
        Field(176, "text_alignment_type"),
        Field(178, "text_right_attachment_type"),
        Field(93, "text_color"),
        Field(45, "text_height"),
        Field(292, "enable_frame_text"),
        Field(297, "text_align_always_left"),
        Field(46, "align_space"),
        Field(343, "block_content_id", skip=is_empty),
        Field(94, "block_content_color"),
        Field(47, "block_content_scale", components=(47, 49, 140)),
        Field(293, "enable_block_content_scale"),
        Field(141, "block_content_rotation"),
        Field(294, "enable_block_content_rotation"),
        Field(177, "block_content_connection_type"),
        Field(142, "scale"),
        Field(295, "overwrite_property_value"),
        Field(296, "is_annotative"),
        Field(143, "break_gap_size"),
        Field(271, "text_attachment_direction", since=V.R2010),
        Field(272, "bottom_text_attachment_direction", since=V.R2010),
        Field(273, "top_text_attachment_direction", since=V.R2010),
    ),
    section=OBJECTS,
    since=V.R2007,
)

SCHEMAS: dict[str, Schema] = {}


def register(schema: Schema) -> Schema:
    SCHEMAS[schema.dxftype] = schema
    return schema


for _schema in (FACE3D, LINE, CIRCLE, ARC, POINT, DIMENSION, OBJECT_PTR, IMAGEDEF_REACTOR, MLEADERSTYLE):
    register(_schema)


def schema_for(record: Record | str) -> Schema:
    dxftype = record if isinstance(record, str) else record.dxftype
    try:
        return SCHEMAS[dxftype]
    except KeyError:
        raise KeyError(f"no field table registered for {dxftype!r}") from None
