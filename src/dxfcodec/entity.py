from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .record import ORIGIN, Record, Vec3

DIMENSION_KINDS = {
    0: "rotated",
    1: "aligned",
    2: "angular",
    3: "diameter",
    4: "radius",
    5: "angular_3point",
    6: "ordinate",
}


@dataclass
class Face3D(Record):
    dxftype: ClassVar[str] = "3DFACE"

    first: Vec3 = ORIGIN
    second: Vec3 = ORIGIN
    third: Vec3 = ORIGIN
    fourth: Vec3 = ORIGIN
    invisible_edges: int = 0

    def to_points(self) -> list[Vec3]:
        points = [self.first, self.second, self.third]
        if self.fourth != self.third:
            points.append(self.fourth)
        return points

    def is_edge_invisible(self, edge: int) -> bool:
        return bool(self.invisible_edges & (1 << edge))


@dataclass
class Line(Record):
    dxftype: ClassVar[str] = "LINE"

    start: Vec3 = ORIGIN
    end: Vec3 = ORIGIN

    def to_points(self) -> list[Vec3]:
        return [self.start, self.end]


@dataclass
class Circle(Record):
    dxftype: ClassVar[str] = "CIRCLE"

    center: Vec3 = ORIGIN
    radius: float = 0.0

    def to_points(self) -> list[Vec3]:
        return [self.center]


@dataclass
class Arc(Circle):
    dxftype: ClassVar[str] = "ARC"

    start_angle: float = 0.0
    end_angle: float = 360.0


@dataclass
class Point(Record):
    dxftype: ClassVar[str] = "POINT"

    location: Vec3 = ORIGIN
    x_axis_angle: float = 0.0

    def to_points(self) -> list[Vec3]:
        return [self.location]


@dataclass
class Dimension(Record):
    """DIMENSION entity.

    ``dimension_type`` (group code 70) carries the kind selector in its low
    four bits; the high bits are flags (32 = block referenced by this
    dimension only, 64 = ordinate type X, 128 = user text position). The
    selector can be assigned once, either at construction or by the decoder,
    and decides which of the optional definition points are written back.
    """

    dxftype: ClassVar[str] = "DIMENSION"

    version: int = 0
    block_name: str = ""
    dimstyle_name: str = "STANDARD"
    text: str = ""
    definition_point: Vec3 = ORIGIN
    text_midpoint: Vec3 = ORIGIN
    insertion_point: Vec3 = ORIGIN
    first_point: Vec3 = ORIGIN
    second_point: Vec3 = ORIGIN
    third_point: Vec3 = ORIGIN
    arc_point: Vec3 = ORIGIN
    leader_length: float = 0.0
    line_spacing_factor: float = 1.0
    actual_measurement: float = 0.0
    rotation_angle: float = 0.0
    horizontal_direction: float = 0.0
    oblique_angle: float = 0.0
    text_rotation: float = 0.0
    dimension_type: int | None = None
    attachment_point: int = 5
    line_spacing_style: int = 1

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "dimension_type" and self.__dict__.get("dimension_type") is not None:
            raise AttributeError("dimension_type is already set and cannot change")
        super().__setattr__(name, value)

    @property
    def kind(self) -> int:
        return (self.dimension_type or 0) & 0x0F

    @property
    def kind_name(self) -> str | None:
        return DIMENSION_KINDS.get(self.kind)

    def to_points(self) -> list[Vec3]:
        if self.kind in (3, 4):
            return [self.definition_point, self.third_point]
        if self.kind in (0, 1, 6):
            return [self.first_point, self.second_point]
        if self.kind in (2, 5):
            return [self.first_point, self.second_point, self.third_point, self.arc_point]
        return [self.text_midpoint]
