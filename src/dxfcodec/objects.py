from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .record import Record


@dataclass
class ObjectPtr(Record):
    dxftype: ClassVar[str] = "OBJECT_PTR"

    application: str = ""
    xdata: list[str] = field(default_factory=list)


@dataclass
class ImageDefReactor(Record):
    """IMAGEDEF_REACTOR object.

    The second 330 group of this object is the associated IMAGE entity,
    stored in ``object_owner_soft``.
    """

    dxftype: ClassVar[str] = "IMAGEDEF_REACTOR"

    class_version: int = 2

    @property
    def associated_image(self) -> str:
        return self.object_owner_soft


@dataclass
class MLeaderStyle(Record):
    dxftype: ClassVar[str] = "MLEADERSTYLE"

    description: str = ""
    content_type: int = 2
    draw_mleader_order_type: int = 1
    draw_leader_order_type: int = 0
    max_leader_segment_points: int = 2
    first_segment_angle_constraint: float = 0.0
    second_segment_angle_constraint: float = 0.0
    leader_line_type: int = 1
    leader_line_color: int = 0
    leader_linetype_id: str = ""
    leader_line_weight: int = -2
    enable_landing: bool = True
    landing_gap: float = 2.0
    enable_dogleg: bool = True
    dogleg_length: float = 8.0
    arrow_head_id: str = ""
    arrowhead_size: float = 4.0
    default_mtext_contents: str = ""
    mtext_style_id: str = ""
    text_left_attachment_type: int = 1
    text_angle_type: int = 1
    text_alignment_type: int = 0
    text_right_attachment_type: int = 1
    text_color: int = 0
    text_height: float = 4.0
    enable_frame_text: bool = False
    text_align_always_left: bool = False
    align_space: float = 4.0
    block_content_id: str = ""
    block_content_color: int = 0
    block_content_scale: tuple[float, float, float] = (1.0, 1.0, 1.0)
    enable_block_content_scale: bool = True
    block_content_rotation: float = 0.0
    enable_block_content_rotation: bool = True
    block_content_connection_type: int = 0
    scale: float = 1.0
    overwrite_property_value: bool = False
    is_annotative: bool = False
    break_gap_size: float = 3.75
    text_attachment_direction: int = 0
    bottom_text_attachment_direction: int = 9
    top_text_attachment_direction: int = 9
