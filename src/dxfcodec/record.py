from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional

from .config import (
    COLOR_BYLAYER,
    DEFAULT_LAYER,
    DEFAULT_LINETYPE,
    DEFAULT_LINETYPE_SCALE,
    LINEWEIGHT_BYLAYER,
    MODELSPACE,
)

Vec3 = tuple[float, float, float]

ORIGIN: Vec3 = (0.0, 0.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


@dataclass
class Record:
    """One decoded entity or object.

    String references (owner_soft, owner_hard, object_owner_soft, material,
    plot_style) hold hex ids of other records in the same drawing; they are
    relations only. ``next`` links records of the same type into a chain and
    does not take part in equality.
    """

    dxftype: ClassVar[str] = ""

    handle: int = -1
    layer: str = DEFAULT_LAYER
    linetype: str = DEFAULT_LINETYPE
    owner_soft: str = ""
    owner_hard: str = ""
    object_owner_soft: str = ""
    material: str = ""
    plot_style: str = ""
    color: int = COLOR_BYLAYER
    paperspace: int = MODELSPACE
    elevation: float = 0.0
    thickness: float = 0.0
    linetype_scale: float = DEFAULT_LINETYPE_SCALE
    visibility: int = 0
    lineweight: int = LINEWEIGHT_BYLAYER
    color_value: int = 0
    color_name: str = ""
    transparency: int = 0
    shadow_mode: int = 0
    graphics_data_size: int = 0
    binary_chunks: list[str] = field(default_factory=list)
    extrusion: Vec3 = (0.0, 0.0, 1.0)
    next: Optional["Record"] = field(default=None, compare=False, repr=False)
    released: bool = field(default=False, compare=False, repr=False)

    def apply_defaults(self) -> list[str]:
        replaced = []
        if not self.layer:
            self.layer = DEFAULT_LAYER
            replaced.append("layer")
        if not self.linetype:
            self.linetype = DEFAULT_LINETYPE
            replaced.append("linetype")
        return replaced

    def release(self) -> None:
        self.binary_chunks.clear()
        self.owner_soft = ""
        self.owner_hard = ""
        self.object_owner_soft = ""
        self.material = ""
        self.plot_style = ""
        self.released = True

    @property
    def is_detached(self) -> bool:
        return self.next is None
