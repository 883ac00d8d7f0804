from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from .config import COLOR_BYLAYER, DEFAULT_LAYER, DEFAULT_LINETYPE, LINEWEIGHT_BYLAYER
from .document import Drawing, read
from .record import Record, Z_AXIS
from .registry import schema_for
from .schema import ENTITIES


@dataclass(frozen=True)
class ConvertResult:
    source_path: str
    output_path: str
    total_entities: int
    written_entities: int
    skipped_entities: int
    skipped_by_type: dict[str, int]


def to_dxf(
    source: str | Path | Drawing,
    output_path: str | Path,
    *,
    types: str | Iterable[str] | None = None,
    dxf_version: str = "R2010",
    strict: bool = False,
) -> ConvertResult:
    """Rebuild the drawing's geometry as a new DXF document with ezdxf.

    Only entities are exported; objects belong to the source document's
    dictionaries and are not carried over.
    """
    ezdxf = _require_ezdxf()
    source_path, drawing = _resolve_drawing(source)

    dxf_doc = ezdxf.new(dxfversion=dxf_version)
    modelspace = dxf_doc.modelspace()

    total = 0
    written = 0
    skipped_by_type: dict[str, int] = {}

    for record in drawing.query(types):
        if schema_for(record).section != ENTITIES:
            continue
        total += 1
        if _write_entity_to_modelspace(modelspace, record):
            written += 1
            continue
        skipped_by_type[record.dxftype] = skipped_by_type.get(record.dxftype, 0) + 1

    skipped = total - written
    if strict and skipped > 0:
        summary = ", ".join(
            f"{dxftype}:{count}" for dxftype, count in sorted(skipped_by_type.items())
        )
        raise ValueError(f"failed to convert {skipped} entities ({summary})")

    out_path = Path(output_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    dxf_doc.saveas(str(out_path))

    return ConvertResult(
        source_path=source_path,
        output_path=str(out_path),
        total_entities=total,
        written_entities=written,
        skipped_entities=skipped,
        skipped_by_type=dict(sorted(skipped_by_type.items())),
    )


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required for DXF export. "
            'Install it with `pip install "dxfcodec[dxf]"`.'
        ) from exc
    return ezdxf


def _resolve_drawing(source: str | Path | Drawing) -> tuple[str, Drawing]:
    if isinstance(source, Drawing):
        return source.path or "", source
    drawing = read(source)
    return str(source), drawing


def _write_entity_to_modelspace(modelspace: Any, record: Record) -> bool:
    writer = _WRITERS.get(record.dxftype)
    if writer is None:
        return False
    try:
        writer(modelspace, record, _entity_dxfattribs(record))
    except Exception:
        return False
    return True


def _write_line(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> None:
    modelspace.add_line(_point3(record.start), _point3(record.end), dxfattribs=dxfattribs)


def _write_circle(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> None:
    modelspace.add_circle(_point3(record.center), float(record.radius), dxfattribs=dxfattribs)


def _write_arc(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> None:
    modelspace.add_arc(
        _point3(record.center),
        float(record.radius),
        float(record.start_angle),
        float(record.end_angle),
        dxfattribs=dxfattribs,
    )


def _write_point(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> None:
    if record.x_axis_angle:
        dxfattribs = {**dxfattribs, "angle": float(record.x_axis_angle)}
    modelspace.add_point(_point3(record.location), dxfattribs=dxfattribs)


def _write_face(modelspace: Any, record: Any, dxfattribs: dict[str, Any]) -> None:
    if record.invisible_edges:
        dxfattribs = {**dxfattribs, "invisible_edges": int(record.invisible_edges)}
    points = [_point3(p) for p in (record.first, record.second, record.third, record.fourth)]
    modelspace.add_3dface(points, dxfattribs=dxfattribs)


_WRITERS = {
    "LINE": _write_line,
    "CIRCLE": _write_circle,
    "ARC": _write_arc,
    "POINT": _write_point,
    "3DFACE": _write_face,
}


def _entity_dxfattribs(record: Record) -> dict[str, Any]:
    attribs: dict[str, Any] = {}
    if record.layer and record.layer != DEFAULT_LAYER:
        attribs["layer"] = record.layer
    if record.linetype and record.linetype != DEFAULT_LINETYPE:
        attribs["linetype"] = record.linetype
    color = _to_valid_aci(record.color)
    if color is not None:
        attribs["color"] = color
    if record.color_value:
        attribs["true_color"] = int(record.color_value) & 0xFFFFFF
    if record.lineweight != LINEWEIGHT_BYLAYER:
        attribs["lineweight"] = int(record.lineweight)
    if record.thickness and record.dxftype != "3DFACE":
        attribs["thickness"] = float(record.thickness)
    if record.extrusion != Z_AXIS and record.dxftype != "3DFACE":
        attribs["extrusion"] = _point3(record.extrusion)
    return attribs


def _to_valid_aci(value: Any) -> int | None:
    try:
        aci = int(value)
    except Exception:
        return None
    if aci in (0, COLOR_BYLAYER, 257):
        return None
    if 1 <= aci <= 255:
        return aci
    return None


def _point3(value: Any) -> tuple[float, float, float]:
    if value is None:
        return (0.0, 0.0, 0.0)
    if isinstance(value, (list, tuple)):
        if len(value) >= 3:
            return (float(value[0]), float(value[1]), float(value[2]))
        if len(value) >= 2:
            return (float(value[0]), float(value[1]), 0.0)
    raise ValueError(f"invalid point value: {value!r}")
