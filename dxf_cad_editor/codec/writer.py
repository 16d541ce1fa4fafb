"""
DXF writer: ``Drawing`` to tag stream.

Output order is fixed: HEADER, TABLES (LTYPE, LAYER), BLOCKS, ENTITIES, EOF.
Floats are written with ``repr`` so decoding the output restores every
numeric field exactly.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from ezdxf.lldxf.tagwriter import TagWriter
from ezdxf.math import Vec2

from dxf_cad_editor.model.drawing import Bounds, Drawing, Layer, LineType
from dxf_cad_editor.model.entities import (
    Arc,
    Attrib,
    Circle,
    Dimension,
    Ellipse,
    Entity,
    Hatch,
    Insert,
    Leader,
    Line,
    Point,
    Polyline,
    Solid,
    Spline,
    Text,
)

logger = logging.getLogger(__name__)

ACAD_VERSION = "AC1015"
INSUNITS_UNITLESS = 0
LTYPE_ALIGNMENT = 65  # ASCII "A"


def _num(value: float) -> str:
    return repr(float(value))


def _string(value: str) -> str:
    """Caret-encode control characters; a raw newline would split the tag."""
    out = value.replace("^", "^ ")
    return "".join(f"^{chr(ord(c) + 64)}" if ord(c) < 32 else c for c in out)


def _point(w: TagWriter, code: int, p: Vec2, z: bool = True) -> None:
    w.write_tag2(code, _num(p.x))
    w.write_tag2(code + 10, _num(p.y))
    if z:
        w.write_tag2(code + 20, "0.0")


# Entity writers

def _write_line(w: TagWriter, e: Line) -> None:
    _point(w, 10, e.start)
    _point(w, 11, e.end)


def _write_circle(w: TagWriter, e: Circle) -> None:
    _point(w, 10, e.center)
    w.write_tag2(40, _num(e.radius))


def _write_arc(w: TagWriter, e: Arc) -> None:
    _write_circle(w, e)
    w.write_tag2(50, _num(e.start_angle))
    w.write_tag2(51, _num(e.end_angle))


def _write_polyline(w: TagWriter, e: Polyline) -> None:
    w.write_tag2(90, str(len(e.vertices)))
    w.write_tag2(70, "1" if e.closed else "0")
    for v in e.vertices:
        _point(w, 10, v, z=False)


def _write_text(w: TagWriter, e: Text) -> None:
    _point(w, 10, e.position)
    w.write_tag2(40, _num(e.height))
    w.write_tag2(1, _string(e.text))
    w.write_tag2(50, _num(e.rotation))
    if e.alignment:
        w.write_tag2(72, str(e.alignment))
        _point(w, 11, e.position)


def _write_attrib(w: TagWriter, e: Attrib) -> None:
    _write_text(w, e)
    w.write_tag2(2, e.tag)


def _write_point(w: TagWriter, e: Point) -> None:
    _point(w, 10, e.position)


def _write_insert(w: TagWriter, e: Insert) -> None:
    w.write_tag2(2, e.block_name)
    _point(w, 10, e.position)
    w.write_tag2(41, _num(e.scale.x))
    w.write_tag2(42, _num(e.scale.y))
    w.write_tag2(50, _num(e.rotation))


def _write_ellipse(w: TagWriter, e: Ellipse) -> None:
    _point(w, 10, e.center)
    _point(w, 11, e.major_axis)
    w.write_tag2(40, _num(e.ratio))
    w.write_tag2(41, _num(e.start_param))
    w.write_tag2(42, _num(e.end_param))


def _write_spline(w: TagWriter, e: Spline) -> None:
    w.write_tag2(70, "1" if e.closed else "0")
    w.write_tag2(71, str(e.degree))
    w.write_tag2(72, str(len(e.knots)))
    w.write_tag2(73, str(len(e.control_points)))
    w.write_tag2(74, str(len(e.fit_points)))
    for k in e.knots:
        w.write_tag2(40, _num(k))
    for p in e.control_points:
        _point(w, 10, p)
    for p in e.fit_points:
        _point(w, 11, p)


def _write_hatch(w: TagWriter, e: Hatch) -> None:
    w.write_tag2(2, e.pattern_name)
    w.write_tag2(70, "1" if e.solid else "0")
    w.write_tag2(71, "0")
    w.write_tag2(91, str(len(e.boundary_paths)))
    for path in e.boundary_paths:
        w.write_tag2(92, "2")  # polyline path
        w.write_tag2(72, "0")  # no bulges
        w.write_tag2(73, "1")  # closed
        w.write_tag2(93, str(len(path)))
        for p in path:
            _point(w, 10, p, z=False)
        w.write_tag2(97, "0")
    w.write_tag2(75, "0")
    w.write_tag2(76, "1")


def _write_solid(w: TagWriter, e: Solid) -> None:
    for code, p in zip((10, 11, 12, 13), e.points):
        _point(w, code, p)


def _write_dimension(w: TagWriter, e: Dimension) -> None:
    _point(w, 10, e.definition_point)
    _point(w, 11, e.middle_point)
    w.write_tag2(70, str(e.dimtype))
    w.write_tag2(1, _string(e.text))
    if e.first_point is not None:
        _point(w, 13, e.first_point)
    if e.second_point is not None:
        _point(w, 14, e.second_point)
    w.write_tag2(50, _num(e.rotation))


def _write_leader(w: TagWriter, e: Leader) -> None:
    w.write_tag2(71, "1" if e.has_arrowhead else "0")
    w.write_tag2(76, str(len(e.vertices)))
    for v in e.vertices:
        _point(w, 10, v)


_ENTITY_WRITERS: Dict[str, Callable[[TagWriter, Entity], None]] = {
    "LINE": _write_line,
    "CIRCLE": _write_circle,
    "ARC": _write_arc,
    "LWPOLYLINE": _write_polyline,
    "TEXT": _write_text,
    "ATTRIB": _write_attrib,
    "POINT": _write_point,
    "INSERT": _write_insert,
    "ELLIPSE": _write_ellipse,
    "SPLINE": _write_spline,
    "HATCH": _write_hatch,
    "SOLID": _write_solid,
    "DIMENSION": _write_dimension,
    "LEADER": _write_leader,
}


def _write_entity(w: TagWriter, entity: Entity) -> None:
    writer = _ENTITY_WRITERS.get(entity.dxftype)
    if writer is None:
        logger.debug("No writer for %s, entity dropped", entity.dxftype)
        return
    w.write_tag2(0, entity.dxftype)
    if entity.handle:
        w.write_tag2(5, entity.handle)
    w.write_tag2(8, entity.layer or "0")
    if entity.color is not None:
        w.write_tag2(62, str(entity.color))
    if entity.linetype:
        w.write_tag2(6, entity.linetype)
    writer(w, entity)


# Sections

def _begin_section(w: TagWriter, name: str) -> None:
    w.write_tag2(0, "SECTION")
    w.write_tag2(2, name)


def _end_section(w: TagWriter) -> None:
    w.write_tag2(0, "ENDSEC")


def _write_header(w: TagWriter, bounds: Bounds) -> None:
    _begin_section(w, "HEADER")
    w.write_tag2(9, "$ACADVER")
    w.write_tag2(1, ACAD_VERSION)
    w.write_tag2(9, "$INSUNITS")
    w.write_tag2(70, str(INSUNITS_UNITLESS))
    w.write_tag2(9, "$EXTMIN")
    _point(w, 10, Vec2(bounds.min_x, bounds.min_y))
    w.write_tag2(9, "$EXTMAX")
    _point(w, 10, Vec2(bounds.max_x, bounds.max_y))
    _end_section(w)


def _write_line_types(w: TagWriter, line_types: Iterable[LineType]) -> None:
    line_types = list(line_types)
    w.write_tag2(0, "TABLE")
    w.write_tag2(2, "LTYPE")
    w.write_tag2(70, str(len(line_types)))
    for lt in line_types:
        w.write_tag2(0, "LTYPE")
        w.write_tag2(2, lt.name)
        w.write_tag2(70, "0")
        w.write_tag2(3, lt.description)
        w.write_tag2(72, str(LTYPE_ALIGNMENT))
        w.write_tag2(73, str(len(lt.pattern)))
        w.write_tag2(40, _num(lt.total_length))
        for element in lt.pattern:
            w.write_tag2(49, _num(element))
    w.write_tag2(0, "ENDTAB")


def _layer_flags(layer: Layer) -> int:
    flags = 0
    if layer.frozen:
        flags |= 1
    if layer.locked:
        flags |= 4
    return flags


def _write_layers(w: TagWriter, layers: Iterable[Layer]) -> None:
    layers = list(layers)
    w.write_tag2(0, "TABLE")
    w.write_tag2(2, "LAYER")
    w.write_tag2(70, str(len(layers)))
    for layer in layers:
        w.write_tag2(0, "LAYER")
        w.write_tag2(2, layer.name)
        w.write_tag2(70, str(_layer_flags(layer)))
        # A layer that is off is stored with a negative color
        color = abs(layer.color)
        w.write_tag2(62, str(-color if layer.off else color))
        w.write_tag2(6, layer.linetype or "CONTINUOUS")
    w.write_tag2(0, "ENDTAB")


def _write_blocks(w: TagWriter, drawing: Drawing) -> None:
    _begin_section(w, "BLOCKS")
    for block in drawing.blocks.values():
        w.write_tag2(0, "BLOCK")
        w.write_tag2(8, "0")
        w.write_tag2(2, block.name)
        w.write_tag2(70, "0")
        _point(w, 10, block.base_point)
        w.write_tag2(3, block.name)
        for entity in block.entities:
            _write_entity(w, entity)
        w.write_tag2(0, "ENDBLK")
        w.write_tag2(8, "0")
    _end_section(w)


# Public API

def encode(drawing: Drawing) -> str:
    """
    Serialize a Drawing to DXF text.

    Output is deterministic and keeps entity, layer, line type and block
    order. Polylines are always written as LWPOLYLINE.

    Args:
        drawing: Drawing to serialize

    Returns:
        Complete DXF text ending with the EOF record
    """
    stream = io.StringIO()
    w = TagWriter(stream)

    _write_header(w, drawing.bounds)

    _begin_section(w, "TABLES")
    _write_line_types(w, drawing.line_types.values())
    _write_layers(w, drawing.layers.values())
    _end_section(w)

    _write_blocks(w, drawing)

    _begin_section(w, "ENTITIES")
    for entity in drawing.entities:
        _write_entity(w, entity)
    _end_section(w)

    w.write_tag2(0, "EOF")
    return stream.getvalue()


def write_file(drawing: Drawing, path: str | Path, encoding: Optional[str] = "utf-8") -> Path:
    """Encode a Drawing and write it to ``path``; returns the path written."""
    out = Path(path)
    out.write_text(encode(drawing), encoding=encoding)
    logger.info("Wrote %d entities to %s", len(drawing.entities), out)
    return out
