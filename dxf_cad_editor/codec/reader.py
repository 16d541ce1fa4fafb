"""
DXF reader: tag stream to ``Drawing``.

Sections HEADER, TABLES, BLOCKS and ENTITIES are recognized; any other
section is skipped. Entity records are decoded through a table keyed by the
entity type string and unknown types are skipped, so files written by
newer applications still load. A section, table or block that runs into the
end of the stream is a ``FormatError``.
"""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ezdxf.lldxf.types import DXFTag
from ezdxf.math import Vec2

from dxf_cad_editor.codec.tags import TagCursor
from dxf_cad_editor.errors import FormatError
from dxf_cad_editor.model.drawing import Block, Drawing, Layer, LineType
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

Tags = List[DXFTag]


# Value helpers

def _float(tag: DXFTag) -> float:
    try:
        return float(tag.value)
    except ValueError:
        raise FormatError(f"group code {tag.code}: invalid number {tag.value!r}") from None


def _int(tag: DXFTag) -> int:
    try:
        return int(tag.value)
    except ValueError:
        try:
            return int(float(tag.value))
        except ValueError:
            raise FormatError(f"group code {tag.code}: invalid integer {tag.value!r}") from None


def _point(tags: Tags, x_code: int) -> Optional[Vec2]:
    """First (x_code, x_code + 10) pair in a record, or None."""
    x = y = None
    for tag in tags:
        if tag.code == x_code and x is None:
            x = _float(tag)
        elif tag.code == x_code + 10 and y is None:
            y = _float(tag)
    if x is None and y is None:
        return None
    return Vec2(x or 0.0, y or 0.0)


def _points(tags: Tags, x_code: int) -> List[Vec2]:
    """Every (x_code, x_code + 10) pair in order; a y pairs with the latest x."""
    points: List[Vec2] = []
    x: Optional[float] = None
    for tag in tags:
        if tag.code == x_code:
            x = _float(tag)
        elif tag.code == x_code + 10 and x is not None:
            points.append(Vec2(x, _float(tag)))
            x = None
    return points


_CARET = re.compile(r"\^(.)")


def _caret_decode(value: str) -> str:
    """Undo caret encoding: "^J" is a newline and "^ " a literal caret."""

    def replace(match) -> str:
        c = match.group(1)
        if c == " ":
            return "^"
        if "@" <= c <= "_":
            return chr(ord(c) - 64)
        return match.group(0)

    return _CARET.sub(replace, value)


def _first(tags: Tags, code: int) -> Optional[DXFTag]:
    for tag in tags:
        if tag.code == code:
            return tag
    return None


def _float_or(tags: Tags, code: int, default: float) -> float:
    tag = _first(tags, code)
    return default if tag is None else _float(tag)


def _int_or(tags: Tags, code: int, default: int) -> int:
    tag = _first(tags, code)
    return default if tag is None else _int(tag)


def _str_or(tags: Tags, code: int, default: str) -> str:
    tag = _first(tags, code)
    return default if tag is None else tag.value


def _common(entity: Entity, tags: Tags) -> Entity:
    """Apply handle (5), layer (8), color (62) and linetype (6)."""
    for tag in tags:
        if tag.code == 5:
            entity.handle = tag.value.strip()
        elif tag.code == 8:
            entity.layer = tag.value
        elif tag.code == 62:
            entity.color = _int(tag)
        elif tag.code == 6:
            entity.linetype = tag.value
    return entity


# Entity decoders

def _decode_line(tags: Tags) -> Entity:
    return Line(start=_point(tags, 10) or Vec2(), end=_point(tags, 11) or Vec2())


def _decode_circle(tags: Tags) -> Entity:
    return Circle(center=_point(tags, 10) or Vec2(), radius=_float_or(tags, 40, 0.0))


def _decode_arc(tags: Tags) -> Entity:
    return Arc(
        center=_point(tags, 10) or Vec2(),
        radius=_float_or(tags, 40, 0.0),
        start_angle=_float_or(tags, 50, 0.0),
        end_angle=_float_or(tags, 51, 360.0),
    )


def _decode_lwpolyline(tags: Tags) -> Entity:
    return Polyline(
        vertices=_points(tags, 10),
        closed=bool(_int_or(tags, 70, 0) & 1),
    )


def _decode_text(tags: Tags) -> Entity:
    alignment = _int_or(tags, 72, 0)
    position = _point(tags, 10) or Vec2()
    if alignment:
        # Justified text is placed at its alignment point
        position = _point(tags, 11) or position
    return Text(
        position=position,
        text=_caret_decode(_str_or(tags, 1, "")),
        height=_float_or(tags, 40, 1.0),
        rotation=_float_or(tags, 50, 0.0),
        alignment=alignment,
    )


def _decode_attrib(tags: Tags) -> Entity:
    text = _decode_text(tags)
    return Attrib(
        position=text.position,
        text=text.text,
        height=text.height,
        rotation=text.rotation,
        alignment=text.alignment,
        tag=_str_or(tags, 2, ""),
    )


_MTEXT_FORMAT = re.compile(r"\\[ACcFfHhQTWp][^;\\{}]*;")
_MTEXT_TOGGLE = re.compile(r"\\[LlOoKk]")


def _plain_mtext(raw: str) -> str:
    """Drop inline formatting codes from MTEXT content."""
    text = raw.replace("\\P", "\n")
    text = _MTEXT_FORMAT.sub("", text)
    text = _MTEXT_TOGGLE.sub("", text)
    text = text.replace("\\~", " ")
    text = re.sub(r"(?<!\\)[{}]", "", text)
    return re.sub(r"\\([\\{}])", r"\1", text)


def _decode_mtext(tags: Tags) -> Entity:
    chunks = [t.value for t in tags if t.code == 3]
    chunks.extend(t.value for t in tags if t.code == 1)
    rotation = _float_or(tags, 50, 0.0)
    direction = _point(tags, 11)
    if _first(tags, 50) is None and direction is not None and direction.magnitude > 0:
        rotation = direction.angle_deg
    return Text(
        position=_point(tags, 10) or Vec2(),
        text=_plain_mtext("".join(chunks)),
        height=_float_or(tags, 40, 1.0),
        rotation=rotation,
    )


def _decode_point(tags: Tags) -> Entity:
    return Point(position=_point(tags, 10) or Vec2())


def _decode_insert(tags: Tags) -> Entity:
    return Insert(
        block_name=_str_or(tags, 2, ""),
        position=_point(tags, 10) or Vec2(),
        scale=Vec2(_float_or(tags, 41, 1.0), _float_or(tags, 42, 1.0)),
        rotation=_float_or(tags, 50, 0.0),
    )


def _decode_ellipse(tags: Tags) -> Entity:
    return Ellipse(
        center=_point(tags, 10) or Vec2(),
        major_axis=_point(tags, 11) or Vec2(1, 0),
        ratio=_float_or(tags, 40, 1.0),
        start_param=_float_or(tags, 41, 0.0),
        end_param=_float_or(tags, 42, math.tau),
    )


def _decode_spline(tags: Tags) -> Entity:
    return Spline(
        degree=_int_or(tags, 71, 3),
        control_points=_points(tags, 10),
        fit_points=_points(tags, 11),
        knots=[_float(t) for t in tags if t.code == 40],
        closed=bool(_int_or(tags, 70, 0) & 1),
    )


def _decode_hatch(tags: Tags) -> Entity:
    """
    Boundary paths of a hatch.

    Polyline paths (flag bit 2) contribute their vertices. Edge paths
    contribute the start point of each line edge; other edge types are
    skipped. The seed points after code 98 are not boundary geometry.
    """
    paths: List[List[Vec2]] = []
    in_boundary = False
    current: Optional[List[Vec2]] = None
    polyline_path = False
    edge_type = 0
    x: Optional[float] = None

    for tag in tags:
        code = tag.code
        if code == 91:
            in_boundary = True
        elif not in_boundary:
            continue
        elif code == 92:
            current = []
            paths.append(current)
            polyline_path = bool(_int(tag) & 2)
            edge_type = 0
            x = None
        elif code == 97:
            current = None
        elif code in (75, 76, 98):
            in_boundary = False
            current = None
        elif current is None:
            continue
        elif code == 72 and not polyline_path:
            edge_type = _int(tag)
        elif code == 10:
            x = _float(tag)
        elif code == 20 and x is not None:
            if polyline_path or edge_type == 1:
                current.append(Vec2(x, _float(tag)))
            x = None

    return Hatch(
        boundary_paths=[p for p in paths if p],
        solid=bool(_int_or(tags, 70, 1)),
        pattern_name=_str_or(tags, 2, "SOLID"),
    )


def _decode_solid(tags: Tags) -> Entity:
    corners = [_point(tags, code) for code in (10, 11, 12, 13)]
    points = [p for p in corners if p is not None]
    if len(points) == 3:
        points.append(points[-1])
    return Solid(points=points)


def _decode_dimension(tags: Tags) -> Entity:
    return Dimension(
        definition_point=_point(tags, 10) or Vec2(),
        middle_point=_point(tags, 11) or Vec2(),
        text=_caret_decode(_str_or(tags, 1, "")),
        rotation=_float_or(tags, 50, 0.0),
        dimtype=_int_or(tags, 70, 0),
        first_point=_point(tags, 13),
        second_point=_point(tags, 14),
    )


def _decode_leader(tags: Tags) -> Entity:
    return Leader(
        vertices=_points(tags, 10),
        has_arrowhead=bool(_int_or(tags, 71, 1)),
    )


_ENTITY_DECODERS: Dict[str, Callable[[Tags], Entity]] = {
    "LINE": _decode_line,
    "CIRCLE": _decode_circle,
    "ARC": _decode_arc,
    "LWPOLYLINE": _decode_lwpolyline,
    "TEXT": _decode_text,
    "ATTRIB": _decode_attrib,
    "MTEXT": _decode_mtext,
    "POINT": _decode_point,
    "INSERT": _decode_insert,
    "ELLIPSE": _decode_ellipse,
    "SPLINE": _decode_spline,
    "HATCH": _decode_hatch,
    "SOLID": _decode_solid,
    "TRACE": _decode_solid,
    "DIMENSION": _decode_dimension,
    "LEADER": _decode_leader,
}


def _read_polyline(cursor: TagCursor, header: Tags) -> Entity:
    """Old-style POLYLINE: header record, VERTEX records, SEQEND."""
    vertices: List[Vec2] = []
    while True:
        tag = cursor.peek()
        if tag is None or tag.code != 0 or tag.value not in ("VERTEX", "SEQEND"):
            # Missing SEQEND, the section reader owns the next record
            break
        cursor.next()
        record = list(cursor.attributes())
        if tag.value == "SEQEND":
            break
        vertices.append(_point(record, 10) or Vec2())
    return Polyline(vertices=vertices, closed=bool(_int_or(header, 70, 0) & 1))


def _read_entity(cursor: TagCursor, dxftype: str) -> Optional[Entity]:
    """Decode the record whose code-0 tag was just consumed; None when skipped."""
    tags = list(cursor.attributes())
    if dxftype == "POLYLINE":
        entity = _read_polyline(cursor, tags)
    else:
        decoder = _ENTITY_DECODERS.get(dxftype)
        if decoder is None:
            logger.debug("Skipping unsupported entity %s", dxftype)
            return None
        entity = decoder(tags)
    return _common(entity, tags)


# Sections

def _read_entities(cursor: TagCursor, end_marker: str, context: str) -> List[Entity]:
    entities: List[Entity] = []
    while True:
        if cursor.at_end:
            raise FormatError(f"{context} is missing {end_marker}")
        name = cursor.expect_record()
        if name == end_marker:
            return entities
        entity = _read_entity(cursor, name)
        if entity is not None:
            entities.append(entity)


def _read_layer(tags: Tags) -> Layer:
    layer = Layer(_str_or(tags, 2, "0"))
    color = _int_or(tags, 62, 7)
    layer.off = color < 0
    layer.color = abs(color)
    flags = _int_or(tags, 70, 0)
    layer.frozen = bool(flags & 1)
    layer.locked = bool(flags & 4)
    layer.linetype = _str_or(tags, 6, layer.linetype)
    return layer


def _read_line_type(tags: Tags) -> LineType:
    return LineType(
        name=_str_or(tags, 2, ""),
        description=_str_or(tags, 3, ""),
        pattern=[_float(t) for t in tags if t.code == 49],
    )


def _read_tables(cursor: TagCursor, drawing: Drawing) -> None:
    while True:
        if cursor.at_end:
            raise FormatError("TABLES section is missing ENDSEC")
        name = cursor.expect_record()
        if name == "ENDSEC":
            return
        if name != "TABLE":
            cursor.skip_record()
            continue

        table = _str_or(list(cursor.attributes()), 2, "").strip()
        while True:
            if cursor.at_end:
                raise FormatError(f"{table or 'unnamed'} table is missing ENDTAB")
            entry = cursor.expect_record()
            if entry == "ENDTAB":
                break
            tags = list(cursor.attributes())
            if table == "LAYER" and entry == "LAYER":
                layer = _read_layer(tags)
                drawing.layers[layer.name] = layer
            elif table == "LTYPE" and entry == "LTYPE":
                ltype = _read_line_type(tags)
                if ltype.name:
                    drawing.line_types[ltype.name] = ltype


def _read_blocks(cursor: TagCursor, drawing: Drawing) -> None:
    while True:
        if cursor.at_end:
            raise FormatError("BLOCKS section is missing ENDSEC")
        name = cursor.expect_record()
        if name == "ENDSEC":
            return
        if name != "BLOCK":
            cursor.skip_record()
            continue

        tags = list(cursor.attributes())
        block_name = _str_or(tags, 2, "")
        entities = _read_entities(cursor, "ENDBLK", f"block {block_name!r}")
        cursor.skip_record()  # ENDBLK attributes
        if block_name:
            drawing.blocks[block_name] = Block(
                block_name, _point(tags, 10) or Vec2(), entities
            )


def _skip_section(cursor: TagCursor, section: str) -> None:
    while True:
        if cursor.at_end:
            raise FormatError(f"{section or 'unnamed'} section is missing ENDSEC")
        if cursor.expect_record() == "ENDSEC":
            return
        cursor.skip_record()


# Public API

def decode(text: str) -> Drawing:
    """
    Decode DXF text into a Drawing.

    Args:
        text: Complete ASCII DXF content

    Returns:
        Drawing with the entities, layers, line types and blocks of the
        stream. Empty or whitespace-only text gives ``Drawing()``.

    Raises:
        FormatError: the stream is structurally inconsistent (a section,
            table or block without its end marker, a non-integer group
            code, a malformed number)

    Example:
        d = decode("0\\nSECTION\\n2\\nENTITIES\\n0\\nLINE\\n8\\n0\\n"
                   "10\\n0\\n20\\n0\\n11\\n10\\n21\\n0\\n0\\nENDSEC\\n0\\nEOF\\n")
        # d.entities == [Line(layer="0", start=(0, 0), end=(10, 0))]
    """
    drawing = Drawing()
    if not text.strip():
        return drawing

    cursor = TagCursor.from_text(text)
    while not cursor.at_end:
        tag = cursor.next()
        if tag.code != 0:
            continue
        if tag.value == "EOF":
            break
        if tag.value != "SECTION":
            continue

        section = _str_or(list(cursor.attributes()), 2, "").strip()
        if section == "ENTITIES":
            drawing.entities.extend(_read_entities(cursor, "ENDSEC", "ENTITIES section"))
        elif section == "TABLES":
            _read_tables(cursor, drawing)
        elif section == "BLOCKS":
            _read_blocks(cursor, drawing)
        else:
            if section != "HEADER":
                logger.debug("Skipping section %s", section)
            _skip_section(cursor, section)

    logger.debug(
        "Decoded %d entities, %d layers, %d blocks",
        len(drawing.entities),
        len(drawing.layers),
        len(drawing.blocks),
    )
    return drawing


def read_file(path: str | Path) -> Drawing:
    """
    Read and decode a DXF file.

    Bytes that are not valid UTF-8 are replaced rather than rejected, since
    older files are often written in a legacy code page.
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return decode(text)
