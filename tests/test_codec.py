from __future__ import annotations

import copy

import pytest
from ezdxf.math import Vec2

from dxf_cad_editor.codec.reader import decode, read_file
from dxf_cad_editor.codec.tags import TagCursor, load_tags
from dxf_cad_editor.codec.writer import encode, write_file
from dxf_cad_editor.errors import FormatError
from dxf_cad_editor.model.drawing import Block, Drawing, Layer
from dxf_cad_editor.model.entities import (
    Arc,
    Attrib,
    Circle,
    Dimension,
    Ellipse,
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


def _dxf(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def _entities(*records: str) -> str:
    return _dxf("0", "SECTION", "2", "ENTITIES", *records, "0", "ENDSEC", "0", "EOF")


def test_decode_empty_text_gives_empty_drawing() -> None:
    drawing = decode("   \n")
    assert len(drawing) == 0
    assert "0" in drawing.layers


def test_decode_line_with_common_attributes() -> None:
    drawing = decode(
        _entities(
            "0", "LINE", "5", "2A", "8", "WALLS", "62", "3", "6", "DASHED",
            "10", "0", "20", "0", "11", "10.5", "21", "0",
        )
    )
    line = drawing.entities[0]
    assert isinstance(line, Line)
    assert line.handle == "2A"
    assert line.layer == "WALLS"
    assert line.color == 3
    assert line.linetype == "DASHED"
    assert line.end == Vec2(10.5, 0)


def test_decode_tolerates_crlf_and_padded_values() -> None:
    text = _entities("  0", "CIRCLE ", " 10", " 1.0", " 20", "2.0 ", " 40", "3").replace(
        "\n", "\r\n"
    )
    circle = decode(text).entities[0]
    assert isinstance(circle, Circle)
    assert circle.center == Vec2(1, 2)
    assert circle.radius == 3


def test_unknown_entities_are_skipped() -> None:
    drawing = decode(
        _entities(
            "0", "WIPEOUT", "8", "0", "10", "1", "20", "1",
            "0", "POINT", "10", "4", "20", "5",
        )
    )
    assert [e.dxftype for e in drawing] == ["POINT"]


def test_old_style_polyline_is_read_as_polyline() -> None:
    drawing = decode(
        _entities(
            "0", "POLYLINE", "8", "0", "70", "1",
            "0", "VERTEX", "10", "0", "20", "0",
            "0", "VERTEX", "10", "5", "20", "0",
            "0", "VERTEX", "10", "5", "20", "5",
            "0", "SEQEND",
        )
    )
    polyline = drawing.entities[0]
    assert isinstance(polyline, Polyline)
    assert polyline.closed
    assert polyline.vertices == [Vec2(0, 0), Vec2(5, 0), Vec2(5, 5)]


def test_mtext_formatting_is_stripped() -> None:
    drawing = decode(
        _entities("0", "MTEXT", "10", "1", "20", "1", "40", "2.5", "1", r"{\fArial|b0;Room}\P101")
    )
    text = drawing.entities[0]
    assert isinstance(text, Text)
    assert text.text == "Room\n101"
    assert text.height == 2.5


def test_hatch_polyline_path_vertices() -> None:
    drawing = decode(
        _entities(
            "0", "HATCH", "2", "SOLID", "70", "1", "91", "1",
            "92", "2", "72", "0", "73", "1", "93", "3",
            "10", "0", "20", "0", "10", "4", "20", "0", "10", "4", "20", "3",
            "97", "0", "75", "0", "76", "1", "98", "1", "10", "99", "20", "99",
        )
    )
    hatch = drawing.entities[0]
    assert isinstance(hatch, Hatch)
    assert hatch.boundary_paths == [[Vec2(0, 0), Vec2(4, 0), Vec2(4, 3)]]


def test_layer_table_decodes_off_frozen_and_locked() -> None:
    drawing = decode(
        _dxf(
            "0", "SECTION", "2", "TABLES",
            "0", "TABLE", "2", "LAYER",
            "0", "LAYER", "2", "HIDDEN", "70", "5", "62", "-2", "6", "CONTINUOUS",
            "0", "ENDTAB",
            "0", "ENDSEC", "0", "EOF",
        )
    )
    layer = drawing.layers["HIDDEN"]
    assert layer.off and layer.frozen and layer.locked
    assert layer.color == 2


def test_missing_endsec_is_a_format_error() -> None:
    with pytest.raises(FormatError):
        decode(_dxf("0", "SECTION", "2", "ENTITIES", "0", "LINE", "8", "0"))


def test_missing_endtab_is_a_format_error() -> None:
    with pytest.raises(FormatError):
        decode(_dxf("0", "SECTION", "2", "TABLES", "0", "TABLE", "2", "LAYER"))


def test_bad_number_is_a_format_error() -> None:
    with pytest.raises(FormatError):
        decode(_entities("0", "CIRCLE", "10", "abc", "20", "0", "40", "1"))


def test_non_integer_group_code_is_a_format_error() -> None:
    with pytest.raises(FormatError):
        load_tags("X\nSECTION\n")


def test_tag_cursor_attributes_stop_at_next_record() -> None:
    cursor = TagCursor.from_text(_dxf("0", "LINE", "8", "0", "0", "CIRCLE"))
    assert cursor.expect_record() == "LINE"
    assert [(t.code, t.value) for t in cursor.attributes()] == [(8, "0")]
    assert cursor.expect_record() == "CIRCLE"
    assert cursor.at_end
    with pytest.raises(FormatError):
        cursor.next()


def test_encode_writes_off_layer_with_negative_color() -> None:
    drawing = Drawing()
    drawing.layers["HIDDEN"] = Layer("HIDDEN", color=3, off=True)
    tags = [(t.code, t.value) for t in load_tags(encode(drawing))]
    index = tags.index((2, "HIDDEN"))
    assert (62, "-3") in tags[index:index + 4]


def test_encode_caret_encodes_control_characters() -> None:
    drawing = Drawing()
    drawing.add_entity(Text(text="line one\nline two ^ caret"))
    text = encode(drawing)
    assert "line one^Jline two ^  caret" in text
    assert decode(text).entities[0].text == "line one\nline two ^ caret"


def test_encoded_drawing_decodes_to_the_same_model() -> None:
    drawing = Drawing()
    drawing.layers["WALLS"] = Layer("WALLS", color=1, locked=True)
    drawing.blocks["DOOR"] = Block(
        "DOOR", Vec2(0, 0), [Line(start=Vec2(0, 0), end=Vec2(0.9, 0))]
    )
    drawing.add_entity(Line(layer="WALLS", start=Vec2(0.1, 0.2), end=Vec2(1 / 3, 7)))
    drawing.add_entity(Arc(center=Vec2(1, 1), radius=2, start_angle=300, end_angle=45))
    drawing.add_entity(
        Polyline(vertices=[Vec2(0, 0), Vec2(4, 0), Vec2(4, 3)], closed=True, color=5)
    )
    drawing.add_entity(Insert(block_name="DOOR", position=Vec2(2, 0), rotation=90))

    restored = decode(encode(drawing))

    assert restored.entities == drawing.entities
    assert restored.layers["WALLS"] == drawing.layers["WALLS"]
    assert restored.blocks["DOOR"].entities == drawing.blocks["DOOR"].entities


def test_write_and_read_file(tmp_path) -> None:
    drawing = Drawing()
    drawing.add_entity(Circle(center=Vec2(3, 4), radius=1.5))
    out = write_file(drawing, tmp_path / "plan.dxf")
    assert out.exists()
    restored = read_file(out)
    assert restored.entities == drawing.entities


def test_read_file_replaces_invalid_utf8(tmp_path) -> None:
    path = tmp_path / "legacy.dxf"
    body = _entities("0", "TEXT", "10", "0", "20", "0", "40", "1", "1", "Cafe")
    path.write_bytes(body.encode("ascii").replace(b"Cafe", b"Caf\xe9"))
    text = read_file(path).entities[0]
    assert text.text == "Caf\ufffd"


ROUND_TRIP_ENTITIES = [
    Line(layer="WALLS", start=Vec2(0.1, 0.2), end=Vec2(1 / 3, 7)),
    Circle(center=Vec2(3, 4), radius=1.5, color=2),
    Arc(center=Vec2(1, 1), radius=2, start_angle=300, end_angle=45),
    Polyline(vertices=[Vec2(0, 0), Vec2(4, 0), Vec2(4, 3)], closed=True),
    Text(position=Vec2(2, 3), text="  indented label ", height=2.5, rotation=30),
    Text(position=Vec2(5, 5), text="centered", alignment=1),
    Attrib(position=Vec2(1, 2), text=" Room 101", height=1.8, tag="ROOM_NO"),
    Point(position=Vec2(-3, 8.25)),
    Insert(block_name="DOOR", position=Vec2(2, 0), scale=Vec2(2, 0.5), rotation=90),
    Ellipse(center=Vec2(1, 1), major_axis=Vec2(5, 0), ratio=0.4, start_param=0.5, end_param=3.0),
    Spline(
        degree=3,
        control_points=[Vec2(0, 0), Vec2(1, 2), Vec2(3, 2), Vec2(4, 0)],
        knots=[0, 0, 0, 0, 1, 1, 1, 1],
    ),
    Spline(fit_points=[Vec2(0, 0), Vec2(2, 1), Vec2(4, 0)], closed=True),
    Hatch(
        boundary_paths=[
            [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)],
            [Vec2(2, 2), Vec2(4, 2), Vec2(4, 4)],
        ],
        solid=False,
        pattern_name="ANSI31",
    ),
    Dimension(
        definition_point=Vec2(0, 5),
        middle_point=Vec2(5, 5),
        text="10.00",
        rotation=0,
        dimtype=0,
        first_point=Vec2(0, 0),
        second_point=Vec2(10, 0),
    ),
    Dimension(definition_point=Vec2(1, 1), middle_point=Vec2(2, 2), text="<>", dimtype=1),
    Solid(points=[Vec2(0, 0), Vec2(4, 0), Vec2(2, 3), Vec2(2, 3)]),
    Solid(points=[Vec2(0, 0), Vec2(4, 0), Vec2(0, 4), Vec2(4, 4)]),
    Leader(vertices=[Vec2(0, 0), Vec2(5, 5), Vec2(9, 5)], has_arrowhead=False),
]


@pytest.mark.parametrize(
    "entity", ROUND_TRIP_ENTITIES, ids=lambda e: e.dxftype.lower()
)
def test_every_entity_type_survives_encode_and_decode(entity) -> None:
    entity = copy.deepcopy(entity)
    drawing = Drawing()
    drawing.add_entity(entity)

    (restored,) = decode(encode(drawing)).entities

    assert restored.handle == entity.handle is not None
    assert type(restored) is type(entity)
    assert restored == entity


def test_text_keeps_leading_and_trailing_spaces() -> None:
    drawing = Drawing()
    drawing.layers[" PADDED "] = Layer(" PADDED ")
    drawing.blocks[" TAG "] = Block(" TAG ", Vec2(0, 0), [Text(text=" in block ")])
    drawing.add_entity(Text(layer=" PADDED ", text="  indented label "))
    drawing.add_entity(Dimension(text=" 12.50 "))

    restored = decode(encode(drawing))

    assert [e.text for e in restored.entities] == ["  indented label ", " 12.50 "]
    assert restored.entities[0].layer == " PADDED "
    assert " PADDED " in restored.layers
    assert restored.blocks[" TAG "].entities[0].text == " in block "


def test_decode_strips_padding_around_record_and_section_names() -> None:
    text = _dxf(
        "0", " SECTION", "2", "ENTITIES ", "0", "POINT ", "5", " 1F ", "10", " 1", "20", "2 ",
        "0", "ENDSEC ", "0", "EOF",
    )
    (point,) = decode(text).entities
    assert isinstance(point, Point)
    assert point.handle == "1F"
    assert point.position == Vec2(1, 2)
