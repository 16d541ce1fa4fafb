from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from dxf_cad_editor.model.drawing import (
    DEFAULT_BOUNDS,
    Bounds,
    Drawing,
    EditRecord,
    Layer,
    LineType,
)
from dxf_cad_editor.model.entities import BYBLOCK, BYLAYER, Circle, Line, Polyline, Solid


def test_add_entity_assigns_increasing_handles() -> None:
    drawing = Drawing()
    first = Line(start=Vec2(0, 0), end=Vec2(1, 0))
    second = Line(start=Vec2(0, 0), end=Vec2(0, 1))
    drawing.add_entity(first)
    drawing.add_entity(second)
    assert first.handle == "1"
    assert second.handle == "2"
    assert list(drawing) == [first, second]


def test_next_handle_skips_existing_hex_handles() -> None:
    drawing = Drawing()
    drawing.add_entity(Circle(handle="1F", radius=2))
    drawing.add_entity(Circle(handle="not-hex", radius=3))
    assert drawing.next_handle() == "20"


def test_add_entity_returns_edit_record() -> None:
    drawing = Drawing()
    line = Line(end=Vec2(5, 5))
    record = drawing.add_entity(line)
    assert record.added == (line,)
    assert record.removed == ()
    assert not record.empty


def test_remove_entity_matches_by_identity() -> None:
    drawing = Drawing()
    original = Line(end=Vec2(5, 0))
    drawing.add_entity(original)
    twin = Line(handle=original.handle, end=Vec2(5, 0))

    assert twin == original
    assert drawing.remove_entity(twin).empty
    assert len(drawing) == 1

    record = drawing.remove_entity(original)
    assert record.removed == (original,)
    assert len(drawing) == 0


def test_replace_entity_keeps_order_and_handle() -> None:
    drawing = Drawing()
    a = drawing.add_entity(Line(end=Vec2(1, 0))).added[0]
    b = drawing.add_entity(Line(end=Vec2(2, 0))).added[0]
    c = drawing.add_entity(Line(end=Vec2(3, 0))).added[0]

    new = Line(end=Vec2(20, 0))
    record = drawing.replace_entity(b, new)

    assert drawing.entities[1] is new
    assert new.handle == b.handle
    assert record.added == (new,)
    assert record.removed == (b,)
    assert drawing.entities[0] is a and drawing.entities[2] is c


def test_replace_missing_entity_appends() -> None:
    drawing = Drawing()
    new = Line(end=Vec2(1, 1))
    record = drawing.replace_entity(Line(), new)
    assert record.removed == ()
    assert drawing.contains(new)


def test_edit_record_merge() -> None:
    a, b = Line(), Circle()
    merged = EditRecord(added=(a,)).merge(EditRecord(removed=(b,)))
    assert merged.added == (a,)
    assert merged.removed == (b,)
    assert EditRecord().empty


def test_empty_drawing_uses_default_bounds() -> None:
    assert Drawing().bounds == DEFAULT_BOUNDS


def test_drawing_bounds_cover_all_entities(sample_drawing) -> None:
    box = sample_drawing.bounds
    assert box.min_x == pytest.approx(0)
    assert box.min_y == pytest.approx(0)
    assert box.max_x == pytest.approx(100)
    assert box.max_y == pytest.approx(50)


def test_bounds_helpers() -> None:
    box = Bounds.from_corners(Vec2(10, 0), Vec2(0, 5))
    assert box.as_list() == [0, 0, 10, 5]
    assert box.width == 10 and box.height == 5
    assert box.center.isclose(Vec2(5, 2.5))
    assert box.contains(Vec2(10, 5))
    assert not box.contains(Vec2(11, 5))
    assert box.expanded(0.1).as_list() == pytest.approx([-1, -1, 11, 6])


def test_bounds_from_points_ignores_non_finite() -> None:
    box = Bounds.from_points([Vec2(1, 2), Vec2(float("inf"), 0), Vec2(-3, 4)])
    assert box.as_list() == [-3, 2, 1, 4]
    assert Bounds.from_points([]) is None


def test_undeclared_layer_is_visible_and_unlocked() -> None:
    drawing = Drawing()
    layer = drawing.layer("MISSING")
    assert layer.visible
    assert not drawing.is_layer_locked("MISSING")


def test_visibility_follows_layer_state(sample_drawing) -> None:
    hidden = Circle(layer="HIDDEN", radius=1)
    sample_drawing.add_entity(hidden)
    sample_drawing.layers["FROZEN"] = Layer("FROZEN", frozen=True)
    frozen = Line(layer="FROZEN")
    sample_drawing.add_entity(frozen)

    visible = sample_drawing.visible_entities()
    assert hidden not in visible
    assert frozen not in visible
    assert len(visible) == 5
    assert sample_drawing.is_layer_locked("LOCKED")


def test_resolve_color() -> None:
    drawing = Drawing()
    drawing.layers["RED"] = Layer("RED", color=1)
    drawing.layers["OFF"] = Layer("OFF", color=-5, off=True)

    assert drawing.resolve_color(Line(layer="RED", color=3)) == 3
    assert drawing.resolve_color(Line(layer="RED", color=BYLAYER)) == 1
    assert drawing.resolve_color(Line(layer="RED")) == 1
    assert drawing.resolve_color(Line(layer="RED", color=BYBLOCK), block_color=4) == 4
    assert drawing.resolve_color(Line(layer="OFF")) == 5
    assert drawing.resolve_color(Line(layer="0")) == 7


def test_polyline_segments_include_closing_segment() -> None:
    square = [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)]
    assert len(Polyline(vertices=square).segments()) == 3
    closed = Polyline(vertices=square, closed=True).segments()
    assert len(closed) == 4
    assert closed[-1] == (Vec2(0, 1), Vec2(0, 0))


def test_solid_outline_orders_corners() -> None:
    quad = Solid(points=[Vec2(0, 0), Vec2(1, 0), Vec2(0, 1), Vec2(1, 1)])
    assert quad.outline() == [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)]
    triangle = Solid(points=[Vec2(0, 0), Vec2(1, 0), Vec2(0, 1)])
    assert len(triangle.outline()) == 3


def test_line_type_total_length() -> None:
    assert LineType("DASHED", pattern=[0.5, -0.25]).total_length == pytest.approx(0.75)
