from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from _editor_helpers import ENTER, Session, click

from dxf_cad_editor.model.drawing import Drawing, Layer
from dxf_cad_editor.model.entities import Circle, Line, Text


def _locked_session():
    drawing = Drawing()
    drawing.layers["LOCKED"] = Layer("LOCKED", locked=True)
    free = Line(start=Vec2(0, 0), end=Vec2(10, 0))
    locked = Line(layer="LOCKED", start=Vec2(0, 20), end=Vec2(10, 20))
    session = Session([free, locked], drawing=drawing)
    return session, free, locked


def test_move_needs_a_selection(session) -> None:
    lines = session.run("MOVE")
    assert lines[-1] == "No objects selected. Select objects first."
    assert session.console.kinds(lines[-1]) == ["error"]


def test_move_replaces_selected_entities() -> None:
    line = Line(start=Vec2(0, 0), end=Vec2(10, 0))
    session = Session([line])
    session.view.select([line])

    lines = session.run("M", "0,0", "@5,5")

    (moved,) = session.drawing.entities
    assert moved.start == Vec2(5, 5)
    assert moved.end == Vec2(15, 5)
    assert moved.handle == line.handle
    assert lines[-1] == "1 object(s) moved"
    assert session.view.selected_entities() == []


def test_move_skips_locked_layers() -> None:
    session, free, locked = _locked_session()
    session.view.select([free, locked])

    lines = session.run("MOVE", "0,0", "0,5")

    assert session.drawing.entities[0].start == Vec2(0, 5)
    assert session.drawing.entities[1] is locked
    assert "1 object(s) on locked layer(s) - skipped" in lines
    assert lines[-1] == "1 object(s) moved"


def test_copy_places_multiple_copies() -> None:
    circle = Circle(center=Vec2(0, 0), radius=1)
    session = Session([circle])
    session.view.select([circle])

    lines = session.run("COPY", "0,0", "10,0", "20,0", ENTER)

    centers = [c.center for c in session.entities_of("CIRCLE")]
    assert centers == [Vec2(0, 0), Vec2(10, 0), Vec2(20, 0)]
    assert lines[-1] == "Total: 2 object(s) copied"
    handles = {c.handle for c in session.entities_of("CIRCLE")}
    assert len(handles) == 3


def test_copy_exit_keyword_after_first_copy() -> None:
    circle = Circle(center=Vec2(0, 0), radius=1)
    session = Session([circle])
    session.view.select([circle])
    lines = session.run("COPY", "0,0", "5,5", "x")
    assert len(session.drawing) == 2
    assert lines[-1] == "Total: 1 object(s) copied"


def test_copy_without_second_point() -> None:
    circle = Circle(center=Vec2(0, 0), radius=1)
    session = Session([circle])
    session.view.select([circle])
    lines = session.run("COPY", "0,0", ENTER)
    assert len(session.drawing) == 1
    assert lines[-1] == "Copy cancelled"


def test_erase_preselected() -> None:
    a = Line(end=Vec2(10, 0))
    b = Circle(center=Vec2(50, 50), radius=2)
    session = Session([a, b])
    session.view.select([a, b])
    lines = session.run("ERASE")
    assert len(session.drawing) == 0
    assert lines[-1] == "2 objects erased"


def test_erase_by_picking() -> None:
    a = Line(start=Vec2(0, 0), end=Vec2(10, 0))
    b = Circle(center=Vec2(50, 50), radius=2)
    session = Session([a, b])
    lines = session.run("E", click(5, 1), ENTER)
    assert session.drawing.entities == [b]
    assert lines[-1] == "1 object erased"


def test_erase_with_empty_selection(session) -> None:
    lines = session.run("ERASE", ENTER)
    assert lines[-1] == "No objects selected"


def test_erase_locked_only() -> None:
    session, _, locked = _locked_session()
    session.view.select([locked])
    lines = session.run("ERASE")
    assert len(session.drawing) == 2
    assert lines[-1] == "1 object(s) on locked layer(s) - skipped"


def test_offset_line_to_picked_side() -> None:
    line = Line(start=Vec2(0, 0), end=Vec2(10, 0))
    session = Session([line])

    lines = session.run("OFFSET", "5", click(5, 0), "5,10", ENTER)

    original, offset = session.entities_of("LINE")
    assert original is line
    assert offset.start == Vec2(0, 5)
    assert offset.end == Vec2(10, 5)
    assert lines[-1] == "1 offset(s) created"


def test_offset_distance_is_remembered() -> None:
    line = Line(start=Vec2(0, 0), end=Vec2(10, 0))
    session = Session([line])
    session.run("OFFSET", "2.5", ENTER)
    lines = session.run("OFFSET", ENTER, click(5, 0), "5,-10", ENTER)

    assert "Specify offset distance <2.5000>" in "".join(session.console.prompts[-4:])
    offset = session.entities_of("LINE")[-1]
    assert offset.start.y == pytest.approx(-2.5)
    assert lines[-1] == "1 offset(s) created"


def test_offset_through_point() -> None:
    circle = Circle(center=Vec2(0, 0), radius=5)
    session = Session([circle])
    session.run("O", "t", click(5, 0), "0,8", ENTER)
    assert [c.radius for c in session.entities_of("CIRCLE")] == [5, 8]


def test_offset_circle_inward_and_erase_source() -> None:
    circle = Circle(center=Vec2(0, 0), radius=5)
    session = Session([circle])
    lines = session.run("OFFSET", "e", "2", click(5, 0), "0,1", ENTER)
    (inner,) = session.entities_of("CIRCLE")
    assert inner.radius == 3
    assert "Erase source after offsetting: Yes" in lines


def test_offset_rejects_collapsing_circle() -> None:
    session = Session([Circle(center=Vec2(0, 0), radius=1)])
    lines = session.run("OFFSET", "2", click(1, 0), "0,0", ENTER)
    assert "Cannot create offset" in lines
    assert len(session.drawing) == 1


def test_offset_unsupported_and_locked_entities() -> None:
    session, _, locked = _locked_session()
    session.drawing.add_entity(Text(position=Vec2(0, 40), text="A", height=2))

    lines = session.run("OFFSET", "1", click(5, 20), click(0.5, 41), ENTER)

    assert 'Object is on locked layer "LOCKED"' in lines
    assert "Cannot offset TEXT" in lines
    assert len(session.drawing) == 3


def test_offset_rejects_non_positive_distance() -> None:
    session = Session([Line(end=Vec2(10, 0))])
    lines = session.run("OFFSET", "-1", "1", click(5, 0), "5,5", ENTER)
    assert "Offset distance must be greater than zero" in lines
    assert len(session.drawing) == 2
