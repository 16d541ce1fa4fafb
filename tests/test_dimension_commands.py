from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from _editor_helpers import ENTER, move


def _texts(session):
    return session.entities_of("TEXT")


def test_dim_picks_horizontal_from_location(session) -> None:
    lines = session.run("DIM", "0,0", "100,0", "50,20")

    assert lines[0] == "DIM (Linear Dimension)"
    assert lines[-1] == "Dimension created: 100.0000"
    assert len(session.drawing) == 8
    (text,) = _texts(session)
    assert text.text == "100.00"
    assert text.rotation == 0
    dim_line = session.entities_of("LINE")[2]
    assert (dim_line.start, dim_line.end) == (Vec2(0, 20), Vec2(100, 20))


def test_dimlinear_alias_picks_vertical(session) -> None:
    lines = session.run("DIMLIN", "0,0", "0,50", "30,25")
    assert lines[-1] == "Dimension created: 50.0000"
    (text,) = _texts(session)
    assert text.rotation == 90


def test_dimhor_measures_dx_only(session) -> None:
    lines = session.run("DH", "0,0", "30,40", "15,60")
    assert lines[-1] == "Horizontal dimension: 30.0000"
    assert _texts(session)[0].text == "30.00"


def test_dimver_measures_dy_only(session) -> None:
    lines = session.run("DIMVER", "0,0", "30,40", "50,20")
    assert lines[-1] == "Vertical dimension: 40.0000"


def test_dimaligned(session) -> None:
    lines = session.run("DAL", "0,0", "30,40", "-8,6")
    assert lines[-1] == "Aligned dimension: 50.0000"
    text = _texts(session)[0]
    assert text.rotation == pytest.approx(53.1301, abs=1e-3)


def test_dimaligned_rejects_coincident_points(session) -> None:
    lines = session.run("DIMALIGNED", "5,5", "5,5", "10,10")
    assert lines[-1] == "Points are too close"
    assert len(session.drawing) == 0


def test_dimension_preview_follows_cursor(session) -> None:
    shown = []
    session.view.on_edit(lambda record: shown.append(record))
    session.run("DIM", "0,0", "10,0", move(5, 4), "5,5")
    assert len(shown) == 8
    assert session.view.preview is None


def test_dim_without_first_point_does_nothing(session) -> None:
    lines = session.run("DIM", ENTER)
    assert lines == ["DIM (Linear Dimension)"]
    assert len(session.drawing) == 0


def test_dimangular_right_angle(session) -> None:
    lines = session.run("DIMANGULAR", "0,0", "10,0", "0,10", "5,0")

    assert lines[0] == "DIMANGULAR (Angular Dimension)"
    assert lines[-1] == "Angular dimension: 90.00°"
    (arc,) = session.entities_of("ARC")
    assert arc.radius == pytest.approx(5)
    assert arc.start_angle == pytest.approx(0)
    assert arc.end_angle == pytest.approx(90)
    assert _texts(session)[0].text == "90.0°"


def test_dimangular_clockwise_pick_order_gives_same_arc(session) -> None:
    session.run("DAN", "0,0", "0,10", "10,0", "0,7")
    (arc,) = session.entities_of("ARC")
    assert arc.start_angle == pytest.approx(0)
    assert arc.end_angle == pytest.approx(90)
    assert arc.radius == pytest.approx(7)


def test_dimangular_rejects_degenerate_ray(session) -> None:
    lines = session.run("DIMANGULAR", "1,1", "5,5", "1,1", "3,3")
    assert lines[-1] == "Angle endpoints must differ from the vertex"
    assert len(session.drawing) == 0
