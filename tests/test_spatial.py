from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from dxf_cad_editor.geometry.spatial import (
    distance_to_entity,
    entity_bounds,
    entity_center,
    find_entities_in_region,
    find_entities_near_point,
)
from dxf_cad_editor.model.drawing import Bounds
from dxf_cad_editor.model.entities import Arc, Circle, Hatch, Line, Polyline, Text


def test_arc_bounds_include_axis_crossings() -> None:
    arc = Arc(center=Vec2(0, 0), radius=10, start_angle=45, end_angle=135)
    box = entity_bounds(arc)
    assert box is not None
    assert box.max_y == pytest.approx(10.0)
    assert box.min_y == pytest.approx(7.0710678)


def test_full_circle_arc_bounds() -> None:
    box = entity_bounds(Arc(center=Vec2(0, 0), radius=2, start_angle=0, end_angle=360))
    assert box.as_list() == pytest.approx([-2, -2, 2, 2])


def test_empty_geometry_has_no_bounds() -> None:
    assert entity_bounds(Polyline()) is None
    assert entity_bounds(Hatch()) is None


def test_entity_center() -> None:
    assert entity_center(Line(start=Vec2(0, 0), end=Vec2(10, 4))) == Vec2(5, 2)
    square = Polyline(vertices=[Vec2(0, 0), Vec2(2, 0), Vec2(2, 2), Vec2(0, 2)])
    assert entity_center(square) == Vec2(1, 1)
    assert entity_center(Text(position=Vec2(3, 4))) == Vec2(3, 4)


def test_distance_to_arc_outside_sweep_uses_endpoints() -> None:
    arc = Arc(center=Vec2(0, 0), radius=10, start_angle=0, end_angle=90)
    assert distance_to_entity(arc, Vec2(0, 12)) == pytest.approx(2.0)
    assert distance_to_entity(arc, Vec2(-10, -1)) == pytest.approx(Vec2(-10, -1).distance(Vec2(0, 10)))


def test_distance_to_closed_polyline_includes_closing_segment() -> None:
    triangle = Polyline(vertices=[Vec2(0, 0), Vec2(10, 0), Vec2(0, 10)], closed=True)
    assert distance_to_entity(triangle, Vec2(-2, 5)) == pytest.approx(2.0)


def test_find_entities_near_point_sorted_by_distance() -> None:
    near = Line(start=Vec2(0, 1), end=Vec2(10, 1))
    far = Circle(center=Vec2(5, 10), radius=6)
    outside = Line(start=Vec2(0, 50), end=Vec2(10, 50))
    hits = find_entities_near_point([far, outside, near], Vec2(5, 0), 5)
    assert [e for e, _ in hits] == [near, far]
    assert hits[0][1] == pytest.approx(1.0)


def test_find_entities_in_region_window_and_crossing() -> None:
    inside = Line(start=Vec2(1, 1), end=Vec2(2, 2))
    crossing = Line(start=Vec2(5, 5), end=Vec2(20, 20))
    region = Bounds(0, 0, 10, 10)
    assert find_entities_in_region([inside, crossing], region) == [inside]
    assert find_entities_in_region([inside, crossing], region, crossing=True) == [inside, crossing]
