"""Spatial analysis and search over drawing entities."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.geometry.construct import distance_to_segment
from dxf_cad_editor.geometry.kernel import is_on_arc, normalize_degrees
from dxf_cad_editor.model.drawing import Bounds
from dxf_cad_editor.model.entities import (
    Arc,
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

ELLIPSE_SAMPLES = 64
TEXT_WIDTH_FACTOR = 0.6  # average glyph width relative to height


# Helper functions

def _text_corners(entity: Text) -> List[Vec2]:
    """Approximate box of a single-line text, rotated about its insertion point."""
    width = max(len(entity.text), 1) * entity.height * TEXT_WIDTH_FACTOR
    along = Vec2.from_deg_angle(entity.rotation, width)
    up = Vec2.from_deg_angle(entity.rotation + 90.0, entity.height)
    p = entity.position
    return [p, p + along, p + up, p + along + up]


def _ellipse_points(entity: Ellipse, samples: int = ELLIPSE_SAMPLES) -> List[Vec2]:
    major = entity.major_axis
    minor = major.orthogonal() * entity.ratio
    start = entity.start_param
    end = entity.end_param
    if end <= start:
        end += math.tau
    step = (end - start) / samples
    return [
        entity.center + major * math.cos(start + i * step) + minor * math.sin(start + i * step)
        for i in range(samples + 1)
    ]


def _arc_extreme_points(entity: Arc) -> List[Vec2]:
    """Arc endpoints plus every axis crossing inside the sweep."""
    points = [entity.start_point, entity.end_point]
    full = math.isclose(
        normalize_degrees(entity.start_angle), normalize_degrees(entity.end_angle)
    )
    for angle in (0.0, 90.0, 180.0, 270.0):
        p = entity.center + Vec2.from_deg_angle(angle, entity.radius)
        if full or is_on_arc(p, entity.center, entity.start_angle, entity.end_angle, tolerance=0.0):
            points.append(p)
    return points


def _entity_points(entity: Entity) -> List[Vec2]:
    """Characteristic points whose extents enclose the entity."""
    if isinstance(entity, Line):
        return [entity.start, entity.end]
    if isinstance(entity, Circle):
        r = Vec2(entity.radius, entity.radius)
        return [entity.center - r, entity.center + r]
    if isinstance(entity, Arc):
        return _arc_extreme_points(entity)
    if isinstance(entity, (Polyline, Leader)):
        return list(entity.vertices)
    if isinstance(entity, Text):
        return _text_corners(entity)
    if isinstance(entity, (Point, Insert)):
        return [entity.position]
    if isinstance(entity, Ellipse):
        return _ellipse_points(entity)
    if isinstance(entity, Spline):
        return list(entity.control_points) + list(entity.fit_points)
    if isinstance(entity, Hatch):
        return [p for path in entity.boundary_paths for p in path]
    if isinstance(entity, Dimension):
        pts = [entity.definition_point, entity.middle_point]
        pts.extend(p for p in (entity.first_point, entity.second_point) if p is not None)
        return pts
    if isinstance(entity, Solid):
        return list(entity.points)
    return []


def _path_distance(point: Vec2, vertices: Sequence[Vec2], closed: bool) -> Optional[float]:
    if not vertices:
        return None
    if len(vertices) == 1:
        return point.distance(vertices[0])
    pairs = list(zip(vertices, vertices[1:]))
    if closed and len(vertices) > 2:
        pairs.append((vertices[-1], vertices[0]))
    return min(distance_to_segment(point, a, b) for a, b in pairs)


def _box_distance(point: Vec2, box: Bounds) -> float:
    dx = max(box.min_x - point.x, 0.0, point.x - box.max_x)
    dy = max(box.min_y - point.y, 0.0, point.y - box.max_y)
    return math.hypot(dx, dy)


# Public API

def entity_bounds(entity: Entity) -> Optional[Bounds]:
    """
    Axis-aligned extents of an entity.

    Args:
        entity: Any entity variant

    Returns:
        Bounds, or None when the entity has no finite geometry (an empty
        polyline, a hatch without paths). Inserts report their insertion
        point only, the block is resolved by the caller.
    """
    return Bounds.from_points(_entity_points(entity))


def entity_center(entity: Entity) -> Optional[Vec2]:
    """
    Representative center point of an entity.

    Circles, arcs and ellipses use their center, lines their midpoint,
    polylines the vertex average, text and inserts their insertion point.
    Everything else uses the center of its bounds.
    """
    if isinstance(entity, (Circle, Arc, Ellipse)):
        return entity.center
    if isinstance(entity, Line):
        return entity.start.lerp(entity.end)
    if isinstance(entity, Polyline):
        if not entity.vertices:
            return None
        return sum(entity.vertices, Vec2()) / len(entity.vertices)
    if isinstance(entity, (Text, Point, Insert)):
        return entity.position
    box = entity_bounds(entity)
    return box.center if box is not None else None


def distance_to_entity(entity: Entity, point: Vec2) -> Optional[float]:
    """
    Shortest distance from a point to the drawn geometry of an entity.

    Args:
        entity: Any entity variant
        point: Query point in world coordinates

    Returns:
        Distance in drawing units, or None when the entity has no geometry

    Example:
        distance_to_entity(Circle(center=Vec2(0, 0), radius=5), Vec2(8, 0))  # 3.0
    """
    if isinstance(entity, Line):
        return distance_to_segment(point, entity.start, entity.end)
    if isinstance(entity, Circle):
        return abs(entity.center.distance(point) - entity.radius)
    if isinstance(entity, Arc):
        if is_on_arc(point, entity.center, entity.start_angle, entity.end_angle, tolerance=0.0):
            return abs(entity.center.distance(point) - entity.radius)
        return min(point.distance(entity.start_point), point.distance(entity.end_point))
    if isinstance(entity, Polyline):
        return _path_distance(point, entity.vertices, entity.closed)
    if isinstance(entity, Leader):
        return _path_distance(point, entity.vertices, False)
    if isinstance(entity, (Point, Insert)):
        return point.distance(entity.position)
    if isinstance(entity, Ellipse):
        return _path_distance(point, _ellipse_points(entity), False)
    if isinstance(entity, Spline):
        return _path_distance(point, entity.fit_points or entity.control_points, entity.closed)
    if isinstance(entity, Hatch):
        found = [_path_distance(point, path, True) for path in entity.boundary_paths]
        found = [d for d in found if d is not None]
        return min(found) if found else None
    if isinstance(entity, Solid):
        return _path_distance(point, entity.outline(), True)

    box = entity_bounds(entity)
    if box is None:
        return None
    return _box_distance(point, box)


def find_entities_near_point(
    entities: Iterable[Entity],
    point: Vec2,
    radius: float,
) -> List[Tuple[Entity, float]]:
    """
    Find all entities whose geometry passes within a radius of a point.

    Args:
        entities: Entities to search
        point: Center of the search circle
        radius: Search radius

    Returns:
        (entity, distance) pairs sorted by distance (closest first); ties keep
        draw order
    """
    results: List[Tuple[Entity, float]] = []
    for entity in entities:
        d = distance_to_entity(entity, point)
        if d is not None and d <= radius:
            results.append((entity, d))

    results.sort(key=lambda hit: hit[1])
    return results


def find_entities_in_region(
    entities: Iterable[Entity],
    region: Bounds,
    crossing: bool = False,
) -> List[Entity]:
    """
    Find all entities inside a rectangular region.

    Args:
        entities: Entities to search
        region: Selection rectangle
        crossing: When False (window selection) an entity must lie entirely
            inside the region. When True it only has to overlap it.

    Returns:
        Matching entities in draw order
    """
    results: List[Entity] = []
    for entity in entities:
        box = entity_bounds(entity)
        if box is None:
            continue
        if crossing:
            hit = not (
                box.max_x < region.min_x
                or box.min_x > region.max_x
                or box.max_y < region.min_y
                or box.min_y > region.max_y
            )
        else:
            hit = (
                region.min_x <= box.min_x
                and box.max_x <= region.max_x
                and region.min_y <= box.min_y
                and box.max_y <= region.max_y
            )
        if hit:
            results.append(entity)
    return results
