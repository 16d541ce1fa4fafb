"""Construction formulas for dimensions, offsets and displacement."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

from ezdxf.math import Vec2

from dxf_cad_editor.config import DimensionStyle
from dxf_cad_editor.geometry.kernel import normalize_degrees
from dxf_cad_editor.model.entities import Arc, Circle, Entity, Line, Text

Segment = Tuple[Vec2, Vec2]

TEXT_ALIGN_CENTER = 1
MIN_DIMENSION_LENGTH = 0.001
_EPSILON = 1e-10


class DimensionSettings(NamedTuple):
    text_height: float
    arrow_size: float
    text_gap: float
    extension_offset: float
    extension_beyond: float
    arrow_width: float


@dataclass(frozen=True)
class LinearDimension:
    """Geometry of a horizontal, vertical or aligned dimension."""

    measurement: float
    dim_start: Vec2
    dim_end: Vec2
    ext1: Segment
    ext2: Segment
    text_position: Vec2
    text_angle: float  # degrees
    settings: DimensionSettings

    @property
    def text(self) -> str:
        return f"{self.measurement:.2f}"


@dataclass(frozen=True)
class AngularDimension:
    """Geometry of an angular dimension; the arc always sweeps counter-clockwise."""

    angle: float  # degrees, in [0, 180]
    vertex: Vec2
    radius: float
    start_angle: float  # degrees
    end_angle: float  # degrees, start + angle
    ext1: Segment
    ext2: Segment
    text_position: Vec2
    settings: DimensionSettings

    @property
    def text(self) -> str:
        return f"{self.angle:.1f}°"


# Dimensions

def dimension_settings(
    measurement: float, style: Optional[DimensionStyle] = None
) -> DimensionSettings:
    """
    Size every part of a dimension from the measured value.

    Args:
        measurement: Measured length (or arc length for angular dimensions)
        style: Sizing ratios, defaults to ``DimensionStyle()``

    Returns:
        DimensionSettings with text height clamped to the style's range

    Example:
        dimension_settings(100).text_height  # 3.0
        dimension_settings(10).text_height   # 1.5 (clamped)
    """
    style = style or DimensionStyle()
    th = measurement * style.scale_factor
    th = max(style.min_text_height, min(style.max_text_height, th))
    arrow = th * style.arrow_ratio
    return DimensionSettings(
        text_height=th,
        arrow_size=arrow,
        text_gap=th * style.text_gap_ratio,
        extension_offset=th * style.extension_offset_ratio,
        extension_beyond=th * style.extension_beyond_ratio,
        arrow_width=arrow * style.arrow_width_ratio,
    )


def _side(value: float, reference: float) -> int:
    return 1 if value > reference else -1


def horizontal_dimension(
    p1: Vec2, p2: Vec2, location: Vec2, style: Optional[DimensionStyle] = None
) -> LinearDimension:
    """Dimension measuring |dx|, with the dimension line at ``location.y``."""
    dim_y = location.y
    measurement = abs(p2.x - p1.x)
    s = dimension_settings(measurement, style)

    d1 = _side(dim_y, p1.y)
    d2 = _side(dim_y, p2.y)
    ext1 = (
        Vec2(p1.x, p1.y + s.extension_offset * d1),
        Vec2(p1.x, dim_y + s.extension_beyond * d1),
    )
    ext2 = (
        Vec2(p2.x, p2.y + s.extension_offset * d2),
        Vec2(p2.x, dim_y + s.extension_beyond * d2),
    )
    text_pos = Vec2((p1.x + p2.x) / 2, dim_y + s.text_gap + s.text_height / 2)
    return LinearDimension(
        measurement,
        Vec2(p1.x, dim_y),
        Vec2(p2.x, dim_y),
        ext1,
        ext2,
        text_pos,
        0.0,
        s,
    )


def vertical_dimension(
    p1: Vec2, p2: Vec2, location: Vec2, style: Optional[DimensionStyle] = None
) -> LinearDimension:
    """Dimension measuring |dy|, with the dimension line at ``location.x``."""
    dim_x = location.x
    measurement = abs(p2.y - p1.y)
    s = dimension_settings(measurement, style)

    d1 = _side(dim_x, p1.x)
    d2 = _side(dim_x, p2.x)
    ext1 = (
        Vec2(p1.x + s.extension_offset * d1, p1.y),
        Vec2(dim_x + s.extension_beyond * d1, p1.y),
    )
    ext2 = (
        Vec2(p2.x + s.extension_offset * d2, p2.y),
        Vec2(dim_x + s.extension_beyond * d2, p2.y),
    )
    text_pos = Vec2(dim_x + s.text_gap + s.text_height / 2, (p1.y + p2.y) / 2)
    return LinearDimension(
        measurement,
        Vec2(dim_x, p1.y),
        Vec2(dim_x, p2.y),
        ext1,
        ext2,
        text_pos,
        90.0,
        s,
    )


def auto_linear_dimension(
    p1: Vec2, p2: Vec2, location: Vec2, style: Optional[DimensionStyle] = None
) -> LinearDimension:
    """
    Horizontal or vertical dimension depending on where the location point lies.

    Horizontal when the location deviates more from the midpoint in y than in x.
    """
    mid = p1.lerp(p2)
    if abs(location.y - mid.y) > abs(location.x - mid.x):
        return horizontal_dimension(p1, p2, location, style)
    return vertical_dimension(p1, p2, location, style)


def aligned_dimension(
    p1: Vec2, p2: Vec2, location: Vec2, style: Optional[DimensionStyle] = None
) -> Optional[LinearDimension]:
    """
    Dimension parallel to p1 -> p2, offset by the signed perpendicular distance of ``location``.

    Returns:
        LinearDimension, or None when the points are closer than 0.001
    """
    delta = p2 - p1
    measurement = delta.magnitude
    if measurement < MIN_DIMENSION_LENGTH:
        return None
    s = dimension_settings(measurement, style)

    perp = Vec2(-delta.y / measurement, delta.x / measurement)
    offset = (location - p1).dot(perp)
    shift = perp * offset
    direction = 1 if offset > 0 else -1

    dim_start = p1 + shift
    dim_end = p2 + shift
    ext1 = (
        p1 + perp * (s.extension_offset * direction),
        dim_start + perp * (s.extension_beyond * direction),
    )
    ext2 = (
        p2 + perp * (s.extension_offset * direction),
        dim_end + perp * (s.extension_beyond * direction),
    )
    text_pos = dim_start.lerp(dim_end) + perp * ((s.text_gap + s.text_height / 2) * direction)
    angle = math.degrees(math.atan2(delta.y, delta.x))
    return LinearDimension(measurement, dim_start, dim_end, ext1, ext2, text_pos, angle, s)


def angular_dimension(
    vertex: Vec2,
    p1: Vec2,
    p2: Vec2,
    location: Vec2,
    style: Optional[DimensionStyle] = None,
) -> Optional[AngularDimension]:
    """
    Dimension of the smaller angle between rays vertex -> p1 and vertex -> p2.

    The arc radius is the distance from the vertex to ``location``. The arc
    starts at the first ray when the turn from ray 1 to ray 2 is
    counter-clockwise and at the second ray otherwise, so it always sweeps
    counter-clockwise.

    Returns:
        AngularDimension, or None when either endpoint coincides with the vertex
    """
    r1 = p1 - vertex
    r2 = p2 - vertex
    if r1.magnitude < _EPSILON or r2.magnitude < _EPSILON:
        return None

    a1 = math.atan2(r1.y, r1.x)
    a2 = math.atan2(r2.y, r2.x)
    diff = a2 - a1
    while diff < -math.pi:
        diff += math.tau
    while diff > math.pi:
        diff -= math.tau

    start = a1
    if diff < 0:
        start, diff = a2, -diff

    radius = vertex.distance(location)
    arc_length = radius * diff
    s = dimension_settings(arc_length if arc_length > 0 else radius, style)

    u1 = r1.normalize()
    u2 = r2.normalize()
    inner = radius - s.extension_beyond
    outer = radius + s.extension_beyond
    ext1 = (vertex + u1 * inner, vertex + u1 * outer)
    ext2 = (vertex + u2 * inner, vertex + u2 * outer)

    mid = start + diff / 2
    text_pos = vertex + Vec2.from_angle(mid, radius + s.text_height)
    start_deg = math.degrees(start)
    end_deg = start_deg + math.degrees(diff)
    return AngularDimension(
        angle=math.degrees(diff),
        vertex=vertex,
        radius=radius,
        start_angle=normalize_degrees(start_deg),
        end_angle=normalize_degrees(end_deg),
        ext1=ext1,
        ext2=ext2,
        text_position=text_pos,
        settings=s,
    )


def arrowhead(
    tip: Vec2, toward: Vec2, size: float, width_ratio: float = 0.3
) -> List[Segment]:
    """
    Two barbs of an open arrowhead at ``tip`` pointing away from ``toward``.

    Returns:
        Two (tip, barb end) segments, or [] when ``toward`` is within 0.001 of the tip
    """
    delta = toward - tip
    length = delta.magnitude
    if length < MIN_DIMENSION_LENGTH:
        return []
    direction = delta / length
    perp = direction.orthogonal()
    back = tip + direction * size
    width = size * width_ratio
    return [(tip, back - perp * width), (tip, back + perp * width)]


def dimension_entities(
    dimension: Union[LinearDimension, AngularDimension], layer: str = "0"
) -> List[Entity]:
    """
    Plain entities that draw a dimension.

    Linear dimensions produce two extension lines, the dimension line, two
    arrowheads and the measurement text. Angular dimensions produce two
    extension lines, the dimension arc, two tangent arrowheads and the
    angle text.
    """
    s = dimension.settings
    ratio = s.arrow_width / s.arrow_size if s.arrow_size else 0.0
    entities: List[Entity] = [
        Line(layer=layer, start=dimension.ext1[0], end=dimension.ext1[1]),
        Line(layer=layer, start=dimension.ext2[0], end=dimension.ext2[1]),
    ]

    if isinstance(dimension, AngularDimension):
        entities.append(
            Arc(
                layer=layer,
                center=dimension.vertex,
                radius=dimension.radius,
                start_angle=dimension.start_angle,
                end_angle=dimension.end_angle,
            )
        )
        start_dir = Vec2.from_deg_angle(dimension.start_angle)
        end_dir = Vec2.from_deg_angle(dimension.end_angle)
        arc_start = dimension.vertex + start_dir * dimension.radius
        arc_end = dimension.vertex + end_dir * dimension.radius
        # Tangent targets point into the sweep at both ends
        start_target = arc_start + start_dir.orthogonal() * s.arrow_size
        end_target = arc_end - end_dir.orthogonal() * s.arrow_size
        barbs = arrowhead(arc_start, start_target, s.arrow_size, ratio)
        barbs += arrowhead(arc_end, end_target, s.arrow_size, ratio)
        rotation = 0.0
    else:
        entities.append(Line(layer=layer, start=dimension.dim_start, end=dimension.dim_end))
        barbs = arrowhead(dimension.dim_start, dimension.dim_end, s.arrow_size, ratio)
        barbs += arrowhead(dimension.dim_end, dimension.dim_start, s.arrow_size, ratio)
        rotation = dimension.text_angle

    entities.extend(Line(layer=layer, start=a, end=b) for a, b in barbs)
    entities.append(
        Text(
            layer=layer,
            position=dimension.text_position,
            text=dimension.text,
            height=s.text_height,
            rotation=rotation,
            alignment=TEXT_ALIGN_CENTER,
        )
    )
    return entities


# Offsets

def offset_line(start: Vec2, end: Vec2, distance: float, side_point: Vec2) -> Optional[Segment]:
    """Parallel copy of a line on the side of ``side_point``; None for a zero-length line."""
    delta = end - start
    length = delta.magnitude
    if length < _EPSILON:
        return None
    normal = Vec2(-delta.y / length, delta.x / length)
    side = 1 if (side_point - start.lerp(end)).dot(normal) > 0 else -1
    shift = normal * (side * distance)
    return start + shift, end + shift


def offset_radius(center: Vec2, radius: float, distance: float, side_point: Vec2) -> Optional[float]:
    """New radius growing outward or shrinking inward toward ``side_point``; None when not positive."""
    if center.distance(side_point) > radius:
        new_radius = radius + distance
    else:
        new_radius = radius - distance
    if new_radius <= 0:
        return None
    return new_radius


def _unit_normal(a: Vec2, b: Vec2) -> Optional[Vec2]:
    delta = b - a
    length = delta.magnitude
    if length < _EPSILON:
        return None
    return Vec2(-delta.y / length, delta.x / length)


def offset_polyline_vertices(
    vertices: Sequence[Vec2], closed: bool, distance: float, side_point: Vec2
) -> Optional[List[Vec2]]:
    """
    Offset a polyline by moving each vertex along its averaged segment normal.

    The side is decided once, from the segment nearest ``side_point``, and
    applied to every vertex so the result never crosses over itself at a
    reflex corner.

    Returns:
        New vertex list, or None for fewer than 2 vertices or an all-degenerate polyline
    """
    pts = list(vertices)
    n = len(pts)
    if n < 2:
        return None

    segments = [(pts[i], pts[i + 1]) for i in range(n - 1)]
    if closed and n > 2:
        segments.append((pts[-1], pts[0]))

    nearest = min(segments, key=lambda seg: distance_to_segment(side_point, seg[0], seg[1]))
    ref_normal = _unit_normal(*nearest)
    if ref_normal is None:
        return None
    side = 1 if (side_point - nearest[0].lerp(nearest[1])).dot(ref_normal) > 0 else -1

    result: List[Vec2] = []
    for i, curr in enumerate(pts):
        if not closed and i == 0:
            normal = _unit_normal(curr, pts[1])
        elif not closed and i == n - 1:
            normal = _unit_normal(pts[i - 1], curr)
        else:
            n1 = _unit_normal(pts[i - 1], curr)
            n2 = _unit_normal(curr, pts[(i + 1) % n])
            if n1 is None or n2 is None:
                normal = n1 or n2
            else:
                avg = (n1 + n2) / 2
                normal = avg.normalize() if avg.magnitude > _EPSILON else n1
        if normal is None:
            normal = Vec2()
        result.append(curr + normal * (side * distance))
    return result


def through_distance(entity: Entity, point: Vec2) -> Optional[float]:
    """Offset distance that makes the offset pass through ``point``."""
    if isinstance(entity, Line):
        return distance_to_segment(point, entity.start, entity.end)
    if isinstance(entity, (Circle, Arc)):
        return abs(entity.center.distance(point) - entity.radius)
    return None


# Measurement and displacement

def distance_to_segment(point: Vec2, a: Vec2, b: Vec2) -> float:
    """Distance from ``point`` to the closest point of segment (a, b)."""
    delta = b - a
    length_sq = delta.dot(delta)
    if length_sq < _EPSILON:
        return point.distance(a)
    t = max(0.0, min(1.0, (point - a).dot(delta) / length_sq))
    return point.distance(a + delta * t)


# Location fields per entity type; relative vectors like ``major_axis`` and ``scale`` stay put.
_LOCATION_FIELDS = {
    "LINE": ("start", "end"),
    "CIRCLE": ("center",),
    "ARC": ("center",),
    "ELLIPSE": ("center",),
    "LWPOLYLINE": ("vertices",),
    "LEADER": ("vertices",),
    "TEXT": ("position",),
    "ATTRIB": ("position",),
    "POINT": ("position",),
    "INSERT": ("position",),
    "SPLINE": ("control_points", "fit_points"),
    "HATCH": ("boundary_paths",),
    "DIMENSION": ("definition_point", "middle_point", "first_point", "second_point"),
    "SOLID": ("points",),
}


def _shift(value, delta: Vec2):
    if value is None:
        return None
    if isinstance(value, Vec2):
        return value + delta
    return [_shift(v, delta) for v in value]


def translate_entity(entity: Entity, delta: Vec2) -> Entity:
    """
    Displaced copy of an entity, without a handle.

    Args:
        entity: Any entity variant
        delta: Displacement vector

    Returns:
        New entity of the same type; the source is left untouched

    Example:
        moved = translate_entity(Line(start=Vec2(0, 0), end=Vec2(1, 0)), Vec2(5, 5))
        # moved.start == Vec2(5, 5)
    """
    moved = copy.deepcopy(entity)
    moved.handle = None
    for name in _LOCATION_FIELDS.get(entity.dxftype, ()):
        setattr(moved, name, _shift(getattr(moved, name), delta))
    return moved
