"""
Geometry kernel: closed-form 2D intersection and construction primitives.

Every function is pure. Degenerate input (collinear points, parallel lines,
zero-length segments) is reported through the return value (``None`` or an
empty list), never by raising or by returning NaN.
"""

from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Tuple

from ezdxf.math import Vec2

COLLINEAR_EPSILON = 1e-4
PARALLEL_EPSILON = 1e-10
ROOT_EPSILON = 1e-10
SEGMENT_MARGIN = 0.001
ARC_ANGLE_TOLERANCE = 0.1  # degrees


class LineHit(NamedTuple):
    """Intersection point and its parameter along the first line (t=0 at p1, t=1 at p2)."""

    point: Vec2
    t: float


class ArcFit(NamedTuple):
    """
    Circle through three points plus the arc p1 -> p2 -> p3.

    Angles are in degrees. The sweep is signed: ``end_angle > start_angle``
    when the arc runs counter-clockwise from p1 through p2 to p3, and
    ``end_angle < start_angle`` when it runs clockwise. ``start_angle`` is
    always p1's polar angle in [0, 360).
    """

    center: Vec2
    radius: float
    start_angle: float
    end_angle: float

    @property
    def counter_clockwise(self) -> bool:
        return self.end_angle >= self.start_angle

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    def entity_angles(self) -> Tuple[float, float]:
        """(start, end) for a counter-clockwise arc entity, both in [0, 360)."""
        if self.counter_clockwise:
            return normalize_degrees(self.start_angle), normalize_degrees(self.end_angle)
        return normalize_degrees(self.end_angle), normalize_degrees(self.start_angle)


def normalize_degrees(angle: float) -> float:
    """Map an angle to [0, 360)."""
    a = math.fmod(angle, 360.0)
    if a < 0:
        a += 360.0
    # fmod of a tiny negative can round up to exactly 360
    return 0.0 if a >= 360.0 else a


def _normalize_radians(angle: float) -> float:
    a = math.fmod(angle, math.tau)
    if a < 0:
        a += math.tau
    return 0.0 if a >= math.tau else a


def circle_through_3_points(p1: Vec2, p2: Vec2, p3: Vec2) -> Optional[ArcFit]:
    """
    Circumscribed circle of three points and the arc that passes p1, p2, p3 in order.

    Args:
        p1: Arc start point
        p2: Point the arc must pass through
        p3: Arc end point

    Returns:
        ArcFit, or None when the points are collinear (twice the signed
        triangle area is within 1e-4 of zero)

    Example:
        fit = circle_through_3_points(Vec2(0, 0), Vec2(10, 0), Vec2(10, 10))
        # fit.center == (5, 5), fit.radius == 7.0710...
    """
    ax, ay = p1.x, p1.y
    bx, by = p2.x, p2.y
    cx, cy = p3.x, p3.y

    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < COLLINEAR_EPSILON:
        return None

    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    center = Vec2(ux, uy)
    radius = center.distance(p1)

    angle1 = _normalize_radians(math.atan2(ay - uy, ax - ux))
    angle2 = _normalize_radians(math.atan2(by - uy, bx - ux))
    angle3 = _normalize_radians(math.atan2(cy - uy, cx - ux))

    # Counter-clockwise offsets from p1; p2 comes first only on the CCW arc.
    ccw_to_2 = _normalize_radians(angle2 - angle1)
    ccw_to_3 = _normalize_radians(angle3 - angle1)

    start = math.degrees(angle1)
    if ccw_to_2 < ccw_to_3:
        end = start + math.degrees(ccw_to_3)
    else:
        end = start - (360.0 - math.degrees(ccw_to_3))
    return ArcFit(center, radius, start, end)


def infinite_line_intersection(
    p1: Vec2, p2: Vec2, p3: Vec2, p4: Vec2
) -> Optional[LineHit]:
    """
    Intersection of the infinite lines (p1, p2) and (p3, p4).

    Returns:
        LineHit whose ``t`` locates the point along (p1, p2) and may fall
        outside [0, 1]; None when the lines are parallel
    """
    x1, y1, x2, y2 = p1.x, p1.y, p2.x, p2.y
    x3, y3, x4, y4 = p3.x, p3.y, p4.x, p4.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < PARALLEL_EPSILON:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    return LineHit(Vec2(x1 + t * (x2 - x1), y1 + t * (y2 - y1)), t)


def line_circle_intersection(
    p1: Vec2, p2: Vec2, center: Vec2, radius: float
) -> List[LineHit]:
    """
    Intersections of the infinite line (p1, p2) with a circle.

    Returns:
        0 hits (miss or zero-length line), 1 hit (tangent) or 2 hits ordered by t
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    fx = p1.x - center.x
    fy = p1.y - center.y

    a = dx * dx + dy * dy
    if a < PARALLEL_EPSILON:
        return []
    b = 2 * (fx * dx + fy * dy)
    c = fx * fx + fy * fy - radius * radius

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        return []

    root = math.sqrt(discriminant)
    t1 = (-b - root) / (2 * a)
    t2 = (-b + root) / (2 * a)
    hits = [LineHit(Vec2(p1.x + t1 * dx, p1.y + t1 * dy), t1)]
    if abs(t2 - t1) > ROOT_EPSILON:
        hits.append(LineHit(Vec2(p1.x + t2 * dx, p1.y + t2 * dy), t2))
    return hits


def parameter_on_segment(point: Vec2, a: Vec2, b: Vec2) -> Optional[float]:
    """Parameter of ``point`` along (a, b) measured on the dominant axis; None for zero length."""
    dx = b.x - a.x
    dy = b.y - a.y
    if math.hypot(dx, dy) < PARALLEL_EPSILON:
        return None
    if abs(dx) > abs(dy):
        return (point.x - a.x) / dx
    return (point.y - a.y) / dy


def is_on_segment(point: Vec2, a: Vec2, b: Vec2) -> bool:
    """True when a point known to be on line (a, b) lies within the segment, with a small margin."""
    t = parameter_on_segment(point, a, b)
    if t is None:
        return False
    return -SEGMENT_MARGIN <= t <= 1 + SEGMENT_MARGIN


def is_on_arc(
    point: Vec2,
    center: Vec2,
    start_angle: float,
    end_angle: float,
    tolerance: float = ARC_ANGLE_TOLERANCE,
) -> bool:
    """
    Angular containment test for a counter-clockwise arc (degrees).

    Handles the wraparound case where the normalized start angle is greater
    than the normalized end angle.
    """
    angle = normalize_degrees(math.degrees(math.atan2(point.y - center.y, point.x - center.x)))
    start = normalize_degrees(start_angle)
    end = normalize_degrees(end_angle)
    if start <= end:
        return start - tolerance <= angle <= end + tolerance
    return angle >= start - tolerance or angle <= end + tolerance


def parameter_on_arc(
    point: Vec2, center: Vec2, start_angle: float, end_angle: float
) -> Optional[float]:
    """Fraction of the counter-clockwise sweep at which ``point``'s angle lies."""
    start = normalize_degrees(start_angle)
    end = normalize_degrees(end_angle)
    if end <= start:
        end += 360.0
    sweep = end - start
    if sweep < PARALLEL_EPSILON:
        return None
    angle = normalize_degrees(math.degrees(math.atan2(point.y - center.y, point.x - center.x)))
    if angle < start:
        angle += 360.0
    return (angle - start) / sweep


def circle_circle_intersection(
    c1: Vec2, r1: float, c2: Vec2, r2: float
) -> List[Vec2]:
    """
    Intersections of two circles.

    Returns:
        0 points (separate, nested or concentric), 1 point (tangent) or 2 points
    """
    d = c1.distance(c2)
    if d < PARALLEL_EPSILON:
        return []
    if d > r1 + r2 + ROOT_EPSILON or d < abs(r1 - r2) - ROOT_EPSILON:
        return []

    a = (r1 * r1 - r2 * r2 + d * d) / (2 * d)
    h = math.sqrt(max(r1 * r1 - a * a, 0.0))
    axis = (c2 - c1) / d
    base = c1 + axis * a
    if h < ROOT_EPSILON:
        return [base]
    offset = axis.orthogonal() * h
    return [base + offset, base - offset]
