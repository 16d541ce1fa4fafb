"""
Live previews ("jigs") shown while a point or distance request is pending.

A jig receives the candidate value on every pointer move and forwards
preview geometry to the presentation. It never touches the drawing, and the
editor calls ``clear`` exactly once when the request resolves.
"""

from __future__ import annotations

import math
from typing import List, Optional, Protocol, Sequence, Union

from ezdxf.math import Vec2

from dxf_cad_editor.editor.context import Presentation

JigValue = Union[Vec2, float]


class Jig(Protocol):
    def update(self, value: JigValue) -> None:
        ...

    def clear(self) -> None:
        ...


class PreviewJig:
    """Base for the built-in jigs; ``clear`` drops whatever preview is shown."""

    def __init__(self, presentation: Presentation):
        self.presentation = presentation

    def update(self, value: JigValue) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        self.presentation.clear_preview()


class LineJig(PreviewJig):
    """Rubber band line from a fixed start point."""

    def __init__(self, presentation: Presentation, start: Vec2):
        super().__init__(presentation)
        self.start = start

    def set_start_point(self, point: Vec2) -> None:
        self.start = point

    def update(self, value: JigValue) -> None:
        if isinstance(value, Vec2):
            self.presentation.preview_line(self.start, value)


class CircleJig(PreviewJig):
    """Circle about a fixed center; accepts a point on the circle or a radius."""

    def __init__(self, presentation: Presentation, center: Vec2):
        super().__init__(presentation)
        self.center = center

    def update(self, value: JigValue) -> None:
        if isinstance(value, Vec2):
            radius = self.center.distance(value)
        else:
            radius = float(value)
        self.presentation.preview_circle(self.center, radius)


class RectangleJig(PreviewJig):
    def __init__(self, presentation: Presentation, first_corner: Vec2):
        super().__init__(presentation)
        self.first_corner = first_corner

    def update(self, value: JigValue) -> None:
        if isinstance(value, Vec2):
            self.presentation.preview_rectangle(self.first_corner, value)


class Arc3PointJig(PreviewJig):
    """Line to the cursor until the second point is known, then the arc through all three."""

    def __init__(self, presentation: Presentation, start: Vec2):
        super().__init__(presentation)
        self.start = start
        self.second: Optional[Vec2] = None

    def set_second_point(self, point: Vec2) -> None:
        self.second = point

    def update(self, value: JigValue) -> None:
        if not isinstance(value, Vec2):
            return
        if self.second is None:
            self.presentation.preview_line(self.start, value)
        else:
            self.presentation.preview_arc_3_points(self.start, self.second, value)


class ArcCenterJig(PreviewJig):
    """Radius line from the center, then the arc from the start angle to the cursor."""

    def __init__(self, presentation: Presentation, center: Vec2):
        super().__init__(presentation)
        self.center = center
        self.start: Optional[Vec2] = None
        self.radius = 0.0
        self.start_angle = 0.0

    def set_start_point(self, point: Vec2) -> None:
        self.start = point
        self.radius = self.center.distance(point)
        self.start_angle = math.degrees(math.atan2(point.y - self.center.y, point.x - self.center.x))

    def update(self, value: JigValue) -> None:
        if not isinstance(value, Vec2):
            return
        if self.start is None:
            self.presentation.preview_line(self.center, value)
            return
        end_angle = math.degrees(math.atan2(value.y - self.center.y, value.x - self.center.x))
        self.presentation.preview_arc(self.center, self.radius, self.start_angle, end_angle)


class PolylineJig(PreviewJig):
    """Every committed vertex plus a rubber band segment to the cursor."""

    def __init__(self, presentation: Presentation, points: Sequence[Vec2]):
        super().__init__(presentation)
        self.points: List[Vec2] = list(points)

    def set_points(self, points: Sequence[Vec2]) -> None:
        self.points = list(points)

    def update(self, value: JigValue) -> None:
        if isinstance(value, Vec2):
            self.presentation.preview_polyline(self.points + [value])


class DimensionJig(PreviewJig):
    """Dimension between two fixed points with the line following the cursor.

    ``kind`` is one of ``auto``, ``horizontal``, ``vertical`` or ``aligned``.
    """

    def __init__(self, presentation: Presentation, p1: Vec2, p2: Vec2, kind: str = "auto"):
        super().__init__(presentation)
        self.p1 = p1
        self.p2 = p2
        self.kind = kind

    def update(self, value: JigValue) -> None:
        if isinstance(value, Vec2):
            self.presentation.preview_dimension(self.p1, self.p2, value, self.kind)
