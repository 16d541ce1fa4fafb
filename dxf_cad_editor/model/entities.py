"""Entity variants of the editable drawing model.

Every entity is a dataclass deriving from ``Entity``. The ``dxftype`` class
attribute is the variant tag used by the codec, the geometry helpers and the
commands to dispatch on entity kind.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple

from ezdxf.math import Vec2

# ACI sentinels: resolve from context instead of the palette
BYBLOCK = 0
BYLAYER = 256


@dataclass
class Entity:
    handle: Optional[str] = None
    layer: str = "0"
    color: Optional[int] = None
    linetype: Optional[str] = None

    dxftype: ClassVar[str] = ""


@dataclass
class Line(Entity):
    start: Vec2 = field(default_factory=Vec2)
    end: Vec2 = field(default_factory=Vec2)

    dxftype: ClassVar[str] = "LINE"

    @property
    def length(self) -> float:
        return self.start.distance(self.end)


@dataclass
class Circle(Entity):
    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0

    dxftype: ClassVar[str] = "CIRCLE"


@dataclass
class Arc(Entity):
    """Counter-clockwise arc from ``start_angle`` to ``end_angle`` (degrees).

    ``end_angle`` may be numerically smaller than ``start_angle``; the arc
    then wraps through 0 degrees.
    """

    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0
    start_angle: float = 0.0
    end_angle: float = 360.0

    dxftype: ClassVar[str] = "ARC"

    @property
    def start_point(self) -> Vec2:
        return self.center + Vec2.from_deg_angle(self.start_angle, self.radius)

    @property
    def end_point(self) -> Vec2:
        return self.center + Vec2.from_deg_angle(self.end_angle, self.radius)


@dataclass
class Polyline(Entity):
    vertices: List[Vec2] = field(default_factory=list)
    closed: bool = False

    dxftype: ClassVar[str] = "LWPOLYLINE"

    def segments(self) -> List[Tuple[Vec2, Vec2]]:
        """(start, end) pairs, including the closing segment of a closed polyline."""
        pts = self.vertices
        pairs = [(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
        if self.closed and len(pts) > 2:
            pairs.append((pts[-1], pts[0]))
        return pairs


@dataclass
class Text(Entity):
    position: Vec2 = field(default_factory=Vec2)
    text: str = ""
    height: float = 1.0
    rotation: float = 0.0  # degrees
    alignment: int = 0  # group code 72, horizontal justification

    dxftype: ClassVar[str] = "TEXT"


@dataclass
class Attrib(Text):
    tag: str = ""

    dxftype: ClassVar[str] = "ATTRIB"


@dataclass
class Point(Entity):
    position: Vec2 = field(default_factory=Vec2)

    dxftype: ClassVar[str] = "POINT"


@dataclass
class Insert(Entity):
    """Instance of a block. ``block_name`` is a lookup key, the block may be missing."""

    block_name: str = ""
    position: Vec2 = field(default_factory=Vec2)
    scale: Vec2 = field(default_factory=lambda: Vec2(1, 1))
    rotation: float = 0.0  # degrees

    dxftype: ClassVar[str] = "INSERT"


@dataclass
class Ellipse(Entity):
    center: Vec2 = field(default_factory=Vec2)
    major_axis: Vec2 = field(default_factory=lambda: Vec2(1, 0))  # relative to center
    ratio: float = 1.0  # minor / major
    start_param: float = 0.0  # radians
    end_param: float = math.tau  # radians

    dxftype: ClassVar[str] = "ELLIPSE"


@dataclass
class Spline(Entity):
    degree: int = 3
    control_points: List[Vec2] = field(default_factory=list)
    fit_points: List[Vec2] = field(default_factory=list)
    knots: List[float] = field(default_factory=list)
    closed: bool = False

    dxftype: ClassVar[str] = "SPLINE"


@dataclass
class Hatch(Entity):
    boundary_paths: List[List[Vec2]] = field(default_factory=list)
    solid: bool = True
    pattern_name: str = "SOLID"

    dxftype: ClassVar[str] = "HATCH"


@dataclass
class Dimension(Entity):
    definition_point: Vec2 = field(default_factory=Vec2)
    middle_point: Vec2 = field(default_factory=Vec2)
    text: str = ""
    rotation: float = 0.0  # degrees
    dimtype: int = 0
    first_point: Optional[Vec2] = None
    second_point: Optional[Vec2] = None

    dxftype: ClassVar[str] = "DIMENSION"


@dataclass
class Solid(Entity):
    """Filled quad in file vertex order; a triangle repeats its last point."""

    points: List[Vec2] = field(default_factory=list)

    dxftype: ClassVar[str] = "SOLID"

    def outline(self) -> List[Vec2]:
        """Points in drawing order (0, 1, 3, 2), triangle duplicates removed."""
        if not self.points:
            return []
        pts = list(self.points)
        while len(pts) < 4:
            pts.append(pts[-1])
        ordered = [pts[0], pts[1], pts[3], pts[2]]
        if ordered[2].isclose(ordered[3]):
            ordered.pop()
        return ordered


@dataclass
class Leader(Entity):
    vertices: List[Vec2] = field(default_factory=list)
    has_arrowhead: bool = True

    dxftype: ClassVar[str] = "LEADER"


ENTITY_TYPES = (
    Line,
    Circle,
    Arc,
    Polyline,
    Text,
    Attrib,
    Point,
    Insert,
    Ellipse,
    Spline,
    Hatch,
    Dimension,
    Solid,
    Leader,
)
