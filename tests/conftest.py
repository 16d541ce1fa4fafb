from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from _editor_helpers import Session

from dxf_cad_editor.model.drawing import Drawing, Layer
from dxf_cad_editor.model.entities import Circle, Line, Polyline, Text


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def sample_drawing() -> Drawing:
    """A small plan: two walls, a closed room outline, a column and a label."""
    drawing = Drawing()
    drawing.layers["WALLS"] = Layer("WALLS", color=1)
    drawing.layers["LOCKED"] = Layer("LOCKED", color=3, locked=True)
    drawing.layers["HIDDEN"] = Layer("HIDDEN", off=True)
    drawing.add_entity(Line(layer="WALLS", start=Vec2(0, 0), end=Vec2(100, 0)))
    drawing.add_entity(Line(layer="WALLS", start=Vec2(0, 0), end=Vec2(0, 50)))
    drawing.add_entity(
        Polyline(
            layer="WALLS",
            vertices=[Vec2(0, 0), Vec2(40, 0), Vec2(40, 30), Vec2(0, 30)],
            closed=True,
        )
    )
    drawing.add_entity(Circle(layer="0", center=Vec2(70, 20), radius=5))
    drawing.add_entity(Text(layer="0", position=Vec2(10, 10), text="Kitchen", height=2.5))
    return drawing
