"""
Collaborators consumed by the editor and the commands.

The console shows text and the current prompt. The presentation owns
preview drawing, entity commits, selection and the view. Both are
structural protocols: ``DrawingView`` is the in-process presentation used
by the CLI and the tests, a GUI host supplies its own.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from ezdxf.math import Vec2

from dxf_cad_editor.model.drawing import Bounds, EditRecord
from dxf_cad_editor.model.entities import Entity

# Console message kinds
COMMAND = "command"
RESPONSE = "response"
PROMPT = "prompt"
SUCCESS = "success"
ERROR = "error"


class Console(Protocol):
    def print(self, text: str, kind: str = RESPONSE) -> None:
        ...

    def set_prompt(self, text: str) -> None:
        ...


class Presentation(Protocol):
    # Preview primitives; none of them touch the drawing
    def preview_line(self, start: Vec2, end: Vec2) -> None:
        ...

    def preview_circle(self, center: Vec2, radius: float) -> None:
        ...

    def preview_rectangle(self, corner1: Vec2, corner2: Vec2) -> None:
        ...

    def preview_arc(self, center: Vec2, radius: float, start_angle: float, end_angle: float) -> None:
        ...

    def preview_arc_3_points(self, p1: Vec2, p2: Vec2, p3: Vec2) -> None:
        ...

    def preview_polyline(self, points: Sequence[Vec2]) -> None:
        ...

    def preview_dimension(self, p1: Vec2, p2: Vec2, location: Vec2, kind: str) -> None:
        ...

    def mark_point(self, point: Vec2) -> None:
        ...

    def clear_preview(self) -> None:
        ...

    # Entity commits
    def add_entity(self, entity: Entity) -> EditRecord:
        ...

    def delete_entity(self, entity: Entity) -> EditRecord:
        ...

    def replace_entity(self, old: Entity, new: Entity) -> EditRecord:
        ...

    # Selection
    def selected_entities(self) -> List[Entity]:
        ...

    def clear_selection(self) -> None:
        ...

    def select_at(self, point: Vec2) -> List[Entity]:
        ...

    def pick_entity(self, point: Vec2) -> Optional[Entity]:
        ...

    def visible_entities(self) -> List[Entity]:
        ...

    def is_layer_locked(self, name: str) -> bool:
        ...

    # View
    def fit_view(self, padding: float) -> None:
        ...

    def zoom_extents(self) -> None:
        ...

    def zoom_to_window(self, corner1: Vec2, corner2: Vec2) -> Bounds:
        ...
