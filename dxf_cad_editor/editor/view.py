"""Headless presentation over a Drawing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.geometry.spatial import find_entities_near_point
from dxf_cad_editor.model.drawing import Bounds, Drawing, EditRecord
from dxf_cad_editor.model.entities import Entity

logger = logging.getLogger(__name__)

EditListener = Callable[[EditRecord], None]


@dataclass(frozen=True)
class PreviewShape:
    """Preview currently shown: the shape name and the arguments it was drawn with."""

    kind: str
    args: Tuple


@dataclass(frozen=True)
class ZoomRequest:
    kind: str  # "fit", "extents" or "window"
    bounds: Bounds


class DrawingView:
    """
    In-process ``Presentation`` for a Drawing.

    Nothing is rendered: the view records what a GUI would draw (the preview
    shape, point markers and the visible window) so commands can be run and
    inspected without a host application. Every commit is appended to
    ``edit_log`` and passed to the ``on_edit`` listeners.
    """

    def __init__(self, drawing: Drawing, settings: Optional[EditorSettings] = None):
        self.drawing = drawing
        self.settings = settings or EditorSettings()
        self.preview: Optional[PreviewShape] = None
        self.markers: List[Vec2] = []
        self.window: Bounds = drawing.bounds
        self.zoom_requests: List[ZoomRequest] = []
        self.edit_log: List[EditRecord] = []
        self._selection: List[Entity] = []
        self._listeners: List[EditListener] = []

    # Change notification

    def on_edit(self, listener: EditListener) -> None:
        self._listeners.append(listener)

    def _notify(self, record: EditRecord) -> EditRecord:
        if record.empty:
            return record
        self.edit_log.append(record)
        for listener in self._listeners:
            listener(record)
        return record

    # Preview primitives

    def _show(self, kind: str, *args) -> None:
        self.preview = PreviewShape(kind, args)

    def preview_line(self, start: Vec2, end: Vec2) -> None:
        self._show("line", start, end)

    def preview_circle(self, center: Vec2, radius: float) -> None:
        self._show("circle", center, radius)

    def preview_rectangle(self, corner1: Vec2, corner2: Vec2) -> None:
        self._show("rectangle", corner1, corner2)

    def preview_arc(self, center: Vec2, radius: float, start_angle: float, end_angle: float) -> None:
        self._show("arc", center, radius, start_angle, end_angle)

    def preview_arc_3_points(self, p1: Vec2, p2: Vec2, p3: Vec2) -> None:
        self._show("arc3p", p1, p2, p3)

    def preview_polyline(self, points: Sequence[Vec2]) -> None:
        self._show("polyline", tuple(points))

    def preview_dimension(self, p1: Vec2, p2: Vec2, location: Vec2, kind: str) -> None:
        self._show("dimension", p1, p2, location, kind)

    def mark_point(self, point: Vec2) -> None:
        self.markers.append(point)

    def clear_preview(self) -> None:
        self.preview = None
        self.markers.clear()

    # Entity commits

    def add_entity(self, entity: Entity) -> EditRecord:
        return self._notify(self.drawing.add_entity(entity))

    def delete_entity(self, entity: Entity) -> EditRecord:
        self._deselect(entity)
        return self._notify(self.drawing.remove_entity(entity))

    def replace_entity(self, old: Entity, new: Entity) -> EditRecord:
        self._deselect(old)
        return self._notify(self.drawing.replace_entity(old, new))

    # Selection

    def _deselect(self, entity: Entity) -> None:
        self._selection = [e for e in self._selection if e is not entity]

    def selected_entities(self) -> List[Entity]:
        return list(self._selection)

    def select(self, entities: Sequence[Entity]) -> None:
        """Replace the selection (pre-selection for MOVE, COPY and ERASE)."""
        self._selection = [e for e in entities if self.drawing.contains(e)]

    def clear_selection(self) -> None:
        self._selection = []

    def pick_entity(self, point: Vec2) -> Optional[Entity]:
        """Closest visible entity within the pick aperture."""
        hits = find_entities_near_point(self.visible_entities(), point, self.settings.pick_aperture)
        return hits[0][0] if hits else None

    def select_at(self, point: Vec2) -> List[Entity]:
        """Toggle the entity under ``point`` in the selection; returns the new selection."""
        entity = self.pick_entity(point)
        if entity is not None:
            if any(e is entity for e in self._selection):
                self._deselect(entity)
            else:
                self._selection.append(entity)
        return self.selected_entities()

    def visible_entities(self) -> List[Entity]:
        return self.drawing.visible_entities()

    def is_layer_locked(self, name: str) -> bool:
        return self.drawing.is_layer_locked(name)

    # View

    def _set_window(self, kind: str, bounds: Bounds) -> Bounds:
        self.window = bounds
        self.zoom_requests.append(ZoomRequest(kind, bounds))
        logger.debug("View %s: %s", kind, bounds.as_list())
        return bounds

    def fit_view(self, padding: float) -> None:
        self._set_window("fit", self.drawing.bounds.expanded(padding))

    def zoom_extents(self) -> None:
        self._set_window("extents", self.drawing.bounds)

    def zoom_to_window(self, corner1: Vec2, corner2: Vec2) -> Bounds:
        return self._set_window("window", Bounds.from_corners(corner1, corner2))
