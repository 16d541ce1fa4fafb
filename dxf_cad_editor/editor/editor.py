"""
Suspend/resume input protocol used by commands.

A command awaits one request at a time (``get_point``, ``get_distance``,
``get_selection``, ``get_entity``). The request stays pending until the host
feeds typed text, a click or a cancel into the ``handle_*`` methods, which
resolve it with a ``PromptResult``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from ezdxf.math import Vec2

from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.editor.context import ERROR, RESPONSE, Console, Presentation
from dxf_cad_editor.editor.coordinates import (
    CoordinateError,
    format_point,
    is_coordinate_input,
    parse_coordinate,
    parse_number,
)
from dxf_cad_editor.editor.prompts import (
    CANCELLED,
    EMPTY,
    DistanceOptions,
    EntityOptions,
    EntityPick,
    PointOptions,
    PromptOptions,
    PromptResult,
    PromptStatus,
    SelectionOptions,
    match_keyword,
)
from dxf_cad_editor.errors import CommandCancelled, PendingRequestError

logger = logging.getLogger(__name__)

POINT = "point"
DISTANCE = "distance"
SELECTION = "selection"
ENTITY = "entity"


@dataclass
class _Request:
    kind: str
    options: PromptOptions
    future: "asyncio.Future[PromptResult]"

    @property
    def base_point(self) -> Optional[Vec2]:
        return getattr(self.options, "base_point", None)

    @property
    def jig(self):
        return getattr(self.options, "jig", None)


class Editor:
    """
    Input side of a command session.

    Args:
        console: Receives prompts and echo lines
        presentation: Selection and picking for selection/entity requests
        settings: Editor settings (defaults to ``EditorSettings()``)

    Example:
        result = await editor.get_point(PointOptions("Specify first point"))
        if result.ok:
            start = result.value
    """

    def __init__(
        self,
        console: Console,
        presentation: Presentation,
        settings: Optional[EditorSettings] = None,
    ):
        self.console = console
        self.presentation = presentation
        self.settings = settings or EditorSettings()
        self._pending: Optional[_Request] = None
        self._cancelled = False

    # Requests

    @property
    def is_waiting(self) -> bool:
        return self._pending is not None

    @property
    def pending_kind(self) -> Optional[str]:
        return self._pending.kind if self._pending else None

    async def _request(self, kind: str, options: PromptOptions) -> PromptResult:
        if self._pending is not None:
            raise PendingRequestError(
                f"{kind} request issued while a {self._pending.kind} request is pending"
            )
        future = asyncio.get_running_loop().create_future()
        self._pending = _Request(kind, options, future)
        if kind == SELECTION:
            count = len(self.presentation.selected_entities())
            self.console.print(f"{count} object(s) currently selected", RESPONSE)
        self.console.set_prompt(options.prompt)
        return await future

    async def get_point(self, options: PointOptions) -> PromptResult:
        return await self._request(POINT, options)

    async def get_distance(self, options: DistanceOptions) -> PromptResult:
        return await self._request(DISTANCE, options)

    async def get_selection(self, options: Optional[SelectionOptions] = None) -> PromptResult:
        return await self._request(SELECTION, options or SelectionOptions())

    async def get_entity(self, options: EntityOptions) -> PromptResult:
        return await self._request(ENTITY, options)

    def _resolve(self, result: PromptResult) -> None:
        request = self._pending
        if request is None:
            return
        self._pending = None
        if request.jig is not None:
            request.jig.clear()
        if not request.future.done():
            request.future.set_result(result)

    # Input sources

    def handle_text_input(self, text: str) -> None:
        """Typed input: keyword, coordinate, number or an empty confirmation."""
        request = self._pending
        if request is None:
            return
        options = request.options
        s = text.strip()

        if not s:
            self._handle_empty(request)
            return

        keyword = match_keyword(s, options.keywords)
        if keyword is not None:
            self._resolve(PromptResult(PromptStatus.KEYWORD, keyword=keyword.global_name))
            return

        if request.kind == POINT:
            self._handle_point_text(request, s)
        elif request.kind == DISTANCE:
            self._handle_distance_text(request, s)
        elif is_coordinate_input(s):
            # Typed coordinates stand in for a click while selecting
            self.handle_click(parse_coordinate(s))
        else:
            self.console.print("Click to select objects, press Enter when done", RESPONSE)

    def _handle_empty(self, request: _Request) -> None:
        options = request.options
        if request.kind == SELECTION:
            selected = self.presentation.selected_entities()
            if not selected and options.allow_none:
                self._resolve(EMPTY)
            else:
                self._resolve(PromptResult(PromptStatus.OK, value=selected))
            return
        if request.kind == DISTANCE and options.default_value is not None:
            self._resolve(PromptResult(PromptStatus.OK, value=float(options.default_value)))
            return
        if options.allow_none:
            self._resolve(EMPTY)

    def _handle_point_text(self, request: _Request, text: str) -> None:
        try:
            point = parse_coordinate(text, request.base_point)
        except CoordinateError:
            self.console.print("Invalid point. Use x,y or @x,y or @dist<angle", ERROR)
            return
        self.console.print(f"Point: {format_point(point)}", RESPONSE)
        self._resolve(PromptResult(PromptStatus.OK, value=point))

    def _handle_distance_text(self, request: _Request, text: str) -> None:
        value = parse_number(text)
        if value is None and request.base_point is not None and is_coordinate_input(text):
            value = request.base_point.distance(parse_coordinate(text, request.base_point))
        if value is None:
            self.console.print("Invalid distance. Enter a number or click a point.", ERROR)
            return
        self.console.print(f"Distance: {value:.4f}", RESPONSE)
        self._resolve(PromptResult(PromptStatus.OK, value=value))

    def handle_click(self, point: Vec2) -> None:
        """A world-space point delivered by the presentation."""
        request = self._pending
        if request is None:
            return

        if request.kind == POINT:
            self.console.print(f"Point: {format_point(point)}", RESPONSE)
            self._resolve(PromptResult(PromptStatus.OK, value=point))
        elif request.kind == DISTANCE:
            base = request.base_point
            if base is None:
                return
            d = base.distance(point)
            self.console.print(f"Distance: {d:.4f}", RESPONSE)
            self._resolve(PromptResult(PromptStatus.OK, value=d))
        elif request.kind == SELECTION:
            selected = self.presentation.select_at(point)
            self.console.print(f"{len(selected)} object(s) selected", RESPONSE)
        elif request.kind == ENTITY:
            entity = self.presentation.pick_entity(point)
            if entity is None:
                self.console.print("No object found", ERROR)
                return
            self._resolve(PromptResult(PromptStatus.OK, value=EntityPick(entity, point)))

    def handle_mouse_move(self, point: Vec2) -> None:
        request = self._pending
        if request is None or request.jig is None:
            return
        value: Union[Vec2, float] = point
        if request.kind == DISTANCE:
            if request.base_point is None:
                return
            value = request.base_point.distance(point)
        elif request.kind != POINT:
            return
        request.jig.update(value)

    def handle_cancel(self) -> None:
        self._cancelled = True
        self._resolve(CANCELLED)

    # Command lifecycle hooks

    def begin_command(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def check_cancelled(self) -> None:
        if self._cancelled:
            raise CommandCancelled()

    def release(self) -> None:
        """Drop any request left pending by a finished or failed command."""
        if self._pending is not None:
            logger.debug("Releasing pending %s request", self._pending.kind)
            self._resolve(CANCELLED)
