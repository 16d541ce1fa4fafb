"""PEDIT: close, open, join, reverse and vertex editing of polylines."""

from __future__ import annotations

import dataclasses
from typing import List, Optional

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, ERROR, SUCCESS
from dxf_cad_editor.editor.prompts import (
    EntityOptions,
    Keyword,
    PointOptions,
    SelectionOptions,
)
from dxf_cad_editor.model.entities import Entity, Line, Polyline

YES = Keyword("Yes", "YES", "Y")
NO = Keyword("No", "NO", "N")
JOIN = Keyword("Join", "JOIN", "J")
EDIT_VERTEX = Keyword("Edit vertex", "EDIT", "E")
REVERSE = Keyword("Reverse", "REVERSE", "R")

VERTEX_KEYWORDS = [
    Keyword("Next", "NEXT", "N"),
    Keyword("Previous", "PREVIOUS", "P"),
    Keyword("Break", "BREAK", "B"),
    Keyword("Insert", "INSERT", "I"),
    Keyword("Move", "MOVE", "M"),
    Keyword("eXit", "EXIT", "X"),
]


def _close_enough(a: Vec2, b: Vec2, tolerance: float) -> bool:
    return a.distance(b) < tolerance


def join_points(
    vertices: List[Vec2], other: List[Vec2], tolerance: float
) -> Optional[List[Vec2]]:
    """
    Attach the open path ``other`` to either end of ``vertices``.

    The shared endpoint is kept once. ``other`` is reversed when needed.

    Returns:
        The joined vertex list, or None when no endpoints touch
    """
    if len(other) < 2:
        return None
    if _close_enough(vertices[-1], other[0], tolerance):
        return vertices + other[1:]
    if _close_enough(vertices[-1], other[-1], tolerance):
        return vertices + other[-2::-1]
    if _close_enough(vertices[0], other[-1], tolerance):
        return other[:-1] + vertices
    if _close_enough(vertices[0], other[0], tolerance):
        return other[:0:-1] + vertices
    return None


def _path_of(entity: Entity) -> Optional[List[Vec2]]:
    if isinstance(entity, Line):
        return [entity.start, entity.end]
    if isinstance(entity, Polyline) and not entity.closed:
        return list(entity.vertices)
    return None


class _PolylineEdit:
    """The polyline under edit; every change replaces the drawing entity."""

    def __init__(self, ctx: CommandContext, polyline: Polyline):
        self.ctx = ctx
        self.polyline = polyline

    @property
    def vertices(self) -> List[Vec2]:
        return self.polyline.vertices

    def update(self, **changes) -> None:
        new = dataclasses.replace(self.polyline, **changes)
        self.ctx.replace(self.polyline, new)
        self.polyline = new


async def _select_polyline(ctx: CommandContext) -> Optional[Polyline]:
    pick = await ctx.editor.get_entity(EntityOptions("Select polyline", allow_none=True))
    if not pick.ok:
        return None
    entity = pick.value.entity

    if ctx.is_locked(entity):
        ctx.print(f'Object is on locked layer "{entity.layer}"', ERROR)
        return None
    if isinstance(entity, Polyline):
        return entity
    if not isinstance(entity, Line):
        ctx.print(f"Cannot edit {entity.dxftype} with PEDIT", ERROR)
        return None

    ctx.print("Object selected is not a polyline.")
    answer = await ctx.editor.get_point(
        PointOptions("Do you want to turn it into one", keywords=[YES, NO])
    )
    if not answer.is_keyword("YES"):
        return None
    polyline = Polyline(
        layer=entity.layer,
        color=entity.color,
        linetype=entity.linetype,
        vertices=[entity.start, entity.end],
    )
    ctx.replace(entity, polyline)
    ctx.print("Line converted to polyline")
    return polyline


async def _join(ctx: CommandContext, edit: _PolylineEdit) -> None:
    ctx.print("Select objects to join:")
    result = await ctx.editor.get_selection(SelectionOptions("Select objects to join"))
    if not result.ok:
        ctx.print("No objects could be joined")
        return

    vertices = list(edit.vertices)
    pending = [
        e for e in result.value
        if e is not edit.polyline and not ctx.is_locked(e) and _path_of(e) is not None
    ]
    joined: List[Entity] = []
    progress = True
    # repeat until stable so that the selection order does not matter
    while pending and progress:
        progress = False
        for entity in list(pending):
            merged = join_points(vertices, _path_of(entity), ctx.settings.join_tolerance)
            if merged is None:
                continue
            vertices = merged
            pending.remove(entity)
            joined.append(entity)
            progress = True

    ctx.presentation.clear_selection()
    if not joined:
        ctx.print("No objects could be joined")
        return
    for entity in joined:
        ctx.delete(entity)
    edit.update(vertices=vertices)
    ctx.print(f"{len(joined)} object(s) joined", SUCCESS)


def _show_vertex(ctx: CommandContext, edit: _PolylineEdit, index: int) -> None:
    vertex = edit.vertices[index]
    ctx.presentation.clear_preview()
    ctx.presentation.mark_point(vertex)
    ctx.print(f"Vertex {index + 1} of {len(edit.vertices)}: ({vertex.x:.4f}, {vertex.y:.4f})")


async def _edit_vertices(ctx: CommandContext, edit: _PolylineEdit) -> None:
    if not edit.vertices:
        ctx.print("Polyline has no vertices", ERROR)
        return
    index = 0
    _show_vertex(ctx, edit, index)

    while True:
        ctx.check_cancelled()
        result = await ctx.editor.get_point(
            PointOptions(
                "Enter a vertex editing option <N>",
                keywords=VERTEX_KEYWORDS,
                allow_none=True,
            )
        )
        if result.cancelled or result.is_keyword("EXIT"):
            break
        count = len(edit.vertices)

        if result.empty or result.is_keyword("NEXT"):
            index = (index + 1) % count
        elif result.is_keyword("PREVIOUS"):
            index = (index - 1) % count
        elif result.is_keyword("INSERT"):
            location = await ctx.editor.get_point(
                PointOptions("Specify location for new vertex")
            )
            if not location.ok:
                continue
            vertices = list(edit.vertices)
            vertices.insert(index + 1, location.value)
            edit.update(vertices=vertices)
            index += 1
            ctx.print("Vertex inserted", SUCCESS)
        elif result.is_keyword("MOVE"):
            location = await ctx.editor.get_point(
                PointOptions("Specify new location for vertex", base_point=edit.vertices[index])
            )
            if not location.ok:
                continue
            vertices = list(edit.vertices)
            vertices[index] = location.value
            edit.update(vertices=vertices)
            ctx.print("Vertex moved", SUCCESS)
        elif result.is_keyword("BREAK"):
            if count <= 2:
                ctx.print("Cannot delete - polyline needs at least 2 vertices", ERROR)
                continue
            vertices = list(edit.vertices)
            del vertices[index]
            edit.update(vertices=vertices)
            index = min(index, len(vertices) - 1)
            ctx.print("Vertex deleted", SUCCESS)
        else:
            continue
        _show_vertex(ctx, edit, index)

    ctx.presentation.clear_preview()


async def pedit_command(ctx: CommandContext) -> None:
    ctx.print("PEDIT", COMMAND)
    polyline = await _select_polyline(ctx)
    if polyline is None:
        return
    edit = _PolylineEdit(ctx, polyline)

    while True:
        ctx.check_cancelled()
        if edit.polyline.closed:
            toggle = Keyword("Open", "OPEN", "O")
        else:
            toggle = Keyword("Close", "CLOSE", "C")
        result = await ctx.editor.get_point(
            PointOptions(
                "Enter an option",
                keywords=[toggle, JOIN, EDIT_VERTEX, REVERSE],
                allow_none=True,
            )
        )
        if result.is_keyword("CLOSE"):
            edit.update(closed=True)
            ctx.print("Polyline closed", SUCCESS)
        elif result.is_keyword("OPEN"):
            edit.update(closed=False)
            ctx.print("Polyline opened", SUCCESS)
        elif result.is_keyword("JOIN"):
            await _join(ctx, edit)
        elif result.is_keyword("EDIT"):
            await _edit_vertices(ctx, edit)
        elif result.is_keyword("REVERSE"):
            edit.update(vertices=list(reversed(edit.vertices)))
            ctx.print("Polyline reversed", SUCCESS)
        elif result.ok:
            continue
        else:
            break
