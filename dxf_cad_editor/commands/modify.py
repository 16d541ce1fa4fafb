"""Modify commands: MOVE, COPY, ERASE and OFFSET."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, ERROR, SUCCESS
from dxf_cad_editor.editor.jigs import LineJig
from dxf_cad_editor.editor.prompts import (
    DistanceOptions,
    EntityOptions,
    Keyword,
    PointOptions,
    SelectionOptions,
)
from dxf_cad_editor.geometry.construct import (
    offset_line,
    offset_polyline_vertices,
    offset_radius,
    through_distance,
    translate_entity,
)
from dxf_cad_editor.geometry.spatial import distance_to_entity
from dxf_cad_editor.model.entities import Arc, Circle, Entity, Line, Polyline

OFFSET_DISTANCE_VARIABLE = "OFFSETDIST"
OFFSETTABLE = ("LINE", "CIRCLE", "ARC", "LWPOLYLINE")


def _split_locked(ctx: CommandContext, entities: List[Entity]) -> Tuple[List[Entity], int]:
    editable = [e for e in entities if not ctx.is_locked(e)]
    return editable, len(entities) - len(editable)


def _report_locked(ctx: CommandContext, locked: int) -> None:
    if locked:
        ctx.print(f"{locked} object(s) on locked layer(s) - skipped")


async def _base_point(ctx: CommandContext) -> Optional[Vec2]:
    result = await ctx.editor.get_point(PointOptions("Specify base point"))
    if not result.ok:
        return None
    ctx.presentation.mark_point(result.value)
    return result.value


# MOVE

async def move_command(ctx: CommandContext) -> None:
    ctx.print("MOVE", COMMAND)
    selected = ctx.presentation.selected_entities()
    if not selected:
        ctx.print("No objects selected. Select objects first.", ERROR)
        return
    ctx.print(f"{len(selected)} object(s) selected")

    base = await _base_point(ctx)
    if base is None:
        return
    second = await ctx.editor.get_point(
        PointOptions(
            "Specify second point or <displacement>",
            base_point=base,
            jig=LineJig(ctx.presentation, base),
        )
    )
    if not second.ok:
        return

    delta = second.value - base
    editable, locked = _split_locked(ctx, selected)
    for entity in editable:
        ctx.replace(entity, translate_entity(entity, delta))
    ctx.presentation.clear_selection()
    _report_locked(ctx, locked)
    ctx.print(f"{len(editable)} object(s) moved", SUCCESS)


# COPY

async def copy_command(ctx: CommandContext) -> None:
    ctx.print("COPY", COMMAND)
    selected = ctx.presentation.selected_entities()
    if not selected:
        ctx.print("No objects selected. Select objects first.", ERROR)
        return
    ctx.print(f"{len(selected)} object(s) selected")

    base = await _base_point(ctx)
    if base is None:
        return

    total = 0
    while True:
        ctx.check_cancelled()
        if total == 0:
            options = PointOptions("Specify second point or <displacement>", allow_none=True)
        else:
            options = PointOptions(
                "Specify second point",
                keywords=[Keyword("Exit", "EXIT", "X")],
                allow_none=True,
            )
        options.base_point = base
        options.jig = LineJig(ctx.presentation, base)
        result = await ctx.editor.get_point(options)
        if not result.ok:
            break

        delta = result.value - base
        for entity in selected:
            ctx.add(translate_entity(entity, delta))
        total += len(selected)
        ctx.print(f"{len(selected)} object(s) copied")

    ctx.presentation.clear_selection()
    if total:
        ctx.print(f"Total: {total} object(s) copied", SUCCESS)
    else:
        ctx.print("Copy cancelled")


# ERASE

def _erase(ctx: CommandContext, entities: List[Entity], nothing_message: str) -> None:
    editable, locked = _split_locked(ctx, entities)
    for entity in editable:
        ctx.delete(entity)
    ctx.presentation.clear_selection()

    _report_locked(ctx, locked)
    count = len(editable)
    if count:
        ctx.print(f"{count} {'object' if count == 1 else 'objects'} erased", SUCCESS)
    elif not locked:
        ctx.print(nothing_message)


async def erase_command(ctx: CommandContext) -> None:
    ctx.print("ERASE", COMMAND)
    selected = ctx.presentation.selected_entities()
    if selected:
        _erase(ctx, selected, "No objects erased")
        return

    result = await ctx.editor.get_selection(SelectionOptions("Select objects (Enter when done)"))
    if result.cancelled:
        return
    _erase(ctx, list(result.value or []), "No objects selected")


# OFFSET

def _offset_entity(entity: Entity, distance: float, side_point: Vec2) -> Optional[Entity]:
    """Offset copy of ``entity`` on the side of ``side_point``, or None when it degenerates."""
    if isinstance(entity, Line):
        segment = offset_line(entity.start, entity.end, distance, side_point)
        if segment is None:
            return None
        return Line(layer=entity.layer, color=entity.color, linetype=entity.linetype,
                    start=segment[0], end=segment[1])
    if isinstance(entity, (Circle, Arc)):
        radius = offset_radius(entity.center, entity.radius, distance, side_point)
        if radius is None:
            return None
        copy = translate_entity(entity, Vec2())
        copy.radius = radius
        return copy
    if isinstance(entity, Polyline):
        vertices = offset_polyline_vertices(entity.vertices, entity.closed, distance, side_point)
        if vertices is None:
            return None
        return Polyline(layer=entity.layer, color=entity.color, linetype=entity.linetype,
                        vertices=vertices, closed=entity.closed)
    return None


async def _offset_settings(ctx: CommandContext) -> Optional[Tuple[float, bool, bool]]:
    """Prompt for the distance; returns (distance, through, erase) or None on cancel."""
    distance = ctx.variables.get(OFFSET_DISTANCE_VARIABLE, ctx.settings.default_offset_distance)
    through = False
    erase = False
    while True:
        ctx.check_cancelled()
        result = await ctx.editor.get_distance(
            DistanceOptions(
                f"Specify offset distance <{distance:.4f}>",
                keywords=[Keyword("Through", "THROUGH", "T"), Keyword("Erase", "ERASE", "E")],
                allow_none=True,
            )
        )
        if result.cancelled:
            return None
        if result.is_keyword("ERASE"):
            erase = not erase
            ctx.print(f"Erase source after offsetting: {'Yes' if erase else 'No'}")
            continue
        if result.is_keyword("THROUGH"):
            through = True
            ctx.print("Through mode enabled")
        elif result.ok:
            if result.value <= 0:
                ctx.print("Offset distance must be greater than zero", ERROR)
                continue
            distance = result.value
            ctx.variables[OFFSET_DISTANCE_VARIABLE] = distance
        return distance, through, erase


async def offset_command(ctx: CommandContext) -> None:
    ctx.print("OFFSET", COMMAND)
    settings = await _offset_settings(ctx)
    if settings is None:
        return
    distance, through, erase = settings

    created = 0
    while True:
        ctx.check_cancelled()
        pick = await ctx.editor.get_entity(
            EntityOptions("Select object to offset (Enter to exit)", allow_none=True)
        )
        if not pick.ok:
            break
        entity = pick.value.entity

        if ctx.is_locked(entity):
            ctx.print(f'Object is on locked layer "{entity.layer}"', ERROR)
            continue
        if entity.dxftype not in OFFSETTABLE:
            ctx.print(f"Cannot offset {entity.dxftype}", ERROR)
            continue

        message = "Specify through point" if through else "Specify point on side to offset"
        side = await ctx.editor.get_point(PointOptions(message))
        if not side.ok:
            continue

        amount = distance
        if through:
            amount = through_distance(entity, side.value)
            if amount is None:
                amount = distance_to_entity(entity, side.value)
        offset = _offset_entity(entity, amount, side.value) if amount else None
        if offset is None:
            ctx.print("Cannot create offset", ERROR)
            continue

        ctx.add(offset)
        if erase:
            ctx.delete(entity)
        created += 1
        ctx.print("Offset created", SUCCESS)

    if created:
        ctx.print(f"{created} offset(s) created", SUCCESS)
