"""TRIM and EXTEND.

Both commands work on the infinite carrier of the picked object (the line
through a LINE, the circle under an ARC) and on the bounded extent of the
cutting or boundary edges.
"""

from __future__ import annotations

import dataclasses
import math
from typing import List, Optional, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, ERROR, SUCCESS
from dxf_cad_editor.editor.prompts import EntityOptions, SelectionOptions
from dxf_cad_editor.geometry.kernel import (
    SEGMENT_MARGIN,
    circle_circle_intersection,
    infinite_line_intersection,
    is_on_arc,
    is_on_segment,
    line_circle_intersection,
    normalize_degrees,
    parameter_on_arc,
    parameter_on_segment,
)
from dxf_cad_editor.model.entities import Arc, Circle, Entity, Line

PIECE_EPSILON = 0.0001  # parameters this close to an end do not split
ANGLE_EPSILON = 1e-6


# Helper functions

def _on_edge(point: Vec2, edge: Entity) -> bool:
    if isinstance(edge, Arc):
        return is_on_arc(point, edge.center, edge.start_angle, edge.end_angle)
    return True


def carrier_intersections(target: Entity, edge: Entity) -> List[Vec2]:
    """
    Points where ``edge`` meets the carrier of ``target``.

    The carrier is unbounded (infinite line, full circle); the edge is not.
    Only LINE and ARC targets and LINE, CIRCLE and ARC edges take part.
    """
    if isinstance(target, Line):
        if isinstance(edge, Line):
            hit = infinite_line_intersection(target.start, target.end, edge.start, edge.end)
            if hit is not None and is_on_segment(hit.point, edge.start, edge.end):
                return [hit.point]
            return []
        if isinstance(edge, (Circle, Arc)):
            hits = line_circle_intersection(target.start, target.end, edge.center, edge.radius)
            return [h.point for h in hits if _on_edge(h.point, edge)]
        return []

    if isinstance(target, Arc):
        if isinstance(edge, Line):
            hits = line_circle_intersection(edge.start, edge.end, target.center, target.radius)
            return [
                h.point for h in hits if -SEGMENT_MARGIN <= h.t <= 1 + SEGMENT_MARGIN
            ]
        if isinstance(edge, (Circle, Arc)):
            points = circle_circle_intersection(
                target.center, target.radius, edge.center, edge.radius
            )
            return [p for p in points if _on_edge(p, edge)]
    return []


def _parameter(target: Entity, point: Vec2) -> Optional[float]:
    if isinstance(target, Line):
        return parameter_on_segment(point, target.start, target.end)
    if isinstance(target, Arc):
        return parameter_on_arc(point, target.center, target.start_angle, target.end_angle)
    return None


def _sweep(arc: Arc) -> float:
    sweep = normalize_degrees(arc.end_angle) - normalize_degrees(arc.start_angle)
    return sweep + 360.0 if sweep <= 0 else sweep


def cut_parameters(target: Entity, edges: List[Entity]) -> List[float]:
    """Sorted parameters strictly inside ``target`` where the edges cross it."""
    params = set()
    for edge in edges:
        if edge is target:
            continue
        for point in carrier_intersections(target, edge):
            t = _parameter(target, point)
            if t is not None and PIECE_EPSILON < t < 1 - PIECE_EPSILON:
                params.add(round(t, 9))
    return sorted(params)


def _piece(target: Entity, t0: float, t1: float) -> Entity:
    """The part of ``target`` between parameters ``t0`` and ``t1``."""
    if isinstance(target, Line):
        direction = target.end - target.start
        return dataclasses.replace(
            target,
            handle=None,
            start=target.start + direction * t0,
            end=target.start + direction * t1,
        )
    sweep = _sweep(target)
    start = normalize_degrees(target.start_angle)
    return dataclasses.replace(
        target,
        handle=None,
        start_angle=normalize_degrees(start + sweep * t0),
        end_angle=normalize_degrees(start + sweep * t1),
    )


def trim_pieces(target: Entity, cuts: List[float], pick: float) -> Optional[List[Entity]]:
    """
    Surviving pieces after removing the span of ``target`` containing ``pick``.

    Returns:
        The pieces to keep (possibly empty), or None when ``pick`` lies
        outside the object
    """
    if not 0 <= pick <= 1:
        return None
    bounds = [0.0] + cuts + [1.0]
    for seg_start, seg_end in zip(bounds, bounds[1:]):
        if seg_start <= pick <= seg_end:
            pieces = []
            if seg_start > PIECE_EPSILON:
                pieces.append(_piece(target, 0.0, seg_start))
            if seg_end < 1 - PIECE_EPSILON:
                pieces.append(_piece(target, seg_end, 1.0))
            return pieces
    return None


def extend_line(line: Line, boundary_points: List[Vec2], pick: Vec2) -> Optional[Line]:
    """Move the end of ``line`` nearer to ``pick`` onto the closest boundary point beyond it."""
    from_start = pick.distance(line.start) < pick.distance(line.end)
    best: Optional[Tuple[float, Vec2]] = None
    for point in boundary_points:
        t = parameter_on_segment(point, line.start, line.end)
        if t is None:
            continue
        if from_start and t < 0:
            gap = -t
        elif not from_start and t > 1:
            gap = t - 1
        else:
            continue
        if best is None or gap < best[0]:
            best = (gap, point)
    if best is None:
        return None
    if from_start:
        return dataclasses.replace(line, start=best[1])
    return dataclasses.replace(line, end=best[1])


def extend_arc(arc: Arc, boundary_points: List[Vec2], pick: Vec2) -> Optional[Arc]:
    """Grow the end of ``arc`` nearer to ``pick`` by the smallest angle reaching a boundary."""
    from_start = pick.distance(arc.start_point) < pick.distance(arc.end_point)
    free = 360.0 - _sweep(arc)
    best: Optional[Tuple[float, float]] = None
    for point in boundary_points:
        angle = math.degrees(math.atan2(point.y - arc.center.y, point.x - arc.center.x))
        if from_start:
            extension = normalize_degrees(arc.start_angle - angle)
        else:
            extension = normalize_degrees(angle - arc.end_angle)
        if not ANGLE_EPSILON < extension < free - ANGLE_EPSILON:
            continue
        if best is None or extension < best[0]:
            best = (extension, normalize_degrees(angle))
    if best is None:
        return None
    if from_start:
        return dataclasses.replace(arc, start_angle=best[1])
    return dataclasses.replace(arc, end_angle=best[1])


async def _select_edges(ctx: CommandContext, label: str) -> Optional[List[Entity]]:
    """Edge set for TRIM/EXTEND: a selection, or every visible object on Enter."""
    ctx.print(f"Select {label} edges (or Enter to select all):")
    result = await ctx.editor.get_selection(
        SelectionOptions(f"Select {label} edges", allow_none=True)
    )
    if result.cancelled:
        return None
    edges = list(result.value or [])
    if not edges:
        edges = ctx.presentation.visible_entities()
        ctx.print(f"All objects selected as {label} edges")
    else:
        ctx.print(f"{len(edges)} {label} edge(s) selected")
    ctx.presentation.clear_selection()
    return edges


# Public API

async def trim_command(ctx: CommandContext) -> None:
    ctx.print("TRIM", COMMAND)
    edges = await _select_edges(ctx, "cutting")
    if edges is None:
        return

    trimmed = 0
    while True:
        ctx.check_cancelled()
        pick = await ctx.editor.get_entity(
            EntityOptions("Select object to trim (Enter to exit)", allow_none=True)
        )
        if not pick.ok:
            break
        target = pick.value.entity
        if ctx.is_locked(target):
            ctx.print(f'Object is on locked layer "{target.layer}"', ERROR)
            continue

        cuts = cut_parameters(target, edges)
        if not cuts:
            ctx.print("No intersection with cutting edges", ERROR)
            continue

        pick_t = _parameter(target, pick.value.point)
        pieces = trim_pieces(target, cuts, pick_t) if pick_t is not None else None
        if pieces is None:
            ctx.print("Cannot trim at this location", ERROR)
            continue

        ctx.delete(target)
        for piece in pieces:
            ctx.add(piece)
        # trimmed pieces keep cutting their neighbours
        edges = [e for e in edges if e is not target] + pieces
        trimmed += 1
        ctx.print("Object trimmed", SUCCESS)

    if trimmed:
        ctx.print(f"{trimmed} object(s) trimmed", SUCCESS)


async def extend_command(ctx: CommandContext) -> None:
    ctx.print("EXTEND", COMMAND)
    boundaries = await _select_edges(ctx, "boundary")
    if boundaries is None:
        return

    extended = 0
    while True:
        ctx.check_cancelled()
        pick = await ctx.editor.get_entity(
            EntityOptions("Select object to extend (Enter to exit)", allow_none=True)
        )
        if not pick.ok:
            break
        target = pick.value.entity
        if ctx.is_locked(target):
            ctx.print(f'Object is on locked layer "{target.layer}"', ERROR)
            continue
        if not isinstance(target, (Line, Arc)):
            ctx.print(f"Cannot extend {target.dxftype}", ERROR)
            continue

        points = [
            point
            for boundary in boundaries
            if boundary is not target
            for point in carrier_intersections(target, boundary)
        ]
        if not points:
            ctx.print("No boundary to extend to", ERROR)
            continue

        if isinstance(target, Line):
            result = extend_line(target, points, pick.value.point)
        else:
            result = extend_arc(target, points, pick.value.point)
        if result is None:
            ctx.print("Cannot extend at this location", ERROR)
            continue

        ctx.replace(target, result)
        boundaries = [result if b is target else b for b in boundaries]
        extended += 1
        ctx.print("Object extended", SUCCESS)

    if extended:
        ctx.print(f"{extended} object(s) extended", SUCCESS)
