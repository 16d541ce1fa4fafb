"""Drawing commands: LINE, CIRCLE, ARC, RECTANGLE and PLINE."""

from __future__ import annotations

import math
from typing import List

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, ERROR, SUCCESS
from dxf_cad_editor.editor.coordinates import format_point
from dxf_cad_editor.editor.jigs import (
    Arc3PointJig,
    ArcCenterJig,
    CircleJig,
    LineJig,
    PolylineJig,
    RectangleJig,
)
from dxf_cad_editor.editor.prompts import DistanceOptions, Keyword, PointOptions
from dxf_cad_editor.geometry.kernel import circle_through_3_points, normalize_degrees
from dxf_cad_editor.model.entities import Arc, Circle, Entity, Line, Polyline

CLOSE = Keyword("Close", "CLOSE", "C")
UNDO = Keyword("Undo", "UNDO", "U")


def _to_point(point: Vec2) -> str:
    return f"To point: {format_point(point)}"


def _center_radius(center: Vec2, radius: float) -> str:
    return f"center ({center.x:.4f}, {center.y:.4f}), radius {radius:.4f}"


# LINE

async def line_command(ctx: CommandContext) -> None:
    ctx.print("LINE", COMMAND)
    editor = ctx.editor

    first = await editor.get_point(PointOptions("Specify first point"))
    if not first.ok:
        return

    points: List[Vec2] = [first.value]
    segments: List[Entity] = []
    ctx.presentation.mark_point(first.value)

    while True:
        ctx.check_cancelled()
        last = points[-1]
        keywords = [CLOSE, UNDO] if len(points) >= 2 else [UNDO]
        result = await editor.get_point(
            PointOptions(
                "Specify next point",
                keywords=keywords,
                allow_none=True,
                base_point=last,
                jig=LineJig(ctx.presentation, last),
            )
        )

        if result.ok:
            segment = Line(start=last, end=result.value)
            ctx.add(segment)
            segments.append(segment)
            points.append(result.value)
            ctx.print(_to_point(result.value))
        elif result.is_keyword("CLOSE"):
            segment = Line(start=last, end=points[0])
            ctx.add(segment)
            segments.append(segment)
            ctx.print("Close")
            break
        elif result.is_keyword("UNDO"):
            ctx.print("Undo")
            points.pop()
            if segments:
                ctx.delete(segments.pop())
            if not points:
                break
        else:
            break

    ctx.presentation.clear_preview()
    if len(points) >= 2:
        ctx.print("Line command completed", SUCCESS)


# CIRCLE

async def _circle_center_radius(ctx: CommandContext, center: Vec2) -> None:
    ctx.presentation.mark_point(center)
    result = await ctx.editor.get_distance(
        DistanceOptions(
            "Specify radius",
            keywords=[Keyword("Diameter", "DIAMETER", "D")],
            base_point=center,
            jig=CircleJig(ctx.presentation, center),
        )
    )

    if result.is_keyword("DIAMETER"):
        diameter = await ctx.editor.get_distance(
            DistanceOptions("Specify diameter", base_point=center)
        )
        if diameter.ok and diameter.value > 0:
            ctx.add(Circle(center=center, radius=diameter.value / 2))
            ctx.print(f"Diameter: {diameter.value:.4f}")
    elif result.ok and result.value > 0:
        ctx.add(Circle(center=center, radius=result.value))
        ctx.print(f"Radius: {result.value:.4f}")


async def _circle_2_points(ctx: CommandContext) -> None:
    ctx.print("2P")
    p1 = await ctx.editor.get_point(PointOptions("Specify first end point of circle's diameter"))
    if not p1.ok:
        return
    ctx.presentation.mark_point(p1.value)
    p2 = await ctx.editor.get_point(
        PointOptions(
            "Specify second end point of circle's diameter",
            base_point=p1.value,
            jig=LineJig(ctx.presentation, p1.value),
        )
    )
    if not p2.ok:
        return

    center = p1.value.lerp(p2.value)
    radius = p1.value.distance(p2.value) / 2
    if radius <= 0:
        ctx.print("Cannot create circle from coincident points", ERROR)
        return
    ctx.add(Circle(center=center, radius=radius))
    ctx.print(f"Circle created: {_center_radius(center, radius)}", SUCCESS)


async def _circle_3_points(ctx: CommandContext) -> None:
    ctx.print("3P")
    points: List[Vec2] = []
    for message in (
        "Specify first point on circle",
        "Specify second point on circle",
        "Specify third point on circle",
    ):
        base = points[-1] if points else None
        result = await ctx.editor.get_point(PointOptions(message, base_point=base))
        if not result.ok:
            return
        points.append(result.value)
        ctx.presentation.mark_point(result.value)

    fit = circle_through_3_points(*points)
    if fit is None:
        ctx.print("Cannot create circle from collinear points", ERROR)
        return
    ctx.add(Circle(center=fit.center, radius=fit.radius))
    ctx.print(f"Circle created: {_center_radius(fit.center, fit.radius)}", SUCCESS)


async def circle_command(ctx: CommandContext) -> None:
    ctx.print("CIRCLE", COMMAND)

    while True:
        ctx.check_cancelled()
        result = await ctx.editor.get_point(
            PointOptions(
                "Specify center point for circle",
                keywords=[Keyword("3P"), Keyword("2P"), Keyword("Ttr", "TTR", "T")],
                allow_none=True,
            )
        )
        if result.is_keyword("3P"):
            await _circle_3_points(ctx)
        elif result.is_keyword("2P"):
            await _circle_2_points(ctx)
        elif result.is_keyword("TTR"):
            ctx.print("TTR mode not yet implemented", ERROR)
        elif result.ok:
            await _circle_center_radius(ctx, result.value)
        else:
            break

    ctx.presentation.clear_preview()


# ARC

async def _arc_3_points(ctx: CommandContext, start: Vec2) -> None:
    ctx.presentation.mark_point(start)
    jig = Arc3PointJig(ctx.presentation, start)

    second = await ctx.editor.get_point(
        PointOptions("Specify second point of arc", base_point=start, jig=jig)
    )
    if not second.ok:
        return
    ctx.presentation.mark_point(second.value)
    jig.set_second_point(second.value)

    end = await ctx.editor.get_point(
        PointOptions("Specify end point of arc", base_point=second.value, jig=jig)
    )
    if not end.ok:
        return

    fit = circle_through_3_points(start, second.value, end.value)
    if fit is None:
        ctx.print("Cannot create arc from collinear points", ERROR)
        return
    start_angle, end_angle = fit.entity_angles()
    ctx.add(Arc(center=fit.center, radius=fit.radius, start_angle=start_angle, end_angle=end_angle))
    ctx.print(f"Arc created: {_center_radius(fit.center, fit.radius)}", SUCCESS)


async def _arc_center_start_end(ctx: CommandContext) -> None:
    ctx.print("Center")
    center = await ctx.editor.get_point(PointOptions("Specify center point of arc"))
    if not center.ok:
        return
    c = center.value
    ctx.presentation.mark_point(c)
    jig = ArcCenterJig(ctx.presentation, c)

    start = await ctx.editor.get_point(
        PointOptions("Specify start point of arc", base_point=c, jig=jig)
    )
    if not start.ok:
        return
    radius = c.distance(start.value)
    if radius <= 0:
        ctx.print("Start point must differ from the center", ERROR)
        return
    ctx.presentation.mark_point(start.value)
    jig.set_start_point(start.value)

    end = await ctx.editor.get_point(
        PointOptions("Specify end point of arc", base_point=c, jig=jig)
    )
    if not end.ok:
        return

    start_angle = math.degrees(math.atan2(start.value.y - c.y, start.value.x - c.x))
    end_angle = math.degrees(math.atan2(end.value.y - c.y, end.value.x - c.x))
    ctx.add(
        Arc(
            center=c,
            radius=radius,
            start_angle=normalize_degrees(start_angle),
            end_angle=normalize_degrees(end_angle),
        )
    )
    ctx.print(f"Arc created: {_center_radius(c, radius)}", SUCCESS)


async def arc_command(ctx: CommandContext) -> None:
    ctx.print("ARC", COMMAND)

    while True:
        ctx.check_cancelled()
        result = await ctx.editor.get_point(
            PointOptions(
                "Specify start point of arc",
                keywords=[Keyword("Center", "CENTER", "CE")],
                allow_none=True,
            )
        )
        if result.is_keyword("CENTER"):
            await _arc_center_start_end(ctx)
        elif result.ok:
            await _arc_3_points(ctx, result.value)
        else:
            break

    ctx.presentation.clear_preview()


# RECTANGLE

async def rectangle_command(ctx: CommandContext) -> None:
    ctx.print("RECTANGLE", COMMAND)

    while True:
        ctx.check_cancelled()
        first = await ctx.editor.get_point(
            PointOptions("Specify first corner point", allow_none=True)
        )
        if not first.ok:
            break
        p1 = first.value
        ctx.presentation.mark_point(p1)

        second = await ctx.editor.get_point(
            PointOptions(
                "Specify other corner point",
                base_point=p1,
                jig=RectangleJig(ctx.presentation, p1),
            )
        )
        if second.cancelled:
            break
        if not second.ok:
            continue
        p2 = second.value

        corners = [p1, Vec2(p2.x, p1.y), p2, Vec2(p1.x, p2.y)]
        ctx.add(Polyline(vertices=corners, closed=True))
        ctx.print(
            f"Rectangle created: ({p1.x:.4f}, {p1.y:.4f}) to ({p2.x:.4f}, {p2.y:.4f})",
            SUCCESS,
        )

    ctx.presentation.clear_preview()


# PLINE

async def pline_command(ctx: CommandContext) -> None:
    """Collect vertices and commit a single polyline when the user finishes."""
    ctx.print("PLINE", COMMAND)

    first = await ctx.editor.get_point(PointOptions("Specify start point", allow_none=True))
    if not first.ok:
        return

    points: List[Vec2] = [first.value]
    closed = False
    ctx.presentation.mark_point(first.value)

    while True:
        ctx.check_cancelled()
        last = points[-1]
        keywords = [CLOSE, UNDO] if len(points) >= 2 else [UNDO]
        result = await ctx.editor.get_point(
            PointOptions(
                "Specify next point",
                keywords=keywords,
                allow_none=True,
                base_point=last,
                jig=PolylineJig(ctx.presentation, points),
            )
        )

        if result.ok:
            points.append(result.value)
            ctx.print(_to_point(result.value))
        elif result.is_keyword("CLOSE"):
            closed = True
            ctx.print("Close")
            break
        elif result.is_keyword("UNDO"):
            ctx.print("Undo")
            points.pop()
            if not points:
                break
        else:
            break

    ctx.presentation.clear_preview()
    if len(points) >= 2:
        ctx.add(Polyline(vertices=points, closed=closed))
        ctx.print(f"Polyline created with {len(points)} vertices", SUCCESS)
