"""Inquiry commands: DIST and HELP."""

from __future__ import annotations

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, SUCCESS
from dxf_cad_editor.editor.coordinates import angle_degrees
from dxf_cad_editor.editor.jigs import LineJig
from dxf_cad_editor.editor.prompts import PointOptions


def measurement_lines(p1: Vec2, p2: Vec2):
    """The three report lines of a DIST measurement."""
    delta = p2 - p1
    return [
        f"Distance = {p1.distance(p2):.4f}",
        f"Angle in XY Plane = {angle_degrees(p1, p2):.2f}°",
        f"Delta X = {delta.x:.4f}, Delta Y = {delta.y:.4f}",
    ]


async def dist_command(ctx: CommandContext) -> None:
    ctx.print("DIST", COMMAND)

    while True:
        ctx.check_cancelled()
        first = await ctx.editor.get_point(PointOptions("Specify first point", allow_none=True))
        if not first.ok:
            break
        p1 = first.value
        ctx.presentation.mark_point(p1)

        second = await ctx.editor.get_point(
            PointOptions(
                "Specify second point",
                base_point=p1,
                jig=LineJig(ctx.presentation, p1),
            )
        )
        if second.cancelled:
            break
        if not second.ok:
            continue

        distance, angle, deltas = measurement_lines(p1, second.value)
        ctx.print(distance, SUCCESS)
        ctx.print(angle)
        ctx.print(deltas)

    ctx.presentation.clear_preview()


async def help_command(ctx: CommandContext) -> None:
    ctx.print("HELP", COMMAND)
    ctx.print("Available commands:")
    for command in sorted(ctx.registry.all_commands(), key=lambda c: c.global_name):
        ctx.print(f"  {command.global_name} ({command.local_name}) - {command.description}")
