"""Dimension commands: DIM/DIMLINEAR, DIMHOR, DIMVER, DIMALIGNED and DIMANGULAR.

Dimensions are committed as plain entities (extension lines, dimension
line or arc, arrowhead barbs and a centered text) so that they survive any
DXF reader without dimension style support.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, ERROR, SUCCESS
from dxf_cad_editor.editor.jigs import DimensionJig, LineJig
from dxf_cad_editor.editor.prompts import PointOptions
from dxf_cad_editor.geometry.construct import (
    LinearDimension,
    aligned_dimension,
    angular_dimension,
    auto_linear_dimension,
    dimension_entities,
    horizontal_dimension,
    vertical_dimension,
)

LinearBuilder = Callable[..., Optional[LinearDimension]]


# Helper functions

async def _extension_origins(ctx: CommandContext, title: str) -> Optional[Tuple[Vec2, Vec2]]:
    ctx.print(title, COMMAND)
    first = await ctx.editor.get_point(
        PointOptions("Specify first extension line origin", allow_none=True)
    )
    if not first.ok:
        return None
    p1 = first.value
    ctx.presentation.mark_point(p1)

    second = await ctx.editor.get_point(
        PointOptions(
            "Specify second extension line origin",
            base_point=p1,
            jig=LineJig(ctx.presentation, p1),
        )
    )
    if not second.ok:
        return None
    ctx.presentation.mark_point(second.value)
    return p1, second.value


def _commit(ctx: CommandContext, dimension) -> None:
    ctx.presentation.clear_preview()
    for entity in dimension_entities(dimension):
        ctx.add(entity)


async def _linear(
    ctx: CommandContext, title: str, kind: str, build: LinearBuilder, label: str
) -> None:
    origins = await _extension_origins(ctx, title)
    if origins is None:
        return
    p1, p2 = origins

    location = await ctx.editor.get_point(
        PointOptions(
            "Specify dimension line location",
            jig=DimensionJig(ctx.presentation, p1, p2, kind),
        )
    )
    if not location.ok:
        return

    dimension = build(p1, p2, location.value, ctx.settings.dimension)
    if dimension is None:
        ctx.print("Points are too close", ERROR)
        return
    _commit(ctx, dimension)
    ctx.print(f"{label}: {dimension.measurement:.4f}", SUCCESS)


# Public API

async def dim_command(ctx: CommandContext) -> None:
    """Linear dimension; horizontal or vertical depending on the location point."""
    await _linear(
        ctx, "DIM (Linear Dimension)", "auto", auto_linear_dimension, "Dimension created"
    )


async def dimhor_command(ctx: CommandContext) -> None:
    await _linear(
        ctx,
        "DIMHOR (Horizontal Dimension)",
        "horizontal",
        horizontal_dimension,
        "Horizontal dimension",
    )


async def dimver_command(ctx: CommandContext) -> None:
    await _linear(
        ctx, "DIMVER (Vertical Dimension)", "vertical", vertical_dimension, "Vertical dimension"
    )


async def dimaligned_command(ctx: CommandContext) -> None:
    await _linear(
        ctx, "DIMALIGNED (Aligned Dimension)", "aligned", aligned_dimension, "Aligned dimension"
    )


async def dimangular_command(ctx: CommandContext) -> None:
    ctx.print("DIMANGULAR (Angular Dimension)", COMMAND)
    editor = ctx.editor

    vertex = await editor.get_point(PointOptions("Specify angle vertex"))
    if not vertex.ok:
        return
    v = vertex.value
    ctx.presentation.mark_point(v)

    first = await editor.get_point(
        PointOptions("Specify first angle endpoint", base_point=v, jig=LineJig(ctx.presentation, v))
    )
    if not first.ok:
        return
    ctx.presentation.mark_point(first.value)

    second = await editor.get_point(
        PointOptions("Specify second angle endpoint", base_point=v, jig=LineJig(ctx.presentation, v))
    )
    if not second.ok:
        return
    ctx.presentation.mark_point(second.value)

    location = await editor.get_point(
        PointOptions("Specify dimension arc line location", base_point=v)
    )
    if not location.ok:
        return

    dimension = angular_dimension(
        v, first.value, second.value, location.value, ctx.settings.dimension
    )
    if dimension is None:
        ctx.print("Angle endpoints must differ from the vertex", ERROR)
        return
    _commit(ctx, dimension)
    ctx.print(f"Angular dimension: {dimension.angle:.2f}°", SUCCESS)
