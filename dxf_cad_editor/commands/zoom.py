"""ZOOM and its shortcuts ZOOMWINDOW, ZOOMEXTENTS and ZOOMALL."""

from __future__ import annotations

from typing import Optional

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import CommandContext
from dxf_cad_editor.editor.context import COMMAND, SUCCESS
from dxf_cad_editor.editor.jigs import RectangleJig
from dxf_cad_editor.editor.prompts import Keyword, PointOptions

ZOOM_KEYWORDS = [
    Keyword("All", "ALL", "A"),
    Keyword("Extents", "EXTENTS", "E"),
    Keyword("Window", "WINDOW", "W"),
]


def _zoom_extents(ctx: CommandContext) -> None:
    ctx.presentation.zoom_extents()
    ctx.print("Zoom extents", SUCCESS)


def _zoom_all(ctx: CommandContext) -> None:
    ctx.presentation.fit_view(ctx.settings.zoom_all_padding)
    ctx.print("Zoom all", SUCCESS)


async def _zoom_window(ctx: CommandContext, corner1: Optional[Vec2] = None) -> None:
    if corner1 is None:
        first = await ctx.editor.get_point(PointOptions("Specify first corner"))
        if not first.ok:
            return
        corner1 = first.value
    ctx.presentation.mark_point(corner1)

    second = await ctx.editor.get_point(
        PointOptions(
            "Specify opposite corner",
            base_point=corner1,
            jig=RectangleJig(ctx.presentation, corner1),
        )
    )
    ctx.presentation.clear_preview()
    if not second.ok:
        return
    corner2 = second.value

    ctx.presentation.zoom_to_window(corner1, corner2)
    ctx.print(
        f"Zoom window: ({corner1.x:.2f}, {corner1.y:.2f}) to ({corner2.x:.2f}, {corner2.y:.2f})",
        SUCCESS,
    )


async def zoom_command(ctx: CommandContext) -> None:
    ctx.print("ZOOM", COMMAND)
    result = await ctx.editor.get_point(
        PointOptions(
            "Specify corner of window, enter a scale factor, or",
            keywords=ZOOM_KEYWORDS,
            allow_none=True,
        )
    )
    if result.empty or result.is_keyword("EXTENTS"):
        _zoom_extents(ctx)
    elif result.is_keyword("ALL"):
        _zoom_all(ctx)
    elif result.is_keyword("WINDOW"):
        await _zoom_window(ctx)
    elif result.ok:
        # a picked point is the first window corner
        await _zoom_window(ctx, result.value)


async def zoom_window_command(ctx: CommandContext) -> None:
    ctx.print("ZOOM Window", COMMAND)
    await _zoom_window(ctx)


async def zoom_extents_command(ctx: CommandContext) -> None:
    ctx.print("ZOOM Extents", COMMAND)
    _zoom_extents(ctx)


async def zoom_all_command(ctx: CommandContext) -> None:
    ctx.print("ZOOM All", COMMAND)
    _zoom_all(ctx)
