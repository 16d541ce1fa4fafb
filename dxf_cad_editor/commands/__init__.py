"""Command registry, lifecycle and the built-in CAD commands."""

from dxf_cad_editor.commands.registry import (
    DEFAULT_GROUP,
    SYSTEM_GROUP,
    Command,
    CommandContext,
    CommandRegistry,
    trigger,
)

from dxf_cad_editor.commands.draw import (
    arc_command,
    circle_command,
    line_command,
    pline_command,
    rectangle_command,
)
from dxf_cad_editor.commands.modify import (
    copy_command,
    erase_command,
    move_command,
    offset_command,
)
from dxf_cad_editor.commands.trim_extend import extend_command, trim_command
from dxf_cad_editor.commands.pedit import pedit_command
from dxf_cad_editor.commands.dimension import (
    dim_command,
    dimaligned_command,
    dimangular_command,
    dimhor_command,
    dimver_command,
)
from dxf_cad_editor.commands.inquiry import dist_command, help_command
from dxf_cad_editor.commands.zoom import (
    zoom_all_command,
    zoom_command,
    zoom_extents_command,
    zoom_window_command,
)

BUILTIN_COMMANDS = [
    # Drawing
    Command("LINE", "L", "Draw line segments", line_command),
    Command("CIRCLE", "C", "Draw a circle", circle_command),
    Command("ARC", "A", "Draw an arc", arc_command),
    Command("RECTANGLE", "REC", "Draw a rectangle", rectangle_command),
    Command("PLINE", "PL", "Draw a polyline", pline_command),
    # Modify
    Command("MOVE", "M", "Move selected objects", move_command),
    Command("COPY", "CO", "Copy selected objects", copy_command),
    Command("ERASE", "E", "Erase objects", erase_command),
    Command("TRIM", "TR", "Trim objects at cutting edges", trim_command),
    Command("EXTEND", "EX", "Extend objects to boundary edges", extend_command),
    Command("OFFSET", "O", "Create parallel copies", offset_command),
    Command("PEDIT", "PE", "Edit polylines", pedit_command),
    # Annotation
    Command("DIM", "DLI", "Create linear dimension (auto-detect H/V)", dim_command),
    Command("DIMLINEAR", "DIMLIN", "Create linear dimension (auto-detect H/V)", dim_command),
    Command("DIMHOR", "DH", "Create horizontal dimension", dimhor_command),
    Command("DIMVER", "DV", "Create vertical dimension", dimver_command),
    Command("DIMALIGNED", "DAL", "Create aligned dimension", dimaligned_command),
    Command("DIMANGULAR", "DAN", "Create angular dimension", dimangular_command),
    # Utility
    Command("DIST", "DI", "Measure distance between points", dist_command),
    Command("ZOOM", "Z", "Control view magnification", zoom_command),
    Command("ZOOMWINDOW", "ZW", "Zoom to window", zoom_window_command),
    Command("ZOOMEXTENTS", "ZE", "Zoom to extents", zoom_extents_command),
    Command("ZOOMALL", "ZA", "Zoom to all", zoom_all_command),
    Command("HELP", "?", "List available commands", help_command),
]


def register_cad_commands(registry: CommandRegistry) -> CommandRegistry:
    """
    Register every built-in command in the ACAD group.

    Raises:
        CommandConflictError: a built-in name is already registered
    """
    for command in BUILTIN_COMMANDS:
        registry.add_command(SYSTEM_GROUP, command)
    return registry


__all__ = [
    # Registry
    "SYSTEM_GROUP",
    "DEFAULT_GROUP",
    "Command",
    "CommandContext",
    "CommandRegistry",
    "trigger",
    "BUILTIN_COMMANDS",
    "register_cad_commands",
    # Drawing
    "line_command",
    "circle_command",
    "arc_command",
    "rectangle_command",
    "pline_command",
    # Modify
    "move_command",
    "copy_command",
    "erase_command",
    "trim_command",
    "extend_command",
    "offset_command",
    "pedit_command",
    # Annotation
    "dim_command",
    "dimhor_command",
    "dimver_command",
    "dimaligned_command",
    "dimangular_command",
    # Utility
    "dist_command",
    "zoom_command",
    "zoom_window_command",
    "zoom_extents_command",
    "zoom_all_command",
    "help_command",
]
