"""Interaction protocol: prompts, coordinate input, jigs and the Editor.

``CommandLine`` lives in ``dxf_cad_editor.editor.command_line``; it depends on
the command registry and is not imported here.
"""

from dxf_cad_editor.editor.prompts import (
    DistanceOptions,
    EntityOptions,
    EntityPick,
    Keyword,
    PointOptions,
    PromptResult,
    PromptStatus,
    SelectionOptions,
    format_keywords,
    match_keyword,
)

from dxf_cad_editor.editor.coordinates import (
    CoordinateError,
    angle_degrees,
    format_point,
    is_coordinate_input,
    parse_coordinate,
    parse_number,
)

from dxf_cad_editor.editor.context import Console, Presentation

from dxf_cad_editor.editor.jigs import (
    Arc3PointJig,
    ArcCenterJig,
    CircleJig,
    DimensionJig,
    Jig,
    LineJig,
    PolylineJig,
    RectangleJig,
)

from dxf_cad_editor.editor.view import DrawingView
from dxf_cad_editor.editor.editor import Editor

__all__ = [
    # Prompts
    "PromptStatus",
    "PromptResult",
    "Keyword",
    "PointOptions",
    "DistanceOptions",
    "SelectionOptions",
    "EntityOptions",
    "EntityPick",
    "format_keywords",
    "match_keyword",
    # Coordinates
    "CoordinateError",
    "parse_coordinate",
    "is_coordinate_input",
    "parse_number",
    "format_point",
    "angle_degrees",
    # Collaborators
    "Console",
    "Presentation",
    "DrawingView",
    # Jigs
    "Jig",
    "LineJig",
    "CircleJig",
    "RectangleJig",
    "Arc3PointJig",
    "ArcCenterJig",
    "PolylineJig",
    "DimensionJig",
    # Session
    "Editor",
]
