"""
dxf_cad_editor - 2D DXF editing through an AutoCAD-style command line.

Typical use:
    from dxf_cad_editor import read_file, write_file
    from dxf_cad_editor.cli import StdoutConsole, build_session

    session = build_session(read_file("plan.dxf"), StdoutConsole())
"""

from dxf_cad_editor.errors import (
    CadEditorError,
    CommandCancelled,
    CommandConflictError,
    FormatError,
    PendingRequestError,
)
from dxf_cad_editor.config import DimensionStyle, EditorSettings
from dxf_cad_editor.model.drawing import Bounds, Drawing, EditRecord, Layer
from dxf_cad_editor.codec.reader import decode, read_file
from dxf_cad_editor.codec.writer import encode, write_file
from dxf_cad_editor.editor.editor import Editor
from dxf_cad_editor.editor.view import DrawingView
from dxf_cad_editor.commands.registry import Command, CommandContext, CommandRegistry
from dxf_cad_editor.commands import register_cad_commands
from dxf_cad_editor.editor.command_line import CommandLine
from dxf_cad_editor.inspect.summary import summarize_drawing, write_summary_json

__version__ = "0.1.0"

__all__ = [
    # Errors
    "CadEditorError",
    "FormatError",
    "CommandConflictError",
    "CommandCancelled",
    "PendingRequestError",
    # Configuration
    "EditorSettings",
    "DimensionStyle",
    # Model and codec
    "Drawing",
    "Layer",
    "Bounds",
    "EditRecord",
    "decode",
    "encode",
    "read_file",
    "write_file",
    # Interaction
    "Editor",
    "DrawingView",
    "CommandLine",
    "Command",
    "CommandContext",
    "CommandRegistry",
    "register_cad_commands",
    # Inspection
    "summarize_drawing",
    "write_summary_json",
]
