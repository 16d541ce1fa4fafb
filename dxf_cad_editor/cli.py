"""
Interactive command line over a DXF drawing.

Usage:
    dxf-cad-editor plan.dxf
    dxf-cad-editor plan.dxf --summary
    python -m dxf_cad_editor --output out.dxf
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from dxf_cad_editor.codec.reader import read_file
from dxf_cad_editor.codec.writer import write_file
from dxf_cad_editor.commands import CommandContext, CommandRegistry, register_cad_commands
from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.editor.command_line import CommandLine
from dxf_cad_editor.editor.context import COMMAND, ERROR, PROMPT, RESPONSE, SUCCESS
from dxf_cad_editor.editor.editor import Editor
from dxf_cad_editor.editor.view import DrawingView
from dxf_cad_editor.errors import FormatError
from dxf_cad_editor.inspect.summary import summarize_drawing
from dxf_cad_editor.model.drawing import Drawing

logger = logging.getLogger(__name__)

IDLE_PROMPT = "Command: "
QUIT_WORDS = ("quit", "exit", "q")

_PREFIXES = {
    COMMAND: "> ",
    RESPONSE: "  ",
    PROMPT: "? ",
    SUCCESS: "+ ",
    ERROR: "! ",
}


class StdoutConsole:
    """Console that writes each message on its own line with a kind prefix."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.prompt = IDLE_PROMPT

    def print(self, text: str, kind: str = RESPONSE) -> None:
        self.stream.write(f"{_PREFIXES.get(kind, '  ')}{text}\n")
        self.stream.flush()

    def set_prompt(self, text: str) -> None:
        self.prompt = f"{text} "


def build_session(
    drawing: Drawing,
    console: StdoutConsole,
    settings: Optional[EditorSettings] = None,
) -> CommandLine:
    """Wire a drawing, a headless view, the editor and the built-in commands together."""
    settings = settings or EditorSettings.from_env()
    view = DrawingView(drawing, settings)
    editor = Editor(console, view, settings)
    registry = register_cad_commands(CommandRegistry())
    context = CommandContext(
        editor=editor,
        console=console,
        presentation=view,
        drawing=drawing,
        registry=registry,
        settings=settings,
    )
    return CommandLine(context)


def load_drawing(path: Optional[Path], console: StdoutConsole) -> Drawing:
    if path is None:
        return Drawing()
    try:
        drawing = read_file(path)
    except (FormatError, OSError) as exc:
        console.print(f"Cannot read {path}: {exc}. Starting an empty drawing.", ERROR)
        return Drawing()
    console.print(f"Loaded {path}: {len(drawing)} entities")
    return drawing


def save_drawing(drawing: Drawing, path: Path, console: StdoutConsole) -> bool:
    try:
        write_file(drawing, path)
    except OSError as exc:
        logger.warning("Saving %s failed: %s", path, exc)
        console.print(f"Cannot save to {path}: {exc}", ERROR)
        return False
    console.print(f"Saved to {path}", SUCCESS)
    return True


async def _settle() -> None:
    # let the running command advance to its next prompt
    for _ in range(3):
        await asyncio.sleep(0)


async def repl(
    session: CommandLine,
    console: StdoutConsole,
    save_path: Optional[Path],
) -> None:
    loop = asyncio.get_running_loop()

    def on_interrupt() -> None:
        if session.busy:
            session.cancel()
        else:
            console.print("Type quit to exit")

    try:
        loop.add_signal_handler(signal.SIGINT, on_interrupt)
    except NotImplementedError:
        logger.debug("SIGINT handler not available; Ctrl-C ends the session")

    console.print("Command line ready. Type HELP for available commands.")
    while True:
        prompt = console.prompt if session.busy else IDLE_PROMPT
        try:
            line = await loop.run_in_executor(None, input, prompt)
        except EOFError:
            break

        words = line.strip().split()
        keyword = words[0].lower() if words else ""
        if not session.busy and keyword in QUIT_WORDS:
            break
        if not session.busy and keyword == "save":
            target = Path(words[1]) if len(words) > 1 else save_path
            if target is None:
                console.print("Usage: save <path>", ERROR)
                continue
            save_drawing(session.context.drawing, target, console)
            continue
        if keyword == "cancel":
            session.cancel()
        else:
            session.submit(line)
        await _settle()

    if session.busy:
        session.cancel()
        await session.wait_idle()
    console.print("End!")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dxf-cad-editor",
        description="Edit a DXF drawing through an AutoCAD-style command line.",
    )
    parser.add_argument("dxf", nargs="?", type=Path, help="DXF file to open")
    parser.add_argument("--output", "-o", type=Path, help="default path for the save command")
    parser.add_argument(
        "--summary",
        action="store_true",
        help="print a JSON summary of the drawing and exit",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console = StdoutConsole(sys.stderr if args.summary else None)
    drawing = load_drawing(args.dxf, console)

    if args.summary:
        summary = summarize_drawing(drawing, args.dxf)
        print(json.dumps(summary, ensure_ascii=False, indent=2))
        return 0

    session = build_session(drawing, console)
    try:
        asyncio.run(repl(session, console, args.output or args.dxf))
    except KeyboardInterrupt:
        console.print("End!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
