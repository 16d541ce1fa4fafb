"""Scripted input for driving commands without a host application."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.commands import CommandContext, CommandRegistry, register_cad_commands, trigger
from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.editor.editor import Editor
from dxf_cad_editor.editor.view import DrawingView
from dxf_cad_editor.model.drawing import Drawing
from dxf_cad_editor.model.entities import Entity


@dataclass(frozen=True)
class Click:
    point: Vec2


@dataclass(frozen=True)
class Move:
    point: Vec2


@dataclass(frozen=True)
class Cancel:
    pass


CANCEL = Cancel()
ENTER = ""


def click(x: float, y: float) -> Click:
    return Click(Vec2(x, y))


def move(x: float, y: float) -> Move:
    return Move(Vec2(x, y))


class ScriptedConsole:
    """
    Console that answers every prompt from a queue of inputs.

    Inputs are typed text (``str``), ``Click``, ``Move`` or ``CANCEL``. A
    new prompt schedules the next input; an input that leaves the same
    request pending (a selection click, a parse error) schedules another
    one. An exhausted queue cancels the running command.
    """

    def __init__(self, inputs: Iterable = ()):
        self.queue = deque(inputs)
        self.messages: List[Tuple[str, str]] = []
        self.prompts: List[str] = []
        self.editor: Optional[Editor] = None

    @property
    def texts(self) -> List[str]:
        return [text for text, _ in self.messages]

    def kinds(self, text: str) -> List[str]:
        return [kind for t, kind in self.messages if t == text]

    def print(self, text: str, kind: str = "response") -> None:
        self.messages.append((text, kind))

    def set_prompt(self, text: str) -> None:
        self.prompts.append(text)
        asyncio.get_running_loop().call_soon(self._feed, len(self.prompts))

    def _feed(self, prompt_number: int) -> None:
        editor = self.editor
        if editor is None or not editor.is_waiting or prompt_number != len(self.prompts):
            return
        if not self.queue:
            editor.handle_cancel()
            return

        item = self.queue.popleft()
        if isinstance(item, Click):
            editor.handle_click(item.point)
        elif isinstance(item, Move):
            editor.handle_mouse_move(item.point)
        elif isinstance(item, Cancel):
            editor.handle_cancel()
        else:
            editor.handle_text_input(item)

        if editor.is_waiting and prompt_number == len(self.prompts):
            asyncio.get_running_loop().call_soon(self._feed, prompt_number)


class Session:
    """A drawing, its headless view and an editor wired to a scripted console."""

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        drawing: Optional[Drawing] = None,
        settings: Optional[EditorSettings] = None,
    ):
        self.drawing = drawing if drawing is not None else Drawing()
        for entity in entities:
            self.drawing.add_entity(entity)
        self.settings = settings or EditorSettings()
        self.console = ScriptedConsole()
        self.view = DrawingView(self.drawing, self.settings)
        self.editor = Editor(self.console, self.view, self.settings)
        self.console.editor = self.editor
        self.registry = register_cad_commands(CommandRegistry())
        self.ctx = CommandContext(
            editor=self.editor,
            console=self.console,
            presentation=self.view,
            drawing=self.drawing,
            registry=self.registry,
            settings=self.settings,
        )

    def run(self, name: str, *inputs) -> List[str]:
        """Run one command to completion; returns the console lines it printed."""
        start = len(self.console.messages)
        self.console.queue.extend(inputs)
        command = self.registry.lookup(name)
        assert command is not None, f"unknown command {name}"
        asyncio.run(trigger(command, self.ctx))
        return [text for text, _ in self.console.messages[start:]]

    def entities_of(self, dxftype: str) -> List[Entity]:
        return [e for e in self.drawing.entities if e.dxftype == dxftype]
