"""Command-line session: dispatch, history and autocompletion."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from ezdxf.math import Vec2

from dxf_cad_editor.commands.registry import Command, CommandContext, trigger
from dxf_cad_editor.editor.context import ERROR, RESPONSE

logger = logging.getLogger(__name__)


class CommandLine:
    """
    Routes user input either to the registry (no command running) or to the
    editor's pending request (a command is running).

    Commands run as asyncio tasks, so ``submit`` must be called from inside
    a running event loop.
    """

    def __init__(self, context: CommandContext):
        self.context = context
        self.history: List[str] = []
        self.last_command: Optional[Command] = None
        self._history_index = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def editor(self):
        return self.context.editor

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, text: str) -> Optional[asyncio.Task]:
        """
        Handle one line of typed input.

        Returns:
            The task of a command started by this line, else None
        """
        s = text.strip()
        if s:
            self.history.append(s)
        self._history_index = len(self.history)

        if self.busy:
            self.editor.handle_text_input(s)
            return None

        if not s:
            if self.last_command is None:
                return None
            return self.start(self.last_command)

        command = self.context.registry.lookup(s)
        if command is None:
            self.context.print(
                f"Unknown command: {s.upper()}. Type HELP for available commands.", ERROR
            )
            return None
        return self.start(command)

    def start(self, command: Command) -> asyncio.Task:
        if self.busy:
            raise RuntimeError(f"cannot start {command.global_name}: a command is running")
        self.last_command = command
        self._task = asyncio.get_running_loop().create_task(trigger(command, self.context))
        return self._task

    def click(self, point: Vec2) -> None:
        if self.busy:
            self.editor.handle_click(point)

    def move(self, point: Vec2) -> None:
        if self.busy:
            self.editor.handle_mouse_move(point)

    def cancel(self) -> None:
        if self.busy:
            self.editor.handle_cancel()

    async def wait_idle(self) -> None:
        if self._task is not None:
            await self._task

    # Autocompletion and history

    def autocomplete(self, prefix: str) -> Optional[str]:
        """Complete ``prefix`` to a command name when exactly one command matches."""
        if not prefix.strip():
            return None
        matches = self.context.registry.search_prefix(prefix)
        if len(matches) == 1:
            return matches[0][1].global_name
        if matches:
            names = ", ".join(sorted(command.global_name for _, command in matches))
            self.context.print(f"Matching commands: {names}", RESPONSE)
        return None

    def history_previous(self) -> Optional[str]:
        if not self.history:
            return None
        self._history_index = max(0, self._history_index - 1)
        return self.history[self._history_index]

    def history_next(self) -> Optional[str]:
        if self._history_index >= len(self.history) - 1:
            self._history_index = len(self.history)
            return ""
        self._history_index += 1
        return self.history[self._history_index]
