"""
Command registry and execution lifecycle.

Commands are plain ``async def command(ctx)`` functions wrapped in a
``Command`` record and registered into named groups of a
``CommandRegistry``. Global names and local aliases are unique across the
whole registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.editor.context import ERROR, RESPONSE, Console, Presentation
from dxf_cad_editor.editor.editor import Editor
from dxf_cad_editor.errors import CommandCancelled, CommandConflictError
from dxf_cad_editor.model.drawing import Drawing, EditRecord
from dxf_cad_editor.model.entities import Entity

logger = logging.getLogger(__name__)

SYSTEM_GROUP = "ACAD"
DEFAULT_GROUP = "USER"

CommandFunc = Callable[["CommandContext"], Awaitable[None]]
LifecycleListener = Callable[["Command"], None]


@dataclass(frozen=True)
class Command:
    global_name: str
    local_name: str
    description: str
    func: CommandFunc


class CommandRegistry:
    """
    Named command groups with registry-wide unique names.

    Example:
        registry = CommandRegistry()
        registry.add_command(SYSTEM_GROUP, Command("LINE", "L", "Draw lines", line_command))
        registry.lookup("l").global_name  # "LINE"
    """

    def __init__(self):
        self._groups: Dict[str, Dict[str, Command]] = {SYSTEM_GROUP: {}, DEFAULT_GROUP: {}}
        self.command_will_start: List[LifecycleListener] = []
        self.command_ended: List[LifecycleListener] = []

    @property
    def groups(self) -> List[str]:
        return list(self._groups)

    def _name_in_use(self, name: str) -> bool:
        return self.lookup(name) is not None

    def add_command(self, group: str, command: Command) -> Command:
        """
        Register a command in ``group`` (created on demand).

        Names are upper-cased and an empty local name defaults to the global
        name.

        Raises:
            CommandConflictError: the global name or the alias is already taken
        """
        global_name = command.global_name.strip().upper()
        local_name = (command.local_name or global_name).strip().upper()
        if not global_name:
            raise ValueError("command global name must not be empty")
        for name in {global_name, local_name}:
            if self._name_in_use(name):
                raise CommandConflictError(f"command name '{name}' is already registered")

        registered = Command(global_name, local_name, command.description, command.func)
        self._groups.setdefault(group.upper(), {})[global_name] = registered
        logger.debug("Registered %s (%s) in group %s", global_name, local_name, group.upper())
        return registered

    def command(
        self,
        global_name: str,
        local_name: str = "",
        description: str = "",
        group: str = DEFAULT_GROUP,
    ) -> Callable[[CommandFunc], CommandFunc]:
        """Decorator form of ``add_command``."""

        def decorator(func: CommandFunc) -> CommandFunc:
            self.add_command(group, Command(global_name, local_name, description, func))
            return func

        return decorator

    def remove_command(self, group: str, name: str) -> bool:
        commands = self._groups.get(group.upper())
        if commands is None:
            return False
        return commands.pop(name.strip().upper(), None) is not None

    def lookup_global(self, name: str) -> Optional[Command]:
        key = name.strip().upper()
        for commands in self._groups.values():
            if key in commands:
                return commands[key]
        return None

    def lookup_local(self, name: str) -> Optional[Command]:
        key = name.strip().upper()
        for commands in self._groups.values():
            for command in commands.values():
                if command.local_name == key:
                    return command
        return None

    def lookup(self, name: str) -> Optional[Command]:
        """Global name first, then local alias; case-insensitive."""
        return self.lookup_global(name) or self.lookup_local(name)

    def search_prefix(self, prefix: str) -> List[Tuple[str, Command]]:
        """(group, command) pairs whose global name or alias starts with ``prefix``."""
        key = prefix.strip().upper()
        return [
            (group, command)
            for group, commands in self._groups.items()
            for command in commands.values()
            if command.global_name.startswith(key) or command.local_name.startswith(key)
        ]

    def all_commands(self) -> List[Command]:
        return [command for commands in self._groups.values() for command in commands.values()]

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None


@dataclass
class CommandContext:
    """Everything a running command may touch."""

    editor: Editor
    console: Console
    presentation: Presentation
    drawing: Drawing
    registry: CommandRegistry
    settings: EditorSettings = field(default_factory=EditorSettings)
    variables: Dict[str, Any] = field(default_factory=dict)  # values remembered between runs

    def print(self, text: str, kind: str = RESPONSE) -> None:
        self.console.print(text, kind)

    def check_cancelled(self) -> None:
        self.editor.check_cancelled()

    def add(self, entity: Entity) -> EditRecord:
        return self.presentation.add_entity(entity)

    def delete(self, entity: Entity) -> EditRecord:
        return self.presentation.delete_entity(entity)

    def replace(self, old: Entity, new: Entity) -> EditRecord:
        return self.presentation.replace_entity(old, new)

    def is_locked(self, entity: Entity) -> bool:
        return self.presentation.is_layer_locked(entity.layer or "0")


async def trigger(command: Command, ctx: CommandContext) -> None:
    """
    Run one command with start/end notifications.

    Cancellation prints ``*Cancel*``; any other exception is logged and
    reported as ``Error: ...``. The editor's request slot is always
    released and the end notification always fires.
    """
    logger.info("Command %s started", command.global_name)
    try:
        for listener in list(ctx.registry.command_will_start):
            listener(command)
        ctx.editor.begin_command()
        await command.func(ctx)
        ctx.editor.check_cancelled()
    except CommandCancelled:
        ctx.print("*Cancel*", ERROR)
    except Exception as exc:
        logger.exception("Command %s failed", command.global_name)
        ctx.print(f"Error: {exc}", ERROR)
    finally:
        ctx.editor.release()
        ctx.presentation.clear_preview()
        logger.info("Command %s ended", command.global_name)
        for listener in list(ctx.registry.command_ended):
            listener(command)
