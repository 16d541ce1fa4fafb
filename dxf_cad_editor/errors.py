"""Exception taxonomy for the DXF editor."""

from __future__ import annotations


class CadEditorError(Exception):
    """Base class for all editor errors."""


class FormatError(CadEditorError):
    """The DXF stream is structurally inconsistent (truncated section, bad group code, ...)."""


class CommandConflictError(CadEditorError, ValueError):
    """A command name or alias is already registered."""


class CommandCancelled(CadEditorError):
    """The user cancelled the running command.

    Not a failure: the command lifecycle reports it as ``*Cancel*``.
    """


class PendingRequestError(CadEditorError, RuntimeError):
    """A command issued a second input request while one was still outstanding."""
