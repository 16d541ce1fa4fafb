"""Prompt options, keywords and results of the interaction protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ezdxf.math import Vec2

from dxf_cad_editor.model.entities import Entity


class PromptStatus(enum.Enum):
    OK = "ok"
    KEYWORD = "keyword"
    EMPTY = "empty"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Keyword:
    """
    Named alternative answer to a prompt.

    ``global_name`` is what commands compare against, ``local_name`` is the
    short alias the user may type (defaults to the global name) and
    ``display_name`` is what the prompt shows.
    """

    display_name: str
    global_name: str = ""
    local_name: str = ""

    def __post_init__(self):
        if not self.global_name:
            object.__setattr__(self, "global_name", self.display_name)
        if not self.local_name:
            object.__setattr__(self, "local_name", self.global_name)

    def matches(self, text: str) -> bool:
        key = text.strip().upper()
        return bool(key) and key in (self.global_name.upper(), self.local_name.upper())


def format_keywords(message: str, keywords: Sequence[Keyword]) -> str:
    """Prompt text as shown on the command line: ``message [K1/K2]:``."""
    if not keywords:
        return f"{message}:"
    names = "/".join(k.display_name for k in keywords)
    return f"{message} [{names}]:"


def match_keyword(text: str, keywords: Sequence[Keyword]) -> Optional[Keyword]:
    """First keyword whose global or local name equals ``text`` (case-insensitive)."""
    for keyword in keywords:
        if keyword.matches(text):
            return keyword
    return None


@dataclass
class PromptOptions:
    message: str
    keywords: List[Keyword] = field(default_factory=list)
    allow_none: bool = False

    @property
    def prompt(self) -> str:
        return format_keywords(self.message, self.keywords)

    def add_keyword(self, display_name: str, global_name: str = "", local_name: str = "") -> Keyword:
        keyword = Keyword(display_name, global_name, local_name)
        self.keywords.append(keyword)
        return keyword


@dataclass
class PointOptions(PromptOptions):
    base_point: Optional[Vec2] = None
    jig: Any = None  # Jig


@dataclass
class DistanceOptions(PromptOptions):
    base_point: Optional[Vec2] = None
    default_value: Optional[float] = None
    jig: Any = None  # Jig


@dataclass
class SelectionOptions(PromptOptions):
    message: str = "Select objects"
    allow_none: bool = True


@dataclass
class EntityOptions(PromptOptions):
    pass


@dataclass(frozen=True)
class EntityPick:
    entity: Entity
    point: Vec2


@dataclass(frozen=True)
class PromptResult:
    """
    Outcome of one request.

    ``value`` is a ``Vec2`` for point requests, a float for distances, a
    list of entities for selections and an ``EntityPick`` for entity
    requests. ``keyword`` is the matched keyword's global name.
    """

    status: PromptStatus
    value: Any = None
    keyword: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is PromptStatus.OK

    @property
    def cancelled(self) -> bool:
        return self.status is PromptStatus.CANCEL

    @property
    def empty(self) -> bool:
        return self.status is PromptStatus.EMPTY

    def is_keyword(self, name: str) -> bool:
        return self.status is PromptStatus.KEYWORD and self.keyword == name


CANCELLED = PromptResult(PromptStatus.CANCEL)
EMPTY = PromptResult(PromptStatus.EMPTY)
