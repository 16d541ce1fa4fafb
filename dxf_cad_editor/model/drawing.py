"""Drawing container: entities, layers, line types and blocks."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ezdxf.math import Vec2

from dxf_cad_editor.model.entities import BYBLOCK, BYLAYER, Entity


DEFAULT_LAYER = "0"
DEFAULT_COLOR = 7  # white/black
DEFAULT_LINETYPE = "CONTINUOUS"


@dataclass
class Layer:
    name: str
    color: int = DEFAULT_COLOR
    linetype: str = DEFAULT_LINETYPE
    frozen: bool = False
    off: bool = False
    locked: bool = False

    @property
    def visible(self) -> bool:
        return not (self.frozen or self.off)


@dataclass
class LineType:
    name: str
    description: str = ""
    pattern: List[float] = field(default_factory=list)

    @property
    def total_length(self) -> float:
        return sum(abs(e) for e in self.pattern)


@dataclass
class Block:
    name: str
    base_point: Vec2 = field(default_factory=Vec2)
    entities: List[Entity] = field(default_factory=list)


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Vec2:
        return Vec2((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def expanded(self, padding: float) -> "Bounds":
        """Grow by ``padding`` as a fraction of the larger side (never zero-sized)."""
        margin = max(self.width, self.height, 1e-9) * padding
        return Bounds(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )

    def contains(self, point: Vec2) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y

    def as_list(self) -> List[float]:
        return [self.min_x, self.min_y, self.max_x, self.max_y]

    @classmethod
    def from_points(cls, points: Iterable[Vec2]) -> Optional["Bounds"]:
        """Bounds of the finite points, or None when there are none."""
        xs: List[float] = []
        ys: List[float] = []
        for p in points:
            if math.isfinite(p.x) and math.isfinite(p.y):
                xs.append(p.x)
                ys.append(p.y)
        if not xs:
            return None
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def from_corners(cls, a: Vec2, b: Vec2) -> "Bounds":
        return cls(min(a.x, b.x), min(a.y, b.y), max(a.x, b.x), max(a.y, b.y))


# Used when there is nothing finite to measure
DEFAULT_BOUNDS = Bounds(-100.0, -100.0, 100.0, 100.0)


@dataclass(frozen=True)
class EditRecord:
    """Entities added and removed by one commit; replay/undo is up to the caller."""

    added: Tuple[Entity, ...] = ()
    removed: Tuple[Entity, ...] = ()

    def merge(self, other: "EditRecord") -> "EditRecord":
        return EditRecord(self.added + other.added, self.removed + other.removed)

    @property
    def empty(self) -> bool:
        return not self.added and not self.removed


def _index_of(entities: Sequence[Entity], entity: Entity) -> int:
    # Entities compare by value; edits must target the exact object.
    for i, e in enumerate(entities):
        if e is entity:
            return i
    return -1


def default_layers() -> Dict[str, Layer]:
    return {DEFAULT_LAYER: Layer(DEFAULT_LAYER)}


def default_line_types() -> Dict[str, LineType]:
    return {
        "CONTINUOUS": LineType("CONTINUOUS", "Solid line"),
        "DASHED": LineType("DASHED", "Dashed line", [0.5, -0.25]),
    }


@dataclass
class Drawing:
    """
    The editable document.

    ``entities`` is kept in draw order. Mutate it through ``add_entity``,
    ``remove_entity`` and ``replace_entity`` so every change yields an
    ``EditRecord`` and new entities get a handle.
    """

    entities: List[Entity] = field(default_factory=list)
    layers: Dict[str, Layer] = field(default_factory=default_layers)
    line_types: Dict[str, LineType] = field(default_factory=default_line_types)
    blocks: Dict[str, Block] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    # Derived state

    @property
    def bounds(self) -> Bounds:
        """Extents of all entities, or ``DEFAULT_BOUNDS`` for an empty drawing."""
        from dxf_cad_editor.geometry.spatial import entity_bounds

        boxes = [b for b in (entity_bounds(e) for e in self.entities) if b is not None]
        if not boxes:
            return DEFAULT_BOUNDS
        return Bounds(
            min(b.min_x for b in boxes),
            min(b.min_y for b in boxes),
            max(b.max_x for b in boxes),
            max(b.max_y for b in boxes),
        )

    def layer(self, name: str) -> Layer:
        """Layer by name; undeclared layers resolve to a default visible layer."""
        found = self.layers.get(name)
        if found is None:
            return Layer(name)
        return found

    def get_block(self, name: str) -> Optional[Block]:
        return self.blocks.get(name)

    def is_visible(self, entity: Entity) -> bool:
        return self.layer(entity.layer or DEFAULT_LAYER).visible

    def visible_entities(self) -> List[Entity]:
        return [e for e in self.entities if self.is_visible(e)]

    def is_layer_locked(self, name: str) -> bool:
        return self.layer(name or DEFAULT_LAYER).locked

    def resolve_color(self, entity: Entity, block_color: Optional[int] = None) -> int:
        """
        Effective ACI color of an entity.

        Explicit colors 1..255 win. BYBLOCK uses ``block_color`` when given;
        BYLAYER, missing and other non-positive values inherit the layer color.
        """
        c = entity.color
        if c is not None and 0 < c < BYLAYER:
            return c
        if c == BYBLOCK and block_color is not None:
            return block_color
        layer_color = abs(self.layer(entity.layer or DEFAULT_LAYER).color)
        if 0 < layer_color < BYLAYER:
            return layer_color
        return DEFAULT_COLOR

    # Handles

    def next_handle(self) -> str:
        """A hex handle larger than any handle in use."""
        highest = 0
        for e in self._all_entities():
            if not e.handle:
                continue
            try:
                highest = max(highest, int(e.handle, 16))
            except ValueError:
                continue
        return f"{highest + 1:X}"

    def _all_entities(self) -> Iterator[Entity]:
        yield from self.entities
        for block in self.blocks.values():
            yield from block.entities

    # Mutation

    def add_entity(self, entity: Entity) -> EditRecord:
        if not entity.handle:
            entity.handle = self.next_handle()
        self.entities.append(entity)
        return EditRecord(added=(entity,))

    def remove_entity(self, entity: Entity) -> EditRecord:
        idx = _index_of(self.entities, entity)
        if idx < 0:
            return EditRecord()
        del self.entities[idx]
        return EditRecord(removed=(entity,))

    def replace_entity(self, old: Entity, new: Entity) -> EditRecord:
        """Swap ``old`` for ``new`` in place, keeping draw order and the handle."""
        idx = _index_of(self.entities, old)
        if idx < 0:
            return self.add_entity(new)
        if not new.handle:
            new.handle = old.handle
        self.entities[idx] = new
        return EditRecord(added=(new,), removed=(old,))

    def contains(self, entity: Entity) -> bool:
        return _index_of(self.entities, entity) >= 0
