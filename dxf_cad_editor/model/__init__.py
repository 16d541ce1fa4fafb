"""Editable drawing model: entities, layers, blocks and the Drawing container."""

from dxf_cad_editor.model.entities import (
    BYBLOCK,
    BYLAYER,
    ENTITY_TYPES,
    Arc,
    Attrib,
    Circle,
    Dimension,
    Ellipse,
    Entity,
    Hatch,
    Insert,
    Leader,
    Line,
    Point,
    Polyline,
    Solid,
    Spline,
    Text,
)

from dxf_cad_editor.model.drawing import (
    DEFAULT_BOUNDS,
    DEFAULT_LAYER,
    Block,
    Bounds,
    Drawing,
    EditRecord,
    Layer,
    LineType,
)

__all__ = [
    # Entities
    "BYBLOCK",
    "BYLAYER",
    "ENTITY_TYPES",
    "Entity",
    "Line",
    "Circle",
    "Arc",
    "Polyline",
    "Text",
    "Attrib",
    "Point",
    "Insert",
    "Ellipse",
    "Spline",
    "Hatch",
    "Dimension",
    "Solid",
    "Leader",
    # Drawing
    "DEFAULT_BOUNDS",
    "DEFAULT_LAYER",
    "Block",
    "Bounds",
    "Drawing",
    "EditRecord",
    "Layer",
    "LineType",
]
