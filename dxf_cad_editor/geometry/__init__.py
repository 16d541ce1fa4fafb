"""Pure 2D geometry: intersection kernel, construction formulas and spatial queries."""

from dxf_cad_editor.geometry.kernel import (
    ArcFit,
    LineHit,
    circle_circle_intersection,
    circle_through_3_points,
    infinite_line_intersection,
    is_on_arc,
    is_on_segment,
    line_circle_intersection,
    normalize_degrees,
    parameter_on_arc,
    parameter_on_segment,
)

from dxf_cad_editor.geometry.construct import (
    AngularDimension,
    DimensionSettings,
    LinearDimension,
    aligned_dimension,
    angular_dimension,
    arrowhead,
    auto_linear_dimension,
    dimension_entities,
    dimension_settings,
    distance_to_segment,
    horizontal_dimension,
    offset_line,
    offset_polyline_vertices,
    offset_radius,
    through_distance,
    translate_entity,
    vertical_dimension,
)

from dxf_cad_editor.geometry.spatial import (
    distance_to_entity,
    entity_bounds,
    entity_center,
    find_entities_in_region,
    find_entities_near_point,
)

__all__ = [
    # Kernel
    "ArcFit",
    "LineHit",
    "circle_through_3_points",
    "infinite_line_intersection",
    "line_circle_intersection",
    "circle_circle_intersection",
    "is_on_segment",
    "is_on_arc",
    "parameter_on_segment",
    "parameter_on_arc",
    "normalize_degrees",
    # Construction
    "DimensionSettings",
    "LinearDimension",
    "AngularDimension",
    "dimension_settings",
    "horizontal_dimension",
    "vertical_dimension",
    "auto_linear_dimension",
    "aligned_dimension",
    "angular_dimension",
    "arrowhead",
    "dimension_entities",
    "offset_line",
    "offset_radius",
    "offset_polyline_vertices",
    "through_distance",
    "distance_to_segment",
    "translate_entity",
    # Spatial
    "entity_bounds",
    "entity_center",
    "distance_to_entity",
    "find_entities_near_point",
    "find_entities_in_region",
]
