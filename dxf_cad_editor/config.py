"""
Editor configuration.

Settings are plain frozen dataclasses passed explicitly to the editor and the
command context. ``EditorSettings.from_env`` layers optional environment
overrides on top of the defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class DimensionStyle:
    """
    Dimension sizing rules, all relative to the measured value.

    Text height is ``measurement * scale_factor`` clamped to
    ``[min_text_height, max_text_height]``; every other size is a ratio of
    that text height.
    """

    scale_factor: float = 0.03
    min_text_height: float = 1.5
    max_text_height: float = 50.0
    arrow_ratio: float = 1.0
    text_gap_ratio: float = 0.25
    extension_offset_ratio: float = 0.25
    extension_beyond_ratio: float = 0.5
    arrow_width_ratio: float = 0.3

    def __post_init__(self):
        if self.scale_factor <= 0:
            raise ValueError(f"scale_factor must be > 0, got {self.scale_factor}")
        if not 0 < self.min_text_height <= self.max_text_height:
            raise ValueError(
                f"text height range is invalid: "
                f"[{self.min_text_height}, {self.max_text_height}]"
            )
        for name in (
            "arrow_ratio",
            "text_gap_ratio",
            "extension_offset_ratio",
            "extension_beyond_ratio",
            "arrow_width_ratio",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")


@dataclass(frozen=True)
class EditorSettings:
    """Tolerances and defaults used by the interaction layer and the commands."""

    pick_aperture: float = 5.0  # world units
    zoom_all_padding: float = 0.2  # ZOOM All margin, fraction of extents
    default_offset_distance: float = 10.0
    join_tolerance: float = 0.001  # PEDIT Join endpoint match
    dimension: DimensionStyle = field(default_factory=DimensionStyle)

    def __post_init__(self):
        if self.pick_aperture <= 0:
            raise ValueError(f"pick_aperture must be > 0, got {self.pick_aperture}")
        if self.zoom_all_padding < 0:
            raise ValueError(
                f"zoom_all_padding must be >= 0, got {self.zoom_all_padding}"
            )
        if self.default_offset_distance <= 0:
            raise ValueError(
                f"default_offset_distance must be > 0, got {self.default_offset_distance}"
            )
        if self.join_tolerance <= 0:
            raise ValueError(f"join_tolerance must be > 0, got {self.join_tolerance}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorSettings":
        """
        Build settings from ``DXF_EDITOR_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            EditorSettings with every variable that is set applied over the defaults

        Example:
            # DXF_EDITOR_PICK_APERTURE=2.5 python -m dxf_cad_editor plan.dxf
            settings = EditorSettings.from_env()
        """
        env = os.environ if environ is None else environ
        overrides: Dict[str, float] = {}
        for var, attr in _ENV_VARIABLES.items():
            raw = env.get(var)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[attr] = float(raw)
            except ValueError:
                raise ValueError(f"{var} must be a number, got {raw!r}") from None
        return replace(cls(), **overrides)


_ENV_VARIABLES = {
    "DXF_EDITOR_PICK_APERTURE": "pick_aperture",
    "DXF_EDITOR_ZOOM_ALL_PADDING": "zoom_all_padding",
    "DXF_EDITOR_OFFSET_DISTANCE": "default_offset_distance",
    "DXF_EDITOR_JOIN_TOLERANCE": "join_tolerance",
}
