from __future__ import annotations

import pytest

from dxf_cad_editor.config import DimensionStyle, EditorSettings


def test_defaults() -> None:
    settings = EditorSettings()
    assert settings.pick_aperture == 5.0
    assert settings.zoom_all_padding == 0.2
    assert settings.default_offset_distance == 10.0
    assert settings.join_tolerance == 0.001
    assert settings.dimension == DimensionStyle()


def test_from_env_overrides() -> None:
    settings = EditorSettings.from_env(
        {
            "DXF_EDITOR_PICK_APERTURE": "2.5",
            "DXF_EDITOR_ZOOM_ALL_PADDING": "0",
            "DXF_EDITOR_OFFSET_DISTANCE": " 4 ",
            "UNRELATED": "x",
        }
    )
    assert settings.pick_aperture == 2.5
    assert settings.zoom_all_padding == 0
    assert settings.default_offset_distance == 4
    assert settings.join_tolerance == 0.001


def test_from_env_ignores_blank_values() -> None:
    assert EditorSettings.from_env({"DXF_EDITOR_PICK_APERTURE": "  "}) == EditorSettings()


def test_from_env_rejects_non_numbers() -> None:
    with pytest.raises(ValueError, match="DXF_EDITOR_JOIN_TOLERANCE must be a number"):
        EditorSettings.from_env({"DXF_EDITOR_JOIN_TOLERANCE": "tight"})


def test_from_env_validates_values() -> None:
    with pytest.raises(ValueError, match="pick_aperture"):
        EditorSettings.from_env({"DXF_EDITOR_PICK_APERTURE": "-1"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pick_aperture": 0},
        {"zoom_all_padding": -0.1},
        {"default_offset_distance": 0},
        {"join_tolerance": 0},
    ],
)
def test_invalid_editor_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        EditorSettings(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scale_factor": 0},
        {"min_text_height": 0},
        {"min_text_height": 10, "max_text_height": 5},
        {"arrow_ratio": -1},
    ],
)
def test_invalid_dimension_style(kwargs) -> None:
    with pytest.raises(ValueError):
        DimensionStyle(**kwargs)
