from __future__ import annotations

import pytest
from ezdxf.math import Vec2

from dxf_cad_editor.editor.coordinates import (
    CoordinateError,
    angle_degrees,
    format_point,
    is_coordinate_input,
    parse_coordinate,
    parse_number,
)
from dxf_cad_editor.editor.prompts import (
    Keyword,
    PointOptions,
    PromptResult,
    PromptStatus,
    format_keywords,
    match_keyword,
)


def test_absolute_coordinate() -> None:
    assert parse_coordinate("10,5") == Vec2(10, 5)
    assert parse_coordinate(" -2.5 , 3 ") == Vec2(-2.5, 3)


def test_relative_coordinate_uses_base_point() -> None:
    assert parse_coordinate("@3,4", Vec2(1, 1)) == Vec2(4, 5)


def test_relative_coordinate_without_base_is_from_origin() -> None:
    assert parse_coordinate("@3,4") == Vec2(3, 4)


def test_polar_coordinate() -> None:
    point = parse_coordinate("@10<90", Vec2(1, 1))
    assert point.x == pytest.approx(1)
    assert point.y == pytest.approx(11)


def test_polar_negative_angle() -> None:
    point = parse_coordinate("@2<-90")
    assert point.isclose(Vec2(0, -2), abs_tol=1e-9)


@pytest.mark.parametrize("text", ["", "10", "a,b", "10,5,3", "@10", "<90", "@5<"])
def test_invalid_coordinates(text: str) -> None:
    assert not is_coordinate_input(text)
    with pytest.raises(CoordinateError):
        parse_coordinate(text)


def test_parse_number() -> None:
    assert parse_number(" 12.5 ") == 12.5
    assert parse_number("-3") == -3
    assert parse_number("3,4") is None
    assert parse_number("abc") is None


@pytest.mark.parametrize(
    "text, expected",
    [(".5", 0.5), ("+5", 5), ("-.25", -0.25), ("1e3", 1000), ("2.5E-1", 0.25)],
)
def test_parse_number_accepts_common_notations(text: str, expected: float) -> None:
    assert parse_number(text) == pytest.approx(expected)


def test_coordinates_accept_short_and_signed_numbers() -> None:
    assert parse_coordinate(".5,+2") == Vec2(0.5, 2)
    assert parse_coordinate("@1e1,-.5", Vec2(1, 1)) == Vec2(11, 0.5)
    assert parse_coordinate("@2<+90", Vec2(0, 0)).isclose(Vec2(0, 2))
    assert parse_number(".") is None
    assert parse_number("1e") is None


def test_format_point_and_angle() -> None:
    assert format_point(Vec2(1, 2.5)) == "1.0000, 2.5000"
    assert format_point(Vec2(1, 2.5), 2) == "1.00, 2.50"
    assert angle_degrees(Vec2(0, 0), Vec2(0, -1)) == pytest.approx(270)
    assert angle_degrees(Vec2(0, 0), Vec2(-1, 0)) == pytest.approx(180)


def test_keyword_defaults_and_matching() -> None:
    exit_kw = Keyword("eXit", "EXIT", "X")
    close_kw = Keyword("Close")
    assert close_kw.global_name == "Close"
    assert close_kw.local_name == "Close"

    assert exit_kw.matches("x")
    assert exit_kw.matches(" Exit ")
    assert not exit_kw.matches("")
    assert match_keyword("close", [exit_kw, close_kw]) is close_kw
    assert match_keyword("undo", [exit_kw, close_kw]) is None


def test_prompt_text_lists_keywords() -> None:
    options = PointOptions("Specify next point")
    assert options.prompt == "Specify next point:"
    options.add_keyword("Close", "CLOSE", "C")
    options.add_keyword("Undo", "UNDO", "U")
    assert options.prompt == "Specify next point [Close/Undo]:"
    assert format_keywords("Pick", []) == "Pick:"


def test_prompt_result_flags() -> None:
    result = PromptResult(PromptStatus.KEYWORD, keyword="CLOSE")
    assert result.is_keyword("CLOSE")
    assert not result.is_keyword("UNDO")
    assert not result.ok
    assert PromptResult(PromptStatus.OK, Vec2(1, 1)).ok
    assert PromptResult(PromptStatus.CANCEL).cancelled
    assert PromptResult(PromptStatus.EMPTY).empty
