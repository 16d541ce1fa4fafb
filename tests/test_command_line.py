from __future__ import annotations

import asyncio
from typing import List, Tuple

import pytest
from ezdxf.math import Vec2

from dxf_cad_editor.cli import build_session
from dxf_cad_editor.config import EditorSettings
from dxf_cad_editor.model.drawing import Drawing


class RecordingConsole:
    def __init__(self):
        self.messages: List[Tuple[str, str]] = []
        self.prompt = ""

    def print(self, text: str, kind: str = "response") -> None:
        self.messages.append((text, kind))

    def set_prompt(self, text: str) -> None:
        self.prompt = text

    @property
    def texts(self) -> List[str]:
        return [text for text, _ in self.messages]


def _command_line():
    drawing = Drawing()
    console = RecordingConsole()
    session = build_session(drawing, console, EditorSettings())
    return session, drawing, console


async def _type(session, *lines: str) -> None:
    for line in lines:
        session.submit(line)
        await asyncio.sleep(0)


def test_typed_lines_drive_a_command() -> None:
    session, drawing, console = _command_line()

    async def scenario():
        task = session.submit("l")
        assert task is not None
        await asyncio.sleep(0)
        assert session.busy
        assert console.prompt == "Specify first point:"
        await _type(session, "0,0", "10,0", "10,10", "")
        await task

    asyncio.run(scenario())

    assert not session.busy
    assert [e.dxftype for e in drawing] == ["LINE", "LINE"]
    assert console.texts[-1] == "Line command completed"
    assert session.last_command.global_name == "LINE"


def test_clicks_are_routed_to_the_running_command() -> None:
    session, drawing, _ = _command_line()

    async def scenario():
        task = session.submit("CIRCLE")
        await asyncio.sleep(0)
        session.click(Vec2(5, 5))
        await asyncio.sleep(0)
        session.move(Vec2(7, 5))
        session.click(Vec2(8, 5))
        await asyncio.sleep(0)
        session.submit("")
        await task

    asyncio.run(scenario())

    circle = drawing.entities[0]
    assert circle.center == Vec2(5, 5)
    assert circle.radius == pytest.approx(3.0)


def test_empty_input_repeats_last_command() -> None:
    session, drawing, console = _command_line()

    async def scenario():
        first = session.submit("RECTANGLE")
        await asyncio.sleep(0)
        await _type(session, "0,0", "2,2", "")
        await first

        again = session.submit("")
        assert again is not None
        await asyncio.sleep(0)
        assert session.busy
        await _type(session, "5,5", "6,6", "")
        await again

    asyncio.run(scenario())

    assert len(drawing) == 2
    assert console.texts.count("RECTANGLE") == 2


def test_empty_input_with_no_previous_command_does_nothing() -> None:
    session, _, console = _command_line()

    async def scenario():
        return session.submit("")

    assert asyncio.run(scenario()) is None
    assert console.messages == []


def test_cancel_stops_the_running_command() -> None:
    session, drawing, console = _command_line()

    async def scenario():
        task = session.submit("LINE")
        await asyncio.sleep(0)
        await _type(session, "0,0")
        session.cancel()
        await task

    asyncio.run(scenario())

    assert not session.busy
    assert len(drawing) == 0
    assert console.messages[-1] == ("*Cancel*", "error")


def test_unknown_command() -> None:
    session, _, console = _command_line()

    async def scenario():
        return session.submit("frobnicate")

    assert asyncio.run(scenario()) is None
    assert console.messages == [
        ("Unknown command: FROBNICATE. Type HELP for available commands.", "error")
    ]


def test_start_while_busy_is_rejected() -> None:
    session, _, _ = _command_line()
    registry = session.context.registry

    async def scenario():
        session.submit("LINE")
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError):
            session.start(registry.lookup("CIRCLE"))
        session.cancel()
        await session.wait_idle()

    asyncio.run(scenario())


def test_autocomplete() -> None:
    session, _, console = _command_line()
    assert session.autocomplete("zoomw") == "ZOOMWINDOW"
    assert session.autocomplete("pe") == "PEDIT"
    assert session.autocomplete("") is None
    assert session.autocomplete("zoom") is None
    assert console.texts[-1] == "Matching commands: ZOOM, ZOOMALL, ZOOMEXTENTS, ZOOMWINDOW"
    assert session.autocomplete("qq") is None


def test_history_navigation() -> None:
    session, _, _ = _command_line()
    assert session.history_previous() is None

    async def scenario():
        task = session.submit("LINE")
        await asyncio.sleep(0)
        await _type(session, "0,0")
        session.cancel()
        await task

    asyncio.run(scenario())

    assert session.history == ["LINE", "0,0"]
    assert session.history_previous() == "0,0"
    assert session.history_previous() == "LINE"
    assert session.history_previous() == "LINE"
    assert session.history_next() == "0,0"
    assert session.history_next() == ""
