"""Tests for screen rendering."""

import io
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from petcli.app import PetApp
from petcli.art import BLINK_EVERY, BLINK_EYES, EYES, pet_frame
from petcli.config import DEFAULT_ASCII, Config
from petcli.history import Message, Role
from petcli.moods import Mood
from petcli.render import ChatPane, message_lines
from petcli.themes import THEMES

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class NullClient:
    async def send(self, prompt, context):
        return ""

    async def close(self):
        pass


def render_text(renderable, width: int = 80, height: int = 30) -> str:
    console = Console(width=width, height=height, file=io.StringIO(), record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_screen_shows_pet_and_chat():
    app = PetApp(Config(pet_name="Mochi"), NullClient(), clock=lambda: T0)
    app.transcript.append(Message(Role.USER, "hello there"))
    app.transcript.append(Message(Role.PET, "*purrs*"))
    app.input = "typing"
    out = render_text(app.screen())
    assert "Mochi (Mood: Happy" in out
    assert "You: hello there" in out
    assert "Mochi: *purrs*" in out
    assert "> typing" in out
    assert EYES[Mood.HAPPY] in out


def test_chat_pane_offset_shows_older_lines():
    lines = [Text(f"line {i}") for i in range(20)]
    bottom = render_text(Panel(ChatPane(lines, 0), height=7))
    assert "line 19" in bottom
    assert "line 10" not in bottom

    scrolled = render_text(Panel(ChatPane(lines, 10), height=7))
    assert "line 9" in scrolled
    assert "line 19" not in scrolled


def test_message_lines_multiline_and_spacing():
    theme = THEMES["default"]
    pet = message_lines(Message(Role.PET, "a\nb"), "Mochi", Mood.NEUTRAL, theme)
    assert [t.plain for t in pet] == ["Mochi: a", "       b", ""]
    user = message_lines(Message(Role.USER, "hi"), "Mochi", Mood.NEUTRAL, theme)
    assert [t.plain for t in user] == ["You: hi"]


def test_pet_frame_eyes_and_blink():
    assert EYES[Mood.SAD] in pet_frame(DEFAULT_ASCII, Mood.SAD, tick=0)
    assert BLINK_EYES in pet_frame(DEFAULT_ASCII, Mood.HAPPY, tick=BLINK_EVERY - 1)


def test_wrapped_history_scrolls_back_to_first_message():
    app = PetApp(Config(pet_name="Mochi"), NullClient(), clock=lambda: T0)
    for i in range(30):
        app.transcript.append(Message(Role.USER, f"msg{i:02d} " + "word " * 40))

    render_text(app.screen(), width=60)
    app.transcript.scroll(10_000)
    assert app.transcript.offset > app.transcript.total_lines()

    out = render_text(app.screen(), width=60)
    assert "msg00" in out
    assert "msg29" not in out


def test_chat_pane_reports_scroll_limit():
    limits = []
    lines = [Text(f"line {i}") for i in range(20)]
    out = render_text(Panel(ChatPane(lines, 500, limits.append), height=7))
    assert set(limits) == {15}
    assert "line 0" in out
    assert "line 5" not in out
