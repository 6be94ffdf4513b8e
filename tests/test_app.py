"""Tests for PetApp: routing, commands, the pending-request slot and key handling."""

import asyncio
from datetime import datetime, timezone

from petcli.app import PetApp
from petcli.config import Config
from petcli.errors import AuthError, RateLimitError
from petcli.history import Role
from petcli.keys import Key, KeyKind
from petcli.moods import PetState
from petcli.storage import Storage

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClient:
    """Stands in for PetClient; replies from a script of strings or exceptions."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[tuple[str, list]] = []
        self.closed = False
        self.gate: asyncio.Event | None = None

    async def send(self, prompt, context):
        self.calls.append((prompt, context))
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def close(self):
        self.closed = True


def make_app(*replies, storage=None, **config) -> PetApp:
    cfg = Config(pet_name="Mochi", **config)
    return PetApp(cfg, FakeClient(*replies), storage=storage, clock=lambda: T0)


async def finish(app: PetApp) -> None:
    """Let the pending request complete and merge it on the next tick."""
    if app.pending is not None:
        await asyncio.wait([app.pending])
    app.tick()


def texts(messages) -> list[tuple[Role, str]]:
    return [(m.role, m.text) for m in messages]


class TestChat:
    async def test_chat_roundtrip(self):
        app = make_app("*purrs* hello!")
        app.handle_line("hi Mochi")
        assert app.pending is not None
        assert texts(app.transcript.all()) == [(Role.USER, "hi Mochi")]
        assert len(app.history) == 0

        await finish(app)
        assert app.pending is None
        assert texts(app.history.all()) == [(Role.USER, "hi Mochi"), (Role.PET, "*purrs* hello!")]
        assert texts(app.transcript.all()) == texts(app.history.all())
        assert app.state.interaction_count == 1

    async def test_reply_merged_exactly_once(self):
        app = make_app("meow")
        app.handle_line("hi")
        await finish(app)
        app.tick()
        app.tick()
        assert [m.text for m in app.transcript.all()].count("meow") == 1

    async def test_context_and_recent_commands_sent(self):
        app = make_app("first", "second")
        app.recent_commands.add("git status")
        app.handle_line("hello")
        await finish(app)
        app.handle_line("again")
        await finish(app)

        prompt, context = app._client.calls[1]
        assert "git status" in prompt
        assert prompt.endswith("User message: again")
        assert [m.text for m in context] == ["hello", "first"]

    async def test_shell_query(self):
        app = make_app("That lists files.")
        app.handle_line("$ ls -la")
        await finish(app)
        prompt, _ = app._client.calls[0]
        assert "Explain what this terminal command does" in prompt
        assert "ls -la" in prompt
        assert "ls -la" in app.recent_commands.latest()
        assert app.history.all()[0].text == "$ ls -la"

    async def test_auth_error_shows_one_message_and_keeps_running(self):
        app = make_app(AuthError("Authentication failed (HTTP 401)."), "back online")
        app.handle_line("hello")
        await finish(app)

        errors = [m for m in app.transcript.all() if m.role is Role.SYSTEM]
        assert len(errors) == 1
        assert "Authentication failed" in errors[0].text
        assert app.running
        assert len(app.history) == 0

        app.handle_line("try again")
        await finish(app)
        assert app.history.all()[-1].text == "back online"

    async def test_unexpected_exception_is_surfaced(self):
        app = make_app(RuntimeError("boom"))
        app.handle_line("hello")
        await finish(app)
        assert "Unexpected error: boom" in app.transcript.all()[-1].text
        assert app.running

    async def test_only_one_request_in_flight(self):
        app = make_app("one", "two")
        app._client.gate = asyncio.Event()
        app.handle_line("first")
        pending = app.pending
        app.handle_line("second")
        assert app.pending is pending
        assert app.transcript.all()[-1].role is Role.SYSTEM

        app._client.gate.set()
        await finish(app)
        assert len(app._client.calls) == 1
        assert [m.text for m in app.history.all()] == ["first", "one"]

    async def test_ctrl_c_cancels_pending(self):
        app = make_app(RateLimitError("slow down"))
        app._client.gate = asyncio.Event()
        app.handle_line("hello")
        task = app.pending
        app.handle_key(Key(KeyKind.CTRL_C))
        assert app.pending is None
        await asyncio.wait([task])
        assert task.cancelled()
        app.tick()
        assert app.transcript.all()[-1].text == "Request cancelled."
        assert len(app.history) == 0

    async def test_history_limit_holds(self):
        replies = [f"r{i}" for i in range(6)]
        app = make_app(*replies, history_limit=4)
        for i in range(6):
            app.handle_line(f"q{i}")
            await finish(app)
            assert len(app.history) <= 4
        assert [m.text for m in app.history.all()] == ["q4", "r4", "q5", "r5"]


class TestCommands:
    def test_unknown_command_changes_nothing_but_one_notice(self):
        app = make_app()
        state = app.state
        history = app.history.all()
        app.handle_line("/dance")
        assert app.state == state
        assert app.history.all() == history
        assert len(app.transcript) == 1
        notice = app.transcript.all()[0]
        assert notice.role is Role.SYSTEM
        assert "not recognized" in notice.text
        assert app.pending is None

    def test_stats(self):
        app = make_app()
        app.state = PetState.fresh("Mochi", T0)
        app.handle_line("/stats")
        text = app.transcript.all()[-1].text
        assert "Mochi" in text
        assert "Happy" in text
        assert "Interactions: 0" in text
        assert len(app.history) == 0

    async def test_purge_empties_history(self, tmp_path):
        storage = Storage(tmp_path / "pet.db")
        app = make_app("a", "b", storage=storage)
        for line in ("one", "two"):
            app.handle_line(line)
            await finish(app)
        assert len(app.history) == 4
        assert len(storage.load_messages(100)) == 4

        app.handle_line("/purge")
        assert len(app.history) == 0
        assert storage.load_messages(100) == []
        assert texts(app.transcript.all()) == [(Role.SYSTEM, "Chat history has been purged from disk.")]
        storage.close()

    async def test_clear_only_clears_window(self):
        app = make_app("meow")
        app.handle_line("hi")
        await finish(app)
        app.handle_line("/clear")
        assert len(app.history) == 2
        assert texts(app.transcript.all()) == [(Role.SYSTEM, "Chat window cleared.")]

    def test_help(self):
        app = make_app()
        app.handle_line("/help")
        assert "/purge" in app.transcript.all()[-1].text

    def test_exit_stops_and_saves(self, tmp_path):
        storage = Storage(tmp_path / "pet.db")
        app = make_app(storage=storage)
        app.handle_line("/exit")
        assert not app.running
        assert "Goodbye" in app.transcript.all()[-1].text
        assert storage.load_pet() == app.state
        storage.close()


class TestKeys:
    def test_typing_and_submit(self):
        app = make_app()
        for ch in "/helpx":
            app.handle_key(Key(KeyKind.CHAR, ch))
        app.handle_key(Key(KeyKind.BACKSPACE))
        assert app.input == "/help"
        app.handle_key(Key(KeyKind.ENTER))
        assert app.input == ""
        assert "Available Commands" in app.transcript.all()[-1].text

    def test_scroll_keys(self):
        app = make_app()
        for _ in range(3):
            app.handle_line("/help")
        app.handle_key(Key(KeyKind.UP))
        assert app.transcript.offset == 1
        app.handle_key(Key(KeyKind.PAGE_UP))
        assert app.transcript.offset == 6
        app.handle_key(Key(KeyKind.PAGE_DOWN))
        app.handle_key(Key(KeyKind.DOWN))
        assert app.transcript.offset == 0
        assert len(app.history) == 0

    def test_esc_stops(self):
        app = make_app()
        app.handle_key(Key(KeyKind.ESC))
        assert not app.running

    def test_ctrl_c_without_request_clears_input(self):
        app = make_app()
        app.input = "half typed"
        app.handle_key(Key(KeyKind.CTRL_C))
        assert app.input == ""

    def test_resize_keeps_running(self):
        app = make_app()
        app.input = "half typed"
        app.handle_key(Key(KeyKind.RESIZE))
        assert app.running
        assert app.input == "half typed"
        assert len(app.transcript) == 0


class TestLoad:
    async def test_restores_pet_and_history(self, tmp_path):
        storage = Storage(tmp_path / "pet.db")
        app = make_app("meow", storage=storage)
        app.handle_line("hi")
        await finish(app)
        app.save()

        cfg = Config(pet_name="Renamed")
        restored = PetApp.load(cfg, FakeClient(), storage)
        assert restored.state.name == "Renamed"
        assert restored.state.interaction_count == 1
        assert [m.text for m in restored.history.all()] == ["hi", "meow"]
        # greeting is shown but not logged
        assert restored.transcript.all()[-1].role is Role.PET
        assert len(restored.transcript) == 3
        await restored.close()
        assert restored._client.closed
