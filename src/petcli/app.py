"""The pet app: owns all session state and runs the render/input loop."""

import asyncio
import logging
import os
import signal
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from rich.console import Console
from rich.layout import Layout
from rich.live import Live

from petcli.art import greeting
from petcli.client import PetClient
from petcli.commands import Command, InputKind, Route, help_text, route
from petcli.config import Config
from petcli.errors import AIError
from petcli.history import ChatHistory, Message, Role
from petcli.keys import Key, KeyKind, decode_keys
from petcli.moods import EventKind, PetState, classify_event, update_mood, utcnow
from petcli.render import build_screen
from petcli.session import format_prompt
from petcli.shell_history import RecentCommands
from petcli.storage import Storage
from petcli.terminal import raw_input_mode
from petcli.themes import get_theme

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.1
PAGE_LINES = 5
PROMPT_COMMANDS = 5  # recent shell commands included in each prompt


@dataclass(frozen=True)
class Reply:
    """Outcome of one AI request: the reply text or an error message."""

    user: Message
    text: str | None = None
    error: str | None = None


class PetApp:
    """Holds the pet, both chat logs, the AI client and the one pending-request slot.

    `history` is the conversation log (user/pet exchanges) that is persisted
    and sent to the AI as context. `transcript` is what the chat pane shows:
    the conversation plus command output, notices and errors.
    """

    def __init__(
        self,
        config: Config,
        client: PetClient,
        storage: Storage | None = None,
        state: PetState | None = None,
        history: ChatHistory | None = None,
        recent_commands: RecentCommands | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.config = config
        self.theme = get_theme(config.theme)
        self._client = client
        self._storage = storage
        self._clock = clock
        self.state = state or PetState.fresh(config.pet_name, clock())
        self.history = history or ChatHistory(config.history_limit)
        self.transcript = ChatHistory(config.history_limit, self.history.all())
        self.recent_commands = recent_commands or RecentCommands(config.command_history_limit)

        self.input = ""
        self.running = True
        self.tick_count = 0
        self._pending: asyncio.Task | None = None

        self._commands: dict[Command, Callable[[Route], None]] = {
            Command.STATS: self._cmd_stats,
            Command.CLEAR: self._cmd_clear,
            Command.PURGE: self._cmd_purge,
            Command.HELP: self._cmd_help,
            Command.EXIT: self._cmd_exit,
            Command.UNKNOWN: self._cmd_unknown,
        }
        self._keys: dict[KeyKind, Callable[[Key], None]] = {
            KeyKind.CHAR: self._key_char,
            KeyKind.BACKSPACE: lambda key: self._set_input(self.input[:-1]),
            KeyKind.CTRL_U: lambda key: self._set_input(""),
            KeyKind.ENTER: lambda key: self.submit(),
            KeyKind.UP: lambda key: self.transcript.scroll(1),
            KeyKind.DOWN: lambda key: self.transcript.scroll(-1),
            KeyKind.PAGE_UP: lambda key: self.transcript.scroll(PAGE_LINES),
            KeyKind.PAGE_DOWN: lambda key: self.transcript.scroll(-PAGE_LINES),
            KeyKind.CTRL_C: self._key_ctrl_c,
            KeyKind.ESC: lambda key: self.stop(),
            KeyKind.RESIZE: lambda key: None,  # the next redraw picks up the new size
        }

    @classmethod
    def load(
        cls,
        config: Config,
        client: PetClient,
        storage: Storage,
        recent_commands: RecentCommands | None = None,
    ) -> "PetApp":
        """Restore the pet and its chat log from storage, or hatch a new pet."""
        saved = storage.load_pet()
        if saved is None:
            state = PetState.fresh(config.pet_name)
        else:
            # The config file owns the name
            state = replace(saved, name=config.pet_name)
        history = ChatHistory(config.history_limit, storage.load_messages(config.history_limit))
        app = cls(config, client, storage, state, history, recent_commands)
        app.tick()
        app.transcript.append(Message(Role.PET, greeting(app.state.mood)))
        return app

    @property
    def pending(self) -> asyncio.Task | None:
        """The in-flight AI request, if any."""
        return self._pending

    # -- output -------------------------------------------------------------

    def say(self, text: str) -> None:
        """Show a line from the pet that is not part of the conversation log."""
        self.transcript.append(Message(Role.PET, text, self._clock()))

    def notice(self, text: str) -> None:
        self.transcript.append(Message(Role.SYSTEM, text, self._clock()))

    def _record(self, message: Message, show: bool = True) -> None:
        """Add a message to the conversation log (and the chat pane unless already shown)."""
        self.history.append(message)
        if show:
            self.transcript.append(message)
        if self._storage is not None:
            self._storage.append_message(message, self.config.history_limit)

    def save(self) -> None:
        if self._storage is not None:
            self._storage.save_pet(self.state)

    # -- input --------------------------------------------------------------

    def _set_input(self, text: str) -> None:
        self.input = text

    def _key_char(self, key: Key) -> None:
        self.input += key.char

    def _key_ctrl_c(self, key: Key) -> None:
        if self._pending is not None:
            self.cancel_pending()
        else:
            self.input = ""

    def handle_key(self, key: Key) -> None:
        self._keys[key.kind](key)

    def submit(self) -> None:
        """Send the current input line."""
        line, self.input = self.input, ""
        self.handle_line(line)

    def handle_line(self, line: str) -> None:
        r = route(line)
        if r.kind is InputKind.EMPTY:
            return
        if r.kind is InputKind.COMMAND:
            self._commands[r.command](r)
        elif r.kind is InputKind.SHELL:
            self.recent_commands.add(r.text)
            self._chat(line.strip(), format_prompt(r.text, self._prompt_commands(), shell=True), EventKind.SHELL)
        else:
            self._chat(r.text, format_prompt(r.text, self._prompt_commands()), classify_event(r.text))

    def _prompt_commands(self) -> list[str]:
        return self.recent_commands.latest(PROMPT_COMMANDS)

    # -- chat ---------------------------------------------------------------

    def _chat(self, shown: str, prompt: str, event: EventKind) -> None:
        if self._pending is not None:
            self.notice("Still thinking about your last message. Press Ctrl+C to cancel it.")
            return

        now = self._clock()
        user = Message(Role.USER, shown, now)
        context = self.history.recent(self.config.context_messages)
        self.transcript.append(user)

        self.state = update_mood(self.state, event, now)
        self.save()

        self._pending = asyncio.get_running_loop().create_task(self._request(user, prompt, context))

    async def _request(self, user: Message, prompt: str, context: list[Message]) -> Reply:
        """Run one AI request. Never raises; failures come back as Reply.error."""
        try:
            text = await self._client.send(prompt, context)
        except AIError as e:
            logger.warning("AI request failed: %s", e)
            return Reply(user, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error during AI request")
            return Reply(user, error=f"Unexpected error: {e}")
        return Reply(user, text=text)

    def cancel_pending(self) -> None:
        if self._pending is None:
            return
        self._pending.cancel()
        self._pending = None
        self.notice("Request cancelled.")
        logger.info("Pending AI request cancelled")

    def _merge_reply(self) -> None:
        """Move a finished request's result into the logs, exactly once."""
        task = self._pending
        if task is None or not task.done():
            return
        self._pending = None
        if task.cancelled():
            return
        reply: Reply = task.result()
        if reply.error is not None:
            self.notice(f"Error: {reply.error}")
            return
        self._record(reply.user, show=False)
        self._record(Message(Role.PET, reply.text, self._clock()))

    def tick(self) -> None:
        """Advance the pet one tick: idle mood decay and merging a finished reply."""
        self.tick_count += 1
        self.state = update_mood(self.state, EventKind.IDLE, self._clock())
        self._merge_reply()

    # -- commands -----------------------------------------------------------

    def _cmd_stats(self, r: Route) -> None:
        s = self.state
        self.say(
            "Current Stats:\n"
            f"Name: {s.name}\n"
            f"Mood: {s.mood.label} ({s.happiness:.0%})\n"
            f"Interactions: {s.interaction_count}\n"
            f"Last Interaction: {s.last_interaction:%Y-%m-%d %H:%M:%S} UTC\n"
            f"Chat History: {len(self.history)} messages"
        )

    def _cmd_clear(self, r: Route) -> None:
        self.transcript.clear()
        self.notice("Chat window cleared.")

    def _cmd_purge(self, r: Route) -> None:
        self.history.clear()
        self.transcript.clear()
        if self._storage is not None:
            self._storage.purge_messages()
        self.save()
        self.notice("Chat history has been purged from disk.")

    def _cmd_help(self, r: Route) -> None:
        self.say(help_text())

    def _cmd_exit(self, r: Route) -> None:
        self.say("Goodbye! Take care! 👋")
        self.stop()

    def _cmd_unknown(self, r: Route) -> None:
        self.notice(f"Command '{r.text.split()[0]}' not recognized. Type /help for a list of commands.")

    # -- loop ---------------------------------------------------------------

    def stop(self) -> None:
        self.running = False
        self.save()

    def screen(self) -> Layout:
        return build_screen(self, self.theme)

    async def close(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self.save()
        await self._client.close()
        if self._storage is not None:
            self._storage.close()

    async def run(self, console: Console) -> None:
        """Draw and read keys until Esc or /exit."""
        loop = asyncio.get_running_loop()
        keys: asyncio.Queue[Key] = asyncio.Queue()
        fd = sys.stdin.fileno()

        def on_stdin_ready() -> None:
            try:
                data = os.read(fd, 4096)
            except OSError:
                return
            if not data:
                keys.put_nowait(Key(KeyKind.ESC))
                return
            for key in decode_keys(data):
                keys.put_nowait(key)

        loop.add_reader(fd, on_stdin_ready)
        loop.add_signal_handler(signal.SIGWINCH, lambda: keys.put_nowait(Key(KeyKind.RESIZE)))
        last_tick = time.monotonic()
        try:
            with raw_input_mode(fd), Live(
                self.screen(), console=console, screen=True, auto_refresh=False
            ) as live:
                while self.running:
                    timeout = max(0.0, TICK_SECONDS - (time.monotonic() - last_tick))
                    try:
                        key = await asyncio.wait_for(keys.get(), timeout=timeout)
                    except asyncio.TimeoutError:
                        key = None
                    while key is not None:
                        self.handle_key(key)
                        key = keys.get_nowait() if not keys.empty() else None

                    if time.monotonic() - last_tick >= TICK_SECONDS:
                        self.tick()
                        last_tick = time.monotonic()
                    live.update(self.screen(), refresh=True)
        finally:
            loop.remove_reader(fd)
            loop.remove_signal_handler(signal.SIGWINCH)
