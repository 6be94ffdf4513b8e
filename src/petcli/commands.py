"""Input classification into slash-commands, shell-assistance queries and plain chat."""

import enum
from dataclasses import dataclass

SHELL_PREFIX = "$"
COMMAND_PREFIX = "/"


class InputKind(enum.Enum):
    EMPTY = "empty"
    COMMAND = "command"
    SHELL = "shell"
    CHAT = "chat"


class Command(enum.Enum):
    STATS = "/stats"
    CLEAR = "/clear"
    PURGE = "/purge"
    HELP = "/help"
    EXIT = "/exit"
    UNKNOWN = "unknown"


COMMAND_HELP: dict[Command, str] = {
    Command.STATS: "Display current pet statistics",
    Command.CLEAR: "Clear chat window",
    Command.PURGE: "Remove all chat history",
    Command.HELP: "Show this help message",
    Command.EXIT: "Exit the application",
}

_BY_NAME = {c.value: c for c in Command if c is not Command.UNKNOWN}


@dataclass(frozen=True)
class Route:
    """Where a line of input should go."""

    kind: InputKind
    text: str = ""  # the line, or the command after the "$" marker for SHELL
    command: Command | None = None


def route(line: str) -> Route:
    """Classify one submitted input line."""
    text = line.strip()
    if not text:
        return Route(InputKind.EMPTY)
    if text.startswith(COMMAND_PREFIX):
        name = text.split()[0].lower()
        return Route(InputKind.COMMAND, text, _BY_NAME.get(name, Command.UNKNOWN))
    if text.startswith(SHELL_PREFIX):
        query = text[len(SHELL_PREFIX):].strip()
        if not query:
            return Route(InputKind.EMPTY)
        return Route(InputKind.SHELL, query)
    return Route(InputKind.CHAT, text)


def help_text() -> str:
    lines = ["Available Commands:"]
    for command, description in COMMAND_HELP.items():
        lines.append(f"{command.value:<7} - {description}")
    lines += [
        f"{SHELL_PREFIX}<cmd>  - Ask for help with a terminal command",
        "",
        "Keys: Enter send · ↑/↓ scroll · PgUp/PgDn page · Ctrl+C cancel request · Esc quit",
    ]
    return "\n".join(lines)
