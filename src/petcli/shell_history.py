"""Recent shell commands from the user's history file, used as AI context."""

import logging
from collections import deque
from pathlib import Path

logger = logging.getLogger(__name__)

HISTORY_FILES = (".zsh_history", ".bash_history", ".history")


def clean_history_line(line: str) -> str:
    """Strip zsh extended-history metadata (": 1700000000:0;cmd") from a line."""
    line = line.strip()
    if line.startswith(":") and ";" in line:
        return line.split(";", 1)[1].strip()
    return line


def load_recent_commands(limit: int, home: Path | None = None) -> list[str]:
    """Read the newest `limit` commands from the first history file found."""
    home = home or Path.home()
    for name in HISTORY_FILES:
        path = home / name
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                commands = deque(
                    (cmd for cmd in map(clean_history_line, f) if cmd), maxlen=limit
                )
        except OSError:
            continue
        logger.debug("Loaded %d commands from %s", len(commands), path)
        return list(commands)
    return []


class RecentCommands:
    """Bounded list of commands the pet has seen the user run."""

    def __init__(self, limit: int, commands: list[str] | None = None) -> None:
        self.limit = limit
        self._commands: deque[str] = deque(commands or [], maxlen=limit)

    def add(self, command: str) -> None:
        command = command.strip()
        if command:
            self._commands.append(command)

    def latest(self, n: int | None = None) -> list[str]:
        items = list(self._commands)
        return items if n is None else items[-n:] if n > 0 else []

    def __len__(self) -> int:
        return len(self._commands)
