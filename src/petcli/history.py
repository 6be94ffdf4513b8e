"""Bounded chat history with FIFO eviction and a scroll cursor."""

import enum
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from petcli.moods import utcnow

DEFAULT_HISTORY_LIMIT = 100


class Role(enum.Enum):
    USER = "user"
    PET = "pet"
    SYSTEM = "system"  # command output and errors; never sent to the AI


@dataclass(frozen=True)
class Message:
    role: Role
    text: str
    timestamp: datetime = field(default_factory=utcnow)

    def line_count(self) -> int:
        """Lines this message takes in the chat pane (non-user messages get a blank line after)."""
        count = len(self.text.split("\n"))
        return count if self.role is Role.USER else count + 1


class ChatHistory:
    """Ordered log of at most `limit` messages; the oldest is evicted first.

    Append-only apart from eviction and clear(). The scroll offset only
    changes what the chat pane shows.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT, messages: Iterable[Message] = ()) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._messages: deque[Message] = deque(maxlen=limit)
        self._offset = 0
        self._scroll_limit: int | None = None
        for message in messages:
            self.append(message)

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def offset(self) -> int:
        """Lines scrolled up from the bottom (0 = following the newest message)."""
        return self._offset

    def append(self, message: Message) -> None:
        self._messages.append(message)
        self._offset = 0

    def clear(self) -> None:
        self._messages.clear()
        self._offset = 0
        self._scroll_limit = None

    def all(self) -> list[Message]:
        return list(self._messages)

    def recent(self, n: int, roles: tuple[Role, ...] = (Role.USER, Role.PET)) -> list[Message]:
        """The last `n` messages with one of the given roles, oldest first."""
        if n <= 0:
            return []
        picked = [m for m in self._messages if m.role in roles]
        return picked[-n:]

    def total_lines(self) -> int:
        return sum(m.line_count() for m in self._messages)

    def set_scroll_limit(self, limit: int) -> None:
        """Cap scrolling at `limit` lines, as measured by the chat pane after wrapping."""
        self._scroll_limit = max(0, limit)
        self._offset = min(self._offset, self._scroll_limit)

    def scroll(self, delta: int) -> int:
        """Move the view cursor by `delta` lines (positive = older). Returns the new offset.

        Bounded by the last measured scroll limit, or by the unwrapped line
        count before the pane has been drawn.
        """
        limit = self.total_lines() if self._scroll_limit is None else self._scroll_limit
        self._offset = max(0, min(self._offset + delta, limit))
        return self._offset
