"""SQLite-backed persistence for the pet and its chat log."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from petcli.history import Message, Role
from petcli.moods import Mood, PetState

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "petcli"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "pet.db"


class Storage:
    """Stores the pet state and a bounded message log in SQLite."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._init_db()

    def _init_db(self) -> None:
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS pet (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                name TEXT NOT NULL,
                mood TEXT NOT NULL,
                happiness REAL NOT NULL,
                last_interaction TEXT NOT NULL,
                last_update TEXT NOT NULL,
                interaction_count INTEGER NOT NULL
            );
            CREATE TABLE IF NOT EXISTS messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                role TEXT NOT NULL,
                text TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
        """)

    def load_pet(self) -> PetState | None:
        """Return the saved pet, or None if there isn't one."""
        row = self._conn.execute("SELECT * FROM pet WHERE id = 1").fetchone()
        if row is None:
            return None
        return PetState(
            name=row["name"],
            mood=Mood(row["mood"]),
            happiness=row["happiness"],
            last_interaction=datetime.fromisoformat(row["last_interaction"]),
            last_update=datetime.fromisoformat(row["last_update"]),
            interaction_count=row["interaction_count"],
        )

    def save_pet(self, state: PetState) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO pet "
            "(id, name, mood, happiness, last_interaction, last_update, interaction_count) "
            "VALUES (1, ?, ?, ?, ?, ?, ?)",
            (
                state.name,
                state.mood.value,
                state.happiness,
                state.last_interaction.isoformat(),
                state.last_update.isoformat(),
                state.interaction_count,
            ),
        )
        self._conn.commit()
        logger.debug("Saved pet state (%s, %d interactions)", state.mood.value, state.interaction_count)

    def append_message(self, message: Message, limit: int) -> None:
        """Persist one message, then trim the log to the newest `limit` rows."""
        self._conn.execute(
            "INSERT INTO messages (role, text, created_at) VALUES (?, ?, ?)",
            (message.role.value, message.text, message.timestamp.isoformat()),
        )
        self._conn.execute(
            "DELETE FROM messages WHERE id NOT IN "
            "(SELECT id FROM messages ORDER BY id DESC LIMIT ?)",
            (limit,),
        )
        self._conn.commit()

    def load_messages(self, limit: int) -> list[Message]:
        """Return the newest `limit` messages, oldest first."""
        rows = self._conn.execute(
            "SELECT role, text, created_at FROM messages ORDER BY id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [
            Message(
                role=Role(r["role"]),
                text=r["text"],
                timestamp=datetime.fromisoformat(r["created_at"]),
            )
            for r in reversed(rows)
        ]

    def purge_messages(self) -> None:
        self._conn.execute("DELETE FROM messages")
        self._conn.commit()
        logger.info("Purged chat log at %s", self.db_path)

    def reset(self) -> None:
        """Forget the pet and its messages."""
        self._conn.executescript("DELETE FROM pet; DELETE FROM messages;")
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()
