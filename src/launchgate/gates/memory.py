"""Dismissal memory.

Remembers which gate messages a user has already dismissed, keyed by
message slot and compared against the current content fingerprint.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, runtime_checkable

from launchgate.gates.models import RememberableItem, RememberedEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class DismissalMemory(Protocol):
    """Key -> string store of dismissed messages.

    Implementations should not raise: persistence is a side channel and
    only affects future checks. Wrap one in GuardedDismissalMemory when
    that cannot be promised.
    """

    def remember(self, item: RememberableItem) -> None:
        """Store item.remember_string under item.remember_key."""
        ...

    def forget(self, item: RememberableItem) -> None:
        """Remove whatever is stored under item.remember_key."""
        ...

    def contains(self, item: RememberableItem) -> bool:
        """True iff the stored value equals item.remember_string exactly."""
        ...


@dataclass
class InMemoryDismissalMemory:
    """Process-local dismissal memory (tests, dry runs)."""

    values: dict[str, str] = field(default_factory=dict)

    def remember(self, item: RememberableItem) -> None:
        self.values[item.remember_key] = item.remember_string

    def forget(self, item: RememberableItem) -> None:
        self.values.pop(item.remember_key, None)

    def contains(self, item: RememberableItem) -> bool:
        stored = self.values.get(item.remember_key)
        return stored is not None and stored == item.remember_string

    def entries(self) -> list[RememberedEntry]:
        return [RememberedEntry(key=k, value=v) for k, v in sorted(self.values.items())]

    def clear(self) -> None:
        self.values.clear()

    def close(self) -> None:
        pass


class GuardedDismissalMemory:
    """Wraps any DismissalMemory so its failures never escape.

    A failed lookup reads as "not dismissed"; a failed write is logged
    and reported through remember()'s return value.
    """

    def __init__(self, inner: DismissalMemory):
        self.inner = inner

    def remember(self, item: RememberableItem) -> bool:
        try:
            self.inner.remember(item)
        except Exception as e:
            logger.warning(f"Could not remember '{item.remember_key}': {e}")
            return False
        return True

    def forget(self, item: RememberableItem) -> None:
        try:
            self.inner.forget(item)
        except Exception as e:
            logger.warning(f"Could not forget '{item.remember_key}': {e}")

    def contains(self, item: RememberableItem) -> bool:
        try:
            return self.inner.contains(item)
        except Exception as e:
            logger.warning(f"Could not read dismissal '{item.remember_key}': {e}")
            return False


DISMISSAL_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS dismissals (
    remember_key TEXT PRIMARY KEY,
    remember_string TEXT NOT NULL,
    remembered_at TEXT NOT NULL
);
"""


class SqliteDismissalMemory:
    """Durable dismissal memory backed by SQLite.

    Writes are single-row upserts, so last write wins per key. Storage
    errors are logged and swallowed.
    """

    def __init__(self, conn: sqlite3.Connection):
        """Initialize memory with database connection."""
        self._conn = conn

    def init_schema(self) -> None:
        """Initialize dismissal table."""
        self._conn.executescript(DISMISSAL_SCHEMA_SQL)
        self._conn.commit()

    def remember(self, item: RememberableItem) -> None:
        try:
            self._conn.execute(
                """
                INSERT INTO dismissals (remember_key, remember_string, remembered_at)
                VALUES (?, ?, ?)
                ON CONFLICT(remember_key) DO UPDATE SET
                    remember_string = excluded.remember_string,
                    remembered_at = excluded.remembered_at
                """,
                (
                    item.remember_key,
                    item.remember_string,
                    datetime.now().isoformat(),
                ),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Could not remember '{item.remember_key}': {e}")

    def forget(self, item: RememberableItem) -> None:
        try:
            self._conn.execute(
                "DELETE FROM dismissals WHERE remember_key = ?",
                (item.remember_key,),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Could not forget '{item.remember_key}': {e}")

    def contains(self, item: RememberableItem) -> bool:
        try:
            cursor = self._conn.execute(
                "SELECT remember_string FROM dismissals WHERE remember_key = ?",
                (item.remember_key,),
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Could not read dismissal '{item.remember_key}': {e}")
            return False

        return row is not None and row[0] == item.remember_string

    def entries(self) -> list[RememberedEntry]:
        """List all stored dismissals, ordered by key.

        Returns:
            RememberedEntry per stored key (empty on storage errors)
        """
        try:
            cursor = self._conn.execute(
                "SELECT remember_key, remember_string FROM dismissals "
                "ORDER BY remember_key"
            )
            return [RememberedEntry(key=row[0], value=row[1]) for row in cursor]
        except sqlite3.Error as e:
            logger.warning(f"Could not list dismissals: {e}")
            return []

    def clear(self) -> None:
        """Forget every stored dismissal."""
        try:
            self._conn.execute("DELETE FROM dismissals")
            self._conn.commit()
        except sqlite3.Error as e:
            logger.warning(f"Could not clear dismissals: {e}")

    def close(self) -> None:
        self._conn.close()
