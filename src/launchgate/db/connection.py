"""SQLite connection management."""

import sqlite3
from pathlib import Path

from launchgate.gates.memory import SqliteDismissalMemory


def get_connection(db_path: Path | str) -> sqlite3.Connection:
    """
    Get a SQLite connection with row factory and WAL mode.

    WAL (Write-Ahead Logging) mode lets several app processes read the
    dismissal table while one of them writes.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        try:
            conn.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error:
            conn.close()
            raise
    return conn


def open_dismissal_memory(db_path: Path) -> SqliteDismissalMemory:
    """Open (creating if needed) the dismissal store at db_path.

    Raises:
        OSError: If the parent directory cannot be created
        sqlite3.Error: If the file cannot be opened as a database
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    memory = SqliteDismissalMemory(get_connection(db_path))
    memory.init_schema()
    return memory
