"""Tests for database connection setup."""

import sqlite3
import tempfile
from pathlib import Path

import pytest

from launchgate.db.connection import get_connection, open_dismissal_memory
from launchgate.gates.models import AlertSpec


class TestGetConnection:
    """Tests for database connection setup."""

    def test_wal_mode_enabled(self):
        """WAL journal mode is enabled."""
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "test.db"
            conn = get_connection(db_path)

            cursor = conn.execute("PRAGMA journal_mode")
            result = cursor.fetchone()[0]
            assert result == "wal"

            conn.close()

    def test_row_factory_set(self):
        """Row factory allows dict-like access."""
        conn = get_connection(":memory:")

        conn.execute("CREATE TABLE test (id INTEGER, name TEXT)")
        conn.execute("INSERT INTO test VALUES (1, 'foo')")
        row = conn.execute("SELECT * FROM test").fetchone()

        assert row["name"] == "foo"
        conn.close()


class TestOpenDismissalMemory:
    """Tests for opening the durable store."""

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "launchgate.db"

        memory = open_dismissal_memory(db_path)
        memory.remember(AlertSpec(message="Hi"))
        memory.close()

        assert db_path.exists()

    def test_survives_reopen(self, tmp_path):
        db_path = tmp_path / "launchgate.db"

        memory = open_dismissal_memory(db_path)
        memory.remember(AlertSpec(message="Hi"))
        memory.close()

        reopened = open_dismissal_memory(db_path)
        assert reopened.contains(AlertSpec(message="Hi"))
        reopened.close()

    def test_parent_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(OSError):
            open_dismissal_memory(blocker / "sub" / "launchgate.db")

    def test_corrupt_file(self, tmp_path):
        db_path = tmp_path / "launchgate.db"
        db_path.write_bytes(b"this is not a database\n" * 64)

        with pytest.raises(sqlite3.DatabaseError):
            open_dismissal_memory(db_path)
