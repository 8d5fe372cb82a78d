"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database for isolation and never talks to the advisory model.
"""
import pytest
import sqlite3
import sys
import os
from datetime import datetime

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from advisor import Advisor
from models import Task


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE tasks (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT DEFAULT '',
            status TEXT NOT NULL DEFAULT 'Todo',
            priority TEXT DEFAULT 'Medium',
            parent_id TEXT,
            assigned_to TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT,
            total_time_spent INTEGER DEFAULT 0,
            is_deleted INTEGER DEFAULT 0
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app.
    The advisor dependency is swapped for the no-op Advisor so no request leaves the process.
    """
    from fastapi.testclient import TestClient
    import main

    main.app.dependency_overrides[main.get_advisor] = lambda: Advisor()
    with TestClient(main.app, headers={"X-User-Id": "user-1"}) as client:
        yield client
    main.app.dependency_overrides.clear()


@pytest.fixture
def make_task():
    """Factory for in-memory Task records."""
    counter = {"n": 0}

    def _make(title="Task", **fields):
        counter["n"] += 1
        values = {
            "id": f"t{counter['n']}",
            "title": title,
            "assigned_to": "user-1",
            "created_at": datetime(2026, 1, 1, 9, 0).isoformat(),
        }
        values.update(fields)
        return Task(**values)

    return _make
