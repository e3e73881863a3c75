"""
Shared pytest fixtures for backend tests.
Each test gets its own SQLite file so tests never see each other's tasks.
"""
import pytest
import sys
import os
from datetime import datetime

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database

OWNER = "user-1"


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    database.init_db()

    yield db_path


@pytest.fixture
def app_client(test_db):
    """Test client for the FastAPI app, identifying itself as OWNER."""
    from fastapi.testclient import TestClient
    import main

    with TestClient(main.app, headers={"X-User-Id": OWNER}) as client:
        yield client


@pytest.fixture
def monday():
    """Monday 2026-10-19, 09:00."""
    return datetime(2026, 10, 19, 9, 0)
