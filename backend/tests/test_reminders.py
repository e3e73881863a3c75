"""
Tests for reminders.py - upcoming and overdue deadline queries.
"""
import pytest
import sys
import os
from datetime import datetime, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import create_task_db, update_task_db
from reminders import overdue_tasks, upcoming_deadlines

NOW = datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def agenda(test_db):
    tasks = {
        "soon": create_task_db("alice", "Soon", deadline=NOW + timedelta(hours=1)),
        "later": create_task_db("alice", "Later", deadline=NOW + timedelta(hours=5)),
        "far": create_task_db("alice", "Far", deadline=NOW + timedelta(hours=30)),
        "late": create_task_db("alice", "Late", deadline=NOW - timedelta(hours=1)),
        "done": create_task_db("alice", "Done", deadline=NOW - timedelta(hours=2)),
        "shelved": create_task_db("alice", "Shelved", deadline=NOW + timedelta(hours=1)),
        "bob": create_task_db("bob", "Bob", deadline=NOW + timedelta(hours=1)),
    }
    update_task_db(tasks["done"].id, status="completed")
    update_task_db(tasks["shelved"].id, archived=True)
    return tasks


class TestUpcomingDeadlines:
    def test_split_into_urgent_and_upcoming(self, agenda):
        found = upcoming_deadlines(NOW, owner="alice")

        assert [t.title for t in found["urgent"]] == ["Soon"]
        assert [t.title for t in found["upcoming"]] == ["Later"]

    def test_all_owners(self, agenda):
        found = upcoming_deadlines(NOW)
        assert {t.title for t in found["urgent"]} == {"Soon", "Bob"}


class TestOverdueTasks:
    def test_only_pending_past_deadlines(self, agenda):
        assert [t.title for t in overdue_tasks(NOW, owner="alice")] == ["Late"]

    def test_nothing_overdue(self, test_db):
        assert overdue_tasks(NOW) == []
