"""
Tests for series.py - scoped updates and deletes over recurring tasks.
"""
import pytest
import sqlite3
import sys
import os
from datetime import datetime, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import series
from database import create_task_db, find_tasks, get_task_db
from errors import InputValidationError, TaskNotFoundError
from models import TaskDraft
from recurrence import materialize
from series import delete_series, resolve_scope, update_series

START = datetime(2026, 10, 19, 9, 0)


@pytest.fixture
def five_day_series(test_db):
    """A parent with five daily occurrences, indices 0..4."""
    draft = TaskDraft(title="Standup", deadline=START, duration_minutes=15)
    result = materialize("alice", draft, "FREQ=DAILY", START + timedelta(days=4))
    assert len(result.occurrences) == 5
    return result


class TestResolveScope:
    """Tests for resolve_scope."""

    def test_this(self, five_day_series):
        occurrence = five_day_series.occurrences[2]
        assert resolve_scope(occurrence.id, "this") == [occurrence.id]

    def test_following_from_occurrence(self, five_day_series):
        ids = resolve_scope(five_day_series.occurrences[2].id, "following")
        assert ids == [o.id for o in five_day_series.occurrences[2:]]

    def test_following_from_parent_is_parent_only(self, five_day_series):
        """The parent has no occurrence index, so nothing follows it."""
        assert resolve_scope(five_day_series.parent.id, "following") == [five_day_series.parent.id]

    @pytest.mark.parametrize("member", ["parent", 0, 2, 4])
    def test_following_is_strict_subset_of_all(self, five_day_series, member):
        """following never reaches the whole series: the parent or earlier occurrences stay out."""
        if member == "parent":
            task_id = five_day_series.parent.id
        else:
            task_id = five_day_series.occurrences[member].id
        following = set(resolve_scope(task_id, "following"))
        everything = set(resolve_scope(task_id, "all"))
        assert following < everything
        assert task_id in following

    def test_all_from_occurrence(self, five_day_series):
        ids = resolve_scope(five_day_series.occurrences[3].id, "all")
        assert set(ids) == {five_day_series.parent.id} | {o.id for o in five_day_series.occurrences}
        assert len(ids) == 6

    def test_non_recurring_task_resolves_to_itself(self, test_db):
        task = create_task_db("alice", "One-off")
        for scope in ("this", "following", "all"):
            assert resolve_scope(task.id, scope) == [task.id]

    def test_unknown_scope(self, five_day_series):
        with pytest.raises(InputValidationError):
            resolve_scope(five_day_series.parent.id, "everything")

    def test_missing_task(self, test_db):
        with pytest.raises(TaskNotFoundError):
            resolve_scope("nonexistent", "this")

    def test_other_owner_is_not_found(self, five_day_series):
        with pytest.raises(TaskNotFoundError):
            resolve_scope(five_day_series.parent.id, "all", owner="bob")


class TestDeleteSeries:
    """Tests for delete_series."""

    def test_delete_following_from_index_two(self, five_day_series):
        """Deleting index 2 with 'following' removes 2, 3 and 4 and keeps 0, 1 and the parent."""
        result = delete_series(five_day_series.occurrences[2].id, "following")

        assert result.complete
        remaining = find_tasks(parent_task_id=five_day_series.parent.id)
        assert [t.occurrence_index for t in remaining] == [0, 1]
        assert get_task_db(five_day_series.parent.id) is not None

    def test_delete_all(self, five_day_series):
        result = delete_series(five_day_series.occurrences[0].id, "all")

        assert len(result.succeeded) == 6
        assert find_tasks() == []

    def test_delete_this(self, five_day_series):
        delete_series(five_day_series.occurrences[1].id, "this")
        remaining = find_tasks(parent_task_id=five_day_series.parent.id)
        assert [t.occurrence_index for t in remaining] == [0, 2, 3, 4]

    def test_partial_failure_reported(self, five_day_series, monkeypatch):
        """A failing member is listed; the rest are still deleted."""
        doomed = five_day_series.occurrences[3].id
        real_delete = series.delete_task_db

        def flaky_delete(task_id):
            if task_id == doomed:
                raise sqlite3.OperationalError("database is locked")
            return real_delete(task_id)
        monkeypatch.setattr(series, "delete_task_db", flaky_delete)

        result = delete_series(five_day_series.occurrences[2].id, "following")
        assert not result.complete
        assert [f.task_id for f in result.failed] == [doomed]
        assert len(result.succeeded) == 2
        assert get_task_db(doomed) is not None


class TestUpdateSeries:
    """Tests for update_series."""

    def test_update_following(self, five_day_series):
        result = update_series(five_day_series.occurrences[3].id, "following", {"title": "Retro"})

        assert result.complete
        titles = [t.title for t in find_tasks(parent_task_id=five_day_series.parent.id)]
        assert titles == ["Standup", "Standup", "Standup", "Retro", "Retro"]
        assert get_task_db(five_day_series.parent.id).title == "Standup"

    def test_update_all_returns_tasks(self, five_day_series):
        result = update_series(five_day_series.parent.id, "all", {"priority": "high"})

        assert len(result.tasks) == 6
        assert all(t.priority == "high" for t in result.tasks)

    def test_update_this_only(self, five_day_series):
        target = five_day_series.occurrences[0]
        update_series(target.id, "this", {"status": "completed"})

        statuses = [t.status for t in find_tasks(parent_task_id=five_day_series.parent.id)]
        assert statuses == ["completed", "pending", "pending", "pending", "pending"]
