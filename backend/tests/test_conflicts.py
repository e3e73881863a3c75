"""
Tests for conflicts.py - overlap detection against stored tasks.
"""
import pytest
import sys
import os
from datetime import datetime

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conflicts import detect_conflicts
from database import create_task_db, update_task_db
from errors import InputValidationError


@pytest.fixture
def meeting(test_db):
    """Alice's task occupying 14:00-15:00."""
    return create_task_db(
        "alice", "Team meeting",
        deadline=datetime(2026, 5, 1, 14, 0), duration_minutes=60, priority="high",
    )


class TestDetectConflicts:
    """Tests for detect_conflicts."""

    def test_overlap_reported(self, meeting):
        conflicts = detect_conflicts("alice", datetime(2026, 5, 1, 14, 30), 30)

        assert len(conflicts) == 1
        report = conflicts[0]
        assert report.task_id == meeting.id
        assert report.title == "Team meeting"
        assert report.start == datetime(2026, 5, 1, 14, 0)
        assert report.end == datetime(2026, 5, 1, 15, 0)
        assert report.duration == 60
        assert report.priority == "high"

    def test_touching_boundary_is_not_a_conflict(self, meeting):
        assert detect_conflicts("alice", datetime(2026, 5, 1, 15, 0), 30) == []
        assert detect_conflicts("alice", datetime(2026, 5, 1, 13, 0), 60) == []

    def test_proposal_covering_task(self, meeting):
        assert len(detect_conflicts("alice", datetime(2026, 5, 1, 13, 0), 180)) == 1

    def test_other_owner_not_reported(self, meeting):
        assert detect_conflicts("bob", datetime(2026, 5, 1, 14, 30), 30) == []

    def test_archived_task_ignored(self, meeting):
        update_task_db(meeting.id, archived=True)
        assert detect_conflicts("alice", datetime(2026, 5, 1, 14, 30), 30) == []

    def test_task_without_duration_ignored(self, test_db):
        create_task_db("alice", "Reminder", deadline=datetime(2026, 5, 1, 14, 0))
        assert detect_conflicts("alice", datetime(2026, 5, 1, 14, 0), 30) == []

    def test_long_task_from_previous_day(self, test_db):
        """A task starting the day before still conflicts if it runs into the proposal."""
        create_task_db("alice", "Offsite", deadline=datetime(2026, 4, 30, 20, 0), duration_minutes=24 * 60)
        assert len(detect_conflicts("alice", datetime(2026, 5, 1, 9, 0), 30)) == 1

    def test_multiple_conflicts(self, meeting):
        create_task_db("alice", "Review", deadline=datetime(2026, 5, 1, 15, 30), duration_minutes=30)
        conflicts = detect_conflicts("alice", datetime(2026, 5, 1, 14, 0), 120)
        assert {c.title for c in conflicts} == {"Team meeting", "Review"}

    @pytest.mark.parametrize("duration", [0, -30, 10081])
    def test_invalid_duration(self, test_db, duration):
        with pytest.raises(InputValidationError):
            detect_conflicts("alice", datetime(2026, 5, 1, 14, 0), duration)

    def test_owner_required(self, test_db):
        with pytest.raises(InputValidationError):
            detect_conflicts("", datetime(2026, 5, 1, 14, 0), 30)
