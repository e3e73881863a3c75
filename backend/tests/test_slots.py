"""
Tests for slots.py - free-slot suggestions in working hours.
"""
import pytest
import sys
import os
from datetime import datetime, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import create_task_db, update_task_db
from errors import InputValidationError
from slots import suggest_slots

MONDAY_8AM = datetime(2026, 10, 19, 8, 0)


def starts(slots):
    return [slot.start for slot in slots]


class TestSuggestSlots:
    """Tests for suggest_slots."""

    def test_empty_calendar_gives_earliest_slots(self, test_db):
        slots = suggest_slots("alice", 60, now=MONDAY_8AM)

        assert starts(slots) == [
            datetime(2026, 10, 19, 9, 0),
            datetime(2026, 10, 19, 9, 30),
            datetime(2026, 10, 19, 10, 0),
        ]
        assert all(slot.confidence == pytest.approx(0.8) for slot in slots)
        assert slots[0].end == datetime(2026, 10, 19, 10, 0)
        assert slots[0].duration_minutes == 60

    def test_busy_morning_skipped(self, test_db):
        create_task_db("alice", "Workshop", deadline=datetime(2026, 10, 19, 9, 0), duration_minutes=120)

        slots = suggest_slots("alice", 60, now=MONDAY_8AM)
        assert starts(slots)[0] == datetime(2026, 10, 19, 11, 0)

    def test_full_day_moves_to_next_day(self, test_db):
        create_task_db("alice", "Conference", deadline=datetime(2026, 10, 19, 9, 0), duration_minutes=480)

        slots = suggest_slots("alice", 60, now=MONDAY_8AM)
        assert starts(slots)[0] == datetime(2026, 10, 20, 9, 0)
        assert slots[0].confidence == pytest.approx(0.7)

    def test_slots_never_start_in_the_past(self, test_db):
        slots = suggest_slots("alice", 30, now=datetime(2026, 10, 19, 13, 10))
        assert starts(slots)[0] == datetime(2026, 10, 19, 13, 30)

    def test_slot_must_end_by_workday_end(self, test_db):
        slots = suggest_slots("alice", 60, now=datetime(2026, 10, 19, 16, 30))
        assert starts(slots)[0] == datetime(2026, 10, 20, 9, 0)

    def test_weekends_skipped(self, test_db):
        saturday = datetime(2026, 10, 24, 8, 0)
        slots = suggest_slots("alice", 60, now=saturday)

        assert starts(slots)[0] == datetime(2026, 10, 26, 9, 0)
        assert slots[0].confidence == pytest.approx(0.6)

    def test_task_spilling_over_from_previous_day(self, test_db):
        create_task_db("alice", "Night shift", deadline=datetime(2026, 10, 18, 23, 0), duration_minutes=720)

        slots = suggest_slots("alice", 60, now=MONDAY_8AM)
        assert starts(slots)[0] == datetime(2026, 10, 19, 11, 0)

    def test_other_owner_and_archived_do_not_block(self, test_db):
        create_task_db("bob", "Bob's day", deadline=datetime(2026, 10, 19, 9, 0), duration_minutes=480)
        archived = create_task_db("alice", "Old", deadline=datetime(2026, 10, 19, 9, 0), duration_minutes=480)
        update_task_db(archived.id, archived=True)

        slots = suggest_slots("alice", 60, now=MONDAY_8AM)
        assert starts(slots)[0] == datetime(2026, 10, 19, 9, 0)

    def test_duration_longer_than_workday(self, test_db):
        assert suggest_slots("alice", 600, now=MONDAY_8AM) == []

    def test_window_limits_search(self, test_db):
        create_task_db("alice", "Conference", deadline=datetime(2026, 10, 19, 9, 0), duration_minutes=480)
        assert suggest_slots("alice", 60, window_days=1, now=MONDAY_8AM) == []

    @pytest.mark.parametrize("window_days", [0, 8, -1])
    def test_invalid_window(self, test_db, window_days):
        with pytest.raises(InputValidationError):
            suggest_slots("alice", 60, window_days=window_days, now=MONDAY_8AM)

    @pytest.mark.parametrize("duration", [0, 10081])
    def test_invalid_duration(self, test_db, duration):
        with pytest.raises(InputValidationError):
            suggest_slots("alice", duration, now=MONDAY_8AM)

    def test_unknown_timezone(self, test_db):
        with pytest.raises(InputValidationError):
            suggest_slots("alice", 60, timezone="Mars/Olympus")

    def test_suggestions_avoid_tasks_and_stay_in_working_hours(self, test_db):
        """No suggestion overlaps an existing task or leaves 09:00-17:00."""
        busy = [
            create_task_db("alice", "A", deadline=datetime(2026, 10, 19, 9, 15), duration_minutes=50),
            create_task_db("alice", "B", deadline=datetime(2026, 10, 19, 10, 40), duration_minutes=35),
            create_task_db("alice", "C", deadline=datetime(2026, 10, 19, 12, 0), duration_minutes=240),
        ]
        slots = suggest_slots("alice", 45, now=MONDAY_8AM)

        assert slots
        for slot in slots:
            assert slot.start.hour >= 9
            assert slot.end <= slot.start.replace(hour=17, minute=0)
            for task in busy:
                task_end = task.deadline + timedelta(minutes=task.duration_minutes)
                assert not (slot.start < task_end and slot.end > task.deadline)
