"""
Interval helpers shared by the conflict detector, slot suggester and store.

All timestamps are naive wall-clock datetimes in the owner's timezone.
"""
from datetime import datetime
from typing import Iterable, Optional

from pydantic import ValidationError

from errors import InputValidationError
from models import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES, Task, TimeInterval


def make_interval(start: datetime, duration_minutes: int) -> TimeInterval:
    """Build a TimeInterval, reporting bad input as InputValidationError."""
    if start is None:
        raise InputValidationError("A start time is required")
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InputValidationError("duration_minutes must be an integer")
    if not MIN_DURATION_MINUTES <= duration_minutes <= MAX_DURATION_MINUTES:
        raise InputValidationError(
            f"duration_minutes must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES}"
        )
    try:
        return TimeInterval(start=to_naive(start), duration_minutes=duration_minutes)
    except ValidationError as e:
        raise InputValidationError(str(e)) from e


def to_naive(value: datetime) -> datetime:
    # Stored timestamps carry no offset; drop it so comparisons stay consistent.
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


def task_interval(task: Task) -> Optional[TimeInterval]:
    """The task's occupied interval, or None when it has no start or no duration."""
    if task.deadline is None or not task.duration_minutes:
        return None
    return TimeInterval(start=to_naive(task.deadline), duration_minutes=task.duration_minutes)


def overlapping(interval: TimeInterval, tasks: Iterable[Task]) -> list[tuple[Task, TimeInterval]]:
    """Return (task, task_interval) for every scheduled task overlapping interval."""
    hits = []
    for task in tasks:
        other = task_interval(task)
        if other is not None and other.overlaps(interval):
            hits.append((task, other))
    return hits
