from datetime import datetime

from database import find_tasks
from errors import InputValidationError
from intervals import make_interval, overlapping
from models import ConflictReport


def detect_conflicts(owner: str, proposed_start: datetime, duration_minutes: int) -> list[ConflictReport]:
    """
    Existing tasks of `owner` whose time overlaps [proposed_start, proposed_start + duration).

    Only non-archived tasks with both a start and a duration take part.
    Touching endpoints are not a conflict. Read-only.
    """
    if not owner:
        raise InputValidationError("An owner is required")
    proposed = make_interval(proposed_start, duration_minutes)

    tasks = find_tasks(owner=owner, archived=False, scheduled_only=True, deadline_to=proposed.end)
    return [
        ConflictReport(
            task_id=task.id,
            title=task.title,
            start=interval.start,
            end=interval.end,
            duration=interval.duration_minutes,
            priority=task.priority,
        )
        for task, interval in overlapping(proposed, tasks)
    ]
