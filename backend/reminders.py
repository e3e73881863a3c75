"""Deadline queries a periodic reminder job runs; delivery happens elsewhere."""
from datetime import datetime, timedelta
from typing import Optional

from database import find_tasks
from intervals import to_naive
from models import Task

URGENT_WINDOW = timedelta(hours=2)
UPCOMING_WINDOW = timedelta(hours=24)


def upcoming_deadlines(now: datetime, owner: Optional[str] = None) -> dict[str, list[Task]]:
    """
    Pending, non-archived tasks due soon, split into
    "urgent" (within 2 hours) and "upcoming" (2 to 24 hours out).
    """
    now = to_naive(now)
    urgent = find_tasks(
        owner=owner, archived=False, status="pending",
        deadline_from=now, deadline_to=now + URGENT_WINDOW,
    )
    upcoming = find_tasks(
        owner=owner, archived=False, status="pending",
        deadline_from=now + URGENT_WINDOW, deadline_to=now + UPCOMING_WINDOW,
    )
    return {"urgent": urgent, "upcoming": upcoming}


def overdue_tasks(now: datetime, owner: Optional[str] = None) -> list[Task]:
    """Pending, non-archived tasks whose deadline has already passed."""
    return find_tasks(owner=owner, archived=False, status="pending", deadline_to=to_naive(now))
