"""
Free-slot search over the owner's working hours.

A brute-force scan: every weekday in the window, candidate starts every
SLOT_STEP_MINUTES from WORKDAY_START_HOUR, rejected if they run past
WORKDAY_END_HOUR, start in the past, or overlap an existing task. Sooner days
score higher, so the best suggestions are the earliest free slots.
"""
from datetime import datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import config
from database import find_tasks
from errors import InputValidationError
from intervals import make_interval, task_interval, to_naive
from models import MAX_DURATION_MINUTES, SlotSuggestion, TimeInterval

MAX_WINDOW_DAYS = 7
BASE_CONFIDENCE = 0.8
CONFIDENCE_DECAY_PER_DAY = 0.1


def suggest_slots(
    owner: str,
    duration_minutes: int,
    window_days: int = config.SLOT_WINDOW_DAYS,
    now: Optional[datetime] = None,
    timezone: Optional[str] = None,
) -> list[SlotSuggestion]:
    """Top free slots (by confidence, then earliest start) for a task of duration_minutes."""
    if not owner:
        raise InputValidationError("An owner is required")
    if isinstance(window_days, bool) or not isinstance(window_days, int) or not 1 <= window_days <= MAX_WINDOW_DAYS:
        raise InputValidationError(f"window_days must be between 1 and {MAX_WINDOW_DAYS}")
    if now is None:
        try:
            zone = ZoneInfo(timezone or config.DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise InputValidationError(f"Unknown timezone: {timezone}")
        now = datetime.now(zone)
    now = to_naive(now)
    make_interval(now, duration_minutes)  # validates the duration

    first_day = now.date()
    window_start = datetime.combine(first_day, time(config.WORKDAY_START_HOUR))
    window_end = datetime.combine(first_day + timedelta(days=window_days - 1), time(config.WORKDAY_END_HOUR))
    # Tasks starting up to a week earlier can still reach into the window
    tasks = find_tasks(
        owner=owner,
        archived=False,
        scheduled_only=True,
        deadline_from=window_start - timedelta(minutes=MAX_DURATION_MINUTES),
        deadline_to=window_end,
    )
    busy = [interval for interval in map(task_interval, tasks) if interval is not None]

    step = timedelta(minutes=config.SLOT_STEP_MINUTES)
    suggestions = []
    for day_offset in range(window_days):
        day = first_day + timedelta(days=day_offset)
        if day.weekday() >= 5:
            continue
        day_start = datetime.combine(day, time(config.WORKDAY_START_HOUR))
        day_end = datetime.combine(day, time(config.WORKDAY_END_HOUR))
        day_busy = [b for b in busy if b.start < day_end and b.end > day_start]
        confidence = round(BASE_CONFIDENCE - CONFIDENCE_DECAY_PER_DAY * day_offset, 2)

        candidate = day_start
        while candidate < day_end:
            slot = TimeInterval(start=candidate, duration_minutes=duration_minutes)
            if (
                candidate >= now
                and slot.end <= day_end
                and not any(slot.overlaps(b) for b in day_busy)
            ):
                suggestions.append(SlotSuggestion(
                    start=slot.start,
                    end=slot.end,
                    duration_minutes=duration_minutes,
                    confidence=confidence,
                ))
            candidate += step

    suggestions.sort(key=lambda s: (-s.confidence, s.start))
    return suggestions[:config.MAX_SLOT_SUGGESTIONS]
