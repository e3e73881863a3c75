"""
Recurrence rules: building RRULE strings, expanding them into timestamps and
materializing a recurring task into one stored task per occurrence.
"""
import logging
import sqlite3
import uuid
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence, Union

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, YEARLY, rrule, rrulestr, weekday

import config
from database import create_task_db
from errors import InputValidationError, RecurrenceRuleError
from intervals import to_naive
from models import MaterializeResult, TaskDraft, WriteFailure

logger = logging.getLogger(__name__)

FREQUENCIES = {"DAILY": DAILY, "WEEKLY": WEEKLY, "MONTHLY": MONTHLY, "YEARLY": YEARLY}

# Fixed anchor so serialized rules never depend on the current clock
_RULE_ANCHOR = datetime(2000, 1, 3)

_OCCURRENCE_NAMESPACE = uuid.UUID("5b7f8a3e-2c61-4d0f-9a57-0c1e6f4d2b90")


def build_rule(
    freq: str,
    interval: int = 1,
    byweekday: Optional[Sequence[Union[int, weekday]]] = None,
    bymonth: Optional[Sequence[int]] = None,
    bymonthday: Optional[Sequence[int]] = None,
    bysetpos: Optional[int] = None,
    byhour: Optional[Sequence[int]] = None,
) -> str:
    """Build an RRULE body such as 'FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,FR'."""
    freq_const = FREQUENCIES.get((freq or "").upper())
    if freq_const is None:
        raise RecurrenceRuleError(f"Unsupported frequency: {freq}")
    try:
        rule = rrule(
            freq_const,
            dtstart=_RULE_ANCHOR,
            interval=interval,
            byweekday=byweekday or None,
            bymonth=bymonth or None,
            bymonthday=bymonthday or None,
            bysetpos=bysetpos,
            byhour=byhour or None,
        )
    except (TypeError, ValueError) as e:
        raise RecurrenceRuleError(f"Invalid recurrence options: {e}") from e
    # str(rule) is "DTSTART:...\nRRULE:..."; only the rule body is kept
    body = str(rule).splitlines()[-1]
    return body[len("RRULE:"):] if body.startswith("RRULE:") else body


def expand_rule(
    rule_string: str,
    start: datetime,
    until: datetime,
    limit: Optional[int] = None,
) -> tuple[list[datetime], bool]:
    """
    Enumerate occurrences of rule_string from start through until, both inclusive.
    Returns (occurrences, truncated) where truncated means more than `limit`
    occurrences fell inside the window and only the first `limit` are returned.
    """
    if not rule_string or not rule_string.strip():
        raise RecurrenceRuleError("Empty recurrence rule")
    if limit is None:
        limit = config.MAX_RECURRENCE_OCCURRENCES
    try:
        rule = rrulestr(rule_string.strip(), dtstart=start)
        occurrences = []
        for occurrence in rule.xafter(start, count=limit + 1, inc=True):
            if occurrence > until:
                break
            occurrences.append(occurrence)
    except (TypeError, ValueError) as e:
        raise RecurrenceRuleError(f"Could not expand recurrence rule '{rule_string}': {e}") from e

    truncated = len(occurrences) > limit
    return occurrences[:limit], truncated


def occurrence_id(parent_id: str, occurrence_index: int) -> str:
    """Stable id for one occurrence, so a retried write cannot create a duplicate."""
    return str(uuid.uuid5(_OCCURRENCE_NAMESPACE, f"{parent_id}:{occurrence_index}"))


def _horizon_end(start: datetime, horizon: Optional[Union[date, datetime]]) -> datetime:
    if horizon is None:
        return start + timedelta(days=config.RECURRENCE_HORIZON_DAYS)
    if isinstance(horizon, datetime):
        return to_naive(horizon)
    # A bare date covers the whole day
    return datetime.combine(horizon, time.max)


def materialize(
    owner: str,
    parent_draft: TaskDraft,
    rrule_string: str,
    horizon_date: Optional[Union[date, datetime]] = None,
) -> MaterializeResult:
    """
    Persist the parent task, then one task per occurrence of rrule_string
    between the parent's start and horizon_date (default: one year out).

    Occurrence i copies the parent's fields, takes the i-th timestamp as its
    deadline and records parent_task_id / occurrence_index = i. A rule that
    cannot be expanded leaves the parent stored with no occurrences and sets
    expansion_error; individual write failures are listed in `failed`.
    """
    if not owner:
        raise InputValidationError("An owner is required")
    if parent_draft.deadline is None:
        raise InputValidationError("A recurring task needs a start time")
    if not rrule_string or not rrule_string.strip():
        raise InputValidationError("A recurrence rule is required")

    start = to_naive(parent_draft.deadline)
    until = _horizon_end(start, horizon_date)
    if until < start:
        raise InputValidationError("horizon_date is before the task's start time")

    parent = create_task_db(
        owner=owner,
        title=parent_draft.title,
        description=parent_draft.description,
        deadline=start,
        duration_minutes=parent_draft.duration_minutes,
        priority=parent_draft.priority,
        category=parent_draft.category,
        recurring=True,
        rrule_string=rrule_string,
        source_text=parent_draft.source_text or None,
    )

    try:
        timestamps, truncated = expand_rule(rrule_string, start, until)
    except RecurrenceRuleError as e:
        logger.warning("Recurrence expansion failed for task %s: %s", parent.id, e)
        return MaterializeResult(parent=parent, expansion_error=str(e))

    result = MaterializeResult(parent=parent, truncated=truncated)
    for index, timestamp in enumerate(timestamps):
        task_id = occurrence_id(parent.id, index)
        try:
            occurrence = create_task_db(
                owner=owner,
                title=parent.title,
                description=parent.description,
                deadline=timestamp,
                duration_minutes=parent.duration_minutes,
                priority=parent.priority,
                category=parent.category,
                recurring=True,
                parent_task_id=parent.id,
                occurrence_index=index,
                rrule_string=rrule_string,
                source_text=parent.source_text,
                task_id=task_id,
            )
        except sqlite3.Error as e:
            logger.warning("Could not create occurrence %d of task %s: %s", index, parent.id, e)
            result.failed.append(WriteFailure(task_id=task_id, occurrence_index=index, error=str(e)))
            continue
        result.occurrences.append(occurrence)

    if truncated:
        logger.warning(
            "Recurrence for task %s capped at %d occurrences", parent.id, config.MAX_RECURRENCE_OCCURRENCES
        )
    logger.info(
        "Materialized %d occurrence(s) for task %s (%d failed)",
        len(result.occurrences), parent.id, len(result.failed),
    )
    return result
