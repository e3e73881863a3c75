"""
Edits and deletes that fan out across a recurring series.

A series is never stored as an object: it is the parent task plus every task
whose parent_task_id points at it, ordered by occurrence_index. The scope of
a request picks which of those members an operation touches:

    this       only the addressed task
    following  the addressed occurrence and every later one
    all        the parent and every occurrence

Non-recurring tasks always resolve to themselves. Nothing here creates
occurrences; members are only selected, updated or removed.
"""
import logging
import sqlite3
from typing import Any, Optional

from database import delete_task_db, find_tasks, get_task_db, update_task_db
from errors import InputValidationError, TaskNotFoundError
from models import Scope, SeriesResult, Task, WriteFailure

logger = logging.getLogger(__name__)

SCOPES = ("this", "following", "all")


def load_owned_task(task_id: str, owner: Optional[str]) -> Task:
    task = get_task_db(task_id)
    # Someone else's task is reported exactly like a missing one
    if task is None or (owner is not None and task.owner != owner):
        raise TaskNotFoundError(task_id)
    return task


def _occurrences(parent_id: str) -> list[Task]:
    children = find_tasks(parent_task_id=parent_id)
    return sorted(children, key=lambda t: (t.occurrence_index is None, t.occurrence_index or 0))


def _members(task: Task, scope: str) -> list[Task]:
    in_series = task.recurring or task.parent_task_id is not None
    if scope == "this" or not in_series:
        return [task]

    is_parent = task.parent_task_id is None
    parent_id = task.id if is_parent else task.parent_task_id
    children = _occurrences(parent_id)

    if scope == "following":
        # The parent carries no occurrence index, so nothing follows it
        if is_parent or task.occurrence_index is None:
            return [task]
        return [c for c in children if c.occurrence_index is not None and c.occurrence_index >= task.occurrence_index]

    parent = task if is_parent else get_task_db(parent_id)
    return ([parent] if parent is not None else []) + children


def resolve_scope(task_id: str, scope: Scope, owner: Optional[str] = None) -> list[str]:
    """Ids of the tasks an update or delete of task_id with this scope should touch."""
    if scope not in SCOPES:
        raise InputValidationError(f"Unknown scope '{scope}', expected one of {', '.join(SCOPES)}")
    task = load_owned_task(task_id, owner)

    ids: list[str] = []
    for member in _members(task, scope):
        if member.id not in ids:
            ids.append(member.id)
    return ids


def update_series(task_id: str, scope: Scope, updates: dict[str, Any], owner: Optional[str] = None) -> SeriesResult:
    """Apply the same field changes to every member of the resolved scope."""
    ids = resolve_scope(task_id, scope, owner)
    result = SeriesResult(scope=scope, task_ids=ids)
    for member_id in ids:
        try:
            updated = update_task_db(member_id, **updates)
        except sqlite3.Error as e:
            logger.warning("Update of task %s failed: %s", member_id, e)
            result.failed.append(WriteFailure(task_id=member_id, error=str(e)))
            continue
        if updated is None:
            result.failed.append(WriteFailure(task_id=member_id, error="Task not found"))
            continue
        result.succeeded.append(member_id)
        result.tasks.append(updated)

    logger.info("Updated %d/%d task(s) for %s (scope=%s)", len(result.succeeded), len(ids), task_id, scope)
    return result


def delete_series(task_id: str, scope: Scope, owner: Optional[str] = None) -> SeriesResult:
    """Delete every member of the resolved scope, reporting any that could not be removed."""
    ids = resolve_scope(task_id, scope, owner)
    result = SeriesResult(scope=scope, task_ids=ids)
    for member_id in ids:
        try:
            deleted = delete_task_db(member_id)
        except sqlite3.Error as e:
            logger.warning("Delete of task %s failed: %s", member_id, e)
            result.failed.append(WriteFailure(task_id=member_id, error=str(e)))
            continue
        if not deleted:
            result.failed.append(WriteFailure(task_id=member_id, error="Task not found"))
            continue
        result.succeeded.append(member_id)

    logger.info("Deleted %d/%d task(s) for %s (scope=%s)", len(result.succeeded), len(ids), task_id, scope)
    return result
