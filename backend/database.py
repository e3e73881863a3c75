import sqlite3
import uuid
from datetime import datetime
from typing import Optional
from contextlib import contextmanager

import config
from models import Comment, Task

DATABASE_PATH = config.DATABASE_PATH

SCHEMA = """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        owner TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        deadline TEXT,
        duration_minutes INTEGER,
        priority TEXT NOT NULL DEFAULT 'medium',
        category TEXT NOT NULL DEFAULT 'general',
        status TEXT NOT NULL DEFAULT 'pending',
        archived INTEGER NOT NULL DEFAULT 0,
        recurring INTEGER NOT NULL DEFAULT 0,
        parent_task_id TEXT,
        occurrence_index INTEGER,
        rrule_string TEXT,
        source_text TEXT,
        created_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_tasks_owner_deadline ON tasks (owner, deadline);
    CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks (parent_task_id, occurrence_index);

    CREATE TABLE IF NOT EXISTS comments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        task_id TEXT NOT NULL,
        body TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_comments_task ON comments (task_id, id);
"""

# Columns a caller may change through update_task_db
UPDATABLE_FIELDS = {
    "title", "description", "deadline", "duration_minutes", "priority",
    "category", "status", "archived", "recurring", "rrule_string",
}

# ORDER BY clause per sort key accepted by find_tasks
SORT_ORDERS = {
    "deadline": "deadline IS NULL, deadline, occurrence_index, created_at",
    "deadline_desc": "deadline IS NULL, deadline DESC, occurrence_index DESC, created_at",
    "created": "created_at DESC, rowid DESC",
    "duration": "duration_minutes IS NULL, duration_minutes, deadline",
}

@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Create the tasks and comments tables and their indexes if they do not exist yet."""
    with get_db() as conn:
        conn.executescript(SCHEMA)
        conn.commit()

def to_db_datetime(value: Optional[datetime]) -> Optional[str]:
    """Serialize a timestamp as naive ISO text so string order matches time order."""
    if value is None:
        return None
    return value.replace(tzinfo=None).isoformat(timespec="seconds")

def _to_db_value(value):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, datetime):
        return to_db_datetime(value)
    return value

def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        owner=row["owner"],
        title=row["title"],
        description=row["description"] or "",
        deadline=row["deadline"],
        duration_minutes=row["duration_minutes"],
        priority=row["priority"],
        category=row["category"],
        status=row["status"],
        archived=bool(row["archived"]),
        recurring=bool(row["recurring"]),
        parent_task_id=row["parent_task_id"],
        occurrence_index=row["occurrence_index"],
        rrule_string=row["rrule_string"] or None,
        source_text=row["source_text"],
        created_at=row["created_at"],
    )

def find_tasks(
    owner: Optional[str] = None,
    archived: Optional[bool] = None,
    recurring: Optional[bool] = None,
    status: Optional[str] = None,
    scheduled_only: bool = False,
    deadline_from: Optional[datetime] = None,
    deadline_to: Optional[datetime] = None,
    parent_task_id: Optional[str] = None,
    category: Optional[str] = None,
    query: Optional[str] = None,
    sort: str = "deadline",
) -> list[Task]:
    """
    Query tasks. Every filter left as None is not applied.
    scheduled_only keeps tasks that have both a deadline and a duration.
    deadline_from is inclusive, deadline_to exclusive.
    query is a case-insensitive substring match on title, description,
    category and the task's comments.
    sort is a key of SORT_ORDERS; the default orders by deadline
    (unscheduled last), then occurrence_index.
    """
    if sort not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {sort}")
    clauses = []
    params = []
    if owner is not None:
        clauses.append("owner = ?")
        params.append(owner)
    if archived is not None:
        clauses.append("archived = ?")
        params.append(int(archived))
    if recurring is not None:
        clauses.append("recurring = ?")
        params.append(int(recurring))
    if status is not None:
        clauses.append("status = ?")
        params.append(status)
    if scheduled_only:
        clauses.append("deadline IS NOT NULL AND duration_minutes IS NOT NULL")
    if deadline_from is not None:
        clauses.append("deadline >= ?")
        params.append(to_db_datetime(deadline_from))
    if deadline_to is not None:
        clauses.append("deadline < ?")
        params.append(to_db_datetime(deadline_to))
    if parent_task_id is not None:
        clauses.append("parent_task_id = ?")
        params.append(parent_task_id)
    if category is not None:
        clauses.append("category = ?")
        params.append(category)
    if query:
        pattern = f"%{query}%"
        clauses.append(
            "(title LIKE ? OR description LIKE ? OR category LIKE ?"
            " OR EXISTS (SELECT 1 FROM comments c WHERE c.task_id = tasks.id AND c.body LIKE ?))"
        )
        params.extend([pattern] * 4)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM tasks {where} ORDER BY {SORT_ORDERS[sort]}",
            params
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def get_task_db(task_id: str) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row:
            return _row_to_task(row)
    return None

def create_task_db(
    owner: str,
    title: str,
    description: str = "",
    deadline: Optional[datetime] = None,
    duration_minutes: Optional[int] = None,
    priority: str = "medium",
    category: str = "general",
    recurring: bool = False,
    parent_task_id: Optional[str] = None,
    occurrence_index: Optional[int] = None,
    rrule_string: Optional[str] = None,
    source_text: Optional[str] = None,
    task_id: Optional[str] = None,
) -> Task:
    """Insert a task and return it.
    task_id is generated when not given; passing one makes a retried insert
    fail on the primary key instead of duplicating the row.
    """
    if deadline is not None:
        # Round-trip through the stored form so the returned task matches a re-read
        deadline = datetime.fromisoformat(to_db_datetime(deadline))
    task = Task(
        id=task_id or str(uuid.uuid4()),
        owner=owner,
        title=title,
        description=description or "",
        deadline=deadline,
        duration_minutes=duration_minutes,
        priority=priority,
        category=category,
        recurring=recurring,
        parent_task_id=parent_task_id,
        occurrence_index=occurrence_index,
        rrule_string=rrule_string,
        source_text=source_text,
        created_at=datetime.now().isoformat(),
    )
    with get_db() as conn:
        conn.execute(
            """INSERT INTO tasks
               (id, owner, title, description, deadline, duration_minutes, priority, category, status,
                archived, recurring, parent_task_id, occurrence_index, rrule_string, source_text, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', 0, ?, ?, ?, ?, ?, ?)""",
            (task.id, owner, task.title, task.description, to_db_datetime(deadline), duration_minutes,
             priority, category, int(recurring), parent_task_id, occurrence_index, rrule_string,
             source_text, task.created_at)
        )
        conn.commit()

    return task

def update_task_db(task_id: str, **updates) -> Optional[Task]:
    """
    Update a task with any fields provided.
    Only updates fields that differ from current values.

    Args:
        task_id: Task ID to update
        **updates: Field names and values to update (see UPDATABLE_FIELDS)
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            return None

        # Filter updates: only include fields that differ from current values
        changes = {}
        for field, new_value in updates.items():
            if field not in UPDATABLE_FIELDS:
                continue
            stored = _to_db_value(new_value)
            if stored != row[field]:
                changes[field] = stored

        # Execute UPDATE only if there are actual changes
        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()

        # Return updated task (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)

def delete_task_db(task_id: str) -> bool:
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.execute("DELETE FROM comments WHERE task_id = ?", (task_id,))
        conn.commit()
        return cursor.rowcount > 0

def _row_to_comment(row) -> Comment:
    return Comment(id=row["id"], task_id=row["task_id"], body=row["body"], created_at=row["created_at"])

def add_comment_db(task_id: str, body: str) -> Comment:
    """Append a comment to a task. The caller checks that the task exists."""
    created_at = datetime.now().isoformat()
    with get_db() as conn:
        cursor = conn.execute(
            "INSERT INTO comments (task_id, body, created_at) VALUES (?, ?, ?)",
            (task_id, body, created_at)
        )
        conn.commit()
        return Comment(id=cursor.lastrowid, task_id=task_id, body=body, created_at=created_at)

def get_comments_db(task_id: str) -> list[Comment]:
    """Comments on a task, oldest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM comments WHERE task_id = ? ORDER BY id", (task_id,)
        ).fetchall()
        return [_row_to_comment(row) for row in rows]
