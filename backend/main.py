from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo
import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import config
from models import (
    CommentCreate,
    ConflictRequest,
    ParseContext,
    ParseRequest,
    RecurringTaskCreate,
    Scope,
    SlotRequest,
    SortOrder,
    Status,
    TaskCreate,
    TaskDraft,
    TaskUpdate,
)
from database import init_db, find_tasks, create_task_db, update_task_db, add_comment_db, get_comments_db
from errors import InputValidationError, TaskNotFoundError
from nlp import parse
from conflicts import detect_conflicts
from slots import suggest_slots
from recurrence import materialize
from series import delete_series, update_series, load_owned_task
from reminders import overdue_tasks, upcoming_deadlines

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InputValidationError)
async def input_validation_handler(_request: Request, exc: InputValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(TaskNotFoundError)
async def task_not_found_handler(_request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Task not found"})


def get_owner(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owner identity comes from the X-User-Id header; sessions are handled upstream."""
    if not x_user_id:
        raise InputValidationError("X-User-Id header is required")
    return x_user_id


def _context(owner: str, timezone: str, locale: str, default_duration: Optional[int] = None) -> ParseContext:
    fields = {"owner_id": owner, "timezone": timezone, "locale": locale}
    if default_duration is not None:
        fields["default_duration_minutes"] = default_duration
    try:
        return ParseContext(**fields)
    except ValidationError as e:
        raise InputValidationError(str(e)) from e


def _local_now() -> datetime:
    return datetime.now(ZoneInfo(config.DEFAULT_TIMEZONE)).replace(tzinfo=None)


@app.post("/parse")
def parse_text(request: ParseRequest, owner: str = Depends(get_owner)) -> TaskDraft:
    context = _context(owner, request.timezone, request.locale, request.default_duration_minutes)
    return parse(request.text, context)


@app.get("/tasks")
def get_tasks(
    archived: Optional[bool] = False,
    status: Optional[Status] = None,
    category: Optional[str] = None,
    query: Optional[str] = None,
    sort: SortOrder = "deadline",
    owner: str = Depends(get_owner),
) -> list[dict]:
    tasks = find_tasks(owner=owner, archived=archived, status=status, category=category, query=query, sort=sort)
    return [task.model_dump(mode="json") for task in tasks]


@app.get("/tasks/search")
def search_tasks(query: str = "", sort: SortOrder = "deadline", owner: str = Depends(get_owner)) -> list[dict]:
    """Search live tasks by title, description, category and comment text."""
    if not query.strip():
        raise InputValidationError("Search query is required")
    tasks = find_tasks(owner=owner, archived=False, query=query.strip(), sort=sort)
    return [task.model_dump(mode="json") for task in tasks]


@app.post("/tasks")
def create_task(task_data: TaskCreate, response: Response, owner: str = Depends(get_owner)) -> dict:
    """
    Create a task, filling unset fields from free text.
    A recurrence rule routes to materialization; otherwise a timed task that
    collides with existing work is not created and free slots come back instead.
    """
    draft = None
    if task_data.text:
        draft = parse(task_data.text, _context(owner, task_data.timezone, task_data.locale))

    def pick(field: str, default=None):
        value = getattr(task_data, field)
        if value is None and draft is not None:
            value = getattr(draft, field)
        return default if value is None else value

    title = task_data.title or (draft.title if draft else None)
    if not title:
        raise InputValidationError("A title or free text is required")
    resolved = TaskDraft(
        title=title,
        description=pick("description", ""),
        deadline=pick("deadline"),
        duration_minutes=pick("duration_minutes"),
        priority=pick("priority", "medium"),
        category=pick("category", "general"),
        recurrence_rule=pick("recurrence_rule"),
        confidence=draft.confidence if draft else 1.0,
        source_text=task_data.text or "",
    )

    draft_json = resolved.model_dump(mode="json")

    if resolved.recurrence_rule:
        result = materialize(owner, resolved, resolved.recurrence_rule, task_data.horizon_date)
        response.status_code = 201
        return {
            "task": result.parent.model_dump(mode="json"),
            "draft": draft_json,
            "recurrence": result.model_dump(mode="json"),
            "conflicts": [],
            "suggestions": [],
        }

    if resolved.deadline is not None and resolved.duration_minutes:
        conflicts = detect_conflicts(owner, resolved.deadline, resolved.duration_minutes)
        if conflicts:
            logger.info("Task for %s conflicts with %d task(s); suggesting slots", owner, len(conflicts))
            slots = suggest_slots(owner, resolved.duration_minutes, timezone=task_data.timezone)
            response.status_code = 409
            return {
                "task": None,
                "draft": draft_json,
                "conflicts": [c.model_dump(mode="json") for c in conflicts],
                "suggestions": [s.model_dump(mode="json") for s in slots],
            }

    task = create_task_db(
        owner=owner,
        title=resolved.title,
        description=resolved.description,
        deadline=resolved.deadline,
        duration_minutes=resolved.duration_minutes,
        priority=resolved.priority,
        category=resolved.category,
        source_text=task_data.text,
    )
    response.status_code = 201
    return {"task": task.model_dump(mode="json"), "draft": draft_json, "conflicts": [], "suggestions": []}


@app.post("/tasks/recurring", status_code=201)
def create_recurring_task(task_data: RecurringTaskCreate, owner: str = Depends(get_owner)) -> dict:
    draft = TaskDraft(
        title=task_data.title,
        description=task_data.description,
        deadline=task_data.deadline,
        duration_minutes=task_data.duration_minutes,
        priority=task_data.priority,
        category=task_data.category,
        recurrence_rule=task_data.rrule_string,
        confidence=1.0,
    )
    result = materialize(owner, draft, task_data.rrule_string, task_data.horizon_date)
    return result.model_dump(mode="json")


@app.get("/tasks/{task_id}")
def get_task(task_id: str, owner: str = Depends(get_owner)) -> dict:
    return load_owned_task(task_id, owner).model_dump(mode="json")


@app.patch("/tasks/{task_id}")
def update_task(
    task_id: str,
    task_data: TaskUpdate,
    scope: Scope = Query(default="this"),
    owner: str = Depends(get_owner),
) -> dict:
    updates = task_data.model_dump(exclude_unset=True)
    if not updates:
        raise InputValidationError("No fields to update")
    result = update_series(task_id, scope, updates, owner=owner)
    return {"status": "updated" if result.complete else "partial", **result.model_dump(mode="json")}


@app.delete("/tasks/{task_id}")
def delete_task(
    task_id: str,
    scope: Scope = Query(default="this"),
    owner: str = Depends(get_owner),
) -> dict:
    result = delete_series(task_id, scope, owner=owner)
    return {"status": "deleted" if result.complete else "partial", **result.model_dump(mode="json")}


def _set_fields(task_id: str, owner: str, **fields) -> dict:
    load_owned_task(task_id, owner)
    result = update_task_db(task_id, **fields)
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result.model_dump(mode="json")


@app.post("/tasks/{task_id}/archive")
def archive_task(task_id: str, owner: str = Depends(get_owner)) -> dict:
    return _set_fields(task_id, owner, archived=True)


@app.post("/tasks/{task_id}/unarchive")
def unarchive_task(task_id: str, owner: str = Depends(get_owner)) -> dict:
    return _set_fields(task_id, owner, archived=False)


@app.post("/tasks/{task_id}/complete")
def complete_task(task_id: str, owner: str = Depends(get_owner)) -> dict:
    return _set_fields(task_id, owner, status="completed")


@app.post("/tasks/{task_id}/reopen")
def reopen_task(task_id: str, owner: str = Depends(get_owner)) -> dict:
    return _set_fields(task_id, owner, status="pending")


@app.post("/tasks/{task_id}/comments", status_code=201)
def add_comment(task_id: str, comment_data: CommentCreate, owner: str = Depends(get_owner)) -> dict:
    body = comment_data.comment.strip()
    if not body:
        raise InputValidationError("Comment is required")
    load_owned_task(task_id, owner)
    return add_comment_db(task_id, body).model_dump(mode="json")


@app.get("/tasks/{task_id}/comments")
def get_comments(task_id: str, owner: str = Depends(get_owner)) -> list[dict]:
    load_owned_task(task_id, owner)
    return [comment.model_dump(mode="json") for comment in get_comments_db(task_id)]


@app.post("/conflicts")
def find_conflicts(request: ConflictRequest, owner: str = Depends(get_owner)) -> list[dict]:
    conflicts = detect_conflicts(owner, request.start, request.duration_minutes)
    return [conflict.model_dump(mode="json") for conflict in conflicts]


@app.post("/slots")
def find_slots(request: SlotRequest, owner: str = Depends(get_owner)) -> list[dict]:
    slots = suggest_slots(owner, request.duration_minutes, request.window_days, timezone=request.timezone)
    return [slot.model_dump(mode="json") for slot in slots]


@app.get("/reminders/upcoming")
def get_upcoming(owner: str = Depends(get_owner)) -> dict:
    found = upcoming_deadlines(_local_now(), owner=owner)
    return {key: [task.model_dump(mode="json") for task in tasks] for key, tasks in found.items()}


@app.get("/reminders/overdue")
def get_overdue(owner: str = Depends(get_owner)) -> list[dict]:
    return [task.model_dump(mode="json") for task in overdue_tasks(_local_now(), owner=owner)]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
