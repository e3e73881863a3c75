from datetime import date, datetime, timedelta
from typing import Literal, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config

Priority = Literal["low", "medium", "high", "urgent"]
Status = Literal["pending", "completed"]
Scope = Literal["this", "following", "all"]
SortOrder = Literal["deadline", "deadline_desc", "created", "duration"]

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 10080  # one week
TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 1000
DEFAULT_TITLE = "Untitled Task"
DEFAULT_PRIORITY = "medium"
DEFAULT_CATEGORY = "general"


class TimeInterval(BaseModel):
    """A span of wall-clock time: start plus a positive duration in minutes."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    duration_minutes: int = Field(ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)

    def overlaps(self, other: "TimeInterval") -> bool:
        """Half-open overlap: intervals that only touch at an endpoint do not overlap."""
        return self.start < other.end and self.end > other.start


class ParseContext(BaseModel):
    owner_id: Optional[str] = None
    timezone: str = config.DEFAULT_TIMEZONE
    locale: str = config.DEFAULT_LOCALE
    default_duration_minutes: int = Field(
        default=config.DEFAULT_DURATION_MINUTES,
        ge=MIN_DURATION_MINUTES,
        le=MAX_DURATION_MINUTES,
    )
    now: Optional[datetime] = None  # reference time for relative phrases; defaults to the clock

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {value}")
        return value

    def local_now(self) -> datetime:
        """Naive wall-clock 'now' in the context's timezone."""
        if self.now is not None:
            if self.now.tzinfo is not None:
                return self.now.astimezone(ZoneInfo(self.timezone)).replace(tzinfo=None)
            return self.now
        return datetime.now(ZoneInfo(self.timezone)).replace(tzinfo=None)


class TaskDraft(BaseModel):
    """Parser output: every field defaulted, never half-filled."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(default=DEFAULT_TITLE, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    deadline: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    priority: Priority = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    recurrence_rule: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    source_text: str = ""


class Task(BaseModel):
    id: str
    owner: str
    title: str
    description: str = ""
    deadline: Optional[datetime] = None  # start time of the task
    duration_minutes: Optional[int] = None
    priority: Priority = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    status: Status = "pending"
    archived: bool = False
    recurring: bool = False
    parent_task_id: Optional[str] = None
    occurrence_index: Optional[int] = None
    rrule_string: Optional[str] = None
    source_text: Optional[str] = None
    created_at: str  # ISO format datetime string


class TaskCreate(BaseModel):
    text: Optional[str] = None  # free text; fills any field left unset
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    deadline: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    priority: Optional[Priority] = None
    category: Optional[str] = None
    recurrence_rule: Optional[str] = None
    horizon_date: Optional[Union[datetime, date]] = None
    timezone: str = config.DEFAULT_TIMEZONE
    locale: str = config.DEFAULT_LOCALE


class RecurringTaskCreate(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    deadline: datetime
    duration_minutes: Optional[int] = Field(default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    priority: Priority = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    rrule_string: str
    horizon_date: Optional[Union[datetime, date]] = None


class Comment(BaseModel):
    id: int
    task_id: str
    body: str
    created_at: str  # ISO format datetime string


class CommentCreate(BaseModel):
    comment: str


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    deadline: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    priority: Optional[Priority] = None
    category: Optional[str] = None
    status: Optional[Status] = None
    archived: Optional[bool] = None


class ParseRequest(BaseModel):
    text: str
    timezone: str = config.DEFAULT_TIMEZONE
    locale: str = config.DEFAULT_LOCALE
    default_duration_minutes: int = Field(
        default=config.DEFAULT_DURATION_MINUTES,
        ge=MIN_DURATION_MINUTES,
        le=MAX_DURATION_MINUTES,
    )


class ConflictRequest(BaseModel):
    start: datetime
    duration_minutes: int


class SlotRequest(BaseModel):
    duration_minutes: int
    window_days: int = config.SLOT_WINDOW_DAYS
    timezone: str = config.DEFAULT_TIMEZONE


class ConflictReport(BaseModel):
    task_id: str
    title: str
    start: datetime
    end: datetime
    duration: int
    priority: Priority


class SlotSuggestion(BaseModel):
    start: datetime
    end: datetime
    duration_minutes: int
    confidence: float


class WriteFailure(BaseModel):
    """One member of a multi-write operation that did not go through."""
    task_id: Optional[str] = None
    occurrence_index: Optional[int] = None
    error: str


class MaterializeResult(BaseModel):
    parent: Task
    occurrences: list[Task] = []
    failed: list[WriteFailure] = []
    expansion_error: Optional[str] = None
    truncated: bool = False  # expansion hit MAX_RECURRENCE_OCCURRENCES


class SeriesResult(BaseModel):
    scope: Scope
    task_ids: list[str]
    succeeded: list[str] = []
    failed: list[WriteFailure] = []
    tasks: list[Task] = []  # updated members (update flow only)

    @property
    def complete(self) -> bool:
        return not self.failed
