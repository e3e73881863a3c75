"""Exceptions raised by the scheduling core and mapped to HTTP errors in main.py."""


class TaskError(Exception):
    """Base class for task scheduling errors."""


class InputValidationError(TaskError):
    """The caller supplied something unusable (missing owner, bad duration, unknown scope)."""


class TaskNotFoundError(TaskError):
    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class RecurrenceRuleError(TaskError):
    """A recurrence rule could not be built or expanded."""
