"""Business rules for tasks."""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Union

from .common import (
    NIL_UUID,
    NilParameterError,
    Pagination,
    Result,
    TooLongError,
    default_pagination,
    parse_uuid,
    trim,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 128
HEADLINE_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 512
DEFAULT_TITLE = "Untitled"


class TaskPriority(str, enum.Enum):
    """How urgent a task is."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, enum.Enum):
    """Whether a task is done."""

    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


@dataclass
class TaskCreation:
    """Data for a new task."""

    title: str = ""
    headline: str = ""
    description: str = ""
    remind_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    status: Union[TaskStatus, str, None] = None
    priority: Union[TaskPriority, str, None] = None


@dataclass
class TaskUpdate:
    """Data for changing a task."""

    title: str = ""
    headline: str = ""
    description: str = ""


def _is_nil(value: Any) -> bool:
    return value is None or (isinstance(value, uuid.UUID) and value == NIL_UUID)


def _require(routine: str, *params: tuple) -> None:
    for name, value in params:
        if _is_nil(value):
            error = NilParameterError(routine, name)
            logger.error("%s", error)
            raise error


def _byte_length(text: Optional[str]) -> int:
    return len(text.encode("utf-8")) if text else 0


def _check_lengths(fields: Any, entity: str) -> None:
    limits = (
        ("Title", fields.title, TITLE_MAX_LENGTH),
        ("Headline", fields.headline, HEADLINE_MAX_LENGTH),
        ("Description", fields.description, DESCRIPTION_MAX_LENGTH),
    )
    for name, value, limit in limits:
        if _byte_length(value) > limit:
            raise TooLongError(name, entity, limit)


def _trim_fields(fields: Any) -> None:
    fields.title = trim(fields.title)
    fields.headline = trim(fields.headline)
    fields.description = trim(fields.description)


class TaskService:
    """Validates task operations and hands them to a repository."""

    def __init__(self, repository: Any) -> None:
        self.repository = repository

    def save(self, owner_id, list_id, creation: Optional[TaskCreation]) -> uuid.UUID:
        """Store a new task, filling in title, priority and status defaults."""
        _require("Save", ("ownerID", owner_id), ("listID", list_id), ("creation", creation))
        _check_lengths(creation, "creation")
        _trim_fields(creation)
        if not creation.title:
            creation.title = DEFAULT_TITLE
        if not creation.priority:
            creation.priority = TaskPriority.MEDIUM
        if not creation.status:
            creation.status = TaskStatus.INCOMPLETE
        inserted = self.repository.save(str(owner_id), str(list_id), creation)
        return parse_uuid(inserted)

    def duplicate(self, owner_id, task_id) -> uuid.UUID:
        """Copy a task and return the ID of the copy."""
        _require("Duplicate", ("ownerID", owner_id), ("taskID", task_id))
        return parse_uuid(self.repository.duplicate(str(owner_id), str(task_id)))

    def fetch_by_id(self, owner_id, list_id, task_id):
        """Return one task of the owner."""
        _require("FetchByID", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.fetch_by_id(str(owner_id), str(list_id), str(task_id))

    @staticmethod
    def _page(
        fetcher: Callable[..., Any],
        ids: tuple,
        pagination: Pagination,
        needle: str,
        sort_expr: str,
    ) -> Result:
        default_pagination(pagination)
        needle, sort_expr = trim(needle), trim(sort_expr)
        tasks = fetcher(*ids, pagination.page, pagination.rpp, needle, sort_expr)
        return Result.from_payload(pagination, tasks)

    def fetch(self, owner_id, list_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the tasks in one list."""
        _require("Fetch", ("ownerID", owner_id), ("listID", list_id), ("pagination", pagination))
        return self._page(
            self.repository.fetch, (str(owner_id), str(list_id)), pagination, needle, sort_expr
        )

    def fetch_from_today(self, owner_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the tasks planned for today."""
        _require("FetchFromToday", ("ownerID", owner_id), ("pagination", pagination))
        return self._page(
            self.repository.fetch_from_today, (str(owner_id),), pagination, needle, sort_expr
        )

    def fetch_from_tomorrow(self, owner_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the tasks planned for tomorrow."""
        _require("FetchFromTomorrow", ("ownerID", owner_id), ("pagination", pagination))
        return self._page(
            self.repository.fetch_from_tomorrow, (str(owner_id),), pagination, needle, sort_expr
        )

    def fetch_from_deferred(self, owner_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the deferred tasks."""
        _require("FetchFromDeferred", ("ownerID", owner_id), ("pagination", pagination))
        return self._page(
            self.repository.fetch_from_deferred, (str(owner_id),), pagination, needle, sort_expr
        )

    def update(self, owner_id, list_id, task_id, update: Optional[TaskUpdate]) -> bool:
        """Change the title, headline and description of a task."""
        _require("Update", ("ownerID", owner_id), ("listID", list_id), ("update", update))
        _check_lengths(update, "update")
        _trim_fields(update)
        return self.repository.update(str(owner_id), str(list_id), str(task_id), update)

    def reorder(self, owner_id, list_id, task_id, position: int) -> bool:
        """Move a task to another position within its list."""
        _require("Reorder", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.reorder(str(owner_id), str(list_id), str(task_id), position)

    def set_reminder(self, owner_id, list_id, task_id, remind_at: datetime) -> bool:
        """Set when to be reminded of a task."""
        _require("SetReminder", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.set_reminder(str(owner_id), str(list_id), str(task_id), remind_at)

    def set_priority(self, owner_id, list_id, task_id, priority: TaskPriority) -> bool:
        """Set the priority of a task."""
        _require("SetPriority", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.set_priority(str(owner_id), str(list_id), str(task_id), priority)

    def set_due_date(self, owner_id, list_id, task_id, due_date: datetime) -> bool:
        """Set the due date of a task."""
        _require("SetDueDate", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.set_due_date(str(owner_id), str(list_id), str(task_id), due_date)

    def complete(self, owner_id, list_id, task_id) -> bool:
        """Mark a task as done."""
        _require("Complete", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.complete(str(owner_id), str(list_id), str(task_id))

    def resume(self, owner_id, list_id, task_id) -> bool:
        """Mark a task as not done."""
        _require("Resume", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.resume(str(owner_id), str(list_id), str(task_id))

    def pin(self, owner_id, list_id, task_id) -> bool:
        """Pin a task."""
        _require("Pin", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.pin(str(owner_id), str(list_id), str(task_id))

    def unpin(self, owner_id, list_id, task_id) -> bool:
        """Unpin a task."""
        _require("Unpin", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.unpin(str(owner_id), str(list_id), str(task_id))

    def move(self, owner_id, task_id, target_list_id) -> bool:
        """Move a task into another list."""
        _require(
            "Move",
            ("ownerID", owner_id),
            ("taskID", task_id),
            ("targetListID", target_list_id),
        )
        return self.repository.move(str(owner_id), str(task_id), str(target_list_id))

    def today(self, owner_id, task_id) -> bool:
        """Plan a task for today."""
        _require("Today", ("ownerID", owner_id), ("taskID", task_id))
        return self.repository.today(str(owner_id), str(task_id))

    def tomorrow(self, owner_id, task_id) -> bool:
        """Plan a task for tomorrow."""
        _require("Tomorrow", ("ownerID", owner_id), ("taskID", task_id))
        return self.repository.tomorrow(str(owner_id), str(task_id))

    def defer(self, owner_id, task_id) -> bool:
        """Put a task off to an unspecified later time."""
        _require("Defer", ("ownerID", owner_id), ("taskID", task_id))
        return self.repository.defer(str(owner_id), str(task_id))

    def trash(self, owner_id, list_id, task_id) -> bool:
        """Move a task to the trash."""
        _require("Trash", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        return self.repository.trash(str(owner_id), str(list_id), str(task_id))

    def restore_from_trash(self, owner_id, list_id, task_id) -> bool:
        """Take a task back out of the trash."""
        _require(
            "RestoreFromTrash", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id)
        )
        return self.repository.restore_from_trash(str(owner_id), str(list_id), str(task_id))

    def delete(self, owner_id, list_id, task_id) -> None:
        """Delete a task for good."""
        _require("Delete", ("ownerID", owner_id), ("listID", list_id), ("taskID", task_id))
        self.repository.delete(str(owner_id), str(list_id), str(task_id))