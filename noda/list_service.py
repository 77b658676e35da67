"""Business rules for to-do lists."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from .common import (
    NIL_UUID,
    NilParameterError,
    Pagination,
    Result,
    ServiceError,
    TooLongError,
    default_pagination,
    parse_uuid,
    trim,
)

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 1 << 5
DESCRIPTION_MAX_LENGTH = 1 << 9


@dataclass
class ListCreation:
    """Data for a new list."""

    name: str = ""
    description: str = ""


@dataclass
class ListUpdate:
    """Data for changing a list."""

    name: str = ""
    description: str = ""


def _is_nil(value: Any) -> bool:
    return value is None or (isinstance(value, uuid.UUID) and value == NIL_UUID)


def _require(routine: str, *params: tuple) -> None:
    for name, value in params:
        if _is_nil(value):
            error = NilParameterError(routine, name)
            logger.error("%s", error)
            raise error


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _optional_id(value: Optional[uuid.UUID]) -> str:
    return "" if _is_nil(value) else str(value)


def _check_lengths(name: str, description: str) -> None:
    if _byte_length(name) > NAME_MAX_LENGTH:
        raise TooLongError("name", "list", NAME_MAX_LENGTH)
    if _byte_length(description) > DESCRIPTION_MAX_LENGTH:
        raise TooLongError("description", "list", DESCRIPTION_MAX_LENGTH)


class ListService:
    """Validates list operations and hands them to a repository."""

    def __init__(self, repository: Any) -> None:
        self.repository = repository

    def save(self, owner_id, group_id, creation: Optional[ListCreation]) -> uuid.UUID:
        """Store a new list; a nil group makes it a scattered list."""
        _require("Save", ("ownerID", owner_id), ("creation", creation))
        creation.name = trim(creation.name)
        creation.description = trim(creation.description)
        if creation.name == "":
            raise ServiceError("name cannot be an empty string")
        _check_lengths(creation.name, creation.description)
        inserted = self.repository.save(str(owner_id), _optional_id(group_id), creation)
        return parse_uuid(inserted)

    def fetch_by_id(self, owner_id, group_id, list_id):
        """Return one list of the owner."""
        _require("FetchByID", ("ownerID", owner_id), ("listID", list_id))
        group = NIL_UUID if group_id is None else group_id
        return self.repository.fetch_by_id(str(owner_id), str(group), str(list_id))

    def get_today_list_id(self, owner_id) -> uuid.UUID:
        """Return the ID of the owner's list for today."""
        _require("GetTodayListID", ("ownerID", owner_id))
        return parse_uuid(self.repository.get_today_list_id(str(owner_id)))

    def get_tomorrow_list_id(self, owner_id) -> uuid.UUID:
        """Return the ID of the owner's list for tomorrow."""
        _require("GetTomorrowListID", ("ownerID", owner_id))
        return parse_uuid(self.repository.get_tomorrow_list_id(str(owner_id)))

    def fetch(self, owner_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of all the owner's lists."""
        _require("Fetch", ("ownerID", owner_id), ("pagination", pagination))
        lists = self.repository.fetch(
            str(owner_id), pagination.page, pagination.rpp, needle, sort_expr
        )
        return Result.from_payload(pagination, lists)

    def fetch_grouped(self, owner_id, group_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the lists in one group."""
        _require(
            "FetchGrouped",
            ("ownerID", owner_id),
            ("groupID", group_id),
            ("pagination", pagination),
        )
        needle, sort_expr = trim(needle), trim(sort_expr)
        default_pagination(pagination)
        lists = self.repository.fetch_grouped(
            str(owner_id), str(group_id), pagination.page, pagination.rpp, needle, sort_expr
        )
        return Result.from_payload(pagination, lists)

    def fetch_scattered(self, owner_id, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of the lists that belong to no group."""
        _require("FetchScattered", ("ownerID", owner_id), ("pagination", pagination))
        needle, sort_expr = trim(needle), trim(sort_expr)
        default_pagination(pagination)
        lists = self.repository.fetch_scattered(
            str(owner_id), pagination.page, pagination.rpp, needle, sort_expr
        )
        return Result.from_payload(pagination, lists)

    def update(self, owner_id, group_id, list_id, update: Optional[ListUpdate]) -> bool:
        """Change the name and description of a list."""
        _require(
            "Update",
            ("ownerID", owner_id),
            ("listID", list_id),
            ("up", update),
        )
        update.name = trim(update.name)
        update.description = trim(update.description)
        _check_lengths(update.name, update.description)
        return self.repository.update(
            str(owner_id), _optional_id(group_id), str(list_id), update
        )

    def duplicate(self, owner_id, list_id) -> uuid.UUID:
        """Copy a list and return the ID of the copy."""
        _require("Duplicate", ("ownerID", owner_id), ("listID", list_id))
        return parse_uuid(self.repository.duplicate(str(owner_id), str(list_id)))

    def move(self, owner_id, list_id, target_group_id) -> bool:
        """Move a list into another group."""
        _require(
            "Move",
            ("ownerID", owner_id),
            ("listID", list_id),
            ("targetGroupID", target_group_id),
        )
        return self.repository.move(str(owner_id), str(list_id), str(target_group_id))

    def scatter(self, owner_id, list_id) -> bool:
        """Take a list out of its group."""
        _require("Scatter", ("ownerID", owner_id), ("listID", list_id))
        return self.repository.scatter(str(owner_id), str(list_id))

    def remove(self, owner_id, group_id, list_id) -> None:
        """Delete a list."""
        _require("Remove", ("ownerID", owner_id), ("listID", list_id))
        self.repository.remove(str(owner_id), _optional_id(group_id), str(list_id))