"""Business rules for user accounts and their settings."""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Optional

import bcrypt

from .common import (
    NIL_UUID,
    InvalidPasswordError,
    NilParameterError,
    Pagination,
    PasswordTooLongError,
    Result,
    TooLongError,
    UserNotFoundError,
    default_pagination,
    parse_uuid,
    trim,
)

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 50
PASSWORD_MAX_LENGTH = 72
EMAIL_MAX_LENGTH = 240
SETTING_KEY_MAX_LENGTH = 50
BCRYPT_COST = 10

_LENGTH_PATTERN = re.compile(r".{8,}")
_DIGIT_PATTERN = re.compile(r"[0-9]")
_UPPER_PATTERN = re.compile(r"[A-ZÁÉÍÓÚ]")
_LOWER_PATTERN = re.compile(r"[a-záéíóú]")
_SPECIAL_PATTERN = re.compile(r"[!@#$%^&*? ]")

# Characters that are escaped inside JSON strings for safe embedding in HTML.
_JSON_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class UserCreation:
    """Data for a new user."""

    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    surname: str = ""
    email: str = ""
    password: str = ""


@dataclass
class UserUpdate:
    """Data for changing a user's names."""

    first_name: str = ""
    middle_name: str = ""
    last_name: str = ""
    surname: str = ""


@dataclass
class UserSettingUpdate:
    """New value of one user setting."""

    value: Any = None


def _is_nil(value: Any) -> bool:
    return value is None or (isinstance(value, uuid.UUID) and value == NIL_UUID)


def _require(routine: str, *params: tuple, log: bool = True) -> None:
    for name, value in params:
        if _is_nil(value):
            error = NilParameterError(routine, name)
            if log:
                logger.error("%s", error)
            raise error


def _byte_length(text: Optional[str]) -> int:
    return len(text.encode()) if text else 0


def _check_names(fields: Any) -> None:
    for name, value in (
        ("FirstName", fields.first_name),
        ("MiddleName", fields.middle_name),
        ("LastName", fields.last_name),
        ("Surname", fields.surname),
    ):
        if _byte_length(value) > NAME_MAX_LENGTH:
            raise TooLongError(name, "user", NAME_MAX_LENGTH)


def _trim_names(fields: Any) -> None:
    fields.first_name = trim(fields.first_name)
    fields.middle_name = trim(fields.middle_name)
    fields.last_name = trim(fields.last_name)
    fields.surname = trim(fields.surname)


def _to_json(value: Any) -> str:
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    for char, escaped in _JSON_HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def _decode_setting(setting: Any) -> None:
    try:
        setting.value = json.loads(setting.value)
    except (ValueError, TypeError) as error:
        logger.error("%s", error)
        raise


def check_password(password: str, email: str) -> None:
    """Raise InvalidPasswordError unless the password meets the policy."""
    local_part = email.split("@")[0]
    if password in local_part:
        raise InvalidPasswordError(["Password seems to be similar to email."])
    rules = (
        (_LENGTH_PATTERN.fullmatch, "Password must be at least 8 characters long."),
        (_DIGIT_PATTERN.search, "Password must contain at least one digit."),
        (_UPPER_PATTERN.search, "Password must contain at least one uppercase letter."),
        (_LOWER_PATTERN.search, "Password must contain at least one lowercase letter."),
        (
            _SPECIAL_PATTERN.search,
            "Password must contain at least one special character (!@#$%^&*?).",
        ),
    )
    problems = [message for matches, message in rules if not matches(password)]
    if problems:
        raise InvalidPasswordError(problems)


class UserService:
    """Validates user operations and hands them to a repository."""

    def __init__(self, repository: Any) -> None:
        self.repository = repository

    def save(self, creation: Optional[UserCreation]) -> uuid.UUID:
        """Validate, hash the password and store a new user."""
        _require("Save", ("creation", creation))
        _trim_names(creation)
        creation.email = trim(creation.email)
        creation.password = trim(creation.password)
        _check_names(creation)
        if _byte_length(creation.password) > PASSWORD_MAX_LENGTH:
            raise TooLongError("Password", "user", PASSWORD_MAX_LENGTH)
        if _byte_length(creation.email) > EMAIL_MAX_LENGTH:
            raise TooLongError("Email", "user", EMAIL_MAX_LENGTH)
        check_password(creation.password, creation.email)
        raw = creation.password.encode()
        try:
            hashed = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_COST))
        except ValueError as error:
            raise PasswordTooLongError() from error
        creation.password = hashed.decode()
        inserted = self.repository.save(creation)
        try:
            return parse_uuid(inserted)
        except ValueError as error:
            logger.error("%s", error)
            raise

    def fetch_by_id(self, user_id):
        """Return the public view of a user."""
        _require("FetchByID", ("id", user_id))
        return self.repository.fetch_shallow_user_by_id(str(user_id))

    def fetch_by_email(self, email: str):
        """Return the public view of the user with this e-mail."""
        email = trim(email)
        if not email:
            raise UserNotFoundError()
        return self.repository.fetch_shallow_user_by_email(email)

    def fetch_raw_user_by_email(self, email: str):
        """Return the full stored record of the user with this e-mail."""
        email = trim(email)
        if not email:
            raise UserNotFoundError()
        return self.repository.fetch_by_email(email)

    def fetch(self, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of users."""
        _require("Fetch", ("pagination", pagination))
        needle, sort_expr = trim(needle), trim(sort_expr)
        default_pagination(pagination)
        users = self.repository.fetch(pagination.page, pagination.rpp, needle, sort_expr)
        return Result.from_payload(pagination, users)

    def fetch_blocked(self, pagination: Optional[Pagination], needle: str, sort_expr: str) -> Result:
        """Return a page of blocked users."""
        _require("FetchBlocked", ("pagination", pagination))
        needle, sort_expr = trim(needle), trim(sort_expr)
        default_pagination(pagination)
        users = self.repository.fetch_blocked(
            pagination.page, pagination.rpp, needle, sort_expr
        )
        return Result.from_payload(pagination, users)

    def fetch_settings(
        self, user_id, pagination: Optional[Pagination], needle: str, sort_expr: str
    ) -> Result:
        """Return a page of a user's settings with their values decoded."""
        _require("FetchSettings", ("userID", user_id), ("pagination", pagination))
        needle, sort_expr = trim(needle), trim(sort_expr)
        default_pagination(pagination)
        settings = self.repository.fetch_settings(
            str(user_id), pagination.page, pagination.rpp, needle, sort_expr
        )
        for setting in settings:
            if setting is not None:
                _decode_setting(setting)
        return Result.from_payload(pagination, settings)

    def fetch_one_setting(self, user_id, setting_key: str):
        """Return one of a user's settings with its value decoded."""
        _require("FetchOneSetting", ("userID", user_id))
        setting_key = trim(setting_key)
        setting = self.repository.fetch_one_setting(str(user_id), setting_key)
        _decode_setting(setting)
        return setting

    def search(self, pagination: Pagination, needle: str, sort_expr: str) -> Result:
        """Return a page of users matching the needle."""
        users = self.repository.search(pagination.page, pagination.rpp, needle, sort_expr)
        return Result.from_payload(pagination, users)

    def update(self, user_id, update: Optional[UserUpdate]) -> bool:
        """Change a user's names."""
        _require("Update", ("userID", user_id), ("update", update))
        _trim_names(update)
        _check_names(update)
        return self.repository.update(str(user_id), update)

    def update_user_setting(
        self, user_id, setting_key: str, update: Optional[UserSettingUpdate]
    ) -> bool:
        """Store a new JSON-encoded value for one of a user's settings."""
        if _byte_length(setting_key) > SETTING_KEY_MAX_LENGTH:
            raise TooLongError("settingKey", "setting update", SETTING_KEY_MAX_LENGTH)
        _require("UpdateUserSetting", ("userID", user_id), ("update", update))
        setting_key = trim(setting_key)
        if not setting_key:
            return False
        value = update.value
        if isinstance(value, str) and value and (value[0].isspace() or value[-1].isspace()):
            update.value = trim(value)
        try:
            encoded = _to_json(update.value)
        except (TypeError, ValueError) as error:
            logger.error("%s", error)
            raise
        return self.repository.update_user_setting(str(user_id), setting_key, encoded)

    def block(self, user_id) -> bool:
        """Block a user."""
        _require("Block", ("userID", user_id), log=False)
        return self.repository.block(str(user_id))

    def unblock(self, user_id) -> bool:
        """Unblock a user."""
        _require("Unblock", ("userID", user_id), log=False)
        return self.repository.unblock(str(user_id))

    def promote_to_admin(self, user_id) -> bool:
        """Give a user the administrator role."""
        _require("PromoteToAdmin", ("userID", user_id), log=False)
        return self.repository.promote_to_admin(str(user_id))

    def degrade_to_user(self, user_id) -> bool:
        """Take the administrator role away from a user."""
        _require("DegradeToUser", ("userID", user_id), log=False)
        return self.repository.degrade_to_user(str(user_id))

    def remove_hardly(self, user_id) -> None:
        """Delete a user for good."""
        _require("RemoveHardly", ("id", user_id), log=False)
        self.repository.remove_hardly(str(user_id))

    def remove_softly(self, user_id) -> None:
        """Mark a user as deleted."""
        _require("RemoveSoftly", ("id", user_id), log=False)
        self.repository.remove_softly(str(user_id))