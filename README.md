# noda

The service layer of a to-do application for users, lists and tasks. Each
service checks and normalises its input, fills in defaults and wraps paged
results. It then hands the call on to a repository object that you supply.
The repository can be any object with the methods the service calls, such as
a database layer or a stub in tests.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Modules

- `noda.common` holds what the services share:
  - Exceptions. `ServiceError` is the base class of `NilParameterError`,
    `TooLongError`, `UserNotFoundError`, `PasswordTooLongError` and
    `InvalidPasswordError`.
  - `Pagination`, a dataclass with `page` and `rpp` fields. They default to 1
    and 10.
  - `Result`, a dataclass with `page`, `rpp`, `retrieved` and `payload`.
    `Result.from_payload(pagination, payload)` builds one from a page and the
    records retrieved.
  - Helpers:
    - `trim` strips leading and trailing blanks (space, `\a\b\f\n\r\t\v`) and
      keeps `None` as `None`.
    - `trim_all` applies `trim` to several values.
    - `default_pagination` sets a page or rows-per-page value that is not
      positive to 1 or 10. It changes the `Pagination` in place.
    - `parse_uuid` raises `ValueError`, for example
      `invalid UUID length: 1`, when the text is not a UUID.
- `noda.list_service` holds `ListService`, `ListCreation` and `ListUpdate`.
- `noda.task_service` holds `TaskService`, `TaskCreation`, `TaskUpdate`,
  `TaskPriority` (`HIGH`, `MEDIUM`, `LOW`) and `TaskStatus` (`INCOMPLETE`,
  `COMPLETE`).
- `noda.user_service` holds `UserService`, `UserCreation`, `UserUpdate`,
  `UserSettingUpdate` and `check_password`.

## Behaviour

Rules that apply to all services:

- A missing argument, or an ID equal to the nil UUID, raises
  `NilParameterError` before the repository is called.
- Errors raised by the repository pass through unchanged.
- IDs are passed to the repository as strings. IDs that come back from the
  repository are parsed into `uuid.UUID`.
- Search needles and sort expressions are trimmed. A page or rows-per-page
  value that is not positive becomes 1 or 10. `ListService.fetch` and
  `UserService.search` pass their arguments on as they are given.

Lists:

- `ListService.save` trims the name and the description.
- An empty name raises `ServiceError`.
- A name longer than 32 bytes (UTF-8) or a description longer than 512 bytes
  raises `TooLongError`.
- A nil or missing group ID is passed on as an empty string. Such a list
  belongs to no group.

Tasks:

- A title longer than 128 bytes, a headline longer than 64 bytes or a
  description longer than 512 bytes raises `TooLongError`. The lengths are
  checked before trimming.
- `TaskService.save` fills in defaults for fields left empty:
  - the title becomes `"Untitled"`;
  - the priority becomes `TaskPriority.MEDIUM`;
  - the status becomes `TaskStatus.INCOMPLETE`.

Users:

- `UserService.save` trims all fields and checks their lengths:
  - each name may be at most 50 bytes;
  - the password may be at most 72 bytes;
  - the e-mail may be at most 240 bytes.
- `save` then checks the password with `check_password` and stores a bcrypt
  hash in its place.
- `check_password` raises `InvalidPasswordError` if the password is part of
  the e-mail's local part. It also raises it if the password:
  - is shorter than 8 characters, or
  - lacks a digit, an uppercase letter, a lowercase letter, or one of
    `!@#$%^&*?` or a space.

  The error's `details` lists every rule that was broken.
- `fetch_by_email` and `fetch_raw_user_by_email` raise `UserNotFoundError`
  when the e-mail is blank.
- Setting values are stored as JSON:
  - `update_user_setting` encodes the value. A string value is trimmed
    first.
  - `fetch_settings` and `fetch_one_setting` decode it again.
  - A setting key longer than 50 bytes raises `TooLongError`.
  - A blank key returns `False` without calling the repository.

## Example

```python
import uuid

from noda.common import Pagination
from noda.list_service import ListCreation, ListService
from noda.user_service import check_password
from noda.common import InvalidPasswordError


class StubRepository:
    def save(self, owner_id, group_id, creation):
        return str(uuid.uuid4())

    def fetch_scattered(self, owner_id, page, rpp, needle, sort_expr):
        return []


service = ListService(StubRepository())
owner = uuid.uuid4()

creation = ListCreation(name="  Groceries  ", description="")
list_id = service.save(owner, None, creation)
print(creation.name)  # Groceries

page = service.fetch_scattered(owner, Pagination(page=0, rpp=0), " milk ", "")
print(page.page, page.rpp, page.retrieved)  # 1 10 0

password = "password"
try:
    check_password(password, "someone@example.com")
except InvalidPasswordError as error:
    print(error.details)
```

## What this package does not do

The package contains only the service layer. It has no repository of its
own: it does not store anything and does not talk to a database. It also
provides no HTTP server, request handlers, authentication tokens or
command-line program. You supply the storage as the `repository` object
given to each service.

## Running the tests

```
pytest
```