import uuid
from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from noda.common import NIL_UUID, NilParameterError, Pagination, Result, TooLongError
from noda.task_service import (
    TaskCreation,
    TaskPriority,
    TaskService,
    TaskStatus,
    TaskUpdate,
)

BLANKSET = " \t\n\v\f\r"


class Unexpected(Exception):
    pass


def ids(n):
    return [uuid.uuid4() for _ in range(n)]


def expect_nil(call, routine, parameter):
    with pytest.raises(NilParameterError) as info:
        call()
    assert info.value.routine == routine
    assert info.value.parameter == parameter
    assert routine in str(info.value)


# ---- save ----

def test_save_success():
    owner, lst, inserted = ids(3)
    c = TaskCreation(
        title="title",
        headline="headline",
        description="description",
        remind_at=datetime.now() + timedelta(hours=5),
        due_date=datetime.now() + timedelta(hours=10),
        status=TaskStatus.INCOMPLETE,
        priority=TaskPriority.HIGH,
    )
    repo = Mock()
    repo.save.return_value = str(inserted)
    assert TaskService(repo).save(owner, lst, c) == inserted
    repo.save.assert_called_once_with(str(owner), str(lst), c)


@pytest.mark.parametrize(
    "args, parameter",
    [
        ((NIL_UUID, uuid.uuid4(), TaskCreation()), "ownerID"),
        ((uuid.uuid4(), NIL_UUID, TaskCreation()), "listID"),
        ((uuid.uuid4(), uuid.uuid4(), None), "creation"),
    ],
)
def test_save_nil_parameters(args, parameter):
    repo = Mock()
    expect_nil(lambda: TaskService(repo).save(*args), "Save", parameter)
    assert repo.save.call_count == 0


def test_save_trims_fields():
    owner, lst, inserted = ids(3)
    c = TaskCreation(
        title=BLANKSET + "Title" + BLANKSET,
        headline=BLANKSET + "Headline" + BLANKSET,
        description=BLANKSET + "Description" + BLANKSET,
    )
    repo = Mock()
    repo.save.return_value = str(inserted)
    assert TaskService(repo).save(owner, lst, c) == inserted
    assert (c.title, c.headline, c.description) == ("Title", "Headline", "Description")


def test_save_defaults_values():
    owner, lst, inserted = ids(3)
    c = TaskCreation(headline=BLANKSET + "Headline" + BLANKSET)
    repo = Mock()
    repo.save.return_value = str(inserted)
    assert TaskService(repo).save(owner, lst, c) == inserted
    assert c.title == "Untitled"
    assert c.priority == TaskPriority.MEDIUM
    assert c.status == TaskStatus.INCOMPLETE


@pytest.mark.parametrize(
    "field_name, attr, limit",
    [("Title", "title", 128), ("Headline", "headline", 64), ("Description", "description", 512)],
)
def test_save_too_long(field_name, attr, limit):
    c = TaskCreation()
    setattr(c, attr, "x" * (limit + 1))
    repo = Mock()
    with pytest.raises(TooLongError) as info:
        TaskService(repo).save(uuid.uuid4(), uuid.uuid4(), c)
    assert str(info.value) == str(TooLongError(field_name, "creation", limit))
    assert repo.save.call_count == 0


def test_save_repository_error():
    repo = Mock()
    repo.save.side_effect = Unexpected("unexpected error")
    with pytest.raises(Unexpected):
        TaskService(repo).save(uuid.uuid4(), uuid.uuid4(), TaskCreation())


def test_save_bad_uuid_from_repository():
    repo = Mock()
    repo.save.return_value = "x"
    with pytest.raises(ValueError, match="invalid UUID length: 1"):
        TaskService(repo).save(uuid.uuid4(), uuid.uuid4(), TaskCreation())


# ---- duplicate ----

def test_duplicate_success():
    owner, task, replica = ids(3)
    repo = Mock()
    repo.duplicate.return_value = str(replica)
    assert TaskService(repo).duplicate(owner, task) == replica
    repo.duplicate.assert_called_once_with(str(owner), str(task))


@pytest.mark.parametrize("position, parameter", [(0, "ownerID"), (1, "taskID")])
def test_duplicate_nil(position, parameter):
    args = ids(2)
    args[position] = NIL_UUID
    repo = Mock()
    expect_nil(lambda: TaskService(repo).duplicate(*args), "Duplicate", parameter)
    assert repo.duplicate.call_count == 0


def test_duplicate_repository_error():
    repo = Mock()
    repo.duplicate.side_effect = Unexpected()
    with pytest.raises(Unexpected):
        TaskService(repo).duplicate(uuid.uuid4(), uuid.uuid4())


# ---- fetch_by_id ----

def test_fetch_by_id_success():
    owner, lst, task = ids(3)
    record = {"uuid": task}
    repo = Mock()
    repo.fetch_by_id.return_value = record
    assert TaskService(repo).fetch_by_id(owner, lst, task) is record
    repo.fetch_by_id.assert_called_once_with(str(owner), str(lst), str(task))


@pytest.mark.parametrize("position, parameter", [(0, "ownerID"), (1, "listID"), (2, "taskID")])
def test_fetch_by_id_nil(position, parameter):
    args = ids(3)
    args[position] = NIL_UUID
    repo = Mock()
    expect_nil(lambda: TaskService(repo).fetch_by_id(*args), "FetchByID", parameter)
    assert repo.fetch_by_id.call_count == 0


def test_fetch_by_id_repository_error():
    repo = Mock()
    repo.fetch_by_id.side_effect = Unexpected()
    with pytest.raises(Unexpected):
        TaskService(repo).fetch_by_id(*ids(3))


# ---- fetch ----

def test_fetch_success():
    owner, lst = ids(2)
    tasks = [{"n": 1}, {"n": 2}, {"n": 3}]
    repo = Mock()
    repo.fetch.return_value = tasks
    res = TaskService(repo).fetch(owner, lst, Pagination(1, 10), "x", "-title")
    assert res == Result(page=1, rpp=10, retrieved=3, payload=tasks)
    repo.fetch.assert_called_once_with(str(owner), str(lst), 1, 10, "x", "-title")


@pytest.mark.parametrize("parameter", ["ownerID", "listID", "pagination"])
def test_fetch_nil(parameter):
    owner, lst = ids(2)
    pag = Pagination(1, 10)
    if parameter == "ownerID":
        owner = NIL_UUID
    elif parameter == "listID":
        lst = NIL_UUID
    else:
        pag = None
    repo = Mock()
    expect_nil(lambda: TaskService(repo).fetch(owner, lst, pag, "x", "-title"), "Fetch", parameter)
    assert repo.fetch.call_count == 0


def test_fetch_trims_and_defaults():
    owner, lst = ids(2)
    repo = Mock()
    repo.fetch.return_value = []
    res = TaskService(repo).fetch(
        owner, lst, Pagination(-1, 0), BLANKSET + "x" + BLANKSET, BLANKSET + "-title" + BLANKSET
    )
    repo.fetch.assert_called_once_with(str(owner), str(lst), 1, 10, "x", "-title")
    assert (res.page, res.rpp, res.retrieved) == (1, 10, 0)


def test_fetch_repository_error():
    repo = Mock()
    repo.fetch.side_effect = Unexpected()
    with pytest.raises(Unexpected):
        TaskService(repo).fetch(uuid.uuid4(), uuid.uuid4(), Pagination(1, 10), "", "")


# ---- fetch_from_today / tomorrow / deferred ----

FETCH_VARIANTS = [
    ("fetch_from_today", "FetchFromToday"),
    ("fetch_from_tomorrow", "FetchFromTomorrow"),
    ("fetch_from_deferred", "FetchFromDeferred"),
]


@pytest.mark.parametrize("method, routine", FETCH_VARIANTS)
def test_fetch_variant_success(method, routine):
    owner = uuid.uuid4()
    tasks = [{"n": 1}, {"n": 2}, {"n": 3}]
    repo = Mock()
    getattr(repo, method).return_value = tasks
    res = getattr(TaskService(repo), method)(owner, Pagination(1, 10), "x", "-title")
    assert res == Result(page=1, rpp=10, retrieved=3, payload=tasks)
    getattr(repo, method).assert_called_once_with(str(owner), 1, 10, "x", "-title")


@pytest.mark.parametrize("method, routine", FETCH_VARIANTS)
def test_fetch_variant_nil_owner(method, routine):
    repo = Mock()
    service = TaskService(repo)
    expect_nil(lambda: getattr(service, method)(NIL_UUID, Pagination(), "", ""), routine, "ownerID")
    assert getattr(repo, method).call_count == 0


@pytest.mark.parametrize("method, routine", FETCH_VARIANTS)
def test_fetch_variant_nil_pagination(method, routine):
    repo = Mock()
    service = TaskService(repo)
    expect_nil(lambda: getattr(service, method)(uuid.uuid4(), None, "", ""), routine, "pagination")
    assert getattr(repo, method).call_count == 0


@pytest.mark.parametrize("method, routine", FETCH_VARIANTS)
def test_fetch_variant_trims_and_defaults(method, routine):
    owner = uuid.uuid4()
    repo = Mock()
    getattr(repo, method).return_value = []
    getattr(TaskService(repo), method)(
        owner, Pagination(-1, 0), BLANKSET + "x" + BLANKSET, BLANKSET + "-title" + BLANKSET
    )
    getattr(repo, method).assert_called_once_with(str(owner), 1, 10, "x", "-title")


@pytest.mark.parametrize("method, routine", FETCH_VARIANTS)
def test_fetch_variant_repository_error(method, routine):
    repo = Mock()
    getattr(repo, method).side_effect = Unexpected()
    with pytest.raises(Unexpected):
        getattr(TaskService(repo), method)(uuid.uuid4(), Pagination(), "", "")


# ---- update ----

def test_update_success():
    owner, lst, task = ids(3)
    u = TaskUpdate(title="Title", description="Description", headline="Headline")
    repo = Mock()
    repo.update.return_value = True
    assert TaskService(repo).update(owner, lst, task, u) is True
    repo.update.assert_called_once_with(str(owner), str(lst), str(task), u)


@pytest.mark.parametrize("parameter", ["ownerID", "listID", "update"])
def test_update_nil(parameter):
    owner, lst, task = ids(3)
    u = TaskUpdate()
    if parameter == "ownerID":
        owner = NIL_UUID
    elif parameter == "listID":
        lst = NIL_UUID
    else:
        u = None
    repo = Mock()
    expect_nil(lambda: TaskService(repo).update(owner, lst, task, u), "Update", parameter)
    assert repo.update.call_count == 0


def test_update_trims_fields():
    u = TaskUpdate(
        title=BLANKSET + "Title" + BLANKSET,
        headline=BLANKSET + "Headline" + BLANKSET,
        description=BLANKSET + "Description" + BLANKSET,
    )
    repo = Mock()
    repo.update.return_value = True
    assert TaskService(repo).update(*ids(3), u) is True
    assert (u.title, u.headline, u.description) == ("Title", "Headline", "Description")


@pytest.mark.parametrize(
    "field_name, attr, limit",
    [("Title", "title", 128), ("Headline", "headline", 64), ("Description", "description", 512)],
)
def test_update_too_long(field_name, attr, limit):
    u = TaskUpdate()
    setattr(u, attr, "x" * (limit + 1))
    repo = Mock()
    with pytest.raises(TooLongError) as info:
        TaskService(repo).update(*ids(3), u)
    assert str(info.value) == str(TooLongError(field_name, "update", limit))
    assert repo.update.call_count == 0


def test_update_repository_error():
    repo = Mock()
    repo.update.side_effect = Unexpected()
    with pytest.raises(Unexpected):
        TaskService(repo).update(*ids(3), TaskUpdate())


# ---- methods taking an extra value ----

VALUE_METHODS = [
    ("reorder", "Reorder", 10),
    ("set_reminder", "SetReminder", datetime.now() + timedelta(hours=5)),
    ("set_priority", "SetPriority", TaskPriority.HIGH),
    ("set_due_date", "SetDueDate", datetime.now() + timedelta(hours=5)),
]


@pytest.mark.parametrize("method, routine, value", VALUE_METHODS)
def test_value_method_success(method, routine, value):
    owner, lst, task = ids(3)
    repo = Mock()
    getattr(repo, method).return_value = True
    assert getattr(TaskService(repo), method)(owner, lst, task, value) is True
    getattr(repo, method).assert_called_once_with(str(owner), str(lst), str(task), value)


@pytest.mark.parametrize("method, routine, value", VALUE_METHODS)
@pytest.mark.parametrize("position, parameter", [(0, "ownerID"), (1, "listID"), (2, "taskID")])
def test_value_method_nil(method, routine, value, position, parameter):
    args = ids(3)
    args[position] = NIL_UUID
    repo = Mock()
    service = TaskService(repo)
    expect_nil(lambda: getattr(service, method)(*args, value), routine, parameter)
    assert getattr(repo, method).call_count == 0


@pytest.mark.parametrize("method, routine, value", VALUE_METHODS)
def test_value_method_repository_error(method, routine, value):
    repo = Mock()
    getattr(repo, method).side_effect = Unexpected()
    with pytest.raises(Unexpected):
        getattr(TaskService(repo), method)(*ids(3), value)


# ---- methods taking owner, list and task ----

TRIPLE_METHODS = [
    ("complete", "Complete"),
    ("resume", "Resume"),
    ("pin", "Pin"),
    ("unpin", "Unpin"),
    ("trash", "Trash"),
    ("restore_from_trash", "RestoreFromTrash"),
]


@pytest.mark.parametrize("method, routine", TRIPLE_METHODS)
def test_triple_method_success(method, routine):
    owner, lst, task = ids(3)
    repo = Mock()
    getattr(repo, method).return_value = True
    assert getattr(TaskService(repo), method)(owner, lst, task) is True
    getattr(repo, method).assert_called_once_with(str(owner), str(lst), str(task))


@pytest.mark.parametrize("method, routine", TRIPLE_METHODS + [("delete", "Delete")])
@pytest.mark.parametrize("position, parameter", [(0, "ownerID"), (1, "listID"), (2, "taskID")])
def test_triple_method_nil(method, routine, position, parameter):
    args = ids(3)
    args[position] = NIL_UUID
    repo = Mock()
    service = TaskService(repo)
    expect_nil(lambda: getattr(service, method)(*args), routine, parameter)
    assert getattr(repo, method).call_count == 0


@pytest.mark.parametrize("method, routine", TRIPLE_METHODS + [("delete", "Delete")])
def test_triple_method_repository_error(method, routine):
    repo = Mock()
    getattr(repo, method).side_effect = Unexpected()
    with pytest.raises(Unexpected):
        getattr(TaskService(repo), method)(*ids(3))


def test_delete_success():
    owner, lst, task = ids(3)
    repo = Mock()
    assert TaskService(repo).delete(owner, lst, task) is None
    repo.delete.assert_called_once_with(str(owner), str(lst), str(task))


# ---- move ----

def test_move_success():
    owner, task, target = ids(3)
    repo = Mock()
    repo.move.return_value = True
    assert TaskService(repo).move(owner, task, target) is True
    repo.move.assert_called_once_with(str(owner), str(task), str(target))


@pytest.mark.parametrize(
    "position, parameter", [(0, "ownerID"), (1, "taskID"), (2, "targetListID")]
)
def test_move_nil(position, parameter):
    args = ids(3)
    args[position] = NIL_UUID
    repo = Mock()
    expect_nil(lambda: TaskService(repo).move(*args), "Move", parameter)
    assert repo.move.call_count == 0


def test_move_repository_error():
    repo = Mock()
    repo.move.side_effect = Unexpected()
    with pytest.raises(Unexpected):
        TaskService(repo).move(*ids(3))


# ---- today / tomorrow / defer ----

PAIR_METHODS = [("today", "Today"), ("tomorrow", "Tomorrow"), ("defer", "Defer")]


@pytest.mark.parametrize("method, routine", PAIR_METHODS)
def test_pair_method_success(method, routine):
    owner, task = ids(2)
    repo = Mock()
    getattr(repo, method).return_value = True
    assert getattr(TaskService(repo), method)(owner, task) is True
    getattr(repo, method).assert_called_once_with(str(owner), str(task))


@pytest.mark.parametrize("method, routine", PAIR_METHODS)
@pytest.mark.parametrize("position, parameter", [(0, "ownerID"), (1, "taskID")])
def test_pair_method_nil(method, routine, position, parameter):
    args = ids(2)
    args[position] = NIL_UUID
    repo = Mock()
    service = TaskService(repo)
    expect_nil(lambda: getattr(service, method)(*args), routine, parameter)
    assert getattr(repo, method).call_count == 0


@pytest.mark.parametrize("method, routine", PAIR_METHODS)
def test_pair_method_repository_error(method, routine):
    repo = Mock()
    getattr(repo, method).side_effect = Unexpected()
    with pytest.raises(Unexpected):
        getattr(TaskService(repo), method)(*ids(2))