# tests/test_task_service.py
from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy import select

from crm.core.errors import BadRequest, NotFound
from crm.core.rbac import Forbidden
from crm.fsm.status_fsm import TransitionNotAllowed
from crm.models.notification import Notification
from crm.models.task import Task, TaskStatus
from crm.models.user import Role
from crm.schemas.task import TaskCreate, TaskUpdate
from crm.services.task_service import TaskService

from tests.factories import actor_of, make_client, make_task, make_user


@pytest.fixture()
def setup(db):
    admin = make_user(db, role=Role.admin, full_name="Admin")
    spec = make_user(db, role=Role.specialist, full_name="Spec")
    other = make_user(db, role=Role.specialist, full_name="Other")
    client = make_client(db, created_by=admin, assigned_to_id=spec.id)
    return {"admin": admin, "spec": spec, "other": other, "client": client}


def _notifications(db, user_id) -> list[Notification]:
    return list(db.execute(select(Notification).where(Notification.user_id == user_id)).scalars())


def test_create_defaults_and_notifies_assignee(db, setup):
    task = TaskService(db).create(
        data=TaskCreate(client_id=setup["client"].id, title="Prepare content plan", assignee_id=setup["spec"].id),
        actor=actor_of(setup["admin"]),
    )

    assert task.status == TaskStatus.new.value
    assert task.priority == 50
    notes = _notifications(db, setup["spec"].id)
    assert len(notes) == 1
    assert notes[0].type == "TASK_ASSIGNED"
    assert "Prepare content plan" in notes[0].message


def test_self_assigned_task_is_not_notified(db, setup):
    TaskService(db).create(
        data=TaskCreate(client_id=setup["client"].id, title="Note to self", assignee_id=setup["spec"].id),
        actor=actor_of(setup["spec"]),
    )
    assert _notifications(db, setup["spec"].id) == []


def test_create_for_missing_client_is_404(db, setup):
    with pytest.raises(NotFound):
        TaskService(db).create(data=TaskCreate(client_id=uuid4(), title="x"), actor=actor_of(setup["admin"]))


def test_my_tasks_order_and_exclude_done(db, setup):
    c, spec, admin = setup["client"], setup["spec"], setup["admin"]
    low = make_task(db, client=c, creator=admin, assignee_id=spec.id, priority=10, title="low")
    late = make_task(db, client=c, creator=admin, assignee_id=spec.id, priority=90, due_date=date(2030, 1, 1), title="late")
    soon = make_task(db, client=c, creator=admin, assignee_id=spec.id, priority=90, due_date=date(2029, 1, 1), title="soon")
    make_task(db, client=c, creator=admin, assignee_id=spec.id, status=TaskStatus.done, title="done")
    make_task(db, client=c, creator=admin, assignee_id=setup["other"].id, title="not mine")

    titles = [t.title for t in TaskService(db).list_my(actor_of(spec))]
    assert titles == [soon.title, late.title, low.title]


def test_all_tasks_requires_manager_role(db, setup):
    with pytest.raises(Forbidden):
        TaskService(db).list_all(actor_of(setup["spec"]))


def test_assignee_moves_status_forward(db, setup):
    t = make_task(db, client=setup["client"], creator=setup["admin"], assignee_id=setup["spec"].id)
    svc = TaskService(db)

    svc.update(task_id=t.id, data=TaskUpdate(status=TaskStatus.in_progress), actor=actor_of(setup["spec"]))
    svc.update(task_id=t.id, data=TaskUpdate(status=TaskStatus.done), actor=actor_of(setup["spec"]))
    assert t.status == TaskStatus.done.value

    with pytest.raises(TransitionNotAllowed):
        svc.update(task_id=t.id, data=TaskUpdate(status=TaskStatus.new), actor=actor_of(setup["spec"]))


def test_unrelated_user_cannot_patch(db, setup):
    t = make_task(db, client=setup["client"], creator=setup["admin"], assignee_id=setup["spec"].id)
    with pytest.raises(Forbidden):
        TaskService(db).update(task_id=t.id, data=TaskUpdate(title="mine now"), actor=actor_of(setup["other"]))


def test_reassignment_notifies_new_assignee_only(db, setup):
    t = make_task(db, client=setup["client"], creator=setup["admin"], assignee_id=setup["spec"].id)

    TaskService(db).update(task_id=t.id, data=TaskUpdate(assignee_id=setup["other"].id), actor=actor_of(setup["admin"]))

    assert len(_notifications(db, setup["other"].id)) == 1
    assert _notifications(db, setup["spec"].id) == []


def test_patch_rejects_null_priority(db, setup):
    t = make_task(db, client=setup["client"], creator=setup["admin"])
    with pytest.raises(BadRequest):
        TaskService(db).update(task_id=t.id, data=TaskUpdate(priority=None), actor=actor_of(setup["admin"]))


def test_delete_is_admin_only(db, setup):
    t = make_task(db, client=setup["client"], creator=setup["spec"], assignee_id=setup["spec"].id)
    svc = TaskService(db)

    with pytest.raises(Forbidden):
        svc.delete(task_id=t.id, actor=actor_of(setup["spec"]))

    svc.delete(task_id=t.id, actor=actor_of(setup["admin"]))
    assert db.get(Task, t.id) is None


def test_client_tasks_respect_client_access(db, setup):
    make_task(db, client=setup["client"], creator=setup["admin"])
    with pytest.raises(Forbidden):
        TaskService(db).list_for_client(setup["client"].id, actor_of(setup["other"]))
    assert len(TaskService(db).list_for_client(setup["client"].id, actor_of(setup["spec"]))) == 1
