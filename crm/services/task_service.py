# crm/services/task_service.py
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from crm.core.errors import BadRequest, NotFound
from crm.core.rbac import ActorContext, Forbidden, ensure_allowed, is_allowed
from crm.fsm.status_fsm import apply_task_transition
from crm.models.task import Task, TaskStatus
from crm.models.user import User
from crm.schemas.task import TaskCreate, TaskUpdate
from crm.services import notification_service
from crm.services.client_service import ensure_can_access, get_client_or_404

logger = logging.getLogger(__name__)

# open tasks: most important first, then the nearest deadline
OPEN_TASK_ORDER = (
    Task.priority.desc(),
    Task.due_date.asc().nulls_last(),
    Task.created_at.desc(),
)


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, task_id: UUID) -> Task:
        task = self.db.get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    def _ensure_assignee_exists(self, assignee_id: UUID | None) -> None:
        if assignee_id is not None and self.db.get(User, assignee_id) is None:
            raise BadRequest("Assignee not found")

    def create(self, *, data: TaskCreate, actor: ActorContext) -> Task:
        client = get_client_or_404(self.db, data.client_id)
        self._ensure_assignee_exists(data.assignee_id)

        task = Task(
            client_id=client.id,
            title=data.title.strip(),
            description=data.description,
            priority=data.priority,
            status=TaskStatus.new.value,
            creator_id=actor.user_id,
            assignee_id=data.assignee_id,
            due_date=data.due_date,
        )
        self.db.add(task)

        if task.assignee_id is not None and task.assignee_id != actor.user_id:
            notification_service.notify_task_assigned(
                self.db,
                assignee_id=task.assignee_id,
                task_title=task.title,
                client_id=client.id,
                assigner_name=actor.full_name,
            )

        self.db.flush()
        logger.info("task %s created by %s for client %s", task.id, actor.user_id, client.id)
        return task

    def list_my(self, actor: ActorContext) -> list[Task]:
        return list(
            self.db.execute(
                select(Task)
                .where(Task.assignee_id == actor.user_id, Task.status != TaskStatus.done.value)
                .order_by(*OPEN_TASK_ORDER)
            ).scalars()
        )

    def list_all(self, actor: ActorContext) -> list[Task]:
        ensure_allowed("task.list_all", actor.role)
        return list(
            self.db.execute(
                select(Task)
                .where(Task.status != TaskStatus.done.value)
                .order_by(*OPEN_TASK_ORDER)
            ).scalars()
        )

    def list_for_client(self, client_id: UUID, actor: ActorContext) -> list[Task]:
        client = get_client_or_404(self.db, client_id)
        ensure_can_access(client, actor)
        return list(
            self.db.execute(
                select(Task)
                .where(Task.client_id == client.id)
                .order_by(Task.status.asc(), Task.priority.desc(), Task.created_at.desc())
            ).scalars()
        )

    def get(self, task_id: UUID, actor: ActorContext) -> Task:
        task = self._get_or_404(task_id)
        ensure_can_access(task.client, actor)
        return task

    def update(self, *, task_id: UUID, data: TaskUpdate, actor: ActorContext) -> Task:
        fields: dict[str, Any] = data.model_dump(exclude_unset=True)
        task = self._get_or_404(task_id)

        if not is_allowed("task.edit_any", actor.role) and actor.user_id not in (
            task.creator_id,
            task.assignee_id,
        ):
            raise Forbidden("You can only edit tasks you created or are assigned to")

        if "title" in fields and not (fields["title"] or "").strip():
            raise BadRequest("title cannot be empty")
        if "priority" in fields and fields["priority"] is None:
            raise BadRequest("priority cannot be empty")

        target = fields.pop("status", None)
        if target is not None:
            task.status = apply_task_transition(TaskStatus(task.status), target).value

        previous_assignee = task.assignee_id
        if "assignee_id" in fields:
            self._ensure_assignee_exists(fields["assignee_id"])

        for name, value in fields.items():
            setattr(task, name, value)

        new_assignee = task.assignee_id
        if new_assignee is not None and new_assignee not in (previous_assignee, actor.user_id):
            notification_service.notify_task_assigned(
                self.db,
                assignee_id=new_assignee,
                task_title=task.title,
                client_id=task.client_id,
                assigner_name=actor.full_name,
            )

        self.db.flush()
        logger.info("task %s updated by %s: %s", task.id, actor.user_id, sorted(data.model_fields_set))
        return task

    def delete(self, *, task_id: UUID, actor: ActorContext) -> None:
        ensure_allowed("task.delete", actor.role)
        task = self._get_or_404(task_id)
        self.db.delete(task)
        self.db.flush()
        logger.info("task %s deleted by %s", task_id, actor.user_id)
