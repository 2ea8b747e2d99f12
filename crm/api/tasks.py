# crm/api/tasks.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crm.api.deps import get_actor
from crm.core.db import get_db
from crm.core.rbac import ActorContext
from crm.schemas.common import Deleted
from crm.schemas.task import TaskCreate, TaskRead, TaskUpdate
from crm.services.task_service import TaskService

router = APIRouter(tags=["tasks"])


@router.post("/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    data: TaskCreate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    task = TaskService(db).create(data=data, actor=actor)
    db.commit()
    return task


@router.get("/tasks/my", response_model=list[TaskRead])
def my_tasks(
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    """Open tasks assigned to the caller, most important first."""
    return TaskService(db).list_my(actor)


@router.get("/tasks/all", response_model=list[TaskRead])
def all_tasks(
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return TaskService(db).list_all(actor)


@router.get("/tasks/{task_id}", response_model=TaskRead)
def get_task(
    task_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return TaskService(db).get(task_id, actor)


@router.get("/clients/{client_id}/tasks", response_model=list[TaskRead])
def client_tasks(
    client_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    return TaskService(db).list_for_client(client_id, actor)


@router.patch("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    task_id: UUID,
    data: TaskUpdate,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    task = TaskService(db).update(task_id=task_id, data=data, actor=actor)
    db.commit()
    return task


@router.delete("/tasks/{task_id}", response_model=Deleted)
def delete_task(
    task_id: UUID,
    actor: ActorContext = Depends(get_actor),
    db: Session = Depends(get_db),
):
    TaskService(db).delete(task_id=task_id, actor=actor)
    db.commit()
    return Deleted()
