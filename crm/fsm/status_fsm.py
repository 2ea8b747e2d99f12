# crm/fsm/status_fsm.py

from __future__ import annotations

from enum import Enum

from crm.core.errors import BadRequest
from crm.models.client import ClientStatus
from crm.models.task import TaskStatus

"""Status rules for clients and tasks.

Client:
  NEW -> ASSIGNED            (first successful assignment, automatic)
  *   -> IN_WORK             (specialist acknowledges the assignment)
  any -> any                 (admin sets status explicitly via PATCH)

Task:
  NEW -> IN_PROGRESS -> DONE
  IN_PROGRESS -> NEW, DONE -> IN_PROGRESS (reopen), NEW -> DONE (quick close)

Services apply these rules; role checks live in core/rbac.py.
"""


class TransitionNotAllowed(BadRequest):
    pass


class AckRole(str, Enum):
    """Which assignment slot an acknowledgment refers to."""

    SPECIALIST = "specialist"
    DESIGNER = "designer"


def status_after_assignment(current: ClientStatus) -> ClientStatus:
    """Any successful assignment moves a NEW client to ASSIGNED; other statuses are kept."""
    if current is ClientStatus.new:
        return ClientStatus.assigned
    return current


def status_after_acknowledgment(current: ClientStatus, ack_role: AckRole) -> ClientStatus:
    # Only the specialist's acceptance starts the work; the designer's is informational.
    if ack_role is AckRole.SPECIALIST:
        return ClientStatus.in_work
    return current


def parse_client_status(raw: str) -> ClientStatus:
    try:
        return ClientStatus(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in ClientStatus)
        raise TransitionNotAllowed(f"Unknown client status: '{raw}'. Allowed: {allowed}")


TASK_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.new: {TaskStatus.in_progress, TaskStatus.done},
    TaskStatus.in_progress: {TaskStatus.new, TaskStatus.done},
    TaskStatus.done: {TaskStatus.in_progress},
}


def apply_task_transition(current: TaskStatus, target: TaskStatus) -> TaskStatus:
    """Returns the new task status; setting the same status is a no-op."""
    if current is target:
        return current

    allowed = TASK_TRANSITIONS[current]
    if target not in allowed:
        allowed_str = ", ".join(sorted(s.value for s in allowed))
        raise TransitionNotAllowed(
            f"Task status '{current.value}' cannot change to '{target.value}'. "
            f"Allowed: {allowed_str}."
        )
    return target
