# tests/test_status_fsm.py
"""
Status rule tests (pure functions, no DB).

Client: first assignment NEW -> ASSIGNED, specialist acknowledgment -> IN_WORK.
Task: NEW -> IN_PROGRESS -> DONE with reopen; other jumps rejected.
"""

from __future__ import annotations

import pytest

from crm.fsm.status_fsm import (
    AckRole,
    TransitionNotAllowed,
    apply_task_transition,
    parse_client_status,
    status_after_acknowledgment,
    status_after_assignment,
)
from crm.models.client import ClientStatus
from crm.models.task import TaskStatus


def test_first_assignment_moves_new_to_assigned():
    assert status_after_assignment(ClientStatus.new) is ClientStatus.assigned


@pytest.mark.parametrize(
    "current",
    [ClientStatus.assigned, ClientStatus.in_work, ClientStatus.done, ClientStatus.rejected],
)
def test_reassignment_keeps_non_new_status(current):
    assert status_after_assignment(current) is current


def test_specialist_acknowledgment_starts_work():
    assert status_after_acknowledgment(ClientStatus.assigned, AckRole.SPECIALIST) is ClientStatus.in_work


def test_designer_acknowledgment_does_not_touch_status():
    assert status_after_acknowledgment(ClientStatus.assigned, AckRole.DESIGNER) is ClientStatus.assigned


def test_parse_client_status_rejects_unknown_value():
    with pytest.raises(TransitionNotAllowed):
        parse_client_status("ARCHIVED")


@pytest.mark.parametrize(
    "current,target",
    [
        (TaskStatus.new, TaskStatus.in_progress),
        (TaskStatus.new, TaskStatus.done),
        (TaskStatus.in_progress, TaskStatus.done),
        (TaskStatus.in_progress, TaskStatus.new),
        (TaskStatus.done, TaskStatus.in_progress),
    ],
)
def test_task_transition_allowed(current, target):
    assert apply_task_transition(current, target) is target


def test_task_done_cannot_jump_back_to_new():
    with pytest.raises(TransitionNotAllowed) as e:
        apply_task_transition(TaskStatus.done, TaskStatus.new)
    assert e.value.status_code == 400
    assert "IN_PROGRESS" in e.value.detail


def test_task_same_status_is_noop():
    assert apply_task_transition(TaskStatus.done, TaskStatus.done) is TaskStatus.done
