from datetime import timedelta
from uuid import uuid4

import pytest

from taskhub.core.modules.requirement.models import TaskRequirement, progress_percentage
from taskhub.core.modules.task.models import (
    Task,
    TaskStatus,
    allowed_transitions,
    is_transition_allowed,
)
from taskhub.utils import now


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (TaskStatus.TODO, TaskStatus.IN_PROGRESS),
        (TaskStatus.IN_PROGRESS, TaskStatus.DONE),
        (TaskStatus.DONE, TaskStatus.COMPLETED),
        (TaskStatus.REJECTED, TaskStatus.TODO),
        (TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS),
    ],
)
def test_allowed_transition(current, target):
    assert is_transition_allowed(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (TaskStatus.TODO, TaskStatus.DONE),
        (TaskStatus.TODO, TaskStatus.COMPLETED),
        (TaskStatus.REJECTED, TaskStatus.DONE),
        (TaskStatus.COMPLETED, TaskStatus.TODO),
    ],
)
def test_forbidden_transition(current, target):
    assert not is_transition_allowed(current, target)


def test_allowed_transitions_are_sorted():
    assert allowed_transitions(TaskStatus.IN_PROGRESS) == [TaskStatus.TODO, TaskStatus.DONE, TaskStatus.REJECTED]


def test_every_status_has_label():
    assert [status.label for status in TaskStatus] == ["To Do", "In Progress", "Done", "Rejected", "Completed"]


def test_overdue():
    task = Task(project_id=uuid4(), workspace_id=uuid4(), title="Ship", created_by=uuid4(), due_date=now())

    assert task.is_overdue(task.due_date + timedelta(seconds=1))
    assert not task.is_overdue(task.due_date)


def test_without_due_date_never_overdue():
    task = Task(project_id=uuid4(), workspace_id=uuid4(), title="Ship", created_by=uuid4())

    assert not task.is_overdue(now() + timedelta(days=365))


def _requirement(is_done: bool) -> TaskRequirement:
    return TaskRequirement(task_id=uuid4(), body="step", is_done=is_done, created_by=uuid4())


@pytest.mark.parametrize(
    ("flags", "expected"),
    [
        ([], 0),
        ([False, False], 0),
        ([True, False, False], 33),
        ([True, True, False], 67),
        ([True, True], 100),
    ],
)
def test_progress_percentage(flags, expected):
    assert progress_percentage([_requirement(flag) for flag in flags]) == expected
