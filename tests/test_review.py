import pytest

from landkit.review import (
    ReviewError,
    TaskState,
    TaskStatus,
    review_tasks,
    truncate_message,
)


def test_all_success_is_done_and_succeeded():
    tasks = [TaskState(TaskStatus.SUCCESS), TaskState(TaskStatus.SUCCESS)]
    outcome = review_tasks(tasks, 2)
    assert outcome.done
    assert outcome.succeeded
    assert not outcome.failed
    assert outcome.deploy_message == "Success"


def test_running_task_keeps_review_open():
    tasks = [TaskState(TaskStatus.SUCCESS), TaskState(TaskStatus.DOING)]
    outcome = review_tasks(tasks, 2)
    assert not outcome.done
    assert not outcome.succeeded
    assert not outcome.failed
    assert outcome.deploy_message is None


def test_failed_task_fails_deployment_with_its_message():
    tasks = [
        TaskState(TaskStatus.SUCCESS, worker_ip="10.0.0.1"),
        TaskState(TaskStatus.FAILED, message="download error", worker_ip="10.0.0.2"),
    ]
    outcome = review_tasks(tasks, 2)
    assert outcome.failed
    assert outcome.failed_message == "download error"
    assert outcome.deploy_message == "download error"


def test_last_failure_message_wins():
    tasks = [
        TaskState(TaskStatus.FAILED, message="first"),
        TaskState(TaskStatus.FAILED, message="second"),
    ]
    assert review_tasks(tasks, 2).failed_message == "second"


def test_count_mismatch_raises():
    with pytest.raises(ReviewError, match="Task count not match"):
        review_tasks([TaskState(TaskStatus.SUCCESS)], 3)


def test_counts_are_consistent():
    tasks = [
        TaskState(TaskStatus.SUCCESS),
        TaskState(TaskStatus.DOING),
        TaskState(TaskStatus.FAILED, message="x"),
    ]
    outcome = review_tasks(tasks, len(tasks))
    assert outcome.total == len(tasks)
    assert outcome.success_count <= outcome.done_count <= outcome.total


def test_truncate_keeps_short_messages():
    assert truncate_message("Project not found") == "Project not found"


def test_truncate_cuts_to_255_bytes():
    assert truncate_message("x" * 300) == "x" * 255


def test_truncate_never_splits_characters():
    text = "é" * 200
    cut = truncate_message(text)
    assert len(cut.encode("utf-8")) <= 255
    assert text.startswith(cut)