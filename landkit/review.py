"""Review of per-worker deploy tasks: deciding whether a deployment is done."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

log = logging.getLogger(__name__)

MAX_MESSAGE_BYTES = 255
SUCCESS_MESSAGE = "Success"


class ReviewError(Exception):
    """Raised when the tasks of a deployment cannot be reviewed."""


class TaskStatus(enum.Enum):
    """State of one deploy task on one worker."""

    DOING = "doing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class TaskState:
    """One worker's deploy task as seen by the reviewer."""

    status: TaskStatus
    message: str = ""
    worker_ip: str = ""


def truncate_message(message: str) -> str:
    """Cut ``message`` to at most 255 UTF-8 bytes without splitting a character."""
    encoded = message.encode("utf-8")
    if len(encoded) <= MAX_MESSAGE_BYTES:
        return message
    return encoded[:MAX_MESSAGE_BYTES].decode("utf-8", errors="ignore")


@dataclass(frozen=True)
class ReviewOutcome:
    """Counts gathered while reviewing a deployment's tasks."""

    total: int
    done_count: int
    success_count: int
    failed_message: str

    @property
    def done(self) -> bool:
        """True when no task is still running."""
        return self.done_count == self.total

    @property
    def succeeded(self) -> bool:
        """True when every task finished successfully."""
        return self.done and self.done_count == self.success_count

    @property
    def failed(self) -> bool:
        """True when every task finished and at least one did not succeed."""
        return self.done and self.done_count != self.success_count

    @property
    def deploy_message(self) -> str | None:
        """The message to store on the deployment, or None while it is running."""
        if self.succeeded:
            return SUCCESS_MESSAGE
        if self.failed:
            return truncate_message(self.failed_message)
        return None


def review_tasks(tasks: Iterable[TaskState], total_count: int) -> ReviewOutcome:
    """Review the tasks of a deployment that expects ``total_count`` of them."""
    task_list = list(tasks)
    if len(task_list) != total_count:
        raise ReviewError("Task count not match")

    done_count = 0
    success_count = 0
    failed_message = ""
    for task in task_list:
        if task.status is TaskStatus.DOING:
            continue
        done_count += 1
        if task.status is TaskStatus.SUCCESS:
            log.debug("task success, ip: %s", task.worker_ip)
            success_count += 1
        elif task.status is TaskStatus.FAILED:
            log.debug("task failed, ip: %s: %s", task.worker_ip, task.message)
            failed_message = task.message

    outcome = ReviewOutcome(
        total=len(task_list),
        done_count=done_count,
        success_count=success_count,
        failed_message=failed_message,
    )
    if outcome.failed:
        log.info("review failed: %r", failed_message)
    elif outcome.succeeded:
        log.info("review success")
    else:
        log.info("review not done")
    return outcome