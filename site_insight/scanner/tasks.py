"""
Scan task records.

Every scan fans out into one task per analysis type. Tasks move from
queued to running and end as complete or failed; the scan's status and
progress are derived from its tasks.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..utils.constants import TASK_TYPES


class TaskType(str, Enum):
    """Analysis performed by a task."""
    TECH = "tech"
    COLORS = "colors"
    SEO = "seo"
    PERF = "perf"


class TaskStatus(str, Enum):
    """Lifecycle state of a task or scan."""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


FINISHED = (TaskStatus.COMPLETE, TaskStatus.FAILED)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class TaskRecord:
    """A unit of work belonging to a scan."""
    scan_id: str
    type: TaskType
    status: TaskStatus = TaskStatus.QUEUED
    task_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    created_at: str = field(default_factory=_now)
    finished_at: Optional[str] = None

    def start(self) -> None:
        """Move a queued task to running."""
        if self.status != TaskStatus.QUEUED:
            raise ValueError(f"Cannot start {self.type.value} task in state {self.status.value}")
        self.status = TaskStatus.RUNNING

    def complete(self, payload: Optional[Dict[str, Any]] = None) -> None:
        """Finish a running task with its result fragment."""
        self._finish(TaskStatus.COMPLETE)
        self.payload = payload or {}

    def fail(self, error: str) -> None:
        """Finish a running task with an error message."""
        self._finish(TaskStatus.FAILED)
        self.error = error

    def _finish(self, status: TaskStatus) -> None:
        if self.status != TaskStatus.RUNNING:
            raise ValueError(f"Cannot finish {self.type.value} task in state {self.status.value}")
        self.status = status
        self.finished_at = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'taskId': self.task_id,
            'scanId': self.scan_id,
            'type': self.type.value,
            'status': self.status.value,
            'payload': self.payload,
            'error': self.error,
            'createdAt': self.created_at,
            'finishedAt': self.finished_at,
        }


def create_scan_tasks(scan_id: str) -> List[TaskRecord]:
    """
    Create the queued tasks for a new scan.

    Args:
        scan_id: Identifier of the scan

    Returns:
        One queued TaskRecord per task type, in TASK_TYPES order
    """
    if not scan_id:
        raise ValueError("scan_id is required")
    return [TaskRecord(scan_id=scan_id, type=TaskType(name)) for name in TASK_TYPES]


def scan_progress(tasks: Sequence[TaskRecord]) -> int:
    """Percentage (0-100) of tasks that have finished, failed ones included."""
    if not tasks:
        return 0
    finished = sum(1 for task in tasks if task.status in FINISHED)
    return round(finished * 100 / len(tasks))


def scan_status(tasks: Sequence[TaskRecord]) -> TaskStatus:
    """
    Derive a scan's status from its tasks.

    Queued until any task starts, running until all have finished. A
    finished scan is complete if at least one task completed and failed
    only when every task failed.
    """
    if not tasks or all(task.status == TaskStatus.QUEUED for task in tasks):
        return TaskStatus.QUEUED
    if any(task.status not in FINISHED for task in tasks):
        return TaskStatus.RUNNING
    if any(task.status == TaskStatus.COMPLETE for task in tasks):
        return TaskStatus.COMPLETE
    return TaskStatus.FAILED
