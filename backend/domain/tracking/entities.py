"""
Tracking Domain - Entities.

Read-only snapshots of the rows the recalculation engine works on.
The engine holds no state between invocations: every operation fetches
fresh snapshots through the store and writes derived values back.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from domain.shared.value_objects import TaskPriority, TaskStatus, VersionStatus


@dataclass(frozen=True)
class SubtaskSnapshot:
    """A subtask as seen by the engine: completion flag and duration text."""

    id: UUID
    task_id: UUID
    completed: bool = False
    time_estimate: Optional[str] = None


@dataclass(frozen=True)
class TaskSnapshot:
    """
    A task with its engine-owned fields.

    progress, priority, estimated_time and remaining_time are computed
    outputs; clients only ever write subtask completion and duration text.
    """

    id: UUID
    version_id: UUID
    status: TaskStatus = TaskStatus.PENDING
    priority: Optional[TaskPriority] = None
    progress: int = 0
    estimated_time: Optional[str] = None
    remaining_time: Optional[str] = None


@dataclass(frozen=True)
class VersionSnapshot:
    """A project version and its computed progress."""

    id: UUID
    project_id: Optional[UUID] = None
    status: VersionStatus = VersionStatus.PLANNING
    progress: int = 0


@dataclass(frozen=True)
class VersionStats:
    """A version with its stored progress and how many of its tasks are done."""

    id: UUID
    version: str
    status: VersionStatus
    progress: int = 0
    tasks: int = 0
    completed: int = 0


@dataclass(frozen=True)
class EmployeeProgress:
    """Completion of the subtasks assigned to one employee."""

    employee_id: UUID
    assigned_subtasks: int
    completed_subtasks: int
    completion_rate: int


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int
