"""
Tracking Domain - Progress aggregation.

Task progress is the share of completed subtasks; version progress is the
mean of its tasks' progress. Both are rounded half-up to whole percents.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Sequence
from uuid import UUID

from domain.shared.events import DomainEvent, TaskProgressUpdated, VersionProgressUpdated
from domain.shared.exceptions import EntityNotFoundException
from domain.shared.value_objects import percent, round_half_up

from .entities import SubtaskSnapshot, TaskSnapshot
from .repositories import RecalculationStore

logger = logging.getLogger(__name__)


def task_progress(subtasks: Sequence[SubtaskSnapshot]) -> int:
    """Progress of a task from its subtasks (0 when it has none)."""
    completed = sum(1 for s in subtasks if s.completed)
    return percent(completed, len(subtasks))


def version_progress(tasks: Sequence[TaskSnapshot]) -> int:
    """Rounded mean progress of a version's tasks (0 when it has none)."""
    if not tasks:
        return 0
    return round_half_up(sum(t.progress for t in tasks) / len(tasks))


@dataclass
class ProgressAggregator:
    """
    Recomputes and persists task and version progress.

    Idempotent: with unchanged subtasks, repeated calls write the same values.
    """

    store: RecalculationStore
    events: List[DomainEvent] = field(default_factory=list)

    def recompute_task_progress(self, task_id: UUID, cascade: bool = True) -> int:
        """
        Recompute a task's progress, then its version's progress.

        Both writes share one unit of work. With cascade=False only the task
        is written (bulk rebuilds recompute the version once at the end).
        Returns the task's new progress.
        """
        self.events = []

        with self.store.atomic():
            task = self.store.get_task(task_id)
            if task is None:
                raise EntityNotFoundException("Task", task_id)

            subtasks = self.store.list_subtasks(task_id)
            progress = task_progress(subtasks)
            self.store.save_task_progress(task_id, progress)
            self.events.append(TaskProgressUpdated(
                task_id=task_id,
                version_id=task.version_id,
                progress=progress,
                completed_subtasks=sum(1 for s in subtasks if s.completed),
                total_subtasks=len(subtasks),
            ))

            if cascade:
                self._recompute_version(task.version_id)

        logger.info(f"Recalculated task {task_id}: {progress}%")
        return progress

    def recompute_version_progress(self, version_id: UUID) -> int:
        """Recompute a version's progress from its tasks' stored progress."""
        self.events = []
        with self.store.atomic():
            if self.store.get_version(version_id) is None:
                raise EntityNotFoundException("ProjectVersion", version_id)
            return self._recompute_version(version_id)

    def _recompute_version(self, version_id: UUID) -> int:
        tasks = self.store.list_version_tasks(version_id)
        progress = version_progress(tasks)
        self.store.save_version_progress(version_id, progress)
        self.events.append(VersionProgressUpdated(
            version_id=version_id,
            progress=progress,
            task_count=len(tasks),
        ))
        logger.debug(f"Version {version_id} progress {progress}% over {len(tasks)} tasks")
        return progress
