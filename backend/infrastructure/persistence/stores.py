"""
Django implementation of the recalculation store.

Reads map ORM rows to domain snapshots; writes go through QuerySet.update()
so engine-owned fields bypass the model save() guard and only the touched
columns are written.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import UUID

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from domain.shared.value_objects import TaskPriority, TaskStatus, VersionStatus
from domain.tracking.entities import SubtaskSnapshot, TaskSnapshot, VersionSnapshot, VersionStats
from domain.tracking.repositories import ProgressReadStore, RecalculationStore

from .models import ProjectVersion, Subtask, Task, TaskAssignment

logger = logging.getLogger(__name__)

_TASK_FIELDS = (
    'id', 'project_version_id', 'status', 'priority',
    'progress', 'estimated_time', 'remaining_time',
)


def _task_snapshot(row: dict) -> TaskSnapshot:
    return TaskSnapshot(
        id=row['id'],
        version_id=row['project_version_id'],
        status=TaskStatus(row['status']),
        priority=TaskPriority(row['priority']) if row['priority'] else None,
        progress=row['progress'],
        estimated_time=row['estimated_time'],
        remaining_time=row['remaining_time'],
    )


class DjangoRecalculationStore(RecalculationStore):
    """
    RecalculationStore backed by the Django ORM.

    `using` selects the database alias; None means the default router choice.
    """

    def __init__(self, using: Optional[str] = None):
        self.using = using

    def _tasks(self):
        return Task.objects.using(self.using)

    def _subtasks(self):
        return Subtask.objects.using(self.using)

    def _versions(self):
        return ProjectVersion.objects.using(self.using)

    def atomic(self):
        return transaction.atomic(using=self.using)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_task(self, task_id: UUID) -> Optional[TaskSnapshot]:
        row = self._tasks().filter(pk=task_id).values(*_TASK_FIELDS).first()
        return _task_snapshot(row) if row else None

    def get_version(self, version_id: UUID) -> Optional[VersionSnapshot]:
        row = (
            self._versions()
            .filter(pk=version_id)
            .values('id', 'project_id', 'status', 'progress')
            .first()
        )
        if row is None:
            return None
        return VersionSnapshot(
            id=row['id'],
            project_id=row['project_id'],
            status=VersionStatus(row['status']),
            progress=row['progress'],
        )

    def list_subtasks(self, task_id: UUID) -> List[SubtaskSnapshot]:
        rows = (
            self._subtasks()
            .filter(task_id=task_id)
            .order_by('created_at', 'id')
            .values('id', 'task_id', 'completed', 'time_estimate')
        )
        return [
            SubtaskSnapshot(
                id=row['id'],
                task_id=row['task_id'],
                completed=row['completed'],
                time_estimate=row['time_estimate'],
            )
            for row in rows
        ]

    def list_version_tasks(self, version_id: UUID) -> List[TaskSnapshot]:
        rows = (
            self._tasks()
            .filter(project_version_id=version_id)
            .order_by('created_at', 'id')
            .values(*_TASK_FIELDS)
        )
        return [_task_snapshot(row) for row in rows]

    def list_version_ids(self) -> List[UUID]:
        return list(self._versions().order_by('created_at', 'id').values_list('id', flat=True))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def save_task_progress(self, task_id: UUID, progress: int) -> None:
        self._tasks().filter(pk=task_id).update(progress=progress, updated_at=timezone.now())

    def save_version_progress(self, version_id: UUID, progress: int) -> None:
        self._versions().filter(pk=version_id).update(progress=progress, updated_at=timezone.now())

    def save_task_durations(self, task_id: UUID, estimated_time: str, remaining_time: str) -> None:
        self._tasks().filter(pk=task_id).update(
            estimated_time=estimated_time,
            remaining_time=remaining_time,
            updated_at=timezone.now(),
        )

    def save_task_status(self, task_id: UUID, status: TaskStatus) -> None:
        self._tasks().filter(pk=task_id).update(
            status=TaskStatus(status).value,
            updated_at=timezone.now(),
        )

    def mark_subtasks_completed(self, task_id: UUID, subtask_ids: Iterable[UUID]) -> int:
        subtask_ids = list(subtask_ids)
        if not subtask_ids:
            return 0
        # Restricted to the task: ids of other tasks' subtasks are ignored
        return self._subtasks().filter(task_id=task_id, pk__in=subtask_ids).update(
            completed=True,
            updated_at=timezone.now(),
        )

    def save_task_priorities(self, priorities: Mapping[UUID, TaskPriority]) -> None:
        by_tier = defaultdict(list)
        for task_id, tier in priorities.items():
            by_tier[TaskPriority(tier).value].append(task_id)

        now = timezone.now()
        with self.atomic():
            for tier, task_ids in by_tier.items():
                updated = self._tasks().filter(pk__in=task_ids).update(priority=tier, updated_at=now)
                logger.debug(f"Set priority {tier} on {updated} tasks")


class DjangoProgressReadStore(ProgressReadStore):
    """ProgressReadStore backed by aggregate ORM queries."""

    def __init__(self, using: Optional[str] = None):
        self.using = using

    def count_employee_subtasks(self, employee_id: UUID) -> Tuple[int, int]:
        totals = (
            TaskAssignment.objects.using(self.using)
            .filter(employee_id=employee_id)
            .aggregate(
                assigned=Count('id'),
                completed=Count('id', filter=Q(subtask__completed=True)),
            )
        )
        return totals['assigned'], totals['completed']

    def list_version_stats(self, project_id: UUID) -> List[VersionStats]:
        rows = (
            ProjectVersion.objects.using(self.using)
            .filter(project_id=project_id)
            .annotate(
                task_count=Count('tasks'),
                completed_count=Count('tasks', filter=Q(tasks__status=TaskStatus.COMPLETED.value)),
            )
            .order_by('-created_at', 'id')
            .values('id', 'version', 'status', 'progress', 'task_count', 'completed_count')
        )
        return [
            VersionStats(
                id=row['id'],
                version=row['version'],
                status=VersionStatus(row['status']),
                progress=row['progress'],
                tasks=row['task_count'],
                completed=row['completed_count'],
            )
            for row in rows
        ]

    def count_tasks_by_category(self, project_id: Optional[UUID] = None) -> Dict[Optional[str], int]:
        tasks = Task.objects.using(self.using)
        if project_id is not None:
            tasks = tasks.filter(project_version__project_id=project_id)
        rows = tasks.order_by().values('category').annotate(count=Count('id'))
        return {row['category']: row['count'] for row in rows}
