"""
Tracking Domain - Task time estimates.

A task's estimated time is the sum of all its subtask estimates; its
remaining time is the sum over subtasks not yet completed. Both are stored
on the task as formatted text ("3h 30m").
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
from uuid import UUID

from domain.shared.events import DomainEvent, TaskDurationsUpdated
from domain.shared.exceptions import EntityNotFoundException

from .duration import format_duration, sum_durations
from .entities import SubtaskSnapshot
from .repositories import RecalculationStore

logger = logging.getLogger(__name__)


def task_durations(subtasks: Sequence[SubtaskSnapshot]) -> Tuple[str, str]:
    """Formatted (estimated, remaining) time of a task."""
    estimated = sum_durations(s.time_estimate for s in subtasks)
    remaining = sum_durations(s.time_estimate for s in subtasks if not s.completed)
    return format_duration(estimated), format_duration(remaining)


@dataclass
class EstimateAggregator:
    """Recomputes and persists a task's estimated and remaining time."""

    store: RecalculationStore
    events: List[DomainEvent] = field(default_factory=list)

    def recompute_task_durations(self, task_id: UUID) -> Tuple[str, str]:
        self.events = []

        task = self.store.get_task(task_id)
        if task is None:
            raise EntityNotFoundException("Task", task_id)

        estimated, remaining = task_durations(self.store.list_subtasks(task_id))
        self.store.save_task_durations(task_id, estimated, remaining)

        self.events.append(TaskDurationsUpdated(
            task_id=task_id,
            estimated_time=estimated,
            remaining_time=remaining,
        ))
        logger.debug(f"Task {task_id} estimated={estimated} remaining={remaining}")
        return estimated, remaining
