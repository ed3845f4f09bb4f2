"""
Tracking Domain - Priority ranking.

Tasks of a version are ordered by remaining work, largest first, and each
gets a tier by its percentile position:

    percentile >= 90        -> high
    60 < percentile < 90    -> medium
    percentile <= 60        -> low

where the task at sorted index i of n has percentile ((n - i) / n) * 100.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from domain.shared.events import DomainEvent, VersionReprioritized
from domain.shared.exceptions import EntityNotFoundException
from domain.shared.value_objects import TaskPriority

from .duration import parse_duration
from .entities import TaskSnapshot
from .repositories import RecalculationStore

logger = logging.getLogger(__name__)

HIGH_PERCENTILE = 90
MEDIUM_PERCENTILE = 60


def percentile_for(index: int, count: int) -> float:
    """Percentile of the item at sorted index `index` among `count` items."""
    return ((count - index) / count) * 100


def tier_for(percentile: float) -> TaskPriority:
    if percentile >= HIGH_PERCENTILE:
        return TaskPriority.HIGH
    if percentile > MEDIUM_PERCENTILE:
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


def rank_tasks(tasks: Sequence[TaskSnapshot]) -> List[Tuple[TaskSnapshot, float, TaskPriority]]:
    """
    Order tasks by parsed remaining time, descending, and assign tiers.

    sorted() is stable, also with reverse=True, so equal remaining times keep
    their fetch order.
    """
    by_remaining = sorted(
        tasks,
        key=lambda t: parse_duration(t.remaining_time),
        reverse=True,
    )
    n = len(by_remaining)
    ranked = []
    for i, task in enumerate(by_remaining):
        percentile = percentile_for(i, n)
        ranked.append((task, percentile, tier_for(percentile)))
    return ranked


@dataclass
class PriorityRanker:
    """Reassigns priority tiers for every task of a version in one batch."""

    store: RecalculationStore
    events: List[DomainEvent] = field(default_factory=list)

    def reprioritize_version(self, version_id: UUID) -> Dict[UUID, TaskPriority]:
        """
        Rank the version's tasks and persist all tiers atomically.

        A version without tasks is left untouched. Returns the assigned tiers.
        """
        self.events = []

        if self.store.get_version(version_id) is None:
            raise EntityNotFoundException("ProjectVersion", version_id)

        tasks = self.store.list_version_tasks(version_id)
        if not tasks:
            logger.debug(f"Version {version_id} has no tasks; priorities unchanged")
            return {}

        priorities = {task.id: tier for task, _, tier in rank_tasks(tasks)}
        self.store.save_task_priorities(priorities)

        self.events.append(VersionReprioritized(
            version_id=version_id,
            priorities={task_id: tier.value for task_id, tier in priorities.items()},
        ))
        logger.info(f"Reprioritized {len(priorities)} tasks of version {version_id}")
        return priorities
