"""
Tracking Domain - Progress reports.

Read-only views over the derived state: how far an employee is with the
subtasks assigned to them, how many tasks of each version are done, and
how tasks spread over categories.
"""

from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from domain.shared.value_objects import percent

from .entities import CategoryCount, EmployeeProgress, VersionStats
from .repositories import ProgressReadStore

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


@dataclass
class ProgressReports:
    """Builds progress reports from counts supplied by the store."""

    store: ProgressReadStore

    def employee_progress(self, employee_id: UUID) -> EmployeeProgress:
        """
        Share of an employee's assigned subtasks that are completed.

        An employee without assignments (or an unknown id) has rate 0.
        """
        assigned, completed = self.store.count_employee_subtasks(employee_id)
        return EmployeeProgress(
            employee_id=employee_id,
            assigned_subtasks=assigned,
            completed_subtasks=completed,
            completion_rate=percent(completed, assigned),
        )

    def version_stats(self, project_id: UUID) -> List[VersionStats]:
        return self.store.list_version_stats(project_id)

    def task_distribution(self, project_id: Optional[UUID] = None) -> List[CategoryCount]:
        """
        Task counts per category, largest first.

        Tasks without a category (None or blank) are counted together
        under "uncategorized".
        """
        counts = Counter()
        for category, count in self.store.count_tasks_by_category(project_id).items():
            counts[category or UNCATEGORIZED] += count

        distribution = [
            CategoryCount(category=category, count=count)
            for category, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]
        logger.debug(f"Task distribution over {len(distribution)} categories (project={project_id})")
        return distribution
