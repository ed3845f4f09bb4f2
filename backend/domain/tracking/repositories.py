"""
Tracking Domain - Repository Interfaces.

The storage port handed explicitly to every engine component.
"""

from abc import ABC, abstractmethod
from typing import ContextManager, Dict, Iterable, List, Mapping, Optional, Tuple
from uuid import UUID

from domain.shared.value_objects import TaskPriority, TaskStatus

from .entities import SubtaskSnapshot, TaskSnapshot, VersionSnapshot, VersionStats


class RecalculationStore(ABC):
    """
    Repository interface for the rows the recalculation engine reads and writes.

    Writes are keyed by entity id. Implementations must make
    save_task_priorities all-or-nothing, and atomic() must return a unit of
    work in which every write commits together or not at all.
    """

    @abstractmethod
    def atomic(self) -> ContextManager[None]:
        """Open a unit of work; nested calls join the outer one."""
        pass

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @abstractmethod
    def get_task(self, task_id: UUID) -> Optional[TaskSnapshot]:
        """Get task by ID."""
        pass

    @abstractmethod
    def get_version(self, version_id: UUID) -> Optional[VersionSnapshot]:
        """Get project version by ID."""
        pass

    @abstractmethod
    def list_subtasks(self, task_id: UUID) -> List[SubtaskSnapshot]:
        """Get all subtasks of a task."""
        pass

    @abstractmethod
    def list_version_tasks(self, version_id: UUID) -> List[TaskSnapshot]:
        """
        Get all tasks of a version in a stable fetch order.

        Priority ranking breaks ties by this order, so it must not vary
        between calls when the data does not change.
        """
        pass

    @abstractmethod
    def list_version_ids(self) -> List[UUID]:
        """Get ids of all project versions."""
        pass

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @abstractmethod
    def save_task_progress(self, task_id: UUID, progress: int) -> None:
        """Persist a task's computed progress."""
        pass

    @abstractmethod
    def save_version_progress(self, version_id: UUID, progress: int) -> None:
        """Persist a version's computed progress."""
        pass

    @abstractmethod
    def save_task_durations(
        self,
        task_id: UUID,
        estimated_time: str,
        remaining_time: str
    ) -> None:
        """Persist a task's aggregated estimated and remaining time."""
        pass

    @abstractmethod
    def save_task_status(self, task_id: UUID, status: TaskStatus) -> None:
        """Persist a task's status."""
        pass

    @abstractmethod
    def mark_subtasks_completed(self, task_id: UUID, subtask_ids: Iterable[UUID]) -> int:
        """Mark the given subtasks of a task completed; return rows touched."""
        pass

    @abstractmethod
    def save_task_priorities(self, priorities: Mapping[UUID, TaskPriority]) -> None:
        """Persist a batch of task priorities atomically."""
        pass


class ProgressReadStore(ABC):
    """
    Repository interface for aggregate progress reads.

    Counts are computed by the storage engine; the domain only turns them
    into rates and labels.
    """

    @abstractmethod
    def count_employee_subtasks(self, employee_id: UUID) -> Tuple[int, int]:
        """Get (assigned, completed) subtask counts of an employee."""
        pass

    @abstractmethod
    def list_version_stats(self, project_id: UUID) -> List[VersionStats]:
        """Get per-version task counts of a project, newest version first."""
        pass

    @abstractmethod
    def count_tasks_by_category(self, project_id: Optional[UUID] = None) -> Dict[Optional[str], int]:
        """Get task counts per raw category, for one project or all of them."""
        pass
