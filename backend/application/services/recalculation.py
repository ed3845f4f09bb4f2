"""
Recalculation Orchestrator.

Entry point for mutation handlers. After a subtask or task write has been
committed, the handler tells the orchestrator what changed; the orchestrator
re-derives progress, time estimates and priorities.

Every step is guarded on its own: a failing step is reported to the failure
sink and swallowed, earlier steps stay committed, and nothing ever propagates
back into the handler whose mutation triggered the recalculation.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Union
from uuid import UUID

from domain.shared.events import DomainEvent, RecalculationFailed, TaskStatusChanged
from domain.shared.exceptions import EntityNotFoundException, ValidationException
from domain.shared.value_objects import TaskStatus
from domain.tracking.estimates import EstimateAggregator
from domain.tracking.priority import PriorityRanker
from domain.tracking.progress import ProgressAggregator
from domain.tracking.repositories import RecalculationStore

from .sinks import FailureSink

logger = logging.getLogger(__name__)

# Caller misuse (stale ids, unknown status); anything else is recoverable.
PRECONDITION_ERRORS = (EntityNotFoundException, ValidationException)


@dataclass
class RecalculationReport:
    """Outcome of one trigger: which steps ran, what they emitted, what failed."""

    trigger: str
    completed_steps: List[str] = field(default_factory=list)
    events: List[DomainEvent] = field(default_factory=list)
    failures: List[RecalculationFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failed(self, operation: str) -> bool:
        return any(f.operation == operation for f in self.failures)


_FAILED = object()


class RecalculationOrchestrator:
    """
    Decides which recalculations a mutation needs and runs them in order:
    progress, then time estimates, then priorities.

    reprioritize_on_mark_only controls the mark-only completion path. By
    default it does not touch estimates or priorities; when enabled it also
    refreshes the task's times and reranks its version, like every other
    completion change does.
    """

    def __init__(
        self,
        store: RecalculationStore,
        sink: FailureSink,
        reprioritize_on_mark_only: bool = False,
    ):
        self.store = store
        self.sink = sink
        self.reprioritize_on_mark_only = reprioritize_on_mark_only
        self.progress = ProgressAggregator(store)
        self.estimates = EstimateAggregator(store)
        self.ranker = PriorityRanker(store)

    # =========================================================================
    # TRIGGERS
    # =========================================================================

    def on_subtask_changed(
        self,
        task_id: UUID,
        completed_changed: bool,
        duration_changed: bool,
        trigger: str = "subtask_changed",
    ) -> RecalculationReport:
        """Recalculate after a subtask's completion flag and/or estimate changed."""
        report = RecalculationReport(trigger=trigger)
        if not (completed_changed or duration_changed):
            return report

        task = self._guard(report, "load_task", "Task", task_id,
                           lambda: self._require_task(task_id))
        if task is _FAILED:
            return self._finish(report)

        if completed_changed:
            self._guard(report, "recompute_task_progress", "Task", task_id,
                        lambda: self.progress.recompute_task_progress(task_id),
                        self.progress)

        self._guard(report, "recompute_task_durations", "Task", task_id,
                    lambda: self.estimates.recompute_task_durations(task_id),
                    self.estimates)
        self._guard(report, "reprioritize_version", "ProjectVersion", task.version_id,
                    lambda: self.ranker.reprioritize_version(task.version_id),
                    self.ranker)
        return self._finish(report)

    def on_subtask_created(self, task_id: UUID) -> RecalculationReport:
        return self.on_subtask_changed(task_id, True, True, trigger="subtask_created")

    def on_subtask_removed(self, task_id: UUID) -> RecalculationReport:
        return self.on_subtask_changed(task_id, True, True, trigger="subtask_removed")

    def on_task_bulk_write(self, version_id: UUID) -> RecalculationReport:
        """Rerank a version after tasks were created or bulk-updated in it."""
        report = RecalculationReport(trigger="task_bulk_write")
        self._guard(report, "reprioritize_version", "ProjectVersion", version_id,
                    lambda: self.ranker.reprioritize_version(version_id),
                    self.ranker)
        return self._finish(report)

    def on_mark_only_completion(
        self,
        task_id: UUID,
        subtask_ids: Iterable[UUID],
        new_status: Union[TaskStatus, str],
    ) -> RecalculationReport:
        """
        Handle a task update that only lists subtask ids plus a status.

        With status "completed" exactly those subtasks are marked completed.
        Progress is then recomputed from all subtasks of the task and the
        status is stored, all in one unit of work.
        """
        report = RecalculationReport(trigger="mark_only_completion")
        subtask_ids = list(subtask_ids)

        task = self._guard(report, "mark_only_completion", "Task", task_id,
                           lambda: self._mark_only(task_id, subtask_ids, new_status, report))
        if task is _FAILED or not self.reprioritize_on_mark_only:
            return self._finish(report)

        self._guard(report, "recompute_task_durations", "Task", task_id,
                    lambda: self.estimates.recompute_task_durations(task_id),
                    self.estimates)
        self._guard(report, "reprioritize_version", "ProjectVersion", task.version_id,
                    lambda: self.ranker.reprioritize_version(task.version_id),
                    self.ranker)
        return self._finish(report)

    def rebuild_version(self, version_id: UUID) -> RecalculationReport:
        """
        Re-derive every computed value of a version from its subtasks.

        Used by the operator rebuild command to heal stale values.
        """
        report = RecalculationReport(trigger="rebuild_version")
        tasks = self._guard(report, "list_version_tasks", "ProjectVersion", version_id,
                            lambda: self._require_version_tasks(version_id))
        if tasks is _FAILED:
            return self._finish(report)

        for task in tasks:
            self._guard(report, "recompute_task_durations", "Task", task.id,
                        lambda: self.estimates.recompute_task_durations(task.id),
                        self.estimates)
            self._guard(report, "recompute_task_progress", "Task", task.id,
                        lambda: self.progress.recompute_task_progress(task.id, cascade=False),
                        self.progress)

        self._guard(report, "recompute_version_progress", "ProjectVersion", version_id,
                    lambda: self.progress.recompute_version_progress(version_id),
                    self.progress)
        self._guard(report, "reprioritize_version", "ProjectVersion", version_id,
                    lambda: self.ranker.reprioritize_version(version_id),
                    self.ranker)
        return self._finish(report)

    # =========================================================================
    # STEPS
    # =========================================================================

    def _require_task(self, task_id: UUID):
        task = self.store.get_task(task_id)
        if task is None:
            raise EntityNotFoundException("Task", task_id)
        return task

    def _require_version_tasks(self, version_id: UUID):
        if self.store.get_version(version_id) is None:
            raise EntityNotFoundException("ProjectVersion", version_id)
        return self.store.list_version_tasks(version_id)

    def _mark_only(self, task_id, subtask_ids, new_status, report: RecalculationReport):
        try:
            status = TaskStatus(new_status)
        except ValueError:
            raise ValidationException(f"Unknown task status '{new_status}'", "status", new_status) from None

        with self.store.atomic():
            task = self._require_task(task_id)
            if status == TaskStatus.COMPLETED and subtask_ids:
                marked = self.store.mark_subtasks_completed(task_id, subtask_ids)
                logger.debug(f"Marked {marked} of {len(subtask_ids)} subtasks of task {task_id} completed")
            self.progress.recompute_task_progress(task_id)
            self.store.save_task_status(task_id, status)

        report.events.extend(self.progress.events)
        report.events.append(TaskStatusChanged(task_id=task_id, status=status.value))
        return task

    # =========================================================================
    # FAILURE ISOLATION
    # =========================================================================

    def _guard(
        self,
        report: RecalculationReport,
        operation: str,
        entity_type: str,
        entity_id: UUID,
        step: Callable[[], Any],
        component: Optional[Any] = None,
    ) -> Any:
        """
        Run one step in its own unit of work; on error report it and return
        _FAILED instead of raising.

        Inside a caller's transaction the unit of work is a savepoint, so a
        failed step rolls back only its own writes and later steps still run.
        """
        try:
            with self.store.atomic():
                result = step()
        except PRECONDITION_ERRORS as exc:
            self._report(report, operation, entity_type, entity_id,
                         RecalculationFailed.PRECONDITION, exc)
            return _FAILED
        except Exception as exc:
            self._report(report, operation, entity_type, entity_id,
                         RecalculationFailed.RECOVERABLE, exc)
            return _FAILED

        report.completed_steps.append(operation)
        if component is not None:
            report.events.extend(component.events)
        return result

    def _report(
        self,
        report: RecalculationReport,
        operation: str,
        entity_type: str,
        entity_id: UUID,
        failure_kind: str,
        exc: Exception,
    ) -> None:
        event = RecalculationFailed(
            operation=operation,
            entity_type=entity_type,
            entity_id=entity_id,
            failure_kind=failure_kind,
            error_type=type(exc).__name__,
            error_message=str(exc),
            error=exc,
        )
        report.failures.append(event)
        try:
            self.sink.report(event)
        except Exception:
            logger.exception(f"Failure sink raised while reporting {operation} for {entity_type} {entity_id}")

    def _finish(self, report: RecalculationReport) -> RecalculationReport:
        if report.ok:
            logger.info(f"Recalculation '{report.trigger}' done: {', '.join(report.completed_steps) or 'nothing to do'}")
        else:
            logger.warning(
                f"Recalculation '{report.trigger}' finished with {len(report.failures)} failure(s): "
                f"{', '.join(f.operation for f in report.failures)}"
            )
        return report
