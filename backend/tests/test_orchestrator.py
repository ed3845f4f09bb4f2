# tests/test_orchestrator.py

from __future__ import annotations

import logging
import uuid

import pytest

from application.services import CompositeFailureSink, RecalculationOrchestrator
from domain.shared.events import (
    RecalculationFailed,
    TaskDurationsUpdated,
    TaskProgressUpdated,
    TaskStatusChanged,
    VersionProgressUpdated,
    VersionReprioritized,
)
from domain.shared.value_objects import TaskPriority, TaskStatus

from .fakes import ExplodingFailureSink, RecordingFailureSink, StoreError


@pytest.fixture
def task(store, version):
    task = store.add_task(version.id)
    store.add_subtask(task.id, completed=True, time_estimate="2h")
    store.add_subtask(task.id, completed=False, time_estimate="1h 30m")
    return task


def event_types(report) -> list[type]:
    return [type(e) for e in report.events]


# -- subtask changes ------------------------------------------------------


def test_completion_change_runs_every_step(orchestrator, store, version, task) -> None:
    other = store.add_task(version.id, remaining_time="10h")

    report = orchestrator.on_subtask_changed(task.id, completed_changed=True, duration_changed=False)

    assert report.ok
    assert report.completed_steps == [
        "load_task",
        "recompute_task_progress",
        "recompute_task_durations",
        "reprioritize_version",
    ]
    assert event_types(report) == [
        TaskProgressUpdated,
        VersionProgressUpdated,
        TaskDurationsUpdated,
        VersionReprioritized,
    ]
    updated = store.tasks[task.id]
    assert updated.progress == 50
    assert (updated.estimated_time, updated.remaining_time) == ("3h 30m", "1h 30m")
    assert updated.priority == TaskPriority.LOW
    assert store.tasks[other.id].priority == TaskPriority.HIGH
    assert store.versions[version.id].progress == 25


def test_duration_change_skips_progress(orchestrator, store, task) -> None:
    report = orchestrator.on_subtask_changed(task.id, completed_changed=False, duration_changed=True)

    assert report.completed_steps == ["load_task", "recompute_task_durations", "reprioritize_version"]
    assert store.writes_of("save_task_progress") == []
    assert store.tasks[task.id].remaining_time == "1h 30m"


def test_no_change_does_nothing(orchestrator, store, task) -> None:
    report = orchestrator.on_subtask_changed(task.id, completed_changed=False, duration_changed=False)

    assert report.ok
    assert report.completed_steps == []
    assert store.writes == []


def test_subtask_created_and_removed_recalculate_everything(orchestrator, store, task) -> None:
    created = orchestrator.on_subtask_created(task.id)
    store.subtasks = {k: v for k, v in store.subtasks.items() if not v.completed}
    removed = orchestrator.on_subtask_removed(task.id)

    assert created.trigger == "subtask_created"
    assert removed.trigger == "subtask_removed"
    assert "recompute_task_progress" in removed.completed_steps
    assert store.tasks[task.id].progress == 0
    assert store.tasks[task.id].estimated_time == "1h 30m"


def test_ranking_failure_keeps_earlier_progress(orchestrator, store, sink, version, task) -> None:
    store.fail_on["save_task_priorities"] = StoreError("deadlock detected")

    report = orchestrator.on_subtask_changed(task.id, completed_changed=True, duration_changed=False)

    assert not report.ok
    assert report.failed("reprioritize_version")
    assert store.tasks[task.id].progress == 50
    assert store.versions[version.id].progress == 50
    assert store.tasks[task.id].priority is None

    (event,) = sink.events
    assert event.operation == "reprioritize_version"
    assert event.entity_type == "ProjectVersion"
    assert event.entity_id == version.id
    assert event.failure_kind == RecalculationFailed.RECOVERABLE
    assert event.error_type == "StoreError"
    assert event.error_message == "deadlock detected"
    assert isinstance(event.error, StoreError)


def test_progress_failure_does_not_stop_later_steps(orchestrator, store, sink, task) -> None:
    store.fail_on["list_subtasks"] = StoreError("timeout")

    report = orchestrator.on_subtask_changed(task.id, completed_changed=True, duration_changed=True)

    assert sink.operations == ["recompute_task_progress", "recompute_task_durations"]
    assert report.completed_steps == ["load_task", "reprioritize_version"]


def test_stale_task_id_is_a_precondition_failure(orchestrator, store, sink) -> None:
    missing = uuid.uuid4()

    report = orchestrator.on_subtask_changed(missing, completed_changed=True, duration_changed=True)

    assert report.completed_steps == []
    (event,) = sink.events
    assert event.operation == "load_task"
    assert event.failure_kind == RecalculationFailed.PRECONDITION
    assert event.error_type == "EntityNotFoundException"
    assert store.writes == []


def test_failing_sink_does_not_escape(store, task, caplog) -> None:
    orchestrator = RecalculationOrchestrator(store=store, sink=ExplodingFailureSink())
    store.fail_on["save_task_durations"] = StoreError("disk full")

    with caplog.at_level(logging.ERROR):
        report = orchestrator.on_subtask_changed(task.id, completed_changed=True, duration_changed=True)

    assert report.failed("recompute_task_durations")
    assert "Failure sink raised" in caplog.text


def test_composite_sink_reports_to_all(store, task) -> None:
    first, second = RecordingFailureSink(), RecordingFailureSink()
    orchestrator = RecalculationOrchestrator(store=store, sink=CompositeFailureSink([first, second]))

    orchestrator.on_subtask_changed(uuid.uuid4(), completed_changed=True, duration_changed=False)

    assert first.operations == second.operations == ["load_task"]


# -- task writes ----------------------------------------------------------


def test_bulk_write_reprioritizes_version(orchestrator, store, version) -> None:
    small = store.add_task(version.id, remaining_time="1h")
    big = store.add_task(version.id, remaining_time="8h")

    report = orchestrator.on_task_bulk_write(version.id)

    assert report.completed_steps == ["reprioritize_version"]
    assert store.tasks[big.id].priority == TaskPriority.HIGH
    assert store.tasks[small.id].priority == TaskPriority.LOW


def test_bulk_write_on_stale_version(orchestrator, sink) -> None:
    report = orchestrator.on_task_bulk_write(uuid.uuid4())

    assert report.failed("reprioritize_version")
    assert sink.events[0].failure_kind == RecalculationFailed.PRECONDITION


# -- mark-only completion -------------------------------------------------


def test_mark_only_marks_listed_subtasks(orchestrator, store, version) -> None:
    task = store.add_task(version.id, remaining_time="5h")
    listed = store.add_subtask(task.id, time_estimate="1h")
    store.add_subtask(task.id, time_estimate="1h")

    report = orchestrator.on_mark_only_completion(task.id, [listed.id], "completed")

    assert report.ok
    assert report.completed_steps == ["mark_only_completion"]
    assert TaskStatusChanged in event_types(report)
    assert store.subtasks[listed.id].completed
    assert store.tasks[task.id].progress == 50
    assert store.tasks[task.id].status == TaskStatus.COMPLETED
    assert store.versions[version.id].progress == 50


def test_mark_only_leaves_estimates_and_priorities_by_default(orchestrator, store, version) -> None:
    task = store.add_task(version.id, remaining_time="5h")
    listed = store.add_subtask(task.id, time_estimate="1h")

    orchestrator.on_mark_only_completion(task.id, [listed.id], TaskStatus.COMPLETED)

    assert store.writes_of("save_task_durations") == []
    assert store.writes_of("save_task_priorities") == []
    assert store.tasks[task.id].remaining_time == "5h"


def test_mark_only_can_reprioritize(store, sink, version) -> None:
    orchestrator = RecalculationOrchestrator(store=store, sink=sink, reprioritize_on_mark_only=True)
    task = store.add_task(version.id, remaining_time="5h")
    other = store.add_task(version.id, remaining_time="30m")
    listed = store.add_subtask(task.id, time_estimate="5h")

    report = orchestrator.on_mark_only_completion(task.id, [listed.id], "completed")

    assert report.completed_steps == [
        "mark_only_completion",
        "recompute_task_durations",
        "reprioritize_version",
    ]
    assert store.tasks[task.id].remaining_time == "0h"
    assert store.tasks[other.id].priority == TaskPriority.HIGH
    assert store.tasks[task.id].priority == TaskPriority.LOW


def test_mark_only_ignores_subtasks_of_other_tasks(orchestrator, store, version) -> None:
    task = store.add_task(version.id)
    own = store.add_subtask(task.id)
    foreign_task = store.add_task(version.id)
    foreign = store.add_subtask(foreign_task.id)

    orchestrator.on_mark_only_completion(task.id, [own.id, foreign.id], "completed")

    assert store.subtasks[own.id].completed
    assert not store.subtasks[foreign.id].completed


def test_mark_only_other_status_marks_nothing(orchestrator, store, version) -> None:
    task = store.add_task(version.id)
    done = store.add_subtask(task.id, completed=True)
    pending = store.add_subtask(task.id)

    orchestrator.on_mark_only_completion(task.id, [pending.id], "in_progress")

    assert not store.subtasks[pending.id].completed
    assert store.writes_of("mark_subtasks_completed") == []
    assert store.tasks[task.id].progress == 50
    assert store.tasks[task.id].status == TaskStatus.IN_PROGRESS
    assert store.subtasks[done.id].completed


def test_mark_only_unknown_status_is_a_precondition_failure(orchestrator, store, sink, task) -> None:
    report = orchestrator.on_mark_only_completion(task.id, [], "archived")

    assert report.failed("mark_only_completion")
    assert sink.events[0].failure_kind == RecalculationFailed.PRECONDITION
    assert sink.events[0].error_type == "ValidationException"
    assert store.writes == []


def test_mark_only_is_one_unit_of_work(orchestrator, store, sink, version) -> None:
    task = store.add_task(version.id)
    listed = store.add_subtask(task.id)
    store.fail_on["save_task_status"] = StoreError("connection reset")

    report = orchestrator.on_mark_only_completion(task.id, [listed.id], "completed")

    assert report.failed("mark_only_completion")
    assert sink.events[0].failure_kind == RecalculationFailed.RECOVERABLE
    assert not store.subtasks[listed.id].completed
    assert store.tasks[task.id].progress == 0
    assert store.tasks[task.id].status == TaskStatus.PENDING


# -- rebuild --------------------------------------------------------------


def test_rebuild_heals_stale_values(orchestrator, store, version) -> None:
    task = store.add_task(version.id, progress=99, estimated_time="1h", remaining_time="1h")
    store.add_subtask(task.id, completed=True, time_estimate="3h")
    store.add_subtask(task.id, completed=True, time_estimate="1h")
    empty = store.add_task(version.id, progress=10)

    report = orchestrator.rebuild_version(version.id)

    assert report.ok
    assert store.tasks[task.id].progress == 100
    assert store.tasks[task.id].estimated_time == "4h"
    assert store.tasks[task.id].remaining_time == "0h"
    assert store.tasks[empty.id].progress == 0
    assert store.versions[version.id].progress == 50
    assert len(store.writes_of("save_version_progress")) == 1
    assert report.completed_steps[-2:] == ["recompute_version_progress", "reprioritize_version"]


def test_rebuild_of_stale_version(orchestrator, sink) -> None:
    report = orchestrator.rebuild_version(uuid.uuid4())

    assert report.completed_steps == []
    assert sink.operations == ["list_version_tasks"]


# -- caller's unit of work ------------------------------------------------


def test_failed_step_inside_caller_unit_of_work_keeps_other_writes(orchestrator, store, sink, version) -> None:
    task = store.add_task(version.id)
    first = store.add_subtask(task.id, time_estimate="1h")
    store.add_subtask(task.id, time_estimate="1h")
    store.fail_on["save_task_durations"] = StoreError("constraint violated")

    with store.atomic():
        store.mark_subtasks_completed(task.id, [first.id])
        report = orchestrator.on_subtask_changed(task.id, completed_changed=True, duration_changed=False)

    assert sink.operations == ["recompute_task_durations"]
    assert "reprioritize_version" in report.completed_steps
    assert store.subtasks[first.id].completed
    assert store.tasks[task.id].progress == 50
    assert store.tasks[task.id].priority == TaskPriority.HIGH


def test_failed_step_rolls_back_its_own_partial_writes(orchestrator, store, version) -> None:
    task = store.add_task(version.id, status=TaskStatus.IN_PROGRESS)
    listed = store.add_subtask(task.id)
    store.fail_on["save_task_status"] = StoreError("connection reset")

    with store.atomic():
        orchestrator.on_mark_only_completion(task.id, [listed.id], "completed")

    assert not store.subtasks[listed.id].completed
    assert store.tasks[task.id].progress == 0
    assert store.tasks[task.id].status == TaskStatus.IN_PROGRESS
