# tests/test_reports.py

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from domain.shared.value_objects import TaskStatus, VersionStatus
from domain.tracking.entities import CategoryCount, VersionStats
from domain.tracking.reports import UNCATEGORIZED, ProgressReports
from infrastructure.container import build_progress_reports
from infrastructure.persistence.models import Employee, ProjectVersion, Subtask, Task, TaskAssignment

from .fakes import InMemoryProgressReadStore


@pytest.fixture
def read_store() -> InMemoryProgressReadStore:
    return InMemoryProgressReadStore()


@pytest.fixture
def reports(read_store) -> ProgressReports:
    return ProgressReports(read_store)


# -- domain ---------------------------------------------------------------


@pytest.mark.parametrize(
    "assigned, completed, rate",
    [
        (4, 3, 75),
        (8, 1, 13),
        (3, 1, 33),
        (0, 0, 0),
    ],
)
def test_employee_completion_rate(reports, read_store, assigned, completed, rate) -> None:
    employee_id = uuid.uuid4()
    read_store.employee_counts[employee_id] = (assigned, completed)

    progress = reports.employee_progress(employee_id)

    assert (progress.assigned_subtasks, progress.completed_subtasks) == (assigned, completed)
    assert progress.completion_rate == rate


def test_unknown_employee_has_zero_progress(reports) -> None:
    assert reports.employee_progress(uuid.uuid4()).completion_rate == 0


def test_version_stats_pass_through(reports, read_store) -> None:
    project_id = uuid.uuid4()
    stats = [VersionStats(id=uuid.uuid4(), version="2.0", status=VersionStatus.ACTIVE, tasks=3, completed=1)]
    read_store.version_stats[project_id] = stats

    assert reports.version_stats(project_id) == stats
    assert reports.version_stats(uuid.uuid4()) == []


def test_task_distribution_merges_missing_categories(reports, read_store) -> None:
    read_store.categories[None] = {"backend": 2, None: 1, "": 2, "frontend": 4, "design": 2}

    assert reports.task_distribution() == [
        CategoryCount("frontend", 4),
        CategoryCount(UNCATEGORIZED, 3),
        CategoryCount("backend", 2),
        CategoryCount("design", 2),
    ]


# -- Django ---------------------------------------------------------------


@pytest.mark.django_db
def test_employee_progress_from_assignments(company, make_task) -> None:
    alice = Employee.objects.create(company=company, full_name="Alice")
    bob = Employee.objects.create(company=company, full_name="Bob")
    task = make_task((True, None), (False, None), (True, None))
    for subtask in Subtask.objects.filter(task=task):
        TaskAssignment.objects.create(subtask=subtask, employee=alice)
    TaskAssignment.objects.create(subtask=Subtask.objects.filter(task=task, completed=False).get(), employee=bob)

    reports = build_progress_reports()

    alice_progress = reports.employee_progress(alice.id)
    assert (alice_progress.assigned_subtasks, alice_progress.completed_subtasks) == (3, 2)
    assert alice_progress.completion_rate == 67
    assert reports.employee_progress(bob.id).completion_rate == 0


@pytest.mark.django_db
def test_version_stats_count_completed_tasks(orm_version, make_task) -> None:
    newer = ProjectVersion.objects.create(project=orm_version.project, version="2.0")
    ProjectVersion.objects.filter(pk=newer.pk).update(created_at=orm_version.created_at + timedelta(seconds=1))
    make_task(status=TaskStatus.COMPLETED.value)
    make_task(status=TaskStatus.IN_PROGRESS.value)
    make_task()

    stats = build_progress_reports().version_stats(orm_version.project_id)

    assert [s.id for s in stats] == [newer.id, orm_version.id]
    assert (stats[0].tasks, stats[0].completed) == (0, 0)
    assert (stats[1].tasks, stats[1].completed) == (3, 1)
    assert stats[1].status == VersionStatus.PLANNING


@pytest.mark.django_db
def test_task_distribution_by_project(company, orm_version, make_task) -> None:
    from infrastructure.persistence.models import Project

    make_task(category="backend")
    make_task(category="backend")
    make_task()
    elsewhere = Project.objects.create(company=company, name="Mobile")
    other_version = ProjectVersion.objects.create(project=elsewhere, version="1.0")
    make_task(category="mobile", version=other_version)

    reports = build_progress_reports()

    assert reports.task_distribution(orm_version.project_id) == [
        CategoryCount("backend", 2),
        CategoryCount(UNCATEGORIZED, 1),
    ]
    assert sum(c.count for c in reports.task_distribution()) == 4
    assert Task.objects.count() == 4
