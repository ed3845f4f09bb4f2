# tests/conftest.py

from __future__ import annotations

import pytest

from application.services import RecalculationOrchestrator

from .fakes import InMemoryRecalculationStore, RecordingFailureSink


@pytest.fixture
def store() -> InMemoryRecalculationStore:
    return InMemoryRecalculationStore()


@pytest.fixture
def sink() -> RecordingFailureSink:
    return RecordingFailureSink()


@pytest.fixture
def orchestrator(store, sink) -> RecalculationOrchestrator:
    return RecalculationOrchestrator(store=store, sink=sink)


@pytest.fixture
def version(store):
    return store.add_version()


# -- ORM fixtures ---------------------------------------------------------


@pytest.fixture
def company(db):
    from infrastructure.persistence.models import Company

    return Company.objects.create(name="Acme")


@pytest.fixture
def orm_version(company):
    from infrastructure.persistence.models import Project, ProjectVersion

    project = Project.objects.create(company=company, name="Website")
    return ProjectVersion.objects.create(project=project, version="1.0")


@pytest.fixture
def make_task(orm_version):
    from infrastructure.persistence.models import Subtask, Task

    def _make(*subtasks, version=None, **fields):
        """Create a task; each subtask is a (completed, time_estimate) pair."""
        fields.setdefault("title", "Task")
        task = Task.objects.create(project_version=version or orm_version, **fields)
        for i, (completed, estimate) in enumerate(subtasks):
            Subtask.objects.create(task=task, title=f"Step {i + 1}",
                                   completed=completed, time_estimate=estimate)
        return task

    return _make
