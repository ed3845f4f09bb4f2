"""
Domain Events.

Domain events are records of significant business occurrences.
The recalculation engine emits them so that callers and the observability
sink learn what was (re)derived and what failed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened in the domain.
    They are used for:
    - Decoupling the engine from its callers
    - Operational alerting (failure events)
    - Audit trail
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


# =============================================================================
# PROGRESS EVENTS
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class TaskProgressUpdated(DomainEvent):
    """Event raised when a task's progress was recomputed from its subtasks."""

    task_id: UUID
    version_id: UUID
    progress: int
    completed_subtasks: int
    total_subtasks: int


@dataclass(frozen=True, kw_only=True)
class VersionProgressUpdated(DomainEvent):
    """Event raised when a version's progress was recomputed from its tasks."""

    version_id: UUID
    progress: int
    task_count: int


@dataclass(frozen=True, kw_only=True)
class TaskDurationsUpdated(DomainEvent):
    """Event raised when a task's estimated/remaining time was re-aggregated."""

    task_id: UUID
    estimated_time: str
    remaining_time: str


@dataclass(frozen=True, kw_only=True)
class TaskStatusChanged(DomainEvent):
    """Event raised when the mark-only completion path sets a task status."""

    task_id: UUID
    status: str


@dataclass(frozen=True, kw_only=True)
class VersionReprioritized(DomainEvent):
    """Event raised when all task priorities of a version were reassigned."""

    version_id: UUID
    priorities: Dict[UUID, str] = field(default_factory=dict)


# =============================================================================
# FAILURE EVENTS
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class RecalculationFailed(DomainEvent):
    """
    Event raised when a recalculation step failed and was swallowed.

    failure_kind is "precondition" for stale ids handed to the engine and
    "recoverable" for anything else (storage errors and the like).
    """

    operation: str
    entity_type: str
    entity_id: UUID
    failure_kind: str
    error_type: str
    error_message: str
    error: Optional[BaseException] = field(default=None, compare=False, repr=False)

    PRECONDITION = "precondition"
    RECOVERABLE = "recoverable"
