"""
Shared Value Objects used across the tracking domain.

Value Objects are immutable objects that describe characteristics of a thing.
Two value objects are equal if all their properties are equal.
"""

from __future__ import annotations
from enum import Enum
import math


# =============================================================================
# ENUMERATIONS
# =============================================================================

class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) status."""
        return self == TaskStatus.COMPLETED


class TaskPriority(str, Enum):
    """Priority tier of a task, assigned by remaining-work percentile."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class VersionStatus(str, Enum):
    """Status of a project version."""

    PLANNING = "planning"
    ACTIVE = "active"
    REVIEW = "review"
    COMPLETED = "completed"


# =============================================================================
# ARITHMETIC
# =============================================================================

def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for positives.

    Python's round() is banker's rounding (12.5 -> 12); progress and minute
    values are rounded half-up everywhere (12.5 -> 13).
    """
    return int(math.floor(value + 0.5))


def percent(part: int, total: int) -> int:
    """Integer percentage of part in total, 0 when total is 0."""
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)
