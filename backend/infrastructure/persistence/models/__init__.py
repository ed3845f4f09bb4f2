"""
Persistence Models Package.

All Django ORM models for the task tracker.
"""

# Base mixins
from .base import (
    TimeStampedMixin,
    ComputedFieldsMixin,
    BaseModel,
)

# Company models
from .company import (
    Company,
    Employee,
)

# Project models
from .project import (
    Project,
    ProjectVersion,
    VersionStatusChoices,
)

# Task models
from .task import (
    Task,
    Subtask,
    TaskAssignment,
    TaskStatusChoices,
    TaskPriorityChoices,
)

__all__ = [
    # Base
    'TimeStampedMixin',
    'ComputedFieldsMixin',
    'BaseModel',
    # Company
    'Company',
    'Employee',
    # Project
    'Project',
    'ProjectVersion',
    'VersionStatusChoices',
    # Task
    'Task',
    'Subtask',
    'TaskAssignment',
    'TaskStatusChoices',
    'TaskPriorityChoices',
]
