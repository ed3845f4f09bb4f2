"""
Task ORM Models.

Tasks, their subtasks and subtask assignments.

Clients write subtask completion and time estimates; everything derived from
them on the task (progress, priority, estimated and remaining time) is
engine-owned and read-only for client code.
"""

from django.db import models

from domain.shared.value_objects import TaskPriority, TaskStatus

from .base import BaseModel, ComputedFieldsMixin
from .company import Employee
from .project import ProjectVersion


class TaskStatusChoices(models.TextChoices):
    """Task status choices."""

    PENDING = TaskStatus.PENDING.value, 'Pending'
    IN_PROGRESS = TaskStatus.IN_PROGRESS.value, 'In progress'
    REVIEW = TaskStatus.REVIEW.value, 'Review'
    COMPLETED = TaskStatus.COMPLETED.value, 'Completed'


class TaskPriorityChoices(models.TextChoices):
    """Task priority choices."""

    LOW = TaskPriority.LOW.value, 'Low'
    MEDIUM = TaskPriority.MEDIUM.value, 'Medium'
    HIGH = TaskPriority.HIGH.value, 'High'


class Task(ComputedFieldsMixin, BaseModel):
    """A unit of work within a project version."""

    COMPUTED_FIELDS = ('progress', 'priority', 'estimated_time', 'remaining_time')

    project_version = models.ForeignKey(
        ProjectVersion,
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name="Project version"
    )
    title = models.CharField(
        max_length=255,
        verbose_name="Title"
    )
    category = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        verbose_name="Category"
    )
    status = models.CharField(
        max_length=20,
        choices=TaskStatusChoices.choices,
        default=TaskStatusChoices.PENDING,
        db_index=True,
        verbose_name="Status"
    )

    # Computed by the recalculation engine
    priority = models.CharField(
        max_length=10,
        choices=TaskPriorityChoices.choices,
        null=True,
        blank=True,
        editable=False,
        verbose_name="Priority"
    )
    progress = models.PositiveSmallIntegerField(
        default=0,
        editable=False,
        verbose_name="Progress, %"
    )
    estimated_time = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        editable=False,
        verbose_name="Estimated time"
    )
    remaining_time = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        editable=False,
        verbose_name="Remaining time"
    )

    due_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Due date"
    )
    description = models.TextField(
        blank=True,
        null=True,
        verbose_name="Description"
    )

    class Meta:
        db_table = 'tasks'
        verbose_name = 'Task'
        verbose_name_plural = 'Tasks'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['project_version', 'created_at'], name='tasks_version_created_idx'),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # A new task has done nothing yet: all of its estimate remains
        if self._state.adding and self.remaining_time is None:
            self.remaining_time = self.estimated_time
        super().save(*args, **kwargs)


class Subtask(BaseModel):
    """A checklist item of a task, with a free-text time estimate."""

    task = models.ForeignKey(
        Task,
        on_delete=models.CASCADE,
        related_name='subtasks',
        verbose_name="Task"
    )
    title = models.CharField(
        max_length=255,
        verbose_name="Title"
    )
    completed = models.BooleanField(
        default=False,
        verbose_name="Completed"
    )
    time_estimate = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        verbose_name="Time estimate"
    )

    class Meta:
        db_table = 'subtasks'
        verbose_name = 'Subtask'
        verbose_name_plural = 'Subtasks'
        ordering = ['created_at', 'id']

    def __str__(self):
        return self.title


class TaskAssignment(BaseModel):
    """Assignment of an employee to a subtask."""

    subtask = models.ForeignKey(
        Subtask,
        on_delete=models.CASCADE,
        related_name='assignments',
        verbose_name="Subtask"
    )
    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name='assignments',
        verbose_name="Employee"
    )

    class Meta:
        db_table = 'task_assignments'
        verbose_name = 'Assignment'
        verbose_name_plural = 'Assignments'
        constraints = [
            models.UniqueConstraint(
                fields=['subtask', 'employee'],
                name='uniq_subtask_employee',
            ),
        ]
