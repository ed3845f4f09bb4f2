"""
Project ORM Models.

Projects and their versions. A version's progress is computed by the
recalculation engine as the mean progress of its tasks.
"""

from django.db import models

from domain.shared.value_objects import VersionStatus

from .base import BaseModel, ComputedFieldsMixin
from .company import Company


class VersionStatusChoices(models.TextChoices):
    """Project version status choices."""

    PLANNING = VersionStatus.PLANNING.value, 'Planning'
    ACTIVE = VersionStatus.ACTIVE.value, 'Active'
    REVIEW = VersionStatus.REVIEW.value, 'Review'
    COMPLETED = VersionStatus.COMPLETED.value, 'Completed'


class Project(BaseModel):
    """A company project, delivered in versions."""

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='projects',
        verbose_name="Company"
    )
    name = models.CharField(
        max_length=255,
        verbose_name="Name"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Description"
    )

    class Meta:
        db_table = 'projects'
        verbose_name = 'Project'
        verbose_name_plural = 'Projects'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class ProjectVersion(ComputedFieldsMixin, BaseModel):
    """
    A version (release) of a project; groups the tasks being ranked together.

    progress is engine-owned: the rounded mean of its tasks' progress.
    """

    COMPUTED_FIELDS = ('progress',)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='versions',
        verbose_name="Project"
    )
    version = models.CharField(
        max_length=20,
        verbose_name="Version"
    )
    status = models.CharField(
        max_length=20,
        choices=VersionStatusChoices.choices,
        default=VersionStatusChoices.PLANNING,
        verbose_name="Status"
    )
    progress = models.PositiveSmallIntegerField(
        default=0,
        editable=False,
        verbose_name="Progress, %"
    )

    class Meta:
        db_table = 'project_versions'
        verbose_name = 'Project version'
        verbose_name_plural = 'Project versions'
        ordering = ['project', 'created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'version'],
                name='uniq_project_version',
            ),
        ]

    def __str__(self):
        return f"{self.project_id} v{self.version}"
