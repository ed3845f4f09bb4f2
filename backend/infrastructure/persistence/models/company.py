"""
Company ORM Models.

Owners of projects and employees. Kept minimal: the recalculation engine
never reads them, but versions belong to projects which belong to companies.
"""

from django.db import models

from .base import BaseModel


class Company(BaseModel):
    """A company that owns projects and employs people."""

    name = models.CharField(
        max_length=255,
        verbose_name="Name"
    )

    class Meta:
        db_table = 'companies'
        verbose_name = 'Company'
        verbose_name_plural = 'Companies'
        ordering = ['name']

    def __str__(self):
        return self.name


class Employee(BaseModel):
    """A person who can be assigned to subtasks."""

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name='employees',
        verbose_name="Company"
    )
    full_name = models.CharField(
        max_length=255,
        verbose_name="Full name"
    )

    class Meta:
        db_table = 'employees'
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'
        ordering = ['full_name']

    def __str__(self):
        return self.full_name
