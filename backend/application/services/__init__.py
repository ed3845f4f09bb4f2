"""
Application Services.

Use cases that coordinate domain components on behalf of external callers.
"""

from .recalculation import RecalculationOrchestrator, RecalculationReport
from .sinks import CompositeFailureSink, FailureSink

__all__ = [
    "RecalculationOrchestrator",
    "RecalculationReport",
    "FailureSink",
    "CompositeFailureSink",
]
