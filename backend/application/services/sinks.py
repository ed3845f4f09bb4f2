"""
Failure sinks.

Where the orchestrator reports recalculation failures it swallowed.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List

from domain.shared.events import RecalculationFailed


class FailureSink(ABC):
    """Receives one event per swallowed recalculation error."""

    @abstractmethod
    def report(self, event: RecalculationFailed) -> None:
        """Record the failure. Must not raise."""
        pass


class CompositeFailureSink(FailureSink):
    """Fans a failure out to several sinks."""

    def __init__(self, sinks: Iterable[FailureSink]):
        self.sinks: List[FailureSink] = list(sinks)

    def report(self, event: RecalculationFailed) -> None:
        for sink in self.sinks:
            sink.report(event)
