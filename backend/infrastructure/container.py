"""
Wiring of the recalculation engine.

Mutation handlers and management commands get their orchestrator here,
configured from settings.RECALCULATION, and read-only callers their
progress reports.
"""

from django.conf import settings

from application.services import RecalculationOrchestrator
from domain.tracking.reports import ProgressReports

from .observability.sinks import LoggingFailureSink, SentryFailureSink
from .persistence.stores import DjangoProgressReadStore, DjangoRecalculationStore

FAILURE_SINKS = {
    'logging': LoggingFailureSink,
    'sentry': SentryFailureSink,
}


def _recalculation_settings() -> dict:
    return getattr(settings, 'RECALCULATION', {})


def build_failure_sink(name: str = None):
    name = name or _recalculation_settings().get('FAILURE_SINK', 'logging')
    try:
        return FAILURE_SINKS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown RECALCULATION['FAILURE_SINK'] '{name}', expected one of: {', '.join(FAILURE_SINKS)}"
        ) from None


def build_recalculation_orchestrator(using: str = None, sink=None) -> RecalculationOrchestrator:
    """Orchestrator over the Django store with the configured failure sink."""
    options = _recalculation_settings()
    return RecalculationOrchestrator(
        store=DjangoRecalculationStore(using=using),
        sink=sink or build_failure_sink(),
        reprioritize_on_mark_only=options.get('REPRIORITIZE_ON_MARK_ONLY', False),
    )


def build_progress_reports(using: str = None) -> ProgressReports:
    return ProgressReports(store=DjangoProgressReadStore(using=using))
