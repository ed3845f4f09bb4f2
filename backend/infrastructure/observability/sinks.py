"""
Failure sinks backed by logging and Sentry.

Recalculation failures are swallowed by the orchestrator; these sinks are
where operators see them.
"""

import logging

import sentry_sdk

from application.services.sinks import FailureSink
from domain.shared.events import RecalculationFailed

logger = logging.getLogger('tracker.recalculation')


def _failure_fields(event: RecalculationFailed) -> dict:
    return {
        'operation': event.operation,
        'entity_type': event.entity_type,
        'entity_id': str(event.entity_id),
        'failure_kind': event.failure_kind,
        'error_type': event.error_type,
    }


class LoggingFailureSink(FailureSink):
    """Logs each failure at ERROR with its fields as `extra` and the traceback."""

    def __init__(self, log: logging.Logger = None):
        self.log = log or logger

    def report(self, event: RecalculationFailed) -> None:
        error = event.error
        exc_info = (type(error), error, error.__traceback__) if error is not None else None
        self.log.error(
            f"Recalculation step {event.operation} failed for {event.entity_type} "
            f"{event.entity_id} ({event.failure_kind}): {event.error_type}: {event.error_message}",
            extra={'recalculation': _failure_fields(event)},
            exc_info=exc_info,
        )


class SentryFailureSink(FailureSink):
    """Sends each failure to Sentry with the step as tags, then logs it."""

    def __init__(self, fallback: FailureSink = None):
        self.fallback = fallback or LoggingFailureSink()

    def report(self, event: RecalculationFailed) -> None:
        fields = _failure_fields(event)
        with sentry_sdk.new_scope() as scope:
            for key, value in fields.items():
                scope.set_tag(f"recalculation.{key}", value)
            scope.set_context('recalculation', {**fields, 'error_message': event.error_message})
            if event.error is not None:
                sentry_sdk.capture_exception(event.error)
            else:
                sentry_sdk.capture_message(
                    f"Recalculation step {event.operation} failed: {event.error_message}",
                    level='error',
                )
        self.fallback.report(event)
