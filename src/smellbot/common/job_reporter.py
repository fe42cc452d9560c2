"""
Structured reporting for job events.

The job handler never logs directly; it emits events through a JobReporter so
that tests can observe them and deployments can route failures to Sentry.
"""

import logging
from typing import Optional, Protocol

from sentry_sdk import capture_exception

from smellbot.common.logging_config import get_logger
from smellbot.domain.job_dto import JobOutcome


class JobReporter(Protocol):
    def smell_detected(self, submission_id: str, smell_type: str, key: str) -> None: ...

    def skipped(
        self, outcome: JobOutcome, submission_id: Optional[str], detail: str
    ) -> None: ...

    def failed(
        self, outcome: JobOutcome, submission_id: Optional[str], error: Exception
    ) -> None: ...

    def published(self, submission_id: str, smell_id: str) -> None: ...


# Skips that are part of normal operation and only worth a debug line
_QUIET_SKIPS = {JobOutcome.NO_RESULTS, JobOutcome.NO_MATCHING_COMMENT}


class LoggingJobReporter:
    """Writes job events as key=value log lines and forwards failures to Sentry."""

    def __init__(self, logger: Optional[logging.Logger] = None, report_to_sentry=True):
        self.logger = logger or get_logger("smellbot.jobs")
        self.report_to_sentry = report_to_sentry

    def smell_detected(self, submission_id: str, smell_type: str, key: str) -> None:
        self.logger.debug(
            "Smell detected | submission=%s type=%s key=%s",
            submission_id,
            smell_type,
            key,
        )

    def skipped(
        self, outcome: JobOutcome, submission_id: Optional[str], detail: str
    ) -> None:
        if outcome == JobOutcome.ANALYSIS_REJECTED:
            level = logging.WARNING
        elif outcome in _QUIET_SKIPS:
            level = logging.DEBUG
        else:
            level = logging.INFO
        self.logger.log(
            level,
            "Job skipped | submission=%s outcome=%s detail=%s",
            submission_id,
            outcome.value,
            detail,
        )

    def failed(
        self, outcome: JobOutcome, submission_id: Optional[str], error: Exception
    ) -> None:
        self.logger.error(
            "Job failed | submission=%s outcome=%s error=%s",
            submission_id,
            outcome.value,
            error,
        )
        if self.report_to_sentry:
            capture_exception(error)

    def published(self, submission_id: str, smell_id: str) -> None:
        self.logger.info(
            "Comment published | submission=%s smell=%s", submission_id, smell_id
        )
