"""
Job handler giving automated feedback on a single submission.

A job receives the id of a submission, fetches the code from the platform,
submits it to the analysis service and, based on the detected smells,
publishes one matching pre-authored comment to the submission's
conversation. Every stage that cannot continue ends the job with a
JobOutcome; nothing is retried and no exception leaves the handler.
"""

import random
from collections.abc import Sequence
from typing import Any, Callable, Optional

from smellbot.analysis.client import AnalysisClient, join_sources
from smellbot.analysis.selector import SmellSelector
from smellbot.comments.corpus import CommentCorpus
from smellbot.common.custom_exceptions import (
    FetchError,
    InvalidJobArgumentsError,
    PublishError,
    RemoteAnalysisError,
    SerializationError,
    TransportError,
)
from smellbot.common.job_reporter import JobReporter, LoggingJobReporter
from smellbot.common.logging_config import job_id_var
from smellbot.domain.job_dto import JobOutcome
from smellbot.platform.client import CommentPublisher, SolutionFetcher


def parse_submission_id(args: Any) -> str:
    """Extract the submission id from the queue arguments."""
    if not isinstance(args, Sequence) or isinstance(args, (str, bytes)):
        raise InvalidJobArgumentsError(f"expected an argument list, got {args!r}")
    if not args:
        raise InvalidJobArgumentsError("argument list is empty")
    submission_id = args[0]
    if not isinstance(submission_id, str) or not submission_id:
        raise InvalidJobArgumentsError(
            f"expected a submission id as first argument, got {submission_id!r}"
        )
    return submission_id


class AnalyzerJobHandler:
    """Processes one queued submission id end to end. Safe to share across workers."""

    def __init__(
        self,
        fetcher: SolutionFetcher,
        analysis_client: AnalysisClient,
        publisher: CommentPublisher,
        corpus: CommentCorpus,
        supported_track: str,
        reporter: Optional[JobReporter] = None,
        rng_factory: Callable[[], random.Random] = random.Random,
    ):
        self.fetcher = fetcher
        self.analysis_client = analysis_client
        self.publisher = publisher
        self.selector = SmellSelector(corpus)
        self.supported_track = supported_track
        self.reporter = reporter or LoggingJobReporter()
        self.rng_factory = rng_factory

    def process(self, args: Any) -> JobOutcome:
        try:
            submission_id = parse_submission_id(args)
        except InvalidJobArgumentsError as e:
            self.reporter.failed(JobOutcome.INVALID_ARGUMENTS, None, e)
            return JobOutcome.INVALID_ARGUMENTS

        token = job_id_var.set(submission_id)
        try:
            return self._run(submission_id)
        finally:
            job_id_var.reset(token)

    def _run(self, submission_id: str) -> JobOutcome:
        try:
            solution = self.fetcher.fetch_solution(submission_id)
        except (FetchError, SerializationError) as e:
            self.reporter.failed(JobOutcome.FETCH_FAILED, submission_id, e)
            return JobOutcome.FETCH_FAILED

        if solution.track_id != self.supported_track:
            self.reporter.skipped(
                JobOutcome.UNSUPPORTED_TRACK,
                submission_id,
                f"track {solution.track_id} is not supported",
            )
            return JobOutcome.UNSUPPORTED_TRACK

        try:
            payload = self.analysis_client.analyze(
                solution.track_id, join_sources(solution.files)
            )
            payload.raise_for_error()
        except (TransportError, SerializationError) as e:
            self.reporter.failed(JobOutcome.ANALYSIS_FAILED, submission_id, e)
            return JobOutcome.ANALYSIS_FAILED
        except RemoteAnalysisError as e:
            self.reporter.skipped(JobOutcome.ANALYSIS_REJECTED, submission_id, e.reason)
            return JobOutcome.ANALYSIS_REJECTED

        if not payload.results:
            self.reporter.skipped(
                JobOutcome.NO_RESULTS, submission_id, "analysis found nothing"
            )
            return JobOutcome.NO_RESULTS

        for result in payload.results:
            for key in result.keys:
                self.reporter.smell_detected(submission_id, result.type, key)

        comment = self.selector.select(payload.results, self.rng_factory())
        if comment is None:
            self.reporter.skipped(
                JobOutcome.NO_MATCHING_COMMENT,
                submission_id,
                "no comment authored for the detected smells",
            )
            return JobOutcome.NO_MATCHING_COMMENT

        try:
            self.publisher.submit_comment(comment.content, submission_id)
        except PublishError as e:
            self.reporter.failed(JobOutcome.PUBLISH_FAILED, submission_id, e)
            return JobOutcome.PUBLISH_FAILED

        self.reporter.published(submission_id, comment.smell_id)
        return JobOutcome.PUBLISHED
