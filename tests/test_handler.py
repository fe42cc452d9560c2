# pylint: disable=redefined-outer-name
import random
from unittest.mock import MagicMock

import pytest
import requests

from smellbot.analysis.client import AnalysisClient
from smellbot.comments.corpus import CommentCorpus
from smellbot.common.custom_exceptions import (
    FetchError,
    InvalidJobArgumentsError,
    PublishError,
    SolutionNotFoundError,
    TransportError,
)
from smellbot.common.logging_config import get_job_id
from smellbot.domain.analysis_dto import AnalysisPayloadDTO
from smellbot.domain.job_dto import JobOutcome
from smellbot.domain.submission_dto import SourceFileDTO, SubmissionDTO
from smellbot.jobs.handler import AnalyzerJobHandler, parse_submission_id
from smellbot.platform.client import PlatformClient

UNUSED_VARIABLE = b"Consider removing unused variables."


def _submission(track_id="ruby", files=None, submission_id="abc123"):
    files = files if files is not None else {"solution.src": "code"}
    return SubmissionDTO(
        id=submission_id,
        track_id=track_id,
        files=[SourceFileDTO(filename=k, content=v) for k, v in files.items()],
    )


def _payload(results=None, error=None):
    return AnalysisPayloadDTO.model_validate({"results": results, "error": error})


@pytest.fixture
def fetcher():
    fetcher = MagicMock()
    fetcher.fetch_solution.return_value = _submission()
    return fetcher


@pytest.fixture
def analysis_client():
    client = MagicMock(spec=AnalysisClient)
    client.analyze.return_value = _payload(
        results=[{"type": "smell", "keys": ["unused_variable"]}]
    )
    return client


@pytest.fixture
def publisher():
    return MagicMock()


@pytest.fixture
def reporter():
    return MagicMock()


@pytest.fixture
def handler(fetcher, analysis_client, publisher, reporter):
    return AnalyzerJobHandler(
        fetcher=fetcher,
        analysis_client=analysis_client,
        publisher=publisher,
        corpus=CommentCorpus({"smell/unused_variable": UNUSED_VARIABLE}),
        supported_track="ruby",
        reporter=reporter,
        rng_factory=lambda: random.Random(0),
    )


def test_parse_submission_id():
    assert parse_submission_id(["abc123", "extra"]) == "abc123"


@pytest.mark.parametrize("args", [None, [], [None], [123], [""], "abc123", {"id": 1}])
def test_parse_submission_id_rejects_bad_arguments(args):
    with pytest.raises(InvalidJobArgumentsError):
        parse_submission_id(args)


def test_publishes_matching_comment(handler, fetcher, analysis_client, publisher, reporter):
    outcome = handler.process(["abc123"])

    assert outcome == JobOutcome.PUBLISHED
    fetcher.fetch_solution.assert_called_once_with("abc123")
    analysis_client.analyze.assert_called_once_with("ruby", "code")
    publisher.submit_comment.assert_called_once_with(UNUSED_VARIABLE, "abc123")
    reporter.smell_detected.assert_called_once_with("abc123", "smell", "unused_variable")
    reporter.published.assert_called_once_with("abc123", "smell/unused_variable")


def test_sources_are_joined_with_line_breaks(handler, fetcher, analysis_client):
    fetcher.fetch_solution.return_value = _submission(
        files={"one.rb": "a = 1", "two.rb": "b = 2"}
    )

    handler.process(["abc123"])

    analysis_client.analyze.assert_called_once_with("ruby", "a = 1\nb = 2")


@pytest.mark.parametrize("args", [[], [None], [42], None])
def test_bad_arguments_make_no_network_calls(
    handler, fetcher, analysis_client, publisher, reporter, args
):
    assert handler.process(args) == JobOutcome.INVALID_ARGUMENTS
    fetcher.fetch_solution.assert_not_called()
    analysis_client.analyze.assert_not_called()
    publisher.submit_comment.assert_not_called()
    reporter.failed.assert_called_once()


@pytest.mark.parametrize(
    "error", [SolutionNotFoundError("abc123"), FetchError("connection refused")]
)
def test_fetch_failure_aborts(handler, fetcher, analysis_client, publisher, error):
    fetcher.fetch_solution.side_effect = error

    assert handler.process(["abc123"]) == JobOutcome.FETCH_FAILED
    analysis_client.analyze.assert_not_called()
    publisher.submit_comment.assert_not_called()


def test_unsupported_track_is_skipped(
    handler, fetcher, analysis_client, publisher, reporter
):
    fetcher.fetch_solution.return_value = _submission(track_id="python")

    assert handler.process(["abc123"]) == JobOutcome.UNSUPPORTED_TRACK
    analysis_client.analyze.assert_not_called()
    publisher.submit_comment.assert_not_called()
    reporter.failed.assert_not_called()
    reporter.skipped.assert_called_once()


def test_analysis_transport_failure_aborts(handler, analysis_client, publisher):
    analysis_client.analyze.side_effect = TransportError("502")

    assert handler.process(["abc123"]) == JobOutcome.ANALYSIS_FAILED
    publisher.submit_comment.assert_not_called()


def test_reported_analysis_error_skips_even_with_results(
    handler, analysis_client, publisher, reporter
):
    analysis_client.analyze.return_value = _payload(
        results=[{"type": "smell", "keys": ["unused_variable"]}], error="timeout"
    )

    assert handler.process(["abc123"]) == JobOutcome.ANALYSIS_REJECTED
    publisher.submit_comment.assert_not_called()
    reporter.failed.assert_not_called()


def test_empty_results_are_skipped(handler, analysis_client, publisher):
    analysis_client.analyze.return_value = _payload(results=[])

    assert handler.process(["abc123"]) == JobOutcome.NO_RESULTS
    publisher.submit_comment.assert_not_called()


def test_no_matching_comment_is_skipped(handler, analysis_client, publisher, reporter):
    analysis_client.analyze.return_value = _payload(
        results=[{"type": "smell", "keys": ["shadowing", "long_method"]}]
    )

    assert handler.process(["abc123"]) == JobOutcome.NO_MATCHING_COMMENT
    publisher.submit_comment.assert_not_called()
    reporter.failed.assert_not_called()


def test_single_commented_smell_wins_for_any_shuffle(
    fetcher, analysis_client, publisher, reporter
):
    analysis_client.analyze.return_value = _payload(
        results=[
            {"type": "style", "keys": ["tabs", "long_line"]},
            {"type": "smell", "keys": ["shadowing", "unused_variable"]},
        ]
    )
    for seed in range(50):
        publisher.reset_mock()
        handler = AnalyzerJobHandler(
            fetcher=fetcher,
            analysis_client=analysis_client,
            publisher=publisher,
            corpus=CommentCorpus({"smell/unused_variable": UNUSED_VARIABLE}),
            supported_track="ruby",
            reporter=reporter,
            rng_factory=lambda s=seed: random.Random(s),
        )
        assert handler.process(["abc123"]) == JobOutcome.PUBLISHED
        publisher.submit_comment.assert_called_once_with(UNUSED_VARIABLE, "abc123")


def test_publish_failure_is_reported(handler, publisher, reporter):
    publisher.submit_comment.side_effect = PublishError("refused")

    assert handler.process(["abc123"]) == JobOutcome.PUBLISH_FAILED
    publisher.submit_comment.assert_called_once()
    reporter.failed.assert_called_once()
    reporter.published.assert_not_called()


def test_job_id_is_scoped_to_the_job(handler, fetcher):
    seen = []
    fetcher.fetch_solution.side_effect = lambda submission_id: (
        seen.append(get_job_id()) or _submission()
    )

    handler.process(["abc123"])

    assert seen == ["abc123"]
    assert get_job_id() == "-"


def _http_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = ""
    response.json.return_value = body
    return response


def _wire_handler(session, track="ruby"):
    session.get.return_value = _http_response(
        body={"track_id": track, "solution_files": {"solution.src": "code"}}
    )
    platform = PlatformClient("http://platform", "key", session=session)
    return AnalyzerJobHandler(
        fetcher=platform,
        analysis_client=AnalysisClient("http://analysis", session=session),
        publisher=platform,
        corpus=CommentCorpus({"smell/unused_variable": UNUSED_VARIABLE}),
        supported_track="ruby",
        reporter=MagicMock(),
    )


def test_end_to_end_over_http():
    session = MagicMock(spec=requests.Session)
    handler = _wire_handler(session)
    session.post.side_effect = [
        _http_response(body={"results": [{"type": "smell", "keys": ["unused_variable"]}]}),
        _http_response(status_code=201),
    ]

    assert handler.process(["abc123"]) == JobOutcome.PUBLISHED

    analyze_call, comment_call = session.post.call_args_list
    assert analyze_call.args == ("http://analysis/analyze/ruby",)
    assert analyze_call.kwargs["json"] == {"code": "code"}
    assert comment_call.args == ("http://platform/api/v1/submissions/abc123/comments",)
    assert comment_call.kwargs["json"]["comment"] == UNUSED_VARIABLE.decode()


def test_end_to_end_unsupported_track_over_http():
    session = MagicMock(spec=requests.Session)
    handler = _wire_handler(session, track="go")

    assert handler.process(["abc123"]) == JobOutcome.UNSUPPORTED_TRACK
    session.post.assert_not_called()


def test_end_to_end_analysis_error_over_http():
    session = MagicMock(spec=requests.Session)
    handler = _wire_handler(session)
    session.post.return_value = _http_response(body={"error": "timeout"})

    assert handler.process(["abc123"]) == JobOutcome.ANALYSIS_REJECTED
    session.post.assert_called_once()


def test_end_to_end_no_matching_comment_over_http():
    session = MagicMock(spec=requests.Session)
    handler = _wire_handler(session)
    session.post.return_value = _http_response(
        body={"results": [{"type": "smell", "keys": ["shadowing"]}]}
    )

    assert handler.process(["abc123"]) == JobOutcome.NO_MATCHING_COMMENT
    session.post.assert_called_once()
