from typing import Optional, Protocol

import requests

from smellbot.common.custom_exceptions import (
    FetchError,
    PublishError,
    SerializationError,
    SolutionNotFoundError,
)
from smellbot.common.logging_config import get_logger
from smellbot.domain.submission_dto import SubmissionDTO

logger = get_logger(__name__)


class SolutionFetcher(Protocol):
    def fetch_solution(self, submission_id: str) -> SubmissionDTO:
        """
        Raises:
            SolutionNotFoundError: If the platform does not know the submission.
            FetchError: If the submission could not be retrieved.
            SerializationError: If the platform response is malformed.
        """


class CommentPublisher(Protocol):
    def submit_comment(self, content: bytes, submission_id: str) -> None:
        """
        Raises:
            PublishError: If the comment could not be posted.
        """


class PlatformClient:
    """Talks to the learning platform: reads submissions and posts comments on them."""

    api_url: str = "api/v1/submissions"

    def __init__(
        self,
        host: str,
        shared_key: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.host = host.rstrip("/")
        self.shared_key = shared_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _submission_url(self, submission_id: str) -> str:
        return f"{self.host}/{self.api_url}/{submission_id}"

    def fetch_solution(self, submission_id: str) -> SubmissionDTO:
        url = self._submission_url(submission_id)
        try:
            response = self.session.get(
                url,
                params={"shared_key": self.shared_key},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"{submission_id} - request to {url} failed - {e}") from e

        if response.status_code == requests.codes.not_found:
            raise SolutionNotFoundError(submission_id)
        if not response.ok:
            raise FetchError(
                f"{submission_id} - {url} responded with status "
                f"{response.status_code} - {response.text[:200]}"
            )

        try:
            return SubmissionDTO.from_platform(submission_id, response.json())
        except ValueError as e:
            # pydantic's ValidationError is a ValueError as well
            raise SerializationError(
                f"{submission_id} - unexpected submission payload - {e}"
            ) from e

    def submit_comment(self, content: bytes, submission_id: str) -> None:
        url = f"{self._submission_url(submission_id)}/comments"
        try:
            response = self.session.post(
                url,
                json={
                    "shared_key": self.shared_key,
                    "comment": content.decode("utf-8"),
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except UnicodeDecodeError as e:
            raise PublishError(f"{submission_id} - comment is not valid UTF-8") from e
        except requests.exceptions.RequestException as e:
            raise PublishError(
                f"{submission_id} - failed to submit comment to {url} - {e}"
            ) from e
        logger.debug("Posted comment to %s", url)
