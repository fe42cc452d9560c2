from typing import Iterable, Optional

import requests
from pydantic import ValidationError

from smellbot.common.custom_exceptions import SerializationError, TransportError
from smellbot.common.logging_config import get_logger
from smellbot.domain.analysis_dto import AnalysisPayloadDTO
from smellbot.domain.submission_dto import SourceFileDTO

logger = get_logger(__name__)


def join_sources(files: Iterable[SourceFileDTO]) -> str:
    """Concatenate all source files in order; file boundaries are not preserved."""
    return "\n".join(source.content for source in files)


class AnalysisClient:
    """
    Client for the static-analysis service.

    The service receives one code blob per request and answers with the smells
    it detected, grouped by type.
    """

    def __init__(
        self,
        host: str,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self.host = host.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def analyze(self, track_id: str, code: str) -> AnalysisPayloadDTO:
        """
        Submit code for analysis.

        Raises:
            TransportError: If the request fails or the status is not 200.
            SerializationError: If the response body is not a valid payload.
        """
        url = f"{self.host}/analyze/{track_id}"
        try:
            response = self.session.post(
                url, json={"code": code}, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"request to {url} failed - {e}") from e

        if response.status_code != requests.codes.ok:
            raise TransportError(
                f"{url} responded with status {response.status_code} - "
                f"{response.text[:200]}"
            )

        try:
            payload = AnalysisPayloadDTO.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SerializationError(
                f"unexpected analysis response from {url} - {e}"
            ) from e

        logger.debug(
            "Analysis of %s code finished with %d result groups",
            track_id,
            len(payload.results),
        )
        return payload
