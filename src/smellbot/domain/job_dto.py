from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field


class JobOutcome(str, Enum):
    """Terminal state of a single job. Everything except PUBLISHED is an abort."""

    PUBLISHED = "published"
    INVALID_ARGUMENTS = "invalid_arguments"
    FETCH_FAILED = "fetch_failed"
    UNSUPPORTED_TRACK = "unsupported_track"
    ANALYSIS_FAILED = "analysis_failed"
    ANALYSIS_REJECTED = "analysis_rejected"
    NO_RESULTS = "no_results"
    NO_MATCHING_COMMENT = "no_matching_comment"
    PUBLISH_FAILED = "publish_failed"


class AnalyzeJobRequestDTO(BaseModel):
    # Raw queue arguments, the first one is expected to be the submission id
    args: List[Any] = Field(default_factory=list)
