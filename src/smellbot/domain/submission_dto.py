from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class SourceFileDTO(BaseModel):
    filename: str
    content: str

    model_config = ConfigDict(frozen=True)


class SubmissionDTO(BaseModel):
    id: str
    track_id: str
    files: List[SourceFileDTO] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_platform(cls, submission_id: str, data: Any) -> "SubmissionDTO":
        """
        Build a submission from the platform's JSON representation,
        ``{"track_id": ..., "solution_files": {filename: content}}``.
        The order of ``solution_files`` is kept as the order of the files.
        """
        if not isinstance(data, dict):
            raise ValueError("submission payload must be a JSON object")
        solution_files = data.get("solution_files") or {}
        if not isinstance(solution_files, dict):
            raise ValueError("solution_files must be a JSON object")
        return cls(
            id=submission_id,
            track_id=data.get("track_id"),
            files=[
                SourceFileDTO(filename=name, content=content)
                for name, content in solution_files.items()
            ],
        )
