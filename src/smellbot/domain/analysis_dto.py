from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from smellbot.common.custom_exceptions import RemoteAnalysisError


class AnalysisResultDTO(BaseModel):
    """All keys the analysis service matched for one smell category."""

    type: str
    keys: List[str] = Field(default_factory=list)

    @field_validator("keys", mode="before")
    @classmethod
    def null_keys_as_empty(cls, value):
        return [] if value is None else value

    def smell_ids(self) -> List[str]:
        return [f"{self.type}/{key}" for key in self.keys]


class AnalysisPayloadDTO(BaseModel):
    results: List[AnalysisResultDTO] = Field(default_factory=list)
    error: Optional[str] = None

    @field_validator("results", mode="before")
    @classmethod
    def null_results_as_empty(cls, value):
        return [] if value is None else value

    def raise_for_error(self) -> None:
        """A reported error invalidates the results, whatever they contain."""
        if self.error:
            raise RemoteAnalysisError(self.error)
