from fastapi import HTTPException, status


class SmellbotError(Exception):
    """Base class for every failure that terminates a single job."""


class InvalidJobArgumentsError(SmellbotError):
    """The queue message does not carry a usable submission id."""


class FetchError(SmellbotError):
    """The submission could not be retrieved from the platform."""


class SolutionNotFoundError(FetchError):
    def __init__(self, submission_id: str):
        super().__init__(f"submission {submission_id} not found")
        self.submission_id = submission_id


class TransportError(SmellbotError):
    """A call to the analysis service failed or returned a non-OK status."""


class SerializationError(SmellbotError):
    """A response body could not be decoded into the expected shape."""


class RemoteAnalysisError(SmellbotError):
    """The analysis service rejected the submitted code."""

    def __init__(self, reason: str):
        super().__init__(f"analysis service reported an error: {reason}")
        self.reason = reason


class PublishError(SmellbotError):
    """The selected comment could not be posted to the conversation thread."""


class RequiresAuthenticationException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "type": "not_authenticated",
                "errorMessage": "Requires authentication",
            },
        )


class PermissionDeniedException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "type": "not_authorized",
                "errorMessage": "Permission denied",
            },
        )
