"""
Failure classification for upstream calls and puzzle generation.

Two kinds of "nothing happened" exist in this system:

- Exceptions (this module): something went wrong talking to an upstream
  service, or a puzzle could not be generated at all.
- Tagged outcomes (models/selection.py): the tournament source currently
  has nothing usable. That is a normal operating condition, not an error.

User-visible failures leave the API inside the ApiResponse envelope so
the frontend always gets a classified, explained outcome.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope for user-visible outcomes."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a known failure response."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse[Any]":
        """Create an unknown failure response."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong and the cause is unknown. Try again later.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class NetworkExhausted(KnownError):
    """
    Every attempt to reach an upstream API failed.

    Carries the attempt count and the message of the last underlying error.
    """

    def __init__(self, url: str, attempts: int, last_error: str):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            kind=FailureKind.SERVICE_UNAVAILABLE,
            message=f"Request to {url} failed after {attempts} attempts: {last_error}",
            detail=last_error,
            suggestion="The upstream service may be down. Try again in a few minutes.",
            status_code=503,
        )


class MalformedResponse(KnownError):
    """Upstream answered, but not with JSON of the expected shape."""

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Malformed response from {url}",
            detail=detail,
            status_code=502,
        )


class GenerationFailure(KnownError):
    """No usable decklist could be turned into a puzzle."""

    def __init__(self, mode: str, reason: str):
        self.mode = mode
        self.reason = reason
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="Daily puzzle unavailable.",
            detail=f"{mode}: {reason}",
            suggestion="Try again later.",
            status_code=503,
        )
