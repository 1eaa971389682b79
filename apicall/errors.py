"""
Errors raised while building or executing an ApiCall.

Only ConfigurationError reaches the caller. The rest are wrapped in an
ExceptionState resource by the executor.
"""

from typing import Any


class ApiCallError(Exception):
    """Base class for apicall errors."""
    pass


class ConfigurationError(ApiCallError):
    """Raised when an ApiCall is executed before a method was set."""


class CastError(ApiCallError):
    """Raised when a response body is not of the expected type."""

    def __init__(self, expected: type, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected response body of type {expected.__name__}, "
            f"got {type(actual).__name__}"
        )


class EmptyErrorResponse(ApiCallError):
    """Raised when the server answers with an error status and no body."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Request failed with status {status_code} and no body")


class UnrecognizedErrorResponse(ApiCallError):
    """Raised when an error body does not follow the {"error": ...} convention."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Request failed with status {status_code}: unrecognized error body")
