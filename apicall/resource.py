"""
Resource envelope for the outcome of an HTTP call.

A Resource is exactly one of:
    - Loading: request in flight (only produced by watch())
    - Success(data): request succeeded and the body was parsed
    - Error(message): server answered with a recognized {"error": ...} body
    - ExceptionState(error, stack_trace): anything else went wrong
    - Empty: request succeeded but the body was empty

Usage:
    resource = await call.execute()
    if resource.is_success:
        print(resource.data)

    text = resource.when(
        success=lambda data: f"got {data}",
        error=lambda message: f"failed: {message}",
        otherwise=lambda: "nothing yet",
    )
"""

import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ResourceStatus(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    EXCEPTION = "exception"
    EMPTY = "empty"


class Resource(Generic[T]):
    """Base class for all resource variants. Use the factories to build one."""

    status: ResourceStatus

    # Factories

    @staticmethod
    def loading() -> "Loading":
        return Loading()

    @staticmethod
    def success(data: T) -> "Success[T]":
        return Success(data)

    @staticmethod
    def error(message: str) -> "Error":
        return Error(message)

    @staticmethod
    def exception(error: BaseException, stack_trace: str | None = None) -> "ExceptionState":
        if stack_trace is None:
            stack_trace = _format_stack(error)
        return ExceptionState(error, stack_trace)

    @staticmethod
    def empty() -> "Empty":
        return Empty()

    # Predicates

    @property
    def is_loading(self) -> bool:
        return self.status is ResourceStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status is ResourceStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is ResourceStatus.ERROR

    @property
    def is_exception(self) -> bool:
        return self.status is ResourceStatus.EXCEPTION

    @property
    def is_empty(self) -> bool:
        return self.status is ResourceStatus.EMPTY

    def data_or(self, default: Any = None) -> Any:
        """Return the success payload, or default for any other variant."""
        if isinstance(self, Success):
            return self.data
        return default

    def when(
        self,
        *,
        loading: Callable[[], R] | None = None,
        success: Callable[[T], R] | None = None,
        error: Callable[[str], R] | None = None,
        exception: Callable[[BaseException, str], R] | None = None,
        empty: Callable[[], R] | None = None,
        otherwise: Callable[[], R] | None = None,
    ) -> R:
        """
        Dispatch on the active variant.

        Each callback receives the variant's fields. Variants without a
        callback go to otherwise.

        Raises:
            ValueError: No callback for the active variant and no otherwise.
        """
        if isinstance(self, Success) and success is not None:
            return success(self.data)
        if isinstance(self, Error) and error is not None:
            return error(self.message)
        if isinstance(self, ExceptionState) and exception is not None:
            return exception(self.error, self.stack_trace)
        if isinstance(self, Loading) and loading is not None:
            return loading()
        if isinstance(self, Empty) and empty is not None:
            return empty()
        if otherwise is not None:
            return otherwise()
        raise ValueError(f"No handler for resource status '{self.status.value}'")


@dataclass(frozen=True)
class Loading(Resource[Any]):
    status = ResourceStatus.LOADING


@dataclass(frozen=True)
class Success(Resource[T]):
    data: T
    status = ResourceStatus.SUCCESS


@dataclass(frozen=True)
class Error(Resource[Any]):
    message: str
    status = ResourceStatus.ERROR


@dataclass(frozen=True)
class ExceptionState(Resource[Any]):
    error: BaseException
    stack_trace: str = ""
    status = ResourceStatus.EXCEPTION


@dataclass(frozen=True)
class Empty(Resource[Any]):
    status = ResourceStatus.EMPTY


def _format_stack(error: BaseException) -> str:
    if error.__traceback__ is None:
        return ""
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))
