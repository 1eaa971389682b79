"""
Fluent builder for HTTP calls.

Usage:
    call = (
        ApiCall(client)
        .get("/users")
        .params({"page": 2, "filter": None})   # None values are dropped
        .headers({"Authorization": token})
        .parse_with(lambda json: [User(**u) for u in json["users"]])
    )

    resource = await call.execute()

    async for resource in call.watch():
        render(resource)   # Loading, then the result

    # Give out execute/watch only
    handler = call.handler()
"""

from typing import Any, AsyncIterator, Generic, Mapping, TypeVar

import httpx

from .errors import ConfigurationError
from .executor import execute_request
from .request import RequestDescriptor, strip_nulls
from .resource import Resource
from .types import HttpMethod, Json, ResponseParseFunction

T = TypeVar("T")


class ApiCall(Generic[T]):
    """
    Accumulates request configuration, then executes it.

    Every configuration method returns the same builder so calls can be
    chained. Setting a method twice overwrites the earlier one.
    """

    def __init__(self, client: httpx.AsyncClient, expected_type: type | None = None):
        """
        Args:
            client: httpx client the request is sent with
            expected_type: Type the raw body must have when no parser is set.
                A mismatch produces an ExceptionState.
        """
        self.client = client
        self.expected_type = expected_type

        self._method: HttpMethod | None = None
        self._endpoint: str | None = None
        self._params: dict[str, Any] = {}
        self._headers: dict[str, str] = {}
        self._body: Json | str | None = None
        self._parser: ResponseParseFunction[T] | None = None

    def _set_method(self, method: HttpMethod, endpoint: str) -> "ApiCall[T]":
        self._method = method
        self._endpoint = endpoint
        return self

    def get(self, endpoint: str) -> "ApiCall[T]":
        return self._set_method(HttpMethod.GET, endpoint)

    def post(self, endpoint: str) -> "ApiCall[T]":
        return self._set_method(HttpMethod.POST, endpoint)

    def put(self, endpoint: str) -> "ApiCall[T]":
        return self._set_method(HttpMethod.PUT, endpoint)

    def patch(self, endpoint: str) -> "ApiCall[T]":
        return self._set_method(HttpMethod.PATCH, endpoint)

    def delete(self, endpoint: str) -> "ApiCall[T]":
        return self._set_method(HttpMethod.DELETE, endpoint)

    def params(self, params: Mapping[str, Any]) -> "ApiCall[T]":
        """Query parameters. None values are dropped."""
        self._params = strip_nulls(params)
        return self

    def headers(self, headers: Mapping[str, str | None]) -> "ApiCall[T]":
        """Request headers. None values are dropped."""
        self._headers = {key: str(value) for key, value in strip_nulls(headers).items()}
        return self

    def body_json(self, body: Json) -> "ApiCall[T]":
        """JSON request body. Top-level None values are dropped."""
        self._body = strip_nulls(body)
        return self

    def body(self, body: str) -> "ApiCall[T]":
        """Raw request body, sent as is."""
        self._body = body
        return self

    def parse_with(self, parse_function: ResponseParseFunction[T]) -> "ApiCall[T]":
        self._parser = parse_function
        return self

    def build(self) -> RequestDescriptor:
        """
        Snapshot the current configuration.

        Raises:
            ConfigurationError: No method/endpoint was set.
        """
        if self._method is None or self._endpoint is None:
            raise ConfigurationError(
                "No HTTP method set; call get/post/put/patch/delete before executing"
            )
        return RequestDescriptor(
            method=self._method,
            endpoint=self._endpoint,
            params=self._params,
            headers=self._headers,
            body=self._body,
            parser=self._parser,
            expected_type=self.expected_type,
        )

    async def execute(self, json: bool = True) -> Resource[T]:
        """Run the request once. Raises only ConfigurationError."""
        descriptor = self.build()
        return await execute_request(self.client, descriptor, json=json)

    async def watch(self, json: bool = True) -> AsyncIterator[Resource[T]]:
        """Yield Loading, then the result of execute()."""
        descriptor = self.build()
        yield Resource.loading()
        yield await execute_request(self.client, descriptor, json=json)

    def handler(self) -> "ApiCallHandler[T]":
        return ApiCallHandler(self)

    def __repr__(self) -> str:
        method = self._method.value if self._method else None
        return f"ApiCall(method={method!r}, endpoint={self._endpoint!r})"


class ApiCallHandler(Generic[T]):
    """Limited access to an ApiCall: it can be run, not reconfigured."""

    __slots__ = ("_call",)

    def __init__(self, call: ApiCall[T]):
        self._call = call

    async def execute(self, json: bool = True) -> Resource[T]:
        return await self._call.execute(json=json)

    def watch(self, json: bool = True) -> AsyncIterator[Resource[T]]:
        return self._call.watch(json=json)
