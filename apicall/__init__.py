"""
apicall - fluent HTTP calls that always end in a Resource.

Usage:
    from apicall import ApiCall, create_client

    async with create_client() as client:
        resource = await (
            ApiCall(client)
            .post("/items")
            .body_json({"name": "pen", "color": None})
            .parse_with(lambda json: json["id"])
            .execute()
        )

    resource.when(
        success=lambda item_id: print("created", item_id),
        error=lambda message: print("rejected:", message),
        otherwise=lambda: print("something went wrong"),
    )
"""

from .call import ApiCall, ApiCallHandler
from .config import configure_logging, create_client, load_config
from .errors import (
    ApiCallError,
    CastError,
    ConfigurationError,
    EmptyErrorResponse,
    UnrecognizedErrorResponse,
)
from .executor import execute_request
from .request import RequestDescriptor, strip_nulls
from .resource import Empty, Error, ExceptionState, Loading, Resource, ResourceStatus, Success
from .types import ContentType, HttpMethod, Json, ResponseParseFunction

__all__ = [
    "ApiCall",
    "ApiCallHandler",
    "ApiCallError",
    "CastError",
    "ConfigurationError",
    "ContentType",
    "Empty",
    "EmptyErrorResponse",
    "Error",
    "ExceptionState",
    "HttpMethod",
    "Json",
    "Loading",
    "RequestDescriptor",
    "Resource",
    "ResourceStatus",
    "ResponseParseFunction",
    "Success",
    "UnrecognizedErrorResponse",
    "configure_logging",
    "create_client",
    "execute_request",
    "load_config",
    "strip_nulls",
]
