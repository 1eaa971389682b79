"""
Shared types for building requests.
"""

from enum import Enum
from typing import Any, Callable, TypeVar

T = TypeVar("T")

Json = dict[str, Any]

# Receives the decoded response body (usually a Json mapping)
ResponseParseFunction = Callable[[Any], T]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class ContentType(str, Enum):
    JSON = "application/json; charset=utf-8"
    TEXT = "text/plain; charset=utf-8"

    @classmethod
    def for_json(cls, json: bool) -> "ContentType":
        return cls.JSON if json else cls.TEXT
