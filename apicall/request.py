"""
Immutable description of a single HTTP request.
"""

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from .types import HttpMethod, ResponseParseFunction


def strip_nulls(mapping: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of mapping without the entries whose value is None."""
    if not mapping:
        return {}
    return {key: value for key, value in mapping.items() if value is not None}


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Snapshot of an ApiCall's configuration, ready to be executed.

    params and headers are read-only views over private copies. A mapping
    body is deep-copied, so later changes to the caller's (nested) dicts
    never reach the request.
    """

    method: HttpMethod
    endpoint: str
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Mapping[str, Any] | str | None = None
    parser: ResponseParseFunction | None = None

    # Checked against the raw body when no parser is given
    expected_type: type | None = None

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        if isinstance(self.body, Mapping):
            object.__setattr__(self, "body", copy.deepcopy(dict(self.body)))
