"""
Executes a RequestDescriptor with httpx and maps the outcome to a Resource.

Mapping:
    2xx with empty body               -> Empty
    2xx with body                     -> Success(parser(body) or body)
    error with {"error": "..."}       -> Error(message)
    error with {"error": {"message"}} -> Error(message)
    error with no body                -> ExceptionState(EmptyErrorResponse)
    error with any other body         -> ExceptionState(UnrecognizedErrorResponse)
    network failure, timeout, ...     -> ExceptionState(original exception)
"""

import json as json_lib
import logging
import traceback
from typing import Any

import httpx

from .errors import CastError, EmptyErrorResponse, UnrecognizedErrorResponse
from .request import RequestDescriptor
from .resource import Resource
from .types import ContentType, HttpMethod

logger = logging.getLogger(__name__)


async def execute_request(
    client: httpx.AsyncClient,
    descriptor: RequestDescriptor,
    json: bool = True,
) -> Resource:
    """
    Send the request and turn whatever happens into exactly one Resource.

    Args:
        client: httpx client used for the call (base_url, timeout, etc. live there)
        descriptor: What to send
        json: Decode the response as JSON (True) or plain text (False).
            Also selects the Content-Type header.

    Returns:
        Success, Error, ExceptionState or Empty. Never raises.
    """
    method = descriptor.method
    endpoint = descriptor.endpoint
    headers = {key: value for key, value in descriptor.headers.items() if key.lower() != "content-type"}
    headers["Content-Type"] = ContentType.for_json(json).value

    logger.debug("%s %s params=%s", method.value, endpoint, dict(descriptor.params))

    try:
        response = await _dispatch(client, descriptor, headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        return _from_error_response(e.response)
    except Exception as e:
        logger.warning("%s %s failed: %s", method.value, endpoint, e)
        return Resource.exception(e)

    try:
        body = _decode_body(response, json)
        if body is None:
            logger.debug("%s %s returned an empty body", method.value, endpoint)
            return Resource.empty()
        if descriptor.parser is not None:
            return Resource.success(descriptor.parser(body))
        if descriptor.expected_type is not None and not isinstance(body, descriptor.expected_type):
            raise CastError(descriptor.expected_type, body)
        return Resource.success(body)
    except Exception as e:
        logger.warning("Could not handle response of %s %s: %s", method.value, endpoint, e)
        return Resource.exception(e)


async def _dispatch(
    client: httpx.AsyncClient,
    descriptor: RequestDescriptor,
    headers: dict[str, str],
) -> httpx.Response:
    method = descriptor.method
    params = dict(descriptor.params)

    if method is HttpMethod.GET:
        return await client.get(descriptor.endpoint, params=params, headers=headers)
    if method is HttpMethod.DELETE:
        return await client.delete(descriptor.endpoint, params=params, headers=headers)

    content = _encode_body(descriptor.body)
    if method is HttpMethod.POST:
        return await client.post(descriptor.endpoint, content=content, params=params, headers=headers)
    if method is HttpMethod.PUT:
        return await client.put(descriptor.endpoint, content=content, params=params, headers=headers)
    if method is HttpMethod.PATCH:
        return await client.patch(descriptor.endpoint, content=content, params=params, headers=headers)

    raise ValueError(f"Unsupported HTTP method: {method}")


def _encode_body(body: dict[str, Any] | str | None) -> str | None:
    if body is None or isinstance(body, str):
        return body
    return json_lib.dumps(body)


def _decode_body(response: httpx.Response, json: bool) -> Any:
    """Decoded body, or None when there is nothing to decode."""
    if not response.content:
        return None
    if json:
        return response.json()
    return response.text


def _from_error_response(response: httpx.Response) -> Resource:
    """Map a non-2xx response. Must be called from inside the except block."""
    stack_trace = traceback.format_exc()
    status_code = response.status_code

    # Error bodies are read as JSON regardless of the json flag
    try:
        body = _decode_body(response, json=True)
    except ValueError:
        body = response.text

    if body is None:
        logger.warning("Request to %s failed with status %d and no body", response.request.url, status_code)
        return Resource.exception(EmptyErrorResponse(status_code), stack_trace)

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, str):
        logger.warning("Request to %s failed with status %d: %s", response.request.url, status_code, error)
        return Resource.error(error)
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        message = error["message"]
        logger.warning("Request to %s failed with status %d: %s", response.request.url, status_code, message)
        return Resource.error(message)

    logger.warning("Request to %s failed with status %d: unrecognized error body", response.request.url, status_code)
    return Resource.exception(UnrecognizedErrorResponse(status_code, body), stack_trace)
