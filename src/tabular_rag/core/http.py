"""
Service HTTP Helpers

Shared request plumbing for the Ollama-backed clients. Every failure is
mapped onto one of three ServiceError subclasses:

- ServiceUnavailableError : the server could not be reached
- ServiceStatusError      : the server answered with a non-2xx status
- ServiceProtocolError    : the body was not JSON or did not match its schema
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import ServiceProtocolError, ServiceStatusError, ServiceUnavailableError

logger = logging.getLogger("tabular_rag.http")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _error_detail(response: httpx.Response) -> str:
    # Ollama reports failures as {"error": "..."}
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.text[:200]


async def request_json(
    method: str,
    url: str,
    schema: Type[SchemaT],
    *,
    payload: Optional[dict] = None,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SchemaT:
    """
    Issue one HTTP request and validate the JSON reply against `schema`.

    Raises
    ------
    ServiceUnavailableError
        On connection failures and timeouts.
    ServiceStatusError
        On non-success HTTP status codes.
    ServiceProtocolError
        If the body is not JSON or does not validate.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.request(method, url, json=payload)
    except httpx.TransportError as exc:
        logger.error(
            "Request to %s failed (%s): %s",
            url,
            type(exc).__name__,
            str(exc),
        )
        raise ServiceUnavailableError(
            f"Could not reach {url} ({type(exc).__name__}). Is Ollama running?"
        ) from exc

    if response.is_error:
        detail = _error_detail(response)
        logger.error(
            "Request to %s returned HTTP %d: %s",
            url,
            response.status_code,
            detail,
        )
        raise ServiceStatusError(
            f"{url} returned HTTP {response.status_code}: {detail}",
            http_status=response.status_code,
        )

    try:
        data: Any = response.json()
    except ValueError as exc:
        raise ServiceProtocolError(f"{url} returned a non-JSON body.") from exc

    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise ServiceProtocolError(
            f"{url} returned an unexpected payload: {exc.error_count()} validation error(s)"
        ) from exc
