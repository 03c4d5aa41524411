"""
Error Taxonomy and Global Error Handling

This module defines every failure the RAG pipeline can surface, together
with the FastAPI exception handlers that render them.

Design Goals
------------
- One exception class per distinguishable failure
- Stable, machine-readable error codes for API clients
- Service failures keep the underlying transport cause, so callers can tell
  "service not running" from "service returned an error" from "response
  malformed"
- Never leak internal exception details for unexpected errors
"""

from __future__ import annotations

import logging
from typing import Dict, Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("tabular_rag.errors")


# ---------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------

class TabularRagError(Exception):
    """Base class for all pipeline errors."""

    code: str = "tabular_rag_error"
    status_code: int = 500


# ---------------------------------------------------------------------
# Input Errors
# ---------------------------------------------------------------------

class InputError(TabularRagError):
    """Raised when the caller supplies an unusable input location."""

    code = "invalid_input"
    status_code = 400


class PathNotFoundError(InputError):
    """Raised when the ingestion folder does not exist."""

    code = "not_found"
    status_code = 404


class PathNotDirectoryError(InputError):
    """Raised when the ingestion path exists but is not a directory."""

    code = "not_a_directory"
    status_code = 400


class ParseError(TabularRagError):
    """
    Raised when a tabular file cannot be read.

    A parse error on any single file aborts the whole ingestion call.
    """

    code = "parse_error"
    status_code = 422

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f"Failed to parse {filename}: {message}")
        self.filename = filename


# ---------------------------------------------------------------------
# Service (transport) Errors
# ---------------------------------------------------------------------

class ServiceError(TabularRagError):
    """Base error for calls to the embedding / generation service."""

    code = "service_error"
    reason: str = "error"
    status_code = 502


class ServiceUnavailableError(ServiceError):
    """The service could not be reached at all."""

    code = "service_unavailable"
    reason = "unavailable"
    status_code = 503


class ServiceStatusError(ServiceError):
    """The service answered with a non-success HTTP status."""

    code = "service_status_error"
    reason = "http_status"

    def __init__(self, message: str, http_status: Optional[int] = None) -> None:
        super().__init__(message)
        self.http_status = http_status


class ServiceProtocolError(ServiceError):
    """The service answered, but the payload did not match the schema."""

    code = "service_protocol_error"
    reason = "malformed_response"


# ---------------------------------------------------------------------
# Operation Errors
# ---------------------------------------------------------------------

class ServiceOperationError(TabularRagError):
    """
    A pipeline operation failed because of a service error.

    The originating ServiceError is kept as `cause` and decides the
    HTTP status reported to clients.
    """

    code = "service_operation_error"

    def __init__(self, message: str, cause: ServiceError) -> None:
        super().__init__(f"{message}: {cause}")
        self.cause = cause

    @property
    def reason(self) -> str:
        return self.cause.reason

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return self.cause.status_code


class EmbeddingServiceError(ServiceOperationError):
    """Embedding the documents of an index build failed."""

    code = "embedding_failed"


class SearchServiceError(ServiceOperationError):
    """Embedding a query at search time failed."""

    code = "search_failed"


class GenerationServiceError(ServiceOperationError):
    """The chat model could not produce an answer."""

    code = "generation_failed"


# ---------------------------------------------------------------------
# State Errors
# ---------------------------------------------------------------------

class EmptyBatchError(TabularRagError):
    """An index cannot be built from zero documents."""

    code = "empty_batch"
    status_code = 422


class NotIndexedError(TabularRagError):
    """A query was issued before any successful ingestion."""

    code = "not_indexed"
    status_code = 409

    def __init__(self, message: str = "No data has been indexed yet. Please ingest a folder first.") -> None:
        super().__init__(message)


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def rag_exception_handler(
    request: Request,
    exc: TabularRagError,
) -> JSONResponse:
    """
    Render a known pipeline error.

    The message is returned verbatim: these errors are written for the
    caller and never contain stack traces.
    """
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "%s %s failed: %s (%s)",
        request.method,
        request.url.path,
        exc.code,
        exc,
    )

    payload: Dict[str, Any] = {
        "error": exc.code,
        "detail": str(exc),
    }
    if isinstance(exc, ServiceOperationError):
        payload["reason"] = exc.reason

    return JSONResponse(
        status_code=exc.status_code,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full traceback internally and returns a generic 500 with
    no internal details.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
