from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class JiraError(Exception):
    """Base class for every failure that aborts an issue fetch."""

    kind = "JiraError"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class InvalidInputError(JiraError, ValueError):
    """Malformed caller input, e.g. a browse URL without a /browse segment."""

    kind = "InvalidInput"
    http_status = 400


class UnsupportedServerError(JiraError):
    """The server-info probe did not answer OK."""

    kind = "UnsupportedServer"


class QueryFailedError(JiraError):
    """The search request was answered with a non-OK status."""

    kind = "QueryFailed"

    def __init__(self, message: str, status_code: Optional[int] = None, messages: Optional[List[str]] = None):
        self.messages: List[str] = list(messages or [])
        super().__init__(message, status_code=status_code, details={"messages": self.messages} if self.messages else None)


class MalformedResponseError(QueryFailedError):
    """The search answered OK but the body is not the expected JSON document."""


class ConnectivityError(JiraError):
    """Transport level failure: refused connection, timeout, broken proxy."""

    kind = "Connectivity"
    http_status = 504


class NoMatchingIssuesError(JiraError):
    """None of the downloaded issues carries a fix version with the configured prefix."""

    kind = "NoMatchingIssues"
    http_status = 404


class ErrorResponse(BaseModel):
    """Standard API error response."""
    error: str = Field(..., description="Short error type")
    message: str = Field(..., description="Human readable error message")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Optional extra details")


def _error_json(error: str, message: str, status_code: int, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message, details=details).model_dump(),
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(_: Request, exc: HTTPException):
        return _error_json("HTTPException", str(exc.detail), exc.status_code)

    @app.exception_handler(JiraError)
    async def jira_error_handler(_: Request, exc: JiraError):
        logger.warning("%s: %s", exc.kind, exc.message)
        details: Dict[str, Any] = {}
        if exc.status_code is not None:
            details["upstream_status"] = exc.status_code
        if isinstance(exc.details, dict):
            details.update(exc.details)
        return _error_json(exc.kind, exc.message, exc.http_status, details or None)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return _error_json("InternalServerError", "An unexpected error occurred", 500)
