#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import AIServiceError, ConfigurationError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

AI_UNAVAILABLE_MESSAGE = "AI service is temporarily unavailable"


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class WorkerNotFoundException(ServiceException):
    """Raised when a worker profile is not found."""
    pass


class JobNotFoundException(ServiceException):
    """Raised when a job is not found."""
    pass


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    if isinstance(exc, (WorkerNotFoundException, JobNotFoundException)):
        status_code = 404
        logger.info(f"Not found in {request.url.path}: {exc}")
    else:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def ai_service_exception_handler(
    request: Request,
    exc: AIServiceError
) -> JSONResponse:
    """
    Handle AI layer exceptions.

    Validation errors are the caller's (400) and list the offending fields.
    A missing credential is 503 and a failed remote call is 502; neither
    exposes provider details to the client.
    """
    content = {
        "success": False,
        "error": str(exc),
        "type": exc.__class__.__name__
    }

    if isinstance(exc, ValidationError):
        status_code = 400
        content["fields"] = exc.fields
    elif isinstance(exc, ConfigurationError):
        status_code = 503
        content["error"] = AI_UNAVAILABLE_MESSAGE
        logger.error(f"AI not configured for {request.url.path}: {exc}")
    elif isinstance(exc, UpstreamError):
        status_code = 502
        content["error"] = AI_UNAVAILABLE_MESSAGE
        logger.error(f"Upstream AI failure in {request.url.path}: {exc}")
    else:
        status_code = 500
        logger.error(f"AI service error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(status_code=status_code, content=content)


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Report malformed request bodies as 400s naming the offending fields.
    """
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if loc and loc[0] not in fields:
            fields.append(loc[0])

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "type": "ValidationError",
            "fields": fields
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Args:
        request: The FastAPI request.
        exc: The HTTP exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
