"""Exception handlers for the thread simulator FastAPI application.

This module defines custom exceptions and the handlers that convert them,
and common Python exceptions, into consistent JSON responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


# Custom Exception Classes


class ThreadNotFoundError(Exception):
    """Raised when a route addresses a thread that isn't in the thread list.

    Args:
        thread_id: The requested thread id.
    """

    def __init__(self, thread_id: str):
        self.thread_id = thread_id
        super().__init__(f"Thread '{thread_id}' not found")


class MessageNotFoundError(Exception):
    """Raised when a route addresses a message that isn't in its thread.

    Args:
        thread_id: Thread that was searched.
        message_id: The requested message id.
    """

    def __init__(self, thread_id: str, message_id: str):
        self.thread_id = thread_id
        self.message_id = message_id
        super().__init__(f"Message '{message_id}' not found in thread '{thread_id}'")


class SimulationNotRunningError(Exception):
    """Raised when an operation requires the simulation to be running but it's not.

    Args:
        message: Description of the operation that failed.
    """

    def __init__(self, message: str = "Simulation is not running"):
        self.message = message
        super().__init__(message)


# Exception Handlers


async def thread_not_found_handler(request: Request, exc: ThreadNotFoundError):
    """Return a 404 naming the missing thread."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Thread Not Found",
            "detail": str(exc),
            "thread_id": exc.thread_id,
        },
    )


async def message_not_found_handler(request: Request, exc: MessageNotFoundError):
    """Return a 404 naming the missing message and its thread."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Message Not Found",
            "detail": str(exc),
            "thread_id": exc.thread_id,
            "message_id": exc.message_id,
        },
    )


async def simulation_not_running_handler(request: Request, exc: SimulationNotRunningError):
    """Handle SimulationNotRunningError exceptions.

    Returns a 409 (Conflict) indicating the simulation needs to be started first.

    Args:
        request: The incoming request that triggered the error.
        exc: The SimulationNotRunningError exception.

    Returns:
        JSONResponse with 409 status.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "Simulation Not Running",
            "detail": exc.message,
            "suggestion": "Start the simulation with POST /simulation/start",
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised inside route handlers."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions.

    ValueErrors indicate invalid input values that passed request validation
    but were rejected by the engine (negative delays, duplicate ids, illegal
    delivery transitions).

    Args:
        request: The incoming request that triggered the error.
        exc: The ValueError exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Value",
            "detail": str(exc),
            "type": "ValueError",
        },
    )


async def runtime_error_handler(request: Request, exc: RuntimeError):
    """Handle RuntimeError exceptions."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Runtime Error",
            "detail": str(exc),
            "type": "RuntimeError",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all that keeps stack traces out of responses."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
