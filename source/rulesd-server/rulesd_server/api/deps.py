"""API dependencies and exception handlers."""

import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from rulesd_core.rules import EngineNotInitializedError, RuleEngine, RuleNotFoundError
from rulesd_server.models import ErrorResponse

logger = logging.getLogger(__name__)

class RulesdException(Exception):
    """Base exception for rules.d Server."""

    def __init__(
        self,
        error_code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ServiceUnavailableError(RulesdException):
    """Service unavailable error."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(
            error_code="SERVICE_UNAVAILABLE",
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


def get_engine(request: Request) -> RuleEngine:
    """Get the initialized rule engine of the application."""
    engine: RuleEngine | None = getattr(request.app.state, "engine", None)
    if engine is None or not engine.is_initialized:
        raise ServiceUnavailableError("Rule engine not initialized")
    return engine


def _error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Setup global exception handlers for the FastAPI app.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(RulesdException)
    async def rulesd_exception_handler(
        request: Request,
        exc: RulesdException,
    ) -> JSONResponse:
        """Handle rules.d server exceptions."""
        return _error_response(exc.status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(RuleNotFoundError)
    async def rule_not_found_handler(
        request: Request,
        exc: RuleNotFoundError,
    ) -> JSONResponse:
        """Translate unknown rule ids to 404."""
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            "RULE_NOT_FOUND",
            str(exc),
            {"rule_id": exc.rule_id},
        )

    @app.exception_handler(EngineNotInitializedError)
    async def engine_not_initialized_handler(
        request: Request,
        exc: EngineNotInitializedError,
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SERVICE_UNAVAILABLE",
            str(exc),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            {"error": str(exc)} if str(exc) else None,
        )


async def request_id_middleware(request: Request, call_next):
    """Middleware to generate or echo request IDs.

    Args:
        request: FastAPI request object.
        call_next: Next middleware/handler in chain.

    Returns:
        Response with X-Request-ID header.
    """
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response
