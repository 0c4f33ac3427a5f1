"""
Error handling utilities shared by the routers and the application-level handlers
"""

import uuid
import traceback
import logging
from typing import Optional
from datetime import datetime
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

class ErrorContext:
    """Request details attached to every logged error"""

    def __init__(self, request: Request):
        self.error_id = str(uuid.uuid4())
        self.request = request
        self.endpoint = str(request.url.path)
        self.method = request.method
        self.client_ip = self._get_client_ip()
        self.timestamp = datetime.utcnow()

    def _get_client_ip(self) -> Optional[str]:
        """Extract client IP from request headers"""
        if "x-forwarded-for" in self.request.headers:
            return self.request.headers["x-forwarded-for"].split(",")[0].strip()
        elif "x-real-ip" in self.request.headers:
            return self.request.headers["x-real-ip"]
        elif self.request.client:
            return self.request.client.host
        return None

class DatabaseError(Exception):
    """Custom exception for database-related errors"""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

class PaymentProviderError(Exception):
    """Raised when the payment provider rejects or fails a request"""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

class ErrorHandler:
    """Builds the JSON error bodies returned for unhandled failures"""

    @staticmethod
    def create_error_response(
        error_context: ErrorContext,
        error: Exception,
        status_code: int = 500,
    ) -> JSONResponse:
        ErrorHandler._log_error(error_context, error, status_code)

        return JSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": ErrorHandler._get_error_code(error),
                    "message": ErrorHandler._get_user_friendly_message(error),
                    "error_id": error_context.error_id,
                    "timestamp": error_context.timestamp.isoformat(),
                }
            }
        )

    @staticmethod
    def _get_error_code(error: Exception) -> str:
        if isinstance(error, DatabaseError):
            return "DATABASE_ERROR"
        elif isinstance(error, PaymentProviderError):
            return "PAYMENT_PROVIDER_ERROR"
        else:
            return "INTERNAL_ERROR"

    @staticmethod
    def _get_user_friendly_message(error: Exception) -> str:
        if isinstance(error, DatabaseError):
            return "A database error occurred. Please try again later."
        elif isinstance(error, PaymentProviderError):
            return "The payment provider could not process the request."
        else:
            return "An unexpected error occurred. Please try again later."

    @staticmethod
    def _log_error(error_context: ErrorContext, error: Exception, status_code: int):
        logger.error(
            f"Error {error_context.error_id}: {type(error).__name__} in {error_context.method} {error_context.endpoint}",
            extra={
                "error_id": error_context.error_id,
                "endpoint": error_context.endpoint,
                "method": error_context.method,
                "status_code": status_code,
                "client_ip": error_context.client_ip,
                "error_type": type(error).__name__,
                "error_message": str(error),
                "stack_trace": traceback.format_exc()
            }
        )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request-schema failures as 400 with the individual field errors"""
    logger.info(f"Validation error in {request.method} {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())}
    )
