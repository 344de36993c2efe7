"""Logging configuration and management for the Totali application.

This module provides the logging system used across the backend:
- Structured logging with JSON formatting (python-json-logger)
- Correlation ID tracking across requests
- Request/response logging middleware
- A performance monitoring decorator for endpoint timing

Usage:
    logger = get_logger(__name__)
    logger.info("Items fetched", user_id=user.id, count=len(items))
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Any, Dict, Optional

from fastapi import Request, Response
from pythonjsonlogger import jsonlogger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from totali.core.config import Settings, get_settings

# Context variable for correlation ID
correlation_id: ContextVar[str] = ContextVar('correlation_id', default='')

# Attributes owned by logging.LogRecord; extra fields must not overwrite them.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


class StructuredLogger:
    """Thin wrapper that attaches structured fields to every record."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _build_extra(self, fields: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        settings = get_settings()
        extra = {
            'service': settings.APP_NAME,
            'environment': settings.ENVIRONMENT.value,
            'correlation_id': correlation_id.get(),
        }
        for key, value in (fields or {}).items():
            extra[f'field_{key}' if key in _RESERVED_ATTRS else key] = value
        return extra

    def info(self, message: str, **kwargs):
        self.logger.info(message, extra=self._build_extra(kwargs))

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, extra=self._build_extra(kwargs))

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, extra=self._build_extra(kwargs))

    def error(self, message: str, error: Optional[BaseException] = None, **kwargs):
        """Log error level message with optional exception details."""
        if error is not None:
            kwargs.update({
                'error_type': error.__class__.__name__,
                'error_message': str(error),
            })
        self.logger.error(
            message,
            extra=self._build_extra(kwargs),
            exc_info=error if error is not None else None,
        )


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to handle correlation ID for request tracking."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        token = correlation_id.set(
            request.headers.get('X-Correlation-ID', str(uuid.uuid4()))
        )
        try:
            response = await call_next(request)
            response.headers['X-Correlation-ID'] = correlation_id.get()
            return response
        finally:
            correlation_id.reset(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging request and response details."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint
    ) -> Response:
        logger = get_logger('totali.http')
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=dict(request.query_params),
            client_host=request.client.host if request.client else None
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=e,
                method=request.method,
                path=request.url.path,
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
            )
            raise

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
        )
        return response


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = record.created
        log_record['level'] = record.levelname
        log_record['logger'] = record.name


def setup_logging(settings: Optional[Settings] = None):
    """Configure root logging for the application."""
    settings = settings or get_settings()
    debug = settings.DEBUG or settings.FEATURES.ENABLE_DEBUG_LOGGING
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        handler.setFormatter(CustomJsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # SQL echo is controlled by DB.SQL_ECHO, keep the engine logger quiet otherwise
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DB.SQL_ECHO else logging.WARNING
    )


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


def monitor_performance(name: str = None):
    """Decorator for monitoring async function performance."""
    def decorator(func):
        @wraps(func)
        async def wrapped(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.perf_counter()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Function {name or func.__name__} failed",
                    error=e,
                    process_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
                )
                raise

            logger.info(
                f"Function {name or func.__name__} completed",
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
            )
            return result

        return wrapped
    return decorator
