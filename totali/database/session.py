"""Database session management for the Totali application.

This module handles database connection management including:
- Async SQLAlchemy engine and session factory
- Connection pooling configuration
- Rollback of failed request sessions
- Slow query logging and simple query metrics
- Tracing of repository operations with OpenTelemetry

A ``SessionManager`` is created once by the application factory and kept on
``app.state``; request handlers obtain sessions through ``get_session``.
"""

import time
from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncGenerator

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool
from starlette.exceptions import HTTPException

from totali.core.config import DatabaseSettings
from totali.core.exceptions import AppException
from totali.core.logging import get_logger
from totali.models.database import Base

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


class DatabaseMetrics:
    """Track database performance metrics."""

    def __init__(self, slow_query_threshold: float = 1.0):
        self.query_count = 0
        self.slow_queries = 0
        self.error_count = 0
        self.slow_query_threshold = slow_query_threshold  # seconds

    def record_query(self, duration: float):
        self.query_count += 1
        if duration > self.slow_query_threshold:
            self.slow_queries += 1

    def record_error(self):
        self.error_count += 1


class SessionManager:
    """Manage database sessions and connections."""

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self.engine = self._create_engine()
        self.session_factory = self._create_session_factory()
        self.metrics = DatabaseMetrics(settings.SLOW_QUERY_THRESHOLD)

        self._setup_engine_events()

    def _create_engine(self) -> AsyncEngine:
        """Create SQLAlchemy engine with proper configuration."""
        if self.settings.is_sqlite:
            return create_async_engine(self.settings.url, echo=self.settings.SQL_ECHO)

        return create_async_engine(
            self.settings.url,
            echo=self.settings.SQL_ECHO,
            pool_size=self.settings.DB_POOL_SIZE,
            max_overflow=self.settings.DB_MAX_OVERFLOW,
            pool_timeout=self.settings.DB_POOL_TIMEOUT,
            pool_recycle=self.settings.DB_POOL_RECYCLE,
            poolclass=AsyncAdaptedQueuePool,
            pool_pre_ping=True,
            connect_args={
                "command_timeout": 60,
                "server_settings": {"application_name": "totali_api"},
            }
        )

    def _create_session_factory(self) -> async_sessionmaker:
        return async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    def _setup_engine_events(self):
        """Set up SQLAlchemy engine event listeners."""
        sync_engine = self.engine.sync_engine

        @event.listens_for(sync_engine, 'before_cursor_execute')
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault('query_start_time', []).append(time.perf_counter())

        @event.listens_for(sync_engine, 'after_cursor_execute')
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            duration = time.perf_counter() - conn.info['query_start_time'].pop()
            self.metrics.record_query(duration)

            if duration > self.metrics.slow_query_threshold:
                logger.warning(
                    "Slow query detected",
                    duration=round(duration, 3),
                    statement=statement
                )

    async def init_models(self):
        """Create tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get database session with automatic cleanup."""
        session: AsyncSession = self.session_factory()
        try:
            yield session
        except (AppException, HTTPException, RequestValidationError):
            # Client errors: roll back quietly
            await session.rollback()
            raise
        except Exception as e:
            self.metrics.record_error()
            logger.error("Session error", error=e)
            await session.rollback()
            raise
        finally:
            await session.close()

    def get_metrics(self) -> dict:
        return {
            "query_count": self.metrics.query_count,
            "slow_queries": self.metrics.slow_queries,
            "error_count": self.metrics.error_count,
        }

    async def healthcheck(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=e)
            return False

    async def dispose(self):
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with request.app.state.db.session() as session:
        yield session


def with_tracing(func):
    """Decorator for database operation tracing."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        with tracer.start_as_current_span(
            f"db_{func.__qualname__}",
            kind=trace.SpanKind.CLIENT
        ) as span:
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise
            span.set_status(Status(StatusCode.OK))
            return result
    return wrapper
