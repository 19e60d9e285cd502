"""
MemberPortal - Logging Infrastructure

This module provides structured logging with support for:
- JSON formatted logs for production
- Text formatted logs for development
- Context binding for request tracing
- Audit records for administrative actions
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar, ParamSpec

import structlog
from structlog.types import Processor

from memberportal.core.config import get_settings

# Context variables for request tracing
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
organization_id_context: ContextVar[Optional[str]] = ContextVar("organization_id", default=None)

P = ParamSpec("P")
R = TypeVar("R")


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Add context variables to log entries.

    This processor adds request_id and organization_id from
    context variables to every log entry.
    """
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    organization_id = organization_id_context.get()
    if organization_id:
        event_dict["organization_id"] = organization_id

    return event_dict


def get_log_level(settings: Any) -> int:
    """Convert string log level to logging constant."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(settings.log_level.upper(), logging.INFO)


def get_processors(settings: Any) -> list[Processor]:
    """Get structlog processors based on settings."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_variables,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return processors


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    This should be called once at application startup.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=get_log_level(settings),
    )

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        A structlog BoundLogger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("registration_assigned", user_uuid="0f6c...")
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for setting log context variables.

    Example:
        >>> with LogContext(request_id="req-123", organization_id="1"):
        ...     log.info("listing_registrations")
    """

    def __init__(
        self,
        request_id: Optional[str] = None,
        organization_id: Optional[str] = None,
    ):
        self.request_id = request_id
        self.organization_id = organization_id
        self._tokens: list = []

    def __enter__(self) -> "LogContext":
        if self.request_id:
            self._tokens.append((request_id_context, request_id_context.set(self.request_id)))
        if self.organization_id:
            self._tokens.append(
                (organization_id_context, organization_id_context.set(self.organization_id))
            )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()


def log_execution_time(
    log: structlog.stdlib.BoundLogger,
    operation: str,
    **extra_fields: Any
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to log execution time of a function.

    Args:
        log: Logger instance
        operation: Name of the operation being timed
        **extra_fields: Additional fields to include in the log

    Example:
        >>> @log_execution_time(log, "query_sql_file")
        ... def query_sql_file(ctx, filename):
        ...     ...
    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.perf_counter() - start_time) * 1000
                log.info(
                    f"{operation}_completed",
                    duration_ms=round(duration_ms, 2),
                    success=True,
                    **extra_fields
                )
                return result
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                log.error(
                    f"{operation}_failed",
                    duration_ms=round(duration_ms, 2),
                    success=False,
                    error=str(e),
                    error_type=type(e).__name__,
                    **extra_fields
                )
                raise
        return wrapper
    return decorator


class AuditLogger:
    """
    Audit trail for administrative actions.

    Records who approved or removed a registration and which
    installation scripts were replayed against the database.
    """

    def __init__(self) -> None:
        self.log = get_logger("audit")

    def log_registration_assigned(self, actor_id: str, user_uuid: str, organization_id: int) -> None:
        """Log approval of a pending registration."""
        self.log.info(
            "registration_assigned",
            actor_id=actor_id,
            user_uuid=user_uuid,
            organization_id=organization_id,
        )

    def log_registration_deleted(self, actor_id: str, user_uuid: str, organization_id: int) -> None:
        """Log removal of a pending registration."""
        self.log.info(
            "registration_deleted",
            actor_id=actor_id,
            user_uuid=user_uuid,
            organization_id=organization_id,
        )

    def log_sql_script_applied(self, filename: str, statement_count: int) -> None:
        self.log.info(
            "sql_script_applied",
            filename=filename,
            statement_count=statement_count,
        )

    def log_unauthorized_access(self, user_id: str, resource: str, action: str) -> None:
        self.log.warning(
            "unauthorized_access",
            user_id=user_id,
            resource=resource,
            action=action,
        )

    def log_login_failure(self, login_name: str, ip_address: str, reason: str) -> None:
        self.log.warning(
            "login_failed",
            login_name=login_name,
            ip_address=ip_address,
            reason=reason,
        )


audit_logger = AuditLogger()
