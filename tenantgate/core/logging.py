"""
TenantGate - Logging Infrastructure

This module provides structured logging with support for:
- JSON formatted logs for production
- Text formatted logs for development
- Context binding for request tracing
- Security audit events for authorization decisions
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

from tenantgate.core.config import get_settings

# Context variables for request tracing
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
actor_id_context: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)


def add_context_variables(
    logger: logging.Logger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Add request_id and actor_id from context variables to every log entry.
    """
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id

    actor_id = actor_id_context.get()
    if actor_id:
        event_dict["actor_id"] = actor_id

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
    return level_map.get(settings.LOG_LEVEL.upper(), logging.INFO)


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
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

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
        >>> log.info("scope_built", actor_id="u-1", scope="organization")
    """
    return structlog.get_logger(name)


class SecurityLogger:
    """
    Audit logger for authorization decisions.

    Denials are expected, policy-driven outcomes and are recorded as
    security events at warning level. Misconfigurations are application
    errors and are recorded at error level with full context.
    """

    def __init__(self, name: str = "security.audit"):
        self.log = get_logger(name)

    def log_access_denied(
        self,
        actor_id: Optional[str],
        reason: str,
        resource: str,
        action: str = "access",
        **kwargs: Any,
    ) -> None:
        """Log a policy denial."""
        self.log.warning(
            "access_denied",
            actor_id=actor_id,
            reason=reason,
            resource=resource,
            action=action,
            **kwargs
        )

    def log_tenant_isolation_violation(
        self,
        actor_id: str,
        actor_organization: Optional[str],
        target_organization: Optional[str],
        resource: str,
    ) -> None:
        """Log an attempt to reach across an organization boundary."""
        self.log.warning(
            "tenant_isolation_violation",
            actor_id=actor_id,
            actor_organization=actor_organization,
            target_organization=target_organization,
            resource=resource,
        )

    def log_role_assignment_denied(
        self,
        actor_id: str,
        assigner_role: str,
        target_user_id: str,
        requested_role: str,
    ) -> None:
        """Log a refused role grant."""
        self.log.warning(
            "role_assignment_denied",
            actor_id=actor_id,
            assigner_role=assigner_role,
            target_user_id=target_user_id,
            requested_role=requested_role,
        )

    def log_misconfiguration(
        self,
        actor_id: Optional[str],
        error: Exception,
        resource: str,
        **kwargs: Any,
    ) -> None:
        """Log a data-integrity or programming error that blocked a request."""
        self.log.error(
            "authorization_misconfigured",
            actor_id=actor_id,
            resource=resource,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs
        )


security_logger = SecurityLogger()
