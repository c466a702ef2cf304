"""
Error handling utilities for the Carousell Watch system.

This module defines the exception taxonomy used across the watcher, an
in-memory error tracker for run diagnostics, and a decorator that records
component failures before re-raising them.
"""

import asyncio
import functools
import traceback
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .logging import get_logger


class WatcherError(Exception):
    """Base class for all errors raised by the watcher."""


class ConfigurationError(WatcherError):
    """Configuration is malformed or incomplete."""


class RuleConfigurationError(ConfigurationError):
    """A rule tree cannot be parsed or evaluated."""


class SourceRenderError(WatcherError):
    """A single source failed to render or navigate."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Failed to render {url}: {message}")
        self.url = url


class NotificationDeliveryError(WatcherError):
    """The notification collaborator failed to deliver a message."""


class StateError(WatcherError):
    """Persisted seen state cannot be read or written."""


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""

    RENDERING = "rendering"
    EXTRACTION = "extraction"
    CONFIGURATION = "configuration"
    NOTIFICATION = "notification"
    STATE = "state"


@dataclass
class ErrorInfo:
    """Information about an error occurrence."""

    timestamp: datetime
    component: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    exception_type: str
    traceback: str
    context: Dict[str, Any]


class ErrorTracker:
    """
    Tracks errors seen during a run.

    The orchestrator reads the tracker to report which sources failed.
    """

    def __init__(self, max_errors: int = 1000):
        """
        Initialize error tracker.

        Args:
            max_errors: Maximum number of errors to keep in memory
        """
        self.max_errors = max_errors
        self.errors: List[ErrorInfo] = []
        self.logger = get_logger("error_tracker")

    def record_error(
        self,
        component: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        message: str,
        exception: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> ErrorInfo:
        """
        Record an error occurrence.

        Args:
            component: Component where error occurred
            category: Error category
            severity: Error severity
            message: Error message
            exception: Exception object if available
            context: Additional context information

        Returns:
            ErrorInfo object
        """
        error_info = ErrorInfo(
            timestamp=datetime.now(),
            component=component,
            category=category,
            severity=severity,
            message=message,
            exception_type=type(exception).__name__ if exception else "Unknown",
            traceback=(
                "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
                if exception
                else ""
            ),
            context=context or {},
        )

        self.errors.append(error_info)
        if len(self.errors) > self.max_errors:
            self.errors.pop(0)

        self.logger.error(
            f"Error recorded: {message}",
            extra={
                "component": component,
                "category": category.value,
                "severity": severity.value,
                "exception_type": error_info.exception_type,
                "context": context,
            },
        )

        return error_info

    def get_errors(self, *categories: ErrorCategory, start: int = 0) -> List[ErrorInfo]:
        """
        Get recorded errors.

        Args:
            categories: Categories to keep; all categories when omitted
            start: Index of the first error to consider
        """
        return [e for e in self.errors[start:] if not categories or e.category in categories]

    def clear(self) -> None:
        """Forget all recorded errors."""
        self.errors.clear()


# Global error tracker instance
_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """Get global error tracker instance."""
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker()
    return _error_tracker


def with_error_handling(
    component: str,
    category: ErrorCategory,
    severity: ErrorSeverity = ErrorSeverity.MEDIUM,
):
    """
    Decorator that records failures in the error tracker and re-raises them.

    Failures are never retried.

    Args:
        component: Component name
        category: Error category
        severity: Error severity
    """

    def decorator(func: Callable) -> Callable:
        def _record(e: Exception) -> None:
            get_error_tracker().record_error(
                component=component,
                category=category,
                severity=severity,
                message=f"Error in {func.__name__}: {str(e)}",
                exception=e,
                context={"function": func.__name__},
            )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                _record(e)
                raise

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _record(e)
                raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
