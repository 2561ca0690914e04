"""
Structured error types for wallticker.

A ticker has very few ways to fail. Most of what looks like failure is
absorbed by design: drift and clock adjustments are handled by the boundary
detector, and a slow consumer simply loses ticks. What remains are caller
mistakes, and those are raised as typed errors carrying enough context to
log and act on.

Manifesto:
    - **Typed Error Hierarchy:** Configuration mistakes and stream misuse
      are different exceptions
    - **Rich Context:** Errors carry the ticker name, period and accuracy
    - **Error Chaining:** Preserve original exceptions while adding context
    - **No Retry Semantics:** Nothing here is transient; fix the caller

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       TickerError                                │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError               StreamClosedError                     │
        │  (CONFIG)                  (STATE)                               │
        │       │                                                          │
        │  InvalidConfigError                                              │
        │  (key, value)                                                    │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidConfigError("accuracy", 90, "accuracy must be less than period")
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.with_context(ticker="minutely").to_dict()["context"]
    {'ticker': 'minutely', 'key': 'accuracy', 'value': '90'}

Tags:
    error-handling, exception-hierarchy, error-context, wallticker

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing.

    - **CONFIG:** Invalid period/accuracy; never recoverable at runtime
    - **STATE:** Operation not valid in the ticker or stream's current state
    - **INTERNAL:** Anything else
    """

    CONFIG = "CONFIG"
    STATE = "STATE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        ticker: Name of the ticker the error relates to
        period: Configured period, as given by the caller
        accuracy: Configured accuracy, as given by the caller
        metadata: Additional key-value pairs
    """

    ticker: str | None = None
    period: Any = None
    accuracy: Any = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["ticker", "period", "accuracy"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value if isinstance(value, str) else str(value)
        if self.metadata:
            result.update(self.metadata)
        return result


class TickerError(Exception):
    """
    Base exception for all wallticker errors.

    Subclasses set ``default_category``; callers may override it per
    instance. Context can be attached fluently with :meth:`with_context`.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TickerError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ConfigError("bad period").with_context(ticker="minutely")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TickerError):
    """
    Configuration error.

    Raised at construction time; the ticker is never started.
    """

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(
        self,
        key: str,
        value: Any,
        message: str | None = None,
        *,
        cause: Exception | None = None,
    ):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", cause=cause)
        self.context.metadata["key"] = key
        self.context.metadata["value"] = str(value)


# =============================================================================
# STATE ERRORS
# =============================================================================


class StreamClosedError(TickerError):
    """Read from a tick stream that has been closed and drained."""

    default_category = ErrorCategory.STATE

    def __init__(self, message: str = "tick stream is closed"):
        super().__init__(message)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TickerError",
    "ConfigError",
    "InvalidConfigError",
    "StreamClosedError",
]
