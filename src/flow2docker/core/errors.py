"""
Structured error types for flow2docker.

Every failure that can end a build is a ``Flow2DockerError`` carrying a
category, a structured context and (optionally) the underlying exception
that caused it. Stages never raise these for expected failures; they wrap
them in ``Err`` and hand them back to the pipeline.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                    Flow2DockerError                        │
        │             (category, context, cause)                     │
        ├───────────────────────────────────────────────────────────┤
        │  InvalidParameterError   DependencyResolutionError        │
        │  (VALIDATION, .field)    (DEPENDENCY)                     │
        │                                                           │
        │  IoFailureError                                           │
        │  (STORAGE, .source / .destination)                        │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> error = IoFailureError("Failed to write Dockerfile")
    >>> error.category.value
    'STORAGE'
    >>> error.with_context(stage="build_manifest").context.stage
    'build_manifest'

Tags:
    error-handling, exception-hierarchy, error-context, flow2docker
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification in logs."""

    VALIDATION = "VALIDATION"  # Bad or missing build parameters
    DEPENDENCY = "DEPENDENCY"  # Resolver collaborator failures
    STORAGE = "STORAGE"  # Local read/write/copy failures
    CONFIG = "CONFIG"  # Invalid runtime settings
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        stage: Pipeline stage that produced the error
        path: File or directory the error is about
        metadata: Additional key-value pairs
    """

    stage: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("stage", "path"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class Flow2DockerError(Exception):
    """
    Base exception for all flow2docker errors.

    Subclasses set ``default_category``. ``message`` is the single
    human-readable line reported to the operator; ``str(error)`` returns it.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> Flow2DockerError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(IoFailureError("...").with_context(stage="emit_config"))
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
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


class InvalidParameterError(Flow2DockerError):
    """
    A build parameter is missing or invalid.

    Raised before any side effect occurs, so nothing has been written when
    a caller sees it. ``field`` names the offending parameter.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(self, field_name: str, message: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field = field_name
        self.context.metadata.setdefault("field", field_name)


class DependencyResolutionError(Flow2DockerError):
    """The resolver collaborator reported a failure."""

    default_category = ErrorCategory.DEPENDENCY


class IoFailureError(Flow2DockerError):
    """A local read, write or copy did not complete."""

    default_category = ErrorCategory.STORAGE

    def __init__(
        self,
        message: str,
        *,
        source: Path | str | None = None,
        destination: Path | str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.source = str(source) if source is not None else None
        self.destination = str(destination) if destination is not None else None
        if self.source is not None:
            self.context.metadata.setdefault("source", self.source)
        if self.destination is not None:
            self.context.path = self.context.path or self.destination


class SettingsError(Flow2DockerError):
    """Runtime settings could not be applied (e.g. an empty bootstrap command)."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "Flow2DockerError",
    "InvalidParameterError",
    "DependencyResolutionError",
    "IoFailureError",
    "SettingsError",
]
