"""
Core primitives shared by the build pipeline and the CLI.

- :mod:`flow2docker.core.errors`: error taxonomy
- :mod:`flow2docker.core.result`: ``Ok`` / ``Err`` envelope
- :mod:`flow2docker.core.logging`: structlog setup
- :mod:`flow2docker.core.settings`: environment-driven settings
"""

from flow2docker.core.errors import (
    DependencyResolutionError,
    ErrorCategory,
    ErrorContext,
    Flow2DockerError,
    InvalidParameterError,
    IoFailureError,
    SettingsError,
)
from flow2docker.core.result import BuildResult, Err, Ok, Result, ok, try_result

__all__ = [
    "DependencyResolutionError",
    "ErrorCategory",
    "ErrorContext",
    "Flow2DockerError",
    "InvalidParameterError",
    "IoFailureError",
    "SettingsError",
    "BuildResult",
    "Err",
    "Ok",
    "Result",
    "ok",
    "try_result",
]
