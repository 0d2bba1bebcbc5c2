"""Runtime settings for flow2docker.

Settings cover how the tool runs (logging, how to reach the bootstrap
resolver), not what it builds; build requests are ``ParameterSet`` values.
Every field can be overridden with a ``FLOW2DOCKER_``-prefixed environment
variable or a ``.env`` file in the working directory.

Examples:
    >>> from flow2docker.core.settings import Flow2DockerSettings
    >>> Flow2DockerSettings(bootstrap_command="java -jar bootstrap.jar").bootstrap_argv()
    ['java', '-jar', 'bootstrap.jar']

Tags:
    settings, configuration, pydantic, environment, flow2docker
"""

from __future__ import annotations

import shlex
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from flow2docker.core.errors import SettingsError


class Flow2DockerSettings(BaseSettings):
    """Settings shared by the CLI and the build pipeline.

    Fields
    ──────
    log_level          : Structlog log level
    log_json           : JSON log lines (None = auto, JSON when not a tty)
    bootstrap_command  : Command line that launches the bootstrap resolver
    clean_libraries    : Ask the resolver to clean the library directory first
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOW2DOCKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Resolver ─────────────────────────────────────────────────
    bootstrap_command: str = Field(
        default="adams-bootstrap",
        description="Command used to invoke the dependency bootstrap tool",
    )
    clean_libraries: bool = True

    def bootstrap_argv(self) -> list[str]:
        """Split ``bootstrap_command`` using shell rules."""
        argv = shlex.split(self.bootstrap_command)
        if not argv:
            raise SettingsError("FLOW2DOCKER_BOOTSTRAP_COMMAND must not be empty")
        return argv


@lru_cache(maxsize=1)
def get_settings() -> Flow2DockerSettings:
    """Return the process-wide settings instance."""
    return Flow2DockerSettings()


__all__ = ["Flow2DockerSettings", "get_settings"]
