"""Dependency resolution collaborator.

The resolver turns modules, a version and extra dependencies into a
populated ``target/lib`` directory beneath the output directory. This
package never resolves anything itself; it talks to a resolver through the
``DependencyResolver`` protocol so tests can swap in a fake.

Key Concepts:
    ResolutionRequest: Everything the resolver needs, as one frozen value.
    DependencyResolver: Protocol with a single ``resolve(request)`` method
        returning ``Ok(None)`` or ``Err(error)``.
    BootstrapResolver: Runs the external bootstrap tool as a subprocess.
        No timeout and no retry; both belong to the tool or the environment.

Related Modules:
    - :mod:`flow2docker.build.stages`: ``DependencyStager`` calls the resolver
    - :mod:`flow2docker.core.settings`: ``bootstrap_command`` and ``clean_libraries``

Tags:
    resolver, bootstrap, subprocess, maven, dependencies
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from flow2docker.build.params import ParameterSet, Toolchain
from flow2docker.core.errors import DependencyResolutionError, SettingsError
from flow2docker.core.logging import get_logger
from flow2docker.core.result import BuildResult, Err, ok
from flow2docker.core.settings import Flow2DockerSettings, get_settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolutionRequest:
    """Inputs for one resolver invocation."""

    modules: tuple[str, ...]
    version: str
    output_dir: Path
    dependencies: tuple[str, ...] = ()
    dependency_files: tuple[Path, ...] = ()
    external_jars: tuple[Path, ...] = ()
    toolchain: Toolchain = field(default_factory=Toolchain)
    clean: bool = True

    @classmethod
    def from_params(cls, params: ParameterSet, *, clean: bool = True) -> ResolutionRequest:
        return cls(
            modules=params.modules,
            version=params.version,
            output_dir=params.output_dir,
            dependencies=params.dependencies,
            dependency_files=params.dependency_files,
            external_jars=params.external_jars,
            toolchain=params.toolchain,
            clean=clean,
        )


@runtime_checkable
class DependencyResolver(Protocol):
    """Populates the library directory for a request."""

    def resolve(self, request: ResolutionRequest) -> BuildResult:
        """Return ``Ok(None)`` on success or ``Err`` with a descriptive error."""
        ...


class BootstrapResolver:
    """Resolver backed by the external bootstrap command-line tool.

    Parameters
    ----------
    settings
        Supplies ``bootstrap_command``. Defaults to :func:`get_settings`.

    Example::

        resolver = BootstrapResolver()
        result = resolver.resolve(ResolutionRequest.from_params(params))
    """

    def __init__(self, settings: Flow2DockerSettings | None = None) -> None:
        self.settings = settings or get_settings()

    def build_command(self, request: ResolutionRequest) -> list[str]:
        """Assemble the bootstrap command line for ``request``."""
        cmd = list(self.settings.bootstrap_argv())
        toolchain = request.toolchain
        if toolchain.maven_home is not None:
            cmd += ["--maven_home", str(toolchain.maven_home)]
        if toolchain.maven_user_settings is not None:
            cmd += ["--maven_user_settings", str(toolchain.maven_user_settings)]
        if toolchain.java_home is not None:
            cmd += ["--java_home", str(toolchain.java_home)]
        if request.clean:
            cmd.append("--clean")
        cmd += ["--modules", ",".join(request.modules)]
        cmd += ["--version", request.version]
        for dependency in request.dependencies:
            cmd += ["--dependency", dependency]
        for dep_file in request.dependency_files:
            cmd += ["--dependency-file", str(dep_file)]
        for jar in request.external_jars:
            cmd += ["--external-jar", str(jar)]
        cmd += ["--output_dir", str(request.output_dir)]
        return cmd

    def resolve(self, request: ResolutionRequest) -> BuildResult:
        try:
            cmd = self.build_command(request)
        except SettingsError as exc:
            return Err(exc)
        if shutil.which(cmd[0]) is None:
            return Err(
                DependencyResolutionError(
                    f"Bootstrap command not found: {cmd[0]} "
                    "(set FLOW2DOCKER_BOOTSTRAP_COMMAND to point at the bootstrap tool)"
                )
            )

        logger.debug("bootstrap.exec", cmd=" ".join(cmd))
        try:
            completed = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            return Err(
                DependencyResolutionError(
                    f"Failed to launch bootstrap command {cmd[0]}: {exc}", cause=exc
                )
            )

        if completed.returncode != 0:
            details = completed.stderr.strip() or completed.stdout.strip()
            message = f"Bootstrap failed (exit {completed.returncode})"
            if details:
                message += f":\n{details}"
            return Err(
                DependencyResolutionError(message).with_context(
                    returncode=completed.returncode
                )
            )

        logger.debug("bootstrap.done", output=completed.stdout.strip())
        return ok()


__all__ = ["ResolutionRequest", "DependencyResolver", "BootstrapResolver"]
