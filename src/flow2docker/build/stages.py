"""Staging steps that fill the output directory.

Each stager performs one side effect and reports it as a ``BuildResult``.
Expected failures come back as ``Err``; nothing here raises for them.

Key Concepts:
    DependencyStager: Delegates to a ``DependencyResolver`` and checks that
        ``target/lib`` ended up populated.
    WorkloadStager: Copies the workflow file to ``worker.flow``.
    ConfigEmitter: Writes ``Placeholders.props``.

The manifest step lives in :mod:`flow2docker.build.manifest`.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from flow2docker.build.layout import IMAGE_HOME, IMAGE_TMP_DIR, StagedOutput
from flow2docker.build.params import ParameterSet
from flow2docker.build.resolver import DependencyResolver, ResolutionRequest
from flow2docker.core.errors import DependencyResolutionError, Flow2DockerError, IoFailureError
from flow2docker.core.logging import get_logger
from flow2docker.core.result import BuildResult, Err, ok, try_result

logger = get_logger(__name__)

PLACEHOLDERS: dict[str, str] = {
    "CWD": IMAGE_HOME,
    "TMP": IMAGE_TMP_DIR,
}
"""Placeholder name → in-image path, written to ``Placeholders.props``."""


def _as_resolution_error(error: Exception) -> Flow2DockerError:
    if isinstance(error, Flow2DockerError):
        return error
    return DependencyResolutionError(str(error), cause=error)


class DependencyStager:
    """Populates ``<output>/target/lib`` through the resolver collaborator.

    Resolver errors are passed on unchanged (non-flow2docker exceptions are
    wrapped in ``DependencyResolutionError``). The call is never retried.
    """

    def __init__(self, resolver: DependencyResolver, *, clean: bool = True) -> None:
        self.resolver = resolver
        self.clean = clean

    def stage(self, params: ParameterSet) -> BuildResult:
        request = ResolutionRequest.from_params(params, clean=self.clean)
        result = try_result(lambda: self.resolver.resolve(request)).flat_map(lambda r: r)
        if result.is_err():
            return result.map_err(_as_resolution_error)

        layout = StagedOutput(params.output_dir)
        if not layout.has_libraries():
            return Err(
                DependencyResolutionError(
                    f"Resolver did not populate library directory: {layout.lib_dir}"
                ).with_context(path=str(layout.lib_dir))
            )

        logger.info("dependencies.resolved", lib_dir=str(layout.lib_dir))
        return ok()


class WorkloadStager:
    """Copies the workflow file into the build context as ``worker.flow``."""

    def stage(self, workflow_path: Path, output_dir: Path) -> BuildResult:
        destination = StagedOutput(output_dir).workflow_file
        try:
            shutil.copyfile(workflow_path, destination)
        except shutil.SameFileError:
            logger.info("workload.already_staged", path=str(destination))
            return ok()
        except OSError as exc:
            return Err(
                IoFailureError(
                    f"Failed to copy flow '{workflow_path}' to: {destination}",
                    source=workflow_path,
                    destination=destination,
                    cause=exc,
                )
            )

        logger.info("workload.copied", source=str(workflow_path), destination=str(destination))
        return ok()


def render_placeholders(placeholders: dict[str, str] | None = None) -> str:
    """Render ``key=value`` lines, one per placeholder."""
    placeholders = PLACEHOLDERS if placeholders is None else placeholders
    return "".join(f"{key}={value}\n" for key, value in placeholders.items())


class ConfigEmitter:
    """Writes ``Placeholders.props`` with the in-image working and temp paths."""

    def emit(self, output_dir: Path) -> BuildResult:
        props_file = StagedOutput(output_dir).config_file
        try:
            with open(props_file, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(render_placeholders())
        except OSError as exc:
            return Err(
                IoFailureError(
                    f"Failed to store placeholders in: {props_file}",
                    destination=props_file,
                    cause=exc,
                )
            )

        logger.info("config.written", path=str(props_file))
        return ok()


__all__ = [
    "PLACEHOLDERS",
    "DependencyStager",
    "WorkloadStager",
    "ConfigEmitter",
    "render_placeholders",
]
