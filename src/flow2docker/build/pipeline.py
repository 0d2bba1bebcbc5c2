"""Build pipeline: resolve → stage workload → emit config → build manifest.

``BuildPipeline`` drives an explicit state machine. Each working state maps
to one stage function; a stage returning ``Ok`` advances to the next state,
a stage returning ``Err`` moves straight to ``FAILED`` and nothing after it
runs. Files written by earlier stages are left in place.

Key Concepts:
    BuildState: RESOLVE, STAGE_WORKLOAD, EMIT_CONFIG, BUILD_MANIFEST,
        SUCCESS, FAILED.
    BuildPipeline: ``run()`` returns the ``BuildResult`` of the run. The
        terminal error (if any) is logged once at error level.
    build_instructions(): Operator text printed after a successful run.

Example::

    pipeline = BuildPipeline(params, resolver=BootstrapResolver())
    result = pipeline.run()
    if result.is_ok():
        print(pipeline.success_message)

Related Modules:
    - :mod:`flow2docker.build.stages`: resolve, workload and config stages
    - :mod:`flow2docker.build.manifest`: manifest stage
    - :mod:`flow2docker.cli.app`: maps the result to exit codes

Tags:
    pipeline, state-machine, fail-fast, orchestration
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path

from flow2docker.build.layout import StagedOutput
from flow2docker.build.manifest import ManifestBuilder
from flow2docker.build.params import ParameterSet
from flow2docker.build.resolver import DependencyResolver
from flow2docker.build.stages import ConfigEmitter, DependencyStager, WorkloadStager
from flow2docker.core.errors import Flow2DockerError
from flow2docker.core.logging import LogContext, get_logger
from flow2docker.core.result import BuildResult, Err, ok

logger = get_logger(__name__)


class BuildState(str, Enum):
    """States of a pipeline run."""

    RESOLVE = "resolve"
    STAGE_WORKLOAD = "stage_workload"
    EMIT_CONFIG = "emit_config"
    BUILD_MANIFEST = "build_manifest"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (BuildState.SUCCESS, BuildState.FAILED)


NEXT_STATE: dict[BuildState, BuildState] = {
    BuildState.RESOLVE: BuildState.STAGE_WORKLOAD,
    BuildState.STAGE_WORKLOAD: BuildState.EMIT_CONFIG,
    BuildState.EMIT_CONFIG: BuildState.BUILD_MANIFEST,
    BuildState.BUILD_MANIFEST: BuildState.SUCCESS,
}

StageHandler = Callable[[], BuildResult]


def build_instructions(output_dir: Path) -> str:
    """How to build the image from the staged output directory."""
    return (
        "\n"
        "You can compile the Docker image now as follows:\n"
        f"cd {output_dir}\n"
        "[sudo] docker build -t <imagename> .\n"
    )


class BuildPipeline:
    """Runs the four build stages in order and stops at the first failure.

    Parameters
    ----------
    params
        Validated build request.
    resolver
        Dependency resolver collaborator.
    clean
        Whether the resolver should clean the library directory first.
    """

    def __init__(
        self,
        params: ParameterSet,
        resolver: DependencyResolver,
        *,
        clean: bool = True,
        dependency_stager: DependencyStager | None = None,
        workload_stager: WorkloadStager | None = None,
        config_emitter: ConfigEmitter | None = None,
        manifest_builder: ManifestBuilder | None = None,
    ) -> None:
        self.params = params
        self.layout = StagedOutput(params.output_dir)
        self.dependency_stager = dependency_stager or DependencyStager(resolver, clean=clean)
        self.workload_stager = workload_stager or WorkloadStager()
        self.config_emitter = config_emitter or ConfigEmitter()
        self.manifest_builder = manifest_builder or ManifestBuilder()

        self.state = BuildState.RESOLVE
        self.visited: list[BuildState] = []
        self.error: Flow2DockerError | None = None

    def handlers(self) -> dict[BuildState, StageHandler]:
        """Stage function for every non-terminal state."""
        params = self.params
        return {
            BuildState.RESOLVE: lambda: self.dependency_stager.stage(params),
            BuildState.STAGE_WORKLOAD: lambda: self.workload_stager.stage(
                params.workflow, params.output_dir
            ),
            BuildState.EMIT_CONFIG: lambda: self.config_emitter.emit(params.output_dir),
            BuildState.BUILD_MANIFEST: lambda: self.manifest_builder.build(
                params, params.output_dir
            ),
        }

    def run(self) -> BuildResult:
        """Execute all stages. Returns ``Ok(None)`` or the first ``Err``."""
        handlers = self.handlers()
        self.state = BuildState.RESOLVE
        self.visited = []
        self.error = None
        result: BuildResult = ok()

        with LogContext(output_dir=str(self.params.output_dir)):
            while not self.state.is_terminal:
                stage = self.state
                self.visited.append(stage)
                logger.info("pipeline.stage.started", stage=stage.value)

                result = handlers[stage]()
                if result.is_err():
                    self.error = self._stage_error(stage, result)
                    self.state = BuildState.FAILED
                    logger.error("pipeline.failed", **self.error.to_dict())
                    return Err(self.error)

                logger.info("pipeline.stage.completed", stage=stage.value)
                self.state = NEXT_STATE[stage]

            logger.info("pipeline.succeeded")
        return result

    @property
    def success_message(self) -> str | None:
        """Operator instructions, available once the run has succeeded."""
        if self.state is not BuildState.SUCCESS:
            return None
        return build_instructions(self.params.output_dir)

    @property
    def failed_stage(self) -> BuildState | None:
        """The stage that ended the run in ``FAILED``, if any."""
        if self.state is not BuildState.FAILED:
            return None
        return self.visited[-1]

    @staticmethod
    def _stage_error(stage: BuildState, result: Err[None]) -> Flow2DockerError:
        error = result.error
        if not isinstance(error, Flow2DockerError):
            error = Flow2DockerError(str(error), cause=error)
        if error.context.stage is None:
            error.with_context(stage=stage.value)
        return error


__all__ = ["BuildState", "BuildPipeline", "NEXT_STATE", "build_instructions"]
