"""
Build-context staging for ADAMS workflow images.

Quick start::

    from flow2docker.build import BuildPipeline, BootstrapResolver, ParameterSet

    params = ParameterSet(
        modules="adams-core",
        version="20.1.1",
        workflow=Path("train.flow"),
        base_image="openjdk:11-jdk-slim-buster",
        output_dir=Path("build"),
    )
    result = BuildPipeline(params, resolver=BootstrapResolver()).run()
"""

from flow2docker.build.layout import StagedOutput
from flow2docker.build.manifest import ManifestBuilder, render_manifest
from flow2docker.build.params import ParameterSet, Toolchain
from flow2docker.build.pipeline import BuildPipeline, BuildState
from flow2docker.build.resolver import BootstrapResolver, DependencyResolver, ResolutionRequest
from flow2docker.build.stages import ConfigEmitter, DependencyStager, WorkloadStager

__all__ = [
    "BootstrapResolver",
    "BuildPipeline",
    "BuildState",
    "ConfigEmitter",
    "DependencyResolver",
    "DependencyStager",
    "ManifestBuilder",
    "ParameterSet",
    "ResolutionRequest",
    "StagedOutput",
    "Toolchain",
    "WorkloadStager",
    "render_manifest",
]
