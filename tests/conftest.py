"""
Shared pytest fixtures for flow2docker tests.

This module provides:
- A fake resolver that populates ``target/lib`` without Java or Maven
- A ready-to-run workflow file and output directory
- A ``make_params`` factory for valid ``ParameterSet`` values

Usage:
    def test_something(make_params, fake_resolver):
        params = make_params(jvm_options=["-Xmx2g"])
        ...
"""

import sys
from pathlib import Path
from typing import Any, Callable

import pytest
import structlog

# Ensure flow2docker package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from flow2docker.build.layout import LIB_DIR
from flow2docker.build.params import ParameterSet
from flow2docker.build.resolver import ResolutionRequest
from flow2docker.core.errors import DependencyResolutionError
from flow2docker.core.result import BuildResult, Err, ok


class FakeResolver:
    """Records requests and writes a jar into ``target/lib``.

    Set ``error`` to make it fail, ``populate=False`` to make it succeed
    without writing anything.
    """

    def __init__(self, *, error: str | None = None, populate: bool = True) -> None:
        self.error = error
        self.populate = populate
        self.requests: list[ResolutionRequest] = []

    def resolve(self, request: ResolutionRequest) -> BuildResult:
        self.requests.append(request)
        if self.error is not None:
            return Err(DependencyResolutionError(self.error))
        if self.populate:
            lib_dir = request.output_dir / LIB_DIR
            lib_dir.mkdir(parents=True, exist_ok=True)
            (lib_dir / "adams-core-20.1.1.jar").write_bytes(b"PK\x03\x04")
        return ok()


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Each test starts from structlog defaults."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def fake_resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def make_resolver() -> Callable[..., FakeResolver]:
    return FakeResolver


@pytest.fixture
def workflow_file(tmp_path: Path) -> Path:
    path = tmp_path / "input" / "train.flow"
    path.parent.mkdir()
    path.write_text("adams.flow.control.Flow\n -actor\n  adams.flow.source.Start\n")
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def raw_params(workflow_file: Path, output_dir: Path) -> dict[str, Any]:
    return {
        "modules": "adams-core,adams-weka",
        "version": "20.1.1",
        "workflow": workflow_file,
        "base_image": "openjdk:11-jdk-slim-buster",
        "output_dir": output_dir,
    }


@pytest.fixture
def make_params(raw_params: dict[str, Any]) -> Callable[..., ParameterSet]:
    def _make(**overrides: Any) -> ParameterSet:
        return ParameterSet(**{**raw_params, **overrides})

    return _make
