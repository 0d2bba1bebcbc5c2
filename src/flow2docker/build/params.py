"""Validated build request.

``ParameterSet`` is built once from raw user input and then passed
unchanged to every stage. Required fields are checked in a fixed priority
order and the first problem raises ``InvalidParameterError``:

1. module list
2. version string
3. workflow source file (must exist)
4. base image identifier
5. output directory (must be a writable directory)

Optional fields default to empty tuples or ``None``.

Example::

    params = ParameterSet(
        modules="adams-core,adams-weka",
        version="20.1.1",
        workflow=Path("train.flow"),
        base_image="openjdk:11-jdk-slim-buster",
        output_dir=Path("build"),
    )
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from flow2docker.core.errors import InvalidParameterError


class Toolchain(BaseModel):
    """Alternate toolchain locations handed to the resolver. All optional."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    maven_home: Path | None = None
    maven_user_settings: Path | None = None
    java_home: Path | None = None


def split_modules(raw: Any) -> list[str]:
    """Normalise a comma-separated string or a list of (comma-separated) strings."""
    if raw is None:
        return []
    items = [raw] if isinstance(raw, str) else list(raw)
    modules: list[str] = []
    for item in items:
        for name in str(item).split(","):
            name = name.strip()
            if name:
                modules.append(name)
    return modules


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class ParameterSet(BaseModel):
    """Immutable configuration of one build request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    toolchain: Toolchain = Toolchain()
    modules: tuple[str, ...]
    version: str
    dependencies: tuple[str, ...] = ()
    dependency_files: tuple[Path, ...] = ()
    external_jars: tuple[Path, ...] = ()
    jvm_options: tuple[str, ...] = ()
    workflow: Path
    base_image: str
    instructions: Path | None = None
    output_dir: Path

    @model_validator(mode="before")
    @classmethod
    def _check_required(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        modules = split_modules(data.get("modules"))
        if not modules:
            raise InvalidParameterError("modules", "No modules specified")
        data["modules"] = modules

        if _is_blank(data.get("version")):
            raise InvalidParameterError("version", "No version specified")

        workflow = data.get("workflow")
        if _is_blank(workflow):
            raise InvalidParameterError("workflow", "No workflow file specified")
        if not Path(workflow).is_file():
            raise InvalidParameterError(
                "workflow", f"Workflow file does not exist: {workflow}"
            ).with_context(path=str(workflow))

        if _is_blank(data.get("base_image")):
            raise InvalidParameterError("base_image", "No docker base image specified")

        output_dir = data.get("output_dir")
        if _is_blank(output_dir):
            raise InvalidParameterError("output_dir", "No output directory specified")
        output_path = Path(output_dir)
        if not output_path.exists():
            raise InvalidParameterError(
                "output_dir", f"Output directory does not exist: {output_dir}"
            ).with_context(path=str(output_dir))
        if not output_path.is_dir():
            raise InvalidParameterError(
                "output_dir", f"Output directory is not a directory: {output_dir}"
            ).with_context(path=str(output_dir))
        if not os.access(output_path, os.W_OK):
            raise InvalidParameterError(
                "output_dir", f"Output directory is not writable: {output_dir}"
            ).with_context(path=str(output_dir))

        for key in ("toolchain", "dependencies", "dependency_files", "external_jars", "jvm_options"):
            if data.get(key) is None:
                data.pop(key, None)

        return data


__all__ = ["ParameterSet", "Toolchain", "split_modules"]
