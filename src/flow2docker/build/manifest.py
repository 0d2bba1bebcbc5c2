"""Dockerfile generation for a staged build context.

The manifest has four parts, always in this order:

1. ``FROM <base image>``
2. the lines of the optional instructions file, verbatim
3. three ``COPY`` instructions for libraries, placeholders and workflow
4. a ``CMD [...]`` launch command

``CMD`` elements are quoted but not escaped: an element containing a
double quote yields a broken Dockerfile.

Example::

    >>> print(build_launch_command(["-Xmx2g"]))  # doctest: +NORMALIZE_WHITESPACE
    CMD ["java", "-cp", "/adamsflow2docker/lib/*", "-Xmx2g", "adams.flow.FlowRunner",
    "-headless", "true", "-non-interactive", "true", "-clean-up", "true",
    "-home", "/adamsflow2docker", "-input", "/adamsflow2docker/worker.flow"]

Tags:
    dockerfile, manifest, container, generation
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from flow2docker.build.layout import (
    CONFIG_FILE,
    IMAGE_CONFIG_FILE,
    IMAGE_HOME,
    IMAGE_LIB_DIR,
    IMAGE_WORKFLOW_FILE,
    LIB_DIR,
    WORKFLOW_FILE,
    StagedOutput,
)
from flow2docker.build.params import ParameterSet
from flow2docker.core.errors import IoFailureError
from flow2docker.core.logging import get_logger
from flow2docker.core.result import BuildResult, Err, Ok, Result, ok

logger = get_logger(__name__)

ENTRY_POINT = "adams.flow.FlowRunner"

COPY_INSTRUCTIONS: tuple[str, ...] = (
    f'COPY "{LIB_DIR}/*" {IMAGE_LIB_DIR}',
    f"COPY {CONFIG_FILE} {IMAGE_CONFIG_FILE}",
    f"COPY {WORKFLOW_FILE} {IMAGE_WORKFLOW_FILE}",
)

RUNNER_FLAGS: tuple[tuple[str, str], ...] = (
    ("-headless", "true"),
    ("-non-interactive", "true"),
    ("-clean-up", "true"),
    ("-home", IMAGE_HOME),
)


def launch_arguments(jvm_options: Iterable[str] = ()) -> list[str]:
    """The launch command as a list of arguments."""
    args = ["java", "-cp", f"{IMAGE_LIB_DIR}*"]
    args.extend(jvm_options)
    args.append(ENTRY_POINT)
    for flag, value in RUNNER_FLAGS:
        args += [flag, value]
    args += ["-input", IMAGE_WORKFLOW_FILE]
    return args


def build_launch_command(jvm_options: Iterable[str] = ()) -> str:
    """Render the ``CMD`` instruction in exec (array) form."""
    quoted = ", ".join(f'"{arg}"' for arg in launch_arguments(jvm_options))
    return f"CMD [{quoted}]"


def read_instructions(path: Path | None) -> Result[list[str]]:
    """Read the optional instructions file.

    Returns ``Ok([])`` when no file is given or ``path`` is not an existing
    regular file. Only a file that exists but cannot be read is an error.
    """
    if path is None or not path.exists() or path.is_dir():
        return Ok([])
    try:
        return Ok(path.read_text(encoding="utf-8").splitlines())
    except (OSError, UnicodeDecodeError) as exc:
        return Err(
            IoFailureError(
                f"Failed to read docker instructions from: {path}",
                source=path,
                cause=exc,
            )
        )


def render_manifest(
    base_image: str,
    jvm_options: Sequence[str] = (),
    instructions: Sequence[str] = (),
) -> str:
    """Render the full Dockerfile text, one instruction per line."""
    lines = [f"FROM {base_image}"]
    lines.extend(instructions)
    lines.extend(COPY_INSTRUCTIONS)
    lines.append(build_launch_command(jvm_options))
    return "".join(f"{line}\n" for line in lines)


class ManifestBuilder:
    """Writes ``Dockerfile`` into the output directory, replacing any existing one."""

    def build(self, params: ParameterSet, output_dir: Path) -> BuildResult:
        instructions = read_instructions(params.instructions)
        if instructions.is_err():
            return instructions.map(lambda _: None)

        content = render_manifest(
            params.base_image,
            jvm_options=params.jvm_options,
            instructions=instructions.unwrap(),
        )

        manifest_file = StagedOutput(output_dir).manifest_file
        try:
            with open(manifest_file, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
        except OSError as exc:
            return Err(
                IoFailureError(
                    f"Failed to write {manifest_file}",
                    destination=manifest_file,
                    cause=exc,
                )
            )

        logger.info(
            "manifest.written",
            path=str(manifest_file),
            extra_instructions=len(instructions.unwrap()),
        )
        return ok()


__all__ = [
    "ENTRY_POINT",
    "COPY_INSTRUCTIONS",
    "ManifestBuilder",
    "build_launch_command",
    "launch_arguments",
    "read_instructions",
    "render_manifest",
]
