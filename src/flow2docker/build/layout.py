"""Filesystem layout of a staged build context and of the image it produces.

Relative names on the host side (``LIB_DIR``, ``WORKFLOW_FILE``, ...) are
resolved against the output directory by ``StagedOutput``. ``IMAGE_*``
constants are absolute paths inside the container image.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# ── Build context (relative to the output directory) ─────────────────────
LIB_DIR = "target/lib"
WORKFLOW_FILE = "worker.flow"
CONFIG_FILE = "Placeholders.props"
MANIFEST_FILE = "Dockerfile"

# ── Inside the image ─────────────────────────────────────────────────────
IMAGE_HOME = "/adamsflow2docker"
IMAGE_LIB_DIR = f"{IMAGE_HOME}/lib/"
IMAGE_CONFIG_FILE = f"{IMAGE_HOME}/{CONFIG_FILE}"
IMAGE_WORKFLOW_FILE = f"{IMAGE_HOME}/{WORKFLOW_FILE}"
IMAGE_TMP_DIR = "/tmp"


@dataclass(frozen=True)
class StagedOutput:
    """Paths of every artifact a successful run leaves in ``output_dir``."""

    output_dir: Path

    @property
    def lib_dir(self) -> Path:
        return self.output_dir / LIB_DIR

    @property
    def workflow_file(self) -> Path:
        return self.output_dir / WORKFLOW_FILE

    @property
    def config_file(self) -> Path:
        return self.output_dir / CONFIG_FILE

    @property
    def manifest_file(self) -> Path:
        return self.output_dir / MANIFEST_FILE

    def has_libraries(self) -> bool:
        """True if the library directory exists and contains at least one entry."""
        return self.lib_dir.is_dir() and any(self.lib_dir.iterdir())

    def is_complete(self) -> bool:
        return (
            self.has_libraries()
            and self.workflow_file.is_file()
            and self.config_file.is_file()
            and self.manifest_file.is_file()
        )
