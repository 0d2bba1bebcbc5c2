"""
Typer application for the ``flow2docker`` command.

Turns command-line flags into a ``ParameterSet``, runs the build pipeline
and maps the outcome to an exit code:

    0   build succeeded, or ``--help`` was shown
    1   argument parsing failed or a parameter is invalid (nothing executed)
    2   the build pipeline failed

Usage::

    flow2docker -M adams-core,adams-weka -V 20.1.1 \\
        -i train.flow -b openjdk:11-jdk-slim-buster -o build/
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from rich.console import Console

from flow2docker.build.params import ParameterSet, Toolchain
from flow2docker.build.pipeline import BuildPipeline
from flow2docker.build.resolver import BootstrapResolver
from flow2docker.core.errors import InvalidParameterError
from flow2docker.core.logging import configure_logging, get_logger
from flow2docker.core.settings import get_settings

EXIT_OK = 0
EXIT_BAD_ARGUMENTS = 1
EXIT_BUILD_FAILED = 2

app = typer.Typer(
    name="flow2docker",
    help="Converts ADAMS workflows into Docker images.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


@app.command()
def build(
    maven_home: Path | None = typer.Option(
        None, "-m", "--maven_home", exists=True, file_okay=False,
        help="The directory with a local Maven installation to use instead of the bundled one.",
    ),
    maven_user_settings: Path | None = typer.Option(
        None, "-u", "--maven_user_settings", exists=True, dir_okay=False,
        help="The file with the maven user settings to use other than $HOME/.m2/settings.xml.",
    ),
    java_home: Path | None = typer.Option(
        None, "-j", "--java_home", exists=True, file_okay=False,
        help="The Java home to use for the Maven execution.",
    ),
    modules: str = typer.Option(
        ..., "-M", "--module",
        help="The comma-separated list of ADAMS modules to use for the application, "
        "e.g.: adams-weka,adams-groovy,adams-excel",
    ),
    version: str = typer.Option(
        ..., "-V", "--version",
        help="The version of ADAMS to use, e.g., '20.1.1' or '20.2.0-SNAPSHOT'.",
    ),
    dependencies: list[str] = typer.Option(
        [], "-d", "--dependency", metavar="DEPENDENCY",
        help="Additional maven dependency (group:artifact:version). Repeatable.",
    ),
    dependency_files: list[Path] = typer.Option(
        [], "-D", "--dependency-file", exists=True, dir_okay=False, metavar="FILE",
        help="File with additional maven dependencies, one per line. Repeatable.",
    ),
    external_jars: list[Path] = typer.Option(
        [], "-J", "--external-jar", exists=True, metavar="JAR_OR_DIR",
        help="External jar or directory with jar files to include. Repeatable.",
    ),
    jvm: list[str] = typer.Option(
        [], "-v", "--jvm",
        help="Parameter to pass to the JVM that launches the workflow. Repeatable.",
    ),
    input_file: Path = typer.Option(
        ..., "-i", "--input", exists=True, dir_okay=False,
        help="The ADAMS workflow to use.",
    ),
    docker_base_image: str = typer.Option(
        ..., "-b", "--docker_base_image",
        help="The docker base image to use, e.g. 'openjdk:11-jdk-slim-buster'.",
    ),
    docker_instructions: Path | None = typer.Option(
        None, "-I", "--docker_instructions", exists=True, dir_okay=False,
        help="File with additional docker instructions to use for generating the Dockerfile.",
    ),
    output_dir: Path = typer.Option(
        ..., "-o", "--output_dir",
        help="The directory to output the bootstrapped application, workflow and Dockerfile in.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose (debug) logging."),
) -> None:
    """Stage libraries, workflow and a Dockerfile for an ADAMS workflow image."""
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )

    try:
        params = ParameterSet(
            toolchain=Toolchain(
                maven_home=maven_home,
                maven_user_settings=maven_user_settings,
                java_home=java_home,
            ),
            modules=modules,
            version=version,
            dependencies=dependencies,
            dependency_files=dependency_files,
            external_jars=external_jars,
            jvm_options=jvm,
            workflow=input_file,
            base_image=docker_base_image,
            instructions=docker_instructions,
            output_dir=output_dir,
        )
    except InvalidParameterError as exc:
        logger.error("parameters.invalid", **exc.to_dict())
        err_console.print(
            f"Invalid parameter '{exc.field}': {exc.message}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        raise typer.Exit(code=EXIT_BAD_ARGUMENTS) from exc

    pipeline = BuildPipeline(
        params,
        resolver=BootstrapResolver(settings),
        clean=settings.clean_libraries,
    )
    result = pipeline.run()
    if result.is_err():
        err_console.print(
            f"Failed to perform Dockerfile generation:\n{result.message}\n"
            f"Failed stage: {pipeline.failed_stage.value}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        raise typer.Exit(code=EXIT_BUILD_FAILED)

    console.print(pipeline.success_message, markup=False, highlight=False, soft_wrap=True)


def _is_usage_error(exc: Exception) -> bool:
    """True for the ClickException family, whichever click copy typer runs on."""
    return callable(getattr(exc, "show", None)) and isinstance(
        getattr(exc, "exit_code", None), int
    )


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit code instead of exiting."""
    try:
        code = app(args=argv, prog_name="flow2docker", standalone_mode=False)
    except typer.Abort:
        return EXIT_BAD_ARGUMENTS
    except Exception as exc:
        if not _is_usage_error(exc):
            raise
        exc.show()
        err_console.print("Failed to parse options!", markup=False, highlight=False)
        return EXIT_BAD_ARGUMENTS
    return code if isinstance(code, int) else EXIT_OK


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
