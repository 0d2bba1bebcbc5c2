"""
CLI layer for flow2docker.

Handles only terminal transport: argument parsing, coloured output and exit
codes. The build itself lives in :mod:`flow2docker.build`.

Entry point::

    flow2docker --help
"""

from flow2docker.cli.app import app, main

__all__ = ["app", "main"]
