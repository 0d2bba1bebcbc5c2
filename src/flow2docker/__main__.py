"""Allow ``python -m flow2docker``."""

from flow2docker.cli.app import run

if __name__ == "__main__":  # pragma: no cover
    run()
