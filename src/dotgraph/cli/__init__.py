"""dotgraph command-line interface."""

from dotgraph.cli.app import app

__all__ = ["app"]
