"""Command-line interface."""

from limeade.cli.main import main

__all__ = ["main"]
