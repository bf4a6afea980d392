"""Command-line interface for pairsh."""

from pairsh.cli.app import entrypoint, main

__all__ = [
    "entrypoint",
    "main",
]
