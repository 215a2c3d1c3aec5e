"""Command line interface for apicall."""

from .commands import cli, main

__all__ = [
    "cli",
    "main",
]
