"""Command line interface package."""

from classitag.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
