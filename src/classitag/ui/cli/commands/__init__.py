"""Command execution package for CLI."""

from classitag.ui.cli.commands.extract import ExtractCommand

__all__ = ["ExtractCommand"]
