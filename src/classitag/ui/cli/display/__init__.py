"""Display management for CLI interface."""

from classitag.ui.cli.display.result import ResultDisplay

__all__ = ["ResultDisplay"]
