"""Command line argument handling package."""

from classitag.ui.cli.args.options import CLIArgs, ExtractArgs
from classitag.ui.cli.args.parser import ArgumentParser

__all__ = ["ArgumentParser", "CLIArgs", "ExtractArgs"]
