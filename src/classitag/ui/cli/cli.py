"""Command line interface for classitag."""

from collections.abc import Sequence
from typing import final

from classitag.platform.logging import logger
from classitag.ui.cli.args import ArgumentParser
from classitag.ui.cli.args.options import CLIArgs
from classitag.ui.cli.commands import ExtractCommand


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: Sequence[str] | None = None) -> int:
        """Process command line arguments and return the exit code.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)
            return ExtractCommand(args).execute()
        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user")
            return 130
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    return CommandProcessor.process_command(argv)
