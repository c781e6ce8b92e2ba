"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import final

from classitag import __version__
from classitag.config.config import Config
from classitag.features.extraction.usecases.html import SITES
from classitag.platform.logging import DEFAULT_LOG_FILE, logger, setup_logger
from classitag.ui.cli.args.options import CLIArgs, ExtractArgs


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser."""
        parser = argparse.ArgumentParser(
            prog="classitag",
            description="classitag - extract and normalize classical album metadata.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        _ = parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

        subparsers = parser.add_subparsers(dest="command", required=True)

        extract_parser = subparsers.add_parser(
            "extract",
            help="Extract an album from tagged files or a catalogue page",
        )
        source_group = extract_parser.add_mutually_exclusive_group(required=True)
        _ = source_group.add_argument(
            "--dir",
            dest="directory",
            type=str,
            metavar="PATH",
            help="Album directory holding FLAC files",
        )
        _ = source_group.add_argument(
            "--url",
            type=str,
            metavar="URL",
            help="Catalogue page to fetch (Presto, Discogs, harmonia mundi)",
        )
        _ = source_group.add_argument(
            "--html-file",
            type=str,
            metavar="FILE",
            help="Saved catalogue page; requires --site",
        )
        _ = extract_parser.add_argument(
            "--site",
            choices=SITES,
            help="Site layout of the page given with --html-file",
        )
        _ = extract_parser.add_argument(
            "--output",
            type=str,
            metavar="FILE",
            help="Write the canonical JSON here instead of stdout",
        )
        _ = extract_parser.add_argument(
            "--force",
            action="store_true",
            help="Emit JSON even when required fields are missing",
        )
        verbosity = extract_parser.add_mutually_exclusive_group()
        _ = verbosity.add_argument(
            "--verbose",
            action="store_true",
            help="Show parse notes and debug logging",
        )
        _ = verbosity.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Parse arguments and configure logging.

        Raises:
            SystemExit: Invalid argument combinations.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        if parsed_args.html_file and not parsed_args.site:
            parser.error("--html-file requires --site")
        if parsed_args.site and not parsed_args.html_file:
            parser.error("--site is only valid with --html-file")

        if parsed_args.quiet:
            log_level = logging.ERROR
        elif parsed_args.verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        log_file_path = configuration.log_file or DEFAULT_LOG_FILE
        _ = setup_logger(log_file=log_file_path, console_level=log_level)

        command: str = parsed_args.command
        if command == "extract":
            return ArgumentParser._process_extract(parsed_args)

        logger.error("Unsupported command: %s", command)
        sys.exit(2)

    @staticmethod
    def _process_extract(parsed_args: argparse.Namespace) -> ExtractArgs:
        return ExtractArgs(
            command="extract",
            directory=Path(parsed_args.directory) if parsed_args.directory else None,
            url=parsed_args.url,
            html_file=Path(parsed_args.html_file) if parsed_args.html_file else None,
            site=parsed_args.site,
            output=Path(parsed_args.output) if parsed_args.output else None,
            force=parsed_args.force,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
        )
