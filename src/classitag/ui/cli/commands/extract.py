"""src/classitag/ui/cli/commands/extract.py
What: Execute one extraction run for the CLI.
Why: Bridge parsed arguments with the pipeline and its adapters.
"""

from __future__ import annotations

import sys
from typing import final

from classitag.config.config import Config
from classitag.features.extraction.adapters import MutagenTagReader, RequestsHTMLFetcher
from classitag.features.extraction.domain import ExtractionFailure, ExtractionResult, SourceReadError
from classitag.features.extraction.usecases import ExtractionPipeline, decode_html
from classitag.platform.logging import logger
from classitag.ui.cli.args.options import ExtractArgs
from classitag.ui.cli.display import ResultDisplay


@final
class ExtractCommand:
    """Command for the ``extract`` subcommand."""

    def __init__(
        self,
        args: ExtractArgs,
        *,
        pipeline: ExtractionPipeline | None = None,
        display: ResultDisplay | None = None,
    ) -> None:
        self.args = args
        self.pipeline = pipeline or self._build_pipeline()
        self.result_display = display or ResultDisplay()

    @staticmethod
    def _build_pipeline() -> ExtractionPipeline:
        configuration = Config.load()
        fetcher = RequestsHTMLFetcher(
            timeout=configuration.http_timeout,
            max_attempts=configuration.http_max_attempts,
            user_agent=configuration.user_agent,
        )
        return ExtractionPipeline(tag_reader=MutagenTagReader(), fetcher=fetcher)

    def _run(self) -> ExtractionResult:
        if self.args.directory is not None:
            return self.pipeline.extract_directory(self.args.directory)
        if self.args.url is not None:
            return self.pipeline.extract_url(self.args.url)

        assert self.args.html_file is not None and self.args.site is not None
        try:
            body = self.args.html_file.read_bytes()
        except OSError as exc:
            raise SourceReadError(f"could not read {self.args.html_file}: {exc}") from exc
        return self.pipeline.extract_html(decode_html(body), self.args.site)

    def execute(self) -> int:
        """Run the extraction and return the process exit code."""

        try:
            result = self._run()
        except ExtractionFailure as exc:
            self.result_display.show_failure(exc)
            return 1

        self.result_display.show_result(result, verbose=self.args.verbose, quiet=self.args.quiet)
        if result.has_required_errors() and not self.args.force:
            logger.debug("Not emitting: %d required error(s)", len(result.required_errors()))
            self.result_display.show_blocked()
            return 1

        document = self.pipeline.emit(result, self.args.output)
        if self.args.output is None:
            _ = sys.stdout.write(document + "\n")
        return 0
