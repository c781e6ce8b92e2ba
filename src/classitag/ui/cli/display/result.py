"""src/classitag/ui/cli/display/result.py
What: Render the extraction summary, diagnostics and counts for the CLI.
Why: Keep console output formatting out of the command flow.
"""

from __future__ import annotations

from typing import final

from rich.console import Console
from rich.markup import escape

from classitag.features.extraction.domain import ExtractionFailure, ExtractionResult


@final
class ResultDisplay:
    """Handles result display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        # stderr keeps stdout free for the JSON document
        self.console = console or Console(stderr=True)

    def show_result(self, result: ExtractionResult, *, verbose: bool = False, quiet: bool = False) -> None:
        """Display the album summary, then each diagnostic once."""

        if not quiet:
            album = result.album
            year = f" ({album.original_year})" if album.original_year > 0 else ""
            self.console.print(f"[bold]{escape(album.title)}[/bold]{year} [dim]via {result.source}[/dim]")
            if album.edition is not None:
                edition = " / ".join(
                    part for part in (album.edition.label, album.edition.catalog_number) if part
                )
                if edition:
                    self.console.print(f"  {escape(edition)}")
            self.console.print(f"  Tracks: {len(album.tracks)}")

        for issue in result.errors:
            if quiet and not issue.required:
                continue
            color = "red" if issue.required else "yellow"
            tag = "required" if issue.required else "optional"
            self.console.print(
                f"[{color}]error[/{color}] {escape(issue.field)}: {escape(issue.message)} [dim]\\[{tag}][/dim]"
            )

        if quiet:
            return

        for warning in result.warnings:
            self.console.print(f"[yellow]warning[/yellow] {escape(warning)}")

        if verbose:
            for note in result.notes:
                self.console.print(f"[dim]note {escape(note)}[/dim]")

        required = len(result.required_errors())
        self.console.print(
            f"{len(result.errors)} error(s) ({required} required), "
            f"{len(result.warnings)} warning(s), {len(result.notes)} note(s)"
        )

    def show_failure(self, exc: ExtractionFailure) -> None:
        """Display a terminal extraction fault."""
        self.console.print(f"[red]extraction failed[/red] ({type(exc).__name__}): {escape(str(exc))}")

    def show_blocked(self) -> None:
        self.console.print("[red]Required fields are missing; rerun with --force to emit anyway.[/red]")
