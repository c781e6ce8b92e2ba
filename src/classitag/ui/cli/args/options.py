"""Command line argument options."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, final


@final
@dataclass(slots=True)
class ExtractArgs:
    """Command line arguments for the ``extract`` subcommand.

    Exactly one of ``directory``, ``url`` and ``html_file`` is set; ``site`` accompanies ``html_file``.
    """

    command: Literal["extract"]
    directory: Path | None
    url: str | None
    html_file: Path | None
    site: str | None
    output: Path | None
    force: bool
    verbose: bool
    quiet: bool


CLIArgs = ExtractArgs

__all__ = ["CLIArgs", "ExtractArgs"]
