"""
snips CLI - keep markdown code snippets in sync with their source files

Usage:
    snips                      # update every *.md / *.markdown in the current directory
    snips README.md docs/x.md  # update the given files
    snips --check              # fail if anything is out of sync, write nothing
    snips --diff               # show what would change, write nothing
"""

import difflib
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from snips import __version__
from snips.config import ENV_LOG_LEVEL, ENV_WORKERS, SnipsConfig, load_environment
from snips.errors import NoMarkdownFiles
from snips.pipeline import SyncPipeline
from snips.schemas import (
    BlockChange,
    DocumentReport,
    ReconcileMode,
    RunSummary,
    SyncAction,
)
from snips.utils import discover_markdown_files

load_environment()

app = typer.Typer(
    name="snips",
    help="Keep code snippets in markdown files in sync with their source files",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: int) -> None:
    """Send snips logs to stderr through rich, once per process."""
    package_logger = logging.getLogger("snips")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def _relative_display(path: Path, cwd: Path) -> str:
    try:
        return str(path.resolve().relative_to(cwd.resolve()))
    except ValueError:
        return str(path)


def _version_callback(value: bool):
    if value:
        console.print(f"snips {__version__}")
        raise typer.Exit()


def render_report(report: DocumentReport, mode: ReconcileMode, cwd: Path) -> None:
    """Print one file and the state of each of its snippets."""
    console.print(Text(_relative_display(Path(report.path), cwd), style="bold blue"))

    if report.error:
        console.print(Text(f"  {report.error.message}", style="red"))
        return

    results = report.outcome.diff.results if report.outcome else []
    if not results:
        console.print(Text("  (no snippets found)", style="bright_yellow"))
        return

    for result in results:
        marker = result.reference.marker if result.reference else f"line {result.error.line}"
        line = Text("  ")
        line.append("↳ ", style="cyan")

        if result.action == SyncAction.ERROR:
            line.append(f"{marker} [error] {result.error.message}", style="red")
        elif result.action == SyncAction.UNCHANGED:
            line.append(marker, style="dim")
        elif mode == ReconcileMode.WRITE:
            line.append(f"{marker} [updated]", style="green")
        else:
            line.append(f"{marker} [out of sync]", style="red")

        console.print(line, soft_wrap=True)


def render_change(change: BlockChange) -> None:
    """Print a line diff between the existing fence and the fresh one."""
    marker = change.reference.marker
    console.print(Text(f"--- {marker}", style="bold red"), soft_wrap=True)
    console.print(Text(f"+++ {marker}", style="bold green"), soft_wrap=True)

    for line in difflib.ndiff(change.old_lines, change.new_lines):
        sign, content = line[:1], line[2:]
        if sign == "?":
            continue
        if sign == " ":
            console.print(Text(f" {content}"), soft_wrap=True)
        elif sign == "-":
            console.print(Text(f"-{content}", style="red"), soft_wrap=True)
        else:
            console.print(Text(f"+{content}", style="green"), soft_wrap=True)
    console.print()


def render_errors(summary: RunSummary, cwd: Path) -> None:
    """Errors are always shown, on stderr, even in quiet mode."""
    for report in summary.reports:
        for error in report.errors:
            location = _relative_display(Path(report.path), cwd)
            if error.line:
                location = f"{location}:{error.line}"
            err_console.print(Text(f"Error: {location}: {error.message}", style="red"), soft_wrap=True)


def render_summary(summary: RunSummary, quiet: bool, cwd: Path) -> None:
    if summary.mode == ReconcileMode.DIFF:
        if not quiet:
            for report in summary.reports:
                if report.outcome:
                    for change in report.outcome.changes:
                        render_change(change)
    elif not quiet:
        for report in summary.reports:
            render_report(report, summary.mode, cwd)

    render_errors(summary, cwd)


@app.command()
def main(
    files: Optional[List[Path]] = typer.Argument(
        None,
        help="Files to process; defaults to all markdown files in the current directory",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    check: bool = typer.Option(
        False,
        "--check",
        help="Don't write changes; exit with an error if files are out of sync",
    ),
    diff: bool = typer.Option(False, "--diff", help="Show a diff of the changes instead of writing them"),
    workers: int = typer.Option(
        1,
        "--workers",
        "-w",
        envvar=ENV_WORKERS,
        min=1,
        help="Number of documents processed in parallel",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar=ENV_LOG_LEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """
    Synchronize code snippets embedded in markdown with their sources.

    Reference a whole file or a named snippet in markdown:

        <!-- snips: src/lib.rs -->
        <!-- snips: src/lib.rs#setup -->

    and mark the snippet in the source with comments:

        // snips-start: setup
        ...
        // snips-end: setup
    """
    try:
        config = SnipsConfig.from_flags(
            check=check,
            diff=diff,
            quiet=quiet,
            files=list(files or []),
            workers=workers,
            log_level=log_level,
        )
    except ValidationError as e:
        raise typer.BadParameter(e.errors()[0]["msg"])
    except ValueError as e:
        raise typer.BadParameter(str(e))

    _configure_logging(config.log_level_value)

    cwd = Path.cwd()
    if not config.files:
        try:
            config.files = discover_markdown_files(cwd)
        except NoMarkdownFiles as e:
            err_console.print(f"Error: {e}", style="red", markup=False, highlight=False, soft_wrap=True)
            raise typer.Exit(1)

    pipeline = SyncPipeline(config)

    try:
        summary = pipeline.run_sync()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]⚠️  Interrupted by user[/yellow]")
        raise typer.Exit(1)

    render_summary(summary, config.quiet, cwd)

    raise typer.Exit(summary.exit_code)


if __name__ == "__main__":
    app()
