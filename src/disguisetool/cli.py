"""CLI entry point for disguisetool."""

from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path
from types import FrameType
from typing import Any, Optional

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from disguisetool import __version__
from disguisetool.auditor import AuditResult, run_audit
from disguisetool.config import AuditRequest, load_config, merge_config
from disguisetool.cuelist import CueListFormat, SelectMode, convert_cue_table
from disguisetool.cuetable import read_cue_table
from disguisetool.logging_setup import setup_logging
from disguisetool.probe import check_ffprobe_available
from disguisetool.report import write_report
from disguisetool.reporter import (
    compute_summary,
    format_summary,
    per_extension_breakdown,
    per_project_breakdown,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("disguisetool.toml")

EXIT_CANCELLED = 130

app = typer.Typer(
    name="disguisetool",
    help="Audit disguise project directories and convert cue tables to lighting cue lists.",
    invoke_without_command=True,
    no_args_is_help=True,
)


def _load_file_config(config: Optional[str]) -> dict[str, Any]:
    """Load the TOML config, falling back to ./disguisetool.toml when present."""
    if config is not None:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: Config file not found: {config_path}", err=True)
            raise typer.Exit(code=1)
    elif DEFAULT_CONFIG.exists():
        config_path = DEFAULT_CONFIG
    else:
        return {}

    try:
        return load_config(config_path)
    except ValueError as e:
        typer.echo(f"Error: Cannot parse {config_path}: {e}", err=True)
        raise typer.Exit(code=1)


def _log_file_path(request: AuditRequest) -> Path:
    """Return the path to the log file."""
    return request.output_dir / ".disguisetool" / "disguisetool.log"


@app.command()
def audit(
    paths: Optional[list[str]] = typer.Argument(None, help="Project directories to audit"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file (default: ./disguisetool.toml if present)"),
    include: Optional[list[str]] = typer.Option(None, "--include", "-i", help="Only include files with this extension (repeatable)"),
    exclude: Optional[list[str]] = typer.Option(None, "--exclude", "-e", help="Exclude files with this extension (repeatable)"),
    search: Optional[list[str]] = typer.Option(None, "--search", "-s", help="Only include files whose name contains this text (repeatable)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file name stem (default: audit)"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Directory for the report and log (default: .)"),
    media_info: bool = typer.Option(False, "--media-info", "-m", help="Probe video files for resolution, codec, duration and frame rate"),
    ffprobe: Optional[str] = typer.Option(None, "--ffprobe", help="ffprobe executable or the directory containing it"),
    max_parallel_projects: Optional[int] = typer.Option(None, "--max-parallel-projects", help="Projects audited at once (default: 16)"),
    max_parallel_files: Optional[int] = typer.Option(None, "--max-parallel-files", help="Files audited at once per project (default: 64)"),
    raw: bool = typer.Option(False, "--raw", "-r", help="Audit the given directories as-is instead of their objects directory"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: INFO)"),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Print a summary table after the audit"),
) -> None:
    """Create a CSV report of the files in disguise project directories."""
    file_config = _load_file_config(config)
    cli_overrides: dict[str, Any] = {
        "projects": paths,
        "include": include,
        "exclude": exclude,
        "search": search,
        "output_name": output,
        "output_dir": output_dir,
        "media_info": True if media_info else None,
        "ffprobe_path": ffprobe,
        "max_parallel_projects": max_parallel_projects,
        "max_parallel_files": max_parallel_files,
        "raw": True if raw else None,
        "log_level": log_level,
    }

    try:
        request = merge_config(file_config, cli_overrides)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    setup_logging(request.log_level, _log_file_path(request))

    # Fail fast if media info is wanted but ffprobe is not installed
    if request.media_info:
        try:
            check_ffprobe_available(request.ffprobe_path)
        except RuntimeError as e:
            logger.error("%s", e)
            raise typer.Exit(code=1)

    logger.info("disguisetool v%s — auditing %d project(s)", __version__, len(request.project_paths))
    if request.raw:
        logger.info("Raw mode: scanning project directories as-is")
    if request.include:
        logger.info("Include extensions: %s", ", ".join(sorted(request.include)))
    if request.exclude:
        logger.info("Exclude extensions: %s", ", ".join(sorted(request.exclude)))
    if request.search:
        logger.info("Search terms: %s", ", ".join(sorted(request.search)))
    if request.media_info:
        logger.info("Media info enabled")

    result = _run_audit(request)

    if result.cancelled:
        logger.warning("Audit cancelled — no report written")
        raise typer.Exit(code=EXIT_CANCELLED)

    report_path = write_report(result.records, request.output_dir, request.output_name)
    logger.info("Wrote %d records to %s", len(result.records), report_path)

    if summary:
        typer.echo(format_summary(
            compute_summary(result),
            per_project_breakdown(result),
            per_extension_breakdown(result),
        ))


def _run_audit(request: AuditRequest) -> AuditResult:
    """Run the audit with a progress display and signal-driven cancellation."""
    cancel = threading.Event()

    prev_sigint = signal.getsignal(signal.SIGINT)
    prev_sigterm = signal.getsignal(signal.SIGTERM)

    def _handle_shutdown(signum: int, frame: FrameType | None) -> None:
        if cancel.is_set():
            # Second signal: force exit immediately
            signal.signal(signal.SIGINT, signal.SIG_DFL)
            signal.signal(signal.SIGTERM, signal.SIG_DFL)
            raise KeyboardInterrupt
        cancel.set()
        sig_name = signal.Signals(signum).name
        logger.info("Received %s — cancelling audit (press again to force quit)", sig_name)

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TextColumn("{task.completed} files"),
            TimeElapsedColumn(),
        ) as progress:
            task = progress.add_task("Auditing", total=None)

            def _advance(_path: Path) -> None:
                progress.advance(task)

            return run_audit(request, cancel=cancel, on_file=_advance)
    finally:
        # Restore original signal handlers
        signal.signal(signal.SIGINT, prev_sigint)
        signal.signal(signal.SIGTERM, prev_sigterm)


@app.command()
def cuelist(
    path: str = typer.Argument(..., help="disguise cue table file"),
    fmt: CueListFormat = typer.Option(CueListFormat.EOS_CSV, "--format", "-f", help="Cue list format"),
    select: SelectMode = typer.Option(SelectMode.ALL, "--select", "-s", help="Which cue tags to convert"),
    list_number: int = typer.Option(1, "--list", min=1, help="Console cue list number"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (default: <name>_cuelist.csv)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Convert a disguise cue table file to a lighting console cue list."""
    setup_logging(log_level)

    cue_table_path = Path(path)
    if not cue_table_path.is_file():
        typer.echo(f"Error: Cue table not found: {cue_table_path}", err=True)
        raise typer.Exit(code=1)

    try:
        table = read_cue_table(cue_table_path)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    output_path = Path(output) if output else Path(f"{cue_table_path.stem}_cuelist.csv")
    count = convert_cue_table(table, output_path, fmt, select, list_number)
    typer.echo(f"Wrote {count} cues to {output_path}")


@app.command()
def version() -> None:
    """Print version information."""
    typer.echo(f"disguisetool {__version__}")


if __name__ == "__main__":
    app()
