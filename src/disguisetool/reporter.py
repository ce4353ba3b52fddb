"""Summary statistics for an audit run."""

from __future__ import annotations

from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table

from disguisetool.auditor import AuditResult


def compute_summary(result: AuditResult) -> dict[str, Any]:
    """Calculate overall statistics for an audit result.

    Returns:
        Dict with keys: files, total_size_mb, with_media, skipped_projects,
        failed_projects, failed_files, cancelled.
    """
    return {
        "files": len(result.records),
        "total_size_mb": sum(r.size_mb for r in result.records),
        "with_media": sum(1 for r in result.records if r.media is not None),
        "skipped_projects": len(result.skipped_projects),
        "failed_projects": len(result.failed_projects),
        "failed_files": result.failed_files,
        "cancelled": result.cancelled,
    }


def per_project_breakdown(result: AuditResult) -> dict[str, dict[str, Any]]:
    """Group file count and size by project path, sorted by path."""
    projects: dict[str, dict[str, Any]] = {}
    for record in result.records:
        bucket = projects.setdefault(
            record.project_path, {"files": 0, "size_mb": 0.0}
        )
        bucket["files"] += 1
        bucket["size_mb"] += record.size_mb
    return dict(sorted(projects.items()))


def per_extension_breakdown(result: AuditResult) -> dict[str, dict[str, Any]]:
    """Group file count and size by extension, largest total size first."""
    extensions: dict[str, dict[str, Any]] = {}
    for record in result.records:
        bucket = extensions.setdefault(
            record.extension, {"files": 0, "size_mb": 0.0}
        )
        bucket["files"] += 1
        bucket["size_mb"] += record.size_mb
    return dict(
        sorted(extensions.items(), key=lambda item: (-item[1]["size_mb"], item[0]))
    )


def format_summary(
    summary: dict[str, Any],
    projects: dict[str, dict[str, Any]],
    extensions: dict[str, dict[str, Any]],
) -> str:
    """Render the run summary as rich tables.

    Args:
        summary: Output from compute_summary().
        projects: Output from per_project_breakdown().
        extensions: Output from per_extension_breakdown().

    Returns:
        Formatted string suitable for printing.
    """
    console = Console(file=StringIO(), force_terminal=False, width=100)

    # --- Totals section ---
    totals = Table(title="Audit Summary", show_header=True, header_style="bold")
    totals.add_column("Metric", style="cyan")
    totals.add_column("Value", justify="right")

    totals.add_row("Files", str(summary.get("files", 0)))
    totals.add_row("Total size", _format_size(summary.get("total_size_mb", 0.0)))
    totals.add_row("With media info", str(summary.get("with_media", 0)))
    totals.add_row("Projects skipped", str(summary.get("skipped_projects", 0)))
    if summary.get("failed_projects", 0):
        totals.add_row("Projects failed", str(summary["failed_projects"]))
    totals.add_row("Files failed", str(summary.get("failed_files", 0)))
    if summary.get("cancelled"):
        totals.add_row("Status", "cancelled")

    console.print(totals)

    # --- Per-project section ---
    if projects:
        project_table = Table(title="Per-Project Breakdown", show_header=True, header_style="bold")
        project_table.add_column("Project", style="cyan")
        project_table.add_column("Files", justify="right")
        project_table.add_column("Size", justify="right")

        for project, stats in projects.items():
            project_table.add_row(
                project,
                str(stats["files"]),
                _format_size(stats["size_mb"]),
            )

        console.print(project_table)

    # --- Per-extension section ---
    if extensions:
        ext_table = Table(title="Per-Extension Breakdown", show_header=True, header_style="bold")
        ext_table.add_column("Extension", style="cyan")
        ext_table.add_column("Files", justify="right")
        ext_table.add_column("Size", justify="right")

        for extension, stats in extensions.items():
            ext_table.add_row(
                extension or "(none)",
                str(stats["files"]),
                _format_size(stats["size_mb"]),
            )

        console.print(ext_table)

    output = console.file
    assert isinstance(output, StringIO)
    return output.getvalue()


def _format_size(size_mb: float) -> str:
    """Format a size in binary megabytes into a human-readable string."""
    if size_mb < 1024:
        return f"{size_mb:.2f} MB"
    elif size_mb < 1024 * 1024:
        return f"{size_mb / 1024:.2f} GB"
    else:
        return f"{size_mb / (1024 * 1024):.2f} TB"
