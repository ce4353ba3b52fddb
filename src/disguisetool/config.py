"""Configuration loading, merging, and validation."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class InvalidRequest(ValueError):
    """Raised when an audit request cannot be started."""


@dataclass(frozen=True)
class AuditRequest:
    """Immutable input for one audit run."""

    project_paths: tuple[Path, ...]
    include: frozenset[str] = field(default_factory=frozenset)
    exclude: frozenset[str] = field(default_factory=frozenset)
    search: frozenset[str] = field(default_factory=frozenset)
    raw: bool = False
    media_info: bool = False
    ffprobe_path: Path | None = None
    max_parallel_projects: int = 16
    max_parallel_files: int = 64
    output_name: str = "audit"
    output_dir: Path = Path(".")
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.project_paths:
            raise InvalidRequest("at least one project path is required")
        if self.max_parallel_projects < 1 or self.max_parallel_files < 1:
            raise InvalidRequest("concurrency bounds must be at least 1")


_DEFAULTS: dict[str, Any] = {
    "include": [],
    "exclude": [],
    "search": [],
    "raw": False,
    "media_info": False,
    "ffprobe_path": None,
    "max_parallel_projects": 16,
    "max_parallel_files": 64,
    "output_name": "audit",
    "output_dir": ".",
    "log_level": "INFO",
}


def load_config(path: Path) -> dict[str, Any]:
    """Read a TOML config file and return a dict."""
    with path.open("rb") as f:
        return tomllib.load(f)


def merge_config(
    file_config: dict[str, Any],
    cli_overrides: dict[str, Any],
) -> AuditRequest:
    """Merge defaults, file config, and CLI overrides into a validated request.

    Priority: defaults < file config < CLI overrides.
    Empty lists given on the command line do not override the file config.
    """
    merged: dict[str, Any] = {**_DEFAULTS}
    merged.update({k: v for k, v in file_config.items() if v is not None})
    merged.update({
        k: v for k, v in cli_overrides.items()
        if v is not None and v != [] and v != ()
    })

    return _validate(merged)


def normalize_extensions(values: Any) -> frozenset[str]:
    """Return extensions with any leading dot stripped, blanks dropped."""
    return frozenset(
        str(v).lstrip(".") for v in values if str(v).lstrip(".")
    )


def _validate(merged: dict[str, Any]) -> AuditRequest:
    """Validate the merged config and return an AuditRequest.

    No filesystem access happens here; missing projects are reported per
    project during the run.
    """
    errors: list[str] = []

    projects = merged.get("projects") or []
    if isinstance(projects, (str, Path)):
        projects = [projects]
    if not projects:
        errors.append("at least one project path is required")

    bounds: dict[str, int] = {}
    for key in ("max_parallel_projects", "max_parallel_files"):
        try:
            bounds[key] = int(merged[key])
        except (TypeError, ValueError):
            errors.append(f"{key} must be an integer")
            continue
        if bounds[key] < 1:
            errors.append(f"{key} must be at least 1")

    output_name = str(merged.get("output_name") or "").strip()
    if not output_name:
        errors.append("output_name must not be empty")

    if errors:
        raise InvalidRequest("Invalid audit request:\n  " + "\n  ".join(errors))

    ffprobe_path = merged.get("ffprobe_path")

    return AuditRequest(
        project_paths=tuple(Path(p) for p in projects),
        include=normalize_extensions(merged["include"]),
        exclude=normalize_extensions(merged["exclude"]),
        search=frozenset(str(s) for s in merged["search"] if str(s)),
        raw=bool(merged["raw"]),
        media_info=bool(merged["media_info"]),
        ffprobe_path=Path(ffprobe_path) if ffprobe_path else None,
        max_parallel_projects=bounds["max_parallel_projects"],
        max_parallel_files=bounds["max_parallel_files"],
        output_name=output_name,
        output_dir=Path(merged["output_dir"]),
        log_level=str(merged["log_level"]),
    )
