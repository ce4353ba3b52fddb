"""Resolution of project paths to the directory that gets scanned."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

OBJECTS_DIR = "objects"

NOT_A_PROJECT_HINT = "not a project directory, consider raw mode"


@dataclass(frozen=True)
class ScanRoot:
    """A project path and the existing directory walked for it."""

    project_path: Path
    path: Path


@dataclass(frozen=True)
class ProjectNotFound:
    """A project path, or its objects directory, that does not exist."""

    project_path: Path
    missing: Path
    hint: str | None = None

    def __str__(self) -> str:
        message = f"Project directory not found: {self.missing}"
        if self.hint:
            message += f" ({self.hint})"
        return message


def _is_dir(path: Path) -> tuple[bool, str | None]:
    """Return whether path is a directory and, if it could not be checked, why."""
    try:
        return path.is_dir(), None
    except OSError as e:
        return False, e.strerror or str(e)


def resolve_scan_root(project_path: Path, raw: bool) -> ScanRoot | ProjectNotFound:
    """Return the scan root for a project path.

    In raw mode the path itself is scanned. Otherwise the project's
    ``objects`` subdirectory is scanned. A path that cannot be checked
    (too long, permission denied) counts as not found, with the OS error
    as the hint.
    """
    found, error = _is_dir(project_path)
    if not found:
        return ProjectNotFound(project_path=project_path, missing=project_path, hint=error)

    if raw:
        return ScanRoot(project_path=project_path, path=project_path)

    objects_dir = project_path / OBJECTS_DIR
    found, error = _is_dir(objects_dir)
    if not found:
        return ProjectNotFound(
            project_path=project_path,
            missing=objects_dir,
            hint=error or NOT_A_PROJECT_HINT,
        )

    return ScanRoot(project_path=project_path, path=objects_dir)
