"""Inclusion rules applied to discovered files."""

from __future__ import annotations

from collections.abc import Collection


def should_include(
    file_name: str,
    extension: str,
    include: Collection[str] = (),
    exclude: Collection[str] = (),
    search: Collection[str] = (),
) -> bool:
    """Decide whether a file belongs in the audit.

    Args:
        file_name: Base name of the file without its extension.
        extension: File extension, with or without a leading dot.
        include: Allow-list of extensions. Empty admits every extension.
        exclude: Deny-list of extensions. Always wins over ``include``.
        search: Substrings, at least one of which must occur in
            ``file_name``. Empty admits every name.

    Extension and name comparisons are case-sensitive.
    """
    extension = extension.lstrip(".")

    if include and extension not in include:
        return False
    if extension in exclude:
        return False
    if search and not any(term in file_name for term in search):
        return False
    return True
