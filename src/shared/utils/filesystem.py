"""Filesystem utility functions."""
import os
from pathlib import Path


class PathEscapeError(ValueError):
    """Raised when a client-supplied path resolves outside its root."""

    def __init__(self, relative_path: str):
        self.relative_path = relative_path
        super().__init__(f"Path {relative_path} would escape root directory")


def _is_separator_only(segment: str) -> bool:
    return segment.strip("/\\") == ""


def _clean_segments(segments: tuple[str, ...]) -> list[str]:
    return [
        segment.replace("\\", "/")
        for segment in segments
        if not _is_separator_only(segment)
    ]


def _is_within(candidate: str, root: str) -> bool:
    # os.path.join(root, "") appends exactly one trailing separator ("/" stays "/")
    return candidate == root or candidate.startswith(os.path.join(root, ""))


def resolve_path(root: Path | str, *segments: str) -> Path:
    """
    Resolve client-supplied path segments against a root directory.

    Segments are joined onto the root with normal path-joining semantics
    (an absolute-looking segment replaces everything before it), then both
    the joined path and the root are canonicalized independently. The result
    must equal the root or live below it.

    Args:
        root: Trusted root directory
        *segments: Untrusted path segments; backslashes are treated as separators

    Returns:
        Resolved absolute path

    Raises:
        PathEscapeError: If the result would be outside root
    """
    parts = _clean_segments(segments)
    root_resolved = Path(root).resolve()
    joined = os.path.normpath(os.path.join(str(root), *parts))
    candidate = Path(joined).resolve()

    if not _is_within(str(candidate), str(root_resolved)):
        raise PathEscapeError("/".join(parts))

    return candidate


def lexical_path(root: Path | str, *segments: str) -> Path:
    """
    Join and normalize path segments onto root without following symlinks.

    Names the directory entry itself, so a trailing symlink stays a symlink.
    Use it together with ``resolve_path``, which checks where the entry leads.

    Raises:
        PathEscapeError: If the normalized path is outside root
    """
    parts = _clean_segments(segments)
    root_str = os.path.normpath(str(root))
    joined = os.path.normpath(os.path.join(root_str, *parts))
    if not _is_within(joined, root_str):
        raise PathEscapeError("/".join(parts))
    return Path(joined)
