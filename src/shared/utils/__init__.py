"""Utility module."""
from .filesystem import PathEscapeError, lexical_path, resolve_path

__all__ = ["PathEscapeError", "lexical_path", "resolve_path"]
