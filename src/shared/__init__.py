"""Shared utilities and configurations."""
# Config
from .config import Settings, settings

# Utils
from .utils import PathEscapeError, lexical_path, resolve_path


__all__ = [
    # Config
    "Settings",
    "settings",
    # Utils
    "PathEscapeError",
    "lexical_path",
    "resolve_path",
]
