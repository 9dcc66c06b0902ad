"""FastAPI dependencies module."""
from .workspace import (
    get_folder_service,
    get_project_service,
    get_settings,
    get_workspace_root,
    get_workspace_service,
)

__all__ = [
    "get_settings",
    "get_workspace_root",
    "get_workspace_service",
    "get_project_service",
    "get_folder_service",
]
