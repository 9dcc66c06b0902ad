"""Business logic services module."""
from .workspace_service import WorkspaceService, classify_content
from .folder_service import FolderService, sanitize_folder_name, validate_folder_name
from .scaffold import TEMPLATES, apply_template

__all__ = [
    "WorkspaceService",
    "classify_content",
    "FolderService",
    "sanitize_folder_name",
    "validate_folder_name",
    "TEMPLATES",
    "apply_template",
]
