"""Workspace dependencies."""
from pathlib import Path

from fastapi import Depends, Request

from ide_api.services import FolderService, WorkspaceService
from shared.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_workspace_root(request: Request) -> Path:
    """Workspace root resolved once at application construction."""
    return request.app.state.workspace_root


def get_workspace_service(
    root: Path = Depends(get_workspace_root),
    settings: Settings = Depends(get_settings),
) -> WorkspaceService:
    """Service confined to the whole workspace."""
    return WorkspaceService(
        root,
        max_file_size=settings.max_file_size,
        tree_max_depth=settings.tree_max_depth,
    )


def get_project_service(
    project_name: str,
    workspace: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceService:
    """Service confined to one project folder (raises PathEscapeError on escape)."""
    return workspace.scoped(project_name)


def get_folder_service(
    workspace: WorkspaceService = Depends(get_workspace_service),
    settings: Settings = Depends(get_settings),
) -> FolderService:
    return FolderService(workspace, name_max_length=settings.folder_name_max_length)
