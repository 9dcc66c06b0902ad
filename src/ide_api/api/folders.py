"""Top-level workspace folder routes."""
from fastapi import APIRouter, Depends, status

from ide_api.dependencies import get_folder_service
from ide_api.schemas import (
    FolderCreate,
    FolderCreateResponse,
    FolderInfoResponse,
    FolderListResponse,
    MessageResponse,
)
from ide_api.services import FolderService

router = APIRouter(prefix="/folders")


@router.get("", response_model=FolderListResponse)
async def list_folders(folders: FolderService = Depends(get_folder_service)):
    """List all folders in the workspace, newest first."""
    items = await folders.list_folders()
    return FolderListResponse(count=len(items), folders=items)


@router.post("", response_model=FolderCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    body: FolderCreate,
    folders: FolderService = Depends(get_folder_service),
):
    """Create a new top-level folder, optionally from a project template."""
    folder = await folders.create_folder(body.name, body.template)
    return FolderCreateResponse(
        message=f'Folder "{folder.name}" created successfully',
        folder=folder,
    )


@router.get("/{folder_name}", response_model=FolderInfoResponse)
async def get_folder(
    folder_name: str,
    folders: FolderService = Depends(get_folder_service),
):
    """Get a folder's info and immediate contents."""
    folder = await folders.get_folder(folder_name)
    return FolderInfoResponse(folder=folder)


@router.delete("/{folder_name}", response_model=MessageResponse)
async def delete_folder(
    folder_name: str,
    folders: FolderService = Depends(get_folder_service),
):
    """Delete a folder and everything in it."""
    name = await folders.delete_folder(folder_name)
    return MessageResponse(message=f'Folder "{name}" deleted successfully')
