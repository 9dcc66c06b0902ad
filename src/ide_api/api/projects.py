"""Project tree and file operation routes."""
from fastapi import APIRouter, Depends, Query, status

from ide_api.dependencies import get_folder_service, get_project_service
from ide_api.schemas import (
    DirectoryListingResponse,
    FileCreatedResponse,
    FileCreateRequest,
    FileResponse,
    FileSavedResponse,
    FileWriteRequest,
    FolderCreatedResponse,
    MessageResponse,
    ProjectResponse,
)
from ide_api.services import FolderService, WorkspaceService

router = APIRouter(prefix="/project")


@router.get("/{project_name}", response_model=ProjectResponse)
async def get_project(
    project_name: str,
    folders: FolderService = Depends(get_folder_service),
):
    """Get project info and its full file tree."""
    project = await folders.get_project(project_name)
    return ProjectResponse(project=project)


@router.get("/{project_name}/entries", response_model=DirectoryListingResponse)
async def list_project_entries(
    dir: str = Query("", description="Directory to list, relative to the project"),
    project: WorkspaceService = Depends(get_project_service),
):
    """List one level of a project directory."""
    contents = await project.list_directory(dir)
    return DirectoryListingResponse(path=dir, contents=contents)


@router.get("/{project_name}/file/{file_path:path}", response_model=FileResponse)
async def read_project_file(
    file_path: str,
    project: WorkspaceService = Depends(get_project_service),
):
    """Read a file; binary files come back with ``content: null``."""
    file = await project.read_file(file_path)
    return FileResponse(file=file)


@router.put("/{project_name}/file/{file_path:path}", response_model=FileSavedResponse)
async def save_project_file(
    file_path: str,
    body: FileWriteRequest,
    project: WorkspaceService = Depends(get_project_service),
):
    """Overwrite (or create) a file, creating missing parent directories."""
    file = await project.write_file(file_path, body.content)
    return FileSavedResponse(message="File saved successfully", file=file)


@router.post(
    "/{project_name}/file/{file_path:path}",
    response_model=FileCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project_file(
    file_path: str,
    body: FileCreateRequest | None = None,
    project: WorkspaceService = Depends(get_project_service),
):
    """Create a new file; 409 if anything already exists at the path."""
    content = body.content if body is not None else ""
    file = await project.create_file(file_path, content)
    return FileCreatedResponse(message="File created successfully", file=file)


@router.delete("/{project_name}/file/{file_path:path}", response_model=MessageResponse)
async def delete_project_entry(
    file_path: str,
    project: WorkspaceService = Depends(get_project_service),
):
    """Delete a file, or a directory recursively."""
    kind = await project.delete_entry(file_path)
    label = "Directory" if kind == "directory" else "File"
    return MessageResponse(message=f"{label} deleted successfully")


@router.post(
    "/{project_name}/folder/{folder_path:path}",
    response_model=FolderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project_folder(
    folder_path: str,
    project: WorkspaceService = Depends(get_project_service),
):
    """Create a folder inside the project, including missing parents."""
    folder = await project.create_folder(folder_path)
    return FolderCreatedResponse(message="Folder created successfully", folder=folder)
