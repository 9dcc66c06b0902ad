"""Workspace file operation schemas."""
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict

from .base import APIModel, Envelope


class TreeNode(APIModel):
    """Recursive file tree node, built fresh per listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    is_directory: bool
    size: int
    modified: datetime
    extension: str | None = None
    children: list["TreeNode"] | None = None


class DirectoryEntry(APIModel):
    """One entry of a single-level directory listing."""
    name: str
    path: str
    type: Literal["folder", "file"]
    size: int
    modified: datetime


class FileContent(APIModel):
    """A read file's payload and text/binary classification."""
    name: str
    path: str
    extension: str
    size: int
    modified: datetime
    content: str | None = None
    is_binary: bool
    type: Literal["binary", "text"]


class FileMetadata(APIModel):
    """File metadata returned after a write."""
    name: str
    path: str
    size: int
    modified: datetime


class CreatedFile(FileMetadata):
    """File metadata returned after a create, echoing the initial content."""
    content: str


class FolderMetadata(APIModel):
    """Folder metadata returned after creating a folder inside a project."""
    name: str
    path: str
    modified: datetime


class FileWriteRequest(APIModel):
    """File write request. Content type is checked by the service."""
    content: Any = None


class FileCreateRequest(APIModel):
    """File create request."""
    content: Any = ""


class ProjectInfo(APIModel):
    """Project metadata with its full file tree."""
    name: str
    path: str
    created: datetime
    modified: datetime
    tree: list[TreeNode]


class ProjectResponse(Envelope):
    project: ProjectInfo


class DirectoryListingResponse(Envelope):
    path: str
    contents: list[DirectoryEntry]


class FileResponse(Envelope):
    file: FileContent


class FileSavedResponse(Envelope):
    message: str
    file: FileMetadata


class FileCreatedResponse(Envelope):
    message: str
    file: CreatedFile


class FolderCreatedResponse(Envelope):
    message: str
    folder: FolderMetadata
