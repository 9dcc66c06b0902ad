"""Workspace IDE API schemas module."""
from .base import APIModel, Envelope, MessageResponse
from .workspace import (
    CreatedFile,
    DirectoryEntry,
    DirectoryListingResponse,
    FileContent,
    FileCreatedResponse,
    FileCreateRequest,
    FileMetadata,
    FileResponse,
    FileSavedResponse,
    FileWriteRequest,
    FolderCreatedResponse,
    FolderMetadata,
    ProjectInfo,
    ProjectResponse,
    TreeNode,
)
from .folder import (
    FolderCreate,
    FolderCreateResponse,
    FolderDetail,
    FolderEntry,
    FolderInfo,
    FolderInfoResponse,
    FolderListResponse,
)

__all__ = [
    # Base
    "APIModel",
    "Envelope",
    "MessageResponse",
    # Workspace
    "TreeNode",
    "DirectoryEntry",
    "DirectoryListingResponse",
    "FileContent",
    "FileMetadata",
    "CreatedFile",
    "FolderMetadata",
    "FileWriteRequest",
    "FileCreateRequest",
    "ProjectInfo",
    "ProjectResponse",
    "FileResponse",
    "FileSavedResponse",
    "FileCreatedResponse",
    "FolderCreatedResponse",
    # Folder
    "FolderInfo",
    "FolderEntry",
    "FolderDetail",
    "FolderCreate",
    "FolderListResponse",
    "FolderInfoResponse",
    "FolderCreateResponse",
]
