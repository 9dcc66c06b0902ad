"""Top-level workspace folder schemas."""
from datetime import datetime
from typing import Any, Literal

from .base import APIModel, Envelope


class FolderInfo(APIModel):
    """Top-level workspace folder (project) card."""
    name: str
    path: str
    created: datetime
    modified: datetime
    size: int


class FolderEntry(APIModel):
    """Immediate child of a folder."""
    name: str
    type: Literal["folder", "file"]
    path: str


class FolderDetail(FolderInfo):
    """Folder info with its immediate contents."""
    contents: list[FolderEntry]


class FolderCreate(APIModel):
    """Folder create request. Name is validated by the service."""
    name: Any = None
    template: Literal["blank", "web", "python"] | None = None


class FolderListResponse(Envelope):
    count: int
    folders: list[FolderInfo]


class FolderInfoResponse(Envelope):
    folder: FolderDetail


class FolderCreateResponse(Envelope):
    message: str
    folder: FolderInfo
