"""Top-level workspace folder (project) service."""
import asyncio
import os
import re
import shutil
import stat
from datetime import datetime, timezone
from pathlib import Path

import loguru

from ide_api.exceptions import (
    AlreadyExistsError,
    InvalidNameError,
    NotDirectoryError,
    NotFoundError,
    UnexpectedIOError,
)
from ide_api.schemas import FolderDetail, FolderEntry, FolderInfo, ProjectInfo

from .scaffold import apply_template
from .workspace_service import WorkspaceService, created_time, to_timestamp, translate_os_errors

DEFAULT_NAME_MAX_LENGTH = 50

RESERVED_NAMES = frozenset(
    ["con", "prn", "aux", "nul"]
    + [f"com{i}" for i in range(1, 10)]
    + [f"lpt{i}" for i in range(1, 10)]
)

# Windows-invalid characters plus any other punctuation
_INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*]|[^\w\s.-]')
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_folder_name(name: str) -> str:
    """Strip invalid characters, turn whitespace runs into hyphens, lowercase."""
    cleaned = _INVALID_CHARS_RE.sub("", name).strip()
    return _WHITESPACE_RE.sub("-", cleaned).lower()


def _stat_existing(path: Path, label: str, name: str) -> os.stat_result:
    try:
        return path.stat()
    except FileNotFoundError:
        raise NotFoundError(f'{label} "{name}" not found') from None


def validate_folder_name(name, max_length: int = DEFAULT_NAME_MAX_LENGTH) -> str:
    """
    Validate and sanitize a client-supplied folder name.

    Args:
        name: Untrusted name, any JSON value
        max_length: Maximum sanitized length

    Returns:
        Sanitized folder name

    Raises:
        InvalidNameError: If the name is missing, empty after sanitizing,
            too long, only dots, or a reserved device name
    """
    if not name or not isinstance(name, str):
        raise InvalidNameError("Folder name is required and must be a string")

    sanitized = sanitize_folder_name(name)
    if not sanitized or set(sanitized) == {"."}:
        raise InvalidNameError("Invalid folder name")
    if len(sanitized) > max_length:
        raise InvalidNameError(f"Folder name too long (max {max_length} characters)")
    if sanitized in RESERVED_NAMES:
        raise InvalidNameError("Reserved folder name not allowed")
    return sanitized


class FolderService:
    """Project folders living directly under the workspace root."""

    def __init__(self, workspace: WorkspaceService, name_max_length: int = DEFAULT_NAME_MAX_LENGTH):
        self.workspace = workspace
        self.name_max_length = name_max_length

    def _folder_info(self, name: str, st: os.stat_result) -> FolderInfo:
        return FolderInfo(
            name=name,
            path=str(self.workspace.root / name),
            created=created_time(st),
            modified=to_timestamp(st.st_mtime),
            size=st.st_size,
        )

    def _list_folders_sync(self) -> list[FolderInfo]:
        root = self.workspace.root
        with os.scandir(root) as it:
            dirs = [entry for entry in it if entry.is_dir()]

        folders = []
        for entry in dirs:
            try:
                folders.append(self._folder_info(entry.name, entry.stat()))
            except OSError as e:
                loguru.logger.warning(f"Could not get stats for folder {entry.name}: {e}")
                now = datetime.now(timezone.utc)
                folders.append(FolderInfo(
                    name=entry.name,
                    path=str(root / entry.name),
                    created=now,
                    modified=now,
                    size=0,
                ))

        # 按创建时间倒序（最新的在前）
        folders.sort(key=lambda folder: folder.created, reverse=True)
        return folders

    async def list_folders(self) -> list[FolderInfo]:
        """
        List top-level folders, newest first.

        Raises:
            UnexpectedIOError: If the workspace root cannot be read
        """
        try:
            return await asyncio.to_thread(self._list_folders_sync)
        except OSError as e:
            loguru.logger.error(f"Error reading workspace {self.workspace.root}: {e}")
            raise UnexpectedIOError("Failed to read workspace directory") from e

    async def create_folder(self, name, template: str | None = None) -> FolderInfo:
        """
        Create a top-level folder, optionally scaffolding a template into it.

        Args:
            name: Untrusted folder name
            template: Optional key of ``scaffold.TEMPLATES``

        Returns:
            Created folder info

        Raises:
            InvalidNameError: If the name fails validation
            AlreadyExistsError: If the folder already exists
        """
        sanitized = validate_folder_name(name, self.name_max_length)
        folder_path = self.workspace.resolve(sanitized)

        if folder_path.exists():
            raise AlreadyExistsError(f'Folder "{sanitized}" already exists')

        with translate_os_errors("create folder", sanitized):
            await asyncio.to_thread(folder_path.mkdir, parents=True, exist_ok=False)

        if template:
            await apply_template(self.workspace.scoped(sanitized), template, sanitized)

        with translate_os_errors("create folder", sanitized):
            st = folder_path.stat()
        loguru.logger.info(f"Created folder: {sanitized}")
        return self._folder_info(sanitized, st)

    async def get_folder(self, name: str) -> FolderDetail:
        """
        Get a folder's info and immediate contents.

        Raises:
            PathEscapeError: If name resolves outside the workspace
            NotFoundError: If the folder is missing or not a directory
        """
        folder = self.workspace.scoped(name)
        with translate_os_errors("read folder", name):
            st = _stat_existing(folder.root, "Folder", name)
            if not stat.S_ISDIR(st.st_mode):
                raise NotFoundError("Path exists but is not a folder")
            with os.scandir(folder.root) as it:
                contents = [
                    FolderEntry(
                        name=entry.name,
                        type="folder" if entry.is_dir() else "file",
                        path=str(folder.root / entry.name),
                    )
                    for entry in it
                ]

        info = self._folder_info(folder.root.name, st)
        return FolderDetail(**info.model_dump(), contents=contents)

    async def delete_folder(self, name: str) -> str:
        """
        Recursively delete a top-level folder.

        Returns:
            The deleted folder's name

        Raises:
            PathEscapeError: If name resolves outside the workspace
            NotFoundError: If the folder does not exist
            NotDirectoryError: If the path is not a directory
        """
        folder = self.workspace.scoped(name)
        with translate_os_errors("delete folder", name):
            st = _stat_existing(folder.root, "Folder", name)
            if not stat.S_ISDIR(st.st_mode):
                raise NotDirectoryError("Path exists but is not a folder")
            await asyncio.to_thread(shutil.rmtree, folder.root)

        loguru.logger.info(f"Deleted folder: {folder.root.name}")
        return folder.root.name

    async def get_project(self, name: str) -> ProjectInfo:
        """
        Get project metadata and its full file tree.

        Raises:
            PathEscapeError: If name resolves outside the workspace
            NotFoundError: If the project is missing or not a directory
        """
        project = self.workspace.scoped(name)
        with translate_os_errors("read project", name):
            st = _stat_existing(project.root, "Project", name)
        if not stat.S_ISDIR(st.st_mode):
            raise NotFoundError("Project path exists but is not a directory")

        return ProjectInfo(
            name=name,
            path=str(project.root),
            created=created_time(st),
            modified=to_timestamp(st.st_mtime),
            tree=await project.list_tree(),
        )
