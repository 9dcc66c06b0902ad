"""Workspace file operations service."""
import asyncio
import os
import re
import shutil
import stat
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

import aiofiles
import loguru

from ide_api.exceptions import (
    AlreadyExistsError,
    FileTooLargeError,
    InvalidContentError,
    InvalidNameError,
    IsDirectoryError,
    NotDirectoryError,
    NotFoundError,
    ProtectedPathError,
    UnexpectedIOError,
)
from ide_api.schemas import (
    CreatedFile,
    DirectoryEntry,
    FileContent,
    FileMetadata,
    FolderMetadata,
    TreeNode,
)
from shared.utils import PathEscapeError, lexical_path, resolve_path

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_TREE_MAX_DEPTH = 32

# C0 controls except \t \n \v \f \r, plus DEL and the C1 block
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0e-\x1f\x7f-\x9f]")


def to_timestamp(value: float) -> datetime:
    """Convert an ``os.stat`` time to an aware UTC datetime."""
    return datetime.fromtimestamp(value, tz=timezone.utc)


def created_time(st: os.stat_result) -> datetime:
    """Creation time where the platform records it, inode change time otherwise."""
    return to_timestamp(getattr(st, "st_birthtime", st.st_ctime))


def _format_size(size: int) -> str:
    if size >= 1024 * 1024 and size % (1024 * 1024) == 0:
        return f"{size // (1024 * 1024)}MB"
    return f"{size} bytes"


def classify_content(data: bytes) -> str | None:
    """
    Decode file bytes as text, or return None if they look binary.

    A file is binary when it is not valid UTF-8 or when the decoded text
    contains a control character outside the whitespace range.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if _NON_PRINTABLE_RE.search(text):
        return None
    return text


@contextmanager
def translate_os_errors(action: str, relative_path: str):
    """Map ``OSError`` raised inside the block to the workspace error taxonomy."""
    try:
        yield
    except FileNotFoundError:
        raise NotFoundError(f'File or directory "{relative_path}" not found') from None
    except FileExistsError:
        raise AlreadyExistsError(f'"{relative_path}" already exists') from None
    except IsADirectoryError:
        raise IsDirectoryError("Path is a directory, not a file") from None
    except NotADirectoryError:
        raise NotDirectoryError(f'A parent of "{relative_path}" is not a directory') from None
    except OSError as e:
        loguru.logger.error(f"Failed to {action} {relative_path!r}: {e}")
        raise UnexpectedIOError(f"Failed to {action}") from e


class WorkspaceService:
    """
    Tree and content operations confined to a single root directory.

    Every operation resolves its client-supplied path through
    ``resolve_path`` before touching the filesystem. Nothing is cached:
    each call re-reads disk.
    """

    def __init__(
        self,
        root: Path | str,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        tree_max_depth: int = DEFAULT_TREE_MAX_DEPTH,
    ):
        self.root = Path(root).resolve()
        self.max_file_size = max_file_size
        self.tree_max_depth = tree_max_depth

    def resolve(self, *segments: str) -> Path:
        """Resolve client path segments inside this service's root."""
        return resolve_path(self.root, *segments)

    def relative(self, path: Path) -> str:
        """Forward-slash path of ``path`` relative to the root ("" for the root)."""
        rel = path.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    def scoped(self, name: str) -> "WorkspaceService":
        """
        Return a service rooted at a direct or nested child of this root.

        Args:
            name: Untrusted child path (e.g. a project name)

        Raises:
            PathEscapeError: If the child resolves outside this root
            InvalidNameError: If the child is this root itself
        """
        child = self.resolve(name)
        if child == self.root:
            raise InvalidNameError("Project name must name a folder inside the workspace")
        return WorkspaceService(child, self.max_file_size, self.tree_max_depth)

    async def list_tree(self, relative_path: str = "") -> list[TreeNode]:
        """
        Recursively list a directory as ordered tree nodes.

        Args:
            relative_path: Directory to list, relative to the root (default: root)

        Returns:
            Root-level nodes, directories first, each group sorted by name

        Raises:
            PathEscapeError: If path is outside the root
        """
        target = self.resolve(relative_path)
        return await asyncio.to_thread(self._build_tree, target, self.relative(target), 0)

    def _stat_entry(self, entry: os.DirEntry, rel_path: str) -> os.stat_result | None:
        """Stat a listed entry, or None if it must not be shown."""
        try:
            if entry.is_symlink():
                # 只有目标仍在根目录内的链接才会被列出
                return self.resolve(rel_path).stat()
            return entry.stat()
        except PathEscapeError:
            loguru.logger.warning(f"Skipping {rel_path}: symlink target is outside the root")
        except OSError as e:
            # 读取期间被删除或悬空的符号链接
            loguru.logger.warning(f"Skipping {rel_path}: {e}")
        return None

    def _build_tree(self, directory: Path, base: str, depth: int) -> list[TreeNode]:
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            loguru.logger.warning(f"Cannot read directory {directory}: {e}")
            return []

        nodes = []
        for entry in entries:
            rel_path = f"{base}/{entry.name}" if base else entry.name
            st = self._stat_entry(entry, rel_path)
            if st is None:
                continue

            is_dir = stat.S_ISDIR(st.st_mode)
            children = None
            if is_dir:
                if entry.is_symlink():
                    children = []
                elif depth + 1 >= self.tree_max_depth:
                    loguru.logger.warning(f"Tree depth limit reached at {rel_path}")
                    children = []
                else:
                    children = self._build_tree(Path(entry.path), rel_path, depth + 1)

            nodes.append(TreeNode(
                name=entry.name,
                path=rel_path,
                is_directory=is_dir,
                size=0 if is_dir else st.st_size,
                modified=to_timestamp(st.st_mtime),
                extension=None if is_dir else os.path.splitext(entry.name)[1],
                children=children,
            ))

        nodes.sort(key=lambda node: (not node.is_directory, node.name))
        return nodes

    async def list_directory(self, relative_path: str = "") -> list[DirectoryEntry]:
        """
        List one level of a directory (no recursion).

        Args:
            relative_path: Directory to list, relative to the root (default: root)

        Returns:
            Direct entries, folders first, each group sorted by name

        Raises:
            PathEscapeError: If path is outside the root
            NotFoundError: If the directory doesn't exist
            NotDirectoryError: If path is a file
        """
        target = self.resolve(relative_path)
        rel_path = self.relative(target)

        with translate_os_errors("read directory", rel_path):
            if not stat.S_ISDIR(target.stat().st_mode):
                raise NotDirectoryError("Path is not a directory")
            return await asyncio.to_thread(self._list_level, target, rel_path)

    def _list_level(self, directory: Path, base: str) -> list[DirectoryEntry]:
        with os.scandir(directory) as it:
            entries = list(it)

        contents = []
        for entry in entries:
            rel_path = f"{base}/{entry.name}" if base else entry.name
            st = self._stat_entry(entry, rel_path)
            if st is None:
                continue
            is_dir = stat.S_ISDIR(st.st_mode)
            contents.append(DirectoryEntry(
                name=entry.name,
                path=rel_path,
                type="folder" if is_dir else "file",
                size=0 if is_dir else st.st_size,
                modified=to_timestamp(st.st_mtime),
            ))

        contents.sort(key=lambda e: (e.type != "folder", e.name))
        return contents

    async def read_file(self, relative_path: str) -> FileContent:
        """
        Read a file and classify it as text or binary.

        Args:
            relative_path: Relative path to file

        Returns:
            File content; ``content`` is None for binary files

        Raises:
            PathEscapeError: If path is outside the root
            NotFoundError: If file doesn't exist
            IsDirectoryError: If path is a directory
            FileTooLargeError: If file is larger than ``max_file_size``
        """
        file_path = self.resolve(relative_path)
        rel_path = self.relative(file_path)

        with translate_os_errors("read file", rel_path):
            st = file_path.stat()
            if stat.S_ISDIR(st.st_mode):
                raise IsDirectoryError("Path is a directory, not a file")
            too_large = FileTooLargeError(f"File too large to display (>{_format_size(self.max_file_size)})")
            if st.st_size > self.max_file_size:
                raise too_large

            async with aiofiles.open(file_path, "rb") as f:
                # 文件可能在 stat 之后增长，读取量同样受上限约束
                data = await f.read(self.max_file_size + 1)
            if len(data) > self.max_file_size:
                raise too_large

        content = classify_content(data)
        is_binary = content is None
        return FileContent(
            name=file_path.name,
            path=rel_path,
            extension=file_path.suffix,
            size=st.st_size,
            modified=to_timestamp(st.st_mtime),
            content=content,
            is_binary=is_binary,
            type="binary" if is_binary else "text",
        )

    async def write_file(self, relative_path: str, content: str) -> FileMetadata:
        """
        Write content to a file, overwriting it and creating parent directories.

        Args:
            relative_path: Relative path to file
            content: File content

        Returns:
            Updated file metadata

        Raises:
            PathEscapeError: If path is outside the root
            InvalidContentError: If content is not a string
        """
        if not isinstance(content, str):
            raise InvalidContentError("Content must be a string")
        file_path = self.resolve(relative_path)
        rel_path = self.relative(file_path)

        with translate_os_errors("save file", rel_path):
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "w", encoding="utf-8", newline="") as f:
                await f.write(content)
            st = file_path.stat()

        loguru.logger.info(f"Saved file: {file_path} ({st.st_size} bytes)")
        return FileMetadata(
            name=file_path.name,
            path=rel_path,
            size=st.st_size,
            modified=to_timestamp(st.st_mtime),
        )

    async def create_file(self, relative_path: str, content: str = "") -> CreatedFile:
        """
        Create a new file; fails if anything already exists at the path.

        Args:
            relative_path: Relative path to file
            content: Initial content

        Returns:
            Created file metadata with its content

        Raises:
            PathEscapeError: If path is outside the root
            InvalidContentError: If content is not a string
            AlreadyExistsError: If the path already exists
        """
        if not isinstance(content, str):
            raise InvalidContentError("Content must be a string")
        file_path = self.resolve(relative_path)
        rel_path = self.relative(file_path)

        if file_path.exists():
            raise AlreadyExistsError("File already exists")

        with translate_os_errors("create file", rel_path):
            file_path.parent.mkdir(parents=True, exist_ok=True)
            # "x" 模式：并发创建时由操作系统保证只有一个成功
            async with aiofiles.open(file_path, "x", encoding="utf-8", newline="") as f:
                await f.write(content)
            st = file_path.stat()

        loguru.logger.info(f"Created file: {file_path}")
        return CreatedFile(
            name=file_path.name,
            path=rel_path,
            size=st.st_size,
            modified=to_timestamp(st.st_mtime),
            content=content,
        )

    async def delete_entry(self, relative_path: str) -> Literal["directory", "file"]:
        """
        Delete a file, or a directory with everything below it.

        A symlink is removed as a link; its target is left untouched.

        Args:
            relative_path: Relative path to file or directory

        Returns:
            Which kind of entry was deleted

        Raises:
            PathEscapeError: If path is outside the root
            ProtectedPathError: If path is the root itself
            NotFoundError: If nothing exists at the path
        """
        self.resolve(relative_path)
        target = lexical_path(self.root, relative_path)
        if target == self.root:
            raise ProtectedPathError("Refusing to delete the root directory")
        rel_path = self.relative(target)
        # 条目所在目录也必须在根目录内
        self.resolve(os.path.dirname(rel_path))

        with translate_os_errors("delete", rel_path):
            st = target.lstat()
            if stat.S_ISDIR(st.st_mode):
                await asyncio.to_thread(shutil.rmtree, target)
                kind = "directory"
            else:
                await asyncio.to_thread(target.unlink)
                kind = "file"

        loguru.logger.info(f"Deleted {kind}: {target}")
        return kind

    async def create_folder(self, relative_path: str) -> FolderMetadata:
        """
        Create a directory, including missing parents.

        Args:
            relative_path: Relative path to directory

        Returns:
            Created folder metadata

        Raises:
            PathEscapeError: If path is outside the root
            AlreadyExistsError: If the path already exists
        """
        dir_path = self.resolve(relative_path)
        rel_path = self.relative(dir_path)

        if dir_path.exists():
            raise AlreadyExistsError("Folder already exists")

        with translate_os_errors("create folder", rel_path):
            await asyncio.to_thread(dir_path.mkdir, parents=True, exist_ok=False)
            st = dir_path.stat()

        loguru.logger.info(f"Created folder: {dir_path}")
        return FolderMetadata(
            name=dir_path.name,
            path=rel_path,
            modified=to_timestamp(st.st_mtime),
        )
