"""Pytest fixtures for Workspace IDE tests."""

import tempfile
from pathlib import Path

import pytest

# Ensure src is on path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def temp_workspace():
    """创建临时工作区目录。"""
    with tempfile.TemporaryDirectory(prefix="ide-test-workspace-") as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def workspace_service(temp_workspace):
    """以临时目录为根的 WorkspaceService。"""
    from ide_api.services import WorkspaceService

    return WorkspaceService(temp_workspace)


@pytest.fixture
def folder_service(workspace_service):
    """以临时目录为根的 FolderService。"""
    from ide_api.services import FolderService

    return FolderService(workspace_service)


@pytest.fixture
def app_settings(temp_workspace):
    """指向临时工作区的 Settings。"""
    from shared.config import Settings

    return Settings(workspace_root=str(temp_workspace), environment="test")


@pytest.fixture
def client(app_settings):
    """运行 lifespan 的 TestClient。"""
    from fastapi.testclient import TestClient

    from ide_api.main import create_app

    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def project(temp_workspace):
    """在工作区中创建一个名为 demo 的项目目录。"""
    project_dir = temp_workspace / "demo"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def outside_dir():
    """工作区之外的临时目录，用于符号链接逃逸场景。"""
    with tempfile.TemporaryDirectory(prefix="ide-test-outside-") as tmpdir:
        yield Path(tmpdir).resolve()
