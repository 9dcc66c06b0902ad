"""项目路由测试：/api/project/..."""

import pytest
from fastapi.testclient import TestClient

from ide_api.main import create_app
from shared.config import Settings


class TestGetProject:
    """测试 GET /api/project/{name}。"""

    def test_project_tree(self, client, project):
        """返回项目信息与按规则排序的目录树（camelCase 字段）。"""
        (project / "b.txt").write_text("b")
        (project / "A").mkdir()
        (project / "a.txt").write_text("a")

        resp = client.get("/api/project/demo")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["project"]["name"] == "demo"
        tree = body["project"]["tree"]
        assert [node["name"] for node in tree] == ["A", "a.txt", "b.txt"]
        assert tree[0]["isDirectory"] is True
        assert tree[0]["children"] == []
        assert tree[1]["extension"] == ".txt"
        assert "modified" in tree[1]

    def test_missing_project(self, client):
        """项目不存在返回 404。"""
        resp = client.get("/api/project/ghost")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": 'Project "ghost" not found'}

    def test_project_name_escape(self, client):
        """项目名逃逸返回 403。"""
        resp = client.get("/api/project/..%5C")

        assert resp.status_code == 403
        assert resp.json()["success"] is False

    def test_outside_symlink_not_in_tree(self, client, project, outside_dir):
        """指向工作区外的链接不出现在目录树中。"""
        (outside_dir / "secret.txt").write_text("s" * 1234)
        (project / "leak").symlink_to(outside_dir / "secret.txt")
        (project / "ok.txt").write_text("ok")

        tree = client.get("/api/project/demo").json()["project"]["tree"]

        assert [node["name"] for node in tree] == ["ok.txt"]


class TestListEntries:
    """测试 GET /api/project/{name}/entries。"""

    def test_one_level(self, client, project):
        """只返回一层内容，字段为 name/path/type/size/modified。"""
        (project / "src" / "lib").mkdir(parents=True)
        (project / "src" / "lib" / "x.js").write_text("x")
        (project / "src" / "main.py").write_text("print(1)")

        resp = client.get("/api/project/demo/entries", params={"dir": "src"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["path"] == "src"
        assert [(e["name"], e["type"]) for e in body["contents"]] == [
            ("lib", "folder"),
            ("main.py", "file"),
        ]
        assert body["contents"][1]["size"] == len("print(1)")
        assert "modified" in body["contents"][1]

    def test_project_root_by_default(self, client, project):
        """不带 dir 时列出项目根目录。"""
        (project / "a.txt").write_text("a")

        resp = client.get("/api/project/demo/entries")

        assert [e["path"] for e in resp.json()["contents"]] == ["a.txt"]

    def test_missing_directory(self, client, project):
        """目录不存在返回 404。"""
        resp = client.get("/api/project/demo/entries", params={"dir": "ghost"})

        assert resp.status_code == 404
        assert resp.json()["success"] is False

    def test_file_rejected(self, client, project):
        """dir 指向文件时返回 400。"""
        (project / "f.txt").write_text("f")

        resp = client.get("/api/project/demo/entries", params={"dir": "f.txt"})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Path is not a directory"}

    def test_escape_rejected(self, client, project):
        """dir 逃逸项目目录返回 403。"""
        resp = client.get("/api/project/demo/entries", params={"dir": "../.."})

        assert resp.status_code == 403


class TestReadFile:
    """测试 GET /api/project/{name}/file/*。"""

    def test_text_file(self, client, project):
        """文本文件返回内容。"""
        (project / "src").mkdir()
        (project / "src" / "main.py").write_text("print('hi')\n")

        resp = client.get("/api/project/demo/file/src/main.py")

        assert resp.status_code == 200
        file = resp.json()["file"]
        assert file["name"] == "main.py"
        assert file["path"] == "src/main.py"
        assert file["extension"] == ".py"
        assert file["content"] == "print('hi')\n"
        assert file["isBinary"] is False
        assert file["type"] == "text"

    def test_binary_file(self, client, project):
        """二进制文件 content 为 null。"""
        (project / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")

        file = client.get("/api/project/demo/file/logo.png").json()["file"]

        assert file["isBinary"] is True
        assert file["type"] == "binary"
        assert file["content"] is None

    def test_escape_forbidden(self, client, project, temp_workspace):
        """逃逸出项目目录返回 403。"""
        (temp_workspace / "other").mkdir()
        (temp_workspace / "other" / "secret.txt").write_text("secret")

        resp = client.get("/api/project/demo/file/..%5Cother%5Csecret.txt")

        assert resp.status_code == 403
        assert "Access denied" in resp.json()["error"]

    def test_missing_file(self, client, project):
        """文件不存在返回 404。"""
        assert client.get("/api/project/demo/file/nope.txt").status_code == 404

    def test_directory(self, client, project):
        """目标是目录返回 400。"""
        (project / "src").mkdir()

        resp = client.get("/api/project/demo/file/src")

        assert resp.status_code == 400
        assert resp.json()["error"] == "Path is a directory, not a file"

    def test_too_large(self, temp_workspace, project):
        """超过大小上限返回 413。"""
        (project / "big.txt").write_text("x" * 17)
        settings = Settings(workspace_root=str(temp_workspace), max_file_size=16)

        with TestClient(create_app(settings)) as client:
            resp = client.get("/api/project/demo/file/big.txt")

        assert resp.status_code == 413
        assert resp.json()["success"] is False


class TestWriteFile:
    """测试 PUT /api/project/{name}/file/*。"""

    def test_save_creates_parents_and_round_trips(self, client, project):
        """保存时创建父目录，再读回内容一致。"""
        resp = client.put("/api/project/demo/file/a/b/c.txt", json={"content": "hello\nworld"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "File saved successfully"
        assert body["file"]["path"] == "a/b/c.txt"
        assert body["file"]["size"] == len("hello\nworld")
        read = client.get("/api/project/demo/file/a/b/c.txt").json()
        assert read["file"]["content"] == "hello\nworld"

    @pytest.mark.parametrize("payload", [{"content": 5}, {"content": None}, {}])
    def test_non_string_content(self, client, project, payload):
        """内容不是字符串返回 400。"""
        resp = client.put("/api/project/demo/file/f.txt", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Content must be a string"}
        assert not (project / "f.txt").exists()

    def test_escape_forbidden(self, client, project, temp_workspace):
        """写入逃逸路径返回 403，且不写盘。"""
        resp = client.put("/api/project/demo/file/..%5Cescaped.txt", json={"content": "x"})

        assert resp.status_code == 403
        assert not (temp_workspace / "escaped.txt").exists()


class TestCreateFile:
    """测试 POST /api/project/{name}/file/*。"""

    def test_create_then_conflict(self, client, project):
        """首次创建 201，再次创建 409 且内容不变。"""
        first = client.post("/api/project/demo/file/notes.md", json={"content": "v1"})
        second = client.post("/api/project/demo/file/notes.md", json={"content": "v2"})

        assert first.status_code == 201
        assert first.json()["file"]["content"] == "v1"
        assert first.json()["message"] == "File created successfully"
        assert second.status_code == 409
        assert second.json() == {"success": False, "error": "File already exists"}
        assert (project / "notes.md").read_text() == "v1"

    def test_create_without_body(self, client, project):
        """无请求体时创建空文件。"""
        resp = client.post("/api/project/demo/file/empty.txt")

        assert resp.status_code == 201
        assert resp.json()["file"]["content"] == ""
        assert (project / "empty.txt").read_text() == ""


class TestDeleteEntry:
    """测试 DELETE /api/project/{name}/file/*。"""

    def test_delete_directory(self, client, project):
        """递归删除目录，目录树中不再出现。"""
        (project / "src" / "lib").mkdir(parents=True)
        (project / "src" / "lib" / "x.js").write_text("x")

        resp = client.delete("/api/project/demo/file/src")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Directory deleted successfully"}
        tree = client.get("/api/project/demo").json()["project"]["tree"]
        assert tree == []

    def test_delete_file(self, client, project):
        """删除文件。"""
        (project / "f.txt").write_text("x")

        resp = client.delete("/api/project/demo/file/f.txt")

        assert resp.json()["message"] == "File deleted successfully"
        assert not (project / "f.txt").exists()

    def test_delete_missing(self, client, project):
        """不存在返回 404。"""
        assert client.delete("/api/project/demo/file/ghost").status_code == 404

    def test_delete_directory_symlink_keeps_target(self, client, project):
        """删除目录链接只移除链接本身。"""
        (project / "src").mkdir()
        (project / "src" / "main.py").write_text("print(1)")
        (project / "alias").symlink_to(project / "src", target_is_directory=True)

        resp = client.delete("/api/project/demo/file/alias")

        assert resp.status_code == 200
        assert resp.json()["message"] == "File deleted successfully"
        assert not (project / "alias").is_symlink()
        assert (project / "src" / "main.py").exists()

    def test_delete_project_root_refused(self, client, project):
        """不能通过文件路由删除项目根目录。"""
        resp = client.delete("/api/project/demo/file/")

        assert resp.status_code == 403
        assert project.is_dir()


class TestCreateFolder:
    """测试 POST /api/project/{name}/folder/*。"""

    def test_create_then_conflict(self, client, project):
        """首次 201，已存在时 409。"""
        first = client.post("/api/project/demo/folder/src/components")
        second = client.post("/api/project/demo/folder/src/components")

        assert first.status_code == 201
        folder = first.json()["folder"]
        assert folder["name"] == "components"
        assert folder["path"] == "src/components"
        assert (project / "src" / "components").is_dir()
        assert second.status_code == 409

    def test_escape_forbidden(self, client, project, temp_workspace):
        """逃逸路径返回 403。"""
        resp = client.post("/api/project/demo/folder/..%5C..%5Cpwned")

        assert resp.status_code == 403
        assert not (temp_workspace.parent / "pwned").exists()


class TestEnvelope:
    """测试统一响应信封。"""

    def test_unknown_route(self, client):
        """未知 API 路由返回 404 信封。"""
        resp = client.get("/api/nothing-here")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "API endpoint /api/nothing-here not found"}

    def test_unexpected_error_hidden(self, app_settings, project, monkeypatch):
        """未预期的异常返回 500，不暴露内部细节。"""
        from ide_api.services import WorkspaceService

        async def boom(self, relative_path):
            raise RuntimeError("disk exploded at /secret/path")

        monkeypatch.setattr(WorkspaceService, "read_file", boom)
        client = TestClient(create_app(app_settings), raise_server_exceptions=False)

        resp = client.get("/api/project/demo/file/x.txt")

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "error": "Internal server error"}
