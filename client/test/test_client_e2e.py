"""
客户端直连 Flask test client 的端到端测试：
FlaskSession 把 requests 风格的 post 转给 app.test_client()，cookie 由 test client 维护
"""
import uuid

import pytest

from app import create_app
from client.api.auth_api import AuthAPI
from client.api.base import ApiError
from client.api.storage_api import StorageAPI
from client.client import CloudStoreClient
from client.config import Config
from client.local.demo_store import DemoStore


class FlaskResponse:
    def __init__(self, resp):
        self.status_code = resp.status_code
        self._json = resp.get_json(silent=True)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("no json")
        return self._json


class FlaskSession:
    def __init__(self, app):
        self.client = app.test_client()
        self.cookies = {}

    def post(self, url, json=None, headers=None, timeout=None):
        path = url.split("http://testserver", 1)[1]
        return FlaskResponse(self.client.post(path, json=json, headers=headers))


@pytest.fixture
def apis(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "TOKEN_PATH", str(tmp_path / "token.json"))
    app = create_app({
        "TESTING": True,
        "JWT_SECRET_KEY": "test-secret",
        "STORE_BACKEND": "memory",
        "LOG_LEVEL": "WARNING",
    })
    session = FlaskSession(app)
    demo = DemoStore(str(tmp_path / "demo.json"))
    auth = AuthAPI("http://testserver", session=session, demo_store=demo)
    storage = StorageAPI("http://testserver", session=session, demo_store=demo)
    # FlaskSession 没有真正的 cookie jar，跳过本地缓存
    monkeypatch.setattr(auth, "_save_session", lambda: None)
    return auth, storage


def test_full_flow(apis, tmp_path):
    auth, storage = apis
    storage_id = f"e2e_{uuid.uuid4().hex[:6]}"

    assert auth.create(storage_id, "123456")["message"] == "Storage created successfully"
    assert auth.verify()["storageId"] == storage_id

    folder = storage.mkdir("docs")["folder"]
    local = tmp_path / "report.txt"
    local.write_bytes(b"quarterly numbers")
    uploaded = storage.upload(str(local), folder["id"])["file"]
    assert uploaded["size"] == len(b"quarterly numbers")

    listing = storage.list_folder(folder["id"])
    assert [f["name"] for f in listing["files"]] == ["report.txt"]

    saved = storage.download(uploaded["id"], str(tmp_path / "copy.txt"))
    with open(saved, "rb") as f:
        assert f.read() == b"quarterly numbers"

    storage.rename("file", uploaded["id"], "final.txt")
    storage.delete("folder", folder["id"])
    data = storage.get_storage()
    assert data["files"] == []
    assert [f["id"] for f in data["folders"]] == ["root"]


def test_login_error_surface(apis):
    auth, _ = apis
    with pytest.raises(ApiError) as exc:
        auth.login("nobody_here", "123456")
    assert exc.value.status == 401


def test_cli_reports_network_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(Config, "TOKEN_PATH", str(tmp_path / "token.json"))
    monkeypatch.setattr(Config, "DEMO_STORE_PATH", str(tmp_path / "demo.json"))
    from client import client as cli_module

    code = cli_module.main(["--base-url", "http://127.0.0.1:9", "verify"])
    assert code == 1
    assert "Network error" in capsys.readouterr().err
    assert isinstance(CloudStoreClient("http://127.0.0.1:9").storage, StorageAPI)


def test_cli_demo_mode_listing(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(Config, "TOKEN_PATH", str(tmp_path / "token.json"))
    monkeypatch.setattr(Config, "DEMO_STORE_PATH", str(tmp_path / "demo.json"))
    from client import client as cli_module

    offline = ["--base-url", "http://127.0.0.1:9"]
    assert cli_module.main(offline + ["create", "--storage-id", "demo1", "--password", "pw"]) == 0
    assert "(Demo Mode)" in capsys.readouterr().out

    assert cli_module.main(offline + ["ls"]) == 0
    out = capsys.readouterr().out
    assert "[Home] / (Demo Mode)" in out
    assert "(empty)" in out

    assert cli_module.main(offline + ["ls", "--folder", "nope"]) == 1
    assert "Folder not found" in capsys.readouterr().err
