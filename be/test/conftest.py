import uuid

import pytest

from app import create_app

TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET_KEY": "test-secret",
    "STORE_BACKEND": "memory",
    "AUTH_RATE_LIMIT": 1000,
    "STORAGE_RATE_LIMIT": 1000,
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture(scope="module")
def test_app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        yield app


@pytest.fixture
def client(test_app):
    """每个测试一个新的 client（独立 cookie）"""
    return test_app.test_client()


def new_storage_id(prefix="store"):
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def auth_call(client, action, csrf=None, **body):
    payload = {"action": action, "deviceFingerprint": {"userAgent": "pytest"}}
    payload.update(body)
    return client.post("/api/auth", json=payload, headers={"X-CSRF-Token": csrf or action})


def storage_call(client, action, csrf="read", **body):
    payload = {"action": action}
    payload.update(body)
    return client.post("/api/jsonbin", json=payload, headers={"X-CSRF-Token": csrf})


@pytest.fixture
def logged_in(client):
    """创建一个随机存储，client 已带上 token cookie"""
    storage_id = new_storage_id()
    res = auth_call(client, "create", storageId=storage_id, password="123456")
    assert res.status_code == 200, res.get_json()
    return storage_id
