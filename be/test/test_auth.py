from datetime import timedelta

from flask_jwt_extended import create_access_token

from app import create_app
from conftest import TEST_CONFIG, auth_call, new_storage_id


def test_create(client):
    res = auth_call(client, "create", storageId=new_storage_id(), password="123456")
    assert res.status_code == 200
    assert res.get_json()["message"] == "Storage created successfully"

    cookie = " ".join(res.headers.getlist("Set-Cookie"))
    assert "token=" in cookie
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie
    assert "Max-Age=604800" in cookie
    assert "Path=/" in cookie


def test_create_requires_fields(client):
    res = auth_call(client, "create", storageId=new_storage_id())
    assert res.status_code == 400
    assert res.get_json()["error"] == "Storage ID and password are required"


def test_create_rejects_path_like_id(client):
    res = auth_call(client, "create", storageId="../other", password="123456")
    assert res.status_code == 400


def test_create_duplicate(client):
    storage_id = new_storage_id()
    auth_call(client, "create", storageId=storage_id, password="123456")
    res = auth_call(client, "create", storageId=storage_id, password="654321")
    assert res.status_code == 409
    assert res.get_json()["error"] == "Storage ID already exists"


def test_login(test_app):
    storage_id = new_storage_id()
    auth_call(test_app.test_client(), "create", storageId=storage_id, password="123456")

    client = test_app.test_client()
    res = auth_call(client, "login", storageId=storage_id, password="123456")
    assert res.status_code == 200
    assert res.get_json()["message"] == "Login successful"

    res = auth_call(client, "verify")
    assert res.status_code == 200
    assert res.get_json()["storageId"] == storage_id


def test_login_wrong_password(client):
    storage_id = new_storage_id()
    auth_call(client, "create", storageId=storage_id, password="123456")
    res = auth_call(client, "login", storageId=storage_id, password="wrong")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid storage ID or password"


def test_login_unknown_storage(client):
    res = auth_call(client, "login", storageId=new_storage_id(), password="123456")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid storage ID or password"


def test_password_is_hashed(test_app, client):
    storage_id = new_storage_id()
    auth_call(client, "create", storageId=storage_id, password="123456")
    record = test_app.extensions["cloudstore.store"].get(storage_id)
    assert record["password"] != "123456"
    assert record["storage"]["folders"][0]["id"] == "root"
    assert record["createdAt"].endswith("Z")


def test_verify_without_cookie(client):
    res = auth_call(client, "verify")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Not authenticated"


def test_verify_garbage_token(client):
    client.set_cookie("token", "not-a-jwt")
    res = auth_call(client, "verify")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid token"


def test_verify_expired_token(test_app, client, logged_in):
    token = create_access_token(identity=logged_in, expires_delta=timedelta(seconds=-30))
    client.set_cookie("token", token)
    res = auth_call(client, "verify")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid token"


def test_verify_storage_gone(test_app, client):
    token = create_access_token(identity=new_storage_id("ghost"))
    client.set_cookie("token", token)
    res = auth_call(client, "verify")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Storage not found"


def test_logout_revokes_token(client, logged_in):
    res = auth_call(client, "logout")
    assert res.status_code == 200
    assert res.get_json()["message"] == "Logged out"

    res = auth_call(client, "verify")
    assert res.status_code == 401


def test_invalid_csrf_header(client):
    res = auth_call(client, "create", csrf="write", storageId=new_storage_id(), password="123456")
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid request"

    res = client.post("/api/auth", json={"action": "verify"})
    assert res.status_code == 401


def test_invalid_action(client):
    res = auth_call(client, "explode", csrf="login")
    assert res.status_code == 400
    assert res.get_json()["error"] == "Invalid action"


def test_method_not_allowed(client):
    res = client.get("/api/auth")
    assert res.status_code == 405
    assert res.get_json()["error"] == "Method not allowed"


def test_preflight_cors(client):
    res = client.options("/api/auth", headers={"Origin": "http://example.com"})
    assert res.status_code == 200
    assert res.headers["Access-Control-Allow-Origin"] == "http://example.com"
    assert res.headers["Access-Control-Allow-Credentials"] == "true"
    assert "X-CSRF-Token" in res.headers["Access-Control-Allow-Headers"]


def test_rate_limit_per_ip_and_fingerprint():
    app = create_app(dict(TEST_CONFIG, AUTH_RATE_LIMIT=3))
    client = app.test_client()
    for _ in range(3):
        assert auth_call(client, "verify").status_code == 401

    res = auth_call(client, "verify")
    assert res.status_code == 429
    assert res.get_json()["error"] == "Too many requests. Please try again later."

    # 不同设备指纹单独计数
    res = client.post(
        "/api/auth",
        json={"action": "verify", "deviceFingerprint": {"userAgent": "other"}},
        headers={"X-CSRF-Token": "verify"},
    )
    assert res.status_code == 401


def test_non_object_body(client):
    res = client.post("/api/auth", json=["create"], headers={"X-CSRF-Token": "create"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "Invalid action"
