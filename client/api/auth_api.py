# client/api/auth_api.py
import json
import os

import requests

from client.api.base import BaseAPI, NetworkError
from client.config import Config
from client.local.demo_store import DemoStore
from client.utils.fingerprint import get_device_fingerprint


class AuthAPI(BaseAPI):
    """统一的认证接口，网络失败时退回本地演示存储"""

    def __init__(self, base_url=None, session=None, demo_store=None):
        super().__init__(base_url, session)
        self.demo_store = demo_store or DemoStore(Config.DEMO_STORE_PATH)

    def _call(self, action, **body):
        payload = {"action": action, "deviceFingerprint": get_device_fingerprint()}
        payload.update(body)
        return self.request("/api/auth", action, payload)

    # ---------- 身份认证 ----------
    def create(self, storage_id, password):
        try:
            data = self._call("create", storageId=storage_id, password=password)
        except NetworkError:
            self.demo_store.create(storage_id, password)
            self.demo_store.login(storage_id, password)
            return {"message": "Storage created successfully! (Demo Mode)", "demo": True}
        self._save_session()
        return data

    def login(self, storage_id, password):
        try:
            data = self._call("login", storageId=storage_id, password=password)
        except NetworkError:
            self.demo_store.login(storage_id, password)
            return {"message": "Login successful! (Demo Mode)", "demo": True}
        self._save_session()
        return data

    def verify(self):
        return self._call("verify")

    def logout(self):
        try:
            return self._call("logout")
        finally:
            self.session.cookies.clear()
            self._clear_session()
            self.demo_store.logout()

    # ---------- 本地缓存 ----------
    def _save_session(self):
        path = Config.TOKEN_PATH
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w") as f:
            json.dump(requests.utils.dict_from_cookiejar(self.session.cookies), f)

    def _clear_session(self):
        if os.path.exists(Config.TOKEN_PATH):
            os.remove(Config.TOKEN_PATH)

    def load_session(self):
        if os.path.exists(Config.TOKEN_PATH):
            with open(Config.TOKEN_PATH, "r") as f:
                cookies = json.load(f)
            for name, value in cookies.items():
                self.session.cookies.set(name, value)
            return bool(cookies)
        return False
