"""
本地演示存储 - 服务端不可达时的兜底

数据保存在一个 JSON 文件里，结构与服务端的用户文档一致：
{"users": {storage_id: {...}}, "current_user": storage_id}
"""
import json
import os
from datetime import datetime, timezone

from werkzeug.security import generate_password_hash, check_password_hash


class DemoError(RuntimeError):
    pass


def _now_iso():
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"


class DemoStore:
    def __init__(self, path):
        self.path = path

    def _load(self):
        if not os.path.exists(self.path):
            return {"users": {}, "current_user": None}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, data):
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    @property
    def current_user(self):
        return self._load().get("current_user")

    def create(self, storage_id, password):
        data = self._load()
        if storage_id in data["users"]:
            raise DemoError("Storage ID already exists")
        ts = _now_iso()
        data["users"][storage_id] = {
            "storageId": storage_id,
            "password": generate_password_hash(password),
            "createdAt": ts,
            "storage": {
                "files": [],
                "folders": [
                    {"id": "root", "name": "Home", "path": "/", "parentId": None,
                     "children": [], "created": ts, "modified": ts}
                ],
            },
        }
        self._save(data)

    def login(self, storage_id, password):
        data = self._load()
        user = data["users"].get(storage_id)
        if not user or not check_password_hash(user["password"], password):
            raise DemoError("Invalid storage ID or password")
        data["current_user"] = storage_id
        self._save(data)

    def logout(self):
        if not os.path.exists(self.path):
            return
        data = self._load()
        data["current_user"] = None
        self._save(data)

    def get_storage(self, storage_id=None):
        data = self._load()
        storage_id = storage_id or data.get("current_user")
        user = data["users"].get(storage_id) if storage_id else None
        if not user:
            raise DemoError("Storage not found")
        return user["storage"]

    def list_folder(self, folder_id=None):
        """按 parentId / folderId 过滤出某个目录的内容，与服务端 listFolder 的返回结构一致"""
        storage = self.get_storage()
        folder_id = folder_id or "root"
        folder = next((f for f in storage["folders"] if f.get("id") == folder_id), None)
        if folder is None:
            raise DemoError("Folder not found")
        return {
            "folder": folder,
            "folders": [f for f in storage["folders"] if f.get("parentId") == folder_id],
            "files": [f for f in storage["files"] if f.get("folderId") == folder_id],
            "demo": True,
        }
