"""
存储API - 对应服务端 /api/jsonbin 的各个 action
"""
import base64
import mimetypes
import os
from typing import Dict, Optional

from client.api.base import BaseAPI, NetworkError
from client.config import Config
from client.local.demo_store import DemoStore
from client.utils.fingerprint import get_device_fingerprint

STORAGE_PATH = "/api/jsonbin"


class StorageAPI(BaseAPI):
    """文件/目录操作；读取在网络失败时退回本地演示存储"""

    def __init__(self, base_url=None, session=None, demo_store=None):
        super().__init__(base_url, session)
        self.demo_store = demo_store or DemoStore(Config.DEMO_STORE_PATH)

    def _call(self, action, csrf, **body):
        payload = {"action": action, "deviceFingerprint": get_device_fingerprint()}
        payload.update({k: v for k, v in body.items() if v is not None})
        return self.request(STORAGE_PATH, csrf, payload)

    # ---------- 读取 ----------
    def get_storage(self) -> Dict:
        try:
            return self._call("getStorage", "read")
        except NetworkError:
            if self.demo_store.current_user:
                return self.demo_store.get_storage()
            raise

    def list_folder(self, folder_id: Optional[str] = None) -> Dict:
        try:
            return self._call("listFolder", "read", folderId=folder_id)
        except NetworkError:
            if self.demo_store.current_user:
                return self.demo_store.list_folder(folder_id)
            raise

    def download(self, file_id: str, save_path: str) -> str:
        record = self._call("getFile", "read", fileId=file_id)
        content = record.get("content") or ""
        if os.path.isdir(save_path):
            save_path = os.path.join(save_path, record["name"])
        with open(save_path, "wb") as f:
            f.write(base64.b64decode(content))
        return save_path

    # ---------- 写入 ----------
    def upload(self, filepath: str, folder_id: Optional[str] = None) -> Dict:
        """读取本地文件，base64 后作为 addFile 提交"""
        filename = os.path.basename(filepath)
        file_size = os.path.getsize(filepath)
        if file_size > Config.MAX_UPLOAD_SIZE:
            raise ValueError(f"File {filename} is too large (max 5MB)")

        with open(filepath, "rb") as f:
            content = base64.b64encode(f.read()).decode("ascii")

        data = {
            "name": filename,
            "size": file_size,
            "type": mimetypes.guess_type(filename)[0] or "application/octet-stream",
            "content": content,
        }
        return self._call("addFile", "write", data=data, folderId=folder_id)

    def mkdir(self, name: str, folder_id: Optional[str] = None) -> Dict:
        return self._call("addFolder", "write", data={"name": name}, folderId=folder_id)

    def rename(self, item_type: str, item_id: str, new_name: str) -> Dict:
        return self._call("renameItem", "write", itemType=item_type, fileId=item_id, newName=new_name)

    def delete(self, item_type: str, item_id: str) -> Dict:
        return self._call("deleteItem", "delete", itemType=item_type, fileId=item_id)
