import base64
import binascii
import mimetypes
import posixpath
from typing import Optional

from common.errors import BadRequest, NotFound
from utils.ids import new_id, now_iso

ROOT_FOLDER_ID = "root"


def root_folder(created=None) -> dict:
    ts = created or now_iso()
    return {
        "id": ROOT_FOLDER_ID,
        "name": "Home",
        "path": "/",
        "parentId": None,
        "children": [],
        "created": ts,
        "modified": ts,
    }


def _content_size(content: str) -> int:
    try:
        return len(base64.b64decode(content, validate=True))
    except (binascii.Error, TypeError, ValueError):
        raise BadRequest("Invalid file content")


class Storage:
    """
    单个用户的存储对象：files / folders 两个有序列表。
    - root 目录始终存在
    - 所有修改都在内存里完成，由调用方整体写回存储后端
    """

    def __init__(self, files=None, folders=None):
        self.files = list(files or [])
        self.folders = list(folders or [])
        if self.find_folder(ROOT_FOLDER_ID) is None:
            self.folders.insert(0, root_folder())

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[dict]):
        data = data or {}
        return cls(data.get("files"), data.get("folders"))

    @staticmethod
    def validate(data) -> None:
        """校验客户端整体提交的 storage（updateStorage）"""
        if not isinstance(data, dict):
            raise BadRequest("Invalid storage data")
        files, folders = data.get("files"), data.get("folders")
        if not isinstance(files, list) or not isinstance(folders, list):
            raise BadRequest("Invalid storage data")
        if not all(isinstance(item, dict) for item in files + folders):
            raise BadRequest("Invalid storage data")
        folder_ids = [f.get("id") for f in folders]
        file_ids = [f.get("id") for f in files]
        if ROOT_FOLDER_ID not in folder_ids:
            raise BadRequest("Invalid storage data")
        if not all(isinstance(i, str) for i in folder_ids + file_ids + [f.get("folderId") for f in files]):
            raise BadRequest("Invalid storage data")
        # id 在 files / folders 内各自唯一
        if len(set(folder_ids)) != len(folder_ids) or len(set(file_ids)) != len(file_ids):
            raise BadRequest("Invalid storage data")
        known = set(folder_ids)
        if any(f.get("folderId") not in known for f in files):
            raise BadRequest("Invalid storage data")

    def to_dict(self) -> dict:
        return {"files": self.files, "folders": self.folders}

    # -------- lookup --------
    def find_file(self, file_id):
        for f in self.files:
            if f.get("id") == file_id:
                return f
        return None

    def find_folder(self, folder_id):
        for f in self.folders:
            if f.get("id") == folder_id:
                return f
        return None

    def _require_folder(self, folder_id):
        folder = self.find_folder(folder_id)
        if folder is None:
            raise NotFound("Folder not found")
        return folder

    def _require_file(self, file_id):
        f = self.find_file(file_id)
        if f is None:
            raise NotFound("File not found")
        return f

    def get_file(self, file_id) -> dict:
        return self._require_file(file_id)

    def list_folder(self, folder_id=ROOT_FOLDER_ID) -> dict:
        folder = self._require_folder(folder_id or ROOT_FOLDER_ID)
        return {
            "folder": folder,
            "folders": [f for f in self.folders if f.get("parentId") == folder["id"]],
            "files": [f for f in self.files if f.get("folderId") == folder["id"]],
        }

    # -------- mutations --------
    def add_file(self, data: dict, folder_id=None, max_size: Optional[int] = None) -> dict:
        name = str(data.get("name") or "").strip()
        if not name:
            raise BadRequest("File name is required")
        folder = self._require_folder(folder_id or ROOT_FOLDER_ID)

        content = data.get("content")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            raise BadRequest("Invalid file size")
        if size < 0:
            raise BadRequest("Invalid file size")
        if content is not None:
            size = max(size, _content_size(content))
        if max_size is not None and size > max_size:
            raise BadRequest("File too large")

        ts = now_iso()
        record = {
            "id": new_id(),
            "name": name,
            "size": size,
            "type": data.get("type") or mimetypes.guess_type(name)[0] or "application/octet-stream",
            "content": content,
            "folderId": folder["id"],
            "modified": ts,
            "created": ts,
        }
        self.files.append(record)
        return record

    def add_folder(self, data: dict, parent_id=None) -> dict:
        name = str(data.get("name") or "").strip()
        if not name:
            raise BadRequest("Folder name is required")
        parent = self._require_folder(parent_id or ROOT_FOLDER_ID)

        ts = now_iso()
        folder = {
            "id": new_id(),
            "name": name,
            "path": data.get("path") or posixpath.join(parent.get("path") or "/", name),
            "parentId": parent["id"],
            "children": [],
            "modified": ts,
            "created": ts,
        }
        self.folders.append(folder)
        parent.setdefault("children", []).append(folder["id"])
        return folder

    def rename_item(self, item_type, item_id, new_name) -> dict:
        new_name = str(new_name or "").strip()
        if not item_type or not item_id or not new_name:
            raise BadRequest("Item type, ID and new name are required")
        if item_type == "file":
            item = self._require_file(item_id)
        elif item_type == "folder":
            item = self._require_folder(item_id)
        else:
            raise BadRequest("Invalid item type")
        item["name"] = new_name
        item["modified"] = now_iso()
        if item_type == "folder" and item_id != ROOT_FOLDER_ID:
            self._move_path(item)
        return item

    def _move_path(self, folder):
        """目录改名后同步自身及所有子目录的 path"""
        old_path = folder.get("path")
        parent = self.find_folder(folder.get("parentId"))
        new_path = posixpath.join((parent or {}).get("path") or "/", folder["name"])
        folder["path"] = new_path
        if not old_path or old_path == new_path:
            return
        prefix = old_path.rstrip("/") + "/"
        for fid in self._descendant_folder_ids(folder["id"]) - {folder["id"]}:
            child = self.find_folder(fid)
            path = child.get("path") or ""
            if path.startswith(prefix):
                child["path"] = new_path.rstrip("/") + "/" + path[len(prefix):]

    def delete_item(self, item_type, item_id) -> None:
        if not item_type or not item_id:
            raise BadRequest("Item type and ID are required")
        if item_type == "file":
            self._require_file(item_id)
            self.files = [f for f in self.files if f.get("id") != item_id]
        elif item_type == "folder":
            if item_id == ROOT_FOLDER_ID:
                raise BadRequest("Cannot delete root folder")
            folder = self._require_folder(item_id)
            doomed = self._descendant_folder_ids(item_id)
            # 级联删除：子目录及其中的文件一并删除
            self.files = [f for f in self.files if f.get("folderId") not in doomed]
            self.folders = [f for f in self.folders if f.get("id") not in doomed]
            parent = self.find_folder(folder.get("parentId"))
            if parent is not None and item_id in parent.get("children", []):
                parent["children"].remove(item_id)
        else:
            raise BadRequest("Invalid item type")

    def _descendant_folder_ids(self, folder_id) -> set:
        result = {folder_id}
        pending = [folder_id]
        while pending:
            current = pending.pop()
            for f in self.folders:
                fid = f.get("id")
                if f.get("parentId") == current and fid not in result:
                    result.add(fid)
                    pending.append(fid)
        return result
