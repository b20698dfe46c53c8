# services/storage_service.py
import logging

from flask import current_app

from common.errors import BadRequest, NotFound, StoreError
from models.storage import Storage
from services.store.factory import current_store

logger = logging.getLogger(__name__)


class StorageService:
    """存储记录的增删改查；每次修改都是整份文档读出、修改、写回"""

    @staticmethod
    def load(storage_id):
        record = current_store().get(storage_id)
        if not record:
            raise NotFound("Storage not found")
        return record

    @staticmethod
    def _save(storage_id, record, storage: Storage, error_msg):
        record["storage"] = storage.to_dict()
        if not current_store().put(storage_id, record):
            raise StoreError(error_msg)

    @staticmethod
    def get_storage(record):
        return Storage.from_dict(record.get("storage")).to_dict()

    @staticmethod
    def list_folder(record, folder_id=None):
        return Storage.from_dict(record.get("storage")).list_folder(folder_id)

    @staticmethod
    def get_file(record, file_id):
        if not file_id:
            raise BadRequest("File ID is required")
        return Storage.from_dict(record.get("storage")).get_file(file_id)

    @staticmethod
    def update_storage(storage_id, record, data):
        if not data:
            raise BadRequest("Data is required")
        Storage.validate(data)
        storage = Storage.from_dict(data)
        StorageService._save(storage_id, record, storage, "Failed to update storage")
        logger.info("[storage] %s 整体更新", storage_id)

    @staticmethod
    def add_file(storage_id, record, data, folder_id=None):
        if not data or not isinstance(data, dict):
            raise BadRequest("File data is required")
        storage = Storage.from_dict(record.get("storage"))
        new_file = storage.add_file(data, folder_id, max_size=current_app.config.get("MAX_FILE_SIZE"))
        StorageService._save(storage_id, record, storage, "Failed to add file")
        logger.info("[上传] %s -> %s/%s (%s bytes)", storage_id, new_file["folderId"], new_file["name"], new_file["size"])
        return new_file

    @staticmethod
    def add_folder(storage_id, record, data, parent_id=None):
        if not isinstance(data, dict) or not data.get("name"):
            raise BadRequest("Folder name is required")
        storage = Storage.from_dict(record.get("storage"))
        folder = storage.add_folder(data, parent_id)
        StorageService._save(storage_id, record, storage, "Failed to add folder")
        logger.info("[目录] %s 新建 %s", storage_id, folder["path"])
        return folder

    @staticmethod
    def rename_item(storage_id, record, item_type, item_id, new_name):
        storage = Storage.from_dict(record.get("storage"))
        item = storage.rename_item(item_type, item_id, new_name)
        StorageService._save(storage_id, record, storage, "Failed to rename item")
        return item

    @staticmethod
    def delete_item(storage_id, record, item_type, item_id):
        storage = Storage.from_dict(record.get("storage"))
        storage.delete_item(item_type, item_id)
        StorageService._save(storage_id, record, storage, "Failed to delete item")
        logger.info("[删除] %s %s %s", storage_id, item_type, item_id)
