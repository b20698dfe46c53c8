# services/store/base_store.py
from abc import ABC, abstractmethod


class BaseStore(ABC):
    """用户文档存储：以 storage id 为 key，整份文档读写"""

    @abstractmethod
    def get(self, storage_id):
        """Return the user record for storage_id, or None if it does not exist."""
        pass

    @abstractmethod
    def put(self, storage_id, record):
        """Replace the whole user record. Return True/False."""
        pass

    def exists(self, storage_id):
        return self.get(storage_id) is not None
