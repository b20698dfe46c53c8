# services/store/memory_store.py
import copy

from services.store.base_store import BaseStore


class MemoryStore(BaseStore):
    """进程内存储（重启失效），读写都做深拷贝，保证调用方走 read-modify-write"""

    def __init__(self):
        self._records = {}

    def get(self, storage_id):
        record = self._records.get(storage_id)
        return copy.deepcopy(record) if record is not None else None

    def put(self, storage_id, record):
        self._records[storage_id] = copy.deepcopy(record)
        return True

    def exists(self, storage_id):
        return storage_id in self._records

    def clear(self):
        self._records.clear()
