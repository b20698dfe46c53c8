# services/store/factory.py
from flask import current_app

from services.store.jsonbin_store import JsonBinStore
from services.store.memory_store import MemoryStore

EXTENSION_KEY = "cloudstore.store"


def create_store(config):
    """根据配置选择存储后端"""
    backend = config.get("STORE_BACKEND", "memory")
    if backend == "jsonbin":
        return JsonBinStore(
            master_key=config.get("JSONBIN_KEY", ""),
            base_url=config.get("JSONBIN_BASE_URL", "https://api.jsonbin.io/v3"),
            timeout=config.get("JSONBIN_TIMEOUT", 10),
        )
    if backend == "memory":
        return MemoryStore()
    raise ValueError(f"unknown STORE_BACKEND: {backend}")


def current_store():
    return current_app.extensions[EXTENSION_KEY]
