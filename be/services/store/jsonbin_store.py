# services/store/jsonbin_store.py
import logging

import requests

from common.errors import StoreError
from services.store.base_store import BaseStore

logger = logging.getLogger(__name__)


class JsonBinStore(BaseStore):
    """JSONBin 文档存储：每个 storage id 对应一个 bin，GET 读取 / PUT 整体覆盖"""

    def __init__(self, master_key, base_url="https://api.jsonbin.io/v3", timeout=10, session=None):
        self.master_key = master_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        if not master_key:
            logger.warning("[jsonbin] JSONBIN_KEY 未配置，请求大概率会被拒绝")

    def _url(self, storage_id):
        return f"{self.base_url}/b/{storage_id}"

    def get(self, storage_id):
        headers = {"X-Master-Key": self.master_key, "X-Bin-Meta": "false"}
        try:
            resp = self.session.get(self._url(storage_id), headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("[jsonbin] 读取 %s 失败: %s", storage_id, e)
            raise StoreError("Failed to load storage") from e

        if resp.status_code == 404:
            return None
        if not resp.ok:
            logger.error("[jsonbin] 读取 %s 返回 %s", storage_id, resp.status_code)
            raise StoreError("Failed to load storage")
        try:
            return resp.json()
        except ValueError as e:
            logger.error("[jsonbin] %s 返回内容不是合法 JSON", storage_id)
            raise StoreError("Failed to load storage") from e

    def put(self, storage_id, record):
        headers = {"Content-Type": "application/json", "X-Master-Key": self.master_key}
        try:
            resp = self.session.put(self._url(storage_id), json=record, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("[jsonbin] 写入 %s 失败: %s", storage_id, e)
            return False
        if not resp.ok:
            logger.error("[jsonbin] 写入 %s 返回 %s", storage_id, resp.status_code)
            return False
        return True
