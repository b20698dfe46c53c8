# client/api/base.py
import requests
from client.config import Config


class ApiError(RuntimeError):
    """服务端返回的错误（带 HTTP 状态码）"""

    def __init__(self, status, message):
        super().__init__(f"API Error {status}: {message}")
        self.status = status
        self.message = message


class NetworkError(RuntimeError):
    """请求没有到达服务端"""


class BaseAPI:
    def __init__(self, base_url=None, session=None):
        self.base_url = base_url or Config.BASE_URL
        # 会话 cookie（token）保存在 session 的 cookie jar 中，多个 API 共用同一个 session
        self.session = session or requests.Session()

    def request(self, path, csrf, payload):
        """封装统一请求逻辑：POST JSON + X-CSRF-Token"""
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.post(url, json=payload, headers={"X-CSRF-Token": csrf}, timeout=Config.TIMEOUT)
        except requests.RequestException as e:
            raise NetworkError(f"HTTP error: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if not resp.ok:
            raise ApiError(resp.status_code, data.get("error") or f"HTTP {resp.status_code}")
        return data
