import time

from flask import current_app


class SlidingWindowLimiter:
    """
    内存滑动窗口限流（重启/实例回收即失效，仅尽力而为）
    - 每个 key 保存窗口内的请求时间戳
    - 超过 limit 的请求被拒绝，且不计入窗口
    """

    def __init__(self, limit: int, window_seconds: int = 3600, clock=time.time):
        self.limit = limit
        self.window = window_seconds
        self.clock = clock
        self._hits = {}

    def _prune(self, window_start):
        for key in list(self._hits):
            recent = [ts for ts in self._hits[key] if ts > window_start]
            if recent:
                self._hits[key] = recent
            else:
                del self._hits[key]

    def is_limited(self, key: str) -> bool:
        now = self.clock()
        self._prune(now - self.window)

        hits = self._hits.get(key, [])
        if len(hits) >= self.limit:
            return True
        hits.append(now)
        self._hits[key] = hits
        return False

    def reset(self):
        self._hits.clear()


def init_limiters(app):
    window = app.config.get("RATE_LIMIT_WINDOW", 3600)
    app.extensions["cloudstore.auth_limiter"] = SlidingWindowLimiter(app.config.get("AUTH_RATE_LIMIT", 60), window)
    app.extensions["cloudstore.storage_limiter"] = SlidingWindowLimiter(app.config.get("STORAGE_RATE_LIMIT", 120), window)


def current_limiter(name):
    return current_app.extensions[f"cloudstore.{name}_limiter"]
