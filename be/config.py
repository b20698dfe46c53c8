import os
from datetime import timedelta


def _env_bool(name, default):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'super-secret')

    # JWT 放在 HttpOnly cookie 里，cookie 名沿用前端约定的 token
    JWT_SECRET_KEY = os.getenv('JWT_SECRET', 'fallback-secret-for-development')
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_ACCESS_COOKIE_NAME = 'token'
    JWT_ACCESS_COOKIE_PATH = '/'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_SESSION_COOKIE = False
    JWT_COOKIE_SAMESITE = 'Strict'
    JWT_COOKIE_SECURE = _env_bool('JWT_COOKIE_SECURE', 'false')
    # CSRF 由 X-CSRF-Token 固定字面量校验，不用 flask_jwt_extended 的双提交 cookie
    JWT_COOKIE_CSRF_PROTECT = False

    # 存储后端选择：memory 或 jsonbin
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'memory')

    # JSONBin
    JSONBIN_KEY = os.getenv('JSONBIN_KEY', '')
    JSONBIN_BASE_URL = os.getenv('JSONBIN_BASE_URL', 'https://api.jsonbin.io/v3')
    JSONBIN_TIMEOUT = float(os.getenv('JSONBIN_TIMEOUT', '10'))

    # 限流：每个窗口内允许的请求数
    AUTH_RATE_LIMIT = int(os.getenv('AUTH_RATE_LIMIT', '60'))
    STORAGE_RATE_LIMIT = int(os.getenv('STORAGE_RATE_LIMIT', '120'))
    RATE_LIMIT_WINDOW = int(os.getenv('RATE_LIMIT_WINDOW', '3600'))  # 秒

    MAX_FILE_SIZE = int(os.getenv('MAX_FILE_SIZE', str(5 * 1024 * 1024)))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
