import logging
import re

from common.errors import BadRequest, Conflict, StoreError, Unauthorized
from models.user import new_user_record, password_matches
from services.store.factory import current_store

logger = logging.getLogger(__name__)

# JWT 黑名单（内存存储，重启失效）
jwt_blacklist = set()

# storage id 同时是 JSONBin 的 bin key，不允许出现路径分隔符
STORAGE_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.@-]{0,127}$")


class AuthService:
    @staticmethod
    def _require_credentials(storage_id, password):
        if not storage_id or not password:
            raise BadRequest("Storage ID and password are required")
        if not isinstance(storage_id, str) or not isinstance(password, str):
            raise BadRequest("Storage ID and password must be strings")
        if not STORAGE_ID_RE.match(storage_id):
            raise BadRequest("Invalid storage ID")

    @staticmethod
    def create(storage_id, password):
        AuthService._require_credentials(storage_id, password)
        store = current_store()
        if store.exists(storage_id):
            raise Conflict("Storage ID already exists")
        record = new_user_record(storage_id, password)
        if not store.put(storage_id, record):
            raise StoreError("Failed to create storage")
        logger.info("[auth] 创建存储 %s", storage_id)
        return record

    @staticmethod
    def login(storage_id, password):
        AuthService._require_credentials(storage_id, password)
        record = current_store().get(storage_id)
        if not record or not password_matches(record, password):
            raise Unauthorized("Invalid storage ID or password")
        return record

    @staticmethod
    def verify(storage_id):
        """token 有效后还要确认存储仍然存在"""
        if not storage_id or not current_store().exists(storage_id):
            raise Unauthorized("Storage not found")
        return storage_id

    @staticmethod
    def logout(jti):
        """将JWT ID加入黑名单"""
        jwt_blacklist.add(jti)
        return True

    @staticmethod
    def is_token_revoked(jti):
        return jti in jwt_blacklist
