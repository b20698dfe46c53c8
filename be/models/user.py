from werkzeug.security import generate_password_hash, check_password_hash

from models.storage import Storage
from utils.ids import now_iso


def new_user_record(storage_id: str, password: str) -> dict:
    """新建用户文档：storage id 即文档 key，密码只存哈希"""
    return {
        "storageId": storage_id,
        "password": generate_password_hash(password),
        "createdAt": now_iso(),
        "storage": Storage.empty().to_dict(),
    }


def password_matches(record: dict, password: str) -> bool:
    hashed = record.get("password")
    if not hashed:
        return False
    return check_password_hash(hashed, password)
