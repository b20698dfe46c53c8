from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from common.errors import BadRequest, TooManyRequests
from common.response import success, fail
from services.rate_limiter import current_limiter
from services.storage_service import StorageService
from utils.net import client_ip

storage_bp = Blueprint('storage', __name__)

STORAGE_CSRF_TOKENS = ('read', 'write', 'delete')


def _get_storage(storage_id, record, body):
    return success(StorageService.get_storage(record))


def _list_folder(storage_id, record, body):
    return success(StorageService.list_folder(record, body.get('folderId')))


def _get_file(storage_id, record, body):
    return success(StorageService.get_file(record, body.get('fileId')))


def _update_storage(storage_id, record, body):
    StorageService.update_storage(storage_id, record, body.get('data'))
    return success(msg="Storage updated successfully")


def _add_file(storage_id, record, body):
    new_file = StorageService.add_file(storage_id, record, body.get('data'), body.get('folderId'))
    # 响应里不回传文件内容
    summary = {k: v for k, v in new_file.items() if k != 'content'}
    return success({"file": summary}, msg="File added successfully")


def _add_folder(storage_id, record, body):
    folder = StorageService.add_folder(storage_id, record, body.get('data'), body.get('folderId'))
    return success({"folder": folder}, msg="Folder added successfully")


def _rename_item(storage_id, record, body):
    StorageService.rename_item(storage_id, record, body.get('itemType'), body.get('fileId'), body.get('newName'))
    return success(msg="Item renamed successfully")


def _delete_item(storage_id, record, body):
    StorageService.delete_item(storage_id, record, body.get('itemType'), body.get('fileId'))
    return success(msg="Item deleted successfully")


ACTIONS = {
    'getStorage': _get_storage,
    'listFolder': _list_folder,
    'getFile': _get_file,
    'updateStorage': _update_storage,
    'addFile': _add_file,
    'addFolder': _add_folder,
    'renameItem': _rename_item,
    'deleteItem': _delete_item,
}


@storage_bp.route('', methods=['POST'])
@jwt_required()
def storage():
    if request.headers.get('X-CSRF-Token') not in STORAGE_CSRF_TOKENS:
        return fail("Invalid CSRF token", 401)

    if current_limiter('storage').is_limited(client_ip(request)):
        raise TooManyRequests()

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    storage_id = get_jwt_identity()
    record = StorageService.load(storage_id)

    handler = ACTIONS.get(body.get('action'))
    if handler is None:
        raise BadRequest("Invalid action")
    return handler(storage_id, record, body)
