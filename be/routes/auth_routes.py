import json

from flask import Blueprint, current_app, request
from flask_jwt_extended import (
    create_access_token,
    get_jwt,
    get_jwt_identity,
    set_access_cookies,
    unset_jwt_cookies,
    verify_jwt_in_request,
)

from common.errors import BadRequest, TooManyRequests
from common.response import success, fail
from services.auth_service import AuthService
from services.rate_limiter import current_limiter
from utils.net import client_ip

auth_bp = Blueprint('auth', __name__)

AUTH_CSRF_TOKENS = ('create', 'login', 'verify', 'logout')


def _issue_session(storage_id, msg):
    token = create_access_token(identity=storage_id)
    resp, status = success(msg=msg)
    max_age = int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds())
    set_access_cookies(resp, token, max_age=max_age)
    return resp, status


@auth_bp.route('', methods=['POST'])
def auth():
    if request.headers.get('X-CSRF-Token') not in AUTH_CSRF_TOKENS:
        return fail("Invalid request", 401)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    fingerprint = json.dumps(data.get('deviceFingerprint'), sort_keys=True)
    if current_limiter('auth').is_limited(f"{client_ip(request)}:{fingerprint}"):
        raise TooManyRequests()

    action = data.get('action')
    storage_id = data.get('storageId')
    password = data.get('password')

    if action == 'create':
        AuthService.create(storage_id, password)
        return _issue_session(storage_id, "Storage created successfully")

    if action == 'login':
        AuthService.login(storage_id, password)
        return _issue_session(storage_id, "Login successful")

    if action == 'verify':
        # 缺少/无效/过期 token 由 JWTManager 的回调返回 401
        verify_jwt_in_request()
        storage_id = AuthService.verify(get_jwt_identity())
        return success({"storageId": storage_id}, msg="Authenticated")

    if action == 'logout':
        verify_jwt_in_request()
        AuthService.logout(get_jwt()["jti"])
        resp, status = success(msg="Logged out")
        unset_jwt_cookies(resp)
        return resp, status

    raise BadRequest("Invalid action")
