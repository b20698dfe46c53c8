import logging

from flask import Flask, request
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from common.errors import ApiError
from common.response import fail
from routes.auth_routes import auth_bp
from routes.storage_routes import storage_bp
from services.auth_service import AuthService
from services.rate_limiter import init_limiters
from services.store.factory import EXTENSION_KEY, create_store

logger = logging.getLogger(__name__)


def _register_jwt_callbacks(jwt):
    # 检查 token 是否在黑名单
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return AuthService.is_token_revoked(jwt_payload["jti"])

    @jwt.unauthorized_loader
    def missing_token(reason):
        return fail("Not authenticated", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return fail("Invalid token", 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return fail("Invalid token", 401)

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return fail("Invalid token", 401)


def _register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return fail(e.message, e.status)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return fail("Method not allowed", 405)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return fail(e.description, e.code)
        logger.exception("[api] 未处理的异常: %s %s", request.method, request.path)
        return fail("Internal server error", 500)


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    jwt = JWTManager(app)
    _register_jwt_callbacks(jwt)
    _register_error_handlers(app)

    app.extensions[EXTENSION_KEY] = create_store(app.config)
    init_limiters(app)

    @app.after_request
    def add_cors_headers(resp):
        resp.headers['Access-Control-Allow-Origin'] = request.headers.get('Origin') or '*'
        resp.headers['Access-Control-Allow-Methods'] = 'POST, OPTIONS'
        resp.headers['Access-Control-Allow-Headers'] = 'Content-Type, X-CSRF-Token'
        resp.headers['Access-Control-Allow-Credentials'] = 'true'
        return resp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(storage_bp, url_prefix='/api/jsonbin')

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=True)
