class ApiError(Exception):
    """业务错误，带 HTTP 状态码，由 app 的 errorhandler 统一转成 JSON"""
    status = 400

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class BadRequest(ApiError):
    status = 400


class Unauthorized(ApiError):
    status = 401


class NotFound(ApiError):
    status = 404


class Conflict(ApiError):
    status = 409


class TooManyRequests(ApiError):
    status = 429

    def __init__(self, message="Too many requests. Please try again later."):
        super().__init__(message)


class StoreError(ApiError):
    """外部存储读写失败"""
    status = 500
