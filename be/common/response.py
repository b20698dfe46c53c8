from flask import jsonify


def success(data=None, msg=None, status=200):
    body = dict(data or {})
    if msg:
        body["message"] = msg
    return jsonify(body), status


def fail(msg="error", status=400):
    return jsonify({"error": msg}), status
