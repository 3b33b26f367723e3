# timesheet_api/common/http.py
from flask import jsonify


def ok(data=None, status=200, **meta):
    """Success envelope; keyword extras (paging, range, count) land under "meta"."""
    body = {"success": True, "data": data}
    if meta:
        body["meta"] = meta
    return jsonify(body), status


def error_body(message, code=None, detail=None) -> dict:
    err = {"message": message}
    if code:
        err["code"] = code
    if detail is not None:
        err["detail"] = detail
    return {"success": False, "error": err}


def fail(message="Bad Request", status=400, code=None, detail=None):
    return jsonify(error_body(message, code=code, detail=detail)), status
