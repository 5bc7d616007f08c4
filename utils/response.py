from flask import jsonify


def envelope_status(code: int) -> str:
    if code >= 500:
        return "error"
    if code >= 400:
        return "fail"
    return "success"


def json_response(message="success", data=None, code=200):
    resp = jsonify({"status": envelope_status(code), "message": message, "data": data})
    resp.status_code = code
    return resp
