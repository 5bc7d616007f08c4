from flask import request

from utils.exceptions import ValidationError


def json_object() -> dict:
    """Request JSON as a dict; a missing or unparsable body reads as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
