# utils/forms.py
from flask import request


def payload() -> dict:
    """JSON body, or the posted form for clients still sending form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
