"""
API blueprints for the member portal.
"""
from flask import request


def get_request_data() -> dict:
    """Form fields for multipart requests, JSON body otherwise."""
    if request.mimetype in ('multipart/form-data', 'application/x-www-form-urlencoded'):
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def is_truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')
