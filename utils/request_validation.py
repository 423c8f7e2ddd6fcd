"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from flask import Request

from services.errors import ValidationError


def parse_json_request(
    req: Request,
    *,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a validation error."""

    data = req.get_json(silent=True)
    if data is None:
        if allow_empty and not req.get_data():
            return {}
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    return data
