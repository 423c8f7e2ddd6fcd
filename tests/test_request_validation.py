"""Tests for JSON body parsing."""

from __future__ import annotations

import pytest
from flask import request

from services.errors import ValidationError
from utils.request_validation import parse_json_request


def test_empty_body_allowed_when_requested(app):
    with app.test_request_context("/", method="POST"):
        assert parse_json_request(request, allow_empty=True) == {}


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"json": []}, "Request JSON payload must be an object."),
        ({"json": {}}, "Request JSON body must not be empty."),
        ({"data": "x=1", "content_type": "text/plain"}, "Request JSON body is required."),
    ],
)
def test_invalid_bodies(app, kwargs, message):
    with app.test_request_context("/", method="POST", **kwargs):
        with pytest.raises(ValidationError) as excinfo:
            parse_json_request(request)

    assert excinfo.value.message == message


def test_object_body_returned(app):
    with app.test_request_context("/", method="POST", json={"role": "fan"}):
        assert parse_json_request(request) == {"role": "fan"}
