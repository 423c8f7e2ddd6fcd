"""Legacy ``/users`` collection endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from services.errors import ValidationError
from storage.abstract_store import ACCOUNT_FIELDS
from utils.request_validation import parse_json_request

users_bp = Blueprint("users", __name__)


@users_bp.route("", methods=["GET"])
def list_users() -> tuple:
    accounts = current_app.extensions["auth_service"].store.list_all()
    return jsonify([account.to_dict() for account in accounts]), HTTPStatus.OK


@users_bp.route("/<account_id>", methods=["GET"])
def get_user(account_id: str) -> tuple:
    """Return the accounts matching ``account_id`` (zero or one)."""
    accounts = current_app.extensions["auth_service"].store.filter_by_id(account_id)
    return jsonify([account.to_dict() for account in accounts]), HTTPStatus.OK


@users_bp.route("", methods=["POST"])
def create_user() -> tuple:
    """Insert an account from raw fields and echo the submitted body."""
    payload = parse_json_request(request)
    unknown = sorted(set(payload) - set(ACCOUNT_FIELDS))
    if unknown:
        raise ValidationError("Unknown account fields: {}.".format(", ".join(unknown)))

    current_app.extensions["auth_service"].register_account(payload)
    current_app.logger.info("Registered account via /users")

    echoed = {key: value for key, value in payload.items() if key != "password"}
    return jsonify(echoed), HTTPStatus.OK
