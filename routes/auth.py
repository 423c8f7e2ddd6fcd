"""Authentication blueprint: wallet and email login, account linking, profile."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from services.auth_service import MISSING_FIELDS, AuthService
from services.errors import ValidationError
from services.tokens import current_user_id
from utils.request_validation import parse_json_request

auth_bp = Blueprint("auth", __name__)


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


@auth_bp.route("/metamask", methods=["POST"])
def metamask_login() -> tuple:
    """Log in or register with a wallet address."""
    payload = parse_json_request(request, allow_empty=True)
    result = _auth_service().wallet_auth(
        payload.get("address"), payload.get("signature"), payload.get("message")
    )
    return jsonify({"token": result.token, "userId": result.account.id}), HTTPStatus.OK


@auth_bp.route("/email", methods=["POST"])
def email_login() -> tuple:
    """Log in or register with an email and password."""
    payload = parse_json_request(request, allow_empty=True)
    result = _auth_service().email_auth(payload.get("email"), payload.get("password"))
    return jsonify({"token": result.token, "userId": result.account.id}), HTTPStatus.OK


@auth_bp.route("/link-wallet", methods=["POST"])
@jwt_required()
def link_wallet() -> tuple:
    payload = parse_json_request(request, allow_empty=True)
    result = _auth_service().link_wallet(
        current_user_id(),
        payload.get("address"),
        payload.get("signature"),
        payload.get("message"),
    )
    return (
        jsonify({"token": result.token, "message": "Wallet linked successfully"}),
        HTTPStatus.OK,
    )


@auth_bp.route("/link-email", methods=["POST"])
@jwt_required()
def link_email() -> tuple:
    payload = parse_json_request(request, allow_empty=True)
    result = _auth_service().link_email(
        current_user_id(), payload.get("email"), payload.get("password")
    )
    return (
        jsonify({"token": result.token, "message": "Email linked successfully"}),
        HTTPStatus.OK,
    )


@auth_bp.route("/profile", methods=["PUT"])
@jwt_required()
def update_profile() -> tuple:
    """Set the caller's role."""
    payload = parse_json_request(request)
    if "role" not in payload:
        raise ValidationError(MISSING_FIELDS)
    account = _auth_service().update_role(current_user_id(), payload.get("role"))
    return jsonify(account.to_dict()), HTTPStatus.OK
