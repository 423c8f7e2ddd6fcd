"""Bearer token issuance on top of flask-jwt-extended."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import create_access_token, get_jwt

from storage.abstract_store import AccountRecord


class TokenIssuer:
    """Sign access tokens carrying the account's identifiers.

    Tokens are never revoked; they stay valid until ``expires_delta`` runs
    out even if the account changes afterwards.
    """

    def __init__(self, expires_delta: timedelta = timedelta(hours=1)):
        self.expires_delta = expires_delta

    def issue(self, account: AccountRecord) -> str:
        claims = {
            "userId": account.id,
            "walletAddress": account.wallet_address,
            "email": account.email,
        }
        return create_access_token(
            identity=account.id,
            additional_claims=claims,
            expires_delta=self.expires_delta,
        )


def current_user_id() -> str:
    """Return the ``userId`` claim of the verified token on this request."""

    claims = get_jwt()
    return str(claims.get("userId") or claims["sub"])
