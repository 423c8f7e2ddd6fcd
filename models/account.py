"""Account model definition."""

import uuid
from datetime import UTC, datetime

from . import db


def _new_account_id() -> str:
    return str(uuid.uuid4())


class Account(db.Model):
    """A user identified by an email address, a wallet address, or both."""

    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=_new_account_id)
    email = db.Column(db.String(255), unique=True, nullable=True)
    password = db.Column(db.String(255), nullable=True)
    wallet_address = db.Column(db.String(128), unique=True, nullable=True)
    role = db.Column(db.String(64), nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(UTC)
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Account {self.id}>"
