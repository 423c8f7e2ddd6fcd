"""SQLAlchemy account store implementation."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.account import Account
from services.errors import BackendError

from .abstract_store import ACCOUNT_FIELDS, AbstractAccountStore, AccountRecord, is_hex_address


def _to_record(account: Account | None) -> AccountRecord | None:
    if account is None:
        return None
    return AccountRecord(
        id=account.id,
        email=account.email,
        password=account.password,
        wallet_address=account.wallet_address,
        role=account.role,
        created_at=account.created_at.isoformat() if account.created_at else None,
    )


class SqlAccountStore(AbstractAccountStore):
    """Persist accounts in the ``users`` table of the Flask-SQLAlchemy database."""

    def get(self, account_id: str) -> AccountRecord | None:
        try:
            return _to_record(db.session.get(Account, account_id))
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    def find_by_email(self, email: str) -> AccountRecord | None:
        # Case-insensitive lookup
        return self._first(func.lower(Account.email) == email.lower())

    def find_by_wallet(self, wallet_address: str) -> AccountRecord | None:
        if is_hex_address(wallet_address):
            return self._first(func.lower(Account.wallet_address) == wallet_address.lower())
        return self._first(Account.wallet_address == wallet_address)

    def list_all(self) -> list[AccountRecord]:
        try:
            accounts = Account.query.order_by(Account.created_at).all()
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc
        return [_to_record(account) for account in accounts]

    def create(self, values: Mapping[str, Any]) -> AccountRecord:
        account = Account(**{key: values[key] for key in ACCOUNT_FIELDS if key in values})
        db.session.add(account)
        self._commit()
        return _to_record(account)

    def update(self, account_id: str, values: Mapping[str, Any]) -> AccountRecord | None:
        try:
            account = db.session.get(Account, account_id)
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc
        if account is None:
            return None
        for key in ACCOUNT_FIELDS:
            if key in values:
                setattr(account, key, values[key])
        self._commit()
        return _to_record(account)

    def _first(self, criterion) -> AccountRecord | None:
        try:
            return _to_record(Account.query.filter(criterion).first())
        except SQLAlchemyError as exc:
            raise BackendError(str(exc)) from exc

    @staticmethod
    def _commit() -> None:
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise BackendError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc
