"""Account store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping

ACCOUNT_FIELDS = ("email", "password", "wallet_address", "role")


def is_hex_address(address: str) -> bool:
    """Return True for ``0x`` addresses, which compare case-insensitively."""
    return address[:2] in ("0x", "0X")


@dataclass(frozen=True)
class AccountRecord:
    """Snapshot of a stored account as returned by a store backend."""

    id: str
    email: str | None = None
    password: str | None = None
    wallet_address: str | None = None
    role: str | None = None
    created_at: str | None = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "AccountRecord":
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in row.items() if key in known}
        created_at = values.get("created_at")
        if isinstance(created_at, datetime):
            values["created_at"] = created_at.isoformat()
        values["id"] = str(values["id"])
        return cls(**values)

    def to_dict(self) -> dict:
        """Public representation; the password hash is never included."""

        return {
            "id": self.id,
            "email": self.email,
            "wallet_address": self.wallet_address,
            "role": self.role,
            "created_at": self.created_at,
        }


class AbstractAccountStore(ABC):
    """Interface for account store backends.

    Lookups return ``None`` when no account matches. Every other failure is
    raised as :class:`services.errors.BackendError`.
    """

    @abstractmethod
    def get(self, account_id: str) -> AccountRecord | None:
        """Return the account with the given id."""

    @abstractmethod
    def find_by_email(self, email: str) -> AccountRecord | None:
        """Return the account owning ``email``."""

    @abstractmethod
    def find_by_wallet(self, wallet_address: str) -> AccountRecord | None:
        """Return the account owning ``wallet_address``."""

    @abstractmethod
    def list_all(self) -> list[AccountRecord]:
        """Return every stored account."""

    @abstractmethod
    def create(self, values: Mapping[str, Any]) -> AccountRecord:
        """Insert a new account and return it with its assigned id."""

    @abstractmethod
    def update(self, account_id: str, values: Mapping[str, Any]) -> AccountRecord | None:
        """Apply ``values`` to an account; ``None`` if the id is unknown."""

    def filter_by_id(self, account_id: str) -> list[AccountRecord]:
        """Return the accounts matching ``account_id`` as a list."""

        account = self.get(account_id)
        return [account] if account is not None else []
