"""Wallet and email login, account linking and role updates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from storage.abstract_store import AbstractAccountStore, AccountRecord, is_hex_address

from .errors import AuthorizationError, BackendError, ConflictError, ValidationError
from .passwords import PasswordHasher
from .signatures import SignatureVerifier, build_verifier
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields"


@dataclass(frozen=True)
class AuthSettings:
    """Credential settings resolved once at application start-up."""

    password_hash_method: str = "scrypt"
    signature_scheme: str = "none"
    token_ttl: timedelta = timedelta(hours=1)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "AuthSettings":
        return cls(
            password_hash_method=config.get("PASSWORD_HASH_METHOD", "scrypt"),
            signature_scheme=config.get("WALLET_SIGNATURE_SCHEME", "none"),
            token_ttl=config.get("JWT_ACCESS_TOKEN_EXPIRES", timedelta(hours=1)),
        )


@dataclass(frozen=True)
class AuthResult:
    account: AccountRecord
    token: str


def normalize_email(raw_email: Any) -> str:
    """Strip whitespace and lower-case an email address."""
    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


def normalize_wallet(raw_address: Any) -> str:
    """Strip whitespace; hex ``0x`` addresses are compared lower-case."""
    if not isinstance(raw_address, str):
        return ""
    address = raw_address.strip()
    if is_hex_address(address):
        return address.lower()
    return address


def _require(*values: Any) -> None:
    if not all(isinstance(value, str) and value.strip() for value in values):
        raise ValidationError(MISSING_FIELDS)


class AuthService:
    """Orchestrates every credential flow against a single account store."""

    def __init__(
        self,
        store: AbstractAccountStore,
        hasher: PasswordHasher,
        verifier: SignatureVerifier,
        tokens: TokenIssuer,
    ):
        self.store = store
        self.hasher = hasher
        self.verifier = verifier
        self.tokens = tokens

    @classmethod
    def from_settings(cls, settings: AuthSettings, store: AbstractAccountStore) -> "AuthService":
        return cls(
            store=store,
            hasher=PasswordHasher(settings.password_hash_method),
            verifier=build_verifier(settings.signature_scheme),
            tokens=TokenIssuer(settings.token_ttl),
        )

    def wallet_auth(self, address: Any, signature: Any, message: Any) -> AuthResult:
        """Log in with a wallet, creating the account on first use."""

        _require(address, signature, message)
        wallet = normalize_wallet(address)
        self._check_signature(wallet, message, signature)

        account = self.store.find_by_wallet(wallet)
        if account is None:
            account = self.store.create({"wallet_address": wallet})
            logger.info("Created account %s for wallet %s", account.id, wallet)
        return AuthResult(account, self.tokens.issue(account))

    def email_auth(self, email: Any, password: Any) -> AuthResult:
        """Log in with email and password, registering unknown emails."""

        _require(email, password)
        email = normalize_email(email)

        account = self.store.find_by_email(email)
        if account is not None:
            if not self.hasher.verify(password, account.password):
                logger.warning("Rejected password for account %s", account.id)
                raise AuthorizationError("Invalid credentials")
        else:
            account = self.store.create(
                {"email": email, "password": self.hasher.hash(password)}
            )
            logger.info("Created account %s for email %s", account.id, email)
        return AuthResult(account, self.tokens.issue(account))

    def link_wallet(self, user_id: str, address: Any, signature: Any, message: Any) -> AuthResult:
        """Attach a wallet address to the caller's account."""

        _require(address, signature, message)
        wallet = normalize_wallet(address)
        self._check_signature(wallet, message, signature)

        owner = self.store.find_by_wallet(wallet)
        if owner is not None and owner.id != user_id:
            raise ConflictError("Wallet already linked to another account")

        account = self._update(user_id, {"wallet_address": wallet})
        logger.info("Linked wallet %s to account %s", wallet, user_id)
        return AuthResult(account, self.tokens.issue(account))

    def link_email(self, user_id: str, email: Any, password: Any) -> AuthResult:
        """Attach an email to the caller's account; the password is always replaced."""

        _require(email, password)
        email = normalize_email(email)

        owner = self.store.find_by_email(email)
        if owner is not None and owner.id != user_id:
            raise ConflictError("Email already linked to another account")

        account = self._update(
            user_id, {"email": email, "password": self.hasher.hash(password)}
        )
        logger.info("Linked email %s to account %s", email, user_id)
        return AuthResult(account, self.tokens.issue(account))

    def update_role(self, user_id: str, role: Any) -> AccountRecord:
        if role is not None and not isinstance(role, str):
            raise ValidationError("Role must be a string.")
        account = self._update(user_id, {"role": role.strip() if role else role})
        logger.info("Set role of account %s to %r", user_id, account.role)
        return account

    def register_account(self, values: Mapping[str, Any]) -> AccountRecord:
        """Insert an account from raw fields, hashing any supplied password."""

        fields = dict(values)
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"]) or None
        if "wallet_address" in fields:
            fields["wallet_address"] = normalize_wallet(fields["wallet_address"]) or None
        if not fields.get("email") and not fields.get("wallet_address"):
            raise ValidationError("An email or a wallet address is required.")
        if fields.get("password"):
            fields["password"] = self.hasher.hash(str(fields["password"]))
        return self.store.create(fields)

    def _check_signature(self, address: str, message: str, signature: str) -> None:
        if not self.verifier.verify(address, message, signature):
            logger.warning("Rejected wallet signature for %s", address)
            raise AuthorizationError("Invalid signature")

    def _update(self, user_id: str, values: Mapping[str, Any]) -> AccountRecord:
        account = self.store.update(user_id, values)
        if account is None:
            raise BackendError("Account not found")
        return account
