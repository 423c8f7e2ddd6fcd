"""Password hashing helpers."""

from __future__ import annotations

import bcrypt
from werkzeug.security import check_password_hash, generate_password_hash

# Hashes written by the earlier Node service (bcrypt, cost 10).
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class PasswordHasher:
    """One-way salted hashing with a configurable werkzeug method.

    ``method`` carries the cost factor, e.g. ``"scrypt:32768:8:1"`` or
    ``"pbkdf2:sha256:600000"``. Existing bcrypt hashes are still verified,
    new hashes always use ``method``.
    """

    def __init__(self, method: str = "scrypt"):
        self.method = method

    def hash(self, password: str) -> str:
        return generate_password_hash(password, method=self.method)

    def verify(self, password: str, password_hash: str | None) -> bool:
        if not password_hash:
            return False
        try:
            if password_hash.startswith(BCRYPT_PREFIXES):
                return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
            return check_password_hash(password_hash, password)
        except ValueError:
            # Unrecognised or truncated hash
            return False
