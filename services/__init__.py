"""Credential hashing, wallet signatures, token issuance and the auth flows."""
