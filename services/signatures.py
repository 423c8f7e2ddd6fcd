"""Wallet signature verification backends.

The auth flows call ``verify(address, message, signature)`` on whichever
verifier the application factory installs. ``UncheckedSignatureVerifier``
only requires the three values to be present; ``EthereumSignatureVerifier``
recovers the signer of an EIP-191 ``personal_sign`` message and compares it
with the claimed address.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from coincurve import PublicKey
from Crypto.Hash import keccak

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


class SignatureVerifier(ABC):
    """Decides whether ``signature`` proves control of ``address``."""

    @abstractmethod
    def verify(self, address: str, message: str, signature: str) -> bool:
        """Return True when the signature is accepted."""


class UncheckedSignatureVerifier(SignatureVerifier):
    """Accept any non-empty signature without cryptographic checks."""

    def verify(self, address: str, message: str, signature: str) -> bool:
        return bool(address and message and signature)


class EthereumSignatureVerifier(SignatureVerifier):
    """Verify MetaMask ``personal_sign`` signatures over secp256k1."""

    def verify(self, address: str, message: str, signature: str) -> bool:
        try:
            signer = recover_personal_sign_address(message, signature)
        except ValueError:
            return False
        return signer == address.strip().lower()


def keccak256(data: bytes) -> bytes:
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def personal_message_hash(message: str) -> bytes:
    """Hash ``message`` the way ``personal_sign`` does before signing."""

    body = message.encode("utf-8")
    return keccak256(PERSONAL_MESSAGE_PREFIX + str(len(body)).encode("ascii") + body)


def public_key_to_address(public_key: PublicKey) -> str:
    """Derive the lower-case ``0x`` address for a secp256k1 public key."""

    uncompressed = public_key.format(compressed=False)
    return "0x" + keccak256(uncompressed[1:])[-20:].hex()


def recover_personal_sign_address(message: str, signature: str) -> str:
    """Return the address that produced ``signature`` over ``message``.

    Raises ``ValueError`` when the signature cannot be parsed or recovered.
    """

    raw = signature.strip()
    if raw.startswith(("0x", "0X")):
        raw = raw[2:]
    sig_bytes = bytes.fromhex(raw)
    if len(sig_bytes) != 65:
        raise ValueError("Signature must be 65 bytes.")

    recovery_id = sig_bytes[64]
    if recovery_id >= 27:
        recovery_id -= 27
    if recovery_id not in (0, 1):
        raise ValueError("Unsupported signature recovery id.")

    # coincurve expects r || s || recovery_id
    recoverable = sig_bytes[:64] + bytes([recovery_id])
    public_key = PublicKey.from_signature_and_message(
        recoverable, personal_message_hash(message), hasher=None
    )
    return public_key_to_address(public_key)


def build_verifier(scheme: str) -> SignatureVerifier:
    """Return the verifier configured by ``WALLET_SIGNATURE_SCHEME``."""

    normalized = (scheme or "none").strip().lower()
    if normalized == "none":
        return UncheckedSignatureVerifier()
    if normalized == "eip191":
        return EthereumSignatureVerifier()
    raise ValueError(f"Unknown wallet signature scheme: {scheme!r}")
