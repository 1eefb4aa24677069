"""Signature recovery built on secp256k1 personal-message primitives."""
from __future__ import annotations

import binascii
from typing import Protocol

from eth_account import Account
from eth_account.messages import encode_defunct

_SIGNATURE_BYTES = 65
_RECOVERY_IDS = frozenset({0, 1, 27, 28})


class SignatureRecoveryError(ValueError):
    """Raised when a signer cannot be recovered from a signature."""


class SignatureRecoverer(Protocol):
    """Capability that recovers the signing address of a message."""

    def recover(self, message: str, signature: str) -> str:
        """Return the address that produced `signature` over `message`."""
        ...


def decode_signature(signature: str) -> bytes:
    """Decode a ``0x``-prefixed 65-byte hex signature.

    Raises:
        SignatureRecoveryError: If the encoding, length or recovery id is invalid.
    """
    if not isinstance(signature, str) or not signature.startswith("0x"):
        raise SignatureRecoveryError("Signature must be a 0x-prefixed hex string")
    try:
        raw = binascii.unhexlify(signature[2:])
    except (binascii.Error, ValueError) as err:
        raise SignatureRecoveryError(f"Invalid hex encoding: {err}") from err
    if len(raw) != _SIGNATURE_BYTES:
        raise SignatureRecoveryError(f"Signatures must be {_SIGNATURE_BYTES} bytes")
    if raw[-1] not in _RECOVERY_IDS:
        raise SignatureRecoveryError(f"Invalid recovery id {raw[-1]}")
    return raw


class EthereumPersonalRecoverer:
    """EIP-191 ``personal_sign`` recovery over secp256k1."""

    def recover(self, message: str, signature: str) -> str:
        """Recover the EIP-55 checksummed address that signed `message`.

        Args:
            message: Text that was signed, without the personal-message prefix.
            signature: ``0x``-prefixed 65-byte signature (r || s || v).

        Returns:
            Checksummed address of the signer.

        Raises:
            SignatureRecoveryError: If the signature is malformed or recovery fails.
        """
        raw = decode_signature(signature)
        try:
            recovered: str = Account.recover_message(encode_defunct(text=message), signature=raw)
        except Exception as err:
            raise SignatureRecoveryError(f"Signature recovery failed: {err}") from err
        return recovered
