"""Wallet signature verification for post submissions."""

from __future__ import annotations

import logging
from typing import Final

from fourcon_auth.core.security import (
    EthereumPersonalRecoverer,
    SignatureRecoverer,
    SignatureRecoveryError,
)
from fourcon_auth.services.nonce import NonceAuthority, get_nonce_authority

logger = logging.getLogger(__name__)

SIGN_MESSAGE_PREFIX: Final[str] = "4con auth nonce: "


def build_sign_message(nonce: str) -> str:
    """Return the exact text a wallet must sign for `nonce`."""
    return f"{SIGN_MESSAGE_PREFIX}{nonce}"


class SignatureVerifier:
    """Turns a claimed ``(address, signature, nonce)`` triple into an identity.

    Every failure collapses to ``None`` so callers cannot tell which check
    rejected the request.
    """

    def __init__(
        self,
        authority: NonceAuthority | None = None,
        recoverer: SignatureRecoverer | None = None,
    ) -> None:
        self._authority = authority if authority is not None else get_nonce_authority()
        self._recoverer: SignatureRecoverer = (
            recoverer if recoverer is not None else EthereumPersonalRecoverer()
        )

    @property
    def authority(self) -> NonceAuthority:
        return self._authority

    def verify(self, address: str, signature: str, nonce: str) -> str | None:
        """Verify a wallet signature over the challenge for `nonce`.

        The nonce is consumed before any cryptographic work, so a replayed
        request never reaches signature recovery and a failed attempt cannot
        be retried with the same nonce.

        Args:
            address: Address the client claims to control (any hex case).
            signature: Personal-message signature over the challenge.
            nonce: Nonce previously issued by the authority.

        Returns:
            The recovered checksummed address, or None if verification failed.
        """
        if not self._authority.consume(nonce):
            logger.debug("Wallet verification rejected: nonce unavailable")
            return None

        message = build_sign_message(nonce)
        try:
            recovered = self._recoverer.recover(message, signature)
        except SignatureRecoveryError as err:
            logger.debug("Wallet verification rejected: %s", err)
            return None
        except Exception:
            logger.warning("Unexpected error during signature recovery", exc_info=True)
            return None

        if not isinstance(recovered, str) or not recovered:
            logger.debug("Wallet verification rejected: recoverer returned no address")
            return None

        if not isinstance(address, str) or recovered.lower() != address.lower():
            logger.debug("Wallet verification rejected: address mismatch")
            return None

        return recovered


def get_signature_verifier() -> SignatureVerifier:
    """Return a verifier bound to the process-wide nonce authority."""
    return SignatureVerifier(get_nonce_authority())
