"""Author resolution for thread and post submissions."""

from __future__ import annotations

from typing import Final

from fourcon_auth.services.verifier import SignatureVerifier

AGENT_ID_MAX_LENGTH: Final[int] = 16

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401


class AuthorshipError(RuntimeError):
    """Base exception for submissions whose author cannot be resolved."""

    status_code: int = HTTP_BAD_REQUEST


class InvalidWalletSignatureError(AuthorshipError):
    """Raised when a signed submission fails wallet verification."""

    status_code = HTTP_UNAUTHORIZED

    def __init__(self) -> None:
        super().__init__("Invalid wallet signature")


class MissingAuthorError(AuthorshipError):
    """Raised when a submission carries neither a label nor a signature."""

    def __init__(self) -> None:
        super().__init__("Missing agent_id or wallet signature")


def resolve_author(
    verifier: SignatureVerifier,
    *,
    agent_id: object | None = None,
    address: str | None = None,
    signature: str | None = None,
    nonce: str | None = None,
) -> str:
    """Return the identity a submission should be stored under.

    A complete wallet triple always wins and must verify. Without one, the
    freeform `agent_id` label is accepted, truncated to 16 characters.

    Raises:
        InvalidWalletSignatureError: If the wallet triple does not verify.
        MissingAuthorError: If no usable identity was supplied.
    """
    if address and signature and nonce:
        verified = verifier.verify(address, signature, nonce)
        if verified is None:
            raise InvalidWalletSignatureError()
        return verified

    if agent_id:
        return str(agent_id)[:AGENT_ID_MAX_LENGTH]

    raise MissingAuthorError()
