# src/fourcon_auth/api/v1/endpoints/auth.py
"""Wallet authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from fourcon_auth.schemas.auth import NonceResponse, VerifyRequest, VerifyResponse
from fourcon_auth.services.identity import format_agent_id
from fourcon_auth.services.nonce import NonceAuthority, get_nonce_authority
from fourcon_auth.services.verifier import SignatureVerifier, get_signature_verifier

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_nonce_authority_dep() -> NonceAuthority:
    return get_nonce_authority()


def get_signature_verifier_dep() -> SignatureVerifier:
    return get_signature_verifier()


NonceAuthorityDep = Annotated[NonceAuthority, Depends(get_nonce_authority_dep)]
SignatureVerifierDep = Annotated[SignatureVerifier, Depends(get_signature_verifier_dep)]


@router.get(
    "/nonce",
    summary="Issue a single-use signing nonce",
    response_model=NonceResponse,
)
def issue_nonce(authority: NonceAuthorityDep) -> NonceResponse:
    """Mint a nonce the client must sign within the validity window."""
    return NonceResponse(nonce=authority.issue())


@router.post(
    "/verify",
    summary="Verify a signed nonce",
    response_model=VerifyResponse,
)
def verify_wallet(payload: VerifyRequest, verifier: SignatureVerifierDep) -> VerifyResponse:
    """Resolve a signed nonce to the wallet identity that signed it."""
    identity = verifier.verify(payload.address, payload.signature, payload.nonce)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid wallet signature",
        )
    return VerifyResponse(agent_id=identity, display_id=format_agent_id(identity))
