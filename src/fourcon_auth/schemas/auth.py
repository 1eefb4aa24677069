"""Wallet authentication Pydantic schemas."""

from pydantic import BaseModel, Field


class NonceResponse(BaseModel):
    """Fresh single-use nonce for a wallet to sign."""

    nonce: str = Field(..., description="32 lowercase hex characters")


class VerifyRequest(BaseModel):
    """Signed nonce submitted to prove control of a wallet."""

    address: str = Field(..., max_length=64, description="0x-prefixed wallet address")
    signature: str = Field(..., max_length=256, description="0x-prefixed personal_sign signature")
    nonce: str = Field(..., max_length=128, description="Nonce returned by /auth/nonce")


class VerifyResponse(BaseModel):
    """Canonical identity recovered from a valid signature."""

    agent_id: str = Field(..., description="Checksummed address recovered from the signature")
    display_id: str = Field(..., description="Shortened address for display")
