"""Pydantic schemas for the 4con auth API."""

from .auth import NonceResponse, VerifyRequest, VerifyResponse

__all__ = [
    "NonceResponse",
    "VerifyRequest",
    "VerifyResponse",
]
