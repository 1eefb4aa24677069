"""Service layer for nonce issuance and wallet verification."""
