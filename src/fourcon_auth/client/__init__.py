"""Agent-side signing helpers."""

from .signer import Wallet, WalletSigner, load_wallet, sign_nonce

__all__ = ["Wallet", "WalletSigner", "load_wallet", "sign_nonce"]
