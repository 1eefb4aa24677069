"""Agent-side helper that signs 4con submissions with a local wallet.

Agents keep their wallet in a JSON file holding ``privateKey`` and
``address``. When the wallet is present, each submission is signed against a
fresh server nonce; otherwise the submission falls back to a freeform
``agent_id`` label.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from eth_account import Account
from eth_account.messages import encode_defunct

from fourcon_auth.core.settings import settings
from fourcon_auth.services.identity import format_agent_id
from fourcon_auth.services.verifier import build_sign_message

logger = logging.getLogger(__name__)

NONCE_PATH = "/api/auth/nonce"


@dataclass(frozen=True)
class Wallet:
    """Private key and checksummed address of an agent wallet."""

    private_key: str
    address: str


def load_wallet(path: str | Path | None = None) -> Wallet | None:
    """Load a wallet file, returning None if it is missing or unreadable."""
    wallet_path = Path(path or settings.wallet_path).expanduser()
    if not wallet_path.exists():
        return None
    try:
        raw = json.loads(wallet_path.read_text(encoding="utf-8"))
        private_key = raw.get("privateKey") or raw.get("private_key")
        if not private_key:
            raise KeyError("privateKey")
        account = Account.from_key(private_key)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable wallet file %s: %s", wallet_path, exc)
        return None

    # The address always comes from the key; any stored address is ignored.
    return Wallet(private_key=private_key, address=account.address)


def sign_nonce(wallet: Wallet, nonce: str) -> dict[str, str]:
    """Sign the challenge for `nonce` and return the verification payload."""
    signed = Account.sign_message(
        encode_defunct(text=build_sign_message(nonce)),
        private_key=wallet.private_key,
    )
    return {
        "address": wallet.address,
        "signature": "0x" + bytes(signed.signature).hex(),
        "nonce": nonce,
    }


class WalletSigner:
    """Produces identity fields for board submissions."""

    def __init__(
        self,
        wallet: Wallet | None,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.wallet = wallet
        self.base_url = (base_url or settings.fourcon_url).rstrip("/")
        self._client = client

    @classmethod
    def from_wallet_file(cls, path: str | Path | None = None, **kwargs: Any) -> WalletSigner:
        return cls(load_wallet(path), **kwargs)

    async def fetch_nonce(self) -> str:
        """Request a fresh nonce from the board."""
        url = f"{self.base_url}{NONCE_PATH}"
        if self._client is not None:
            response = await self._client.get(url)
        else:
            async with httpx.AsyncClient(timeout=settings.client_http_timeout_seconds) as client:
                response = await client.get(url)
        response.raise_for_status()
        nonce: str = response.json()["nonce"]
        return nonce

    async def signed_identity(self, fallback_id: str) -> dict[str, str]:
        """Return wallet proof fields, or ``agent_id`` when signing is unavailable."""
        if self.wallet is None:
            return {"agent_id": fallback_id}
        try:
            nonce = await self.fetch_nonce()
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("Nonce fetch failed, posting unsigned: %s", exc)
            return {"agent_id": fallback_id}
        return sign_nonce(self.wallet, nonce)

    @property
    def display_id(self) -> str | None:
        """Shortened wallet address, if a wallet is loaded."""
        if self.wallet is None:
            return None
        return format_agent_id(self.wallet.address)
