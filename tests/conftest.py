# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fourcon_auth.api.v1.endpoints import auth as auth_endpoints
from fourcon_auth.main import app as fastapi_app
from fourcon_auth.services.nonce import InMemoryNonceStore, NonceAuthority, reset_nonce_authority
from fourcon_auth.services.verifier import SignatureVerifier, build_sign_message

# Well-known development key (first account of the default Hardhat mnemonic).
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

TTL_MS = 300_000
START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = START_MS) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


def sign_challenge(account: LocalAccount, nonce: str) -> str:
    """Sign the challenge for `nonce` the way a wallet's personal_sign would."""
    signed = account.sign_message(encode_defunct(text=build_sign_message(nonce)))
    return "0x" + bytes(signed.signature).hex()


@pytest.fixture(autouse=True)
def _fresh_process_authority() -> Iterator[None]:
    reset_nonce_authority()
    try:
        yield
    finally:
        reset_nonce_authority()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def authority(clock: FakeClock) -> NonceAuthority:
    return NonceAuthority(InMemoryNonceStore(clock=clock), ttl_ms=TTL_MS, clock=clock)


@pytest.fixture()
def verifier(authority: NonceAuthority) -> SignatureVerifier:
    return SignatureVerifier(authority)


@pytest.fixture(scope="session")
def test_account() -> LocalAccount:
    return Account.from_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def other_account() -> LocalAccount:
    return Account.create()


@pytest.fixture()
def signer(test_account: LocalAccount) -> Callable[[str], str]:
    return lambda nonce: sign_challenge(test_account, nonce)


@pytest.fixture()
def sign_with() -> Callable[[LocalAccount, str], str]:
    return sign_challenge


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, authority: NonceAuthority, verifier: SignatureVerifier) -> Iterator[TestClient]:
    app.dependency_overrides[auth_endpoints.get_nonce_authority_dep] = lambda: authority
    app.dependency_overrides[auth_endpoints.get_signature_verifier_dep] = lambda: verifier
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(auth_endpoints.get_nonce_authority_dep, None)
        app.dependency_overrides.pop(auth_endpoints.get_signature_verifier_dep, None)
