"""Display helpers for agent identities."""
from __future__ import annotations

_ADDRESS_LENGTH = 42  # "0x" + 40 hex characters


def is_wallet_address(agent_id: str) -> bool:
    """Return True if `agent_id` has the shape of a hex wallet address."""
    return agent_id.startswith("0x") and len(agent_id) == _ADDRESS_LENGTH


def format_agent_id(agent_id: str) -> str:
    """Shorten wallet identities for display; pass freeform labels through.

    >>> format_agent_id("0x5B38Da6a701c568545dCfcB03FcB875f56beddC4")
    '0x5B38...ddC4'
    >>> format_agent_id("anon-agent")
    'anon-agent'
    """
    if is_wallet_address(agent_id):
        return f"{agent_id[:6]}...{agent_id[-4:]}"
    return agent_id
