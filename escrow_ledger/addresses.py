"""
Canonical form for on-chain addresses and transaction hashes.
"""
from typing import Optional


def normalize_address(address: Optional[str]) -> str:
    """Trimmed and lowercased.

    Checksum casing differs between wallets and explorers, so every address is
    lowercased both before it is stored and before it is looked up.
    """
    if address is None:
        return ""
    return address.strip().lower()


def normalize_tx_hash(tx_hash: Optional[str]) -> str:
    # hex digest, case carries no meaning
    return normalize_address(tx_hash)
