"""Deterministic addresses for persisted accounts.

Each record is addressed by hashing its seed parts, mirroring the host
ledger's derived-address scheme:
  registry  b"main"
  market    b"pool"    + bet_id (u64 little-endian)
  history   b"history" + bet_id (u64 little-endian)
  entry     b"entry"   + market address + user address
  vault     b"sol-vault"
"""

import hashlib

REGISTRY_SEED = b"main"
MARKET_SEED = b"pool"
HISTORY_SEED = b"history"
ENTRY_SEED = b"entry"
VAULT_SEED = b"sol-vault"


def derive_address(*seeds: bytes) -> str:
    digest = hashlib.sha256()
    for seed in seeds:
        digest.update(len(seed).to_bytes(1, "little"))
        digest.update(seed)
    return digest.hexdigest()


def bet_id_le_bytes(bet_id: int) -> bytes:
    return bet_id.to_bytes(8, "little")


def registry_address() -> str:
    return derive_address(REGISTRY_SEED)


def market_address(bet_id: int) -> str:
    return derive_address(MARKET_SEED, bet_id_le_bytes(bet_id))


def history_address(bet_id: int) -> str:
    return derive_address(HISTORY_SEED, bet_id_le_bytes(bet_id))


def entry_address(market: str, user: str) -> str:
    return derive_address(ENTRY_SEED, market.encode(), user.encode())


VAULT_ADDRESS = derive_address(VAULT_SEED)
