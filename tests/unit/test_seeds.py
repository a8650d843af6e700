"""Tests for pm_common.seeds — deterministic record addresses."""

from src.pm_common.seeds import (
    VAULT_ADDRESS,
    bet_id_le_bytes,
    derive_address,
    entry_address,
    history_address,
    market_address,
    registry_address,
)


class TestSeeds:
    def test_bet_id_is_u64_little_endian(self) -> None:
        assert bet_id_le_bytes(1) == b"\x01" + b"\x00" * 7

    def test_addresses_are_deterministic(self) -> None:
        assert market_address(3) == market_address(3)
        assert registry_address() == derive_address(b"main")

    def test_distinct_namespaces(self) -> None:
        addresses = {
            registry_address(),
            market_address(0),
            history_address(0),
            market_address(1),
            VAULT_ADDRESS,
        }
        assert len(addresses) == 5

    def test_entry_depends_on_market_and_user(self) -> None:
        m0, m1 = market_address(0), market_address(1)
        assert entry_address(m0, "alice") != entry_address(m1, "alice")
        assert entry_address(m0, "alice") != entry_address(m0, "bob")

    def test_seed_boundaries_do_not_collide(self) -> None:
        assert derive_address(b"ab", b"c") != derive_address(b"a", b"bc")
