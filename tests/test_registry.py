#!/usr/bin/env python3
"""
SKOLL - Price Feed Registry Tests

Pair administration, identifier resolution, decimal normalization, inverse
derivation, notifications, and concurrent reads during admin writes.

Run with: pytest tests/test_registry.py -v
"""

import threading

import pytest
from solders.pubkey import Pubkey

from skoll.core.auth import OwnerAuthority
from skoll.core.precise import WAD, ether, units
from skoll.exceptions import (
    FeedUnavailableError,
    OracleError,
    PairNotFoundError,
    UnauthorizedError,
)
from skoll.oracle.events import PairAdded, PairRemoved
from skoll.oracle.registry import PriceFeedRegistry, PriceIdentifier
from skoll.oracle.source import InMemoryPriceSource

IDENTIFIER = "ETH/USD"


@pytest.fixture
def events(registry):
    """Every notification the registry emits during the test."""
    received = []
    registry.subscribe(received.append)
    return received


class TestConstructor:
    def test_master_quote_asset(self, registry, usdc):
        assert registry.master_quote_asset == usdc

    def test_underlying_oracle(self, registry, source):
        assert registry.underlying_oracle is source

    def test_accepts_string_master(self, source, admin):
        registry = PriceFeedRegistry(
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", source, OwnerAuthority(admin)
        )
        assert str(registry.master_quote_asset) == "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class TestAddAndRemovePair:
    """Lifecycle of a single pair."""

    def test_no_feed_configured(self, registry, weth, usdc):
        """WHEN nothing is registered, THEN pricing fails."""
        with pytest.raises(OracleError, match="Price feed not available"):
            registry.get_price(weth, usdc)

    def test_add_pair(self, registry, source, admin, weth, usdc, events):
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 1500 * 10**5)

        previous = registry.add_pair(admin, weth, usdc, IDENTIFIER)

        assert previous == ""
        assert registry.get_price_identifier(weth, usdc) == PriceIdentifier(IDENTIFIER, False)
        assert registry.get_price(weth, usdc) == ether(1500)
        assert events == [PairAdded(weth, usdc, IDENTIFIER, "")]

    def test_add_pair_with_string_addresses(self, registry, admin, weth, usdc):
        registry.add_pair(str(admin), str(weth), str(usdc), IDENTIFIER)
        assert registry.has_pair(weth, usdc)

    def test_remove_pair(self, registry, source, admin, weth, usdc, events):
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 1500 * 10**5)
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        registry.remove_pair(admin, weth, usdc)

        with pytest.raises(OracleError, match="Price feed not available"):
            registry.get_price(weth, usdc)
        assert events[-1] == PairRemoved(weth, usdc, IDENTIFIER)
        assert registry.has_pair(weth, usdc) is False

    def test_remove_pair_by_reverse_orientation(self, registry, admin, weth, usdc):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        registry.remove_pair(admin, usdc, weth)
        with pytest.raises(PairNotFoundError):
            registry.get_price_identifier(weth, usdc)

    def test_remove_missing_pair(self, registry, admin, weth, usdc):
        with pytest.raises(PairNotFoundError, match="Pair does not exist"):
            registry.remove_pair(admin, weth, usdc)

    def test_pairs_snapshot(self, registry, admin, weth, dai, usdc):
        registry.add_pair(admin, weth, usdc, "weth")
        registry.add_pair(admin, dai, usdc, "dai")
        assert [entry.identifier for entry in registry.pairs()] == ["weth", "dai"]


class TestOverwrite:
    """Re-adding a pair replaces its identifier."""

    def test_second_add_overwrites(self, registry, admin, weth, usdc, events):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        previous = registry.add_pair(admin, weth, usdc, "meme")

        assert previous == IDENTIFIER
        assert registry.get_price_identifier(weth, usdc).identifier == "meme"
        assert events[-1] == PairAdded(weth, usdc, "meme", IDENTIFIER)

    def test_same_identifier_is_permitted(self, registry, admin, weth, usdc):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        assert registry.add_pair(admin, weth, usdc, IDENTIFIER) == IDENTIFIER

    def test_reverse_add_addresses_same_entry(self, registry, admin, weth, usdc):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        previous = registry.add_pair(admin, usdc, weth, "USD/ETH")

        assert previous == IDENTIFIER
        assert len(registry.pairs()) == 1
        assert registry.get_price_identifier(usdc, weth) == PriceIdentifier("USD/ETH", False)
        assert registry.get_price_identifier(weth, usdc) == PriceIdentifier("USD/ETH", True)


class TestPermissions:
    """Only the admin mutates, whether or not the pair exists."""

    def test_unauthorized_add(self, registry, stranger, weth, usdc):
        with pytest.raises(UnauthorizedError, match="caller is not the owner"):
            registry.add_pair(stranger, weth, usdc, IDENTIFIER)
        assert registry.has_pair(weth, usdc) is False

    def test_unauthorized_remove_existing(self, registry, admin, stranger, weth, usdc):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        with pytest.raises(UnauthorizedError):
            registry.remove_pair(stranger, weth, usdc)
        assert registry.has_pair(weth, usdc) is True

    def test_unauthorized_remove_missing(self, registry, stranger, weth, usdc):
        """Authorization is checked before existence."""
        with pytest.raises(UnauthorizedError):
            registry.remove_pair(stranger, weth, usdc)


class TestPricing:
    """Normalization and direction handling."""

    def test_five_decimal_feed(self, registry, source, admin, weth, usdc):
        source.update_coin_info("ETH/USDC", "ETH", 180322583)
        registry.add_pair(admin, weth, usdc, "ETH/USDC")

        assert registry.get_price(weth, usdc) == units("1803.22583", 18)

    def test_feed_with_more_than_18_decimals(self, usdc, weth, admin):
        source = InMemoryPriceSource(decimals=20)
        source.update_coin_info("wide", "W", 123456789012345678901234)
        registry = PriceFeedRegistry(usdc, source, OwnerAuthority(admin))
        registry.add_pair(admin, weth, usdc, "wide")

        assert registry.get_price(weth, usdc) == 123456789012345678901234 // 100

    def test_feed_with_18_decimals(self, usdc, weth, admin):
        source = InMemoryPriceSource(decimals=18)
        source.update_coin_info("exact", "E", ether(42))
        registry = PriceFeedRegistry(usdc, source, OwnerAuthority(admin))
        registry.add_pair(admin, weth, usdc, "exact")

        assert registry.get_price(weth, usdc) == ether(42)

    def test_inverse_identifier(self, registry, admin, weth, usdc):
        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        assert registry.get_price_identifier(usdc, weth) == PriceIdentifier(IDENTIFIER, True)

    def test_inverse_price(self, registry, source, admin, weth, usdc):
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 2000 * 10**5)
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        assert registry.get_price(usdc, weth) == units("0.0005", 18)

    @pytest.mark.parametrize("raw", [1, 3, 7 * 10**5, 180322583, 10**30])
    def test_round_trip(self, registry, source, admin, weth, usdc, raw):
        """forward * backward stays within one forward unit of WAD^2."""
        source.update_coin_info("feed", "F", raw)
        registry.add_pair(admin, weth, usdc, "feed")

        forward = registry.get_price(weth, usdc)
        backward = registry.get_price(usdc, weth)

        assert 0 <= WAD * WAD - forward * backward < forward

    def test_master_first_query_is_reciprocal(self, registry, source, admin, weth, usdc):
        """(master, X) on a pair stored as (X, master) inverts like any other pair."""
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 2000 * 10**5)
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        assert registry.master_quote_asset == usdc
        assert registry.get_price(usdc, weth) == WAD * WAD // ether(2000)

    def test_self_pair_identity(self, registry, source, admin, usdc):
        """Pricing an asset in itself is a registered self pair."""
        source.update_coin_info("usdc", "usdc", 1 * 10**5)
        registry.add_pair(admin, usdc, usdc, "usdc")

        assert registry.get_price_identifier(usdc, usdc) == PriceIdentifier("usdc", False)
        assert registry.get_price(usdc, usdc) == WAD

    def test_feed_missing_from_source(self, registry, admin, weth, usdc):
        registry.add_pair(admin, weth, usdc, "ghost")

        with pytest.raises(FeedUnavailableError, match="Price feed not available"):
            registry.get_price(weth, usdc)

    def test_zero_feed_cannot_be_inverted(self, registry, source, admin, weth, usdc):
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 0)
        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        assert registry.get_price(weth, usdc) == 0
        with pytest.raises(FeedUnavailableError):
            registry.get_price(usdc, weth)

    def test_every_read_hits_the_source(self, registry, source, admin, weth, usdc):
        source.update_coin_info(IDENTIFIER, IDENTIFIER, 1500 * 10**5)
        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        assert registry.get_price(weth, usdc) == ether(1500)

        source.update_coin_info(IDENTIFIER, IDENTIFIER, 1600 * 10**5)
        assert registry.get_price(weth, usdc) == ether(1600)


class TestNotifications:
    def test_failing_subscriber_does_not_block_mutation(self, registry, admin, weth, usdc):
        def explode(event):
            raise RuntimeError("sink down")

        received = []
        registry.subscribe(explode)
        registry.subscribe(received.append)

        registry.add_pair(admin, weth, usdc, IDENTIFIER)

        assert registry.has_pair(weth, usdc)
        assert len(received) == 1

    def test_logger_as_sink(self, registry, admin, weth, usdc, logger, caplog):
        registry.subscribe(logger.registry_event)
        with caplog.at_level("INFO", logger="skoll"):
            registry.add_pair(admin, weth, usdc, IDENTIFIER)
            registry.remove_pair(admin, weth, usdc)
        assert "PAIR ADDED" in caplog.text
        assert "PAIR REMOVED" in caplog.text


class TestConcurrency:
    def test_readers_never_see_torn_identifiers(self, registry, admin):
        """Readers observe one of the written identifiers, never anything else."""
        asset_a = Pubkey.new_unique()
        asset_b = Pubkey.new_unique()
        registry.add_pair(admin, asset_a, asset_b, "id-0")

        written = {f"id-{i}" for i in range(200)}
        seen = set()
        errors = []

        def writer():
            for i in range(200):
                registry.add_pair(admin, asset_a, asset_b, f"id-{i}")

        def reader():
            try:
                for _ in range(500):
                    seen.add(registry.get_price_identifier(asset_b, asset_a).identifier)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert seen <= written

    def test_notifications_follow_write_order(self, registry, admin, events):
        """Each PairAdded names the identifier the previous notification installed."""
        asset_a = Pubkey.new_unique()
        asset_b = Pubkey.new_unique()

        def writer(prefix):
            for i in range(200):
                registry.add_pair(admin, asset_a, asset_b, f"{prefix}-{i}")

        threads = [threading.Thread(target=writer, args=(prefix,)) for prefix in ("a", "b", "c")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(events) == 600
        assert events[0].previous_identifier == ""
        for before, after in zip(events, events[1:]):
            assert after.previous_identifier == before.identifier
        assert registry.get_price_identifier(asset_a, asset_b).identifier == events[-1].identifier

    def test_subscriber_may_call_back_into_registry(self, registry, admin, weth, usdc):
        seen = []
        registry.subscribe(lambda event: seen.append(registry.has_pair(event.asset_a, event.asset_b)))

        registry.add_pair(admin, weth, usdc, IDENTIFIER)
        registry.remove_pair(admin, weth, usdc)

        assert seen == [True, False]
