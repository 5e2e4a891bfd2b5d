#!/usr/bin/env python3
"""
SKOLL - Price Feed Registry

Maps asset pairs to named feeds in a raw price source and turns whatever the
feed reports into an 18-decimal fixed-point price.

One entry per unordered pair. The orientation of the latest add_pair call is
canonical; asking for the other direction returns the exact reciprocal, so
A/B and B/A can never drift apart.

Usage:
    registry = PriceFeedRegistry(USDC, source, OwnerAuthority(admin))
    registry.add_pair(admin, WETH, USDC, "ETH/USD")

    registry.get_price(WETH, USDC)   # 1500e18
    registry.get_price(USDC, WETH)   # 1e36 / 1500e18
"""

import logging
import threading
from dataclasses import dataclass

from solders.pubkey import Pubkey

from skoll.core.addresses import parse_address, short
from skoll.core.auth import AdminAuthority, require_admin
from skoll.core.precise import invert_wad, scale_to_wad
from skoll.exceptions import FeedUnavailableError, PairNotFoundError
from skoll.oracle.events import EventSink, PairAdded, PairRemoved, RegistryEvent
from skoll.oracle.source import PriceSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceFeedEntry:
    """A registered pair in its canonical orientation."""

    asset_a: Pubkey
    asset_b: Pubkey
    identifier: str


@dataclass(frozen=True)
class PriceIdentifier:
    """Feed name for a query, and whether the query runs against the canonical orientation."""

    identifier: str
    inverse: bool


def _pair_key(asset_a: Pubkey, asset_b: Pubkey) -> frozenset:
    return frozenset((asset_a, asset_b))


class PriceFeedRegistry:
    """
    Pair -> feed mapping with WAD normalization and inverse derivation.

    Reads and writes of the pair table are serialized by one lock. The raw
    source is read outside of it, so a slow source never blocks the admin.

    Subscribers see PairAdded / PairRemoved in the order the table was
    written: a second lock spans each write and its notification. Sinks run
    on the writing thread and may call back into the registry.
    """

    def __init__(
        self,
        master_quote_asset: "Pubkey | str",
        underlying_oracle: PriceSource,
        authority: AdminAuthority,
    ):
        self._master_quote_asset = parse_address(master_quote_asset)
        self._underlying_oracle = underlying_oracle
        self._authority = authority

        self._entries: dict[frozenset, PriceFeedEntry] = {}
        self._lock = threading.Lock()
        # Held across a write and its notification; readers only take _lock.
        self._emit_lock = threading.RLock()
        self._subscribers: list[EventSink] = []

    @property
    def master_quote_asset(self) -> Pubkey:
        return self._master_quote_asset

    @property
    def underlying_oracle(self) -> PriceSource:
        return self._underlying_oracle

    # ─────────────────────────────────────────────────────────────────────
    #  Administration
    # ─────────────────────────────────────────────────────────────────────

    def add_pair(
        self,
        caller: "Pubkey | str",
        asset_a: "Pubkey | str",
        asset_b: "Pubkey | str",
        identifier: str,
    ) -> str:
        """
        Register or overwrite the feed for {asset_a, asset_b}.

        The orientation (asset_a, asset_b) becomes canonical, replacing any
        previous orientation of the same pair.

        Returns:
            The identifier previously stored for the pair, or "" if it was new.
        """
        require_admin(self._authority, caller)
        asset_a = parse_address(asset_a)
        asset_b = parse_address(asset_b)

        key = _pair_key(asset_a, asset_b)
        with self._emit_lock:
            with self._lock:
                previous = self._entries.get(key)
                self._entries[key] = PriceFeedEntry(asset_a, asset_b, identifier)

            previous_identifier = previous.identifier if previous else ""
            logger.debug(
                "Pair %s/%s -> '%s' (was '%s')",
                short(asset_a), short(asset_b), identifier, previous_identifier,
            )
            self._emit(PairAdded(asset_a, asset_b, identifier, previous_identifier))
        return previous_identifier

    def remove_pair(
        self,
        caller: "Pubkey | str",
        asset_a: "Pubkey | str",
        asset_b: "Pubkey | str",
    ) -> None:
        """Delete the feed for {asset_a, asset_b}, in either orientation."""
        require_admin(self._authority, caller)
        asset_a = parse_address(asset_a)
        asset_b = parse_address(asset_b)

        with self._emit_lock:
            with self._lock:
                entry = self._entries.pop(_pair_key(asset_a, asset_b), None)

            if entry is None:
                raise PairNotFoundError("Pair does not exist")

            logger.debug("Pair %s/%s removed ('%s')", short(asset_a), short(asset_b), entry.identifier)
            self._emit(PairRemoved(asset_a, asset_b, entry.identifier))

    # ─────────────────────────────────────────────────────────────────────
    #  Queries
    # ─────────────────────────────────────────────────────────────────────

    def get_price_identifier(
        self,
        asset_a: "Pubkey | str",
        asset_b: "Pubkey | str",
    ) -> PriceIdentifier:
        """Feed identifier for the pair and whether (asset_a, asset_b) is the reverse orientation."""
        asset_a = parse_address(asset_a)
        asset_b = parse_address(asset_b)

        with self._lock:
            entry = self._entries.get(_pair_key(asset_a, asset_b))

        if entry is None:
            raise PairNotFoundError()

        inverse = asset_a != asset_b and entry.asset_a != asset_a
        return PriceIdentifier(entry.identifier, inverse)

    def get_price(self, asset_a: "Pubkey | str", asset_b: "Pubkey | str") -> int:
        """
        Price of one whole asset_a expressed in asset_b, scaled to WAD.

        Self pair -> the feed value as is (the identity feed).
        Canonical direction -> the feed value.
        Reverse direction -> WAD * WAD / feed value.

        The reciprocal applies even when asset_a is the master quote asset: a
        pair stored as (X, master) answers get_price(master, X) with the
        reciprocal, so get_price(A, B) * get_price(B, A) stays at WAD^2 for
        every registered pair. Valuation only asks (component, master).

        Raises:
            PairNotFoundError: nothing is registered for the pair
            FeedUnavailableError: the source has no usable quote
        """
        asset_a = parse_address(asset_a)
        asset_b = parse_address(asset_b)

        resolved = self.get_price_identifier(asset_a, asset_b)
        raw = self._underlying_oracle.fetch(resolved.identifier)
        normalized = scale_to_wad(raw.value, raw.decimals)

        if asset_a == asset_b:
            return normalized

        if resolved.inverse:
            if normalized == 0:
                raise FeedUnavailableError()
            return invert_wad(normalized)

        return normalized

    def has_pair(self, asset_a: "Pubkey | str", asset_b: "Pubkey | str") -> bool:
        key = _pair_key(parse_address(asset_a), parse_address(asset_b))
        with self._lock:
            return key in self._entries

    def pairs(self) -> list[PriceFeedEntry]:
        """Snapshot of every registered entry, in first-registration order."""
        with self._lock:
            return list(self._entries.values())

    # ─────────────────────────────────────────────────────────────────────
    #  Notifications
    # ─────────────────────────────────────────────────────────────────────

    def subscribe(self, callback: EventSink):
        """Receive every PairAdded / PairRemoved from now on."""
        self._subscribers.append(callback)

    def _emit(self, event: RegistryEvent):
        for callback in self._subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.error("Error notifying subscriber: %s", e)
