#!/usr/bin/env python3
"""
SKOLL - Raw Price Sources

A raw price source answers one question: for this identifier, what is the
latest integer value, how many decimals does it carry, and when was it set.
It does not judge staleness; neither does the registry reading it.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from skoll.config import DIA_DECIMALS
from skoll.exceptions import FeedUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPrice:
    """One quote, exactly as the upstream feed reported it."""

    value: int
    decimals: int
    updated_at: datetime


@dataclass(frozen=True)
class CoinInfo:
    """Full record kept per identifier, mirroring the DIA oracle layout."""

    name: str
    symbol: str
    price: int
    supply: int
    last_update_timestamp: int


class PriceSource(Protocol):
    """Consumed by the registry. Must raise FeedUnavailableError on unknown identifiers."""

    def fetch(self, identifier: str) -> RawPrice:
        ...


class InMemoryPriceSource:
    """
    Dictionary-backed price source.

    Every quote shares the same decimal precision, as on a DIA oracle where
    prices are always published with 5 decimals.
    """

    def __init__(self, decimals: int = DIA_DECIMALS):
        if decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {decimals}")
        self.decimals = decimals
        self._coins: dict[str, CoinInfo] = {}
        self._lock = threading.Lock()

    def update_coin_info(
        self,
        name: str,
        symbol: str,
        price: int,
        supply: int = 0,
        timestamp: int | None = None,
    ) -> CoinInfo:
        """Store or replace the quote kept under ``name``."""
        if price < 0:
            raise ValueError(f"price must be non-negative, got {price}")
        if timestamp is None:
            timestamp = int(datetime.now(timezone.utc).timestamp())

        info = CoinInfo(
            name=name,
            symbol=symbol,
            price=price,
            supply=supply,
            last_update_timestamp=timestamp,
        )
        with self._lock:
            self._coins[name] = info
        logger.debug("Coin info updated: %s = %d (1e-%d)", name, price, self.decimals)
        return info

    def get_coin_info(self, name: str) -> CoinInfo | None:
        with self._lock:
            return self._coins.get(name)

    def fetch(self, identifier: str) -> RawPrice:
        info = self.get_coin_info(identifier)
        if info is None:
            raise FeedUnavailableError()
        return RawPrice(
            value=info.price,
            decimals=self.decimals,
            updated_at=datetime.fromtimestamp(info.last_update_timestamp, tz=timezone.utc),
        )

    def identifiers(self) -> list[str]:
        with self._lock:
            return list(self._coins)
