#!/usr/bin/env python3
"""
SKOLL - DIA Quotation Client

Pulls USD quotations from the DIA REST API and writes them into an
InMemoryPriceSource, the same way a keeper pushes updateCoinInfo calls into
an on-chain DIA oracle.

The registry never talks to the network. This client runs on its own
schedule; the registry keeps reading whatever was stored last.

Usage:
    client = DiaQuotationClient(config)
    await client.initialize()
    await client.refresh(source, {"ETH/USD": "ETH", "BTC/USD": "BTC"})
    await client.close()
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone

import aiohttp

from skoll.config import ValuerConfig
from skoll.core.precise import units
from skoll.exceptions import PriceSourceError
from skoll.oracle.source import CoinInfo, InMemoryPriceSource

logger = logging.getLogger(__name__)


@dataclass
class DiaQuotation:
    """One /quotation/{symbol} response."""

    symbol: str
    name: str
    price: float  # USD
    time: datetime

    @classmethod
    def from_json(cls, data: dict) -> "DiaQuotation":
        try:
            price = float(data["Price"])
            raw_time = data.get("Time")
            if isinstance(raw_time, (int, float)) and not isinstance(raw_time, bool):
                # Epoch seconds
                time = datetime.fromtimestamp(raw_time, tz=timezone.utc)
            elif raw_time:
                time = datetime.fromisoformat(raw_time.replace("Z", "+00:00"))
            else:
                time = datetime.now(timezone.utc)
            return cls(
                symbol=data["Symbol"],
                name=data.get("Name", data["Symbol"]),
                price=price,
                time=time,
            )
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
            raise PriceSourceError(f"Malformed DIA quotation: {e}") from e

    def scaled_price(self, decimals: int) -> int:
        """Price as an integer carrying ``decimals`` fractional digits."""
        if not math.isfinite(self.price):
            raise PriceSourceError(f"Non-finite DIA price for {self.symbol}: {self.price}")
        if self.price < 0:
            raise PriceSourceError(f"Negative DIA price for {self.symbol}: {self.price}")
        return units(f"{self.price:.{decimals}f}", decimals)


class DiaQuotationClient:
    """
    Thin aiohttp wrapper around the DIA quotation endpoint.
    """

    def __init__(self, config: ValuerConfig):
        self.config = config
        self.api_url = config.dia_api_url.rstrip("/")
        self.session: aiohttp.ClientSession | None = None

    async def initialize(self):
        """Start the HTTP session."""
        if not self.session:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.http_timeout_seconds)
            )

    async def close(self):
        """Clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_quotation(self, symbol: str) -> DiaQuotation:
        """
        GET /quotation/{symbol}.

        Raises:
            PriceSourceError: transport failure, non-200 status or malformed body
        """
        if not self.session:
            await self.initialize()

        url = f"{self.api_url}/quotation/{symbol}"
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    raise PriceSourceError(f"DIA quotation for {symbol} failed: HTTP {response.status}")
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise PriceSourceError(f"DIA quotation for {symbol} failed: {e}") from e

        return DiaQuotation.from_json(data)

    async def refresh(
        self,
        source: InMemoryPriceSource,
        feeds: dict[str, str],
    ) -> dict[str, CoinInfo]:
        """
        Fetch every symbol concurrently and store it under its identifier.

        Args:
            source: Destination price source
            feeds: identifier -> DIA symbol, e.g. {"ETH/USD": "ETH"}

        Returns:
            identifier -> stored CoinInfo, for the feeds that succeeded.
            Failed feeds keep their previous quote and are logged.
        """
        identifiers = list(feeds)
        results = await asyncio.gather(
            *(self.fetch_quotation(feeds[identifier]) for identifier in identifiers),
            return_exceptions=True,
        )

        updated: dict[str, CoinInfo] = {}
        for identifier, result in zip(identifiers, results):
            if isinstance(result, PriceSourceError):
                logger.warning("Keeping previous quote for %s: %s", identifier, result)
                continue
            if isinstance(result, BaseException):
                raise result

            try:
                price = result.scaled_price(source.decimals)
            except PriceSourceError as e:
                logger.warning("Keeping previous quote for %s: %s", identifier, e)
                continue

            updated[identifier] = source.update_coin_info(
                identifier,
                result.symbol,
                price,
                0,
                int(result.time.timestamp()),
            )

        logger.info("DIA refresh: %d/%d feeds updated", len(updated), len(identifiers))
        return updated
