#!/usr/bin/env python3
"""
SKOLL - Portfolio Valuer

Values one unit of a portfolio token in any quote asset the registry can price.

For each component:
    effective  = nominal + sum(external units)          (signed)
    normalized = effective * WAD / base_unit            (whole units, WAD)
    value     += normalized * price(component, master) / WAD

A negative total is an error, never zero. Quotes other than the master quote
asset are reached by dividing by price(quote, master).
"""

import logging
from dataclasses import dataclass

from solders.pubkey import Pubkey

from skoll.core.addresses import parse_address, short
from skoll.core.precise import WAD, check_int256, precise_div, precise_mul, to_uint256
from skoll.exceptions import FeedUnavailableError, NegativeValuationError
from skoll.oracle.registry import PriceFeedRegistry
from skoll.portfolio.portfolio import PortfolioSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentValuation:
    """How much one component adds, in master quote terms."""

    component: Pubkey
    effective_unit: int
    normalized_unit: int  # WAD
    price: int  # WAD, in master quote asset
    contribution: int  # WAD, signed


@dataclass(frozen=True)
class Valuation:
    """A complete valuation. Only ever built when every component priced cleanly."""

    quote_asset: Pubkey
    value: int  # WAD, in quote_asset
    total_in_master_quote: int  # WAD
    quote_rate: int  # price(quote_asset, master), WAD; WAD when quote is master
    components: tuple[ComponentValuation, ...]


class PortfolioValuer:
    """
    Portfolio valuation against a PriceFeedRegistry.
    Holds no portfolio state; every call reads prices afresh.
    """

    def __init__(self, price_oracle: PriceFeedRegistry):
        self._price_oracle = price_oracle

    @property
    def price_oracle(self) -> PriceFeedRegistry:
        return self._price_oracle

    def valuate(self, portfolio: PortfolioSource, quote_asset: "Pubkey | str") -> int:
        """
        Value of one portfolio unit in ``quote_asset``, WAD-scaled.

        Raises:
            PairNotFoundError / FeedUnavailableError: a component or the quote is unpriced
            NegativeValuationError: the signed total is below zero
        """
        return self.valuate_breakdown(portfolio, quote_asset).value

    def valuate_breakdown(self, portfolio: PortfolioSource, quote_asset: "Pubkey | str") -> Valuation:
        """Same as valuate, keeping every intermediate figure."""
        quote_asset = parse_address(quote_asset)
        master = self._price_oracle.master_quote_asset

        breakdown = [self._valuate_component(portfolio, c, master) for c in portfolio.components()]

        total = 0
        for item in breakdown:
            total = check_int256(total + item.contribution)

        if total < 0:
            logger.warning("Negative valuation: %d across %d components", total, len(breakdown))
            raise NegativeValuationError()

        if quote_asset == master:
            rate = WAD
            value = to_uint256(total)
        else:
            rate = self._price_oracle.get_price(quote_asset, master)
            if rate == 0:
                raise FeedUnavailableError()
            value = to_uint256(precise_div(total, rate))

        logger.debug(
            "Valuated %d components: %d in master, %d in %s",
            len(breakdown), total, value, short(quote_asset),
        )
        return Valuation(
            quote_asset=quote_asset,
            value=value,
            total_in_master_quote=total,
            quote_rate=rate,
            components=tuple(breakdown),
        )

    def _valuate_component(
        self,
        portfolio: PortfolioSource,
        component: Pubkey,
        master: Pubkey,
    ) -> ComponentValuation:
        effective = portfolio.nominal_unit(component)
        for module in portfolio.external_position_modules(component):
            effective += portfolio.external_position_unit(component, module)
        effective = check_int256(effective)

        normalized = precise_div(effective, portfolio.base_unit(component))
        price = self._price_oracle.get_price(component, master)

        return ComponentValuation(
            component=component,
            effective_unit=effective,
            normalized_unit=normalized,
            price=price,
            contribution=precise_mul(normalized, price),
        )
