"""
SKOLL - Portfolio Valuation Engine

"Skoll runs ahead of the wolf's jaws, pricing every coin in the basket
before the sun goes down."

Prices a basket of assets in any quote asset: a registry maps asset pairs to
raw feeds and normalizes them to 18-decimal fixed point, and a valuer sums
the basket's signed holdings through it.

Usage:
    from skoll import InMemoryPriceSource, OwnerAuthority, Portfolio
    from skoll import PortfolioValuer, PriceFeedRegistry

    source = InMemoryPriceSource(decimals=5)
    source.update_coin_info("weth", "WETH", 230 * 10**5)

    registry = PriceFeedRegistry(USDC, source, OwnerAuthority(admin))
    registry.add_pair(admin, WETH, USDC, "weth")

    value = PortfolioValuer(registry).valuate(portfolio, USDC)
"""

__version__ = "1.0.0"

# Core configuration
from skoll.config import ValuerConfig

# Core components
from skoll.core.addresses import ADDRESS_ZERO, parse_address
from skoll.core.auth import AdminAuthority, OwnerAuthority
from skoll.core.precise import WAD, ether, precise_div, precise_mul, units

# Exceptions
from skoll.exceptions import (
    ConfigError,
    FeedUnavailableError,
    FixedPointOverflowError,
    InvalidAddressError,
    NegativeValuationError,
    OracleError,
    PairNotFoundError,
    PriceSourceError,
    SkollError,
    UnauthorizedError,
    ValuationError,
)

# Logger
from skoll.logger import SkollLogger

# Oracle
from skoll.oracle.dia import DiaQuotationClient
from skoll.oracle.events import PairAdded, PairRemoved
from skoll.oracle.registry import PriceFeedEntry, PriceFeedRegistry, PriceIdentifier
from skoll.oracle.source import InMemoryPriceSource, PriceSource, RawPrice

# Portfolio
from skoll.portfolio.portfolio import Component, Portfolio, PortfolioSource
from skoll.portfolio.valuer import ComponentValuation, PortfolioValuer, Valuation

# UI
from skoll.ui.report import ValuationReport

__all__ = [
    # Config
    "ValuerConfig",
    # Exceptions
    "SkollError",
    "ConfigError",
    "InvalidAddressError",
    "UnauthorizedError",
    "OracleError",
    "PairNotFoundError",
    "FeedUnavailableError",
    "PriceSourceError",
    "ValuationError",
    "NegativeValuationError",
    "FixedPointOverflowError",
    # Logger
    "SkollLogger",
    # Core
    "ADDRESS_ZERO",
    "parse_address",
    "AdminAuthority",
    "OwnerAuthority",
    "WAD",
    "ether",
    "units",
    "precise_mul",
    "precise_div",
    # Oracle
    "PriceSource",
    "RawPrice",
    "InMemoryPriceSource",
    "DiaQuotationClient",
    "PairAdded",
    "PairRemoved",
    "PriceFeedEntry",
    "PriceFeedRegistry",
    "PriceIdentifier",
    # Portfolio
    "Component",
    "Portfolio",
    "PortfolioSource",
    "ComponentValuation",
    "PortfolioValuer",
    "Valuation",
    # UI
    "ValuationReport",
]
