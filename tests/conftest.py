"""
SKOLL Test Suite - Shared Fixtures
"""

import pytest
from solders.pubkey import Pubkey

from skoll.config import ValuerConfig
from skoll.core.auth import OwnerAuthority
from skoll.logger import SkollLogger
from skoll.oracle.registry import PriceFeedRegistry
from skoll.oracle.source import InMemoryPriceSource
from skoll.portfolio.valuer import PortfolioValuer

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


@pytest.fixture
def valuer_config(tmp_path):
    """Default configuration for tests, logging into the test's tmp dir."""
    return ValuerConfig(
        master_quote_asset=USDC_MINT,
        admin="",
        dia_api_url="https://api.diadata.org/v1",
        log_file=str(tmp_path / "skoll.log"),
    )


@pytest.fixture
def logger(valuer_config):
    """Logger instance for tests."""
    return SkollLogger(valuer_config)


@pytest.fixture
def admin():
    return Pubkey.new_unique()


@pytest.fixture
def stranger():
    return Pubkey.new_unique()


@pytest.fixture
def usdc():
    return Pubkey.from_string(USDC_MINT)


@pytest.fixture
def weth():
    return Pubkey.new_unique()


@pytest.fixture
def dai():
    return Pubkey.new_unique()


@pytest.fixture
def source():
    """DIA-style source: every quote carries 5 decimals."""
    return InMemoryPriceSource(decimals=5)


@pytest.fixture
def registry(usdc, source, admin):
    """Registry quoting everything in USDC, owned by ``admin``."""
    return PriceFeedRegistry(usdc, source, OwnerAuthority(admin))


@pytest.fixture
def valuer(registry):
    return PortfolioValuer(registry)
