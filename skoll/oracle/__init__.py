"""
SKOLL Oracle - Raw price sources, the DIA client, and the pair registry.
"""

from .dia import DiaQuotation, DiaQuotationClient
from .events import PairAdded, PairRemoved
from .registry import PriceFeedEntry, PriceFeedRegistry, PriceIdentifier
from .source import CoinInfo, InMemoryPriceSource, PriceSource, RawPrice

__all__ = [
    "PriceSource",
    "RawPrice",
    "CoinInfo",
    "InMemoryPriceSource",
    "DiaQuotation",
    "DiaQuotationClient",
    "PairAdded",
    "PairRemoved",
    "PriceFeedEntry",
    "PriceFeedRegistry",
    "PriceIdentifier",
]
