"""
SKOLL Portfolio - Composition model and valuation.
"""

from .portfolio import Component, Portfolio, PortfolioSource
from .valuer import ComponentValuation, PortfolioValuer, Valuation

__all__ = [
    "Component",
    "Portfolio",
    "PortfolioSource",
    "ComponentValuation",
    "PortfolioValuer",
    "Valuation",
]
