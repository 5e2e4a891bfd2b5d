#!/usr/bin/env python3
"""
SKOLL - Snapshot Valuation

Wires a registry and valuer from a JSON snapshot and prints the breakdown.

Snapshot layout:
    {
      "master_quote_asset": "<address>",            optional, else config
      "prices": {"weth": {"symbol": "WETH", "price": 23000000}},
      "pairs": [{"asset_a": "<address>", "asset_b": "<address>", "identifier": "weth"}],
      "dia_feeds": {"ETH/USD": "ETH"},              optional, used with --refresh
      "labels": {"<address>": "WETH"},
      "portfolio": {"components": [...]}
    }
"""

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from solders.pubkey import Pubkey

from skoll.config import ValuerConfig
from skoll.core.addresses import parse_address
from skoll.core.auth import OwnerAuthority
from skoll.exceptions import ConfigError, SkollError
from skoll.logger import SkollLogger
from skoll.oracle.dia import DiaQuotationClient
from skoll.oracle.registry import PriceFeedRegistry
from skoll.oracle.source import InMemoryPriceSource
from skoll.portfolio.portfolio import Portfolio
from skoll.portfolio.valuer import PortfolioValuer
from skoll.ui.report import ValuationReport


@dataclass
class Workspace:
    """Everything built from one snapshot."""

    source: InMemoryPriceSource
    registry: PriceFeedRegistry
    valuer: PortfolioValuer
    portfolio: Portfolio
    labels: dict[str, str]
    dia_feeds: dict[str, str]


def build_workspace(data: dict, config: ValuerConfig, logger: SkollLogger | None = None) -> Workspace:
    """Load prices, register pairs, and parse the portfolio."""
    source = InMemoryPriceSource(decimals=int(data.get("decimals", config.feed_decimals)))
    for identifier, quote in data.get("prices", {}).items():
        source.update_coin_info(
            identifier,
            quote.get("symbol", identifier),
            int(quote["price"]),
            int(quote.get("supply", 0)),
            quote.get("timestamp"),
        )

    # Snapshots are local: without a configured admin, a throwaway owner registers the pairs.
    admin = parse_address(config.admin) if config.admin else Pubkey.new_unique()
    registry = PriceFeedRegistry(
        data.get("master_quote_asset", config.master_quote_asset),
        source,
        OwnerAuthority(admin),
    )
    if logger is not None:
        registry.subscribe(logger.registry_event)

    for pair in data.get("pairs", []):
        registry.add_pair(admin, pair["asset_a"], pair["asset_b"], pair["identifier"])

    return Workspace(
        source=source,
        registry=registry,
        valuer=PortfolioValuer(registry),
        portfolio=Portfolio.from_dict(data.get("portfolio", {})),
        labels=data.get("labels", {}),
        dia_feeds=data.get("dia_feeds", {}),
    )


async def refresh_prices(workspace: Workspace, config: ValuerConfig) -> int:
    """Pull the snapshot's DIA feeds into its price source. Returns the number updated."""
    client = DiaQuotationClient(config)
    try:
        updated = await client.refresh(workspace.source, workspace.dia_feeds)
    finally:
        await client.close()
    return len(updated)


def main(argv: list[str] | None = None) -> int:
    """
    The entry point.
    Returns a process exit code.
    """
    parser = argparse.ArgumentParser(
        description="SKOLL - Portfolio valuation from a price snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Value in the master quote asset
  python -m skoll snapshot.json

  # Value in another asset, refreshing DIA quotes first
  python -m skoll snapshot.json --quote <address> --refresh

Environment Variables (or use .env file):
  SKOLL_MASTER_QUOTE_ASSET  - Asset every feed is denominated in (default: USDC)
  SKOLL_ADMIN               - Owner allowed to register pairs
  DIA_API_URL               - DIA REST endpoint
  SKOLL_LOG_FILE            - Rotating log file (default: skoll.log)
        """,
    )
    parser.add_argument("snapshot", type=str, help="Path to snapshot JSON file")
    parser.add_argument("--quote", type=str, help="Quote asset address (default: master quote asset)")
    parser.add_argument("--refresh", action="store_true", default=False, help="Refresh DIA feeds first")
    parser.add_argument("--log-level", type=str, default=None, help="Override log level")

    args = parser.parse_args(argv)

    config = ValuerConfig()
    if args.log_level:
        config.log_level = args.log_level.upper()

    errors = config.validate()
    if errors:
        for err in errors:
            print(f"Config error: {err}", file=sys.stderr)
        return 1

    logger = SkollLogger(config)

    try:
        path = Path(args.snapshot)
        if not path.exists():
            raise ConfigError(f"Snapshot not found: {path}")
        data = json.loads(path.read_text())

        workspace = build_workspace(data, config, logger)
        if args.refresh and workspace.dia_feeds:
            count = asyncio.run(refresh_prices(workspace, config))
            logger.info(f"Refreshed {count} DIA feeds")

        quote = args.quote or workspace.registry.master_quote_asset
        valuation = workspace.valuer.valuate_breakdown(workspace.portfolio, quote)
    except SkollError as e:
        logger.error("Valuation failed", e)
        return 1
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        logger.error("Malformed snapshot", e)
        return 1

    logger.valuation_computed(valuation.quote_asset, valuation.value, len(valuation.components))
    ValuationReport(workspace.labels).render(valuation, Console())
    return 0
