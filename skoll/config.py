#!/usr/bin/env python3
"""
SKOLL - Core Configuration

Master quote asset, oracle endpoints, and environment management.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from skoll.core.addresses import parse_address
from skoll.exceptions import InvalidAddressError

# USDC mint on Solana mainnet
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

# DIA quotations are published with 5 decimals
DIA_DECIMALS = 5

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_dotenv_loaded = False


def _ensure_dotenv() -> None:
    """Load .env file exactly once, on first call."""
    global _dotenv_loaded
    if not _dotenv_loaded:
        load_dotenv()
        _dotenv_loaded = True


@dataclass
class ValuerConfig:
    """
    Everything the registry and valuer need to know before the first price is read.
    """

    # Pricing
    master_quote_asset: str = ""  # Every feed is denominated in this asset
    admin: str = ""  # Owner allowed to add/remove pairs

    # DIA quotation API
    dia_api_url: str = ""
    feed_decimals: int = DIA_DECIMALS
    http_timeout_seconds: float = 5.0

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    def __post_init__(self):
        """Fill env-based defaults after dataclass init (avoids module-level side effects)."""
        _ensure_dotenv()
        if not self.master_quote_asset:
            self.master_quote_asset = os.getenv("SKOLL_MASTER_QUOTE_ASSET", USDC_MINT)
        if not self.admin:
            self.admin = os.getenv("SKOLL_ADMIN", "")
        if not self.dia_api_url:
            self.dia_api_url = os.getenv("DIA_API_URL", "https://api.diadata.org/v1")
        if not self.log_file:
            self.log_file = os.getenv("SKOLL_LOG_FILE", "skoll.log")

    def __repr__(self) -> str:
        return (
            f"ValuerConfig(master_quote_asset='{self.master_quote_asset}', "
            f"admin='{self.admin or '(unset)'}', "
            f"dia_api_url='{self.dia_api_url}', "
            f"feed_decimals={self.feed_decimals})"
        )

    def validate(self) -> list[str]:
        """Return every problem found; an empty list means the config is usable."""
        errors = []

        try:
            parse_address(self.master_quote_asset)
        except InvalidAddressError:
            errors.append(f"Master quote asset is not a valid address: {self.master_quote_asset!r}")

        if self.admin:
            try:
                parse_address(self.admin)
            except InvalidAddressError:
                errors.append(f"Admin is not a valid address: {self.admin!r}")

        if not self.dia_api_url.startswith("https://"):
            if not self.dia_api_url.startswith("http://127.0.0.1") and not self.dia_api_url.startswith(
                "http://localhost"
            ):
                errors.append("DIA API URL must use HTTPS")

        if not (0 <= self.feed_decimals <= 77):
            errors.append("Feed decimals must be between 0 and 77")

        if self.http_timeout_seconds <= 0:
            errors.append("HTTP timeout must be positive")

        if self.log_level not in _LOG_LEVELS:
            errors.append(f"Log level must be one of {', '.join(_LOG_LEVELS)}")

        return errors
