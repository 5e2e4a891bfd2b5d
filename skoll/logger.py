#!/usr/bin/env python3
"""
SKOLL - Logging

Console output for humans, rotating file for the record.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from .config import ValuerConfig
from .oracle.events import PairAdded, PairRemoved


class SkollLogger:
    """
    Owns the handlers of the "skoll" logger; module loggers (skoll.*) propagate here.
    """

    def __init__(self, config: ValuerConfig):
        self.logger = logging.getLogger("skoll")
        self.logger.setLevel(getattr(logging, config.log_level))

        # logging.getLogger returns the same instance; handlers stack if not checked.
        if not self.logger.handlers:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)8s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            self.logger.addHandler(console)

        self._attach_file_handler(config.log_file)

    def _attach_file_handler(self, log_file: str):
        """One rotating file per process; a logger built for another path takes it over."""
        path = os.path.abspath(log_file)
        for handler in list(self.logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                if handler.baseFilename == path:
                    return
                self.logger.removeHandler(handler)
                handler.close()

        file_handler = RotatingFileHandler(
            path,
            maxBytes=10_000_000,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)8s | %(name)s | %(message)s'
        ))
        self.logger.addHandler(file_handler)

    def registry_event(self, event):
        """Notification sink for PriceFeedRegistry.subscribe."""
        if isinstance(event, PairAdded):
            self.pair_added(event.asset_a, event.asset_b, event.identifier, event.previous_identifier)
        elif isinstance(event, PairRemoved):
            self.pair_removed(event.asset_a, event.asset_b, event.identifier)

    def pair_added(self, asset_a, asset_b, identifier: str, previous: str):
        """A feed now prices this pair."""
        self.logger.info(f"PAIR ADDED: {str(asset_a)[:8]}.../{str(asset_b)[:8]}... -> '{identifier}'")
        if previous:
            self.logger.info(f"   Replaced: '{previous}'")

    def pair_removed(self, asset_a, asset_b, identifier: str):
        self.logger.info(f"PAIR REMOVED: {str(asset_a)[:8]}.../{str(asset_b)[:8]}... ('{identifier}')")

    def valuation_computed(self, quote_asset, value: int, num_components: int):
        self.logger.info(
            f"VALUATION: {value / 10**18:,.6f} in {str(quote_asset)[:8]}... "
            f"across {num_components} components"
        )

    def error(self, context: str, error: Exception):
        self.logger.error(f"{context}: {str(error)}")

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def debug(self, message: str):
        self.logger.debug(message)
