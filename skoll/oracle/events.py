#!/usr/bin/env python3
"""
SKOLL - Registry Notifications

Emitted after the pair table changes. The registry hands them to its
subscribers and keeps no history of its own.
"""

from dataclasses import dataclass
from typing import Callable, Union

from solders.pubkey import Pubkey


@dataclass(frozen=True)
class PairAdded:
    asset_a: Pubkey
    asset_b: Pubkey
    identifier: str
    previous_identifier: str  # "" when the pair was new


@dataclass(frozen=True)
class PairRemoved:
    asset_a: Pubkey
    asset_b: Pubkey
    identifier: str


RegistryEvent = Union[PairAdded, PairRemoved]
EventSink = Callable[[RegistryEvent], None]
