#!/usr/bin/env python3
"""
SKOLL - Addresses

Assets, modules and callers are Solana public keys. Strings are accepted at
every public boundary and parsed once, here.
"""

from solders.pubkey import Pubkey

from skoll.exceptions import InvalidAddressError

# System program id, all zero bytes. Stands in for "no module".
ADDRESS_ZERO = Pubkey.default()

Address = Pubkey


def parse_address(value: "Pubkey | str") -> Pubkey:
    """Return ``value`` as a Pubkey, parsing base58 strings."""
    if isinstance(value, Pubkey):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidAddressError(f"Expected a base58 address, got {value!r}")
    try:
        return Pubkey.from_string(value)
    except Exception as e:
        raise InvalidAddressError(f"Invalid address {value!r}: {e}") from e


def short(address: Pubkey) -> str:
    """First eight characters, for log lines and tables."""
    return f"{str(address)[:8]}..."
