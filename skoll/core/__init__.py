"""
SKOLL Core - Fixed-point math, addresses, and authorization.
"""

from .addresses import ADDRESS_ZERO, Address, parse_address
from .auth import AdminAuthority, OwnerAuthority, require_admin
from .precise import (
    MAX_INT256,
    MAX_UINT256,
    MIN_INT256,
    WAD,
    ether,
    invert_wad,
    precise_div,
    precise_mul,
    scale_to_wad,
    to_uint256,
    units,
)

__all__ = [
    "ADDRESS_ZERO",
    "Address",
    "parse_address",
    "AdminAuthority",
    "OwnerAuthority",
    "require_admin",
    "WAD",
    "MAX_UINT256",
    "MAX_INT256",
    "MIN_INT256",
    "ether",
    "units",
    "precise_mul",
    "precise_div",
    "scale_to_wad",
    "invert_wad",
    "to_uint256",
]
