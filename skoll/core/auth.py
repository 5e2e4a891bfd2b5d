#!/usr/bin/env python3
"""
SKOLL - Administrator Authorization

The registry asks before it writes. Who answers is up to the host.
"""

import logging
from typing import Protocol

from skoll.core.addresses import ADDRESS_ZERO, Pubkey, parse_address
from skoll.exceptions import InvalidAddressError, UnauthorizedError

logger = logging.getLogger(__name__)


class AdminAuthority(Protocol):
    """Anything that can tell whether a caller may mutate the registry."""

    def is_admin(self, caller: Pubkey) -> bool:
        ...


class OwnerAuthority:
    """
    Single-owner authorization.
    The owner may hand the role over or renounce it, after which nobody is admin.
    """

    def __init__(self, owner: "Pubkey | str"):
        self._owner = parse_address(owner)

    @property
    def owner(self) -> Pubkey:
        return self._owner

    def is_admin(self, caller: Pubkey) -> bool:
        return self._owner != ADDRESS_ZERO and caller == self._owner

    def transfer_ownership(self, caller: "Pubkey | str", new_owner: "Pubkey | str"):
        require_admin(self, caller)
        new_owner = parse_address(new_owner)
        if new_owner == ADDRESS_ZERO:
            raise ValueError("Ownable: new owner is the zero address")
        logger.info("Ownership transferred: %s -> %s", self._owner, new_owner)
        self._owner = new_owner

    def renounce_ownership(self, caller: "Pubkey | str"):
        require_admin(self, caller)
        logger.info("Ownership renounced by %s", self._owner)
        self._owner = ADDRESS_ZERO


def require_admin(authority: AdminAuthority, caller: "Pubkey | str") -> Pubkey:
    """Raise UnauthorizedError unless ``caller`` is an admin. Returns the parsed caller."""
    try:
        caller = parse_address(caller)
    except InvalidAddressError as e:
        raise UnauthorizedError() from e
    if not authority.is_admin(caller):
        raise UnauthorizedError()
    return caller
