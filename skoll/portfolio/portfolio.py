#!/usr/bin/env python3
"""
SKOLL - Portfolio Composition

What a portfolio token holds per unit of itself: an ordered list of
components, each with a nominal unit, a base unit (10 ** token decimals) and
any number of signed external-position adjustments keyed by module.

The valuer only reads through the PortfolioSource protocol, so a host can
plug in its own on-chain reader instead of this in-memory model.
"""

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from solders.pubkey import Pubkey

from skoll.core.addresses import parse_address


class PortfolioSource(Protocol):
    """Read-only view of a portfolio's composition."""

    def components(self) -> list[Pubkey]:
        ...

    def nominal_unit(self, component: Pubkey) -> int:
        ...

    def base_unit(self, component: Pubkey) -> int:
        ...

    def external_position_modules(self, component: Pubkey) -> list[Pubkey]:
        ...

    def external_position_unit(self, component: Pubkey, module: Pubkey) -> int:
        ...


@dataclass
class Component:
    """
    A single portfolio component.
    Units are raw integers in the component's own decimals and may be negative.
    """

    address: Pubkey
    nominal_unit: int
    base_unit: int
    external_positions: dict[Pubkey, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.base_unit <= 0:
            raise ValueError(f"base_unit must be positive, got {self.base_unit}")

    @property
    def effective_unit(self) -> int:
        """Nominal plus every external adjustment."""
        return self.nominal_unit + sum(self.external_positions.values())


class Portfolio:
    """
    In-memory PortfolioSource.
    Mirrors the component / external-position editing surface of a set token.
    """

    def __init__(self, components: Iterable[Component] = ()):
        self._components: dict[Pubkey, Component] = {}
        for component in components:
            if component.address in self._components:
                raise ValueError(f"Duplicate component {component.address}")
            self._components[component.address] = component

    def __len__(self) -> int:
        return len(self._components)

    def __iter__(self):
        return iter(self._components.values())

    def add_component(
        self,
        address: "Pubkey | str",
        nominal_unit: int,
        base_unit: int | None = None,
        decimals: int | None = None,
    ) -> Component:
        """Add a component; give either ``base_unit`` or ``decimals``."""
        address = parse_address(address)
        if address in self._components:
            raise ValueError(f"Duplicate component {address}")
        if (base_unit is None) == (decimals is None):
            raise ValueError("Exactly one of base_unit or decimals is required")
        if base_unit is None:
            base_unit = 10**decimals

        component = Component(address, nominal_unit, base_unit)
        self._components[address] = component
        return component

    def get_component(self, address: "Pubkey | str") -> Component:
        address = parse_address(address)
        try:
            return self._components[address]
        except KeyError:
            raise KeyError(f"Unknown component {address}") from None

    def add_external_position_module(self, component: "Pubkey | str", module: "Pubkey | str"):
        """Attach ``module`` to ``component`` with a zero unit."""
        entry = self.get_component(component)
        entry.external_positions.setdefault(parse_address(module), 0)

    def edit_external_position_unit(self, component: "Pubkey | str", module: "Pubkey | str", unit: int):
        """Set the signed external unit for ``module``, attaching it if needed."""
        entry = self.get_component(component)
        entry.external_positions[parse_address(module)] = unit

    def remove_external_position_module(self, component: "Pubkey | str", module: "Pubkey | str"):
        entry = self.get_component(component)
        entry.external_positions.pop(parse_address(module), None)

    # PortfolioSource

    def components(self) -> list[Pubkey]:
        return list(self._components)

    def nominal_unit(self, component: Pubkey) -> int:
        return self.get_component(component).nominal_unit

    def base_unit(self, component: Pubkey) -> int:
        return self.get_component(component).base_unit

    def external_position_modules(self, component: Pubkey) -> list[Pubkey]:
        return list(self.get_component(component).external_positions)

    def external_position_unit(self, component: Pubkey, module: Pubkey) -> int:
        return self.get_component(component).external_positions.get(parse_address(module), 0)

    # Snapshots

    @classmethod
    def from_dict(cls, data: dict) -> "Portfolio":
        """
        Build from a snapshot dict:

            {"components": [
                {"address": "...", "unit": "100000000", "decimals": 6,
                 "external_positions": {"<module>": "-10000000"}}
            ]}

        Units may be ints or integer strings; ``base_unit`` may replace ``decimals``.
        """
        portfolio = cls()
        for item in data.get("components", []):
            portfolio.add_component(
                item["address"],
                int(item["unit"]),
                base_unit=int(item["base_unit"]) if "base_unit" in item else None,
                decimals=int(item["decimals"]) if "decimals" in item else None,
            )
            for module, unit in item.get("external_positions", {}).items():
                portfolio.edit_external_position_unit(item["address"], module, int(unit))
        return portfolio

    def to_dict(self) -> dict:
        return {
            "components": [
                {
                    "address": str(c.address),
                    "unit": str(c.nominal_unit),
                    "base_unit": str(c.base_unit),
                    "external_positions": {str(m): str(u) for m, u in c.external_positions.items()},
                }
                for c in self._components.values()
            ]
        }
