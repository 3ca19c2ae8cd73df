"""Resource ledger: named non-negative quantities."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping


@dataclass
class ResourceLedger:
    """Mutable mapping of resource_name -> quantity.

    Costs and deltas are plain mappings. Resources missing from a cost are
    unconstrained; resources missing from the ledger count as zero.
    """

    amounts: dict[str, float] = field(default_factory=dict)

    def get(self, name: str) -> float:
        return self.amounts.get(name, 0.0)

    def can_afford(self, cost: Mapping[str, float]) -> bool:
        """Check that every resource named in *cost* is held in full."""
        for name, needed in cost.items():
            if self.amounts.get(name, 0.0) < needed:
                return False
        return True

    def deduct(self, cost: Mapping[str, float]) -> bool:
        """Subtract *cost* if affordable. Returns False (no change) otherwise."""
        for name, needed in cost.items():
            if needed < 0:
                raise ValueError(f"cost for {name!r} must be >= 0, got {needed}")
        if not self.can_afford(cost):
            return False
        for name, needed in cost.items():
            self.amounts[name] = self.amounts.get(name, 0.0) - needed
        return True

    def add(self, delta: Mapping[str, float]) -> None:
        """Additively merge *delta*, creating missing keys at zero."""
        for name, amount in delta.items():
            if amount < 0:
                raise ValueError(f"amount for {name!r} must be >= 0, got {amount}")
            self.amounts[name] = self.amounts.get(name, 0.0) + amount

    def take(self, name: str, amount: float) -> float:
        """Remove up to *amount* of one resource. Returns amount actually taken."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        actual = min(amount, max(0.0, self.amounts.get(name, 0.0)))
        if actual > 0:
            self.amounts[name] = self.amounts[name] - actual
        return actual

    def round_all(self) -> None:
        """Round every quantity to one decimal place (half-up)."""
        for name, amount in self.amounts.items():
            self.amounts[name] = math.floor(amount * 10 + 0.5) / 10

    def as_dict(self) -> dict[str, float]:
        return dict(self.amounts)

    def names(self) -> list[str]:
        return list(self.amounts)
