"""Tests for ResourceLedger."""
from __future__ import annotations

import pytest
from tick_dungeon import ResourceLedger


class TestLedgerAfford:
    def test_can_afford_exact(self) -> None:
        ledger = ResourceLedger({"biomass": 5.0})
        assert ledger.can_afford({"biomass": 5})

    def test_cannot_afford_short(self) -> None:
        ledger = ResourceLedger({"biomass": 4.9})
        assert not ledger.can_afford({"biomass": 5})

    def test_missing_resource_counts_as_zero(self) -> None:
        ledger = ResourceLedger({"biomass": 100.0})
        assert not ledger.can_afford({"mana": 1})
        assert ledger.can_afford({"mana": 0})

    def test_empty_cost_is_always_affordable(self) -> None:
        assert ResourceLedger().can_afford({})


class TestLedgerDeduct:
    def test_deduct_success(self) -> None:
        ledger = ResourceLedger({"biomass": 10.0, "mana": 5.0})
        assert ledger.deduct({"biomass": 4, "mana": 5})
        assert ledger.amounts == {"biomass": 6.0, "mana": 0.0}

    def test_unaffordable_deduct_leaves_ledger_unchanged(self) -> None:
        ledger = ResourceLedger({"biomass": 10.0, "mana": 5.0, "nutrients": 3.0})
        before = ledger.as_dict()
        assert not ledger.deduct({"biomass": 5, "nutrients": 4})
        assert ledger.as_dict() == before

    def test_negative_cost_raises(self) -> None:
        ledger = ResourceLedger({"biomass": 10.0})
        with pytest.raises(ValueError, match="must be >= 0"):
            ledger.deduct({"biomass": -1})
        assert ledger.get("biomass") == 10.0


class TestLedgerAddTake:
    def test_add_creates_missing_keys(self) -> None:
        ledger = ResourceLedger()
        ledger.add({"mana": 2.5})
        assert ledger.get("mana") == 2.5

    def test_add_negative_raises(self) -> None:
        with pytest.raises(ValueError):
            ResourceLedger().add({"mana": -1})

    def test_take_is_capped_by_holdings(self) -> None:
        ledger = ResourceLedger({"mana": 4.0})
        assert ledger.take("mana", 10) == 4.0
        assert ledger.get("mana") == 0.0

    def test_take_partial(self) -> None:
        ledger = ResourceLedger({"mana": 14.0})
        assert ledger.take("mana", 10) == 10
        assert ledger.get("mana") == 4.0

    def test_take_unknown_resource(self) -> None:
        ledger = ResourceLedger()
        assert ledger.take("gold", 3) == 0.0
        assert "gold" not in ledger.amounts


class TestLedgerRounding:
    def test_round_all_to_one_decimal(self) -> None:
        ledger = ResourceLedger({"biomass": 1.04, "mana": 1.05, "nutrients": 2.96})
        ledger.round_all()
        assert ledger.get("biomass") == 1.0
        assert ledger.get("mana") == pytest.approx(1.1)
        assert ledger.get("nutrients") == 3.0

    def test_as_dict_is_a_copy(self) -> None:
        ledger = ResourceLedger({"biomass": 1.0})
        copy = ledger.as_dict()
        copy["biomass"] = 99.0
        assert ledger.get("biomass") == 1.0
