"""Tests for the read-only snapshot queries."""
from __future__ import annotations

from tick_dungeon import EquipmentSlot, Rarity, new_world
from tick_dungeon import snapshot as snap
from tick_dungeon.world import LootItem, World


def _setup() -> World:
    world = new_world()
    world.ledger.add({"biomass": 200, "mana": 100, "nutrients": 50})
    world.create_creature("slime")
    world.create_creature("poison_slime")
    world.create_creature("crystal_slime")
    return world


class TestIdempotence:
    def test_snapshot_twice_is_equal(self) -> None:
        world = _setup()
        assert snap.snapshot(world) == snap.snapshot(world)

    def test_results_are_fresh_copies(self) -> None:
        world = _setup()
        resources = snap.resources(world)
        resources["biomass"] = -1
        roster = snap.roster(world)
        roster[0]["production"]["biomass"] = 999
        assert world.ledger.get("biomass") == 210
        assert snap.roster(world)[0]["production"]["biomass"] == 0.5


class TestRoster:
    def test_flat_in_insertion_order(self) -> None:
        world = _setup()
        assert [c["type"] for c in snap.roster(world)] == [
            "slime", "slime", "poison_slime", "crystal_slime",
        ]

    def test_grouped(self) -> None:
        world = _setup()
        world.creatures[0].age = 40
        world.creatures[0].evolution_ready = True
        groups = {g["type"]: g for g in snap.roster(world, grouped=True)}
        assert groups["slime"]["count"] == 2
        assert groups["slime"]["ready"] == 1
        assert groups["slime"]["avg_age"] == 20
        assert groups["slime"]["production"]["biomass"] == 1.0

    def test_ability_text(self) -> None:
        world = _setup()
        world.create_creature("gem_guardian")
        assert snap.roster(world)[-1]["ability"].startswith("Crystal Armor")

    def test_crystal_boost_flag(self) -> None:
        world = _setup()
        world.creatures[-1].crystal_boosted = True
        flags = [c["crystal_boosted"] for c in snap.roster(world)]
        assert flags == [False, False, False, True]


class TestStatus:
    def test_dungeon_status(self) -> None:
        status = snap.dungeon_status(_setup())
        assert status["level"] == 1
        assert status["health"] == 100
        assert status["upgrade_cost"] == {"nutrients": 50}
        assert status["can_upgrade"]
        assert status["slime_cost"] == {"biomass": 5}
        assert status["invasion_timer"] == 60

    def test_habitats(self) -> None:
        world = _setup()
        habitats = {h["key"]: h for h in snap.habitats(world)}
        assert habitats["caves"]["unlocked"]
        assert habitats["caves"]["residents"] == 2
        assert habitats["swamps"]["can_afford"]
        assert habitats["crystalCaves"]["residents"] == 1

    def test_locked_habitat_unaffordable_on_fresh_world(self) -> None:
        habitats = {h["key"]: h for h in snap.habitats(new_world())}
        assert not habitats["swamps"]["unlocked"]
        assert not habitats["swamps"]["can_afford"]

    def test_prestige_status(self) -> None:
        world = _setup()
        world.dungeon.level = 10
        status = snap.prestige_status(world)
        assert status["available"]
        assert status["reward"] == 5
        assert len(status["bonuses"]) == 8
        assert not any(b["can_afford"] for b in status["bonuses"])

    def test_achievements(self) -> None:
        world = _setup()
        world.achievements.unlocked.append("reborn")
        result = snap.achievements(world)
        unlocked = [a["key"] for a in result["achievements"] if a["unlocked"]]
        assert unlocked == ["reborn"]
        assert result["stats"]["types_reached"] == [
            "crystal_slime", "poison_slime", "slime",
        ]

    def test_equipment(self) -> None:
        world = _setup()
        item = world.catalog.equipment(EquipmentSlot.GARDEN, Rarity.RARE)
        world.equipment.pending.append(LootItem(77, item))
        result = snap.equipment(world)
        assert result["slots"] == {"heart": None, "altar": None, "hatchery": None, "garden": None}
        assert result["pending"][0]["id"] == 77
        assert result["pending"][0]["rarity"] == "rare"

    def test_pending_intruders(self) -> None:
        world = _setup()
        world.add_intruder(world.catalog.intruder("Mage Hunter"))
        [intruder] = snap.pending_intruders(world)
        assert intruder["name"] == "Mage Hunter"
        assert intruder["special"] == "mana_drain"

    def test_log_messages(self) -> None:
        world = _setup()
        world.emit("test", "hello")
        assert snap.log_messages(world) == ["hello"]
