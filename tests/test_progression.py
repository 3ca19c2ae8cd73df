"""Tests for spawning, dungeon levels, habitats, prestige, achievements, and loot."""
from __future__ import annotations

import random

import pytest
from tick_dungeon import EquipmentSlot, MajorUpgrade, PrestigeBonus, Rarity, new_world
from tick_dungeon.bonuses import effective_max_health
from tick_dungeon.catalog import MAJOR_UPGRADE_CYCLE
from tick_dungeon.progression import (
    check_achievements,
    equip_item,
    major_upgrade_for,
    prestige,
    prestige_reward,
    purchase_prestige_bonus,
    roll_loot,
    roll_rarity,
    slime_cost,
    spawn,
    unlock_habitat,
    upgrade_benefits,
    upgrade_cost,
    upgrade_dungeon,
)
from tick_dungeon.world import LootItem, World


def _rich() -> World:
    world = new_world()
    world.ledger.add({"biomass": 10_000, "mana": 10_000, "nutrients": 100_000})
    return world


class TestSpawn:
    def test_spawn_starter_slime(self) -> None:
        world = new_world()
        creature = spawn(world, "slime")
        assert creature is not None
        assert world.ledger.get("biomass") == 5
        assert len(world.creatures) == 2
        assert creature.id == 2

    def test_slime_price_grows(self) -> None:
        world = _rich()
        assert slime_cost(world) == {"biomass": 5}
        spawn(world, "slime")
        assert slime_cost(world) == {"biomass": 6}
        spawn(world, "slime")
        assert slime_cost(world) == {"biomass": 7}

    def test_other_types_fixed_price(self) -> None:
        world = _rich()
        before = world.ledger.get("biomass")
        spawn(world, "crystal_slime")
        spawn(world, "crystal_slime")
        assert world.ledger.get("biomass") == before - 50

    def test_unaffordable_spawn_is_noop(self) -> None:
        world = new_world()
        assert spawn(world, "warrior_slime") is None
        assert len(world.creatures) == 1
        assert world.ledger.as_dict() == {"biomass": 10, "mana": 5, "nutrients": 3}

    def test_unknown_type(self) -> None:
        assert spawn(new_world(), "dragon") is None


class TestDungeonUpgrade:
    def test_cubic_cost(self) -> None:
        world = new_world()
        assert upgrade_cost(world) == {"nutrients": 50}
        world.dungeon.level = 2
        assert upgrade_cost(world) == {"nutrients": 400}
        world.dungeon.level = 3
        assert upgrade_cost(world) == {"nutrients": 1350}

    def test_upgrade_with_exact_nutrients(self) -> None:
        world = new_world()
        world.ledger.amounts["nutrients"] = 50.0
        assert upgrade_dungeon(world)
        assert world.ledger.get("nutrients") == 0
        assert world.dungeon.level == 2
        assert world.dungeon.max_health == 150
        assert world.dungeon.health == 150

    def test_upgrade_refills_health(self) -> None:
        world = _rich()
        world.dungeon.health = 10
        upgrade_dungeon(world)
        assert world.dungeon.health == 150

    def test_unaffordable_upgrade(self) -> None:
        world = new_world()
        assert not upgrade_dungeon(world)
        assert world.dungeon.level == 1
        assert world.ledger.get("nutrients") == 3

    @pytest.mark.parametrize(
        ("level", "index"), [(5, 0), (10, 1), (15, 2), (20, 3), (25, 0)]
    )
    def test_major_upgrade_cycle(self, level: int, index: int) -> None:
        assert major_upgrade_for(level) is MAJOR_UPGRADE_CYCLE[index]

    def test_no_major_upgrade_between_milestones(self) -> None:
        assert all(major_upgrade_for(level) is None for level in (1, 2, 4, 6, 9, 11))

    def test_major_upgrades_apply(self) -> None:
        world = new_world()
        world.ledger.add({"nutrients": 2_000_000})
        crystal = world.create_creature("crystal_slime")
        while world.dungeon.level < 20:
            assert upgrade_dungeon(world)
        assert world.bonuses.crystal == 1.5
        assert world.bonuses.combat == 1.25
        assert world.bonuses.toxic == pytest.approx(1.3)
        assert world.bonuses.synergy_rate == pytest.approx(0.2)
        assert crystal.crystal_boosted
        assert world.log.last("upgrade").data["major"] == MajorUpgrade.SYMBIOSIS_MASTERY.value

    def test_benefits(self) -> None:
        world = new_world()
        world.dungeon.level = 4
        benefits = upgrade_benefits(world)
        assert benefits["next_level"] == 5
        assert benefits["next_major"] is MajorUpgrade.CRYSTAL_ENHANCEMENT
        assert benefits["current_resource_bonus"] == 15
        assert benefits["next_resource_bonus"] == 20
        world.dungeon.level = 5
        assert upgrade_benefits(world)["levels_to_major"] == 4


class TestHabitats:
    def test_unlock(self) -> None:
        world = _rich()
        assert unlock_habitat(world, "swamps")
        assert world.habitats["swamps"]
        assert world.achievements.stats.habitats_unlocked == 1

    def test_cannot_unlock_twice(self) -> None:
        world = _rich()
        unlock_habitat(world, "swamps")
        biomass = world.ledger.get("biomass")
        assert not unlock_habitat(world, "swamps")
        assert world.ledger.get("biomass") == biomass

    def test_default_habitat_already_unlocked(self) -> None:
        assert not unlock_habitat(_rich(), "caves")

    def test_unaffordable_or_unknown(self) -> None:
        world = new_world()
        assert not unlock_habitat(world, "swamps")
        assert not unlock_habitat(world, "moon")
        assert not world.habitats["swamps"]


class TestPrestige:
    def test_requires_level_ten(self) -> None:
        world = _rich()
        world.dungeon.level = 9
        assert prestige(world) is None

    def test_carryover(self) -> None:
        world = _rich()
        world.dungeon.level = 10
        world.achievements.unlocked.append("first_evolution")
        world.prestige.bonuses[PrestigeBonus.MONSTER_ATTACK] = 1
        assert prestige_reward(world) == 6

        fresh = prestige(world)
        assert fresh is not None
        assert fresh.prestige.level == 1
        assert fresh.prestige.bonuses == {PrestigeBonus.MONSTER_ATTACK: 1}
        assert fresh.dungeon.level == 1
        assert fresh.ledger.as_dict() == {"biomass": 10, "mana": 5, "nutrients": 3}
        assert [c.type for c in fresh.creatures] == ["slime"]
        assert fresh.achievements.stats.prestiges == 1
        # 6 from the prestige, 2 more from unlocking "reborn"
        assert fresh.achievements.has("reborn")
        assert fresh.prestige.essence == 8
        assert fresh.log is world.log

    def test_starting_resources_and_resilience(self) -> None:
        world = _rich()
        world.dungeon.level = 10
        world.prestige.bonuses[PrestigeBonus.STARTING_RESOURCES] = 1
        world.prestige.bonuses[PrestigeBonus.DUNGEON_RESILIENCE] = 1
        fresh = prestige(world)
        assert fresh.ledger.as_dict() == {"biomass": 20, "mana": 10, "nutrients": 6}
        assert fresh.dungeon.max_health == 120
        assert fresh.dungeon.health == 120

    def test_purchase_bonus(self) -> None:
        world = new_world()
        world.prestige.essence = 3
        assert purchase_prestige_bonus(world, PrestigeBonus.EVOLUTION_SPEED)
        assert world.prestige.essence == 1
        assert world.prestige.purchased(PrestigeBonus.EVOLUTION_SPEED) == 1
        assert not purchase_prestige_bonus(world, PrestigeBonus.SYNERGY_BOOST)
        assert world.prestige.essence == 1
        assert purchase_prestige_bonus(world, PrestigeBonus.HERO_REWARDS)
        assert world.prestige.essence == 0


class TestAchievements:
    def test_monster_collector_unlocks_on_tenth(self) -> None:
        world = new_world()
        world.ledger.add({"biomass": 500})
        for _ in range(8):
            spawn(world, "slime")
            check_achievements(world)
        assert len(world.creatures) == 9
        assert not world.achievements.has("monster_collector")

        spawn(world, "slime")
        assert check_achievements(world) == ["monster_collector"]
        assert world.prestige.essence == 2

        spawn(world, "slime")
        assert check_achievements(world) == []
        assert world.achievements.unlocked.count("monster_collector") == 1
        assert world.prestige.essence == 2

    def test_first_evolution(self) -> None:
        world = new_world()
        world.achievements.stats.evolutions = 1
        assert "first_evolution" in check_achievements(world)

    def test_synergy_master_tracks_peak(self) -> None:
        world = _rich()
        world.creatures.clear()
        world.create_creature("poison_slime")
        crystals = [world.create_creature("crystal_slime") for _ in range(5)]
        assert "synergy_master" in check_achievements(world)
        for crystal in crystals:
            world.remove_creature(crystal.id)
        check_achievements(world)
        assert world.achievements.stats.peak_synergy == pytest.approx(1.5)

    def test_hoarder(self) -> None:
        world = _rich()
        assert "hoarder" in check_achievements(world)

    def test_habitat_master(self) -> None:
        world = _rich()
        for key in world.catalog.habitat_keys():
            unlock_habitat(world, key)
        assert "habitat_master" in check_achievements(world)


class TestLoot:
    def test_rarity_bands(self) -> None:
        world = new_world()

        class _Roll(random.Random):
            def __init__(self, value: float) -> None:
                super().__init__(0)
                self.value = value

            def random(self) -> float:
                return self.value

        assert roll_rarity(world, _Roll(0.01)) is Rarity.EPIC
        assert roll_rarity(world, _Roll(0.1)) is Rarity.RARE
        assert roll_rarity(world, _Roll(0.5)) is Rarity.COMMON

    def test_roll_loot_goes_to_pending(self) -> None:
        world = new_world()
        loot = roll_loot(world, random.Random(4))
        assert world.equipment.pending == [loot]
        assert loot.item.channel is not None

    def test_equip_displaces(self) -> None:
        world = new_world()
        old = LootItem(world.allocate_id(), world.catalog.equipment(EquipmentSlot.ALTAR, Rarity.COMMON))
        new = LootItem(world.allocate_id(), world.catalog.equipment(EquipmentSlot.ALTAR, Rarity.EPIC))
        world.equipment.slots[EquipmentSlot.ALTAR] = old
        world.equipment.pending.append(new)
        assert equip_item(world, new.id)
        assert world.equipment.slots[EquipmentSlot.ALTAR] is new
        assert world.equipment.pending == []

    def test_unequipping_heart_clamps_health(self) -> None:
        world = new_world()
        epic = LootItem(world.allocate_id(), world.catalog.equipment(EquipmentSlot.HEART, Rarity.EPIC))
        common = LootItem(world.allocate_id(), world.catalog.equipment(EquipmentSlot.HEART, Rarity.COMMON))
        world.equipment.slots[EquipmentSlot.HEART] = epic
        world.dungeon.health = 150
        world.equipment.pending.append(common)
        assert equip_item(world, common.id)
        assert world.dungeon.health == 110

    def test_upgrade_refills_to_effective_max(self) -> None:
        world = new_world()
        heart = LootItem(world.allocate_id(), world.catalog.equipment(EquipmentSlot.HEART, Rarity.EPIC))
        world.equipment.slots[EquipmentSlot.HEART] = heart
        world.ledger.amounts["nutrients"] = 50.0
        assert upgrade_dungeon(world)
        assert world.dungeon.max_health == 150
        assert world.dungeon.health == effective_max_health(world) == 225

    def test_equip_unknown_id(self) -> None:
        assert not equip_item(new_world(), 42)
