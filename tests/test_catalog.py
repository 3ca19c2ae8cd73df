"""Tests for the static catalog and DungeonConfig validation."""
from __future__ import annotations

import pytest
from tick_dungeon import (
    Catalog,
    CatalogError,
    DungeonConfig,
    EquipmentSlot,
    PrestigeBonus,
    Rarity,
    Special,
)
from tick_dungeon.catalog import MAJOR_UPGRADE_CYCLE, STARTER_TYPE


class TestCreatureCatalog:
    def test_starter_slime(self) -> None:
        slime = Catalog().creature(STARTER_TYPE)
        assert slime.name == "Basic Slime"
        assert slime.health == 20
        assert slime.attack == 3
        assert slime.cost == {"biomass": 5}
        assert slime.special is None

    def test_thirteen_types(self) -> None:
        assert len(Catalog().creature_keys()) == 13

    def test_fusion_types_have_two_parents(self) -> None:
        catalog = Catalog()
        fusions = [catalog.creature(k) for k in catalog.creature_keys()
                   if catalog.creature(k).is_fusion]
        assert {f.key for f in fusions} == {
            "toxic_overlord", "crystal_sovereign", "apex_warrior",
        }
        for defn in fusions:
            assert len(defn.fusion_parents) == 2
            for parent in defn.fusion_parents:
                assert defn.key in catalog.creature(parent).evolves_to

    def test_every_evolution_target_exists(self) -> None:
        catalog = Catalog()
        for key in catalog.creature_keys():
            for target in catalog.creature(key).evolves_to:
                assert catalog.has_creature(target)

    def test_unknown_creature_raises_catalog_error(self) -> None:
        with pytest.raises(CatalogError):
            Catalog().creature("dragon")

    def test_catalog_error_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            Catalog().habitat("moon")

    def test_specials(self) -> None:
        catalog = Catalog()
        assert catalog.creature("gem_guardian").special is Special.CRYSTAL_ARMOR
        assert catalog.creature("venomous_broodmother").special is Special.SPAWN_MINIONS


class TestIntruderCatalog:
    def test_weights(self) -> None:
        weights = {d.name: d.weight for d in Catalog().intruders}
        assert weights == {
            "Novice Adventurer": 40,
            "Experienced Fighter": 30,
            "Mage Hunter": 20,
            "Elite Paladin": 8,
            "Dungeon Lord": 2,
        }

    def test_bosses_drop_equipment(self) -> None:
        bosses = Catalog().bosses
        assert len(bosses) == 3
        assert all(b.is_boss and b.drops_equipment for b in bosses)

    def test_lookup_by_name_covers_bosses(self) -> None:
        assert Catalog().intruder("Lich King").health == 250


class TestOtherCatalogs:
    def test_only_caves_unlocked_by_default(self) -> None:
        catalog = Catalog()
        unlocked = [k for k in catalog.habitat_keys()
                    if catalog.habitat(k).unlocked_by_default]
        assert unlocked == ["caves"]

    def test_equipment_for_every_slot_and_rarity(self) -> None:
        catalog = Catalog()
        for slot in EquipmentSlot:
            for rarity in Rarity:
                item = catalog.equipment(slot, rarity)
                assert item.slot is slot
                assert item.multiplier > 1.0

    def test_prestige_bonus_costs(self) -> None:
        catalog = Catalog()
        assert catalog.prestige_bonus(PrestigeBonus.EVOLUTION_SPEED).cost == 2
        assert catalog.prestige_bonus(PrestigeBonus.RESOURCE_GENERATION).effect == 0.2
        assert len(catalog.prestige_bonuses()) == 8

    def test_ten_achievements(self) -> None:
        assert len(Catalog().achievements()) == 10

    def test_major_upgrade_cycle_has_four_kinds(self) -> None:
        assert len(set(MAJOR_UPGRADE_CYCLE)) == 4


class TestDungeonConfig:
    def test_defaults(self) -> None:
        config = DungeonConfig()
        assert config.evolution_age_threshold == 30
        assert config.seed_resources == {"biomass": 10.0, "mana": 5.0, "nutrients": 3.0}
        assert config.log_message_limit == 10

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError, match="update_interval"):
            DungeonConfig(update_interval=0)

    def test_rejects_bad_loot_chances(self) -> None:
        with pytest.raises(ValueError):
            DungeonConfig(epic_chance=0.6, rare_chance=0.6)

    def test_rejects_negative_seed(self) -> None:
        with pytest.raises(ValueError):
            DungeonConfig(seed_resources={"biomass": -1})
