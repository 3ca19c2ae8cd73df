"""Static game data and the Catalog lookup object."""
from __future__ import annotations

from typing import Iterable

from tick_dungeon.types import (
    AchievementDef,
    BonusChannel,
    CatalogError,
    CreatureTypeDef,
    EquipmentDef,
    EquipmentSlot,
    HabitatDef,
    IntruderSpecial,
    IntruderTypeDef,
    MajorUpgrade,
    PrestigeBonus,
    PrestigeBonusDef,
    Rarity,
    Special,
)

STARTER_TYPE = "slime"
PACK_TYPE = "warrior_slime"
FALLBACK_INTRUDER = "Experienced Fighter"

CREATURE_TYPES: tuple[CreatureTypeDef, ...] = (
    CreatureTypeDef(
        key="slime", name="Basic Slime", health=20, attack=3,
        rates={"biomass": 0.5}, cost={"biomass": 5},
        evolves_to=("poison_slime", "crystal_slime", "warrior_slime"),
        habitat="caves",
    ),
    CreatureTypeDef(
        key="poison_slime", name="Poison Slime", health=35, attack=5,
        rates={"biomass": 0.3, "mana": 0.2}, cost={"biomass": 15},
        evolves_to=("toxic_horror", "venomous_broodmother"),
        habitat="swamps", synergy=("crystal_slime",),
    ),
    CreatureTypeDef(
        key="crystal_slime", name="Crystal Slime", health=50, attack=4,
        rates={"nutrients": 0.1}, cost={"biomass": 25},
        evolves_to=("gem_guardian", "crystal_hive"),
        habitat="crystalCaves", synergy=("poison_slime",),
    ),
    CreatureTypeDef(
        key="warrior_slime", name="Warrior Slime", health=60, attack=8,
        rates={"biomass": 0.2}, cost={"biomass": 20, "mana": 5},
        evolves_to=("slime_champion", "berserker_slime"),
        habitat="barracks", synergy=("warrior_slime",),
    ),
    CreatureTypeDef(
        key="toxic_horror", name="Toxic Horror", health=80, attack=12,
        rates={"mana": 0.4, "biomass": 0.1}, cost={"biomass": 30, "mana": 15},
        evolves_to=("toxic_overlord",), habitat="swamps",
        special=Special.POISON_AURA,
    ),
    CreatureTypeDef(
        key="venomous_broodmother", name="Venomous Broodmother", health=70, attack=8,
        rates={"mana": 0.3, "biomass": 0.6}, cost={"biomass": 35, "mana": 20},
        evolves_to=("toxic_overlord",), habitat="nursery",
        special=Special.SPAWN_MINIONS,
    ),
    CreatureTypeDef(
        key="gem_guardian", name="Gem Guardian", health=120, attack=10,
        rates={"nutrients": 0.2}, cost={"biomass": 40, "nutrients": 15},
        evolves_to=("crystal_sovereign",), habitat="crystalCaves",
        special=Special.CRYSTAL_ARMOR,
    ),
    CreatureTypeDef(
        key="crystal_hive", name="Crystal Hive", health=90, attack=6,
        rates={"nutrients": 0.3, "mana": 0.1}, cost={"biomass": 45, "nutrients": 20},
        evolves_to=("crystal_sovereign",), habitat="crystalCaves",
        special=Special.RESOURCE_CONVERSION,
    ),
    CreatureTypeDef(
        key="slime_champion", name="Slime Champion", health=100, attack=15,
        rates={"biomass": 0.3}, cost={"biomass": 35, "mana": 10, "nutrients": 5},
        evolves_to=("apex_warrior",), habitat="barracks",
        special=Special.LEADERSHIP,
    ),
    CreatureTypeDef(
        key="berserker_slime", name="Berserker Slime", health=80, attack=20,
        rates={"biomass": 0.1}, cost={"biomass": 30, "mana": 15},
        evolves_to=("apex_warrior",), habitat="battlegrounds",
        special=Special.RAGE,
    ),
    # Fusion types
    CreatureTypeDef(
        key="toxic_overlord", name="Toxic Overlord", health=150, attack=25,
        rates={"mana": 0.6, "biomass": 0.4},
        cost={"biomass": 80, "mana": 50, "nutrients": 20},
        fusion_parents=("toxic_horror", "venomous_broodmother"),
        habitat="swamps", special=Special.TOXIC_MASTERY,
    ),
    CreatureTypeDef(
        key="crystal_sovereign", name="Crystal Sovereign", health=180, attack=20,
        rates={"nutrients": 0.5, "mana": 0.3},
        cost={"biomass": 100, "mana": 40, "nutrients": 30},
        fusion_parents=("gem_guardian", "crystal_hive"),
        habitat="crystalCaves", special=Special.CRYSTAL_MASTERY,
    ),
    CreatureTypeDef(
        key="apex_warrior", name="Apex Warrior", health=200, attack=40,
        rates={"biomass": 0.5},
        cost={"biomass": 120, "mana": 60, "nutrients": 25},
        fusion_parents=("slime_champion", "berserker_slime"),
        habitat="battlegrounds", special=Special.APEX_MASTERY,
    ),
)

INTRUDER_TYPES: tuple[IntruderTypeDef, ...] = (
    IntruderTypeDef(
        name="Novice Adventurer", health=30, attack=8,
        loot={"biomass": 3, "mana": 1}, weight=40,
    ),
    IntruderTypeDef(
        name="Experienced Fighter", health=60, attack=12,
        loot={"biomass": 8, "mana": 3, "nutrients": 1}, weight=30,
    ),
    IntruderTypeDef(
        name="Mage Hunter", health=45, attack=10,
        loot={"biomass": 5, "mana": 8, "nutrients": 2}, weight=20,
        special=IntruderSpecial.MANA_DRAIN,
    ),
    IntruderTypeDef(
        name="Elite Paladin", health=100, attack=15,
        loot={"biomass": 15, "mana": 10, "nutrients": 5}, weight=8,
        special=IntruderSpecial.HOLY_AURA,
    ),
    IntruderTypeDef(
        name="Dungeon Lord", health=150, attack=25,
        loot={"biomass": 25, "mana": 20, "nutrients": 15}, weight=2,
        special=IntruderSpecial.BOSS, is_boss=True,
    ),
)

BOSS_TYPES: tuple[IntruderTypeDef, ...] = (
    IntruderTypeDef(
        name="Lich King", health=250, attack=30,
        loot={"biomass": 40, "mana": 40, "nutrients": 20},
        special=IntruderSpecial.BOSS, is_boss=True, drops_equipment=True,
    ),
    IntruderTypeDef(
        name="Dragon Knight", health=320, attack=40,
        loot={"biomass": 60, "mana": 25, "nutrients": 25},
        special=IntruderSpecial.BOSS, is_boss=True, drops_equipment=True,
    ),
    IntruderTypeDef(
        name="Grand Inquisitor", health=280, attack=35,
        loot={"biomass": 35, "mana": 50, "nutrients": 30},
        special=IntruderSpecial.BOSS, is_boss=True, drops_equipment=True,
    ),
)

HABITATS: tuple[HabitatDef, ...] = (
    HabitatDef("caves", "Dark Caves", 10, {"biomass": 1.1}),
    HabitatDef("swamps", "Toxic Swamps", 8, {"mana": 1.2},
               {"biomass": 50, "mana": 20}),
    HabitatDef("crystalCaves", "Crystal Caverns", 6, {"nutrients": 1.3},
               {"biomass": 60, "nutrients": 15}),
    HabitatDef("barracks", "War Barracks", 12, {"attack": 1.2},
               {"biomass": 80, "mana": 15, "nutrients": 10}),
    HabitatDef("nursery", "Breeding Pools", 5, {"biomass": 1.5},
               {"biomass": 40, "mana": 25}),
    HabitatDef("battlegrounds", "Battle Arena", 8, {"attack": 1.4},
               {"biomass": 70, "mana": 30, "nutrients": 10}),
)

SLOT_CHANNELS: dict[EquipmentSlot, BonusChannel] = {
    EquipmentSlot.HEART: BonusChannel.DUNGEON_HEALTH,
    EquipmentSlot.ALTAR: BonusChannel.MANA_RATE,
    EquipmentSlot.HATCHERY: BonusChannel.BIOMASS_RATE,
    EquipmentSlot.GARDEN: BonusChannel.NUTRIENT_RATE,
}

RESOURCE_CHANNELS: dict[str, BonusChannel] = {
    "biomass": BonusChannel.BIOMASS_RATE,
    "mana": BonusChannel.MANA_RATE,
    "nutrients": BonusChannel.NUTRIENT_RATE,
}

RARITY_MULTIPLIERS: dict[Rarity, float] = {
    Rarity.COMMON: 1.1,
    Rarity.RARE: 1.25,
    Rarity.EPIC: 1.5,
}

_EQUIPMENT_NAMES: dict[EquipmentSlot, tuple[str, str, str]] = {
    EquipmentSlot.HEART: ("Stone Heartguard", "Runed Heartguard", "Dragonbone Heartguard"),
    EquipmentSlot.ALTAR: ("Cracked Mana Idol", "Glowing Mana Idol", "Astral Mana Idol"),
    EquipmentSlot.HATCHERY: ("Mossy Brood Vat", "Pulsing Brood Vat", "Primordial Brood Vat"),
    EquipmentSlot.GARDEN: ("Fungal Planter", "Luminous Planter", "Worldroot Planter"),
}


def _build_equipment() -> tuple[EquipmentDef, ...]:
    items: list[EquipmentDef] = []
    for slot, names in _EQUIPMENT_NAMES.items():
        for rarity, name in zip((Rarity.COMMON, Rarity.RARE, Rarity.EPIC), names):
            items.append(EquipmentDef(
                name=name, slot=slot, rarity=rarity,
                channel=SLOT_CHANNELS[slot],
                multiplier=RARITY_MULTIPLIERS[rarity],
            ))
    return tuple(items)


EQUIPMENT: tuple[EquipmentDef, ...] = _build_equipment()

PRESTIGE_BONUSES: tuple[PrestigeBonusDef, ...] = (
    PrestigeBonusDef(PrestigeBonus.RESOURCE_GENERATION, "Abundant Growth", 1, 0.2),
    PrestigeBonusDef(PrestigeBonus.MONSTER_HEALTH, "Thick Membranes", 1, 0.1),
    PrestigeBonusDef(PrestigeBonus.MONSTER_ATTACK, "Acidic Strikes", 1, 0.1),
    PrestigeBonusDef(PrestigeBonus.EVOLUTION_SPEED, "Rapid Mutation", 2, 0.25),
    PrestigeBonusDef(PrestigeBonus.STARTING_RESOURCES, "Ancestral Stores", 1, 1.0),
    PrestigeBonusDef(PrestigeBonus.DUNGEON_RESILIENCE, "Hardened Core", 2, 0.2),
    PrestigeBonusDef(PrestigeBonus.SYNERGY_BOOST, "Hive Mind", 2, 0.1),
    PrestigeBonusDef(PrestigeBonus.HERO_REWARDS, "Plunderer's Instinct", 1, 0.25),
)

ACHIEVEMENTS: tuple[AchievementDef, ...] = (
    AchievementDef("first_evolution", "First Steps", "Evolve a monster", 1),
    AchievementDef("monster_collector", "Monster Collector", "Have 10 monsters at once", 2),
    AchievementDef("diverse_dungeon", "Diverse Dungeon", "Reach 10 different monster types", 3),
    AchievementDef("hero_slayer", "Hero Slayer", "Defeat 10 intruders", 2),
    AchievementDef("boss_slayer", "Boss Slayer", "Defeat a boss", 3),
    AchievementDef("reborn", "Reborn", "Complete a prestige", 2),
    AchievementDef("survivor", "Survivor", "Survive 100 invasions", 5),
    AchievementDef("habitat_master", "Habitat Master", "Unlock every habitat", 3),
    AchievementDef("hoarder", "Hoarder", "Hold 1000 of every resource", 4),
    AchievementDef("synergy_master", "Synergy Master", "Reach a 1.5x synergy bonus", 3),
)

# Index 0 is granted at level 5, index 1 at level 10, and so on.
MAJOR_UPGRADE_CYCLE: tuple[MajorUpgrade, ...] = (
    MajorUpgrade.CRYSTAL_ENHANCEMENT,
    MajorUpgrade.COMBAT_MASTERY,
    MajorUpgrade.TOXIC_EVOLUTION,
    MajorUpgrade.SYMBIOSIS_MASTERY,
)

MAJOR_UPGRADE_TEXT: dict[MajorUpgrade, tuple[str, str]] = {
    MajorUpgrade.CRYSTAL_ENHANCEMENT: (
        "Crystal Enhancement", "Crystal monsters +50% production"),
    MajorUpgrade.COMBAT_MASTERY: ("Combat Mastery", "All monsters +25% attack"),
    MajorUpgrade.TOXIC_EVOLUTION: ("Toxic Evolution", "Poison abilities enhanced +30%"),
    MajorUpgrade.SYMBIOSIS_MASTERY: ("Symbiosis Mastery", "All synergy bonuses +10%"),
}

ABILITY_TEXT: dict[Special, str] = {
    Special.POISON_AURA: "Poison Aura: Damages heroes over time",
    Special.SPAWN_MINIONS: "Spawns free Basic Slimes every 2 minutes",
    Special.CRYSTAL_ARMOR: "Crystal Armor: Reduces incoming damage by 30%",
    Special.RESOURCE_CONVERSION: "Converts 5 Biomass -> 2 Mana + 1 Nutrients every 30s",
    Special.LEADERSHIP: "Leadership: Boosts nearby monsters",
    Special.RAGE: "Rage: Attack increases when damaged",
    Special.TOXIC_MASTERY: "Toxic Mastery: Ultimate poison abilities + spawning",
    Special.CRYSTAL_MASTERY: "Crystal Mastery: Superior defense + resource conversion",
    Special.APEX_MASTERY: "Apex Mastery: Combat supremacy + leadership",
}


class Catalog:
    """Read-only lookup over the static game data."""

    def __init__(
        self,
        creatures: Iterable[CreatureTypeDef] = CREATURE_TYPES,
        intruders: Iterable[IntruderTypeDef] = INTRUDER_TYPES,
        bosses: Iterable[IntruderTypeDef] = BOSS_TYPES,
        habitats: Iterable[HabitatDef] = HABITATS,
        equipment: Iterable[EquipmentDef] = EQUIPMENT,
        prestige_bonuses: Iterable[PrestigeBonusDef] = PRESTIGE_BONUSES,
        achievements: Iterable[AchievementDef] = ACHIEVEMENTS,
    ) -> None:
        self._creatures = {c.key: c for c in creatures}
        self._intruders = tuple(intruders)
        self._bosses = tuple(bosses)
        self._habitats = {h.key: h for h in habitats}
        self._equipment = {(e.slot, e.rarity): e for e in equipment}
        self._prestige = {p.kind: p for p in prestige_bonuses}
        self._achievements = {a.key: a for a in achievements}

    # --- Creatures ---

    def creature(self, key: str) -> CreatureTypeDef:
        """Look up a creature type. Raises CatalogError if unknown."""
        if key not in self._creatures:
            raise CatalogError("creature type", key)
        return self._creatures[key]

    def has_creature(self, key: str) -> bool:
        return key in self._creatures

    def creature_keys(self) -> list[str]:
        return list(self._creatures)

    # --- Intruders ---

    @property
    def intruders(self) -> tuple[IntruderTypeDef, ...]:
        return self._intruders

    @property
    def bosses(self) -> tuple[IntruderTypeDef, ...]:
        return self._bosses

    def intruder(self, name: str) -> IntruderTypeDef:
        for defn in self._intruders + self._bosses:
            if defn.name == name:
                return defn
        raise CatalogError("intruder type", name)

    # --- Habitats ---

    def habitat(self, key: str) -> HabitatDef:
        if key not in self._habitats:
            raise CatalogError("habitat", key)
        return self._habitats[key]

    def has_habitat(self, key: str) -> bool:
        return key in self._habitats

    def habitat_keys(self) -> list[str]:
        return list(self._habitats)

    # --- Equipment / prestige / achievements ---

    def equipment(self, slot: EquipmentSlot, rarity: Rarity) -> EquipmentDef:
        if (slot, rarity) not in self._equipment:
            raise CatalogError("equipment", (slot.value, rarity.value))
        return self._equipment[(slot, rarity)]

    def prestige_bonus(self, kind: PrestigeBonus) -> PrestigeBonusDef:
        if kind not in self._prestige:
            raise CatalogError("prestige bonus", kind)
        return self._prestige[kind]

    def prestige_bonuses(self) -> list[PrestigeBonusDef]:
        return list(self._prestige.values())

    def achievement(self, key: str) -> AchievementDef:
        if key not in self._achievements:
            raise CatalogError("achievement", key)
        return self._achievements[key]

    def achievements(self) -> list[AchievementDef]:
        return list(self._achievements.values())
