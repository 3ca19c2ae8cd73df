"""Shared enums, definition types, and errors for the dungeon core."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

CreatureId = int
RESOURCES = ("biomass", "mana", "nutrients")


class Special(Enum):
    """Creature special ability tags."""

    POISON_AURA = "poison_aura"
    SPAWN_MINIONS = "spawn_minions"
    CRYSTAL_ARMOR = "crystal_armor"
    RESOURCE_CONVERSION = "resource_conversion"
    LEADERSHIP = "leadership"
    RAGE = "rage"
    TOXIC_MASTERY = "toxic_mastery"
    CRYSTAL_MASTERY = "crystal_mastery"
    APEX_MASTERY = "apex_mastery"


class IntruderSpecial(Enum):
    MANA_DRAIN = "mana_drain"
    HOLY_AURA = "holy_aura"
    BOSS = "boss"


class MajorUpgrade(Enum):
    """Permanent global bonuses granted every fifth dungeon level."""

    CRYSTAL_ENHANCEMENT = "crystal_enhancement"
    COMBAT_MASTERY = "combat_mastery"
    TOXIC_EVOLUTION = "toxic_evolution"
    SYMBIOSIS_MASTERY = "symbiosis_mastery"


class PrestigeBonus(Enum):
    RESOURCE_GENERATION = "resource_generation"
    MONSTER_HEALTH = "monster_health"
    MONSTER_ATTACK = "monster_attack"
    EVOLUTION_SPEED = "evolution_speed"
    STARTING_RESOURCES = "starting_resources"
    DUNGEON_RESILIENCE = "dungeon_resilience"
    SYNERGY_BOOST = "synergy_boost"
    HERO_REWARDS = "hero_rewards"


class Rarity(Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"


class EquipmentSlot(Enum):
    """Fixed equipment slots; each slot boosts one bonus channel."""

    HEART = "heart"
    ALTAR = "altar"
    HATCHERY = "hatchery"
    GARDEN = "garden"


class BonusChannel(Enum):
    DUNGEON_HEALTH = "dungeon_health"
    MANA_RATE = "mana_rate"
    BIOMASS_RATE = "biomass_rate"
    NUTRIENT_RATE = "nutrient_rate"


class CombatOutcome(Enum):
    """Result of resolving one intruder."""

    MISSING = "missing"
    VICTORY = "victory"
    ESCAPE = "escape"
    THEFT = "theft"
    DEFEAT = "defeat"


@dataclass(frozen=True)
class CreatureTypeDef:
    """Immutable creature type definition.

    Attributes:
        key: Catalog key (e.g. ``"poison_slime"``).
        name: Display name.
        health: Base health and max health.
        attack: Base attack.
        rates: Per-second production (resource_name -> amount).
        cost: Acquisition and evolution cost.
        evolves_to: Keys this type may evolve into.
        fusion_parents: Pair of parent type keys for fusion types.
        habitat: Habitat key.
        synergy: Partner type keys that boost this type.
        special: Special ability tag, if any.
    """

    key: str
    name: str
    health: int
    attack: int
    rates: dict[str, float] = field(default_factory=dict)
    cost: dict[str, float] = field(default_factory=dict)
    evolves_to: tuple[str, ...] = ()
    fusion_parents: tuple[str, str] | None = None
    habitat: str = "caves"
    synergy: tuple[str, ...] = ()
    special: Special | None = None

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("CreatureTypeDef key must be non-empty")
        if self.health <= 0:
            raise ValueError(f"health must be > 0, got {self.health}")

    @property
    def is_fusion(self) -> bool:
        return self.fusion_parents is not None


@dataclass(frozen=True)
class IntruderTypeDef:
    """Immutable intruder (hero or boss) definition."""

    name: str
    health: int
    attack: int
    loot: dict[str, float] = field(default_factory=dict)
    weight: float = 1.0
    special: IntruderSpecial | None = None
    is_boss: bool = False
    drops_equipment: bool = False

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"weight must be >= 0, got {self.weight}")


@dataclass(frozen=True)
class HabitatDef:
    key: str
    name: str
    capacity: int
    bonus: dict[str, float] = field(default_factory=dict)
    cost: dict[str, float] | None = None  # None means unlocked from the start

    @property
    def unlocked_by_default(self) -> bool:
        return self.cost is None


@dataclass(frozen=True)
class EquipmentDef:
    name: str
    slot: EquipmentSlot
    rarity: Rarity
    channel: BonusChannel
    multiplier: float


@dataclass(frozen=True)
class PrestigeBonusDef:
    kind: PrestigeBonus
    name: str
    cost: int
    effect: float  # fractional effect per purchased level


@dataclass(frozen=True)
class AchievementDef:
    key: str
    name: str
    description: str
    reward: int


class CatalogError(KeyError):
    """Raised when looking up a key the catalog does not define."""

    def __init__(self, kind: str, key: object) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"Unknown {kind}: {key!r}")
