"""World - the single owned, mutable simulation state."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from tick_dungeon.catalog import STARTER_TYPE, Catalog
from tick_dungeon.config import DungeonConfig
from tick_dungeon.events import EventLog
from tick_dungeon.ledger import ResourceLedger
from tick_dungeon.types import (
    RESOURCES,
    CreatureId,
    CreatureTypeDef,
    EquipmentDef,
    EquipmentSlot,
    IntruderSpecial,
    IntruderTypeDef,
    PrestigeBonus,
)


@dataclass
class CreatureInstance:
    id: CreatureId
    type: str
    name: str
    health: float
    max_health: float
    attack: float
    rates: dict[str, float] = field(default_factory=dict)
    age: float = 0.0
    evolution_ready: bool = False
    ability_timer: float = 0.0
    rage_bonus: float | None = None
    is_minion: bool = False
    crystal_boosted: bool = False

    def rate(self, resource: str) -> float:
        return self.rates.get(resource, 0.0)


@dataclass
class IntruderInstance:
    id: int
    type: str
    name: str
    health: float
    max_health: float
    attack: float
    loot: dict[str, float] = field(default_factory=dict)
    special: IntruderSpecial | None = None
    is_boss: bool = False
    drops_equipment: bool = False
    spawned_at: float = 0.0


@dataclass
class Dungeon:
    """The dungeon core. ``max_health`` is the base value before heart
    equipment; ``health`` is bounded by the effective max instead.
    """

    health: float
    max_health: int
    level: int = 1


@dataclass
class GlobalBonuses:
    """Major-upgrade multipliers; permanent for the life of one world."""

    synergy_rate: float = 0.1
    crystal: float = 1.0
    combat: float = 1.0
    toxic: float = 1.0


@dataclass
class PrestigeState:
    level: int = 0
    essence: int = 0
    bonuses: dict[PrestigeBonus, int] = field(default_factory=dict)

    def purchased(self, kind: PrestigeBonus) -> int:
        return self.bonuses.get(kind, 0)


@dataclass
class AchievementStats:
    evolutions: int = 0
    intruders_defeated: int = 0
    bosses_defeated: int = 0
    invasions_survived: int = 0
    prestiges: int = 0
    types_reached: set[str] = field(default_factory=set)
    habitats_unlocked: int = 0
    peak_synergy: float = 1.0


@dataclass
class AchievementState:
    unlocked: list[str] = field(default_factory=list)
    stats: AchievementStats = field(default_factory=AchievementStats)

    def has(self, key: str) -> bool:
        return key in self.unlocked


@dataclass
class LootItem:
    id: int
    item: EquipmentDef


@dataclass
class EquipmentState:
    slots: dict[EquipmentSlot, LootItem | None] = field(
        default_factory=lambda: {slot: None for slot in EquipmentSlot}
    )
    pending: list[LootItem] = field(default_factory=list)

    def equipped(self) -> list[LootItem]:
        return [item for item in self.slots.values() if item is not None]


@dataclass
class World:
    """Everything one running dungeon owns.

    Prestige and achievement state survive resets; everything else is
    rebuilt by :func:`new_world`.
    """

    config: DungeonConfig
    catalog: Catalog
    log: EventLog
    ledger: ResourceLedger
    dungeon: Dungeon
    bonuses: GlobalBonuses
    prestige: PrestigeState
    achievements: AchievementState
    equipment: EquipmentState = field(default_factory=EquipmentState)
    creatures: list[CreatureInstance] = field(default_factory=list)
    intruders: list[IntruderInstance] = field(default_factory=list)
    habitats: dict[str, bool] = field(default_factory=dict)
    game_time: float = 0.0
    invasion_timer: float = 60.0
    boss_timer: float = 300.0
    slimes_purchased: int = 0
    _next_id: int = 1

    # -- Identity --

    def allocate_id(self) -> int:
        eid = self._next_id
        self._next_id += 1
        return eid

    # -- Creatures --

    def creature(self, creature_id: CreatureId) -> CreatureInstance | None:
        for creature in self.creatures:
            if creature.id == creature_id:
                return creature
        return None

    def remove_creature(self, creature_id: CreatureId) -> bool:
        before = len(self.creatures)
        self.creatures = [c for c in self.creatures if c.id != creature_id]
        return len(self.creatures) < before

    def count_type(self, type_key: str, exclude: CreatureId | None = None) -> int:
        return sum(
            1 for c in self.creatures if c.type == type_key and c.id != exclude
        )

    def type_def(self, creature: CreatureInstance) -> CreatureTypeDef:
        return self.catalog.creature(creature.type)

    def create_creature(
        self, type_key: str, *, minion: bool = False
    ) -> CreatureInstance:
        """Build a creature from its type definition and add it to the world.

        Minions inherit a fraction of the template's stats and production.
        The prestige monster-health bonus applies to every new creature.
        """
        defn = self.catalog.creature(type_key)
        health_mult = self.prestige_multiplier(PrestigeBonus.MONSTER_HEALTH)
        if minion:
            ratio = self.config.minion_stat_ratio
            health = math.floor(defn.health * ratio * health_mult)
            attack = math.floor(defn.attack * ratio)
            rates = {
                r: defn.rates.get(r, 0.0) * self.config.minion_rate_ratio
                for r in RESOURCES
            }
            name = f"{defn.name} (Minion)"
        else:
            health = math.floor(defn.health * health_mult)
            attack = defn.attack
            rates = {r: defn.rates.get(r, 0.0) for r in RESOURCES}
            name = defn.name
        creature = CreatureInstance(
            id=self.allocate_id(),
            type=type_key,
            name=name,
            health=health,
            max_health=health,
            attack=attack,
            rates=rates,
            is_minion=minion,
        )
        self.creatures.append(creature)
        self.achievements.stats.types_reached.add(type_key)
        return creature

    def apply_type(self, creature: CreatureInstance, type_key: str) -> None:
        """Overwrite a creature's type-dependent fields in place."""
        defn = self.catalog.creature(type_key)
        health = math.floor(
            defn.health * self.prestige_multiplier(PrestigeBonus.MONSTER_HEALTH)
        )
        creature.type = type_key
        creature.name = defn.name
        creature.health = health
        creature.max_health = health
        creature.attack = defn.attack
        creature.rates = {r: defn.rates.get(r, 0.0) for r in RESOURCES}
        creature.age = 0.0
        creature.evolution_ready = False
        creature.ability_timer = 0.0
        creature.rage_bonus = None
        self.achievements.stats.types_reached.add(type_key)

    # -- Intruders --

    def add_intruder(self, defn: IntruderTypeDef) -> IntruderInstance:
        intruder = IntruderInstance(
            id=self.allocate_id(),
            type=defn.name,
            name=defn.name,
            health=defn.health,
            max_health=defn.health,
            attack=defn.attack,
            loot=dict(defn.loot),
            special=defn.special,
            is_boss=defn.is_boss,
            drops_equipment=defn.drops_equipment,
            spawned_at=self.game_time,
        )
        self.intruders.append(intruder)
        return intruder

    def intruder(self, intruder_id: int) -> IntruderInstance | None:
        for intruder in self.intruders:
            if intruder.id == intruder_id:
                return intruder
        return None

    def remove_intruder(self, intruder_id: int) -> None:
        self.intruders = [i for i in self.intruders if i.id != intruder_id]

    # -- Prestige --

    def prestige_multiplier(self, kind: PrestigeBonus) -> float:
        """``1 + effect * purchased_levels`` for one prestige bonus kind."""
        levels = self.prestige.purchased(kind)
        if levels == 0:
            return 1.0
        return 1.0 + self.catalog.prestige_bonus(kind).effect * levels

    def emit(self, type: str, message: str, /, **data: object) -> None:
        self.log.emit(self.game_time, type, message, **data)


def new_world(
    config: DungeonConfig | None = None,
    catalog: Catalog | None = None,
    *,
    log: EventLog | None = None,
    prestige: PrestigeState | None = None,
    achievements: AchievementState | None = None,
) -> World:
    """Construct a fresh world, carrying over permanent progression.

    Starting-resource and dungeon-resilience prestige bonuses are applied
    to the fresh ledger and core.
    """
    config = config if config is not None else DungeonConfig()
    catalog = catalog if catalog is not None else Catalog()
    world = World(
        config=config,
        catalog=catalog,
        log=log if log is not None else EventLog(config.log_message_limit),
        ledger=ResourceLedger(dict(config.seed_resources)),
        dungeon=Dungeon(health=config.dungeon_health, max_health=config.dungeon_health),
        bonuses=GlobalBonuses(synergy_rate=config.synergy_base_rate),
        prestige=prestige if prestige is not None else PrestigeState(),
        achievements=achievements if achievements is not None else AchievementState(),
        habitats={
            key: catalog.habitat(key).unlocked_by_default
            for key in catalog.habitat_keys()
        },
        invasion_timer=config.invasion_base_timer,
        boss_timer=config.boss_interval,
    )

    start_mult = world.prestige_multiplier(PrestigeBonus.STARTING_RESOURCES)
    if start_mult != 1.0:
        world.ledger = ResourceLedger(
            {name: amount * start_mult for name, amount in config.seed_resources.items()}
        )
    resilience = world.prestige_multiplier(PrestigeBonus.DUNGEON_RESILIENCE)
    if resilience != 1.0:
        max_health = math.floor(config.dungeon_health * resilience)
        world.dungeon = Dungeon(health=max_health, max_health=max_health)

    world.create_creature(STARTER_TYPE)
    return world
