"""Multiplier calculations over the current world state.

Every factor here is a pure multiplier, so composition order never changes
a result. Nothing in this module mutates the world.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tick_dungeon.catalog import PACK_TYPE, RESOURCE_CHANNELS
from tick_dungeon.types import BonusChannel, PrestigeBonus

if TYPE_CHECKING:
    from tick_dungeon.world import CreatureInstance, World

PACK_SIZE = 3
PACK_ATTACK = 1.5
CRYSTAL_MARKERS = ("crystal", "gem")


@dataclass(frozen=True)
class Bonus:
    """Four-channel multiplier bundle."""

    biomass: float = 1.0
    mana: float = 1.0
    nutrients: float = 1.0
    attack: float = 1.0

    def scaled(self, factor: float) -> Bonus:
        return Bonus(
            self.biomass * factor,
            self.mana * factor,
            self.nutrients * factor,
            self.attack * factor,
        )

    def resource(self, name: str) -> float:
        return getattr(self, name, 1.0)


def synergy_bonus(world: World, creature: CreatureInstance) -> Bonus:
    """Synergy and pack multipliers for one creature.

    Each synergy partner type with living instances (other than the
    creature itself) multiplies all channels by ``1 + count * rate``.
    """
    defn = world.type_def(creature)
    bonus = Bonus()
    rate = world.bonuses.synergy_rate
    for partner in defn.synergy:
        count = world.count_type(partner, exclude=creature.id)
        if count > 0:
            bonus = bonus.scaled(1 + count * rate)

    if creature.type == PACK_TYPE and world.count_type(PACK_TYPE) >= PACK_SIZE:
        bonus = Bonus(bonus.biomass, bonus.mana, bonus.nutrients, bonus.attack * PACK_ATTACK)
    return bonus


def is_crystal(type_key: str) -> bool:
    return any(marker in type_key for marker in CRYSTAL_MARKERS)


def is_poison(type_key: str) -> bool:
    return "poison" in type_key


def dungeon_level_bonus(world: World) -> float:
    return 1 + (world.dungeon.level - 1) * world.config.dungeon_level_bonus


def equipment_multiplier(world: World, channel: BonusChannel) -> float:
    """Product of every equipped item's multiplier on *channel*."""
    result = 1.0
    for loot in world.equipment.equipped():
        if loot.item.channel is channel:
            result *= loot.item.multiplier
    return result


def production_rates(world: World, creature: CreatureInstance) -> dict[str, float]:
    """Per-second output of one creature with every multiplier applied."""
    synergy = synergy_bonus(world, creature)
    common = dungeon_level_bonus(world)
    if is_crystal(creature.type):
        common *= world.bonuses.crystal
    common *= world.prestige_multiplier(PrestigeBonus.RESOURCE_GENERATION)

    rates: dict[str, float] = {}
    for name, base in creature.rates.items():
        if base <= 0:
            continue
        channel = RESOURCE_CHANNELS.get(name)
        equip = equipment_multiplier(world, channel) if channel is not None else 1.0
        rates[name] = base * synergy.resource(name) * common * equip
    return rates


def creature_attack(world: World, creature: CreatureInstance) -> float:
    """Effective combat attack of one creature."""
    attack = creature.attack * synergy_bonus(world, creature).attack
    attack *= world.bonuses.combat
    attack *= world.prestige_multiplier(PrestigeBonus.MONSTER_ATTACK)
    attack *= world.prestige_multiplier(PrestigeBonus.SYNERGY_BOOST)
    if creature.rage_bonus is not None:
        attack *= creature.rage_bonus
    return attack


def total_attack(world: World) -> float:
    return sum(creature_attack(world, c) for c in world.creatures)


def effective_max_health(world: World) -> int:
    """Core max health including dungeon-health equipment."""
    mult = equipment_multiplier(world, BonusChannel.DUNGEON_HEALTH)
    return math.floor(world.dungeon.max_health * mult)


def peak_synergy(world: World) -> float:
    """Largest synergy multiplier held by any living creature."""
    best = 1.0
    for creature in world.creatures:
        best = max(best, synergy_bonus(world, creature).biomass)
    return best
